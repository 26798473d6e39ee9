"""Command: list an interaction's declared attributes."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from interactor.commands._target import InteractionTarget, target_name
from interactor.output.result import CommandResult

if TYPE_CHECKING:
    from interactor.base import Interaction
    from interactor.commands._context import AppContext


@click.command("inspect")
@click.argument("target", type=InteractionTarget())
@click.pass_obj
def inspect_cmd(app: AppContext, target: type[Interaction]) -> None:
    """Show the attributes TARGET (module:Class) declares."""
    app.emit(
        CommandResult(
            ok=True,
            op="inspect",
            data={
                "interaction": target_name(target),
                "attributes": [d.describe() for d in target.declarations()],
            },
        )
    )
