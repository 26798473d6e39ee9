"""Command: run an interaction with options from the command line."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import click

from interactor.commands._target import InteractionTarget, parse_option, target_name
from interactor.errors import UsageError
from interactor.output.result import CommandResult

if TYPE_CHECKING:
    from interactor.base import Interaction
    from interactor.commands._context import AppContext

logger = logging.getLogger(__name__)


@click.command()
@click.argument("target", type=InteractionTarget())
@click.option(
    "-o",
    "--option",
    "raw_options",
    multiple=True,
    metavar="KEY=VALUE",
    help="Input option; VALUE is JSON-decoded when possible. Repeatable.",
)
@click.pass_obj
def run(app: AppContext, target: type[Interaction], raw_options: tuple[str, ...]) -> None:
    """Run TARGET (module:Class) and report its result or validation errors."""
    options = dict(parse_option(raw) for raw in raw_options)
    name = target_name(target)
    try:
        interaction = target.run(options)
    except UsageError as exc:
        app.emit(CommandResult.failure("run", "USAGE_ERROR", str(exc), interaction=name))
        return

    if not interaction.executed:
        outcome = interaction.outcome
        logger.debug("Run of %s rejected with %d error(s)", name, len(outcome.errors))
        app.emit(
            CommandResult.failure(
                "run",
                "INVALID",
                f"{target.__name__} is invalid",
                interaction=name,
                errors=outcome.as_dict(),
            )
        )
        return

    app.emit(
        CommandResult(
            ok=True,
            op="run",
            data={
                "interaction": name,
                "attributes": interaction.attributes,
                "result": interaction.result,
            },
        )
    )
