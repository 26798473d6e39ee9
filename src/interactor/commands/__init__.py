"""Subcommand modules for the interactor CLI.

Provides register_commands() which uses deferred imports to keep
``interactor --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all commands on the root CLI group."""
    from interactor.commands.inspect_cmd import inspect_cmd
    from interactor.commands.run import run

    cli.add_command(inspect_cmd)
    cli.add_command(run)
