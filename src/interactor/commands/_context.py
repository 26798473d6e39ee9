"""AppContext: shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``.  Installs the CLI's settings as the process-wide
settings and centralizes result emission (stdout/stderr routing + exit codes).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from interactor.output.formatters import format_result

if TYPE_CHECKING:
    from interactor.config.settings import InteractorSettings
    from interactor.output.result import CommandResult


class AppContext:
    """Shared context flowing through Click's command hierarchy."""

    def __init__(self, settings: InteractorSettings) -> None:
        self.settings = settings

        from interactor.config.logging import configure_logging
        from interactor.config.settings import configure

        configure(settings)
        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    def emit(self, result: CommandResult) -> None:
        """Format and output a CommandResult with correct exit semantics.

        * Success (``result.ok``): writes to stdout, returns normally.
        * Failure: writes to stderr, exits with code 1.
        """
        output = format_result(result, json_output=self.settings.json_output)
        if result.ok:
            click.echo(output)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
