"""AppContext: shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``.  Provides lazy Project initialization and centralized
result emission (stdout/stderr routing + exit codes).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from flowstate.config.logging import configure_logging
from flowstate.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from flowstate.config.settings import FlowSettings
    from flowstate.domain.commands import BaseCommand
    from flowstate.infrastructure.store import CommandLogStore
    from flowstate.services.project import Project
    from flowstate.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    The project is opened lazily on first use so ``--help`` and
    ``--examples`` never touch the database.
    """

    def __init__(self, settings: FlowSettings) -> None:
        self.settings = settings
        self._store: CommandLogStore | None = None
        self._project: Project | None = None

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    @property
    def store(self) -> CommandLogStore:
        if self._store is None:
            from flowstate.infrastructure.store import CommandLogStore

            self._store = CommandLogStore.open(self.settings.database_path)
        return self._store

    @property
    def project(self) -> Project:
        """The project, replayed from the stored log on first access."""
        if self._project is None:
            from flowstate.services.project import Project

            forecast = self.settings.forecast
            self._project = Project.open(
                self.store,
                date_offset=forecast.date_offset,
                margin_days=forecast.margin_days,
                today=self.settings.today,
            )
        return self._project

    def invoke(self, command: BaseCommand) -> None:
        """Send one command through the project and emit the outcome."""
        self.emit(self.project.invoke(command))

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success (``result.ok``): writes to stdout, returns normally.
          Warnings are emitted to stderr so they don't pollute piped output.
        * Failure: writes to stderr, exits with code 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)

    def close(self) -> None:
        if self._store is not None:
            self._store.close()
            self._store = None
