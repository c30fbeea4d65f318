"""Root CLI group for flowstate with global flags and command registration."""

from __future__ import annotations

from datetime import datetime

import click

from flowstate import __version__
from flowstate.commands import register_commands
from flowstate.commands._context import AppContext
from flowstate.config.settings import FlowSettings


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="flowstate")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-q", "--quiet", is_flag=True, help="Minimal output.")
@click.option("-v", "--verbose", is_flag=True, help="Detailed output with debug logging.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.option(
    "--today",
    type=click.DateTime(formats=["%Y-%m-%d"]),
    default=None,
    help="Simulate the forecast as if today were this date.",
)
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
    today: datetime | None,
) -> None:
    """flowstate: project planning with undoable commands and a work forecast."""
    ctx.ensure_object(dict)
    settings = FlowSettings.from_cli(
        config_path=config_path,
        # Unset flags stay None so env vars and flowstate.toml still apply.
        json_output=json_output or None,
        quiet=quiet or None,
        verbose=verbose or None,
        log_json=log_json or None,
        today=today.date() if today else None,
    )
    app = AppContext(settings)
    ctx.obj = app
    ctx.call_on_close(app.close)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
