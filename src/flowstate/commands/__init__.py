"""Subcommand modules for flowstate.

Provides register_commands() which uses deferred imports to keep
``flowstate --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all command groups and standalone commands on the root CLI group.

    8 groups (have subcommands) + 5 standalone commands.
    """
    # --- Groups ---
    from flowstate.commands.absence import absence
    from flowstate.commands.filter_cmd import filter_cmd
    from flowstate.commands.label import label
    from flowstate.commands.milestone import milestone
    from flowstate.commands.resource import resource
    from flowstate.commands.task import task
    from flowstate.commands.team import team
    from flowstate.commands.worklog import worklog

    cli.add_command(team)
    cli.add_command(resource)
    cli.add_command(task)
    cli.add_command(label)
    cli.add_command(filter_cmd)
    cli.add_command(worklog)
    cli.add_command(absence)
    cli.add_command(milestone)

    # --- Standalone commands ---
    from flowstate.commands.forecast import forecast, show
    from flowstate.commands.history import history, redo, undo

    cli.add_command(undo)
    cli.add_command(redo)
    cli.add_command(history)
    cli.add_command(forecast)
    cli.add_command(show)
