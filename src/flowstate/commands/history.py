"""Commands: undo, redo and the command history."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from flowstate.commands._base import FlowCommand

if TYPE_CHECKING:
    from flowstate.commands._context import AppContext


@click.command(
    cls=FlowCommand,
    examples="""\
  flowstate undo
  flowstate --json undo""",
)
@click.pass_obj
def undo(app: AppContext) -> None:
    """Revert the most recent command."""
    app.emit(app.project.undo())


@click.command(cls=FlowCommand, examples="  flowstate redo")
@click.pass_obj
def redo(app: AppContext) -> None:
    """Re-apply the most recently undone command."""
    app.emit(app.project.redo())


@click.command(
    cls=FlowCommand,
    examples="""\
  flowstate history
  flowstate -v history      # with timestamps""",
)
@click.pass_obj
def history(app: AppContext) -> None:
    """List recorded commands, applied and undone."""
    app.emit(app.project.history())
