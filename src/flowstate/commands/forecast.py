"""Commands: the allocation forecast and the project summary."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from flowstate.commands._base import FlowCommand

if TYPE_CHECKING:
    from flowstate.commands._context import AppContext


@click.command(
    cls=FlowCommand,
    examples="""\
  flowstate forecast
  flowstate --today 2026-03-02 forecast
  flowstate -v forecast     # the whole window, weekends included
  flowstate --json forecast""",
)
@click.pass_obj
def forecast(app: AppContext) -> None:
    """Show how remaining work spreads over the coming days."""
    app.emit(app.project.forecast())


@click.command(
    cls=FlowCommand,
    examples="""\
  flowstate show
  flowstate -q show         # task ids only""",
)
@click.pass_obj
def show(app: AppContext) -> None:
    """Summarize teams, tasks, filters and milestones."""
    app.emit(app.project.summary())
