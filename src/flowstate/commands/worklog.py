"""Command: record work actually done."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

import click

from flowstate.commands._base import FlowGroup
from flowstate.domain.commands import SetWorklog

if TYPE_CHECKING:
    from flowstate.commands._context import AppContext


@click.group(cls=FlowGroup, examples="  flowstate worklog set 3 alice 2026-03-02 50")
def worklog() -> None:
    """Log work per task, resource and day."""


@worklog.command(
    "set",
    examples="""\
  flowstate worklog set 3 alice 2026-03-02 100
  flowstate worklog set 3 alice 2026-03-02 0     # clear the entry""",
)
@click.argument("task_id", type=int)
@click.argument("resource_name")
@click.argument("day", type=click.DateTime(formats=["%Y-%m-%d"]))
@click.argument("fraction", type=click.IntRange(0, 100))
@click.pass_obj
def set_worklog(app: AppContext, task_id: int, resource_name: str, day: datetime, fraction: int) -> None:
    """Set hundredths of a day logged on DAY; 0 removes the entry."""
    app.invoke(SetWorklog(task_id=task_id, resource_name=resource_name, date=day.date(), fraction=fraction))
