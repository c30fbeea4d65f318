"""Command: resource absences."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

import click

from flowstate.commands._base import DURATION, FlowGroup
from flowstate.domain.commands import SetAbsence
from flowstate.domain.duration import Duration

if TYPE_CHECKING:
    from flowstate.commands._context import AppContext


@click.group(cls=FlowGroup, examples="  flowstate absence set alice 2026-03-09 5")
def absence() -> None:
    """Record when resources are unavailable."""


@absence.command(
    "set",
    examples="""\
  flowstate absence set alice 2026-03-09 5
  flowstate absence set alice 2026-03-13 0.5
  flowstate absence set alice 2026-03-09 0       # remove""",
)
@click.argument("resource_name")
@click.argument("start", type=click.DateTime(formats=["%Y-%m-%d"]))
@click.argument("duration", type=DURATION)
@click.pass_obj
def set_absence(app: AppContext, resource_name: str, start: datetime, duration: Duration) -> None:
    """Set an absence of DURATION weekdays from START; 0 removes it.

    Absences that overlap the new one are replaced.
    """
    app.invoke(SetAbsence(resource_name=resource_name, start_date=start.date(), duration=duration))
