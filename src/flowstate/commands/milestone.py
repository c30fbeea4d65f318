"""Command group: milestones shown on the forecast."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

import click

from flowstate.commands._base import FlowGroup
from flowstate.domain.commands import AddMilestone, RemoveMilestone

if TYPE_CHECKING:
    from flowstate.commands._context import AppContext


@click.group(cls=FlowGroup, examples='  flowstate milestone add "Beta" 2026-04-01')
def milestone() -> None:
    """Add and remove dated milestones."""


@milestone.command(examples='  flowstate milestone add "Beta" 2026-04-01')
@click.argument("title")
@click.argument("day", type=click.DateTime(formats=["%Y-%m-%d"]))
@click.pass_obj
def add(app: AppContext, title: str, day: datetime) -> None:
    """Add a milestone on DAY."""
    app.invoke(AddMilestone(title=title, date=day.date()))


@milestone.command(examples='  flowstate milestone remove "Beta"')
@click.argument("title")
@click.pass_obj
def remove(app: AppContext, title: str) -> None:
    """Remove the first milestone called TITLE."""
    app.invoke(RemoveMilestone(title=title))
