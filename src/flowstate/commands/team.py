"""Command group: teams."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from flowstate.commands._base import FlowGroup
from flowstate.domain.commands import CreateTeam, DeleteTeam, RenameTeam

if TYPE_CHECKING:
    from flowstate.commands._context import AppContext


@click.group(
    cls=FlowGroup,
    examples="""\
  flowstate team create Backend
  flowstate team rename Backend Platform
  flowstate team delete Platform""",
)
def team() -> None:
    """Create, rename and delete teams."""


@team.command(examples="  flowstate team create Backend")
@click.argument("name")
@click.pass_obj
def create(app: AppContext, name: str) -> None:
    """Create a team called NAME."""
    app.invoke(CreateTeam(name=name))


@team.command(examples="  flowstate team rename Backend Platform")
@click.argument("old_name")
@click.argument("new_name")
@click.pass_obj
def rename(app: AppContext, old_name: str, new_name: str) -> None:
    """Rename a team."""
    app.invoke(RenameTeam(old_name=old_name, new_name=new_name))


@team.command(examples="  flowstate team delete Platform")
@click.argument("name")
@click.pass_obj
def delete(app: AppContext, name: str) -> None:
    """Delete a team. Its members keep pointing at the deleted team."""
    app.invoke(DeleteTeam(name=name))
