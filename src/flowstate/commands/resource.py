"""Command group: resources (the people work is allocated to)."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from flowstate.commands._base import FlowGroup
from flowstate.domain.commands import CreateResource, DeleteResource, RenameResource, SwitchTeam

if TYPE_CHECKING:
    from flowstate.commands._context import AppContext


@click.group(
    cls=FlowGroup,
    examples="""\
  flowstate resource create alice --team Backend
  flowstate resource switch-team alice Frontend
  flowstate resource delete alice""",
)
def resource() -> None:
    """Manage resources and their team membership."""


@resource.command(examples="  flowstate resource create alice --team Backend")
@click.argument("name")
@click.option("--team", "team_name", required=True, help="Team the resource joins.")
@click.pass_obj
def create(app: AppContext, name: str, team_name: str) -> None:
    """Create a resource in an existing team."""
    app.invoke(CreateResource(name=name, team_name=team_name))


@resource.command(examples="  flowstate resource rename alice alicia")
@click.argument("old_name")
@click.argument("new_name")
@click.pass_obj
def rename(app: AppContext, old_name: str, new_name: str) -> None:
    """Rename a resource."""
    app.invoke(RenameResource(old_name=old_name, new_name=new_name))


@resource.command("switch-team", examples="  flowstate resource switch-team alice Frontend")
@click.argument("name")
@click.argument("team_name")
@click.pass_obj
def switch_team(app: AppContext, name: str, team_name: str) -> None:
    """Move a resource to another team."""
    app.invoke(SwitchTeam(resource_name=name, team_name=team_name))


@resource.command(examples="  flowstate resource delete alice")
@click.argument("name")
@click.pass_obj
def delete(app: AppContext, name: str) -> None:
    """Delete a resource with no assigned tasks, watches or worklogs."""
    app.invoke(DeleteResource(name=name))
