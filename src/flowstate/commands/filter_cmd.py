"""Command group: saved label filters."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from flowstate.commands._base import FlowGroup
from flowstate.domain.commands import CreateModifyFilter, DeleteFilter, RenameFilter

if TYPE_CHECKING:
    from flowstate.commands._context import AppContext


@click.group(
    "filter",
    cls=FlowGroup,
    examples="""\
  flowstate filter set hot --label urgent --label ui --favorite
  flowstate filter rename hot on-fire""",
)
def filter_cmd() -> None:
    """Create, change and delete saved filters."""


@filter_cmd.command("set", examples="  flowstate filter set hot --label urgent --favorite")
@click.argument("name")
@click.option("--label", "labels", multiple=True, help="Label name (repeatable).")
@click.option("--favorite/--no-favorite", "is_favorite", default=False, help="Pin the filter.")
@click.pass_obj
def set_filter(app: AppContext, name: str, labels: tuple[str, ...], is_favorite: bool) -> None:
    """Create a filter, or replace the labels of an existing one."""
    app.invoke(CreateModifyFilter(name=name, labels=labels, is_favorite=is_favorite))


@filter_cmd.command(examples="  flowstate filter rename hot on-fire")
@click.argument("old_name")
@click.argument("new_name")
@click.pass_obj
def rename(app: AppContext, old_name: str, new_name: str) -> None:
    """Rename a filter."""
    app.invoke(RenameFilter(old_name=old_name, new_name=new_name))


@filter_cmd.command(examples="  flowstate filter delete hot")
@click.argument("name")
@click.pass_obj
def delete(app: AppContext, name: str) -> None:
    """Delete a filter."""
    app.invoke(DeleteFilter(name=name))
