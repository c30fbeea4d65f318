"""Command group: labels and task tagging."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from flowstate.commands._base import FlowGroup
from flowstate.domain.commands import AddLabelToTask, CreateLabel, DeleteLabel, RemoveLabelFromTask, RenameLabel

if TYPE_CHECKING:
    from flowstate.commands._context import AppContext


@click.group(
    cls=FlowGroup,
    examples="""\
  flowstate label create urgent
  flowstate label add 3 urgent
  flowstate label remove 3 urgent""",
)
def label() -> None:
    """Manage labels and attach them to tasks."""


@label.command(examples="  flowstate label create urgent")
@click.argument("name")
@click.pass_obj
def create(app: AppContext, name: str) -> None:
    """Create a label."""
    app.invoke(CreateLabel(name=name))


@label.command(examples="  flowstate label rename urgent p0")
@click.argument("old_name")
@click.argument("new_name")
@click.pass_obj
def rename(app: AppContext, old_name: str, new_name: str) -> None:
    """Rename a label."""
    app.invoke(RenameLabel(old_name=old_name, new_name=new_name))


@label.command(examples="  flowstate label delete urgent")
@click.argument("name")
@click.pass_obj
def delete(app: AppContext, name: str) -> None:
    """Delete a label no task or filter uses."""
    app.invoke(DeleteLabel(name=name))


@label.command(examples="  flowstate label add 3 urgent")
@click.argument("task_id", type=int)
@click.argument("label_name")
@click.pass_obj
def add(app: AppContext, task_id: int, label_name: str) -> None:
    """Attach a label to a task."""
    app.invoke(AddLabelToTask(task_id=task_id, label_name=label_name))


@label.command(examples="  flowstate label remove 3 urgent")
@click.argument("task_id", type=int)
@click.argument("label_name")
@click.pass_obj
def remove(app: AppContext, task_id: int, label_name: str) -> None:
    """Detach a label from a task."""
    app.invoke(RemoveLabelFromTask(task_id=task_id, label_name=label_name))
