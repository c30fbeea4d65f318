"""Command group: tasks, assignment, priority and watchers."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from flowstate.commands._base import DURATION, FlowGroup
from flowstate.domain.commands import (
    AddWatcher,
    AssignTask,
    ChangeTaskPriority,
    CreateTask,
    DeleteTask,
    DeprioritizeTask,
    PrioritizeTask,
    RemoveWatcher,
    UnassignTask,
    UpdateTask,
)
from flowstate.domain.duration import Duration

if TYPE_CHECKING:
    from flowstate.commands._context import AppContext

_TASK_EXAMPLES = """\
  flowstate task create --ticket PRJ-12 --title "Login page" --duration 2.5
  flowstate task assign 1 alice
  flowstate task prioritize 3 --top
  flowstate task priority 3 -- -1"""


@click.group(cls=FlowGroup, examples=_TASK_EXAMPLES)
def task() -> None:
    """Create tasks and arrange resource work queues."""


@task.command(
    examples="""\
  flowstate task create --title "Login page" --duration 2.5
  flowstate task create --id 40 --ticket PRJ-40 --label ui --label urgent"""
)
@click.option("--id", "task_id", type=click.IntRange(min=1), default=None, help="Task id (default: next free).")
@click.option("--ticket", default="", help="External ticket reference.")
@click.option("--title", default="", help="Task title.")
@click.option("--duration", type=DURATION, default="0", help="Estimated work in days, e.g. 2.5.")
@click.option("--label", "labels", multiple=True, help="Existing label name (repeatable).")
@click.pass_obj
def create(
    app: AppContext,
    task_id: int | None,
    ticket: str,
    title: str,
    duration: Duration,
    labels: tuple[str, ...],
) -> None:
    """Create a task (or overwrite the content of an existing one)."""
    if task_id is None:
        task_id = app.project.next_task_id()
    app.invoke(CreateTask(task_id=task_id, ticket=ticket, title=title, duration=duration, labels=labels))


@task.command(examples='  flowstate task update 3 --duration 4 --title "Login and signup"')
@click.argument("task_id", type=int)
@click.option("--ticket", default=None, help="New ticket reference.")
@click.option("--title", default=None, help="New title.")
@click.option("--duration", type=DURATION, default=None, help="New estimate in days.")
@click.option("--label", "labels", multiple=True, help="Replace labels (repeatable).")
@click.pass_obj
def update(
    app: AppContext,
    task_id: int,
    ticket: str | None,
    title: str | None,
    duration: Duration | None,
    labels: tuple[str, ...],
) -> None:
    """Change a task's content; options left out keep their current value."""
    model = app.project.model
    current = model.tasks.get(task_id)
    if current is not None:
        ticket = current.ticket if ticket is None else ticket
        title = current.title if title is None else title
        duration = current.duration if duration is None else duration
        labels = labels or model.label_names(current.label_ids)
    app.invoke(
        UpdateTask(
            task_id=task_id,
            ticket=ticket or "",
            title=title or "",
            duration=duration or Duration(),
            labels=labels,
        )
    )


@task.command(examples="  flowstate task delete 3")
@click.argument("task_id", type=int)
@click.pass_obj
def delete(app: AppContext, task_id: int) -> None:
    """Delete a task that has no worklogs."""
    app.invoke(DeleteTask(task_id=task_id))


@task.command(examples="  flowstate task assign 3 alice")
@click.argument("task_id", type=int)
@click.argument("resource_name")
@click.pass_obj
def assign(app: AppContext, task_id: int, resource_name: str) -> None:
    """Put a task at the top of a resource's queue (reassigning if needed)."""
    app.invoke(AssignTask(task_id=task_id, resource_name=resource_name))


@task.command(examples="  flowstate task unassign 3")
@click.argument("task_id", type=int)
@click.pass_obj
def unassign(app: AppContext, task_id: int) -> None:
    """Remove a task from its assignee's queue."""
    app.invoke(UnassignTask(task_id=task_id))


@task.command(examples="  flowstate task priority 3 2\n  flowstate task priority 3 -- -1")
@click.argument("task_id", type=int)
@click.argument("delta", type=int)
@click.pass_obj
def priority(app: AppContext, task_id: int, delta: int) -> None:
    """Move a task DELTA places later (negative: earlier) in its queue."""
    app.invoke(ChangeTaskPriority(task_id=task_id, delta=delta))


@task.command(examples="  flowstate task prioritize 3\n  flowstate task prioritize 3 --top")
@click.argument("task_id", type=int)
@click.option("--top", "to_top", is_flag=True, help="Move to the front of the queue.")
@click.pass_obj
def prioritize(app: AppContext, task_id: int, to_top: bool) -> None:
    """Move a task one place earlier in its queue."""
    app.invoke(PrioritizeTask(task_id=task_id, to_top=to_top))


@task.command(examples="  flowstate task deprioritize 3 --bottom")
@click.argument("task_id", type=int)
@click.option("--bottom", "to_bottom", is_flag=True, help="Move to the back of the queue.")
@click.pass_obj
def deprioritize(app: AppContext, task_id: int, to_bottom: bool) -> None:
    """Move a task one place later in its queue."""
    app.invoke(DeprioritizeTask(task_id=task_id, to_bottom=to_bottom))


@task.command(examples="  flowstate task watch 3 bob")
@click.argument("task_id", type=int)
@click.argument("resource_name")
@click.pass_obj
def watch(app: AppContext, task_id: int, resource_name: str) -> None:
    """Add a resource to a task's watchers."""
    app.invoke(AddWatcher(task_id=task_id, resource_name=resource_name))


@task.command(examples="  flowstate task unwatch 3 bob")
@click.argument("task_id", type=int)
@click.argument("resource_name")
@click.pass_obj
def unwatch(app: AppContext, task_id: int, resource_name: str) -> None:
    """Remove a resource from a task's watchers."""
    app.invoke(RemoveWatcher(task_id=task_id, resource_name=resource_name))
