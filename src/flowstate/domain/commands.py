"""The closed set of commands that mutate a project.

Commands are frozen pydantic models tagged by ``kind``; :data:`Command` is
the discriminated union over all of them, so a persisted log round-trips
through :data:`COMMAND_ADAPTER` without any hand-written codec.

Entities are addressed by name, tasks by their caller-assigned id, so a
command stays replayable after ids are reassigned on reload.
"""

from __future__ import annotations

import datetime as dt
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field, TypeAdapter

from flowstate.domain.duration import Duration


def _utcnow() -> dt.datetime:
    return dt.datetime.now(dt.UTC)


class BaseCommand(BaseModel):
    """Fields shared by every command."""

    model_config = {"frozen": True}

    timestamp: dt.datetime = Field(default_factory=_utcnow)


class NoOp(BaseCommand):
    kind: Literal["no_op"] = "no_op"


# --- Teams ---


class CreateTeam(BaseCommand):
    kind: Literal["create_team"] = "create_team"
    name: str
    id: int | None = None


class RenameTeam(BaseCommand):
    kind: Literal["rename_team"] = "rename_team"
    old_name: str
    new_name: str


class DeleteTeam(BaseCommand):
    kind: Literal["delete_team"] = "delete_team"
    name: str


# --- Resources ---


class CreateResource(BaseCommand):
    kind: Literal["create_resource"] = "create_resource"
    name: str
    team_name: str
    id: int | None = None


class RenameResource(BaseCommand):
    kind: Literal["rename_resource"] = "rename_resource"
    old_name: str
    new_name: str


class SwitchTeam(BaseCommand):
    kind: Literal["switch_team"] = "switch_team"
    resource_name: str
    team_name: str


class DeleteResource(BaseCommand):
    kind: Literal["delete_resource"] = "delete_resource"
    name: str


# --- Tasks ---


class CreateTask(BaseCommand):
    kind: Literal["create_task"] = "create_task"
    task_id: int = Field(ge=1)
    ticket: str = ""
    title: str = ""
    duration: Duration = Field(default_factory=Duration)
    labels: tuple[str, ...] = ()


class UpdateTask(BaseCommand):
    kind: Literal["update_task"] = "update_task"
    task_id: int = Field(ge=1)
    ticket: str = ""
    title: str = ""
    duration: Duration = Field(default_factory=Duration)
    labels: tuple[str, ...] = ()


class DeleteTask(BaseCommand):
    kind: Literal["delete_task"] = "delete_task"
    task_id: int


class AssignTask(BaseCommand):
    kind: Literal["assign_task"] = "assign_task"
    task_id: int
    resource_name: str


class UnassignTask(BaseCommand):
    kind: Literal["unassign_task"] = "unassign_task"
    task_id: int


class ChangeTaskPriority(BaseCommand):
    """Move an assigned task *delta* slots in its assignee's queue (negative = up)."""

    kind: Literal["change_task_priority"] = "change_task_priority"
    task_id: int
    delta: int


class PrioritizeTask(BaseCommand):
    kind: Literal["prioritize_task"] = "prioritize_task"
    task_id: int
    to_top: bool = False


class DeprioritizeTask(BaseCommand):
    kind: Literal["deprioritize_task"] = "deprioritize_task"
    task_id: int
    to_bottom: bool = False


class AddWatcher(BaseCommand):
    kind: Literal["add_watcher"] = "add_watcher"
    task_id: int
    resource_name: str


class RemoveWatcher(BaseCommand):
    kind: Literal["remove_watcher"] = "remove_watcher"
    task_id: int
    resource_name: str


# --- Labels & filters ---


class CreateLabel(BaseCommand):
    kind: Literal["create_label"] = "create_label"
    name: str
    id: int | None = None


class RenameLabel(BaseCommand):
    kind: Literal["rename_label"] = "rename_label"
    old_name: str
    new_name: str
    id: int | None = None


class DeleteLabel(BaseCommand):
    kind: Literal["delete_label"] = "delete_label"
    name: str


class AddLabelToTask(BaseCommand):
    kind: Literal["add_label_to_task"] = "add_label_to_task"
    task_id: int
    label_name: str


class RemoveLabelFromTask(BaseCommand):
    kind: Literal["remove_label_from_task"] = "remove_label_from_task"
    task_id: int
    label_name: str


class CreateModifyFilter(BaseCommand):
    """Create a filter, or overwrite the one that already has this name."""

    kind: Literal["create_modify_filter"] = "create_modify_filter"
    name: str
    labels: tuple[str, ...] = ()
    is_favorite: bool = False
    id: int | None = None


class RenameFilter(BaseCommand):
    kind: Literal["rename_filter"] = "rename_filter"
    old_name: str
    new_name: str


class DeleteFilter(BaseCommand):
    kind: Literal["delete_filter"] = "delete_filter"
    name: str


# --- Time tracking & calendar ---


class SetWorklog(BaseCommand):
    """Record (or clear, with ``fraction=0``) work logged on one day."""

    kind: Literal["set_worklog"] = "set_worklog"
    task_id: int
    date: dt.date
    resource_name: str
    fraction: int = Field(ge=0, le=100)


class SetAbsence(BaseCommand):
    """Replace any absences intersecting the new one; zero duration only clears."""

    kind: Literal["set_absence"] = "set_absence"
    resource_name: str
    start_date: dt.date
    duration: Duration = Field(default_factory=Duration)


class AddMilestone(BaseCommand):
    kind: Literal["add_milestone"] = "add_milestone"
    title: str
    date: dt.date
    index: int | None = None


class RemoveMilestone(BaseCommand):
    kind: Literal["remove_milestone"] = "remove_milestone"
    title: str
    index: int | None = None


class CompoundCommand(BaseCommand):
    """Apply several commands as one all-or-nothing step."""

    kind: Literal["compound"] = "compound"
    commands: tuple[Command, ...] = ()


Command = Annotated[
    Union[
        NoOp,
        CreateTeam,
        RenameTeam,
        DeleteTeam,
        CreateResource,
        RenameResource,
        SwitchTeam,
        DeleteResource,
        CreateTask,
        UpdateTask,
        DeleteTask,
        AssignTask,
        UnassignTask,
        ChangeTaskPriority,
        PrioritizeTask,
        DeprioritizeTask,
        AddWatcher,
        RemoveWatcher,
        CreateLabel,
        RenameLabel,
        DeleteLabel,
        AddLabelToTask,
        RemoveLabelFromTask,
        CreateModifyFilter,
        RenameFilter,
        DeleteFilter,
        SetWorklog,
        SetAbsence,
        AddMilestone,
        RemoveMilestone,
        CompoundCommand,
    ],
    Field(discriminator="kind"),
]

CompoundCommand.model_rebuild()

COMMAND_ADAPTER: TypeAdapter[Command] = TypeAdapter(Command)


def dump_command(command: BaseCommand) -> str:
    """Serialize a command to JSON."""
    return COMMAND_ADAPTER.dump_json(command).decode("utf-8")  # type: ignore[arg-type]


def load_command(raw: str | bytes) -> BaseCommand:
    """Parse a command previously produced by :func:`dump_command`."""
    return COMMAND_ADAPTER.validate_json(raw)
