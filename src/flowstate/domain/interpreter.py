"""Command interpreter: the single mutation path for a project.

:func:`apply_command` validates one command against a :class:`DomainModel`,
mutates the model in place and returns the command that exactly reverses
the change. The same function serves do, undo and redo.

INVARIANT: a handler finishes all validation before its first mutation, so
a raised :class:`CommandError` always leaves the model untouched.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from typing import Any, TypeVar

from flowstate.domain.calendar import absence_span, spans_intersect
from flowstate.domain.commands import (
    AddLabelToTask,
    AddMilestone,
    AddWatcher,
    AssignTask,
    BaseCommand,
    ChangeTaskPriority,
    CompoundCommand,
    CreateLabel,
    CreateModifyFilter,
    CreateResource,
    CreateTask,
    CreateTeam,
    DeleteFilter,
    DeleteLabel,
    DeleteResource,
    DeleteTask,
    DeleteTeam,
    DeprioritizeTask,
    NoOp,
    PrioritizeTask,
    RemoveLabelFromTask,
    RemoveMilestone,
    RemoveWatcher,
    RenameFilter,
    RenameLabel,
    RenameResource,
    RenameTeam,
    SetAbsence,
    SetWorklog,
    SwitchTeam,
    UnassignTask,
    UpdateTask,
)
from flowstate.domain.duration import ZERO
from flowstate.domain.errors import (
    AlreadyExistsError,
    CommandError,
    CompoundCommandError,
    InvalidStateError,
    NotFoundError,
)
from flowstate.domain.model import (
    Absence,
    DomainModel,
    Filter,
    Label,
    LabelId,
    Milestone,
    Resource,
    Task,
    Team,
)

logger = logging.getLogger(__name__)

C = TypeVar("C", bound=BaseCommand)
_Handler = Callable[[DomainModel, Any], BaseCommand]

_HANDLERS: dict[type[BaseCommand], _Handler] = {}


def _handles(command_cls: type[C]) -> Callable[[Callable[[DomainModel, C], BaseCommand]], Any]:
    def register(fn: Callable[[DomainModel, C], BaseCommand]) -> Callable[[DomainModel, C], BaseCommand]:
        _HANDLERS[command_cls] = fn
        return fn

    return register


def apply_command(model: DomainModel, command: BaseCommand) -> BaseCommand:
    """Apply *command* to *model* and return its inverse.

    Raises:
        CommandError: The command's preconditions do not hold. The model
            is unchanged.
    """
    handler = _HANDLERS.get(type(command))
    if handler is None:
        msg = f"Unsupported command type: {type(command).__name__}"
        raise InvalidStateError(msg)
    return handler(model, command)


def record_command(model: DomainModel, command: BaseCommand) -> tuple[BaseCommand, BaseCommand]:
    """Apply *command* and return ``(inverse, redo)``.

    *redo* is *command* with every id the model allocated for it written
    in, so applying it again after an undo recreates the same ids.
    """
    if isinstance(command, CompoundCommand):
        return _run_compound(model, command)
    pinned = _pin_id(model, command)
    return apply_command(model, pinned), pinned


# ---------------------------------------------------------------------------
# Inverse construction helpers
# ---------------------------------------------------------------------------


def _inverse(command: BaseCommand, cls: type[C], **fields: Any) -> C:
    """Build an inverse that carries the original command's timestamp."""
    return cls(timestamp=command.timestamp, **fields)


def _sequence(command: BaseCommand, parts: Iterable[BaseCommand]) -> BaseCommand:
    """Collapse *parts* into NoOp, a single command, or a compound."""
    steps = [p for p in parts if not isinstance(p, NoOp)]
    if not steps:
        return _inverse(command, NoOp)
    if len(steps) == 1:
        return steps[0]
    return _inverse(command, CompoundCommand, commands=tuple(steps))


# Counter each create command draws its id from when none is given.
_ID_COUNTERS: dict[type[BaseCommand], str] = {
    CreateTeam: "next_team_id",
    CreateResource: "next_resource_id",
    CreateLabel: "next_label_id",
    CreateModifyFilter: "next_filter_id",
}


def _pin_id(model: DomainModel, command: BaseCommand) -> BaseCommand:
    counter = _ID_COUNTERS.get(type(command))
    if counter is None or command.id is not None:  # type: ignore[attr-defined]
        return command
    if isinstance(command, CreateModifyFilter) and model.find_filter(command.name) is not None:
        return command
    return command.model_copy(update={"id": getattr(model, counter)})


def _free_id(wanted: int | None, table: dict[int, Any]) -> int | None:
    """Honor a requested id only when nothing occupies it."""
    if wanted is None or wanted < 1 or wanted in table:
        return None
    return wanted


def _resolve_labels(model: DomainModel, names: Iterable[str]) -> set[LabelId]:
    return {model.label_id(name) for name in names}


def _restore_priority(command: BaseCommand, task_id: int, resource_name: str, position: int) -> list[BaseCommand]:
    """Steps that put *task_id* back at *position* in *resource_name*'s queue."""
    steps: list[BaseCommand] = [_inverse(command, AssignTask, task_id=task_id, resource_name=resource_name)]
    if position > 0:
        steps.append(_inverse(command, ChangeTaskPriority, task_id=task_id, delta=position))
    return steps


# ---------------------------------------------------------------------------
# Teams
# ---------------------------------------------------------------------------


@_handles(NoOp)
def _no_op(model: DomainModel, cmd: NoOp) -> BaseCommand:
    return _inverse(cmd, NoOp)


@_handles(CreateTeam)
def _create_team(model: DomainModel, cmd: CreateTeam) -> BaseCommand:
    if model.find_team(cmd.name) is not None:
        raise AlreadyExistsError(f"Team '{cmd.name}' already exists", team=cmd.name)

    team_id = model.allocate_team_id(_free_id(cmd.id, model.teams))
    # Resources left pointing at a restored id by an earlier DeleteTeam rejoin it.
    members: set[int] = set()
    if team_id == cmd.id:
        members = {rid for rid, r in model.resources.items() if r.team_id == team_id}
    model.teams[team_id] = Team(name=cmd.name, resources=members)
    return _inverse(cmd, DeleteTeam, name=cmd.name)


@_handles(RenameTeam)
def _rename_team(model: DomainModel, cmd: RenameTeam) -> BaseCommand:
    team_id = model.team_id(cmd.old_name)
    if model.find_team(cmd.new_name) is not None:
        raise AlreadyExistsError(f"Team '{cmd.new_name}' already exists", team=cmd.new_name)

    model.teams[team_id].name = cmd.new_name
    return _inverse(cmd, RenameTeam, old_name=cmd.new_name, new_name=cmd.old_name)


@_handles(DeleteTeam)
def _delete_team(model: DomainModel, cmd: DeleteTeam) -> BaseCommand:
    team_id = model.team_id(cmd.name)
    team = model.teams.pop(team_id)
    if team.resources:
        logger.warning(
            "Deleted team %r still owns %d resource(s); they now reference a missing team",
            cmd.name,
            len(team.resources),
        )
    return _inverse(cmd, CreateTeam, name=cmd.name, id=team_id)


# ---------------------------------------------------------------------------
# Resources
# ---------------------------------------------------------------------------


def _team_name_of(model: DomainModel, resource: Resource) -> str:
    team = model.teams.get(resource.team_id)
    if team is None:
        msg = f"Resource '{resource.name}' belongs to a deleted team; restore the team first"
        raise InvalidStateError(msg, resource=resource.name, team_id=resource.team_id)
    return team.name


@_handles(CreateResource)
def _create_resource(model: DomainModel, cmd: CreateResource) -> BaseCommand:
    if model.find_resource(cmd.name) is not None:
        raise AlreadyExistsError(f"Resource '{cmd.name}' already exists", resource=cmd.name)
    team_id = model.team_id(cmd.team_name)

    resource_id = model.allocate_resource_id(_free_id(cmd.id, model.resources))
    model.resources[resource_id] = Resource(name=cmd.name, team_id=team_id)
    model.teams[team_id].resources.add(resource_id)
    return _inverse(cmd, DeleteResource, name=cmd.name)


@_handles(RenameResource)
def _rename_resource(model: DomainModel, cmd: RenameResource) -> BaseCommand:
    resource_id = model.resource_id(cmd.old_name)
    if model.find_resource(cmd.new_name) is not None:
        raise AlreadyExistsError(f"Resource '{cmd.new_name}' already exists", resource=cmd.new_name)

    model.resources[resource_id].name = cmd.new_name
    return _inverse(cmd, RenameResource, old_name=cmd.new_name, new_name=cmd.old_name)


@_handles(SwitchTeam)
def _switch_team(model: DomainModel, cmd: SwitchTeam) -> BaseCommand:
    resource_id = model.resource_id(cmd.resource_name)
    new_team_id = model.team_id(cmd.team_name)
    resource = model.resources[resource_id]
    old_team_name = _team_name_of(model, resource)

    model.teams[resource.team_id].resources.discard(resource_id)
    model.teams[new_team_id].resources.add(resource_id)
    resource.team_id = new_team_id
    return _inverse(cmd, SwitchTeam, resource_name=cmd.resource_name, team_name=old_team_name)


@_handles(DeleteResource)
def _delete_resource(model: DomainModel, cmd: DeleteResource) -> BaseCommand:
    resource_id = model.resource_id(cmd.name)
    resource = model.resources[resource_id]
    if resource.assigned_tasks:
        raise InvalidStateError(
            f"Resource '{cmd.name}' still has assigned tasks",
            resource=cmd.name,
            tasks=list(resource.assigned_tasks),
        )
    if resource.watched_tasks:
        raise InvalidStateError(
            f"Resource '{cmd.name}' still watches tasks",
            resource=cmd.name,
            tasks=sorted(resource.watched_tasks),
        )
    if model.resource_has_worklogs(resource_id):
        raise InvalidStateError(f"Resource '{cmd.name}' has logged work", resource=cmd.name)
    team_name = _team_name_of(model, resource)

    del model.resources[resource_id]
    model.teams[resource.team_id].resources.discard(resource_id)

    steps: list[BaseCommand] = [
        _inverse(cmd, CreateResource, name=cmd.name, team_name=team_name, id=resource_id)
    ]
    steps.extend(
        _inverse(
            cmd,
            SetAbsence,
            resource_name=cmd.name,
            start_date=absence.start_date,
            duration=absence.duration,
        )
        for absence in resource.absences
    )
    return _sequence(cmd, steps)


# ---------------------------------------------------------------------------
# Tasks
# ---------------------------------------------------------------------------


def _task_content(model: DomainModel, cmd: BaseCommand, task_id: int, task: Task) -> UpdateTask:
    return _inverse(
        cmd,
        UpdateTask,
        task_id=task_id,
        ticket=task.ticket,
        title=task.title,
        duration=task.duration,
        labels=model.label_names(task.label_ids),
    )


@_handles(CreateTask)
def _create_task(model: DomainModel, cmd: CreateTask) -> BaseCommand:
    label_ids = _resolve_labels(model, cmd.labels)
    existing = model.tasks.get(cmd.task_id)

    if existing is not None:
        inverse: BaseCommand = _task_content(model, cmd, cmd.task_id, existing)
        existing.ticket = cmd.ticket
        existing.title = cmd.title
        existing.duration = cmd.duration
        existing.label_ids = label_ids
        return inverse

    model.tasks[cmd.task_id] = Task(
        ticket=cmd.ticket,
        title=cmd.title,
        duration=cmd.duration,
        label_ids=label_ids,
    )
    model.claim_task_id(cmd.task_id)
    return _inverse(cmd, DeleteTask, task_id=cmd.task_id)


@_handles(UpdateTask)
def _update_task(model: DomainModel, cmd: UpdateTask) -> BaseCommand:
    task = model.task(cmd.task_id)
    label_ids = _resolve_labels(model, cmd.labels)

    inverse = _task_content(model, cmd, cmd.task_id, task)
    task.ticket = cmd.ticket
    task.title = cmd.title
    task.duration = cmd.duration
    task.label_ids = label_ids
    return inverse


@_handles(DeleteTask)
def _delete_task(model: DomainModel, cmd: DeleteTask) -> BaseCommand:
    task = model.task(cmd.task_id)
    if task.assignee is not None:
        raise InvalidStateError(f"Task {cmd.task_id} is assigned", task_id=cmd.task_id)
    if task.watchers:
        raise InvalidStateError(f"Task {cmd.task_id} has watchers", task_id=cmd.task_id)
    if model.task_has_worklogs(cmd.task_id):
        raise InvalidStateError(f"Task {cmd.task_id} has logged work", task_id=cmd.task_id)

    del model.tasks[cmd.task_id]
    return _inverse(
        cmd,
        CreateTask,
        task_id=cmd.task_id,
        ticket=task.ticket,
        title=task.title,
        duration=task.duration,
        labels=model.label_names(task.label_ids),
    )


@_handles(AssignTask)
def _assign_task(model: DomainModel, cmd: AssignTask) -> BaseCommand:
    task = model.task(cmd.task_id)
    resource_id = model.resource_id(cmd.resource_name)

    previous = task.assignee
    inverse: BaseCommand
    if previous is None:
        inverse = _inverse(cmd, UnassignTask, task_id=cmd.task_id)
    else:
        old_resource = model.resources[previous]
        position = old_resource.assigned_tasks.index(cmd.task_id)
        inverse = _sequence(cmd, _restore_priority(cmd, cmd.task_id, old_resource.name, position))
        old_resource.assigned_tasks.remove(cmd.task_id)

    task.assignee = resource_id
    model.resources[resource_id].assigned_tasks.insert(0, cmd.task_id)
    return inverse


@_handles(UnassignTask)
def _unassign_task(model: DomainModel, cmd: UnassignTask) -> BaseCommand:
    task = model.task(cmd.task_id)
    if task.assignee is None:
        raise InvalidStateError(f"Task {cmd.task_id} is not assigned", task_id=cmd.task_id)

    resource = model.resources[task.assignee]
    position = resource.assigned_tasks.index(cmd.task_id)
    resource.assigned_tasks.remove(cmd.task_id)
    task.assignee = None
    return _sequence(cmd, _restore_priority(cmd, cmd.task_id, resource.name, position))


def _queue_of(model: DomainModel, task_id: int) -> list[int]:
    task = model.task(task_id)
    if task.assignee is None:
        raise InvalidStateError(f"Task {task_id} is not assigned", task_id=task_id)
    return model.resources[task.assignee].assigned_tasks


def _move_in_queue(model: DomainModel, cmd: BaseCommand, task_id: int, delta: int) -> BaseCommand:
    queue = _queue_of(model, task_id)
    position = queue.index(task_id)
    target = position + delta
    if not 0 <= target < len(queue):
        raise InvalidStateError(
            f"Cannot move task {task_id} from position {position} by {delta}",
            task_id=task_id,
            position=position,
            delta=delta,
            queue_length=len(queue),
        )

    queue.pop(position)
    queue.insert(target, task_id)
    return _inverse(cmd, ChangeTaskPriority, task_id=task_id, delta=-delta)


@_handles(ChangeTaskPriority)
def _change_task_priority(model: DomainModel, cmd: ChangeTaskPriority) -> BaseCommand:
    return _move_in_queue(model, cmd, cmd.task_id, cmd.delta)


@_handles(PrioritizeTask)
def _prioritize_task(model: DomainModel, cmd: PrioritizeTask) -> BaseCommand:
    position = _queue_of(model, cmd.task_id).index(cmd.task_id)
    if cmd.to_top:
        delta = -position
    else:
        delta = -1 if position > 0 else 0
    return _move_in_queue(model, cmd, cmd.task_id, delta)


@_handles(DeprioritizeTask)
def _deprioritize_task(model: DomainModel, cmd: DeprioritizeTask) -> BaseCommand:
    queue = _queue_of(model, cmd.task_id)
    position = queue.index(cmd.task_id)
    last = len(queue) - 1
    if cmd.to_bottom:
        delta = last - position
    else:
        delta = 1 if position < last else 0
    return _move_in_queue(model, cmd, cmd.task_id, delta)


@_handles(AddWatcher)
def _add_watcher(model: DomainModel, cmd: AddWatcher) -> BaseCommand:
    task = model.task(cmd.task_id)
    resource_id = model.resource_id(cmd.resource_name)
    if resource_id in task.watchers:
        return _inverse(cmd, NoOp)

    task.watchers.add(resource_id)
    model.resources[resource_id].watched_tasks.add(cmd.task_id)
    return _inverse(cmd, RemoveWatcher, task_id=cmd.task_id, resource_name=cmd.resource_name)


@_handles(RemoveWatcher)
def _remove_watcher(model: DomainModel, cmd: RemoveWatcher) -> BaseCommand:
    task = model.task(cmd.task_id)
    resource_id = model.resource_id(cmd.resource_name)
    if resource_id not in task.watchers:
        return _inverse(cmd, NoOp)

    task.watchers.discard(resource_id)
    model.resources[resource_id].watched_tasks.discard(cmd.task_id)
    return _inverse(cmd, AddWatcher, task_id=cmd.task_id, resource_name=cmd.resource_name)


# ---------------------------------------------------------------------------
# Labels
# ---------------------------------------------------------------------------


@_handles(CreateLabel)
def _create_label(model: DomainModel, cmd: CreateLabel) -> BaseCommand:
    if model.find_label(cmd.name) is not None:
        raise AlreadyExistsError(f"Label '{cmd.name}' already exists", label=cmd.name)

    label_id = model.allocate_label_id(_free_id(cmd.id, model.labels))
    model.labels[label_id] = Label(name=cmd.name)
    return _inverse(cmd, DeleteLabel, name=cmd.name)


@_handles(RenameLabel)
def _rename_label(model: DomainModel, cmd: RenameLabel) -> BaseCommand:
    if cmd.id is None:
        label_id = model.label_id(cmd.old_name)
    else:
        # Names may collide, so an explicit id picks the exact label.
        label = model.labels.get(cmd.id)
        if label is None or label.name != cmd.old_name:
            raise NotFoundError(f"Label '{cmd.old_name}' with id {cmd.id} does not exist", label=cmd.old_name)
        label_id = cmd.id
    if model.find_label(cmd.new_name) is not None:
        # Accepted without error; label names may now collide.
        logger.warning("Renaming label %r to %r duplicates an existing label", cmd.old_name, cmd.new_name)

    model.labels[label_id].name = cmd.new_name
    return _inverse(cmd, RenameLabel, old_name=cmd.new_name, new_name=cmd.old_name, id=label_id)


@_handles(DeleteLabel)
def _delete_label(model: DomainModel, cmd: DeleteLabel) -> BaseCommand:
    label_id = model.label_id(cmd.name)
    tasks = sorted(tid for tid, t in model.tasks.items() if label_id in t.label_ids)
    filters = sorted(f.name for f in model.filters.values() if label_id in f.labels)
    if tasks or filters:
        raise InvalidStateError(
            f"Label '{cmd.name}' is still in use",
            label=cmd.name,
            tasks=tasks,
            filters=filters,
        )

    del model.labels[label_id]
    return _inverse(cmd, CreateLabel, name=cmd.name, id=label_id)


@_handles(AddLabelToTask)
def _add_label_to_task(model: DomainModel, cmd: AddLabelToTask) -> BaseCommand:
    task = model.task(cmd.task_id)
    label_id = model.label_id(cmd.label_name)
    if label_id in task.label_ids:
        return _inverse(cmd, NoOp)

    task.label_ids.add(label_id)
    return _inverse(cmd, RemoveLabelFromTask, task_id=cmd.task_id, label_name=cmd.label_name)


@_handles(RemoveLabelFromTask)
def _remove_label_from_task(model: DomainModel, cmd: RemoveLabelFromTask) -> BaseCommand:
    task = model.task(cmd.task_id)
    label_id = model.label_id(cmd.label_name)
    if label_id not in task.label_ids:
        return _inverse(cmd, NoOp)

    task.label_ids.discard(label_id)
    return _inverse(cmd, AddLabelToTask, task_id=cmd.task_id, label_name=cmd.label_name)


# ---------------------------------------------------------------------------
# Filters
# ---------------------------------------------------------------------------


@_handles(CreateModifyFilter)
def _create_modify_filter(model: DomainModel, cmd: CreateModifyFilter) -> BaseCommand:
    label_ids = _resolve_labels(model, cmd.labels)
    filter_id = model.find_filter(cmd.name)

    if filter_id is not None:
        current = model.filters[filter_id]
        inverse = _inverse(
            cmd,
            CreateModifyFilter,
            name=cmd.name,
            labels=model.label_names(current.labels),
            is_favorite=current.is_favorite,
        )
        current.labels = label_ids
        current.is_favorite = cmd.is_favorite
        return inverse

    filter_id = model.allocate_filter_id(_free_id(cmd.id, model.filters))
    model.filters[filter_id] = Filter(name=cmd.name, labels=label_ids, is_favorite=cmd.is_favorite)
    return _inverse(cmd, DeleteFilter, name=cmd.name)


@_handles(RenameFilter)
def _rename_filter(model: DomainModel, cmd: RenameFilter) -> BaseCommand:
    filter_id = model.filter_id(cmd.old_name)
    if model.find_filter(cmd.new_name) is not None:
        raise AlreadyExistsError(f"Filter '{cmd.new_name}' already exists", filter=cmd.new_name)

    model.filters[filter_id].name = cmd.new_name
    return _inverse(cmd, RenameFilter, old_name=cmd.new_name, new_name=cmd.old_name)


@_handles(DeleteFilter)
def _delete_filter(model: DomainModel, cmd: DeleteFilter) -> BaseCommand:
    filter_id = model.filter_id(cmd.name)
    removed = model.filters.pop(filter_id)
    return _inverse(
        cmd,
        CreateModifyFilter,
        name=cmd.name,
        labels=model.label_names(removed.labels),
        is_favorite=removed.is_favorite,
        id=filter_id,
    )


# ---------------------------------------------------------------------------
# Worklogs, absences, milestones
# ---------------------------------------------------------------------------


@_handles(SetWorklog)
def _set_worklog(model: DomainModel, cmd: SetWorklog) -> BaseCommand:
    model.task(cmd.task_id)
    resource_id = model.resource_id(cmd.resource_name)
    previous = model.worklog(cmd.task_id, resource_id, cmd.date)

    if cmd.fraction == 0:
        if previous == 0:
            raise InvalidStateError(
                f"No work logged on task {cmd.task_id} by '{cmd.resource_name}' on {cmd.date}",
                task_id=cmd.task_id,
                resource=cmd.resource_name,
                date=cmd.date.isoformat(),
            )
        by_resource = model.worklogs[cmd.task_id]
        del by_resource[resource_id][cmd.date]
        if not by_resource[resource_id]:
            del by_resource[resource_id]
        if not by_resource:
            del model.worklogs[cmd.task_id]
    else:
        model.worklogs.setdefault(cmd.task_id, {}).setdefault(resource_id, {})[cmd.date] = cmd.fraction

    return _inverse(
        cmd,
        SetWorklog,
        task_id=cmd.task_id,
        date=cmd.date,
        resource_name=cmd.resource_name,
        fraction=previous,
    )


@_handles(SetAbsence)
def _set_absence(model: DomainModel, cmd: SetAbsence) -> BaseCommand:
    resource = model.resources[model.resource_id(cmd.resource_name)]
    span = absence_span(cmd.start_date, cmd.duration)

    removed = [a for a in resource.absences if spans_intersect(absence_span(a.start_date, a.duration), span)]
    kept = [a for a in resource.absences if a not in removed]
    inserted = not cmd.duration.is_zero()
    if inserted:
        kept.append(Absence(start_date=cmd.start_date, duration=cmd.duration))
    kept.sort(key=lambda a: a.start_date)
    resource.absences = kept

    steps: list[BaseCommand] = []
    if inserted:
        steps.append(
            _inverse(cmd, SetAbsence, resource_name=cmd.resource_name, start_date=cmd.start_date, duration=ZERO)
        )
    steps.extend(
        _inverse(cmd, SetAbsence, resource_name=cmd.resource_name, start_date=a.start_date, duration=a.duration)
        for a in removed
    )
    return _sequence(cmd, steps)


@_handles(AddMilestone)
def _add_milestone(model: DomainModel, cmd: AddMilestone) -> BaseCommand:
    index = len(model.milestones) if cmd.index is None else cmd.index
    if not 0 <= index <= len(model.milestones):
        raise InvalidStateError(f"Milestone index {index} is out of range", index=index)

    model.milestones.insert(index, Milestone(date=cmd.date, title=cmd.title))
    return _inverse(cmd, RemoveMilestone, title=cmd.title, index=index)


@_handles(RemoveMilestone)
def _remove_milestone(model: DomainModel, cmd: RemoveMilestone) -> BaseCommand:
    if cmd.index is not None:
        in_range = 0 <= cmd.index < len(model.milestones)
        if not in_range or model.milestones[cmd.index].title != cmd.title:
            raise NotFoundError(f"Milestone '{cmd.title}' not found at index {cmd.index}", title=cmd.title)
        index = cmd.index
    else:
        index = next((i for i, m in enumerate(model.milestones) if m.title == cmd.title), -1)
        if index < 0:
            raise NotFoundError(f"Milestone '{cmd.title}' does not exist", title=cmd.title)

    milestone = model.milestones.pop(index)
    return _inverse(cmd, AddMilestone, title=milestone.title, date=milestone.date, index=index)


# ---------------------------------------------------------------------------
# Compound
# ---------------------------------------------------------------------------


def _run_compound(model: DomainModel, cmd: CompoundCommand) -> tuple[BaseCommand, BaseCommand]:
    scratch = model.clone()
    inverses: list[BaseCommand] = []
    redos: list[BaseCommand] = []
    for index, sub in enumerate(cmd.commands):
        try:
            inverse, redo = record_command(scratch, sub)
        except CommandError as exc:
            raise CompoundCommandError(index, sub.kind, exc) from exc  # type: ignore[attr-defined]
        inverses.append(inverse)
        redos.append(redo)

    model.replace_with(scratch)
    inverse = _inverse(cmd, CompoundCommand, commands=tuple(reversed(inverses)))
    return inverse, cmd.model_copy(update={"commands": tuple(redos)})


@_handles(CompoundCommand)
def _compound(model: DomainModel, cmd: CompoundCommand) -> BaseCommand:
    return _run_compound(model, cmd)[0]
