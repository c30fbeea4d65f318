"""Allocation cache: a day-by-day simulation of remaining work.

:func:`rebuild` is a pure function of the domain model. It is rerun from
scratch after every committed mutation; there is no incremental path.

All per-day amounts are integer hundredths of a day (100 = one full day).

Pipeline:
  1. absence calendar per resource
  2. remaining work per task (duration minus logged work)
  3. assigned work, walked through each resource's priority queue
  4. unassigned work, one full day per weekday
  5. work logged on tasks owned by someone else
  6. visible date window
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date, timedelta

from flowstate.domain.calendar import absence_days, first_weekday, is_weekend, next_weekday, shift_days
from flowstate.domain.duration import HUNDREDTHS_PER_DAY, Duration
from flowstate.domain.model import DomainModel, Milestone, ResourceId, TaskId

DEFAULT_MARGIN_DAYS = 30


@dataclass
class AllocationCache:
    """Read-only view consumed by renderers."""

    start_date: date
    end_date: date
    today: date
    unassigned_tasks: list[TaskId] = field(default_factory=list)
    remaining_work: dict[TaskId, Duration] = field(default_factory=dict)
    task_alloc: dict[TaskId, dict[ResourceId, dict[date, int]]] = field(default_factory=dict)
    unassigned_task_alloc: dict[TaskId, dict[date, int]] = field(default_factory=dict)
    resource_absence: dict[ResourceId, dict[date, int]] = field(default_factory=dict)
    date_to_milestones: dict[date, list[Milestone]] = field(default_factory=dict)
    worklogs_on_others_tasks: dict[ResourceId, dict[date, int]] = field(default_factory=dict)

    def day(self, index: int) -> date:
        """The date shown in column *index* of the visible window."""
        return self.start_date + timedelta(days=index)

    def num_days(self) -> int:
        """Number of columns in the visible window."""
        return (self.end_date - self.start_date).days

    def allocation(self, task_id: TaskId, resource_id: ResourceId, day: date) -> int:
        return self.task_alloc.get(task_id, {}).get(resource_id, {}).get(day, 0)

    def absence(self, resource_id: ResourceId, day: date) -> int:
        return self.resource_absence.get(resource_id, {}).get(day, 0)

    def resource_load(self, resource_id: ResourceId, day: date) -> int:
        """Planned hundredths across all tasks for one resource on *day*."""
        return sum(per_resource.get(resource_id, {}).get(day, 0) for per_resource in self.task_alloc.values())


def rebuild(
    model: DomainModel,
    date_offset: int = 0,
    *,
    today: date | None = None,
    margin_days: int = DEFAULT_MARGIN_DAYS,
) -> AllocationCache:
    """Recompute the whole allocation cache for *model*.

    Args:
        model: The domain model to simulate.
        date_offset: Days added to *today* before the simulation starts.
        today: Anchor date; defaults to the local current date.
        margin_days: Padding added on both sides of the visible window.
    """
    base = today or date.today()
    anchor = shift_days(base, date_offset)
    start = first_weekday(anchor)

    absences = _absence_calendar(model)
    remaining = _remaining_work(model)
    logged_by_resource = _logged_by_resource_day(model)

    task_alloc: dict[TaskId, dict[ResourceId, dict[date, int]]] = {}
    furthest = anchor
    for resource_id in sorted(model.resources):
        reached = _allocate_resource(
            resource_id,
            model.resources[resource_id].assigned_tasks,
            remaining,
            absences.get(resource_id, {}),
            logged_by_resource.get(resource_id, {}),
            start,
            task_alloc,
        )
        furthest = max(furthest, reached)

    unassigned = sorted(tid for tid, task in model.tasks.items() if task.assignee is None)
    unassigned_alloc: dict[TaskId, dict[date, int]] = {}
    for task_id in unassigned:
        per_day, reached = _allocate_unassigned(remaining[task_id].hundredths, start)
        if per_day:
            unassigned_alloc[task_id] = per_day
        furthest = max(furthest, reached)

    milestones: dict[date, list[Milestone]] = defaultdict(list)
    for milestone in model.milestones:
        milestones[milestone.date].append(milestone)

    start_date, end_date = _window(model, base, furthest, margin_days)
    return AllocationCache(
        start_date=start_date,
        end_date=end_date,
        today=anchor,
        unassigned_tasks=unassigned,
        remaining_work=remaining,
        task_alloc=task_alloc,
        unassigned_task_alloc=unassigned_alloc,
        resource_absence=absences,
        date_to_milestones=dict(milestones),
        worklogs_on_others_tasks=_worklogs_on_others_tasks(model),
    )


# ---------------------------------------------------------------------------
# Pipeline stages
# ---------------------------------------------------------------------------


def _absence_calendar(model: DomainModel) -> dict[ResourceId, dict[date, int]]:
    calendar: dict[ResourceId, dict[date, int]] = {}
    for resource_id, resource in model.resources.items():
        days: dict[date, int] = {}
        for absence in resource.absences:
            whole, partial = absence_days(absence.start_date, absence.duration)
            for day in whole:
                days[day] = HUNDREDTHS_PER_DAY
            if partial is not None:
                days.setdefault(partial, absence.duration.fraction)
        if days:
            calendar[resource_id] = days
    return calendar


def _remaining_work(model: DomainModel) -> dict[TaskId, Duration]:
    remaining: dict[TaskId, Duration] = {}
    for task_id, task in model.tasks.items():
        logged = sum(
            fraction
            for per_day in model.worklogs.get(task_id, {}).values()
            for fraction in per_day.values()
        )
        remaining[task_id] = task.duration - Duration.from_hundredths(logged)
    return remaining


def _logged_by_resource_day(model: DomainModel) -> dict[ResourceId, dict[date, int]]:
    totals: dict[ResourceId, dict[date, int]] = defaultdict(lambda: defaultdict(int))
    for _task_id, resource_id, day, fraction in model.iter_worklogs():
        totals[resource_id][day] += fraction
    return totals


def _allocate_resource(
    resource_id: ResourceId,
    queue: list[TaskId],
    remaining: dict[TaskId, Duration],
    absence: dict[date, int],
    logged: dict[date, int],
    start: date,
    out: dict[TaskId, dict[ResourceId, dict[date, int]]],
) -> date:
    """Walk one resource's queue in priority order; returns the furthest date reached."""
    cursor: date | None = start
    alloced = 0
    furthest = start

    for task_id in queue:
        left = remaining[task_id].hundredths
        while left > 0 and cursor is not None:
            consumed = alloced + logged.get(cursor, 0) + absence.get(cursor, 0)
            amount = min(left, max(0, HUNDREDTHS_PER_DAY - consumed))
            if amount > 0:
                out.setdefault(task_id, {}).setdefault(resource_id, {})[cursor] = amount
                left -= amount
                furthest = max(furthest, cursor)

            if left == 0:
                alloced += amount
                if alloced >= HUNDREDTHS_PER_DAY:
                    alloced -= HUNDREDTHS_PER_DAY
                    cursor = next_weekday(cursor)
            else:
                cursor = next_weekday(cursor)
                alloced = 0

    return furthest


def _allocate_unassigned(left: int, start: date) -> tuple[dict[date, int], date]:
    per_day: dict[date, int] = {}
    cursor: date | None = start
    furthest = start
    while left > 0 and cursor is not None and not is_weekend(cursor):
        amount = min(left, HUNDREDTHS_PER_DAY)
        per_day[cursor] = amount
        left -= amount
        furthest = cursor
        cursor = next_weekday(cursor)
    return per_day, furthest


def _worklogs_on_others_tasks(model: DomainModel) -> dict[ResourceId, dict[date, int]]:
    conflicts: dict[ResourceId, dict[date, int]] = {}
    for task_id, resource_id, day, fraction in model.iter_worklogs():
        task = model.tasks.get(task_id)
        if task is not None and task.assignee == resource_id:
            continue
        per_day = conflicts.setdefault(resource_id, {})
        per_day[day] = per_day.get(day, 0) + fraction
    return conflicts


def _window(model: DomainModel, today: date, furthest: date, margin_days: int) -> tuple[date, date]:
    # Padded around the unshifted date; date_offset moves only the simulation.
    dates: list[date] = [today]
    dates.extend(m.date for m in model.milestones)
    dates.extend(day for _t, _r, day, _f in model.iter_worklogs())
    dates.extend(a.start_date for r in model.resources.values() for a in r.absences)

    start_date = shift_days(min(dates), -margin_days)
    end_date = shift_days(max(*dates, furthest), margin_days)
    return start_date, end_date
