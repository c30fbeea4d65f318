"""Entity tables and id allocation for one project.

Every entity lives in a dict keyed by its integer id; relationships are
stored as id sets and lists, never as object references. The tables are
plain mutable dataclasses so the interpreter can edit them in place and a
compound command can work on a ``copy.deepcopy`` of the whole model.

Name lookups raise :class:`~flowstate.domain.errors.NotFoundError`.
"""

from __future__ import annotations

import copy
import dataclasses
from dataclasses import dataclass, field
from datetime import date

from flowstate.domain.duration import Duration
from flowstate.domain.errors import NotFoundError

TeamId = int
ResourceId = int
TaskId = int
LabelId = int
FilterId = int

# task -> resource -> date -> hundredths of a day
WorklogTable = dict[TaskId, dict[ResourceId, dict[date, int]]]


@dataclass
class Team:
    name: str
    resources: set[ResourceId] = field(default_factory=set)


@dataclass
class Absence:
    start_date: date
    duration: Duration


@dataclass
class Resource:
    name: str
    team_id: TeamId
    assigned_tasks: list[TaskId] = field(default_factory=list)
    watched_tasks: set[TaskId] = field(default_factory=set)
    absences: list[Absence] = field(default_factory=list)


@dataclass
class Task:
    ticket: str
    title: str
    duration: Duration
    label_ids: set[LabelId] = field(default_factory=set)
    assignee: ResourceId | None = None
    watchers: set[ResourceId] = field(default_factory=set)


@dataclass
class Label:
    name: str


@dataclass
class Filter:
    name: str
    labels: set[LabelId] = field(default_factory=set)
    is_favorite: bool = False


@dataclass
class Milestone:
    date: date
    title: str


@dataclass
class DomainModel:
    """All entity tables plus the per-kind id counters."""

    teams: dict[TeamId, Team] = field(default_factory=dict)
    resources: dict[ResourceId, Resource] = field(default_factory=dict)
    tasks: dict[TaskId, Task] = field(default_factory=dict)
    labels: dict[LabelId, Label] = field(default_factory=dict)
    filters: dict[FilterId, Filter] = field(default_factory=dict)
    worklogs: WorklogTable = field(default_factory=dict)
    milestones: list[Milestone] = field(default_factory=list)

    next_team_id: TeamId = 1
    next_resource_id: ResourceId = 1
    next_task_id: TaskId = 1
    next_label_id: LabelId = 1
    next_filter_id: FilterId = 1

    # ------------------------------------------------------------------
    # Id allocation
    # ------------------------------------------------------------------

    def allocate_team_id(self, wanted: TeamId | None = None) -> TeamId:
        team_id = self.next_team_id if wanted is None else wanted
        self.next_team_id = max(self.next_team_id, team_id + 1)
        return team_id

    def allocate_resource_id(self, wanted: ResourceId | None = None) -> ResourceId:
        resource_id = self.next_resource_id if wanted is None else wanted
        self.next_resource_id = max(self.next_resource_id, resource_id + 1)
        return resource_id

    def allocate_label_id(self, wanted: LabelId | None = None) -> LabelId:
        label_id = self.next_label_id if wanted is None else wanted
        self.next_label_id = max(self.next_label_id, label_id + 1)
        return label_id

    def allocate_filter_id(self, wanted: FilterId | None = None) -> FilterId:
        filter_id = self.next_filter_id if wanted is None else wanted
        self.next_filter_id = max(self.next_filter_id, filter_id + 1)
        return filter_id

    def claim_task_id(self, task_id: TaskId) -> None:
        """Keep the caller-visible task counter ahead of *task_id*."""
        self.next_task_id = max(self.next_task_id, task_id + 1)

    def reset_counters(self) -> None:
        """Set every counter to ``max(existing id) + 1`` (1 for an empty table).

        Team ids still referenced by resources of a deleted team count as
        existing, so a new team never inherits those resources.
        """
        referenced = (r.team_id for r in self.resources.values())
        self.next_team_id = max([*self.teams, *referenced], default=0) + 1
        self.next_resource_id = max(self.resources, default=0) + 1
        self.next_task_id = max(self.tasks, default=0) + 1
        self.next_label_id = max(self.labels, default=0) + 1
        self.next_filter_id = max(self.filters, default=0) + 1

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def find_team(self, name: str) -> TeamId | None:
        return next((tid for tid, t in self.teams.items() if t.name == name), None)

    def find_resource(self, name: str) -> ResourceId | None:
        return next((rid for rid, r in self.resources.items() if r.name == name), None)

    def find_label(self, name: str) -> LabelId | None:
        return next((lid for lid, lbl in sorted(self.labels.items()) if lbl.name == name), None)

    def find_filter(self, name: str) -> FilterId | None:
        return next((fid for fid, f in self.filters.items() if f.name == name), None)

    def team_id(self, name: str) -> TeamId:
        team_id = self.find_team(name)
        if team_id is None:
            raise NotFoundError(f"Team '{name}' does not exist", team=name)
        return team_id

    def resource_id(self, name: str) -> ResourceId:
        resource_id = self.find_resource(name)
        if resource_id is None:
            raise NotFoundError(f"Resource '{name}' does not exist", resource=name)
        return resource_id

    def label_id(self, name: str) -> LabelId:
        label_id = self.find_label(name)
        if label_id is None:
            raise NotFoundError(f"Label '{name}' does not exist", label=name)
        return label_id

    def filter_id(self, name: str) -> FilterId:
        filter_id = self.find_filter(name)
        if filter_id is None:
            raise NotFoundError(f"Filter '{name}' does not exist", filter=name)
        return filter_id

    def task(self, task_id: TaskId) -> Task:
        task = self.tasks.get(task_id)
        if task is None:
            raise NotFoundError(f"Task {task_id} does not exist", task_id=task_id)
        return task

    def label_names(self, label_ids: set[LabelId]) -> tuple[str, ...]:
        """Label names for *label_ids*, ordered by id."""
        return tuple(self.labels[lid].name for lid in sorted(label_ids) if lid in self.labels)

    # ------------------------------------------------------------------
    # Worklog helpers
    # ------------------------------------------------------------------

    def worklog(self, task_id: TaskId, resource_id: ResourceId, day: date) -> int:
        return self.worklogs.get(task_id, {}).get(resource_id, {}).get(day, 0)

    def task_has_worklogs(self, task_id: TaskId) -> bool:
        return task_id in self.worklogs

    def resource_has_worklogs(self, resource_id: ResourceId) -> bool:
        return any(resource_id in by_resource for by_resource in self.worklogs.values())

    def iter_worklogs(self) -> list[tuple[TaskId, ResourceId, date, int]]:
        """Flat ``(task, resource, date, fraction)`` rows in a stable order."""
        rows: list[tuple[TaskId, ResourceId, date, int]] = []
        for task_id in sorted(self.worklogs):
            for resource_id in sorted(self.worklogs[task_id]):
                for day, fraction in sorted(self.worklogs[task_id][resource_id].items()):
                    rows.append((task_id, resource_id, day, fraction))
        return rows

    # ------------------------------------------------------------------
    # Snapshots
    # ------------------------------------------------------------------

    def clone(self) -> DomainModel:
        return copy.deepcopy(self)

    def replace_with(self, other: DomainModel) -> None:
        """Adopt every table and counter from *other* in place."""
        for f in dataclasses.fields(self):
            setattr(self, f.name, getattr(other, f.name))

    def content_equals(self, other: DomainModel) -> bool:
        """Compare entity tables, ignoring id counters."""
        return (
            self.teams == other.teams
            and self.resources == other.resources
            and self.tasks == other.tasks
            and self.labels == other.labels
            and self.filters == other.filters
            and self.worklogs == other.worklogs
            and self.milestones == other.milestones
        )
