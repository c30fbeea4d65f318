"""Project: owns the domain model, command log and allocation cache.

Every mutation follows the same sequence, with no suspension point:

    INTERPRET → RECORD → REBUILD CACHE → PERSIST → RESPOND

A rejected command stops at INTERPRET: the model, the log and the stored
state are all left as they were, and the caller gets ``ok=False``.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import TYPE_CHECKING, Any

from flowstate.domain.allocation import DEFAULT_MARGIN_DAYS, AllocationCache, rebuild
from flowstate.domain.commands import BaseCommand
from flowstate.domain.errors import CommandError
from flowstate.domain.history import CommandLog
from flowstate.services.result import ServiceResult

if TYPE_CHECKING:
    from flowstate.domain.model import DomainModel
    from flowstate.infrastructure.store import CommandLogStore

logger = logging.getLogger(__name__)


class Project:
    """Single-owner orchestrator for one project's state.

    Args:
        log: Existing history; its applied prefix is replayed to build the model.
        store: Persistence collaborator, saved after every successful mutation.
        date_offset: Days to shift "today" by when simulating allocations.
        margin_days: Padding around the visible forecast window.
        today: Pin the simulation anchor date (defaults to the current date).
    """

    def __init__(
        self,
        *,
        log: CommandLog | None = None,
        store: CommandLogStore | None = None,
        date_offset: int = 0,
        margin_days: int = DEFAULT_MARGIN_DAYS,
        today: date | None = None,
    ) -> None:
        self._log = log if log is not None else CommandLog()
        self._store = store
        self._date_offset = date_offset
        self._margin_days = margin_days
        self._today = today
        self._model = self._log.replay()
        self._cache = self._rebuild_cache()

    @classmethod
    def open(cls, store: CommandLogStore, **options: Any) -> Project:
        """Load the stored history and rebuild live state from it."""
        log = store.load()
        logger.debug("Replaying %d of %d logged commands", log.applied_count, len(log.records))
        return cls(log=log, store=store, **options)

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def model(self) -> DomainModel:
        return self._model

    @property
    def log(self) -> CommandLog:
        return self._log

    @property
    def cache(self) -> AllocationCache:
        return self._cache

    def next_task_id(self) -> int:
        """The id the next new task should use."""
        return self._model.next_task_id

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def invoke(self, command: BaseCommand) -> ServiceResult:
        """Apply *command*, record it for undo, rebuild and persist."""
        op = "invoke"
        kind = getattr(command, "kind", type(command).__name__)
        try:
            inverse = self._log.invoke(self._model, command)
        except CommandError as exc:
            logger.debug("Command %s rejected: %s", kind, exc.message)
            return ServiceResult.failure(op, exc, command=kind)

        logger.debug("Applied %s (inverse %s)", kind, getattr(inverse, "kind", "?"))
        self._commit()
        return ServiceResult(
            ok=True,
            op=op,
            data={"command": kind, "inverse": getattr(inverse, "kind", "?"), **self._position()},
        )

    def undo(self) -> ServiceResult:
        """Revert the most recently applied command."""
        op = "undo"
        try:
            command = self._log.undo(self._model)
        except CommandError as exc:
            return ServiceResult.failure(op, exc, **self._position())

        logger.debug("Undid with %s", getattr(command, "kind", "?"))
        self._commit()
        return ServiceResult(ok=True, op=op, data={"command": getattr(command, "kind", "?"), **self._position()})

    def redo(self) -> ServiceResult:
        """Re-apply the next undone command."""
        op = "redo"
        try:
            command = self._log.redo(self._model)
        except CommandError as exc:
            return ServiceResult.failure(op, exc, **self._position())

        logger.debug("Redid %s", getattr(command, "kind", "?"))
        self._commit()
        return ServiceResult(ok=True, op=op, data={"command": getattr(command, "kind", "?"), **self._position()})

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def summary(self) -> ServiceResult:
        """Entity tables flattened to names, for ``flowstate show``."""
        model = self._model
        teams = [
            {
                "id": team_id,
                "name": team.name,
                "resources": sorted(model.resources[rid].name for rid in team.resources if rid in model.resources),
            }
            for team_id, team in sorted(model.teams.items())
        ]
        resources = [
            {
                "id": resource_id,
                "name": resource.name,
                "team": model.teams[resource.team_id].name if resource.team_id in model.teams else None,
                "queue": list(resource.assigned_tasks),
                "absences": [
                    {"start_date": a.start_date.isoformat(), "duration": str(a.duration)} for a in resource.absences
                ],
            }
            for resource_id, resource in sorted(model.resources.items())
        ]
        tasks = [
            {
                "id": task_id,
                "ticket": task.ticket,
                "title": task.title,
                "duration": str(task.duration),
                "remaining": str(self._cache.remaining_work.get(task_id, task.duration)),
                "labels": list(model.label_names(task.label_ids)),
                "assignee": model.resources[task.assignee].name if task.assignee in model.resources else None,
                "watchers": sorted(model.resources[rid].name for rid in task.watchers if rid in model.resources),
            }
            for task_id, task in sorted(model.tasks.items())
        ]
        filters = [
            {"id": fid, "name": f.name, "labels": list(model.label_names(f.labels)), "is_favorite": f.is_favorite}
            for fid, f in sorted(model.filters.items())
        ]
        return ServiceResult(
            ok=True,
            op="show",
            data={
                "teams": teams,
                "resources": resources,
                "tasks": tasks,
                "labels": [{"id": lid, "name": lbl.name} for lid, lbl in sorted(model.labels.items())],
                "filters": filters,
                "milestones": [{"date": m.date.isoformat(), "title": m.title} for m in model.milestones],
                "next_task_id": model.next_task_id,
            },
        )

    def history(self) -> ServiceResult:
        """The command log with the undo cursor marked."""
        entries = [
            {
                "position": position,
                "command": getattr(record.redo_command, "kind", "?"),
                "undo": getattr(record.undo_command, "kind", "?"),
                "applied": position < self._log.applied_count,
                "timestamp": record.redo_command.timestamp.isoformat(),
            }
            for position, record in enumerate(self._log.records)
        ]
        return ServiceResult(
            ok=True,
            op="history",
            data={
                "entries": entries,
                "can_undo": self._log.can_undo,
                "can_redo": self._log.can_redo,
                **self._position(),
            },
        )

    def forecast(self) -> ServiceResult:
        """Per-day allocation grid over the visible window."""
        cache = self._cache
        model = self._model
        days = [cache.day(i) for i in range(cache.num_days())]

        rows: list[dict[str, Any]] = []
        for resource_id, resource in sorted(model.resources.items()):
            for task_id in resource.assigned_tasks:
                per_day = cache.task_alloc.get(task_id, {}).get(resource_id, {})
                rows.append(self._forecast_row(task_id, resource.name, per_day))
        for task_id in cache.unassigned_tasks:
            rows.append(self._forecast_row(task_id, None, cache.unassigned_task_alloc.get(task_id, {})))

        absences = {
            model.resources[rid].name: {d.isoformat(): v for d, v in sorted(per_day.items())}
            for rid, per_day in sorted(cache.resource_absence.items())
            if rid in model.resources
        }
        conflicts = {
            model.resources[rid].name: {d.isoformat(): v for d, v in sorted(per_day.items())}
            for rid, per_day in sorted(cache.worklogs_on_others_tasks.items())
            if rid in model.resources
        }
        milestones = {
            d.isoformat(): [m.title for m in items] for d, items in sorted(cache.date_to_milestones.items())
        }
        return ServiceResult(
            ok=True,
            op="forecast",
            data={
                "start_date": cache.start_date.isoformat(),
                "end_date": cache.end_date.isoformat(),
                "today": cache.today.isoformat(),
                "days": [d.isoformat() for d in days],
                "rows": rows,
                "absences": absences,
                "worklogs_on_others_tasks": conflicts,
                "milestones": milestones,
            },
        )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _forecast_row(self, task_id: int, resource: str | None, per_day: dict[date, int]) -> dict[str, Any]:
        task = self._model.tasks[task_id]
        finish = max(per_day) if per_day else None
        return {
            "task_id": task_id,
            "ticket": task.ticket,
            "title": task.title,
            "resource": resource,
            "remaining": str(self._cache.remaining_work.get(task_id, task.duration)),
            "finish": finish.isoformat() if finish is not None else None,
            "allocation": {d.isoformat(): v for d, v in sorted(per_day.items())},
        }

    def _commit(self) -> None:
        self._cache = self._rebuild_cache()
        if self._store is not None:
            self._store.save(self._log)

    def _rebuild_cache(self) -> AllocationCache:
        return rebuild(
            self._model,
            self._date_offset,
            today=self._today,
            margin_days=self._margin_days,
        )

    def _position(self) -> dict[str, int]:
        return {"applied_count": self._log.applied_count, "history_length": len(self._log.records)}
