"""Tests for the allocation cache rebuild."""

from __future__ import annotations

from datetime import date, timedelta

from flowstate.domain.allocation import AllocationCache, _allocate_resource, rebuild
from flowstate.domain.commands import (
    AddMilestone,
    AssignTask,
    BaseCommand,
    CreateResource,
    CreateTask,
    CreateTeam,
    SetAbsence,
    SetWorklog,
)
from flowstate.domain.duration import Duration
from flowstate.domain.interpreter import apply_command
from flowstate.domain.model import DomainModel

MON = date(2026, 3, 2)
TUE = date(2026, 3, 3)
WED = date(2026, 3, 4)
THU = date(2026, 3, 5)
FRI = date(2026, 3, 6)
SAT = date(2026, 3, 7)
NEXT_MON = date(2026, 3, 9)


def _model(*commands: BaseCommand) -> DomainModel:
    model = DomainModel()
    for command in (
        CreateTeam(name="Dev"),
        CreateResource(name="Alice", team_name="Dev"),
        CreateResource(name="Bob", team_name="Dev"),
        *commands,
    ):
        apply_command(model, command)
    return model


def _alice_alloc(cache: AllocationCache, task_id: int, model: DomainModel) -> dict[date, int]:
    return cache.task_alloc.get(task_id, {}).get(model.resource_id("Alice"), {})


def _assigned(task_id: int, duration: Duration, who: str = "Alice") -> list[BaseCommand]:
    return [CreateTask(task_id=task_id, duration=duration), AssignTask(task_id=task_id, resource_name=who)]


class TestAssignedAllocation:
    def test_two_and_a_half_days_from_monday(self) -> None:
        model = _model(*_assigned(1, Duration(days=2, fraction=50)))
        cache = rebuild(model, today=MON)
        assert _alice_alloc(cache, 1, model) == {MON: 100, TUE: 100, WED: 50}

    def test_weekend_is_skipped(self) -> None:
        model = _model(*_assigned(1, Duration(days=2, fraction=50)))
        cache = rebuild(model, today=THU)
        assert _alice_alloc(cache, 1, model) == {THU: 100, FRI: 100, NEXT_MON: 50}

    def test_weekend_start_moves_to_monday(self) -> None:
        model = _model(*_assigned(1, Duration(days=1)))
        cache = rebuild(model, today=SAT)
        assert _alice_alloc(cache, 1, model) == {NEXT_MON: 100}

    def test_date_offset_shifts_start(self) -> None:
        model = _model(*_assigned(1, Duration(days=1)))
        cache = rebuild(model, 1, today=MON)
        assert _alice_alloc(cache, 1, model) == {TUE: 100}
        assert cache.today == TUE

    def test_queue_order_shares_days(self) -> None:
        # Assigning prepends, so task 2 is first in Alice's queue.
        model = _model(*_assigned(1, Duration(days=1)), *_assigned(2, Duration(fraction=50)))
        cache = rebuild(model, today=MON)
        assert _alice_alloc(cache, 2, model) == {MON: 50}
        assert _alice_alloc(cache, 1, model) == {MON: 50, TUE: 50}
        assert cache.resource_load(model.resource_id("Alice"), MON) == 100

    def test_full_day_absence_blocks_capacity(self) -> None:
        model = _model(
            *_assigned(1, Duration(days=1)),
            SetAbsence(resource_name="Alice", start_date=MON, duration=Duration(days=1)),
        )
        cache = rebuild(model, today=MON)
        assert _alice_alloc(cache, 1, model) == {TUE: 100}
        assert cache.absence(model.resource_id("Alice"), MON) == 100

    def test_partial_absence_reduces_capacity(self) -> None:
        model = _model(
            *_assigned(1, Duration(days=1)),
            SetAbsence(resource_name="Alice", start_date=MON, duration=Duration(fraction=25)),
        )
        cache = rebuild(model, today=MON)
        assert _alice_alloc(cache, 1, model) == {MON: 75, TUE: 25}

    def test_worklogs_reduce_remaining_and_capacity(self) -> None:
        model = _model(
            *_assigned(1, Duration(days=2)),
            SetWorklog(task_id=1, date=MON, resource_name="Alice", fraction=50),
        )
        cache = rebuild(model, today=MON)
        assert cache.remaining_work[1] == Duration(days=1, fraction=50)
        assert _alice_alloc(cache, 1, model) == {MON: 50, TUE: 100}

    def test_finished_task_gets_no_allocation(self) -> None:
        model = _model(
            *_assigned(1, Duration(fraction=50)),
            SetWorklog(task_id=1, date=MON, resource_name="Alice", fraction=80),
        )
        cache = rebuild(model, today=MON)
        assert cache.remaining_work[1].is_zero()
        assert 1 not in cache.task_alloc


class TestUnassignedAllocation:
    def test_one_day_per_weekday(self) -> None:
        model = _model(CreateTask(task_id=1, duration=Duration(days=2, fraction=50)))
        cache = rebuild(model, today=THU)
        assert cache.unassigned_tasks == [1]
        assert cache.unassigned_task_alloc[1] == {THU: 100, FRI: 100, NEXT_MON: 50}

    def test_ignores_absences(self) -> None:
        model = _model(
            CreateTask(task_id=1, duration=Duration(days=1)),
            SetAbsence(resource_name="Alice", start_date=MON, duration=Duration(days=5)),
        )
        cache = rebuild(model, today=MON)
        assert cache.unassigned_task_alloc[1] == {MON: 100}

    def test_zero_duration_task_listed_without_allocation(self) -> None:
        model = _model(CreateTask(task_id=1))
        cache = rebuild(model, today=MON)
        assert cache.unassigned_tasks == [1]
        assert 1 not in cache.unassigned_task_alloc


class TestWorklogsOnOthersTasks:
    def test_only_foreign_work_is_flagged(self) -> None:
        model = _model(
            *_assigned(1, Duration(days=3)),
            CreateTask(task_id=2, duration=Duration(days=1)),
            SetWorklog(task_id=1, date=MON, resource_name="Alice", fraction=100),
            SetWorklog(task_id=1, date=MON, resource_name="Bob", fraction=30),
            SetWorklog(task_id=2, date=MON, resource_name="Bob", fraction=20),
        )
        cache = rebuild(model, today=TUE)
        bob = model.resource_id("Bob")
        assert cache.worklogs_on_others_tasks == {bob: {MON: 50}}


class TestWindow:
    def test_window_spans_margin_around_activity(self) -> None:
        model = _model(
            *_assigned(1, Duration(days=2, fraction=50)),
            AddMilestone(title="Beta", date=date(2026, 4, 1)),
        )
        cache = rebuild(model, today=MON, margin_days=10)
        assert cache.start_date == MON - timedelta(days=10)
        assert cache.end_date == date(2026, 4, 1) + timedelta(days=10)
        assert cache.day(0) == cache.start_date
        assert cache.day(cache.num_days()) == cache.end_date
        assert cache.date_to_milestones[date(2026, 4, 1)][0].title == "Beta"

    def test_window_reaches_past_last_allocation(self) -> None:
        model = _model(*_assigned(1, Duration(days=20)))
        cache = rebuild(model, today=MON, margin_days=0)
        last = max(_alice_alloc(cache, 1, model))
        assert cache.end_date == last

    def test_offset_moves_simulation_not_window(self) -> None:
        model = _model(*_assigned(1, Duration(days=1)))
        cache = rebuild(model, 7, today=MON, margin_days=10)
        assert cache.today == NEXT_MON
        assert _alice_alloc(cache, 1, model) == {NEXT_MON: 100}
        assert cache.start_date == MON - timedelta(days=10)
        assert cache.end_date == NEXT_MON + timedelta(days=10)

    def test_blocked_days_do_not_extend_reach(self) -> None:
        # 9999-12-27 is a Monday; absent through the last representable day.
        start = date(9999, 12, 27)
        absent = {start + timedelta(days=n): 100 for n in range(5)}
        out: dict = {}
        reached = _allocate_resource(1, [1], {1: Duration(days=1)}, absent, {}, start, out)
        assert out == {}
        assert reached == start

    def test_empty_model(self) -> None:
        cache = rebuild(DomainModel(), today=MON, margin_days=30)
        assert cache.num_days() == 60
        assert cache.task_alloc == {}
        assert cache.unassigned_tasks == []
