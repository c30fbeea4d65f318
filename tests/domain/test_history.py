"""Tests for the undo/redo command log."""

from __future__ import annotations

import pytest

from flowstate.domain.commands import (
    AssignTask,
    CompoundCommand,
    CreateLabel,
    CreateResource,
    CreateTask,
    CreateTeam,
    DeleteTeam,
    RenameTeam,
)
from flowstate.domain.duration import Duration
from flowstate.domain.errors import InvalidStateError, NotFoundError
from flowstate.domain.history import CommandLog, CommandRecord
from flowstate.domain.model import DomainModel

STEPS = [
    CreateTeam(name="Dev"),
    CreateResource(name="Alice", team_name="Dev"),
    CreateTask(task_id=1, title="First", duration=Duration(days=1)),
    AssignTask(task_id=1, resource_name="Alice"),
    RenameTeam(old_name="Dev", new_name="Core"),
]


def _invoke_all(log: CommandLog, model: DomainModel) -> list[DomainModel]:
    """Invoke every step, returning the state before the first and after each."""
    states = [model.clone()]
    for step in STEPS:
        log.invoke(model, step)
        states.append(model.clone())
    return states


class TestInvoke:
    def test_records_pair(self, model: DomainModel) -> None:
        log = CommandLog()
        command = CreateTeam(name="Dev")
        inverse = log.invoke(model, command)
        pinned = command.model_copy(update={"id": 1})
        assert log.records == [CommandRecord(undo_command=inverse, redo_command=pinned)]
        assert log.applied_count == 1

    def test_failed_invoke_records_nothing(self, model: DomainModel) -> None:
        log = CommandLog()
        with pytest.raises(NotFoundError):
            log.invoke(model, RenameTeam(old_name="Nope", new_name="X"))
        assert log.records == []
        assert log.applied_count == 0

    def test_explicit_id_recorded_unchanged(self, model: DomainModel) -> None:
        log = CommandLog()
        command = CreateTeam(name="Dev", id=7)
        log.invoke(model, command)
        assert log.records[0].redo_command == command

    def test_compound_records_ids_of_each_step(self, model: DomainModel) -> None:
        log = CommandLog()
        log.invoke(model, CompoundCommand(commands=(CreateTeam(name="Dev"), CreateLabel(name="ui"))))
        redo = log.records[0].redo_command
        assert isinstance(redo, CompoundCommand)
        assert [step.id for step in redo.commands] == [1, 1]  # type: ignore[attr-defined]


class TestUndoRedo:
    def test_undo_walks_back_through_every_state(self, model: DomainModel) -> None:
        log = CommandLog()
        states = _invoke_all(log, model)
        for expected in reversed(states[:-1]):
            log.undo(model)
            assert model.content_equals(expected)
        assert not log.can_undo

    def test_redo_reproduces_each_state(self, model: DomainModel) -> None:
        log = CommandLog()
        states = _invoke_all(log, model)
        while log.can_undo:
            log.undo(model)
        for expected in states[1:]:
            log.redo(model)
            assert model.content_equals(expected)
        assert not log.can_redo

    def test_redo_keeps_allocated_ids(self, model: DomainModel) -> None:
        log = CommandLog()
        log.invoke(model, CreateTeam(name="Dev"))
        log.invoke(model, CreateResource(name="Alice", team_name="Dev"))
        log.undo(model)
        log.undo(model)
        log.redo(model)
        log.redo(model)
        assert model.find_team("Dev") == 1
        assert model.find_resource("Alice") == 1
        assert model.teams[1].resources == {1}

    def test_undo_on_empty_history(self, model: DomainModel) -> None:
        with pytest.raises(InvalidStateError, match="undo"):
            CommandLog().undo(model)

    def test_redo_at_head(self, model: DomainModel) -> None:
        log = CommandLog()
        log.invoke(model, CreateTeam(name="Dev"))
        with pytest.raises(InvalidStateError, match="redo"):
            log.redo(model)

    def test_scenario_assign_undo_redo(self, model: DomainModel) -> None:
        log = CommandLog()
        for step in STEPS[:4]:
            log.invoke(model, step)

        log.undo(model)
        alice = model.resource_id("Alice")
        assert model.task(1).assignee is None
        assert model.resources[alice].assigned_tasks == []

        log.redo(model)
        assert model.task(1).assignee == alice
        assert model.resources[alice].assigned_tasks == [1]


class TestBranchDiscard:
    def test_invoke_after_undo_drops_redo_tail(self, model: DomainModel) -> None:
        log = CommandLog()
        _invoke_all(log, model)
        log.undo(model)
        log.undo(model)
        log.invoke(model, CreateTeam(name="Ops"))
        assert len(log.records) == len(STEPS) - 1
        assert log.applied_count == len(log.records)
        assert not log.can_redo
        with pytest.raises(InvalidStateError):
            log.redo(model)


class TestReplay:
    def test_replays_applied_prefix_only(self, model: DomainModel) -> None:
        log = CommandLog()
        states = _invoke_all(log, model)
        log.undo(model)
        log.undo(model)
        replayed = log.replay()
        assert replayed.content_equals(states[3])

    def test_counters_reset_past_max_id(self, model: DomainModel) -> None:
        log = CommandLog()
        _invoke_all(log, model)
        replayed = log.replay()
        assert replayed.next_team_id == 2
        assert replayed.next_resource_id == 2
        assert replayed.next_task_id == 2

    def test_new_team_after_replay_leaves_orphans_alone(self, model: DomainModel) -> None:
        log = CommandLog()
        log.invoke(model, CreateTeam(name="Dev"))
        log.invoke(model, CreateResource(name="Alice", team_name="Dev"))
        log.invoke(model, DeleteTeam(name="Dev"))
        replayed = log.replay()
        assert replayed.next_team_id == 2
        log.invoke(replayed, CreateTeam(name="QA"))
        assert replayed.teams[replayed.team_id("QA")].resources == set()

    def test_cursor_out_of_range_rejected(self) -> None:
        with pytest.raises(ValueError):
            CommandLog(records=[], applied_count=1)
