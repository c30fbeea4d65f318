"""Tests for entity tables, lookups and id counters."""

from datetime import date

import pytest

from flowstate.domain.duration import Duration
from flowstate.domain.errors import NotFoundError
from flowstate.domain.model import DomainModel, Label, Milestone, Resource, Task, Team


class TestIdAllocation:
    def test_counters_start_at_one(self, model: DomainModel) -> None:
        assert model.allocate_team_id() == 1
        assert model.allocate_team_id() == 2

    def test_wanted_id_moves_counter_forward(self, model: DomainModel) -> None:
        assert model.allocate_label_id(10) == 10
        assert model.allocate_label_id() == 11

    def test_wanted_id_below_counter_keeps_counter(self, model: DomainModel) -> None:
        model.allocate_filter_id()
        model.allocate_filter_id()
        assert model.allocate_filter_id(1) == 1
        assert model.next_filter_id == 3

    def test_reset_counters(self, model: DomainModel) -> None:
        model.teams[4] = Team(name="Dev")
        model.tasks[9] = Task(ticket="", title="", duration=Duration())
        model.next_team_id = 40
        model.reset_counters()
        assert model.next_team_id == 5
        assert model.next_task_id == 10
        assert model.next_resource_id == 1


class TestLookups:
    def test_missing_names_raise(self, model: DomainModel) -> None:
        with pytest.raises(NotFoundError):
            model.team_id("Dev")
        with pytest.raises(NotFoundError):
            model.resource_id("Alice")
        with pytest.raises(NotFoundError):
            model.task(1)

    def test_find_returns_none(self, model: DomainModel) -> None:
        assert model.find_filter("hot") is None

    def test_duplicate_label_names_resolve_to_lowest_id(self, model: DomainModel) -> None:
        model.labels[5] = Label(name="ui")
        model.labels[2] = Label(name="ui")
        assert model.label_id("ui") == 2

    def test_label_names_ordered_by_id(self, model: DomainModel) -> None:
        model.labels[2] = Label(name="b")
        model.labels[1] = Label(name="a")
        assert model.label_names({2, 1, 7}) == ("a", "b")


class TestWorklogs:
    def test_iter_worklogs_sorted(self, model: DomainModel) -> None:
        model.worklogs = {
            2: {1: {date(2026, 3, 3): 50, date(2026, 3, 2): 25}},
            1: {3: {date(2026, 3, 2): 100}},
        }
        assert model.iter_worklogs() == [
            (1, 3, date(2026, 3, 2), 100),
            (2, 1, date(2026, 3, 2), 25),
            (2, 1, date(2026, 3, 3), 50),
        ]
        assert model.resource_has_worklogs(3)
        assert not model.resource_has_worklogs(2)
        assert model.worklog(2, 1, date(2026, 3, 3)) == 50
        assert model.worklog(2, 1, date(2026, 3, 4)) == 0


class TestSnapshots:
    def test_clone_is_independent(self, model: DomainModel) -> None:
        model.resources[1] = Resource(name="Alice", team_id=1, assigned_tasks=[1])
        copy = model.clone()
        copy.resources[1].assigned_tasks.append(2)
        assert model.resources[1].assigned_tasks == [1]

    def test_replace_with_adopts_tables(self, model: DomainModel) -> None:
        other = DomainModel()
        other.teams[1] = Team(name="Dev")
        other.next_team_id = 2
        model.replace_with(other)
        assert model.teams == {1: Team(name="Dev")}
        assert model.next_team_id == 2

    def test_content_equals_ignores_counters(self, model: DomainModel) -> None:
        other = DomainModel(next_task_id=50)
        assert model.content_equals(other)
        other.milestones.append(Milestone(date=date(2026, 4, 1), title="GA"))
        assert not model.content_equals(other)
