"""Tests for the task command group."""

import json

import pytest
from click.testing import CliRunner, Result

from flowstate.cli import cli


def _run(runner: CliRunner, *args: str) -> Result:
    return runner.invoke(cli, ["--json", "--today", "2026-03-02", *args])


def _data(result: Result) -> dict:
    return json.loads(result.output)["data"]


def _tasks(runner: CliRunner) -> dict[int, dict]:
    return {t["id"]: t for t in _data(_run(runner, "show"))["tasks"]}


def _queue(runner: CliRunner, name: str) -> list[int]:
    resources = _data(_run(runner, "show"))["resources"]
    return next(r["queue"] for r in resources if r["name"] == name)


@pytest.fixture
def staffed(cli_runner: CliRunner) -> CliRunner:
    """Team Dev with alice and bob, and three one-day tasks."""
    _run(cli_runner, "team", "create", "Dev")
    _run(cli_runner, "resource", "create", "alice", "--team", "Dev")
    _run(cli_runner, "resource", "create", "bob", "--team", "Dev")
    for n in range(1, 4):
        result = _run(cli_runner, "task", "create", "--ticket", f"T-{n}", "--duration", "1")
        assert result.exit_code == 0, result.output
    return cli_runner


@pytest.mark.usefixtures("_isolated_project")
class TestCreate:
    def test_uses_next_free_id(self, cli_runner: CliRunner) -> None:
        _run(cli_runner, "task", "create", "--title", "One")
        _run(cli_runner, "task", "create", "--title", "Two")
        tasks = _tasks(cli_runner)
        assert tasks[1]["title"] == "One"
        assert tasks[2]["title"] == "Two"
        assert _data(_run(cli_runner, "show"))["next_task_id"] == 3

    def test_explicit_id_and_duration(self, cli_runner: CliRunner) -> None:
        result = _run(cli_runner, "task", "create", "--id", "40", "--ticket", "PRJ-40", "--duration", "2.5")
        assert result.exit_code == 0, result.output
        task = _tasks(cli_runner)[40]
        assert task["ticket"] == "PRJ-40"
        assert task["duration"] == "2.50d"
        assert _data(_run(cli_runner, "show"))["next_task_id"] == 41

    def test_with_labels(self, cli_runner: CliRunner) -> None:
        _run(cli_runner, "label", "create", "ui")
        _run(cli_runner, "task", "create", "--label", "ui")
        assert _tasks(cli_runner)[1]["labels"] == ["ui"]

    def test_unknown_label(self, cli_runner: CliRunner) -> None:
        result = _run(cli_runner, "task", "create", "--label", "ghost")
        assert result.exit_code == 1
        assert _tasks(cli_runner) == {}

    @pytest.mark.parametrize("value", ["abc", "1.234", "-1", ""])
    def test_bad_duration(self, cli_runner: CliRunner, value: str) -> None:
        result = _run(cli_runner, "task", "create", "--duration", value)
        assert result.exit_code == 2

    @pytest.mark.parametrize(("value", "expected"), [("3", "3.00d"), ("0.25", "0.25d"), (".5", "0.50d"), ("2d", "2.00d")])
    def test_duration_forms(self, cli_runner: CliRunner, value: str, expected: str) -> None:
        assert _run(cli_runner, "task", "create", "--duration", value).exit_code == 0
        assert _tasks(cli_runner)[1]["duration"] == expected


@pytest.mark.usefixtures("_isolated_project")
class TestUpdateDelete:
    def test_update_keeps_unset_fields(self, staffed: CliRunner) -> None:
        result = _run(staffed, "task", "update", "1", "--title", "Renamed")
        assert result.exit_code == 0, result.output
        task = _tasks(staffed)[1]
        assert task["title"] == "Renamed"
        assert task["ticket"] == "T-1"
        assert task["duration"] == "1.00d"

    def test_update_missing_task(self, staffed: CliRunner) -> None:
        result = _run(staffed, "task", "update", "99", "--title", "x")
        assert result.exit_code == 1

    def test_delete(self, staffed: CliRunner) -> None:
        assert _run(staffed, "task", "delete", "3").exit_code == 0
        assert 3 not in _tasks(staffed)

    def test_delete_assigned_fails(self, staffed: CliRunner) -> None:
        _run(staffed, "task", "assign", "3", "alice")
        result = _run(staffed, "task", "delete", "3")
        assert result.exit_code == 1
        assert json.loads(result.output)["error"]["code"] == "INVALID_STATE"


@pytest.mark.usefixtures("_isolated_project")
class TestQueue:
    def test_assign_prepends(self, staffed: CliRunner) -> None:
        for task_id in ("1", "2", "3"):
            assert _run(staffed, "task", "assign", task_id, "alice").exit_code == 0
        assert _queue(staffed, "alice") == [3, 2, 1]
        assert _tasks(staffed)[1]["assignee"] == "alice"

    def test_reassign_moves_between_queues(self, staffed: CliRunner) -> None:
        _run(staffed, "task", "assign", "1", "alice")
        _run(staffed, "task", "assign", "1", "bob")
        assert _queue(staffed, "alice") == []
        assert _queue(staffed, "bob") == [1]

    def test_unassign(self, staffed: CliRunner) -> None:
        _run(staffed, "task", "assign", "1", "alice")
        assert _run(staffed, "task", "unassign", "1").exit_code == 0
        assert _tasks(staffed)[1]["assignee"] is None

    def test_unassign_unassigned_fails(self, staffed: CliRunner) -> None:
        assert _run(staffed, "task", "unassign", "1").exit_code == 1

    def test_priority_moves(self, staffed: CliRunner) -> None:
        for task_id in ("1", "2", "3"):
            _run(staffed, "task", "assign", task_id, "alice")
        assert _run(staffed, "task", "priority", "3", "2").exit_code == 0
        assert _queue(staffed, "alice") == [2, 1, 3]
        assert _run(staffed, "task", "priority", "3", "--", "-1").exit_code == 0
        assert _queue(staffed, "alice") == [2, 3, 1]

    def test_priority_out_of_range(self, staffed: CliRunner) -> None:
        _run(staffed, "task", "assign", "1", "alice")
        assert _run(staffed, "task", "priority", "1", "1").exit_code == 1

    def test_prioritize_and_deprioritize(self, staffed: CliRunner) -> None:
        for task_id in ("1", "2", "3"):
            _run(staffed, "task", "assign", task_id, "alice")
        _run(staffed, "task", "prioritize", "1", "--top")
        assert _queue(staffed, "alice") == [1, 3, 2]
        _run(staffed, "task", "deprioritize", "1")
        assert _queue(staffed, "alice") == [3, 1, 2]
        _run(staffed, "task", "deprioritize", "3", "--bottom")
        assert _queue(staffed, "alice") == [1, 2, 3]
        _run(staffed, "task", "prioritize", "3")
        assert _queue(staffed, "alice") == [1, 3, 2]


@pytest.mark.usefixtures("_isolated_project")
class TestWatchers:
    def test_watch_and_unwatch(self, staffed: CliRunner) -> None:
        assert _run(staffed, "task", "watch", "1", "bob").exit_code == 0
        assert _tasks(staffed)[1]["watchers"] == ["bob"]
        assert _run(staffed, "task", "unwatch", "1", "bob").exit_code == 0
        assert _tasks(staffed)[1]["watchers"] == []

    def test_watch_unknown_resource(self, staffed: CliRunner) -> None:
        assert _run(staffed, "task", "watch", "1", "ghost").exit_code == 1
