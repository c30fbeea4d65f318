"""Tests for worklog, absence and milestone commands."""

import json

import pytest
from click.testing import CliRunner, Result

from flowstate.cli import cli


def _run(runner: CliRunner, *args: str) -> Result:
    return runner.invoke(cli, ["--json", "--today", "2026-03-02", *args])


def _show(runner: CliRunner) -> dict:
    return json.loads(_run(runner, "show").output)["data"]


@pytest.fixture
def staffed(cli_runner: CliRunner) -> CliRunner:
    _run(cli_runner, "team", "create", "Dev")
    _run(cli_runner, "resource", "create", "alice", "--team", "Dev")
    _run(cli_runner, "task", "create", "--ticket", "T-1", "--duration", "2")
    return cli_runner


@pytest.mark.usefixtures("_isolated_project")
class TestWorklog:
    def test_logged_work_reduces_remaining(self, staffed: CliRunner) -> None:
        result = _run(staffed, "worklog", "set", "1", "alice", "2026-02-27", "50")
        assert result.exit_code == 0, result.output
        assert _show(staffed)["tasks"][0]["remaining"] == "1.50d"

    def test_zero_clears_entry(self, staffed: CliRunner) -> None:
        _run(staffed, "worklog", "set", "1", "alice", "2026-02-27", "50")
        assert _run(staffed, "worklog", "set", "1", "alice", "2026-02-27", "0").exit_code == 0
        assert _show(staffed)["tasks"][0]["remaining"] == "2.00d"

    def test_clearing_nothing_fails(self, staffed: CliRunner) -> None:
        result = _run(staffed, "worklog", "set", "1", "alice", "2026-02-27", "0")
        assert result.exit_code == 1

    def test_fraction_range(self, staffed: CliRunner) -> None:
        assert _run(staffed, "worklog", "set", "1", "alice", "2026-02-27", "101").exit_code == 2

    def test_bad_date(self, staffed: CliRunner) -> None:
        assert _run(staffed, "worklog", "set", "1", "alice", "27/02/2026", "50").exit_code == 2


@pytest.mark.usefixtures("_isolated_project")
class TestAbsence:
    def test_set_and_remove(self, staffed: CliRunner) -> None:
        assert _run(staffed, "absence", "set", "alice", "2026-03-09", "5").exit_code == 0
        assert _show(staffed)["resources"][0]["absences"] == [{"start_date": "2026-03-09", "duration": "5.00d"}]
        assert _run(staffed, "absence", "set", "alice", "2026-03-09", "0").exit_code == 0
        assert _show(staffed)["resources"][0]["absences"] == []

    def test_unknown_resource(self, staffed: CliRunner) -> None:
        assert _run(staffed, "absence", "set", "ghost", "2026-03-09", "1").exit_code == 1

    def test_absence_delays_forecast(self, staffed: CliRunner) -> None:
        _run(staffed, "task", "assign", "1", "alice")
        _run(staffed, "absence", "set", "alice", "2026-03-02", "1")
        forecast = json.loads(_run(staffed, "forecast").output)["data"]
        (row,) = forecast["rows"]
        assert row["allocation"] == {"2026-03-03": 100, "2026-03-04": 100}
        assert forecast["absences"]["alice"] == {"2026-03-02": 100}


@pytest.mark.usefixtures("_isolated_project")
class TestMilestone:
    def test_add_and_remove(self, cli_runner: CliRunner) -> None:
        assert _run(cli_runner, "milestone", "add", "Beta", "2026-04-01").exit_code == 0
        assert _show(cli_runner)["milestones"] == [{"date": "2026-04-01", "title": "Beta"}]
        assert _run(cli_runner, "milestone", "remove", "Beta").exit_code == 0
        assert _show(cli_runner)["milestones"] == []

    def test_remove_missing(self, cli_runner: CliRunner) -> None:
        result = _run(cli_runner, "milestone", "remove", "Beta")
        assert result.exit_code == 1
        assert json.loads(result.output)["error"]["code"] == "NOT_FOUND"
