"""Shared pytest fixtures and test helpers for flowstate tests."""

from __future__ import annotations

from collections.abc import Iterator
from datetime import date
from pathlib import Path

import pytest
from click.testing import CliRunner

from flowstate.domain.commands import AssignTask, CreateResource, CreateTask, CreateTeam
from flowstate.domain.duration import Duration
from flowstate.domain.model import DomainModel
from flowstate.infrastructure.store import CommandLogStore
from flowstate.services.project import Project

# A Monday, so allocation tests start on a working day.
MONDAY = date(2026, 3, 2)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def model() -> DomainModel:
    """An empty domain model."""
    return DomainModel()


@pytest.fixture
def store(tmp_path: Path) -> Iterator[CommandLogStore]:
    """Command-log store on a fresh SQLite file."""
    s = CommandLogStore.open(tmp_path / ".flowstate" / "flowstate.db")
    try:
        yield s
    finally:
        s.close()


@pytest.fixture
def project() -> Project:
    """In-memory project pinned to a Monday."""
    return Project(today=MONDAY)


@pytest.fixture
def staffed_project(project: Project) -> Project:
    """Team Dev with Alice, and task 1 (one day) assigned to her."""
    for command in (
        CreateTeam(name="Dev"),
        CreateResource(name="Alice", team_name="Dev"),
        CreateTask(task_id=1, ticket="T-1", title="First", duration=Duration(days=1)),
        AssignTask(task_id=1, resource_name="Alice"),
    ):
        result = project.invoke(command)
        assert result.ok, result.error
    return project


@pytest.fixture
def _isolated_project(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Change CWD to a temp directory so the CLI creates an isolated database.

    Use via ``@pytest.mark.usefixtures("_isolated_project")`` on command test
    classes.
    """
    for var in ("FLOWSTATE_CONFIG", "FLOWSTATE_TODAY", "FLOWSTATE_JSON_OUTPUT"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)
