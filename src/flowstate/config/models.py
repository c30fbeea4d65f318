"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, flowstate.toml only contains
overrides. A fresh project needs nothing but an empty file.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

# --- flowstate.toml sections ---


class ProjectConfig(BaseModel):
    """[project] section."""

    model_config = {"frozen": True}

    name: str = "my-project"
    database: str = ".flowstate/flowstate.db"


class ForecastConfig(BaseModel):
    """[forecast] section."""

    model_config = {"frozen": True}

    margin_days: int = Field(30, ge=0)
    date_offset: int = 0


class FlowConfig(BaseModel):
    """Root configuration composing all sections."""

    model_config = {"frozen": True}

    project: ProjectConfig = Field(default_factory=ProjectConfig)
    forecast: ForecastConfig = Field(default_factory=ForecastConfig)
