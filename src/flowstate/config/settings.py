"""FlowSettings: one frozen object built from every configuration source.

Later sources lose to earlier ones:
  1. keyword arguments (the global CLI flags)
  2. ``FLOWSTATE_*`` environment variables, ``__`` for nested sections
  3. the nearest ``flowstate.toml``
  4. defaults declared on the section models
"""

from __future__ import annotations

import threading
import tomllib
from datetime import date
from pathlib import Path
from typing import Any

import click
from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from flowstate.config.discovery import find_config
from flowstate.config.models import ForecastConfig, ProjectConfig


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Read settings from a ``flowstate.toml`` file discovered via walk-up."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        if toml_path and toml_path.is_file():
            try:
                self._data = tomllib.loads(toml_path.read_text(encoding="utf-8"))
            except tomllib.TOMLDecodeError as exc:
                msg = f"Invalid TOML in {toml_path}: {exc}"
                raise click.ClickException(msg) from exc

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        val = self._data.get(field_name)
        return val, field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        return self._data


# The TOML path found by from_cli, visible to settings_customise_sources.
_tls = threading.local()


class FlowSettings(BaseSettings):
    """Unified settings for the flowstate CLI.

    Attributes:
        project_root: Directory holding ``flowstate.toml`` (or CWD if none).
        config_path: The config file actually read, if any.
        today: Pinned simulation date; None means the real current date.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "FLOWSTATE_",
        "env_nested_delimiter": "__",
    }

    project_root: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None

    # --- CLI flags ---
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False
    today: date | None = None

    # --- TOML sections ---
    project: ProjectConfig = Field(default_factory=ProjectConfig)
    forecast: ForecastConfig = Field(default_factory=ForecastConfig)

    @property
    def database_path(self) -> Path:
        """Absolute location of the SQLite command log."""
        path = Path(self.project.database)
        return path if path.is_absolute() else self.project_root / path

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Read flowstate.toml after env vars and before defaults."""
        toml_path = getattr(_tls, "toml_path", None)
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, toml_path),
        )

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        project_root: Path | None = None,
        **cli_flags: Any,
    ) -> FlowSettings:
        """Construct settings from a CLI invocation.

        Discovers ``flowstate.toml`` via walk-up (or explicit *config_path*),
        resolves *project_root* from the config file's parent directory,
        and merges CLI flags as highest-priority overrides. Flags left at
        ``None`` are dropped so lower-priority sources still apply.
        """
        toml_path: Path | None = None
        if config_path:
            p = Path(config_path)
            if p.is_file():
                toml_path = p
        else:
            toml_path = find_config(project_root)

        resolved_root = project_root
        if resolved_root is None:
            resolved_root = toml_path.parent if toml_path else Path.cwd()

        flags = {k: v for k, v in cli_flags.items() if v is not None}
        _tls.toml_path = toml_path
        try:
            return cls(project_root=resolved_root, config_path=toml_path, **flags)
        finally:
            _tls.toml_path = None
