"""Config file discovery and loading.

Walk-up finder locates flowstate.toml, similar to how git finds .git/.
Supports FLOWSTATE_CONFIG env var and --config CLI flag overrides.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any

from flowstate.config.models import FlowConfig

CONFIG_FILENAME = "flowstate.toml"
CONFIG_ENV_VAR = "FLOWSTATE_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Walk up from *start* (default: cwd) looking for flowstate.toml.

    Returns the path to the config file, or None if not found.
    Checks FLOWSTATE_CONFIG env var first.
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        p = Path(env_path)
        return p if p.is_file() else None

    current = (start or Path.cwd()).resolve()
    for directory in (current, *current.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


def load_config(path: Path | None = None, cwd: Path | None = None) -> FlowConfig:
    """Load and validate config from a TOML file.

    Returns the default FlowConfig when no file is found.
    """
    if path is None:
        path = find_config(cwd)
    if path is None:
        return FlowConfig()

    data: dict[str, Any] = tomllib.loads(path.read_text(encoding="utf-8"))
    return FlowConfig.model_validate(data)
