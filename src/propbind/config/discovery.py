"""Config file discovery and loading.

Walk-up finder locates propbind.toml, similar to how git finds .git/.
Supports the PROPBIND_CONFIG env var and --config CLI flag overrides.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any

from propbind.config.models import PropbindConfig

CONFIG_FILENAME = "propbind.toml"
CONFIG_ENV_VAR = "PROPBIND_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Walk up from *start* (default: cwd) looking for propbind.toml.

    Returns the path to the config file, or None if not found.
    Checks the PROPBIND_CONFIG env var first.
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        p = Path(env_path)
        return p if p.is_file() else None

    current = (start or Path.cwd()).resolve()
    while True:
        candidate = current / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
        if current.parent == current:
            return None
        current = current.parent


def load_config(path: Path | None = None, cwd: Path | None = None) -> PropbindConfig:
    """Load and validate config from a TOML file.

    If *path* is None, uses find_config(*cwd*) to discover the file.
    Returns a default PropbindConfig if no file is found.
    """
    if path is None:
        path = find_config(cwd)
    if path is None:
        return PropbindConfig()

    data: dict[str, Any] = tomllib.loads(path.read_text(encoding="utf-8"))
    return PropbindConfig.model_validate(data)
