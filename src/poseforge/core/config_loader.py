"""JSON config file loading utilities."""

import json
from pathlib import Path
from typing import Any

from poseforge.constants import CONFIG_DIR


def load_json(path: Path) -> Any:
    """Load and return parsed JSON from a file."""
    with open(path) as f:
        return json.load(f)


def load_config(name: str, config_dir: Path | None = None) -> Any:
    """Load a config file from the package config directory (or *config_dir*)."""
    return load_json((config_dir or CONFIG_DIR) / name)
