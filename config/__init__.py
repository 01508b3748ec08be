"""Configuration loading utilities."""

from pathlib import Path
from typing import Any

import yaml

CONFIG_DIR = Path(__file__).parent


def config_path(filename: str) -> Path:
    """Resolve a config filename against config/; absolute paths pass through."""
    path = Path(filename)
    return path if path.is_absolute() else CONFIG_DIR / path


def load_yaml_config(filename: str) -> dict[str, Any]:
    """Load a YAML config file from the config/ directory (or an absolute path)."""
    with open(config_path(filename)) as f:
        return yaml.safe_load(f) or {}
