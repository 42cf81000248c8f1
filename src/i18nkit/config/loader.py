"""Load engine settings from YAML documents."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from .schema import ConfigurationError, EngineSettings, MissingKeyHandler, build_settings


def _load_yaml(path: Path) -> dict[str, Any]:
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    if not isinstance(data, dict):
        raise ConfigurationError("Configuration file must define a mapping at the top level")
    return data


def load_settings(
    path: str | Path,
    *,
    missing_key_handler: MissingKeyHandler | None = None,
) -> EngineSettings:
    """Read and validate engine settings from the YAML file at ``path``."""

    config_file = Path(path)
    if not config_file.exists():
        raise FileNotFoundError(f"Settings file not found: {config_file}")

    raw_settings = _load_yaml(config_file)
    if missing_key_handler is not None:
        raw_settings["missing_key_handler"] = missing_key_handler
    return build_settings(raw_settings)


__all__ = ["load_settings"]
