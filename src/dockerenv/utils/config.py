# src/dockerenv/utils/config.py

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from dockerenv.core.container.mounts import parse_mount_spec
from dockerenv.core.container.types import EnvConfig
from dockerenv.core.errors import ConfigurationError

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "dockerenv.json"

DEFAULTS: Dict[str, Any] = {
    "image_name": "aoc2026-env",
    "container_name": "aoc2026-container",
    "username": "appuser",
    "dockerfile": "dockerfile",
    "platform": "linux/arm64",
    "shell": "/bin/bash",
    "build_context": ".",
    "mounts": [],
}


def load_config_file(config_path: Optional[str] = None, cwd: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load the JSON settings file.

    An explicit ``config_path`` must exist. Without one, ``dockerenv.json``
    in ``cwd`` is used when present.

    Returns:
        dict: Recognised settings from the file (may be empty)
    """
    base = Path(cwd) if cwd is not None else Path.cwd()
    if config_path:
        path = Path(config_path)
        if not path.is_absolute():
            path = base / path
        if not path.is_file():
            raise ConfigurationError(f"Config file not found: {config_path}")
    else:
        path = base / CONFIG_FILENAME
        if not path.is_file():
            return {}

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid JSON in {path}: {e}")
    except OSError as e:
        raise ConfigurationError(f"Cannot read {path}: {e}")

    if not isinstance(data, dict):
        raise ConfigurationError(f"{path} must contain a JSON object")

    settings = {}
    for key, value in data.items():
        if key not in DEFAULTS:
            logger.warning("Ignoring unknown setting '%s' in %s", key, path)
            continue
        if key == "mounts":
            if not isinstance(value, list) or not all(isinstance(m, str) for m in value):
                raise ConfigurationError(f"'mounts' in {path} must be a list of strings")
        elif not isinstance(value, str) or not value:
            raise ConfigurationError(f"'{key}' in {path} must be a non-empty string")
        settings[key] = value

    logger.debug("Loaded settings from %s: %s", path, sorted(settings))
    return settings


def build_config(
    overrides: Optional[Dict[str, Any]] = None,
    config_path: Optional[str] = None,
    cwd: Optional[Path] = None
) -> EnvConfig:
    """
    Merge defaults, the settings file and CLI overrides into an EnvConfig.

    ``None`` values in ``overrides`` mean "not given on the command line".
    Mount specs are syntax-checked here so a bad one fails before any
    runtime call.
    """
    merged = dict(DEFAULTS)
    merged.update(load_config_file(config_path, cwd))
    for key, value in (overrides or {}).items():
        if value is None:
            continue
        if key not in DEFAULTS:
            raise ConfigurationError(f"Unknown setting '{key}'")
        merged[key] = value

    for raw in merged["mounts"]:
        parse_mount_spec(raw)

    return EnvConfig(
        image_name=merged["image_name"],
        container_name=merged["container_name"],
        username=merged["username"],
        dockerfile=merged["dockerfile"],
        mounts=tuple(merged["mounts"]),
        platform=merged["platform"],
        shell=merged["shell"],
        build_context=merged["build_context"],
    )
