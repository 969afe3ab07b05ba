"""Configuration loading with fail-fast behavior and layered merging.

Layers, later overriding earlier with deep merge:
1. Global user config (~/.clipdeck/config.json)
2. Project local config (<cwd>/.clipdeck/config.json)

With no config files at all, Pydantic defaults are used.
"""

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from clipdeck.config.schema import Config
from clipdeck.core.constants import CLIPDECK_DIR_NAME, get_clipdeck_dir
from clipdeck.core.errors import ConfigError
from clipdeck.core.utils import deep_merge

logger = logging.getLogger(__name__)


def read_config_file(path: Path, *, required: bool = True) -> dict[str, Any] | None:
    """Read one config layer.

    Empty files count as an empty object. A missing optional layer gives None.

    Raises:
        ConfigError: If a required file is missing, or the file is unreadable,
            not JSON, or not a JSON object.
    """
    resolved = path.resolve()
    if not resolved.is_file():
        if required:
            raise ConfigError(f"Config file not found: {path}")
        logger.debug("Config file not found: %s", resolved)
        return None

    logger.debug("Loading config file: %s", resolved)
    try:
        content = resolved.read_text(encoding="utf-8-sig").strip()
    except OSError as e:
        raise ConfigError(f"Failed to read config file {path}: {e}") from e
    if not content:
        return {}

    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"Expected object in {path}, got {type(data).__name__}")
    return data


def load_config(
    path: Path | None = None,
    cwd: Path | None = None,
    global_dir: Path | None = None,
) -> Config:
    """Load configuration from file with layered merging.

    Args:
        path: Explicit config file path. If provided, skips layered loading.
        cwd: Working directory for the local layer. Defaults to Path.cwd().
        global_dir: Global config directory override (for testing).

    Returns:
        Validated Config object.

    Raises:
        ConfigError: If any config file contains invalid JSON or merged config
            fails validation.
    """
    if path is not None:
        return _load_from_path(path)

    effective_cwd = cwd or Path.cwd()
    effective_global = global_dir or get_clipdeck_dir()

    merged: dict[str, Any] = {}
    loaded_from: list[Path] = []

    layers = [effective_global / "config.json", effective_cwd / CLIPDECK_DIR_NAME / "config.json"]
    for layer in layers:
        # Same file twice when cwd is the home directory
        if layer.resolve() in (p.resolve() for p in loaded_from):
            continue
        data = read_config_file(layer, required=False)
        if data:
            merged = deep_merge(merged, data)
            loaded_from.append(layer)

    if loaded_from:
        logger.info("Config loaded from: %s", [str(p) for p in loaded_from])
    else:
        logger.debug("No config files found, using Pydantic defaults")
        return Config()

    try:
        return Config.model_validate(merged)
    except ValidationError as e:
        sources = ", ".join(str(p) for p in loaded_from)
        raise ConfigError(f"Config validation failed (merged from {sources}): {e}") from e


def _load_from_path(path: Path) -> Config:
    data = read_config_file(path)
    try:
        return Config.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Config validation failed for {path}: {e}") from e
