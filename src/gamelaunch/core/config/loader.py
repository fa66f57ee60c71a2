"""
Layered configuration loading.

Layers, lowest to highest precedence:
    1. Built-in defaults
    2. User file      $XDG_CONFIG_HOME/gamelaunch/config.json
    3. Project file   ./.gamelaunch.json
    4. Environment    GAMELAUNCH_APP_ROOT, GAMELAUNCH_SCRIPTS_DIR,
                      GAMELAUNCH_LOG_FILE, GAMELAUNCH_GRACE_MS

The merged result is validated once and cached for the process.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

from .models import LauncherConfig

logger = logging.getLogger(__name__)

PROJECT_CONFIG_NAME = ".gamelaunch.json"
MIN_GRACE_MS = 50

# Plain string overrides: env var -> config key
_PATH_OVERRIDES = {
    "GAMELAUNCH_APP_ROOT": "app_root",
    "GAMELAUNCH_SCRIPTS_DIR": "scripts_dir",
    "GAMELAUNCH_LOG_FILE": "log_file",
}

_config_cache: LauncherConfig | None = None


def get_xdg_config_home() -> Path:
    """$XDG_CONFIG_HOME, or ~/.config when unset."""
    if xdg_home := os.environ.get("XDG_CONFIG_HOME"):
        return Path(xdg_home)
    return Path.home() / ".config"


def get_user_config_path() -> Path:
    return get_xdg_config_home() / "gamelaunch" / "config.json"


def get_project_config_path(cwd: Path | None = None) -> Path:
    return (cwd or Path.cwd()) / PROJECT_CONFIG_NAME


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """
    Merge `override` into a copy of `base`.

    Nested dicts merge key by key; any other value (including the target
    list) is replaced wholesale.

    Example:
        >>> deep_merge({"a": 1, "b": {"x": 10}}, {"b": {"y": 2}})
        {'a': 1, 'b': {'x': 10, 'y': 2}}
    """
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = value
    return merged


def load_json_file(path: Path) -> dict[str, Any] | None:
    """
    Read one config layer.

    Returns:
        The parsed object, or None if the file is missing, unreadable, not
        JSON, or not a JSON object
    """
    if not path.exists():
        return None
    try:
        data = json.loads(path.read_text())
    except (OSError, json.JSONDecodeError) as e:
        logger.warning(f"Ignoring config file {path}: {e}")
        return None
    if not isinstance(data, dict):
        logger.warning(f"Ignoring config file {path}: top level is not an object")
        return None
    return data


def _parse_grace_ms(raw: str) -> int | None:
    try:
        value = int(raw)
    except ValueError:
        logger.warning(f"Invalid GAMELAUNCH_GRACE_MS value '{raw}', ignoring")
        return None
    if value < MIN_GRACE_MS:
        logger.warning(f"GAMELAUNCH_GRACE_MS must be >= {MIN_GRACE_MS}, got {value}, ignoring")
        return None
    return value


def apply_env_overrides(config_dict: dict[str, Any]) -> dict[str, Any]:
    """
    Return a copy of `config_dict` with GAMELAUNCH_* variables applied.

    Invalid grace window values are logged and skipped.
    """
    result = dict(config_dict)

    for env_var, key in _PATH_OVERRIDES.items():
        if value := os.environ.get(env_var):
            result[key] = value

    if raw_grace := os.environ.get("GAMELAUNCH_GRACE_MS"):
        grace_ms = _parse_grace_ms(raw_grace)
        if grace_ms is not None:
            result["grace_window_ms"] = grace_ms

    return result


def get_default_config() -> dict[str, Any]:
    """Built-in layer. The default target table lives on the model."""
    return {"grace_window_ms": 600, "name_flag": "--player-name"}


def load_config(project_dir: Path | None = None, use_cache: bool = True) -> LauncherConfig:
    """
    Load, merge and validate the configuration layers.

    Args:
        project_dir: Where to look for .gamelaunch.json (defaults to cwd)
        use_cache: Return the cached config when one exists

    Returns:
        Validated LauncherConfig

    Raises:
        ValidationError: If the merged layers do not form a valid config
    """
    global _config_cache

    if use_cache and _config_cache is not None:
        return _config_cache

    merged = get_default_config()
    for path in (get_user_config_path(), get_project_config_path(project_dir)):
        layer = load_json_file(path)
        if layer:
            logger.debug(f"Applying config layer {path}")
            merged = deep_merge(merged, layer)

    config = LauncherConfig(**apply_env_overrides(merged))
    _config_cache = config
    return config


def clear_cache() -> None:
    """Forget the cached configuration (used by tests)."""
    global _config_cache
    _config_cache = None


__all__ = [
    "apply_env_overrides",
    "clear_cache",
    "deep_merge",
    "get_default_config",
    "get_project_config_path",
    "get_user_config_path",
    "get_xdg_config_home",
    "load_config",
    "load_json_file",
]
