"""
.env support for launcher settings.

PYTHON_EXECUTABLE, TERMINAL and the GAMELAUNCH_* overrides can be kept in
.env files instead of the shell profile. Files are read in this order:

    ~/.config/gamelaunch/.env   (user)
    ./.env, ./.env.local        (project)

A project file may replace a value that came from the user file. Neither
replaces a variable that was already exported when the launcher started.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable
from pathlib import Path

from dotenv import dotenv_values

logger = logging.getLogger(__name__)


def user_env_files() -> list[Path]:
    config_home = os.environ.get("XDG_CONFIG_HOME") or str(Path.home() / ".config")
    return [Path(config_home) / "gamelaunch" / ".env"]


def project_env_files(project_dir: Path | None = None) -> list[Path]:
    base = project_dir or Path.cwd()
    return [base / ".env", base / ".env.local"]


def read_env_file(path: Path) -> dict[str, str]:
    """Key/value pairs of one .env file; keys without a value are skipped."""
    if not path.is_file():
        return {}
    return {key: value for key, value in dotenv_values(path).items() if key and value is not None}


def load_layered_env(
    *,
    project_dir: Path | None = None,
    user_env_paths: Iterable[Path] | None = None,
    project_env_paths: Iterable[Path] | None = None,
) -> dict[str, str]:
    """
    Copy .env values into os.environ.

    Args:
        project_dir: Directory holding the project .env files (defaults to cwd)
        user_env_paths: Override the user file list
        project_env_paths: Override the project file list

    Returns:
        The variables that were set, mapped to their new values
    """
    exported = set(os.environ)
    applied: dict[str, str] = {}

    user_paths = user_env_files() if user_env_paths is None else user_env_paths
    project_paths = (
        project_env_files(project_dir) if project_env_paths is None else project_env_paths
    )

    for path in [*user_paths, *project_paths]:
        for key, value in read_env_file(Path(path)).items():
            if key in exported:
                continue
            os.environ[key] = value
            applied[key] = value

    if applied:
        logger.debug(f"Loaded from .env: {sorted(applied)}")
    return applied


__all__ = ["load_layered_env", "project_env_files", "read_env_file", "user_env_files"]
