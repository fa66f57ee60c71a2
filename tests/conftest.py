"""
Pytest configuration and shared fixtures.

Provides fixtures for a temporary launcher install (scripts directory with
game scripts), isolated config/data directories, fake executables on PATH
and cache resets between tests.
"""

import os
import stat
from pathlib import Path

import pytest

from gamelaunch.core.config import clear_cache as clear_config_cache
from gamelaunch.core.config.models import LauncherConfig
from gamelaunch.core.launch import OutcomeLog
from gamelaunch.core.launch import clear_cache as clear_probe_cache

GAME_SCRIPTS = ("brick_breaker_game.py", "subway_surfers_game.py", "line.py", "hole.py")


# ==============================================================================
# Cache Isolation
# ==============================================================================


@pytest.fixture(autouse=True)
def _reset_caches():
    """Forget cached platform, interpreter and config around every test."""
    clear_probe_cache()
    clear_config_cache()
    yield
    clear_probe_cache()
    clear_config_cache()


@pytest.fixture
def isolated_home(tmp_path, monkeypatch):
    """Point HOME and the XDG directories at a temporary location."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(home / ".config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(home / ".local" / "share"))
    for var in ("GAMELAUNCH_APP_ROOT", "GAMELAUNCH_SCRIPTS_DIR", "GAMELAUNCH_GRACE_MS",
                "GAMELAUNCH_LOG_FILE", "PYTHON_EXECUTABLE", "TERMINAL"):
        monkeypatch.delenv(var, raising=False)
    return home


# ==============================================================================
# Directory Fixtures
# ==============================================================================


@pytest.fixture
def app_root(tmp_path):
    """
    Provide a temporary launcher install root.

    Creates:
    - lib/wrappers/python/ with one script per shipped game

    The root is nested three levels deep so the .venv lookup never
    escapes tmp_path.
    """
    root = tmp_path / "install" / "wall" / "launcher"
    scripts = root / "lib" / "wrappers" / "python"
    scripts.mkdir(parents=True)
    for name in GAME_SCRIPTS:
        (scripts / name).write_text("import sys\nsys.exit(0)\n")
    return root


@pytest.fixture
def scripts_dir(app_root):
    return app_root / "lib" / "wrappers" / "python"


@pytest.fixture
def log_file(tmp_path):
    return tmp_path / "data" / "launcher.log"


@pytest.fixture
def outcome_log(log_file):
    return OutcomeLog(log_file)


@pytest.fixture
def launcher_config(app_root, log_file):
    """LauncherConfig rooted at the temporary install."""
    return LauncherConfig(app_root=app_root, log_file=log_file)


# ==============================================================================
# Executable Helpers
# ==============================================================================


def _make_executable(directory: Path, name: str, body: str = "exit 0\n") -> Path:
    """Write a small shell script and mark it executable."""
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / name
    path.write_text(f"#!/bin/sh\n{body}")
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return path


@pytest.fixture
def bin_dir(tmp_path):
    """An empty directory to hold fake executables for PATH."""
    directory = tmp_path / "bin"
    directory.mkdir()
    return directory


def _path_env(*dirs: Path, **extra: str) -> dict[str, str]:
    """Environment mapping with PATH built from the given directories."""
    env = {"PATH": os.pathsep.join(str(d) for d in dirs)}
    env.update(extra)
    return env


@pytest.fixture
def make_executable():
    """Factory: make_executable(directory, name, body="exit 0\\n") -> Path."""
    return _make_executable


@pytest.fixture
def path_env():
    """Factory: path_env(*dirs, **extra) -> env mapping with PATH set."""
    return _path_env
