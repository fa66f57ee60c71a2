"""
Unit tests for configuration loading.

Tests multi-layer config merging, environment variable overrides, caching,
target table validation and layered .env files.
"""

import json
import os
from pathlib import Path

import pytest
from pydantic import ValidationError

from gamelaunch.core.config import (
    LauncherConfig,
    TargetConfig,
    clear_cache,
    get_project_config_path,
    get_user_config_path,
    load_config,
    load_layered_env,
)
from gamelaunch.core.config.loader import (
    apply_env_overrides,
    deep_merge,
    get_default_config,
    get_xdg_config_home,
    load_json_file,
)
from gamelaunch.core.launch import LaunchTarget

# ==============================================================================
# Helper Functions Tests
# ==============================================================================


class TestDeepMerge:
    """Test the deep_merge helper function."""

    def test_nested_merge(self):
        """Test merging nested dicts."""
        result = deep_merge({"a": 1, "b": {"x": 10}}, {"b": {"y": 2}, "c": 3})
        assert result == {"a": 1, "b": {"x": 10, "y": 2}, "c": 3}

    def test_target_list_replaced(self):
        """Test the target table is replaced, not concatenated."""
        base = {"targets": [{"id": "a", "script": "a.py"}]}
        override = {"targets": [{"id": "b", "script": "b.py"}]}
        assert deep_merge(base, override)["targets"] == [{"id": "b", "script": "b.py"}]


class TestLoadJsonFile:
    """Test JSON file loading."""

    def test_missing_file(self, tmp_path):
        """Test a missing file returns None."""
        assert load_json_file(tmp_path / "missing.json") is None

    def test_invalid_json(self, tmp_path):
        """Test invalid JSON returns None instead of raising."""
        path = tmp_path / "config.json"
        path.write_text("{ invalid json }")
        assert load_json_file(path) is None

    def test_non_object(self, tmp_path):
        """Test a JSON array is ignored."""
        path = tmp_path / "config.json"
        path.write_text("[1, 2]")
        assert load_json_file(path) is None


class TestPaths:
    """Test config path helpers."""

    def test_xdg_config_home(self, isolated_home):
        """Test XDG_CONFIG_HOME is honoured."""
        assert get_xdg_config_home() == isolated_home / ".config"

    def test_xdg_default(self, isolated_home, monkeypatch):
        """Test ~/.config is used without XDG_CONFIG_HOME."""
        monkeypatch.delenv("XDG_CONFIG_HOME")
        assert get_xdg_config_home() == Path.home() / ".config"

    def test_user_config_path(self, isolated_home):
        assert get_user_config_path() == isolated_home / ".config" / "gamelaunch" / "config.json"

    def test_project_config_path(self, tmp_path):
        assert get_project_config_path(tmp_path) == tmp_path / ".gamelaunch.json"


# ==============================================================================
# Environment Overrides Tests
# ==============================================================================


class TestApplyEnvOverrides:
    """Test GAMELAUNCH_* environment overrides."""

    def test_paths(self, isolated_home, monkeypatch):
        """Test path overrides are copied in."""
        monkeypatch.setenv("GAMELAUNCH_APP_ROOT", "/opt/launcher")
        monkeypatch.setenv("GAMELAUNCH_SCRIPTS_DIR", "games")
        monkeypatch.setenv("GAMELAUNCH_LOG_FILE", "/tmp/launcher.log")
        result = apply_env_overrides({})
        assert result == {
            "app_root": "/opt/launcher",
            "scripts_dir": "games",
            "log_file": "/tmp/launcher.log",
        }

    def test_grace_window(self, isolated_home, monkeypatch):
        monkeypatch.setenv("GAMELAUNCH_GRACE_MS", "900")
        assert apply_env_overrides({})["grace_window_ms"] == 900

    def test_invalid_grace_window_ignored(self, isolated_home, monkeypatch):
        """Test a non-integer grace window is ignored."""
        monkeypatch.setenv("GAMELAUNCH_GRACE_MS", "soon")
        assert apply_env_overrides({"grace_window_ms": 600})["grace_window_ms"] == 600

    def test_too_small_grace_window_ignored(self, isolated_home, monkeypatch):
        monkeypatch.setenv("GAMELAUNCH_GRACE_MS", "10")
        assert apply_env_overrides({"grace_window_ms": 600})["grace_window_ms"] == 600

    def test_input_not_mutated(self, isolated_home, monkeypatch):
        monkeypatch.setenv("GAMELAUNCH_APP_ROOT", "/opt/launcher")
        original = {"name_flag": "--player-name"}
        apply_env_overrides(original)
        assert original == {"name_flag": "--player-name"}


# ==============================================================================
# load_config Tests
# ==============================================================================


class TestLoadConfig:
    """Test multi-layer configuration loading."""

    def test_defaults(self, isolated_home, tmp_path):
        """Test defaults apply when no config files exist."""
        config = load_config(project_dir=tmp_path)
        assert config == LauncherConfig(**get_default_config())
        assert config.grace_window_ms == 600
        assert config.grace_seconds == 0.6
        assert [t.id for t in config.targets] == ["brick_breaker", "subway_surfers", "line", "hole"]

    def test_user_config(self, isolated_home, tmp_path):
        """Test the user config layer is applied."""
        user_path = get_user_config_path()
        user_path.parent.mkdir(parents=True)
        user_path.write_text(json.dumps({"name_flag": "--name", "grace_window_ms": 800}))

        config = load_config(project_dir=tmp_path)
        assert config.name_flag == "--name"
        assert config.grace_window_ms == 800

    def test_project_overrides_user(self, isolated_home, tmp_path):
        """Test the project layer wins over the user layer."""
        user_path = get_user_config_path()
        user_path.parent.mkdir(parents=True)
        user_path.write_text(json.dumps({"grace_window_ms": 800}))
        (tmp_path / ".gamelaunch.json").write_text(json.dumps({"grace_window_ms": 1000}))

        assert load_config(project_dir=tmp_path).grace_window_ms == 1000

    def test_env_overrides_project(self, isolated_home, tmp_path, monkeypatch):
        """Test environment variables win over every file."""
        (tmp_path / ".gamelaunch.json").write_text(json.dumps({"grace_window_ms": 1000}))
        monkeypatch.setenv("GAMELAUNCH_GRACE_MS", "700")

        assert load_config(project_dir=tmp_path).grace_window_ms == 700

    def test_project_targets(self, isolated_home, tmp_path):
        """Test a project can replace the target table."""
        (tmp_path / ".gamelaunch.json").write_text(
            json.dumps({"targets": [{"id": "pong", "script": "pong.py", "args": ["--fast"]}]})
        )
        registry = load_config(project_dir=tmp_path).build_registry()
        assert registry.ids() == ["pong"]
        assert registry.resolve("pong") == LaunchTarget("pong", "pong.py", ("--fast",), False)

    def test_duplicate_targets_rejected(self, isolated_home, tmp_path):
        (tmp_path / ".gamelaunch.json").write_text(
            json.dumps(
                {"targets": [{"id": "pong", "script": "a.py"}, {"id": "pong", "script": "b.py"}]}
            )
        )
        with pytest.raises(ValidationError, match="Duplicate"):
            load_config(project_dir=tmp_path)

    def test_invalid_grace_rejected(self, isolated_home, tmp_path):
        (tmp_path / ".gamelaunch.json").write_text(json.dumps({"grace_window_ms": 0}))
        with pytest.raises(ValidationError):
            load_config(project_dir=tmp_path)

    def test_caching(self, isolated_home, tmp_path):
        """Test the loaded config is cached until cleared."""
        first = load_config(project_dir=tmp_path)
        (tmp_path / ".gamelaunch.json").write_text(json.dumps({"grace_window_ms": 1000}))
        assert load_config(project_dir=tmp_path) is first

        clear_cache()
        assert load_config(project_dir=tmp_path).grace_window_ms == 1000

    def test_use_cache_false(self, isolated_home, tmp_path):
        first = load_config(project_dir=tmp_path)
        assert load_config(project_dir=tmp_path, use_cache=False) is not first


# ==============================================================================
# Model Tests
# ==============================================================================


class TestLauncherConfig:
    """Test LauncherConfig path resolution."""

    def test_default_scripts_dir(self, tmp_path):
        config = LauncherConfig(app_root=tmp_path)
        assert config.resolved_scripts_dir() == tmp_path.resolve() / "lib" / "wrappers" / "python"

    def test_relative_scripts_dir(self, tmp_path):
        """Test a relative scripts dir is taken from the app root."""
        config = LauncherConfig(app_root=tmp_path, scripts_dir=Path("games"))
        assert config.resolved_scripts_dir() == tmp_path.resolve() / "games"

    def test_absolute_scripts_dir(self, tmp_path):
        config = LauncherConfig(app_root=tmp_path, scripts_dir=tmp_path / "elsewhere")
        assert config.resolved_scripts_dir() == tmp_path / "elsewhere"

    def test_app_root_defaults_to_cwd(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        assert LauncherConfig().resolved_app_root() == tmp_path.resolve()

    def test_target_config_to_target(self):
        target = TargetConfig(id="line", script="line.py", supports_player_name=True).to_target()
        assert target == LaunchTarget("line", "line.py", (), True)

    def test_empty_target_script_rejected(self):
        with pytest.raises(ValidationError):
            TargetConfig(id="line", script="")


# ==============================================================================
# Layered .env Tests
# ==============================================================================


class TestLoadLayeredEnv:
    """Test .env layering."""

    def test_project_overrides_user_but_not_os(self, tmp_path, monkeypatch):
        """Test precedence: OS env > project .env > user .env."""
        user_env = tmp_path / "user.env"
        user_env.write_text("PYTHON_EXECUTABLE=/user/python\nTERMINAL=xterm\nGAMELAUNCH_GRACE_MS=900\n")
        project_env = tmp_path / "project.env"
        project_env.write_text("PYTHON_EXECUTABLE=/project/python\nGAMELAUNCH_GRACE_MS=1200\n")

        # setenv first so monkeypatch restores whatever load_layered_env writes
        for var in ("PYTHON_EXECUTABLE", "TERMINAL"):
            monkeypatch.setenv(var, "")
            monkeypatch.delenv(var)
        monkeypatch.setenv("GAMELAUNCH_GRACE_MS", "700")

        applied = load_layered_env(user_env_paths=[user_env], project_env_paths=[project_env])

        assert os.environ["PYTHON_EXECUTABLE"] == "/project/python"
        assert os.environ["TERMINAL"] == "xterm"
        assert os.environ["GAMELAUNCH_GRACE_MS"] == "700"
        assert "GAMELAUNCH_GRACE_MS" not in applied

    def test_missing_files(self, tmp_path):
        """Test missing .env files are ignored."""
        load_layered_env(
            user_env_paths=[tmp_path / "none.env"], project_env_paths=[tmp_path / ".env"]
        )
