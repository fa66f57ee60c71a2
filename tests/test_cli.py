"""
Tests for the gamelaunch CLI.

Runs the Typer app in a temporary install with isolated config and data
directories. Launches are patched at the service boundary.
"""

import sys
from collections.abc import Generator
from pathlib import Path
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from gamelaunch import __version__
from gamelaunch.cli import app
from gamelaunch.cli.errors import ExitCode, exit_code_for
from gamelaunch.cli.launch import format_status
from gamelaunch.core.launch import LaunchOutcome, LaunchStrategy, OutcomeEvent, OutcomeLog
from gamelaunch.core.services.launch import LaunchService
from gamelaunch.core.state import PlayerNameStore

runner = CliRunner()

LAUNCH_SYNC = "gamelaunch.cli.launch.LaunchService.launch_sync"


@pytest.fixture
def cli_env(
    isolated_home: Path, app_root: Path, monkeypatch: pytest.MonkeyPatch
) -> Generator[Path, None, None]:
    """Run commands from the home dir with the app root taken from the environment."""
    monkeypatch.chdir(isolated_home)
    monkeypatch.setenv("GAMELAUNCH_APP_ROOT", str(app_root))
    monkeypatch.setenv("PYTHON_EXECUTABLE", sys.executable)
    yield app_root


# ==============================================================================
# Helper Tests
# ==============================================================================


class TestFormatStatus:
    """Test the success status line."""

    def test_terminal(self) -> None:
        outcome = LaunchOutcome.ok(LaunchStrategy.TERMINAL)
        assert format_status(outcome) == "Launched in a new terminal window."

    def test_direct_with_player(self) -> None:
        outcome = LaunchOutcome.ok(LaunchStrategy.DIRECT)
        assert format_status(outcome, "Ada") == "Launched for Ada."

    def test_advisory_message_appended(self) -> None:
        outcome = LaunchOutcome.ok(LaunchStrategy.DIRECT, "No terminal found; ran directly.")
        assert format_status(outcome) == "Launched. No terminal found; ran directly."


class TestExitCodeFor:
    """Test outcome to exit code mapping."""

    def test_success(self) -> None:
        assert exit_code_for(LaunchOutcome.ok(LaunchStrategy.DIRECT)) == ExitCode.SUCCESS

    def test_user_errors(self) -> None:
        assert exit_code_for(LaunchOutcome.failed("x", "unknown_target")) == ExitCode.USER_ERROR
        assert exit_code_for(LaunchOutcome.failed("x", "script_not_found")) == ExitCode.USER_ERROR

    def test_launch_failure(self) -> None:
        assert exit_code_for(LaunchOutcome.failed("x")) == ExitCode.GENERAL_ERROR


# ==============================================================================
# Command Tests
# ==============================================================================


class TestLaunchCommand:
    """Test `gamelaunch launch`."""

    def test_success(self, cli_env: Path) -> None:
        """Test a successful launch prints the status line and exits 0."""
        outcome = LaunchOutcome.ok(LaunchStrategy.TERMINAL)
        with patch(LAUNCH_SYNC, return_value=outcome) as launch_sync:
            result = runner.invoke(app, ["launch", "line", "--name", " Ada "])

        assert result.exit_code == 0
        assert "Launched in a new terminal window for Ada." in result.output
        launch_sync.assert_called_once_with("line", "Ada")

    def test_name_remembered(self, cli_env: Path) -> None:
        """Test the last name is reused when --name is omitted."""
        outcome = LaunchOutcome.ok(LaunchStrategy.DIRECT)
        with patch(LAUNCH_SYNC, return_value=outcome) as launch_sync:
            runner.invoke(app, ["launch", "line", "-n", "Ada"])
            runner.invoke(app, ["launch", "hole"])

        assert launch_sync.call_args_list[1].args == ("hole", "Ada")
        assert PlayerNameStore.default().load() == "Ada"

    def test_no_remember(self, cli_env: Path) -> None:
        PlayerNameStore.default().save("Ada")
        outcome = LaunchOutcome.ok(LaunchStrategy.DIRECT)
        with patch(LAUNCH_SYNC, return_value=outcome) as launch_sync:
            runner.invoke(app, ["launch", "hole", "--no-remember"])

        launch_sync.assert_called_once_with("hole", "")

    def test_unknown_target(self, cli_env: Path) -> None:
        """Test an unknown game exits with the user error code."""
        result = runner.invoke(app, ["launch", "pong", "--no-remember"])

        assert result.exit_code == ExitCode.USER_ERROR
        assert "Launch failed" in result.output
        assert "Unknown game selection" in result.output

    def test_interrupted(self, cli_env: Path) -> None:
        """Test Ctrl+C during the grace window exits with 130."""
        with patch(LAUNCH_SYNC, side_effect=KeyboardInterrupt):
            result = runner.invoke(app, ["launch", "line", "--no-remember"])

        assert result.exit_code == ExitCode.SIGINT

    def test_launch_failure(self, cli_env: Path) -> None:
        outcome = LaunchOutcome.failed("Failed to start game with Python (python3): boom")
        with patch(LAUNCH_SYNC, return_value=outcome):
            result = runner.invoke(app, ["launch", "line", "--no-remember"])

        assert result.exit_code == ExitCode.GENERAL_ERROR
        assert "gamelaunch doctor" in result.output

    @pytest.mark.skipif(not sys.platform.startswith("linux"), reason="exercises the linux cascade")
    def test_real_launch_is_logged(self, cli_env: Path, monkeypatch) -> None:
        """Test an unpatched launch runs the script and writes the outcome log."""
        monkeypatch.delenv("DISPLAY", raising=False)
        monkeypatch.delenv("WAYLAND_DISPLAY", raising=False)
        result = runner.invoke(app, ["launch", "line", "--no-remember"])

        assert result.exit_code == 0, result.output
        entries = LaunchService.from_config().outcome_log.read_entries()
        assert [e.event for e in entries] == [OutcomeEvent.LAUNCH_OK.value]


class TestLaunchHelp:
    """Test `gamelaunch launch --help`."""

    def test_mentions_app_root_override(self) -> None:
        result = runner.invoke(app, ["launch", "--help"])

        assert result.exit_code == 0
        assert "GAMELAUNCH_APP_ROOT" in result.output


class TestTargetsCommand:
    """Test `gamelaunch targets`."""

    def test_lists_targets(self, cli_env: Path) -> None:
        result = runner.invoke(app, ["targets"])

        assert result.exit_code == 0
        for target_id in ("brick_breaker", "subway_surfers", "line", "hole"):
            assert target_id in result.output

    def test_marks_missing_scripts(self, cli_env: Path) -> None:
        (cli_env / "lib" / "wrappers" / "python" / "hole.py").unlink()
        result = runner.invoke(app, ["targets"])
        assert "missing" in result.output


class TestDoctorCommand:
    """Test `gamelaunch doctor`."""

    def test_reports_environment(self, cli_env: Path) -> None:
        result = runner.invoke(app, ["doctor"])

        assert result.exit_code == 0
        assert "gamelaunch doctor" in result.output
        assert "Launch strategy" in result.output


class TestLogCommand:
    """Test `gamelaunch log`."""

    def test_empty(self, cli_env: Path) -> None:
        result = runner.invoke(app, ["log"])
        assert result.exit_code == 0
        assert "No launches recorded" in result.output

    def test_shows_entries(self, cli_env: Path, tmp_path: Path, monkeypatch) -> None:
        log_file = tmp_path / "custom.log"
        monkeypatch.setenv("GAMELAUNCH_LOG_FILE", str(log_file))
        OutcomeLog(log_file).record(OutcomeEvent.LAUNCH_OK, "line", strategy="terminal")

        result = runner.invoke(app, ["log", "--limit", "5"])

        assert result.exit_code == 0
        assert "launch_ok" in result.output
        assert "line" in result.output


class TestVersionCommand:
    """Test `gamelaunch version`."""

    def test_version(self) -> None:
        result = runner.invoke(app, ["version"])
        assert result.exit_code == 0
        assert __version__ in result.output
