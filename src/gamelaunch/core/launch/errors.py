"""
Exceptions raised by the launch orchestrator.

Each error carries a ``kind`` string that the launch service copies into
``LaunchOutcome.error_kind`` so callers can branch without parsing messages.
"""

from __future__ import annotations


class LauncherError(Exception):
    """Base exception for launcher errors."""

    kind = "launch_failed"


class UnknownTargetError(LauncherError):
    """Target identifier is not in the registry."""

    kind = "unknown_target"

    def __init__(self, target_id: str) -> None:
        self.target_id = target_id
        super().__init__(f"Unknown game selection: '{target_id}'")


class ScriptNotFoundError(LauncherError):
    """Resolved script (or its scripts directory) does not exist."""

    kind = "script_not_found"

    def __init__(self, path: str, *, is_dir: bool = False) -> None:
        self.path = path
        self.is_dir = is_dir
        what = "Scripts directory" if is_dir else "Game script"
        super().__init__(f"{what} not found: {path}")


class InterpreterNotFoundError(LauncherError):
    """Every interpreter lookup failed and the default name would not start."""

    kind = "interpreter_not_found"

    def __init__(self, interpreter: str, reason: str) -> None:
        self.interpreter = interpreter
        self.reason = reason
        super().__init__(
            f"No Python interpreter found (tried '{interpreter}'): {reason}. "
            "Set PYTHON_EXECUTABLE or create a .venv next to the launcher."
        )


class TerminalLaunchFailedError(LauncherError):
    """Terminal emulator failed to open a window. Recoverable on linux."""

    def __init__(self, terminal: str, reason: str) -> None:
        self.terminal = terminal
        self.reason = reason
        super().__init__(reason)


class DirectLaunchFailedError(LauncherError):
    """Interpreter could not be started directly. Fatal for the request."""

    def __init__(self, interpreter: str, reason: str) -> None:
        self.interpreter = interpreter
        self.reason = reason
        super().__init__(f"Failed to start game with Python ({interpreter}): {reason}")


__all__ = [
    "DirectLaunchFailedError",
    "InterpreterNotFoundError",
    "LauncherError",
    "ScriptNotFoundError",
    "TerminalLaunchFailedError",
    "UnknownTargetError",
]
