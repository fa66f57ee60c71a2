"""
Data models for the launch orchestrator.

Defines typed inputs and outputs for environment probing, process spawning
and strategy selection. All models are immutable once constructed.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class PlatformProfile(str, Enum):
    """Host platform classification used to pick a launch strategy."""

    WINDOWS = "windows"
    MACOS = "macos"
    LINUX = "linux"
    OTHER = "other"


class LaunchStrategy(str, Enum):
    """How a game ended up being started."""

    DIRECT = "direct"  # Interpreter spawned without a terminal window
    TERMINAL = "terminal"  # Wrapped in a terminal emulator window


@dataclass(frozen=True)
class LaunchTarget:
    """
    A named, runnable game script.

    Attributes:
        id: Unique registry key (e.g., "brick_breaker")
        script: Script path relative to the scripts root
        default_args: Arguments always passed to the script, in order
        accepts_name: Whether the script takes a player name parameter
    """

    id: str
    script: str
    default_args: tuple[str, ...] = ()
    accepts_name: bool = False


@dataclass(frozen=True)
class LaunchRequest:
    """
    A single launch request from a caller.

    Attributes:
        target_id: Registry key of the requested game
        player_name: Trimmed player name; empty string means "not supplied"
    """

    target_id: str
    player_name: str = ""

    @classmethod
    def create(cls, target_id: str, name: str | None = None) -> LaunchRequest:
        """Build a request, trimming the supplied name."""
        return cls(target_id=target_id, player_name=(name or "").strip())

    @property
    def has_name(self) -> bool:
        return bool(self.player_name)


@dataclass(frozen=True)
class TerminalCandidate:
    """A terminal emulator name and where it resolved on PATH (if anywhere)."""

    name: str
    path: str | None = None

    @property
    def resolved(self) -> bool:
        return self.path is not None


@dataclass(frozen=True)
class EnvironmentProbe:
    """
    Snapshot of the host environment as seen by the orchestrator.

    Attributes:
        platform: Detected platform profile
        interpreter: Interpreter path (or last-resort default name)
        terminals: Resolved terminal candidates in preference order
        has_gui_session: Whether DISPLAY or WAYLAND_DISPLAY is present
    """

    platform: PlatformProfile
    interpreter: str
    terminals: tuple[TerminalCandidate, ...] = ()
    has_gui_session: bool = False

    @property
    def preferred_terminal(self) -> TerminalCandidate | None:
        return self.terminals[0] if self.terminals else None


@dataclass(frozen=True)
class LaunchPlan:
    """
    Everything a strategy handler needs to start a game.

    Attributes:
        interpreter: Interpreter executable (path or bare name)
        script_path: Absolute path to the game script
        args: Final argument list (defaults, then the name flag pair)
        scripts_dir: Working directory for the game
        target_id: Registry key, for diagnostics
    """

    interpreter: str
    script_path: str
    args: tuple[str, ...]
    scripts_dir: str
    target_id: str = ""

    @property
    def command(self) -> list[str]:
        """Interpreter argv tail: script followed by its arguments."""
        return [self.script_path, *self.args]


@dataclass(frozen=True)
class SpawnResult:
    """
    Result of a spawn attempt.

    Attributes:
        started: True if the process is presumed running (or exited cleanly)
        error: Failure reason when started is False
        pid: Child pid when a process was created
        exit_code: Exit status if the child exited inside the grace window
        not_found: True if the executable itself could not be found
    """

    started: bool
    error: str | None = None
    pid: int | None = None
    exit_code: int | None = None
    not_found: bool = False


@dataclass(frozen=True)
class LaunchOutcome:
    """
    The single structured result returned for a launch request.

    Attributes:
        success: Whether the game was started
        strategy: Strategy that started it (None when nothing started)
        message: Advisory text, set when a fallback occurred
        error: Failure detail when success is False
        error_kind: Machine-readable failure category
    """

    success: bool
    strategy: LaunchStrategy | None = None
    message: str | None = None
    error: str | None = None
    error_kind: str | None = None

    @classmethod
    def ok(cls, strategy: LaunchStrategy, message: str | None = None) -> LaunchOutcome:
        return cls(success=True, strategy=strategy, message=message)

    @classmethod
    def failed(cls, error: str, kind: str = "launch_failed") -> LaunchOutcome:
        return cls(success=False, error=error, error_kind=kind)


__all__ = [
    "EnvironmentProbe",
    "LaunchOutcome",
    "LaunchPlan",
    "LaunchRequest",
    "LaunchStrategy",
    "LaunchTarget",
    "PlatformProfile",
    "SpawnResult",
    "TerminalCandidate",
]
