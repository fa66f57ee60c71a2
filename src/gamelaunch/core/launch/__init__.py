"""
Launch orchestrator for game scripts.

This package decides how a game script is started on the current host:
resolving the target, probing the environment (platform, interpreter,
terminal emulators, GUI session), spawning the process and falling back to
a safer strategy when a terminal fails to open.

Modules:
    registry: Static table of launch targets
    detector: Platform, interpreter, terminal and GUI session probing
    spawner: Detached and supervised process spawning
    strategies: Per-platform launch handlers and argument assembly
    outcome_log: Append-only JSONL log of launch attempts
    models: Data models (LaunchTarget, LaunchOutcome, ...)
    errors: Exception hierarchy

Example Usage:
    >>> from gamelaunch.core.launch import TargetRegistry, select_strategy
    >>> target = TargetRegistry.default().resolve("brick_breaker")
    >>> handler = select_strategy(detect_platform())
    >>> outcome = await handler.attempt(plan)
"""

from gamelaunch.core.launch.detector import (
    clear_cache,
    detect_platform,
    find_executable_on_path,
    has_graphical_session,
    list_available_terminals,
    probe_environment,
    resolve_interpreter,
)
from gamelaunch.core.launch.errors import (
    DirectLaunchFailedError,
    InterpreterNotFoundError,
    LauncherError,
    ScriptNotFoundError,
    TerminalLaunchFailedError,
    UnknownTargetError,
)
from gamelaunch.core.launch.models import (
    EnvironmentProbe,
    LaunchOutcome,
    LaunchPlan,
    LaunchRequest,
    LaunchStrategy,
    LaunchTarget,
    PlatformProfile,
    SpawnResult,
    TerminalCandidate,
)
from gamelaunch.core.launch.outcome_log import (
    OutcomeEvent,
    OutcomeLog,
    OutcomeLogEntry,
    default_log_path,
)
from gamelaunch.core.launch.registry import DEFAULT_TARGETS, TargetRegistry
from gamelaunch.core.launch.spawner import (
    GRACE_WINDOW_SECONDS,
    spawn_detached,
    spawn_supervised,
)
from gamelaunch.core.launch.strategies import (
    build_game_args,
    build_terminal_args,
    select_strategy,
)

__all__ = [
    # Registry
    "DEFAULT_TARGETS",
    "TargetRegistry",
    # Detector
    "clear_cache",
    "detect_platform",
    "find_executable_on_path",
    "has_graphical_session",
    "list_available_terminals",
    "probe_environment",
    "resolve_interpreter",
    # Spawner
    "GRACE_WINDOW_SECONDS",
    "spawn_detached",
    "spawn_supervised",
    # Strategies
    "build_game_args",
    "build_terminal_args",
    "select_strategy",
    # Outcome log
    "OutcomeEvent",
    "OutcomeLog",
    "OutcomeLogEntry",
    "default_log_path",
    # Errors
    "DirectLaunchFailedError",
    "InterpreterNotFoundError",
    "LauncherError",
    "ScriptNotFoundError",
    "TerminalLaunchFailedError",
    "UnknownTargetError",
    # Models
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
