"""
Per-platform launch strategies.

Each PlatformProfile maps to one handler behind a shared interface:

    windows -> WindowsStrategy  detached interpreter, no fallback
    macos   -> MacOSStrategy    new Terminal.app window via osascript
    linux   -> LinuxStrategy    terminal emulator, falling back to direct
    other   -> DirectStrategy   supervised interpreter

Handlers always return a LaunchOutcome. Internally, failures travel as
LauncherError subclasses so the linux handler can recover from a terminal
failure by cascading to a direct launch.
"""

from __future__ import annotations

import logging
import os
import shlex
from collections.abc import Mapping, Sequence
from typing import Protocol

from gamelaunch.core.launch.detector import (
    has_graphical_session,
    is_default_interpreter_name,
    list_available_terminals,
)
from gamelaunch.core.launch.errors import (
    DirectLaunchFailedError,
    InterpreterNotFoundError,
    LauncherError,
    TerminalLaunchFailedError,
)
from gamelaunch.core.launch.models import (
    LaunchOutcome,
    LaunchPlan,
    LaunchStrategy,
    LaunchTarget,
    PlatformProfile,
    TerminalCandidate,
)
from gamelaunch.core.launch.outcome_log import OutcomeEvent, OutcomeLog
from gamelaunch.core.launch.spawner import (
    GRACE_WINDOW_SECONDS,
    spawn_detached,
    spawn_supervised,
)

logger = logging.getLogger(__name__)

DEFAULT_NAME_FLAG = "--player-name"

# cd into $1, drop it, exec the rest: no manual quoting of player names
SHELL_LAUNCH_SCRIPT = 'cd "$1" && shift && exec "$@"'

# Emulators whose wrapped command follows a bare "--" separator
SEPARATOR_TERMINALS = ("gnome-terminal", "mate-terminal")
# Emulators that take the command after -x
EXEC_FLAG_TERMINALS = ("xfce4-terminal",)

NO_TERMINAL_MESSAGE = "No terminal found; ran directly."
NO_GUI_MESSAGE = "No GUI session detected; ran directly."


def build_game_args(
    target: LaunchTarget, player_name: str = "", name_flag: str = DEFAULT_NAME_FLAG
) -> list[str]:
    """
    Build the argument list passed to a game script.

    Default arguments always come first; the name flag and value are appended
    only if the target accepts a name and one was supplied.

    Examples:
        >>> target = LaunchTarget("line", "line.py", ("--physical",), True)
        >>> build_game_args(target, "Ada")
        ['--physical', '--player-name', 'Ada']
        >>> build_game_args(target, "  ")
        ['--physical']
    """
    args = list(target.default_args)
    name = player_name.strip()
    if target.accepts_name and name:
        args.extend([name_flag, name])
    return args


def build_shell_args(plan: LaunchPlan) -> list[str]:
    """
    Arguments for ``bash`` that cd into the scripts dir and exec the game.

    Paths and arguments travel as positional parameters ($1, $@).
    """
    return [
        "-lc",
        SHELL_LAUNCH_SCRIPT,
        "bash",
        plan.scripts_dir,
        plan.interpreter,
        *plan.command,
    ]


def build_terminal_args(terminal_name: str, shell_args: Sequence[str]) -> list[str]:
    """
    Wrap a bash invocation in the flag convention of a terminal emulator.

    Examples:
        >>> build_terminal_args("gnome-terminal", ["-lc", "true"])
        ['--', 'bash', '-lc', 'true']
        >>> build_terminal_args("xterm", ["-lc", "true"])
        ['-e', 'bash', '-lc', 'true']
    """
    name = os.path.basename(terminal_name)
    if name in SEPARATOR_TERMINALS:
        prefix = ["--"]
    elif name in EXEC_FLAG_TERMINALS:
        prefix = ["-x"]
    else:
        prefix = ["-e"]
    return [*prefix, "bash", *shell_args]


def build_osascript(plan: LaunchPlan) -> str:
    """
    AppleScript that opens a Terminal.app window running the game.

    The shell command is quoted for the shell, then escaped for the
    AppleScript string literal.
    """
    cd = f"cd {shlex.quote(plan.scripts_dir)}"
    run = " ".join(shlex.quote(part) for part in [plan.interpreter, *plan.command])
    shell_command = f"{cd} && {run}"
    escaped = shell_command.replace("\\", "\\\\").replace('"', '\\"')
    return f'tell application "Terminal" to do script "{escaped}"'


def _direct_error(interpreter: str, reason: str, not_found: bool) -> LauncherError:
    if not_found and is_default_interpreter_name(interpreter):
        return InterpreterNotFoundError(interpreter, reason)
    return DirectLaunchFailedError(interpreter, reason)


class StrategyHandler(Protocol):
    """Shared interface of the per-platform handlers."""

    async def attempt(self, plan: LaunchPlan) -> LaunchOutcome: ...


class _BaseStrategy:
    def __init__(self, outcome_log: OutcomeLog | None = None) -> None:
        self._outcome_log = outcome_log

    def _record(self, event: OutcomeEvent, plan: LaunchPlan, **data: object) -> None:
        if self._outcome_log is not None:
            self._outcome_log.record(event, plan.target_id, **data)

    async def attempt(self, plan: LaunchPlan) -> LaunchOutcome:
        try:
            return await self._launch(plan)
        except LauncherError as e:
            return LaunchOutcome.failed(str(e), e.kind)

    async def _launch(self, plan: LaunchPlan) -> LaunchOutcome:
        raise NotImplementedError


class DirectStrategy(_BaseStrategy):
    """Supervised interpreter spawn without a terminal window."""

    def __init__(
        self,
        outcome_log: OutcomeLog | None = None,
        *,
        grace_seconds: float = GRACE_WINDOW_SECONDS,
        platform: PlatformProfile | None = None,
    ) -> None:
        super().__init__(outcome_log)
        self._grace_seconds = grace_seconds
        self._platform = platform

    async def _launch(self, plan: LaunchPlan) -> LaunchOutcome:
        await self.run(plan)
        return LaunchOutcome.ok(LaunchStrategy.DIRECT)

    async def run(self, plan: LaunchPlan) -> None:
        """
        Start the interpreter directly and probe for an immediate failure.

        Raises:
            InterpreterNotFoundError: If the default interpreter name is missing
            DirectLaunchFailedError: For any other startup failure
        """
        result = await spawn_supervised(
            plan.interpreter,
            plan.command,
            plan.scripts_dir,
            grace_seconds=self._grace_seconds,
            platform=self._platform,
        )
        if result.started:
            return

        reason = result.error or "unknown error"
        logger.warning(
            f"Direct launch failed: python={plan.interpreter} "
            f"script={plan.script_path} args={list(plan.args)} err={reason}"
        )
        self._record(
            OutcomeEvent.DIRECT_FAILED,
            plan,
            interpreter=plan.interpreter,
            script=plan.script_path,
            args=list(plan.args),
            error=reason,
        )
        raise _direct_error(plan.interpreter, reason, result.not_found)


class WindowsStrategy(_BaseStrategy):
    """Detached interpreter in its own console. There is no fallback."""

    async def _launch(self, plan: LaunchPlan) -> LaunchOutcome:
        interpreter = os.path.normpath(plan.interpreter)
        script = os.path.normpath(plan.script_path)
        try:
            spawn_detached(
                interpreter,
                [script, *plan.args],
                plan.scripts_dir,
                platform=PlatformProfile.WINDOWS,
            )
        except OSError as e:
            raise _direct_error(
                plan.interpreter, str(e), isinstance(e, FileNotFoundError)
            ) from e
        return LaunchOutcome.ok(LaunchStrategy.DIRECT)


class MacOSStrategy(_BaseStrategy):
    """
    Open a Terminal.app window through osascript.

    Only the dispatch of osascript itself is checked; the opened window is
    not probed.
    """

    async def _launch(self, plan: LaunchPlan) -> LaunchOutcome:
        try:
            spawn_detached(
                "osascript",
                ["-e", build_osascript(plan)],
                plan.scripts_dir,
                platform=PlatformProfile.MACOS,
            )
        except OSError as e:
            raise TerminalLaunchFailedError("osascript", f"osascript failed ({e})") from e
        return LaunchOutcome.ok(LaunchStrategy.TERMINAL)


class LinuxStrategy(_BaseStrategy):
    """
    Terminal emulator first, supervised direct launch as the fallback.

    States:
        1. Check for a GUI session and the first resolvable terminal
        2. Both present: run the game inside the terminal, probing it
        3. Otherwise, or if step 2 failed: run the interpreter directly
    """

    def __init__(
        self,
        outcome_log: OutcomeLog | None = None,
        *,
        grace_seconds: float = GRACE_WINDOW_SECONDS,
        env: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(outcome_log)
        self._grace_seconds = grace_seconds
        self._env = env
        self._direct = DirectStrategy(
            outcome_log, grace_seconds=grace_seconds, platform=PlatformProfile.LINUX
        )

    def _first_terminal(self) -> TerminalCandidate | None:
        terminals = list_available_terminals(platform=PlatformProfile.LINUX, env=self._env)
        return terminals[0] if terminals else None

    async def run_in_terminal(self, terminal: TerminalCandidate, plan: LaunchPlan) -> None:
        """
        Run the game inside a terminal emulator window.

        Raises:
            TerminalLaunchFailedError: If the emulator fails within the grace window
        """
        args = build_terminal_args(terminal.name, build_shell_args(plan))
        result = await spawn_supervised(
            terminal.path or terminal.name,
            args,
            grace_seconds=self._grace_seconds,
            platform=PlatformProfile.LINUX,
        )
        if not result.started:
            raise TerminalLaunchFailedError(terminal.name, result.error or "unknown error")

    async def _launch(self, plan: LaunchPlan) -> LaunchOutcome:
        gui = has_graphical_session(self._env)
        terminal = self._first_terminal()

        if terminal is not None and gui:
            try:
                await self.run_in_terminal(terminal, plan)
                return LaunchOutcome.ok(LaunchStrategy.TERMINAL)
            except TerminalLaunchFailedError as e:
                logger.warning(
                    f"Terminal launch failed: terminal={e.terminal} reason={e.reason}. "
                    "Falling back to direct."
                )
                self._record(
                    OutcomeEvent.TERMINAL_FALLBACK,
                    plan,
                    terminal=e.terminal,
                    reason=e.reason,
                )
                try:
                    await self._direct.run(plan)
                except LauncherError as direct_error:
                    return LaunchOutcome(
                        success=False,
                        message=(
                            f"Terminal launch failed ({e.reason}); "
                            "direct launch also failed."
                        ),
                        error=str(direct_error),
                        error_kind=direct_error.kind,
                    )
                return LaunchOutcome.ok(
                    LaunchStrategy.DIRECT,
                    f"Terminal launch failed; ran directly. ({e.reason})",
                )

        # No GUI session or no terminal: still run the game
        await self._direct.run(plan)
        return LaunchOutcome.ok(
            LaunchStrategy.DIRECT, NO_TERMINAL_MESSAGE if gui else NO_GUI_MESSAGE
        )


def select_strategy(
    platform: PlatformProfile,
    *,
    outcome_log: OutcomeLog | None = None,
    grace_seconds: float = GRACE_WINDOW_SECONDS,
    env: Mapping[str, str] | None = None,
) -> StrategyHandler:
    """
    Pick the launch handler for a platform.

    Args:
        platform: Detected platform profile
        outcome_log: Where fallbacks and direct failures are recorded
        grace_seconds: Grace window for supervised spawns
        env: Environment mapping for terminal/GUI probing (defaults to os.environ)

    Returns:
        Handler implementing ``attempt(plan) -> LaunchOutcome``
    """
    handlers: dict[PlatformProfile, StrategyHandler] = {
        PlatformProfile.WINDOWS: WindowsStrategy(outcome_log),
        PlatformProfile.MACOS: MacOSStrategy(outcome_log),
        PlatformProfile.LINUX: LinuxStrategy(
            outcome_log, grace_seconds=grace_seconds, env=env
        ),
        PlatformProfile.OTHER: DirectStrategy(outcome_log, grace_seconds=grace_seconds),
    }
    return handlers[platform]


__all__ = [
    "DEFAULT_NAME_FLAG",
    "DirectStrategy",
    "LinuxStrategy",
    "MacOSStrategy",
    "StrategyHandler",
    "WindowsStrategy",
    "build_game_args",
    "build_osascript",
    "build_shell_args",
    "build_terminal_args",
    "select_strategy",
]
