"""
Environment probing for the launch orchestrator.

Detects the host platform, resolves a Python interpreter for the game
scripts, discovers terminal emulators on PATH and checks for a graphical
session. Platform and interpreter are resolved once per process and cached.
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Mapping
from pathlib import Path

from gamelaunch.core.launch.models import (
    EnvironmentProbe,
    PlatformProfile,
    TerminalCandidate,
)

logger = logging.getLogger(__name__)

INTERPRETER_ENV_VAR = "PYTHON_EXECUTABLE"
TERMINAL_ENV_VAR = "TERMINAL"
GUI_SESSION_ENV_VARS = ("DISPLAY", "WAYLAND_DISPLAY")
DEFAULT_PATHEXT = (".EXE", ".CMD", ".BAT")

LINUX_TERMINALS = (
    "x-terminal-emulator",
    "gnome-terminal",
    "konsole",
    "xfce4-terminal",
    "xterm",
    "lxterminal",
    "mate-terminal",
)

# Process-wide caches, written at most once
_platform_cache: PlatformProfile | None = None
_interpreter_cache: str | None = None


def detect_platform(use_cache: bool = True) -> PlatformProfile:
    """
    Classify the host platform.

    Returns:
        PlatformProfile for sys.platform (cached after the first call)
    """
    global _platform_cache

    if use_cache and _platform_cache is not None:
        return _platform_cache

    if sys.platform == "win32":
        profile = PlatformProfile.WINDOWS
    elif sys.platform == "darwin":
        profile = PlatformProfile.MACOS
    elif sys.platform.startswith("linux"):
        profile = PlatformProfile.LINUX
    else:
        profile = PlatformProfile.OTHER

    if use_cache:
        _platform_cache = profile
    return profile


def _is_executable_file(path: str) -> bool:
    return os.path.isfile(path) and os.access(path, os.X_OK)


def executable_suffixes(
    platform: PlatformProfile, env: Mapping[str, str] | None = None
) -> list[str]:
    """Suffixes to try for each PATH entry (PATHEXT on Windows, bare name elsewhere)."""
    if platform != PlatformProfile.WINDOWS:
        return [""]
    env = os.environ if env is None else env
    pathext = env.get("PATHEXT")
    if pathext:
        return [ext for ext in pathext.split(";") if ext]
    return list(DEFAULT_PATHEXT)


def find_executable_on_path(
    command: str,
    *,
    platform: PlatformProfile | None = None,
    env: Mapping[str, str] | None = None,
) -> str | None:
    """
    Scan PATH for an executable.

    Directories are scanned in listed order; within a directory every suffix
    is tried before moving to the next directory. A candidate must exist and
    be executable.

    Args:
        command: Bare command name, or a path containing a separator
        platform: Platform whose suffix rules apply (defaults to host)
        env: Environment mapping (defaults to os.environ)

    Returns:
        Absolute path of the first match, or None

    Examples:
        >>> find_executable_on_path("sh")  # doctest: +SKIP
        '/usr/bin/sh'
        >>> find_executable_on_path("definitely-not-installed") is None
        True
    """
    if not command:
        return None
    env = os.environ if env is None else env
    platform = platform or detect_platform()

    if os.sep in command or (os.altsep and os.altsep in command):
        return command if _is_executable_file(command) else None

    suffixes = executable_suffixes(platform, env)
    for directory in env.get("PATH", "").split(os.pathsep):
        if not directory:
            continue
        for suffix in suffixes:
            candidate = os.path.join(directory, f"{command}{suffix}")
            if _is_executable_file(candidate):
                return candidate
    return None


def venv_interpreter_candidates(app_root: Path) -> list[Path]:
    """
    Conventional virtualenv interpreter locations around the install root.

    Order: Windows layouts for the root and two parents, then for each of
    those directories the POSIX ``python`` and ``python3`` layouts.
    """
    root = Path(os.path.abspath(app_root))
    levels = [root, root.parent, root.parent.parent]

    candidates = [level / ".venv" / "Scripts" / "python.exe" for level in levels]
    for level in levels:
        candidates.append(level / ".venv" / "bin" / "python")
        candidates.append(level / ".venv" / "bin" / "python3")
    return candidates


def resolve_interpreter(
    app_root: Path,
    *,
    platform: PlatformProfile | None = None,
    env: Mapping[str, str] | None = None,
    use_cache: bool = True,
) -> str:
    """
    Resolve the Python interpreter used to run game scripts.

    Search order:
        1. PYTHON_EXECUTABLE, trusted without an existence check
        2. .venv interpreters next to (or above) the install root
        3. PATH scan (python/py on Windows, python3/python elsewhere)
        4. Default name (python.exe / python3); spawning may still fail

    The first result is cached for the lifetime of the process.

    Args:
        app_root: Launcher install root
        platform: Platform profile (defaults to host)
        env: Environment mapping (defaults to os.environ)
        use_cache: If False, ignore and do not consult the cache

    Returns:
        Interpreter path or default command name
    """
    global _interpreter_cache

    if use_cache and _interpreter_cache is not None:
        return _interpreter_cache

    env = os.environ if env is None else env
    platform = platform or detect_platform()
    interpreter = _resolve_interpreter_uncached(app_root, platform, env)
    logger.debug(f"Resolved interpreter: {interpreter}")

    if use_cache:
        _interpreter_cache = interpreter
    return interpreter


def _resolve_interpreter_uncached(
    app_root: Path, platform: PlatformProfile, env: Mapping[str, str]
) -> str:
    if override := env.get(INTERPRETER_ENV_VAR):
        return override

    for candidate in venv_interpreter_candidates(app_root):
        if candidate.exists():
            return str(candidate)

    if platform == PlatformProfile.WINDOWS:
        names, default = ("python", "py"), "python.exe"
    else:
        names, default = ("python3", "python"), "python3"

    for name in names:
        if found := find_executable_on_path(name, platform=platform, env=env):
            return found
    return default


def is_default_interpreter_name(interpreter: str) -> bool:
    """True if resolution fell all the way through to the bare default name."""
    return interpreter in ("python3", "python.exe")


def terminal_preferences(
    platform: PlatformProfile, env: Mapping[str, str] | None = None
) -> list[str]:
    """
    Terminal emulator names in preference order.

    The TERMINAL override always comes first. On linux the common GUI
    emulators follow; other platforms only honour the override.
    """
    env = os.environ if env is None else env
    preferred: list[str] = []
    if override := env.get(TERMINAL_ENV_VAR, "").strip():
        preferred.append(override)

    if platform == PlatformProfile.LINUX:
        preferred.extend(LINUX_TERMINALS)
    return preferred


def list_available_terminals(
    *,
    platform: PlatformProfile | None = None,
    env: Mapping[str, str] | None = None,
) -> list[TerminalCandidate]:
    """Resolved terminal candidates, in preference order."""
    platform = platform or detect_platform()
    available = []
    for name in terminal_preferences(platform, env):
        path = find_executable_on_path(name, platform=platform, env=env)
        if path is not None:
            available.append(TerminalCandidate(name=name, path=path))
    return available


def has_graphical_session(env: Mapping[str, str] | None = None) -> bool:
    """Whether DISPLAY or WAYLAND_DISPLAY is set."""
    env = os.environ if env is None else env
    return any(env.get(var) for var in GUI_SESSION_ENV_VARS)


def probe_environment(
    app_root: Path,
    *,
    platform: PlatformProfile | None = None,
    interpreter: str | None = None,
    env: Mapping[str, str] | None = None,
) -> EnvironmentProbe:
    """
    Take a snapshot of everything the strategy selector consults.

    Args:
        app_root: Launcher install root (for interpreter resolution)
        platform: Already-resolved platform, if any
        interpreter: Already-resolved interpreter, if any
        env: Environment mapping (defaults to os.environ)
    """
    platform = platform or detect_platform()
    if interpreter is None:
        interpreter = resolve_interpreter(app_root, platform=platform, env=env)
    return EnvironmentProbe(
        platform=platform,
        interpreter=interpreter,
        terminals=tuple(list_available_terminals(platform=platform, env=env)),
        has_gui_session=has_graphical_session(env),
    )


def clear_cache() -> None:
    """
    Forget the cached platform and interpreter.

    Useful for testing; a running launcher never re-resolves.
    """
    global _platform_cache, _interpreter_cache
    _platform_cache = None
    _interpreter_cache = None


__all__ = [
    "GUI_SESSION_ENV_VARS",
    "INTERPRETER_ENV_VAR",
    "LINUX_TERMINALS",
    "TERMINAL_ENV_VAR",
    "clear_cache",
    "detect_platform",
    "executable_suffixes",
    "find_executable_on_path",
    "has_graphical_session",
    "is_default_interpreter_name",
    "list_available_terminals",
    "probe_environment",
    "resolve_interpreter",
    "terminal_preferences",
    "venv_interpreter_candidates",
]
