"""
Process spawning primitives for the launch orchestrator.

This module provides:
- Detached spawns that outlive the launcher (fire-and-forget)
- Supervised spawns that watch a child for a short grace window and report
  whether it failed fast

Terminal emulators that cannot acquire a display usually exit nonzero almost
immediately. A child that is still running when the grace window elapses, or
that exited with status 0, is presumed to have started correctly.

The supervisor polls the child with Popen.poll() every
POLL_INTERVAL_SECONDS inside asyncio.wait_for; it does not wait on an exit
signal, so an early exit is noticed up to one poll interval late.
"""

from __future__ import annotations

import asyncio
import logging
import signal
import subprocess
from collections.abc import Sequence
from typing import Any

from gamelaunch.core.launch.detector import detect_platform
from gamelaunch.core.launch.models import PlatformProfile, SpawnResult

logger = logging.getLogger(__name__)

GRACE_WINDOW_SECONDS = 0.6
POLL_INTERVAL_SECONDS = 0.02

# Windows process creation flags (values from winbase.h)
CREATE_NEW_CONSOLE = 0x00000010
CREATE_NEW_PROCESS_GROUP = 0x00000200


def _popen_kwargs(platform: PlatformProfile, *, new_console: bool) -> dict[str, Any]:
    """Process-group options so the child is decoupled from the launcher."""
    if platform == PlatformProfile.WINDOWS:
        flags = CREATE_NEW_PROCESS_GROUP
        if new_console:
            flags |= CREATE_NEW_CONSOLE
        return {"creationflags": flags}
    # Own session: no SIGHUP/SIGINT from the launcher's terminal
    return {"start_new_session": True}


def describe_exit(returncode: int) -> str:
    """
    Human-readable exit reason.

    Examples:
        >>> describe_exit(1)
        'exit code 1'
        >>> describe_exit(-15)
        'signal SIGTERM'
    """
    if returncode < 0:
        try:
            name = signal.Signals(-returncode).name
        except ValueError:
            name = str(-returncode)
        return f"signal {name}"
    return f"exit code {returncode}"


def spawn_detached(
    executable: str,
    args: Sequence[str],
    cwd: str | None = None,
    *,
    platform: PlatformProfile | None = None,
) -> int:
    """
    Start a process fully decoupled from the launcher and return at once.

    The child gets its own process group (its own console on Windows) and
    all standard streams are redirected to DEVNULL. Exiting the launcher
    never terminates it.

    Args:
        executable: Program to run
        args: Arguments after the program
        cwd: Working directory for the child
        platform: Platform whose process-group rules apply (defaults to host)

    Returns:
        Child pid

    Raises:
        OSError: If the executable (or cwd) cannot be used to start a process
    """
    platform = platform or detect_platform()
    command = [executable, *args]
    logger.debug(f"Spawning detached: {command} (cwd={cwd})")

    process = subprocess.Popen(
        command,
        cwd=cwd,
        stdin=subprocess.DEVNULL,
        stdout=subprocess.DEVNULL,
        stderr=subprocess.DEVNULL,
        **_popen_kwargs(platform, new_console=True),
    )
    return process.pid


async def _wait_for_exit(process: subprocess.Popen[bytes], poll_interval: float) -> int:
    while True:
        returncode = process.poll()
        if returncode is not None:
            return returncode
        await asyncio.sleep(poll_interval)


async def spawn_supervised(
    executable: str,
    args: Sequence[str],
    cwd: str | None = None,
    *,
    grace_seconds: float = GRACE_WINDOW_SECONDS,
    poll_interval: float = POLL_INTERVAL_SECONDS,
    platform: PlatformProfile | None = None,
) -> SpawnResult:
    """
    Start a process and watch it for a short grace window.

    Three outcomes race:
    - process creation fails (missing executable, bad cwd): failure
    - the child exits inside the window: success on status 0, else failure
      carrying the exit reason
    - the window elapses with the child still running: success

    A child that is still running is left alone; the supervisor never kills it.

    Args:
        executable: Program to run
        args: Arguments after the program
        cwd: Working directory for the child
        grace_seconds: Length of the grace window
        poll_interval: How often to check for an early exit
        platform: Platform whose process-group rules apply (defaults to host)

    Returns:
        SpawnResult describing the probe

    Example:
        >>> result = await spawn_supervised("xterm", ["-e", "bash"])
        >>> if not result.started:
        ...     print(result.error)
    """
    platform = platform or detect_platform()
    command = [executable, *args]
    logger.debug(f"Spawning supervised: {command} (cwd={cwd})")

    try:
        process = subprocess.Popen(
            command,
            cwd=cwd,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            **_popen_kwargs(platform, new_console=False),
        )
    except OSError as e:
        logger.debug(f"Spawn of {executable} failed: {e}")
        return SpawnResult(
            started=False, error=str(e), not_found=isinstance(e, FileNotFoundError)
        )

    try:
        returncode = await asyncio.wait_for(
            _wait_for_exit(process, poll_interval),
            timeout=grace_seconds,
        )
    except asyncio.TimeoutError:
        logger.debug(f"Process {process.pid} still running after {grace_seconds}s")
        return SpawnResult(started=True, pid=process.pid)

    if returncode == 0:
        return SpawnResult(started=True, pid=process.pid, exit_code=0)

    reason = f"{executable} failed ({describe_exit(returncode)})"
    logger.debug(reason)
    return SpawnResult(started=False, error=reason, pid=process.pid, exit_code=returncode)


__all__ = [
    "GRACE_WINDOW_SECONDS",
    "describe_exit",
    "spawn_detached",
    "spawn_supervised",
]
