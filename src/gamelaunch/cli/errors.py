"""
Standardized error handling and exit codes for the gamelaunch CLI.

Provides consistent error messaging with actionable guidance and
standardized exit codes across all commands.
"""

from enum import IntEnum

from rich.console import Console
from rich.markup import escape

from gamelaunch.core.launch import LaunchOutcome

console = Console()


class ExitCode(IntEnum):
    """Standard exit codes for gamelaunch CLI operations."""

    SUCCESS = 0
    """The game was started."""

    GENERAL_ERROR = 1
    """The game could not be started."""

    USER_ERROR = 2
    """Unknown game or missing script (fixable by the user)."""

    SIGINT = 130
    """Terminated by SIGINT (Ctrl+C) - Unix standard."""


def print_error(
    problem: str,
    *,
    reason: str | None = None,
    solution: str | None = None,
) -> None:
    """
    Print an error in the launcher's three-line format.

    Args:
        problem: One-line summary shown after "Error:"
        reason: Underlying detail, dimmed
        solution: Command or setting that usually fixes it

    Example:
        >>> print_error(
        ...     "Game script not found",
        ...     reason="/opt/wall/lib/wrappers/python/line.py does not exist",
        ...     solution="gamelaunch doctor",
        ... )
    """
    console.print(f"[red]Error:[/red] {escape(problem)}")

    if reason:
        console.print(f"[dim]{escape(reason)}[/dim]")

    if solution:
        console.print(f"[cyan]→ Try:[/cyan] {solution}")


_SOLUTIONS = {
    "unknown_target": "gamelaunch targets  # to see available games",
    "script_not_found": "gamelaunch doctor  # check the scripts directory",
    "interpreter_not_found": "export PYTHON_EXECUTABLE=/path/to/python",
    "launch_failed": "gamelaunch doctor  # check interpreter and terminals",
}


def print_launch_failure(outcome: LaunchOutcome) -> None:
    """Print a failed LaunchOutcome."""
    print_error(
        "Launch failed",
        reason=outcome.error if not outcome.message else f"{outcome.message}\n{outcome.error}",
        solution=_SOLUTIONS.get(outcome.error_kind or "launch_failed"),
    )


def exit_code_for(outcome: LaunchOutcome) -> ExitCode:
    """Map an outcome to the CLI exit code."""
    if outcome.success:
        return ExitCode.SUCCESS
    if outcome.error_kind in ("unknown_target", "script_not_found"):
        return ExitCode.USER_ERROR
    return ExitCode.GENERAL_ERROR
