"""
gamelaunch CLI - Doctor command.

Shows what the launch orchestrator sees on this machine: platform,
interpreter, terminal emulators and GUI session.
"""

from pathlib import Path

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from gamelaunch.core.launch import PlatformProfile
from gamelaunch.core.launch.detector import terminal_preferences
from gamelaunch.core.services.launch import LaunchService

console = Console()


def _mark(ok: bool) -> str:
    return "[green]✓[/green]" if ok else "[red]✗[/red]"


def doctor() -> None:
    """
    Diagnose the launch environment.

    Reports which strategy a launch would try first and why.
    """
    service = LaunchService.from_config()
    probe = service.probe()
    scripts_dir = service.scripts_dir

    table = Table(show_header=False, border_style="cyan")
    table.add_column("Check", style="bold")
    table.add_column("Status", justify="center")
    table.add_column("Detail")

    interpreter_is_path = Path(probe.interpreter).is_absolute()
    table.add_row("Platform", _mark(True), probe.platform.value)
    table.add_row(
        "Interpreter",
        _mark(interpreter_is_path and Path(probe.interpreter).exists()),
        probe.interpreter,
    )
    table.add_row("Scripts directory", _mark(scripts_dir.is_dir()), str(scripts_dir))

    if probe.platform == PlatformProfile.LINUX:
        table.add_row("GUI session", _mark(probe.has_gui_session), "DISPLAY / WAYLAND_DISPLAY")
        tried = ", ".join(terminal_preferences(probe.platform))
        if probe.preferred_terminal is not None:
            detail = f"{probe.preferred_terminal.name} ({probe.preferred_terminal.path})"
        else:
            detail = f"none of: {tried}"
        table.add_row("Terminal", _mark(probe.preferred_terminal is not None), detail)

    table.add_row("Outcome log", _mark(True), str(service.outcome_log.log_file))

    console.print(Panel(table, title="[bold]gamelaunch doctor[/bold]", border_style="cyan"))

    if probe.platform == PlatformProfile.LINUX:
        if probe.has_gui_session and probe.preferred_terminal is not None:
            plan = f"terminal ({probe.preferred_terminal.name}), direct on failure"
        else:
            plan = "direct"
    elif probe.platform == PlatformProfile.MACOS:
        plan = "terminal (Terminal.app via osascript)"
    else:
        plan = "direct"
    console.print(f"Launch strategy: [bold]{plan}[/bold]")
    raise typer.Exit(0)
