"""
gamelaunch CLI - Log command.

Shows recent entries from the outcome log.
"""

from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from gamelaunch.core.config import load_config
from gamelaunch.core.launch import OutcomeLog, default_log_path

console = Console()

_EVENT_STYLES = {
    "launch_ok": "green",
    "launch_error": "red",
    "terminal_fallback": "yellow",
    "direct_failed": "red",
}


def log(
    limit: Annotated[int, typer.Option("--limit", "-l", min=1, help="Entries to show")] = 20,
) -> None:
    """Show recent launch attempts."""
    config = load_config()
    outcome_log = OutcomeLog(config.log_file or default_log_path())
    entries = outcome_log.read_entries(limit=limit)

    if not entries:
        console.print(f"[dim]No launches recorded in {outcome_log.log_file}[/dim]")
        raise typer.Exit(0)

    table = Table(title="Recent Launches", border_style="cyan")
    table.add_column("Time", style="dim", no_wrap=True)
    table.add_column("Event", no_wrap=True)
    table.add_column("Target", style="cyan")
    table.add_column("Detail")

    for entry in entries:
        event = str(entry.event)
        style = _EVENT_STYLES.get(event, "white")
        detail = " ".join(f"{k}={v}" for k, v in entry.data.items())
        table.add_row(
            entry.timestamp.strftime("%Y-%m-%d %H:%M:%S"),
            f"[{style}]{event}[/{style}]",
            escape(entry.target_id),
            escape(detail),
        )

    console.print(table)
    raise typer.Exit(0)
