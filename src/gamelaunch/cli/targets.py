"""
gamelaunch CLI - Targets command.

Lists the games the launcher knows about.
"""

import typer
from rich.console import Console
from rich.table import Table

from gamelaunch.core.config import load_config

console = Console()


def targets() -> None:
    """List launchable games."""
    config = load_config()
    registry = config.build_registry()
    scripts_dir = config.resolved_scripts_dir()

    table = Table(title="Launch Targets", border_style="cyan")
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Script", style="white")
    table.add_column("Default Args", style="dim")
    table.add_column("Player Name", justify="center")

    for target in registry:
        present = (scripts_dir / target.script).exists()
        script = target.script if present else f"[red]{target.script} (missing)[/red]"
        table.add_row(
            target.id,
            script,
            " ".join(target.default_args),
            "[green]yes[/green]" if target.accepts_name else "no",
        )

    console.print(table)
    console.print(f"[dim]Scripts directory: {scripts_dir}[/dim]")
    raise typer.Exit(0)
