"""
gamelaunch CLI - Launch command.

Starts a game through the launch orchestrator and reports the outcome.
"""

from __future__ import annotations

from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape

from gamelaunch.cli.errors import ExitCode, exit_code_for, print_launch_failure
from gamelaunch.core.launch import LaunchOutcome, LaunchStrategy
from gamelaunch.core.services.launch import LaunchService
from gamelaunch.core.state import PlayerNameStore

console = Console()


def format_status(outcome: LaunchOutcome, player_name: str = "") -> str:
    """
    Status line shown after a successful launch.

    Examples:
        >>> format_status(LaunchOutcome.ok(LaunchStrategy.TERMINAL), "Ada")
        'Launched in a new terminal window for Ada.'
    """
    if outcome.strategy == LaunchStrategy.TERMINAL:
        base = "Launched in a new terminal window"
    else:
        base = "Launched"
    base = f"{base} for {player_name}." if player_name else f"{base}."
    return f"{base} {outcome.message}" if outcome.message else base


def launch(
    target: Annotated[str, typer.Argument(help="Game to launch (see `gamelaunch targets`)")],
    name: Annotated[
        str | None,
        typer.Option("--name", "-n", help="Player name passed to the game"),
    ] = None,
    remember: Annotated[
        bool,
        typer.Option(
            "--remember/--no-remember",
            help="Reuse the last player name when --name is omitted",
        ),
    ] = True,
) -> None:
    """
    Launch a game.

    Picks the best way to start the game on this machine: a terminal window
    when one can be opened, otherwise a direct background process.

    Games and the .venv interpreter are looked up under the launcher's
    install root, which is the current directory unless app_root is set
    in .gamelaunch.json or GAMELAUNCH_APP_ROOT is exported.

    Examples:
        gamelaunch launch brick_breaker
        gamelaunch launch line --name Ada
    """
    store = PlayerNameStore.default()
    if name is None:
        player_name = store.load() if remember else ""
    else:
        player_name = name.strip()
        if remember:
            store.save(player_name)

    service = LaunchService.from_config()

    try:
        with console.status("Launching..."):
            outcome = service.launch_sync(target, player_name)
    except KeyboardInterrupt:
        raise typer.Exit(int(ExitCode.SIGINT))

    if outcome.success:
        console.print(f"[green]✓[/green] {escape(format_status(outcome, player_name))}")
    else:
        print_launch_failure(outcome)

    raise typer.Exit(int(exit_code_for(outcome)))
