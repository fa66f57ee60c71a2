"""
gamelaunch CLI - Main application entry point.

This module sets up the Typer CLI application with all subcommands.
"""

import logging
import sys

import typer
from rich.console import Console

from gamelaunch import __version__
from gamelaunch.cli import doctor, launch, log, targets
from gamelaunch.core.config.env import load_layered_env

# Help panel names for command grouping
PANEL_PLAY = "Play"
PANEL_DIAGNOSE = "Diagnose"

app = typer.Typer(
    name="gamelaunch",
    help="Launch game scripts in a terminal window or as a background process",
    no_args_is_help=True,
    add_completion=False,
    context_settings={"help_option_names": ["--help", "-h"]},
)

console = Console()


def setup_logging(debug: bool = False) -> None:
    """
    Configure logging for all commands.

    Args:
        debug: If True, enable DEBUG level logging
    """
    level = logging.DEBUG if debug else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )


@app.callback()
def main(
    ctx: typer.Context,
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Enable debug output with detailed logging",
    ),
) -> None:
    """
    gamelaunch - start games from the command line.

    Resolves a Python interpreter, opens a terminal window when the desktop
    has one, and falls back to running the game directly when it does not.

    Quick Start:
        gamelaunch targets               # List games
        gamelaunch launch line -n Ada    # Launch a game for a player
        gamelaunch doctor                # Check interpreter and terminals
        gamelaunch log                   # Recent launch attempts
    """
    # Precedence: OS env > project .env > user .env
    load_layered_env()
    setup_logging(debug)

    ctx.obj = {"debug": debug}


app.command(name="launch", rich_help_panel=PANEL_PLAY)(launch.launch)
app.command(name="targets", rich_help_panel=PANEL_PLAY)(targets.targets)
app.command(name="doctor", rich_help_panel=PANEL_DIAGNOSE)(doctor.doctor)
app.command(name="log", rich_help_panel=PANEL_DIAGNOSE)(log.log)


@app.command(rich_help_panel=PANEL_DIAGNOSE)
def version() -> None:
    """Show gamelaunch version and exit."""
    console.print(f"gamelaunch version {__version__}")
    raise typer.Exit(0)


def cli_main() -> None:
    """Main CLI entry point."""
    app()


__all__ = ["app", "cli_main"]
