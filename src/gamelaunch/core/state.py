"""
Persistent launcher state.

Remembers the last player name so `gamelaunch launch` can reuse it when no
--name is given. Stored as state.json in the per-user data directory.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

from gamelaunch.core.launch.outcome_log import default_log_path

logger = logging.getLogger(__name__)


class LauncherState(BaseModel):
    """Contents of state.json."""

    player_name: str = Field(default="", description="Last player name entered")


class PlayerNameStore:
    """
    Load and save the remembered player name.

    Read and write failures are tolerated: a broken state file behaves like
    an empty one.
    """

    def __init__(self, state_file: Path) -> None:
        self.state_file = Path(state_file)

    @classmethod
    def default(cls) -> PlayerNameStore:
        return cls(default_log_path().parent / "state.json")

    def load(self) -> str:
        if not self.state_file.exists():
            return ""
        try:
            state = LauncherState.model_validate_json(self.state_file.read_text(encoding="utf-8"))
        except (OSError, ValidationError) as e:
            logger.warning(f"Ignoring unreadable state file {self.state_file}: {e}")
            return ""
        return state.player_name.strip()

    def save(self, name: str) -> None:
        state = LauncherState(player_name=name.strip())
        try:
            self.state_file.parent.mkdir(parents=True, exist_ok=True)
            self.state_file.write_text(
                json.dumps(state.model_dump(), indent=2) + "\n", encoding="utf-8"
            )
        except (OSError, ValueError) as e:
            logger.warning(f"Failed to save state file {self.state_file}: {e}")
