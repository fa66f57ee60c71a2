"""
Append-only diagnostic log of launch attempts.

Every launch request, fallback and failure is written as one JSON line to
launcher.log in the per-user data directory. Each line looks like:

{
  "timestamp": "2026-10-18T12:34:56.789000Z",
  "event": "launch_ok",
  "target_id": "brick_breaker",
  "data": {"strategy": "direct", "message": "No terminal found; ran directly."}
}

Writing is best-effort: a log that cannot be written never affects the
outcome returned to the caller.
"""

from __future__ import annotations

import logging
import os
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic_core import PydanticSerializationError

from gamelaunch.core.launch.detector import detect_platform
from gamelaunch.core.launch.models import PlatformProfile

logger = logging.getLogger(__name__)

APP_DIR_NAME = "gamelaunch"
LOG_FILE_NAME = "launcher.log"


class OutcomeEvent(str, Enum):
    """Kinds of entries in the outcome log."""

    LAUNCH_OK = "launch_ok"
    LAUNCH_ERROR = "launch_error"
    TERMINAL_FALLBACK = "terminal_fallback"
    DIRECT_FAILED = "direct_failed"


class OutcomeLogEntry(BaseModel):
    """A single line in the outcome log."""

    model_config = ConfigDict(use_enum_values=True)

    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the event occurred (UTC)",
    )
    event: OutcomeEvent = Field(..., description="Type of event")
    target_id: str = Field(default="", description="Launch target the event belongs to")
    data: dict[str, Any] = Field(default_factory=dict, description="Event-specific data")


def get_data_dir(platform: PlatformProfile | None = None) -> Path:
    """
    Per-user data directory for the launcher.

    Windows: %APPDATA%/gamelaunch
    macOS:   ~/Library/Application Support/gamelaunch
    Other:   $XDG_DATA_HOME/gamelaunch (defaults to ~/.local/share)

    Raises:
        RuntimeError: If the home directory cannot be determined
    """
    platform = platform or detect_platform()

    if platform == PlatformProfile.WINDOWS:
        if appdata := os.environ.get("APPDATA"):
            return Path(appdata) / APP_DIR_NAME
        return Path.home() / "AppData" / "Roaming" / APP_DIR_NAME

    if platform == PlatformProfile.MACOS:
        return Path.home() / "Library" / "Application Support" / APP_DIR_NAME

    if xdg_data_home := os.environ.get("XDG_DATA_HOME"):
        return Path(xdg_data_home) / APP_DIR_NAME
    return Path.home() / ".local" / "share" / APP_DIR_NAME


def default_log_path(platform: PlatformProfile | None = None) -> Path:
    """
    Location of the outcome log.

    Falls back to the package's install directory when no per-user data
    location can be determined.
    """
    try:
        return get_data_dir(platform) / LOG_FILE_NAME
    except RuntimeError:
        return Path(__file__).resolve().parent / LOG_FILE_NAME


class OutcomeLog:
    """
    Append-only JSONL log of launch outcomes.

    Example:
        >>> log = OutcomeLog(default_log_path())
        >>> log.record(OutcomeEvent.LAUNCH_OK, "line", strategy="terminal")
        >>> log.read_entries(limit=1)[0].event
        'launch_ok'
    """

    def __init__(self, log_file: Path) -> None:
        self.log_file = Path(log_file)

    def append(self, entry: OutcomeLogEntry) -> bool:
        """
        Append one entry.

        The line is written with a single write call so concurrent writers
        do not interleave. Serialization and write failures are logged and
        swallowed.

        Returns:
            True if the entry was written
        """
        try:
            line = entry.model_dump_json(exclude_none=True) + "\n"
            self.log_file.parent.mkdir(parents=True, exist_ok=True)
            with open(self.log_file, "a", encoding="utf-8") as f:
                f.write(line)
        except (OSError, ValueError, PydanticSerializationError) as e:
            logger.warning(f"Failed to write launcher log {self.log_file}: {e}")
            return False
        return True

    def record(self, event: OutcomeEvent, target_id: str = "", **data: Any) -> bool:
        """Build and append an entry; None-valued data is dropped."""
        payload = {k: v for k, v in data.items() if v is not None}
        return self.append(OutcomeLogEntry(event=event, target_id=target_id, data=payload))

    def read_entries(self, limit: int | None = None) -> list[OutcomeLogEntry]:
        """
        Read entries back, oldest first.

        Args:
            limit: Only return the most recent N entries

        Returns:
            Parsed entries; malformed lines are skipped
        """
        if not self.log_file.exists():
            return []

        entries: list[OutcomeLogEntry] = []
        try:
            with open(self.log_file, encoding="utf-8") as f:
                for line in f:
                    line = line.strip()
                    if not line:
                        continue
                    try:
                        entries.append(OutcomeLogEntry.model_validate_json(line))
                    except ValidationError:
                        logger.debug(f"Skipping malformed log line: {line[:80]}")
        except OSError as e:
            logger.warning(f"Failed to read launcher log {self.log_file}: {e}")
            return []

        if limit is not None:
            return entries[-limit:] if limit > 0 else []
        return entries


__all__ = [
    "OutcomeEvent",
    "OutcomeLog",
    "OutcomeLogEntry",
    "default_log_path",
    "get_data_dir",
]
