"""
Configuration data models for gamelaunch.

These models define the structure of .gamelaunch.json and
~/.config/gamelaunch/config.json files, with validation via Pydantic.
"""

from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from gamelaunch.core.launch.models import LaunchTarget
from gamelaunch.core.launch.registry import DEFAULT_TARGETS, TargetRegistry


class TargetConfig(BaseModel):
    """
    One entry of the launch target table.

    Mirrors the on-disk format: {id, script, args[], supports_player_name}.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1, description="Unique target identifier")
    script: str = Field(
        ..., min_length=1, description="Script path relative to the scripts directory"
    )
    args: list[str] = Field(
        default_factory=list, description="Default arguments, always passed first"
    )
    supports_player_name: bool = Field(
        default=False, description="Whether the script accepts a player name flag"
    )

    def to_target(self) -> LaunchTarget:
        return LaunchTarget(
            id=self.id,
            script=self.script,
            default_args=tuple(self.args),
            accepts_name=self.supports_player_name,
        )


def _default_target_configs() -> list[TargetConfig]:
    return [
        TargetConfig(
            id=t.id,
            script=t.script,
            args=list(t.default_args),
            supports_player_name=t.accepts_name,
        )
        for t in DEFAULT_TARGETS
    ]


class LauncherConfig(BaseModel):
    """
    Main launcher configuration.

    Paths left unset are derived at runtime: the app root defaults to the
    current working directory (set app_root or GAMELAUNCH_APP_ROOT to run
    from elsewhere), the scripts directory to lib/wrappers/python under
    the app root, and the log file to the per-user data directory.
    """

    app_root: Optional[Path] = Field(
        default=None,
        description=(
            "Launcher install root holding lib/wrappers/python and .venv "
            "(defaults to the current working directory)"
        ),
    )
    scripts_dir: Optional[Path] = Field(
        default=None,
        description="Directory containing the game scripts",
    )
    grace_window_ms: int = Field(
        default=600,
        ge=50,
        description="How long a spawned process is watched for a fast failure",
    )
    name_flag: str = Field(
        default="--player-name",
        min_length=1,
        description="Flag used to pass the player name to game scripts",
    )
    log_file: Optional[Path] = Field(
        default=None,
        description="Outcome log location (defaults to the per-user data dir)",
    )
    targets: list[TargetConfig] = Field(
        default_factory=_default_target_configs,
        description="Launch target table, in display order",
    )

    @field_validator("targets")
    @classmethod
    def validate_unique_ids(cls, v: list[TargetConfig]) -> list[TargetConfig]:
        """Reject duplicate target ids."""
        seen: set[str] = set()
        for target in v:
            if target.id in seen:
                raise ValueError(f"Duplicate launch target id: '{target.id}'")
            seen.add(target.id)
        return v

    @property
    def grace_seconds(self) -> float:
        return self.grace_window_ms / 1000.0

    def resolved_app_root(self) -> Path:
        return (self.app_root or Path.cwd()).resolve()

    def resolved_scripts_dir(self) -> Path:
        if self.scripts_dir is not None:
            scripts_dir = self.scripts_dir
            if not scripts_dir.is_absolute():
                scripts_dir = self.resolved_app_root() / scripts_dir
            return scripts_dir
        return self.resolved_app_root() / "lib" / "wrappers" / "python"

    def build_registry(self) -> TargetRegistry:
        return TargetRegistry(t.to_target() for t in self.targets)
