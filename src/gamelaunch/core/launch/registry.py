"""
Target registry: the static table of launchable games.

The table is defined once at startup (from configuration or the shipped
defaults) and never mutated afterwards.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from typing import Any

from gamelaunch.core.launch.errors import UnknownTargetError
from gamelaunch.core.launch.models import LaunchTarget

_PHYSICAL_ARGS = ("--physical", "--camera-index", "1")

DEFAULT_TARGETS: tuple[LaunchTarget, ...] = (
    LaunchTarget("brick_breaker", "brick_breaker_game.py", _PHYSICAL_ARGS, True),
    LaunchTarget("subway_surfers", "subway_surfers_game.py", _PHYSICAL_ARGS, True),
    LaunchTarget("line", "line.py", _PHYSICAL_ARGS, True),
    LaunchTarget("hole", "hole.py", _PHYSICAL_ARGS, True),
)


class TargetRegistry:
    """
    Ordered, read-only mapping from target id to LaunchTarget.

    Example:
        >>> registry = TargetRegistry(DEFAULT_TARGETS)
        >>> registry.resolve("line").script
        'line.py'
    """

    def __init__(self, targets: Iterable[LaunchTarget]) -> None:
        self._targets: dict[str, LaunchTarget] = {}
        for target in targets:
            if not target.id:
                raise ValueError("Launch target id cannot be empty")
            if not target.script:
                raise ValueError(f"Launch target '{target.id}' has no script path")
            if target.id in self._targets:
                raise ValueError(f"Duplicate launch target id: '{target.id}'")
            self._targets[target.id] = target

    @classmethod
    def default(cls) -> TargetRegistry:
        """Registry of the shipped games."""
        return cls(DEFAULT_TARGETS)

    @classmethod
    def from_entries(cls, entries: Iterable[Mapping[str, Any]]) -> TargetRegistry:
        """
        Build a registry from the configuration table format.

        Each entry is ``{"id", "script", "args", "supports_player_name"}``;
        ``args`` and ``supports_player_name`` are optional.

        Raises:
            ValueError: If an entry is missing its id/script or ids repeat
        """
        targets = []
        for entry in entries:
            targets.append(
                LaunchTarget(
                    id=str(entry.get("id", "")),
                    script=str(entry.get("script", "")),
                    default_args=tuple(str(a) for a in entry.get("args", ())),
                    accepts_name=bool(entry.get("supports_player_name", False)),
                )
            )
        return cls(targets)

    def resolve(self, identifier: str) -> LaunchTarget:
        """
        Look up a target by id.

        Raises:
            UnknownTargetError: If the id is not registered
        """
        try:
            return self._targets[identifier]
        except KeyError:
            raise UnknownTargetError(identifier) from None

    def ids(self) -> list[str]:
        return list(self._targets)

    def __contains__(self, identifier: object) -> bool:
        return identifier in self._targets

    def __iter__(self) -> Iterator[LaunchTarget]:
        return iter(self._targets.values())

    def __len__(self) -> int:
        return len(self._targets)


__all__ = ["DEFAULT_TARGETS", "TargetRegistry"]
