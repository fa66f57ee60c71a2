"""
Launch service: the single entry point of the launch orchestrator.

Wraps the launch package behind one call. A caller (the CLI, or any UI)
passes a target id and an optional player name and gets back exactly one
LaunchOutcome. Nothing is raised to the caller for launch failures; they
are logged and returned.

Usage:
    >>> from gamelaunch.core.services.launch import LaunchService
    >>> service = LaunchService.from_config()
    >>> outcome = service.launch_sync("brick_breaker", "Ada")
    >>> if not outcome.success:
    ...     print(outcome.error)
"""

from __future__ import annotations

import asyncio
import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from gamelaunch.core.config.loader import load_config
from gamelaunch.core.config.models import LauncherConfig
from gamelaunch.core.launch import (
    EnvironmentProbe,
    LauncherError,
    LaunchOutcome,
    LaunchPlan,
    LaunchRequest,
    OutcomeEvent,
    OutcomeLog,
    PlatformProfile,
    ScriptNotFoundError,
    TargetRegistry,
    build_game_args,
    default_log_path,
    detect_platform,
    probe_environment,
    resolve_interpreter,
    select_strategy,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RuntimeContext:
    """
    Process-wide facts resolved once and threaded through every request.

    Attributes:
        platform: Host platform profile
        interpreter: Interpreter used to run game scripts
    """

    platform: PlatformProfile
    interpreter: str

    @classmethod
    def resolve(
        cls, app_root: Path, env: Mapping[str, str] | None = None
    ) -> RuntimeContext:
        platform = detect_platform()
        interpreter = resolve_interpreter(app_root, platform=platform, env=env)
        return cls(platform=platform, interpreter=interpreter)


# ============================================================================
# LaunchService
# ============================================================================


class LaunchService:
    """
    Service that turns launch requests into launched games.

    Flow per request: resolve target, validate the script on disk, build the
    argument list, run the platform's strategy handler, record the outcome.

    Example:
        >>> service = LaunchService.from_config()
        >>> outcome = await service.launch("line", name="Ada")
        >>> outcome.strategy
        <LaunchStrategy.TERMINAL: 'terminal'>
    """

    def __init__(
        self,
        config: LauncherConfig,
        *,
        registry: TargetRegistry | None = None,
        outcome_log: OutcomeLog | None = None,
        runtime: RuntimeContext | None = None,
        env: Mapping[str, str] | None = None,
    ) -> None:
        """
        Initialize service with dependencies.

        Args:
            config: Launcher configuration
            registry: Target table (built from config if None)
            outcome_log: Outcome log (config.log_file or the default location)
            runtime: Pre-resolved runtime context (resolved on first use if None)
            env: Environment mapping for probing (defaults to os.environ)
        """
        self._config = config
        self._registry = registry or config.build_registry()
        self._outcome_log = outcome_log or OutcomeLog(config.log_file or default_log_path())
        self._runtime = runtime
        self._env = env

    @classmethod
    def from_config(cls, config: LauncherConfig | None = None) -> LaunchService:
        """
        Create service from configuration.

        Args:
            config: Optional launcher configuration (auto-loaded if None)
        """
        if config is None:
            config = load_config()
        return cls(config)

    @property
    def config(self) -> LauncherConfig:
        return self._config

    @property
    def registry(self) -> TargetRegistry:
        return self._registry

    @property
    def outcome_log(self) -> OutcomeLog:
        return self._outcome_log

    @property
    def scripts_dir(self) -> Path:
        return self._config.resolved_scripts_dir()

    @property
    def runtime(self) -> RuntimeContext:
        """Platform and interpreter, resolved on first access and then fixed."""
        if self._runtime is None:
            self._runtime = RuntimeContext.resolve(self._config.resolved_app_root(), self._env)
            logger.debug(
                f"Runtime: platform={self._runtime.platform.value} "
                f"interpreter={self._runtime.interpreter}"
            )
        return self._runtime

    # ============================================================================
    # Diagnostics
    # ============================================================================

    def probe(self) -> EnvironmentProbe:
        """Snapshot of the environment the strategy selector will see."""
        runtime = self.runtime
        return probe_environment(
            self._config.resolved_app_root(),
            platform=runtime.platform,
            interpreter=runtime.interpreter,
            env=self._env,
        )

    # ============================================================================
    # Launch methods
    # ============================================================================

    def build_plan(self, request: LaunchRequest) -> LaunchPlan:
        """
        Resolve and validate everything needed before any spawn.

        Raises:
            UnknownTargetError: If the target id is not registered
            ScriptNotFoundError: If the scripts dir or the script is missing
        """
        target = self._registry.resolve(request.target_id)

        scripts_dir = self.scripts_dir
        if not scripts_dir.is_dir():
            raise ScriptNotFoundError(str(scripts_dir), is_dir=True)

        script_path = scripts_dir / target.script
        if not script_path.exists():
            raise ScriptNotFoundError(str(script_path))

        args = build_game_args(target, request.player_name, self._config.name_flag)
        return LaunchPlan(
            interpreter=self.runtime.interpreter,
            script_path=str(script_path),
            args=tuple(args),
            scripts_dir=str(scripts_dir),
            target_id=target.id,
        )

    async def launch(self, target_id: str, name: str | None = "") -> LaunchOutcome:
        """
        Launch a game.

        Args:
            target_id: Registry key of the game
            name: Optional player name (trimmed; empty means not supplied)

        Returns:
            Exactly one LaunchOutcome; failures are returned, never raised
        """
        request = LaunchRequest.create(target_id, name)

        try:
            plan = self.build_plan(request)
        except LauncherError as e:
            outcome = LaunchOutcome.failed(str(e), e.kind)
        else:
            handler = select_strategy(
                self.runtime.platform,
                outcome_log=self._outcome_log,
                grace_seconds=self._config.grace_seconds,
                env=self._env if self._env is not None else os.environ,
            )
            outcome = await handler.attempt(plan)

        self._record(request, outcome)
        return outcome

    def launch_sync(self, target_id: str, name: str | None = "") -> LaunchOutcome:
        """Blocking wrapper around launch() for synchronous callers."""
        return asyncio.run(self.launch(target_id, name))

    def _record(self, request: LaunchRequest, outcome: LaunchOutcome) -> None:
        if outcome.success:
            logger.info(
                f"Launch ok: key={request.target_id} "
                f"launched={outcome.strategy.value if outcome.strategy else 'unknown'}"
            )
            self._outcome_log.record(
                OutcomeEvent.LAUNCH_OK,
                request.target_id,
                player_name=request.player_name if request.has_name else None,
                strategy=outcome.strategy.value if outcome.strategy else None,
                message=outcome.message,
            )
        else:
            logger.error(f"Launch error: key={request.target_id} err={outcome.error}")
            self._outcome_log.record(
                OutcomeEvent.LAUNCH_ERROR,
                request.target_id,
                player_name=request.player_name if request.has_name else None,
                error=outcome.error,
                error_kind=outcome.error_kind,
                message=outcome.message,
            )


__all__ = ["LaunchService", "RuntimeContext"]
