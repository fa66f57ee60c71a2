"""
Service layer for gamelaunch.

Services compose the launch package into clean API surfaces. Interfaces
(the CLI, a desktop UI) call service methods instead of reaching into core
packages directly. Services take typed inputs, return typed outputs and do
no printing.

Modules:
    launch: LaunchService, the single launch entry point.
"""

from gamelaunch.core.services.launch import LaunchService, RuntimeContext

__all__ = ["LaunchService", "RuntimeContext"]
