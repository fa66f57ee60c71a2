"""
gamelaunch - game launch orchestrator

Starts game scripts in a terminal window or as a background process,
falling back to a safer strategy when a terminal cannot be opened.
"""

__version__ = "0.1.0"

# Re-export core models for convenience
from gamelaunch.core.launch.models import LaunchOutcome, LaunchStrategy, LaunchTarget

__all__ = ["LaunchOutcome", "LaunchStrategy", "LaunchTarget", "__version__"]
