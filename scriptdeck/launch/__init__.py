"""Cross-platform script launching.

``LaunchDispatcher`` picks a strategy tuple by host platform and walks it
until a tier starts the script.
"""

from __future__ import annotations

from .dispatcher import LaunchDispatcher, LaunchError, ProcessRunner
from .platform import HostPlatform, detect_platform, inside_tmux, is_desktop_session
from .strategies import STRATEGY_TABLE, LaunchRequest, LaunchStep, LaunchStrategy, StepMode

__all__ = [
    "LaunchDispatcher",
    "LaunchError",
    "ProcessRunner",
    "HostPlatform",
    "detect_platform",
    "inside_tmux",
    "is_desktop_session",
    "STRATEGY_TABLE",
    "LaunchRequest",
    "LaunchStep",
    "LaunchStrategy",
    "StepMode",
]
