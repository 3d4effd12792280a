"""Host platform and session detection for the launch dispatcher."""

from __future__ import annotations

import os
import sys
from collections.abc import Mapping
from enum import Enum

DESKTOP_SESSION_VARS: tuple[str, ...] = (
    "DISPLAY",
    "WAYLAND_DISPLAY",
    "DESKTOP_SESSION",
    "XDG_SESSION_TYPE",
)


class HostPlatform(Enum):
    WINDOWS = "windows"
    MACOS = "macos"
    LINUX = "linux"
    OTHER = "other"

    @property
    def label(self) -> str:
        return {
            HostPlatform.WINDOWS: "Windows",
            HostPlatform.MACOS: "macOS",
            HostPlatform.LINUX: "Linux",
        }.get(self, sys.platform)


def detect_platform(sys_platform: str | None = None) -> HostPlatform:
    name = sys.platform if sys_platform is None else sys_platform
    if name.startswith("win") or name == "cygwin":
        return HostPlatform.WINDOWS
    if name == "darwin":
        return HostPlatform.MACOS
    if name.startswith("linux"):
        return HostPlatform.LINUX
    return HostPlatform.OTHER


def is_desktop_session(environ: Mapping[str, str] | None = None) -> bool:
    """Return ``True`` when any display-server or desktop-session marker is set."""
    env = os.environ if environ is None else environ
    return any(env.get(name) for name in DESKTOP_SESSION_VARS)


def inside_tmux(environ: Mapping[str, str] | None = None) -> bool:
    env = os.environ if environ is None else environ
    return bool(env.get("TMUX"))


__all__ = [
    "DESKTOP_SESSION_VARS",
    "HostPlatform",
    "detect_platform",
    "inside_tmux",
    "is_desktop_session",
]
