"""Launch strategies and the per-platform fallback table.

Each strategy turns a ``LaunchRequest`` into an ordered list of process
steps, or declines (returns ``None``) when it does not apply to the current
session. The dispatcher walks a platform's tuple of strategies in order.
"""

from __future__ import annotations

import itertools
import os
import shlex
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from ..catalog import is_powershell_name
from .platform import HostPlatform, inside_tmux, is_desktop_session

# Emulator executable -> argument that introduces the command to run.
TERMINAL_EMULATORS: tuple[tuple[str, str], ...] = (
    ("gnome-terminal", "--"),
    ("konsole", "-e"),
    ("x-terminal-emulator", "-e"),
    ("xterm", "-e"),
)
TMUX_SESSION_PREFIX = "scriptdeck-"
CMD_EXTENSIONS = (".bat", ".cmd")
MAC_PAUSE = "read -n 1 -s -r -p 'Press any key to exit...'"


class StepMode(Enum):
    SPAWN = "spawn"
    RUN = "run"
    HANDOFF = "handoff"
    FOREGROUND = "foreground"


@dataclass(frozen=True)
class LaunchRequest:
    path: Path
    display_name: str

    @property
    def is_powershell(self) -> bool:
        return is_powershell_name(self.display_name)

    @property
    def is_cmd_script(self) -> bool:
        return self.display_name.lower().endswith(CMD_EXTENSIONS)

    @property
    def interpreter(self) -> str:
        return "pwsh" if self.is_powershell else "bash"


@dataclass(frozen=True)
class LaunchStep:
    """One process to start.

    ``SPAWN`` steps are detached and never awaited. ``RUN`` steps are short
    helper commands that must exit 0 before the next step starts. ``HANDOFF``
    steps take over the terminal until the user leaves them, and
    ``FOREGROUND`` steps run the script itself and block until it exits.
    """

    argv: tuple[str, ...]
    mode: StepMode = StepMode.SPAWN


@dataclass(frozen=True)
class LaunchEnvironment:
    environ: Mapping[str, str]
    which: Callable[[str], str | None]


StepBuilder = Callable[[LaunchRequest, LaunchEnvironment], "list[LaunchStep] | None"]


@dataclass(frozen=True)
class LaunchStrategy:
    name: str
    build: StepBuilder


def _source_listing_command(script: str) -> str:
    return (
        "if command -v bat >/dev/null 2>&1; then bat --style=numbers --color=always "
        f"{script}; elif command -v batcat >/dev/null 2>&1; then batcat --style=numbers "
        f"--color=always {script}; else cat {script}; fi"
    )


def _windows_console(request: LaunchRequest, env: LaunchEnvironment) -> list[LaunchStep]:
    path = str(request.path)
    if request.is_powershell:
        command = f"Clear-Host; & '{path}'; Write-Host ''; Read-Host 'Press Enter to exit'"
        argv = ("cmd", "/C", "start", "powershell", "-NoExit", "-Command", command)
    else:
        argv = ("cmd", "/C", "start", "cmd", "/K", f'cls && bash -l "{path}" & pause')
    return [LaunchStep(argv)]


def _applescript_quote(text: str) -> str:
    return text.replace("\\", "\\\\").replace('"', '\\"')


def _macos_terminal(request: LaunchRequest, env: LaunchEnvironment) -> list[LaunchStep]:
    shell_command = f"clear; {request.interpreter} {shlex.quote(str(request.path))}; echo; {MAC_PAUSE}"
    script = (
        'tell application "Terminal"\n'
        f'    do script "{_applescript_quote(shell_command)}"\n'
        "    activate\n"
        "end tell"
    )
    return [LaunchStep(("osascript", "-e", script))]


def _desktop_terminal(request: LaunchRequest, env: LaunchEnvironment) -> list[LaunchStep] | None:
    if not is_desktop_session(env.environ):
        return None
    for executable, command_flag in TERMINAL_EMULATORS:
        if env.which(executable) is None:
            continue
        shell_command = (
            f"clear; {request.interpreter} {shlex.quote(str(request.path))}; "
            "echo; read -p 'Press Enter to exit'"
        )
        return [LaunchStep((executable, command_flag, "bash", "-l", "-c", shell_command))]
    return None


_session_serial = itertools.count(1)


def tmux_session_name(display_name: str, suffix: str = "") -> str:
    cleaned = "".join(ch if ch.isalnum() or ch in "-_" else "-" for ch in display_name)
    name = TMUX_SESSION_PREFIX + cleaned
    return f"{name}-{suffix}" if suffix else name


def _tmux_body(request: LaunchRequest, closing_prompt: str, extra_hint: str = "") -> str:
    script = shlex.quote(str(request.path))
    parts = [f"clear; echo {shlex.quote('Running: ' + request.display_name)}"]
    if extra_hint:
        parts.append(f"echo {shlex.quote(extra_hint)}")
    parts.append(_source_listing_command(script))
    parts.append("echo")
    parts.append(f"{request.interpreter} {script}")
    parts.append("echo")
    parts.append(f"read -p {shlex.quote(closing_prompt)}")
    return "; ".join(parts)


def _tmux_window(request: LaunchRequest, env: LaunchEnvironment) -> list[LaunchStep] | None:
    if not inside_tmux(env.environ):
        return None
    body = _tmux_body(request, "Press Enter to close this window...")
    return [LaunchStep(("tmux", "new-window", "-n", request.display_name, "bash", "-c", body))]


def _tmux_session(request: LaunchRequest, env: LaunchEnvironment) -> list[LaunchStep] | None:
    if env.which("tmux") is None:
        return None
    # Session names must not collide with one left over from an earlier launch.
    session = tmux_session_name(request.display_name, f"{os.getpid()}-{next(_session_serial)}")
    body = _tmux_body(
        request,
        "Press Enter to close this session...",
        extra_hint="Use Ctrl+B then D to detach, or exit to close",
    )
    return [
        LaunchStep(("tmux", "new-session", "-d", "-s", session, "bash", "-c", body), StepMode.RUN),
        LaunchStep(("tmux", "attach-session", "-t", session), StepMode.HANDOFF),
    ]


def _foreground(request: LaunchRequest, env: LaunchEnvironment) -> list[LaunchStep]:
    if request.is_powershell:
        argv: tuple[str, ...] = ("pwsh", "-File", str(request.path))
    elif request.is_cmd_script:
        argv = ("cmd", "/C", str(request.path))
    else:
        argv = (request.interpreter, str(request.path))
    return [LaunchStep(argv, StepMode.FOREGROUND)]


WINDOWS_CONSOLE = LaunchStrategy("windows-console", _windows_console)
MACOS_TERMINAL = LaunchStrategy("macos-terminal", _macos_terminal)
DESKTOP_TERMINAL = LaunchStrategy("desktop-terminal", _desktop_terminal)
TMUX_WINDOW = LaunchStrategy("tmux-window", _tmux_window)
TMUX_SESSION = LaunchStrategy("tmux-session", _tmux_session)
FOREGROUND = LaunchStrategy("foreground", _foreground)

STRATEGY_TABLE: dict[HostPlatform, tuple[LaunchStrategy, ...]] = {
    HostPlatform.WINDOWS: (WINDOWS_CONSOLE, FOREGROUND),
    HostPlatform.MACOS: (MACOS_TERMINAL, FOREGROUND),
    HostPlatform.LINUX: (DESKTOP_TERMINAL, TMUX_WINDOW, TMUX_SESSION, FOREGROUND),
    HostPlatform.OTHER: (TMUX_WINDOW, TMUX_SESSION, FOREGROUND),
}


__all__ = [
    "DESKTOP_TERMINAL",
    "FOREGROUND",
    "MACOS_TERMINAL",
    "STRATEGY_TABLE",
    "TERMINAL_EMULATORS",
    "TMUX_SESSION",
    "TMUX_WINDOW",
    "WINDOWS_CONSOLE",
    "LaunchEnvironment",
    "LaunchRequest",
    "LaunchStep",
    "LaunchStrategy",
    "StepMode",
    "tmux_session_name",
]
