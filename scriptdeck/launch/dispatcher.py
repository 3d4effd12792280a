"""Script launch dispatcher.

Walks the platform's strategy tuple until one of them starts the script.
A strategy that declines or whose steps fail (a spawn error, or a helper
command exiting non-zero) falls through to the next tier. Only a failure in
the last tier surfaces as ``LaunchError``.
"""

from __future__ import annotations

import contextlib
import logging
import os
import shutil
import subprocess
import sys
from collections.abc import Callable, Mapping, Sequence
from pathlib import Path
from typing import ContextManager, TextIO

from .platform import HostPlatform, detect_platform
from .strategies import (
    STRATEGY_TABLE,
    LaunchEnvironment,
    LaunchRequest,
    LaunchStep,
    LaunchStrategy,
    StepMode,
)

logger = logging.getLogger(__name__)

BANNER_RULE = "=" * 56


class LaunchError(RuntimeError):
    """Raised when even the most basic launch tier cannot run the script."""


def _detach_kwargs() -> dict[str, object]:
    if os.name == "nt":
        flags = getattr(subprocess, "CREATE_NEW_PROCESS_GROUP", 0)
        return {"creationflags": flags}
    return {"start_new_session": True}


class ProcessRunner:
    """Execute launch steps against real processes.

    ``suspend_ui`` returns a context manager that hands the terminal back to
    the shell (leaving raw/alternate-screen mode) for steps that need it.
    """

    def __init__(
        self,
        suspend_ui: Callable[[], ContextManager[object]] | None = None,
        stdout: TextIO | None = None,
        wait_for_enter: Callable[[], object] | None = None,
    ) -> None:
        self._suspend_ui = suspend_ui if suspend_ui is not None else contextlib.nullcontext
        self._stdout = stdout
        self._wait_for_enter = wait_for_enter if wait_for_enter is not None else self._read_line
        self._spawned: list[subprocess.Popen[bytes]] = []

    @property
    def stdout(self) -> TextIO:
        return self._stdout if self._stdout is not None else sys.stdout

    @staticmethod
    def _read_line() -> None:
        try:
            sys.stdin.readline()
        except (OSError, ValueError):
            pass

    def spawn(self, argv: Sequence[str]) -> None:
        """Start ``argv`` detached from this process; never waits for it."""
        self._spawned = [proc for proc in self._spawned if proc.poll() is None]
        proc = subprocess.Popen(
            list(argv),
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            **_detach_kwargs(),
        )
        self._spawned.append(proc)

    def run(self, argv: Sequence[str]) -> None:
        """Run a helper command to completion; a non-zero exit raises ``CalledProcessError``."""
        subprocess.run(list(argv), stdin=subprocess.DEVNULL, capture_output=True, check=True)

    def handoff(self, argv: Sequence[str]) -> None:
        """Give the terminal to ``argv`` until it returns (e.g. a tmux attach)."""
        with self._suspend_ui():
            subprocess.run(list(argv), check=False)

    def foreground(self, argv: Sequence[str], request: LaunchRequest) -> int:
        """Run the script in this terminal, blocking until it exits."""
        out = self.stdout
        with self._suspend_ui():
            out.write("\n=== Executing script directly (tmux not available) ===\n")
            out.write(f"Script: {request.display_name}\n")
            out.write(f"Path: {request.path}\n")
            out.write("Install tmux for a better experience.\n")
            out.write(f"{BANNER_RULE}\n\n")
            out.flush()
            try:
                completed = subprocess.run(list(argv), check=False)
            finally:
                out.write(f"\n{BANNER_RULE}\n")
                out.write("Script execution completed. Press Enter to continue...")
                out.flush()
                self._wait_for_enter()
        return completed.returncode


class LaunchDispatcher:
    """Pick and run the first applicable launch strategy for this host."""

    def __init__(
        self,
        platform: HostPlatform | None = None,
        environ: Mapping[str, str] | None = None,
        which: Callable[[str], str | None] = shutil.which,
        runner: ProcessRunner | None = None,
        table: Mapping[HostPlatform, tuple[LaunchStrategy, ...]] = STRATEGY_TABLE,
    ) -> None:
        self.platform = platform if platform is not None else detect_platform()
        self._environ = environ
        self._which = which
        self.runner = runner if runner is not None else ProcessRunner()
        self._table = table

    def strategies(self) -> tuple[LaunchStrategy, ...]:
        return self._table.get(self.platform, self._table[HostPlatform.OTHER])

    def _environment(self) -> LaunchEnvironment:
        environ = os.environ if self._environ is None else self._environ
        return LaunchEnvironment(environ=environ, which=self._which)

    def _run_steps(self, steps: list[LaunchStep], request: LaunchRequest) -> None:
        for step in steps:
            if step.mode is StepMode.SPAWN:
                self.runner.spawn(step.argv)
            elif step.mode is StepMode.RUN:
                self.runner.run(step.argv)
            elif step.mode is StepMode.HANDOFF:
                self.runner.handoff(step.argv)
            else:
                returncode = self.runner.foreground(step.argv, request)
                if returncode != 0:
                    logger.info("%s exited with status %s", request.display_name, returncode)

    def launch(self, path: Path, display_name: str) -> str:
        """Start ``path`` and return the name of the strategy that handled it.

        Raises ``LaunchError`` only when the final tier fails.
        """
        request = LaunchRequest(path=path, display_name=display_name)
        env = self._environment()
        strategies = self.strategies()
        for position, strategy in enumerate(strategies):
            is_last = position == len(strategies) - 1
            steps = strategy.build(request, env)
            if not steps:
                logger.debug("launch strategy %s does not apply", strategy.name)
                continue
            try:
                self._run_steps(steps, request)
            except (OSError, subprocess.SubprocessError) as exc:
                if is_last:
                    raise LaunchError(f"failed to run {display_name}: {exc}") from exc
                logger.warning("launch strategy %s failed for %s: %s", strategy.name, display_name, exc)
                continue
            logger.info("launched %s via %s", display_name, strategy.name)
            return strategy.name
        raise LaunchError(f"no launch strategy available for {display_name}")


__all__ = [
    "LaunchDispatcher",
    "LaunchError",
    "ProcessRunner",
]
