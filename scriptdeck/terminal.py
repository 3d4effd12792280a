"""Raw-mode and alternate-screen ownership for the browser session.

``suspended`` hands the terminal back to a launched script (tmux attach or
a foreground run) and takes it over again afterwards.
"""

from __future__ import annotations

import contextlib
import os
import termios
import tty

# Alternate screen on, cursor hidden / cursor shown, main screen restored.
ENTER_SCREEN = b"\x1b[?1049h\x1b[?25l"
LEAVE_SCREEN = b"\x1b[?25h\x1b[?1049l"


class TerminalController:
    def __init__(self, stdin_fd: int, stdout_fd: int) -> None:
        self.stdin_fd = stdin_fd
        self.stdout_fd = stdout_fd
        self._cooked_attrs = termios.tcgetattr(stdin_fd)
        self._tui_active = False

    @property
    def tui_active(self) -> bool:
        return self._tui_active

    def enable_tui_mode(self) -> None:
        if self._tui_active:
            return
        tty.setraw(self.stdin_fd, termios.TCSAFLUSH)
        os.write(self.stdout_fd, ENTER_SCREEN)
        self._tui_active = True

    def disable_tui_mode(self) -> None:
        if not self._tui_active:
            return
        os.write(self.stdout_fd, LEAVE_SCREEN)
        termios.tcsetattr(self.stdin_fd, termios.TCSAFLUSH, self._cooked_attrs)
        self._tui_active = False

    @contextlib.contextmanager
    def raw_mode(self):
        self.enable_tui_mode()
        try:
            yield self
        finally:
            self.disable_tui_mode()

    @contextlib.contextmanager
    def suspended(self):
        """Restore the cooked terminal for the block, then re-enter TUI mode."""
        resume = self._tui_active
        self.disable_tui_mode()
        try:
            yield
        finally:
            if resume:
                self.enable_tui_mode()


__all__ = ["TerminalController"]
