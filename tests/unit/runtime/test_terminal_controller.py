from __future__ import annotations

import unittest
from unittest import mock

from scriptdeck import terminal
from scriptdeck.terminal import ENTER_SCREEN, LEAVE_SCREEN, TerminalController


class TerminalControllerTests(unittest.TestCase):
    def setUp(self) -> None:
        self.writes: list[bytes] = []
        patches = (
            mock.patch.object(terminal.termios, "tcgetattr", return_value=["cooked"]),
            mock.patch.object(terminal.termios, "tcsetattr"),
            mock.patch.object(terminal.tty, "setraw"),
            mock.patch.object(terminal.os, "write", side_effect=lambda fd, data: self.writes.append(data)),
        )
        self.mocks = [patcher.start() for patcher in patches]
        for patcher in patches:
            self.addCleanup(patcher.stop)
        self.controller = TerminalController(0, 1)

    def test_raw_mode_enters_and_restores(self) -> None:
        with self.controller.raw_mode():
            self.assertTrue(self.controller.tui_active)
        self.assertFalse(self.controller.tui_active)
        self.assertEqual(self.writes, [ENTER_SCREEN, LEAVE_SCREEN])
        self.mocks[1].assert_called_once_with(0, terminal.termios.TCSAFLUSH, ["cooked"])

    def test_suspended_hands_terminal_back(self) -> None:
        with self.controller.raw_mode():
            with self.controller.suspended():
                self.assertFalse(self.controller.tui_active)
            self.assertTrue(self.controller.tui_active)
        self.assertEqual(self.writes, [ENTER_SCREEN, LEAVE_SCREEN, ENTER_SCREEN, LEAVE_SCREEN])

    def test_suspended_outside_tui_is_noop(self) -> None:
        with self.controller.suspended():
            pass
        self.assertEqual(self.writes, [])
        self.assertFalse(self.controller.tui_active)


if __name__ == "__main__":
    unittest.main()
