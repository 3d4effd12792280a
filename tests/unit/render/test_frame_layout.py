"""Frame layout tests for ``build_frame``.

Every frame must be exactly ``height`` rows of ``width`` display columns no
matter which tab, focus or filter is active.
"""

from __future__ import annotations

import tempfile
import unittest
from pathlib import Path

from scriptdeck.ansi import ANSI_ESCAPE_RE, display_width
from scriptdeck.catalog import ContentCache
from scriptdeck.navigation import ActivateSearch, FocusPane, NavigationServices, SwitchTab, apply_action, initial_state
from scriptdeck.preview import PreviewBuilder
from scriptdeck.render import RECURSIVE_TITLE, build_frame, list_window_start, pane_widths, selected_with_ansi
from scriptdeck.state import Focus, ViewMode
from scriptdeck.ui_theme import DEFAULT_THEME, PLAIN_THEME


def _plain(line: str) -> str:
    return ANSI_ESCAPE_RE.sub("", line)


class BuildFrameTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.root = Path(self._tmp.name) / "scripts"
        (self.root / "linux").mkdir(parents=True)
        (self.root / "linux" / "update.sh").write_text("#*Tags:\n# OS: linux\n", encoding="utf-8")
        (self.root / "deploy.sh").write_text("#*Tags:\n# Shell: bash\n\necho deploy\n", encoding="utf-8")
        (self.root / "setup.ps1").write_text("Write-Host 'hi'\n", encoding="utf-8")
        self.services = NavigationServices(preview=PreviewBuilder(cache=ContentCache(), no_color=True))

    def _state(self, **kwargs):
        return initial_state(self.root, self.services, **kwargs)

    def assertFrameShape(self, frame: list[str], width: int, height: int) -> None:
        self.assertEqual(len(frame), height)
        for row in frame:
            self.assertEqual(display_width(row), width, repr(row))

    def test_scripts_tab_layout(self) -> None:
        state = self._state()
        frame = build_frame(state, PLAIN_THEME, 80, 20)

        self.assertFrameShape(frame, 80, 20)
        self.assertIn("Scripts", _plain(frame[0]))
        self.assertTrue(_plain(frame[1]).startswith("scripts/"))
        self.assertIn("Ctrl+F or / to search", _plain(frame[2]))
        self.assertIn("> linux/", _plain(frame[4]))
        self.assertIn("│", _plain(frame[4]))
        self.assertTrue(_plain(frame[-1]).startswith("Tab switch"))

    def test_colored_theme_keeps_shape(self) -> None:
        state = self._state()
        self.assertFrameShape(build_frame(state, DEFAULT_THEME, 100, 24), 100, 24)
        self.assertFrameShape(build_frame(state, DEFAULT_THEME, 30, 8), 30, 8)

    def test_search_row_states(self) -> None:
        state = self._state(search_text="bash")
        self.assertIn("Filter: bash (1 match)", _plain(build_frame(state, PLAIN_THEME, 80, 12)[2]))

        apply_action(state, ActivateSearch(), self.services)
        frame = build_frame(state, PLAIN_THEME, 80, 12)
        self.assertTrue(_plain(frame[2]).startswith("Search: bash_"))
        self.assertIn("Esc leave search", _plain(frame[-1]))

    def test_recursive_title(self) -> None:
        state = self._state(view_mode=ViewMode.RECURSIVE_FLAT)
        frame = build_frame(state, PLAIN_THEME, 80, 12)
        self.assertTrue(_plain(frame[1]).startswith(RECURSIVE_TITLE))
        self.assertIn("> deploy.sh", _plain(frame[4]))

    def test_preview_is_shown_beside_list(self) -> None:
        state = self._state()
        state.selected_idx = 1
        state.preview_text = self.services.preview.for_entry(state.selected_entry())
        frame = build_frame(state, PLAIN_THEME, 80, 12)
        self.assertIn("Tags  shell: bash", _plain(frame[4]).split("│", 1)[1])

    def test_options_tab_lists_categories_and_items(self) -> None:
        state = self._state()
        apply_action(state, SwitchTab(1), self.services)
        apply_action(state, FocusPane(Focus.PREVIEW), self.services)
        frame = build_frame(state, PLAIN_THEME, 80, 16)

        self.assertFrameShape(frame, 80, 16)
        body = "\n".join(_plain(row) for row in frame[4:-2])
        self.assertIn("Color Schemes", body)
        self.assertIn("Repository", body)
        self.assertIn("> Ocean Breeze", body)
        self.assertIn("Arctic Frost", body)

    def test_repository_url_input_is_drawn_in_right_pane(self) -> None:
        state = self._state()
        apply_action(state, SwitchTab(1), self.services)
        state.focus = Focus.REPO_INPUT
        state.repo_input_text = "https://github.com/a/b"
        state.repo_input_error = "URL should end with .git for git repositories"
        frame = build_frame(state, PLAIN_THEME, 100, 14)

        self.assertFrameShape(frame, 100, 14)
        right = [_plain(row).split("│", 1)[1] for row in frame[4:-2]]
        self.assertTrue(right[0].startswith("Repository URL: https://github.com/a/b_"))
        self.assertTrue(right[2].startswith("Error: URL should end with .git"))
        self.assertTrue(_plain(frame[-1]).startswith("Type a git URL"))

    def test_about_tab_is_full_width_text(self) -> None:
        state = self._state()
        apply_action(state, SwitchTab(2), self.services)
        frame = build_frame(state, PLAIN_THEME, 60, 14)
        self.assertFrameShape(frame, 60, 14)
        self.assertTrue(_plain(frame[4]).startswith("scriptdeck"))
        self.assertNotIn("│", _plain(frame[4]))

    def test_status_message_in_footer(self) -> None:
        state = self._state()
        state.status_message = "Launched deploy.sh (foreground)"
        footer = _plain(build_frame(state, PLAIN_THEME, 120, 10)[-1])
        self.assertTrue(footer.rstrip().endswith("Launched deploy.sh (foreground)"))


class LayoutHelperTests(unittest.TestCase):
    def test_pane_widths_add_up(self) -> None:
        for width in (10, 40, 80, 200):
            left, right = pane_widths(width)
            with self.subTest(width=width):
                self.assertEqual(left + 1 + right, width)

    def test_list_window_keeps_selection_visible(self) -> None:
        self.assertEqual(list_window_start(3, 10), 0)
        self.assertEqual(list_window_start(12, 10), 3)

    def test_selected_with_ansi_keeps_reverse_after_resets(self) -> None:
        self.assertEqual(selected_with_ansi("a\033[0mb"), "\033[7ma\033[0;7mb\033[0m")
        self.assertEqual(selected_with_ansi(""), "")


if __name__ == "__main__":
    unittest.main()
