"""Frame rendering for the browser UI.

``build_frame`` turns a ``NavigationState`` into exactly ``height`` rows of
``width`` display columns; ``render_frame`` paints them.
"""

from __future__ import annotations

import os
import sys

from .ansi import fit_ansi_line
from .catalog import DirectoryEntry
from .state import Focus, NavigationState, Tab, ViewMode
from .ui_theme import UITheme

DIVIDER = "│"
RULE = "─"
HEADER_ROWS = 4
FOOTER_ROWS = 2
MIN_LEFT_WIDTH = 20
RECURSIVE_TITLE = "All Scripts (Recursive)"

FOOTER_SCRIPTS = (
    "Tab switch · ←↑↓→ navigate · Enter run/open · Ctrl+F search · "
    "Ctrl+R recursive · Ctrl+H/L panes · q quit"
)
FOOTER_SEARCH = "Type tags to filter · Enter keep filter · Esc leave search · Backspace edit"
FOOTER_OPTIONS = "Tab switch · ↑↓ navigate · Enter select/apply · Ctrl+H/L panes · Esc back · q quit"
FOOTER_REPO_INPUT = "Type a git URL · Enter save and sync · Esc cancel · Backspace edit"
FOOTER_ABOUT = "Tab switch · ↑↓ scroll · q quit"


def selected_with_ansi(text: str) -> str:
    """Apply selection styling without discarding existing ANSI colors."""
    if not text:
        return text

    # Keep reverse video active even when the text contains internal resets.
    return "\033[7m" + text.replace("\033[0m", "\033[0;7m") + "\033[0m"


def _styled(style: str, text: str, theme: UITheme) -> str:
    if not style:
        return text
    return f"{style}{text}{theme.reset}"


def pane_widths(width: int) -> tuple[int, int]:
    """Return ``(left, right)`` widths with one divider column between them."""
    left = max(MIN_LEFT_WIDTH, (width * 2) // 5)
    left = min(left, max(1, width - 2))
    right = max(1, width - left - 1)
    return left, right


def list_window_start(selected: int, rows: int) -> int:
    if rows <= 0 or selected < rows:
        return 0
    return selected - rows + 1


def _tab_bar(state: NavigationState, theme: UITheme, width: int) -> str:
    parts: list[str] = []
    for tab in Tab:
        label = f" {tab.title} "
        if tab is state.tab:
            parts.append(_styled(theme.tab_active, label, theme))
        else:
            parts.append(_styled(theme.tab_inactive, label, theme))
    return fit_ansi_line(" ".join(parts), width)


def _location_title(state: NavigationState) -> str:
    if state.tab is Tab.OPTIONS:
        return "Options"
    if state.tab is Tab.ABOUT:
        return "About"
    if state.view_mode is ViewMode.RECURSIVE_FLAT:
        return RECURSIVE_TITLE
    try:
        relative = state.current_path.relative_to(state.root_path)
    except ValueError:
        return str(state.current_path)
    parts = [state.root_path.name or str(state.root_path)]
    parts.extend(relative.parts)
    return "/".join(parts) + "/"


def _search_row(state: NavigationState, theme: UITheme, width: int) -> str:
    if state.tab is not Tab.SCRIPTS:
        return " " * width
    if state.focus is Focus.SEARCH:
        prompt = _styled(theme.search_prompt, "Search: ", theme)
        return fit_ansi_line(f"{prompt}{_styled(theme.search_text, state.search_text, theme)}_", width)
    if state.search_tokens:
        count = sum(1 for entry in state.displayed if not isinstance(entry, DirectoryEntry))
        label = "match" if count == 1 else "matches"
        text = f"Filter: {' '.join(state.search_tokens)} ({count} {label})"
        return fit_ansi_line(_styled(theme.status, text, theme), width)
    return fit_ansi_line(_styled(theme.dim, "Ctrl+F or / to search by tag", theme), width)


def _list_rows(
    labels: list[tuple[str, str]],
    selected: int,
    focused: bool,
    theme: UITheme,
    width: int,
    rows: int,
) -> list[str]:
    out: list[str] = []
    start = list_window_start(selected, rows)
    for idx in range(start, min(len(labels), start + rows)):
        label, style = labels[idx]
        if idx == selected:
            text = fit_ansi_line(f"> {label}", width)
            out.append(selected_with_ansi(text) if focused else _styled(theme.selected, text, theme))
        else:
            out.append(fit_ansi_line(_styled(style, f"  {label}", theme), width))
    while len(out) < rows:
        out.append(" " * width)
    return out


def _text_rows(text: str, start: int, width: int, rows: int) -> list[str]:
    lines = text.split("\n")
    window = lines[start:start + rows]
    out = [fit_ansi_line(line, width) for line in window]
    while len(out) < rows:
        out.append(" " * width)
    return out


def _scripts_body(state: NavigationState, theme: UITheme, left: int, right: int, rows: int) -> tuple[list[str], list[str]]:
    labels: list[tuple[str, str]] = []
    for entry in state.displayed:
        style = theme.directory if isinstance(entry, DirectoryEntry) else theme.script
        labels.append((entry.display_name, style))
    list_focused = state.focus in (Focus.LIST, Focus.SEARCH)
    left_rows = _list_rows(labels, state.selected_idx, list_focused, theme, left, rows)
    right_rows = _text_rows(state.preview_text, state.preview_start, right, rows)
    return left_rows, right_rows


def _repo_input_rows(state: NavigationState, theme: UITheme, width: int, rows: int) -> list[str]:
    prompt = _styled(theme.search_prompt, "Repository URL: ", theme)
    lines = [f"{prompt}{_styled(theme.search_text, state.repo_input_text, theme)}_"]
    if state.repo_input_error:
        lines.extend(["", _styled(theme.status, f"Error: {state.repo_input_error}", theme)])
    lines.extend(["", state.preview_text])
    return _text_rows("\n".join(lines), 0, width, rows)


def _options_body(state: NavigationState, theme: UITheme, left: int, right: int, rows: int) -> tuple[list[str], list[str]]:
    labels = [(category.display_name, theme.script) for category in state.option_categories]
    left_rows = _list_rows(labels, state.option_category_idx, state.focus is Focus.LIST, theme, left, rows)
    if state.focus is Focus.REPO_INPUT:
        return left_rows, _repo_input_rows(state, theme, right, rows)
    if state.option_detail_active:
        return left_rows, _text_rows(state.preview_text, state.preview_start, right, rows)

    item_labels = [(item.display_name, theme.script) for item in state.option_items]
    item_rows = len(item_labels)
    right_rows = _list_rows(
        item_labels,
        state.option_item_idx if state.focus is Focus.PREVIEW else -1,
        state.focus is Focus.PREVIEW,
        theme,
        right,
        min(item_rows, rows),
    )
    detail: list[str] = []
    if state.focus is Focus.PREVIEW and state.option_items:
        detail.append(state.option_items[state.option_item_idx].description)
        detail.append("")
    detail.append(state.preview_text)
    remaining = rows - len(right_rows)
    if remaining > 1:
        right_rows.append(" " * right)
        right_rows.extend(_text_rows("\n".join(detail), 0, right, remaining - 1))
    elif remaining == 1:
        right_rows.append(" " * right)
    return left_rows, right_rows


def _footer(state: NavigationState, theme: UITheme, width: int) -> str:
    if state.tab is Tab.SCRIPTS:
        help_text = FOOTER_SEARCH if state.focus is Focus.SEARCH else FOOTER_SCRIPTS
    elif state.tab is Tab.OPTIONS:
        help_text = FOOTER_REPO_INPUT if state.focus is Focus.REPO_INPUT else FOOTER_OPTIONS
    else:
        help_text = FOOTER_ABOUT
    if state.status_message:
        status = f" {state.status_message} "
        help_width = max(0, width - len(status))
        return fit_ansi_line(
            _styled(theme.dim, fit_ansi_line(help_text, help_width), theme) + _styled(theme.status, status, theme),
            width,
        )
    return fit_ansi_line(_styled(theme.dim, help_text, theme), width)


def build_frame(state: NavigationState, theme: UITheme, width: int, height: int) -> list[str]:
    """Return ``height`` screen rows for the current state."""
    width = max(1, width)
    body_rows = max(1, height - HEADER_ROWS - FOOTER_ROWS)
    frame = [
        _tab_bar(state, theme, width),
        fit_ansi_line(_styled(theme.title, _location_title(state), theme), width),
        _search_row(state, theme, width),
        _styled(theme.divider, RULE * width, theme),
    ]

    if state.tab is Tab.ABOUT:
        frame.extend(_text_rows(state.preview_text, state.preview_start, width, body_rows))
    else:
        left, right = pane_widths(width)
        if state.tab is Tab.SCRIPTS:
            left_rows, right_rows = _scripts_body(state, theme, left, right, body_rows)
        else:
            left_rows, right_rows = _options_body(state, theme, left, right, body_rows)
        divider_style = theme.focus_border if state.focus in (Focus.PREVIEW, Focus.REPO_INPUT) else theme.divider
        divider = _styled(divider_style, DIVIDER, theme)
        for left_row, right_row in zip(left_rows, right_rows):
            frame.append(f"{left_row}{divider}{right_row}")

    frame.append(_styled(theme.divider, RULE * width, theme))
    frame.append(_footer(state, theme, width))
    return frame[:height] if height > 0 else frame


def render_frame(lines: list[str]) -> None:
    out = ["\033[H\033[J", "\r\n".join(lines)]
    os.write(sys.stdout.fileno(), "".join(out).encode("utf-8", errors="replace"))


__all__ = [
    "RECURSIVE_TITLE",
    "build_frame",
    "list_window_start",
    "pane_widths",
    "render_frame",
    "selected_with_ansi",
]
