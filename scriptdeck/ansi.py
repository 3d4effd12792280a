"""Column arithmetic for styled terminal text.

Escape sequences occupy no columns, tabs advance to the next 8-column stop
and East Asian wide characters take two columns. Pane rows are fitted with
these helpers so highlighted previews line up beside the script list.
"""

from __future__ import annotations

import re
import unicodedata
from collections.abc import Iterator

ANSI_ESCAPE_RE = re.compile(r"\x1b\[[0-9;?]*[ -/]*[@-~]")
TAB_STOP = 8
RESET = "\033[0m"


def cell_width(ch: str, col: int) -> int:
    """Columns taken by ``ch`` when drawn at column ``col``."""
    if ch == "\t":
        return TAB_STOP - col % TAB_STOP
    if unicodedata.combining(ch):
        return 0
    return 2 if unicodedata.east_asian_width(ch) in ("W", "F") else 1


def _segments(text: str) -> Iterator[tuple[str, bool]]:
    """Yield ``(piece, is_escape)`` runs of ``text`` in order."""
    pos = 0
    for match in ANSI_ESCAPE_RE.finditer(text):
        if match.start() > pos:
            yield text[pos:match.start()], False
        yield match.group(0), True
        pos = match.end()
    if pos < len(text):
        yield text[pos:], False


def display_width(text: str) -> int:
    col = 0
    for piece, is_escape in _segments(text):
        if is_escape:
            continue
        for ch in piece:
            col += cell_width(ch, col)
    return col


def clip_ansi_line(text: str, max_cols: int) -> str:
    """Cut ``text`` after ``max_cols`` columns, keeping escapes and expanding tabs."""
    if max_cols <= 0:
        return ""
    out: list[str] = []
    col = 0
    for piece, is_escape in _segments(text):
        if is_escape:
            out.append(piece)
            continue
        for ch in piece:
            width = cell_width(ch, col)
            if col + width > max_cols:
                return "".join(out)
            out.append(" " * width if ch == "\t" else ch)
            col += width
    return "".join(out)


def fit_ansi_line(text: str, width: int) -> str:
    """Clip ``text`` to ``width`` columns and pad it with spaces to exactly that width."""
    clipped = clip_ansi_line(text, width)
    padding = " " * max(0, width - display_width(clipped))
    if "\x1b" in clipped:
        # Padding must not inherit a color left open by the clip.
        return f"{clipped}{RESET}{padding}"
    return clipped + padding


__all__ = [
    "ANSI_ESCAPE_RE",
    "RESET",
    "cell_width",
    "clip_ansi_line",
    "display_width",
    "fit_ansi_line",
]
