"""Script source loading, sanitization, and Pygments highlighting."""

from __future__ import annotations

import re
from functools import lru_cache
from pathlib import Path

from pygments import highlight as pygments_highlight
from pygments.formatters import Terminal256Formatter
from pygments.lexers import TextLexer, get_lexer_for_filename
from pygments.styles import get_all_styles
from pygments.util import ClassNotFound

DEFAULT_STYLE = "monokai"
_CONTROL_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f]")


def read_text(path: Path) -> str:
    """Decode ``path`` as UTF-8 (a BOM is dropped), falling back to Latin-1."""
    data = path.read_bytes()
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError:
        return data.decode("latin-1")


def _escape_control(match: re.Match[str]) -> str:
    return f"\\x{ord(match.group(0)):02x}"


def sanitize_terminal_text(source: str) -> str:
    """Show control bytes as ``\\xNN`` so a preview cannot ring the bell or move the cursor."""
    source = source.replace("\r\n", "\n").replace("\r", "\n").replace("\x00", "")
    return _CONTROL_RE.sub(_escape_control, source)


@lru_cache(maxsize=None)
def available_styles() -> frozenset[str]:
    return frozenset(get_all_styles())


def normalize_style(style: str | None) -> str:
    if style and style in available_styles():
        return style
    return DEFAULT_STYLE


@lru_cache(maxsize=16)
def _formatter_for_style(style: str) -> Terminal256Formatter:
    return Terminal256Formatter(style=style)


def colorize_source(source: str, path: Path, style: str = DEFAULT_STYLE) -> str:
    """Highlight ``source`` with a lexer picked from ``path``'s file name."""
    try:
        lexer = get_lexer_for_filename(path.name, source)
    except ClassNotFound:
        lexer = TextLexer()
    return pygments_highlight(source, lexer, _formatter_for_style(normalize_style(style)))


__all__ = [
    "DEFAULT_STYLE",
    "available_styles",
    "colorize_source",
    "normalize_style",
    "read_text",
    "sanitize_terminal_text",
]
