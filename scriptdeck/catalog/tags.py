"""Tag-block extraction from the leading comments of script files.

A tag block looks like::

    #*Tags:
    # Shell: bash zsh
    # OS: linux, ubuntu

Older scripts carry a single ``#bash #linux`` line instead; those tags are
filed under the ``legacy`` category. Parsing only ever reads the top of a
file.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

LEGACY_CATEGORY = "legacy"
MAX_SCAN_LINES = 200

_BLOCK_OPENER_RE = re.compile(r"^#\*Tags:?\s*$")
_CATEGORY_LINE_RE = re.compile(r"^#\s*([A-Za-z_]+):\s*(.+)$")
_LEGACY_LINE_RE = re.compile(r"^#([A-Za-z_]+)\s+#([A-Za-z_]+)")
_LEGACY_TOKEN_RE = re.compile(r"#([A-Za-z_]+)")


class TagParseError(OSError):
    """Raised when a script cannot be read for tag extraction."""


@dataclass(frozen=True)
class Tag:
    category: str
    value: str


def _normalize_token(token: str) -> str:
    return token.strip().lower()


@dataclass(frozen=True)
class ScriptTagSet:
    """Ordered tags parsed from one script, in file order."""

    path: Path
    tags: tuple[Tag, ...] = field(default_factory=tuple)

    def _matches(self, token: str) -> bool:
        return any(token in tag.category or token in tag.value for tag in self.tags)

    def has_all(self, tokens: Iterable[str]) -> bool:
        """Return ``True`` when every token is a substring of some tag category or value."""
        for raw in tokens:
            token = _normalize_token(raw)
            if token and not self._matches(token):
                return False
        return True

    def has_any(self, tokens: Iterable[str]) -> bool:
        """Return ``True`` when at least one token matches some tag."""
        for raw in tokens:
            token = _normalize_token(raw)
            if token and self._matches(token):
                return True
        return False

    def has_tag(self, category: str, value: str) -> bool:
        """Exact (case-insensitive) lookup of one ``category: value`` pair."""
        category = _normalize_token(category)
        value = _normalize_token(value)
        return any(tag.category == category and tag.value == value for tag in self.tags)

    def values_for(self, category: str) -> list[str]:
        category = _normalize_token(category)
        return [tag.value for tag in self.tags if tag.category == category]

    def categories(self) -> list[str]:
        """Distinct categories in first-seen order."""
        seen: dict[str, None] = {}
        for tag in self.tags:
            seen.setdefault(tag.category, None)
        return list(seen)


def _category_line_tags(line: str) -> list[Tag] | None:
    match = _CATEGORY_LINE_RE.match(line)
    if match is None:
        return None
    category = match.group(1).strip().lower()
    tags: list[Tag] = []
    for raw_value in match.group(2).split():
        value = raw_value.strip(",").lower()
        if value:
            tags.append(Tag(category=category, value=value))
    return tags


def _legacy_line_tags(line: str) -> list[Tag]:
    if _LEGACY_LINE_RE.match(line) is None:
        return []
    return [Tag(category=LEGACY_CATEGORY, value=word.lower()) for word in _LEGACY_TOKEN_RE.findall(line)]


def parse_tag_lines(lines: Iterable[str]) -> list[Tag]:
    """Extract tags from already-read lines, stopping after the first block of interest."""
    tags: list[Tag] = []
    in_block = False
    for scanned, raw_line in enumerate(lines):
        if scanned >= MAX_SCAN_LINES:
            break
        line = raw_line.strip()
        if in_block:
            if not line:
                break
            if not line.startswith("#"):
                break
            found = _category_line_tags(line)
            if found:
                tags.extend(found)
            continue

        if _BLOCK_OPENER_RE.match(line):
            in_block = True
            continue
        legacy = _legacy_line_tags(line)
        if legacy:
            tags.extend(legacy)
            break
    return tags


def parse_tags(path: Path) -> ScriptTagSet:
    """Parse the tag block at the top of ``path``.

    Raises ``TagParseError`` when the file cannot be opened or read. A file
    without any recognizable tags yields an empty set.
    """
    try:
        with path.open("r", encoding="utf-8", errors="replace") as handle:
            tags = parse_tag_lines(handle)
    except OSError as exc:
        raise TagParseError(exc.errno, f"cannot read tags from {path}: {exc.strerror or exc}") from exc
    return ScriptTagSet(path=path, tags=tuple(tags))


__all__ = [
    "LEGACY_CATEGORY",
    "MAX_SCAN_LINES",
    "Tag",
    "ScriptTagSet",
    "TagParseError",
    "parse_tag_lines",
    "parse_tags",
]
