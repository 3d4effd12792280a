"""Preview-pane text for the selected catalog entry.

Script previews are a short tag summary followed by highlighted source and
are memoized in the shared ``ContentCache`` (errors included, so a broken
file is not re-read on every selection change).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from .catalog import CatalogEntry, ContentCache, DirectoryEntry, ScriptEntry, ScriptTagSet
from .highlight import DEFAULT_STYLE, colorize_source, read_text, sanitize_terminal_text

logger = logging.getLogger(__name__)

MAX_PREVIEW_LINE_CHARS = 200
SELECT_HINT = "Select a script to preview..."
NO_MATCHES_MESSAGE = "No scripts found matching your search criteria."
NO_MATCHES_RECURSIVE_MESSAGE = "No scripts found matching your search criteria in any directory."
EMPTY_DIRECTORY_MESSAGE = "No scripts in this directory."


def truncate_long_lines(source: str, limit: int = MAX_PREVIEW_LINE_CHARS) -> str:
    lines = source.split("\n")
    for idx, line in enumerate(lines):
        if len(line) > limit:
            lines[idx] = line[:limit] + "..."
    return "\n".join(lines)


def format_tag_summary(tags: ScriptTagSet | None) -> str:
    """Render ``category: v1, v2`` pairs on one line, or an empty string."""
    if tags is None or not tags.tags:
        return ""
    parts = [f"{category}: {', '.join(tags.values_for(category))}" for category in tags.categories()]
    return "Tags  " + " · ".join(parts)


def launching_message(display_name: str) -> str:
    return f"Launching {display_name}...\n\nThe script runs in its own terminal session."


@dataclass
class PreviewBuilder:
    """Produce preview text for entries, caching script content per path."""

    cache: ContentCache = field(default_factory=ContentCache)
    style: str = DEFAULT_STYLE
    no_color: bool = False

    def _load_script(self, path: Path, tags: ScriptTagSet | None) -> str:
        try:
            source = read_text(path)
        except OSError as exc:
            logger.debug("preview read failed for %s: %s", path, exc)
            return f"Error reading file: {exc}"

        source = truncate_long_lines(sanitize_terminal_text(source))
        body = source if self.no_color else colorize_source(source, path, self.style)
        summary = format_tag_summary(tags)
        if summary:
            return f"{summary}\n\n{body}"
        return body

    def script_preview(self, entry: ScriptEntry) -> str:
        return self.cache.get_or_load(entry.path, lambda path: self._load_script(path, entry.tags))

    def for_entry(self, entry: CatalogEntry | None) -> str:
        if isinstance(entry, ScriptEntry):
            return self.script_preview(entry)
        if isinstance(entry, DirectoryEntry):
            return f"{entry.display_name}\n\nPress Enter or Right to open this directory."
        return SELECT_HINT


__all__ = [
    "EMPTY_DIRECTORY_MESSAGE",
    "MAX_PREVIEW_LINE_CHARS",
    "NO_MATCHES_MESSAGE",
    "NO_MATCHES_RECURSIVE_MESSAGE",
    "PreviewBuilder",
    "SELECT_HINT",
    "format_tag_summary",
    "launching_message",
    "truncate_long_lines",
]
