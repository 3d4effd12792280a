"""Filesystem scanning for the script catalog.

Two views are offered: one directory level (directories first) and a
flattened recursive sweep that surfaces only scripts. Both skip hidden
names and turn unreadable directories into empty listings.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from .tags import ScriptTagSet, TagParseError, parse_tags
from .types import DIRECTORY_MARKER, CatalogEntry, DirectoryEntry, EntryKind, ScriptEntry, classify_name

logger = logging.getLogger(__name__)


def _safe_tags(path: Path) -> ScriptTagSet | None:
    """Parse tags for ``path``, degrading to ``None`` on read failure."""
    try:
        return parse_tags(path)
    except TagParseError as exc:
        logger.debug("tag parse failed for %s: %s", path, exc)
        return None


def _scan(directory: Path) -> list[tuple[str, Path, bool]] | None:
    """Return ``(name, path, is_dir)`` rows for ``directory`` or ``None`` when unreadable."""
    rows: list[tuple[str, Path, bool]] = []
    try:
        with os.scandir(directory) as entries:
            for child in entries:
                try:
                    is_dir = child.is_dir(follow_symlinks=False)
                except OSError:
                    is_dir = False
                rows.append((child.name, Path(child.path), is_dir))
    except OSError as exc:
        logger.debug("cannot scan %s: %s", directory, exc)
        return None
    return rows


def list_directory(path: Path) -> list[CatalogEntry]:
    """List one directory level: directories first, then scripts, each case-insensitively sorted."""
    rows = _scan(path)
    if rows is None:
        return []

    rows.sort(key=lambda row: (not row[2], row[0].lower()))
    entries: list[CatalogEntry] = []
    for name, child_path, is_dir in rows:
        kind = classify_name(name, is_dir)
        if kind is EntryKind.DIRECTORY:
            entries.append(DirectoryEntry(display_name=name + DIRECTORY_MARKER, path=child_path))
        elif kind is EntryKind.SCRIPT:
            entries.append(ScriptEntry(display_name=name, path=child_path, tags=_safe_tags(child_path)))
    return entries


def list_recursive(path: Path) -> list[ScriptEntry]:
    """Collect every script under ``path`` with its root-relative display name."""
    collected: list[ScriptEntry] = []

    def walk(directory: Path, relative: str) -> None:
        rows = _scan(directory)
        if rows is None:
            return
        for name, child_path, is_dir in rows:
            kind = classify_name(name, is_dir)
            display = f"{relative}/{name}" if relative else name
            if kind is EntryKind.DIRECTORY:
                walk(child_path, display)
            elif kind is EntryKind.SCRIPT:
                collected.append(ScriptEntry(display_name=display, path=child_path, tags=_safe_tags(child_path)))

    walk(path, "")
    collected.sort(key=lambda entry: entry.display_name.lower())
    return collected


__all__ = [
    "list_directory",
    "list_recursive",
]
