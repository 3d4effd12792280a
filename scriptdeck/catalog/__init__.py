"""Script catalog: entry types, tag parsing, filesystem listing, content cache.

This package holds the non-UI primitives the navigation layer builds on.
"""

from __future__ import annotations

from .cache import ContentCache
from .fs import list_directory, list_recursive
from .tags import LEGACY_CATEGORY, ScriptTagSet, Tag, TagParseError, parse_tag_lines, parse_tags
from .types import (
    DIRECTORY_MARKER,
    SCRIPT_EXTENSIONS,
    CatalogEntry,
    DirectoryEntry,
    EntryKind,
    ScriptEntry,
    classify_name,
    is_powershell_name,
)

__all__ = [
    "ContentCache",
    "list_directory",
    "list_recursive",
    "LEGACY_CATEGORY",
    "ScriptTagSet",
    "Tag",
    "TagParseError",
    "parse_tag_lines",
    "parse_tags",
    "DIRECTORY_MARKER",
    "SCRIPT_EXTENSIONS",
    "CatalogEntry",
    "DirectoryEntry",
    "EntryKind",
    "ScriptEntry",
    "classify_name",
    "is_powershell_name",
]
