"""Domain datatypes for catalog entries shown in the script list."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from .tags import ScriptTagSet

SCRIPT_EXTENSIONS = frozenset({".sh", ".ps1", ".bat", ".cmd"})
POWERSHELL_EXTENSION = ".ps1"
DIRECTORY_MARKER = "/"


class EntryKind(Enum):
    DIRECTORY = "directory"
    SCRIPT = "script"
    IGNORED = "ignored"


def classify_name(name: str, is_dir: bool) -> EntryKind:
    """Classify one filesystem name; hidden names are always ignored."""
    if name.startswith("."):
        return EntryKind.IGNORED
    if is_dir:
        return EntryKind.DIRECTORY
    if Path(name).suffix.lower() in SCRIPT_EXTENSIONS:
        return EntryKind.SCRIPT
    return EntryKind.IGNORED


def is_powershell_name(name: str) -> bool:
    return name.lower().endswith(POWERSHELL_EXTENSION)


@dataclass(frozen=True)
class DirectoryEntry:
    """One directory row; ``display_name`` carries the trailing marker."""

    display_name: str
    path: Path

    @property
    def kind(self) -> EntryKind:
        return EntryKind.DIRECTORY


@dataclass(frozen=True)
class ScriptEntry:
    """One runnable script row with its parsed tags (``None`` when unreadable)."""

    display_name: str
    path: Path
    tags: ScriptTagSet | None = None

    @property
    def kind(self) -> EntryKind:
        return EntryKind.SCRIPT

    @property
    def is_powershell(self) -> bool:
        return is_powershell_name(self.display_name)


CatalogEntry = DirectoryEntry | ScriptEntry


__all__ = [
    "SCRIPT_EXTENSIONS",
    "POWERSHELL_EXTENSION",
    "DIRECTORY_MARKER",
    "EntryKind",
    "classify_name",
    "is_powershell_name",
    "DirectoryEntry",
    "ScriptEntry",
    "CatalogEntry",
]
