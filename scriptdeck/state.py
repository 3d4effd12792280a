from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from .catalog import CatalogEntry


class Tab(Enum):
    SCRIPTS = 0
    OPTIONS = 1
    ABOUT = 2

    @property
    def title(self) -> str:
        return self.name.capitalize()


class Focus(Enum):
    LIST = "list"
    PREVIEW = "preview"
    SEARCH = "search"
    REPO_INPUT = "repo_input"


class ViewMode(Enum):
    TREE = "tree"
    RECURSIVE_FLAT = "recursive"


@dataclass(frozen=True)
class ParentLocation:
    path: Path
    index: int


@dataclass(frozen=True)
class CategoryEntry:
    """Left-hand row on the Options tab."""

    display_name: str
    description: str
    category: str


@dataclass(frozen=True)
class OptionEntry:
    """Right-hand row on the Options tab (a theme or a repository action)."""

    display_name: str
    description: str
    action: str


ListEntry = CatalogEntry | CategoryEntry | OptionEntry


@dataclass
class NavigationState:
    root_path: Path
    current_path: Path
    parent_stack: list[ParentLocation] = field(default_factory=list)
    view_mode: ViewMode = ViewMode.TREE
    all_entries: list[CatalogEntry] = field(default_factory=list)
    displayed: list[CatalogEntry] = field(default_factory=list)
    selected_idx: int = 0
    search_text: str = ""
    search_tokens: list[str] = field(default_factory=list)
    tab: Tab = Tab.SCRIPTS
    focus: Focus = Focus.LIST
    preview_text: str = ""
    preview_start: int = 0
    option_categories: list[CategoryEntry] = field(default_factory=list)
    option_category_idx: int = 0
    option_items: list[OptionEntry] = field(default_factory=list)
    option_item_idx: int = 0
    selected_category: str = ""
    option_detail_active: bool = False
    theme_name: str = ""
    repo_url: str = ""
    repo_input_text: str = ""
    repo_input_error: str = ""
    status_message: str = ""
    dirty: bool = True
    skip_next_lf: bool = False

    @property
    def search_active(self) -> bool:
        return self.focus is Focus.SEARCH

    def selected_entry(self) -> CatalogEntry | None:
        if 0 <= self.selected_idx < len(self.displayed):
            return self.displayed[self.selected_idx]
        return None
