"""Navigation state machine for the browser UI.

``apply_action`` is the single update function: it mutates the
``NavigationState`` it is given according to one ``Action`` and reports
whether the program should quit or a script launch is pending. It has no UI
or process concerns; collaborators arrive through ``NavigationServices``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

from .catalog import CatalogEntry, DirectoryEntry, ScriptEntry, list_directory, list_recursive
from .config import DEFAULT_REPO_URL, validate_repo_url
from .launch import LaunchRequest
from .preview import (
    EMPTY_DIRECTORY_MESSAGE,
    NO_MATCHES_MESSAGE,
    NO_MATCHES_RECURSIVE_MESSAGE,
    PreviewBuilder,
    launching_message,
)
from .repository import RepositoryError
from .search import filter_entries, parse_search_tokens
from .state import (
    CategoryEntry,
    Focus,
    NavigationState,
    OptionEntry,
    ParentLocation,
    Tab,
    ViewMode,
)
from .ui_theme import available_theme_names, normalize_theme_name

logger = logging.getLogger(__name__)

ABOUT_TEXT = (
    "scriptdeck\n"
    "\n"
    "A cross-platform script browser.\n"
    "\n"
    "Browse a mirrored script repository, filter scripts by their tags and\n"
    "launch them in a new terminal session.\n"
    "\n"
    "Tagging scripts\n"
    "  #*Tags:\n"
    "  # Shell: bash\n"
    "  # OS: linux ubuntu\n"
    "\n"
    "Search terms are matched against tag categories and values; every term\n"
    "must match for a script to be shown."
)

COLOR_SCHEMES_CATEGORY = "color_schemes"
REPOSITORY_CATEGORY = "repository"

THEME_ACTION_PREFIX = "theme:"
REPO_INFO_ACTION = "repo:info"
REPO_SET_ACTION = "repo:set"
REPO_REFRESH_ACTION = "repo:refresh"
REPO_RESET_ACTION = "repo:reset"

OPTION_CATEGORIES: tuple[CategoryEntry, ...] = (
    CategoryEntry("Color Schemes", "Change the application color theme.", COLOR_SCHEMES_CATEGORY),
    CategoryEntry("Repository", "Manage the script repository.", REPOSITORY_CATEGORY),
)
COLOR_SCHEMES_HINT = (
    "Select a color scheme from the list to apply it instantly.\n\n"
    "Use Ctrl+L to switch to the right pane."
)
REPOSITORY_HINT = (
    "Manage your script repository with the options in the right pane.\n\n"
    "Choose Set Custom Repository to browse scripts from your own git repository."
)
REPO_URL_HELP = (
    "Enter a Git repository URL ending with .git\n\n"
    "Supported formats:\n"
    "- https://github.com/username/repo.git\n"
    "- https://gitlab.com/username/repo.git\n"
    "- ssh://git@github.com/username/repo.git\n\n"
    "Press Enter to save, Esc to cancel"
)


# Actions


@dataclass(frozen=True)
class ToggleViewMode:
    pass


@dataclass(frozen=True)
class Descend:
    pass


@dataclass(frozen=True)
class Ascend:
    pass


@dataclass(frozen=True)
class ActivateSearch:
    pass


@dataclass(frozen=True)
class EditSearch:
    text: str


@dataclass(frozen=True)
class ConfirmSearch:
    pass


@dataclass(frozen=True)
class Cancel:
    pass


@dataclass(frozen=True)
class MoveSelection:
    delta: int


@dataclass(frozen=True)
class PageSelection:
    """Move by ``delta`` pages; page size comes from ``NavigationServices``."""

    delta: int


@dataclass(frozen=True)
class Activate:
    pass


@dataclass(frozen=True)
class SwitchTab:
    index: int


@dataclass(frozen=True)
class NextTab:
    pass


@dataclass(frozen=True)
class PreviousTab:
    pass


@dataclass(frozen=True)
class FocusPane:
    focus: Focus


@dataclass(frozen=True)
class EditRepoUrl:
    text: str


@dataclass(frozen=True)
class SubmitRepoUrl:
    pass


@dataclass(frozen=True)
class Quit:
    pass


Action = (
    ToggleViewMode
    | Descend
    | Ascend
    | ActivateSearch
    | EditSearch
    | ConfirmSearch
    | Cancel
    | MoveSelection
    | PageSelection
    | Activate
    | SwitchTab
    | NextTab
    | PreviousTab
    | FocusPane
    | EditRepoUrl
    | SubmitRepoUrl
    | Quit
)


@dataclass
class NavigationServices:
    """Collaborators used by ``apply_action``.

    Repository callbacks return the new script root (and, for a reset, the
    repository URL now in use); they raise ``RepositoryError`` on failure.
    ``set_repository`` also raises ``ValueError`` for a URL it rejects.
    """

    list_directory: Callable[[Path], list[CatalogEntry]] = list_directory
    list_recursive: Callable[[Path], list[ScriptEntry]] = list_recursive
    preview: PreviewBuilder = field(default_factory=PreviewBuilder)
    save_theme: Callable[[str], None] | None = None
    refresh_repository: Callable[[], Path] | None = None
    reset_repository: Callable[[], tuple[str, Path]] | None = None
    set_repository: Callable[[str], Path] | None = None
    page_size: int = 10


@dataclass(frozen=True)
class NavigationOutcome:
    should_quit: bool = False
    launch: LaunchRequest | None = None


_CONTINUE = NavigationOutcome()


def _clamp(value: int, count: int) -> int:
    if count <= 0:
        return 0
    return max(0, min(value, count - 1))


# Catalog and preview


def _load_catalog(state: NavigationState, services: NavigationServices) -> None:
    if state.view_mode is ViewMode.RECURSIVE_FLAT:
        state.all_entries = list(services.list_recursive(state.root_path))
    else:
        state.all_entries = list(services.list_directory(state.current_path))


def _empty_list_message(state: NavigationState) -> str:
    if state.search_tokens:
        if state.view_mode is ViewMode.RECURSIVE_FLAT:
            return NO_MATCHES_RECURSIVE_MESSAGE
        return NO_MATCHES_MESSAGE
    return EMPTY_DIRECTORY_MESSAGE


def refresh_preview(state: NavigationState, services: NavigationServices) -> None:
    """Recompute the Scripts-tab preview for the current selection."""
    state.preview_start = 0
    if not state.displayed:
        state.preview_text = _empty_list_message(state)
        return
    state.preview_text = services.preview.for_entry(state.selected_entry())


def _apply_filter(state: NavigationState, services: NavigationServices) -> None:
    state.displayed = filter_entries(state.all_entries, state.search_tokens, state.view_mode)
    state.selected_idx = 0
    refresh_preview(state, services)


def _clear_search(state: NavigationState) -> None:
    state.search_text = ""
    state.search_tokens = []
    if state.focus is Focus.SEARCH:
        state.focus = Focus.LIST


def reload_catalog(state: NavigationState, services: NavigationServices) -> None:
    """Re-read the catalog for the current mode and re-apply the search tokens."""
    _load_catalog(state, services)
    _apply_filter(state, services)


# Options tab


def option_items_for(category: str, state: NavigationState) -> list[OptionEntry]:
    if category == COLOR_SCHEMES_CATEGORY:
        current = normalize_theme_name(state.theme_name)
        return [
            OptionEntry(
                name,
                "Current color scheme." if name == current else f"Apply the {name} color scheme.",
                THEME_ACTION_PREFIX + name,
            )
            for name in available_theme_names()
        ]
    if category == REPOSITORY_CATEGORY:
        return [
            OptionEntry("Current Repository", state.repo_url or "(unknown)", REPO_INFO_ACTION),
            OptionEntry("Set Custom Repository", "Browse scripts from another git repository.", REPO_SET_ACTION),
            OptionEntry("Refresh Scripts", "Download the latest scripts from the repository.", REPO_REFRESH_ACTION),
            OptionEntry("Reset to Default", "Switch back to the default script repository.", REPO_RESET_ACTION),
        ]
    return []


def _sync_option_category(state: NavigationState) -> None:
    if not state.option_categories:
        state.option_categories = list(OPTION_CATEGORIES)
    state.option_category_idx = _clamp(state.option_category_idx, len(state.option_categories))
    category = state.option_categories[state.option_category_idx]
    state.selected_category = category.category
    state.option_items = option_items_for(category.category, state)
    state.option_item_idx = _clamp(state.option_item_idx, len(state.option_items))
    state.option_detail_active = False
    state.preview_text = category.description
    state.preview_start = 0


def _repository_info(state: NavigationState) -> str:
    return (
        "Current Repository\n\n"
        f"URL:\n{state.repo_url or '(unknown)'}\n\n"
        f"Scripts location:\n{state.root_path}"
    )


def _switch_root(state: NavigationState, services: NavigationServices, new_root: Path) -> None:
    services.preview.cache.clear()
    state.root_path = new_root
    state.current_path = new_root
    state.parent_stack = []
    reload_catalog(state, services)


def _run_repository_action(state: NavigationState, services: NavigationServices, action: str) -> str:
    try:
        if action == REPO_REFRESH_ACTION:
            if services.refresh_repository is None:
                return "Repository refresh is not available in this session."
            new_root = services.refresh_repository()
            _switch_root(state, services, new_root)
            return f"Scripts refreshed.\n\nRepository:\n{state.repo_url}\n\nScripts location:\n{new_root}"
        if services.reset_repository is None:
            return "Repository reset is not available in this session."
        repo_url, new_root = services.reset_repository()
        state.repo_url = repo_url
        _switch_root(state, services, new_root)
        state.option_items = option_items_for(REPOSITORY_CATEGORY, state)
        return f"Repository reset to default.\n\nRepository:\n{repo_url}\n\nScripts location:\n{new_root}"
    except RepositoryError as exc:
        logger.warning("repository action %s failed: %s", action, exc)
        return f"Repository operation failed:\n\n{exc}"


def _open_repo_input(state: NavigationState, services: NavigationServices) -> None:
    if services.set_repository is None:
        state.option_detail_active = True
        state.preview_start = 0
        state.preview_text = "Setting a custom repository is not available in this session."
        return
    state.focus = Focus.REPO_INPUT
    # Start from the current custom URL; the default one is never pre-filled.
    state.repo_input_text = "" if state.repo_url in ("", DEFAULT_REPO_URL) else state.repo_url
    state.repo_input_error = ""
    state.preview_text = REPO_URL_HELP
    state.preview_start = 0


def _close_repo_input(state: NavigationState) -> None:
    state.focus = Focus.PREVIEW
    state.repo_input_text = ""
    state.repo_input_error = ""


def _submit_repo_url(state: NavigationState, services: NavigationServices) -> None:
    if state.focus is not Focus.REPO_INPUT or services.set_repository is None:
        return
    repo_url = state.repo_input_text.strip()
    try:
        validate_repo_url(repo_url)
    except ValueError as exc:
        state.repo_input_error = str(exc)
        return

    _close_repo_input(state)
    state.option_detail_active = True
    state.preview_start = 0
    try:
        new_root = services.set_repository(repo_url)
    except (RepositoryError, ValueError) as exc:
        logger.warning("setting repository %s failed: %s", repo_url, exc)
        state.preview_text = f"Repository operation failed:\n\n{exc}"
        return
    state.repo_url = repo_url
    _switch_root(state, services, new_root)
    state.option_items = option_items_for(REPOSITORY_CATEGORY, state)
    state.preview_text = (
        f"Custom repository set.\n\nRepository:\n{repo_url}\n\nScripts location:\n{new_root}\n\n"
        "Switch to the Scripts tab to browse it."
    )


def _apply_option(state: NavigationState, services: NavigationServices) -> None:
    if not state.option_items:
        return
    option = state.option_items[state.option_item_idx]
    if option.action.startswith(THEME_ACTION_PREFIX):
        theme_name = normalize_theme_name(option.action[len(THEME_ACTION_PREFIX):])
        state.theme_name = theme_name
        if services.save_theme is not None:
            services.save_theme(theme_name)
        state.option_items = option_items_for(COLOR_SCHEMES_CATEGORY, state)
        state.preview_text = f"Color scheme changed to {theme_name}."
        state.status_message = f"Theme: {theme_name}"
        return
    if option.action == REPO_SET_ACTION:
        _open_repo_input(state, services)
        return

    state.option_detail_active = True
    state.preview_start = 0
    if option.action == REPO_INFO_ACTION:
        state.preview_text = _repository_info(state)
    else:
        state.preview_text = _run_repository_action(state, services, option.action)


def _open_option_category(state: NavigationState) -> None:
    category = state.option_categories[state.option_category_idx]
    state.focus = Focus.PREVIEW
    state.option_detail_active = False
    state.option_item_idx = 0
    state.preview_text = COLOR_SCHEMES_HINT if category.category == COLOR_SCHEMES_CATEGORY else REPOSITORY_HINT


# Transitions


def _descend(state: NavigationState, services: NavigationServices) -> None:
    if state.tab is not Tab.SCRIPTS or state.focus is not Focus.LIST:
        return
    if state.view_mode is not ViewMode.TREE:
        return
    entry = state.selected_entry()
    if not isinstance(entry, DirectoryEntry):
        return
    # Ascend restores an unfiltered listing, so the index is taken from it.
    try:
        index = state.all_entries.index(entry)
    except ValueError:
        index = state.selected_idx
    state.parent_stack.append(ParentLocation(state.current_path, index))
    state.current_path = entry.path
    _clear_search(state)
    reload_catalog(state, services)


def _ascend(state: NavigationState, services: NavigationServices) -> None:
    if state.tab is not Tab.SCRIPTS or state.view_mode is not ViewMode.TREE:
        return
    if not state.parent_stack:
        return
    location = state.parent_stack.pop()
    state.current_path = location.path
    _clear_search(state)
    _load_catalog(state, services)
    state.displayed = list(state.all_entries)
    state.selected_idx = _clamp(location.index, len(state.displayed))
    refresh_preview(state, services)


def _toggle_view_mode(state: NavigationState, services: NavigationServices) -> None:
    if state.tab is not Tab.SCRIPTS:
        return
    if state.view_mode is ViewMode.TREE:
        state.view_mode = ViewMode.RECURSIVE_FLAT
    else:
        state.view_mode = ViewMode.TREE
    reload_catalog(state, services)


def _edit_search(state: NavigationState, services: NavigationServices, text: str) -> None:
    if state.focus is not Focus.SEARCH:
        return
    state.search_text = text
    state.search_tokens = parse_search_tokens(text)
    _apply_filter(state, services)


def _cancel(state: NavigationState, services: NavigationServices) -> None:
    if state.tab is Tab.SCRIPTS:
        if state.focus is Focus.SEARCH:
            state.focus = Focus.LIST
            return
        if state.search_text or state.search_tokens:
            state.search_text = ""
            state.search_tokens = []
            _apply_filter(state, services)
        return
    if state.tab is Tab.OPTIONS:
        if state.focus is Focus.REPO_INPUT:
            _close_repo_input(state)
            state.preview_text = REPOSITORY_HINT
        elif state.option_detail_active:
            state.option_detail_active = False
            _open_option_category(state)
        elif state.focus is Focus.PREVIEW:
            state.focus = Focus.LIST
            _sync_option_category(state)


def _scroll_preview(state: NavigationState, delta: int) -> None:
    line_count = state.preview_text.count("\n") + 1
    state.preview_start = _clamp(state.preview_start + delta, line_count)


def _move(state: NavigationState, services: NavigationServices, delta: int) -> None:
    if state.tab is Tab.SCRIPTS:
        if state.focus is Focus.PREVIEW:
            _scroll_preview(state, delta)
            return
        new_idx = _clamp(state.selected_idx + delta, len(state.displayed))
        if new_idx != state.selected_idx:
            state.selected_idx = new_idx
            refresh_preview(state, services)
        return
    if state.tab is Tab.OPTIONS:
        if state.focus is Focus.REPO_INPUT:
            return
        if state.focus is Focus.PREVIEW:
            if state.option_detail_active:
                _scroll_preview(state, delta)
            else:
                state.option_item_idx = _clamp(state.option_item_idx + delta, len(state.option_items))
            return
        new_idx = _clamp(state.option_category_idx + delta, len(state.option_categories))
        if new_idx != state.option_category_idx:
            state.option_category_idx = new_idx
            state.option_item_idx = 0
            _sync_option_category(state)
        return
    _scroll_preview(state, delta)


def _activate(state: NavigationState, services: NavigationServices) -> NavigationOutcome:
    if state.tab is Tab.SCRIPTS:
        if state.focus is Focus.SEARCH:
            state.focus = Focus.LIST
            return _CONTINUE
        if state.focus is not Focus.LIST:
            return _CONTINUE
        entry = state.selected_entry()
        if isinstance(entry, DirectoryEntry):
            _descend(state, services)
        elif isinstance(entry, ScriptEntry):
            state.preview_text = launching_message(entry.display_name)
            state.preview_start = 0
            return NavigationOutcome(launch=LaunchRequest(entry.path, entry.display_name))
        return _CONTINUE
    if state.tab is Tab.OPTIONS:
        if state.focus is Focus.LIST:
            _open_option_category(state)
        elif state.focus is Focus.REPO_INPUT:
            _submit_repo_url(state, services)
        elif not state.option_detail_active:
            _apply_option(state, services)
    return _CONTINUE


def _switch_tab(state: NavigationState, services: NavigationServices, tab: Tab) -> None:
    state.tab = tab
    state.focus = Focus.LIST
    state.repo_input_text = ""
    state.repo_input_error = ""
    if tab is Tab.SCRIPTS:
        refresh_preview(state, services)
    elif tab is Tab.OPTIONS:
        _sync_option_category(state)
    else:
        state.preview_text = ABOUT_TEXT
        state.preview_start = 0


def _focus_pane(state: NavigationState, focus: Focus) -> None:
    if state.tab is Tab.ABOUT or focus in (Focus.SEARCH, Focus.REPO_INPUT):
        return
    if state.focus is Focus.REPO_INPUT:
        return
    if state.tab is Tab.OPTIONS and focus is Focus.PREVIEW and state.focus is Focus.LIST:
        _open_option_category(state)
        return
    state.focus = focus


def apply_action(state: NavigationState, action: Action, services: NavigationServices) -> NavigationOutcome:
    """Apply one ``action`` to ``state``.

    Every call marks the state dirty so the next frame is redrawn.
    """
    state.dirty = True
    if isinstance(action, Quit):
        return NavigationOutcome(should_quit=True)
    if isinstance(action, ToggleViewMode):
        _toggle_view_mode(state, services)
    elif isinstance(action, Descend):
        _descend(state, services)
    elif isinstance(action, Ascend):
        _ascend(state, services)
    elif isinstance(action, ActivateSearch):
        if state.tab is Tab.SCRIPTS:
            state.focus = Focus.SEARCH
    elif isinstance(action, EditSearch):
        _edit_search(state, services, action.text)
    elif isinstance(action, ConfirmSearch):
        if state.focus is Focus.SEARCH:
            state.focus = Focus.LIST
    elif isinstance(action, Cancel):
        _cancel(state, services)
    elif isinstance(action, MoveSelection):
        _move(state, services, action.delta)
    elif isinstance(action, PageSelection):
        _move(state, services, action.delta * max(1, services.page_size))
    elif isinstance(action, Activate):
        return _activate(state, services)
    elif isinstance(action, SwitchTab):
        _switch_tab(state, services, Tab(action.index % len(Tab)))
    elif isinstance(action, NextTab):
        _switch_tab(state, services, Tab((state.tab.value + 1) % len(Tab)))
    elif isinstance(action, PreviousTab):
        _switch_tab(state, services, Tab((state.tab.value - 1) % len(Tab)))
    elif isinstance(action, FocusPane):
        _focus_pane(state, action.focus)
    elif isinstance(action, EditRepoUrl):
        if state.focus is Focus.REPO_INPUT:
            state.repo_input_text = action.text
            state.repo_input_error = ""
    elif isinstance(action, SubmitRepoUrl):
        _submit_repo_url(state, services)
    return _CONTINUE


def initial_state(
    root: Path,
    services: NavigationServices,
    *,
    theme_name: str = "",
    repo_url: str = "",
    view_mode: ViewMode = ViewMode.TREE,
    search_text: str = "",
) -> NavigationState:
    """Build the starting state: Scripts tab, list focus, catalog of ``root``."""
    state = NavigationState(
        root_path=root,
        current_path=root,
        view_mode=view_mode,
        theme_name=normalize_theme_name(theme_name),
        repo_url=repo_url,
        option_categories=list(OPTION_CATEGORIES),
        search_text=search_text,
        search_tokens=parse_search_tokens(search_text),
    )
    reload_catalog(state, services)
    return state


__all__ = [
    "ABOUT_TEXT",
    "OPTION_CATEGORIES",
    "Action",
    "Activate",
    "ActivateSearch",
    "Ascend",
    "Cancel",
    "ConfirmSearch",
    "Descend",
    "EditRepoUrl",
    "EditSearch",
    "FocusPane",
    "MoveSelection",
    "NavigationOutcome",
    "NavigationServices",
    "NextTab",
    "PageSelection",
    "PreviousTab",
    "Quit",
    "SubmitRepoUrl",
    "SwitchTab",
    "ToggleViewMode",
    "apply_action",
    "initial_state",
    "option_items_for",
    "refresh_preview",
    "reload_catalog",
]
