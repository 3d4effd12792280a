"""Key-token to navigation-action mapping.

Three registries are used: one while the search box has focus (printable
keys edit the query), one while the repository URL is being typed and one
for normal browsing.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from .navigation import (
    Action,
    Activate,
    ActivateSearch,
    Ascend,
    Cancel,
    ConfirmSearch,
    Descend,
    EditRepoUrl,
    EditSearch,
    FocusPane,
    MoveSelection,
    NextTab,
    PageSelection,
    PreviousTab,
    Quit,
    SubmitRepoUrl,
    SwitchTab,
    ToggleViewMode,
)
from .state import Focus, NavigationState

ENTER_KEYS = ("ENTER_CR", "ENTER_LF")


@dataclass(frozen=True)
class KeyComboBinding:
    """Mapping from one or more key tokens to a single action factory."""

    combos: tuple[str, ...]
    handler: Callable[[], Action | None]


class KeyComboRegistry:
    """Small key-dispatch table with optional key normalization strategy."""

    def __init__(self, normalize: Callable[[str], str] | None = None) -> None:
        self._normalize = normalize if normalize is not None else self._identity
        self._handlers: dict[str, Callable[[], Action | None]] = {}

    @staticmethod
    def _identity(key: str) -> str:
        return key

    def register_binding(self, binding: KeyComboBinding) -> KeyComboRegistry:
        """Register one binding, overwriting existing handlers for same combos."""
        for combo in binding.combos:
            self._handlers[self._normalize(combo)] = binding.handler
        return self

    def register_bindings(self, *bindings: KeyComboBinding) -> KeyComboRegistry:
        for binding in bindings:
            self.register_binding(binding)
        return self

    def dispatch(self, key: str) -> Action | None:
        """Return the action bound to ``key``, or ``None`` when unbound."""
        handler = self._handlers.get(self._normalize(key))
        if handler is None:
            return None
        return handler()


def _constant(action: Action) -> Callable[[], Action]:
    return lambda: action


def _normal_registry() -> KeyComboRegistry:
    return KeyComboRegistry().register_bindings(
        KeyComboBinding(("q", "CTRL_C"), _constant(Quit())),
        KeyComboBinding(("CTRL_F", "/"), _constant(ActivateSearch())),
        KeyComboBinding(("CTRL_R",), _constant(ToggleViewMode())),
        KeyComboBinding(("TAB",), _constant(NextTab())),
        KeyComboBinding(("SHIFT_TAB",), _constant(PreviousTab())),
        KeyComboBinding(("1",), _constant(SwitchTab(0))),
        KeyComboBinding(("2",), _constant(SwitchTab(1))),
        KeyComboBinding(("3",), _constant(SwitchTab(2))),
        KeyComboBinding(
            ("CTRL_H", "SHIFT_LEFT", "ALT_LEFT", "CTRL_LEFT"),
            _constant(FocusPane(Focus.LIST)),
        ),
        KeyComboBinding(
            ("CTRL_L", "SHIFT_RIGHT", "ALT_RIGHT", "CTRL_RIGHT"),
            _constant(FocusPane(Focus.PREVIEW)),
        ),
        KeyComboBinding(("LEFT", "h"), _constant(Ascend())),
        KeyComboBinding(("RIGHT", "l"), _constant(Descend())),
        KeyComboBinding(("UP", "k"), _constant(MoveSelection(-1))),
        KeyComboBinding(("DOWN", "j"), _constant(MoveSelection(1))),
        KeyComboBinding(("PAGE_UP",), _constant(PageSelection(-1))),
        KeyComboBinding(("PAGE_DOWN",), _constant(PageSelection(1))),
        KeyComboBinding(ENTER_KEYS, _constant(Activate())),
        KeyComboBinding(("ESC",), _constant(Cancel())),
    )


def _search_registry(state: NavigationState) -> KeyComboRegistry:
    return KeyComboRegistry().register_bindings(
        KeyComboBinding(("CTRL_C",), _constant(Quit())),
        KeyComboBinding(("ESC",), _constant(Cancel())),
        KeyComboBinding(ENTER_KEYS, _constant(ConfirmSearch())),
        KeyComboBinding(("BACKSPACE", "CTRL_H"), lambda: EditSearch(state.search_text[:-1])),
        KeyComboBinding(("CTRL_U",), lambda: EditSearch("")),
        KeyComboBinding(("UP",), _constant(MoveSelection(-1))),
        KeyComboBinding(("DOWN",), _constant(MoveSelection(1))),
        KeyComboBinding(("TAB",), _constant(NextTab())),
        KeyComboBinding(("SHIFT_TAB",), _constant(PreviousTab())),
    )


def _repo_input_registry(state: NavigationState) -> KeyComboRegistry:
    return KeyComboRegistry().register_bindings(
        KeyComboBinding(("CTRL_C",), _constant(Quit())),
        KeyComboBinding(("ESC",), _constant(Cancel())),
        KeyComboBinding(ENTER_KEYS, _constant(SubmitRepoUrl())),
        KeyComboBinding(("BACKSPACE", "CTRL_H"), lambda: EditRepoUrl(state.repo_input_text[:-1])),
        KeyComboBinding(("CTRL_U",), lambda: EditRepoUrl("")),
    )


class KeyMapper:
    """Translate key tokens from ``read_key`` into actions for ``state``."""

    def __init__(self, state: NavigationState) -> None:
        self.state = state
        self._normal = _normal_registry()
        self._search = _search_registry(state)
        self._repo_input = _repo_input_registry(state)

    def action_for(self, key: str) -> Action | None:
        if not key:
            return None
        if self.state.focus is Focus.SEARCH:
            action = self._search.dispatch(key)
            if action is not None:
                return action
            if len(key) == 1 and key.isprintable():
                return EditSearch(self.state.search_text + key)
            return None
        if self.state.focus is Focus.REPO_INPUT:
            action = self._repo_input.dispatch(key)
            if action is not None:
                return action
            if len(key) == 1 and key.isprintable():
                return EditRepoUrl(self.state.repo_input_text + key)
            return None
        return self._normal.dispatch(key)


__all__ = [
    "KeyComboBinding",
    "KeyComboRegistry",
    "KeyMapper",
]
