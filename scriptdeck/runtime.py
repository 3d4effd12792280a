"""Interactive runtime: wires state, services and the terminal together.

The event loop is single-threaded: one key is read, mapped to an action and
fully applied before the next read. Launches run through the dispatcher
between key reads.
"""

from __future__ import annotations

import logging
import shutil
import sys
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from .catalog import ContentCache
from .config import (
    DEFAULT_REPO_URL,
    AppConfig,
    reset_repo_url,
    save_repo_url,
    save_theme_name,
    validate_repo_url,
)
from .input import read_key
from .keys import KeyMapper
from .launch import LaunchDispatcher, LaunchError, LaunchRequest, ProcessRunner
from .navigation import NavigationServices, apply_action, initial_state
from .preview import PreviewBuilder
from .render import FOOTER_ROWS, HEADER_ROWS, build_frame, render_frame
from .repository import RepositoryError, ensure_repository
from .state import NavigationState, ViewMode
from .terminal import TerminalController
from .ui_theme import UITheme, resolve_theme

logger = logging.getLogger(__name__)

KEY_POLL_TIMEOUT_MS = 120


@dataclass(frozen=True)
class RuntimeOptions:
    style: str
    no_color: bool = False
    view_mode: ViewMode = ViewMode.TREE
    search_text: str = ""
    manage_repository: bool = True


def handle_launch(state: NavigationState, request: LaunchRequest, launch: Callable[[Path, str], str]) -> None:
    """Run ``request`` and reflect the result in ``state``; never raises ``LaunchError``."""
    try:
        strategy = launch(request.path, request.display_name)
    except LaunchError as exc:
        logger.error("launch failed for %s: %s", request.path, exc)
        state.preview_text = f"Failed to launch {request.display_name}:\n\n{exc}"
        state.preview_start = 0
        state.status_message = "Launch failed"
    else:
        state.status_message = f"Launched {request.display_name} ({strategy})"
    state.dirty = True


def run_main_loop(
    state: NavigationState,
    services: NavigationServices,
    terminal: TerminalController,
    stdin_fd: int,
    launch: Callable[[Path, str], str],
    theme_for: Callable[[str], UITheme],
) -> None:
    """Run the interactive loop until a quit action occurs."""
    mapper = KeyMapper(state)
    last_size: tuple[int, int] | None = None

    with terminal.raw_mode():
        while True:
            term = shutil.get_terminal_size((80, 24))
            size = (term.columns, term.lines)
            if size != last_size:
                last_size = size
                services.page_size = max(1, term.lines - HEADER_ROWS - FOOTER_ROWS)
                state.dirty = True

            if state.dirty:
                render_frame(build_frame(state, theme_for(state.theme_name), term.columns, term.lines))
                state.dirty = False

            try:
                key = read_key(stdin_fd, timeout_ms=KEY_POLL_TIMEOUT_MS)
            except KeyboardInterrupt:
                # Ctrl+C arrives as a key in raw mode; a stray SIGINT is ignored.
                continue
            if key == "":
                continue
            if state.skip_next_lf and key == "ENTER_LF":
                state.skip_next_lf = False
                continue
            state.skip_next_lf = key == "ENTER_CR"

            action = mapper.action_for(key)
            if action is None:
                continue
            if state.status_message:
                state.status_message = ""
            outcome = apply_action(state, action, services)
            if outcome.should_quit:
                return
            if outcome.launch is not None:
                # Paint the "Launching" preview before a blocking tier takes over.
                render_frame(build_frame(state, theme_for(state.theme_name), term.columns, term.lines))
                handle_launch(state, outcome.launch, launch)


def build_services(config: AppConfig, options: RuntimeOptions) -> NavigationServices:
    """Create navigation collaborators bound to ``config``."""
    preview = PreviewBuilder(cache=ContentCache(), style=options.style, no_color=options.no_color)

    def refresh_repository() -> Path:
        return ensure_repository(config)

    def mirror(repo_url: str) -> Path:
        # The config keeps the previous URL until the new mirror is in place.
        previous = config.repo_url
        config.repo_url = repo_url
        try:
            return ensure_repository(config)
        except RepositoryError:
            config.repo_url = previous
            raise

    def reset_repository() -> tuple[str, Path]:
        root = mirror(DEFAULT_REPO_URL)
        reset_repo_url()
        return config.repo_url, root

    def set_repository(repo_url: str) -> Path:
        repo_url = repo_url.strip()
        validate_repo_url(repo_url)
        root = mirror(repo_url)
        save_repo_url(repo_url)
        return root

    if not options.manage_repository:
        return NavigationServices(preview=preview, save_theme=save_theme_name)
    return NavigationServices(
        preview=preview,
        save_theme=save_theme_name,
        refresh_repository=refresh_repository,
        reset_repository=reset_repository,
        set_repository=set_repository,
    )


def run_app(config: AppConfig, options: RuntimeOptions) -> None:
    """Initialize runtime state and run the browser on ``config.script_root``."""
    services = build_services(config, options)
    state = initial_state(
        config.script_root,
        services,
        theme_name=config.theme,
        repo_url=config.repo_url,
        view_mode=options.view_mode,
        search_text=options.search_text,
    )

    stdin_fd = sys.stdin.fileno()
    terminal = TerminalController(stdin_fd, sys.stdout.fileno())
    dispatcher = LaunchDispatcher(runner=ProcessRunner(suspend_ui=terminal.suspended))
    logger.info("browsing %s on %s", config.script_root, dispatcher.platform.label)

    run_main_loop(
        state,
        services,
        terminal,
        stdin_fd,
        launch=dispatcher.launch,
        theme_for=lambda name: resolve_theme(name, no_color=options.no_color),
    )


__all__ = [
    "RuntimeOptions",
    "build_services",
    "handle_launch",
    "run_app",
    "run_main_loop",
]
