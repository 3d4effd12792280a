"""Command-line front door for scriptdeck.

Handles repository-management flags, mirrors the script repository, and
then either prints the catalog (``--list``) or starts the interactive
browser.
"""

from __future__ import annotations

import argparse
import logging
import os
import shlex
import shutil
import subprocess
import sys
from collections.abc import Callable, Mapping, Sequence
from pathlib import Path
from typing import TextIO

from .catalog import ScriptEntry, list_directory, list_recursive
from .config import (
    DEFAULT_REPO_URL,
    AppConfig,
    load_app_config,
    load_repo_url,
    repository_path_for,
    reset_repo_url,
    save_repo_url,
)
from .highlight import DEFAULT_STYLE, normalize_style
from .launch import HostPlatform, detect_platform, inside_tmux, is_desktop_session
from .log import configure_logging
from .preview import format_tag_summary
from .repository import RepositoryError, ensure_repository
from .search import collect_tag_index, filter_entries, parse_search_tokens
from .state import ViewMode
from .ui_theme import available_theme_names, normalize_theme_name

logger = logging.getLogger(__name__)

NO_TMUX_ENV = "SCRIPTDECK_NO_TMUX"
NO_TMUX_WARNING_ENV = "SCRIPTDECK_NO_TMUX_WARNING"
MAIN_TMUX_SESSION = "scriptdeck-main"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="scriptdeck",
        description="Browse, filter and launch scripts from a mirrored script repository.",
    )
    parser.add_argument("--root", default=None, help="Browse an existing directory instead of the mirror (implies --no-sync).")
    parser.add_argument("--no-sync", action="store_true", help="Use the existing local mirror without cloning again.")
    parser.add_argument(
        "--theme",
        default=None,
        help=f"UI theme name ({', '.join(available_theme_names())}).",
    )
    parser.add_argument("--no-color", action="store_true", help="Disable color output.")
    parser.add_argument("--style", default=DEFAULT_STYLE, help="Pygments style name for script previews.")
    parser.add_argument("--list", action="store_true", help="Print the script catalog and exit.")
    parser.add_argument("--list-tags", action="store_true", help="Print every tag category and its values, then exit.")
    parser.add_argument("--recursive", action="store_true", help="Start in (or list) the recursive all-scripts view.")
    parser.add_argument("--tags", default="", help="Initial tag filter, e.g. \"bash linux\".")
    parser.add_argument("--set-repo", metavar="URL", default=None, help="Set a custom repository URL and exit.")
    parser.add_argument("--reset-repo", action="store_true", help="Reset to the default repository and exit.")
    parser.add_argument("--show-repo", action="store_true", help="Show the current repository URL and exit.")
    parser.add_argument("--verbose", action="store_true", help="Write debug records to the log file.")
    return parser


def _handle_repository_flags(args: argparse.Namespace) -> bool:
    """Apply ``--show-repo``/``--reset-repo``/``--set-repo``; return whether one ran."""
    if args.show_repo:
        repo_url = load_repo_url()
        print(f"Current repository: {repo_url}")
        print(f"Default repository: {DEFAULT_REPO_URL}")
        print(f"Local mirror: {repository_path_for(repo_url)}")
        return True
    if args.reset_repo:
        reset_repo_url()
        print(f"Repository reset to default: {DEFAULT_REPO_URL}")
        return True
    if args.set_repo is not None:
        try:
            save_repo_url(args.set_repo)
        except ValueError as exc:
            raise SystemExit(f"Invalid repository URL: {exc}") from exc
        print(f"Repository set to: {args.set_repo.strip()}")
        return True
    return False


def should_run_in_tmux(
    platform: HostPlatform,
    environ: Mapping[str, str],
    which: Callable[[str], str | None] = shutil.which,
) -> bool:
    """Headless Linux consoles outside tmux re-run the browser inside a tmux session."""
    if platform is not HostPlatform.LINUX or inside_tmux(environ) or environ.get(NO_TMUX_ENV):
        return False
    if is_desktop_session(environ):
        return False
    return which("tmux") is not None


def run_in_tmux(argv: Sequence[str], environ: Mapping[str, str]) -> bool:
    """Run ``scriptdeck argv`` in a new tmux session; return whether it ran there."""
    command = shlex.join([sys.executable, "-m", "scriptdeck", *argv])
    env = dict(environ)
    env[NO_TMUX_ENV] = "1"
    try:
        completed = subprocess.run(["tmux", "new-session", "-s", MAIN_TMUX_SESSION, command], env=env, check=False)
    except OSError as exc:
        logger.warning("could not start tmux: %s", exc)
        return False
    if completed.returncode != 0:
        logger.warning("tmux session %s exited with status %s", MAIN_TMUX_SESSION, completed.returncode)
        return False
    return True


def should_warn_about_tmux(platform: HostPlatform, environ: Mapping[str, str]) -> bool:
    return platform is HostPlatform.LINUX and not inside_tmux(environ) and not environ.get(NO_TMUX_WARNING_ENV)


def show_tmux_warning(out: TextIO, wait_for_enter: Callable[[], object] = input) -> None:
    rule = "═" * 70
    out.write(
        f"\n{rule}\n"
        "For the best experience on Linux, run scriptdeck inside tmux.\n\n"
        "   Quick start:\n"
        "   $ tmux new-session scriptdeck\n\n"
        "   tmux keeps the session alive across SSH disconnects and gives\n"
        "   launched scripts their own windows.\n\n"
        f"   To disable this warning: export {NO_TMUX_WARNING_ENV}=1\n"
        f"{rule}\n\n"
        "Press Enter to continue without tmux, or Ctrl+C to exit..."
    )
    out.flush()
    wait_for_enter()
    out.write("\n")


def _prepare_root(args: argparse.Namespace, config: AppConfig) -> None:
    if args.root is not None:
        root = Path(args.root).expanduser()
        if not root.is_dir():
            raise SystemExit(f"Directory not found: {root}")
        config.script_root = root.resolve()
        return

    if args.no_sync:
        if not config.script_root.is_dir():
            raise SystemExit(f"No local mirror at {config.script_root}; run without --no-sync first.")
        return

    print(f"Syncing scripts from {config.repo_url} ...", file=sys.stderr)
    try:
        ensure_repository(config)
    except RepositoryError as exc:
        logger.error("repository sync failed: %s", exc)
        raise SystemExit(f"Failed to sync repository: {exc}") from exc


def format_catalog(root: Path, recursive: bool, tags_text: str) -> str:
    """Return the (optionally recursive and tag-filtered) catalog as text lines."""
    mode = ViewMode.RECURSIVE_FLAT if recursive else ViewMode.TREE
    entries = list_recursive(root) if recursive else list_directory(root)
    lines: list[str] = []
    for entry in filter_entries(entries, parse_search_tokens(tags_text), mode):
        line = entry.display_name
        if isinstance(entry, ScriptEntry):
            summary = format_tag_summary(entry.tags)
            if summary:
                line = f"{line}  [{summary[len('Tags  '):]}]"
        lines.append(line)
    return "\n".join(lines) + ("\n" if lines else "")


def format_tag_index(root: Path) -> str:
    index = collect_tag_index(list_recursive(root))
    return "".join(f"{category}: {', '.join(values)}\n" for category, values in sorted(index.items()))


def main(argv: Sequence[str] | None = None) -> None:
    """Parse CLI arguments and run scriptdeck."""
    argv_list = list(argv) if argv is not None else sys.argv[1:]
    args = build_parser().parse_args(argv_list)
    configure_logging(verbose=args.verbose)

    if _handle_repository_flags(args):
        return

    interactive = not (args.list or args.list_tags) and sys.stdin.isatty() and sys.stdout.isatty()
    if interactive:
        platform = detect_platform()
        if should_run_in_tmux(platform, os.environ) and run_in_tmux(argv_list, os.environ):
            return
        if should_warn_about_tmux(platform, os.environ):
            try:
                show_tmux_warning(sys.stdout)
            except (KeyboardInterrupt, EOFError):
                raise SystemExit(130) from None

    config = load_app_config(os.environ)
    if args.theme is not None:
        config.theme = normalize_theme_name(args.theme)
    _prepare_root(args, config)

    if args.list_tags:
        sys.stdout.write(format_tag_index(config.script_root))
        return
    if not interactive:
        sys.stdout.write(format_catalog(config.script_root, args.recursive, args.tags))
        return

    from .runtime import RuntimeOptions, run_app

    options = RuntimeOptions(
        style=normalize_style(args.style),
        no_color=args.no_color,
        view_mode=ViewMode.RECURSIVE_FLAT if args.recursive else ViewMode.TREE,
        search_text=args.tags,
        manage_repository=args.root is None,
    )
    run_app(config, options)


if __name__ == "__main__":
    main()
