"""Persistent JSON config and mirror-location helpers.

Stores the UI theme name and an optional custom repository URL. All access
is defensive: malformed or missing config falls back safely.
"""

from __future__ import annotations

import json
import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import urlsplit

from platformdirs import user_config_dir

from .ui_theme import DEFAULT_THEME, normalize_theme_name

APP_NAME = "scriptdeck"
CONFIG_FILENAME = "config.json"
DEFAULT_CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME
LEGACY_CONFIG_PATH = Path.home() / ".config" / APP_NAME / CONFIG_FILENAME
CONFIG_PATH = DEFAULT_CONFIG_PATH

DEFAULT_REPO_URL = "https://github.com/rocketpowerinc/scriptbin.git"
DEFAULT_MIRROR_DIRNAME = "scriptbin"
CUSTOM_MIRROR_PREFIX = "custom-"
MIRROR_BASE_ENV = "SCRIPTDECK_ROOT"
SUPPORTED_URL_SCHEMES = ("https", "http", "git", "ssh")


def _load_config_path() -> Path:
    """Return preferred config path, falling back to legacy location when needed."""
    if CONFIG_PATH.exists():
        return CONFIG_PATH
    if CONFIG_PATH == DEFAULT_CONFIG_PATH and LEGACY_CONFIG_PATH.exists():
        return LEGACY_CONFIG_PATH
    return CONFIG_PATH


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    config_path = _load_config_path()
    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object]) -> None:
    """Persist config data as pretty-printed JSON.

    Filesystem errors are ignored so a read-only config directory never
    breaks the UI.
    """
    try:
        CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
        CONFIG_PATH.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except OSError:
        pass


def load_theme_name() -> str | None:
    value = load_config().get("theme")
    if not isinstance(value, str) or not value.strip():
        return None
    return normalize_theme_name(value)


def save_theme_name(theme_name: str) -> None:
    config = load_config()
    config["theme"] = normalize_theme_name(theme_name)
    save_config(config)


def validate_repo_url(repo_url: str) -> None:
    """Raise ``ValueError`` unless ``repo_url`` looks like a clonable git URL."""
    if not repo_url:
        raise ValueError("repository URL cannot be empty")

    parts = urlsplit(repo_url)
    if parts.scheme not in SUPPORTED_URL_SCHEMES:
        raise ValueError(
            f"unsupported URL scheme: {parts.scheme or '(none)'} "
            f"(supported: {', '.join(SUPPORTED_URL_SCHEMES)})"
        )
    if not repo_url.lower().endswith(".git"):
        raise ValueError("URL should end with .git for git repositories")
    if "github.com" in parts.netloc:
        segments = parts.path.strip("/").split("/")
        if len(segments) != 2:
            raise ValueError("GitHub URLs should be in format: https://github.com/owner/repo.git")


def load_repo_url() -> str:
    """Return the persisted custom repository URL, or the default one."""
    value = load_config().get("repo_url")
    if isinstance(value, str) and value.strip():
        return value.strip()
    return DEFAULT_REPO_URL


def save_repo_url(repo_url: str) -> None:
    """Validate and persist a custom repository URL."""
    repo_url = repo_url.strip()
    validate_repo_url(repo_url)
    config = load_config()
    config["repo_url"] = repo_url
    save_config(config)


def reset_repo_url() -> None:
    """Forget the custom repository so the default one is used again."""
    config = load_config()
    if config.pop("repo_url", None) is not None:
        save_config(config)


def mirror_base_dir(environ: Mapping[str, str] | None = None) -> Path:
    env = os.environ if environ is None else environ
    override = env.get(MIRROR_BASE_ENV, "").strip()
    if override:
        return Path(override).expanduser()
    return Path.home() / "Downloads" / "Temp"


def repository_path_for(repo_url: str, environ: Mapping[str, str] | None = None) -> Path:
    """Return the local mirror directory for ``repo_url``.

    The default repository lives in ``scriptbin``; any other repository gets
    ``custom-<name>`` next to it, where ``<name>`` is the URL's last path
    segment without ``.git``.
    """
    base = mirror_base_dir(environ)
    if repo_url == DEFAULT_REPO_URL:
        return base / DEFAULT_MIRROR_DIRNAME
    name = repo_url.rstrip("/").rsplit("/", 1)[-1].rsplit(":", 1)[-1]
    if name.lower().endswith(".git"):
        name = name[: -len(".git")]
    return base / f"{CUSTOM_MIRROR_PREFIX}{name or 'repository'}"


@dataclass
class AppConfig:
    script_root: Path
    repo_url: str = DEFAULT_REPO_URL
    theme: str = DEFAULT_THEME.name

    @property
    def is_default_repo(self) -> bool:
        return self.repo_url == DEFAULT_REPO_URL


def load_app_config(environ: Mapping[str, str] | None = None) -> AppConfig:
    repo_url = load_repo_url()
    return AppConfig(
        script_root=repository_path_for(repo_url, environ),
        repo_url=repo_url,
        theme=load_theme_name() or DEFAULT_THEME.name,
    )


__all__ = [
    "APP_NAME",
    "CONFIG_PATH",
    "DEFAULT_REPO_URL",
    "MIRROR_BASE_ENV",
    "AppConfig",
    "load_app_config",
    "load_config",
    "load_repo_url",
    "load_theme_name",
    "mirror_base_dir",
    "repository_path_for",
    "reset_repo_url",
    "save_config",
    "save_repo_url",
    "save_theme_name",
    "validate_repo_url",
]
