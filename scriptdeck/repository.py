"""Local mirror of the script repository.

The mirror is always re-created from scratch: any existing copy is removed
and the repository is cloned again with ``git clone``.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
from collections.abc import Callable
from pathlib import Path

from .config import AppConfig, repository_path_for

logger = logging.getLogger(__name__)


class RepositoryError(RuntimeError):
    """Raised when the mirror cannot be (re)created."""


def ensure_repository(
    config: AppConfig,
    *,
    which: Callable[[str], str | None] = shutil.which,
) -> Path:
    """Clone ``config.repo_url`` into its mirror directory and return that path.

    ``config.script_root`` is updated to the directory actually used.
    """
    target = repository_path_for(config.repo_url)
    git = which("git")
    if git is None:
        raise RepositoryError("git not found in PATH")

    if target.exists():
        logger.info("removing previous mirror at %s", target)
        try:
            shutil.rmtree(target)
        except OSError as exc:
            raise RepositoryError(f"failed to remove old repository: {exc}") from exc
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise RepositoryError(f"failed to create parent directories: {exc}") from exc

    logger.info("cloning %s into %s", config.repo_url, target)
    try:
        proc = subprocess.run(
            [git, "clone", config.repo_url, str(target)],
            capture_output=True,
            text=True,
            check=False,
        )
    except OSError as exc:
        raise RepositoryError(f"failed to run git: {exc}") from exc
    if proc.returncode != 0:
        output = (proc.stdout or "") + (proc.stderr or "")
        raise RepositoryError(f"git clone error (exit {proc.returncode})\n{output.strip()}")

    config.script_root = target
    return target


__all__ = [
    "RepositoryError",
    "ensure_repository",
    "repository_path_for",
]
