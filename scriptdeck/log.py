"""Logging setup.

The TUI owns stdout/stderr while it runs, so records go to a file under the
platform log directory instead of the terminal.
"""

from __future__ import annotations

import logging
from pathlib import Path

from platformdirs import user_log_dir

from .config import APP_NAME

LOG_FILENAME = f"{APP_NAME}.log"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def default_log_path() -> Path:
    return Path(user_log_dir(APP_NAME, appauthor=False)) / LOG_FILENAME


def configure_logging(verbose: bool = False, log_path: Path | None = None) -> logging.Logger:
    """Attach a file handler to the package logger and return it.

    Calling this again replaces the previous handler. When the log file
    cannot be opened, records are dropped instead of reaching the terminal.
    """
    logger = logging.getLogger(APP_NAME)
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    target = log_path if log_path is not None else default_log_path()
    handler: logging.Handler
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(target, encoding="utf-8")
    except OSError:
        handler = logging.NullHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.propagate = False
    return logger


__all__ = [
    "LOG_FILENAME",
    "configure_logging",
    "default_log_path",
]
