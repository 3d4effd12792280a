"""Process-lifetime cache of script preview text.

Entries are written once per path and only dropped by ``clear``; a script
edited on disk keeps showing its first-seen content until then. Loads are
serialized per path so concurrent callers never run the same loader twice.
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from pathlib import Path


class ContentCache:
    """Thread-safe path -> text mapping with at-most-one loader per path."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._values: dict[Path, str] = {}
        self._loading: dict[Path, threading.Event] = {}

    def __len__(self) -> int:
        with self._lock:
            return len(self._values)

    def __contains__(self, path: object) -> bool:
        with self._lock:
            return path in self._values

    def get(self, path: Path) -> str | None:
        with self._lock:
            return self._values.get(path)

    def set(self, path: Path, content: str) -> None:
        """Store ``content`` unless another value was already written for ``path``."""
        with self._lock:
            self._values.setdefault(path, content)

    def get_or_load(self, path: Path, loader: Callable[[Path], str]) -> str:
        """Return cached text for ``path``, running ``loader`` only on the first miss.

        A caller arriving while another thread is loading the same path waits
        for that load instead of starting its own.
        """
        while True:
            with self._lock:
                if path in self._values:
                    return self._values[path]
                pending = self._loading.get(path)
                if pending is None:
                    pending = threading.Event()
                    self._loading[path] = pending
                    owner = True
                else:
                    owner = False
            if not owner:
                pending.wait()
                continue

            try:
                content = loader(path)
                with self._lock:
                    self._values.setdefault(path, content)
                    return self._values[path]
            finally:
                with self._lock:
                    self._loading.pop(path, None)
                pending.set()

    def clear(self) -> None:
        with self._lock:
            self._values.clear()


__all__ = ["ContentCache"]
