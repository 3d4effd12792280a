"""Tests for the write-once preview content cache."""

from __future__ import annotations

import threading
import time
import unittest
from pathlib import Path

from scriptdeck.catalog import ContentCache


class ContentCacheTests(unittest.TestCase):
    def test_set_is_write_once(self) -> None:
        cache = ContentCache()
        path = Path("/scripts/a.sh")
        cache.set(path, "first")
        cache.set(path, "second")
        self.assertEqual(cache.get(path), "first")
        self.assertIn(path, cache)
        self.assertEqual(len(cache), 1)

    def test_clear_drops_entries(self) -> None:
        cache = ContentCache()
        path = Path("/scripts/a.sh")
        cache.set(path, "first")
        cache.clear()
        self.assertIsNone(cache.get(path))
        cache.set(path, "second")
        self.assertEqual(cache.get(path), "second")

    def test_get_or_load_runs_loader_once(self) -> None:
        cache = ContentCache()
        calls: list[Path] = []

        def loader(path: Path) -> str:
            calls.append(path)
            return f"text for {path.name}"

        path = Path("/scripts/a.sh")
        self.assertEqual(cache.get_or_load(path, loader), "text for a.sh")
        self.assertEqual(cache.get_or_load(path, loader), "text for a.sh")
        self.assertEqual(calls, [path])

    def test_concurrent_loads_share_one_loader(self) -> None:
        cache = ContentCache()
        started = threading.Event()
        calls: list[int] = []
        results: list[str] = []

        def loader(path: Path) -> str:
            calls.append(1)
            started.set()
            time.sleep(0.05)
            return "loaded"

        path = Path("/scripts/slow.sh")
        threads = [threading.Thread(target=lambda: results.append(cache.get_or_load(path, loader))) for _ in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=5)

        self.assertEqual(calls, [1])
        self.assertEqual(results, ["loaded"] * 4)

    def test_failed_loader_does_not_block_later_loads(self) -> None:
        cache = ContentCache()
        path = Path("/scripts/broken.sh")

        def failing(_path: Path) -> str:
            raise RuntimeError("boom")

        with self.assertRaises(RuntimeError):
            cache.get_or_load(path, failing)
        self.assertEqual(cache.get_or_load(path, lambda _p: "ok"), "ok")


if __name__ == "__main__":
    unittest.main()
