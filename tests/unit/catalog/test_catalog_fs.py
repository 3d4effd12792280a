"""Tests for catalog directory listings."""

from __future__ import annotations

import tempfile
import unittest
from pathlib import Path
from unittest import mock

from scriptdeck.catalog import DirectoryEntry, ScriptEntry, Tag, TagParseError, list_directory, list_recursive


def _touch(path: Path, text: str = "echo hi\n") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


class ListDirectoryTests(unittest.TestCase):
    def test_directories_first_then_case_insensitive_names(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            _touch(root / "Zebra.sh")
            (root / "apple").mkdir()
            _touch(root / "banana.sh")

            names = [entry.display_name for entry in list_directory(root)]

        self.assertEqual(names, ["apple/", "banana.sh", "Zebra.sh"])

    def test_hidden_and_non_script_names_are_skipped(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            _touch(root / ".hidden.sh")
            (root / ".git").mkdir()
            _touch(root / "README.md", "# readme\n")
            _touch(root / "setup.PS1")
            _touch(root / "run.cmd")
            _touch(root / "go.bat")

            entries = list_directory(root)

        self.assertEqual([entry.display_name for entry in entries], ["go.bat", "run.cmd", "setup.PS1"])
        self.assertTrue(all(isinstance(entry, ScriptEntry) for entry in entries))

    def test_scripts_carry_parsed_tags(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            _touch(root / "tool.sh", "#*Tags:\n# Shell: bash\n\necho\n")
            (root / "sub").mkdir()

            entries = list_directory(root)

        self.assertIsInstance(entries[0], DirectoryEntry)
        self.assertEqual(entries[0].path, root / "sub")
        script = entries[1]
        self.assertIsInstance(script, ScriptEntry)
        self.assertEqual(script.tags.tags, (Tag("shell", "bash"),))

    def test_unreadable_script_gets_no_tags(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            _touch(root / "tool.sh")
            with mock.patch("scriptdeck.catalog.fs.parse_tags", side_effect=TagParseError(13, "denied")):
                entries = list_directory(root)

        self.assertEqual(len(entries), 1)
        self.assertIsNone(entries[0].tags)

    def test_missing_directory_is_empty(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            self.assertEqual(list_directory(Path(tmp) / "missing"), [])


class ListRecursiveTests(unittest.TestCase):
    def test_display_names_are_relative_paths(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            tool = _touch(root / "sub" / "tool.sh")
            _touch(root / "top.sh")
            _touch(root / "sub" / "deeper" / "Alpha.ps1")
            _touch(root / ".hidden" / "secret.sh")
            _touch(root / "sub" / "notes.txt")

            entries = list_recursive(root)

        self.assertEqual(
            [entry.display_name for entry in entries],
            ["sub/deeper/Alpha.ps1", "sub/tool.sh", "top.sh"],
        )
        by_name = {entry.display_name: entry for entry in entries}
        self.assertEqual(by_name["sub/tool.sh"].path, tool)
        self.assertTrue(all(isinstance(entry, ScriptEntry) for entry in entries))

    def test_missing_root_is_empty(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            self.assertEqual(list_recursive(Path(tmp) / "missing"), [])


if __name__ == "__main__":
    unittest.main()
