"""Tag-based filtering of catalog entries.

Tokens combine with AND semantics; each token is satisfied by any tag whose
category or value contains it. Directories pass through in tree mode so the
listing stays navigable.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from ..catalog import CatalogEntry, DirectoryEntry, ScriptEntry
from ..state import ViewMode


def parse_search_tokens(text: str) -> list[str]:
    """Split raw search-box text into lowercase tokens."""
    return text.lower().split()


def _normalized_tokens(tokens: Iterable[str]) -> list[str]:
    normalized: list[str] = []
    for token in tokens:
        folded = token.strip().lower()
        if folded:
            normalized.append(folded)
    return normalized


def script_matches(entry: ScriptEntry, tokens: Sequence[str]) -> bool:
    """Return ``True`` when every token matches at least one of the entry's tags."""
    if not tokens:
        return True
    if entry.tags is None or not entry.tags.tags:
        return False
    return entry.tags.has_all(tokens)


def filter_entries(
    entries: Sequence[CatalogEntry],
    tokens: Iterable[str],
    mode: ViewMode = ViewMode.TREE,
) -> list[CatalogEntry]:
    """Return the stable subsequence of ``entries`` matching all ``tokens``.

    An empty token list returns every entry in input order.
    """
    normalized = _normalized_tokens(tokens)
    if not normalized:
        return list(entries)

    kept: list[CatalogEntry] = []
    for entry in entries:
        if isinstance(entry, DirectoryEntry):
            if mode is ViewMode.TREE:
                kept.append(entry)
        elif isinstance(entry, ScriptEntry):
            if script_matches(entry, normalized):
                kept.append(entry)
    return kept


def collect_tag_index(entries: Iterable[CatalogEntry]) -> dict[str, list[str]]:
    """Map each tag category to its distinct values across ``entries`` (first-seen order)."""
    index: dict[str, list[str]] = {}
    for entry in entries:
        if not isinstance(entry, ScriptEntry) or entry.tags is None:
            continue
        for tag in entry.tags.tags:
            values = index.setdefault(tag.category, [])
            if tag.value not in values:
                values.append(tag.value)
    return index


__all__ = [
    "collect_tag_index",
    "filter_entries",
    "parse_search_tokens",
    "script_matches",
]
