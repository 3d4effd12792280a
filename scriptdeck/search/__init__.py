"""Search package exports."""

from __future__ import annotations

from .filtering import collect_tag_index, filter_entries, parse_search_tokens, script_matches

__all__ = [
    "collect_tag_index",
    "filter_entries",
    "parse_search_tokens",
    "script_matches",
]
