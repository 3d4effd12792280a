"""scriptdeck: browse, filter and launch scripts from a mirrored repository.

``main`` is re-exported for programmatic use; it imports the CLI on first
call so ``import scriptdeck`` stays cheap.
"""

from __future__ import annotations


def main(*args, **kwargs):
    from .cli import main as _main

    return _main(*args, **kwargs)


__all__ = ["main"]
