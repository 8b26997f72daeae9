"""Unit tests for the public import surface."""

from __future__ import annotations

import notesync


def test_public_names_are_exported() -> None:
    """Every name in __all__ should resolve on the module."""
    missing = [name for name in notesync.__all__ if not hasattr(notesync, name)]

    assert missing == []
