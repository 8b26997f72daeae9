"""Unit tests for structured logging setup."""

from __future__ import annotations

import json

import pytest

from core.errors import NoteSyncConfigError
from core.logging_config import configure_logging, get_logger


def test_configure_logging_rejects_unknown_level() -> None:
    """Unknown level names should be config errors."""
    with pytest.raises(NoteSyncConfigError):
        configure_logging("chatty")


def test_logger_emits_json_events(capsys) -> None:
    """Events should render as one JSON object per line."""
    configure_logging("info")

    get_logger("tests.logging").info("object_written", key="todo.md")

    event = json.loads(capsys.readouterr().out.strip().splitlines()[-1])
    assert event["event"] == "object_written" and event["key"] == "todo.md"
    assert event["level"] == "info"
