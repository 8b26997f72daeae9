"""Unit tests for client-side CLI commands."""

from __future__ import annotations

import os
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from cli.main import main
from client.sync_client import SyncClient
from core.version import VersionToken
from server.app import create_app

STORED_AT = VersionToken(datetime(2024, 3, 5, 12, 30, 15, tzinfo=timezone.utc))

_CLIENT_VARS = (
    "NOTESYNC_ADDR",
    "NOTESYNC_FILE",
    "NOTESYNC_TOKEN",
    "NOTESYNC_EDITOR",
    "NOTESYNC_TIMEOUT_SECONDS",
)


@pytest.fixture(autouse=True)
def _served_store(monkeypatch, store) -> None:
    for name in _CLIENT_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(
        "cli.sync_commands.SyncClient.from_config",
        lambda config: SyncClient(TestClient(create_app(store))),
    )


def _args(command: str, file_path: Path, *extra: str) -> list[str]:
    return [command, "--addr", "http://notes.test", "--file", str(file_path), *extra]


def _output_fields(capsys) -> dict[str, str]:
    lines = capsys.readouterr().out.strip().splitlines()
    return dict(line.split("=", 1) for line in lines)


def test_status_reports_remote_newer(fake_s3, tmp_path: Path, capsys) -> None:
    """Status should compare the missing local copy with the server."""
    fake_s3.add_object(b"remote", version=STORED_AT.format())

    exit_code = main(_args("status", tmp_path / "todo.md"))

    fields = _output_fields(capsys)
    assert exit_code == 0 and fields["state"] == "remote_newer"
    assert fields["local_version"] == "-"
    assert fields["remote_version"] == STORED_AT.format()


def test_pull_then_status_in_sync(fake_s3, tmp_path: Path, capsys) -> None:
    """After a pull both sides should report the same version."""
    fake_s3.add_object(b"remote", version=STORED_AT.format())
    file_path = tmp_path / "todo.md"

    assert main(_args("pull", file_path)) == 0
    assert _output_fields(capsys)["updated"] == "true"
    assert main(_args("status", file_path)) == 0

    assert _output_fields(capsys)["state"] == "in_sync"


def test_stale_push_exits_with_conflict(fake_s3, tmp_path: Path, capsys) -> None:
    """A rejected upload should exit 3 and print the conflict."""
    fake_s3.add_object(b"remote", version=STORED_AT.format())
    file_path = tmp_path / "todo.md"
    file_path.write_bytes(b"old")
    old_seconds = (STORED_AT.timestamp - timedelta(days=1)).timestamp()
    os.utime(file_path, (old_seconds, old_seconds))

    exit_code = main(_args("push", file_path))

    assert exit_code == 3
    assert capsys.readouterr().out.startswith("conflict=")
    assert fake_s3.stored().content == b"remote"


def test_forced_push_succeeds(fake_s3, tmp_path: Path, capsys) -> None:
    """--force should overwrite the newer remote document."""
    fake_s3.add_object(b"remote", version=STORED_AT.format())
    file_path = tmp_path / "todo.md"
    file_path.write_bytes(b"mine")
    os.utime(file_path, (0, 0))

    exit_code = main(_args("push", file_path, "--force"))

    assert exit_code == 0 and fake_s3.stored().content == b"mine"
    assert VersionToken.parse(_output_fields(capsys)["version"]) > STORED_AT


def test_missing_server_address_is_error(monkeypatch, tmp_path: Path, capsys) -> None:
    """Without NOTESYNC_ADDR the client cannot be built."""
    monkeypatch.undo()
    for name in _CLIENT_VARS:
        monkeypatch.delenv(name, raising=False)

    exit_code = main(["status", "--file", str(tmp_path / "todo.md")])

    assert exit_code == 2
    assert capsys.readouterr().out.startswith("error=")
