"""Integration test for two machines editing one document."""

from __future__ import annotations

import os
from datetime import timedelta
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from client.editor_session import edit, pull, push, read_status
from client.sync_client import SyncClient
from core.errors import VersionConflictError
from core.version import VersionToken
from server.app import create_app


def _touch(path: Path, content: bytes, version: VersionToken) -> None:
    path.write_bytes(content)
    os.utime(path, (version.epoch_seconds(), version.epoch_seconds()))


def test_two_machines_detect_and_resolve_conflict(store, fake_s3, tmp_path: Path) -> None:
    """A stale machine must pull before its edits can be pushed."""
    app = create_app(store, auth_token="s3cret")
    laptop = SyncClient(TestClient(app), auth_token="s3cret")
    desktop = SyncClient(TestClient(app), auth_token="s3cret")
    laptop_file = tmp_path / "laptop" / "todo.md"
    desktop_file = tmp_path / "desktop" / "todo.md"
    laptop_file.parent.mkdir()
    first = VersionToken.now()
    second = VersionToken(first.timestamp + timedelta(minutes=1))
    third = VersionToken(first.timestamp + timedelta(minutes=2))

    _touch(laptop_file, b"- milk\n", first)
    push(laptop, laptop_file)
    pull(desktop, desktop_file)
    edit(
        desktop,
        desktop_file,
        "vim",
        run_editor=lambda editor, path: _touch(path, b"- milk\n- eggs\n", second),
    )

    assert read_status(laptop, laptop_file).remote_is_newer
    with pytest.raises(VersionConflictError):
        edit(laptop, laptop_file, "vim", run_editor=lambda editor, path: None)

    pull(laptop, laptop_file)
    _touch(laptop_file, b"- milk\n- eggs\n- bread\n", third)
    assert push(laptop, laptop_file) == third
    with pytest.raises(VersionConflictError):
        push(desktop, desktop_file)

    assert fake_s3.stored().content == b"- milk\n- eggs\n- bread\n"
    assert pull(desktop, desktop_file).content == b"- milk\n- eggs\n- bread\n"
    assert not read_status(desktop, desktop_file).remote_is_newer
