"""Local file workflows on top of the sync client.

The local version of the document is its file mtime truncated to
whole seconds. After a pull or forced push the mtime is set to the
server's version so both sides compare equal.
"""

from __future__ import annotations

import os
import shlex
import subprocess
from pathlib import Path
from typing import Callable

from client.sync_client import SyncClient
from core.errors import EditorError, NoteSyncConfigError, VersionConflictError
from core.logging_config import get_logger
from core.types import DownloadResult, SyncStatus
from core.version import VersionToken

_LOGGER = get_logger(__name__)

EditorRunner = Callable[[str, Path], None]


def local_version(file_path: Path) -> VersionToken | None:
    """Return the version of the local copy, or None if it is missing."""
    try:
        stat_result = file_path.stat()
    except FileNotFoundError:
        return None
    return VersionToken.from_epoch_seconds(stat_result.st_mtime)


def read_status(client: SyncClient, file_path: Path) -> SyncStatus:
    """Compare the local copy with the remote document."""
    return SyncStatus(
        file_path=file_path,
        local_version=local_version(file_path),
        remote_version=client.remote_version(),
    )


def pull(client: SyncClient, file_path: Path) -> DownloadResult:
    """Replace the local copy with the remote document if it is newer.

    Args:
        client: Sync client.
        file_path: Local copy of the document.

    Returns:
        Download result; ``content`` is None when already up to date.

    Raises:
        VersionConflictError: If the local copy is newer than the remote one.
        ObjectNotFoundError: If the remote document does not exist.
    """
    result = client.download(since=local_version(file_path))
    if result.content is None:
        _LOGGER.info("pull_up_to_date", path=str(file_path), version=result.version.format())
        return result
    _write_local_copy(file_path, result.content, result.version)
    _LOGGER.info(
        "pull_completed",
        path=str(file_path),
        version=result.version.format(),
        size=len(result.content),
    )
    return result


def push(client: SyncClient, file_path: Path, force: bool = False) -> VersionToken:
    """Upload the local copy, stamped with its mtime version.

    Args:
        client: Sync client.
        file_path: Local copy of the document.
        force: Overwrite the remote document regardless of versions.

    Returns:
        Version recorded by the server.

    Raises:
        NoteSyncConfigError: If the local copy does not exist.
        VersionConflictError: If the remote document is not older.
    """
    version = local_version(file_path)
    if version is None:
        raise NoteSyncConfigError(
            f"Local document {file_path} does not exist. Pull it or create it first."
        )
    written = client.upload(version, file_path.read_bytes(), force=force)
    if written != version:
        _set_local_version(file_path, written)
    return written


def edit(
    client: SyncClient,
    file_path: Path,
    editor: str,
    run_editor: EditorRunner | None = None,
) -> VersionToken | None:
    """Open the local copy in an editor and upload it if it changed.

    Args:
        client: Sync client.
        file_path: Local copy of the document.
        editor: Editor command line, e.g. ``vim`` or ``code --wait``.
        run_editor: Editor launcher; defaults to a blocking subprocess.

    Returns:
        Version recorded by the server, or None when nothing changed.

    Raises:
        VersionConflictError: If the remote document is newer than the local copy.
        EditorError: If the editor exits with an error.
    """
    status = read_status(client, file_path)
    if status.remote_is_newer:
        _LOGGER.warning(
            "edit_refused",
            path=str(file_path),
            local_version=_format_optional(status.local_version),
            remote_version=_format_optional(status.remote_version),
        )
        raise VersionConflictError(
            f"The remote document ({status.remote_version}) is newer than {file_path}. "
            "Run 'notesync pull' and try again."
        )
    launcher = run_editor or run_editor_process
    launcher(editor, file_path)
    edited_version = local_version(file_path)
    if edited_version is None or edited_version == status.local_version:
        _LOGGER.info("edit_unchanged", path=str(file_path))
        return None
    return push(client, file_path)


def run_editor_process(editor: str, file_path: Path) -> None:
    """Run the editor attached to the current terminal.

    Raises:
        EditorError: If the editor cannot be started or exits non-zero.
    """
    command = [*shlex.split(editor), str(file_path)]
    try:
        completed = subprocess.run(command, check=False)
    except OSError as error:
        raise EditorError(f"Unable to run editor '{editor}': {error}.") from error
    if completed.returncode != 0:
        raise EditorError(
            f"Editor '{editor}' exited with status {completed.returncode}."
        )


def _write_local_copy(file_path: Path, content: bytes, version: VersionToken) -> None:
    file_path.parent.mkdir(parents=True, exist_ok=True)
    file_path.write_bytes(content)
    _set_local_version(file_path, version)


def _set_local_version(file_path: Path, version: VersionToken) -> None:
    seconds = version.epoch_seconds()
    os.utime(file_path, (seconds, seconds))


def _format_optional(version: VersionToken | None) -> str | None:
    return version.format() if version is not None else None
