"""Shared typed models.

This module defines immutable data models exchanged between the
sync client, the editor session, and the CLI.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from core.version import VersionToken


@dataclass(frozen=True)
class DownloadResult:
    """Outcome of a conditional document fetch.

    Attributes:
        version: Version reported by the server.
        content: Document bytes, or None when the caller is up to date.
    """

    version: VersionToken
    content: bytes | None

    @property
    def modified(self) -> bool:
        return self.content is not None


@dataclass(frozen=True)
class SyncStatus:
    """Local and remote versions of the document.

    Attributes:
        file_path: Local copy of the document.
        local_version: Local file mtime version; None if the file is missing.
        remote_version: Stored version; None if the document does not exist.
    """

    file_path: Path
    local_version: VersionToken | None
    remote_version: VersionToken | None

    @property
    def remote_is_newer(self) -> bool:
        if self.remote_version is None:
            return False
        if self.local_version is None:
            return True
        return self.remote_version > self.local_version

    @property
    def local_is_newer(self) -> bool:
        if self.local_version is None:
            return False
        if self.remote_version is None:
            return True
        return self.local_version > self.remote_version


@dataclass(frozen=True)
class ServeOptions:
    """Options for running the HTTP endpoint.

    Attributes:
        host: Bind address.
        port: Bind port.
        log_level: Log level passed to the ASGI server.
    """

    host: str
    port: int
    log_level: str = "info"
