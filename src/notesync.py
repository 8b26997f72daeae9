"""Public SDK surface for notesync.

This module provides a stable import path for library users.
It re-exports the store, the endpoint factory, and the client.
"""

from __future__ import annotations

from client.editor_session import edit, pull, push, read_status
from client.sync_client import SyncClient
from core.config import ClientConfig, ServerConfig
from core.errors import (
    InvalidVersionError,
    NoteSyncError,
    NotModifiedError,
    ObjectNotFoundError,
    StoreTransportError,
    VersionConflictError,
    VersionFormatError,
)
from core.s3_uri import S3Location
from core.types import DownloadResult, SyncStatus
from core.version import VersionToken
from server.app import create_app
from store.versioned_store import VersionedObjectStore

__all__ = [
    "ClientConfig",
    "DownloadResult",
    "InvalidVersionError",
    "NoteSyncError",
    "NotModifiedError",
    "ObjectNotFoundError",
    "S3Location",
    "ServerConfig",
    "StoreTransportError",
    "SyncClient",
    "SyncStatus",
    "VersionConflictError",
    "VersionFormatError",
    "VersionToken",
    "VersionedObjectStore",
    "create_app",
    "edit",
    "pull",
    "push",
    "read_status",
]
