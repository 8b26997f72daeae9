"""notesync exception hierarchy.

This module defines the error kinds surfaced by the store, the endpoint,
and the sync client. Each outcome has its own type so callers never
have to inspect messages to tell them apart.
"""

from __future__ import annotations


class NoteSyncError(Exception):
    """Base exception for all notesync failures."""


class NoteSyncConfigError(NoteSyncError):
    """Raised for invalid runtime configuration."""


class VersionFormatError(NoteSyncError):
    """Raised when a version string cannot be parsed."""


class NoteSyncStoreError(NoteSyncError):
    """Base class for versioned object store outcomes."""


class ObjectNotFoundError(NoteSyncStoreError):
    """Raised when the document object does not exist."""


class InvalidVersionError(NoteSyncStoreError):
    """Raised when stored version metadata is missing or unparsable."""


class NotModifiedError(NoteSyncStoreError):
    """Raised when the caller already holds the stored version."""


class VersionConflictError(NoteSyncStoreError):
    """Raised when a caller's version disagrees with the stored one."""


class StoreTransportError(NoteSyncStoreError):
    """Raised for backend I/O failures other than a missing object."""


class NoteSyncAuthError(NoteSyncError):
    """Base class for shared-secret check failures."""


class MissingTokenError(NoteSyncAuthError):
    """Raised when a request carries no auth token."""


class InvalidTokenError(NoteSyncAuthError):
    """Raised when a request carries the wrong auth token."""


class RemoteRequestError(NoteSyncError):
    """Raised when the sync endpoint answers with an unexpected status."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class EditorError(NoteSyncError):
    """Raised when the local editor process fails."""
