"""Runtime configuration models for notesync.

This module owns all environment variable parsing and validation.
Other modules consume typed config objects instead of raw env reads.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from core.constants import (
    DEFAULT_CLIENT_TIMEOUT_SECONDS,
    DEFAULT_EDITOR,
    DEFAULT_OBJECT_KEY,
    DEFAULT_S3_MAX_ATTEMPTS,
    DEFAULT_S3_REGION,
    DEFAULT_SERVER_HOST,
    DEFAULT_SERVER_PORT,
)
from core.errors import NoteSyncConfigError
from core.s3_uri import S3Location, parse_s3_uri

_TRUE_VALUES = ("1", "true", "yes", "on")
_FALSE_VALUES = ("", "0", "false", "no", "off")


@dataclass(frozen=True)
class ServerConfig:
    """Validated sync server configuration.

    Attributes:
        bucket: S3 bucket holding the document; None until configured.
        key: Object key of the document.
        s3_region: AWS region for the S3 client.
        s3_profile: Optional AWS profile for boto3 session initialization.
        s3_endpoint_url: Optional endpoint for S3-compatible backends.
        s3_max_attempts: Bounded retry count for the S3 client.
        conditional_writes: Whether safe writes use backend preconditions.
        host: Interface the HTTP server binds to.
        port: HTTP port.
        auth_token: Shared secret required on every request, if set.
    """

    bucket: str | None
    key: str
    s3_region: str
    s3_profile: str | None
    s3_endpoint_url: str | None
    s3_max_attempts: int
    conditional_writes: bool
    host: str
    port: int
    auth_token: str | None

    @classmethod
    def from_env(cls) -> "ServerConfig":
        """Build server config from process environment variables.

        Returns:
            A validated config object.

        Raises:
            NoteSyncConfigError: If environment values are invalid.
        """
        bucket = os.getenv("NOTESYNC_BUCKET") or None
        key = os.getenv("NOTESYNC_KEY", DEFAULT_OBJECT_KEY)
        object_uri = os.getenv("NOTESYNC_OBJECT_URI")
        if object_uri:
            location = parse_s3_uri(object_uri)
            bucket, key = location.bucket, location.key
        return cls(
            bucket=bucket,
            key=key,
            s3_region=os.getenv("NOTESYNC_S3_REGION", DEFAULT_S3_REGION),
            s3_profile=os.getenv("NOTESYNC_S3_PROFILE") or None,
            s3_endpoint_url=os.getenv("NOTESYNC_S3_ENDPOINT_URL") or None,
            s3_max_attempts=_parse_positive_int(
                "NOTESYNC_S3_MAX_ATTEMPTS",
                os.getenv("NOTESYNC_S3_MAX_ATTEMPTS", str(DEFAULT_S3_MAX_ATTEMPTS)),
            ),
            conditional_writes=_parse_bool(
                "NOTESYNC_S3_CONDITIONAL_WRITES",
                os.getenv("NOTESYNC_S3_CONDITIONAL_WRITES", "false"),
            ),
            host=os.getenv("NOTESYNC_HOST", DEFAULT_SERVER_HOST),
            port=_parse_port(os.getenv("NOTESYNC_PORT", str(DEFAULT_SERVER_PORT))),
            auth_token=os.getenv("NOTESYNC_TOKEN") or None,
        )

    def location(self) -> S3Location:
        """Return the document location.

        Raises:
            NoteSyncConfigError: If no bucket has been configured.
        """
        if not self.bucket:
            raise NoteSyncConfigError(
                "No S3 bucket configured. Set NOTESYNC_BUCKET, "
                "NOTESYNC_OBJECT_URI, or pass --bucket."
            )
        if not self.key:
            raise NoteSyncConfigError(
                "No S3 object key configured. Set NOTESYNC_KEY or pass --key."
            )
        return S3Location(bucket=self.bucket, key=self.key)


@dataclass(frozen=True)
class ClientConfig:
    """Validated sync client configuration.

    Attributes:
        server_url: Base URL of the sync endpoint.
        file_path: Local copy of the document.
        auth_token: Shared secret sent with every request.
        editor: Editor command used by ``notesync edit``.
        timeout_seconds: HTTP timeout per request.
    """

    server_url: str | None
    file_path: Path | None
    auth_token: str | None
    editor: str
    timeout_seconds: float

    @classmethod
    def from_env(cls) -> "ClientConfig":
        """Build client config from process environment variables.

        Returns:
            A validated config object.

        Raises:
            NoteSyncConfigError: If environment values are invalid.
        """
        file_value = os.getenv("NOTESYNC_FILE")
        return cls(
            server_url=os.getenv("NOTESYNC_ADDR") or None,
            file_path=Path(file_value).expanduser() if file_value else None,
            auth_token=os.getenv("NOTESYNC_TOKEN") or None,
            editor=os.getenv("NOTESYNC_EDITOR") or DEFAULT_EDITOR,
            timeout_seconds=_parse_timeout(
                os.getenv("NOTESYNC_TIMEOUT_SECONDS", str(DEFAULT_CLIENT_TIMEOUT_SECONDS))
            ),
        )

    def require_server_url(self) -> str:
        if not self.server_url:
            raise NoteSyncConfigError(
                "No sync server address configured. Set NOTESYNC_ADDR or pass --addr."
            )
        return self.server_url

    def require_file_path(self) -> Path:
        if self.file_path is None:
            raise NoteSyncConfigError(
                "No local document configured. Set NOTESYNC_FILE or pass --file."
            )
        return self.file_path


def _parse_positive_int(name: str, raw_value: str) -> int:
    """Parse a positive integer environment value.

    Args:
        name: Environment variable name, for error messages.
        raw_value: Raw string from environment.

    Returns:
        Parsed integer.

    Raises:
        NoteSyncConfigError: If value is not a positive integer.
    """
    try:
        value = int(raw_value)
    except ValueError as error:
        raise NoteSyncConfigError(
            f"Invalid {name} value: expected integer, got '{raw_value}'. "
            f"Set {name} to a positive number."
        ) from error
    if value < 1:
        raise NoteSyncConfigError(
            f"Invalid {name} value: expected a positive integer, got {value}."
        )
    return value


def _parse_port(raw_value: str) -> int:
    port = _parse_positive_int("NOTESYNC_PORT", raw_value)
    if port > 65535:
        raise NoteSyncConfigError(
            f"Invalid NOTESYNC_PORT value: {port} is outside 1-65535."
        )
    return port


def _parse_timeout(raw_value: str) -> float:
    try:
        value = float(raw_value)
    except ValueError as error:
        raise NoteSyncConfigError(
            "Invalid NOTESYNC_TIMEOUT_SECONDS value: "
            f"expected number, got '{raw_value}'."
        ) from error
    if value <= 0:
        raise NoteSyncConfigError(
            f"Invalid NOTESYNC_TIMEOUT_SECONDS value: expected > 0, got {value}."
        )
    return value


def _parse_bool(name: str, raw_value: str) -> bool:
    """Parse a boolean flag environment value.

    Raises:
        NoteSyncConfigError: If value is not a recognized flag.
    """
    normalized = raw_value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise NoteSyncConfigError(
        f"Invalid {name} value: expected true/false, got '{raw_value}'."
    )
