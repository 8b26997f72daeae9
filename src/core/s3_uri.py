"""S3 URI parsing helpers.

This module parses the single document location ``s3://bucket/key``.
It keeps location validation consistent between config and CLI.
"""

from __future__ import annotations

from dataclasses import dataclass

from core.errors import NoteSyncConfigError


@dataclass(frozen=True)
class S3Location:
    """Bucket and key of the synchronized document."""

    bucket: str
    key: str

    @property
    def uri(self) -> str:
        return f"s3://{self.bucket}/{self.key}"


def parse_s3_uri(uri: str) -> S3Location:
    """Parse and validate an S3 object URI.

    Args:
        uri: URI in format ``s3://bucket/key``.

    Returns:
        Parsed bucket and key pair.

    Raises:
        NoteSyncConfigError: If bucket or key is missing.
    """
    if not uri.startswith("s3://"):
        _raise_uri_error(uri)
    stripped_uri = uri.removeprefix("s3://")
    if "/" not in stripped_uri:
        _raise_uri_error(uri)
    bucket, key = stripped_uri.split("/", 1)
    if not bucket or not key or key.endswith("/"):
        _raise_uri_error(uri)
    return S3Location(bucket=bucket, key=key)


def _raise_uri_error(uri: str) -> None:
    """Raise an invalid object URI error.

    Args:
        uri: Invalid URI value.

    Raises:
        NoteSyncConfigError: Always.
    """
    raise NoteSyncConfigError(
        f"Invalid S3 URI '{uri}': expected s3://bucket/key. "
        "Provide both a bucket and an object key."
    )
