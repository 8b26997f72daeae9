"""Version-aware store for the single synchronized document.

This module implements the optimistic-concurrency protocol on top of
one S3 object. The version stamp travels as the object's ``version``
metadata field; each call re-derives state from S3 and holds nothing
between calls.

The check-then-write in ``safe_put`` is not atomic. Two writers that
pass the version check concurrently both write, and the later write
wins. Enabling conditional writes makes S3 reject the second write
instead.
"""

from __future__ import annotations

from typing import Any, BinaryIO, Callable, Mapping

from botocore.exceptions import BotoCoreError, ClientError

from core.config import ServerConfig
from core.constants import (
    NOT_FOUND_ERROR_CODES,
    OBJECT_CONTENT_TYPE,
    PRECONDITION_ERROR_CODES,
    VERSION_METADATA_KEY,
)
from core.errors import (
    InvalidVersionError,
    NoteSyncStoreError,
    NotModifiedError,
    ObjectNotFoundError,
    StoreTransportError,
    VersionConflictError,
    VersionFormatError,
)
from core.logging_config import get_logger
from core.s3_uri import S3Location
from core.version import VersionToken
from store.s3_client import create_s3_client

_LOGGER = get_logger(__name__)


class VersionedObjectStore:
    """Read and write the document while enforcing version ordering.

    The store owns the authoritative copy of the document. Callers only
    hold transient copies for the duration of a request.
    """

    def __init__(
        self,
        s3_client: Any,
        location: S3Location,
        conditional_writes: bool = False,
    ) -> None:
        """Initialize the store.

        Args:
            s3_client: Boto3 S3 client, or a compatible test double.
            location: Bucket and key of the document.
            conditional_writes: Guard safe writes with S3 preconditions.
        """
        self._s3 = s3_client
        self._location = location
        self._conditional_writes = conditional_writes

    @classmethod
    def from_config(cls, config: ServerConfig) -> "VersionedObjectStore":
        """Build a store backed by a real S3 client.

        Raises:
            NoteSyncConfigError: If no bucket is configured.
        """
        return cls(
            create_s3_client(config),
            config.location(),
            conditional_writes=config.conditional_writes,
        )

    @property
    def location(self) -> S3Location:
        return self._location

    def get_current_version(self) -> VersionToken:
        """Return the stored version without transferring content.

        Returns:
            Stored version token.

        Raises:
            ObjectNotFoundError: If the document does not exist.
            InvalidVersionError: If version metadata is missing or unparsable.
            StoreTransportError: For any other backend failure.
        """
        response = self._head_object()
        return self._stored_version(response.get("Metadata"))

    def get(self, client_version: VersionToken, sink: BinaryIO) -> VersionToken:
        """Write the document into ``sink`` if it is newer than ``client_version``.

        Args:
            client_version: Version the caller already holds.
            sink: Writable binary output for the content.

        Returns:
            Stored version token.

        Raises:
            NotModifiedError: If the stored version equals ``client_version``.
            VersionConflictError: If ``client_version`` is ahead of the store.
            ObjectNotFoundError: If the document does not exist.
            InvalidVersionError: If version metadata is missing or unparsable.
            StoreTransportError: For any other backend failure.
        """
        response = self._call(
            "get_object",
            lambda: self._s3.get_object(Bucket=self._location.bucket, Key=self._location.key),
        )
        body = response["Body"]
        try:
            stored_version = self._stored_version(response.get("Metadata"))
            self._check_read(stored_version, client_version)
            content = self._call("read_body", body.read)
        finally:
            body.close()
        sink.write(content)
        _LOGGER.info(
            "object_read",
            uri=self._location.uri,
            version=stored_version.format(),
            size=len(content),
        )
        return stored_version

    def safe_put(
        self,
        new_version: VersionToken,
        content: bytes | BinaryIO,
        size: int,
    ) -> VersionToken:
        """Write the document only if ``new_version`` is newer than the stored one.

        A missing document accepts any version, so the first write
        always succeeds.

        Args:
            new_version: Version stamped on the new content.
            content: Document bytes or a readable binary stream.
            size: Content length in bytes.

        Returns:
            The version written.

        Raises:
            VersionConflictError: If the stored version is not older.
            InvalidVersionError: If stored version metadata is corrupt.
            StoreTransportError: For any other backend failure.
        """
        current_version, etag = self._current_state()
        if current_version is not None and new_version <= current_version:
            _LOGGER.warning(
                "version_conflict",
                operation="safe_put",
                uri=self._location.uri,
                stored_version=current_version.format(),
                requested_version=new_version.format(),
            )
            raise VersionConflictError(
                f"Refusing to write version {new_version}: stored version "
                f"{current_version} is not older. Fetch the latest document "
                "first or force the write."
            )
        self._write(new_version, content, size, self._preconditions(etag))
        return new_version

    def overwrite(self, content: bytes | BinaryIO, size: int) -> VersionToken:
        """Replace the document unconditionally, stamped with the current time.

        Args:
            content: Document bytes or a readable binary stream.
            size: Content length in bytes.

        Returns:
            The version written.

        Raises:
            StoreTransportError: If the backend write fails.
        """
        version = VersionToken.now()
        self._write(version, content, size, {})
        return version

    def _current_state(self) -> tuple[VersionToken | None, str | None]:
        """Return stored version and ETag, or ``(None, None)`` when absent."""
        try:
            response = self._head_object()
        except ObjectNotFoundError:
            return None, None
        return self._stored_version(response.get("Metadata")), response.get("ETag")

    def _preconditions(self, etag: str | None) -> dict[str, str]:
        if not self._conditional_writes:
            return {}
        if etag is None:
            return {"IfNoneMatch": "*"}
        return {"IfMatch": etag}

    def _head_object(self) -> dict[str, Any]:
        return self._call(
            "head_object",
            lambda: self._s3.head_object(Bucket=self._location.bucket, Key=self._location.key),
        )

    def _write(
        self,
        version: VersionToken,
        content: bytes | BinaryIO,
        size: int,
        preconditions: Mapping[str, str],
    ) -> None:
        try:
            self._s3.put_object(
                Bucket=self._location.bucket,
                Key=self._location.key,
                Body=content,
                ContentLength=size,
                ContentType=OBJECT_CONTENT_TYPE,
                Metadata={VERSION_METADATA_KEY: version.format()},
                **preconditions,
            )
        except ClientError as error:
            if preconditions and _error_code(error) in PRECONDITION_ERROR_CODES:
                _LOGGER.warning(
                    "version_conflict",
                    operation="conditional_put",
                    uri=self._location.uri,
                    requested_version=version.format(),
                )
                raise VersionConflictError(
                    f"Refusing to write version {version}: the document changed "
                    "while the write was in flight. Fetch the latest document "
                    "and retry."
                ) from error
            raise self._translate_error("put_object", error) from error
        except BotoCoreError as error:
            raise self._translate_error("put_object", error) from error
        _LOGGER.info(
            "object_written",
            uri=self._location.uri,
            version=version.format(),
            size=size,
            conditional=bool(preconditions),
        )

    def _call(self, operation: str, func: Callable[[], Any]) -> Any:
        """Run one backend call and translate its failures."""
        try:
            return func()
        except (BotoCoreError, ClientError) as error:
            raise self._translate_error(operation, error) from error

    def _translate_error(
        self,
        operation: str,
        error: BotoCoreError | ClientError,
    ) -> NoteSyncStoreError:
        if isinstance(error, ClientError) and _error_code(error) in NOT_FOUND_ERROR_CODES:
            _LOGGER.info("object_not_found", operation=operation, uri=self._location.uri)
            return ObjectNotFoundError(
                f"Document {self._location.uri} does not exist. "
                "Write it once to create it."
            )
        _LOGGER.error(
            "object_store_error",
            operation=operation,
            uri=self._location.uri,
            error=str(error),
        )
        return StoreTransportError(
            f"S3 {operation} failed for {self._location.uri}: {error}. "
            "Check AWS credentials, bucket name, and network access."
        )

    def _stored_version(self, metadata: Mapping[str, str] | None) -> VersionToken:
        """Parse the version metadata of a stored object.

        Raises:
            InvalidVersionError: If the field is missing or unparsable.
        """
        raw_version = (metadata or {}).get(VERSION_METADATA_KEY)
        if not raw_version:
            _LOGGER.error("stored_version_missing", uri=self._location.uri)
            raise InvalidVersionError(
                f"Document {self._location.uri} has no version metadata. "
                "Force a write to repair it."
            )
        try:
            return VersionToken.parse(raw_version)
        except VersionFormatError as error:
            _LOGGER.error(
                "stored_version_invalid",
                uri=self._location.uri,
                raw_version=raw_version,
            )
            raise InvalidVersionError(
                f"Document {self._location.uri} has unparsable version "
                f"'{raw_version}'. Force a write to repair it."
            ) from error

    def _check_read(self, stored_version: VersionToken, client_version: VersionToken) -> None:
        if stored_version == client_version:
            _LOGGER.info(
                "object_not_modified",
                uri=self._location.uri,
                version=stored_version.format(),
            )
            raise NotModifiedError(f"Document is unchanged since {client_version}.")
        if stored_version < client_version:
            _LOGGER.warning(
                "version_conflict",
                operation="get",
                uri=self._location.uri,
                stored_version=stored_version.format(),
                requested_version=client_version.format(),
            )
            raise VersionConflictError(
                f"Requested version {client_version} is newer than the stored "
                f"version {stored_version}."
            )


def _error_code(error: ClientError) -> str:
    return str(error.response.get("Error", {}).get("Code", ""))
