"""HTTP client for the sync endpoint.

This module wraps the endpoint's three verbs and turns status codes
back into notesync errors.
"""

from __future__ import annotations

from types import TracebackType
from typing import Any

import httpx

from core.config import ClientConfig
from core.constants import (
    CONDITIONAL_VERSION_HEADER,
    FORCE_HEADER,
    OBJECT_CONTENT_TYPE,
    TOKEN_HEADER,
    VERSION_HEADER,
)
from core.errors import (
    InvalidTokenError,
    MissingTokenError,
    ObjectNotFoundError,
    RemoteRequestError,
    VersionConflictError,
    VersionFormatError,
)
from core.logging_config import get_logger
from core.types import DownloadResult
from core.version import VersionToken

_LOGGER = get_logger(__name__)


class SyncClient:
    """Client for one notesync server."""

    def __init__(self, http_client: httpx.Client, auth_token: str | None = None) -> None:
        """Create a client over an existing httpx client.

        Args:
            http_client: httpx client whose base URL points at the server.
            auth_token: Shared secret sent with every request.
        """
        self._http = http_client
        self._auth_token = auth_token

    @classmethod
    def from_config(cls, config: ClientConfig) -> "SyncClient":
        """Create a client owning its own httpx connection pool.

        Raises:
            NoteSyncConfigError: If no server address is configured.
        """
        http_client = httpx.Client(
            base_url=config.require_server_url(),
            timeout=config.timeout_seconds,
        )
        return cls(http_client, auth_token=config.auth_token)

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "SyncClient":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.close()

    def remote_version(self) -> VersionToken | None:
        """Return the stored version, or None if the document does not exist.

        Raises:
            RemoteRequestError: For unexpected responses.
        """
        response = self._request("HEAD")
        if response.status_code == httpx.codes.NOT_FOUND:
            return None
        _raise_for_status(response, "head")
        return _response_version(response)

    def download(self, since: VersionToken | None = None) -> DownloadResult:
        """Fetch the document if it is newer than ``since``.

        Args:
            since: Version already held locally; None fetches unconditionally.

        Returns:
            Download result; ``content`` is None when not modified.

        Raises:
            ObjectNotFoundError: If the document does not exist.
            VersionConflictError: If ``since`` is ahead of the server.
            RemoteRequestError: For other unexpected responses.
        """
        headers: dict[str, str] = {}
        if since is not None:
            headers[CONDITIONAL_VERSION_HEADER] = since.format()
        response = self._request("GET", headers=headers)
        if response.status_code == httpx.codes.NOT_MODIFIED and since is not None:
            return DownloadResult(version=since, content=None)
        _raise_for_status(response, "download")
        return DownloadResult(version=_response_version(response), content=response.content)

    def upload(self, version: VersionToken, content: bytes, force: bool = False) -> VersionToken:
        """Upload new document content.

        Args:
            version: Version of the local content.
            content: Document bytes.
            force: Overwrite regardless of the stored version.

        Returns:
            Version the server recorded.

        Raises:
            VersionConflictError: If the server holds a version that is not older.
            RemoteRequestError: For other unexpected responses.
        """
        headers = {
            VERSION_HEADER: version.format(),
            "Content-Type": OBJECT_CONTENT_TYPE,
        }
        if force:
            headers[FORCE_HEADER] = "true"
        response = self._request("PUT", headers=headers, content=content)
        _raise_for_status(response, "upload")
        written = _response_version(response)
        _LOGGER.info("document_uploaded", version=written.format(), size=len(content), force=force)
        return written

    def _request(self, method: str, **kwargs: Any) -> httpx.Response:
        headers = dict(kwargs.pop("headers", None) or {})
        if self._auth_token:
            headers[TOKEN_HEADER] = self._auth_token
        try:
            return self._http.request(method, "/", headers=headers, **kwargs)
        except httpx.HTTPError as error:
            raise RemoteRequestError(
                f"{method} request to the sync server failed: {error}. "
                "Check NOTESYNC_ADDR and network access."
            ) from error


def _raise_for_status(response: httpx.Response, operation: str) -> None:
    """Translate an error status into a notesync error.

    Raises:
        VersionConflictError: On 409.
        ObjectNotFoundError: On 404.
        MissingTokenError: On 401.
        InvalidTokenError: On 403.
        RemoteRequestError: On any other status outside 2xx.
    """
    status_code = response.status_code
    if response.is_success:
        return
    _LOGGER.warning("remote_request_failed", operation=operation, status_code=status_code)
    if status_code == httpx.codes.CONFLICT:
        raise VersionConflictError(
            f"Server rejected {operation}: version conflict. "
            "Pull the latest document or force the upload."
        )
    if status_code == httpx.codes.NOT_FOUND:
        raise ObjectNotFoundError(f"Server has no document ({operation}).")
    if status_code == httpx.codes.UNAUTHORIZED:
        raise MissingTokenError("Server requires an auth token. Set NOTESYNC_TOKEN.")
    if status_code == httpx.codes.FORBIDDEN:
        raise InvalidTokenError("Server rejected the auth token. Check NOTESYNC_TOKEN.")
    raise RemoteRequestError(
        f"Server answered {operation} with status {status_code}.",
        status_code=status_code,
    )


def _response_version(response: httpx.Response) -> VersionToken:
    raw_version = response.headers.get(VERSION_HEADER)
    if not raw_version:
        raise RemoteRequestError(
            "Server response is missing the Last-Modified version header.",
            status_code=response.status_code,
        )
    try:
        return VersionToken.parse(raw_version)
    except VersionFormatError as error:
        raise RemoteRequestError(
            f"Server sent an unparsable version '{raw_version}'.",
            status_code=response.status_code,
        ) from error
