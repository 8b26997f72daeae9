"""Unit tests for the HTTP sync client."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import httpx
import pytest
from fastapi.testclient import TestClient

from client.sync_client import SyncClient
from core.errors import (
    InvalidTokenError,
    MissingTokenError,
    ObjectNotFoundError,
    RemoteRequestError,
    VersionConflictError,
)
from core.version import VersionToken
from server.app import create_app

STORED_AT = VersionToken(datetime(2024, 3, 5, 12, 30, 15, tzinfo=timezone.utc))


@pytest.fixture
def sync_client(store) -> SyncClient:
    return SyncClient(TestClient(create_app(store)))


def _mock_client(handler) -> SyncClient:
    http_client = httpx.Client(base_url="http://notes.test", transport=httpx.MockTransport(handler))
    return SyncClient(http_client, auth_token="s3cret")


def test_remote_version_is_none_for_missing_document(sync_client: SyncClient) -> None:
    """HEAD 404 should mean no document yet."""
    assert sync_client.remote_version() is None


def test_upload_then_download(sync_client: SyncClient) -> None:
    """Uploaded content should come back with its version."""
    written = sync_client.upload(STORED_AT, b"hola")

    result = sync_client.download()

    assert written == STORED_AT
    assert result.version == STORED_AT and result.content == b"hola"
    assert sync_client.remote_version() == STORED_AT


def test_download_same_version_is_not_modified(sync_client: SyncClient) -> None:
    """A 304 should produce a result without content."""
    sync_client.upload(STORED_AT, b"hola")

    result = sync_client.download(since=STORED_AT)

    assert result.content is None and not result.modified


def test_download_missing_document_raises(sync_client: SyncClient) -> None:
    """A 404 on GET should raise not found."""
    with pytest.raises(ObjectNotFoundError):
        sync_client.download()


def test_stale_upload_raises_conflict(sync_client: SyncClient) -> None:
    """A 409 should raise a version conflict."""
    sync_client.upload(STORED_AT, b"hola")

    with pytest.raises(VersionConflictError):
        sync_client.upload(VersionToken(STORED_AT.timestamp - timedelta(days=1)), b"old")


def test_forced_upload_sends_force_header() -> None:
    """Force uploads should carry the Force header and the token."""
    seen: dict[str, str] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen.update(request.headers)
        return httpx.Response(200, headers={"Last-Modified": STORED_AT.format()})

    written = _mock_client(handler).upload(STORED_AT, b"x", force=True)

    assert written == STORED_AT
    assert seen["force"] == "true" and seen["token"] == "s3cret"
    assert seen["last-modified"] == STORED_AT.format()


@pytest.mark.parametrize(
    ("status_code", "error_type"),
    [(401, MissingTokenError), (403, InvalidTokenError), (500, RemoteRequestError)],
)
def test_error_statuses_map_to_errors(status_code: int, error_type: type[Exception]) -> None:
    """Failure statuses should raise the matching error."""
    client = _mock_client(lambda request: httpx.Response(status_code))

    with pytest.raises(error_type):
        client.download()


def test_missing_version_header_is_rejected() -> None:
    """A success response without version header is a protocol error."""
    client = _mock_client(lambda request: httpx.Response(200, content=b"x"))

    with pytest.raises(RemoteRequestError):
        client.download()


def test_connection_errors_are_wrapped() -> None:
    """Network failures should surface as remote request errors."""

    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(RemoteRequestError) as error_info:
        _mock_client(handler).remote_version()

    assert error_info.value.status_code is None
