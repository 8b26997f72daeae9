"""FastAPI application for the sync endpoint.

This module maps HTTP verbs on ``/`` onto the versioned store and
translates store outcomes into status codes. All request validation
happens before the store is called.
"""

from __future__ import annotations

import io
import time
from http import HTTPStatus
from typing import Awaitable, Callable, NoReturn

from fastapi import APIRouter, Depends, FastAPI, Header, HTTPException, Request
from fastapi.responses import HTMLResponse, JSONResponse, Response
from starlette.concurrency import run_in_threadpool

from core.constants import (
    FORCE_DISABLED_VALUES,
    HTML_MEDIA_TYPE,
    MAX_BODY_BYTES,
    TEXT_MEDIA_TYPE,
    VERSION_HEADER,
)
from core.errors import (
    InvalidTokenError,
    InvalidVersionError,
    MissingTokenError,
    NoteSyncError,
    NotModifiedError,
    ObjectNotFoundError,
    StoreTransportError,
    VersionConflictError,
    VersionFormatError,
)
from core.logging_config import get_logger
from core.version import VersionToken
from server.auth import require_token
from server.view import render_view
from store.versioned_store import VersionedObjectStore

_LOGGER = get_logger(__name__)

_ERROR_STATUS_CODES: tuple[tuple[type[NoteSyncError], int], ...] = (
    (NoteSyncError, HTTPStatus.INTERNAL_SERVER_ERROR),
    (NotModifiedError, HTTPStatus.NOT_MODIFIED),
    (VersionConflictError, HTTPStatus.CONFLICT),
    (ObjectNotFoundError, HTTPStatus.NOT_FOUND),
    (InvalidVersionError, HTTPStatus.INTERNAL_SERVER_ERROR),
    (StoreTransportError, HTTPStatus.INTERNAL_SERVER_ERROR),
    (VersionFormatError, HTTPStatus.BAD_REQUEST),
    (MissingTokenError, HTTPStatus.UNAUTHORIZED),
    (InvalidTokenError, HTTPStatus.FORBIDDEN),
)

router = APIRouter(dependencies=[Depends(require_token)])


def create_app(store: VersionedObjectStore, auth_token: str | None = None) -> FastAPI:
    """Build the sync endpoint around an explicitly constructed store.

    Args:
        store: Store serving every request of this app.
        auth_token: Shared secret required on each request, if any.

    Returns:
        Configured FastAPI application.
    """
    app = FastAPI(
        title="notesync",
        description="Single-document sync endpoint with version conflict detection",
        version="0.1.0",
    )
    app.state.store = store
    app.state.auth_token = auth_token
    if auth_token is None:
        _LOGGER.warning("auth_disabled", reason="no auth token configured")
    for error_type, status_code in _ERROR_STATUS_CODES:
        app.add_exception_handler(error_type, _error_handler(int(status_code)))
    app.middleware("http")(_log_requests)
    app.include_router(router)
    return app


def get_store(request: Request) -> VersionedObjectStore:
    """Resolve the store attached to the running app."""
    return request.app.state.store


@router.get("/")
def get_document(
    if_modified_since: str | None = Header(default=None),
    store: VersionedObjectStore = Depends(get_store),
) -> Response:
    """Return the document if it is newer than ``If-Modified-Since``."""
    client_version = VersionToken.zero()
    if if_modified_since:
        client_version = VersionToken.parse(if_modified_since)
    buffer = io.BytesIO()
    version = store.get(client_version, buffer)
    return Response(
        content=buffer.getvalue(),
        media_type=TEXT_MEDIA_TYPE,
        headers={VERSION_HEADER: version.format()},
    )


@router.head("/")
def head_document(store: VersionedObjectStore = Depends(get_store)) -> Response:
    """Return the stored version in the ``Last-Modified`` header."""
    version = store.get_current_version()
    return Response(headers={VERSION_HEADER: version.format()})


@router.get("/index.html", response_class=HTMLResponse)
def get_view(store: VersionedObjectStore = Depends(get_store)) -> HTMLResponse:
    """Render the document as an HTML page."""
    buffer = io.BytesIO()
    version = store.get(VersionToken.zero(), buffer)
    return HTMLResponse(
        render_view(buffer.getvalue(), store.location.key),
        media_type=HTML_MEDIA_TYPE,
        headers={VERSION_HEADER: version.format()},
    )


@router.put("/")
async def put_document(
    request: Request,
    last_modified: str | None = Header(default=None),
    force: str | None = Header(default=None),
    store: VersionedObjectStore = Depends(get_store),
) -> Response:
    """Store the request body as the new document version.

    ``Last-Modified`` carries the version of the new content. A truthy
    ``Force`` header skips the version check and stamps the current time.
    """
    if not last_modified:
        _reject(HTTPStatus.BAD_REQUEST, "Missing Last-Modified version header.")
    version = VersionToken.parse(last_modified)
    _check_content_length(request.headers.get("content-length"))
    body = await request.body()
    if not body:
        _reject(HTTPStatus.BAD_REQUEST, "Missing request body.")
    if len(body) > MAX_BODY_BYTES:
        _reject(HTTPStatus.REQUEST_ENTITY_TOO_LARGE, "Request body too large.")
    if is_forced(force):
        _LOGGER.info("forced_write_requested", size=len(body))
        written = await run_in_threadpool(store.overwrite, body, len(body))
    else:
        written = await run_in_threadpool(store.safe_put, version, body, len(body))
    return Response(headers={VERSION_HEADER: written.format()})


def is_forced(force_header: str | None) -> bool:
    """Return whether a ``Force`` header value requests an overwrite."""
    if force_header is None:
        return False
    return force_header.strip().lower() not in FORCE_DISABLED_VALUES


def _check_content_length(raw_length: str | None) -> None:
    """Reject missing, empty, or oversized bodies before reading them.

    Raises:
        HTTPException: 400 for missing or zero length, 413 above the limit.
    """
    if raw_length is None:
        _reject(HTTPStatus.BAD_REQUEST, "Missing Content-Length.")
    try:
        length = int(raw_length)
    except ValueError:
        _reject(HTTPStatus.BAD_REQUEST, "Invalid Content-Length.")
    if length <= 0:
        _reject(HTTPStatus.BAD_REQUEST, "Missing request body.")
    if length > MAX_BODY_BYTES:
        _reject(HTTPStatus.REQUEST_ENTITY_TOO_LARGE, "Request body too large.")


def _reject(status_code: int, detail: str) -> NoReturn:
    _LOGGER.info("request_rejected", status_code=int(status_code), detail=detail)
    raise HTTPException(status_code=int(status_code), detail=detail)


def _error_handler(
    status_code: int,
) -> Callable[[Request, Exception], Awaitable[Response]]:
    """Build an exception handler answering with ``status_code``."""

    async def handle(request: Request, error: Exception) -> Response:
        _LOGGER.info(
            "request_failed",
            method=request.method,
            path=request.url.path,
            status_code=status_code,
            error_type=type(error).__name__,
        )
        if status_code == HTTPStatus.NOT_MODIFIED or request.method == "HEAD":
            return Response(status_code=status_code)
        return JSONResponse(status_code=status_code, content={"detail": str(error)})

    return handle


async def _log_requests(
    request: Request,
    call_next: Callable[[Request], Awaitable[Response]],
) -> Response:
    started_at = time.monotonic()
    response = await call_next(request)
    _LOGGER.info(
        "request_served",
        method=request.method,
        path=request.url.path,
        content_length=request.headers.get("content-length"),
        status_code=response.status_code,
        duration_ms=round((time.monotonic() - started_at) * 1000, 2),
    )
    return response
