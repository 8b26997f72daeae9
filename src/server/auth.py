"""Shared-secret check for the sync endpoint."""

from __future__ import annotations

import secrets

from fastapi import Header, Request

from core.constants import ALT_TOKEN_HEADER, TOKEN_HEADER, TOKEN_QUERY_PARAM
from core.errors import InvalidTokenError, MissingTokenError


def require_token(
    request: Request,
    token: str | None = Header(default=None, alias=TOKEN_HEADER),
    alt_token: str | None = Header(default=None, alias=ALT_TOKEN_HEADER),
) -> None:
    """Reject requests that do not carry the configured token.

    The token is read from the ``Token`` header, the
    ``X-Auth-Access-Token`` header, or the ``token`` query parameter,
    in that order. No check happens when the app has no token.

    Raises:
        MissingTokenError: If no token was supplied.
        InvalidTokenError: If the supplied token does not match.
    """
    expected = request.app.state.auth_token
    if expected is None:
        return
    supplied = token or alt_token or request.query_params.get(TOKEN_QUERY_PARAM)
    if not supplied:
        raise MissingTokenError("No auth token provided. Send it in the Token header.")
    if not secrets.compare_digest(supplied.encode("utf-8"), expected.encode("utf-8")):
        raise InvalidTokenError("Invalid auth token.")
