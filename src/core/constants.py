"""Core constants used across notesync modules.

This module centralizes defaults and wire-level names.
Keeping values here avoids magic literals in protocol code.
"""

from __future__ import annotations

DEFAULT_OBJECT_KEY = "todo.md"
DEFAULT_S3_REGION = "us-west-2"
DEFAULT_S3_MAX_ATTEMPTS = 3
DEFAULT_SERVER_HOST = "0.0.0.0"
DEFAULT_SERVER_PORT = 80
DEFAULT_EDITOR = "vim"
DEFAULT_CLIENT_TIMEOUT_SECONDS = 10.0
DEFAULT_LOG_LEVEL = "info"

VERSION_METADATA_KEY = "version"
OBJECT_CONTENT_TYPE = "text/plain"
TEXT_MEDIA_TYPE = "text/plain; charset=utf-8"
HTML_MEDIA_TYPE = "text/html; charset=utf-8"
MAX_BODY_BYTES = 1024 * 1024

VERSION_HEADER = "Last-Modified"
CONDITIONAL_VERSION_HEADER = "If-Modified-Since"
FORCE_HEADER = "Force"
TOKEN_HEADER = "Token"
ALT_TOKEN_HEADER = "X-Auth-Access-Token"
TOKEN_QUERY_PARAM = "token"
FORCE_DISABLED_VALUES = ("", "false", "0", "no")

NOT_FOUND_ERROR_CODES = ("NoSuchKey", "404", "NotFound")
PRECONDITION_ERROR_CODES = ("PreconditionFailed", "ConditionalRequestConflict")

EXIT_OK = 0
EXIT_FAILURE = 2
EXIT_CONFLICT = 3
