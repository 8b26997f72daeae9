"""Process entry point for the sync endpoint."""

from __future__ import annotations

import uvicorn

from core.config import ServerConfig
from core.logging_config import get_logger
from core.types import ServeOptions
from server.app import create_app
from store.versioned_store import VersionedObjectStore

_LOGGER = get_logger(__name__)


def run_server(config: ServerConfig, options: ServeOptions) -> None:
    """Build the store and serve the endpoint until interrupted.

    Args:
        config: Server configuration with the document location.
        options: Bind address and ASGI server log level.

    Raises:
        NoteSyncConfigError: If no bucket is configured.
    """
    store = VersionedObjectStore.from_config(config)
    app = create_app(store, auth_token=config.auth_token)
    _LOGGER.info(
        "server_starting",
        host=options.host,
        port=options.port,
        uri=store.location.uri,
        conditional_writes=config.conditional_writes,
    )
    uvicorn.run(app, host=options.host, port=options.port, log_level=options.log_level)
    _LOGGER.info("server_stopped")
