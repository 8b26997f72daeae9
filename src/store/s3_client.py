"""S3 client construction for the document store.

This module encapsulates boto3 session and client creation.
Retry behaviour is configured here, not in the protocol code.
"""

from __future__ import annotations

from typing import Any

import boto3
from botocore.config import Config

from core.config import ServerConfig


def create_s3_client(config: ServerConfig) -> Any:
    """Create boto3 S3 client for the document store.

    Args:
        config: Server config with optional session settings.

    Returns:
        Boto3 S3 client.
    """
    session = boto3.session.Session(**build_session_kwargs(config))
    client_kwargs: dict[str, Any] = {
        "config": Config(
            retries={"max_attempts": config.s3_max_attempts, "mode": "standard"},
        ),
    }
    if config.s3_endpoint_url:
        client_kwargs["endpoint_url"] = config.s3_endpoint_url
    return session.client("s3", **client_kwargs)


def build_session_kwargs(config: ServerConfig) -> dict[str, str]:
    """Build boto3 Session kwargs from config.

    Args:
        config: Server config.

    Returns:
        Session keyword arguments.
    """
    kwargs: dict[str, str] = {}
    if config.s3_profile:
        kwargs["profile_name"] = config.s3_profile
    if config.s3_region:
        kwargs["region_name"] = config.s3_region
    return kwargs
