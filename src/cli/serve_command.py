"""Serve command wiring for notesync CLI."""

from __future__ import annotations

import argparse
from dataclasses import replace
from typing import Any

from core.config import ServerConfig
from core.constants import EXIT_FAILURE, EXIT_OK
from core.errors import NoteSyncConfigError
from core.s3_uri import parse_s3_uri
from core.types import ServeOptions
from server.runner import run_server


def add_serve_command(subparsers: Any) -> None:
    """Register serve subcommand."""
    parser = subparsers.add_parser("serve", help="Run the HTTP sync endpoint")
    parser.add_argument("--bucket", help="S3 bucket (overrides NOTESYNC_BUCKET)")
    parser.add_argument("--key", help="S3 object key (overrides NOTESYNC_KEY)")
    parser.add_argument("--object-uri", help="Document location as s3://bucket/key")
    parser.add_argument("--region", help="S3 region (overrides NOTESYNC_S3_REGION)")
    parser.add_argument("--host", help="Bind address (overrides NOTESYNC_HOST)")
    parser.add_argument("--port", type=int, help="HTTP port (overrides NOTESYNC_PORT)")
    parser.add_argument(
        "--conditional-writes",
        action="store_true",
        default=None,
        help="Guard safe writes with S3 preconditions",
    )


def run_serve_command(args: argparse.Namespace) -> int:
    """Build server config from env and flags, then serve until interrupted."""
    try:
        config = build_server_config(args)
        options = ServeOptions(host=config.host, port=config.port, log_level=args.log_level)
        run_server(config, options)
    except NoteSyncConfigError as error:
        print(f"config_error={error}")
        return EXIT_FAILURE
    return EXIT_OK


def build_server_config(args: argparse.Namespace) -> ServerConfig:
    """Apply CLI overrides on top of environment configuration.

    Raises:
        NoteSyncConfigError: If environment values or flags are invalid.
    """
    config = ServerConfig.from_env()
    overrides: dict[str, Any] = {}
    if args.object_uri:
        location = parse_s3_uri(args.object_uri)
        overrides.update(bucket=location.bucket, key=location.key)
    if args.bucket:
        overrides["bucket"] = args.bucket
    if args.key:
        overrides["key"] = args.key
    if args.region:
        overrides["s3_region"] = args.region
    if args.host:
        overrides["host"] = args.host
    if args.port is not None:
        overrides["port"] = args.port
    if args.conditional_writes is not None:
        overrides["conditional_writes"] = args.conditional_writes
    config = replace(config, **overrides)
    config.location()
    return config
