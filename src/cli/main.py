"""notesync CLI entry points.

This module exposes the server and client commands.
It maps argparse commands onto the command modules.
"""

from __future__ import annotations

import argparse
from typing import Sequence

from cli.serve_command import add_serve_command, run_serve_command
from cli.sync_commands import add_sync_commands, run_sync_command
from core.constants import DEFAULT_LOG_LEVEL, EXIT_FAILURE
from core.logging_config import configure_logging

_SYNC_COMMANDS = ("status", "pull", "push", "edit")


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(
        prog="notesync",
        description="Single-document sync with version conflict detection",
    )
    parser.add_argument(
        "--log-level",
        default=DEFAULT_LOG_LEVEL,
        choices=("debug", "info", "warning", "error"),
        help="Minimum log level",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)
    add_serve_command(subparsers)
    add_sync_commands(subparsers)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the notesync CLI.

    Args:
        argv: Optional argument vector.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)
    if args.command == "serve":
        return run_serve_command(args)
    if args.command in _SYNC_COMMANDS:
        return run_sync_command(args)
    parser.error(f"Unsupported command: {args.command}")
    return EXIT_FAILURE
