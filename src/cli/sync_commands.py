"""Client-side sync commands for notesync CLI.

``status``, ``pull``, ``push`` and ``edit`` share the client options
and the mapping from errors to exit codes.
"""

from __future__ import annotations

import argparse
from dataclasses import replace
from pathlib import Path
from typing import Any, Callable

from client.editor_session import edit, pull, push, read_status
from client.sync_client import SyncClient
from core.config import ClientConfig
from core.constants import EXIT_CONFLICT, EXIT_FAILURE, EXIT_OK
from core.errors import NoteSyncError, VersionConflictError


def add_sync_commands(subparsers: Any) -> None:
    """Register status, pull, push and edit subcommands."""
    status_parser = subparsers.add_parser("status", help="Show local and remote versions")
    _add_client_options(status_parser)
    pull_parser = subparsers.add_parser("pull", help="Download the document if it is newer")
    _add_client_options(pull_parser)
    push_parser = subparsers.add_parser("push", help="Upload the local document")
    _add_client_options(push_parser)
    push_parser.add_argument(
        "--force",
        action="store_true",
        help="Overwrite the remote document regardless of versions",
    )
    edit_parser = subparsers.add_parser("edit", help="Edit the document and upload changes")
    _add_client_options(edit_parser)
    edit_parser.add_argument("--editor", help="Editor command (overrides NOTESYNC_EDITOR)")


def run_sync_command(args: argparse.Namespace) -> int:
    """Dispatch a client-side command and map errors to exit codes."""
    handlers: dict[str, Callable[[SyncClient, ClientConfig, argparse.Namespace], None]] = {
        "status": _run_status,
        "pull": _run_pull,
        "push": _run_push,
        "edit": _run_edit,
    }
    try:
        config = build_client_config(args)
        with SyncClient.from_config(config) as client:
            handlers[args.command](client, config, args)
    except VersionConflictError as error:
        print(f"conflict={error}")
        return EXIT_CONFLICT
    except NoteSyncError as error:
        print(f"error={error}")
        return EXIT_FAILURE
    return EXIT_OK


def build_client_config(args: argparse.Namespace) -> ClientConfig:
    """Apply CLI overrides on top of environment configuration.

    Raises:
        NoteSyncConfigError: If environment values are invalid.
    """
    config = ClientConfig.from_env()
    overrides: dict[str, Any] = {}
    if args.addr:
        overrides["server_url"] = args.addr
    if args.file:
        overrides["file_path"] = Path(args.file).expanduser()
    if args.token:
        overrides["auth_token"] = args.token
    if getattr(args, "editor", None):
        overrides["editor"] = args.editor
    return replace(config, **overrides)


def _add_client_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--addr", help="Sync server URL (overrides NOTESYNC_ADDR)")
    parser.add_argument("--file", help="Local document path (overrides NOTESYNC_FILE)")
    parser.add_argument("--token", help="Auth token (overrides NOTESYNC_TOKEN)")


def _run_status(client: SyncClient, config: ClientConfig, args: argparse.Namespace) -> None:
    status = read_status(client, config.require_file_path())
    print(f"file={status.file_path}")
    print(f"local_version={status.local_version or '-'}")
    print(f"remote_version={status.remote_version or '-'}")
    if status.remote_is_newer:
        print("state=remote_newer")
    elif status.local_is_newer:
        print("state=local_newer")
    else:
        print("state=in_sync")


def _run_pull(client: SyncClient, config: ClientConfig, args: argparse.Namespace) -> None:
    result = pull(client, config.require_file_path())
    print(f"version={result.version}")
    print(f"updated={str(result.modified).lower()}")


def _run_push(client: SyncClient, config: ClientConfig, args: argparse.Namespace) -> None:
    written = push(client, config.require_file_path(), force=args.force)
    print(f"version={written}")


def _run_edit(client: SyncClient, config: ClientConfig, args: argparse.Namespace) -> None:
    written = edit(client, config.require_file_path(), config.editor)
    print(f"version={written or '-'}")
    print(f"uploaded={str(written is not None).lower()}")
