"""verhandle CLI entry points.
This module exposes commands for objects, versions, and handles.
It maps argparse commands onto SDK calls.
"""

from __future__ import annotations

import argparse
import sys
from dataclasses import replace
from pathlib import Path
from typing import Any, Sequence

from core.config import HandleConfig
from core.constants import DEFAULT_OBJECT_KIND, NEW_VERSION_COMMENT
from core.errors import HandleError
from core.types import Found, ResolutionFailed
from store.repository_sdk import HandleClient


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(prog="verhandle", description="Versioned handle CLI")
    parser.add_argument("--data-root", help="Override VERHANDLE_DATA_ROOT for this command")
    subparsers = parser.add_subparsers(dest="command", required=True)
    _add_create_command(subparsers)
    _add_new_version_command(subparsers)
    _add_register_command(subparsers)
    _add_resolve_command(subparsers)
    _add_lookup_command(subparsers)
    _add_delete_command(subparsers)
    _add_history_command(subparsers)
    _add_restore_command(subparsers)
    _add_supports_command(subparsers)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the verhandle CLI.

    Args:
        argv: Optional argument vector.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        client = _build_client(args.data_root)
        return _dispatch(client, args)
    except HandleError as error:
        print(f"error: {error}", file=sys.stderr)
        return 1


def _dispatch(client: HandleClient, args: argparse.Namespace) -> int:
    if args.command == "create":
        print(client.create_object(args.object_id, args.kind))
        return 0
    if args.command == "new-version":
        print(client.create_version(args.previous, args.object_id, args.comment))
        return 0
    if args.command == "register":
        print(client.register(args.object_id, args.identifier))
        return 0
    if args.command == "resolve":
        return _run_resolve_command(client, args)
    if args.command == "lookup":
        print(client.lookup(args.object_id))
        return 0
    if args.command == "delete":
        client.delete(args.object_id)
        return 0
    if args.command == "history":
        return _run_history_command(client, args)
    if args.command == "restore":
        for handle in client.restore(args.manifest):
            print(handle)
        return 0
    if args.command == "supports":
        supported = client.supports(args.identifier)
        print("yes" if supported else "no")
        return 0 if supported else 1
    raise HandleError(f"Unsupported command: {args.command}")


def _build_client(data_root: str | None) -> HandleClient:
    """Build SDK client with optional data-root override.

    Args:
        data_root: Optional override path.

    Returns:
        Configured SDK client.
    """
    config = HandleConfig.from_env()
    if data_root:
        config = replace(config, data_root=Path(data_root).expanduser().resolve())
    return HandleClient(config)


def _run_resolve_command(client: HandleClient, args: argparse.Namespace) -> int:
    """Handle resolve command.

    Args:
        client: SDK client.
        args: Parsed CLI args.

    Returns:
        Exit code: 0 when found, 1 when not found or failed.
    """
    outcome = client.resolve(args.identifier)
    if isinstance(outcome, Found):
        print(f"{outcome.item.object_id}\t{outcome.item.kind}")
        return 0
    if isinstance(outcome, ResolutionFailed):
        print(f"error: {outcome.cause}", file=sys.stderr)
        return 1
    print(f"not found: {args.identifier}", file=sys.stderr)
    return 1


def _run_history_command(client: HandleClient, args: argparse.Namespace) -> int:
    """Handle history command.

    Args:
        client: SDK client.
        args: Parsed CLI args.

    Returns:
        Exit code.
    """
    for version in client.history(args.object_id):
        print(
            f"{version.number}\t"
            f"{version.item.object_id}\t"
            f"{version.created_at.isoformat()}\t"
            f"{version.comment}"
        )
    return 0


def _add_create_command(subparsers: Any) -> None:
    """Register create subcommand."""
    parser = subparsers.add_parser("create", help="Create an object and assign a handle")
    parser.add_argument("object_id", help="New object id")
    parser.add_argument("--kind", default=DEFAULT_OBJECT_KIND, help="Object kind, e.g. item")


def _add_new_version_command(subparsers: Any) -> None:
    """Register new-version subcommand."""
    parser = subparsers.add_parser("new-version", help="Create the next version of a work")
    parser.add_argument("object_id", help="Object id of the new version")
    parser.add_argument("--previous", required=True, help="Object id of any existing version")
    parser.add_argument("--comment", default=NEW_VERSION_COMMENT, help="Version summary")


def _add_register_command(subparsers: Any) -> None:
    """Register register subcommand."""
    parser = subparsers.add_parser("register", help="Register a handle for an existing object")
    parser.add_argument("object_id", help="Object id")
    parser.add_argument("--identifier", help="Handle to restore, e.g. 123456789/42.1")


def _add_resolve_command(subparsers: Any) -> None:
    """Register resolve subcommand."""
    parser = subparsers.add_parser("resolve", help="Resolve a handle to its object")
    parser.add_argument("identifier", help="Handle, hdl: form, or resolver URL")


def _add_lookup_command(subparsers: Any) -> None:
    """Register lookup subcommand."""
    parser = subparsers.add_parser("lookup", help="Print the handle of an object")
    parser.add_argument("object_id", help="Object id")


def _add_delete_command(subparsers: Any) -> None:
    """Register delete subcommand."""
    parser = subparsers.add_parser("delete", help="Delete an object")
    parser.add_argument("object_id", help="Object id")


def _add_history_command(subparsers: Any) -> None:
    """Register history subcommand."""
    parser = subparsers.add_parser("history", help="List versions of an object's work")
    parser.add_argument("object_id", help="Object id")


def _add_restore_command(subparsers: Any) -> None:
    """Register restore subcommand."""
    parser = subparsers.add_parser("restore", help="Replay a YAML restore manifest")
    parser.add_argument("manifest", help="Path to restore manifest")


def _add_supports_command(subparsers: Any) -> None:
    """Register supports subcommand."""
    parser = subparsers.add_parser("supports", help="Check whether a string looks like a handle")
    parser.add_argument("identifier", help="Candidate identifier")
