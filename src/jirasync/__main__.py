"""CLI entry point for jirasync."""

import argparse
from pathlib import Path

from . import __version__
from .config import Settings
from .logging import setup_logging


def build_parser() -> argparse.ArgumentParser:
    """Build the command line parser."""
    parser = argparse.ArgumentParser(
        prog="jirasync",
        description="Synchronize Jira issues into a local SQLite database",
    )
    parser.add_argument(
        "--base-url",
        default=None,
        help="Jira REST API root, e.g. https://jira.example.com/rest/api/2 "
        "(default: JIRASYNC_BASE_URL)",
    )
    parser.add_argument(
        "--db",
        type=Path,
        default=None,
        help="Path to the SQLite database (default: jira-sync.db)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase logging verbosity (-v for INFO, -vv for DEBUG)",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Path to write logs to file",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    sync_parser = subparsers.add_parser(
        "sync", help="Pull issues changed since the last sync into the database"
    )
    sync_parser.add_argument("--project", "-p", required=True, help="Project key, e.g. PROJ")
    sync_parser.add_argument(
        "--incremental",
        action="store_true",
        help="Only fetch issues changed since the last successful sync",
    )

    snapshot_parser = subparsers.add_parser("snapshot", help="Fetch and print issues in full")
    snapshot_parser.add_argument("keys", nargs="+", help="Issue keys, e.g. PROJ-123")

    return parser


def main(argv: list[str] | None = None) -> None:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    # Build settings from CLI args; unset flags fall back to JIRASYNC_* env vars
    settings_kwargs: dict = {}
    if args.base_url:
        settings_kwargs["base_url"] = args.base_url
    if args.db:
        settings_kwargs["database_path"] = args.db
    if args.verbose:
        settings_kwargs["verbose"] = args.verbose
    if args.log_file:
        settings_kwargs["log_file"] = args.log_file

    settings = Settings(**settings_kwargs)

    setup_logging(settings.verbose, settings.log_file)

    if args.command == "sync":
        from .cli.sync import run_sync

        raise SystemExit(run_sync(settings, args.project, incremental=args.incremental))

    from .cli.snapshot import run_snapshot

    raise SystemExit(run_snapshot(settings, args.keys))


if __name__ == "__main__":
    main()
