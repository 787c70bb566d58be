"""
Schedule Sync CLI - Command Line Interface

Diagnostic commands for inspecting the sync window and capturing a snapshot of
the LibreTime schedule, printed as JSON.
"""

import argparse
import json
import logging
import sys
from typing import Any, Optional, Sequence

from src.libretime.client import LibreTimeClient
from src.libretime.exceptions import LibreTimeError
from src.logger import setup_logging

from .capture import capture_snapshot, libretime_fetcher
from .civil_time import DEFAULT_TIMEZONE, CivilTimeZone, utc_now
from .config import SyncConfig
from .exceptions import ScheduleSyncError
from .window import compute_sync_window

logger = logging.getLogger(__name__)


def create_parser() -> argparse.ArgumentParser:
    """
    Create argument parser for CLI.

    Returns:
        Configured ArgumentParser instance
    """
    parser = argparse.ArgumentParser(
        prog="python -m src.schedule_sync",
        description="Broadcast schedule sync window and snapshot tools",
        epilog="Example: python -m src.schedule_sync window --now 2025-03-30T10:00:00Z",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose debug logging",
    )
    parser.add_argument(
        "--version",
        action="version",
        version="%(prog)s 1.0.0",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    window_parser = subparsers.add_parser("window", help="Print the sync window as JSON")
    _add_instant_arguments(window_parser)
    window_parser.add_argument(
        "--timezone",
        default=DEFAULT_TIMEZONE,
        metavar="ZONE",
        help=f"Civil timezone the weeks are anchored to (default: {DEFAULT_TIMEZONE})",
    )

    capture_parser = subparsers.add_parser(
        "capture", help="Fetch the window's playouts from LibreTime and print the snapshot"
    )
    _add_instant_arguments(capture_parser)

    return parser


def _add_instant_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--now",
        metavar="ISO",
        help="Reference instant with UTC offset (default: current time)",
    )
    parser.add_argument(
        "--current-show-start",
        metavar="ISO",
        help="Start of the show currently on air, with UTC offset",
    )


def print_json(data: Any) -> None:
    print(json.dumps(data, indent=2, ensure_ascii=False))


def run_window(args: argparse.Namespace) -> int:
    window = compute_sync_window(
        args.now or utc_now(),
        current_show_start_utc=args.current_show_start,
        civil_tz=CivilTimeZone(args.timezone),
    )
    print_json(window.to_dict())
    return 0


def run_capture(args: argparse.Namespace) -> int:
    config = SyncConfig.from_environment()
    config.validate()
    logger.debug(f"Loaded {config!r}")

    store = config.build_store()
    with LibreTimeClient(config.to_libretime_config()) as client:
        snapshot = capture_snapshot(
            store,
            libretime_fetcher(client, limit=config.schedule_limit),
            now=args.now,
            current_show_start_utc=args.current_show_start,
            civil_tz=config.civil_timezone(),
        )
    print_json(snapshot.to_dict())
    return 0


COMMANDS = {
    "window": run_window,
    "capture": run_capture,
}


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    Main CLI entry point.

    Args:
        argv: Arguments to parse (default: sys.argv)

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    setup_logging()
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    try:
        return COMMANDS[args.command](args)
    except (ScheduleSyncError, LibreTimeError, EnvironmentError, ValueError) as e:
        logger.error(f"{args.command} failed: {e}")
        if args.verbose:
            logger.exception("Detailed error traceback:")
        return 1


if __name__ == "__main__":
    sys.exit(main())
