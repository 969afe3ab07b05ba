"""Argument parsing for the clipdeck CLI."""

import argparse
import sys
from collections.abc import Sequence
from pathlib import Path

from clipdeck.pickers.host import PickerTab


def add_backend_args(parser: argparse.ArgumentParser) -> None:
    """Add --config and --url arguments to a parser."""
    parser.add_argument(
        "--config", "-c",
        type=Path,
        metavar="PATH",
        help="Config file (default: ~/.clipdeck/config.json merged with ./.clipdeck/config.json)",
    )
    parser.add_argument(
        "--url",
        metavar="URL",
        help="Backend URL, overriding backend.url from config",
    )


def add_logging_args(parser: argparse.ArgumentParser) -> None:
    """Add --verbose and --log-file arguments to a parser."""
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging on stderr",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        metavar="PATH",
        help="Also write logs to a rotating file",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="clipdeck",
        description="Keyboard-driven clipboard history and picker front end",
    )
    add_backend_args(parser)
    add_logging_args(parser)

    subparsers = parser.add_subparsers(dest="command")

    # history - print the current history
    history_parser = subparsers.add_parser(
        "history",
        help="Print the clipboard history",
    )
    history_parser.add_argument(
        "--limit", "-n",
        type=int,
        default=None,
        help="Show at most this many entries",
    )
    history_parser.add_argument(
        "--json",
        action="store_true",
        dest="as_json",
        help="Print entries as JSON in wire format",
    )
    history_parser.add_argument(
        "--search", "-s",
        metavar="QUERY",
        help="Only show entries matching QUERY",
    )
    history_parser.add_argument(
        "--regex",
        action="store_true",
        help="Treat --search as a regular expression",
    )

    # clear - drop unpinned entries
    subparsers.add_parser(
        "clear",
        help="Clear the history (pinned entries are kept)",
    )

    # watch - mirror push events
    subparsers.add_parser(
        "watch",
        help="Print push events as they arrive and keep a live history mirror",
    )

    # pick - full-screen picker (default)
    pick_parser = subparsers.add_parser(
        "pick",
        help="Open the full-screen picker (default command)",
    )
    pick_parser.add_argument(
        "--tab", "-t",
        choices=[tab.value for tab in PickerTab],
        default=PickerTab.CLIPBOARD.value,
        help="Initial tab (default: clipboard)",
    )
    pick_parser.add_argument(
        "--no-gifs",
        action="store_true",
        help="Hide the GIF tab (no Tenor requests)",
    )

    return parser


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments.

    With no subcommand the picker is opened.
    """
    arguments = list(sys.argv[1:] if argv is None else argv)
    parser = build_parser()
    args = parser.parse_args(arguments)
    if args.command is None:
        args = parser.parse_args([*arguments, "pick"])
    if getattr(args, "limit", None) is not None and args.limit < 1:
        parser.error("--limit must be at least 1")
    return args
