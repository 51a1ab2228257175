"""Command-line interface for the delivery dashboard."""

from __future__ import annotations

import argparse
import logging
import sys

from delivery_dashboard.labels import UnhandledStatusError, status_label
from delivery_dashboard.pollbot import PollbotClient, PollbotError
from delivery_dashboard.settings import load_settings
from delivery_dashboard.url_codec import parse_url


def _build_gui_parser(subparsers: argparse._SubParsersAction) -> None:
    """Add the 'gui' subcommand (default behavior)."""
    parser = subparsers.add_parser("gui", help="Open the dashboard window")
    parser.add_argument(
        "--fragment",
        default="",
        metavar="FRAGMENT",
        help='Version to open, as a URL fragment (e.g. "#pollbot/firefox/57.0")',
    )
    parser.add_argument(
        "--interval",
        type=int,
        metavar="MS",
        help="Status refresh interval in milliseconds (default: from settings, 60000)",
    )


def _build_status_parser(subparsers: argparse._SubParsersAction) -> None:
    """Add the 'status' subcommand."""
    parser = subparsers.add_parser("status", help="Print the check results for a version")
    parser.add_argument("version", help='Version to check (e.g. "57.0")')


def _build_parse_parser(subparsers: argparse._SubParsersAction) -> None:
    """Add the 'parse' subcommand."""
    parser = subparsers.add_parser("parse", help="Show the version encoded in a URL fragment")
    parser.add_argument("fragment", help='URL fragment (e.g. "#pollbot/firefox/57.0")')


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="delivery-dashboard",
        description="Track the release status of a product across its channels.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    subparsers = parser.add_subparsers(dest="command")
    _build_gui_parser(subparsers)
    _build_status_parser(subparsers)
    _build_parse_parser(subparsers)
    return parser


def _gui_command(args: argparse.Namespace) -> int:
    """Handle the 'gui' subcommand."""
    from delivery_dashboard.gui import run_gui

    if args.interval is not None and args.interval <= 0:
        print("Error: --interval must be positive.", file=sys.stderr)
        return 1
    return run_gui(args.fragment, refresh_interval_ms=args.interval)


def _status_command(args: argparse.Namespace) -> int:
    """Handle the 'status' subcommand — fetch every check once and print it."""
    settings = load_settings()
    client = PollbotClient.from_settings(settings.pollbot)

    try:
        info = client.release_info(args.version)
    except PollbotError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"{settings.pollbot.product.capitalize()} {args.version}")
    print(f"Channel: {info.channel}")
    for check in info.checks:
        try:
            result = client.check_result(check)
        except PollbotError as e:
            text = f"Error: {e}"
        else:
            try:
                text = status_label(result.status, result.message).text
            except UnhandledStatusError as e:
                print(f"Error: {e}", file=sys.stderr)
                return 1
        print(f"  {check.title}: {text}")
    return 0


def _parse_command(args: argparse.Namespace) -> int:
    """Handle the 'parse' subcommand."""
    locator = parse_url(args.fragment)
    if locator is None:
        print(f"Error: No version in fragment {args.fragment!r}", file=sys.stderr)
        return 1
    print(f"service: {locator.service}")
    print(f"product: {locator.product}")
    print(f"version: {locator.version}")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()

    # No subcommand opens the window: insert "gui" after the global flags
    if argv is None:
        argv = sys.argv[1:]
    i = 0
    while i < len(argv) and argv[i] in ("-v", "--verbose"):
        i += 1
    if i == len(argv) or argv[i] not in ("gui", "status", "parse", "-h", "--help"):
        argv = [*argv[:i], "gui", *argv[i:]]

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "gui":
        return _gui_command(args)
    elif args.command == "status":
        return _status_command(args)
    elif args.command == "parse":
        return _parse_command(args)
    else:
        parser.print_help()
        return 0


if __name__ == "__main__":
    sys.exit(main())
