#!/usr/bin/env python3
"""
Unified CLI for the multi-representation QR reader.

Usage:
    qrr scan <path>                  # Decode QR codes in a file or directory
    qrr scan                         # Decode images in the configured scan directory
    qrr settings show                # Show persisted settings
    qrr settings set-scan-dir DIR    # Set the default scan directory
    qrr settings set-output-dir DIR  # Write JSON reports to DIR
    qrr settings clear-output-dir    # Stop writing JSON reports
    qrr settings toggle-copy         # Toggle auto-copy to clipboard
"""

import argparse
import logging
import sys
from pathlib import Path

from logging_utils import configure_logging, add_logging_args
from cli.scan import add_scan_subparser
from cli.settings import add_settings_subparser

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="qrr",
        description="QR reader - decode QR codes from photos and scans",
    )
    add_logging_args(parser)
    parser.add_argument(
        "--settings",
        type=Path,
        help="Settings file to use instead of the default location",
    )
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    add_scan_subparser(subparsers)
    add_settings_subparser(subparsers)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level, args.verbose, args.quiet)

    if args.command is None:
        parser.print_help()
        return 1

    if args.command == "settings" and args.settings_command is None:
        args._settings_parser.print_help()
        return 1

    cmd = getattr(args, "_cmd", None)
    if cmd is None:
        parser.print_help()
        return 1
    return cmd(args)


if __name__ == "__main__":
    sys.exit(main())
