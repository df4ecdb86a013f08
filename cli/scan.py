"""Scan command CLI parsing and control flow."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from scan import run_scan
from settings import SettingsError

from .common import load_cli_settings

logger = logging.getLogger(__name__)


def positive_int(value: str) -> int:
    """argparse type for counts that must be at least 1."""
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid int value: {value!r}") from None
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {number}")
    return number


def add_scan_subparser(subparsers: argparse._SubParsersAction) -> None:
    scan_parser = subparsers.add_parser(
        "scan",
        help="Decode QR codes in an image file or directory",
    )
    scan_parser.add_argument(
        "source",
        nargs="?",
        help="Image file or directory (default: configured scan directory)",
    )
    scan_parser.add_argument(
        "--limit", "-n",
        type=positive_int,
        default=None,
        help="Maximum number of images to process (default: all)",
    )
    scan_parser.add_argument(
        "--output-dir",
        type=Path,
        help="Write a JSON report here (overrides the configured output directory)",
    )
    scan_parser.add_argument(
        "--artifacts-dir",
        help="Save every candidate representation under this directory",
    )
    copy_group = scan_parser.add_mutually_exclusive_group()
    copy_group.add_argument(
        "--copy",
        dest="copy",
        action="store_true",
        default=None,
        help="Copy a single decoded payload to the clipboard",
    )
    copy_group.add_argument(
        "--no-copy",
        dest="copy",
        action="store_false",
        help="Never touch the clipboard",
    )
    scan_parser.set_defaults(_cmd=cmd_scan)


def cmd_scan(args: argparse.Namespace) -> int:
    try:
        settings = load_cli_settings(args)
    except SettingsError as exc:
        logger.error("%s", exc)
        return 1

    overrides = {}
    if args.output_dir is not None:
        overrides["output_directory"] = args.output_dir
    if args.copy is not None:
        overrides["auto_copy_to_clipboard"] = args.copy
    if overrides:
        settings = settings.model_copy(update=overrides)

    try:
        summary = run_scan(
            args.source,
            settings,
            limit=args.limit,
            artifact_dir=args.artifacts_dir,
        )
    except ValueError as exc:
        logger.error("%s", exc)
        return 1

    for scan in summary.images:
        if scan.failed:
            continue
        for index, result in enumerate(scan.results, start=1):
            print(f"--- {scan.path.name}: QR Code {index} ({result.technique}) ---")
            print(result.payload)

    stats = summary.stats
    logger.info("%s", "=" * 50)
    logger.info("Scan Complete!")
    logger.info("%s", "=" * 50)
    logger.info("Images found:     %s", stats["images_found"])
    logger.info("Images decoded:   %s", stats["images_decoded"])
    logger.info("Images undecoded: %s", stats["images_undecoded"])
    logger.info("Images failed:    %s", stats["images_failed"])
    logger.info("Unique payloads:  %s", stats["unique_payloads"])
    return 0
