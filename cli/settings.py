"""Settings command CLI parsing and control flow."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from settings import SettingsError, default_settings_path, save_settings

from .common import load_cli_settings

logger = logging.getLogger(__name__)


def add_settings_subparser(subparsers: argparse._SubParsersAction) -> None:
    settings_parser = subparsers.add_parser(
        "settings",
        help="Show or change persisted settings",
    )
    settings_subparsers = settings_parser.add_subparsers(
        dest="settings_command",
        help="Settings command",
    )

    show = settings_subparsers.add_parser("show", help="Print current settings")
    show.set_defaults(_cmd=cmd_settings_show)

    scan_dir = settings_subparsers.add_parser(
        "set-scan-dir",
        help="Set the default directory scanned by 'qrr scan'",
    )
    scan_dir.add_argument("directory", type=Path)
    scan_dir.set_defaults(_cmd=cmd_settings_set_scan_dir)

    output_dir = settings_subparsers.add_parser(
        "set-output-dir",
        help="Set the directory JSON reports are written to",
    )
    output_dir.add_argument("directory", type=Path)
    output_dir.set_defaults(_cmd=cmd_settings_set_output_dir)

    clear_output = settings_subparsers.add_parser(
        "clear-output-dir",
        help="Stop writing JSON reports",
    )
    clear_output.set_defaults(_cmd=cmd_settings_clear_output_dir)

    toggle = settings_subparsers.add_parser(
        "toggle-copy",
        help="Toggle auto-copy of a single decoded payload to the clipboard",
    )
    toggle.set_defaults(_cmd=cmd_settings_toggle_copy)

    settings_parser.set_defaults(_settings_parser=settings_parser)


def _update(args: argparse.Namespace, **changes) -> int:
    try:
        settings = load_cli_settings(args)
    except SettingsError as exc:
        logger.error("%s", exc)
        return 1
    updated = settings.model_copy(update=changes)
    path = save_settings(updated, getattr(args, "settings", None))
    logger.info("Settings saved to %s", path)
    return 0


def cmd_settings_show(args: argparse.Namespace) -> int:
    try:
        settings = load_cli_settings(args)
    except SettingsError as exc:
        logger.error("%s", exc)
        return 1

    path = getattr(args, "settings", None) or default_settings_path()
    print(f"Settings file:   {path}")
    print(f"Scan directory:  {settings.scan_directory or 'NOT SET'}")
    print(f"Output directory: {settings.output_directory or 'NOT SET'}")
    print(f"Auto-copy:       {'Enabled' if settings.auto_copy_to_clipboard else 'Disabled'}")
    return 0


def cmd_settings_set_scan_dir(args: argparse.Namespace) -> int:
    directory = args.directory.expanduser()
    if not directory.is_dir():
        logger.error("The entered path is not a valid directory: %s", directory)
        return 1
    return _update(args, scan_directory=directory.resolve())


def cmd_settings_set_output_dir(args: argparse.Namespace) -> int:
    directory = args.directory.expanduser()
    if directory.exists() and not directory.is_dir():
        logger.error("The entered path is not a directory: %s", directory)
        return 1
    return _update(args, output_directory=directory.resolve())


def cmd_settings_clear_output_dir(args: argparse.Namespace) -> int:
    return _update(args, output_directory=None)


def cmd_settings_toggle_copy(args: argparse.Namespace) -> int:
    try:
        settings = load_cli_settings(args)
    except SettingsError as exc:
        logger.error("%s", exc)
        return 1
    enabled = not settings.auto_copy_to_clipboard
    logger.info("Auto-copy to clipboard is now %s.", "Enabled" if enabled else "Disabled")
    return _update(args, auto_copy_to_clipboard=enabled)
