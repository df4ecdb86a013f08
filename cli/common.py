"""Helpers shared by CLI subcommands."""

from __future__ import annotations

import argparse

from settings import AppSettings, load_settings


def load_cli_settings(args: argparse.Namespace) -> AppSettings:
    """Load settings from --settings, or the default location."""
    return load_settings(getattr(args, "settings", None))
