"""Persisted user settings for the QR reader.

Settings are an explicit value passed into scans, never module state.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from pydantic import BaseModel, ConfigDict, ValidationError

from config import APP_NAME, SETTINGS_DIR_ENV, SETTINGS_FILENAME

logger = logging.getLogger(__name__)


class SettingsError(ValueError):
    """Settings file exists but cannot be read or parsed."""


class AppSettings(BaseModel):
    """Scan directory, export directory and clipboard behaviour."""

    model_config = ConfigDict(extra="ignore")

    scan_directory: Path | None = None
    output_directory: Path | None = None
    auto_copy_to_clipboard: bool = False


def default_settings_path() -> Path:
    """Resolve settings.json under $QRR_SETTINGS_DIR, $XDG_DATA_HOME or ~/.local/share."""
    override = os.environ.get(SETTINGS_DIR_ENV)
    if override:
        return Path(override) / SETTINGS_FILENAME
    data_home = os.environ.get("XDG_DATA_HOME")
    base = Path(data_home) if data_home else Path.home() / ".local" / "share"
    return base / APP_NAME / SETTINGS_FILENAME


def load_settings(path: Path | None = None) -> AppSettings:
    """Load settings, falling back to defaults when the file does not exist.

    Raises:
        SettingsError: If the file cannot be read or is not valid settings JSON.
    """
    settings_path = path or default_settings_path()
    if not settings_path.exists():
        logger.info("Settings file (%s) not found, using default settings.", settings_path)
        return AppSettings()

    try:
        content = settings_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise SettingsError(f"Could not read settings file: {settings_path}") from exc

    try:
        return AppSettings.model_validate_json(content)
    except ValidationError as exc:
        raise SettingsError(f"Settings file format is invalid: {settings_path}") from exc


def save_settings(settings: AppSettings, path: Path | None = None) -> Path:
    """Write settings as pretty JSON, creating the directory if needed."""
    settings_path = path or default_settings_path()
    settings_path.parent.mkdir(parents=True, exist_ok=True)
    settings_path.write_text(settings.model_dump_json(indent=2), encoding="utf-8")
    logger.debug("Saved settings to %s", settings_path)
    return settings_path
