"""Clipboard access for decoded payloads."""

from __future__ import annotations

import logging

import pyperclip

logger = logging.getLogger(__name__)


def copy_payload(text: str) -> bool:
    """Copy text to the system clipboard. Returns False if no clipboard is available."""
    try:
        pyperclip.copy(text)
    except pyperclip.PyperclipException as exc:
        logger.warning("Could not copy content to clipboard: %s", exc)
        return False
    return True
