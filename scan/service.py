"""Scan service entrypoints for reuse across the CLI and tests."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Callable

from clipboard import copy_payload
from config import RESULTS_FILENAME
from decoding import PatternDetector
from preprocessing import RepresentationConfig
from settings import AppSettings
from sources import scan_local_images

from .pipeline import ScanSummary, scan_images

logger = logging.getLogger(__name__)


def resolve_source(source: str | None, settings: AppSettings) -> Path:
    """Pick the explicit source path, else the configured scan directory."""
    if source:
        if source.startswith("file://"):
            source = source.replace("file://", "", 1)
        return Path(source)
    if settings.scan_directory is None:
        raise ValueError(
            "No source given and no scan directory configured. "
            "Pass a path or run 'qrr settings set-scan-dir DIR'."
        )
    return settings.scan_directory


def export_results(summary: ScanSummary, output_dir: Path) -> Path:
    """Write a JSON report of the scan into output_dir and return its path."""
    output_dir.mkdir(parents=True, exist_ok=True)
    report = {
        "stats": summary.stats,
        "unique_payloads": summary.results.payloads,
        "images": [
            {
                "path": str(scan.path),
                "error": scan.error,
                "results": [result.to_dict() for result in scan.results],
            }
            for scan in summary.images
        ],
    }
    out_path = output_dir / RESULTS_FILENAME
    with open(out_path, "w", encoding="utf-8") as f:
        json.dump(report, f, indent=2, ensure_ascii=False)
    return out_path


def run_scan(
    source: str | None,
    settings: AppSettings,
    limit: int | None = None,
    detector: PatternDetector | None = None,
    config: RepresentationConfig | None = None,
    artifact_dir: str | None = None,
    copy_func: Callable[[str], bool] = copy_payload,
    show_progress: bool = True,
) -> ScanSummary:
    """Run a scan over a file or directory.

    The source is the given path or, if None, settings.scan_directory.
    Results are exported when settings.output_directory is set, and the
    payload is copied to the clipboard when auto-copy is enabled and
    exactly one unique payload was found.

    Raises:
        ValueError: If no source can be resolved or it is not a valid image
                    file or directory.
    """
    path = resolve_source(source, settings)
    image_files = scan_local_images(path)
    logger.info("Found %s images in %s", len(image_files), path)
    if not image_files:
        logger.warning("No supported image files found.")

    if limit is not None:
        image_files = image_files[:limit]
        logger.info("Processing limited to %s images", limit)

    summary = scan_images(
        image_files,
        detector=detector,
        config=config,
        artifact_dir=artifact_dir,
        show_progress=show_progress,
    )

    if settings.output_directory is not None:
        try:
            out_path = export_results(summary, settings.output_directory)
        except OSError as exc:
            logger.error("Could not write results to %s: %s", settings.output_directory, exc)
        else:
            logger.info("Results written to %s", out_path)

    if settings.auto_copy_to_clipboard and len(summary.results) == 1:
        payload = summary.results.payloads[0]
        if copy_func(payload):
            logger.info("Content of the QR code has been copied to the clipboard.")

    return summary
