"""Batch decode loop (reusable by the CLI and tests)."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Sequence

from tqdm import tqdm

from decoding import DecodedResult, DecodeReport, PatternDetector, ResultSet, decode_file, get_detector
from preprocessing import RepresentationConfig
from sources import ImageLoadError

logger = logging.getLogger(__name__)


@dataclass
class ImageScan:
    """Outcome for one source image in a batch.

    Attributes:
        path: Source image path.
        report: Decode report, or None if the image could not be processed.
        error: Description of the failure when report is None.
    """

    path: Path
    report: DecodeReport | None = None
    error: str | None = None

    @property
    def failed(self) -> bool:
        return self.report is None

    @property
    def results(self) -> tuple[DecodedResult, ...]:
        return self.report.results if self.report else ()


@dataclass
class ScanSummary:
    """Per-image outcomes plus the batch-wide unique payloads.

    `results` deduplicates across all images in input order: a payload
    seen in an earlier image is not repeated for a later one.
    """

    images: list[ImageScan] = field(default_factory=list)
    results: ResultSet = field(default_factory=ResultSet)

    @property
    def stats(self) -> dict:
        decoded = sum(1 for scan in self.images if scan.report and scan.report.found)
        failed = sum(1 for scan in self.images if scan.failed)
        return {
            "images_found": len(self.images),
            "images_decoded": decoded,
            "images_undecoded": len(self.images) - decoded - failed,
            "images_failed": failed,
            "unique_payloads": len(self.results),
        }


def scan_images(
    paths: Sequence[Path],
    detector: PatternDetector | None = None,
    config: RepresentationConfig | None = None,
    artifact_dir: str | None = None,
    show_progress: bool = True,
) -> ScanSummary:
    """Decode every image in paths, strictly in order.

    A file that cannot be opened is recorded as failed and the loop moves
    on; it never aborts the batch.
    """
    summary = ScanSummary()
    if not paths:
        logger.info("No images to process.")
        return summary

    if detector is None:
        detector = get_detector()

    logger.info("Scanning %d image(s) for QR codes...", len(paths))
    for path in tqdm(paths, desc="Decoding", disable=not show_progress):
        path = Path(path)
        image_artifacts = f"{artifact_dir}/{path.name}" if artifact_dir else None
        try:
            report = decode_file(path, detector=detector, config=config, artifact_dir=image_artifacts)
        except ImageLoadError as exc:
            logger.warning("Skipping %s: %s", path, exc)
            summary.images.append(ImageScan(path=path, error=str(exc)))
            continue
        except Exception as exc:
            logger.exception("Error processing image %s: %s", path, exc)
            summary.images.append(ImageScan(path=path, error=str(exc)))
            continue

        summary.images.append(ImageScan(path=path, report=report))
        summary.results.merge(report.results)

    return summary
