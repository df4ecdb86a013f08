"""
Decode orchestration across candidate representations.

Every candidate is handed to the detector, every located grid is decoded,
and payloads are merged into a ResultSet by content equality. Failing
candidates and grids are expected and only logged at debug level; "no
payload found" is a normal outcome, distinct from failing to open the
source image.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable

import numpy as np

from preprocessing import Candidate, RepresentationConfig, Technique, generate_candidates
from sources import load_image

from .detector import GridDecodeError, PatternDetector, get_detector
from .results import DecodedResult, ResultSet

logger = logging.getLogger(__name__)

MEMORY_SOURCE = "<memory>"


@dataclass
class DecodeReport:
    """Outcome of decoding one source image.

    Attributes:
        source: Identifier of the source image.
        results: Unique decoded results in discovery order.
        techniques_tried: Every technique that was run, in order.
        grids_seen: Number of grids located across all candidates.
    """

    source: str
    results: tuple[DecodedResult, ...] = ()
    techniques_tried: tuple[Technique, ...] = ()
    grids_seen: int = 0

    @property
    def found(self) -> bool:
        return bool(self.results)

    @property
    def payloads(self) -> list[str]:
        return [result.payload for result in self.results]


@dataclass
class _CandidateOutcome:
    technique: Technique
    payloads: list[str] = field(default_factory=list)
    grids: int = 0
    failed_grids: int = 0


def _decode_candidate(candidate: Candidate, detector: PatternDetector) -> _CandidateOutcome:
    outcome = _CandidateOutcome(technique=candidate.technique)
    for grid in detector.detect(candidate.image):
        outcome.grids += 1
        try:
            outcome.payloads.append(grid.decode())
        except GridDecodeError as exc:
            outcome.failed_grids += 1
            logger.debug("Skipping undecodable grid in %s candidate: %s", candidate.technique, exc)
    return outcome


def decode_candidates(
    candidates: Iterable[Candidate],
    detector: PatternDetector,
    source: str = MEMORY_SOURCE,
) -> DecodeReport:
    """Run the detector on every candidate and collect unique payloads.

    The outcome does not depend on candidate order except for which
    technique is credited with a payload found by several candidates.
    """
    results = ResultSet()
    tried: list[Technique] = []
    grids_seen = 0

    for candidate in candidates:
        tried.append(candidate.technique)
        outcome = _decode_candidate(candidate, detector)
        grids_seen += outcome.grids

        new = 0
        for payload in outcome.payloads:
            if results.add(DecodedResult(source=source, payload=payload, technique=candidate.technique)):
                new += 1

        logger.debug(
            "%s [%d/%s]: %d grid(s), %d decoded, %d undecodable, %d new",
            source,
            candidate.technique.index,
            candidate.technique,
            outcome.grids,
            len(outcome.payloads),
            outcome.failed_grids,
            new,
        )

    return DecodeReport(
        source=source,
        results=results.freeze(),
        techniques_tried=tuple(tried),
        grids_seen=grids_seen,
    )


def decode_image(
    img: np.ndarray,
    detector: PatternDetector | None = None,
    source: str = MEMORY_SOURCE,
    config: RepresentationConfig | None = None,
    artifact_dir: str | None = None,
) -> DecodeReport:
    """Decode every QR payload reachable through the candidate set of img.

    Args:
        img: Source image (RGB, RGBA or grayscale numpy array).
        detector: Pattern detector; defaults to the configured backend.
        source: Identifier recorded on each result.
        config: Representation parameters.
        artifact_dir: Optional directory for candidate debug images.

    Returns:
        DecodeReport; report.found is False when nothing decoded.
    """
    if detector is None:
        detector = get_detector()

    candidates = generate_candidates(img, config=config, artifact_dir=artifact_dir)
    report = decode_candidates(candidates, detector, source=source)

    if report.found:
        logger.info(
            "%s: %d unique QR code(s) decoded", source, len(report.results)
        )
    else:
        logger.info(
            "%s: no QR code decoded (tried %d techniques)",
            source,
            len(report.techniques_tried),
        )
    return report


def decode_file(
    path: str | Path,
    detector: PatternDetector | None = None,
    config: RepresentationConfig | None = None,
    artifact_dir: str | None = None,
) -> DecodeReport:
    """Open an image file and decode it.

    Raises:
        ImageLoadError: If the file cannot be opened or decoded as an image.
    """
    img = load_image(path)
    return decode_image(
        img,
        detector=detector,
        source=str(path),
        config=config,
        artifact_dir=artifact_dir,
    )
