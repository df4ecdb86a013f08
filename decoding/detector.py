"""
Pattern detector interface and the OpenCV implementation.

A detector locates zero or more QR grids in a single-channel image. Each
grid is decoded separately and may fail; a failed grid is a routine
outcome of speculative preprocessing, not an error for the caller.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Protocol

import cv2
import numpy as np

import config

logger = logging.getLogger(__name__)


class GridDecodeError(Exception):
    """A located grid could not be decoded into a payload."""


class DetectedGrid(Protocol):
    """A located pattern that can be asked for its payload."""

    def decode(self) -> str:
        """Return the payload or raise GridDecodeError."""


class PatternDetector(Protocol):
    """Interface for pattern detection backends."""

    def detect(self, image: np.ndarray) -> list[DetectedGrid]:
        """Locate grids in a 2D uint8 image."""


@dataclass(frozen=True, eq=False)
class OpenCVGrid:
    """Grid located by cv2.QRCodeDetector.

    OpenCV decodes during detection and reports an empty string for grids
    it found but could not read.
    """

    payload: str
    corners: np.ndarray | None = field(default=None, repr=False)

    def decode(self) -> str:
        if not self.payload:
            raise GridDecodeError("grid located but payload could not be decoded")
        return self.payload


@dataclass
class OpenCVQRDetector:
    """Local QR detector using OpenCV's multi-code detector."""

    _detector: cv2.QRCodeDetector = field(
        default_factory=cv2.QRCodeDetector, init=False, repr=False
    )

    def detect(self, image: np.ndarray) -> list[OpenCVGrid]:
        if image.size == 0:
            return []
        try:
            found, decoded, points, _ = self._detector.detectAndDecodeMulti(image)
        except cv2.error as exc:
            logger.debug("OpenCV QR detection failed: %s", exc)
            found, decoded, points = False, (), None

        grids: list[OpenCVGrid] = []
        if found and points is not None:
            for index, corners in enumerate(points):
                payload = decoded[index] if index < len(decoded) else ""
                grids.append(OpenCVGrid(payload=payload, corners=corners))

        if any(grid.payload for grid in grids):
            return grids

        # the single-code path sometimes reads codes the multi path only locates
        single = self._detect_single(image)
        if single and single[0].payload:
            return single
        return grids or single

    def _detect_single(self, image: np.ndarray) -> list[OpenCVGrid]:
        """Fallback for codes the multi-code detector misses."""
        try:
            payload, corners, _ = self._detector.detectAndDecode(image)
        except cv2.error as exc:
            logger.debug("OpenCV single QR detection failed: %s", exc)
            return []
        if corners is None:
            return []
        return [OpenCVGrid(payload=payload or "", corners=corners)]


_DETECTORS = {
    "opencv": OpenCVQRDetector,
}


def get_detector(backend_name: str | None = None) -> PatternDetector:
    """Instantiate a detector backend by name (defaults to config.DETECTOR_BACKEND)."""
    name = backend_name if backend_name is not None else config.DETECTOR_BACKEND
    detector_cls = _DETECTORS.get(name)
    if detector_cls is None:
        raise ValueError(f"Unknown detector backend: {name!r}")
    return detector_cls()
