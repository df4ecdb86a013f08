"""
QR decoding across candidate representations.

Follows the same design as the preprocessing module: pure functions,
early validation, and clear separation of concerns.

Key components:
- detector: PatternDetector protocol and the OpenCV backend
- results: DecodedResult and the payload-deduplicating ResultSet
- orchestrator: decode_image() / decode_file() returning a DecodeReport
"""

from .detector import (
    GridDecodeError,
    DetectedGrid,
    PatternDetector,
    OpenCVGrid,
    OpenCVQRDetector,
    get_detector,
)
from .results import DecodedResult, ResultSet
from .orchestrator import DecodeReport, decode_candidates, decode_image, decode_file

__all__ = [
    "GridDecodeError",
    "DetectedGrid",
    "PatternDetector",
    "OpenCVGrid",
    "OpenCVQRDetector",
    "get_detector",
    "DecodedResult",
    "ResultSet",
    "DecodeReport",
    "decode_candidates",
    "decode_image",
    "decode_file",
]
