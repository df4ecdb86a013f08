"""
Multi-scale candidate representation generator.

A single fixed representation often hides a QR pattern from the detector,
so one source image is turned into a small, fixed set of alternative
grayscale images. Each candidate is produced by a Pipeline of steps and
tagged with the Technique that produced it:

    1. grayscale          plain grayscale conversion
    2. enhanced           histogram-equalized (1)
    3. thresholded        adaptive threshold of (1)
    4. upscaled           source resampled 1.5x (Lanczos), then grayscale
    5. upscaled_enhanced  histogram-equalized (4)
    6. downscaled         source resampled 0.8x, then grayscale; only when
                          both source dimensions exceed 400 px

The order matters only for diagnostics. Resampling always starts from the
original (possibly color) source, not from the grayscale candidate.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

import numpy as np

from .config import RepresentationConfig
from .steps import (
    Pipeline,
    GrayscaleStep,
    EqualizeStep,
    AdaptiveThresholdStep,
    ScaleStep,
)

logger = logging.getLogger(__name__)


class Technique(str, Enum):
    """Which preprocessing recipe produced a candidate image."""

    GRAYSCALE = "grayscale"
    ENHANCED = "enhanced"
    THRESHOLDED = "thresholded"
    UPSCALED = "upscaled"
    UPSCALED_ENHANCED = "upscaled_enhanced"
    DOWNSCALED = "downscaled"

    @property
    def index(self) -> int:
        """1-based position in the canonical candidate order."""
        return list(Technique).index(self) + 1

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, eq=False)
class Candidate:
    """One alternative representation of a source image.

    Attributes:
        technique: Recipe that produced the image.
        image: 2D uint8 image handed to the detector.
        metadata: Merged step metadata (scale factor, threshold metrics, ...).
    """

    technique: Technique
    image: np.ndarray = field(repr=False)
    metadata: dict[str, Any] = field(default_factory=dict, repr=False)

    @property
    def size(self) -> tuple[int, int]:
        """(width, height) of the candidate image."""
        height, width = self.image.shape[:2]
        return width, height


@dataclass(frozen=True, eq=False)
class CandidatePlan:
    """How to build one candidate.

    Attributes:
        technique: Tag of the candidate produced.
        pipeline: Steps to run.
        derived_from: Technique whose output feeds the pipeline, or None to
                      start from the source image.
    """

    technique: Technique
    pipeline: Pipeline
    derived_from: Technique | None = None


def _validate_input(img: np.ndarray) -> None:
    """Validate the source image array.

    Raises:
        TypeError: If img is not a numpy array.
        ValueError: If img has invalid dimensions or is empty.
    """
    if not isinstance(img, np.ndarray):
        raise TypeError(f"Expected numpy.ndarray, got {type(img).__name__}")

    if img.ndim < 2 or img.ndim > 3:
        raise ValueError(
            f"Image must be 2D or 3D array, got {img.ndim}D array with shape {img.shape}"
        )

    if img.size == 0:
        raise ValueError("Image array is empty")


def build_plan(
    config: RepresentationConfig,
    width: int,
    height: int,
) -> list[CandidatePlan]:
    """Build the ordered candidate plan for a source of the given size."""
    plan = [
        CandidatePlan(Technique.GRAYSCALE, Pipeline(steps=[GrayscaleStep()])),
        CandidatePlan(
            Technique.ENHANCED,
            Pipeline(steps=[EqualizeStep()]),
            derived_from=Technique.GRAYSCALE,
        ),
        CandidatePlan(
            Technique.THRESHOLDED,
            Pipeline(steps=[
                AdaptiveThresholdStep(
                    block_size=config.threshold_block_size,
                    bias=config.threshold_bias,
                ),
            ]),
            derived_from=Technique.GRAYSCALE,
        ),
        CandidatePlan(
            Technique.UPSCALED,
            Pipeline(steps=[ScaleStep(factor=config.upscale_factor), GrayscaleStep()]),
        ),
        CandidatePlan(
            Technique.UPSCALED_ENHANCED,
            Pipeline(steps=[EqualizeStep()]),
            derived_from=Technique.UPSCALED,
        ),
    ]

    if config.wants_downscale(width, height):
        plan.append(
            CandidatePlan(
                Technique.DOWNSCALED,
                Pipeline(steps=[ScaleStep(factor=config.downscale_factor), GrayscaleStep()]),
            )
        )

    return plan


def generate_candidates(
    img: np.ndarray,
    config: RepresentationConfig | None = None,
    artifact_dir: str | None = None,
) -> list[Candidate]:
    """Produce the full, ordered candidate set for one source image.

    Args:
        img: Source image, RGB/RGBA (H, W, C) or grayscale (H, W).
        config: Representation parameters. Defaults pin the fixed set.
        artifact_dir: Optional directory; each candidate's steps are saved
                      under "<NN>_<technique>/".

    Returns:
        5 candidates, or 6 when both source dimensions exceed the
        downscale gate.

    Raises:
        TypeError: If img is not a numpy array.
        ValueError: If img is empty, malformed, or the config is invalid.
    """
    if config is None:
        config = RepresentationConfig()
    config.validate()
    _validate_input(img)

    height, width = img.shape[:2]
    outputs: dict[Technique, np.ndarray] = {}
    candidates: list[Candidate] = []

    for entry in build_plan(config, width, height):
        source = img if entry.derived_from is None else outputs[entry.derived_from]
        step_dir = None
        if artifact_dir:
            step_dir = f"{artifact_dir}/{entry.technique.index:02d}_{entry.technique.value}"

        result = entry.pipeline.run(source, artifact_dir=step_dir)
        metadata: dict[str, Any] = {}
        for step in result.steps:
            metadata.update(step.metadata)

        outputs[entry.technique] = result.final
        candidates.append(
            Candidate(technique=entry.technique, image=result.final, metadata=metadata)
        )

    logger.debug(
        "Generated %d candidates for %dx%d source: %s",
        len(candidates),
        width,
        height,
        ", ".join(f"{c.technique}={c.size[0]}x{c.size[1]}" for c in candidates),
    )
    return candidates
