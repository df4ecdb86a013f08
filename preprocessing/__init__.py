"""
Image preprocessing for QR decoding.

Turns one source image into a set of alternative grayscale
representations so that at least one of them exposes the pattern to the
detector. All functions are pure: input -> output with no mutation of the
original arrays.

Key components:
- contrast: global histogram equalization
- integral: summed-area tables for O(1) window sums
- threshold: local-mean adaptive thresholding built on integral tables
- normalization: grayscale conversion and factor resampling
- steps: PreprocessStep classes chained by Pipeline
- candidates: generate_candidates(), the multi-scale representation set
"""

from .config import RepresentationConfig
from .candidates import Technique, Candidate, CandidatePlan, build_plan, generate_candidates
from .contrast import equalize_histogram
from .integral import integral_image, window_sum
from .normalization import to_grayscale, resize_by_factor, scaled_size
from .threshold import adaptive_threshold
from .steps import (
    PreprocessStep,
    GrayscaleStep,
    ScaleStep,
    EqualizeStep,
    AdaptiveThresholdStep,
    Pipeline,
    PipelineStepResults,
    StepResult,
)

__all__ = [
    # Config
    "RepresentationConfig",
    # Candidate generation
    "Technique",
    "Candidate",
    "CandidatePlan",
    "build_plan",
    "generate_candidates",
    # Image operations
    "equalize_histogram",
    "integral_image",
    "window_sum",
    "adaptive_threshold",
    "to_grayscale",
    "resize_by_factor",
    "scaled_size",
    # Class-based API
    "PreprocessStep",
    "GrayscaleStep",
    "ScaleStep",
    "EqualizeStep",
    "AdaptiveThresholdStep",
    "Pipeline",
    "PipelineStepResults",
    "StepResult",
]
