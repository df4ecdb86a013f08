"""
Configuration for candidate representation generation.

Every parameter that shapes the candidate set lives on RepresentationConfig
so that a run is reproducible and experiments do not need code changes.
"""

from dataclasses import dataclass

from config import (
    THRESHOLD_BLOCK_SIZE,
    THRESHOLD_BIAS,
    UPSCALE_FACTOR,
    DOWNSCALE_FACTOR,
    DOWNSCALE_MIN_DIMENSION,
    MAX_SCALE_FACTOR,
)


@dataclass(frozen=True)
class RepresentationConfig:
    """Configuration for the multi-scale representation generator.

    The defaults reproduce the fixed candidate set (block size 15, bias 5,
    1.5x upscale, 0.8x downscale gated at 400 px). Tests pin these values.

    Attributes:
        threshold_block_size: Window diameter for adaptive thresholding.
        threshold_bias: Amount subtracted from the local mean before comparing.
        upscale_factor: Linear factor for the upscaled candidates.
        downscale_factor: Linear factor for the optional downscaled candidate.
        downscale_min_dimension: Both source dimensions must exceed this for
                                 the downscaled candidate to be produced.
    """

    threshold_block_size: int = THRESHOLD_BLOCK_SIZE
    threshold_bias: int = THRESHOLD_BIAS
    upscale_factor: float = UPSCALE_FACTOR
    downscale_factor: float = DOWNSCALE_FACTOR
    downscale_min_dimension: int = DOWNSCALE_MIN_DIMENSION

    def validate(self) -> None:
        """Validate configuration parameters.

        Raises:
            ValueError: If any parameter is invalid.
        """
        if self.threshold_block_size <= 0:
            raise ValueError(
                f"threshold_block_size must be positive, got {self.threshold_block_size}"
            )

        if self.threshold_bias < 0:
            raise ValueError(
                f"threshold_bias must be non-negative, got {self.threshold_bias}"
            )

        if not (1.0 < self.upscale_factor <= MAX_SCALE_FACTOR):
            raise ValueError(
                f"upscale_factor must be in (1, {MAX_SCALE_FACTOR}], "
                f"got {self.upscale_factor}"
            )

        if not (0.0 < self.downscale_factor < 1.0):
            raise ValueError(
                f"downscale_factor must be in (0, 1), got {self.downscale_factor}"
            )

        if self.downscale_min_dimension < 0:
            raise ValueError(
                "downscale_min_dimension must be non-negative, "
                f"got {self.downscale_min_dimension}"
            )

    def wants_downscale(self, width: int, height: int) -> bool:
        """Whether a source of this size gets the downscaled candidate."""
        return (
            width > self.downscale_min_dimension
            and height > self.downscale_min_dimension
        )
