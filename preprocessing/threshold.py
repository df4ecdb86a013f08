"""
Adaptive (local-mean) thresholding backed by a summed-area table.

A naive windowed mean costs O(W*H*B^2); with the integral table every
window is four lookups, so the whole pass is O(W*H) after one O(W*H)
table build. The lookups are done for all pixels at once with numpy
fancy indexing.
"""

import numpy as np

from config import THRESHOLD_BLOCK_SIZE, THRESHOLD_BIAS, THRESHOLD_FALLBACK_MEAN

from .integral import integral_image


def _clamped_bounds(length: int, half: int) -> tuple[np.ndarray, np.ndarray]:
    """Per-index [start, end] window bounds clamped to [0, length - 1]."""
    idx = np.arange(length, dtype=np.int64)
    start = np.maximum(idx - half, 0)
    end = np.minimum(idx + half, length - 1)
    return start, end


def adaptive_threshold(
    img: np.ndarray,
    block_size: int = THRESHOLD_BLOCK_SIZE,
    bias: int = THRESHOLD_BIAS,
) -> np.ndarray:
    """Binarize a grayscale image against its local mean.

    block_size is a diameter: the half-window is block_size // 2. Windows
    are clamped at the image border (no padding or mirroring), so border
    pixels use smaller, asymmetric windows. A pixel becomes 0 (foreground)
    when it is strictly below max(mean - bias, 0), otherwise 255.

    Args:
        img: 2D uint8 image. May be empty.
        block_size: Window diameter in pixels.
        bias: Constant subtracted from the local mean.

    Returns:
        uint8 array of the same shape with values in {0, 255}.

    Raises:
        TypeError: If img is not a numpy array.
        ValueError: If img is not 2D, or block_size / bias are out of range.
    """
    if not isinstance(img, np.ndarray):
        raise TypeError(f"Expected numpy.ndarray, got {type(img).__name__}")
    if img.ndim != 2:
        raise ValueError(
            f"adaptive_threshold requires a 2D grayscale image, got shape {img.shape}"
        )
    if isinstance(block_size, bool) or not isinstance(block_size, (int, np.integer)):
        raise TypeError(f"block_size must be int, got {type(block_size).__name__}")
    if block_size <= 0:
        raise ValueError(f"block_size must be positive, got {block_size}")
    if bias < 0:
        raise ValueError(f"bias must be non-negative, got {bias}")

    if img.size == 0:
        return np.empty(img.shape, dtype=np.uint8)

    height, width = img.shape
    half = int(block_size) // 2
    table = integral_image(img)

    y0, y1 = _clamped_bounds(height, half)
    x0, x1 = _clamped_bounds(width, half)

    # (A + D) >= (B + C) for every window, so unsigned arithmetic never wraps
    positive = table[np.ix_(y1 + 1, x1 + 1)] + table[np.ix_(y0, x0)]
    negative = table[np.ix_(y0, x1 + 1)] + table[np.ix_(y1 + 1, x0)]
    sums = (positive - negative).astype(np.int64)

    counts = np.outer(y1 - y0 + 1, x1 - x0 + 1)
    means = np.where(
        counts > 0,
        sums // np.maximum(counts, 1),
        THRESHOLD_FALLBACK_MEAN,
    )

    cutoff = np.maximum(means - int(bias), 0)
    binary = np.where(img.astype(np.int64) < cutoff, 0, 255)
    return binary.astype(np.uint8)
