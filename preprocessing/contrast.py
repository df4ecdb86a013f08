"""Global histogram equalization."""

import numpy as np


def equalize_histogram(img: np.ndarray) -> np.ndarray:
    """Histogram-equalize a single-channel uint8 image.

    Builds a 256-bin histogram, accumulates the normalized CDF and remaps
    every sample v to round(cdf[v] * 255), rounding halves up.

    Pure function: returns a new array of the same shape.

    Args:
        img: 2D uint8 image. Zero-pixel images are allowed.

    Returns:
        Equalized 2D uint8 image. An image with no pixels comes back as an
        empty array of the same shape.

    Raises:
        TypeError: If img is not a numpy array.
        ValueError: If img is not 2D.
    """
    if not isinstance(img, np.ndarray):
        raise TypeError(f"Expected numpy.ndarray, got {type(img).__name__}")
    if img.ndim != 2:
        raise ValueError(
            f"equalize_histogram requires a 2D grayscale image, got shape {img.shape}"
        )

    total = img.size
    if total == 0:
        return np.empty(img.shape, dtype=np.uint8)

    samples = img.astype(np.uint8, copy=False)
    counts = np.bincount(samples.ravel(), minlength=256)
    cdf = np.cumsum(counts, dtype=np.float64) / total

    lut = np.floor(cdf * 255.0 + 0.5)
    lut = np.clip(lut, 0, 255).astype(np.uint8)
    return lut[samples]
