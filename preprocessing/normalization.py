"""
Image normalization functions: grayscale conversion and factor resampling.

All functions are pure: they take an input and return a new output without
mutating the original array.
"""

import numpy as np
import cv2


def _check_image(img: np.ndarray) -> None:
    if not isinstance(img, np.ndarray):
        raise TypeError(f"Expected numpy.ndarray, got {type(img).__name__}")

    if img.ndim < 2 or img.ndim > 3:
        raise ValueError(
            f"Image must be 2D or 3D array, got {img.ndim}D array with shape {img.shape}"
        )

    if img.size == 0:
        raise ValueError("Image array is empty")


def to_grayscale(img: np.ndarray) -> np.ndarray:
    """Convert an image to single-channel uint8 intensity.

    Args:
        img: Input image. Can be:
             - RGB (3 channels): converted with ITU-R BT.601 weights
             - RGBA (4 channels): alpha is dropped, then converted
             - Grayscale (2D or 1 channel): returned as a uint8 copy

    Returns:
        2D uint8 array with the same height and width as the input.

    Raises:
        TypeError: If img is not a numpy array.
        ValueError: If img is empty or has an unsupported layout.

    Examples:
        >>> rgb = np.zeros((100, 200, 3), dtype=np.uint8)
        >>> to_grayscale(rgb).shape
        (100, 200)
    """
    _check_image(img)

    if img.ndim == 2:
        result = img.copy()
    else:
        channels = img.shape[2]
        if channels == 1:
            result = img[:, :, 0].copy()
        elif channels in (3, 4):
            rgb = np.ascontiguousarray(img[:, :, :3])
            if rgb.dtype != np.uint8:
                rgb = np.clip(rgb, 0, 255).astype(np.uint8)
            result = cv2.cvtColor(rgb, cv2.COLOR_RGB2GRAY)
        else:
            raise ValueError(
                f"Unsupported number of channels: {channels}. "
                "Expected 1, 3 (RGB), or 4 (RGBA)."
            )

    if result.dtype != np.uint8:
        result = np.clip(result, 0, 255).astype(np.uint8)

    return result


def scaled_size(width: int, height: int, factor: float) -> tuple[int, int]:
    """Return (width, height) scaled by factor, truncating toward zero.

    Truncation is deliberate and must not become rounding: a 401 px side
    scales to 601 at 1.5x and 320 at 0.8x.
    """
    return int(width * factor), int(height * factor)


def resize_by_factor(
    img: np.ndarray,
    factor: float,
    interpolation: int = cv2.INTER_LANCZOS4,
) -> np.ndarray:
    """Resample an image by a linear factor applied to both axes.

    Args:
        img: Input image (2D grayscale or 3D color).
        factor: Positive linear scale factor.
        interpolation: OpenCV interpolation flag. Defaults to Lanczos.

    Returns:
        Resized image with the input's dtype and channel layout. Output
        dimensions are scaled_size(width, height, factor).

    Raises:
        TypeError: If img is not a numpy array.
        ValueError: If factor is not positive, the image is empty, or the
                    scaled size collapses to zero.

    Examples:
        >>> img = np.zeros((401, 401), dtype=np.uint8)
        >>> resize_by_factor(img, 1.5).shape
        (601, 601)
    """
    _check_image(img)

    if factor <= 0:
        raise ValueError(f"factor must be positive, got {factor}")

    height, width = img.shape[:2]
    new_width, new_height = scaled_size(width, height, factor)
    if new_width == 0 or new_height == 0:
        raise ValueError(
            f"Scaling {width}x{height} by {factor} yields an empty image"
        )

    return cv2.resize(img, (new_width, new_height), interpolation=interpolation)
