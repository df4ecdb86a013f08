"""
Local image discovery and decoding.

Functions for finding images in a scan directory and opening them into
numpy arrays.
"""

from pathlib import Path

import numpy as np
from PIL import Image, UnidentifiedImageError

from config import IMAGE_EXTENSIONS


class ImageLoadError(ValueError):
    """A source image could not be opened or decoded."""


def scan_local_images(path: str | Path) -> list[Path]:
    """Find all supported image files in a directory, or return a single file.

    Only the top level of a directory is listed.

    Args:
        path: Path to a directory or a single image file.

    Returns:
        Image file paths sorted alphabetically.

    Raises:
        ValueError: If path doesn't exist or isn't a supported image/directory.
    """
    file_path = Path(path).resolve()

    if file_path.is_file():
        if file_path.suffix.lower() in IMAGE_EXTENSIONS:
            return [file_path]
        raise ValueError(f"{path} is not a supported image file")

    if not file_path.is_dir():
        raise ValueError(f"{path} is not a valid file or directory")

    image_files = [
        entry for entry in file_path.iterdir()
        if entry.is_file() and entry.suffix.lower() in IMAGE_EXTENSIONS
    ]
    return sorted(image_files)


def load_image(path: str | Path) -> np.ndarray:
    """Open an image file as a uint8 numpy array.

    Grayscale files come back as (H, W); everything else (palette, RGBA,
    CMYK, ...) is converted to RGB (H, W, 3). Animated formats yield their
    first frame.

    Raises:
        ImageLoadError: If the file is missing, unreadable, or not a
                        recognised image format.
    """
    try:
        with Image.open(path) as image:
            if image.mode != "L":
                image = image.convert("RGB")
            return np.array(image, dtype=np.uint8)
    except FileNotFoundError as exc:
        raise ImageLoadError(f"Image file not found: {path}") from exc
    except UnidentifiedImageError as exc:
        raise ImageLoadError(f"Unsupported or undetectable image format: {path}") from exc
    except (OSError, Image.DecompressionBombError) as exc:
        raise ImageLoadError(f"Could not open image file {path}: {exc}") from exc
