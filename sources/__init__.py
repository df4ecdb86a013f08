"""Image sources: directory discovery and the image codec."""

from .local import ImageLoadError, scan_local_images, load_image

__all__ = [
    "ImageLoadError",
    "scan_local_images",
    "load_image",
]
