"""Tests for local image discovery and loading."""

import numpy as np
import pytest
from PIL import Image

from sources import ImageLoadError, load_image, scan_local_images


def _touch_image(path, mode="L", size=(4, 3), color=0):
    Image.new(mode, size, color).save(path)
    return path


class TestScanLocalImages:
    def test_lists_supported_files_sorted(self, tmp_path):
        for name in ["b.png", "a.JPG", "c.gif", "notes.txt", "d.webp"]:
            (tmp_path / name).write_bytes(b"")
        found = [p.name for p in scan_local_images(tmp_path)]
        assert found == ["a.JPG", "b.png", "c.gif", "d.webp"]

    def test_does_not_recurse(self, tmp_path):
        (tmp_path / "top.png").write_bytes(b"")
        nested = tmp_path / "nested"
        nested.mkdir()
        (nested / "deep.png").write_bytes(b"")
        assert [p.name for p in scan_local_images(tmp_path)] == ["top.png"]

    def test_single_file(self, tmp_path):
        path = tmp_path / "one.bmp"
        path.write_bytes(b"")
        assert scan_local_images(path) == [path.resolve()]

    def test_unsupported_file_raises(self, tmp_path):
        path = tmp_path / "doc.pdf"
        path.write_bytes(b"")
        with pytest.raises(ValueError, match="not a supported image file"):
            scan_local_images(path)

    def test_missing_path_raises(self, tmp_path):
        with pytest.raises(ValueError, match="not a valid file or directory"):
            scan_local_images(tmp_path / "nope")

    def test_empty_directory(self, tmp_path):
        assert scan_local_images(tmp_path) == []


class TestLoadImage:
    def test_grayscale_png_stays_2d(self, tmp_path):
        path = _touch_image(tmp_path / "g.png", "L", (5, 2), 77)
        img = load_image(path)
        assert img.shape == (2, 5)
        assert img.dtype == np.uint8
        assert np.all(img == 77)

    def test_rgba_converted_to_rgb(self, tmp_path):
        path = _touch_image(tmp_path / "c.png", "RGBA", (3, 3), (10, 20, 30, 255))
        img = load_image(path)
        assert img.shape == (3, 3, 3)
        assert img[0, 0].tolist() == [10, 20, 30]

    def test_palette_gif_converted(self, tmp_path):
        path = _touch_image(tmp_path / "p.gif", "P", (6, 4), 1)
        assert load_image(path).shape == (4, 6, 3)

    def test_unidentified_format(self, tmp_path):
        path = tmp_path / "bad.jpg"
        path.write_bytes(b"\x00\x01garbage")
        with pytest.raises(ImageLoadError, match="Unsupported or undetectable"):
            load_image(path)

    def test_load_error_is_value_error(self, tmp_path):
        with pytest.raises(ValueError):
            load_image(tmp_path / "missing.png")
