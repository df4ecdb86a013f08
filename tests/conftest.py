"""Pytest configuration and shared fixtures.

Slow tests (very large images) are skipped unless --slow is passed.
Run the full suite:   pytest --slow
Run fast tests only:  pytest          (default)
"""
from dataclasses import dataclass

import cv2
import numpy as np
import pytest
import qrcode

from decoding import GridDecodeError


def pytest_addoption(parser):
    parser.addoption(
        "--slow",
        action="store_true",
        default=False,
        help="Run slow tests that allocate multi-gigabyte-sum integral tables",
    )


def pytest_collection_modifyitems(config, items):
    if config.getoption("--slow"):
        return  # run everything
    skip_slow = pytest.mark.skip(reason="slow test skipped, pass --slow to include")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip_slow)


def render_qr(text: str, size: int, dark: int = 0, light: int = 255) -> np.ndarray:
    """Render text as a size x size grayscale QR image with a 4-module quiet zone."""
    qr = qrcode.QRCode(
        error_correction=qrcode.constants.ERROR_CORRECT_M,
        box_size=1,
        border=4,
    )
    qr.add_data(text)
    qr.make(fit=True)
    modules = np.array(qr.get_matrix(), dtype=bool)
    img = np.where(modules, dark, light).astype(np.uint8)
    return cv2.resize(img, (size, size), interpolation=cv2.INTER_NEAREST)


@pytest.fixture
def qr_image():
    return render_qr


@dataclass(frozen=True)
class FakeGrid:
    payload: str | None

    def decode(self) -> str:
        if self.payload is None:
            raise GridDecodeError("unreadable")
        return self.payload


class KeyedDetector:
    """Detector returning grids chosen by the image's top-left sample value.

    Lets tests decide per candidate what the "detector" sees without
    depending on real pattern recognition.
    """

    def __init__(self, grids_by_value: dict[int, list[str | None]]):
        self.grids_by_value = grids_by_value
        self.calls = 0

    def detect(self, image: np.ndarray) -> list[FakeGrid]:
        self.calls += 1
        if image.size == 0:
            return []
        payloads = self.grids_by_value.get(int(image.flat[0]), [])
        return [FakeGrid(payload) for payload in payloads]


@pytest.fixture
def keyed_detector():
    return KeyedDetector
