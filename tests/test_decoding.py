"""Tests for decode orchestration and result deduplication."""

import logging

import cv2
import numpy as np
import pytest

from decoding import (
    DecodedResult,
    OpenCVGrid,
    OpenCVQRDetector,
    ResultSet,
    GridDecodeError,
    decode_candidates,
    decode_file,
    decode_image,
    get_detector,
)
from preprocessing import Candidate, Technique
from sources import ImageLoadError


def _candidates(*values_by_technique):
    """Build candidates whose images are filled with a marker value."""
    return [
        Candidate(technique=technique, image=np.full((4, 4), value, dtype=np.uint8))
        for technique, value in values_by_technique
    ]


class ContrastGatedDetector:
    """Real OpenCV detector that refuses low-dynamic-range images.

    Stands in for a detector that cannot see a washed-out pattern until
    the contrast is stretched.
    """

    def __init__(self, min_range: int = 100):
        self.min_range = min_range
        self.inner = OpenCVQRDetector()

    def detect(self, image):
        if int(image.max()) - int(image.min()) < self.min_range:
            return []
        return self.inner.detect(image)


class TestResultSet:
    def test_add_deduplicates_by_payload(self):
        results = ResultSet()
        assert results.add(DecodedResult("a.png", "HELLO", Technique.GRAYSCALE)) is True
        assert results.add(DecodedResult("b.png", "HELLO", Technique.UPSCALED)) is False
        assert len(results) == 1
        assert results.freeze()[0].technique is Technique.GRAYSCALE

    def test_merge_counts_new_payloads(self):
        results = ResultSet([DecodedResult("a", "X")])
        added = results.merge([DecodedResult("b", "X"), DecodedResult("b", "Y")])
        assert added == 1
        assert results.payloads == ["X", "Y"]
        assert "Y" in results

    def test_freeze_is_a_snapshot(self):
        results = ResultSet([DecodedResult("a", "X")])
        snapshot = results.freeze()
        results.add(DecodedResult("a", "Z"))
        assert len(snapshot) == 1

    def test_to_dict(self):
        result = DecodedResult("a.png", "X", Technique.ENHANCED)
        assert result.to_dict() == {"source": "a.png", "payload": "X", "technique": "enhanced"}


class TestDecodeCandidates:
    def test_dedup_across_techniques(self, keyed_detector):
        detector = keyed_detector({1: ["HELLO"], 3: ["HELLO"], 4: ["WORLD"]})
        candidates = _candidates(
            (Technique.GRAYSCALE, 1),
            (Technique.ENHANCED, 2),
            (Technique.THRESHOLDED, 3),
            (Technique.UPSCALED, 4),
            (Technique.UPSCALED_ENHANCED, 5),
        )
        report = decode_candidates(candidates, detector, source="img.png")
        assert sorted(report.payloads) == ["HELLO", "WORLD"]
        assert len(report.results) == 2
        assert report.results[0].technique is Technique.GRAYSCALE
        assert all(result.source == "img.png" for result in report.results)

    def test_dedup_independent_of_order(self, keyed_detector):
        detector = keyed_detector({1: ["HELLO"], 3: ["HELLO"], 4: ["WORLD"]})
        candidates = _candidates(
            (Technique.UPSCALED, 4),
            (Technique.THRESHOLDED, 3),
            (Technique.ENHANCED, 2),
            (Technique.GRAYSCALE, 1),
        )
        report = decode_candidates(candidates, detector)
        assert sorted(report.payloads) == ["HELLO", "WORLD"]
        assert report.results[1].technique is Technique.THRESHOLDED

    def test_multiple_grids_per_candidate(self, keyed_detector):
        detector = keyed_detector({1: ["A", "B", "A"]})
        report = decode_candidates(_candidates((Technique.GRAYSCALE, 1)), detector)
        assert report.payloads == ["A", "B"]
        assert report.grids_seen == 3

    def test_failed_grids_are_skipped(self, keyed_detector):
        detector = keyed_detector({1: [None, "OK"], 2: [None]})
        report = decode_candidates(
            _candidates((Technique.GRAYSCALE, 1), (Technique.ENHANCED, 2)),
            detector,
        )
        assert report.payloads == ["OK"]
        assert report.grids_seen == 3

    def test_undecodable_grids_are_counted_in_debug_log(self, keyed_detector, caplog):
        detector = keyed_detector({1: [None, "OK", None]})
        with caplog.at_level(logging.DEBUG, logger="decoding.orchestrator"):
            decode_candidates(_candidates((Technique.GRAYSCALE, 1)), detector, source="x.png")
        assert "x.png [1/grayscale]: 3 grid(s), 1 decoded, 2 undecodable, 1 new" in caplog.text

    def test_zero_decodes_is_normal(self, keyed_detector):
        detector = keyed_detector({})
        candidates = _candidates((Technique.GRAYSCALE, 1), (Technique.ENHANCED, 2))
        report = decode_candidates(candidates, detector)
        assert report.found is False
        assert report.results == ()
        assert report.techniques_tried == (Technique.GRAYSCALE, Technique.ENHANCED)
        assert detector.calls == 2


class TestDecodeImage:
    def test_clean_code_decodes_on_plain_grayscale(self, qr_image):
        img = qr_image("https://example.com", 300)
        report = decode_image(img, detector=OpenCVQRDetector(), source="clean.png")
        assert report.payloads == ["https://example.com"]
        assert report.results[0].technique is Technique.GRAYSCALE
        assert len(report.techniques_tried) == 5

    def test_color_source_decodes(self, qr_image):
        gray = qr_image("https://example.com", 300)
        rgb = np.stack([gray] * 3, axis=-1)
        report = decode_image(rgb, detector=OpenCVQRDetector())
        assert report.payloads == ["https://example.com"]

    def test_low_contrast_needs_enhancement(self, qr_image):
        img = qr_image("TEST123", 500, dark=110, light=140)
        detector = ContrastGatedDetector()

        plain = decode_candidates(
            [Candidate(Technique.GRAYSCALE, img)], detector
        )
        assert plain.found is False

        report = decode_image(img, detector=detector)
        assert report.payloads == ["TEST123"]
        assert report.results[0].technique is Technique.ENHANCED
        assert len(report.techniques_tried) == 6
        assert report.techniques_tried[-1] is Technique.DOWNSCALED

    def test_blank_image_reports_nothing(self):
        img = np.full((120, 120), 200, dtype=np.uint8)
        report = decode_image(img, detector=OpenCVQRDetector())
        assert report.found is False
        assert len(report.techniques_tried) == 5


class TestDecodeFile:
    def test_decodes_png(self, qr_image, tmp_path):
        path = tmp_path / "code.png"
        cv2.imwrite(str(path), qr_image("file payload", 300))
        report = decode_file(path, detector=OpenCVQRDetector())
        assert report.payloads == ["file payload"]
        assert report.source == str(path)

    def test_garbage_file_raises_load_error(self, tmp_path):
        path = tmp_path / "broken.png"
        path.write_bytes(b"not an image")
        with pytest.raises(ImageLoadError, match="Unsupported or undetectable"):
            decode_file(path, detector=OpenCVQRDetector())

    def test_missing_file_raises_load_error(self, tmp_path):
        with pytest.raises(ImageLoadError, match="not found"):
            decode_file(tmp_path / "missing.png")


class TestDetector:
    def test_grid_with_empty_payload_fails(self):
        with pytest.raises(GridDecodeError):
            OpenCVGrid(payload="").decode()

    def test_empty_image_yields_no_grids(self):
        assert OpenCVQRDetector().detect(np.zeros((0, 0), dtype=np.uint8)) == []

    def test_get_detector_default(self):
        assert isinstance(get_detector(), OpenCVQRDetector)

    def test_get_detector_unknown(self):
        with pytest.raises(ValueError, match="Unknown detector backend"):
            get_detector("nope")
