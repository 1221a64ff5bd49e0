"""Tests for detection module."""

import pytest
import numpy as np
import cv2
from featrack.detection.base import to_grayscale
from featrack.detection.corner_detector import HarrisDetector, ShiTomasiDetector, harris_response
from featrack.detection.feature_detector import DetectorType, LibraryDetector, create_detector
from featrack.detection.feature_extractor import (
    DescriptorExtractor,
    DescriptorType,
    Features,
    create_extractor,
)
from featrack.detection.keypoints import KeypointSet, keypoint_overlap
from featrack.errors import InvalidConfigurationError

has_contrib = hasattr(cv2, "xfeatures2d")


class TestGrayscale:
    """Test grayscale conversion."""

    def test_bgr_image(self):
        """Test BGR conversion."""
        image = np.zeros((10, 12, 3), dtype=np.uint8)
        assert to_grayscale(image).shape == (10, 12)

    def test_gray_image_unchanged(self):
        """Test grayscale input passes through."""
        image = np.zeros((10, 12), dtype=np.uint8)
        assert to_grayscale(image) is image

    def test_single_channel_image(self):
        """Test single-channel 3-D input is squeezed."""
        image = np.zeros((10, 12, 1), dtype=np.uint8)
        assert to_grayscale(image).shape == (10, 12)


class TestHarrisResponse:
    """Test Harris response surface."""

    def test_normalized_range(self, checkerboard):
        """Test response is normalized to 0..255."""
        surface = harris_response(checkerboard)
        assert surface.shape == checkerboard.shape
        assert surface.dtype == np.float32
        assert surface.min() == pytest.approx(0.0, abs=1e-3)
        assert surface.max() == pytest.approx(255.0, abs=1e-3)

    def test_blank_image(self):
        """Test response of a blank image."""
        surface = harris_response(np.zeros((50, 50), dtype=np.uint8))
        assert np.all(surface == 0)

    def test_bgr_input(self, checkerboard):
        """Test BGR input matches grayscale input."""
        bgr = cv2.cvtColor(checkerboard, cv2.COLOR_GRAY2BGR)
        np.testing.assert_allclose(harris_response(bgr), harris_response(checkerboard), atol=1e-3)


class TestHarrisDetector:
    """Test Harris detection with NMS."""

    def test_initialization(self):
        """Test HarrisDetector initialization."""
        detector = HarrisDetector()
        assert detector.block_size == 2
        assert detector.aperture_size == 3
        assert detector.k == 0.04
        assert detector.selector.min_response == 100
        assert detector.selector.keypoint_size == 6
        assert detector.name == "HARRIS"

    def test_even_aperture_rejected(self):
        """Test even aperture size is rejected."""
        with pytest.raises(InvalidConfigurationError):
            HarrisDetector(aperture_size=4)

    def test_detect_checkerboard(self, checkerboard):
        """Test detection on a checkerboard."""
        keypoints = HarrisDetector().detect(checkerboard)
        assert isinstance(keypoints, KeypointSet)
        assert len(keypoints) > 0
        assert all(k.response > 100 for k in keypoints)
        assert all(k.scale == 6 for k in keypoints)
        h, w = checkerboard.shape
        assert all(0 <= k.x < w and 0 <= k.y < h for k in keypoints)

    def test_detections_near_inner_corners(self, checkerboard):
        """Test keypoints lie near checkerboard corners."""
        keypoints = HarrisDetector().detect(checkerboard)
        for k in keypoints:
            # Inner checkerboard corners lie on multiples of 20
            assert min(k.x % 20, 20 - k.x % 20) <= 3
            assert min(k.y % 20, 20 - k.y % 20) <= 3

    def test_blank_image(self):
        """Test blank image yields no keypoints."""
        assert len(HarrisDetector().detect(np.zeros((60, 60), dtype=np.uint8))) == 0

    def test_deterministic(self, checkerboard):
        """Test repeated detection gives the same result."""
        detector = HarrisDetector()
        assert detector.detect(checkerboard) == detector.detect(checkerboard)

    def test_higher_threshold_fewer_keypoints(self, checkerboard):
        """Test raising min_response reduces keypoints."""
        low = HarrisDetector(min_response=60).detect(checkerboard)
        high = HarrisDetector(min_response=160).detect(checkerboard)
        assert len(high) <= len(low)


class TestShiTomasiDetector:
    """Test Shi-Tomasi detection."""

    def test_initialization(self):
        """Test ShiTomasiDetector initialization."""
        detector = ShiTomasiDetector()
        assert detector.block_size == 4
        assert detector.min_distance == 4.0
        assert detector.quality_level == 0.01

    def test_min_distance_from_overlap(self):
        """Test min_distance derived from max_overlap."""
        assert ShiTomasiDetector(block_size=4, max_overlap=0.5).min_distance == 2.0

    def test_invalid_overlap(self):
        """Test invalid max_overlap."""
        with pytest.raises(InvalidConfigurationError):
            ShiTomasiDetector(max_overlap=1.0)

    def test_detect(self, checkerboard):
        """Test detection on a checkerboard."""
        keypoints = ShiTomasiDetector().detect(checkerboard)
        assert len(keypoints) > 0
        assert all(k.scale == 4 for k in keypoints)

    def test_blank_image(self):
        """Test blank image yields no keypoints."""
        assert len(ShiTomasiDetector().detect(np.zeros((60, 60), dtype=np.uint8))) == 0

    def test_bgr_image(self, checkerboard):
        """Test detection on BGR input."""
        bgr = cv2.cvtColor(checkerboard, cv2.COLOR_GRAY2BGR)
        assert len(ShiTomasiDetector().detect(bgr)) > 0


class TestCreateDetector:
    """Test detector construction from types."""

    @pytest.mark.parametrize("detector_type", list(DetectorType))
    def test_all_types_detect(self, detector_type, textured_image):
        """Test every detector type finds keypoints."""
        detector = create_detector(detector_type)
        keypoints = detector.detect(textured_image)
        assert detector.name == detector_type.value
        assert isinstance(keypoints, KeypointSet)
        assert len(keypoints) > 0

    def test_library_detector(self):
        """Test library detectors are wrapped."""
        assert isinstance(create_detector(DetectorType.FAST), LibraryDetector)

    def test_string_names(self):
        """Test detector lookup by name."""
        assert isinstance(create_detector("harris"), HarrisDetector)
        assert isinstance(create_detector("SHITOMASI"), ShiTomasiDetector)

    def test_parameters_forwarded(self):
        """Test constructor parameters are forwarded."""
        detector = create_detector(DetectorType.HARRIS, min_response=50, max_overlap=0.2)
        assert detector.selector.min_response == 50
        assert detector.selector.max_overlap == 0.2

    def test_unknown_type(self):
        """Test unknown detector name."""
        with pytest.raises(InvalidConfigurationError, match="Unknown detector type"):
            create_detector("SURF")

    def test_bad_parameters(self):
        """Test unexpected parameters are rejected."""
        with pytest.raises(InvalidConfigurationError):
            create_detector(DetectorType.BRISK, threshold=10)

    def test_fast_keeps_threshold(self, textured_image):
        """Test FAST threshold is applied."""
        strict = create_detector(DetectorType.FAST, threshold=80).detect(textured_image)
        loose = create_detector(DetectorType.FAST, threshold=10).detect(textured_image)
        assert len(strict) <= len(loose)


class TestDescriptorExtractor:
    """Test descriptor extraction."""

    def test_binary_flags(self):
        """Test binary descriptor flags."""
        assert DescriptorType.ORB.is_binary
        assert DescriptorType.BRISK.is_binary
        assert not DescriptorType.SIFT.is_binary

    def test_orb_descriptors(self, textured_image):
        """Test ORB descriptor extraction."""
        keypoints = create_detector(DetectorType.ORB).detect(textured_image)
        features = create_extractor(DescriptorType.ORB).extract(textured_image, keypoints)

        assert isinstance(features, Features)
        assert features.descriptor_type is DescriptorType.ORB
        assert features.descriptors.shape == (len(features), 32)
        assert features.descriptors.dtype == np.uint8

    def test_brisk_on_shi_tomasi(self, textured_image):
        """Test BRISK descriptors for Shi-Tomasi corners."""
        keypoints = ShiTomasiDetector().detect(textured_image)
        features = create_extractor("BRISK").extract(textured_image, keypoints)
        assert 0 < len(features) <= len(keypoints)
        assert features.descriptors.shape == (len(features), 64)

    def test_sift_descriptors(self, textured_image):
        """Test SIFT descriptor extraction."""
        keypoints = create_detector(DetectorType.SIFT).detect(textured_image)
        features = create_extractor(DescriptorType.SIFT).extract(textured_image, keypoints)
        assert features.descriptors.shape == (len(features), 128)
        assert features.descriptors.dtype == np.float32

    def test_akaze_descriptors(self, textured_image):
        """Test AKAZE descriptor extraction."""
        keypoints = create_detector(DetectorType.AKAZE).detect(textured_image)
        features = create_extractor(DescriptorType.AKAZE).extract(textured_image, keypoints)
        assert len(features) > 0
        assert features.descriptors.shape[0] == len(features)

    @pytest.mark.skipif(not has_contrib, reason="OpenCV built without contrib modules")
    @pytest.mark.parametrize("descriptor_type", [DescriptorType.BRIEF, DescriptorType.FREAK])
    def test_contrib_descriptors(self, descriptor_type, textured_image):
        """Test BRIEF and FREAK extraction."""
        keypoints = create_detector(DetectorType.FAST).detect(textured_image)
        features = create_extractor(descriptor_type).extract(textured_image, keypoints)
        assert len(features) > 0
        assert features.descriptors.shape[0] == len(features)

    @pytest.mark.skipif(has_contrib, reason="OpenCV built with contrib modules")
    def test_contrib_descriptors_unavailable(self):
        """Test contrib descriptors without xfeatures2d."""
        with pytest.raises(InvalidConfigurationError):
            create_extractor(DescriptorType.BRIEF)

    def test_empty_keypoints(self, textured_image):
        """Test extraction with no keypoints."""
        features = create_extractor(DescriptorType.ORB).extract(textured_image, KeypointSet())
        assert len(features) == 0
        assert features.descriptors is None

    def test_described_keypoints_come_from_input(self, textured_image):
        """Test returned keypoints are a subset of the input."""
        keypoints = ShiTomasiDetector().detect(textured_image)
        features = create_extractor(DescriptorType.BRISK).extract(textured_image, keypoints)
        inputs = {k.position for k in keypoints}
        assert all(k.position in inputs for k in features.keypoints)

    def test_unknown_type(self):
        """Test unknown descriptor name."""
        with pytest.raises(InvalidConfigurationError, match="Unknown descriptor type"):
            create_extractor("SURF")

    def test_extractor_name(self):
        """Test extractor name."""
        extractor = create_extractor(DescriptorType.SIFT)
        assert isinstance(extractor, DescriptorExtractor)
        assert extractor.name == "SIFT"
