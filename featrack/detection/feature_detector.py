"""Keypoint detector variants and their single construction point."""

from enum import Enum
from typing import Callable, Dict

import cv2
import numpy as np

from featrack.detection.base import BaseDetector, to_grayscale
from featrack.detection.corner_detector import HarrisDetector, ShiTomasiDetector
from featrack.detection.keypoints import KeypointSet
from featrack.errors import InvalidConfigurationError


class DetectorType(Enum):
    """Supported keypoint detectors."""

    HARRIS = "HARRIS"
    SHITOMASI = "SHITOMASI"
    FAST = "FAST"
    BRISK = "BRISK"
    ORB = "ORB"
    AKAZE = "AKAZE"
    SIFT = "SIFT"


class LibraryDetector(BaseDetector):
    """Wraps an OpenCV ``Feature2D`` detector."""

    def __init__(self, name: str, detector: cv2.Feature2D):
        self._name = name
        self._detector = detector

    @property
    def name(self) -> str:
        return self._name

    def detect(self, image: np.ndarray) -> KeypointSet:
        keypoints = self._detector.detect(to_grayscale(image), None)
        if keypoints is None:
            return KeypointSet()
        return KeypointSet.from_cv(keypoints)


def _fast(threshold: int = 30, nonmax_suppression: bool = True) -> LibraryDetector:
    detector = cv2.FastFeatureDetector_create(
        threshold, nonmax_suppression, cv2.FAST_FEATURE_DETECTOR_TYPE_9_16
    )
    return LibraryDetector("FAST", detector)


def _brisk() -> LibraryDetector:
    return LibraryDetector("BRISK", cv2.BRISK_create())


def _orb(n_features: int = 500) -> LibraryDetector:
    return LibraryDetector("ORB", cv2.ORB_create(nfeatures=n_features))


def _akaze() -> LibraryDetector:
    return LibraryDetector("AKAZE", cv2.AKAZE_create())


def _sift() -> LibraryDetector:
    return LibraryDetector("SIFT", cv2.SIFT_create())


_FACTORIES: Dict[DetectorType, Callable[..., BaseDetector]] = {
    DetectorType.HARRIS: HarrisDetector,
    DetectorType.SHITOMASI: ShiTomasiDetector,
    DetectorType.FAST: _fast,
    DetectorType.BRISK: _brisk,
    DetectorType.ORB: _orb,
    DetectorType.AKAZE: _akaze,
    DetectorType.SIFT: _sift,
}


def create_detector(detector_type, **params) -> BaseDetector:
    """
    Build the detector for a detector type.

    Args:
        detector_type: DetectorType member or its name
        **params: Keyword arguments for the detector constructor

    Returns:
        Detector instance
    """
    detector_type = parse_detector_type(detector_type)
    try:
        return _FACTORIES[detector_type](**params)
    except TypeError as e:
        raise InvalidConfigurationError(
            f"Invalid parameters for {detector_type.value} detector: {e}"
        ) from e


def parse_detector_type(value) -> DetectorType:
    """Resolve a DetectorType from a member or a name such as ``"FAST"``."""
    if isinstance(value, DetectorType):
        return value
    try:
        return DetectorType(str(value).upper())
    except ValueError:
        valid = ", ".join(t.value for t in DetectorType)
        raise InvalidConfigurationError(
            f"Unknown detector type {value!r}, expected one of: {valid}"
        ) from None
