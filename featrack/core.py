"""
featrack core pipeline
Detect, describe and match keypoints between camera frames
"""

import logging
from typing import Any, Dict, Iterable, Iterator, Optional

import numpy as np

from featrack.config import DEFAULT_CONFIG, merge_config, validate_config
from featrack.detection.base import BaseDetector
from featrack.detection.feature_detector import DetectorType, create_detector, parse_detector_type
from featrack.detection.feature_extractor import Features, create_extractor
from featrack.detection.keypoints import KeypointSet
from featrack.matching.descriptor_matcher import DescriptorMatcher
from featrack.matching.match_selector import MatchSelector, SelectorType, parse_selector_type
from featrack.matching.matches import MatchSelection
from featrack.utils.metrics import PerformanceMetrics

logger = logging.getLogger(__name__)


def _detector_params(detector_type: DetectorType, detection: Dict[str, Any]) -> Dict[str, Any]:
    """Constructor arguments for a detector, taken from the detection section."""
    if detector_type is DetectorType.HARRIS:
        return {
            "block_size": detection["harris_block_size"],
            "aperture_size": detection["harris_aperture_size"],
            "k": detection["harris_k"],
            "min_response": detection["min_response"],
            "max_overlap": detection["max_overlap"],
        }
    if detector_type is DetectorType.SHITOMASI:
        return {
            "block_size": detection["shi_tomasi_block_size"],
            "max_overlap": detection["max_overlap"],
            "quality_level": detection["quality_level"],
        }
    return {}


class FeatureTracker:
    """Keypoint detection and frame-to-frame matching."""

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """
        Initialize tracker

        Args:
            config: Configuration overrides merged over DEFAULT_CONFIG (optional)
        """
        self.config = validate_config(merge_config(DEFAULT_CONFIG, config or {}))
        detection = self.config["detection"]
        matching = self.config["matching"]

        detector_type = parse_detector_type(detection["detector_type"])
        self.detector: BaseDetector = create_detector(
            detector_type, **_detector_params(detector_type, detection)
        )
        self.extractor = create_extractor(self.config["description"]["descriptor_type"])
        self.matcher = DescriptorMatcher(matching["matcher_type"], self.extractor.descriptor_type)
        self.selector_type = parse_selector_type(matching["selector_type"])
        self.selector = MatchSelector(ratio=matching["ratio"])
        self.metrics = PerformanceMetrics()

    def detect(self, image: np.ndarray) -> KeypointSet:
        """Detect keypoints in one image."""
        with self.metrics.timer("detection"):
            keypoints = self.detector.detect(image)
        logger.info("%s detection with n=%d keypoints in %.2f ms", self.detector.name,
                    len(keypoints), self.metrics.durations["detection"])
        return keypoints

    def describe(self, image: np.ndarray, keypoints: KeypointSet) -> Features:
        """Compute descriptors for previously detected keypoints."""
        with self.metrics.timer("description"):
            features = self.extractor.extract(image, keypoints)
        logger.info("%s descriptor extraction in %.2f ms", self.extractor.name,
                    self.metrics.durations["description"])
        return features

    def match(self, source: Features, reference: Features) -> MatchSelection:
        """Match source features against reference features."""
        with self.metrics.timer("matching"):
            if self.selector_type is SelectorType.SEL_KNN:
                candidates = self.matcher.knn(source.descriptors, reference.descriptors,
                                              k=self.selector_type.k)
                selection = self.selector.select_knn(candidates)
            else:
                matches = self.matcher.nearest(source.descriptors, reference.descriptors)
                selection = self.selector.select_nn(matches)
        logger.info("%s matching with n=%d matches in %.2f ms", self.matcher.matcher_type.value,
                    len(selection), self.metrics.durations["matching"])
        return selection

    def extract_features(self, image: np.ndarray) -> Features:
        """Detect and describe keypoints of one image."""
        return self.describe(image, self.detect(image))

    def process_pair(self, source_image: np.ndarray,
                     reference_image: np.ndarray) -> Dict[str, Any]:
        """
        Detect, describe and match a pair of images

        Args:
            source_image: Image whose keypoints are matched (query side)
            reference_image: Image searched for matches (train side)

        Returns:
            Dictionary with features, matches, counts and stage timings
        """
        source = self.extract_features(source_image)
        source_timing = self._stage_timing()
        reference = self.extract_features(reference_image)
        reference_timing = self._stage_timing()
        return self._pair_result(source, reference, source_timing, reference_timing)

    def track(self, images: Iterable[np.ndarray]) -> Iterator[Dict[str, Any]]:
        """
        Match each previous frame against the frame that follows it.

        Only the previous frame's features are kept between iterations.
        Yields one result per consecutive pair, so a sequence of n frames
        yields n - 1 results.
        """
        previous: Optional[Features] = None
        previous_timing: Dict[str, float] = {}
        for frame_index, image in enumerate(images):
            current = self.extract_features(image)
            current_timing = self._stage_timing()
            if previous is not None:
                result = self._pair_result(previous, current, previous_timing, current_timing)
                result["frame_index"] = frame_index
                yield result
            previous, previous_timing = current, current_timing

    def _stage_timing(self) -> Dict[str, float]:
        durations = self.metrics.get_summary()
        return {
            "detection_ms": durations.get("detection", 0.0),
            "description_ms": durations.get("description", 0.0),
        }

    def _pair_result(self, source: Features, reference: Features,
                     source_timing: Dict[str, float],
                     reference_timing: Dict[str, float]) -> Dict[str, Any]:
        selection = self.match(source, reference)
        return {
            "source": source,
            "reference": reference,
            "selection": selection,
            "source_keypoints": len(source),
            "reference_keypoints": len(reference),
            "matches": len(selection),
            "removed": selection.removed_count,
            "timing": {
                "source": source_timing,
                "reference": reference_timing,
                "matching_ms": self.metrics.durations.get("matching", 0.0),
            },
        }
