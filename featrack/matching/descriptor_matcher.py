"""Nearest-neighbor search over descriptor sets."""

from enum import Enum
from typing import List, Optional

import cv2
import numpy as np

from featrack.detection.feature_extractor import DescriptorType, parse_descriptor_type
from featrack.errors import InvalidConfigurationError
from featrack.matching.matches import Match

FLANN_INDEX_KDTREE = 1


class MatcherType(Enum):
    """Supported neighbor search backends."""

    MAT_BF = "MAT_BF"
    MAT_FLANN = "MAT_FLANN"


class DescriptorMatcher:
    """
    Brute-force or FLANN neighbor search.

    Brute force uses the Hamming distance for binary descriptors and L2
    for float descriptors. FLANN only works on float data, so descriptors
    are converted to float32 copies before searching.
    """

    def __init__(self, matcher_type=MatcherType.MAT_BF,
                 descriptor_type=DescriptorType.BRISK):
        self.matcher_type = parse_matcher_type(matcher_type)
        self.descriptor_type = parse_descriptor_type(descriptor_type)

        if self.matcher_type is MatcherType.MAT_BF:
            norm = cv2.NORM_HAMMING if self.descriptor_type.is_binary else cv2.NORM_L2
            self._matcher = cv2.BFMatcher(norm, crossCheck=False)
        else:
            index_params = dict(algorithm=FLANN_INDEX_KDTREE, trees=5)
            search_params = dict(checks=50)
            self._matcher = cv2.FlannBasedMatcher(index_params, search_params)

    def _prepare(self, descriptors: np.ndarray) -> np.ndarray:
        if self.matcher_type is MatcherType.MAT_FLANN and descriptors.dtype != np.float32:
            return descriptors.astype(np.float32)
        return descriptors

    def nearest(self, source: Optional[np.ndarray],
                reference: Optional[np.ndarray]) -> List[Match]:
        """Best reference match for every source descriptor."""
        if _is_empty(source) or _is_empty(reference):
            return []
        matches = self._matcher.match(self._prepare(source), self._prepare(reference))
        return [Match.from_cv(m) for m in matches]

    def knn(self, source: Optional[np.ndarray], reference: Optional[np.ndarray],
            k: int = 2) -> List[List[Match]]:
        """
        The k closest reference matches for every source descriptor.

        k is clamped to the size of the reference set, so a reference set
        with a single descriptor yields one-element candidate lists.
        """
        if k < 1:
            raise InvalidConfigurationError(f"k must be at least 1, got {k}")
        if _is_empty(source) or _is_empty(reference):
            return []

        k = min(k, len(reference))
        knn_matches = self._matcher.knnMatch(self._prepare(source), self._prepare(reference), k=k)
        return [[Match.from_cv(m) for m in entry] for entry in knn_matches]


def _is_empty(descriptors: Optional[np.ndarray]) -> bool:
    return descriptors is None or len(descriptors) == 0


def parse_matcher_type(value) -> MatcherType:
    """Resolve a MatcherType from a member or a name such as ``"MAT_BF"``."""
    if isinstance(value, MatcherType):
        return value
    try:
        return MatcherType(str(value).upper())
    except ValueError:
        valid = ", ".join(t.value for t in MatcherType)
        raise InvalidConfigurationError(
            f"Unknown matcher type {value!r}, expected one of: {valid}"
        ) from None
