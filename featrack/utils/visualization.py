"""Visualization utilities for debugging and display."""

import cv2
import numpy as np
from typing import Sequence

from featrack.detection.keypoints import KeypointSet
from featrack.matching.matches import Match


def draw_keypoints(image: np.ndarray, keypoints: KeypointSet) -> np.ndarray:
    """Draw keypoints with their size and orientation."""
    return cv2.drawKeypoints(image, keypoints.to_cv(), None, color=(-1, -1, -1, -1),
                             flags=cv2.DRAW_MATCHES_FLAGS_DRAW_RICH_KEYPOINTS)


def draw_matches(source_image: np.ndarray, source_keypoints: KeypointSet,
                 reference_image: np.ndarray, reference_keypoints: KeypointSet,
                 matches: Sequence[Match]) -> np.ndarray:
    """Draw matches side by side, source on the left."""
    return cv2.drawMatches(
        source_image, source_keypoints.to_cv(),
        reference_image, reference_keypoints.to_cv(),
        [m.to_cv() for m in matches], None,
        flags=cv2.DRAW_MATCHES_FLAGS_NOT_DRAW_SINGLE_POINTS,
    )
