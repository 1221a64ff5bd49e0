"""Threshold and greedy non-maximum suppression over a corner response surface."""

import logging
import math
from typing import Iterable, List

import numpy as np

from featrack.detection.keypoints import Keypoint, KeypointSet, keypoint_overlap
from featrack.errors import InvalidConfigurationError

logger = logging.getLogger(__name__)


class KeypointSelector:
    """
    Convert a per-pixel response surface into a deduplicated keypoint set.

    Pixels are visited in row-major order. Every pixel above the response
    threshold becomes a candidate which is compared against the keypoints
    accepted so far, in acceptance order. The first accepted keypoint whose
    footprint overlaps the candidate by more than ``max_overlap`` decides
    its fate: a stronger candidate takes its slot, a weaker or equal one is
    dropped. A candidate without conflicts is appended.

    The outcome depends on visiting order, and entries are never re-checked
    after a replacement, so two keypoints of the result may still overlap.
    """

    def __init__(self, min_response: float = 100, max_overlap: float = 0.0,
                 keypoint_size: float = 6.0):
        """
        Initialize selector.

        Args:
            min_response: Pixels must exceed this value to become candidates
            max_overlap: Largest permitted footprint overlap, in [0, 1)
            keypoint_size: Footprint diameter given to every candidate
        """
        if not math.isfinite(min_response):
            raise InvalidConfigurationError(f"min_response must be finite, got {min_response}")
        if not 0.0 <= max_overlap < 1.0:
            raise InvalidConfigurationError(f"max_overlap must be in [0, 1), got {max_overlap}")
        if not keypoint_size > 0:
            raise InvalidConfigurationError(f"keypoint_size must be positive, got {keypoint_size}")

        self.min_response = min_response
        self.max_overlap = max_overlap
        self.keypoint_size = keypoint_size

    def select(self, surface: np.ndarray) -> KeypointSet:
        """
        Run thresholding and NMS on a response surface.

        Args:
            surface: 2-D array of non-negative responses

        Returns:
            KeypointSet in acceptance order
        """
        surface = np.asarray(surface)
        if surface.ndim != 2:
            raise InvalidConfigurationError(
                f"Response surface must be 2-D, got shape {surface.shape}"
            )

        # np.nonzero yields indices in row-major order
        rows, cols = np.nonzero(surface > self.min_response)
        candidates = (
            Keypoint(
                position=(float(col), float(row)),
                scale=float(self.keypoint_size),
                response=float(surface[row, col]),
            )
            for row, col in zip(rows.tolist(), cols.tolist())
        )
        keypoints = self.suppress(candidates)
        logger.debug("NMS kept %d of %d candidates", len(keypoints), len(rows))
        return keypoints

    def suppress(self, candidates: Iterable[Keypoint]) -> KeypointSet:
        """
        Greedy NMS over candidates in the given order.

        Candidates are used as given, without applying the response threshold.
        """
        accepted: List[Keypoint] = []
        for candidate in candidates:
            conflict = False
            for i, existing in enumerate(accepted):
                if keypoint_overlap(candidate, existing) > self.max_overlap:
                    conflict = True
                    if candidate.response > existing.response:
                        accepted[i] = candidate
                    break

            if not conflict:
                accepted.append(candidate)

        return KeypointSet(accepted)


def select_keypoints(surface: np.ndarray, min_response: float = 100,
                     max_overlap: float = 0.0, keypoint_size: float = 6.0) -> KeypointSet:
    """Threshold a response surface and apply greedy NMS."""
    selector = KeypointSelector(min_response=min_response, max_overlap=max_overlap,
                                keypoint_size=keypoint_size)
    return selector.select(surface)
