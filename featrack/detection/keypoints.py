"""Keypoint containers and footprint overlap geometry."""

import math
from dataclasses import dataclass
from typing import Iterator, List, Sequence, Tuple, Union, overload

import cv2
import numpy as np


@dataclass(frozen=True)
class Keypoint:
    """
    A detected image feature.

    Attributes:
        position: (x, y) pixel coordinates
        scale: Footprint diameter, used for overlap geometry
        response: Detector response at detection time
        angle: Orientation in degrees, -1 if not computed
        octave: Pyramid octave the keypoint was found on
        class_id: Detector specific id
    """

    position: Tuple[float, float]
    scale: float
    response: float = 0.0
    angle: float = -1.0
    octave: int = 0
    class_id: int = -1

    @property
    def x(self) -> float:
        return self.position[0]

    @property
    def y(self) -> float:
        return self.position[1]

    @classmethod
    def from_cv(cls, kp: cv2.KeyPoint) -> "Keypoint":
        """Build a Keypoint from an OpenCV KeyPoint."""
        return cls(
            position=(float(kp.pt[0]), float(kp.pt[1])),
            scale=float(kp.size),
            response=float(kp.response),
            angle=float(kp.angle),
            octave=int(kp.octave),
            class_id=int(kp.class_id),
        )

    def to_cv(self) -> cv2.KeyPoint:
        """Convert to an OpenCV KeyPoint."""
        return cv2.KeyPoint(
            float(self.position[0]),
            float(self.position[1]),
            float(self.scale),
            float(self.angle),
            float(self.response),
            int(self.octave),
            int(self.class_id),
        )


class KeypointSet:
    """Immutable ordered sequence of keypoints."""

    def __init__(self, keypoints: Sequence[Keypoint] = ()):
        self._keypoints = tuple(keypoints)

    @classmethod
    def from_cv(cls, keypoints: Sequence[cv2.KeyPoint]) -> "KeypointSet":
        return cls(Keypoint.from_cv(kp) for kp in keypoints)

    def to_cv(self) -> List[cv2.KeyPoint]:
        return [kp.to_cv() for kp in self._keypoints]

    @property
    def points(self) -> np.ndarray:
        """Nx2 float32 array of (x, y) positions."""
        if not self._keypoints:
            return np.empty((0, 2), dtype=np.float32)
        return np.array([kp.position for kp in self._keypoints], dtype=np.float32)

    @property
    def responses(self) -> np.ndarray:
        """Response of every keypoint, as float32."""
        return np.array([kp.response for kp in self._keypoints], dtype=np.float32)

    def __len__(self) -> int:
        return len(self._keypoints)

    def __iter__(self) -> Iterator[Keypoint]:
        return iter(self._keypoints)

    @overload
    def __getitem__(self, index: int) -> Keypoint: ...

    @overload
    def __getitem__(self, index: slice) -> "KeypointSet": ...

    def __getitem__(self, index: Union[int, slice]) -> Union[Keypoint, "KeypointSet"]:
        if isinstance(index, slice):
            return KeypointSet(self._keypoints[index])
        return self._keypoints[index]

    def __eq__(self, other) -> bool:
        if not isinstance(other, KeypointSet):
            return NotImplemented
        return self._keypoints == other._keypoints

    def __hash__(self) -> int:
        return hash(self._keypoints)

    def __repr__(self) -> str:
        return f"KeypointSet(n={len(self._keypoints)})"


def keypoint_overlap(a: Keypoint, b: Keypoint) -> float:
    """
    Intersection over union of two circular keypoint footprints.

    Each keypoint covers a circle centred on its position with diameter
    equal to its scale.

    Args:
        a: First keypoint
        b: Second keypoint

    Returns:
        Overlap ratio in [0, 1]. 0 for disjoint circles, 1 for identical ones.
    """
    ra = a.scale * 0.5
    rb = b.scale * 0.5
    if ra <= 0 or rb <= 0:
        return 0.0

    d = math.hypot(a.position[0] - b.position[0], a.position[1] - b.position[1])
    ra2, rb2 = ra * ra, rb * rb

    # One circle completely inside the other
    if min(ra, rb) + d <= max(ra, rb):
        return min(ra2, rb2) / max(ra2, rb2)

    if d >= ra + rb:
        return 0.0

    # Half-angles subtended by the chord at each centre
    cos_a = max(-1.0, min(1.0, (ra2 + d * d - rb2) / (2 * ra * d)))
    cos_b = max(-1.0, min(1.0, (rb2 + d * d - ra2) / (2 * rb * d)))
    alpha = math.acos(cos_a)
    beta = math.acos(cos_b)

    segment_a = ra2 * (alpha - math.sin(alpha) * math.cos(alpha))
    segment_b = rb2 * (beta - math.sin(beta) * math.cos(beta))
    intersection = segment_a + segment_b
    union = math.pi * (ra2 + rb2) - intersection
    return float(intersection / union)
