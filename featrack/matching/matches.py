"""Match containers."""

from dataclasses import dataclass
from typing import Tuple

import cv2


@dataclass(frozen=True)
class Match:
    """
    Correspondence between a source and a reference descriptor.

    Attributes:
        source_index: Row in the source descriptor set
        reference_index: Row in the reference descriptor set
        distance: Descriptor distance under the matcher's metric
    """

    source_index: int
    reference_index: int
    distance: float

    @classmethod
    def from_cv(cls, match: cv2.DMatch) -> "Match":
        return cls(int(match.queryIdx), int(match.trainIdx), float(match.distance))

    def to_cv(self) -> cv2.DMatch:
        return cv2.DMatch(self.source_index, self.reference_index, float(self.distance))


@dataclass(frozen=True)
class MatchCandidatePair:
    """The two closest reference descriptors found for one source descriptor."""

    best: Match
    second: Match

    @property
    def source_index(self) -> int:
        return self.best.source_index

    @property
    def best_distance(self) -> float:
        return self.best.distance

    @property
    def second_distance(self) -> float:
        return self.second.distance


@dataclass(frozen=True)
class MatchSelection:
    """
    Result of a selection pass.

    Attributes:
        matches: Kept matches in source iteration order
        candidate_count: Number of source descriptors that were considered
    """

    matches: Tuple[Match, ...]
    candidate_count: int

    @property
    def removed_count(self) -> int:
        """Source descriptors whose candidates were discarded."""
        return self.candidate_count - len(self.matches)

    def __len__(self) -> int:
        return len(self.matches)

    def to_cv(self):
        return [m.to_cv() for m in self.matches]
