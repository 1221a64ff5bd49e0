"""Selection of final matches from nearest-neighbor candidates."""

import logging
from enum import Enum
from typing import List, Sequence, Union

from featrack.errors import InsufficientCandidatesError, InvalidConfigurationError
from featrack.matching.matches import Match, MatchCandidatePair, MatchSelection

logger = logging.getLogger(__name__)


class SelectorType(Enum):
    """Match selection strategies."""

    SEL_NN = "SEL_NN"    # nearest neighbor, k=1
    SEL_KNN = "SEL_KNN"  # k nearest neighbors, k=2, ratio test

    @property
    def k(self) -> int:
        return 1 if self is SelectorType.SEL_NN else 2


def parse_selector_type(value) -> SelectorType:
    """Resolve a SelectorType from a member or a name such as ``"SEL_KNN"``."""
    if isinstance(value, SelectorType):
        return value
    try:
        return SelectorType(str(value).upper())
    except ValueError:
        valid = ", ".join(t.value for t in SelectorType)
        raise InvalidConfigurationError(
            f"Unknown selector type {value!r}, expected one of: {valid}"
        ) from None


class MatchSelector:
    """
    Filter descriptor matches.

    ``select_knn`` applies the distance ratio test to the two nearest
    neighbors of every source descriptor: the best match survives only if
    it is clearly closer than the runner-up. ``select_nn`` keeps every
    single best match.
    """

    def __init__(self, ratio: float = 0.8):
        """
        Initialize selector.

        Args:
            ratio: Keep a match if best_distance < ratio * second_distance.
                Must be in (0, 1].
        """
        if not 0.0 < ratio <= 1.0:
            raise InvalidConfigurationError(f"ratio must be in (0, 1], got {ratio}")
        self.ratio = ratio

    def select_knn(self, candidates: Sequence[Union[MatchCandidatePair, Sequence[Match]]]) -> MatchSelection:
        """
        Apply the ratio test.

        Args:
            candidates: For each source descriptor, a MatchCandidatePair or
                its nearest matches ordered by
                ascending distance, of which only the first two are used.

        Returns:
            MatchSelection with the surviving best matches

        Raises:
            InsufficientCandidatesError: If any entry has fewer than two
                matches. Nothing is returned for the other entries.
        """
        pairs = to_candidate_pairs(candidates)

        kept = tuple(
            pair.best for pair in pairs
            if pair.best_distance < self.ratio * pair.second_distance
        )
        selection = MatchSelection(matches=kept, candidate_count=len(pairs))
        logger.info("# keypoints removed = %d", selection.removed_count)
        return selection

    def select_nn(self, matches: Sequence[Match]) -> MatchSelection:
        """Keep every nearest-neighbor match unchanged."""
        return MatchSelection(matches=tuple(matches), candidate_count=len(matches))


def to_candidate_pairs(
        candidates: Sequence[Union[MatchCandidatePair, Sequence[Match]]]) -> List[MatchCandidatePair]:
    """
    Validate k-NN candidates and turn them into best/second pairs.

    MatchCandidatePair entries are used as they are. List entries must hold
    at least two matches ordered by ascending distance.
    """
    source_indices = []
    empty_positions = []
    for position, entry in enumerate(candidates):
        if isinstance(entry, MatchCandidatePair):
            continue
        if not entry:
            empty_positions.append(position)
        elif len(entry) < 2:
            source_indices.append(entry[0].source_index)
    if source_indices or empty_positions:
        raise InsufficientCandidatesError(source_indices, empty_positions)

    return [
        entry if isinstance(entry, MatchCandidatePair)
        else MatchCandidatePair(best=entry[0], second=entry[1])
        for entry in candidates
    ]


def select_knn(candidates: Sequence[Union[MatchCandidatePair, Sequence[Match]]],
               ratio: float = 0.8) -> MatchSelection:
    """Ratio test over k-NN candidates."""
    return MatchSelector(ratio).select_knn(candidates)


def select_nn(matches: Sequence[Match]) -> MatchSelection:
    """Pass-through selection of nearest-neighbor matches."""
    return MatchSelector().select_nn(matches)
