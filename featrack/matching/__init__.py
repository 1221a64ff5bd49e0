"""Descriptor neighbor search and match selection."""

from .matches import Match, MatchCandidatePair, MatchSelection
from .match_selector import (
    MatchSelector,
    SelectorType,
    select_knn,
    select_nn,
    to_candidate_pairs,
)
from .descriptor_matcher import DescriptorMatcher, MatcherType

__all__ = [
    'Match',
    'MatchCandidatePair',
    'MatchSelection',
    'MatchSelector',
    'SelectorType',
    'select_knn',
    'select_nn',
    'to_candidate_pairs',
    'DescriptorMatcher',
    'MatcherType',
]
