"""Exceptions raised by featrack."""

from typing import Iterable


class FeatrackError(Exception):
    """Base class for featrack errors."""


class InvalidConfigurationError(FeatrackError, ValueError):
    """A parameter is outside its accepted range or names an unknown variant."""


class InsufficientCandidatesError(FeatrackError, ValueError):
    """
    Ratio test requested for source descriptors with fewer than 2 neighbors.

    Attributes:
        source_indices: Source index of every entry holding a single match
        empty_positions: Position in the candidate list of every empty entry,
            which carries no source index
    """

    def __init__(self, source_indices: Iterable[int], empty_positions: Iterable[int] = ()):
        self.source_indices = tuple(source_indices)
        self.empty_positions = tuple(empty_positions)
        parts = []
        if self.source_indices:
            parts.append(f"source indices: {_preview(self.source_indices)}")
        if self.empty_positions:
            parts.append(f"empty entries at positions: {_preview(self.empty_positions)}")
        count = len(self.source_indices) + len(self.empty_positions)
        super().__init__(
            f"Ratio test needs 2 candidates per source descriptor; "
            f"{count} entries have fewer ({'; '.join(parts)})"
        )


def _preview(values, limit=10):
    shown = ", ".join(str(v) for v in values[:limit])
    if len(values) > limit:
        shown += ", ..."
    return shown
