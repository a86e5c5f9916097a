"""Overlap detection collaborators.

Pairs of views that do not overlap in space carry no information for
registration and can be dropped before subsets are detected. Computing the
overlap itself (bounding boxes under the current transforms) happens outside
this package; it is consumed here through the `OverlapDetection` protocol.
"""
from typing import Any, Hashable, Iterable, Protocol, Tuple


class OverlapDetection(Protocol):
    """Anything that can tell whether two views overlap."""

    def overlaps(self, view_a: Any, view_b: Any) -> bool:
        ...


class PrecomputedOverlap:
    """Overlap oracle backed by a list of pairs known to overlap.

    The relation is symmetric: listing (a, b) also makes (b, a) overlap.
    """

    def __init__(self, overlapping_pairs: Iterable[Tuple[Hashable, Hashable]]):
        self._pairs: set[frozenset] = set()
        for view_a, view_b in overlapping_pairs:
            self._pairs.add(frozenset((view_a, view_b)))

    def overlaps(self, view_a: Any, view_b: Any) -> bool:
        return frozenset((view_a, view_b)) in self._pairs

    def __len__(self) -> int:
        return len(self._pairs)
