"""Range comparators.

A range comparator decides whether two views are candidates for a pairwise
comparison at all, before any grouping or overlap test is applied.
"""
from abc import ABC, abstractmethod
from typing import Any, Callable

from .view_id import get_timepoint


class RangeComparator(ABC):
    """Abstract base class for view-pair candidate predicates."""

    @abstractmethod
    def in_range(self, view_a: Any, view_b: Any) -> bool:
        """Whether the two views may be compared.

        Args:
            view_a: First view
            view_b: Second view

        Returns:
            True if the pair is a candidate for comparison
        """
        pass

    @abstractmethod
    def get_name(self) -> str:
        """Get a descriptive name for this comparator."""
        pass


class AllInRange(RangeComparator):
    """Every pair of views is in range."""

    def in_range(self, view_a: Any, view_b: Any) -> bool:
        return True

    def get_name(self) -> str:
        return "all_in_range"


class TimepointRange(RangeComparator):
    """Views are in range if their timepoints differ by at most `radius`.

    A radius of 0 restricts comparisons to views of the same timepoint.
    """

    def __init__(self, radius: int, timepoint_of: Callable[[Any], int] = get_timepoint):
        if radius < 0:
            raise ValueError(f"Timepoint range must be non-negative, got {radius}")
        self.radius = radius
        self.timepoint_of = timepoint_of

    def in_range(self, view_a: Any, view_b: Any) -> bool:
        return abs(self.timepoint_of(view_a) - self.timepoint_of(view_b)) <= self.radius

    def get_name(self) -> str:
        return f"timepoint_range_{self.radius}"


class ReferenceTimepointRange(RangeComparator):
    """Star topology around a reference timepoint.

    Views are in range if they share a timepoint, or if either of them lies
    at the reference timepoint.
    """

    def __init__(
        self,
        reference_timepoint: int,
        timepoint_of: Callable[[Any], int] = get_timepoint,
    ):
        self.reference_timepoint = reference_timepoint
        self.timepoint_of = timepoint_of

    def in_range(self, view_a: Any, view_b: Any) -> bool:
        tp_a = self.timepoint_of(view_a)
        tp_b = self.timepoint_of(view_b)
        return (
            tp_a == tp_b
            or tp_a == self.reference_timepoint
            or tp_b == self.reference_timepoint
        )

    def get_name(self) -> str:
        return f"reference_timepoint_{self.reference_timepoint}"
