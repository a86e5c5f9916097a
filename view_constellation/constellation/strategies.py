"""Pairwise comparison strategies.

Each strategy chooses its candidate pairs through a range comparator:

- `AllToAll`: every view against every other view
- `AllToAllRange`: every view against every view in range of a comparator
- `IndividualTimepoints`: only views of the same timepoint
- `ReferenceTimepoint`: every timepoint against itself and a fixed reference
  timepoint
"""
import logging
from typing import Any, Callable, Hashable, Iterable, Optional, Sequence

from ._typing_utils import Pair
from .group import Group
from .pairwise_setup import PairwiseSetup, all_pairs, detect_subsets
from .range_comparator import (
    AllInRange,
    RangeComparator,
    ReferenceTimepointRange,
    TimepointRange,
)
from .subset import Subset
from .view_id import get_timepoint, timepoints_sorted

logger = logging.getLogger(__name__)


class AllToAllRange(PairwiseSetup):
    """Compare all pairs of views accepted by a range comparator."""

    def __init__(
        self,
        views: Iterable[Hashable],
        groups: Optional[Iterable[Any]] = None,
        range_comparator: Optional[RangeComparator] = None,
    ):
        super().__init__(views, groups)
        self.range_comparator = (
            range_comparator if range_comparator is not None else AllInRange()
        )

    def define_pairs_abstract(self) -> list[Pair]:
        return all_pairs(self.views, self.groups, self.range_comparator)

    def get_name(self) -> str:
        return f"all_to_all_range({self.range_comparator.get_name()})"


class AllToAll(AllToAllRange):
    """Compare every view with every other view."""

    def __init__(self, views: Iterable[Hashable], groups: Optional[Iterable[Any]] = None):
        super().__init__(views, groups, AllInRange())

    def get_name(self) -> str:
        return "all_to_all"


class IndividualTimepoints(AllToAllRange):
    """Compare views only within their own timepoint."""

    def __init__(
        self,
        views: Iterable[Hashable],
        groups: Optional[Iterable[Any]] = None,
        timepoint_of: Callable[[Any], int] = get_timepoint,
    ):
        super().__init__(views, groups, TimepointRange(0, timepoint_of))

    def get_name(self) -> str:
        return "individual_timepoints"


class ReferenceTimepoint(AllToAllRange):
    """Register every timepoint against a fixed reference timepoint.

    All views of the reference timepoint are fixed by default. As long as
    timepoints are only connected through the reference, subsets are detected
    one timepoint at a time.
    """

    range_comparator: ReferenceTimepointRange

    def __init__(
        self,
        views: Iterable[Hashable],
        groups: Optional[Iterable[Any]] = None,
        reference_timepoint: int = 0,
        timepoint_of: Callable[[Any], int] = get_timepoint,
    ):
        views = list(views)
        if not views:
            raise ValueError(
                "No views supplied: a reference timepoint setup needs at least one view"
            )
        super().__init__(
            views, groups, ReferenceTimepointRange(reference_timepoint, timepoint_of)
        )
        self.timepoint_of = timepoint_of

    @property
    def reference_timepoint(self) -> int:
        return self.range_comparator.reference_timepoint

    def get_name(self) -> str:
        return f"reference_timepoint_{self.reference_timepoint}"

    def get_default_fixed_views(self) -> list:
        return views_at_timepoint(self.views, self.reference_timepoint, self.timepoint_of)

    def detect_subsets(self) -> None:
        """Find subsets, one timepoint at a time where the topology allows it."""
        pairs = self._require_pairs()
        reference = self.reference_timepoint
        timepoints = [
            tp
            for tp in timepoints_sorted(self.views, self.timepoint_of)
            if tp != reference
        ]

        if (
            not timepoints
            or groups_span_timepoints(self.groups, self.timepoint_of)
            or pairs_span_timepoints(pairs, reference, self.timepoint_of)
        ):
            # timepoints are interconnected beyond the reference
            logger.info(f"{self.get_name()}: detecting subsets over the whole dataset")
            super().detect_subsets()
            return

        logger.info(
            f"{self.get_name()}: detecting subsets for {len(timepoints)} timepoint(s) "
            "connected only through the reference"
        )
        self.subsets = []
        for tp in timepoints:
            self.subsets.extend(self.detect_subsets_for_timepoint(tp))

        # only reference views are shared, so these belong to no per-timepoint subset
        self.pairs_outside_subsets = [
            pair
            for pair in pairs
            if self.timepoint_of(pair[0]) == reference
            and self.timepoint_of(pair[1]) == reference
        ]
        reference_groups = [
            group
            for group in self.groups
            if self.timepoint_of(next(iter(group))) == reference
        ]
        if self.pairs_outside_subsets or reference_groups:
            logger.info(
                f"{self.get_name()}: {len(self.pairs_outside_subsets)} pair(s) and "
                f"{len(reference_groups)} group(s) within the reference timepoint "
                "are not part of any subset"
            )
        logger.info(f"{self.get_name()}: found {len(self.subsets)} subset(s)")

    def detect_subsets_for_timepoint(self, timepoint: int) -> list[Subset]:
        """Subsets of one timepoint together with the reference views."""
        reference = self.reference_timepoint
        tp_of = self.timepoint_of

        local_views = [v for v in self.views if tp_of(v) in (timepoint, reference)]
        local_pairs = [
            pair
            for pair in self._require_pairs()
            if tp_of(pair[0]) == timepoint or tp_of(pair[1]) == timepoint
        ]
        # groups do not span timepoints here, so one member decides
        local_groups = [
            group for group in self.groups if tp_of(next(iter(group))) == timepoint
        ]
        return detect_subsets(local_views, local_pairs, local_groups)


def pairs_span_timepoints(
    pairs: Iterable[Pair],
    reference_timepoint: int,
    timepoint_of: Callable[[Any], int] = get_timepoint,
) -> bool:
    """True if any pair connects two different non-reference timepoints."""
    for view_a, view_b in pairs:
        tp_a = timepoint_of(view_a)
        tp_b = timepoint_of(view_b)
        if tp_a != tp_b and tp_a != reference_timepoint and tp_b != reference_timepoint:
            return True
    return False


def groups_span_timepoints(
    groups: Iterable[Group], timepoint_of: Callable[[Any], int] = get_timepoint
) -> bool:
    """True if any group contains views of more than one timepoint."""
    return any(len({timepoint_of(view) for view in group}) > 1 for group in groups)


def views_at_timepoint(
    views: Sequence[Hashable],
    timepoint: int,
    timepoint_of: Callable[[Any], int] = get_timepoint,
) -> list:
    return [view for view in views if timepoint_of(view) == timepoint]
