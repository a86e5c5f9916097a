"""Pairwise comparison setup.

This module decides which pairs of views have to be compared to register a
dataset and splits the resulting comparison graph into independent subsets.

The pipeline of a `PairwiseSetup` is:

1. `define_pairs()` - candidate pairs from the strategy, minus redundant ones
2. `remove_non_overlapping_pairs()` - optional, needs an overlap oracle
3. `reorder_pairs()` - optional, smaller view first in every pair
4. `detect_subsets()` - connected components over pairs and groups
5. `sort_subsets()` - optional
6. within each subset: `fix_views(get_default_fixed_views())` and any
   additional fixed views, then `get_grouped_pairs()`

The module level functions implement the individual steps and can be used on
their own; they never modify their inputs.
"""
import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Hashable, Iterable, Optional, Sequence

from networkx.utils import UnionFind

from ..benchmarking_util import debug_timing
from ._typing_utils import Pair, PairKey
from .group import Group, contains_both, member_of
from .overlap import OverlapDetection
from .range_comparator import RangeComparator
from .subset import Subset, split_pairs

logger = logging.getLogger(__name__)


def remove_non_existent_views_in_groups(
    views: Iterable[Hashable], groups: Iterable[Group]
) -> list[Group]:
    """Restrict every group to views that exist; drop groups left empty.

    Args:
        views: All views of the setup
        groups: Groups of views, may reference views that are not in `views`

    Returns:
        The cleaned groups, without duplicates, in sorted order
    """
    view_set = set(views)
    cleaned = set()
    for group in groups:
        if not isinstance(group, Group):
            group = Group(group)
        restricted = group.restricted_to(view_set)
        if len(restricted) < len(group):
            logger.debug(
                f"Dropped {len(group) - len(restricted)} unknown view(s) from {group!r}"
            )
        if len(restricted) > 0:
            cleaned.add(restricted)
    return sorted(cleaned)


def all_pairs(
    views: Sequence[Hashable],
    groups: Iterable[Group],
    range_comparator: RangeComparator,
) -> list[Pair]:
    """All pairs (views[i], views[j]) with i < j that may be compared.

    Pairs whose views share a group, or that are out of range for the
    comparator, are skipped.
    """
    groups = list(groups)
    pairs: list[Pair] = []
    for i in range(len(views) - 1):
        for j in range(i + 1, len(views)):
            view_a = views[i]
            view_b = views[j]
            if not contains_both(view_a, view_b, groups) and range_comparator.in_range(
                view_a, view_b
            ):
                pairs.append((view_a, view_b))
    return pairs


def remove_redundant_pairs(
    pairs: Iterable[Pair], groups: Iterable[Group]
) -> tuple[list[Pair], list[Pair]]:
    """Remove pairs that do not need to be compared because of grouping.

    A pair is redundant if both views are in the same group, or if a group
    containing the first view overlaps a group containing the second view
    (the two views are then linked through a shared third view).

    Returns:
        Tuple of (kept pairs, removed pairs)
    """
    groups = list(groups)

    def is_redundant(pair: Pair) -> bool:
        view_a, view_b = pair
        if contains_both(view_a, view_b, groups):
            return True
        groups_b = member_of(view_b, groups)
        return any(
            group_a.overlaps(group_b)
            for group_a in member_of(view_a, groups)
            for group_b in groups_b
        )

    kept, removed = split_pairs(pairs, is_redundant)
    for pair in removed:
        logger.debug(f"Removed redundant pair {pair}")
    return kept, removed


def remove_non_overlapping_pairs(
    pairs: Iterable[Pair], ovlp: OverlapDetection
) -> tuple[list[Pair], list[Pair]]:
    """Remove pairs whose views do not overlap according to `ovlp`.

    Returns:
        Tuple of (kept pairs, removed pairs)
    """
    return split_pairs(pairs, lambda pair: not ovlp.overlaps(pair[0], pair[1]))


def reorder_pairs(
    pairs: Iterable[Pair], key: Optional[Callable[[Any], Any]] = None
) -> list[Pair]:
    """Swap the views of each pair so that the smaller one comes first.

    The order of the pairs in the list is left unchanged.
    """
    if key is None:
        key = _identity
    return [
        (view_a, view_b) if key(view_a) <= key(view_b) else (view_b, view_a)
        for view_a, view_b in pairs
    ]


def _identity(view: Any) -> Any:
    return view


def merge_sets(union_find: UnionFind, views: Iterable[Hashable]) -> bool:
    """Merge the precursor sets containing `views` into one.

    Requests naming fewer than two distinct sets are a no-op.

    Returns:
        True if sets were merged
    """
    roots = {union_find[view] for view in views}
    if len(roots) < 2:
        return False
    union_find.union(*roots)
    return True


def find_groups_associated_with_subset(
    subset_views: Iterable[Hashable], groups: Iterable[Group]
) -> set[Group]:
    """All groups that have at least one view in the subset."""
    subset_views = frozenset(subset_views)
    return {group for group in groups if not group.views.isdisjoint(subset_views)}


def detect_subsets(
    views: Sequence[Hashable],
    pairs: Sequence[Pair],
    groups: Iterable[Group],
) -> list[Subset]:
    """Split views into subsets that can be registered independently.

    Views connected by a pair end up in the same subset, and so do all views
    of a group even without a pair between them. Views without any pair form
    subsets of their own with nothing to compare.

    Subsets are returned in order of the first appearance of any of their
    views, scanning the pairs first and then the list of views. Within a
    subset the pairs keep their input order.

    Args:
        views: All views
        pairs: Pairs of views that need to be compared
        groups: Groups of views that are transformed together

    Returns:
        List of subsets partitioning `views`

    Raises:
        RuntimeError: If a group ends up spread over several subsets
    """
    groups = list(groups)
    union_find = UnionFind()

    first_seen: dict[Hashable, None] = {}
    for view_a, view_b in pairs:
        first_seen.setdefault(view_a)
        first_seen.setdefault(view_b)
        union_find.union(view_a, view_b)

    # isolated views under the active range comparator
    for view in views:
        first_seen.setdefault(view)
        union_find[view]

    # grouped views have to be solved together, even without a pair between them
    for group in groups:
        present = [view for view in group if view in first_seen]
        if merge_sets(union_find, present):
            logger.debug(f"Merged subsets linked by {group!r}")

    components: dict[Hashable, tuple[list, list]] = {}
    for view in first_seen:
        components.setdefault(union_find[view], ([], []))[0].append(view)
    for pair in pairs:
        components[union_find[pair[0]]][1].append(pair)

    subsets = [
        Subset(
            subset_views,
            subset_pairs,
            find_groups_associated_with_subset(subset_views, groups),
        )
        for subset_views, subset_pairs in components.values()
    ]

    _check_groups_contained(subsets)
    return subsets


def _check_groups_contained(subsets: Iterable[Subset]) -> None:
    for subset in subsets:
        for group in subset.groups:
            if not group.views <= subset.views:
                raise RuntimeError(
                    f"{group!r} only partially overlaps a subset of {len(subset)} views; "
                    "groups must be fully contained in exactly one subset"
                )


def sort_subsets(subsets: list[Subset], key: Optional[PairKey] = None) -> None:
    """Sort pairs within every subset, then the subsets by their first pair.

    Subsets without pairs come first. Both sorts are stable and in place.

    Args:
        subsets: The subsets to sort
        key: Sort key for pairs, defaults to the first view of the pair
    """
    if key is None:
        key = _first_view

    for subset in subsets:
        subset.pairs.sort(key=key)

    subsets.sort(
        key=lambda subset: (1, key(subset.pairs[0])) if subset.pairs else (0,)
    )


def _first_view(pair: Pair) -> Any:
    return pair[0]


class PairwiseSetup(ABC):
    """Base class for pairwise comparison strategies.

    Subclasses define the candidate pairs and the views fixed by default; the
    redundancy removal and the subset detection are shared by all of them.
    """

    def __init__(self, views: Iterable[Hashable], groups: Optional[Iterable[Any]] = None):
        """Initialize with the views to register and their grouping.

        Args:
            views: All views to include, in the order used to enumerate pairs
            groups: Groups of views transformed together; views that are not in
                `views` are dropped from the groups and empty groups are ignored
        """
        self.views: list = list(views)
        if len(set(self.views)) != len(self.views):
            raise ValueError("Views passed to a pairwise setup must be unique")

        self.groups: list[Group] = remove_non_existent_views_in_groups(
            self.views, groups if groups is not None else ()
        )
        self.pairs: Optional[list[Pair]] = None
        self.subsets: Optional[list[Subset]] = None
        # pairs that were defined but belong to no subset
        self.pairs_outside_subsets: list[Pair] = []

    @abstractmethod
    def define_pairs_abstract(self) -> list[Pair]:
        """All candidate pairs of this strategy, before redundancy removal."""
        pass

    @abstractmethod
    def get_name(self) -> str:
        """Get a descriptive name for this strategy."""
        pass

    def get_default_fixed_views(self) -> list:
        """Views that have to be fixed for this strategy to work."""
        return []

    def define_pairs(self) -> list[Pair]:
        """Identify all pairs that need to be compared.

        Returns:
            The redundant pairs that were removed
        """
        with debug_timing(f"{self.get_name()}: define pairs"):
            candidates = self.define_pairs_abstract()
            self.pairs, removed = remove_redundant_pairs(candidates, self.groups)

        logger.info(
            f"{self.get_name()}: {len(self.pairs)} pair(s) to compare among "
            f"{len(self.views)} view(s), {len(removed)} redundant pair(s) removed"
        )
        return removed

    def remove_non_overlapping_pairs(self, ovlp: OverlapDetection) -> list[Pair]:
        """Remove pairs whose views do not overlap.

        Returns:
            The removed pairs
        """
        pairs = self._require_pairs()
        kept, removed = remove_non_overlapping_pairs(pairs, ovlp)
        pairs[:] = kept

        logger.info(f"{self.get_name()}: removed {len(removed)} non-overlapping pair(s)")
        return removed

    def reorder_pairs(self, key: Optional[Callable[[Any], Any]] = None) -> None:
        """Put the smaller view first in every pair."""
        pairs = self._require_pairs()
        pairs[:] = reorder_pairs(pairs, key)

    def detect_subsets(self) -> None:
        """Find the subsets of views that can be registered independently."""
        pairs = self._require_pairs()
        with debug_timing(f"{self.get_name()}: detect subsets"):
            self.pairs_outside_subsets = []
            self.subsets = detect_subsets(self.views, pairs, self.groups)
        logger.info(f"{self.get_name()}: found {len(self.subsets)} subset(s)")

    def sort_subsets(self, key: Optional[PairKey] = None) -> None:
        """Sort each subset's pairs, then the subsets by their first pair."""
        sort_subsets(self._require_subsets(), key)

    def fix_views_in_all_subsets(self, fixed_views: Iterable[Hashable]) -> list[Pair]:
        """Fix views in every subset.

        Returns:
            All pairs removed because of the fixed views
        """
        fixed_views = list(fixed_views)
        removed: list[Pair] = []
        for subset in self._require_subsets():
            removed.extend(subset.fix_views(fixed_views))
        return removed

    def _require_pairs(self) -> list[Pair]:
        if self.pairs is None:
            raise RuntimeError("Pairs have not been defined yet, call define_pairs() first")
        return self.pairs

    def _require_subsets(self) -> list[Subset]:
        if self.subsets is None:
            raise RuntimeError(
                "Subsets have not been detected yet, call detect_subsets() first"
            )
        return self.subsets
