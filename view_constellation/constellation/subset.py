"""Subsets of views that can be registered independently.

A subset is one connected component of the comparison graph: its views, the
pairs that still have to be compared inside it, the groups touching it and
the views that are fixed (anchored) within it. Subsets never share views or
pairs with each other, so each one can be handed to its own worker.
"""
import logging
from typing import Any, Callable, Collection, Hashable, Iterable, Iterator, Optional

from ._typing_utils import GroupedPair, Pair
from .group import Group

logger = logging.getLogger(__name__)


def split_pairs(
    pairs: Iterable[Pair], remove: Callable[[Pair], bool]
) -> tuple[list[Pair], list[Pair]]:
    """Partition pairs into (kept, removed) without touching the input."""
    kept: list[Pair] = []
    removed: list[Pair] = []
    for pair in pairs:
        (removed if remove(pair) else kept).append(pair)
    return kept, removed


def filter_present_views(
    views: Collection[Hashable], fixed_views: Iterable[Hashable]
) -> set:
    """The fixed views that are also members of `views`."""
    return {view for view in fixed_views if view in views}


def fix_views(
    fixed_views: Collection[Hashable],
    pairs: Iterable[Pair],
    groups: Iterable[Group],
) -> tuple[list[Pair], list[Pair]]:
    """Drop the pairs made unnecessary by a set of fixed views.

    A pair is dropped if both of its views are fixed, or if its views belong to
    two different groups that each contain a fixed view (both groups are already
    anchored, so comparing them adds nothing).

    Args:
        fixed_views: Views that are fixed
        pairs: Pairs to filter
        groups: Groups of views that are transformed together

    Returns:
        Tuple of (kept pairs, removed pairs)
    """
    kept, removed = split_pairs(
        pairs, lambda pair: pair[0] in fixed_views and pair[1] in fixed_views
    )

    fixed_groups = [
        group for group in sorted(groups) if not group.views.isdisjoint(fixed_views)
    ]

    if len(fixed_groups) > 1:

        def spans_fixed_groups(pair: Pair) -> bool:
            groups_a = [group for group in fixed_groups if pair[0] in group]
            groups_b = [group for group in fixed_groups if pair[1] in group]
            return any(ga != gb for ga in groups_a for gb in groups_b)

        kept, removed_between_groups = split_pairs(kept, spans_fixed_groups)
        removed.extend(removed_between_groups)

    return kept, removed


def create_groups_for_all_views(
    views: Iterable[Hashable], groups: Iterable[Group]
) -> list[Group]:
    """Groups covering every view.

    Returns the existing groups (sorted) followed by one single-view group for
    each view that no existing group contains (in view order).
    """
    covering = sorted(groups)
    covered = set()
    for group in covering:
        covered.update(group.views)

    for view in views:
        if view not in covered:
            covering.append(Group.single(view))
    return covering


class Subset:
    """A connected set of views with the pairs to compare between them."""

    def __init__(
        self,
        views: Iterable[Hashable],
        pairs: Optional[list[Pair]] = None,
        groups: Optional[Iterable[Group]] = None,
    ):
        self.group = Group(views)
        self.pairs: list[Pair] = list(pairs) if pairs is not None else []
        self.groups: set[Group] = set(groups) if groups is not None else set()
        self.fixed_views: set = set()

    @property
    def views(self) -> frozenset:
        return self.group.views

    def contains(self, view: Hashable) -> bool:
        return self.group.contains(view)

    def is_trivial(self) -> bool:
        """True if there is nothing left to compare in this subset."""
        return len(self.pairs) == 0

    def fix_views(self, fixed_views: Iterable[Hashable]) -> list[Pair]:
        """Fix additional views and drop the pairs that no longer need comparing.

        Only the views that are members of this subset are taken over; they are
        added to the views fixed earlier.

        Args:
            fixed_views: Views to fix, may include views of other subsets

        Returns:
            The removed pairs
        """
        self.fixed_views = filter_present_views(self.views, fixed_views) | self.fixed_views

        kept, removed = fix_views(self.fixed_views, self.pairs, self.groups)
        self.pairs[:] = kept

        if removed:
            logger.debug(
                f"Fixing {len(self.fixed_views)} view(s) removed {len(removed)} pair(s) "
                f"from subset of {len(self)} views"
            )
        return removed

    def get_grouped_pairs(self) -> list[GroupedPair]:
        """Pairs of groups that need to be compared.

        Views that are not part of any group act as groups of one. Every pair
        (a, b) yields one grouped pair per combination of a group containing a
        and a group containing b; (g1, g2) and (g2, g1) count as the same.
        """
        covering = create_groups_for_all_views(sorted(self.views), self.groups)

        seen: set[tuple[int, int]] = set()
        grouped: list[GroupedPair] = []
        for view_a, view_b in self.pairs:
            indices_a = [i for i, group in enumerate(covering) if view_a in group]
            indices_b = [j for j, group in enumerate(covering) if view_b in group]
            for i in indices_a:
                for j in indices_b:
                    if (i, j) in seen or (j, i) in seen:
                        continue
                    seen.add((i, j))
                    grouped.append((covering[i], covering[j]))
        return grouped

    def __iter__(self) -> Iterator[Any]:
        return iter(self.group)

    def __len__(self) -> int:
        return len(self.group)

    def __repr__(self) -> str:
        return (
            f"Subset(views={list(self.group)!r}, pairs={self.pairs!r}, "
            f"fixed={sorted(self.fixed_views)!r})"
        )
