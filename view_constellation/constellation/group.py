"""View groups.

A group is a set of views that share one rigid transformation, so they are
registered as a single unit. Groups are immutable and compare by their members,
which makes them usable as set members and dictionary keys.
"""
from typing import Any, Collection, Hashable, Iterable, Iterator


class Group:
    """An unordered, immutable set of views treated as one rigid unit."""

    def __init__(self, views: Iterable[Hashable] = ()):
        self._views = frozenset(views)
        # iteration order is the sorted member order so all outputs are deterministic
        self._ordered = tuple(sorted(self._views))

    @classmethod
    def single(cls, view: Hashable) -> "Group":
        """Group with exactly one member."""
        return cls((view,))

    @property
    def views(self) -> frozenset:
        return self._views

    def contains(self, view: Hashable) -> bool:
        return view in self._views

    def overlaps(self, other: "Group") -> bool:
        """True if the two groups share at least one view."""
        return not self._views.isdisjoint(other._views)

    def restricted_to(self, views: Collection[Hashable]) -> "Group":
        """A new group holding only the members that are also in `views`."""
        return Group(v for v in self._ordered if v in views)

    def sort_key(self) -> tuple:
        return self._ordered

    def __contains__(self, view: object) -> bool:
        return view in self._views

    def __iter__(self) -> Iterator[Any]:
        return iter(self._ordered)

    def __len__(self) -> int:
        return len(self._views)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Group):
            return NotImplemented
        return self._views == other._views

    def __hash__(self) -> int:
        return hash(self._views)

    def __lt__(self, other: "Group") -> bool:
        return self._ordered < other._ordered

    def __repr__(self) -> str:
        return f"Group({list(self._ordered)!r})"


def member_of(view: Hashable, groups: Iterable[Group]) -> list[Group]:
    """All groups that contain `view`."""
    return [group for group in groups if view in group]


def contains_both(view_a: Hashable, view_b: Hashable, groups: Iterable[Group]) -> bool:
    """True if a single group contains both views."""
    return any(view_a in group and view_b in group for group in groups)


def groups_overlap(group_a: Group, group_b: Group) -> bool:
    return group_a.overlaps(group_b)
