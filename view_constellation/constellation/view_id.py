"""Timepoint/setup view identifiers."""
from typing import Any, Iterable, NamedTuple


class ViewId(NamedTuple):
    """A (timepoint, setup) key identifying one view of a dataset.

    Ordered by timepoint first, then setup.
    """

    timepoint: int
    setup: int

    def __str__(self) -> str:
        return f"tp={self.timepoint}, setup={self.setup}"


def get_timepoint(view: Any) -> int:
    """Timepoint of a view, read from its `timepoint` attribute."""
    return view.timepoint


def timepoints_sorted(views: Iterable[Any], timepoint_of=get_timepoint) -> list[int]:
    """All distinct timepoints of the given views, ascending."""
    return sorted({timepoint_of(view) for view in views})
