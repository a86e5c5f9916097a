"""Tests for range comparators."""
import pytest

from view_constellation.constellation.range_comparator import (
    AllInRange,
    ReferenceTimepointRange,
    TimepointRange,
)
from view_constellation.constellation.view_id import ViewId


def test_all_in_range():
    comparator = AllInRange()
    assert comparator.in_range(ViewId(0, 0), ViewId(100, 3))
    assert comparator.get_name() == "all_in_range"


def test_timepoint_range_zero_is_same_timepoint_only():
    comparator = TimepointRange(0)
    assert comparator.in_range(ViewId(3, 0), ViewId(3, 1))
    assert not comparator.in_range(ViewId(3, 0), ViewId(4, 0))


def test_timepoint_range_radius():
    comparator = TimepointRange(2)
    assert comparator.in_range(ViewId(1, 0), ViewId(3, 0))
    assert comparator.in_range(ViewId(3, 0), ViewId(1, 0))
    assert not comparator.in_range(ViewId(0, 0), ViewId(3, 0))
    assert comparator.get_name() == "timepoint_range_2"


def test_timepoint_range_rejects_negative_radius():
    with pytest.raises(ValueError):
        TimepointRange(-1)


def test_timepoint_range_custom_accessor():
    comparator = TimepointRange(1, timepoint_of=lambda name: int(name.split("-")[0]))
    assert comparator.in_range("4-a", "5-b")
    assert not comparator.in_range("4-a", "6-b")


def test_reference_timepoint_range():
    comparator = ReferenceTimepointRange(reference_timepoint=5)
    # same timepoint
    assert comparator.in_range(ViewId(2, 0), ViewId(2, 1))
    # either view at the reference
    assert comparator.in_range(ViewId(5, 0), ViewId(2, 1))
    assert comparator.in_range(ViewId(2, 0), ViewId(5, 1))
    # two different non-reference timepoints
    assert not comparator.in_range(ViewId(2, 0), ViewId(3, 0))
    assert comparator.get_name() == "reference_timepoint_5"
