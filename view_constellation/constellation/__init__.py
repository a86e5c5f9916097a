"""Planning of pairwise view comparisons.

This module decides which views have to be compared with each other for
registration, and splits the comparisons into subsets that can be solved
independently.
"""

from .group import Group, contains_both, groups_overlap, member_of
from .overlap import OverlapDetection, PrecomputedOverlap
from .pairwise_setup import (
    PairwiseSetup,
    detect_subsets,
    remove_non_overlapping_pairs,
    remove_redundant_pairs,
    reorder_pairs,
    sort_subsets,
)
from .range_comparator import (
    AllInRange,
    RangeComparator,
    ReferenceTimepointRange,
    TimepointRange,
)
from .strategies import AllToAll, AllToAllRange, IndividualTimepoints, ReferenceTimepoint
from .subset import Subset
from .view_id import ViewId

__all__ = [
    'Group',
    'contains_both',
    'groups_overlap',
    'member_of',
    'OverlapDetection',
    'PrecomputedOverlap',
    'PairwiseSetup',
    'detect_subsets',
    'remove_non_overlapping_pairs',
    'remove_redundant_pairs',
    'reorder_pairs',
    'sort_subsets',
    'AllInRange',
    'RangeComparator',
    'ReferenceTimepointRange',
    'TimepointRange',
    'AllToAll',
    'AllToAllRange',
    'IndividualTimepoints',
    'ReferenceTimepoint',
    'Subset',
    'ViewId',
]
