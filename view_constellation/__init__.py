"""View Constellation Package.

This package plans the pairwise comparisons needed to register a multi-view
microscopy dataset, without performing any registration itself.

Main functionality:
- Pair definition: which views need to be compared under a given strategy
- Redundancy removal: skip comparisons implied by view grouping
- Subset detection: split the comparisons into independently solvable subsets
- View fixing: anchor views and prune comparisons between anchored views

The package exposes the strategies and the planner at the top level for convenience.
"""

from .constellation import (
    AllInRange,
    AllToAll,
    AllToAllRange,
    Group,
    IndividualTimepoints,
    OverlapDetection,
    PairwiseSetup,
    PrecomputedOverlap,
    RangeComparator,
    ReferenceTimepoint,
    ReferenceTimepointRange,
    Subset,
    TimepointRange,
    ViewId,
)
from .parameters import (
    ConstellationParameters,
    PairingStrategy,
    ViewDataset,
    create_pairwise_setup,
)
from .planner import ConstellationPlan, ConstellationPlanner

__all__ = [
    'AllInRange',
    'AllToAll',
    'AllToAllRange',
    'Group',
    'IndividualTimepoints',
    'OverlapDetection',
    'PairwiseSetup',
    'PrecomputedOverlap',
    'RangeComparator',
    'ReferenceTimepoint',
    'ReferenceTimepointRange',
    'Subset',
    'TimepointRange',
    'ViewId',
    'ConstellationParameters',
    'PairingStrategy',
    'ViewDataset',
    'create_pairwise_setup',
    'ConstellationPlan',
    'ConstellationPlanner',
]
