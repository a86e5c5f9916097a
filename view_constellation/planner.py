import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Hashable, Iterable, Optional

from .benchmarking_util import debug_timing
from .constellation._typing_utils import Pair
from .constellation.overlap import OverlapDetection
from .constellation.pairwise_setup import PairwiseSetup
from .constellation.subset import Subset
from .parameters import ConstellationParameters, ViewDataset


def _to_json(view: Any) -> Any:
    # ViewId and other tuple tokens become lists, anything else is kept as is
    return list(view) if isinstance(view, tuple) else view


@dataclass
class ProgressCallbacks:
    pairs_defined: Callable[[int], None]
    subsets_detected: Callable[[int], None]
    subset_fixed: Callable[[int, int], None]

    @classmethod
    def no_op(cls):
        return cls(
            pairs_defined=lambda _n: None,
            subsets_detected=lambda _n: None,
            subset_fixed=lambda _i, _n: None,
        )


@dataclass
class ConstellationPlan:
    """The outcome of planning: independent subsets and what was pruned on the way."""

    strategy: str
    subsets: list[Subset]
    removed_redundant: list[Pair] = field(default_factory=list)
    removed_non_overlapping: list[Pair] = field(default_factory=list)
    removed_fixed: list[Pair] = field(default_factory=list)
    outside_subsets: list[Pair] = field(default_factory=list)

    def registration_jobs(self) -> list[Subset]:
        """Subsets with at least one pair left to compare."""
        return [subset for subset in self.subsets if not subset.is_trivial()]

    def num_pairs(self) -> int:
        return sum(len(subset.pairs) for subset in self.subsets)

    def to_dict(self, grouped_pairs: bool = False) -> dict[str, Any]:
        """JSON-ready summary of the plan."""
        subsets = []
        for subset in self.subsets:
            entry: dict[str, Any] = {
                "views": [_to_json(view) for view in subset],
                "pairs": [[_to_json(a), _to_json(b)] for a, b in subset.pairs],
                "groups": [
                    [_to_json(view) for view in group] for group in sorted(subset.groups)
                ],
                "fixed_views": [_to_json(view) for view in sorted(subset.fixed_views)],
            }
            if grouped_pairs:
                entry["grouped_pairs"] = [
                    [[_to_json(view) for view in ga], [_to_json(view) for view in gb]]
                    for ga, gb in subset.get_grouped_pairs()
                ]
            subsets.append(entry)

        return {
            "strategy": self.strategy,
            "num_pairs": self.num_pairs(),
            "num_removed_redundant": len(self.removed_redundant),
            "num_removed_non_overlapping": len(self.removed_non_overlapping),
            "num_removed_fixed": len(self.removed_fixed),
            "num_outside_subsets": len(self.outside_subsets),
            "subsets": subsets,
        }


class ConstellationPlanner:
    """Runs a pairwise setup from pair definition to fixed subsets."""

    def __init__(
        self,
        setup: PairwiseSetup,
        overlap: Optional[OverlapDetection] = None,
        sort: bool = True,
        use_default_fixed_views: bool = True,
        fixed_views: Optional[Iterable[Hashable]] = None,
        callbacks: ProgressCallbacks = ProgressCallbacks.no_op(),
    ):
        self.setup = setup
        self.overlap = overlap
        self.sort = sort
        self.use_default_fixed_views = use_default_fixed_views
        self.fixed_views = list(fixed_views) if fixed_views is not None else []
        self.callbacks = callbacks

    @classmethod
    def from_parameters(
        cls, params: ConstellationParameters, dataset: ViewDataset
    ) -> "ConstellationPlanner":
        setup = params.create_pairwise_setup(dataset.view_ids(), dataset.view_groups())
        return cls(
            setup,
            overlap=dataset.overlap_detection(),
            sort=params.sort_subsets,
            use_default_fixed_views=params.fix_default_views,
            fixed_views=params.fixed_view_ids(),
        )

    def fixed_views_to_apply(self) -> list:
        fixed = []
        if self.use_default_fixed_views:
            fixed.extend(self.setup.get_default_fixed_views())
        for view in self.fixed_views:
            if view not in fixed:
                fixed.append(view)
        return fixed

    def run(self) -> ConstellationPlan:
        setup = self.setup
        name = setup.get_name()

        with debug_timing(f"{name}: planning"):
            removed_redundant = setup.define_pairs()
            self.callbacks.pairs_defined(len(setup.pairs))

            removed_non_overlapping: list[Pair] = []
            if self.overlap is not None:
                removed_non_overlapping = setup.remove_non_overlapping_pairs(self.overlap)

            setup.reorder_pairs()
            setup.detect_subsets()
            self.callbacks.subsets_detected(len(setup.subsets))

            if self.sort:
                setup.sort_subsets()

            fixed_views = self.fixed_views_to_apply()
            removed_fixed: list[Pair] = []
            for i, subset in enumerate(setup.subsets):
                had_pairs = not subset.is_trivial()
                removed_fixed.extend(subset.fix_views(fixed_views))
                if had_pairs and subset.is_trivial():
                    logging.warning(
                        f"{name}: all pairs of subset {i} were removed by fixing views"
                    )
                self.callbacks.subset_fixed(i, len(setup.subsets))

        plan = ConstellationPlan(
            strategy=name,
            subsets=setup.subsets,
            removed_redundant=removed_redundant,
            removed_non_overlapping=removed_non_overlapping,
            removed_fixed=removed_fixed,
            outside_subsets=list(setup.pairs_outside_subsets),
        )
        logging.info(
            f"{name}: {len(plan.registration_jobs())} subset(s) to register "
            f"with {plan.num_pairs()} pair(s), {len(fixed_views)} fixed view(s)"
        )
        return plan
