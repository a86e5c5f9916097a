import enum
import logging
import os
from typing import Annotated, Any, Iterable, Optional, Union

from pydantic import AfterValidator, BaseModel, Field, model_validator

from .constellation.group import Group
from .constellation.overlap import PrecomputedOverlap
from .constellation.pairwise_setup import PairwiseSetup
from .constellation.range_comparator import TimepointRange
from .constellation.strategies import (
    AllToAll,
    AllToAllRange,
    IndividualTimepoints,
    ReferenceTimepoint,
)
from .constellation.view_id import ViewId

ViewTuple = tuple[int, int]


class PairingStrategy(enum.Enum):
    all_to_all = "all-to-all"
    all_to_all_range = "all-to-all-range"
    individual_timepoints = "individual-timepoints"
    reference_timepoint = "reference-timepoint"


def input_path_exists(path: str) -> str:
    """Pydantic validator to check the path exists."""
    if not os.path.exists(path):
        raise ValueError(f"Dataset file does not exist: {path}")

    return path


class ConstellationParameters(
    BaseModel,
    use_attribute_docstrings=True,
):
    """Parameters for planning the pairwise comparisons of a dataset."""

    dataset_file: Annotated[str, AfterValidator(input_path_exists)]
    """A JSON file describing the views, groups and (optionally) overlapping pairs.

    See `ViewDataset` for the expected layout.
    """

    strategy: PairingStrategy = PairingStrategy.all_to_all
    """Which pairs of views are candidates for comparison."""

    timepoint_range: int = Field(default=1, ge=0)
    """Maximal timepoint distance of compared views.

    Only used by the all-to-all-range strategy.
    """

    reference_timepoint: Optional[int] = None
    """The timepoint every other timepoint is registered against.

    Required by the reference-timepoint strategy, ignored otherwise.
    """

    fix_default_views: bool = True
    """Whether to fix the views the strategy fixes by default (e.g. the reference timepoint)."""

    fixed_views: list[ViewTuple] = []
    """Additional views to fix, as [timepoint, setup] pairs."""

    sort_subsets: bool = True
    """Sort the pairs within each subset and the subsets by their first pair."""

    grouped_pairs: bool = False
    """Include the group-level pairs of every subset in the output."""

    verbose: bool = False
    """Show debug-level logging."""

    @model_validator(mode="after")
    def _check_reference_timepoint(self) -> "ConstellationParameters":
        if (
            self.strategy == PairingStrategy.reference_timepoint
            and self.reference_timepoint is None
        ):
            raise ValueError(
                "reference_timepoint is required for the reference-timepoint strategy"
            )
        return self

    def fixed_view_ids(self) -> list[ViewId]:
        return [ViewId(*view) for view in self.fixed_views]

    def create_pairwise_setup(
        self, views: list[ViewId], groups: Optional[Iterable[Group]] = None
    ) -> PairwiseSetup:
        return create_pairwise_setup(
            self.strategy,
            views,
            groups,
            timepoint_range=self.timepoint_range,
            reference_timepoint=self.reference_timepoint,
        )

    @classmethod
    def from_json_file(cls, json_path: str) -> "ConstellationParameters":
        """Create parameters from a JSON file.

        Args:
            json_path: Path to JSON file containing parameters

        Returns:
            ConstellationParameters: New instance with values from JSON
        """
        with open(json_path) as f:
            return cls.model_validate_json(f.read())

    def to_json_file(self, json_path: str) -> None:
        """Save parameters to a JSON file.

        Args:
            json_path: Path where JSON file should be saved
        """
        with open(json_path, "w") as f:
            f.write(self.model_dump_json(indent=2))


class ViewDataset(BaseModel):
    """Views of a dataset with their grouping, as read from a JSON file.

    Example:
        {
          "views": [[0, 0], [0, 1], [1, 0], [1, 1]],
          "groups": [[[0, 0], [0, 1]]],
          "overlapping_pairs": [[[0, 0], [1, 0]]]
        }
    """

    views: list[ViewTuple]
    groups: list[list[ViewTuple]] = []
    overlapping_pairs: Optional[list[tuple[ViewTuple, ViewTuple]]] = None

    @classmethod
    def from_json_file(cls, json_path: str) -> "ViewDataset":
        with open(json_path) as f:
            return cls.model_validate_json(f.read())

    def view_ids(self) -> list[ViewId]:
        return [ViewId(*view) for view in self.views]

    def view_groups(self) -> list[Group]:
        return [Group(ViewId(*view) for view in group) for group in self.groups]

    def overlap_detection(self) -> Optional[PrecomputedOverlap]:
        """Overlap oracle for the listed pairs, or None if no pairs are listed."""
        if self.overlapping_pairs is None:
            return None
        return PrecomputedOverlap(
            (ViewId(*a), ViewId(*b)) for a, b in self.overlapping_pairs
        )


def create_pairwise_setup(
    strategy: Union[PairingStrategy, str],
    views: list[Any],
    groups: Optional[Iterable[Any]] = None,
    timepoint_range: int = 1,
    reference_timepoint: Optional[int] = None,
) -> PairwiseSetup:
    """Create a pairwise setup for the given strategy.

    Args:
        strategy: A PairingStrategy member or its string value ("all-to-all", ...)
        views: All views to include
        groups: Groups of views transformed together
        timepoint_range: Range for the all-to-all-range strategy
        reference_timepoint: Reference for the reference-timepoint strategy

    Returns:
        PairwiseSetup instance

    Raises:
        ValueError: If the strategy is not recognized or misses a parameter
    """
    if isinstance(strategy, str):
        try:
            strategy = PairingStrategy(strategy)
        except ValueError:
            raise ValueError(
                f"Unknown pairing strategy: {strategy}. "
                f"Available strategies: {[s.value for s in PairingStrategy]}"
            ) from None

    if strategy == PairingStrategy.all_to_all:
        setup: PairwiseSetup = AllToAll(views, groups)
    elif strategy == PairingStrategy.all_to_all_range:
        setup = AllToAllRange(views, groups, TimepointRange(timepoint_range))
    elif strategy == PairingStrategy.individual_timepoints:
        setup = IndividualTimepoints(views, groups)
    elif strategy == PairingStrategy.reference_timepoint:
        if reference_timepoint is None:
            raise ValueError(
                "reference_timepoint is required for the reference-timepoint strategy"
            )
        setup = ReferenceTimepoint(views, groups, reference_timepoint)
    else:
        raise ValueError(f"Unhandled PairingStrategy enum member: {strategy}")

    logging.debug(f"Created pairwise setup {setup.get_name()} for {len(views)} view(s)")
    return setup
