import contextlib
import json
import pathlib
import tempfile
from typing import Generator, Iterable, Optional

from .constellation.group import Group
from .constellation.view_id import ViewId

FIXTURES_DIR = pathlib.Path(__file__).parent.parent / "test_fixtures"

PARAMETERS_FIXTURE_FILE = FIXTURES_DIR / "parameters_test" / "parameters.json"

DATASET_FIXTURE_FILE = FIXTURES_DIR / "datasets" / "two_timepoints.json"


def make_views(n_timepoints: int, n_setups: int) -> list[ViewId]:
    """All views of a dataset with the given number of timepoints and setups."""
    return [ViewId(t, s) for t in range(n_timepoints) for s in range(n_setups)]


def view_partition(subsets: Iterable) -> set[frozenset]:
    """The subsets' view sets, as a comparable set of frozensets."""
    return {frozenset(subset.views) for subset in subsets}


@contextlib.contextmanager
def temporary_dataset_file(
    views: list[ViewId],
    groups: Iterable[Group] = (),
    overlapping_pairs: Optional[list[tuple[ViewId, ViewId]]] = None,
    name: str = "dataset.json",
) -> Generator[pathlib.Path, None, None]:
    """Write a dataset description to a temporary JSON file.

    The file is removed when the context exits.
    """
    content: dict = {
        "views": [list(view) for view in views],
        "groups": [[list(view) for view in group] for group in groups],
    }
    if overlapping_pairs is not None:
        content["overlapping_pairs"] = [
            [list(a), list(b)] for a, b in overlapping_pairs
        ]

    with tempfile.TemporaryDirectory() as d:
        path = pathlib.Path(d) / name
        with open(path, "w") as f:
            json.dump(content, f)
        yield path
