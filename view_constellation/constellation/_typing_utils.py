"""Type aliases used throughout the constellation package.

Views are opaque tokens: anything hashable with a total order. Pairs are plain
2-tuples of views; grouped pairs are 2-tuples of groups.
"""
from typing import TYPE_CHECKING, Any, Callable, Tuple

if TYPE_CHECKING:
    from .group import Group

Pair = Tuple[Any, Any]
GroupedPair = Tuple["Group", "Group"]

PairKey = Callable[[Pair], Any]
