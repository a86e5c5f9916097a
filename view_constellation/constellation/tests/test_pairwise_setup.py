"""Tests for the shared pairwise setup algorithms."""
import random

import networkx as nx
import pytest
from networkx.utils import UnionFind

from view_constellation.constellation.group import Group, contains_both, member_of
from view_constellation.constellation.overlap import PrecomputedOverlap
from view_constellation.constellation.pairwise_setup import (
    all_pairs,
    detect_subsets,
    find_groups_associated_with_subset,
    merge_sets,
    remove_non_overlapping_pairs,
    remove_redundant_pairs,
    reorder_pairs,
    sort_subsets,
)
from view_constellation.constellation.range_comparator import AllInRange, TimepointRange
from view_constellation.constellation.strategies import AllToAll
from view_constellation.constellation.subset import Subset
from view_constellation.constellation.view_id import ViewId
from view_constellation.testutil import make_views, view_partition

A = ViewId(0, 0)
B = ViewId(0, 1)
C = ViewId(1, 0)
D = ViewId(1, 1)
E = ViewId(2, 0)


@pytest.fixture
def random_setup():
    """An all-to-all setup over 20 views with random groups and overlaps."""
    rng = random.Random(42)
    views = make_views(4, 5)
    groups = [Group(rng.sample(views, rng.randint(2, 3))) for _ in range(4)]
    overlapping = [
        (a, b)
        for i, a in enumerate(views)
        for b in views[i + 1:]
        if rng.random() < 0.08
    ]

    setup = AllToAll(views, groups)
    setup.define_pairs()
    setup.remove_non_overlapping_pairs(PrecomputedOverlap(overlapping))
    setup.reorder_pairs()
    setup.detect_subsets()
    return setup


def _reference_partition(views, pairs, groups) -> set[frozenset]:
    graph = nx.Graph()
    graph.add_nodes_from(views)
    graph.add_edges_from(pairs)
    for group in groups:
        members = list(group)
        graph.add_edges_from(zip(members, members[1:]))
    return {frozenset(component) for component in nx.connected_components(graph)}


def test_all_pairs_respects_order_groups_and_range():
    views = [A, B, C, D, E]
    pairs = all_pairs(views, [Group([A, C])], TimepointRange(1))

    assert pairs == [(A, B), (A, D), (B, C), (B, D), (C, D), (C, E), (D, E)]


def test_all_pairs_single_and_no_views():
    assert all_pairs([A], [], AllInRange()) == []
    assert all_pairs([], [], AllInRange()) == []


def test_remove_redundant_pairs_same_group():
    pairs = [(A, B), (A, C), (C, D)]
    kept, removed = remove_redundant_pairs(pairs, [Group([A, C])])
    assert kept == [(A, B), (C, D)]
    assert removed == [(A, C)]


def test_remove_redundant_pairs_overlapping_groups():
    # A and C are in different groups that share B
    groups = [Group([A, B]), Group([B, C])]
    kept, removed = remove_redundant_pairs([(A, C), (A, D), (C, D)], groups)
    assert removed == [(A, C)]
    assert kept == [(A, D), (C, D)]


def test_remove_redundant_pairs_no_groups():
    pairs = [(A, B), (C, D)]
    assert remove_redundant_pairs(pairs, []) == (pairs, [])


def test_remove_non_overlapping_pairs():
    ovlp = PrecomputedOverlap([(B, A), (C, D)])
    kept, removed = remove_non_overlapping_pairs([(A, B), (A, C), (C, D)], ovlp)
    assert kept == [(A, B), (C, D)]
    assert removed == [(A, C)]


def test_reorder_pairs():
    assert reorder_pairs([(B, A), (A, C), (D, C)]) == [(A, B), (A, C), (C, D)]


def test_reorder_pairs_with_key():
    by_setup = reorder_pairs([(A, D), (C, B)], key=lambda view: view.setup)
    assert by_setup == [(A, D), (C, B)]
    by_setup = reorder_pairs([(D, C)], key=lambda view: view.setup)
    assert by_setup == [(C, D)]


def test_merge_sets_needs_two_sets():
    union_find = UnionFind()
    union_find.union(A, B)

    assert not merge_sets(union_find, [])
    assert not merge_sets(union_find, [A])
    assert not merge_sets(union_find, [A, B])
    assert merge_sets(union_find, [B, C])
    assert union_find[A] == union_find[C]


def test_detect_subsets_disjoint_pairs():
    subsets = detect_subsets([A, B, C, D], [(A, B), (C, D)], [])

    assert [list(subset) for subset in subsets] == [[A, B], [C, D]]
    assert [subset.pairs for subset in subsets] == [[(A, B)], [(C, D)]]


def test_detect_subsets_merges_on_connecting_pair():
    subsets = detect_subsets([A, B, C, D], [(A, B), (C, D), (B, C)], [])

    assert len(subsets) == 1
    assert subsets[0].views == {A, B, C, D}
    # the pair that joined both sets is kept as well
    assert subsets[0].pairs == [(A, B), (C, D), (B, C)]


def test_detect_subsets_isolated_views():
    subsets = detect_subsets([A, B, C], [(A, B)], [])

    assert view_partition(subsets) == {frozenset([A, B]), frozenset([C])}
    assert subsets[1].pairs == []
    assert subsets[1].is_trivial()


def test_detect_subsets_merges_groups():
    group = Group([A, C])
    subsets = detect_subsets([A, B, C, D], [(A, B), (C, D)], [group])

    assert len(subsets) == 1
    assert subsets[0].views == {A, B, C, D}
    assert subsets[0].pairs == [(A, B), (C, D)]
    assert subsets[0].groups == {group}


def test_detect_subsets_group_of_isolated_views():
    subsets = detect_subsets([A, B, C], [], [Group([A, C])])
    assert view_partition(subsets) == {frozenset([A, C]), frozenset([B])}


def test_detect_subsets_empty():
    assert detect_subsets([], [], []) == []


def test_detect_subsets_rejects_partially_contained_group():
    # ViewId(9, 9) is not one of the views, so the group cannot be fully inside a subset
    with pytest.raises(RuntimeError):
        detect_subsets([A, B], [], [Group([A, ViewId(9, 9)])])


def test_find_groups_associated_with_subset():
    groups = [Group([A, B]), Group([B, C]), Group([D])]
    assert find_groups_associated_with_subset({B}, groups) == {
        Group([A, B]),
        Group([B, C]),
    }
    assert find_groups_associated_with_subset({E}, groups) == set()


def test_sort_subsets():
    first = Subset([C, D], [(C, D)])
    trivial = Subset([E])
    middle = Subset([A, B, C], [(B, C), (A, B)])
    subsets = [first, trivial, middle]

    sort_subsets(subsets)

    assert subsets == [trivial, middle, first]
    assert middle.pairs == [(A, B), (B, C)]


def test_sort_subsets_is_stable_for_equal_first_views():
    pairs = [(A, C), (A, B)]
    subset = Subset([A, B, C], list(pairs))
    sort_subsets([subset])
    # only the first view is compared
    assert subset.pairs == pairs


def test_sort_subsets_custom_key():
    subset = Subset([A, B, C], [(A, C), (A, B)])
    sort_subsets([subset], key=lambda pair: pair)
    assert subset.pairs == [(A, B), (A, C)]


def test_partition_matches_connected_components(random_setup):
    subsets = random_setup.subsets

    expected = _reference_partition(
        random_setup.views, random_setup.pairs, random_setup.groups
    )
    assert view_partition(subsets) == expected
    assert sum(len(subset) for subset in subsets) == len(random_setup.views)


def test_subsets_are_disjoint_in_pairs(random_setup):
    all_subset_pairs = [pair for subset in random_setup.subsets for pair in subset.pairs]

    assert sorted(all_subset_pairs) == sorted(random_setup.pairs)
    assert len(set(all_subset_pairs)) == len(all_subset_pairs)
    for subset in random_setup.subsets:
        for view_a, view_b in subset.pairs:
            assert subset.contains(view_a) and subset.contains(view_b)


def test_groups_fully_contained(random_setup):
    for group in random_setup.groups:
        containing = [s for s in random_setup.subsets if not s.views.isdisjoint(group.views)]
        assert len(containing) == 1
        assert group.views <= containing[0].views
        assert group in containing[0].groups


def test_no_redundant_pairs_survive(random_setup):
    groups = random_setup.groups
    for view_a, view_b in random_setup.pairs:
        assert not contains_both(view_a, view_b, groups)
        for group_a in member_of(view_a, groups):
            for group_b in member_of(view_b, groups):
                assert not group_a.overlaps(group_b)


def test_pairs_in_canonical_order(random_setup):
    for view_a, view_b in random_setup.pairs:
        assert view_a <= view_b
