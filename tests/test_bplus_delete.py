import itertools

import numpy as np
import pytest

from bplusviz import (
    BPlusTree,
    count_keys,
    find_invariant_violations,
    get_height,
    get_leaves,
)


def _leaf_keys(tree):
    return [leaf.keys for leaf in get_leaves(tree.root)]


def test_delete_from_empty_tree():
    assert BPlusTree(4).delete(1) is False


def test_delete_missing_key_leaves_tree_unchanged():
    tree = BPlusTree.from_keys([10, 20, 30, 40, 50, 5, 15, 25, 35, 45], order=4)
    before = _leaf_keys(tree)
    assert tree.delete(9999) is False
    assert count_keys(tree.root) == 10
    assert _leaf_keys(tree) == before


def test_delete_last_key_empties_tree():
    tree = BPlusTree.from_keys([7], order=4)
    assert tree.delete(7) is True
    assert tree.root is None
    assert tree.delete(7) is False


def test_single_leaf_root_has_no_minimum():
    tree = BPlusTree.from_keys([1, 2, 3], order=4)
    assert tree.delete(2)
    assert tree.root.is_leaf
    assert tree.root.keys == [1, 3]


@pytest.mark.parametrize(
    "deletion_order",
    [
        [5, 3, 8, 1, 9, 2, 7],
        [1, 2, 3, 5, 7, 8, 9],
        [9, 8, 7, 5, 3, 2, 1],
        [7, 1, 9, 2, 8, 3, 5],
    ],
)
def test_insert_then_delete_all_empties_tree(deletion_order):
    tree = BPlusTree.from_keys([5, 3, 8, 1, 9, 2, 7], order=4)
    for key in deletion_order:
        assert tree.delete(key) is True
        assert find_invariant_violations(tree) == []
    assert tree.root is None


def test_every_permutation_of_small_set_drains_cleanly():
    keys = [1, 2, 3, 4, 5]
    for perm in itertools.permutations(keys):
        tree = BPlusTree.from_keys(keys, order=3)
        for key in perm:
            assert tree.delete(key)
            assert find_invariant_violations(tree) == []
        assert tree.root is None


def test_underflow_merge_down_to_two_keys():
    tree = BPlusTree.from_keys(range(1, 7), order=4)
    for key in (6, 5, 4, 3):
        assert tree.delete(key)
        assert find_invariant_violations(tree) == []

    assert tree.keys() == [1, 2]
    assert tree.root.keys == [2]
    assert _leaf_keys(tree) == [[1], [2]]


def test_first_key_delete_refreshes_separator():
    tree = BPlusTree.from_keys(range(1, 7), order=4)
    assert tree.root.keys == [3, 5]
    tree.delete(5)
    assert tree.root.keys == [3, 6]


def _three_leaf_tree():
    tree = BPlusTree.from_keys([1, 2, 3, 4, 5, 6, 7, 0], order=4)
    assert _leaf_keys(tree) == [[0, 1, 2], [3, 4], [5, 6, 7]]
    return tree


def test_borrow_prefers_left_sibling():
    tree = _three_leaf_tree()
    tree.delete(3)
    assert tree.root.keys == [4, 5]
    tree.delete(4)
    assert _leaf_keys(tree) == [[0, 1], [2], [5, 6, 7]]
    assert tree.root.keys == [2, 5]


def test_borrow_from_right_when_no_left_sibling():
    tree = _three_leaf_tree()
    for key in (0, 1, 2):
        tree.delete(key)
    assert _leaf_keys(tree) == [[3], [4], [5, 6, 7]]
    assert tree.root.keys == [4, 5]


def test_merge_right_then_root_collapse():
    tree = _three_leaf_tree()
    leftmost_id = get_leaves(tree.root)[0].node_id
    for key in (0, 1, 2, 3):
        tree.delete(key)
    assert _leaf_keys(tree) == [[4], [5, 6, 7]]
    assert get_leaves(tree.root)[0].node_id == leftmost_id
    assert tree.root.keys == [5]

    for key in (4, 5):
        tree.delete(key)
    assert _leaf_keys(tree) == [[6], [7]]
    assert tree.root.keys == [7]

    tree.delete(6)
    assert tree.root.is_leaf
    assert tree.root.keys == [7]
    assert tree.root.parent is None
    assert get_height(tree.root) == 1


def test_internal_rotation_and_internal_merge():
    tree = BPlusTree.from_keys(range(1, 11), order=4)
    for key in (10, 9, 8):
        tree.delete(key)

    # right internal node underflowed and rotated a child over from the left
    left, right = tree.root.children
    assert tree.root.keys == [5]
    assert left.keys == [3]
    assert right.keys == [7]
    assert [c.keys for c in right.children] == [[5, 6], [7]]
    assert all(c.parent is right for c in right.children)
    assert find_invariant_violations(tree) == []

    for key in (7, 6):
        tree.delete(key)

    # the internal nodes merged and the root collapsed onto the survivor
    assert tree.root is left
    assert tree.root.parent is None
    assert tree.root.keys == [3, 5]
    assert _leaf_keys(tree) == [[1, 2], [3, 4], [5]]
    assert get_height(tree.root) == 2
    assert find_invariant_violations(tree) == []


def test_merged_leaf_is_unlinked_from_chain():
    tree = BPlusTree.from_keys(range(1, 7), order=4)
    tree.delete(6)
    tree.delete(5)
    tree.delete(4)
    leaves = get_leaves(tree.root)
    assert [leaf.keys for leaf in leaves] == [[1, 2], [3]]
    assert leaves[0].next is leaves[1]
    assert leaves[1].next is None


@pytest.mark.parametrize("order", [3, 4, 5, 7, 10])
def test_random_mixed_operations_match_reference_set(order):
    rng = np.random.default_rng(1000 + order)
    tree = BPlusTree(order)
    reference = set()
    for _ in range(600):
        key = int(rng.integers(0, 80))
        if rng.random() < 0.55:
            tree.insert(key)
            reference.add(key)
        else:
            assert tree.delete(key) is (key in reference)
            reference.discard(key)
        assert find_invariant_violations(tree) == []
        assert count_keys(tree.root) == len(reference)

    assert tree.keys() == sorted(reference)
    for key in sorted(reference):
        assert tree.delete(key)
    assert tree.root is None
