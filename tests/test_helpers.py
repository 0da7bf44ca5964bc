import pytest

from bplusviz import (
    BPlusTree,
    count_keys,
    find_invariant_violations,
    get_all_nodes,
    get_height,
    get_leaves,
    reset_node_ids,
    tree_metrics,
)
from bplusviz.tree import create_node


def test_helpers_on_empty_tree():
    assert get_all_nodes(None) == []
    assert get_leaves(None) == []
    assert get_height(None) == 0
    assert count_keys(None) == 0


def test_helpers_on_single_leaf():
    tree = BPlusTree.from_keys([3, 1], order=4)
    assert get_all_nodes(tree.root) == [tree.root]
    assert get_leaves(tree.root) == [tree.root]
    assert get_height(tree.root) == 1
    assert count_keys(tree.root) == 2


def test_get_all_nodes_is_preorder():
    tree = BPlusTree.from_keys(range(1, 11), order=4)
    keys = [n.keys for n in get_all_nodes(tree.root)]
    assert keys == [[7], [3, 5], [1, 2], [3, 4], [5, 6], [9], [7, 8], [9, 10]]


def test_node_ids_are_unique_and_resettable():
    reset_node_ids()
    first = create_node(is_leaf=True)
    second = create_node(is_leaf=False)
    assert first.node_id == "node-1"
    assert second.node_id == "node-2"
    assert not second.is_leaf
    assert second.children == [] and second.next is None and second.parent is None
    reset_node_ids()
    assert create_node(is_leaf=True).node_id == "node-1"


def test_tree_metrics():
    tree = BPlusTree.from_keys(range(1, 11), order=4)
    m = tree_metrics(tree)
    assert m.height == 3
    assert m.total_keys == 10
    assert m.node_count == 8
    assert m.internal_nodes == 3
    assert m.leaf_nodes == 5
    assert m.fill_factor == pytest.approx(14 / 24)
    assert m.order == 4


def test_tree_metrics_empty():
    m = tree_metrics(BPlusTree(3))
    assert (m.height, m.total_keys, m.node_count, m.fill_factor) == (0, 0, 0, 0.0)


def test_invariant_checker_accepts_valid_tree():
    assert find_invariant_violations(BPlusTree(4)) == []
    assert find_invariant_violations(BPlusTree.from_keys(range(40), order=5)) == []


def test_invariant_checker_flags_broken_chain():
    tree = BPlusTree.from_keys(range(1, 11), order=4)
    get_leaves(tree.root)[1].next = None
    problems = find_invariant_violations(tree)
    assert any("next link" in p for p in problems)


def test_invariant_checker_flags_overflow_and_order():
    tree = BPlusTree.from_keys(range(1, 11), order=4)
    leaf = get_leaves(tree.root)[0]
    leaf.keys = [2, 1, 0, -1]
    problems = find_invariant_violations(tree)
    assert any("overflows" in p for p in problems)
    assert any("not strictly ascending" in p for p in problems)


def test_invariant_checker_flags_child_count_and_parent():
    tree = BPlusTree.from_keys(range(1, 11), order=4)
    tree.root.children[1].children[0].parent = tree.root
    assert any("parent link" in p for p in find_invariant_violations(tree))

    tree = BPlusTree.from_keys(range(1, 11), order=4)
    tree.root.children[0].keys.append(6)
    assert any("children for" in p for p in find_invariant_violations(tree))


def test_invariant_checker_flags_misrouted_key():
    tree = BPlusTree.from_keys(range(1, 11), order=4)
    get_leaves(tree.root)[0].keys = [1, 8]
    assert any("outside" in p for p in find_invariant_violations(tree))
