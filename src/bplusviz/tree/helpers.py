"""
bplusviz.tree.helpers: pure traversal and inspection helpers.

None of these functions mutate the nodes they are given, except
:func:`patch_leaf_links`, which only rewrites ``next`` pointers.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from .node import Node, create_node

if TYPE_CHECKING:
    from .bplus import BPlusTree


def get_all_nodes(root: Optional[Node]) -> list[Node]:
    """Every node reachable from *root*, in pre-order."""
    if root is None:
        return []
    result = [root]
    for child in root.children:
        result.extend(get_all_nodes(child))
    return result


def get_leaves(root: Optional[Node]) -> list[Node]:
    """Leaves left to right, discovered by traversal rather than ``next``."""
    if root is None:
        return []
    if root.is_leaf:
        return [root]
    result: list[Node] = []
    for child in root.children:
        result.extend(get_leaves(child))
    return result


def get_height(root: Optional[Node]) -> int:
    if root is None:
        return 0
    height = 1
    node = root
    while not node.is_leaf:
        node = node.children[0]
        height += 1
    return height


def count_keys(root: Optional[Node]) -> int:
    return sum(len(leaf.keys) for leaf in get_leaves(root))


def clone_subtree(node: Optional[Node]) -> Optional[Node]:
    """Copy *node* and its descendants with fresh identities.

    Parent links are rebuilt on the copies. Leaf ``next`` pointers are left
    as ``None``; call :func:`patch_leaf_links` on the cloned root afterwards.
    """
    if node is None:
        return None
    cloned = create_node(node.is_leaf)
    cloned.keys = list(node.keys)
    for child in node.children:
        c = clone_subtree(child)
        c.parent = cloned
        cloned.children.append(c)
    return cloned


def patch_leaf_links(root: Optional[Node]) -> None:
    leaves = get_leaves(root)
    for left, right in zip(leaves, leaves[1:]):
        left.next = right
    if leaves:
        leaves[-1].next = None


# ---------------------------------------------------------------------------
# Metrics & validation
# ---------------------------------------------------------------------------


@dataclass
class TreeMetrics:
    """Summary numbers shown alongside a tree."""

    height: int
    total_keys: int
    node_count: int
    internal_nodes: int
    leaf_nodes: int
    fill_factor: float
    order: int


def tree_metrics(tree: BPlusTree) -> TreeMetrics:
    nodes = get_all_nodes(tree.root)
    leaf_nodes = sum(1 for n in nodes if n.is_leaf)
    fill = 0.0
    if nodes:
        fill = sum(len(n.keys) for n in nodes) / (len(nodes) * tree.max_keys)
    return TreeMetrics(
        height=get_height(tree.root),
        total_keys=count_keys(tree.root),
        node_count=len(nodes),
        internal_nodes=len(nodes) - leaf_nodes,
        leaf_nodes=leaf_nodes,
        fill_factor=fill,
        order=tree.order,
    )


def find_invariant_violations(tree: BPlusTree) -> list[str]:
    """Return a message for every structural rule *tree* currently breaks.

    An empty list means the tree is valid. Intended for tests and debugging;
    the engine never calls it.
    """
    problems: list[str] = []
    root = tree.root
    if root is None:
        return problems
    if root.parent is not None:
        problems.append(f"root {root.node_id} has a parent")
    if not root.keys and not root.is_leaf:
        problems.append(f"internal root {root.node_id} has no keys")

    leaf_depths: set[int] = set()

    def walk(node: Node, depth: int, low, high) -> None:
        if len(node.keys) > tree.max_keys:
            problems.append(f"{node.node_id} overflows with {len(node.keys)} keys")
        if node is not root and len(node.keys) < tree.min_keys:
            problems.append(f"{node.node_id} underflows with {len(node.keys)} keys")
        if any(a >= b for a, b in zip(node.keys, node.keys[1:])):
            problems.append(f"{node.node_id} keys not strictly ascending: {node.keys}")
        for k in node.keys:
            if (low is not None and k < low) or (high is not None and k >= high):
                problems.append(f"{node.node_id} key {k} outside [{low}, {high})")
        if node.is_leaf:
            if node.children:
                problems.append(f"leaf {node.node_id} has children")
            leaf_depths.add(depth)
            return
        if node.next is not None:
            problems.append(f"internal {node.node_id} has a next link")
        if len(node.children) != len(node.keys) + 1:
            problems.append(
                f"{node.node_id} has {len(node.children)} children for {len(node.keys)} keys"
            )
            return
        bounds = [low, *node.keys, high]
        for i, child in enumerate(node.children):
            if child.parent is not node:
                problems.append(f"{child.node_id} parent link does not point at {node.node_id}")
            walk(child, depth + 1, bounds[i], bounds[i + 1])

    walk(root, 1, None, None)
    if len(leaf_depths) > 1:
        problems.append(f"leaves at different depths: {sorted(leaf_depths)}")

    leaves = get_leaves(root)
    for i, leaf in enumerate(leaves):
        expected = leaves[i + 1] if i + 1 < len(leaves) else None
        if leaf.next is not expected:
            problems.append(f"leaf {leaf.node_id} next link is out of order")
    chained = [k for leaf in leaves for k in leaf.keys]
    if any(a >= b for a, b in zip(chained, chained[1:])):
        problems.append("leaf chain keys are not strictly ascending")
    return problems
