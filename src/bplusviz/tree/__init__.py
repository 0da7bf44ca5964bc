"""B+ tree engine, node model and traversal helpers."""

from .bplus import BPlusTree, RangeResult, SearchResult
from .helpers import (
    TreeMetrics,
    clone_subtree,
    count_keys,
    find_invariant_violations,
    get_all_nodes,
    get_height,
    get_leaves,
    patch_leaf_links,
    tree_metrics,
)
from .node import Node, create_node, reset_node_ids

__all__ = [
    "BPlusTree",
    "Node",
    "RangeResult",
    "SearchResult",
    "TreeMetrics",
    "clone_subtree",
    "count_keys",
    "create_node",
    "find_invariant_violations",
    "get_all_nodes",
    "get_height",
    "get_leaves",
    "patch_leaf_links",
    "reset_node_ids",
    "tree_metrics",
]
