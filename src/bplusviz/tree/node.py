from __future__ import annotations

import itertools
from typing import Any, Optional

_id_counter = itertools.count(1)


def new_node_id() -> str:
    return f"node-{next(_id_counter)}"


def reset_node_ids() -> None:
    """Restart identity numbering so the next node created is ``node-1``."""
    global _id_counter
    _id_counter = itertools.count(1)


class Node:
    """One B+ tree node, internal or leaf.

    ``parent`` and ``next`` are lookup aids only; ownership flows through
    ``children`` from the tree's root.
    """

    __slots__ = ("node_id", "keys", "children", "is_leaf", "next", "parent")

    def __init__(self, is_leaf: bool, node_id: Optional[str] = None):
        self.node_id: str = node_id if node_id is not None else new_node_id()
        self.keys: list[Any] = []
        self.children: list[Node] = []
        self.is_leaf = is_leaf
        self.next: Optional[Node] = None
        self.parent: Optional[Node] = None

    def __repr__(self) -> str:
        kind = "Leaf" if self.is_leaf else "Internal"
        return f"{kind}({self.node_id}, keys={self.keys})"


def create_node(is_leaf: bool) -> Node:
    return Node(is_leaf)
