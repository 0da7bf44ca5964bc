"""
bplusviz.tree.bplus: the B+ tree engine.

The engine performs every operation atomically and synchronously. Callers
that want step-by-step playback take a :meth:`BPlusTree.deep_clone` before
mutating and compare snapshots between steps (see :mod:`bplusviz.tracing`).
"""

from __future__ import annotations

import logging
from bisect import bisect_left, bisect_right
from dataclasses import dataclass, field
from typing import Any, Iterable, Iterator, Optional

from .helpers import clone_subtree, patch_leaf_links
from .node import Node, create_node

logger = logging.getLogger(__name__)

__all__ = ["BPlusTree", "RangeResult", "SearchResult"]


@dataclass
class SearchResult:
    """A hit from :meth:`BPlusTree.search`."""

    node: Node
    index: int
    path: list[str] = field(default_factory=list)


@dataclass
class RangeResult:
    """Keys within a range and the leaves that contributed them."""

    keys: list[Any] = field(default_factory=list)
    leaf_ids: list[str] = field(default_factory=list)


def _child_index(node: Node, key: Any) -> int:
    # go right on >=
    return bisect_right(node.keys, key)


class BPlusTree:
    """B+ tree of unique keys with a threaded leaf level.

    Parameters
    ----------
    order : int
        Maximum number of children per internal node, at least 3.
        ``max_keys = order - 1`` and ``min_keys = ceil(order / 2) - 1``.
    """

    def __init__(self, order: int = 4):
        if isinstance(order, bool) or not isinstance(order, int):
            raise TypeError(f"order must be an int, got {type(order).__name__}")
        if order < 3:
            raise ValueError(f"order must be >= 3, got {order}")
        self._order = order
        self.root: Optional[Node] = None

    @classmethod
    def from_keys(cls, keys: Iterable[Any], order: int = 4) -> BPlusTree:
        tree = cls(order)
        for key in keys:
            tree.insert(key)
        return tree

    @property
    def order(self) -> int:
        return self._order

    @property
    def max_keys(self) -> int:
        return self._order - 1

    @property
    def min_keys(self) -> int:
        return -(-self._order // 2) - 1

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def search(self, key: Any) -> Optional[SearchResult]:
        path: list[str] = []
        node = self.root
        while node is not None:
            path.append(node.node_id)
            if node.is_leaf:
                idx = bisect_left(node.keys, key)
                if idx < len(node.keys) and node.keys[idx] == key:
                    return SearchResult(node=node, index=idx, path=path)
                return None
            node = node.children[_child_index(node, key)]
        return None

    def search_path(self, key: Any) -> list[str]:
        """Ids of the nodes visited from the root down to *key*'s leaf."""
        path: list[str] = []
        node = self.root
        while node is not None:
            path.append(node.node_id)
            if node.is_leaf:
                break
            node = node.children[_child_index(node, key)]
        return path

    def find_leaf(self, key: Any) -> Optional[Node]:
        node = self.root
        while node is not None and not node.is_leaf:
            node = node.children[_child_index(node, key)]
        return node

    def range_query(self, low: Any, high: Any) -> RangeResult:
        result = RangeResult()
        if low > high:
            return result
        leaf = self.find_leaf(low)
        while leaf is not None:
            added = False
            for key in leaf.keys:
                if key > high:
                    if added:
                        result.leaf_ids.append(leaf.node_id)
                    return result
                if key >= low:
                    result.keys.append(key)
                    added = True
            if added:
                result.leaf_ids.append(leaf.node_id)
            leaf = leaf.next
        return result

    def keys(self) -> list[Any]:
        """All keys in ascending order, read off the leaf chain."""
        out: list[Any] = []
        leaf = self._leftmost_leaf()
        while leaf is not None:
            out.extend(leaf.keys)
            leaf = leaf.next
        return out

    def __len__(self) -> int:
        return len(self.keys())

    def __contains__(self, key: Any) -> bool:
        return self.search(key) is not None

    def __iter__(self) -> Iterator[Any]:
        return iter(self.keys())

    def __repr__(self) -> str:
        return f"BPlusTree(order={self._order}, keys={self.keys()})"

    # ------------------------------------------------------------------
    # Insert
    # ------------------------------------------------------------------

    def insert(self, key: Any) -> None:
        if self.root is None:
            self.root = create_node(is_leaf=True)
            self.root.keys.append(key)
            logger.debug("insert: new leaf root %s for key %r", self.root.node_id, key)
            return

        leaf = self.find_leaf(key)
        idx = bisect_left(leaf.keys, key)
        if idx < len(leaf.keys) and leaf.keys[idx] == key:
            return
        leaf.keys.insert(idx, key)

        if len(leaf.keys) > self.max_keys:
            self._split_leaf(leaf)

    def _split_leaf(self, leaf: Node) -> None:
        mid = -(-len(leaf.keys) // 2)
        sibling = create_node(is_leaf=True)
        sibling.keys = leaf.keys[mid:]
        leaf.keys = leaf.keys[:mid]

        sibling.next = leaf.next
        leaf.next = sibling

        push_up = sibling.keys[0]
        logger.debug(
            "split leaf %s -> %s | %s, push up %r",
            leaf.node_id, leaf.keys, sibling.keys, push_up,
        )
        self._insert_in_parent(leaf, push_up, sibling)

    def _split_internal(self, node: Node) -> None:
        mid = len(node.keys) // 2
        push_up = node.keys[mid]

        sibling = create_node(is_leaf=False)
        sibling.keys = node.keys[mid + 1:]
        sibling.children = node.children[mid + 1:]
        for child in sibling.children:
            child.parent = sibling

        node.keys = node.keys[:mid]
        node.children = node.children[:mid + 1]

        logger.debug(
            "split internal %s -> %s | %s, push up %r",
            node.node_id, node.keys, sibling.keys, push_up,
        )
        self._insert_in_parent(node, push_up, sibling)

    def _insert_in_parent(self, left: Node, key: Any, right: Node) -> None:
        parent = left.parent
        if parent is None:
            new_root = create_node(is_leaf=False)
            new_root.keys = [key]
            new_root.children = [left, right]
            left.parent = new_root
            right.parent = new_root
            self.root = new_root
            logger.debug("new root %s with separator %r", new_root.node_id, key)
            return

        idx = parent.children.index(left)
        parent.keys.insert(idx, key)
        parent.children.insert(idx + 1, right)
        right.parent = parent

        if len(parent.keys) > self.max_keys:
            self._split_internal(parent)

    # ------------------------------------------------------------------
    # Delete
    # ------------------------------------------------------------------

    def delete(self, key: Any) -> bool:
        """Remove *key*; return ``False`` when it is not in the tree."""
        if self.root is None:
            return False
        leaf = self.find_leaf(key)
        if leaf is None:
            return False
        idx = bisect_left(leaf.keys, key)
        if idx >= len(leaf.keys) or leaf.keys[idx] != key:
            return False

        leaf.keys.pop(idx)

        if leaf is self.root:
            if not leaf.keys:
                self.root = None
                logger.debug("delete: tree is now empty")
            return True

        if len(leaf.keys) < self.min_keys:
            self._fix_leaf_underflow(leaf)
        else:
            self._update_parent_keys(leaf)
        return True

    def _update_parent_keys(self, leaf: Node) -> None:
        """Refresh the separator that routes to *leaf*'s first key.

        Climbs while *leaf* sits on the leftmost edge of the current subtree;
        the first ancestor where it does not is the one holding its separator.
        """
        if not leaf.keys:
            return
        current = leaf
        while current.parent is not None:
            parent = current.parent
            idx = parent.children.index(current)
            if idx > 0:
                parent.keys[idx - 1] = leaf.keys[0]
                return
            current = parent

    def _fix_leaf_underflow(self, leaf: Node) -> None:
        parent = leaf.parent
        idx = parent.children.index(leaf)
        left = parent.children[idx - 1] if idx > 0 else None
        right = parent.children[idx + 1] if idx + 1 < len(parent.children) else None

        if left is not None and len(left.keys) > self.min_keys:
            leaf.keys.insert(0, left.keys.pop())
            parent.keys[idx - 1] = leaf.keys[0]
            logger.debug("leaf %s borrowed %r from left %s", leaf.node_id, leaf.keys[0], left.node_id)
            return

        if right is not None and len(right.keys) > self.min_keys:
            leaf.keys.append(right.keys.pop(0))
            parent.keys[idx] = right.keys[0]
            self._update_parent_keys(leaf)
            logger.debug("leaf %s borrowed %r from right %s", leaf.node_id, leaf.keys[-1], right.node_id)
            return

        if left is not None:
            left.keys.extend(leaf.keys)
            left.next = leaf.next
            parent.keys.pop(idx - 1)
            parent.children.pop(idx)
            leaf.parent = None
            logger.debug("merged leaf %s into left %s", leaf.node_id, left.node_id)
        else:
            leaf.keys.extend(right.keys)
            leaf.next = right.next
            parent.keys.pop(idx)
            parent.children.pop(idx + 1)
            right.parent = None
            self._update_parent_keys(leaf)
            logger.debug("merged right %s into leaf %s", right.node_id, leaf.node_id)

        self._after_merge(parent)

    def _fix_internal_underflow(self, node: Node) -> None:
        parent = node.parent
        idx = parent.children.index(node)
        left = parent.children[idx - 1] if idx > 0 else None
        right = parent.children[idx + 1] if idx + 1 < len(parent.children) else None

        if left is not None and len(left.keys) > self.min_keys:
            node.keys.insert(0, parent.keys[idx - 1])
            parent.keys[idx - 1] = left.keys.pop()
            moved = left.children.pop()
            moved.parent = node
            node.children.insert(0, moved)
            logger.debug("internal %s rotated from left %s", node.node_id, left.node_id)
            return

        if right is not None and len(right.keys) > self.min_keys:
            node.keys.append(parent.keys[idx])
            parent.keys[idx] = right.keys.pop(0)
            moved = right.children.pop(0)
            moved.parent = node
            node.children.append(moved)
            logger.debug("internal %s rotated from right %s", node.node_id, right.node_id)
            return

        if left is not None:
            left.keys.append(parent.keys.pop(idx - 1))
            left.keys.extend(node.keys)
            for child in node.children:
                child.parent = left
            left.children.extend(node.children)
            parent.children.pop(idx)
            node.parent = None
            logger.debug("merged internal %s into left %s", node.node_id, left.node_id)
        else:
            node.keys.append(parent.keys.pop(idx))
            node.keys.extend(right.keys)
            for child in right.children:
                child.parent = node
            node.children.extend(right.children)
            parent.children.pop(idx + 1)
            right.parent = None
            logger.debug("merged right %s into internal %s", right.node_id, node.node_id)

        self._after_merge(parent)

    def _after_merge(self, parent: Node) -> None:
        if parent is self.root:
            if not parent.keys:
                self.root = parent.children[0]
                self.root.parent = None
                parent.children = []
                logger.debug("root collapsed into %s", self.root.node_id)
        elif len(parent.keys) < self.min_keys:
            self._fix_internal_underflow(parent)

    # ------------------------------------------------------------------
    # Snapshots & rebuilds
    # ------------------------------------------------------------------

    def deep_clone(self) -> BPlusTree:
        """Independent copy of the tree with fresh node identities."""
        tree = BPlusTree(self._order)
        tree.root = clone_subtree(self.root)
        patch_leaf_links(tree.root)
        return tree

    def with_order(self, order: int) -> BPlusTree:
        """A new tree of *order* holding this tree's keys.

        Order is fixed per instance, so changing it means re-inserting every
        key into a fresh tree.
        """
        return BPlusTree.from_keys(self.keys(), order)

    def _leftmost_leaf(self) -> Optional[Node]:
        node = self.root
        while node is not None and not node.is_leaf:
            node = node.children[0]
        return node
