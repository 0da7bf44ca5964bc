"""
Step builders for the four user-visible operations.

Each builder works on the tree it is handed. Insert and delete mutate it,
so callers pass ``tree.deep_clone()`` when the live tree must stay as is::

    recorder = build_insert_steps(tree.deep_clone(), 42)
    for step in recorder:
        ...
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from ..tree import BPlusTree, get_all_nodes, get_height
from .trace import StepKind, StepRecorder, compute_transition, snapshot_tree

logger = logging.getLogger(__name__)

__all__ = [
    "build_delete_steps",
    "build_insert_steps",
    "build_range_steps",
    "build_search_steps",
]


def _add_path_steps(
    recorder: StepRecorder, tree: BPlusTree, key: Any, message: str, *,
    final_message: Optional[str] = None, with_key: bool = True,
) -> list[str]:
    path = tree.search_path(key)
    for i in range(len(path)):
        text = message
        if final_message is not None and i == len(path) - 1:
            text = final_message
        recorder.add(
            StepKind.HIGHLIGHT_PATH,
            node_ids=path[: i + 1],
            message=text,
            key=key if with_key else None,
        )
    return path


def build_insert_steps(tree: BPlusTree, key: Any) -> StepRecorder:
    recorder = StepRecorder()
    recorder.seed(tree)
    _add_path_steps(recorder, tree, key, f"Traversing to find position for key {key}...")

    leaf = tree.find_leaf(key)
    if leaf is not None and key in leaf.keys:
        recorder.add(
            StepKind.NOT_FOUND,
            node_ids=[leaf.node_id],
            message=f"Key {key} already exists in tree",
        )
        return recorder

    nodes_before = len(get_all_nodes(tree.root))
    height_before = get_height(tree.root)
    tree.insert(key)
    landed = tree.find_leaf(key)
    landed_ids = [landed.node_id] if landed is not None else []

    if nodes_before and len(get_all_nodes(tree.root)) > nodes_before:
        step = recorder.add(
            StepKind.INSERT_KEY,
            node_ids=landed_ids,
            message=f"Inserted {key}, node overflow! Splitting...",
            key=key,
            tree=tree,
        )
        new_ids = [c.node_id for c in step.transition.added]
        message = "Split complete. Key propagated up."
        if get_height(tree.root) > height_before:
            message = "Split complete. New root created."
        recorder.add(StepKind.SPLIT, node_ids=landed_ids + new_ids, message=message, tree=tree)
    else:
        recorder.add(
            StepKind.INSERT_KEY,
            node_ids=landed_ids,
            message=f"Inserted key {key} into leaf node",
            key=key,
            tree=tree,
        )

    recorder.add(StepKind.COMPLETE, message=f"Insert of {key} complete", tree=tree)
    logger.debug("build_insert_steps: key=%r steps=%d", key, len(recorder))
    return recorder


def build_delete_steps(tree: BPlusTree, key: Any) -> StepRecorder:
    recorder = StepRecorder()
    recorder.seed(tree)
    _add_path_steps(recorder, tree, key, f"Searching for key {key} to delete...")

    leaf = tree.find_leaf(key)
    if leaf is None or key not in leaf.keys:
        recorder.add(
            StepKind.NOT_FOUND,
            node_ids=[leaf.node_id] if leaf is not None else [],
            message=f"Key {key} not found in tree",
        )
        return recorder

    recorder.add(
        StepKind.DELETE_KEY,
        node_ids=[leaf.node_id],
        message=f"Found key {key}, deleting...",
        key=key,
    )

    before = snapshot_tree(tree)
    nodes_before = len(get_all_nodes(tree.root))
    tree.delete(key)
    surviving = [n.node_id for n in get_all_nodes(tree.root)]

    if surviving and len(surviving) < nodes_before:
        touched = {c.node_id for c in compute_transition(before, snapshot_tree(tree)).modified}
        recorder.add(
            StepKind.MERGE,
            node_ids=[nid for nid in surviving if nid in touched],
            message="Underflow! Nodes merged.",
            tree=tree,
        )

    recorder.add(StepKind.COMPLETE, message=f"Delete of {key} complete", tree=tree)
    logger.debug("build_delete_steps: key=%r steps=%d", key, len(recorder))
    return recorder


def build_search_steps(tree: BPlusTree, key: Any) -> StepRecorder:
    recorder = StepRecorder()
    _add_path_steps(
        recorder, tree, key,
        "Comparing at node, following pointer down...",
        final_message="Reached leaf node, scanning keys...",
        with_key=False,
    )

    result = tree.search(key)
    if result is not None:
        recorder.add(
            StepKind.FOUND,
            node_ids=[result.node.node_id],
            message=f"Key {key} found!",
            key=key,
        )
    else:
        leaf = tree.find_leaf(key)
        recorder.add(
            StepKind.NOT_FOUND,
            node_ids=[leaf.node_id] if leaf is not None else [],
            message=f"Key {key} not found in tree",
        )
    return recorder


def build_range_steps(tree: BPlusTree, low: Any, high: Any) -> StepRecorder:
    recorder = StepRecorder()
    _add_path_steps(
        recorder, tree, low,
        f"Finding start leaf for range [{low}, {high}]...",
        with_key=False,
    )

    result = tree.range_query(low, high)
    if result.keys:
        joined = ", ".join(str(k) for k in result.keys)
        recorder.add(
            StepKind.RANGE_HIGHLIGHT,
            node_ids=result.leaf_ids,
            message=f"Range [{low}, {high}]: found {len(result.keys)} keys: [{joined}]",
        )
    else:
        recorder.add(
            StepKind.NOT_FOUND,
            message=f"No keys found in range [{low}, {high}]",
        )
    return recorder
