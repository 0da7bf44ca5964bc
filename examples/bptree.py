"""
Example: B+ tree insertion, deletion & search as recorded steps.

Each operation runs against a deep clone of the live tree; the resulting
steps are dumped as text through ``logging``. The live tree is only
replaced by the clone once the steps are recorded, which is how a player
would commit an animated operation.

Usage:
    python examples/bptree.py
"""

from __future__ import annotations

import logging

import bplusviz as bv


def demo_insert() -> bv.BPlusTree:
    """Record every insertion of a short key sequence."""
    tree = bv.BPlusTree(order=4)
    for key in [10, 20, 5, 6, 12, 30, 7, 17, 25, 3, 8, 15]:
        working = tree.deep_clone()
        recorder = bv.build_insert_steps(working, key)
        recorder.render()
        tree = working
    return tree


def demo_delete(tree: bv.BPlusTree) -> bv.BPlusTree:
    for key in [6, 7, 8]:
        working = tree.deep_clone()
        bv.build_delete_steps(working, key).render()
        tree = working
    return tree


def demo_search(tree: bv.BPlusTree) -> None:
    bv.build_search_steps(tree, 17).render()
    bv.build_range_steps(tree, 5, 20).render()


def demo_layout(tree: bv.BPlusTree) -> None:
    layouts = bv.compute_layout(tree.root)
    box = bv.compute_view_box(layouts)
    logging.info("view box: %s", box)
    for lay in layouts.values():
        logging.info("%s at (%.0f, %.0f) keys=%s", lay.node_id, lay.x, lay.y, lay.keys)
    logging.info("metrics: %s", bv.tree_metrics(tree))


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(message)s")
    t = demo_insert()
    t = demo_delete(t)
    demo_search(t)
    demo_layout(t)
