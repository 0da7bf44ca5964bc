"""Ready-made trees for demos and the random-insert helper."""

from __future__ import annotations

import logging
from typing import Optional

import numpy as np

from .tree import BPlusTree, reset_node_ids

logger = logging.getLogger(__name__)

SMALL_KEYS = [10, 20, 30, 40, 50, 5, 15, 25, 35, 45]
LARGE_SIZE = 30
PRESETS = ("empty", "small", "large")


def build_preset(
    name: str, order: int = 4, rng: Optional[np.random.Generator] = None
) -> BPlusTree:
    """Build the preset tree *name* with node ids numbered from ``node-1``."""
    if name not in PRESETS:
        raise ValueError(f"unknown preset {name!r}, expected one of {PRESETS}")
    reset_node_ids()
    if name == "empty":
        keys: list[int] = []
    elif name == "small":
        keys = list(SMALL_KEYS)
    else:
        rng = rng if rng is not None else np.random.default_rng()
        keys = [int(k) for k in rng.choice(np.arange(1, 100), size=LARGE_SIZE, replace=False)]
    tree = BPlusTree.from_keys(keys, order)
    logger.info("build_preset: %s order=%d keys=%d", name, order, len(keys))
    return tree


def insert_random(
    tree: BPlusTree,
    count: int = 5,
    rng: Optional[np.random.Generator] = None,
    low: int = 1,
    high: int = 100,
) -> list[int]:
    """Insert *count* new keys drawn from ``[low, high]``; return them in draw order."""
    existing = set(tree.keys())
    pool = np.array([k for k in range(low, high + 1) if k not in existing], dtype=int)
    if count > len(pool):
        raise ValueError(
            f"cannot draw {count} new keys from [{low}, {high}] with {len(existing)} taken"
        )
    rng = rng if rng is not None else np.random.default_rng()
    drawn = [int(k) for k in rng.choice(pool, size=count, replace=False)]
    for key in drawn:
        tree.insert(key)
    logger.info("insert_random: inserted %d keys", len(drawn))
    return drawn
