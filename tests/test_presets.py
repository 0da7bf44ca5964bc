import numpy as np
import pytest

from bplusviz import build_preset, find_invariant_violations, get_leaves, insert_random
from bplusviz.presets import SMALL_KEYS


def test_empty_preset():
    tree = build_preset("empty")
    assert tree.root is None
    assert tree.order == 4


def test_small_preset():
    tree = build_preset("small", order=3)
    assert tree.order == 3
    assert tree.keys() == sorted(SMALL_KEYS)
    assert get_leaves(tree.root)[0].node_id == "node-1"
    assert find_invariant_violations(tree) == []


def test_large_preset_is_reproducible_with_seed():
    a = build_preset("large", rng=np.random.default_rng(3))
    b = build_preset("large", rng=np.random.default_rng(3))
    assert a.keys() == b.keys()
    assert len(a.keys()) == 30
    assert all(1 <= k <= 99 for k in a.keys())
    assert find_invariant_violations(a) == []


def test_unknown_preset_rejected():
    with pytest.raises(ValueError, match="unknown preset"):
        build_preset("huge")


def test_insert_random_adds_new_keys():
    tree = build_preset("small")
    added = insert_random(tree, count=5, rng=np.random.default_rng(11))
    assert len(added) == 5
    assert not set(added) & set(SMALL_KEYS)
    assert tree.keys() == sorted(SMALL_KEYS + added)
    assert all(isinstance(k, int) for k in added)


def test_insert_random_exhausted_range():
    tree = build_preset("small")
    with pytest.raises(ValueError, match="cannot draw"):
        insert_random(tree, count=5, low=10, high=15)
