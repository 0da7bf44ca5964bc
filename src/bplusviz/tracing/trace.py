"""
bplusviz.tracing.trace: snapshots, transitions and recorded steps.

Core pipeline::

    1. clone = tree.deep_clone()     # isolate the live tree
    2. build_*_steps(clone, ...)     # operate, emitting Steps
    3. StepRecorder.render()         # dump the step sequence

Steps that carry tree state hold a plain-dict snapshot taken at the time of
the step, so later mutation of the working clone never reaches them.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, Iterator, Optional

from ..render import render_tree_text
from ..tree import BPlusTree, Node

logger = logging.getLogger(__name__)

__all__ = [
    "FieldChange",
    "NodeChange",
    "Step",
    "StepKind",
    "StepRecorder",
    "Transition",
    "compute_transition",
    "snapshot_tree",
]


# ---------------------------------------------------------------------------
# Snapshot: serialize a tree into plain dicts
# ---------------------------------------------------------------------------


def _snapshot_node(node: Node, focused: frozenset[str]) -> dict[str, Any]:
    return {
        "_type": "leaf" if node.is_leaf else "internal",
        "_id": node.node_id,
        "_focused": node.node_id in focused,
        "keys": list(node.keys),
        "children": [_snapshot_node(c, focused) for c in node.children],
        # a leaf's neighbour is referenced by id to keep the snapshot acyclic
        "next": node.next.node_id if node.next is not None else None,
    }


def snapshot_tree(
    tree: BPlusTree | Node | None, focused_ids: Iterable[str] = ()
) -> Optional[dict[str, Any]]:
    """
    Snapshot a tree (or a subtree rooted at a node) into nested dicts.

    Nodes whose id appears in *focused_ids* are flagged with ``_focused``.
    Returns ``None`` for an empty tree.
    """
    root = tree.root if isinstance(tree, BPlusTree) else tree
    if root is None:
        return None
    return _snapshot_node(root, frozenset(focused_ids))


# ---------------------------------------------------------------------------
# Transition: what changed between two snapshots
# ---------------------------------------------------------------------------


@dataclass
class NodeChange:
    """A node that was added or removed."""

    node_id: str
    keys: list[Any] = field(default_factory=list)
    type_name: str = ""

    def __repr__(self) -> str:
        return f"{self.type_name}(keys={self.keys}, id={self.node_id})"


@dataclass
class FieldChange:
    """A field-level value change on a node present in both snapshots."""

    node_id: str
    field: str
    old_value: Any = None
    new_value: Any = None
    type_name: str = ""

    def __repr__(self) -> str:
        return (
            f"{self.type_name}({self.node_id}).{self.field}: "
            f"{self.old_value!r} -> {self.new_value!r}"
        )


@dataclass
class Transition:
    """Diff between two consecutive snapshots.

    Attributes
    ----------
    added : list[NodeChange]
        Nodes that appeared since the previous snapshot.
    removed : list[NodeChange]
        Nodes that disappeared.
    modified : list[FieldChange]
        Changes to ``keys``, ``next`` or child ids on surviving nodes.
    """

    added: list[NodeChange]
    removed: list[NodeChange]
    modified: list[FieldChange]

    @property
    def is_empty(self) -> bool:
        return not (self.added or self.removed or self.modified)


def _iter_snapshot_nodes(snapshot: Optional[dict]) -> Iterator[dict]:
    if snapshot is None:
        return
    yield snapshot
    for child in snapshot["children"]:
        yield from _iter_snapshot_nodes(child)


def _collect_nodes(snapshot: Optional[dict]) -> dict[str, dict]:
    return {n["_id"]: n for n in _iter_snapshot_nodes(snapshot)}


def _comparable(node: dict) -> dict[str, Any]:
    return {
        "keys": node["keys"],
        "next": node["next"],
        "children": [c["_id"] for c in node["children"]],
    }


def compute_transition(old_snap: Optional[dict], new_snap: Optional[dict]) -> Transition:
    """Compute the structural and value diff between two snapshots.

    Node identity is the ``_id``; snapshots of independent clones share no
    ids, so diff clones only against snapshots taken from the same lineage.
    """
    old_nodes = _collect_nodes(old_snap)
    new_nodes = _collect_nodes(new_snap)
    old_ids = set(old_nodes)
    new_ids = set(new_nodes)

    added = [
        NodeChange(node_id=nid, keys=new_nodes[nid]["keys"], type_name=new_nodes[nid]["_type"])
        for nid in sorted(new_ids - old_ids)
    ]
    removed = [
        NodeChange(node_id=nid, keys=old_nodes[nid]["keys"], type_name=old_nodes[nid]["_type"])
        for nid in sorted(old_ids - new_ids)
    ]

    modified = []
    for nid in sorted(old_ids & new_ids):
        old_fields = _comparable(old_nodes[nid])
        new_fields = _comparable(new_nodes[nid])
        for name in sorted(old_fields):
            if old_fields[name] != new_fields[name]:
                modified.append(
                    FieldChange(
                        node_id=nid,
                        field=name,
                        old_value=old_fields[name],
                        new_value=new_fields[name],
                        type_name=new_nodes[nid]["_type"],
                    )
                )

    return Transition(added=added, removed=removed, modified=modified)


# ---------------------------------------------------------------------------
# Step & StepRecorder: the ordered sequence a player replays
# ---------------------------------------------------------------------------


class StepKind(str, enum.Enum):
    HIGHLIGHT_NODE = "highlight-node"
    HIGHLIGHT_PATH = "highlight-path"
    INSERT_KEY = "insert-key"
    DELETE_KEY = "delete-key"
    SPLIT = "split"
    MERGE = "merge"
    FOUND = "found"
    NOT_FOUND = "not-found"
    RANGE_HIGHLIGHT = "range-highlight"
    COMPLETE = "complete"


@dataclass
class Step:
    """
    One discrete, displayable moment of an operation.

    Attributes
    ----------
    kind : StepKind
        What the step shows.
    node_ids : list[str]
        Nodes to highlight.
    message : str
        Human-readable status line.
    key : Any
        The key the operation is about, when there is one.
    snapshot : dict | None
        Tree state to display from this step on, taken with
        :func:`snapshot_tree` so its ids match :attr:`node_ids`. Only
        meaningful when :attr:`has_tree` is set; an emptied tree snapshots
        to ``None``.
    has_tree : bool
        Whether the step carries tree state at all.
    transition : Transition | None
        Diff against the previous tree-carrying step.
    """

    kind: StepKind
    node_ids: list[str] = field(default_factory=list)
    message: str = ""
    key: Any = None
    snapshot: Optional[dict] = None
    has_tree: bool = False
    transition: Optional[Transition] = None

    def __repr__(self) -> str:
        ids = ",".join(self.node_ids)
        return f"Step({self.kind.value} [{ids}] {self.message!r})"


class StepRecorder:
    """Holds the ordered steps produced while animating one operation."""

    def __init__(self):
        self.steps: list[Step] = []
        self._last_snapshot: Optional[dict] = None

    def add(
        self,
        kind: StepKind,
        node_ids: Iterable[str] = (),
        message: str = "",
        key: Any = None,
        tree: Optional[BPlusTree] = None,
    ) -> Step:
        """Append a step, snapshotting *tree* when it is given."""
        node_ids = list(node_ids)
        snapshot = None
        transition = None
        if tree is not None:
            snapshot = snapshot_tree(tree, focused_ids=node_ids)
            transition = compute_transition(self._last_snapshot, snapshot)
            self._last_snapshot = snapshot
        step = Step(
            kind=kind,
            node_ids=node_ids,
            message=message,
            key=key,
            snapshot=snapshot,
            has_tree=tree is not None,
            transition=transition,
        )
        self.steps.append(step)
        logger.debug("StepRecorder.add: %r", step)
        return step

    def seed(self, tree: BPlusTree) -> None:
        """Record *tree* as the baseline later transitions diff against."""
        self._last_snapshot = snapshot_tree(tree)

    def kinds(self) -> list[StepKind]:
        return [s.kind for s in self.steps]

    def render(self) -> None:
        """Dump the recorded steps as text through the module logger."""
        bar = "═" * 60
        logger.info("\n%s", bar)
        logger.info("StepRecorder: %d steps", len(self.steps))
        logger.info("%s\n", bar)

        for i, step in enumerate(self.steps):
            logger.info("S%d  %s  %s", i, step.kind.value, step.message)
            if step.has_tree:
                logger.info("\n%s", render_tree_text(step.snapshot, indent=6))

    def __len__(self) -> int:
        return len(self.steps)

    def __iter__(self) -> Iterator[Step]:
        return iter(self.steps)

    def __getitem__(self, index: int) -> Step:
        return self.steps[index]

    def __repr__(self) -> str:
        return f"StepRecorder({len(self.steps)} steps)"
