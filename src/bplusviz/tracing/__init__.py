"""Step recording: snapshots, transitions and per-operation step builders."""

from .steps import (
    build_delete_steps,
    build_insert_steps,
    build_range_steps,
    build_search_steps,
)
from .trace import (
    FieldChange,
    NodeChange,
    Step,
    StepKind,
    StepRecorder,
    Transition,
    compute_transition,
    snapshot_tree,
)

__all__ = [
    "FieldChange",
    "NodeChange",
    "Step",
    "StepKind",
    "StepRecorder",
    "Transition",
    "build_delete_steps",
    "build_insert_steps",
    "build_range_steps",
    "build_search_steps",
    "compute_transition",
    "snapshot_tree",
]
