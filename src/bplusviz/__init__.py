__version__ = "0.1.0"

from .presets import build_preset, insert_random
from .render import (
    LayoutConfig,
    NodeLayout,
    ViewBox,
    compute_layout,
    compute_view_box,
    render_tree_text,
)
from .tracing import (
    Step,
    StepKind,
    StepRecorder,
    Transition,
    build_delete_steps,
    build_insert_steps,
    build_range_steps,
    build_search_steps,
    compute_transition,
    snapshot_tree,
)
from .tree import (
    BPlusTree,
    Node,
    RangeResult,
    SearchResult,
    TreeMetrics,
    count_keys,
    find_invariant_violations,
    get_all_nodes,
    get_height,
    get_leaves,
    reset_node_ids,
    tree_metrics,
)

__all__ = [
    "BPlusTree",
    "LayoutConfig",
    "Node",
    "NodeLayout",
    "RangeResult",
    "SearchResult",
    "Step",
    "StepKind",
    "StepRecorder",
    "Transition",
    "TreeMetrics",
    "ViewBox",
    "build_delete_steps",
    "build_insert_steps",
    "build_preset",
    "build_range_steps",
    "build_search_steps",
    "compute_layout",
    "compute_transition",
    "compute_view_box",
    "count_keys",
    "find_invariant_violations",
    "get_all_nodes",
    "get_height",
    "get_leaves",
    "insert_random",
    "render_tree_text",
    "reset_node_ids",
    "snapshot_tree",
    "tree_metrics",
]
