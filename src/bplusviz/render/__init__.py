from .geometry import compute_bounding_box, compute_view_box, edge_anchor
from .layout_engine import compute_layout, node_width
from .snapshot_view import render_tree_text
from .types import LayoutConfig, NodeLayout, ViewBox

__all__ = [
    'LayoutConfig',
    'NodeLayout',
    'ViewBox',
    'compute_bounding_box',
    'compute_layout',
    'compute_view_box',
    'edge_anchor',
    'node_width',
    'render_tree_text',
]
