from __future__ import annotations

from typing import Optional

from ..tree import Node
from .types import DEFAULT_CONFIG, LayoutConfig, NodeLayout


def node_width(key_count: int, config: LayoutConfig = DEFAULT_CONFIG) -> float:
    return max(config.key_width, key_count * config.key_width + config.node_padding * 2)


def compute_layout(
    root: Optional[Node], config: Optional[LayoutConfig] = None
) -> dict[str, NodeLayout]:
    """
    Place every node of the tree rooted at *root* on a 2D plane.

    Subtree widths are computed bottom-up; nodes are then placed top-down,
    each centered over the span of its subtree, with siblings separated by
    ``node_gap`` and levels ``level_gap`` apart. Returned in pre-order.
    """
    config = config or DEFAULT_CONFIG
    layouts: dict[str, NodeLayout] = {}
    if root is None:
        return layouts

    subtree_widths: dict[str, float] = {}
    _measure(root, config, subtree_widths)
    _assign_positions(root, 0.0, 0.0, config, subtree_widths, layouts)
    return layouts


def _measure(node: Node, config: LayoutConfig, widths: dict[str, float]) -> float:
    own = node_width(len(node.keys), config)
    if node.is_leaf:
        widths[node.node_id] = own
        return own
    children_total = sum(_measure(c, config, widths) for c in node.children)
    children_total += config.node_gap * max(0, len(node.children) - 1)
    widths[node.node_id] = max(own, children_total)
    return widths[node.node_id]


def _assign_positions(
    node: Node,
    x: float,
    y: float,
    config: LayoutConfig,
    widths: dict[str, float],
    layouts: dict[str, NodeLayout],
) -> None:
    own = node_width(len(node.keys), config)
    layouts[node.node_id] = NodeLayout(
        node_id=node.node_id,
        x=x + (widths[node.node_id] - own) / 2.0,
        y=y,
        width=own,
        height=config.node_height,
        keys=list(node.keys),
        is_leaf=node.is_leaf,
        children=[c.node_id for c in node.children],
        next_leaf_id=node.next.node_id if node.is_leaf and node.next is not None else None,
    )

    child_x = x
    for child in node.children:
        _assign_positions(child, child_x, y + config.level_gap, config, widths, layouts)
        child_x += widths[child.node_id] + config.node_gap
