from __future__ import annotations

from typing import Optional

import numpy as np

from .types import DEFAULT_CONFIG, LayoutConfig, NodeLayout, ViewBox


def _node_rects(layouts: dict[str, NodeLayout]) -> np.ndarray:
    """``(n, 4)`` array of ``[x0, y0, x1, y1]`` per node."""
    return np.array(
        [[n.x, n.y, n.x + n.width, n.y + n.height] for n in layouts.values()],
        dtype=float,
    )


def compute_bounding_box(layouts: dict[str, NodeLayout]) -> tuple[float, float, float, float]:
    """Return ``(min_x, max_x, min_y, max_y)`` over all node rectangles."""
    if not layouts:
        return 0.0, 0.0, 0.0, 0.0
    rects = _node_rects(layouts)
    return (
        float(rects[:, 0].min()),
        float(rects[:, 2].max()),
        float(rects[:, 1].min()),
        float(rects[:, 3].max()),
    )


def compute_view_box(
    layouts: dict[str, NodeLayout], config: Optional[LayoutConfig] = None
) -> ViewBox:
    """Padded box that fits the whole layout; all zeros when it is empty."""
    config = config or DEFAULT_CONFIG
    if not layouts:
        return ViewBox(0.0, 0.0, 0.0, 0.0)
    min_x, max_x, min_y, max_y = compute_bounding_box(layouts)
    pad = config.view_padding
    return ViewBox(
        x=min_x - pad,
        y=min_y - pad,
        w=max_x - min_x + pad * 2,
        h=max_y - min_y + pad * 2,
    )


def edge_anchor(parent: NodeLayout, child: NodeLayout) -> tuple[np.ndarray, np.ndarray]:
    """Start and end points of the edge drawn from *parent* down to *child*."""
    start = np.array([parent.x + parent.width / 2.0, parent.y + parent.height])
    end = np.array([child.x + child.width / 2.0, child.y])
    return start, end
