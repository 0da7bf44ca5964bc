from __future__ import annotations

from dataclasses import dataclass, field as dc_field
from typing import Any, Optional


@dataclass
class LayoutConfig:
    """Geometry options passed to ``compute_layout()``."""

    node_height: float = 40.0
    key_width: float = 40.0
    node_padding: float = 8.0
    level_gap: float = 80.0
    node_gap: float = 20.0
    view_padding: float = 60.0


@dataclass
class NodeLayout:
    """Position and size of one node, top-left anchored."""

    node_id: str
    x: float
    y: float
    width: float
    height: float
    keys: list[Any] = dc_field(default_factory=list)
    is_leaf: bool = True
    children: list[str] = dc_field(default_factory=list)
    next_leaf_id: Optional[str] = None


@dataclass
class ViewBox:
    x: float
    y: float
    w: float
    h: float


DEFAULT_CONFIG = LayoutConfig()

FOCUS_MARKER = "  ◀━━ CURRENT"
