from __future__ import annotations

from typing import Any

from .types import FOCUS_MARKER


def _format_keys(keys: list[Any]) -> str:
    return " | ".join(str(k) for k in keys)


def render_tree_text(snapshot: Any, indent: int = 0, prefix: str = "") -> str:
    """Indented text rendering of a tree snapshot (see ``snapshot_tree``)."""
    pad = " " * indent

    if snapshot is None:
        return f"{pad}{prefix}∅"
    if not isinstance(snapshot, dict) or "_type" not in snapshot:
        return f"{pad}{prefix}{snapshot!r}"

    marker = FOCUS_MARKER if snapshot.get("_focused") else ""
    shape = "leaf" if snapshot["_type"] == "leaf" else "node"
    link = ""
    if snapshot["_type"] == "leaf" and snapshot.get("next") is not None:
        link = f" → {snapshot['next']}"
    lines = [f"{pad}{prefix}[{shape}]({_format_keys(snapshot['keys'])}){link}{marker}"]

    for i, child in enumerate(snapshot.get("children", [])):
        lines.append(render_tree_text(child, indent + 4, f"children[{i}]: "))

    return "\n".join(lines)
