"""Map (lateral, depth) layout coordinates onto the canvas for a flow direction."""

from __future__ import annotations

from node_autolayout.ir.graph import Point, Size
from node_autolayout.types import Direction


def lateral_size(size: Size, direction: Direction) -> float:
    """Extent of a node across the flow: width for TB/BT, height for LR/RL."""
    return size.height if direction.is_horizontal else size.width


def orient(lateral: float, depth: float, direction: Direction) -> Point:
    """Place a node whose top-left corner is at ``lateral`` across and ``depth`` along the flow."""
    if direction is Direction.TB:
        return Point(x=lateral, y=depth)
    if direction is Direction.BT:
        return Point(x=lateral, y=-depth)
    if direction is Direction.LR:
        return Point(x=depth, y=lateral)
    return Point(x=-depth, y=lateral)
