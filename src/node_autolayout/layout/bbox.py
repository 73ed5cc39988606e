"""Bounding box of positioned, sized nodes."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from node_autolayout.ir.graph import DEFAULT_NODE_SIZE, NodeView, Point, Size


@dataclass(frozen=True)
class BoundingBox:
    """Axis-aligned rectangle enclosing a set of node rectangles."""

    min_x: float
    min_y: float
    max_x: float
    max_y: float
    width: float
    height: float
    center_x: float
    center_y: float

    @classmethod
    def empty(cls) -> BoundingBox:
        return cls(0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0)

    @classmethod
    def enclose(cls, rects: Iterable[tuple[Point, Size]]) -> BoundingBox:
        """Smallest box holding every ``(top_left, size)`` rectangle."""
        min_x = min_y = float("inf")
        max_x = max_y = float("-inf")

        for pos, size in rects:
            min_x = min(min_x, pos.x)
            min_y = min(min_y, pos.y)
            max_x = max(max_x, pos.x + size.width)
            max_y = max(max_y, pos.y + size.height)

        if min_x == float("inf"):
            return cls.empty()

        return cls(
            min_x=min_x,
            min_y=min_y,
            max_x=max_x,
            max_y=max_y,
            width=max_x - min_x,
            height=max_y - min_y,
            center_x=(min_x + max_x) / 2,
            center_y=(min_y + max_y) / 2,
        )

    @property
    def is_empty(self) -> bool:
        """True when there is nothing to center a viewport on."""
        return self.width == 0 or self.height == 0


def compute_bounding_box(
    nodes: Iterable[NodeView],
    positions: Mapping[str, Point],
    sizes: Mapping[str, Size] | None = None,
    default_size: Size = DEFAULT_NODE_SIZE,
) -> BoundingBox:
    """Compute the rectangle enclosing every node.

    Each node occupies ``[x, x + width] x [y, y + height]`` where the size is
    taken from ``sizes``, then the node's own size, then ``default_size``.
    Nodes without an entry in ``positions`` are skipped. An empty input gives
    a zero box at the origin; callers should skip viewport centering when
    ``BoundingBox.is_empty`` is true.
    """
    overrides = sizes or {}
    return BoundingBox.enclose(
        (positions[node.id], overrides.get(node.id) or node.size or default_size)
        for node in nodes
        if node.id in positions
    )
