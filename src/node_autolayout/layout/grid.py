"""Grid layout: row-major placement that ignores connections."""

from __future__ import annotations

import math
import time

from node_autolayout.config import GridOptions
from node_autolayout.ir.graph import LayoutGraph, Point
from node_autolayout.layout.types import LayoutResult
from node_autolayout.types import LayoutAlgorithm


def grid_columns(node_count: int, columns: int | None = None) -> int:
    if columns is not None:
        return columns
    return max(1, math.ceil(math.sqrt(node_count)))


def layout_grid(graph: LayoutGraph, options: GridOptions | None = None) -> LayoutResult:
    """Arrange nodes in a uniform grid in caller order.

    Node ``i`` goes to row ``i // columns``, column ``i % columns``; the cell
    pitch is the largest node size plus ``spacing`` so no two nodes overlap.
    """
    started = time.perf_counter()
    opts = options or GridOptions()
    opts.validate()

    node_ids = graph.node_ids()
    if not node_ids:
        return LayoutResult.build({}, LayoutAlgorithm.GRID, {}, started)

    cols = grid_columns(len(node_ids), opts.columns)
    max_w = max(graph.size_of(nid).width for nid in node_ids)
    max_h = max(graph.size_of(nid).height for nid in node_ids)
    pitch_x = max_w + opts.spacing
    pitch_y = max_h + opts.spacing

    positions: dict[str, Point] = {}
    for index, node_id in enumerate(node_ids):
        row, col = divmod(index, cols)
        positions[node_id] = Point(x=col * pitch_x, y=row * pitch_y)

    return LayoutResult.build(positions, LayoutAlgorithm.GRID, graph.sizes(), started)
