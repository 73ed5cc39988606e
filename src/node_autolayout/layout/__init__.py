"""Layout strategies, dispatcher and bounding-box helper."""

from __future__ import annotations

from node_autolayout.layout.analysis import GraphCharacteristics, analyze_graph, calculate_density, select_algorithm
from node_autolayout.layout.bbox import BoundingBox, compute_bounding_box
from node_autolayout.layout.engine import layout_auto, resolve_algorithm, run_layout
from node_autolayout.layout.force import layout_force_directed
from node_autolayout.layout.grid import layout_grid
from node_autolayout.layout.hierarchical import (
    LayerAssignment,
    count_crossings,
    find_back_edges,
    layout_hierarchical,
    minimise_crossings,
)
from node_autolayout.layout.quadtree import QuadTree
from node_autolayout.layout.tree import build_forest, layout_tree
from node_autolayout.layout.types import LayoutMetrics, LayoutResult

__all__ = [
    "BoundingBox",
    "GraphCharacteristics",
    "LayerAssignment",
    "LayoutMetrics",
    "LayoutResult",
    "QuadTree",
    "analyze_graph",
    "build_forest",
    "calculate_density",
    "compute_bounding_box",
    "count_crossings",
    "find_back_edges",
    "layout_auto",
    "layout_force_directed",
    "layout_grid",
    "layout_hierarchical",
    "layout_tree",
    "minimise_crossings",
    "resolve_algorithm",
    "run_layout",
    "select_algorithm",
]
