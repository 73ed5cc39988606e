"""node-autolayout: automatic 2-D layout of node-editor graphs."""

from node_autolayout.config import (
    DirectionalBias,
    ForceOptions,
    GridOptions,
    HierarchicalOptions,
    LayoutOptions,
    SelectorThresholds,
    TreeOptions,
)
from node_autolayout.errors import LayoutError, OptionValidationError, SnapshotError, UnsupportedAlgorithmError
from node_autolayout.ir import DEFAULT_NODE_SIZE, ConnectionView, LayoutGraph, NodeView, Point, Size, load_graph
from node_autolayout.layout import (
    BoundingBox,
    LayoutResult,
    analyze_graph,
    compute_bounding_box,
    layout_auto,
    layout_force_directed,
    layout_grid,
    layout_hierarchical,
    layout_tree,
    run_layout,
    select_algorithm,
)
from node_autolayout.types import CrossReduction, Direction, LayoutAlgorithm

__version__ = "0.1.0"

__all__ = [
    "DEFAULT_NODE_SIZE",
    "BoundingBox",
    "ConnectionView",
    "CrossReduction",
    "Direction",
    "DirectionalBias",
    "ForceOptions",
    "GridOptions",
    "HierarchicalOptions",
    "LayoutAlgorithm",
    "LayoutError",
    "LayoutGraph",
    "LayoutOptions",
    "LayoutResult",
    "NodeView",
    "OptionValidationError",
    "Point",
    "SelectorThresholds",
    "Size",
    "SnapshotError",
    "TreeOptions",
    "UnsupportedAlgorithmError",
    "analyze_graph",
    "compute_bounding_box",
    "layout_auto",
    "layout_force_directed",
    "layout_grid",
    "layout_hierarchical",
    "layout_tree",
    "load_graph",
    "run_layout",
    "select_algorithm",
]
