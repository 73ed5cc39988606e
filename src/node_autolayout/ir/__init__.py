"""Intermediate representation: node/connection views and the layout graph."""

from node_autolayout.ir.graph import DEFAULT_NODE_SIZE, ConnectionView, LayoutGraph, NodeView, Point, Size
from node_autolayout.ir.snapshot import graph_from_dict, load_graph

__all__ = [
    "DEFAULT_NODE_SIZE",
    "ConnectionView",
    "LayoutGraph",
    "NodeView",
    "Point",
    "Size",
    "graph_from_dict",
    "load_graph",
]
