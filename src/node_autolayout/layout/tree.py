"""Tree layout for forest-shaped graphs.

Phases:
  1. Parent inference (one parent per node, in connection order)
  2. Root selection (orphans, multi-parent nodes, then cycle entry points)
  3. Subtree extent accumulation (bottom-up)
  4. Lateral placement (top-down) and depth assignment

A node with two or more distinct parents is not attached to any of them: it
starts a tree of its own. This keeps the layout well defined for graphs that
are only almost trees, at the cost of drawing such nodes as extra roots.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field

from node_autolayout.config import TreeOptions
from node_autolayout.ir.graph import LayoutGraph, Point
from node_autolayout.layout.orient import lateral_size, orient
from node_autolayout.layout.types import LayoutResult
from node_autolayout.types import LayoutAlgorithm

logger = logging.getLogger(__name__)


@dataclass
class Forest:
    roots: list[str] = field(default_factory=list)
    children: dict[str, list[str]] = field(default_factory=dict)
    depth: dict[str, int] = field(default_factory=dict)
    preorder: list[str] = field(default_factory=list)


def infer_parents(graph: LayoutGraph) -> dict[str, list[str]]:
    """Distinct parents of every node, in connection order. Self-loops are ignored."""
    parents: dict[str, list[str]] = {node_id: [] for node_id in graph.node_ids()}
    for conn in graph.connections.values():
        if conn.is_self_loop:
            continue
        if conn.from_node_id not in parents[conn.to_node_id]:
            parents[conn.to_node_id].append(conn.from_node_id)
    return parents


def build_forest(graph: LayoutGraph) -> Forest:
    """Turn the graph into a spanning forest, visiting roots in caller order."""
    parents = infer_parents(graph)
    candidates: dict[str, list[str]] = {node_id: [] for node_id in graph.node_ids()}
    for child, child_parents in parents.items():
        if len(child_parents) == 1:
            candidates[child_parents[0]].append(child)

    multi_parent = [nid for nid, ps in parents.items() if len(ps) > 1]
    if multi_parent:
        logger.debug("treating %d multi-parent node(s) as roots: %s", len(multi_parent), multi_parent)

    forest = Forest(children={node_id: [] for node_id in graph.node_ids()})
    visited: set[str] = set()

    def grow(root: str) -> None:
        visited.add(root)
        forest.roots.append(root)
        forest.depth[root] = 0
        stack = [root]
        while stack:
            node_id = stack.pop()
            forest.preorder.append(node_id)
            kids = [c for c in candidates[node_id] if c not in visited]
            for child in kids:
                visited.add(child)
                forest.depth[child] = forest.depth[node_id] + 1
            forest.children[node_id] = kids
            stack.extend(reversed(kids))

    for node_id in graph.node_ids():
        if len(parents[node_id]) != 1:
            grow(node_id)

    # Whatever is left sits on a cycle with no way in; enter it at its first node.
    for node_id in graph.node_ids():
        if node_id not in visited:
            grow(node_id)

    return forest


def subtree_extents(graph: LayoutGraph, forest: Forest, opts: TreeOptions) -> dict[str, float]:
    """Lateral space each subtree needs, children before parents."""
    extents: dict[str, float] = {}
    for node_id in reversed(forest.preorder):
        own = max(lateral_size(graph.size_of(node_id), opts.direction), opts.min_extent)
        kids = forest.children[node_id]
        if not kids:
            extents[node_id] = own
            continue
        packed = sum(extents[c] for c in kids) + (len(kids) - 1) * opts.sibling_spacing
        extents[node_id] = max(own, packed)
    return extents


def layout_tree(graph: LayoutGraph, options: TreeOptions | None = None) -> LayoutResult:
    """Place a forest: parents centred over the packed extents of their children."""
    started = time.perf_counter()
    opts = options or TreeOptions()
    opts.validate()

    if graph.node_count() == 0:
        return LayoutResult.build({}, LayoutAlgorithm.TREE, {}, started)

    forest = build_forest(graph)
    extents = subtree_extents(graph, forest, opts)

    centres: dict[str, float] = {}
    cursor = 0.0
    for root in forest.roots:
        centres[root] = cursor + extents[root] / 2
        cursor += extents[root] + opts.sibling_spacing

    for node_id in forest.preorder:
        kids = forest.children[node_id]
        if not kids:
            continue
        packed = sum(extents[c] for c in kids) + (len(kids) - 1) * opts.sibling_spacing
        start = centres[node_id] - packed / 2
        for child in kids:
            centres[child] = start + extents[child] / 2
            start += extents[child] + opts.sibling_spacing

    positions: dict[str, Point] = {}
    for node_id in graph.node_ids():
        half = lateral_size(graph.size_of(node_id), opts.direction) / 2
        depth = forest.depth[node_id] * opts.level_spacing
        positions[node_id] = orient(centres[node_id] - half, depth, opts.direction)

    return LayoutResult.build(
        positions,
        LayoutAlgorithm.TREE,
        graph.sizes(),
        started,
        iterations=len(forest.roots),
    )
