"""Hierarchical (Sugiyama-style) layered layout.

Phases:
  1. Cycle breaking (DFS back edges)
  2. Layer assignment (longest path from sources)
  3. Initial ordering (DFS discovery order)
  4. Crossing reduction (barycenter or median sweeps)
  5. Coordinate assignment

Crossing reduction is a heuristic: it usually removes most crossings but is
not guaranteed to find the crossing-minimal ordering. Only edges between
adjacent layers are counted and reordered against; long edges are not split
into dummy nodes.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from enum import IntEnum

import networkx as nx

from node_autolayout.config import HierarchicalOptions
from node_autolayout.ir.graph import LayoutGraph, Point
from node_autolayout.layout.orient import lateral_size, orient
from node_autolayout.layout.types import LayoutResult
from node_autolayout.types import CrossReduction, LayoutAlgorithm

logger = logging.getLogger(__name__)


# ─── Cycle Breaking ─────────────────────────────────────────────────────────


class _Color(IntEnum):
    WHITE = 0
    GRAY = 1
    BLACK = 2


@dataclass
class CycleBreakResult:
    discovery: list[str] = field(default_factory=list)
    back_edges: set[tuple[str, str]] = field(default_factory=set)


def find_back_edges(graph: nx.DiGraph) -> CycleBreakResult:
    """Depth-first search in node order, collecting edges that close a cycle.

    An edge is a back edge when its target is still on the DFS stack; self-loops
    always are. Removing every back edge leaves a DAG.
    """
    result = CycleBreakResult()
    color: dict[str, _Color] = {node: _Color.WHITE for node in graph.nodes}

    for start in graph.nodes:
        if color[start] is not _Color.WHITE:
            continue
        color[start] = _Color.GRAY
        result.discovery.append(start)
        stack = [(start, iter(graph.successors(start)))]
        while stack:
            node, successors = stack[-1]
            advanced = False
            for succ in successors:
                if color[succ] is _Color.GRAY:
                    result.back_edges.add((node, succ))
                elif color[succ] is _Color.WHITE:
                    color[succ] = _Color.GRAY
                    result.discovery.append(succ)
                    stack.append((succ, iter(graph.successors(succ))))
                    advanced = True
                    break
            if not advanced:
                color[node] = _Color.BLACK
                stack.pop()

    return result


# ─── Layer Assignment ────────────────────────────────────────────────────────


class LayerAssignment:
    def __init__(
        self,
        layers: dict[str, int],
        layer_count: int,
        back_edges: set[tuple[str, str]],
        discovery: list[str],
    ) -> None:
        self.layers = layers
        self.layer_count = layer_count
        self.back_edges = back_edges
        self.discovery = discovery

    @classmethod
    def assign(cls, graph: LayoutGraph) -> LayerAssignment:
        """Longest-path layering over the graph minus its back edges."""
        broken = find_back_edges(graph.digraph)
        dag: nx.DiGraph = nx.DiGraph()
        dag.add_nodes_from(graph.digraph.nodes)
        dag.add_edges_from(e for e in graph.digraph.edges() if e not in broken.back_edges)

        layers: dict[str, int] = {node_id: 0 for node_id in graph.digraph.nodes}
        for node_id in nx.topological_sort(dag):
            for succ in dag.successors(node_id):
                if layers[succ] < layers[node_id] + 1:
                    layers[succ] = layers[node_id] + 1

        if broken.back_edges:
            logger.debug("excluded %d back edge(s) from ranking", len(broken.back_edges))

        layer_count = (max(layers.values()) + 1) if layers else 0
        return cls(layers=layers, layer_count=layer_count, back_edges=broken.back_edges, discovery=broken.discovery)

    def ordering(self) -> list[list[str]]:
        """Nodes grouped by layer, each layer in DFS discovery order."""
        ordering: list[list[str]] = [[] for _ in range(self.layer_count)]
        for node_id in self.discovery:
            ordering[self.layers[node_id]].append(node_id)
        return ordering


# ─── Crossing Minimization ───────────────────────────────────────────────────


def neighbour_map(graph: LayoutGraph) -> dict[str, set[str]]:
    """Undirected adjacency without self-loops."""
    adjacency: dict[str, set[str]] = {node_id: set() for node_id in graph.node_ids()}
    for src, tgt in graph.edges():
        if src == tgt:
            continue
        adjacency[src].add(tgt)
        adjacency[tgt].add(src)
    return adjacency


def count_crossings(ordering: list[list[str]], adjacency: dict[str, set[str]]) -> int:
    """Count pairwise crossings of the edges between each pair of adjacent layers."""
    total = 0
    for l_idx in range(len(ordering) - 1):
        lower_pos: dict[str, int] = {nid: i for i, nid in enumerate(ordering[l_idx + 1])}
        edges: list[tuple[int, int]] = []
        for up, src_id in enumerate(ordering[l_idx]):
            for nb in adjacency.get(src_id, ()):
                if nb in lower_pos:
                    edges.append((up, lower_pos[nb]))
        for i in range(len(edges)):
            for j in range(i + 1, len(edges)):
                ei, ej = edges[i], edges[j]
                if (ei[0] < ej[0] and ei[1] > ej[1]) or (ei[0] > ej[0] and ei[1] < ej[1]):
                    total += 1
    return total


def _barycenter(positions: list[int]) -> float:
    return sum(positions) / len(positions)


def _median(positions: list[int]) -> float:
    ordered = sorted(positions)
    mid = len(ordered) // 2
    if len(ordered) % 2 == 0:
        return (ordered[mid - 1] + ordered[mid]) / 2
    return float(ordered[mid])


def reorder_layer(
    layer: list[str],
    fixed: list[str],
    adjacency: dict[str, set[str]],
    method: CrossReduction,
) -> list[str]:
    """Stable re-sort of ``layer`` by the mean (or median) index of its neighbours in ``fixed``.

    A node with no neighbour in ``fixed`` keeps its current index as its key.
    """
    fixed_pos: dict[str, int] = {nid: i for i, nid in enumerate(fixed)}
    measure = _median if method is CrossReduction.MEDIAN else _barycenter

    keys: dict[str, float] = {}
    for index, node_id in enumerate(layer):
        positions = [fixed_pos[nb] for nb in adjacency.get(node_id, ()) if nb in fixed_pos]
        keys[node_id] = measure(positions) if positions else float(index)
    return sorted(layer, key=lambda nid: keys[nid])


def minimise_crossings(
    ordering: list[list[str]],
    adjacency: dict[str, set[str]],
    method: CrossReduction,
    iterations: int,
) -> tuple[list[list[str]], int]:
    """Alternate downward and upward sweeps, keeping the best ordering seen.

    Returns:
        (ordering, crossings) for the ordering with the fewest crossings.
    """
    current = [list(layer) for layer in ordering]
    best = [list(layer) for layer in current]
    best_crossings = count_crossings(current, adjacency)
    if method is CrossReduction.NONE or len(current) <= 1:
        return best, best_crossings

    for _round in range(iterations):
        if best_crossings == 0:
            break
        for layer_idx in range(1, len(current)):
            current[layer_idx] = reorder_layer(current[layer_idx], current[layer_idx - 1], adjacency, method)
        for layer_idx in range(len(current) - 2, -1, -1):
            current[layer_idx] = reorder_layer(current[layer_idx], current[layer_idx + 1], adjacency, method)

        crossings = count_crossings(current, adjacency)
        if crossings < best_crossings:
            best_crossings = crossings
            best = [list(layer) for layer in current]

    return best, best_crossings


# ─── Coordinate Assignment ───────────────────────────────────────────────────


def assign_coordinates(
    ordering: list[list[str]],
    graph: LayoutGraph,
    opts: HierarchicalOptions,
) -> dict[str, Point]:
    """Centre every layer on the flow axis and step layers by ``layer_spacing``."""
    direction = opts.direction

    def across(node_id: str) -> float:
        return lateral_size(graph.size_of(node_id), direction)

    pitch = max((across(nid) for nid in graph.node_ids()), default=0.0) + opts.node_spacing

    positions: dict[str, Point] = {}
    for layer_idx, layer_nodes in enumerate(ordering):
        depth = layer_idx * opts.layer_spacing
        if opts.size_aware:
            total = sum(across(nid) for nid in layer_nodes) + (len(layer_nodes) - 1) * opts.node_spacing
            cursor = -total / 2
            for node_id in layer_nodes:
                positions[node_id] = orient(cursor, depth, direction)
                cursor += across(node_id) + opts.node_spacing
        else:
            first_centre = -(len(layer_nodes) - 1) * pitch / 2
            for slot, node_id in enumerate(layer_nodes):
                centre = first_centre + slot * pitch
                positions[node_id] = orient(centre - across(node_id) / 2, depth, direction)
    return positions


# ─── Strategy ────────────────────────────────────────────────────────────────


def layout_hierarchical(graph: LayoutGraph, options: HierarchicalOptions | None = None) -> LayoutResult:
    """Layered layout along ``options.direction``.

    Never fails on cycles, self-loops or disconnected input; every component
    starts at layer 0. ``iterations`` in the result is the number of layers.
    """
    started = time.perf_counter()
    opts = options or HierarchicalOptions()
    opts.validate()

    if graph.node_count() == 0:
        return LayoutResult.build({}, LayoutAlgorithm.HIERARCHICAL, {}, started, edge_crossings=0)

    la = LayerAssignment.assign(graph)
    adjacency = neighbour_map(graph)
    ordering, crossings = minimise_crossings(
        la.ordering(), adjacency, opts.cross_reduction, opts.cross_reduction_iterations
    )
    positions = assign_coordinates(ordering, graph, opts)
    logger.debug("hierarchical: %d layer(s), %d crossing(s)", la.layer_count, crossings)

    # Caller order, not layer order.
    node_positions = {nid: positions[nid] for nid in graph.node_ids()}
    return LayoutResult.build(
        node_positions,
        LayoutAlgorithm.HIERARCHICAL,
        graph.sizes(),
        started,
        iterations=la.layer_count,
        edge_crossings=crossings,
    )
