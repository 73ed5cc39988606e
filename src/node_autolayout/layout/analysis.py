"""Graph analysis for automatic strategy selection."""

from __future__ import annotations

from dataclasses import dataclass

import networkx as nx

from node_autolayout.config import SelectorThresholds
from node_autolayout.ir.graph import LayoutGraph
from node_autolayout.types import LayoutAlgorithm


@dataclass(frozen=True)
class GraphCharacteristics:
    node_count: int
    edge_count: int
    is_tree: bool
    is_dag: bool
    max_degree: int
    avg_degree: float
    connected_components: int
    density: float

    @property
    def has_cycles(self) -> bool:
        return not self.is_dag


def calculate_density(node_count: int, edge_count: int) -> float:
    """``edges / (n * (n - 1))`` for a directed graph; 0 for fewer than two nodes."""
    if node_count <= 1:
        return 0.0
    return edge_count / (node_count * (node_count - 1))


def analyze_graph(graph: LayoutGraph) -> GraphCharacteristics:
    """Topology summary of the graph view.

    ``is_tree`` holds when the graph is acyclic and no node has more than one
    distinct parent, i.e. the graph is a forest.
    """
    digraph = graph.digraph
    node_count = digraph.number_of_nodes()
    edge_count = digraph.number_of_edges()
    if node_count == 0:
        return GraphCharacteristics(0, 0, True, True, 0, 0.0, 0, 0.0)

    is_dag = nx.is_directed_acyclic_graph(digraph)
    single_parent = all(digraph.in_degree(n) <= 1 for n in digraph.nodes)
    degrees = [digraph.in_degree(n) + digraph.out_degree(n) for n in digraph.nodes]

    return GraphCharacteristics(
        node_count=node_count,
        edge_count=edge_count,
        is_tree=is_dag and single_parent,
        is_dag=is_dag,
        max_degree=max(degrees),
        avg_degree=sum(degrees) / node_count,
        connected_components=nx.number_weakly_connected_components(digraph),
        density=calculate_density(node_count, edge_count),
    )


def select_algorithm(
    characteristics: GraphCharacteristics,
    thresholds: SelectorThresholds | None = None,
) -> LayoutAlgorithm:
    """Pick a strategy from the graph's shape. Pure and deterministic.

    - 0 or 1 node: grid
    - forest (acyclic, at most one parent per node): tree
    - DAG within ``hierarchical_max_nodes`` and ``hierarchical_max_avg_degree``: hierarchical
    - anything else (cyclic, dense or large): force
    """
    limits = thresholds or SelectorThresholds()
    c = characteristics

    if c.node_count <= 1:
        return LayoutAlgorithm.GRID
    if c.is_tree:
        return LayoutAlgorithm.TREE
    within_limits = c.node_count <= limits.hierarchical_max_nodes and c.avg_degree <= limits.hierarchical_max_avg_degree
    if c.is_dag and within_limits:
        return LayoutAlgorithm.HIERARCHICAL
    return LayoutAlgorithm.FORCE
