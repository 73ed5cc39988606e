"""Graph view: the subgraph a layout strategy works on.

This module owns the canonical graph data structure used by every strategy.
It takes the host editor's node and connection records, keeps the requested
subset, drops connections whose endpoints are not part of that subset and
resolves the size of every node once, so strategies never need to look at
the host's size registry.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from types import MappingProxyType

import networkx as nx

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Point:
    """A 2D point in canvas coordinates."""

    x: float
    y: float


@dataclass(frozen=True)
class Size:
    width: float
    height: float


DEFAULT_NODE_SIZE = Size(width=100.0, height=50.0)


@dataclass(frozen=True)
class NodeView:
    id: str
    position: Point = Point(0.0, 0.0)
    size: Size | None = None


@dataclass(frozen=True)
class ConnectionView:
    id: str
    from_node_id: str
    to_node_id: str
    from_port_id: str = ""
    to_port_id: str = ""

    @property
    def is_self_loop(self) -> bool:
        return self.from_node_id == self.to_node_id


def _as_records(items: Iterable | Mapping | None) -> list:
    if items is None:
        return []
    if isinstance(items, Mapping):
        return list(items.values())
    return list(items)


class LayoutGraph:
    """An immutable node/connection snapshot handed to a strategy.

    Wraps a networkx DiGraph whose node and edge order follow the caller's
    order. Every connection kept here has both endpoints in ``nodes``.
    """

    def __init__(
        self,
        digraph: nx.DiGraph,
        nodes: dict[str, NodeView],
        connections: dict[str, ConnectionView],
        sizes: dict[str, Size],
    ) -> None:
        self.digraph = digraph
        self._nodes = nodes
        self._connections = connections
        self._sizes = sizes

    @classmethod
    def build(
        cls,
        nodes: Iterable[NodeView] | Mapping[str, NodeView],
        connections: Iterable[ConnectionView] | Mapping[str, ConnectionView] | None = None,
        selected: Iterable[str] | None = None,
        node_sizes: Mapping[str, Size] | None = None,
        default_size: Size = DEFAULT_NODE_SIZE,
    ) -> LayoutGraph:
        """Extract the subgraph to lay out.

        Args:
            nodes: All nodes of the host graph, in the order layouts should use.
            connections: All connections of the host graph.
            selected: Restrict the view to these node ids; None keeps every node.
            node_sizes: Explicit sizes that take precedence over ``NodeView.size``.
            default_size: Size for nodes with neither an override nor their own size.

        Returns:
            The LayoutGraph. Connections whose endpoints are outside the view are
            dropped, never reported as errors.
        """
        keep: set[str] | None = set(selected) if selected is not None else None
        overrides = node_sizes or {}

        digraph: nx.DiGraph = nx.DiGraph()
        kept_nodes: dict[str, NodeView] = {}
        sizes: dict[str, Size] = {}
        for node in _as_records(nodes):
            if keep is not None and node.id not in keep:
                continue
            if node.id in kept_nodes:
                continue
            kept_nodes[node.id] = node
            sizes[node.id] = overrides.get(node.id) or node.size or default_size
            digraph.add_node(node.id, data=node)

        kept_connections: dict[str, ConnectionView] = {}
        dropped = 0
        for conn in _as_records(connections):
            if conn.from_node_id not in kept_nodes or conn.to_node_id not in kept_nodes:
                dropped += 1
                continue
            kept_connections[conn.id] = conn
            if not digraph.has_edge(conn.from_node_id, conn.to_node_id):
                digraph.add_edge(conn.from_node_id, conn.to_node_id, connections=[])
            digraph.edges[conn.from_node_id, conn.to_node_id]["connections"].append(conn.id)

        if dropped:
            logger.debug("dropped %d connection(s) with endpoints outside the view", dropped)

        return cls(digraph=digraph, nodes=kept_nodes, connections=kept_connections, sizes=sizes)

    @property
    def nodes(self) -> Mapping[str, NodeView]:
        return MappingProxyType(self._nodes)

    @property
    def connections(self) -> Mapping[str, ConnectionView]:
        return MappingProxyType(self._connections)

    def node_ids(self) -> list[str]:
        return list(self._nodes)

    def size_of(self, node_id: str) -> Size:
        return self._sizes[node_id]

    def position_of(self, node_id: str) -> Point:
        return self._nodes[node_id].position

    def sizes(self) -> dict[str, Size]:
        return dict(self._sizes)

    def node_count(self) -> int:
        return self.digraph.number_of_nodes()

    def edge_count(self) -> int:
        """Number of distinct directed (from, to) pairs, self-loops included."""
        return self.digraph.number_of_edges()

    def is_dag(self) -> bool:
        return nx.is_directed_acyclic_graph(self.digraph)

    def in_degree(self, node_id: str) -> int:
        if node_id not in self.digraph:
            return 0
        return self.digraph.in_degree(node_id)

    def out_degree(self, node_id: str) -> int:
        if node_id not in self.digraph:
            return 0
        return self.digraph.out_degree(node_id)

    def successors(self, node_id: str) -> list[str]:
        return list(self.digraph.successors(node_id))

    def predecessors(self, node_id: str) -> list[str]:
        return list(self.digraph.predecessors(node_id))

    def edges(self) -> list[tuple[str, str]]:
        """Distinct directed pairs, grouped by source node in caller order."""
        return list(self.digraph.edges())

    def index(self) -> dict[str, int]:
        """Dense index of every node id, in caller order."""
        return {node_id: i for i, node_id in enumerate(self._nodes)}
