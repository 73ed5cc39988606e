"""Load editor snapshots (JSON documents) into a LayoutGraph.

The editor stores nodes and connections either as lists or as id-keyed
objects, with camelCase keys::

    {
      "nodes": {"n1": {"id": "n1", "position": {"x": 0, "y": 0},
                       "size": {"width": 120, "height": 60}}},
      "connections": [{"id": "c1", "fromNodeId": "n1", "fromPortId": "out",
                       "toNodeId": "n2", "toPortId": "in"}]
    }
"""

from __future__ import annotations

import json
import math
from collections.abc import Iterable, Mapping
from typing import Any

from node_autolayout.errors import SnapshotError
from node_autolayout.ir.graph import ConnectionView, LayoutGraph, NodeView, Point, Size


def _records(raw: Any, kind: str) -> list[tuple[str | None, Any]]:
    if raw is None:
        return []
    if isinstance(raw, Mapping):
        return list(raw.items())
    if isinstance(raw, list):
        return [(None, item) for item in raw]
    raise SnapshotError(f"'{kind}' must be a list or an object, got {type(raw).__name__}")


def _number(value: Any, what: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
        raise SnapshotError(f"{what} must be a finite number, got {value!r}")
    return float(value)


def _node_from_dict(key: str | None, raw: Any) -> NodeView:
    if not isinstance(raw, Mapping):
        raise SnapshotError(f"node entry must be an object, got {raw!r}")
    node_id = raw.get("id", key)
    if node_id is None:
        raise SnapshotError(f"node entry without an id: {raw!r}")
    pos = raw.get("position") or {}
    raw_size = raw.get("size")
    if not isinstance(pos, Mapping) or (raw_size is not None and not isinstance(raw_size, Mapping)):
        raise SnapshotError(f"node '{node_id}' position and size must be objects")
    position = Point(
        x=_number(pos.get("x", 0.0), f"node '{node_id}' position.x"),
        y=_number(pos.get("y", 0.0), f"node '{node_id}' position.y"),
    )
    size = None
    if raw_size:
        size = Size(
            width=_number(raw_size.get("width"), f"node '{node_id}' size.width"),
            height=_number(raw_size.get("height"), f"node '{node_id}' size.height"),
        )
    return NodeView(id=str(node_id), position=position, size=size)


def _connection_from_dict(key: str | None, raw: Any) -> ConnectionView:
    if not isinstance(raw, Mapping):
        raise SnapshotError(f"connection entry must be an object, got {raw!r}")
    conn_id = raw.get("id", key)
    from_id = raw.get("fromNodeId")
    to_id = raw.get("toNodeId")
    if conn_id is None or from_id is None or to_id is None:
        raise SnapshotError(f"connection entry needs id, fromNodeId and toNodeId: {raw!r}")
    return ConnectionView(
        id=str(conn_id),
        from_node_id=str(from_id),
        to_node_id=str(to_id),
        from_port_id=str(raw.get("fromPortId", "")),
        to_port_id=str(raw.get("toPortId", "")),
    )


def graph_from_dict(data: Mapping[str, Any], selected: Iterable[str] | None = None) -> LayoutGraph:
    """Build a LayoutGraph from a decoded editor snapshot."""
    if not isinstance(data, Mapping):
        raise SnapshotError("snapshot must be a JSON object with 'nodes' and 'connections'")
    nodes = [_node_from_dict(k, v) for k, v in _records(data.get("nodes"), "nodes")]
    connections = [_connection_from_dict(k, v) for k, v in _records(data.get("connections"), "connections")]
    return LayoutGraph.build(nodes, connections, selected=selected)


def load_graph(text: str, selected: Iterable[str] | None = None) -> LayoutGraph:
    """Parse a JSON snapshot string into a LayoutGraph.

    Raises:
        SnapshotError: If the text is not JSON or an entry is malformed.
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise SnapshotError(f"invalid JSON: {e}") from e
    return graph_from_dict(data, selected=selected)
