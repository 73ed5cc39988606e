"""Layout types shared across strategies and callers."""

from __future__ import annotations

import time
from collections.abc import Mapping
from dataclasses import dataclass, field

from node_autolayout.ir.graph import Point, Size
from node_autolayout.layout.bbox import BoundingBox
from node_autolayout.types import LayoutAlgorithm

__all__ = ["BoundingBox", "LayoutMetrics", "LayoutResult"]


@dataclass
class LayoutMetrics:
    bounding_box_width: float = 0.0
    bounding_box_height: float = 0.0
    edge_crossings: int | None = None
    execution_time_ms: float = field(default=0.0, compare=False)


@dataclass
class LayoutResult:
    """Self-contained layout output, one top-left position per input node."""

    node_positions: dict[str, Point]
    algorithm: LayoutAlgorithm
    iterations: int = 0
    metrics: LayoutMetrics = field(default_factory=LayoutMetrics)

    @classmethod
    def build(
        cls,
        node_positions: dict[str, Point],
        algorithm: LayoutAlgorithm,
        sizes: Mapping[str, Size],
        started: float,
        iterations: int = 0,
        edge_crossings: int | None = None,
    ) -> LayoutResult:
        """Wrap strategy output, measuring its extent and the time since ``started``."""
        box = BoundingBox.enclose((p, sizes[nid]) for nid, p in node_positions.items())
        metrics = LayoutMetrics(
            bounding_box_width=box.width,
            bounding_box_height=box.height,
            edge_crossings=edge_crossings,
            execution_time_ms=(time.perf_counter() - started) * 1000.0,
        )
        return cls(node_positions=node_positions, algorithm=algorithm, iterations=iterations, metrics=metrics)
