"""Tests for the force-directed strategy."""

from __future__ import annotations

import math

import pytest

from node_autolayout.config import DirectionalBias, ForceOptions
from node_autolayout.ir.graph import ConnectionView, LayoutGraph, NodeView, Point
from node_autolayout.layout.force import deterministic_direction, initial_state, layout_force_directed
from node_autolayout.types import LayoutAlgorithm

# ─── Helpers ──────────────────────────────────────────────────────────────────


def make_graph(positions: dict[str, tuple[float, float]], *edges: tuple[str, str]) -> LayoutGraph:
    """Default-size nodes at the given top-left positions, joined by (src, tgt) pairs."""
    nodes = [NodeView(id=nid, position=Point(x, y)) for nid, (x, y) in positions.items()]
    conns = [ConnectionView(id=f"c{i}", from_node_id=s, to_node_id=t) for i, (s, t) in enumerate(edges)]
    return LayoutGraph.build(nodes, conns)


def distance(a: Point, b: Point) -> float:
    return math.hypot(a.x - b.x, a.y - b.y)


def spread_graph(count: int) -> LayoutGraph:
    """``count`` nodes on a loose lattice, chained by connections."""
    side = math.ceil(math.sqrt(count))
    positions = {f"n{i}": ((i % side) * 150.0, (i // side) * 90.0) for i in range(count)}
    edges = [(f"n{i}", f"n{i + 1}") for i in range(count - 1)]
    return make_graph(positions, *edges)


# Size-aware repulsion is off here: two 100x50 nodes 100 apart sit under the
# effective-distance floor, which stretches the rest length to about 117.
PAIR_OPTIONS = ForceOptions(iterations=100, spring_length=100, size_aware_repulsion=False)


# ─── Simulation ───────────────────────────────────────────────────────────────


class TestSpringEquilibrium:
    def test_pulled_out_from_close_start(self):
        g = make_graph({"A": (0, 0), "B": (10, 0)}, ("A", "B"))
        pos = layout_force_directed(g, PAIR_OPTIONS).node_positions
        assert 95 <= distance(pos["A"], pos["B"]) <= 105

    def test_pulled_in_from_far_start(self):
        g = make_graph({"A": (0, 0), "B": (1000, 0)}, ("A", "B"))
        pos = layout_force_directed(g, PAIR_OPTIONS).node_positions
        assert 95 <= distance(pos["A"], pos["B"]) <= 105


class TestForceLayout:
    def test_result_shape(self):
        g = make_graph({"A": (0, 0), "B": (200, 0)}, ("A", "B"))
        result = layout_force_directed(g)
        assert result.algorithm is LayoutAlgorithm.FORCE
        assert result.iterations == 100
        assert set(result.node_positions) == {"A", "B"}

    def test_deterministic(self):
        g = spread_graph(12)
        assert layout_force_directed(g).node_positions == layout_force_directed(g).node_positions

    def test_zero_iterations_keeps_input(self):
        g = make_graph({"A": (3, 4), "B": (250, -40)}, ("A", "B"))
        pos = layout_force_directed(g, ForceOptions(iterations=0)).node_positions
        assert pos == {"A": Point(3, 4), "B": Point(250, -40)}

    def test_single_node_with_self_loop_does_not_move(self):
        g = make_graph({"A": (7, 8)}, ("A", "A"))
        assert layout_force_directed(g).node_positions == {"A": Point(7, 8)}

    def test_coincident_nodes_separate(self):
        g = make_graph({"A": (0, 0), "B": (0, 0), "C": (0, 0)})
        pos = layout_force_directed(g, ForceOptions(iterations=50)).node_positions
        assert distance(pos["A"], pos["B"]) > 1
        assert distance(pos["B"], pos["C"]) > 1
        assert distance(pos["A"], pos["C"]) > 1

    def test_jitter_seed_changes_coincident_start(self):
        g = make_graph({"A": (0, 0), "B": (0, 0)})
        first = layout_force_directed(g, ForceOptions(iterations=5, jitter_seed=1)).node_positions
        second = layout_force_directed(g, ForceOptions(iterations=5, jitter_seed=2)).node_positions
        assert first != second

    def test_step_bounded_by_max_force(self):
        g = make_graph({"A": (0, 0), "B": (1, 0)})
        opts = ForceOptions(iterations=1, repulsion_strength=1e9, max_force=20)
        pos = layout_force_directed(g, opts).node_positions
        assert distance(pos["A"], Point(0, 0)) <= 20 * opts.dampening + 1e-9
        assert distance(pos["B"], Point(1, 0)) <= 20 * opts.dampening + 1e-9

    def test_extreme_strengths_stay_finite(self):
        g = make_graph({"A": (0, 0), "B": (1000, 0), "C": (1000, 0)}, ("A", "B"), ("B", "C"), ("A", "C"))
        opts = ForceOptions(
            iterations=20,
            spring_strength=1e308,
            repulsion_strength=1e308,
            directional_bias=DirectionalBias(axis="y", strength=1e308),
        )
        for p in layout_force_directed(g, opts).node_positions.values():
            assert math.isfinite(p.x) and math.isfinite(p.y)

    def test_extreme_spring_strength_stays_finite(self):
        g = make_graph({"A": (0, 0), "B": (1000, 0)}, ("A", "B"))
        pos = layout_force_directed(g, ForceOptions(spring_strength=1e308)).node_positions
        assert all(math.isfinite(p.x) and math.isfinite(p.y) for p in pos.values())

    def test_directional_bias_pushes_targets_down(self):
        g = make_graph({"A": (0, 0), "B": (300, 0)}, ("A", "B"))
        opts = ForceOptions(iterations=60, directional_bias=DirectionalBias(axis="y", strength=5))
        pos = layout_force_directed(g, opts).node_positions
        assert pos["B"].y > pos["A"].y

    def test_barnes_hut_on_large_graph(self):
        g = spread_graph(64)
        result = layout_force_directed(g, ForceOptions(iterations=20))
        assert set(result.node_positions) == set(g.node_ids())
        for p in result.node_positions.values():
            assert math.isfinite(p.x) and math.isfinite(p.y)

    def test_barnes_hut_tracks_exact_repulsion(self):
        g = spread_graph(64)
        exact = layout_force_directed(g, ForceOptions(iterations=1, use_barnes_hut=False)).node_positions
        approx = layout_force_directed(g, ForceOptions(iterations=1, barnes_hut_theta=0.3)).node_positions
        for nid in g.node_ids():
            assert distance(exact[nid], approx[nid]) < 5

    def test_empty(self):
        assert layout_force_directed(make_graph({})).node_positions == {}


class TestJitter:
    def test_direction_is_unit_and_stable(self):
        ux, uy = deterministic_direction("0:A")
        assert math.hypot(ux, uy) == pytest.approx(1.0)
        assert deterministic_direction("0:A") == (ux, uy)

    def test_initial_state_uses_centres(self):
        g = make_graph({"A": (0, 0), "B": (0, 0)})
        state = initial_state(g, seed=0)
        assert (state.xs[0], state.ys[0]) == (50, 25)
        assert math.hypot(state.xs[1] - 50, state.ys[1] - 25) == pytest.approx(10.0)
