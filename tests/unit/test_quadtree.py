"""Tests for the Barnes-Hut quadtree."""

import math

import pytest

from node_autolayout.layout.quadtree import QuadTree


def inverse_square(xs: list[float], ys: list[float]):
    """Body and cluster callbacks for a unit inverse-square repulsion."""

    def body(i: int, j: int) -> tuple[float, float]:
        dx, dy = xs[i] - xs[j], ys[i] - ys[j]
        d = math.hypot(dx, dy)
        if d == 0:
            return (0.0, 0.0)
        return (dx / d**3, dy / d**3)

    def cluster(i: int, cx: float, cy: float, mass: int) -> tuple[float, float]:
        dx, dy = xs[i] - cx, ys[i] - cy
        d = math.hypot(dx, dy)
        return (mass * dx / d**3, mass * dy / d**3)

    return body, cluster


def lattice(side: int, step: float = 10.0) -> tuple[list[float], list[float]]:
    xs = [float((k % side) * step) for k in range(side * side)]
    ys = [float((k // side) * step) for k in range(side * side)]
    return xs, ys


def brute_force(xs, ys, body, target: int) -> tuple[float, float]:
    fx = fy = 0.0
    for j in range(len(xs)):
        if j != target:
            dfx, dfy = body(target, j)
            fx += dfx
            fy += dfy
    return fx, fy


class TestQuadTreeBuild:
    def test_root_mass_and_centre(self):
        tree = QuadTree([0.0, 10.0, 0.0, 10.0], [0.0, 0.0, 10.0, 10.0], theta=0.5)
        root = tree.cells[0]
        assert root.mass == 4
        assert (root.com_x, root.com_y) == pytest.approx((5.0, 5.0))

    def test_root_encloses_all_points(self):
        xs, ys = [-30.0, 12.5, 99.0], [4.0, -70.0, 20.0]
        root = QuadTree(xs, ys, theta=0.5).cells[0]
        for x, y in zip(xs, ys):
            assert root.contains(x, y)

    def test_coincident_points_share_a_bucket(self):
        tree = QuadTree([3.0] * 5, [3.0] * 5, theta=0.5)
        assert tree.cells[0].mass == 5
        leaves = [c for c in tree.cells if c.children is None and c.bodies]
        assert sum(len(c.bodies) for c in leaves) == 5

    def test_empty(self):
        tree = QuadTree([], [], theta=0.5)
        assert tree.cells[0].mass == 0


class TestAccumulate:
    def test_tiny_theta_is_exact(self):
        xs, ys = lattice(6)
        body, cluster = inverse_square(xs, ys)
        tree = QuadTree(xs, ys, theta=1e-9)
        for target in (0, 7, 20, 35):
            assert tree.accumulate(target, body, cluster) == pytest.approx(brute_force(xs, ys, body, target))

    def test_approximation_close_to_exact(self):
        xs, ys = lattice(8)
        body, cluster = inverse_square(xs, ys)
        tree = QuadTree(xs, ys, theta=0.5)
        ex, ey = brute_force(xs, ys, body, 0)
        ax, ay = tree.accumulate(0, body, cluster)
        assert math.hypot(ax - ex, ay - ey) <= 0.1 * math.hypot(ex, ey)

    def test_body_never_acts_on_itself(self):
        calls: list[tuple[int, int]] = []

        def body(i, j):
            calls.append((i, j))
            return (0.0, 0.0)

        tree = QuadTree([1.0] * 4, [1.0] * 4, theta=0.5)
        tree.accumulate(2, body, lambda i, cx, cy, m: (0.0, 0.0))
        assert sorted(calls) == [(2, 0), (2, 1), (2, 3)]
