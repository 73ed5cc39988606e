"""Barnes-Hut quadtree over particle centres.

Cells live in a flat list and refer to their children and bodies by integer
index, so a tree is cheap to rebuild on every simulation step. Each cell
tracks the centre of mass and the number of bodies below it. Splitting stops
once a cell is smaller than ``leaf_size`` (or ``MAX_DEPTH`` is reached); such
cells keep all their bodies in a bucket and are always resolved body by body.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field

QUADTREE_LEAF_SIZE: float = 1.0
MAX_DEPTH: int = 48
ROOT_PADDING: float = 1.0

Vector = tuple[float, float]
BodyForce = Callable[[int, int], Vector]
ClusterForce = Callable[[int, float, float, int], Vector]


@dataclass
class QuadCell:
    x: float
    y: float
    size: float
    mass: int = 0
    com_x: float = 0.0
    com_y: float = 0.0
    bodies: list[int] = field(default_factory=list)
    children: list[int] | None = None

    def contains(self, px: float, py: float) -> bool:
        return self.x <= px <= self.x + self.size and self.y <= py <= self.y + self.size


class QuadTree:
    """Quadtree built over ``(xs[i], ys[i])`` for every body index ``i``."""

    def __init__(
        self,
        xs: Sequence[float],
        ys: Sequence[float],
        theta: float,
        leaf_size: float = QUADTREE_LEAF_SIZE,
    ) -> None:
        self.xs = xs
        self.ys = ys
        self.theta = theta
        self.leaf_size = leaf_size
        self.cells: list[QuadCell] = [_root_cell(xs, ys)]
        for body in range(len(xs)):
            self._insert(0, body, 0)

    def _insert(self, cell_idx: int, body: int, depth: int) -> None:
        px, py = self.xs[body], self.ys[body]
        while True:
            cell = self.cells[cell_idx]
            total = cell.mass + 1
            cell.com_x = (cell.com_x * cell.mass + px) / total
            cell.com_y = (cell.com_y * cell.mass + py) / total
            cell.mass = total

            if cell.children is None:
                if not cell.bodies or cell.size <= self.leaf_size or depth >= MAX_DEPTH:
                    cell.bodies.append(body)
                    return
                existing = cell.bodies
                cell.bodies = []
                cell.children = [-1, -1, -1, -1]
                for other in existing:
                    self._insert(self._child(cell_idx, other), other, depth + 1)

            cell_idx = self._child(cell_idx, body)
            depth += 1

    def _child(self, cell_idx: int, body: int) -> int:
        """Index of the child cell holding ``body``, created on demand."""
        cell = self.cells[cell_idx]
        half = cell.size / 2
        east = self.xs[body] >= cell.x + half
        south = self.ys[body] >= cell.y + half
        quadrant = (2 if south else 0) + (1 if east else 0)
        if cell.children[quadrant] == -1:
            self.cells.append(
                QuadCell(
                    x=cell.x + (half if east else 0.0),
                    y=cell.y + (half if south else 0.0),
                    size=half,
                )
            )
            cell.children[quadrant] = len(self.cells) - 1
        return cell.children[quadrant]

    def accumulate(self, body: int, body_force: BodyForce, cluster_force: ClusterForce) -> Vector:
        """Net force on ``body`` from every other body.

        A cell that does not contain ``body`` and satisfies
        ``size / distance < theta`` contributes once, through ``cluster_force``
        at its centre of mass; bucket leaves contribute body by body.
        """
        px, py = self.xs[body], self.ys[body]
        fx = fy = 0.0
        stack = [0]
        while stack:
            cell = self.cells[stack.pop()]
            if cell.mass == 0:
                continue
            if cell.children is None:
                for other in cell.bodies:
                    if other != body:
                        dfx, dfy = body_force(body, other)
                        fx += dfx
                        fy += dfy
                continue
            dx = cell.com_x - px
            dy = cell.com_y - py
            distance = (dx * dx + dy * dy) ** 0.5
            if distance > 0 and not cell.contains(px, py) and cell.size / distance < self.theta:
                dfx, dfy = cluster_force(body, cell.com_x, cell.com_y, cell.mass)
                fx += dfx
                fy += dfy
                continue
            stack.extend(child for child in cell.children if child != -1)
        return (fx, fy)


def _root_cell(xs: Sequence[float], ys: Sequence[float]) -> QuadCell:
    """Square cell enclosing every point, with a little padding."""
    if not xs:
        return QuadCell(x=0.0, y=0.0, size=1.0)
    min_x, max_x = min(xs), max(xs)
    min_y, max_y = min(ys), max(ys)
    size = max(max_x - min_x, max_y - min_y) + 2 * ROOT_PADDING
    return QuadCell(x=min_x - ROOT_PADDING, y=min_y - ROOT_PADDING, size=size)
