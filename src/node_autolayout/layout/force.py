"""Force-directed layout: a spring/repulsion particle simulation.

Every node is a particle at the centre of its rectangle. Each step applies
spring forces along connections, inverse-square repulsion between all pairs
(exact, or Barnes-Hut approximated for larger graphs), an optional
directional bias, then integrates velocity with dampening. The step count is
fixed; there is no convergence-based early exit, so callers wanting a
settled layout should raise ``iterations``.

Results are reproducible bit for bit. The only symmetry breaking needed,
for nodes that start on the same point or collapse onto each other, comes
from MD5 hashes of node ids and ``jitter_seed`` rather than a random source.
"""

from __future__ import annotations

import hashlib
import logging
import math
import time
from dataclasses import dataclass

from node_autolayout.config import ForceOptions
from node_autolayout.ir.graph import LayoutGraph, Point
from node_autolayout.layout.quadtree import QuadTree
from node_autolayout.layout.types import LayoutResult
from node_autolayout.types import LayoutAlgorithm

logger = logging.getLogger(__name__)

MIN_EFFECTIVE_DISTANCE: float = 10.0
COINCIDENT_DISTANCE: float = 0.01
JITTER_RADIUS: float = 10.0
BIAS_MIN_SEPARATION: float = 50.0


def _cap(value: float, limit: float) -> float:
    return max(-limit, min(limit, value))


def deterministic_direction(key: str) -> tuple[float, float]:
    """Unit vector derived from an MD5 hash of ``key``."""
    digest = hashlib.md5(key.encode()).hexdigest()
    angle = int(digest[:8], 16) / 0xFFFFFFFF * 2 * math.pi
    return (math.cos(angle), math.sin(angle))


@dataclass
class SimulationState:
    ids: list[str]
    xs: list[float]
    ys: list[float]
    vxs: list[float]
    vys: list[float]
    radii: list[float]
    half_w: list[float]
    half_h: list[float]


def initial_state(graph: LayoutGraph, seed: int) -> SimulationState:
    """Particles at the input rectangle centres with zero velocity.

    A node whose centre coincides with an earlier node's is moved by
    ``JITTER_RADIUS`` along a direction hashed from the seed and its id.
    """
    ids = graph.node_ids()
    state = SimulationState(
        ids=ids,
        xs=[],
        ys=[],
        vxs=[0.0] * len(ids),
        vys=[0.0] * len(ids),
        radii=[],
        half_w=[],
        half_h=[],
    )
    seen: set[tuple[float, float]] = set()
    jittered = 0

    for node_id in ids:
        pos = graph.position_of(node_id)
        size = graph.size_of(node_id)
        cx = pos.x + size.width / 2
        cy = pos.y + size.height / 2
        if (cx, cy) in seen:
            ux, uy = deterministic_direction(f"{seed}:{node_id}:start")
            cx += ux * JITTER_RADIUS
            cy += uy * JITTER_RADIUS
            jittered += 1
        seen.add((cx, cy))
        state.xs.append(cx)
        state.ys.append(cy)
        state.half_w.append(size.width / 2)
        state.half_h.append(size.height / 2)
        state.radii.append(math.hypot(size.width, size.height) / 2)

    if jittered:
        logger.debug("jittered %d coincident starting position(s)", jittered)
    return state


class _Repulsion:
    """Pair and cluster repulsion for one simulation step."""

    def __init__(self, state: SimulationState, opts: ForceOptions) -> None:
        self.state = state
        self.strength = opts.repulsion_strength
        self.max_force = opts.max_force
        self.size_aware = opts.size_aware_repulsion
        self.seed = opts.jitter_seed

    def _effective(self, distance: float, gap: float) -> float:
        if self.size_aware:
            return max(distance - gap, MIN_EFFECTIVE_DISTANCE)
        return distance

    def body(self, i: int, j: int) -> tuple[float, float]:
        """Force on body ``i`` pushed away from body ``j``."""
        s = self.state
        dx = s.xs[i] - s.xs[j]
        dy = s.ys[i] - s.ys[j]
        distance = math.hypot(dx, dy)
        if distance < COINCIDENT_DISTANCE:
            a, b = (s.ids[i], s.ids[j]) if s.ids[i] < s.ids[j] else (s.ids[j], s.ids[i])
            ux, uy = deterministic_direction(f"{self.seed}:{a}:{b}")
            sign = 1.0 if s.ids[i] == a else -1.0
            push = min(self.strength / (MIN_EFFECTIVE_DISTANCE * MIN_EFFECTIVE_DISTANCE), self.max_force)
            return (sign * ux * push, sign * uy * push)
        effective = self._effective(distance, s.radii[i] + s.radii[j])
        magnitude = min(self.strength / (effective * effective), self.max_force)
        return (dx / distance * magnitude, dy / distance * magnitude)

    def cluster(self, i: int, cx: float, cy: float, mass: int) -> tuple[float, float]:
        """Force on body ``i`` from ``mass`` bodies lumped at ``(cx, cy)``."""
        s = self.state
        dx = s.xs[i] - cx
        dy = s.ys[i] - cy
        distance = math.hypot(dx, dy)
        if distance < COINCIDENT_DISTANCE:
            return (0.0, 0.0)
        effective = self._effective(distance, s.radii[i])
        magnitude = min(self.strength * mass / (effective * effective), self.max_force * mass)
        return (dx / distance * magnitude, dy / distance * magnitude)


def apply_pairwise_repulsion(state: SimulationState, rep: _Repulsion, fx: list[float], fy: list[float]) -> None:
    n = len(state.ids)
    for i in range(n):
        for j in range(i + 1, n):
            dfx, dfy = rep.body(i, j)
            fx[i] += dfx
            fy[i] += dfy
            fx[j] -= dfx
            fy[j] -= dfy


def apply_barnes_hut_repulsion(
    state: SimulationState,
    rep: _Repulsion,
    theta: float,
    fx: list[float],
    fy: list[float],
) -> None:
    tree = QuadTree(state.xs, state.ys, theta)
    for i in range(len(state.ids)):
        dfx, dfy = tree.accumulate(i, rep.body, rep.cluster)
        fx[i] += dfx
        fy[i] += dfy


def apply_springs(
    state: SimulationState,
    springs: list[tuple[int, int]],
    opts: ForceOptions,
    fx: list[float],
    fy: list[float],
) -> None:
    """Pull or push each connected pair towards ``spring_length`` apart."""
    for a, b in springs:
        dx = state.xs[b] - state.xs[a]
        dy = state.ys[b] - state.ys[a]
        distance = math.hypot(dx, dy)
        if distance < COINCIDENT_DISTANCE:
            continue
        magnitude = _cap(opts.spring_strength * (distance - opts.spring_length), opts.max_force)
        sx = dx / distance * magnitude
        sy = dy / distance * magnitude
        fx[a] += sx
        fy[a] += sy
        fx[b] -= sx
        fy[b] -= sy


def apply_directional_bias(
    state: SimulationState,
    springs: list[tuple[int, int]],
    opts: ForceOptions,
    fx: list[float],
    fy: list[float],
) -> None:
    """Push each connection's target past its source along the bias axis."""
    bias = opts.directional_bias
    if bias is None:
        return
    push = min(bias.strength, opts.max_force)
    coords, forces = (state.ys, fy) if bias.axis == "y" else (state.xs, fx)
    for a, b in springs:
        if coords[b] < coords[a] + BIAS_MIN_SEPARATION:
            forces[b] += push
            forces[a] -= push * 0.5


def integrate(state: SimulationState, opts: ForceOptions, fx: list[float], fy: list[float]) -> None:
    """Clamp each force to ``max_force``, then ``v = (v + F) * dampening; p += v``."""
    for i in range(len(state.ids)):
        f_x, f_y = fx[i], fy[i]
        magnitude = math.hypot(f_x, f_y)
        if not math.isfinite(magnitude):
            # Overflowed sums keep only their direction; NaN components drop out.
            f_x = math.copysign(1.0, f_x) if math.isinf(f_x) else 0.0
            f_y = math.copysign(1.0, f_y) if math.isinf(f_y) else 0.0
            magnitude = math.hypot(f_x, f_y) or 1.0
            f_x, f_y = f_x / magnitude * opts.max_force, f_y / magnitude * opts.max_force
        elif magnitude > opts.max_force:
            f_x = f_x / magnitude * opts.max_force
            f_y = f_y / magnitude * opts.max_force
        state.vxs[i] = (state.vxs[i] + f_x) * opts.dampening
        state.vys[i] = (state.vys[i] + f_y) * opts.dampening
        state.xs[i] += state.vxs[i]
        state.ys[i] += state.vys[i]


def layout_force_directed(graph: LayoutGraph, options: ForceOptions | None = None) -> LayoutResult:
    """Run the particle simulation for exactly ``options.iterations`` steps.

    The result is an approximation of a low-energy layout, not a minimum.
    """
    started = time.perf_counter()
    opts = options or ForceOptions()
    opts.validate()

    n = graph.node_count()
    if n == 0:
        return LayoutResult.build({}, LayoutAlgorithm.FORCE, {}, started)

    state = initial_state(graph, opts.jitter_seed)
    index = graph.index()
    springs = [
        (index[c.from_node_id], index[c.to_node_id]) for c in graph.connections.values() if not c.is_self_loop
    ]
    rep = _Repulsion(state, opts)
    barnes_hut = opts.use_barnes_hut and n > opts.barnes_hut_min_nodes
    logger.debug("force: %d node(s), %d spring(s), barnes_hut=%s", n, len(springs), barnes_hut)

    for _step in range(opts.iterations):
        fx = [0.0] * n
        fy = [0.0] * n
        if barnes_hut:
            apply_barnes_hut_repulsion(state, rep, opts.barnes_hut_theta, fx, fy)
        else:
            apply_pairwise_repulsion(state, rep, fx, fy)
        apply_springs(state, springs, opts, fx, fy)
        apply_directional_bias(state, springs, opts, fx, fy)
        integrate(state, opts, fx, fy)

    positions = {
        node_id: Point(x=state.xs[i] - state.half_w[i], y=state.ys[i] - state.half_h[i])
        for i, node_id in enumerate(state.ids)
    }
    return LayoutResult.build(positions, LayoutAlgorithm.FORCE, graph.sizes(), started, iterations=opts.iterations)
