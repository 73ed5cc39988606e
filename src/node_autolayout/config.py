"""Centralized configuration for node-autolayout.

Every strategy takes one frozen options dataclass. All fields have defaults
so callers only name what they want to change, e.g.
``dataclasses.replace(ForceOptions(), iterations=300)``.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field

from node_autolayout.errors import OptionValidationError
from node_autolayout.types import CrossReduction, Direction, LayoutAlgorithm

# ─── Selector thresholds ─────────────────────────────────────────────────────

HIERARCHICAL_MAX_NODES: int = 150
HIERARCHICAL_MAX_AVG_DEGREE: float = 6.0


def _require_finite(name: str, value: float) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
        raise OptionValidationError(f"{name} must be a finite number, got {value!r}")


def _require_positive(name: str, value: float) -> None:
    _require_finite(name, value)
    if value <= 0:
        raise OptionValidationError(f"{name} must be > 0, got {value!r}")


def _require_non_negative(name: str, value: float) -> None:
    _require_finite(name, value)
    if value < 0:
        raise OptionValidationError(f"{name} must be >= 0, got {value!r}")


def _require_count(name: str, value: int, minimum: int = 0) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or value < minimum:
        raise OptionValidationError(f"{name} must be an integer >= {minimum}, got {value!r}")


@dataclass(frozen=True)
class GridOptions:
    """Options for the grid strategy."""

    spacing: float = 200.0
    columns: int | None = None

    def validate(self) -> None:
        _require_positive("spacing", self.spacing)
        if self.columns is not None:
            _require_count("columns", self.columns, minimum=1)


@dataclass(frozen=True)
class TreeOptions:
    """Options for the tree strategy."""

    direction: Direction = Direction.TB
    sibling_spacing: float = 30.0
    level_spacing: float = 100.0
    min_extent: float = 1.0

    def validate(self) -> None:
        if not isinstance(self.direction, Direction):
            raise OptionValidationError(f"direction must be a Direction, got {self.direction!r}")
        _require_positive("sibling_spacing", self.sibling_spacing)
        _require_positive("level_spacing", self.level_spacing)
        _require_non_negative("min_extent", self.min_extent)


@dataclass(frozen=True)
class HierarchicalOptions:
    """Options for the layered (Sugiyama-style) strategy."""

    direction: Direction = Direction.TB
    layer_spacing: float = 150.0
    node_spacing: float = 50.0
    cross_reduction: CrossReduction = CrossReduction.BARYCENTRIC
    cross_reduction_iterations: int = 4
    size_aware: bool = True

    def validate(self) -> None:
        if not isinstance(self.direction, Direction):
            raise OptionValidationError(f"direction must be a Direction, got {self.direction!r}")
        if not isinstance(self.cross_reduction, CrossReduction):
            raise OptionValidationError(f"cross_reduction must be a CrossReduction, got {self.cross_reduction!r}")
        _require_positive("layer_spacing", self.layer_spacing)
        _require_positive("node_spacing", self.node_spacing)
        _require_count("cross_reduction_iterations", self.cross_reduction_iterations)


@dataclass(frozen=True)
class DirectionalBias:
    """Constant push of downstream nodes along one axis (for DAG-like inputs)."""

    axis: str = "y"
    strength: float = 5.0

    def validate(self) -> None:
        if self.axis not in ("x", "y"):
            raise OptionValidationError(f"directional bias axis must be 'x' or 'y', got {self.axis!r}")
        _require_non_negative("directional_bias.strength", self.strength)


@dataclass(frozen=True)
class ForceOptions:
    """Options for the force-directed simulation."""

    iterations: int = 100
    spring_length: float = 200.0
    spring_strength: float = 0.4
    repulsion_strength: float = 2000.0
    dampening: float = 0.85
    max_force: float = 50.0
    size_aware_repulsion: bool = True
    use_barnes_hut: bool = True
    barnes_hut_theta: float = 0.7
    barnes_hut_min_nodes: int = 50
    jitter_seed: int = 0
    directional_bias: DirectionalBias | None = None

    def validate(self) -> None:
        _require_count("iterations", self.iterations)
        _require_positive("spring_length", self.spring_length)
        _require_non_negative("spring_strength", self.spring_strength)
        _require_non_negative("repulsion_strength", self.repulsion_strength)
        _require_finite("dampening", self.dampening)
        if not 0 < self.dampening < 1:
            raise OptionValidationError(f"dampening must be in (0, 1), got {self.dampening!r}")
        _require_positive("max_force", self.max_force)
        _require_positive("barnes_hut_theta", self.barnes_hut_theta)
        _require_count("barnes_hut_min_nodes", self.barnes_hut_min_nodes)
        _require_count("jitter_seed", self.jitter_seed)
        if self.directional_bias is not None:
            self.directional_bias.validate()


@dataclass(frozen=True)
class SelectorThresholds:
    """Limits under which a DAG is still laid out in layers."""

    hierarchical_max_nodes: int = HIERARCHICAL_MAX_NODES
    hierarchical_max_avg_degree: float = HIERARCHICAL_MAX_AVG_DEGREE

    def validate(self) -> None:
        _require_count("hierarchical_max_nodes", self.hierarchical_max_nodes)
        _require_non_negative("hierarchical_max_avg_degree", self.hierarchical_max_avg_degree)


@dataclass(frozen=True)
class LayoutOptions:
    """Dispatcher options: which algorithm plus the options of every strategy."""

    algorithm: LayoutAlgorithm = LayoutAlgorithm.AUTO
    force: ForceOptions = field(default_factory=ForceOptions)
    hierarchical: HierarchicalOptions = field(default_factory=HierarchicalOptions)
    tree: TreeOptions = field(default_factory=TreeOptions)
    grid: GridOptions = field(default_factory=GridOptions)
    selector: SelectorThresholds = field(default_factory=SelectorThresholds)

    def validate(self) -> None:
        if not isinstance(self.algorithm, LayoutAlgorithm):
            raise OptionValidationError(f"algorithm must be a LayoutAlgorithm, got {self.algorithm!r}")
        self.selector.validate()
