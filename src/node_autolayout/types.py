"""Shared type definitions for node-autolayout.

Enums used across the graph view, the strategies and the dispatcher.
"""

from __future__ import annotations

from enum import Enum

from node_autolayout.errors import OptionValidationError, UnsupportedAlgorithmError


class Direction(Enum):
    TB = "TB"  # top to bottom
    BT = "BT"  # bottom to top
    LR = "LR"  # left to right
    RL = "RL"  # right to left

    @classmethod
    def default(cls) -> Direction:
        return cls.TB

    @property
    def is_horizontal(self) -> bool:
        return self in (Direction.LR, Direction.RL)


class LayoutAlgorithm(Enum):
    FORCE = "force"
    HIERARCHICAL = "hierarchical"
    TREE = "tree"
    GRID = "grid"
    AUTO = "auto"


class CrossReduction(Enum):
    BARYCENTRIC = "barycentric"
    MEDIAN = "median"
    NONE = "none"


_DIRECTION_MAP: dict[str, Direction] = {
    "TB": Direction.TB,
    "TD": Direction.TB,
    "BT": Direction.BT,
    "LR": Direction.LR,
    "RL": Direction.RL,
}

_ALGORITHM_MAP: dict[str, LayoutAlgorithm] = {
    "force": LayoutAlgorithm.FORCE,
    "force-directed": LayoutAlgorithm.FORCE,
    "hierarchical": LayoutAlgorithm.HIERARCHICAL,
    "tree": LayoutAlgorithm.TREE,
    "grid": LayoutAlgorithm.GRID,
    "auto": LayoutAlgorithm.AUTO,
}


def parse_direction(value: str | Direction) -> Direction:
    """Resolve a direction name ('TB', 'TD', 'BT', 'LR', 'RL')."""
    if isinstance(value, Direction):
        return value
    key = value.upper()
    if key not in _DIRECTION_MAP:
        raise OptionValidationError(f"Unknown direction '{value}'; use TB, BT, LR, or RL")
    return _DIRECTION_MAP[key]


def parse_algorithm(value: str | LayoutAlgorithm) -> LayoutAlgorithm:
    """Resolve an algorithm name, raising UnsupportedAlgorithmError for anything unknown."""
    if isinstance(value, LayoutAlgorithm):
        return value
    key = str(value).lower()
    if key not in _ALGORITHM_MAP:
        names = ", ".join(sorted(_ALGORITHM_MAP))
        raise UnsupportedAlgorithmError(f"Unsupported layout algorithm '{value}'; use one of: {names}")
    return _ALGORITHM_MAP[key]


def parse_cross_reduction(value: str | CrossReduction) -> CrossReduction:
    if isinstance(value, CrossReduction):
        return value
    try:
        return CrossReduction(value.lower())
    except ValueError:
        raise OptionValidationError(
            f"Unknown crossing reduction '{value}'; use barycentric, median, or none"
        ) from None
