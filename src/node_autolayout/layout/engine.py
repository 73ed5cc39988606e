"""Layout dispatcher: one entry point over every strategy."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import replace

from node_autolayout.config import LayoutOptions
from node_autolayout.errors import UnsupportedAlgorithmError
from node_autolayout.ir.graph import LayoutGraph
from node_autolayout.layout.analysis import analyze_graph, select_algorithm
from node_autolayout.layout.force import layout_force_directed
from node_autolayout.layout.grid import layout_grid
from node_autolayout.layout.hierarchical import layout_hierarchical
from node_autolayout.layout.tree import layout_tree
from node_autolayout.layout.types import LayoutResult
from node_autolayout.types import LayoutAlgorithm, parse_algorithm

logger = logging.getLogger(__name__)

_STRATEGIES: dict[LayoutAlgorithm, Callable[[LayoutGraph, LayoutOptions], LayoutResult]] = {
    LayoutAlgorithm.FORCE: lambda graph, opts: layout_force_directed(graph, opts.force),
    LayoutAlgorithm.HIERARCHICAL: lambda graph, opts: layout_hierarchical(graph, opts.hierarchical),
    LayoutAlgorithm.TREE: lambda graph, opts: layout_tree(graph, opts.tree),
    LayoutAlgorithm.GRID: lambda graph, opts: layout_grid(graph, opts.grid),
}


def resolve_algorithm(graph: LayoutGraph, options: LayoutOptions) -> LayoutAlgorithm:
    """The concrete strategy ``options`` asks for, running the selector for ``auto``."""
    if options.algorithm is not LayoutAlgorithm.AUTO:
        return options.algorithm
    characteristics = analyze_graph(graph)
    chosen = select_algorithm(characteristics, options.selector)
    logger.debug("auto layout selected %s for %s", chosen.value, characteristics)
    return chosen


def layout_auto(graph: LayoutGraph, options: LayoutOptions | None = None) -> LayoutResult:
    """Lay out ``graph`` with ``options.algorithm``, choosing one first when it is ``auto``.

    The chosen strategy receives its own options from ``options``.

    Raises:
        UnsupportedAlgorithmError: If ``options.algorithm`` names no strategy.
        OptionValidationError: If any option used is out of range.
    """
    opts = options or LayoutOptions()
    if not isinstance(opts.algorithm, LayoutAlgorithm):
        opts = replace(opts, algorithm=parse_algorithm(opts.algorithm))
    opts.validate()
    algorithm = resolve_algorithm(graph, opts)
    strategy = _STRATEGIES.get(algorithm)
    if strategy is None:
        raise UnsupportedAlgorithmError(f"Unsupported layout algorithm '{algorithm.value}'")
    result = strategy(graph, opts)
    logger.debug(
        "%s layout of %d node(s) took %.2f ms",
        algorithm.value,
        len(result.node_positions),
        result.metrics.execution_time_ms,
    )
    return result


def run_layout(
    graph: LayoutGraph,
    algorithm: str | LayoutAlgorithm = LayoutAlgorithm.AUTO,
    options: LayoutOptions | None = None,
) -> LayoutResult:
    """Like ``layout_auto`` but with the algorithm given by name ('force', 'tree', ...)."""
    opts = options or LayoutOptions()
    return layout_auto(graph, replace(opts, algorithm=parse_algorithm(algorithm)))
