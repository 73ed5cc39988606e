"""CLI entry point for node-autolayout."""

import json
import logging
import sys
from dataclasses import replace

import click

from node_autolayout.config import LayoutOptions
from node_autolayout.errors import LayoutError
from node_autolayout.ir.snapshot import load_graph
from node_autolayout.layout.bbox import compute_bounding_box
from node_autolayout.layout.engine import layout_auto
from node_autolayout.types import parse_algorithm, parse_direction


def _build_options(algorithm: str, direction: str | None, iterations: int | None) -> LayoutOptions:
    opts = LayoutOptions(algorithm=parse_algorithm(algorithm))
    if direction is not None:
        d = parse_direction(direction)
        opts = replace(opts, tree=replace(opts.tree, direction=d), hierarchical=replace(opts.hierarchical, direction=d))
    if iterations is not None:
        opts = replace(opts, force=replace(opts.force, iterations=iterations))
    return opts


@click.command()
@click.argument("input", required=False, type=click.Path(exists=True))
@click.option("--algorithm", "-a", "algorithm", type=str, default="auto", help="force, hierarchical, tree, grid or auto")
@click.option("--direction", "-d", "direction", type=str, default=None, help="Flow direction (TB, BT, LR, RL)")
@click.option("--selected", "-s", "selected", multiple=True, help="Only lay out this node id (repeatable)")
@click.option("--iterations", "-i", "iterations", type=int, default=None, help="Force-directed simulation steps")
@click.option("--output", "-o", "output", type=str, default=None, help="Write output to this file instead of stdout")
@click.option("--verbose", "-v", "verbose", is_flag=True, help="Log layout decisions to stderr")
def main(
    input: str | None,
    algorithm: str,
    direction: str | None,
    selected: tuple[str, ...],
    iterations: int | None,
    output: str | None,
    verbose: bool,
) -> None:
    """Compute node positions for a node-editor graph snapshot (JSON)."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    if input:
        try:
            with open(input) as f:
                text = f.read()
        except OSError as e:
            click.echo(f"error: cannot read '{input}': {e}", err=True)
            sys.exit(1)
    else:
        text = sys.stdin.read()

    try:
        graph = load_graph(text, selected=selected or None)
        options = _build_options(algorithm, direction, iterations)
        result = layout_auto(graph, options)
    except LayoutError as e:
        click.echo(f"error: {e}", err=True)
        sys.exit(1)

    box = compute_bounding_box(graph.nodes.values(), result.node_positions, graph.sizes())
    document = {
        "algorithm": result.algorithm.value,
        "iterations": result.iterations,
        "nodePositions": {nid: {"x": p.x, "y": p.y} for nid, p in result.node_positions.items()},
        "boundingBox": {
            "minX": box.min_x,
            "minY": box.min_y,
            "maxX": box.max_x,
            "maxY": box.max_y,
            "width": box.width,
            "height": box.height,
            "centerX": box.center_x,
            "centerY": box.center_y,
        },
    }
    rendered = json.dumps(document, indent=2) + "\n"

    if output:
        try:
            with open(output, "w") as f:
                f.write(rendered)
        except OSError as e:
            click.echo(f"error: cannot write '{output}': {e}", err=True)
            sys.exit(1)
    else:
        click.echo(rendered, nl=False)


if __name__ == "__main__":
    main()
