"""Tests for the tree strategy: forest construction, extents and placement."""

from node_autolayout.config import TreeOptions
from node_autolayout.ir.graph import ConnectionView, LayoutGraph, NodeView, Point, Size
from node_autolayout.layout.tree import build_forest, infer_parents, layout_tree
from node_autolayout.types import Direction, LayoutAlgorithm

# ─── Helpers ──────────────────────────────────────────────────────────────────


def make_graph(*edges: tuple[str, str], nodes: list[str] | None = None) -> LayoutGraph:
    """Build a LayoutGraph of default-size nodes from (src, tgt) pairs."""
    ids: list[str] = list(nodes or [])
    for src, tgt in edges:
        for nid in (src, tgt):
            if nid not in ids:
                ids.append(nid)
    conns = [ConnectionView(id=f"c{i}", from_node_id=s, to_node_id=t) for i, (s, t) in enumerate(edges)]
    return LayoutGraph.build([NodeView(id=nid) for nid in ids], conns)


def binary_tree() -> LayoutGraph:
    """Complete binary tree with 8 leaves (levels 0 to 3)."""
    return make_graph(
        ("r", "a"), ("r", "b"),
        ("a", "c"), ("a", "d"), ("b", "e"), ("b", "f"),
        ("c", "g"), ("c", "h"), ("d", "i"), ("d", "j"),
        ("e", "k"), ("e", "l"), ("f", "m"), ("f", "n"),
    )  # fmt: skip


def centre_x(result, graph: LayoutGraph, node_id: str) -> float:
    return result.node_positions[node_id].x + graph.size_of(node_id).width / 2


# ─── Forest Construction ──────────────────────────────────────────────────────


class TestBuildForest:
    def test_chain(self):
        forest = build_forest(make_graph(("A", "B"), ("B", "C")))
        assert forest.roots == ["A"]
        assert forest.depth == {"A": 0, "B": 1, "C": 2}
        assert forest.preorder == ["A", "B", "C"]

    def test_multi_parent_node_is_a_root(self):
        forest = build_forest(make_graph(("A", "C"), ("B", "C"), nodes=["A", "B", "C"]))
        assert forest.roots == ["A", "B", "C"]
        assert forest.children["A"] == []

    def test_cycle_entered_at_first_node(self):
        forest = build_forest(make_graph(("A", "B"), ("B", "A")))
        assert forest.roots == ["A"]
        assert forest.depth == {"A": 0, "B": 1}

    def test_self_loop_ignored(self):
        g = make_graph(("A", "A"), ("A", "B"))
        assert infer_parents(g) == {"A": [], "B": ["A"]}
        assert build_forest(g).roots == ["A"]

    def test_parallel_connections_count_as_one_parent(self):
        g = make_graph(("A", "B"), ("A", "B"))
        assert infer_parents(g)["B"] == ["A"]
        assert build_forest(g).roots == ["A"]

    def test_every_node_visited_once(self):
        forest = build_forest(binary_tree())
        assert sorted(forest.preorder) == sorted(binary_tree().node_ids())


# ─── Placement ────────────────────────────────────────────────────────────────


class TestLayoutTree:
    def test_levels(self):
        g = binary_tree()
        result = layout_tree(g)
        assert result.algorithm is LayoutAlgorithm.TREE
        for node_id, depth in {"r": 0, "a": 1, "f": 2, "n": 3}.items():
            assert result.node_positions[node_id].y == depth * 100

    def test_leaves_do_not_overlap(self):
        g = binary_tree()
        result = layout_tree(g)
        leaves = sorted(result.node_positions[nid].x for nid in "ghijklmn")
        for left, right in zip(leaves, leaves[1:]):
            assert right - left >= 100 + 30

    def test_parent_centred_over_children(self):
        g = make_graph(("r", "a"), ("r", "b"))
        result = layout_tree(g)
        assert centre_x(result, g, "r") == (centre_x(result, g, "a") + centre_x(result, g, "b")) / 2
        assert result.node_positions["a"] == Point(0, 100)
        assert result.node_positions["b"] == Point(130, 100)

    def test_roots_side_by_side(self):
        result = layout_tree(make_graph(("A", "C"), ("B", "C"), nodes=["A", "B", "C"]))
        assert result.node_positions == {"A": Point(0, 0), "B": Point(130, 0), "C": Point(260, 0)}
        assert result.iterations == 3

    def test_wide_child_widens_subtree(self):
        nodes = [NodeView(id="r"), NodeView(id="a", size=Size(300, 50)), NodeView(id="b")]
        conns = [ConnectionView(id="c0", from_node_id="r", to_node_id="a"),
                 ConnectionView(id="c1", from_node_id="r", to_node_id="b")]  # fmt: skip
        result = layout_tree(LayoutGraph.build(nodes, conns))
        assert result.node_positions["b"].x - (result.node_positions["a"].x + 300) == 30

    def test_left_to_right(self):
        result = layout_tree(make_graph(("A", "B")), TreeOptions(direction=Direction.LR))
        assert result.node_positions == {"A": Point(0, 0), "B": Point(100, 0)}

    def test_reversed_directions(self):
        g = make_graph(("A", "B"))
        assert layout_tree(g, TreeOptions(direction=Direction.BT)).node_positions["B"].y == -100
        assert layout_tree(g, TreeOptions(direction=Direction.RL)).node_positions["B"].x == -100

    def test_cycle_still_positions_everything(self):
        g = make_graph(("A", "B"), ("B", "C"), ("C", "A"))
        result = layout_tree(g)
        assert set(result.node_positions) == {"A", "B", "C"}

    def test_isolated_nodes(self):
        g = make_graph(nodes=["A", "B"])
        result = layout_tree(g)
        assert result.node_positions == {"A": Point(0, 0), "B": Point(130, 0)}

    def test_empty(self):
        assert layout_tree(make_graph()).node_positions == {}
