"""
Tests for the networkx-backed layered layout.
"""

import networkx as nx
import pytest

from factories import layout_edge, layout_node
from pada_graph.graph_model import HandlePosition
from pada_graph.layout import LayeredLayoutEngine, LayoutOptions
from pada_graph.layout.layered import assign_ranks, count_crossings, remove_cycles


def positions(nodes):
    return {node.id: (node.position.x, node.position.y) for node in nodes}


@pytest.fixture
def engine():
    return LayeredLayoutEngine()


@pytest.fixture
def fork():
    nodes = [layout_node("root"), layout_node("a"), layout_node("b")]
    edges = [layout_edge("root", "a"), layout_edge("root", "b")]
    return nodes, edges


class TestLayeredLayoutEngine:
    def test_empty_input_is_noop(self, engine):
        assert engine.layout([], []) == []

    def test_top_to_bottom(self, engine, fork):
        placed = engine.layout(*fork)

        assert positions(placed) == {"root": (111, 0), "a": (0, 86), "b": (222, 86)}
        assert all(node.target_position == HandlePosition.TOP for node in placed)
        assert all(node.source_position == HandlePosition.BOTTOM for node in placed)

    def test_left_to_right(self, engine, fork):
        options = LayeredLayoutEngine.default_options.merged(direction="LR")

        placed = engine.layout(*fork, options)

        assert positions(placed) == {"root": (0, 43), "a": (222, 0), "b": (222, 86)}
        assert all(node.target_position == HandlePosition.LEFT for node in placed)
        assert all(node.source_position == HandlePosition.RIGHT for node in placed)

    def test_unconnected_nodes_still_positioned(self, engine):
        nodes = [layout_node("a"), layout_node("b"), layout_node("lonely")]

        placed = positions(engine.layout(nodes, [layout_edge("a", "b")]))

        assert set(placed) == {"a", "b", "lonely"}
        assert placed["lonely"][1] == 0
        assert placed["lonely"][0] >= 172 + 50

    def test_cycles_and_self_loops_terminate(self, engine):
        nodes = [layout_node(name) for name in "abc"]
        edges = [layout_edge("a", "b"), layout_edge("b", "c"), layout_edge("c", "a"), layout_edge("a", "a")]

        placed = positions(engine.layout(nodes, edges))

        assert len({y for _, y in placed.values()}) == 3

    def test_same_rank_nodes_do_not_overlap(self, engine):
        nodes = [layout_node("r")] + [layout_node(f"c{i}") for i in range(5)]
        edges = [layout_edge("r", f"c{i}") for i in range(5)]

        placed = positions(engine.layout(nodes, edges))

        xs = sorted(placed[f"c{i}"][0] for i in range(5))
        assert all(b - a >= 172 for a, b in zip(xs, xs[1:]))

    def test_long_edges_do_not_change_ranks(self, engine):
        nodes = [layout_node(name) for name in "abc"]
        edges = [layout_edge("a", "b"), layout_edge("b", "c"), layout_edge("a", "c")]

        placed = positions(engine.layout(nodes, edges))

        assert placed["a"][1] < placed["b"][1] < placed["c"][1]

    def test_deterministic(self, engine, fork):
        assert positions(engine.layout(*fork)) == positions(engine.layout(*fork))

    def test_edges_to_outside_nodes_are_ignored(self, engine):
        nodes = [layout_node("root")]

        placed = positions(engine.layout(nodes, [layout_edge("parent", "root")]))

        assert placed == {"root": (0, 0)}


class TestLayeringPhases:
    def test_remove_cycles_reverses_one_edge_per_cycle(self):
        graph = nx.DiGraph([("a", "b"), ("b", "a"), ("c", "c")])

        dag, reversed_edges = remove_cycles(graph)

        assert nx.is_directed_acyclic_graph(dag)
        assert len(reversed_edges) == 1
        assert not list(nx.selfloop_edges(dag))

    def test_longest_path_ranks(self):
        dag = nx.DiGraph([("a", "b"), ("b", "c"), ("a", "c")])
        assert assign_ranks(dag) == {"a": 0, "b": 1, "c": 2}

    def test_count_crossings(self):
        graph = nx.DiGraph([("a", "d"), ("b", "c")])
        assert count_crossings([["a", "b"], ["c", "d"]], graph) == 1
        assert count_crossings([["a", "b"], ["d", "c"]], graph) == 0

    def test_invalid_direction_rejected(self):
        with pytest.raises(ValueError):
            LayoutOptions(direction="BT")
