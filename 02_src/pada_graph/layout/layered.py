"""Layered (Sugiyama-style) layout on top of networkx.

Phases:
  1. Cycle removal (self-loops dropped, one edge per remaining cycle reversed)
  2. Rank assignment (longest path from the sources)
  3. Dummy nodes for edges spanning more than one rank
  4. Crossing reduction (barycenter sweeps, kept only while they help)
  5. Coordinate assignment (rank rows, children pulled under their parents)

Coordinates are computed as node centers, then shifted to the top-left
origin the renderer expects.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Set, Tuple

import networkx as nx

from ..graph_model import HandlePosition, LayoutEdge, LayoutNode, Position
from .base import (
    LayoutOptions,
    LayoutStrategy,
    copy_node,
    index_nodes,
    internal_edges,
    node_height,
    node_width,
)

logger = logging.getLogger(__name__)

DUMMY_PREFIX = "__dummy_"
MAX_SWEEPS = 24


@dataclass
class RankedGraph:
    graph: nx.DiGraph
    ranks: Dict[str, int]
    rank_count: int


def build_digraph(nodes: Sequence[LayoutNode], edges: Sequence[LayoutEdge], options: LayoutOptions) -> nx.DiGraph:
    graph = nx.DiGraph()
    for node in nodes:
        graph.add_node(
            node.id,
            width=node_width(node, options.node_width),
            height=node_height(node, options.node_height),
        )
    for edge in edges:
        graph.add_edge(edge.source, edge.target)
    return graph


def remove_cycles(graph: nx.DiGraph) -> Tuple[nx.DiGraph, Set[Tuple[str, str]]]:
    """Return an acyclic copy of ``graph`` and the set of reversed edges."""
    dag = graph.copy()
    dag.remove_edges_from(list(nx.selfloop_edges(dag)))
    reversed_edges: Set[Tuple[str, str]] = set()
    while True:
        try:
            cycle = nx.find_cycle(dag)
        except nx.NetworkXNoCycle:
            break
        source, target = cycle[-1][0], cycle[-1][1]
        dag.remove_edge(source, target)
        if not dag.has_edge(target, source):
            dag.add_edge(target, source)
        reversed_edges.add((source, target))
    return dag, reversed_edges


def assign_ranks(dag: nx.DiGraph) -> Dict[str, int]:
    ranks: Dict[str, int] = {node_id: 0 for node_id in dag.nodes}
    for node_id in nx.topological_sort(dag):
        for successor in dag.successors(node_id):
            ranks[successor] = max(ranks[successor], ranks[node_id] + 1)
    return ranks


def insert_dummy_nodes(dag: nx.DiGraph, ranks: Dict[str, int]) -> RankedGraph:
    graph = nx.DiGraph()
    graph.add_nodes_from(dag.nodes(data=True))
    ranks = dict(ranks)
    counter = 0
    for source, target in list(dag.edges()):
        span = ranks[target] - ranks[source]
        if span <= 1:
            graph.add_edge(source, target)
            continue
        previous = source
        for step in range(1, span):
            dummy_id = f"{DUMMY_PREFIX}{counter}_{step}"
            graph.add_node(dummy_id, width=0, height=0)
            ranks[dummy_id] = ranks[source] + step
            graph.add_edge(previous, dummy_id)
            previous = dummy_id
        graph.add_edge(previous, target)
        counter += 1
    rank_count = max(ranks.values()) + 1 if ranks else 0
    return RankedGraph(graph=graph, ranks=ranks, rank_count=rank_count)


def order_ranks(ranked: RankedGraph) -> List[List[str]]:
    """Order nodes inside each rank with barycenter sweeps, starting from insertion order."""
    ordering: List[List[str]] = [[] for _ in range(ranked.rank_count)]
    for node_id in ranked.graph.nodes:
        ordering[ranked.ranks[node_id]].append(node_id)

    best = [list(layer) for layer in ordering]
    best_crossings = count_crossings(best, ranked.graph)
    for _ in range(MAX_SWEEPS):
        if best_crossings == 0:
            break
        for index in range(1, len(ordering)):
            positions = {node_id: float(i) for i, node_id in enumerate(ordering[index - 1])}
            ordering[index] = _sorted_by_barycenter(ordering[index], ranked.graph.predecessors, positions)
        for index in range(len(ordering) - 2, -1, -1):
            positions = {node_id: float(i) for i, node_id in enumerate(ordering[index + 1])}
            ordering[index] = _sorted_by_barycenter(ordering[index], ranked.graph.successors, positions)

        crossings = count_crossings(ordering, ranked.graph)
        if crossings >= best_crossings:
            break
        best = [list(layer) for layer in ordering]
        best_crossings = crossings
    return best


def _sorted_by_barycenter(layer: List[str], neighbours, positions: Dict[str, float]) -> List[str]:
    keyed = []
    for current, node_id in enumerate(layer):
        adjacent = [positions[other] for other in neighbours(node_id) if other in positions]
        weight = sum(adjacent) / len(adjacent) if adjacent else float(current)
        keyed.append((weight, current, node_id))
    keyed.sort()
    return [node_id for _, _, node_id in keyed]


def count_crossings(ordering: List[List[str]], graph: nx.DiGraph) -> int:
    total = 0
    for index in range(len(ordering) - 1):
        lower = {node_id: i for i, node_id in enumerate(ordering[index + 1])}
        segments = [
            (upper, lower[successor])
            for upper, node_id in enumerate(ordering[index])
            for successor in graph.successors(node_id)
            if successor in lower
        ]
        for i, (a_up, a_low) in enumerate(segments):
            for b_up, b_low in segments[i + 1:]:
                if (a_up - b_up) * (a_low - b_low) < 0:
                    total += 1
    return total


def assign_centers(
    ordering: List[List[str]],
    ranked: RankedGraph,
    options: LayoutOptions,
) -> Dict[str, Tuple[float, float]]:
    """Return the center point of every node, ranks stacked along the main axis."""
    horizontal = options.direction == "LR"
    graph = ranked.graph

    def breadth(node_id: str) -> float:
        attrs = graph.nodes[node_id]
        return attrs["height"] if horizontal else attrs["width"]

    def depth(node_id: str) -> float:
        attrs = graph.nodes[node_id]
        return attrs["width"] if horizontal else attrs["height"]

    rank_offsets: List[float] = []
    offset = 0.0
    for layer in ordering:
        thickness = max((depth(node_id) for node_id in layer), default=0.0)
        rank_offsets.append(offset + thickness / 2)
        offset += thickness + options.rank_separation

    cross: Dict[str, float] = {}
    for layer in ordering:
        _place_row(layer, lambda node_id: _mean_center(graph.predecessors(node_id), cross), cross, breadth, options)
    # Pull parents back over the children placed below them.
    for layer in reversed(ordering[:-1]):
        _place_row(
            layer,
            lambda node_id: _mean_center(graph.successors(node_id), cross, cross.get(node_id)),
            cross,
            breadth,
            options,
        )

    if cross:
        shift = min(cross[node_id] - breadth(node_id) / 2 for node_id in cross)
        for node_id in cross:
            cross[node_id] -= shift

    centers: Dict[str, Tuple[float, float]] = {}
    for rank, layer in enumerate(ordering):
        for node_id in layer:
            main = rank_offsets[rank]
            centers[node_id] = (main, cross[node_id]) if horizontal else (cross[node_id], main)
    return centers


def _place_row(
    layer: List[str],
    wanted: Callable[[str], Optional[float]],
    cross: Dict[str, float],
    breadth: Callable[[str], float],
    options: LayoutOptions,
) -> None:
    """Center each node on its wanted coordinate without overlapping its left neighbour."""
    boundary: Optional[float] = None
    for node_id in layer:
        half = breadth(node_id) / 2
        lowest = half if boundary is None else boundary + options.node_separation + half
        target = wanted(node_id)
        center = lowest if target is None or boundary is not None and target < lowest else target
        cross[node_id] = center
        boundary = center + half


def _mean_center(neighbours: Iterable[str], placed: Dict[str, float], default: Optional[float] = None) -> Optional[float]:
    centers = [placed[other] for other in neighbours if other in placed]
    if not centers:
        return default
    return sum(centers) / len(centers)


class LayeredLayoutEngine(LayoutStrategy):
    name = "layered"
    default_options = LayoutOptions(node_height=36)

    def __init__(self, log: Optional[logging.Logger] = None) -> None:
        self._log = log or logger

    def layout(
        self,
        nodes: Sequence[LayoutNode],
        edges: Sequence[LayoutEdge],
        options: Optional[LayoutOptions] = None,
    ) -> List[LayoutNode]:
        options = options or self.default_options
        placed = [copy_node(node) for node in nodes]
        if not placed:
            return placed

        by_id = index_nodes(placed)
        graph = build_digraph(list(by_id.values()), internal_edges(placed, edges), options)
        dag, reversed_edges = remove_cycles(graph)
        if reversed_edges:
            self._log.debug("Reversed %d edges to break cycles", len(reversed_edges))
        ranked = insert_dummy_nodes(dag, assign_ranks(dag))
        ordering = order_ranks(ranked)
        centers = assign_centers(ordering, ranked, options)

        horizontal = options.direction == "LR"
        for node in placed:
            center = centers.get(node.id)
            if center is None:
                # Nodes the layering never saw keep their original position.
                continue
            width = node_width(node, options.node_width)
            height = node_height(node, options.node_height)
            node.position = Position(center[0] - width / 2, center[1] - height / 2)
            node.target_position = HandlePosition.LEFT if horizontal else HandlePosition.TOP
            node.source_position = HandlePosition.RIGHT if horizontal else HandlePosition.BOTTOM

        self._log.debug("Layered %d nodes into %d ranks", len(by_id), ranked.rank_count)
        return placed
