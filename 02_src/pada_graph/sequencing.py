"""Parent-before-child ordering of consolidated parse edges."""

from typing import Dict, List, Sequence, Set

from .graph_model import GraphEdge


def sequence_edges(edges: Sequence[GraphEdge]) -> List[GraphEdge]:
    """Order ``edges`` so that every word is preceded by the edge defining its predecessor.

    Roots are visited first in encounter order, each followed depth-first by
    the edges hanging from its word. Edges unreachable from a root (orphans
    and cycles) are swept afterwards: the sweep climbs to the topmost
    pending ancestor of each leftover edge and visits from there. Every edge
    is emitted exactly once; ordering inside a cycle is best effort.
    """
    children = _children_by_predecessor(edges)
    defined_by = _defining_edges(edges)
    emitted: Set[int] = set()
    expanded: Set[str] = set()
    ordered: List[int] = []

    for index, edge in enumerate(edges):
        if edge.predecessor is None:
            _visit(index, edges, children, emitted, expanded, ordered)

    for index in range(len(edges)):
        if index not in emitted:
            top = _pending_ancestor(index, edges, defined_by, emitted)
            _visit(top, edges, children, emitted, expanded, ordered)
            _visit(index, edges, children, emitted, expanded, ordered)

    return [edges[index] for index in ordered]


def _children_by_predecessor(edges: Sequence[GraphEdge]) -> Dict[str, List[int]]:
    children: Dict[str, List[int]] = {}
    for index, edge in enumerate(edges):
        if edge.predecessor is not None:
            children.setdefault(edge.predecessor.pada, []).append(index)
    return children


def _defining_edges(edges: Sequence[GraphEdge]) -> Dict[str, int]:
    defined_by: Dict[str, int] = {}
    for index, edge in enumerate(edges):
        defined_by.setdefault(edge.node.pada, index)
    return defined_by


def _pending_ancestor(
    index: int,
    edges: Sequence[GraphEdge],
    defined_by: Dict[str, int],
    emitted: Set[int],
) -> int:
    climbed: Set[int] = {index}
    current = index
    while True:
        predecessor = edges[current].predecessor
        if predecessor is None:
            return current
        parent = defined_by.get(predecessor.pada)
        if parent is None or parent in emitted or parent in climbed:
            return current
        climbed.add(parent)
        current = parent


def _visit(
    index: int,
    edges: Sequence[GraphEdge],
    children: Dict[str, List[int]],
    emitted: Set[int],
    expanded: Set[str],
    ordered: List[int],
) -> None:
    if index in emitted:
        return
    emitted.add(index)
    ordered.append(index)

    pada = edges[index].node.pada
    if pada in expanded:
        return
    expanded.add(pada)
    for child_index in children.get(pada, []):
        if child_index != index:
            _visit(child_index, edges, children, emitted, expanded, ordered)
