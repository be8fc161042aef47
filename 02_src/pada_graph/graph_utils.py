"""Factories and merge helpers for renderable graphs."""

from typing import Any, Dict, Iterable, List, Optional, Set

from .graph_model import Graph, LayoutEdge, LayoutNode, Position


def create_node(
    node_id: str,
    data: Optional[Dict[str, Any]] = None,
    group_id: Optional[str] = None,
) -> LayoutNode:
    return LayoutNode(
        id=node_id,
        position=Position(0.0, 0.0),
        data=dict(data or {}),
        group_id=group_id,
    )


def create_edge(
    source: str,
    target: str,
    data: Optional[Dict[str, Any]] = None,
    label: Optional[str] = None,
    edge_id: Optional[str] = None,
) -> LayoutEdge:
    return LayoutEdge(
        id=edge_id or f"{source}-{target}",
        source=source,
        target=target,
        label=label,
        data=dict(data or {}),
    )


def merge_graph_data(target: Graph, sources: Iterable[Optional[Graph]]) -> Graph:
    """Append nodes and edges of every non-empty source graph to ``target``.

    Ids are not deduplicated; callers namespace them before merging.
    """
    for source in sources:
        if source and source.nodes:
            target.nodes.extend(source.nodes)
            target.edges.extend(source.edges)
    return target


def connect_to_parent(
    graph: Graph,
    parent_id: str,
    target_id: str,
    label: Optional[str] = None,
) -> LayoutEdge:
    edge = create_edge(source=parent_id, target=target_id, label=label)
    graph.edges.append(edge)
    return edge


def connect_orphan_nodes_to_parent(nodes: Iterable[LayoutNode], parent_id: str) -> None:
    for node in nodes:
        if not node.group_id and node.id != parent_id:
            node.group_id = parent_id


def remove_children_from_graph(parent_id: str, graph: Graph) -> Graph:
    """Return a copy of ``graph`` without every node grouped under ``parent_id``."""
    if not graph.nodes:
        return Graph(nodes=list(graph.nodes), edges=list(graph.edges))

    members: Dict[str, List[str]] = {}
    for node in graph.nodes:
        if node.group_id:
            members.setdefault(node.group_id, []).append(node.id)

    to_remove: Set[str] = set()
    pending = [parent_id]
    while pending:
        current = pending.pop()
        for child_id in members.get(current, []):
            if child_id in to_remove or child_id == parent_id:
                continue
            to_remove.add(child_id)
            pending.append(child_id)

    return Graph(
        nodes=[node for node in graph.nodes if node.id not in to_remove],
        edges=[
            edge
            for edge in graph.edges
            if edge.source not in to_remove and edge.target not in to_remove
        ],
    )
