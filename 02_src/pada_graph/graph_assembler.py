"""Deterministic assembler for one renderable subgraph."""

from hashlib import sha1
from typing import Any, Dict, List, Optional, Sequence

from .graph_model import Graph, LayoutEdge, LayoutNode
from .graph_utils import create_edge, create_node


class GraphAssembler:
    """Owns identifiers and safe insertion of nodes and edges.

    Node ids are namespaced ``{prefix}-{pada}`` so that subgraphs built from
    the same words can later be merged without collisions. A second reading
    of a word with other tags is told apart by a ``#tag.tag`` suffix.
    """

    def __init__(self, prefix: str) -> None:
        self.prefix = prefix
        self._nodes: Dict[str, LayoutNode] = {}
        self._edges: Dict[str, LayoutEdge] = {}
        self._edge_registry: Dict[str, str] = {}

    def word_node_id(self, pada: str, variant: Sequence[str] = ()) -> str:
        node_id = f"{self.prefix}-{pada}"
        if variant:
            node_id = f"{node_id}#{'.'.join(variant)}"
        return node_id

    def has_node(self, node_id: str) -> bool:
        return node_id in self._nodes

    def add_node(
        self,
        node_id: str,
        data: Dict[str, Any],
        group_id: Optional[str] = None,
    ) -> str:
        existing = self._nodes.get(node_id)
        if existing is not None:
            return existing.id
        self._nodes[node_id] = create_node(node_id, data=data, group_id=group_id)
        return node_id

    def add_edge(
        self,
        source_id: str,
        target_id: str,
        label: Optional[str] = None,
        data: Optional[Dict[str, Any]] = None,
    ) -> str:
        if source_id not in self._nodes:
            raise ValueError(f"Unknown source node: {source_id}")
        if target_id not in self._nodes:
            raise ValueError(f"Unknown target node: {target_id}")

        signature = f"{source_id}:{target_id}:{label or ''}"
        existing_id = self._edge_registry.get(signature)
        if existing_id:
            return existing_id

        edge_id = f"{source_id}-{target_id}"
        if edge_id in self._edges:
            edge_id = f"{edge_id}-{self.build_id('rel', signature)}"
        self._edges[edge_id] = create_edge(
            source=source_id,
            target=target_id,
            label=label,
            data={"label": label or "", **(data or {})},
            edge_id=edge_id,
        )
        self._edge_registry[signature] = edge_id
        return edge_id

    @property
    def nodes(self) -> List[LayoutNode]:
        return list(self._nodes.values())

    def to_graph(self) -> Graph:
        return Graph(nodes=list(self._nodes.values()), edges=list(self._edges.values()))

    @staticmethod
    def build_id(prefix: str, signature: str) -> str:
        digest = sha1(signature.encode("utf-8")).hexdigest()[:12]
        return f"{prefix}_{digest}"
