"""Layout strategy abstraction and shared node geometry helpers."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from typing import Dict, Iterable, List, Optional, Sequence

from ..graph_model import LayoutEdge, LayoutNode

DIRECTIONS = ("TB", "LR")


@dataclass(frozen=True)
class LayoutOptions:
    node_width: float = 172
    node_height: float = 70
    node_spacing_x: float = 20
    node_spacing_y: float = 20
    direction: str = "TB"
    rank_separation: float = 50
    node_separation: float = 50

    def __post_init__(self) -> None:
        if self.direction not in DIRECTIONS:
            raise ValueError(f"Unknown layout direction: {self.direction}")

    def merged(self, **overrides) -> "LayoutOptions":
        return replace(self, **{key: value for key, value in overrides.items() if value is not None})


class LayoutStrategy(ABC):
    name: str
    default_options: LayoutOptions = LayoutOptions()

    @abstractmethod
    def layout(
        self,
        nodes: Sequence[LayoutNode],
        edges: Sequence[LayoutEdge],
        options: Optional[LayoutOptions] = None,
    ) -> List[LayoutNode]:
        raise NotImplementedError


def node_width(node: LayoutNode, default: float) -> float:
    if node.measured is not None and node.measured.width:
        return node.measured.width
    return default


def node_height(node: LayoutNode, default: float) -> float:
    if node.measured is not None and node.measured.height:
        return node.measured.height
    return default


def internal_edges(nodes: Iterable[LayoutNode], edges: Iterable[LayoutEdge]) -> List[LayoutEdge]:
    """Edges whose endpoints are both laid out; connectors to outside parents are dropped."""
    node_ids = {node.id for node in nodes}
    return [edge for edge in edges if edge.source in node_ids and edge.target in node_ids]


def index_nodes(nodes: Iterable[LayoutNode]) -> Dict[str, LayoutNode]:
    indexed: Dict[str, LayoutNode] = {}
    for node in nodes:
        indexed.setdefault(node.id, node)
    return indexed


def copy_node(node: LayoutNode) -> LayoutNode:
    return replace(node, position=replace(node.position), data=dict(node.data))
