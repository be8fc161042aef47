"""Data model for parse analyses and renderable layout graphs."""

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class ParseWord:
    pada: str
    root: str = ""
    tags: tuple = ()

    @classmethod
    def from_dict(cls, payload: Any) -> "ParseWord":
        if not isinstance(payload, dict):
            raise ValueError(f"Parse word must be an object, got {type(payload).__name__}")
        tags = payload.get("tags") or ()
        if isinstance(tags, str):
            tags = (tags,)
        return cls(
            pada=str(payload.get("pada") or ""),
            root=str(payload.get("root") or ""),
            tags=tuple(str(tag) for tag in tags),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"pada": self.pada, "root": self.root, "tags": list(self.tags)}


@dataclass(frozen=True)
class GraphEdge:
    """One dependency fact: a word attached to an optional predecessor."""

    node: ParseWord
    predecessor: Optional[ParseWord] = None
    relation: Optional[str] = None

    @property
    def is_root(self) -> bool:
        return self.predecessor is None

    @classmethod
    def from_dict(cls, payload: Any) -> "GraphEdge":
        if not isinstance(payload, dict):
            raise ValueError(f"Graph edge must be an object, got {type(payload).__name__}")
        predecessor = payload.get("predecessor")
        relation = payload.get("relation")
        return cls(
            node=ParseWord.from_dict(payload.get("node") or {}),
            predecessor=ParseWord.from_dict(predecessor) if predecessor else None,
            relation=str(relation) if relation else None,
        )

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"node": self.node.to_dict()}
        if self.predecessor is not None:
            payload["predecessor"] = self.predecessor.to_dict()
        if self.relation is not None:
            payload["relation"] = self.relation
        return payload


@dataclass
class AnalysisGraph:
    graph: List[GraphEdge] = field(default_factory=list)

    @classmethod
    def from_dict(cls, payload: Any) -> "AnalysisGraph":
        # A bare list of edges is accepted as an analysis.
        if isinstance(payload, list):
            items = payload
        elif isinstance(payload, dict):
            items = payload.get("graph") or []
        else:
            raise ValueError(f"Analysis must be an object or list, got {type(payload).__name__}")
        return cls(graph=[GraphEdge.from_dict(item) for item in items])

    def to_dict(self) -> Dict[str, Any]:
        return {"graph": [edge.to_dict() for edge in self.graph]}


@dataclass
class ParseResult:
    analysis: List[AnalysisGraph] = field(default_factory=list)

    @classmethod
    def from_dict(cls, payload: Any) -> "ParseResult":
        if not isinstance(payload, dict):
            raise ValueError(f"Parse result must be an object, got {type(payload).__name__}")
        return cls(analysis=[AnalysisGraph.from_dict(item) for item in payload.get("analysis") or []])

    @classmethod
    def from_payload(cls, payload: Any) -> List["ParseResult"]:
        if isinstance(payload, dict):
            payload = payload.get("results", [payload])
        if not isinstance(payload, list):
            raise ValueError("Parse results payload must be a list or an object with 'results'")
        return [cls.from_dict(item) for item in payload]

    def to_dict(self) -> Dict[str, Any]:
        return {"analysis": [analysis.to_dict() for analysis in self.analysis]}


@dataclass
class ParseRequest:
    """Request sent to the external sentence parser."""

    text: str = "vāgvidāṃ varam"
    scheme_from: str = "IAST"
    scheme_to: str = "IAST"
    pre_segmented: bool = False
    limit: int = 2

    def to_payload(self) -> Dict[str, Any]:
        return {
            "text": self.text,
            "schemeFrom": self.scheme_from,
            "schemeTo": self.scheme_to,
            "preSegmented": self.pre_segmented,
            "limit": self.limit,
        }


class HandlePosition(str, Enum):
    TOP = "top"
    BOTTOM = "bottom"
    LEFT = "left"
    RIGHT = "right"


@dataclass
class Position:
    x: float = 0.0
    y: float = 0.0


@dataclass
class NodeSize:
    width: float
    height: float


@dataclass
class LayoutNode:
    id: str
    position: Position = field(default_factory=Position)
    data: Dict[str, Any] = field(default_factory=dict)
    measured: Optional[NodeSize] = None
    type: str = "sansPlay"
    # Visual nesting reference for the renderer only; layouts read edges.
    group_id: Optional[str] = None
    source_position: Optional[HandlePosition] = None
    target_position: Optional[HandlePosition] = None


@dataclass
class LayoutEdge:
    id: str
    source: str
    target: str
    label: Optional[str] = None
    data: Dict[str, Any] = field(default_factory=dict)
    type: str = "sansPlay"
    marker_end: Dict[str, str] = field(default_factory=lambda: {"type": "arrowclosed"})


@dataclass
class Graph:
    nodes: List[LayoutNode] = field(default_factory=list)
    edges: List[LayoutEdge] = field(default_factory=list)

    def is_empty(self) -> bool:
        return not self.nodes and not self.edges

    def to_json(self) -> Dict[str, Any]:
        return {
            "nodes": [_jsonable(asdict(node)) for node in self.nodes],
            "edges": [_jsonable(asdict(edge)) for edge in self.edges],
        }


def _jsonable(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {key: _jsonable(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(item) for item in value]
    return value
