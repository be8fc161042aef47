"""Validation and QA phase for built graphs."""

from collections import Counter
from itertools import combinations
from typing import Any, Dict, List

from ..graph_model import Graph, LayoutNode
from ..layout.base import LayoutOptions, node_height, node_width
from ..pipeline import PipelinePhase


class GraphValidationPhase(PipelinePhase):
    phase_name = "validation"
    requires = ("graph",)

    def __init__(self, options: LayoutOptions) -> None:
        self._options = options

    def run(self, context: Dict[str, Any]) -> Dict[str, Any]:
        graph: Graph = context.get("graph") or Graph()
        node_ids = [node.id for node in graph.nodes]
        known = set(node_ids)
        parent_id = context.get("parent_id")
        warnings: List[str] = []

        duplicates = sorted(node_id for node_id, count in Counter(node_ids).items() if count > 1)
        for node_id in duplicates:
            warnings.append(f"duplicate_node_id: {node_id}")

        dangling = [
            edge.id
            for edge in graph.edges
            if edge.target not in known or (edge.source not in known and edge.source != parent_id)
        ]
        for edge_id in dangling:
            warnings.append(f"dangling_edge: {edge_id}")

        overlaps = self._overlapping_pairs(graph.nodes)
        for first, second in overlaps:
            warnings.append(f"node_overlap: {first} / {second}")

        qa_report = {
            "node_count": len(graph.nodes),
            "edge_count": len(graph.edges),
            "duplicate_node_count": len(duplicates),
            "dangling_edge_count": len(dangling),
            "overlap_count": len(overlaps),
            "warnings": warnings,
        }
        return {"validation_report": qa_report}

    def _overlapping_pairs(self, nodes: List[LayoutNode]) -> List[tuple]:
        boxes = [
            (
                node.id,
                node.position.x,
                node.position.y,
                node.position.x + node_width(node, self._options.node_width),
                node.position.y + node_height(node, self._options.node_height),
            )
            for node in nodes
        ]
        pairs = []
        for first, second in combinations(boxes, 2):
            if first[1] < second[3] and second[1] < first[3] and first[2] < second[4] and second[2] < first[4]:
                pairs.append((first[0], second[0]))
        return pairs
