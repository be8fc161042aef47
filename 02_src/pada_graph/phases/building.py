"""Graph building phase: consolidation, sequencing, node building and layout."""

from typing import Any, Dict

from ..builder import ParseGraphBuilder
from ..pipeline import PipelinePhase


class GraphBuildPhase(PipelinePhase):
    phase_name = "building"
    requires = ("parse_results",)

    def __init__(self, builder: ParseGraphBuilder) -> None:
        self._builder = builder

    def run(self, context: Dict[str, Any]) -> Dict[str, Any]:
        state = self._builder.run(
            context.get("parse_results", []),
            parent_id=context.get("parent_id"),
            operation_id=context.get("operation_id"),
        )
        return {
            "graph": state["graph"],
            "build_output": {
                "operation_id": state["operation_id"],
                "layout": self._builder.layout.name,
                "group_count": len(state["groups"]),
                "stages": [stage.value for stage in state["stages"]],
            },
        }
