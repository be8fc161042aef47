"""Turn raw parse results into a positioned, renderable graph.

The build runs as a LangGraph state machine:

    consolidate -> sequence -> build_nodes -> lay_out

Each stage reads the shared ``BuilderState`` and returns only the keys it
changes. The run is synchronous and has no retries; an empty input flows
through every stage and yields an empty graph.
"""

import json
import logging
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Tuple

from langgraph.graph import END, START, StateGraph
from typing_extensions import TypedDict

from .consolidation import consolidate_parse_results
from .graph_assembler import GraphAssembler
from .graph_model import Graph, GraphEdge, ParseResult, ParseWord
from .graph_utils import connect_orphan_nodes_to_parent, connect_to_parent, merge_graph_data
from .layout import HierarchicalCenteringLayout, LayoutOptions, LayoutStrategy
from .sequencing import sequence_edges

logger = logging.getLogger(__name__)


class BuildStage(str, Enum):
    IDLE = "idle"
    CONSOLIDATING = "consolidating"
    SEQUENCING = "sequencing"
    NODE_BUILDING = "node_building"
    LAYING_OUT = "laying_out"
    DONE = "done"


class BuilderState(TypedDict):
    parse_results: List[ParseResult]
    parent_id: Optional[str]
    operation_id: str
    groups: List[List[GraphEdge]]
    graph: Graph
    stages: List[BuildStage]


class ParseGraphBuilder:
    def __init__(
        self,
        layout: Optional[LayoutStrategy] = None,
        options: Optional[LayoutOptions] = None,
        consolidate: bool = True,
        log: Optional[logging.Logger] = None,
    ) -> None:
        self.layout = layout or HierarchicalCenteringLayout(log=log)
        self.options = options or self.layout.default_options
        self.consolidate = consolidate
        self._log = log or logger

    def build(
        self,
        parse_results: Iterable[ParseResult],
        parent_id: Optional[str] = None,
        operation_id: Optional[str] = None,
    ) -> Graph:
        return self.run(parse_results, parent_id=parent_id, operation_id=operation_id)["graph"]

    def run(
        self,
        parse_results: Iterable[ParseResult],
        parent_id: Optional[str] = None,
        operation_id: Optional[str] = None,
    ) -> Dict[str, Any]:
        results = list(parse_results)
        workflow = self._build_workflow()
        final_state = workflow.invoke(
            {
                "parse_results": results,
                "parent_id": parent_id,
                "operation_id": operation_id or self.derive_operation_id(results),
                "groups": [],
                "graph": Graph(),
                "stages": [BuildStage.IDLE],
            }
        )
        final_state["stages"] = list(final_state["stages"]) + [BuildStage.DONE]
        self._log.debug(
            "Built graph %s: nodes=%d edges=%d",
            final_state["operation_id"],
            len(final_state["graph"].nodes),
            len(final_state["graph"].edges),
        )
        return final_state

    def _build_workflow(self):
        graph = StateGraph(BuilderState)
        graph.add_node("consolidate", self._consolidate)
        graph.add_node("sequence", self._sequence)
        graph.add_node("build_nodes", self._build_nodes)
        graph.add_node("lay_out", self._lay_out)
        graph.add_edge(START, "consolidate")
        graph.add_edge("consolidate", "sequence")
        graph.add_edge("sequence", "build_nodes")
        graph.add_edge("build_nodes", "lay_out")
        graph.add_edge("lay_out", END)
        return graph.compile()

    def _consolidate(self, state: BuilderState) -> Dict[str, Any]:
        results = state.get("parse_results", [])
        if self.consolidate:
            merged = consolidate_parse_results(results, log=self._log)
            groups = [merged] if merged else []
        else:
            groups = [
                list(analysis.graph)
                for result in results
                for analysis in result.analysis
                if analysis.graph
            ]
        return {"groups": groups, "stages": state["stages"] + [BuildStage.CONSOLIDATING]}

    def _sequence(self, state: BuilderState) -> Dict[str, Any]:
        groups = [sequence_edges(group) for group in state.get("groups", [])]
        return {"groups": groups, "stages": state["stages"] + [BuildStage.SEQUENCING]}

    def _build_nodes(self, state: BuilderState) -> Dict[str, Any]:
        operation_id = state["operation_id"]
        subgraphs = [
            self._build_group(group, f"{operation_id}-{index}", index)
            for index, group in enumerate(state.get("groups", []))
        ]
        graph = merge_graph_data(Graph(), subgraphs)

        parent_id = state.get("parent_id")
        if parent_id and graph.nodes:
            for root_id in (subgraph.nodes[0].id for subgraph in subgraphs if subgraph.nodes):
                connect_to_parent(graph, parent_id, root_id)
            connect_orphan_nodes_to_parent(graph.nodes, parent_id)
        return {"graph": graph, "stages": state["stages"] + [BuildStage.NODE_BUILDING]}

    def _lay_out(self, state: BuilderState) -> Dict[str, Any]:
        graph = state["graph"]
        nodes = self.layout.layout(graph.nodes, graph.edges, self.options)
        return {
            "graph": Graph(nodes=nodes, edges=list(graph.edges)),
            "stages": state["stages"] + [BuildStage.LAYING_OUT],
        }

    def _build_group(self, edges: List[GraphEdge], prefix: str, index: int) -> Graph:
        valid = [edge for edge in edges if edge.node.pada]
        if len(valid) < len(edges):
            self._log.debug("Skipping %d edges without a word in %s", len(edges) - len(valid), prefix)
        if not valid:
            return Graph()

        assembler = GraphAssembler(prefix)
        root_id = assembler.add_node(prefix, {"label": f"Graph {index + 1}"})
        variant_ids = self._variant_ids(assembler, valid)

        # Every node exists before the first edge is added.
        for edge in valid:
            predecessor = edge.predecessor
            if predecessor is None or not predecessor.pada:
                group_id = root_id
            else:
                group_id = self._resolve_word(assembler, variant_ids, predecessor)
            assembler.add_node(
                variant_ids[(edge.node.pada, edge.node.tags)],
                self._word_data(edge),
                group_id=group_id,
            )
        for edge in valid:
            predecessor = edge.predecessor
            if predecessor is None or not predecessor.pada:
                continue
            predecessor_id = self._resolve_word(assembler, variant_ids, predecessor)
            if not assembler.has_node(predecessor_id):
                data = {
                    "label": predecessor.pada,
                    "subTitle": predecessor.root,
                    "tags": list(predecessor.tags),
                    "orphan": True,
                }
                assembler.add_node(predecessor_id, data, group_id=root_id)

        for edge in valid:
            node_id = variant_ids[(edge.node.pada, edge.node.tags)]
            predecessor = edge.predecessor
            if predecessor is None or not predecessor.pada:
                assembler.add_edge(root_id, node_id, label=f"analysis {index + 1}", data=edge.to_dict())
            else:
                assembler.add_edge(
                    self._resolve_word(assembler, variant_ids, predecessor),
                    node_id,
                    label=edge.relation or "",
                    data=edge.to_dict(),
                )
        return assembler.to_graph()

    @staticmethod
    def _variant_ids(assembler: GraphAssembler, edges: List[GraphEdge]) -> Dict[Tuple[str, Tuple[str, ...]], str]:
        """Map each (pada, tags) reading to a node id.

        The first reading of a word keeps the plain ``{prefix}-{pada}`` id;
        later readings with other tags get a tag suffix so that conflicting
        analyses stay separate nodes.
        """
        first_tags: Dict[str, Tuple[str, ...]] = {}
        ids: Dict[Tuple[str, Tuple[str, ...]], str] = {}
        for edge in edges:
            word = edge.node
            first_tags.setdefault(word.pada, word.tags)
            key = (word.pada, word.tags)
            if key not in ids:
                variant = () if word.tags == first_tags[word.pada] else word.tags or ("untagged",)
                ids[key] = assembler.word_node_id(word.pada, variant)
        return ids

    @staticmethod
    def _resolve_word(
        assembler: GraphAssembler,
        variant_ids: Dict[Tuple[str, Tuple[str, ...]], str],
        word: ParseWord,
    ) -> str:
        exact = variant_ids.get((word.pada, word.tags))
        if exact is not None:
            return exact
        # Predecessors often carry fewer tags than the word's own edge.
        return assembler.word_node_id(word.pada)

    @staticmethod
    def _word_data(edge: GraphEdge) -> Dict[str, Any]:
        return {
            "label": edge.node.pada,
            "subTitle": edge.node.root,
            "tags": list(edge.node.tags),
            "relation": edge.relation,
        }

    @staticmethod
    def derive_operation_id(parse_results: List[ParseResult]) -> str:
        signature = json.dumps(
            [result.to_dict() for result in parse_results],
            ensure_ascii=False,
            sort_keys=True,
        )
        return GraphAssembler.build_id("parse", signature)
