"""Parse consolidation and hierarchical layout for sentence parse graphs."""

import logging

from .builder import BuildStage, ParseGraphBuilder
from .consolidation import consolidate_parse_results, relation_key
from .graph_model import (
    AnalysisGraph,
    Graph,
    GraphEdge,
    LayoutEdge,
    LayoutNode,
    ParseRequest,
    ParseResult,
    ParseWord,
)
from .graph_utils import (
    connect_orphan_nodes_to_parent,
    connect_to_parent,
    create_edge,
    create_node,
    merge_graph_data,
    remove_children_from_graph,
)
from .layout import HierarchicalCenteringLayout, LayeredLayoutEngine, LayoutOptions, LayoutStrategy
from .sequencing import sequence_edges

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "ParseWord",
    "GraphEdge",
    "AnalysisGraph",
    "ParseResult",
    "ParseRequest",
    "LayoutNode",
    "LayoutEdge",
    "Graph",
    "consolidate_parse_results",
    "relation_key",
    "sequence_edges",
    "LayoutOptions",
    "LayoutStrategy",
    "HierarchicalCenteringLayout",
    "LayeredLayoutEngine",
    "create_node",
    "create_edge",
    "merge_graph_data",
    "connect_to_parent",
    "connect_orphan_nodes_to_parent",
    "remove_children_from_graph",
    "BuildStage",
    "ParseGraphBuilder",
]
