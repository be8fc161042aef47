"""Merge independent parse analyses into one deduplicated edge set."""

import logging
from typing import Dict, Iterable, List, Optional, Tuple

from .graph_model import GraphEdge, ParseResult

logger = logging.getLogger(__name__)

RelationKey = Tuple[str, str, str, str]
RelationSlot = Tuple[str, str, str]


def relation_key(edge: GraphEdge) -> RelationKey:
    pada, predecessor, relation = relation_slot(edge)
    return (pada, ",".join(edge.node.tags), predecessor, relation)


def relation_slot(edge: GraphEdge) -> RelationSlot:
    return (
        edge.node.pada,
        edge.predecessor.pada if edge.predecessor is not None else "ROOT",
        edge.relation if edge.relation is not None else "NONE",
    )


def is_trivial(parse_results: List[ParseResult]) -> bool:
    return len(parse_results) == 1 and len(parse_results[0].analysis) == 1


def iter_edges(parse_results: Iterable[ParseResult]) -> Iterable[GraphEdge]:
    for result in parse_results:
        for analysis in result.analysis:
            yield from analysis.graph


def _refines(richer: GraphEdge, poorer: GraphEdge) -> bool:
    return set(poorer.node.tags) <= set(richer.node.tags)


def consolidate_parse_results(
    parse_results: Iterable[ParseResult],
    log: Optional[logging.Logger] = None,
) -> List[GraphEdge]:
    """Return the edges of every analysis with duplicate relations collapsed.

    Two edges conflict when they attach the same word to the same
    predecessor through the same relation and one tag sequence covers the
    other. The strictly longer tag sequence wins; equal-length ties keep the
    edge seen first, so the result depends on input order. Edges whose tags
    disagree are distinct analyses and are both kept. A single result
    holding a single analysis is returned as is.
    """
    log = log or logger
    results = list(parse_results)
    if is_trivial(results):
        return list(results[0].analysis[0].graph)

    retained: List[Optional[GraphEdge]] = []
    slots: Dict[RelationSlot, List[int]] = {}
    seen = 0

    for edge in iter_edges(results):
        seen += 1
        indexes = slots.setdefault(relation_slot(edge), [])

        if any(_refines(retained[index], edge) and len(retained[index].node.tags) >= len(edge.node.tags)
               for index in indexes):
            continue

        covered = [index for index in indexes if _refines(edge, retained[index])]
        if covered:
            log.debug("Replacing %s with richer tags %s", relation_key(retained[covered[0]]), edge.node.tags)
            retained[covered[0]] = edge
            for index in covered[1:]:
                retained[index] = None
                indexes.remove(index)
            continue

        indexes.append(len(retained))
        retained.append(edge)

    merged = [edge for edge in retained if edge is not None]
    log.debug("Consolidated %d edges into %d", seen, len(merged))
    return merged
