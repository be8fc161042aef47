"""Recursive top-down tree layout that centers parents over their children.

Every tree hangs from a root (a node that is never the target of an
internal edge). Children are laid out in one row below their parent, the
first child starting at the parent's x; each following child starts after
the previous child's whole subtree plus ``node_spacing_x``. Once a node's
children are placed it is re-centered over them: over the bounding box of
the row when there are several, or over the midpoint of the single child.
Independent trees are placed left to right, separated by three times the
horizontal spacing, measured from the right edge of the previous tree's
whole subtree. The first tree keeps its root's x; later trees never
reach left of their start.

Traversal state (the visited set and the position map) is passed
explicitly through the helpers, so a node reachable from two parents, a
self-loop or a cycle is placed once and the recursion terminates.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Set

from ..graph_model import LayoutEdge, LayoutNode, Position
from .base import (
    LayoutOptions,
    LayoutStrategy,
    copy_node,
    index_nodes,
    internal_edges,
    node_height,
    node_width,
)

logger = logging.getLogger(__name__)

TREE_SPACING_FACTOR = 3


@dataclass
class SubtreeExtent:
    left: float
    right: float
    bottom: float
    members: List[str] = field(default_factory=list)

    def include(self, other: "SubtreeExtent") -> None:
        self.left = min(self.left, other.left)
        self.right = max(self.right, other.right)
        self.bottom = max(self.bottom, other.bottom)
        self.members.extend(other.members)


class HierarchicalCenteringLayout(LayoutStrategy):
    name = "hierarchy"
    default_options = LayoutOptions()

    def __init__(self, log: Optional[logging.Logger] = None) -> None:
        self._log = log or logger

    def layout(
        self,
        nodes: Sequence[LayoutNode],
        edges: Sequence[LayoutEdge],
        options: Optional[LayoutOptions] = None,
    ) -> List[LayoutNode]:
        options = options or self.default_options
        placed = [copy_node(node) for node in nodes]
        if not placed:
            return placed

        by_id = index_nodes(placed)
        links = internal_edges(placed, edges)
        children = self.child_map(links)
        targets = {edge.target for edge in links if edge.source != edge.target}

        roots = [node for node in by_id.values() if node.id not in targets]
        # Nodes only reachable through a cycle still get a tree of their own.
        leftovers = [node for node in by_id.values() if node.id in targets]

        visited: Set[str] = set()
        cursor_x: Optional[float] = None
        for root in roots + leftovers:
            if root.id in visited:
                continue
            visited.add(root.id)
            start_x = root.position.x if cursor_x is None else cursor_x
            root.position = Position(start_x, root.position.y)
            self._log.debug("Root %s placed at (%s, %s)", root.id, start_x, root.position.y)

            extent = self.place_subtree(root, by_id, children, visited, options)
            if cursor_x is not None and extent.left < start_x:
                # A root centered over narrow children must not reach into the previous tree.
                shift_nodes(extent.members, by_id, start_x - extent.left)
                extent.right += start_x - extent.left
                extent.left = start_x
            cursor_x = extent.right + options.node_spacing_x * TREE_SPACING_FACTOR

        return placed

    @staticmethod
    def child_map(edges: Sequence[LayoutEdge]) -> Dict[str, List[str]]:
        children: Dict[str, List[str]] = {}
        for edge in edges:
            if edge.source == edge.target:
                continue
            siblings = children.setdefault(edge.source, [])
            if edge.target not in siblings:
                siblings.append(edge.target)
        return children

    def place_subtree(
        self,
        parent: LayoutNode,
        by_id: Dict[str, LayoutNode],
        children: Dict[str, List[str]],
        visited: Set[str],
        options: LayoutOptions,
    ) -> SubtreeExtent:
        """Position every unvisited descendant of ``parent`` and return the subtree extent."""
        width = node_width(parent, options.node_width)
        height = node_height(parent, options.node_height)
        extent = SubtreeExtent(
            left=parent.position.x,
            right=parent.position.x + width,
            bottom=parent.position.y + height,
            members=[parent.id],
        )

        row = [by_id[child_id] for child_id in children.get(parent.id, []) if child_id not in visited]
        if not row:
            return extent
        visited.update(child.id for child in row)

        row_y = parent.position.y + height + options.node_spacing_y
        cursor_x = parent.position.x
        for child in row:
            child.position = Position(cursor_x, row_y)
            child_extent = self.place_subtree(child, by_id, children, visited, options)
            if child_extent.left < cursor_x:
                shift_nodes(child_extent.members, by_id, cursor_x - child_extent.left)
                child_extent.right += cursor_x - child_extent.left
                child_extent.left = cursor_x
            extent.include(child_extent)
            cursor_x = child_extent.right + options.node_spacing_x

        center_over_children(parent, row, options)
        self._log.debug("Centered %s at x=%s over %d children", parent.id, parent.position.x, len(row))
        extent.left = min(extent.left, parent.position.x)
        extent.right = max(extent.right, parent.position.x + width)
        return extent


def center_over_children(parent: LayoutNode, row: Sequence[LayoutNode], options: LayoutOptions) -> None:
    if not row:
        return
    width = node_width(parent, options.node_width)
    if len(row) == 1:
        child = row[0]
        child_width = node_width(child, options.node_width)
        new_x = child.position.x + (child_width - width) / 2
    else:
        left = min(child.position.x for child in row)
        right = max(child.position.x + node_width(child, options.node_width) for child in row)
        new_x = left + (right - left) / 2 - width / 2
    parent.position = Position(new_x, parent.position.y)


def shift_nodes(node_ids: Sequence[str], by_id: Dict[str, LayoutNode], delta_x: float) -> None:
    for node_id in node_ids:
        node = by_id[node_id]
        node.position = Position(node.position.x + delta_x, node.position.y)
