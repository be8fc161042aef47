"""Interchangeable layout strategies for parse graphs."""

from typing import Dict, Type

from .base import DIRECTIONS, LayoutOptions, LayoutStrategy
from .hierarchy import HierarchicalCenteringLayout
from .layered import LayeredLayoutEngine

LAYOUT_STRATEGIES: Dict[str, Type[LayoutStrategy]] = {
    HierarchicalCenteringLayout.name: HierarchicalCenteringLayout,
    LayeredLayoutEngine.name: LayeredLayoutEngine,
}


def get_layout_strategy(name: str) -> LayoutStrategy:
    try:
        return LAYOUT_STRATEGIES[name]()
    except KeyError:
        raise ValueError(f"Unknown layout strategy: {name}") from None


__all__ = [
    "DIRECTIONS",
    "LayoutOptions",
    "LayoutStrategy",
    "HierarchicalCenteringLayout",
    "LayeredLayoutEngine",
    "LAYOUT_STRATEGIES",
    "get_layout_strategy",
]
