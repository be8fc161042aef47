"""Layout settings read from the environment (and an optional .env file).

Unset geometry falls back to the defaults of the selected layout strategy.
"""

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import find_dotenv, load_dotenv

from .layout import LAYOUT_STRATEGIES, DIRECTIONS, LayoutOptions


@dataclass(frozen=True)
class LayoutSettings:
    layout: str = "hierarchy"
    direction: str = "TB"
    node_width: Optional[float] = None
    node_height: Optional[float] = None
    node_spacing_x: Optional[float] = None
    node_spacing_y: Optional[float] = None

    def to_options(self, base: LayoutOptions) -> LayoutOptions:
        return base.merged(
            direction=self.direction,
            node_width=self.node_width,
            node_height=self.node_height,
            node_spacing_x=self.node_spacing_x,
            node_spacing_y=self.node_spacing_y,
        )


def load_settings(use_dotenv: bool = True) -> LayoutSettings:
    if use_dotenv:
        load_dotenv(find_dotenv(usecwd=True))
    layout = os.getenv("PADA_GRAPH_LAYOUT", "hierarchy").strip().lower()
    if layout not in LAYOUT_STRATEGIES:
        raise ValueError(f"PADA_GRAPH_LAYOUT must be one of {sorted(LAYOUT_STRATEGIES)}, got {layout!r}")
    direction = os.getenv("PADA_GRAPH_DIRECTION", "TB").strip().upper()
    if direction not in DIRECTIONS:
        raise ValueError(f"PADA_GRAPH_DIRECTION must be one of {list(DIRECTIONS)}, got {direction!r}")
    return LayoutSettings(
        layout=layout,
        direction=direction,
        node_width=_float_env("PADA_GRAPH_NODE_WIDTH"),
        node_height=_float_env("PADA_GRAPH_NODE_HEIGHT"),
        node_spacing_x=_float_env("PADA_GRAPH_NODE_SPACING_X"),
        node_spacing_y=_float_env("PADA_GRAPH_NODE_SPACING_Y"),
    )


def _float_env(name: str) -> Optional[float]:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return None
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None
