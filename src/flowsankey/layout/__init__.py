"""Sankey layout pipeline."""

from flowsankey.layout.config import LayoutConfig
from flowsankey.layout.engine import (
    SankeyLayout,
    compute_layout,
    layout_input,
    overflowing_nodes,
)

__all__ = [
    "LayoutConfig",
    "SankeyLayout",
    "compute_layout",
    "layout_input",
    "overflowing_nodes",
]
