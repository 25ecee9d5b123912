"""Breadth assignment (X-coordinate positioning).

Nodes are layered breadth-first from the roots: each round places the
current frontier in the current layer and moves on to the targets of its
outgoing links, so a node ends up one layer past the longest path that
reaches it. Sinks are then pulled into the rightmost layer, and layers are
spread evenly over the layout width.
"""

from __future__ import annotations

__all__ = ["compute_node_breadths"]

from flowsankey.layout.config import LayoutConfig
from flowsankey.layout.normalize import root_nodes
from flowsankey.parser.model import SankeyGraph


def compute_node_breadths(graph: SankeyGraph, config: LayoutConfig) -> SankeyGraph:
    """Assign ``layer``, ``x`` and ``dx`` to every node.

    Expects a normalized (acyclic) graph.
    """
    graph = graph.copy()
    if not graph.nodes:
        return graph

    index_of = {id(node): i for i, node in enumerate(graph.nodes)}
    frontier = [index_of[id(node)] for node in root_nodes(graph)]
    layer = 0

    while frontier:
        next_frontier: dict[int, None] = {}
        for i in frontier:
            node = graph.nodes[i]
            node.layer = layer
            node.dx = config.node_width
            for link in graph.outgoing(node):
                next_frontier[link.target] = None
        frontier = list(next_frontier)
        layer += 1

    max_layer = layer
    _move_sinks_right(graph, max_layer)
    _scale_node_breadths(graph, config, max_layer)
    return graph


def _move_sinks_right(graph: SankeyGraph, max_layer: int) -> None:
    for node in graph.nodes:
        if not node.source_links:
            node.layer = max_layer - 1


def _scale_node_breadths(graph: SankeyGraph, config: LayoutConfig, max_layer: int) -> None:
    if max_layer > 1:
        kx = (config.width - config.node_width) / (max_layer - 1)
    else:
        # Single layer: everything sits at x = 0
        kx = config.width
    for node in graph.nodes:
        node.x = node.layer * kx
