"""Depth assignment (Y-coordinate positioning).

Node heights are proportional to node values, with a single scale factor
chosen so that the fullest layer fits the vertical extent. Vertical
positions are then relaxed: each round pulls nodes toward the weighted
center of their neighbours, first from the right, then from the left, and
resolves overlaps inside each layer after every pass.
"""

from __future__ import annotations

__all__ = ["compute_node_depths", "depth_scale", "resolve_collisions"]

import logging
import warnings

from flowsankey.errors import DegenerateGraphWarning
from flowsankey.layout.config import LayoutConfig
from flowsankey.layout.constants import (
    ALPHA_DECAY,
    ALPHA_START,
    DEPTH_DAMPENING,
    ITERATIONS,
    TOLERANCE,
)
from flowsankey.parser.model import Link, Node, SankeyGraph

logger = logging.getLogger(__name__)


def compute_node_depths(
    graph: SankeyGraph,
    config: LayoutConfig,
    iterations: int = ITERATIONS,
) -> SankeyGraph:
    """Assign ``y`` and ``dy`` to nodes and ``dy`` to links.

    Expects breadths to be assigned already. Layers that cannot fit the
    vertical extent trigger a DegenerateGraphWarning and are allowed to
    overflow at the bottom.
    """
    if iterations < 0:
        raise ValueError(f"iterations must be >= 0, got {iterations}")

    graph = graph.copy()
    if not graph.nodes:
        return graph

    layers = graph.layers()
    crowded: set[int] = set()
    ky = depth_scale(layers, config, crowded)
    logger.debug("Depth scale %g over %d layers", ky, len(layers))

    for nodes in layers:
        for i, node in enumerate(nodes):
            node.y = float(i)
            node.dy = node.value * ky
    for link in graph.links:
        link.dy = link.value * ky

    overflowed: set[int] = set()
    resolve_collisions(layers, config, overflowed)

    alpha = ALPHA_START
    for _ in range(iterations):
        alpha *= ALPHA_DECAY
        _relax_right_to_left(graph, layers, alpha)
        resolve_collisions(layers, config, overflowed)
        _relax_left_to_right(graph, layers, alpha)
        resolve_collisions(layers, config, overflowed)

    # Layers already reported by depth_scale are not warned about twice
    for breadth in sorted(overflowed - crowded):
        warnings.warn(
            f"layer {breadth} does not fit in height {config.height}; "
            "nodes overflow the bottom edge",
            DegenerateGraphWarning,
            stacklevel=2,
        )
    return graph


def depth_scale(
    layers: list[list[Node]],
    config: LayoutConfig,
    crowded: set[int] | None = None,
) -> float:
    """Pixels per unit of value, shared by all layers.

    Each layer offers ``height - (n - 1) * padding`` pixels for ``n`` nodes;
    the smallest ratio of that space to the layer's total value wins, then
    is damped to leave some room. Layers without value are ignored, and so
    are layers whose padding alone exceeds the height (with a warning; their
    indices are added to ``crowded``).
    """
    candidates: list[float] = []
    for breadth, nodes in enumerate(layers):
        total = sum(node.value for node in nodes)
        available = config.height - (len(nodes) - 1) * config.node_padding
        if available <= 0:
            warnings.warn(
                f"layer {breadth} has {len(nodes)} nodes; their padding alone "
                f"exceeds height {config.height}",
                DegenerateGraphWarning,
                stacklevel=3,
            )
            if crowded is not None:
                crowded.add(breadth)
            continue
        if total <= 0:
            continue
        candidates.append(available / total * DEPTH_DAMPENING)
    return min(candidates) if candidates else 0.0


def resolve_collisions(
    layers: list[list[Node]],
    config: LayoutConfig,
    overflowed: set[int] | None = None,
) -> None:
    """Push overlapping nodes apart inside every layer.

    Nodes are swept top to bottom so each clears ``node_padding`` below its
    predecessor. If the last node then sticks out below the extent, the
    stack is pushed back up from the bottom. A layer too tall to fit is
    packed from the top and left to overflow; its index is added to
    ``overflowed``.
    """
    padding = config.node_padding
    for breadth, nodes in enumerate(layers):
        if not nodes:
            continue
        nodes.sort(key=lambda node: node.y)

        # Push any overlapping nodes down
        y0 = _pack_down(nodes, padding, start=0.0)

        # If the bottommost node goes outside the bounds, push it back up
        overflow = y0 - padding - config.height
        if overflow <= 0:
            continue

        node = nodes[-1]
        node.y -= overflow
        y0 = node.y
        for node in reversed(nodes[:-1]):
            overlap = node.y + node.dy + padding - y0
            if overlap > 0:
                node.y -= overlap
            y0 = node.y

        if nodes[0].y < -TOLERANCE:
            # Packed height exceeds the extent: anchor at the top instead
            for node in nodes:
                node.y = max(node.y, 0.0)
            _pack_down(nodes, padding, start=0.0)
            if overflowed is not None:
                overflowed.add(breadth)
        elif nodes[0].y < 0:
            nodes[0].y = 0.0


def _pack_down(nodes: list[Node], padding: float, start: float) -> float:
    """Sweep downwards, returning the y just below the last node plus padding."""
    y0 = start
    for node in nodes:
        dy = y0 - node.y
        if dy > 0:
            node.y += dy
        y0 = node.y + node.dy + padding
    return y0


def _weighted_center(links: list[Link], other: list[Node]) -> float | None:
    total = sum(link.value for link in links)
    if total <= 0:
        return None
    return sum(node.center * link.value for link, node in zip(links, other)) / total


def _relax_right_to_left(graph: SankeyGraph, layers: list[list[Node]], alpha: float) -> None:
    for nodes in reversed(layers):
        for node in nodes:
            links = graph.outgoing(node)
            if not links:
                continue
            y = _weighted_center(links, [graph.target_of(link) for link in links])
            if y is not None:
                node.y += (y - node.center) * alpha


def _relax_left_to_right(graph: SankeyGraph, layers: list[list[Node]], alpha: float) -> None:
    for nodes in layers:
        for node in nodes:
            links = graph.incoming(node)
            if not links:
                continue
            y = _weighted_center(links, [graph.source_of(link) for link in links])
            if y is not None:
                node.y += (y - node.center) * alpha
