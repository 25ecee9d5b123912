"""Link depth assignment: where each link attaches along its end nodes."""

from __future__ import annotations

__all__ = ["compute_link_depths"]

from flowsankey.parser.model import SankeyGraph


def compute_link_depths(graph: SankeyGraph) -> SankeyGraph:
    """Assign ``sy`` and ``ty`` offsets to every link.

    Outgoing links are stacked along the source node in the vertical order
    of their targets, and incoming links along the target node in the order
    of their sources, which keeps links from crossing near the nodes. Each
    side of a node is partitioned into contiguous, non-overlapping bands.
    """
    graph = graph.copy()
    for node in graph.nodes:
        node.source_links.sort(key=lambda i: graph.target_of(graph.links[i]).center)
        node.target_links.sort(key=lambda i: graph.source_of(graph.links[i]).center)

    for node in graph.nodes:
        sy = 0.0
        for link in graph.outgoing(node):
            link.sy = sy
            sy += link.dy
        ty = 0.0
        for link in graph.incoming(node):
            link.ty = ty
            ty += link.dy
    return graph
