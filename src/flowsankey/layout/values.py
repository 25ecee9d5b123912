"""Node value computation from incident link weights."""

from __future__ import annotations

__all__ = ["compute_node_values"]

from flowsankey.parser.model import SankeyGraph


def compute_node_values(graph: SankeyGraph) -> SankeyGraph:
    """Set each node's value to the larger of its outflow and inflow.

    Nodes without links get 0.
    """
    graph = graph.copy()
    for node in graph.nodes:
        outflow = sum(link.value for link in graph.outgoing(node))
        inflow = sum(link.value for link in graph.incoming(node))
        node.value = max(outflow, inflow)
    return graph
