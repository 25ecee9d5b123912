"""Graph normalization: endpoint resolution, cycle breaking, deduplication.

Links are walked in input order. A link S -> T is accepted unless T can
already reach S through links accepted so far; accepting it would then close
a cycle, so it is set aside as circular instead. This means acceptance
depends on input order: the first links seen win. A self-loop is always
circular. A second accepted link for an already accepted (S, T) pair is
merged into the first one: values and counts are added.
"""

from __future__ import annotations

__all__ = ["normalize", "root_nodes", "sink_nodes"]

import copy
import logging
import math
from collections.abc import Sequence

import networkx as nx

from flowsankey.errors import (
    DuplicateNodeError,
    InvalidLinkValueError,
    LinkIndexError,
    UnknownNodeError,
)
from flowsankey.parser.model import Endpoint, Link, Node, RawLink, SankeyGraph

logger = logging.getLogger(__name__)


def normalize(
    nodes: Sequence[Node | str],
    links: Sequence[RawLink | Link],
    title: str = "",
    style: str = "light",
) -> SankeyGraph:
    """Build a SankeyGraph from caller-supplied nodes and links.

    Nodes may be Node objects or bare names. The input objects are not
    modified; the returned graph owns fresh copies.

    Raises:
        LinkIndexError: a link index is outside the node list.
        UnknownNodeError: a link names a node (or passes a Node object)
            that is not in the node list.
        DuplicateNodeError: two nodes share a name.
        InvalidLinkValueError: a link value is negative or not finite.
    """
    originals = [n if isinstance(n, Node) else Node(name=str(n)) for n in nodes]
    index_by_name = _index_names(originals)
    index_by_id = {id(node): i for i, node in enumerate(originals)}

    # Resolve everything before building, so errors leave nothing behind
    resolved: list[tuple[int, int, float, int]] = []
    for position, raw in enumerate(links):
        src = _resolve(raw.source, position, originals, index_by_name, index_by_id)
        tgt = _resolve(raw.target, position, originals, index_by_name, index_by_id)
        value = _check_value(raw.value, position)
        resolved.append((src, tgt, value, raw.count))

    graph = SankeyGraph(title=title, style=style)
    for node in originals:
        fresh = copy.copy(node)
        fresh.source_links = []
        fresh.target_links = []
        graph.nodes.append(fresh)

    accepted = nx.DiGraph()
    accepted.add_nodes_from(range(len(graph.nodes)))
    pair_index: dict[tuple[int, int], int] = {}

    for src, tgt, value, count in resolved:
        link = Link(source=src, target=tgt, value=value, count=count)

        if (src, tgt) in pair_index:
            keeper = graph.links[pair_index[(src, tgt)]]
            keeper.value += value
            keeper.count += count
            graph.merged_links.append(link)
            logger.debug(
                "Merged parallel link %s -> %s into existing link (value now %g)",
                graph.nodes[src].name,
                graph.nodes[tgt].name,
                keeper.value,
            )
            continue

        if nx.has_path(accepted, tgt, src):
            graph.circular_links.append(link)
            logger.info(
                "Excluding circular link %s -> %s from layout",
                graph.nodes[src].name,
                graph.nodes[tgt].name,
            )
            continue

        accepted.add_edge(src, tgt)
        pair_index[(src, tgt)] = len(graph.links)
        graph.links.append(link)

    for i, link in enumerate(graph.links):
        graph.nodes[link.source].source_links.append(i)
        graph.nodes[link.target].target_links.append(i)

    return graph


def root_nodes(graph: SankeyGraph) -> list[Node]:
    """Nodes with no incoming accepted link, in input order."""
    return [node for node in graph.nodes if not node.target_links]


def sink_nodes(graph: SankeyGraph) -> list[Node]:
    """Nodes with no outgoing accepted link, in input order."""
    return [node for node in graph.nodes if not node.source_links]


def _index_names(nodes: list[Node]) -> dict[str, int]:
    index: dict[str, int] = {}
    for i, node in enumerate(nodes):
        if node.name in index:
            raise DuplicateNodeError(f"duplicate node name {node.name!r}")
        index[node.name] = i
    return index


def _resolve(
    endpoint: Endpoint,
    position: int,
    nodes: list[Node],
    index_by_name: dict[str, int],
    index_by_id: dict[int, int],
) -> int:
    """Turn a link endpoint into a node index."""
    if isinstance(endpoint, Node):
        if id(endpoint) not in index_by_id:
            raise UnknownNodeError(
                f"link {position} references node {endpoint.name!r}, "
                "which is not in the node list"
            )
        return index_by_id[id(endpoint)]
    if isinstance(endpoint, bool):
        raise UnknownNodeError(f"link {position} has a boolean endpoint")
    if isinstance(endpoint, int):
        if not 0 <= endpoint < len(nodes):
            raise LinkIndexError(endpoint, len(nodes), position)
        return endpoint
    if isinstance(endpoint, str):
        if endpoint not in index_by_name:
            raise UnknownNodeError(
                f"link {position} references unknown node {endpoint!r}"
            )
        return index_by_name[endpoint]
    raise UnknownNodeError(
        f"link {position} has an endpoint of unsupported type "
        f"{type(endpoint).__name__}"
    )


def _check_value(value: float, position: int) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise InvalidLinkValueError(
            f"link {position} has a non-numeric value {value!r}"
        ) from None
    if not math.isfinite(number) or number < 0:
        raise InvalidLinkValueError(
            f"link {position} has value {value!r}; values must be finite and >= 0"
        )
    return number
