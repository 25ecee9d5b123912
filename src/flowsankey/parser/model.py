"""Data model for Sankey flow graphs.

Nodes live in a flat list (the arena); links refer to their endpoints by
index into that list, and nodes refer to their incident links by index into
the link list. Layout stages fill in the geometric fields.
"""

from __future__ import annotations

import copy
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Union

import networkx as nx


@dataclass
class Node:
    """A node (flow endpoint) in the Sankey diagram."""

    name: str
    label: str = ""
    # Populated by layout stages
    x: float = 0.0
    dx: float = 0.0
    y: float = 0.0
    dy: float = 0.0
    value: float = 0.0
    layer: int = 0
    source_links: list[int] = field(default_factory=list)  # outgoing
    target_links: list[int] = field(default_factory=list)  # incoming

    def __post_init__(self) -> None:
        if not self.label:
            self.label = self.name

    @property
    def center(self) -> float:
        """Vertical center of the node rectangle."""
        return self.y + self.dy / 2


@dataclass
class Link:
    """A weighted link between two nodes, referenced by node index."""

    source: int
    target: int
    value: float
    count: int = 1
    # Populated by layout stages
    dy: float = 0.0
    sy: float = 0.0
    ty: float = 0.0


Endpoint = Union[int, str, Node]


@dataclass
class RawLink:
    """A link as supplied by the caller, before normalization.

    Endpoints may be an index into the node list, a node name, or the
    Node object itself.
    """

    source: Endpoint
    target: Endpoint
    value: float
    count: int = 1


@dataclass
class SankeyInput:
    """A parsed flow definition that has not been laid out yet."""

    title: str = ""
    style: str = "light"
    nodes: list[Node] = field(default_factory=list)
    links: list[RawLink] = field(default_factory=list)
    # Name lookup for nodes added through add_node
    _names: set[str] = field(default_factory=set, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        self._names = {node.name for node in self.nodes}

    def add_node(self, node: Node) -> None:
        self.nodes.append(node)
        self._names.add(node.name)

    def add_link(self, link: RawLink) -> None:
        self.links.append(link)

    def has_node(self, name: str) -> bool:
        return name in self._names

    def ensure_node(self, name: str) -> None:
        """Declare a node by name unless it already exists."""
        if not self.has_node(name):
            self.add_node(Node(name=name))


@dataclass
class SankeyGraph:
    """A normalized Sankey graph: acyclic, deduplicated, index-based."""

    title: str = ""
    style: str = "light"
    nodes: list[Node] = field(default_factory=list)
    links: list[Link] = field(default_factory=list)
    # Links excluded from layout because they close a cycle
    circular_links: list[Link] = field(default_factory=list)
    # Parallel links folded into an earlier link for the same pair
    merged_links: list[Link] = field(default_factory=list)

    def node_index(self, name: str) -> int:
        """Return the index of the node called ``name``."""
        for i, node in enumerate(self.nodes):
            if node.name == name:
                return i
        raise KeyError(name)

    def node(self, name: str) -> Node:
        return self.nodes[self.node_index(name)]

    def source_of(self, link: Link) -> Node:
        return self.nodes[link.source]

    def target_of(self, link: Link) -> Node:
        return self.nodes[link.target]

    def outgoing(self, node: Node) -> list[Link]:
        return [self.links[i] for i in node.source_links]

    def incoming(self, node: Node) -> list[Link]:
        return [self.links[i] for i in node.target_links]

    def find_link(self, source: str, target: str) -> Link | None:
        """Return the accepted link between two named nodes, if any."""
        src = self.node_index(source)
        tgt = self.node_index(target)
        for link in self.links:
            if link.source == src and link.target == tgt:
                return link
        return None

    def layers(self) -> list[list[Node]]:
        """Group nodes by horizontal position, left to right.

        Nodes keep their input order inside each layer.
        """
        by_x: dict[float, list[Node]] = defaultdict(list)
        for node in self.nodes:
            by_x[node.x].append(node)
        return [by_x[x] for x in sorted(by_x)]

    def copy(self) -> SankeyGraph:
        """Return a deep copy, so stages never mutate their input."""
        return copy.deepcopy(self)

    def to_networkx(self) -> nx.DiGraph:
        """Export the accepted links as a networkx DiGraph keyed by node name."""
        G = nx.DiGraph()
        for node in self.nodes:
            G.add_node(node.name, label=node.label, value=node.value)
        for link in self.links:
            G.add_edge(
                self.nodes[link.source].name,
                self.nodes[link.target].name,
                value=link.value,
                count=link.count,
            )
        return G
