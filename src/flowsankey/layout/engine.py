"""Layout coordinator: runs the Sankey pipeline stages in order.

Stages:
  1. Normalize (resolve endpoints, break cycles, merge parallel links)
  2. Node values
  3. Node breadths (x)
  4. Node depths (y, relaxation + collision resolution)
  5. Link depths (sy / ty)
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from flowsankey.errors import LayoutNotComputedError
from flowsankey.layout.breadths import compute_node_breadths
from flowsankey.layout.config import LayoutConfig
from flowsankey.layout.constants import CURVATURE, ITERATIONS, TOLERANCE
from flowsankey.layout.curves import LinkPathGenerator
from flowsankey.layout.depths import compute_node_depths
from flowsankey.layout.link_depths import compute_link_depths
from flowsankey.layout.normalize import normalize
from flowsankey.layout.values import compute_node_values
from flowsankey.parser.model import Link, Node, RawLink, SankeyGraph, SankeyInput

logger = logging.getLogger(__name__)


def compute_layout(
    nodes: Sequence[Node | str],
    links: Sequence[RawLink | Link],
    config: LayoutConfig | None = None,
    iterations: int = ITERATIONS,
    title: str = "",
    style: str = "light",
) -> SankeyGraph:
    """Run stages 1-5 and return the annotated graph.

    The inputs are left untouched.
    """
    config = config or LayoutConfig()
    graph = normalize(nodes, links, title=title, style=style)
    logger.debug(
        "Normalized %d nodes, %d links (%d circular, %d merged)",
        len(graph.nodes),
        len(graph.links),
        len(graph.circular_links),
        len(graph.merged_links),
    )
    graph = compute_node_values(graph)
    graph = compute_node_breadths(graph, config)
    graph = compute_node_depths(graph, config, iterations)
    graph = compute_link_depths(graph)
    return graph


def layout_input(
    flow: SankeyInput,
    config: LayoutConfig | None = None,
    iterations: int = ITERATIONS,
) -> SankeyGraph:
    """Lay out a parsed flow definition."""
    return compute_layout(
        flow.nodes,
        flow.links,
        config=config,
        iterations=iterations,
        title=flow.title,
        style=flow.style,
    )


def overflowing_nodes(graph: SankeyGraph, config: LayoutConfig) -> list[Node]:
    """Nodes that stick out above or below the vertical extent."""
    return [
        node
        for node in graph.nodes
        if node.y < -TOLERANCE or node.y + node.dy > config.height + TOLERANCE
    ]


class SankeyLayout:
    """Stateful front end: configure, set a graph, lay it out, adjust.

    Each instance keeps its own graph; do not share one between threads.
    """

    def __init__(self, config: LayoutConfig | None = None) -> None:
        self._config = config or LayoutConfig()
        self._nodes: list[Node | str] = []
        self._links: list[RawLink | Link] = []
        self._title = ""
        self._graph: SankeyGraph | None = None

    @property
    def config(self) -> LayoutConfig:
        return self._config

    def configure(self, **options: object) -> SankeyLayout:
        """Change layout options (width, height, node_width, node_padding, size)."""
        self._config = self._config.replace(**options)
        return self

    def set_graph(
        self,
        nodes: Sequence[Node | str],
        links: Sequence[RawLink | Link],
        title: str = "",
    ) -> SankeyLayout:
        """Install the input graph. Any previous layout is discarded."""
        self._nodes = list(nodes)
        self._links = list(links)
        self._title = title
        self._graph = None
        return self

    def layout(self, iterations: int = ITERATIONS) -> SankeyGraph:
        self._graph = compute_layout(
            self._nodes,
            self._links,
            config=self._config,
            iterations=iterations,
            title=self._title,
        )
        return self._graph

    def relayout(self) -> SankeyGraph:
        """Recompute link offsets only, e.g. after nodes were moved by hand."""
        self._graph = compute_link_depths(self.graph)
        return self._graph

    def link_path_generator(self, curvature: float = CURVATURE) -> LinkPathGenerator:
        return LinkPathGenerator(self.graph, curvature)

    @property
    def graph(self) -> SankeyGraph:
        if self._graph is None:
            raise LayoutNotComputedError("call layout() before reading the layout")
        return self._graph

    @property
    def nodes(self) -> list[Node]:
        return self.graph.nodes

    @property
    def links(self) -> list[Link]:
        return self.graph.links
