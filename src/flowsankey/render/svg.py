"""SVG generation for Sankey diagrams using drawsvg."""

from __future__ import annotations

import drawsvg as draw

from flowsankey.layout.constants import CURVATURE
from flowsankey.layout.curves import link_path
from flowsankey.parser.model import SankeyGraph
from flowsankey.render.constants import (
    CANVAS_PADDING,
    LABEL_GAP,
    MIN_LINK_WIDTH,
    TITLE_HEIGHT,
)
from flowsankey.render.style import Theme


def render_svg(
    graph: SankeyGraph,
    theme: Theme,
    width: int | None = None,
    height: int | None = None,
    curvature: float = CURVATURE,
    padding: float = CANVAS_PADDING,
) -> str:
    """Render a laid-out Sankey graph to an SVG string."""
    if not graph.nodes:
        return '<svg xmlns="http://www.w3.org/2000/svg"></svg>'

    max_x = max(node.x + node.dx for node in graph.nodes)
    max_y = max(node.y + node.dy for node in graph.nodes)

    top = padding + (TITLE_HEIGHT if graph.title else 0.0)
    auto_width = max_x + padding * 2
    auto_height = max_y + top + padding

    svg_width = width or int(auto_width)
    svg_height = height or int(auto_height)

    d = draw.Drawing(svg_width, svg_height)

    # Background
    if theme.background_color != "none":
        d.append(draw.Rectangle(0, 0, svg_width, svg_height, fill=theme.background_color))

    # Title
    if graph.title:
        d.append(draw.Text(
            graph.title,
            theme.title_font_size,
            padding, padding,
            fill=theme.title_color,
            font_family=theme.label_font_family,
            font_weight="bold",
        ))

    # Links behind nodes
    _render_links(d, graph, theme, padding, top, curvature)
    _render_nodes(d, graph, theme, padding, top)
    _render_labels(d, graph, theme, padding, top, max_x / 2)

    return d.as_svg()


def _render_links(
    d: draw.Drawing,
    graph: SankeyGraph,
    theme: Theme,
    ox: float,
    oy: float,
    curvature: float,
) -> None:
    """Render links as stroked cubic curves, colored by their source node."""
    ordered = sorted(graph.links, key=lambda link: link.dy, reverse=True)
    for link in ordered:
        curve = link_path(graph, link, curvature)
        color = theme.node_color(link.source)
        path = draw.Path(
            stroke=color,
            stroke_width=max(link.dy, MIN_LINK_WIDTH),
            stroke_opacity=theme.link_opacity,
            fill="none",
        )
        path.M(curve.x0 + ox, curve.y0 + oy)
        path.C(
            curve.x2 + ox, curve.y0 + oy,
            curve.x3 + ox, curve.y1 + oy,
            curve.x1 + ox, curve.y1 + oy,
        )
        source = graph.source_of(link)
        target = graph.target_of(link)
        path.append_title(f"{source.label} → {target.label}\n{link.value:g}")
        d.append(path)


def _render_nodes(
    d: draw.Drawing,
    graph: SankeyGraph,
    theme: Theme,
    ox: float,
    oy: float,
) -> None:
    """Render nodes as rectangles."""
    for i, node in enumerate(graph.nodes):
        rect = draw.Rectangle(
            node.x + ox, node.y + oy,
            node.dx, max(node.dy, 0.0),
            fill=theme.node_color(i),
            stroke=theme.node_stroke,
            stroke_width=theme.node_stroke_width,
        )
        rect.append_title(f"{node.label}\n{node.value:g}")
        d.append(rect)


def _render_labels(
    d: draw.Drawing,
    graph: SankeyGraph,
    theme: Theme,
    ox: float,
    oy: float,
    midline: float,
) -> None:
    """Render node labels: right of nodes in the left half, left of them otherwise."""
    for node in graph.nodes:
        if node.x < midline:
            x = node.x + node.dx + LABEL_GAP
            anchor = "start"
        else:
            x = node.x - LABEL_GAP
            anchor = "end"
        d.append(draw.Text(
            node.label,
            theme.label_font_size,
            x + ox, node.center + oy,
            fill=theme.label_color,
            font_family=theme.label_font_family,
            text_anchor=anchor,
            dominant_baseline="central",
        ))
