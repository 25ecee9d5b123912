"""SVG rendering of laid-out Sankey graphs."""

from flowsankey.render.style import Theme
from flowsankey.render.svg import render_svg

__all__ = ["Theme", "render_svg"]
