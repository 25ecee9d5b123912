"""Theme and style constants for Sankey rendering."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class Theme:
    """Visual theme for a Sankey diagram."""

    name: str
    background_color: str
    node_colors: list[str] = field(default_factory=list)
    node_stroke: str = "#000000"
    node_stroke_width: float = 0.5
    link_opacity: float = 0.4
    label_color: str = "#000000"
    label_font_family: str = "'Helvetica Neue', Helvetica, Arial, sans-serif"
    label_font_size: float = 12.0
    title_color: str = "#000000"
    title_font_size: float = 20.0

    def node_color(self, index: int) -> str:
        """Color for the node at ``index``, cycling through the palette."""
        if not self.node_colors:
            return "#888888"
        return self.node_colors[index % len(self.node_colors)]
