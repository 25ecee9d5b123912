"""Render constants used by the SVG renderer.

Theme-dependent values remain in style.py.
"""

CANVAS_PADDING: float = 40.0
"""Default padding around the layout area."""

TITLE_HEIGHT: float = 40.0
"""Vertical space reserved above the layout area for the title."""

LABEL_GAP: float = 6.0
"""Horizontal gap between a node rectangle and its label."""

MIN_LINK_WIDTH: float = 1.0
"""Links thinner than this are drawn at this width so they stay visible."""
