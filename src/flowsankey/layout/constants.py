"""Layout constants used across layout modules.

These are the defaults behind LayoutConfig and the numeric factors of the
depth relaxation.
"""

# ---------------------------------------------------------------------------
# Drawing area defaults
# ---------------------------------------------------------------------------
WIDTH: float = 960.0
"""Pixel width of the layout area."""

HEIGHT: float = 500.0
"""Pixel height of the layout area (the vertical extent)."""

NODE_WIDTH: float = 24.0
"""Pixel thickness of each node rectangle."""

NODE_PADDING: float = 12.0
"""Minimum vertical gap between stacked nodes in a layer."""

# ---------------------------------------------------------------------------
# Depth relaxation
# ---------------------------------------------------------------------------
ITERATIONS: int = 32
"""Default number of relaxation rounds."""

DEPTH_DAMPENING: float = 0.95
"""Fraction of the available height handed out to node values."""

ALPHA_START: float = 1.0
"""Initial relaxation step factor."""

ALPHA_DECAY: float = 0.99
"""Multiplier applied to the step factor before every round."""

# ---------------------------------------------------------------------------
# Link curves
# ---------------------------------------------------------------------------
CURVATURE: float = 0.5
"""Fraction of the horizontal span used to place the curve control points."""

TOLERANCE: float = 1e-9
"""Floating point slack for bounds and overflow checks."""
