"""Immutable layout configuration threaded through every stage."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass

from flowsankey.layout.constants import HEIGHT, NODE_PADDING, NODE_WIDTH, WIDTH


@dataclass(frozen=True)
class LayoutConfig:
    """Geometry of the drawable area.

    ``width`` drives breadth scaling and ``height`` is the vertical extent
    nodes are packed into.
    """

    width: float = WIDTH
    height: float = HEIGHT
    node_width: float = NODE_WIDTH
    node_padding: float = NODE_PADDING

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(
                f"layout size must be positive, got {self.width}x{self.height}"
            )
        if not 0 <= self.node_width <= self.width:
            raise ValueError(
                f"node_width must be between 0 and width ({self.width}), "
                f"got {self.node_width}"
            )
        if self.node_padding < 0:
            raise ValueError(f"node_padding must be >= 0, got {self.node_padding}")

    @property
    def size(self) -> tuple[float, float]:
        return (self.width, self.height)

    def replace(self, **options: object) -> LayoutConfig:
        """Return a copy with some options changed.

        ``size=(width, height)`` sets both dimensions at once. Unknown
        options raise TypeError.
        """
        if "size" in options:
            size = options.pop("size")
            try:
                width, height = size  # type: ignore[misc]
            except (TypeError, ValueError):
                raise ValueError(f"size must be (width, height), got {size!r}") from None
            options.setdefault("width", width)
            options.setdefault("height", height)
        known = {f.name for f in dataclasses.fields(self)}
        unknown = sorted(set(options) - known)
        if unknown:
            raise TypeError(f"unknown layout option(s): {', '.join(unknown)}")
        values = {key: float(value) for key, value in options.items()}  # type: ignore[arg-type]
        return dataclasses.replace(self, **values)
