"""Cubic link curves between laid-out nodes."""

from __future__ import annotations

__all__ = ["CubicPath", "LinkPathGenerator", "interpolate", "link_path"]

from collections.abc import Callable
from dataclasses import dataclass

from flowsankey.layout.constants import CURVATURE
from flowsankey.parser.model import Link, SankeyGraph


def interpolate(a: float, b: float) -> Callable[[float], float]:
    """Linear interpolator between a and b over t in [0, 1]."""
    return lambda t: a + (b - a) * t


@dataclass(frozen=True)
class CubicPath:
    """A horizontal-tangent cubic Bezier from (x0, y0) to (x1, y1)."""

    x0: float
    y0: float
    x1: float
    y1: float
    # Control point x positions; control point y's equal the end y's
    x2: float
    x3: float

    @property
    def d(self) -> str:
        """SVG path data."""
        return (
            f"M{_fmt(self.x0)},{_fmt(self.y0)}"
            f"C{_fmt(self.x2)},{_fmt(self.y0)}"
            f" {_fmt(self.x3)},{_fmt(self.y1)}"
            f" {_fmt(self.x1)},{_fmt(self.y1)}"
        )

    def __str__(self) -> str:
        return self.d


def _fmt(v: float) -> str:
    text = f"{v:.3f}".rstrip("0").rstrip(".")
    return "0" if text == "-0" else text


def _check_curvature(curvature: float) -> float:
    if not 0.0 <= curvature <= 1.0:
        raise ValueError(f"curvature must be between 0 and 1, got {curvature}")
    return float(curvature)


def link_path(graph: SankeyGraph, link: Link, curvature: float = CURVATURE) -> CubicPath:
    """Curve from the right edge of the source to the left edge of the target.

    The curve leaves and enters at the middle of the link's band on each
    node; control points sit ``curvature`` of the way across the gap.
    """
    curvature = _check_curvature(curvature)
    source = graph.source_of(link)
    target = graph.target_of(link)
    x0 = source.x + source.dx
    x1 = target.x
    xi = interpolate(x0, x1)
    return CubicPath(
        x0=x0,
        y0=source.y + link.sy + link.dy / 2,
        x1=x1,
        y1=target.y + link.ty + link.dy / 2,
        x2=xi(curvature),
        x3=xi(1 - curvature),
    )


class LinkPathGenerator:
    """Callable mapping a laid-out link of ``graph`` to its SVG path data."""

    def __init__(self, graph: SankeyGraph, curvature: float = CURVATURE) -> None:
        self.graph = graph
        self.curvature = _check_curvature(curvature)

    def with_curvature(self, curvature: float) -> LinkPathGenerator:
        return LinkPathGenerator(self.graph, curvature)

    def path(self, link: Link) -> CubicPath:
        return link_path(self.graph, link, self.curvature)

    def __call__(self, link: Link) -> str:
        return self.path(link).d
