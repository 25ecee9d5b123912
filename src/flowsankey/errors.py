"""Exceptions and warnings raised by flowsankey."""

from __future__ import annotations


class SankeyError(Exception):
    """Base class for flowsankey errors."""


class LinkIndexError(SankeyError, IndexError):
    """A link references a node index outside the node list."""

    def __init__(self, index: int, node_count: int, link_position: int) -> None:
        self.index = index
        self.node_count = node_count
        self.link_position = link_position
        super().__init__(
            f"link {link_position} references node index {index}, "
            f"but only {node_count} nodes are defined"
        )


class UnknownNodeError(SankeyError, KeyError):
    """A link references a node name or object that is not in the graph."""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else ""


class DuplicateNodeError(SankeyError, ValueError):
    """Two nodes share the same name."""


class InvalidLinkValueError(SankeyError, ValueError):
    """A link value is negative or not a finite number."""


class LayoutNotComputedError(SankeyError, RuntimeError):
    """A derived field was requested before layout() ran."""


class DegenerateGraphWarning(UserWarning):
    """A layer cannot fit inside the vertical extent; overflow is accepted."""
