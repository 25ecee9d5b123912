"""Input parsing: data model and supported flow definition formats."""

from flowsankey.parser.json_input import (
    load_sankey,
    parse_dependency_links,
    parse_sankey_json,
)
from flowsankey.parser.mermaid import parse_sankey_mermaid
from flowsankey.parser.model import Link, Node, RawLink, SankeyGraph, SankeyInput

__all__ = [
    "Link",
    "Node",
    "RawLink",
    "SankeyGraph",
    "SankeyInput",
    "load_sankey",
    "parse_dependency_links",
    "parse_sankey_json",
    "parse_sankey_mermaid",
]
