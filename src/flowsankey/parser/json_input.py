"""JSON input formats.

Two shapes are accepted:

* a node/link document::

    {"title": "...", "nodes": [{"name": "a", "label": "A"}, ...],
     "links": [{"source": 0, "target": "b", "value": 3}, ...]}

  where link endpoints are node indices or node names;

* a list of service dependency links as reported by a tracing backend::

    [{"parent": "frontend", "child": "backend", "callCount": 12}, ...]
"""

from __future__ import annotations

import json
from pathlib import Path

from flowsankey.parser.mermaid import parse_sankey_mermaid
from flowsankey.parser.model import Node, RawLink, SankeyInput


def parse_sankey_json(text: str) -> SankeyInput:
    """Parse a node/link JSON document, or a dependency-link list."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ValueError(f"invalid JSON: {e}") from e

    if isinstance(data, list):
        return _dependency_links_to_input(data)
    if not isinstance(data, dict):
        raise ValueError("expected a JSON object or a list of dependency links")

    flow = SankeyInput(
        title=str(data.get("title", "")),
        style=str(data.get("style", "light")).lower(),
    )

    for i, raw in enumerate(_list_field(data, "nodes")):
        if isinstance(raw, str):
            flow.add_node(Node(name=raw))
        elif isinstance(raw, dict) and "name" in raw:
            flow.add_node(Node(name=str(raw["name"]), label=str(raw.get("label", ""))))
        else:
            raise ValueError(f"node {i}: expected a name or an object with 'name'")

    for i, raw in enumerate(_list_field(data, "links")):
        if not isinstance(raw, dict):
            raise ValueError(f"link {i}: expected an object")
        missing = [key for key in ("source", "target", "value") if key not in raw]
        if missing:
            raise ValueError(f"link {i}: missing {', '.join(missing)}")
        source = _endpoint(raw["source"], i)
        target = _endpoint(raw["target"], i)
        # Names that were never declared become nodes; indices stay as given
        for endpoint in (source, target):
            if isinstance(endpoint, str):
                flow.ensure_node(endpoint)
        flow.add_link(
            RawLink(
                source=source,
                target=target,
                value=_number(raw["value"], i),
                count=_count(raw.get("count", 1), i),
            )
        )

    return flow


def parse_dependency_links(text: str) -> SankeyInput:
    """Parse a JSON list of ``{"parent", "child", "callCount"}`` objects."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ValueError(f"invalid JSON: {e}") from e
    if not isinstance(data, list):
        raise ValueError("expected a JSON list of dependency links")
    return _dependency_links_to_input(data)


def _dependency_links_to_input(data: list) -> SankeyInput:
    flow = SankeyInput(title="Service dependencies")
    for i, raw in enumerate(data):
        if not isinstance(raw, dict) or "parent" not in raw or "child" not in raw:
            raise ValueError(f"dependency link {i}: expected 'parent' and 'child'")
        parent = str(raw["parent"])
        child = str(raw["child"])
        flow.ensure_node(parent)
        flow.ensure_node(child)
        flow.add_link(
            RawLink(
                source=parent,
                target=child,
                value=_number(raw.get("callCount", 0), i),
            )
        )
    return flow


def _endpoint(raw: object, position: int) -> int | str:
    # bool is an int subclass but never a valid index
    if isinstance(raw, bool):
        raise ValueError(f"link {position}: endpoint must be an index or a name")
    if isinstance(raw, int):
        return raw
    if isinstance(raw, str):
        return raw
    raise ValueError(f"link {position}: endpoint must be an index or a name")


def _number(raw: object, position: int) -> float:
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        raise ValueError(f"link {position}: value must be a number")
    return float(raw)


def _count(raw: object, position: int) -> int:
    if isinstance(raw, bool) or not isinstance(raw, int) or raw < 0:
        raise ValueError(f"link {position}: count must be a non-negative integer")
    return raw


def _list_field(data: dict, key: str) -> list:
    value = data.get(key, [])
    if not isinstance(value, list):
        raise ValueError(f"'{key}' must be a list, got {type(value).__name__}")
    return value


def load_sankey(path: Path) -> SankeyInput:
    """Load a flow definition, picking the parser from the file suffix."""
    text = path.read_text()
    if path.suffix.lower() == ".json":
        return parse_sankey_json(text)
    return parse_sankey_mermaid(text)
