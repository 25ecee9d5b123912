"""Parser for Mermaid ``sankey-beta`` definitions with %%sankey directives.

The body is CSV with three columns (source, target, value). Fields may be
double-quoted, and a doubled quote inside a quoted field is a literal quote.
Lines starting with ``%%`` are comments, except ``%%sankey`` directives:

    %%sankey title: Checkout traffic
    %%sankey style: dark
    %%sankey node: api | API gateway
"""

from __future__ import annotations

import csv
import math

from flowsankey.parser.model import Node, RawLink, SankeyInput

_HEADER = "sankey-beta"


def _check_unsupported_input(text: str) -> None:
    """Detect common unsupported input formats and raise helpful errors."""
    lines = [line.strip() for line in text.strip().split("\n")]
    body = [line for line in lines if line and not line.startswith("%%")]

    if not body:
        return

    if body[0].startswith("graph ") or body[0].startswith("flowchart "):
        raise ValueError(
            "Mermaid 'graph'/'flowchart' syntax describes unweighted edges. "
            "Use a 'sankey-beta' block with 'source,target,value' rows instead."
        )

    if body[0] != _HEADER:
        raise ValueError(
            f"Expected '{_HEADER}' as the first statement, got {body[0]!r}"
        )


def parse_sankey_mermaid(text: str) -> SankeyInput:
    """Parse a Mermaid sankey-beta definition."""
    _check_unsupported_input(text)

    flow = SankeyInput()
    lines = text.strip().split("\n")

    for lineno, line in enumerate(lines, start=1):
        stripped = line.strip()
        if not stripped or stripped == _HEADER:
            continue

        if stripped.startswith("%%sankey"):
            _parse_directive(stripped, flow)
            continue

        # Regular comment
        if stripped.startswith("%%"):
            continue

        _parse_row(stripped, flow, lineno)

    return flow


def _parse_directive(line: str, flow: SankeyInput) -> None:
    """Parse a %%sankey directive line."""
    content = line[len("%%sankey") :].strip()

    if content.startswith("title:"):
        flow.title = content[len("title:") :].strip()
    elif content.startswith("style:"):
        flow.style = content[len("style:") :].strip().lower()
    elif content.startswith("node:"):
        parts = content[len("node:") :].strip().split("|")
        name = parts[0].strip()
        if not name:
            return
        label = parts[1].strip() if len(parts) >= 2 else ""
        for node in flow.nodes:
            if node.name == name:
                node.label = label or name
                return
        flow.add_node(Node(name=name, label=label))


def _parse_row(line: str, flow: SankeyInput, lineno: int) -> None:
    """Parse one ``source,target,value`` CSV row."""
    rows = list(csv.reader([line], skipinitialspace=True))
    fields = [f.strip() for f in rows[0]] if rows else []
    if len(fields) != 3:
        raise ValueError(
            f"line {lineno}: expected 'source,target,value', got {line!r}"
        )

    source, target, raw_value = fields
    if not source or not target:
        raise ValueError(f"line {lineno}: empty node name in {line!r}")

    try:
        value = float(raw_value)
    except ValueError:
        raise ValueError(
            f"line {lineno}: value {raw_value!r} is not a number"
        ) from None
    if not math.isfinite(value) or value < 0:
        raise ValueError(f"line {lineno}: value must be a non-negative number")

    flow.ensure_node(source)
    flow.ensure_node(target)
    flow.add_link(RawLink(source=source, target=target, value=value))
