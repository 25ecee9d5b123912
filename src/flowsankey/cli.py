"""CLI for flowsankey."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import click

from flowsankey import __version__
from flowsankey.errors import SankeyError
from flowsankey.layout import LayoutConfig, layout_input, overflowing_nodes
from flowsankey.layout.constants import CURVATURE, ITERATIONS
from flowsankey.layout.normalize import normalize
from flowsankey.parser import load_sankey
from flowsankey.parser.model import SankeyInput
from flowsankey.render import render_svg
from flowsankey.themes import THEMES


def _load(input_file: Path) -> SankeyInput:
    try:
        return load_sankey(input_file)
    except ValueError as e:
        raise click.ClickException(f"Parse error: {e}") from e


def _layout_options(f):
    """Shared geometry options for commands that run the layout."""
    options = [
        click.option("--width", type=float, default=None,
                     help="Layout width in pixels (default: 960)"),
        click.option("--height", type=float, default=None,
                     help="Layout height in pixels (default: 500)"),
        click.option("--node-width", type=float, default=None,
                     help="Node rectangle width (default: 24)"),
        click.option("--node-padding", type=float, default=None,
                     help="Vertical gap between nodes (default: 12)"),
        click.option("--iterations", type=click.IntRange(min=0), default=ITERATIONS,
                     help=f"Relaxation rounds (default: {ITERATIONS})"),
    ]
    for option in reversed(options):
        f = option(f)
    return f


def _make_config(
    width: float | None,
    height: float | None,
    node_width: float | None,
    node_padding: float | None,
) -> LayoutConfig:
    options = {
        "width": width,
        "height": height,
        "node_width": node_width,
        "node_padding": node_padding,
    }
    try:
        return LayoutConfig().replace(**{k: v for k, v in options.items() if v is not None})
    except ValueError as e:
        raise click.BadParameter(str(e)) from e


@click.group()
@click.version_option(version=__version__)
@click.option("-v", "--verbose", count=True,
              help="Log layout decisions (-v for info, -vv for debug)")
def cli(verbose: int) -> None:
    """flowsankey: Lay out weighted flow graphs as Sankey diagrams."""
    level = logging.WARNING
    if verbose == 1:
        level = logging.INFO
    elif verbose >= 2:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


@cli.command()
@click.argument("input_file", type=click.Path(exists=True, path_type=Path))
@click.option("-o", "--output", type=click.Path(path_type=Path), default=None,
              help="Output SVG file path. Defaults to <input>.svg")
@click.option("--theme", type=click.Choice(list(THEMES.keys())), default=None,
              help="Visual theme (default: the file's style, else light)")
@click.option("--curvature", type=click.FloatRange(0.0, 1.0), default=CURVATURE,
              help=f"Link curvature between 0 and 1 (default: {CURVATURE})")
@_layout_options
def render(
    input_file: Path,
    output: Path | None,
    theme: str | None,
    curvature: float,
    width: float | None,
    height: float | None,
    node_width: float | None,
    node_padding: float | None,
    iterations: int,
) -> None:
    """Render a flow definition to SVG."""
    flow = _load(input_file)
    config = _make_config(width, height, node_width, node_padding)

    try:
        graph = layout_input(flow, config=config, iterations=iterations)
    except SankeyError as e:
        raise click.ClickException(str(e)) from e

    theme_name = theme or (flow.style if flow.style in THEMES else "light")
    svg = render_svg(graph, THEMES[theme_name], curvature=curvature)
    if not svg.endswith("\n"):
        svg += "\n"

    if output is None:
        output = input_file.with_suffix(".svg")

    output.write_text(svg)
    click.echo(f"Rendered {len(graph.nodes)} nodes, "
               f"{len(graph.links)} links -> {output}")


@cli.command()
@click.argument("input_file", type=click.Path(exists=True, path_type=Path))
def validate(input_file: Path) -> None:
    """Validate a flow definition."""
    flow = _load(input_file)

    try:
        graph = normalize(flow.nodes, flow.links, title=flow.title)
    except SankeyError as e:
        click.echo("Validation errors:", err=True)
        click.echo(f"  - {e}", err=True)
        raise SystemExit(1)

    for link in graph.circular_links:
        click.echo(f"Circular link excluded: {graph.source_of(link).name} -> "
                   f"{graph.target_of(link).name}")
    if graph.merged_links:
        click.echo(f"Merged {len(graph.merged_links)} parallel link(s)")

    click.echo(f"Valid: {len(graph.nodes)} nodes, "
               f"{len(graph.links)} links, "
               f"{len(graph.circular_links)} circular")


@cli.command()
@click.argument("input_file", type=click.Path(exists=True, path_type=Path))
def info(input_file: Path) -> None:
    """Show information about a flow definition."""
    flow = _load(input_file)
    try:
        graph = layout_input(flow, iterations=0)
    except SankeyError as e:
        raise click.ClickException(str(e)) from e

    click.echo(f"Title: {graph.title or '(none)'}")
    click.echo(f"Style: {flow.style}")
    click.echo(f"Nodes: {len(graph.nodes)}")
    click.echo(f"Links: {len(graph.links)}")
    click.echo(f"Circular links: {len(graph.circular_links)}")
    layers = graph.layers()
    click.echo(f"Layers: {len(layers)}")
    for breadth, nodes in enumerate(layers):
        names = ", ".join(node.label for node in nodes)
        click.echo(f"  [{breadth}] {names}")


@cli.command()
@click.argument("input_file", type=click.Path(exists=True, path_type=Path))
@click.option("-o", "--output", type=click.Path(path_type=Path), default=None,
              help="Write JSON here instead of stdout")
@_layout_options
def layout(
    input_file: Path,
    output: Path | None,
    width: float | None,
    height: float | None,
    node_width: float | None,
    node_padding: float | None,
    iterations: int,
) -> None:
    """Print computed node and link geometry as JSON."""
    flow = _load(input_file)
    config = _make_config(width, height, node_width, node_padding)
    try:
        graph = layout_input(flow, config=config, iterations=iterations)
    except SankeyError as e:
        raise click.ClickException(str(e)) from e

    overflow = {node.name for node in overflowing_nodes(graph, config)}
    doc = {
        "title": graph.title,
        "width": config.width,
        "height": config.height,
        "nodes": [
            {
                "name": node.name,
                "label": node.label,
                "x": node.x,
                "dx": node.dx,
                "y": node.y,
                "dy": node.dy,
                "value": node.value,
                "overflow": node.name in overflow,
            }
            for node in graph.nodes
        ],
        "links": [
            {
                "source": graph.source_of(link).name,
                "target": graph.target_of(link).name,
                "value": link.value,
                "count": link.count,
                "dy": link.dy,
                "sy": link.sy,
                "ty": link.ty,
            }
            for link in graph.links
        ],
        "circular_links": [
            {
                "source": graph.source_of(link).name,
                "target": graph.target_of(link).name,
                "value": link.value,
            }
            for link in graph.circular_links
        ],
    }
    text = json.dumps(doc, indent=2) + "\n"
    if output is None:
        click.echo(text, nl=False)
    else:
        output.write_text(text)
        click.echo(f"Wrote layout of {len(graph.nodes)} nodes -> {output}")
