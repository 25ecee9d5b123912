"""Tests for SVG rendering."""

import xml.etree.ElementTree as ET

from flowsankey.layout import layout_input
from flowsankey.parser.mermaid import parse_sankey_mermaid
from flowsankey.parser.model import SankeyGraph
from flowsankey.render.svg import render_svg
from flowsankey.themes import DARK_THEME, LIGHT_THEME


def _layout_simple(title="Test"):
    flow = parse_sankey_mermaid(
        f"%%sankey title: {title}\n"
        "sankey-beta\n"
        "%%sankey node: a | Input\n"
        "%%sankey node: b | Output\n"
        "a,b,5\n"
        "a,c,2\n"
    )
    return layout_input(flow)


def test_render_produces_valid_svg():
    svg = render_svg(_layout_simple(), LIGHT_THEME)
    root = ET.fromstring(svg)
    assert root.tag.endswith("svg") or "svg" in root.tag


def test_render_contains_title():
    svg = render_svg(_layout_simple("Traffic"), LIGHT_THEME)
    assert "Traffic" in svg


def test_render_contains_node_labels():
    svg = render_svg(_layout_simple(), LIGHT_THEME)
    assert "Input" in svg
    assert "Output" in svg


def test_render_one_path_per_link():
    graph = _layout_simple()
    svg = render_svg(graph, LIGHT_THEME)
    assert svg.count("<path") == len(graph.links)


def test_render_uses_node_colors():
    svg = render_svg(_layout_simple(), LIGHT_THEME)
    assert LIGHT_THEME.node_colors[0] in svg


def test_render_dark_theme_background():
    svg = render_svg(_layout_simple(), DARK_THEME)
    assert DARK_THEME.background_color in svg


def test_render_light_theme_has_no_background():
    assert LIGHT_THEME.background_color == "none"
    svg = render_svg(_layout_simple(), LIGHT_THEME)
    assert 'fill="none"' in svg  # link strokes only


def test_render_empty_graph():
    svg = render_svg(SankeyGraph(), LIGHT_THEME)
    assert "svg" in svg


def test_render_explicit_size():
    svg = render_svg(_layout_simple(), LIGHT_THEME, width=1200, height=700)
    root = ET.fromstring(svg)
    assert root.get("width") == "1200"
    assert root.get("height") == "700"


def test_render_escapes_labels():
    flow = parse_sankey_mermaid('sankey-beta\n"R&D <core>",ops,3\n')
    svg = render_svg(layout_input(flow), LIGHT_THEME)
    ET.fromstring(svg)
    assert "R&amp;D" in svg
