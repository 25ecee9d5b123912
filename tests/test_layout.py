"""Tests for the layout stages and the engine."""

import warnings

import pytest

from flowsankey.errors import DegenerateGraphWarning, LayoutNotComputedError
from flowsankey.layout import LayoutConfig, SankeyLayout, compute_layout, overflowing_nodes
from flowsankey.layout.breadths import compute_node_breadths
from flowsankey.layout.depths import compute_node_depths, depth_scale
from flowsankey.layout.link_depths import compute_link_depths
from flowsankey.layout.normalize import normalize
from flowsankey.layout.values import compute_node_values
from flowsankey.parser.mermaid import parse_sankey_mermaid
from flowsankey.parser.model import Node, RawLink

TOL = 1e-6


def _links(*triples):
    return [RawLink(s, t, v) for s, t, v in triples]


def _make_chain():
    return ["A", "B", "C"], _links(("A", "B", 10), ("B", "C", 10))


def _make_energy_graph():
    flow = parse_sankey_mermaid(
        "sankey-beta\n"
        "coal,power,40\n"
        "gas,power,25\n"
        "gas,heat,15\n"
        "solar,power,10\n"
        "power,homes,30\n"
        "power,industry,35\n"
        "power,losses,10\n"
        "heat,homes,12\n"
        "heat,losses,3\n"
        "homes,losses,4\n"
    )
    return flow.nodes, flow.links


def _breadths(nodes, links, **config):
    graph = compute_node_values(normalize(nodes, links))
    return compute_node_breadths(graph, LayoutConfig(**config))


# --- Values ---


def test_node_values_take_larger_side():
    graph = compute_node_values(
        normalize(["a", "b", "c"], _links(("a", "b", 3), ("b", "c", 5)))
    )
    assert [n.value for n in graph.nodes] == [3, 5, 5]


def test_isolated_node_value_zero():
    graph = compute_node_values(normalize(["a", "b", "x"], _links(("a", "b", 2))))
    assert graph.node("x").value == 0


def test_stages_do_not_mutate_input():
    graph = normalize(["a", "b"], _links(("a", "b", 2)))
    compute_node_values(graph)
    assert graph.nodes[0].value == 0


# --- Breadths ---


def test_chain_layers_spread_over_width():
    nodes, links = _make_chain()
    graph = _breadths(nodes, links, width=300, node_width=20)
    assert [n.layer for n in graph.nodes] == [0, 1, 2]
    # Last layer ends flush with the right edge
    assert [n.x for n in graph.nodes] == pytest.approx([0, 140, 280])
    assert all(n.dx == 20 for n in graph.nodes)


def test_longest_path_layering():
    graph = _breadths(
        ["a", "b", "c"], _links(("a", "b", 1), ("b", "c", 1), ("a", "c", 1))
    )
    assert [n.layer for n in graph.nodes] == [0, 1, 2]


def test_sinks_move_to_last_layer():
    graph = _breadths(
        ["a", "b", "c", "d"], _links(("a", "b", 1), ("a", "c", 1), ("c", "d", 1))
    )
    assert graph.node("b").layer == 2
    assert graph.node("d").layer == 2
    assert graph.node("c").layer == 1


def test_single_layer_has_no_division_by_zero():
    graph = _breadths(["a", "b"], [], width=200, node_width=10)
    assert [n.x for n in graph.nodes] == [0, 0]
    assert [n.layer for n in graph.nodes] == [0, 0]


def test_empty_graph():
    graph = compute_layout([], [])
    assert graph.nodes == []
    assert graph.links == []


def test_layering_monotonic_with_cycles():
    nodes = ["a", "b", "c", "d"]
    links = _links(("a", "b", 1), ("b", "c", 1), ("c", "a", 1), ("c", "d", 1), ("d", "b", 1))
    graph = compute_layout(nodes, links)
    for link in graph.links:
        assert graph.source_of(link).x < graph.target_of(link).x


# --- Depths ---


def test_depth_scale_uses_fullest_layer():
    graph = _breadths(["a", "b", "c"], _links(("a", "b", 3), ("a", "c", 1)))
    config = LayoutConfig(height=100, node_padding=10)
    # Layer 0: 100 / 4; layer 1: (100 - 10) / 4; both damped by 0.95
    assert depth_scale(graph.layers(), config) == pytest.approx(90 / 4 * 0.95)


def test_two_node_flow_is_aligned():
    config = LayoutConfig(width=200, height=100, node_padding=10)
    graph = compute_layout(["a", "b"], _links(("a", "b", 10)), config=config)
    a, b = graph.nodes
    assert a.dy == pytest.approx(95)
    assert b.dy == pytest.approx(95)
    assert a.y == pytest.approx(0)
    assert b.y == pytest.approx(0)
    assert graph.links[0].dy == pytest.approx(95)


def test_nodes_in_a_layer_keep_padding():
    config = LayoutConfig(height=200, node_padding=10)
    nodes, links = _make_energy_graph()
    graph = compute_layout(nodes, links, config=config)
    for layer in graph.layers():
        stacked = sorted(layer, key=lambda n: n.y)
        for upper, lower in zip(stacked, stacked[1:]):
            assert lower.y - (upper.y + upper.dy) >= 10 - TOL


def test_zero_iterations_still_resolves_collisions():
    config = LayoutConfig(height=100, node_padding=5)
    graph = compute_layout(
        ["a", "b", "c"], _links(("a", "b", 1), ("a", "c", 1)), config=config, iterations=0
    )
    b, c = graph.node("b"), graph.node("c")
    assert c.y >= b.y + b.dy + 5 - TOL


def test_negative_iterations_rejected():
    graph = _breadths(["a", "b"], _links(("a", "b", 1)))
    with pytest.raises(ValueError):
        compute_node_depths(graph, LayoutConfig(), iterations=-1)


def test_zero_value_graph_lays_out():
    graph = compute_layout(["a", "b"], _links(("a", "b", 0)))
    assert all(n.dy == 0 for n in graph.nodes)
    assert all(n.y >= 0 for n in graph.nodes)


def test_degenerate_layer_warns_and_overflows():
    config = LayoutConfig(width=200, height=100, node_padding=30)
    nodes = ["hub"] + [f"leaf{i}" for i in range(5)]
    links = _links(*[("hub", f"leaf{i}", 1) for i in range(5)])
    with pytest.warns(DegenerateGraphWarning):
        graph = compute_layout(nodes, links, config=config)
    over = overflowing_nodes(graph, config)
    assert over
    # Overflow is at the bottom; the stack stays anchored at the top
    assert all(n.y >= -TOL for n in graph.nodes)


def test_no_warning_for_normal_graph():
    nodes, links = _make_energy_graph()
    with warnings.catch_warnings():
        warnings.simplefilter("error", DegenerateGraphWarning)
        compute_layout(nodes, links)


def test_crowded_layer_warns_once():
    config = LayoutConfig(width=200, height=100, node_padding=30)
    nodes = ["hub"] + [f"leaf{i}" for i in range(5)]
    links = _links(*[("hub", f"leaf{i}", 1) for i in range(5)])
    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always")
        compute_layout(nodes, links, config=config)
    messages = [
        str(w.message) for w in caught if issubclass(w.category, DegenerateGraphWarning)
    ]
    assert len(messages) == 1
    assert "layer 1" in messages[0]


def test_depth_scale_records_crowded_layers():
    config = LayoutConfig(height=100, node_padding=30)
    layers = [[Node("a", value=5)], [Node(f"n{i}", value=1) for i in range(5)]]
    crowded = set()
    with pytest.warns(DegenerateGraphWarning):
        ky = depth_scale(layers, config, crowded)
    assert crowded == {1}
    assert ky == pytest.approx(100 / 5 * 0.95)


# --- Link depths ---


def test_link_offsets_follow_target_order():
    config = LayoutConfig(height=100, node_padding=10)
    graph = compute_layout(
        ["a", "b", "c"], _links(("a", "b", 1), ("a", "c", 3)), config=config
    )
    a = graph.node("a")
    ordered = graph.outgoing(a)
    centers = [graph.target_of(link).center for link in ordered]
    assert centers == sorted(centers)
    assert ordered[0].sy == 0
    assert ordered[1].sy == pytest.approx(ordered[0].dy)


def test_relayout_after_moving_node():
    config = LayoutConfig(height=200, node_padding=10)
    layout = SankeyLayout(config)
    layout.set_graph(["a", "b", "c"], _links(("a", "b", 2), ("a", "c", 2)))
    graph = layout.layout()
    b, c = graph.node("b"), graph.node("c")
    first = graph.target_of(graph.outgoing(graph.node("a"))[0])
    assert first is b

    # Drag c above b
    c.y, b.y = b.y, c.y
    graph = layout.relayout()
    ordered = graph.outgoing(graph.node("a"))
    assert graph.target_of(ordered[0]).name == "c"
    assert ordered[0].sy == 0
    assert ordered[1].sy == pytest.approx(ordered[0].dy)


def test_relayout_is_idempotent():
    layout = SankeyLayout().set_graph(*_make_energy_graph())
    layout.layout()
    once = layout.relayout()
    twice = layout.relayout()
    assert once == twice


# --- Engine ---


def test_three_node_chain_scenario():
    nodes, links = _make_chain()
    layout = SankeyLayout().configure(width=300, node_width=20)
    graph = layout.set_graph(nodes, links).layout()
    assert [n.x for n in graph.nodes] == pytest.approx([0, 140, 280])
    assert [n.value for n in graph.nodes] == [10, 10, 10]


def test_parallel_link_scenario():
    graph = compute_layout(["A", "B"], _links(("A", "B", 5), ("A", "B", 3)))
    assert len(graph.links) == 1
    assert graph.links[0].value == 8
    assert graph.node("A").value == 8
    assert graph.node("B").value == 8
    assert graph.links[0].dy == pytest.approx(graph.node("A").dy)


def test_cycle_scenario_terminates():
    graph = compute_layout(
        ["A", "B", "C"], _links(("A", "B", 1), ("B", "C", 1), ("C", "A", 1))
    )
    assert len(graph.circular_links) == 1
    assert len(graph.links) == 2
    assert [n.layer for n in graph.nodes] == [0, 1, 2]


def test_layout_is_idempotent():
    nodes, links = _make_energy_graph()
    first = compute_layout(nodes, links)
    second = compute_layout(nodes, links)
    assert first == second


def test_layout_leaves_input_untouched():
    a, b = Node("a"), Node("b")
    compute_layout([a, b], [RawLink(a, b, 3)])
    assert a.x == 0 and a.value == 0 and a.source_links == []


def test_conservation():
    nodes, links = _make_energy_graph()
    graph = compute_layout(nodes, links)
    for node in graph.nodes:
        out = sum(l.value for l in graph.outgoing(node))
        inc = sum(l.value for l in graph.incoming(node))
        assert node.value == max(out, inc)


def test_bounds():
    config = LayoutConfig(width=600, height=300, node_width=15, node_padding=8)
    nodes, links = _make_energy_graph()
    graph = compute_layout(nodes, links, config=config)
    for node in graph.nodes:
        assert node.x >= 0
        assert node.x + node.dx <= config.width + TOL
        assert node.y >= -TOL
        assert node.y + node.dy <= config.height + TOL
    assert overflowing_nodes(graph, config) == []


def test_link_partition():
    nodes, links = _make_energy_graph()
    graph = compute_layout(nodes, links)
    for node in graph.nodes:
        outgoing = graph.outgoing(node)
        sys = [l.sy for l in outgoing]
        assert sys == sorted(sys)
        if outgoing:
            assert outgoing[-1].sy + outgoing[-1].dy <= node.dy + TOL
        incoming = graph.incoming(node)
        tys = [l.ty for l in incoming]
        assert tys == sorted(tys)
        if incoming:
            assert incoming[-1].ty + incoming[-1].dy <= node.dy + TOL


def test_index_links_through_engine():
    graph = compute_layout(["a", "b", "c"], _links((0, 1, 2), (1, 2, 2)))
    assert [n.layer for n in graph.nodes] == [0, 1, 2]


def test_relayout_before_layout():
    layout = SankeyLayout().set_graph(["a"], [])
    with pytest.raises(LayoutNotComputedError):
        layout.relayout()
    with pytest.raises(RuntimeError):
        layout.nodes


def test_set_graph_discards_previous_layout():
    layout = SankeyLayout().set_graph(["a", "b"], _links(("a", "b", 1)))
    layout.layout()
    layout.set_graph(["a"], [])
    with pytest.raises(LayoutNotComputedError):
        layout.links


def test_configure_size():
    layout = SankeyLayout().configure(size=(400, 250), node_padding=4)
    assert layout.config.size == (400, 250)
    assert layout.config.node_padding == 4


def test_configure_unknown_option():
    with pytest.raises(TypeError, match="colour"):
        SankeyLayout().configure(colour="red")


@pytest.mark.parametrize(
    "options",
    [{"width": 0}, {"height": -5}, {"node_padding": -1}, {"width": 10, "node_width": 24}],
)
def test_invalid_config(options):
    with pytest.raises(ValueError):
        LayoutConfig(**options)
