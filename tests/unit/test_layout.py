"""Tests for the multi-pass diagram layout."""

import pytest

from alluvial import Depth, Diagram, Layout, LayoutOptions, Module, Network
from tests.unit.fakes import FakeTimingHook
from tests.unit.networks import NETWORK_A, NETWORK_B, SMALL_LAYOUT, network


def _visible_modules(net: Network) -> list[Module]:
    return [module for module in net.children if module.is_visible]


def _column_height(net: Network) -> float:
    modules = _visible_modules(net)
    return sum(module.height + module.margin for module in modules)


def test_update_layout_without_networks_is_noop() -> None:
    empty = Diagram()
    empty.update_layout(SMALL_LAYOUT)
    assert empty.width == 0
    assert empty.height == 0


def test_networks_are_placed_at_fixed_pitch(laid_out: Diagram) -> None:
    network_a, network_b = laid_out.children
    assert network_a.x == 0
    assert network_b.x == 20  # module width 10 + streamline width 1 * 10
    assert network_a.width == 10
    assert network_a.height == 100
    assert laid_out.layout.width == 30
    assert laid_out.layout.height == 100


def test_modules_are_sorted_by_flow(laid_out: Diagram) -> None:
    network_a, network_b = laid_out.children
    assert [m.module_id for m in network_a.children] == ["1", "2"]
    assert [m.module_id for m in network_b.children] == ["3", "1", "2"]


def test_margins_depend_on_path_divergence(laid_out: Diagram) -> None:
    network_a, network_b = laid_out.children
    # Top-level modules diverge at index 0: 2 ** (2 - 0) = 4; the last module has none.
    assert [m.margin for m in network_a.children] == [4, 0]
    assert [m.margin for m in network_b.children] == [4, 4, 0]


def test_flow_sizing_scenario(laid_out: Diagram) -> None:
    """Module heights are flow fractions of the height left after margins."""
    # Largest total margin is 8 (network B), well below 20 % of 100.
    assert laid_out.usable_height == pytest.approx(92)
    network_a, network_b = laid_out.children
    assert [m.height for m in network_a.children] == pytest.approx([0.6 * 92, 0.4 * 92])
    assert [m.height for m in network_b.children] == pytest.approx([0.5 * 92, 0.3 * 92, 0.2 * 92])


def test_modules_stack_with_margins(laid_out: Diagram) -> None:
    for net in laid_out.children:
        modules = _visible_modules(net)
        assert modules[0].y + modules[0].height == pytest.approx(100)
        for lower, upper in zip(modules, modules[1:]):
            assert lower.y - lower.margin == pytest.approx(upper.y + upper.height)


def test_column_uses_usable_height_plus_margins(laid_out: Diagram) -> None:
    for net in laid_out.children:
        total_margin = sum(m.margin for m in net.children)
        visible_flow = sum(m.flow for m in _visible_modules(net))
        expected = visible_flow * laid_out.usable_height + total_margin
        assert _column_height(net) == pytest.approx(expected)


def test_groups_and_branches_fill_their_module(laid_out: Diagram) -> None:
    for node in laid_out.traverse_depth_first_pre_order_while(lambda n: n.depth <= Depth.MODULE):
        if node.depth != Depth.MODULE:
            continue
        assert sum(group.height for group in node.children) == pytest.approx(node.height)
        for group in node.children:
            assert group.left.height == pytest.approx(group.height)
            assert group.right.height == pytest.approx(group.height)
            assert sum(s.height for s in group.left) == pytest.approx(group.height)
            assert sum(s.height for s in group.right) == pytest.approx(group.height)
            assert group.left.y == pytest.approx(group.y)
            assert group.right.y == pytest.approx(group.y)


def test_margins_are_compressed_to_a_fifth_of_the_height(diagram: Diagram) -> None:
    diagram.update_layout(
        LayoutOptions(height=100, module_width=10, flow_threshold=0, margin_exponent=5)
    )
    # Uncompressed margins would be 32 + 32 = 64 in network B.
    network_b = diagram.get_network("B")
    assert network_b is not None
    assert sum(m.margin for m in network_b.children) == pytest.approx(20)
    assert diagram.usable_height == pytest.approx(80)


def test_flow_threshold_hides_small_modules(diagram: Diagram) -> None:
    diagram.update_layout(
        LayoutOptions(height=100, module_width=10, flow_threshold=0.25, margin_exponent=2)
    )
    network_b = diagram.get_network("B")
    assert network_b is not None
    assert [m.module_id for m in network_b.visible_children] == ["3", "1"]
    # Invisible modules are kept after the visible ones.
    assert [m.module_id for m in network_b.children] == ["3", "1", "2"]
    assert network_b.children[1].margin == 0


def test_justify_gives_every_column_the_same_height() -> None:
    half_flow = {
        "id": "half",
        "nodes": [
            {"id": 1, "flow": 0.2, "path": "1:1"},
            {"id": 2, "flow": 0.2, "path": "2:1"},
            {"id": 3, "flow": 0.1, "path": "3:1"},
        ],
    }
    diagram = Diagram([network(NETWORK_A), network(half_flow)])
    diagram.calc_flow()
    diagram.update_layout(
        LayoutOptions(
            height=100,
            module_width=10,
            flow_threshold=0,
            margin_exponent=2,
            vertical_align="justify",
        )
    )
    heights = [_column_height(net) for net in diagram.children]
    assert heights == pytest.approx([100, 100])


def test_justify_leaves_single_module_column_alone() -> None:
    single = {
        "id": "single",
        "nodes": [
            {"id": 1, "flow": 0.5, "path": "1:1"},
            {"id": 3, "flow": 0.5, "path": "1:2"},
        ],
    }
    diagram = Diagram([network(NETWORK_A), network(single)])
    diagram.calc_flow()
    diagram.update_layout(
        LayoutOptions(
            height=100,
            module_width=10,
            flow_threshold=0,
            margin_exponent=2,
            vertical_align="justify",
        )
    )

    full, lone = diagram.children
    assert [m.margin for m in lone.children] == [0]
    assert lone.children[0].height == pytest.approx(96)
    assert _column_height(full) == pytest.approx(100)


def test_bottom_alignment_leaves_space_above_sparse_columns() -> None:
    half_flow = {
        "id": "half",
        "nodes": [
            {"id": 1, "flow": 0.25, "path": "1:1"},
            {"id": 2, "flow": 0.25, "path": "2:1"},
        ],
    }
    diagram = Diagram([network(NETWORK_A), network(half_flow)])
    diagram.calc_flow()
    diagram.update_layout(SMALL_LAYOUT)
    full, sparse = (_column_height(net) for net in diagram.children)
    assert sparse < full


def test_nodes_sizing_uses_leaf_counts(diagram: Diagram) -> None:
    diagram.update_layout(
        LayoutOptions(
            height=100, module_width=10, flow_threshold=0, margin_exponent=2, module_size="nodes"
        )
    )
    network_a = diagram.get_network("A")
    assert network_a is not None
    heights = {m.module_id: m.height for m in network_a.children}
    usable = diagram.usable_height
    assert heights == pytest.approx({"1": 2 / 3 * usable, "2": 1 / 3 * usable})


def test_sort_by_node_id_orders_by_mean_identifier() -> None:
    data = {
        "id": "ids",
        "nodes": [
            {"id": 5, "flow": 0.5, "path": "1:1"},
            {"id": 1, "flow": 0.2, "path": "2:1"},
            {"id": 3, "flow": 0.3, "path": "3:1"},
        ],
    }
    diagram = Diagram([network(data)])
    diagram.calc_flow()
    diagram.update_layout(
        LayoutOptions(height=100, module_width=10, flow_threshold=0, sort_modules_by="nodeId")
    )
    net = diagram.children[0]
    assert [m.mean_node_id for m in net.children] == [1, 3, 5]


def test_sort_by_highlight_index_descending(diagram: Diagram) -> None:
    network_b = diagram.get_network("B")
    assert network_b is not None
    for module, color in zip(list(network_b.children), [0, 2, 1]):
        module.set_color(color)
    diagram.calc_flow()
    diagram.update_layout(
        LayoutOptions(
            height=100, module_width=10, flow_threshold=0, sort_modules_by="highlightIndex"
        )
    )
    assert [m.highlight_index for m in network_b.children] == [2, 1, 0]


def test_custom_sorted_network_keeps_manual_order(laid_out: Diagram) -> None:
    network_b = laid_out.get_network("B")
    assert network_b is not None
    assert network_b.children[0].move_up()
    laid_out.update_layout(SMALL_LAYOUT)
    assert [m.module_id for m in network_b.children] == ["1", "3", "2"]


def test_streamline_nodes_follow_opposite_modules(laid_out: Diagram) -> None:
    network_a = laid_out.get_network("A")
    assert network_a is not None
    module = network_a.get_module("1")
    assert module is not None
    right = module.children[0].right
    # Leaf 1 continues to network B, leaf 2 has no counterpart and goes last.
    assert not right.children[0].is_dangling
    assert right.children[-1].is_dangling


def test_streamline_link_geometry(laid_out: Diagram) -> None:
    network_a = laid_out.get_network("A")
    assert network_a is not None
    links = list(network_a.get_links())
    assert {link.left.parent.parent.parent.module_id for link in links} == {"1", "2"}
    for link in links:
        (x0, top0), (x1, top1), (_, bottom1), (_, bottom0) = link.path
        assert x0 == 10
        assert x1 == 20
        assert bottom0 - top0 == pytest.approx(link.left.height)
        assert bottom1 - top1 == pytest.approx(link.right.height)


def test_streamline_threshold_filters_links(laid_out: Diagram) -> None:
    network_a = laid_out.get_network("A")
    assert network_a is not None
    assert list(network_a.get_links(streamline_threshold=1000)) == []


def test_timing_hook_receives_calc_flow_and_layout() -> None:
    hook = FakeTimingHook()
    diagram = Diagram([network(NETWORK_A), network(NETWORK_B)], timing_hook=hook)
    diagram.calc_flow()
    diagram.update_layout(SMALL_LAYOUT)
    assert hook.labels == ["Diagram.calc_flow", "Diagram.update_layout"]
    assert all(seconds >= 0 for _, seconds in hook.calls)


def test_streamline_without_network_is_skipped(laid_out: Diagram, log_messages: list[str]) -> None:
    network_a = laid_out.get_network("A")
    assert network_a is not None
    module = network_a.children[0]
    group = module.children[0]
    group.parent = None  # type: ignore[assignment]
    for node in group.left:
        node.layout = Layout()

    laid_out.update_layout(SMALL_LAYOUT)

    assert any("has no network ancestor" in message for message in log_messages)
    assert all(node.height == 0 for node in group.left)


def test_as_dict_exposes_tree_snapshot(laid_out: Diagram) -> None:
    snapshot = laid_out.as_dict()
    assert snapshot["id"] == "root"
    assert snapshot["depth"] == 0
    assert snapshot["layout"] == {"x": 0.0, "y": 0.0, "width": 30.0, "height": 100.0}
    network_a = snapshot["children"][0]
    assert network_a["name"] == "Network A"
    module = network_a["children"][0]
    assert module["depth"] == Depth.MODULE
    assert module["moduleId"] == "1"
    group = module["children"][0]
    assert group["highlightIndex"] == -1
    branch = group["children"][0]
    streamline = branch["children"][0]
    leaf = streamline["children"][0]
    assert leaf["depth"] == Depth.LEAF_NODE
    assert leaf["identifier"] in {"1", "2"}
    assert leaf["layout"] == {"x": 0.0, "y": 0.0, "width": 0.0, "height": 0.0}
    assert leaf["children"] == []
    assert leaf["flow"] == pytest.approx(0.3)
