"""The diagram root: networks, flow aggregation and layout.

Tree structure, outermost first::

    Diagram
      Network            one partitioned snapshot, laid out as a column
        Module           cluster at the module level currently shown
          HighlightGroup leaf nodes of the module sharing a highlight index
            Branch       left and right side of the group
              StreamlineNode  leaf nodes going to one group in the neighbour
                LeafNode

A right streamline node and the left streamline node it faces in the next
network form a StreamlineLink, the flow band drawn between the columns.
"""

import time
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass

from loguru import logger

from alluvial.config import MAX_MARGIN_FRACTION_OF_HEIGHT, LayoutOptions
from alluvial.core.diagram.module import Module
from alluvial.core.diagram.network import Network
from alluvial.core.diagram.streamline import StreamlineNode, StreamlineRegistry
from alluvial.core.layout.sizing import NodeSize, module_order, node_size
from alluvial.core.tree.node import AlluvialNode, Depth
from alluvial.core.tree.sort import hierarchical_sort
from alluvial.core.tree.tree_path import difference_index
from alluvial.errors import DuplicateNetworkError
from alluvial.models.records import Layout, NetworkFile
from alluvial.protocols import TimingHook


@dataclass
class ColumnTotals:
    """Running totals for one network column during the first layout pass."""

    margin: float = 0.0
    visible_flow: float = 0.0
    visible_modules: int = 0


class Diagram(AlluvialNode):
    """Root of the alluvial tree."""

    depth = Depth.ROOT

    def __init__(
        self,
        networks: Iterable[NetworkFile] = (),
        *,
        timing_hook: TimingHook | None = None,
    ) -> None:
        super().__init__(None, "", "root")
        self.children: list[Network] = []
        self.flow_threshold = 0.0
        self.usable_height = 0.0
        self.streamlines = StreamlineRegistry()
        self.timing_hook = timing_hook

        for network in networks:
            self.add_network(network)

    def add_network(self, network: NetworkFile) -> Network:
        """Append a network and build its modules from the leaf records."""
        if any(child.network_id == network.id for child in self.children):
            msg = f"Network with id {network.id} already exists"
            raise DuplicateNetworkError(msg)
        logger.debug("Adding network {} ({} nodes)", network.id, len(network.nodes))
        return Network.create(self, network)

    def get_network(self, network_id: str) -> Network | None:
        return next((child for child in self.children if child.network_id == network_id), None)

    def get_streamline_node(self, node_id: str) -> StreamlineNode | None:
        return self.streamlines.get(node_id)

    def calc_flow(self) -> None:
        """Aggregate leaf flow bottom-up into every node above the leaves.

        Each node takes the sum of its children's flow, except highlight
        groups: both branches hold the same leaves, so a group takes the flow
        of its left branch only.
        """
        with self._timed("Diagram.calc_flow"):
            for node in self.traverse_depth_first_post_order_while(_above_leaves):
                node.flow = node.child_flow

    def update_layout(self, options: LayoutOptions) -> None:
        """Compute the position and size of every visible node.

        Columns are filled bottom-up: y starts at ``options.height`` and
        decreases as modules are stacked.
        """
        with self._timed("Diagram.update_layout"):
            self._update_layout(options)

    def _update_layout(self, options: LayoutOptions) -> None:
        networks = self.children
        if not networks:
            return

        height = options.height
        module_width = options.module_width
        streamline_width = options.streamline_fraction * module_width
        network_width = module_width + streamline_width
        total_width = network_width * len(networks) - streamline_width

        self.width = total_width
        self.height = height
        self.flow_threshold = options.flow_threshold

        max_network_flow = max(network.flow for network in networks)
        sizes = {
            network.network_id: node_size(network, max_network_flow, options.module_size)
            for network in networks
        }
        totals = [ColumnTotals() for _ in networks]

        # Order modules and size them against the full height. Module and
        # group positions from this pass order the streamlines below.
        x = 0.0
        for network, column in zip(networks, totals, strict=True):
            visible = [module for module in network.children if module.is_visible]
            invisible = [module for module in network.children if not module.is_visible]

            if not network.is_custom_sorted:
                key, aggregate = module_order(network, max_network_flow, options.sort_modules_by)
                visible = hierarchical_sort(visible, key, aggregate=aggregate)
                for index, module in enumerate(visible):
                    module.index = index

            network.children = [*visible, *invisible]
            self._place_modules(visible, column, x, sizes[network.network_id], options)
            x += network_width

        max_total_margin = max(column.margin for column in totals)
        usable_height = height - max_total_margin

        if max_total_margin / height > MAX_MARGIN_FRACTION_OF_HEIGHT:
            margin_scale = MAX_MARGIN_FRACTION_OF_HEIGHT * height / max_total_margin
            for node in self.traverse_depth_first_pre_order_while(_at_most_modules):
                if isinstance(node, Module):
                    node.margin *= margin_scale
            usable_height = height - max_total_margin * margin_scale

        if options.vertical_align == "justify":
            self._justify(totals, max_total_margin, usable_height)

        for node in self.traverse_depth_first_pre_order_while(_at_most_branches):
            if node.depth == Depth.BRANCH:
                node.sort_children()

        self._place_nodes(sizes, usable_height, module_width, network_width)
        self.usable_height = usable_height

        logger.debug(
            "Layout: {} networks, usable height {:.1f} of {:.1f}, max total margin {:.1f}",
            len(networks),
            usable_height,
            height,
            max_total_margin,
        )

    @staticmethod
    def _place_modules(
        modules: list[Module],
        column: ColumnTotals,
        x: float,
        size: NodeSize,
        options: LayoutOptions,
    ) -> None:
        height = options.height
        y = height
        for i, module in enumerate(modules):
            module.sort_children()
            margin = 0.0
            if i + 1 < len(modules):
                split_at = difference_index(module.path, modules[i + 1].path)
                margin = 2 ** (options.margin_exponent - 2 * split_at)

            module_size = size(module)
            module_height = module_size * height
            y -= module_height
            module.margin = margin
            module.layout = Layout(x=x, y=y, width=options.module_width, height=module_height)

            group_y = y + module_height
            for group in module.children:
                group_height = size(group) * height
                group_y -= group_height
                group.layout = Layout(
                    x=x, y=group_y, width=options.module_width, height=group_height
                )

            y -= margin
            column.margin += margin
            column.visible_flow += module_size
            column.visible_modules += 1

    def _justify(
        self, totals: list[ColumnTotals], max_total_margin: float, usable_height: float
    ) -> None:
        """Stretch margins so every column uses the same total height."""
        for network, column in zip(self.children, totals, strict=True):
            num_margins = column.visible_modules - 1
            if column.margin <= 0 or num_margins <= 0:
                logger.debug("Not justifying network {}: nothing to stretch", network.network_id)
                continue
            missing_margin = (1 - column.visible_flow) * usable_height
            for module in network.visible_children:
                if module.margin > 0:
                    module.margin *= max_total_margin / column.margin
                    module.margin += missing_margin / num_margins

    def _place_nodes(
        self,
        sizes: dict[str, NodeSize],
        usable_height: float,
        width: float,
        network_width: float,
    ) -> None:
        height = self.height
        x = 0.0
        y = height
        size: NodeSize | None = None

        for node in self.traverse_depth_first_post_order_while(_visible_above_leaves):
            if node.depth == Depth.STREAMLINE_NODE:
                if size is None:
                    network = node.get_ancestor(Depth.STREAMLINE_NODE - Depth.NETWORK)
                    if network is None:
                        logger.error("Streamline node {} has no network ancestor", node.id)
                        continue
                    size = sizes[network.network_id]
                node_height = size(node) * usable_height
                y -= node_height
                node.layout = Layout(x=x, y=y, width=width, height=node_height)
            elif node.depth == Depth.BRANCH and size is not None:
                branch_height = size(node) * usable_height
                node.layout = Layout(x=x, y=y, width=width, height=branch_height)
                if node.is_left:
                    y += branch_height
            elif node.depth == Depth.HIGHLIGHT_GROUP and size is not None:
                node.layout = Layout(x=x, y=y, width=width, height=size(node) * usable_height)
            elif node.depth == Depth.MODULE and size is not None:
                node.layout = Layout(x=x, y=y, width=width, height=size(node) * usable_height)
                y -= node.margin
            elif node.depth == Depth.NETWORK:
                node.layout = Layout(x=x, y=0.0, width=width, height=height)
                x += network_width
                y = height
                size = None
            elif node.depth == Depth.ROOT:
                node.layout = Layout(x=0.0, y=0.0, width=self.width, height=height)

    def streamline_nodes(self) -> Iterator[StreamlineNode]:
        for node in self.traverse_depth_first_pre_order_while(_above_leaves):
            if isinstance(node, StreamlineNode):
                yield node

    @contextmanager
    def _timed(self, label: str) -> Iterator[None]:
        if self.timing_hook is None:
            yield
            return
        start = time.perf_counter()
        try:
            yield
        finally:
            self.timing_hook(label, time.perf_counter() - start)


def _above_leaves(node: AlluvialNode) -> bool:
    return node.depth < Depth.LEAF_NODE


def _at_most_modules(node: AlluvialNode) -> bool:
    return node.depth <= Depth.MODULE


def _at_most_branches(node: AlluvialNode) -> bool:
    return node.depth <= Depth.BRANCH


def _visible_above_leaves(node: AlluvialNode) -> bool:
    if node.depth == Depth.MODULE:
        return isinstance(node, Module) and node.is_visible
    return node.depth < Depth.LEAF_NODE
