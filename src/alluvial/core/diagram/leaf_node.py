"""Leaf nodes: one real-world entity inside one network."""

from typing import TYPE_CHECKING, Any

from alluvial.core.diagram.highlight_group import HighlightGroup, group_id
from alluvial.core.diagram.module import Module, module_node_id
from alluvial.core.diagram.streamline import StreamlineNode, streamline_ids
from alluvial.core.tree import tree_path
from alluvial.core.tree.node import AlluvialNode, Depth, Side
from alluvial.models.records import LeafRecord

if TYPE_CHECKING:
    from alluvial.core.diagram.network import Network


class LeafNode(AlluvialNode):
    """An entity as it appears in one network.

    A leaf node sits below one streamline node on each side. Its left
    streamline node doubles as its ``parent`` for ancestor lookups.
    Changing ``module_level``, ``highlight_index`` or ``insignificant``
    takes effect on ``update()``, which moves the leaf (and the matching
    leaves in neighbouring networks) into the right modules, groups and
    streamlines, creating and pruning those as needed.
    """

    depth = Depth.LEAF_NODE

    def __init__(self, record: LeafRecord, network: "Network") -> None:
        super().__init__(None, network.network_id, f"{network.network_id}_node{record.identifier}")
        self.network = network
        self.identifier = record.identifier
        self.name = record.name or record.identifier
        self.node_id = record.node_id
        self.flow = record.flow
        self.tree_path: tuple[int, ...] = tuple(record.path)
        self.level = record.raw_level
        self.module_level = 1
        self.highlight_index = record.highlight_index
        self.insignificant = record.insignificant
        self._parents: dict[Side, StreamlineNode | None] = {Side.LEFT: None, Side.RIGHT: None}

    @property
    def module_path(self) -> tuple[int, ...]:
        return tree_path.ancestor_at_level(self.tree_path, self.module_level)

    @property
    def module_id(self) -> str:
        return tree_path.to_string(self.module_path)

    @property
    def group_id(self) -> str:
        module_id = module_node_id(self.network_id, self.module_id)
        return group_id(module_id, self.highlight_index, insignificant=self.insignificant)

    @property
    def child_flow(self) -> float:
        return self.flow

    def get_parent(self, side: Side) -> StreamlineNode | None:
        return self._parents[side]

    def set_parent(self, node: StreamlineNode | None, side: Side) -> None:
        self._parents[side] = node
        if side is Side.LEFT:
            self.parent = node

    def opposite_leaf(self, side: Side) -> "LeafNode | None":
        """The leaf with the same identifier in the neighbouring network on ``side``."""
        neighbor = self.network.neighbor(side)
        if neighbor is None:
            return None
        return neighbor.get_leaf_node(self.identifier)

    def add(self) -> None:
        for side in Side:
            self.add_to_side(side)

    def remove(self) -> None:
        for side in Side:
            self.remove_from_side(side)

    def update(self) -> None:
        """Move this leaf to the module and group its current fields point to.

        The old module object is reused if the leaf lands in it again, so
        references to it stay valid.
        """
        module = self.get_ancestor(Depth.LEAF_NODE - Depth.MODULE)
        for side in Side:
            self.remove_from_side(side, keep_module=True)
        self.add()
        if isinstance(module, Module) and module.is_empty:
            self.network.remove_module(module)

    def add_to_side(self, side: Side) -> None:
        group = self._get_or_create_group()
        registry = self.network.streamlines

        opposite_leaf = self.opposite_leaf(side)
        node_id, opposite_id = streamline_ids(
            group.id, side, opposite_leaf.group_id if opposite_leaf is not None else None
        )

        node = registry.get(node_id)
        if node is None:
            node = StreamlineNode(group.branch(side), node_id, registry)
            opposite_node = registry.get(opposite_id)
            if opposite_node is not None:
                registry.link(node, opposite_node)

        node.add_child(self)
        self.set_parent(node, side)

        if opposite_leaf is None:
            return

        # The matching leaf must sit in the streamline node facing this one.
        current = opposite_leaf.get_parent(side.opposite)
        if current is not None and current.id != opposite_id:
            opposite_leaf.remove_from_side(side.opposite)
            opposite_leaf.add_to_side(side.opposite)

    def remove_from_side(self, side: Side, *, keep_module: bool = False) -> None:
        node = self._parents[side]
        if node is None:
            return
        node.remove_child(self)
        self.set_parent(None, side)

        if not node.is_empty:
            return
        branch = node.parent
        node.detach()

        group = branch.parent
        if not group.is_empty:
            return
        module = group.parent
        module.remove_child(group)

        if module.is_empty and not keep_module:
            self.network.remove_module(module)

    def _get_or_create_group(self) -> HighlightGroup:
        module = self.network.get_module(self.module_id)
        if module is None:
            module = Module(self.network, self.module_id, self.module_level)
        group = module.get_group(self.highlight_index, insignificant=self.insignificant)
        if group is None:
            group = HighlightGroup(module, self.highlight_index, insignificant=self.insignificant)
        return group

    def as_dict(self) -> dict[str, Any]:
        return {
            **super().as_dict(),
            "identifier": self.identifier,
            "name": self.name,
            "moduleLevel": self.module_level,
            "highlightIndex": self.highlight_index,
            "insignificant": self.insignificant,
        }
