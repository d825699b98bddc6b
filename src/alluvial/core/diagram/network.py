"""Networks: one partitioned snapshot in the diagram."""

from collections.abc import Iterable, Iterator
from typing import TYPE_CHECKING, Any

from loguru import logger

from alluvial.core.diagram.leaf_node import LeafNode
from alluvial.core.diagram.module import Module
from alluvial.core.diagram.streamline import StreamlineLink, StreamlineRegistry
from alluvial.core.tree.node import AlluvialNode, Depth, Side
from alluvial.models.records import LeafRecord, NetworkFile

if TYPE_CHECKING:
    from alluvial.core.diagram.diagram import Diagram


class Network(AlluvialNode):
    """A network and its top-level modules.

    ``is_custom_sorted`` is set once modules are reordered by hand and
    disables automatic module sorting in the layout.
    """

    depth = Depth.NETWORK

    def __init__(self, parent: "Diagram", network: NetworkFile) -> None:
        super().__init__(parent, network.id, network.id)
        self.parent: Diagram = parent
        self.children: list[Module] = []
        self.name = network.name
        self.codelength = network.codelength
        self.is_custom_sorted = False
        self.leaf_nodes: list[LeafNode] = []
        self._leaf_nodes_by_identifier: dict[str, LeafNode] = {}
        self._modules_by_id: dict[str, Module] = {}
        parent.add_child(self)

    @classmethod
    def create(cls, parent: "Diagram", network: NetworkFile) -> "Network":
        instance = cls(parent, network)
        instance.add_nodes(network.nodes)
        return instance

    def add_nodes(self, records: Iterable[LeafRecord]) -> None:
        """Create a leaf node per record and place it in the tree."""
        new_nodes = [LeafNode(record, self) for record in records]
        for node in new_nodes:
            if node.identifier in self._leaf_nodes_by_identifier:
                logger.warning(
                    "Duplicate identifier {} in network {}", node.identifier, self.network_id
                )
            self._leaf_nodes_by_identifier[node.identifier] = node
        self.leaf_nodes.extend(new_nodes)

        for node in new_nodes:
            node.add()

        logger.debug(
            "Network {}: {} leaf nodes in {} modules",
            self.network_id,
            len(self.leaf_nodes),
            len(self.children),
        )

    @property
    def streamlines(self) -> StreamlineRegistry:
        return self.parent.streamlines

    @property
    def flow_threshold(self) -> float:
        return self.parent.flow_threshold

    @property
    def num_leaf_nodes(self) -> int:
        return len(self.leaf_nodes)

    @property
    def visible_children(self) -> list[Module]:
        return [module for module in self.children if module.is_visible]

    @property
    def index(self) -> int:
        return self.parent.children.index(self)

    @property
    def is_first_child(self) -> bool:
        return self.index == 0

    @property
    def is_last_child(self) -> bool:
        return self.index == len(self.parent.children) - 1

    def neighbor(self, side: Side) -> "Network | None":
        """The adjacent network on ``side``, if any."""
        index = self.index + side
        if 0 <= index < len(self.parent.children):
            return self.parent.children[index]
        return None

    def add_child(self, node: AlluvialNode) -> int:
        if not isinstance(node, Module):
            msg = f"Networks can only own modules, got {type(node).__name__}"
            raise TypeError(msg)
        self._modules_by_id[node.module_id] = node
        return super().add_child(node)

    def remove_module(self, module: Module) -> bool:
        self._modules_by_id.pop(module.module_id, None)
        found = self.remove_child(module)
        if found:
            module.parent = None
        return found

    def get_module(self, module_id: str) -> Module | None:
        return self._modules_by_id.get(module_id)

    def get_leaf_node(self, identifier: str) -> LeafNode | None:
        return self._leaf_nodes_by_identifier.get(identifier)

    def move_to_index(self, from_index: int, to_index: int) -> None:
        """Swap the modules at two positions."""
        modules = self.children
        if not (0 <= from_index < len(modules) and 0 <= to_index < len(modules)):
            msg = f"Module index out of range: {from_index} -> {to_index} of {len(modules)}"
            raise IndexError(msg)
        modules[from_index], modules[to_index] = modules[to_index], modules[from_index]

    def get_links(self, streamline_threshold: float = 0.0) -> Iterator[StreamlineLink]:
        """Links to the next network from visible modules at least ``streamline_threshold`` high."""
        for module in self.visible_children:
            for link in module.right_streamlines():
                if link.avg_height >= streamline_threshold:
                    yield link

    def as_dict(self) -> dict[str, Any]:
        return {
            **super().as_dict(),
            "name": self.name,
            "codelength": self.codelength,
        }
