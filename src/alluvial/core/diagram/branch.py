"""One side of a highlight group."""

from collections.abc import Iterator
from typing import TYPE_CHECKING

from alluvial.core.tree.node import AlluvialNode, Depth, Side

if TYPE_CHECKING:
    from alluvial.core.diagram.highlight_group import HighlightGroup
    from alluvial.core.diagram.leaf_node import LeafNode
    from alluvial.core.diagram.streamline import StreamlineNode


class Branch(AlluvialNode):
    depth = Depth.BRANCH

    def __init__(self, parent: "HighlightGroup", side: Side) -> None:
        super().__init__(parent, parent.network_id, f"{parent.id}_{side.name.lower()}")
        self.parent: HighlightGroup = parent
        self.children: list[StreamlineNode] = []
        self.side = side

    @property
    def is_left(self) -> bool:
        return self.side is Side.LEFT

    @property
    def num_leaf_nodes(self) -> int:
        return sum(node.num_leaf_nodes for node in self.children)

    def leaf_nodes(self) -> Iterator["LeafNode"]:
        for node in self.children:
            yield from node.leaf_nodes()

    def sort_children(self) -> None:
        self.children.sort(key=lambda node: node.opposite_position)
