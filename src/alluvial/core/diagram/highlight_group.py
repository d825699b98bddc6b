"""Subdivision of a module's leaf nodes by highlight colour and significance."""

from collections.abc import Iterator
from typing import TYPE_CHECKING, Any

from alluvial.core.diagram.branch import Branch
from alluvial.core.tree.node import AlluvialNode, Depth, Side
from alluvial.models.records import NOT_HIGHLIGHTED

if TYPE_CHECKING:
    from alluvial.core.diagram.leaf_node import LeafNode
    from alluvial.core.diagram.module import Module


def group_id(module_id: str, highlight_index: int, *, insignificant: bool) -> str:
    return f"{module_id}_group{'i' if insignificant else ''}{highlight_index}"


class HighlightGroup(AlluvialNode):
    """Leaf nodes of a module sharing a highlight index.

    Always owns exactly two branches. Both hold the same leaf nodes, seen
    from the left and from the right.
    """

    depth = Depth.HIGHLIGHT_GROUP

    def __init__(
        self,
        parent: "Module",
        highlight_index: int = NOT_HIGHLIGHTED,
        *,
        insignificant: bool = False,
    ) -> None:
        super().__init__(
            parent,
            parent.network_id,
            group_id(parent.id, highlight_index, insignificant=insignificant),
        )
        self.parent: Module = parent
        self.highlight_index = highlight_index
        self.insignificant = insignificant
        self.children: list[Branch] = [Branch(self, Side.LEFT), Branch(self, Side.RIGHT)]
        parent.add_child(self)

    @property
    def left(self) -> Branch:
        return self.children[0]

    @property
    def right(self) -> Branch:
        return self.children[1]

    def branch(self, side: Side) -> Branch:
        return self.left if side is Side.LEFT else self.right

    @property
    def child_flow(self) -> float:
        return self.left.flow

    @property
    def is_empty(self) -> bool:
        return self.left.is_empty and self.right.is_empty

    @property
    def is_highlighted(self) -> bool:
        return self.highlight_index != NOT_HIGHLIGHTED

    @property
    def num_leaf_nodes(self) -> int:
        return self.left.num_leaf_nodes

    def leaf_nodes(self) -> Iterator["LeafNode"]:
        yield from self.left.leaf_nodes()

    def as_dict(self) -> dict[str, Any]:
        return {
            **super().as_dict(),
            "highlightIndex": self.highlight_index,
            "insignificant": self.insignificant,
        }
