"""Base node of the alluvial tree: a positioned rectangle with ordered children."""

from collections.abc import Callable, Iterator
from enum import IntEnum
from typing import Any, ClassVar

from alluvial.models.records import Layout


class Depth(IntEnum):
    """Structural depth of each node kind in the diagram tree."""

    ROOT = 0
    NETWORK = 1
    MODULE = 2
    HIGHLIGHT_GROUP = 3
    BRANCH = 4
    STREAMLINE_NODE = 5
    LEAF_NODE = 6


class Side(IntEnum):
    """Side of a highlight group a branch (or streamline) belongs to."""

    LEFT = -1
    RIGHT = 1

    @property
    def opposite(self) -> "Side":
        return Side.RIGHT if self is Side.LEFT else Side.LEFT


Predicate = Callable[["AlluvialNode"], bool]
Visitor = Callable[["AlluvialNode", int, list["AlluvialNode"]], None]


class AlluvialNode:
    """A node in the diagram tree.

    Every node owns an ordered list of children and has at most one owning
    parent. Subclasses fix ``depth`` and add their own fields.
    """

    depth: ClassVar[Depth] = Depth.ROOT

    def __init__(
        self,
        parent: "AlluvialNode | None" = None,
        network_id: str = "",
        id: str = "",  # noqa: A002
    ) -> None:
        self.parent = parent
        self.network_id = network_id
        self.id = id
        self.flow = 0.0
        self.x = 0.0
        self.y = 0.0
        self.width = 0.0
        self.height = 0.0
        self.children: list[Any] = []

    def __iter__(self) -> Iterator[Any]:
        return iter(self.children)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self.id!r}, flow={self.flow:.4g})"

    @property
    def layout(self) -> Layout:
        return Layout(x=self.x, y=self.y, width=self.width, height=self.height)

    @layout.setter
    def layout(self, layout: Layout) -> None:
        self.x = layout.x
        self.y = layout.y
        self.width = layout.width
        self.height = layout.height

    @property
    def is_empty(self) -> bool:
        return not self.children

    @property
    def child_flow(self) -> float:
        return sum(child.flow for child in self.children)

    def add_child(self, node: "AlluvialNode") -> int:
        """Append ``node`` and return the new number of children."""
        self.children.append(node)
        return len(self.children)

    def remove_child(self, node: "AlluvialNode") -> bool:
        """Remove ``node`` if present. Returns whether it was found."""
        try:
            self.children.remove(node)
        except ValueError:
            return False
        return True

    def get_ancestor(self, steps: int) -> "AlluvialNode | None":
        """Walk ``steps`` parent hops up the tree.

        Returns None if the chain of parents is shorter than ``steps``.
        """
        node: AlluvialNode | None = self
        for _ in range(steps):
            if node is None:
                return None
            node = node.parent
        return node

    def as_dict(self) -> dict[str, Any]:
        """Serializable point-in-time snapshot of this subtree."""
        return {
            "id": self.id,
            "networkId": self.network_id,
            "flow": self.flow,
            "depth": int(self.depth),
            "layout": self.layout.as_dict(),
            "children": [child.as_dict() for child in self.children],
        }

    # Traversal

    def traverse_depth_first(self) -> Iterator["AlluvialNode"]:
        """Yield this node and all descendants in pre-order."""
        yield self
        for child in self.children:
            yield from child.traverse_depth_first()

    def traverse_depth_first_pre_order_while(
        self, predicate: Predicate
    ) -> Iterator["AlluvialNode"]:
        """Pre-order traversal that prunes every subtree whose root fails ``predicate``."""
        if not predicate(self):
            return
        yield self
        for child in self.children:
            yield from child.traverse_depth_first_pre_order_while(predicate)

    def traverse_depth_first_post_order_while(
        self, predicate: Predicate
    ) -> Iterator["AlluvialNode"]:
        """Post-order traversal that prunes every subtree whose root fails ``predicate``."""
        if not predicate(self):
            return
        for child in self.children:
            yield from child.traverse_depth_first_post_order_while(predicate)
        yield self

    def for_each_depth_first_pre_order_while(self, predicate: Predicate, visit: Visitor) -> None:
        """Visit nodes in pre-order, passing each node's position among its siblings.

        ``visit`` receives ``(node, index, siblings)`` where ``siblings`` holds
        only the siblings that satisfy ``predicate``. Children are read after
        the parent has been visited, so a visitor may reorder them.
        """
        if not predicate(self):
            return
        visit(self, 0, [self])
        self._visit_children_pre_order(predicate, visit)

    def _visit_children_pre_order(self, predicate: Predicate, visit: Visitor) -> None:
        siblings = [child for child in self.children if predicate(child)]
        for i, child in enumerate(siblings):
            visit(child, i, siblings)
            child._visit_children_pre_order(predicate, visit)

    def traverse_leaf_nodes(self) -> Iterator["AlluvialNode"]:
        """Yield leaf nodes below this node.

        Below a highlight group only the left branch is walked, since both
        branches hold the same leaves.
        """
        if self.depth == Depth.LEAF_NODE:
            yield self
            return
        children = self.children[:1] if self.depth == Depth.HIGHLIGHT_GROUP else self.children
        for child in children:
            yield from child.traverse_leaf_nodes()
