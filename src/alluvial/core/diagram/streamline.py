"""Streamline nodes, the links between them and the registry that pairs them."""

import math
from collections.abc import Iterator
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from loguru import logger

from alluvial.core.tree.node import AlluvialNode, Depth, Side

if TYPE_CHECKING:
    from alluvial.core.diagram.branch import Branch
    from alluvial.core.diagram.highlight_group import HighlightGroup
    from alluvial.core.diagram.leaf_node import LeafNode


def streamline_ids(
    group_id: str, side: Side, opposite_group_id: str | None
) -> tuple[str, str | None]:
    """Ids of the streamline node for a leaf on ``side`` and of its opposite.

    Both ends of a link share the key ``left_group--right_group``. Without an
    opposite group the node is dangling and has no opposite id.
    """
    side_name = side.name.lower()
    if opposite_group_id is None:
        return f"{group_id}_{side_name}_dangling", None
    if side is Side.RIGHT:
        key = f"{group_id}--{opposite_group_id}"
    else:
        key = f"{opposite_group_id}--{group_id}"
    return f"{key}_{side_name}", f"{key}_{side.opposite.name.lower()}"


class StreamlineRegistry:
    """Arena of all streamline nodes in a diagram, indexed by id.

    Opposite relations are stored as ids and resolved here. Linking and
    unlinking always update both ends.
    """

    def __init__(self) -> None:
        self._nodes: dict[str, StreamlineNode] = {}

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._nodes

    def get(self, node_id: str | None) -> "StreamlineNode | None":
        if node_id is None:
            return None
        return self._nodes.get(node_id)

    def add(self, node: "StreamlineNode") -> None:
        if node.id in self._nodes:
            msg = f"Streamline node {node.id!r} already registered"
            raise ValueError(msg)
        self._nodes[node.id] = node

    def remove(self, node: "StreamlineNode") -> None:
        """Unregister ``node``, unlinking it first. The opposite node is kept."""
        self.unlink(node)
        self._nodes.pop(node.id, None)

    def link(self, a: "StreamlineNode", b: "StreamlineNode") -> None:
        if a.side == b.side:
            msg = f"Cannot link {a.id!r} and {b.id!r}: both on side {a.side.name}"
            raise ValueError(msg)
        a.opposite_id = b.id
        b.opposite_id = a.id

    def unlink(self, node: "StreamlineNode") -> None:
        opposite = self.get(node.opposite_id)
        if opposite is not None and opposite.opposite_id == node.id:
            opposite.opposite_id = None
        node.opposite_id = None


class StreamlineNode(AlluvialNode):
    """Bundle of leaf nodes leaving (or entering) a highlight group on one side."""

    depth = Depth.STREAMLINE_NODE

    def __init__(self, parent: "Branch", node_id: str, registry: StreamlineRegistry) -> None:
        super().__init__(parent, parent.network_id, node_id)
        self.parent: Branch = parent
        self.children: list[LeafNode] = []
        self.side = parent.side
        self.opposite_id: str | None = None
        self._registry = registry
        registry.add(self)
        parent.add_child(self)

    @property
    def is_dangling(self) -> bool:
        return self.id.endswith("_dangling")

    @property
    def opposite(self) -> "StreamlineNode | None":
        return self._registry.get(self.opposite_id)

    @property
    def num_leaf_nodes(self) -> int:
        return len(self.children)

    @property
    def opposite_position(self) -> float:
        """Sort key that puts streamlines to low-lying opposite groups first.

        Nodes are stacked bottom-up, so the key is the negated vertical centre
        of the opposite highlight group. Dangling nodes go last.
        """
        opposite = self.opposite
        if opposite is None:
            return math.inf
        group = opposite.get_ancestor(Depth.STREAMLINE_NODE - Depth.HIGHLIGHT_GROUP)
        if group is None:
            return math.inf
        return -(group.y + group.height / 2)

    @property
    def link(self) -> "StreamlineLink | None":
        opposite = self.opposite
        if opposite is None:
            return None
        if self.side is Side.RIGHT:
            return StreamlineLink(left=self, right=opposite)
        return StreamlineLink(left=opposite, right=self)

    def leaf_nodes(self) -> Iterator["LeafNode"]:
        yield from self.children

    def detach(self) -> None:
        """Remove this node from its branch and from the registry."""
        self._registry.remove(self)
        if not self.parent.remove_child(self):
            logger.warning("Streamline node {} was not a child of {}", self.id, self.parent.id)


@dataclass(frozen=True)
class StreamlineLink:
    """Flow band between a right-side node and the left-side node in the next network."""

    left: StreamlineNode
    right: StreamlineNode

    @property
    def id(self) -> str:
        return self.left.id.removesuffix("_right")

    @property
    def avg_height(self) -> float:
        return (self.left.height + self.right.height) / 2

    @property
    def left_highlight_index(self) -> int:
        return self._group(self.left).highlight_index

    @property
    def right_highlight_index(self) -> int:
        return self._group(self.right).highlight_index

    @property
    def path(self) -> tuple[tuple[float, float], ...]:
        """Corners of the band: top left, top right, bottom right, bottom left."""
        x0 = self.left.x + self.left.width
        x1 = self.right.x
        return (
            (x0, self.left.y),
            (x1, self.right.y),
            (x1, self.right.y + self.right.height),
            (x0, self.left.y + self.left.height),
        )

    def as_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "path": [list(point) for point in self.path],
            "avgHeight": self.avg_height,
            "leftHighlightIndex": self.left_highlight_index,
            "rightHighlightIndex": self.right_highlight_index,
        }

    @staticmethod
    def _group(node: StreamlineNode) -> "HighlightGroup":
        return node.parent.parent
