"""Modules: clusters of leaf nodes at one level of a hierarchical partition."""

from collections.abc import Iterator
from dataclasses import dataclass
from statistics import fmean
from typing import TYPE_CHECKING, Any

from loguru import logger

from alluvial.config import DEFAULT_NUM_SIMILAR_MODULES, DEFAULT_SIMILARITY_THRESHOLD
from alluvial.core.diagram.highlight_group import HighlightGroup
from alluvial.core.diagram.streamline import StreamlineLink
from alluvial.core.similarity.entropy import js_divergence
from alluvial.core.similarity.priority_queue import BoundedPriorityQueue
from alluvial.core.tree import tree_path
from alluvial.core.tree.node import AlluvialNode, Depth, Side
from alluvial.errors import MissingParentError
from alluvial.models.records import NOT_HIGHLIGHTED

if TYPE_CHECKING:
    from alluvial.core.diagram.leaf_node import LeafNode
    from alluvial.core.diagram.network import Network


def module_node_id(network_id: str, module_id: str) -> str:
    return f"{network_id}_module{module_id}"


@dataclass(frozen=True)
class SimilarModule:
    """A module in a neighbouring network and how similar its flow distribution is."""

    module: "Module"
    similarity: float


class Module(AlluvialNode):
    """A module shown at ``module_level`` in the partition hierarchy."""

    depth = Depth.MODULE

    def __init__(self, parent: "Network", module_id: str, module_level: int = 1) -> None:
        super().__init__(parent, parent.network_id, module_node_id(parent.network_id, module_id))
        self.parent: Network | None = parent
        self.children: list[HighlightGroup] = []
        self.module_id = module_id
        self.module_level = module_level
        self.path = tree_path.to_tuple(module_id)
        self.margin = 0.0
        self.name = ""
        self.index = parent.add_child(self) - 1

    # Properties

    @property
    def flow_threshold(self) -> float:
        return self.parent.flow_threshold if self.parent else 0.0

    @property
    def is_visible(self) -> bool:
        return self.flow >= self.flow_threshold and self.flow > 0

    @property
    def num_leaf_nodes(self) -> int:
        return sum(group.num_leaf_nodes for group in self.children)

    @property
    def max_module_level(self) -> int:
        return max((node.level - 1 for node in self.leaf_nodes()), default=self.module_level)

    @property
    def has_submodules(self) -> bool:
        return self.module_level < self.max_module_level

    @property
    def is_top_module(self) -> bool:
        return self.module_level == 1

    @property
    def is_leaf_module(self) -> bool:
        return not self.has_submodules

    @property
    def parent_index(self) -> int:
        if self.parent is None:
            return 0
        return self.parent.children.index(self)

    @property
    def is_highlighted(self) -> bool:
        return any(group.is_highlighted for group in self.children)

    @property
    def highlight_index(self) -> int:
        """Highlight index of the group carrying the most flow."""
        if not self.children:
            return NOT_HIGHLIGHTED
        return max(self.children, key=lambda group: group.flow).highlight_index

    @property
    def mean_node_id(self) -> float:
        node_ids = [node.node_id for node in self.leaf_nodes()]
        return fmean(node_ids) if node_ids else 0.0

    @property
    def largest_leaf_nodes(self) -> list[str]:
        """Names of the five leaf nodes with the highest flow."""
        queue = BoundedPriorityQueue(5, key=lambda node: node.flow, items=self.leaf_nodes())
        return [node.name for node in queue.to_list()]

    @property
    def siblings(self) -> list["Module"]:
        """Modules in the same network sharing this module's parent path."""
        if self.parent is None:
            return []
        modules = self.parent.children
        parent_level = self.module_level - 1
        if parent_level < 1:
            return list(modules)
        parent_path = tree_path.ancestor_at_level(self.path, parent_level)
        return [module for module in modules if tree_path.is_ancestor(parent_path, module.path)]

    def leaf_nodes(self) -> Iterator["LeafNode"]:
        for group in self.children:
            yield from group.leaf_nodes()

    def get_group(self, highlight_index: int, *, insignificant: bool) -> HighlightGroup | None:
        for group in self.children:
            if group.highlight_index == highlight_index and group.insignificant == insignificant:
                return group
        return None

    def sort_children(self) -> None:
        """Order highlight groups: significant before insignificant, then by highlight index."""
        self.children.sort(key=lambda group: (group.insignificant, group.highlight_index))

    # Re-leveling

    def expand(self) -> bool:
        """Show this module's submodules instead of the module itself.

        Returns False, leaving the tree untouched, if there is nothing to expand.
        """
        leaf_nodes = list(self.leaf_nodes())
        if not leaf_nodes:
            logger.warning("No leaf nodes found in module {}", self.id)
            return False

        new_module_level = self.module_level + 1
        if any(node.level <= new_module_level for node in leaf_nodes):
            logger.warning(
                "Module {} can't be expanded to level {} because some nodes are at level {}",
                self.module_id,
                new_module_level,
                new_module_level - 1,
            )
            return False

        network = self._require_network()
        network.is_custom_sorted = False

        for node in leaf_nodes:
            node.module_level = new_module_level
            node.update()
        return True

    def regroup(self) -> bool:
        """Merge this module with its siblings into their parent module."""
        if self.module_level <= 1:
            logger.warning(
                "Module {} is already at module level {}", self.module_id, self.module_level
            )
            return False

        leaf_nodes = [node for module in self.siblings for node in module.leaf_nodes()]
        if not leaf_nodes:
            logger.warning("No leaf nodes found among siblings of module {}", self.id)
            return False

        network = self._require_network()
        network.is_custom_sorted = False

        new_module_level = self.module_level - 1
        for node in leaf_nodes:
            node.module_level = new_module_level
            node.update()
        return True

    # Ordering

    def move_up(self) -> bool:
        network = self._require_network()
        index = self.parent_index
        if index == len(network.children) - 1:
            logger.warning("Can't move module {} up because it is already at the top", self.id)
            return False
        network.is_custom_sorted = True
        network.move_to_index(index, index + 1)
        return True

    def move_down(self) -> bool:
        network = self._require_network()
        index = self.parent_index
        if index == 0:
            logger.warning("Can't move module {} down because it is already at the bottom", self.id)
            return False
        network.is_custom_sorted = True
        network.move_to_index(index, index - 1)
        return True

    # Colouring

    def set_color(self, highlight_index: int) -> None:
        for node in list(self.leaf_nodes()):
            node.highlight_index = highlight_index
            node.update()

    def remove_colors(self) -> None:
        self.set_color(NOT_HIGHLIGHTED)

    # Similarity

    def similarity_to(self, other: "Module") -> float:
        """One minus the Jensen-Shannon divergence of the two leaf flow distributions."""
        this_flows = _flow_distribution(self)
        other_flows = _flow_distribution(other)
        identifiers = list(dict.fromkeys([*this_flows, *other_flows]))
        x = [this_flows.get(identifier, 0.0) for identifier in identifiers]
        y = [other_flows.get(identifier, 0.0) for identifier in identifiers]
        return 1 - js_divergence(x, y, normalize=True)

    def get_similar_modules(
        self,
        side: Side,
        num_modules: int = DEFAULT_NUM_SIMILAR_MODULES,
        threshold: float = DEFAULT_SIMILARITY_THRESHOLD,
    ) -> list[SimilarModule]:
        """Most similar visible modules connected to this one on ``side``.

        Returns at most ``num_modules`` candidates with similarity above
        ``threshold``, most similar first. Ties keep traversal order.
        """
        queue: BoundedPriorityQueue[SimilarModule] = BoundedPriorityQueue(
            num_modules, key=lambda item: item.similarity
        )
        for module in self.connected_modules(side):
            if not module.is_visible:
                continue
            similarity = self.similarity_to(module)
            if similarity > threshold:
                queue.push(SimilarModule(module=module, similarity=similarity))
        return queue.to_list()

    def connected_modules(self, side: Side) -> Iterator["Module"]:
        """Distinct modules reached through this module's streamlines on ``side``."""
        seen: set[str] = set()
        for group in self.children:
            for streamline_node in group.branch(side):
                opposite = streamline_node.opposite
                if opposite is None:
                    continue
                module = opposite.get_ancestor(Depth.STREAMLINE_NODE - Depth.MODULE)
                if module is not None and module.id not in seen:
                    seen.add(module.id)
                    yield module

    def right_streamlines(self) -> Iterator[StreamlineLink]:
        """Links leaving this module to the right whose target module is visible."""
        for group in self.children:
            for streamline_node in group.right:
                opposite = streamline_node.opposite
                if opposite is None:
                    continue
                module = opposite.get_ancestor(Depth.STREAMLINE_NODE - Depth.MODULE)
                if module is None or not module.is_visible:
                    continue
                link = streamline_node.link
                if link is not None:
                    yield link

    def as_dict(self) -> dict[str, Any]:
        return {
            **super().as_dict(),
            "moduleId": self.module_id,
            "moduleLevel": self.module_level,
            "path": list(self.path),
            "margin": self.margin,
            "highlightIndex": self.highlight_index,
        }

    def _require_network(self) -> "Network":
        if self.parent is None:
            msg = f"No parent network found for module {self.id}"
            raise MissingParentError(msg)
        return self.parent


def _flow_distribution(module: Module) -> dict[str, float]:
    return {node.identifier: node.flow for node in module.leaf_nodes()}
