"""Size and sort-key functions for the layout."""

from collections.abc import Callable
from statistics import fmean
from typing import Protocol

from alluvial.config import MODULE_ORDERS, MODULE_SIZES
from alluvial.errors import ConfigurationError


class Sized(Protocol):
    @property
    def flow(self) -> float: ...

    @property
    def num_leaf_nodes(self) -> int: ...


class NetworkStats(Protocol):
    @property
    def num_leaf_nodes(self) -> int: ...


NodeSize = Callable[[Sized], float]


def node_size(network: NetworkStats, max_flow: float, module_size: str) -> NodeSize:
    """Fraction of the column height a node takes up.

    ``flow`` is relative to the largest network flow in the diagram, ``nodes``
    to the number of leaf nodes in the node's own network.
    """
    if module_size == "flow":
        return lambda node: node.flow / max_flow if max_flow > 0 else 0.0
    if module_size == "nodes":
        num_leaf_nodes = network.num_leaf_nodes
        return lambda node: node.num_leaf_nodes / num_leaf_nodes if num_leaf_nodes else 0.0
    msg = f"Module size must be one of {MODULE_SIZES!r}, got {module_size!r}"
    raise ConfigurationError(msg)


def module_order(
    network: NetworkStats, max_flow: float, sort_modules_by: str
) -> tuple[Callable[..., float], Callable[[list[float]], float]]:
    """Ascending sort key for modules and how to combine keys of a module group.

    Flow and node counts sort largest first, highlight index descending and
    mean node id ascending.
    """
    if sort_modules_by in ("flow", "nodes"):
        size = node_size(network, max_flow, sort_modules_by)
        return (lambda module: -size(module)), sum
    if sort_modules_by == "highlightIndex":
        return (lambda module: -module.highlight_index), fmean
    if sort_modules_by == "nodeId":
        return (lambda module: module.mean_node_id), fmean
    msg = f"Module order must be one of {MODULE_ORDERS!r}, got {sort_modules_by!r}"
    raise ConfigurationError(msg)
