"""Tree model and layout engine for alluvial diagrams."""

from alluvial.config import LayoutOptions
from alluvial.core.diagram.diagram import Diagram
from alluvial.core.diagram.highlight_group import HighlightGroup
from alluvial.core.diagram.leaf_node import LeafNode
from alluvial.core.diagram.module import Module, SimilarModule
from alluvial.core.diagram.network import Network
from alluvial.core.diagram.streamline import StreamlineLink, StreamlineNode
from alluvial.core.importer.network_reader import parse_network_data
from alluvial.core.tree.node import Depth, Side
from alluvial.errors import (
    AlluvialError,
    ConfigurationError,
    DuplicateNetworkError,
    MissingParentError,
)
from alluvial.models.records import NOT_HIGHLIGHTED, Layout, LeafRecord, NetworkFile
from alluvial.protocols import TimingHook

__all__ = [
    "NOT_HIGHLIGHTED",
    "AlluvialError",
    "ConfigurationError",
    "Depth",
    "Diagram",
    "DuplicateNetworkError",
    "HighlightGroup",
    "Layout",
    "LayoutOptions",
    "LeafNode",
    "LeafRecord",
    "MissingParentError",
    "Module",
    "Network",
    "NetworkFile",
    "Side",
    "SimilarModule",
    "StreamlineLink",
    "StreamlineNode",
    "TimingHook",
    "parse_network_data",
]
