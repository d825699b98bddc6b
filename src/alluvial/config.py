"""Configuration constants and layout options for alluvial diagrams."""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Literal

from alluvial.errors import ConfigurationError

VerticalAlign = Literal["bottom", "justify"]
ModuleSize = Literal["flow", "nodes"]
ModuleOrder = Literal["flow", "nodes", "highlightIndex", "nodeId"]

VERTICAL_ALIGNS: tuple[str, ...] = ("bottom", "justify")
MODULE_SIZES: tuple[str, ...] = ("flow", "nodes")
MODULE_ORDERS: tuple[str, ...] = ("flow", "nodes", "highlightIndex", "nodeId")

DEFAULT_HEIGHT: float = 600.0
DEFAULT_MODULE_WIDTH: float = 100.0
DEFAULT_STREAMLINE_FRACTION: float = 1.0
DEFAULT_FLOW_THRESHOLD: float = 8e-3
DEFAULT_MARGIN_EXPONENT: int = 3

# Module margins are compressed so they never take more than this share of the height.
MAX_MARGIN_FRACTION_OF_HEIGHT: float = 0.2

DEFAULT_NUM_SIMILAR_MODULES: int = 5
DEFAULT_SIMILARITY_THRESHOLD: float = 1e-6

# Camel-case keys of the plain layout record, mapped to option names.
_RECORD_KEYS: dict[str, str] = {
    "height": "height",
    "streamlineFraction": "streamline_fraction",
    "moduleWidth": "module_width",
    "flowThreshold": "flow_threshold",
    "verticalAlign": "vertical_align",
    "marginExponent": "margin_exponent",
    "moduleSize": "module_size",
    "sortModulesBy": "sort_modules_by",
}


@dataclass(frozen=True)
class LayoutOptions:
    """Options for ``Diagram.update_layout``."""

    height: float = DEFAULT_HEIGHT
    streamline_fraction: float = DEFAULT_STREAMLINE_FRACTION
    module_width: float = DEFAULT_MODULE_WIDTH
    flow_threshold: float = DEFAULT_FLOW_THRESHOLD
    vertical_align: VerticalAlign = "bottom"
    margin_exponent: float = DEFAULT_MARGIN_EXPONENT
    module_size: ModuleSize = "flow"
    sort_modules_by: ModuleOrder = "flow"

    def __post_init__(self) -> None:
        if self.vertical_align not in VERTICAL_ALIGNS:
            msg = f"Vertical align must be one of {VERTICAL_ALIGNS!r}, got {self.vertical_align!r}"
            raise ConfigurationError(msg)
        if self.module_size not in MODULE_SIZES:
            msg = f"Module size must be one of {MODULE_SIZES!r}, got {self.module_size!r}"
            raise ConfigurationError(msg)
        if self.sort_modules_by not in MODULE_ORDERS:
            msg = f"Module order must be one of {MODULE_ORDERS!r}, got {self.sort_modules_by!r}"
            raise ConfigurationError(msg)
        if self.height <= 0:
            msg = f"Height must be positive, got {self.height!r}"
            raise ConfigurationError(msg)

    @classmethod
    def from_dict(cls, record: Mapping[str, Any]) -> "LayoutOptions":
        """Build options from a plain record with camel-case keys.

        Unknown keys are rejected; missing keys keep their defaults.
        """
        unknown = sorted(set(record) - set(_RECORD_KEYS))
        if unknown:
            msg = f"Unknown layout options: {unknown!r}"
            raise ConfigurationError(msg)
        return cls(**{_RECORD_KEYS[key]: value for key, value in record.items()})
