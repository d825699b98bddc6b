"""Input records and value types for the alluvial diagram."""

from dataclasses import asdict, dataclass

NOT_HIGHLIGHTED = -1


@dataclass(frozen=True)
class Layout:
    """A positioned rectangle."""

    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0

    def as_dict(self) -> dict[str, float]:
        return asdict(self)


@dataclass(frozen=True)
class LeafRecord:
    """One entity as it appears in one partitioned network.

    ``path`` is the position in the partition hierarchy, e.g. ``(1, 2, 3)``
    for the third node in submodule 2 of top module 1. ``level`` defaults to
    the length of the path.
    """

    identifier: str
    flow: float
    path: tuple[int, ...]
    name: str = ""
    node_id: int = 0
    highlight_index: int = NOT_HIGHLIGHTED
    insignificant: bool = False
    level: int | None = None

    @property
    def raw_level(self) -> int:
        return self.level if self.level is not None else len(self.path)


@dataclass(frozen=True)
class NetworkFile:
    """A parsed network: one partitioned snapshot to add to a diagram."""

    id: str
    name: str
    nodes: tuple[LeafRecord, ...]
    codelength: float = 0.0
