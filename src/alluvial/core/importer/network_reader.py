"""Build network records from plain, already parsed network descriptors."""

from typing import Any

from alluvial.core.tree import tree_path
from alluvial.models.records import NOT_HIGHLIGHTED, LeafRecord, NetworkFile


def parse_leaf_data(data: dict[str, Any]) -> LeafRecord:
    """Parse one node record.

    ``path`` may be a list of ints or a ``"1:2:3"`` string. The identifier
    falls back to the node id, and the numeric node id to the identifier
    when that is an integer.
    """
    if "path" not in data:
        msg = f"Node record without path: {data!r}"
        raise ValueError(msg)

    raw_id = data.get("id")
    identifier = str(data.get("identifier", raw_id if raw_id is not None else data.get("name", "")))
    if not identifier:
        msg = f"Node record without identifier: {data!r}"
        raise ValueError(msg)

    if isinstance(raw_id, int):
        node_id = raw_id
    else:
        node_id = int(identifier) if identifier.isdigit() else 0

    return LeafRecord(
        identifier=identifier,
        name=str(data.get("name", identifier)),
        node_id=node_id,
        flow=float(data.get("flow", 0.0)),
        path=tree_path.to_tuple(data["path"]),
        highlight_index=int(data.get("highlightIndex", NOT_HIGHLIGHTED)),
        insignificant=bool(data.get("insignificant", False)),
        level=data.get("level"),
    )


def parse_network_data(data: dict[str, Any]) -> NetworkFile:
    """Parse a network descriptor into a NetworkFile.

    Args:
        data: Mapping with ``id``, optional ``name`` and ``codelength``, and
            a ``nodes`` list of node records.

    Returns:
        NetworkFile ready for ``Diagram.add_network``.
    """
    network_id = str(data["id"])
    nodes = tuple(parse_leaf_data(node) for node in data.get("nodes", []))
    if any(node.flow < 0 for node in nodes):
        msg = f"Network {network_id} has nodes with negative flow"
        raise ValueError(msg)
    return NetworkFile(
        id=network_id,
        name=str(data.get("name", network_id)),
        nodes=nodes,
        codelength=float(data.get("codelength", 0.0)),
    )
