"""Tests for parsing network descriptors."""

import pytest

from alluvial import NOT_HIGHLIGHTED, Diagram, parse_network_data
from alluvial.core.importer.network_reader import parse_leaf_data


def test_parse_leaf_with_string_path() -> None:
    record = parse_leaf_data({"id": 7, "name": "seven", "flow": 0.5, "path": "2:3:1"})
    assert record.identifier == "7"
    assert record.name == "seven"
    assert record.node_id == 7
    assert record.path == (2, 3, 1)
    assert record.raw_level == 3
    assert record.highlight_index == NOT_HIGHLIGHTED
    assert record.insignificant is False


def test_parse_leaf_with_list_path_and_identifier() -> None:
    record = parse_leaf_data({"identifier": "abc", "flow": 0.1, "path": [1, 2]})
    assert record.identifier == "abc"
    assert record.name == "abc"
    assert record.node_id == 0
    assert record.path == (1, 2)


def test_parse_leaf_numeric_identifier_gives_node_id() -> None:
    record = parse_leaf_data({"identifier": "42", "path": "1:1"})
    assert record.node_id == 42
    assert record.flow == 0.0


def test_parse_leaf_explicit_level() -> None:
    record = parse_leaf_data({"id": 1, "path": "1:1:1", "level": 2})
    assert record.raw_level == 2


def test_parse_leaf_highlight_and_significance() -> None:
    record = parse_leaf_data({"id": 1, "path": "1:1", "highlightIndex": 3, "insignificant": True})
    assert record.highlight_index == 3
    assert record.insignificant is True


def test_parse_leaf_without_path() -> None:
    with pytest.raises(ValueError, match="without path"):
        parse_leaf_data({"id": 1})


def test_parse_leaf_without_identifier() -> None:
    with pytest.raises(ValueError, match="without identifier"):
        parse_leaf_data({"path": "1:1"})


def test_parse_network_defaults() -> None:
    parsed = parse_network_data({"id": 5, "nodes": [{"id": 1, "path": "1:1", "flow": 1}]})
    assert parsed.id == "5"
    assert parsed.name == "5"
    assert parsed.codelength == 0.0
    assert len(parsed.nodes) == 1


def test_parse_network_rejects_negative_flow() -> None:
    with pytest.raises(ValueError, match="negative flow"):
        parse_network_data({"id": "n", "nodes": [{"id": 1, "path": "1:1", "flow": -0.1}]})


def test_duplicate_identifiers_are_reported(log_messages: list[str]) -> None:
    data = {
        "id": "dup",
        "nodes": [
            {"id": 1, "path": "1:1", "flow": 0.5},
            {"id": 1, "path": "2:1", "flow": 0.5},
        ],
    }
    Diagram([parse_network_data(data)])
    assert any("Duplicate identifier 1" in message for message in log_messages)
