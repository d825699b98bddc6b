"""Shared test fixtures."""

from collections.abc import Iterator

import pytest
from loguru import logger

from alluvial import Diagram
from tests.unit.networks import (
    NESTED_NETWORK,
    NESTED_NETWORK_NEXT,
    NETWORK_A,
    NETWORK_B,
    SMALL_LAYOUT,
    network,
)


@pytest.fixture
def diagram() -> Diagram:
    """Two networks with flow aggregated."""
    result = Diagram([network(NETWORK_A), network(NETWORK_B)])
    result.calc_flow()
    return result


@pytest.fixture
def laid_out(diagram: Diagram) -> Diagram:
    diagram.update_layout(SMALL_LAYOUT)
    return diagram


@pytest.fixture
def nested() -> Diagram:
    result = Diagram([network(NESTED_NETWORK), network(NESTED_NETWORK_NEXT)])
    result.calc_flow()
    return result


@pytest.fixture
def log_messages() -> Iterator[list[str]]:
    """Collect loguru messages at WARNING and above."""
    messages: list[str] = []
    handler_id = logger.add(lambda message: messages.append(str(message)), level="WARNING")
    yield messages
    logger.remove(handler_id)
