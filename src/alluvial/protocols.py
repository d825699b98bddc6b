"""Protocols for dependency injection in the diagram core."""

from typing import Protocol, runtime_checkable


@runtime_checkable
class TimingHook(Protocol):
    """Receives the wall-clock duration of a named diagram operation."""

    def __call__(self, label: str, seconds: float) -> None:
        """Record that ``label`` took ``seconds`` to run."""
        ...
