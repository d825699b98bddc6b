"""Hierarchical module paths such as ``1:2:3``."""

from collections.abc import Sequence

SEPARATOR = ":"


def to_tuple(path: str | Sequence[int]) -> tuple[int, ...]:
    """Parse ``"1:2:3"`` (or a sequence of ints) into ``(1, 2, 3)``."""
    if isinstance(path, str):
        if not path:
            return ()
        return tuple(int(part) for part in path.split(SEPARATOR))
    return tuple(int(part) for part in path)


def to_string(path: Sequence[int]) -> str:
    return SEPARATOR.join(str(part) for part in path)


def ancestor_at_level(path: Sequence[int], level: int) -> tuple[int, ...]:
    """Return the first ``level`` steps of ``path``.

    Paths shorter than ``level`` are returned whole.
    """
    return tuple(path[:level])


def is_ancestor(ancestor: Sequence[int], path: Sequence[int]) -> bool:
    """True if ``ancestor`` is a (non-strict) prefix of ``path``."""
    return len(ancestor) <= len(path) and tuple(path[: len(ancestor)]) == tuple(ancestor)


def difference_index(a: Sequence[int], b: Sequence[int]) -> int:
    """Index of the first step where two paths diverge.

    If one path is a prefix of the other, the length of the shorter one.
    """
    for i, (step_a, step_b) in enumerate(zip(a, b)):
        if step_a != step_b:
            return i
    return min(len(a), len(b))
