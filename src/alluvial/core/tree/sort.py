"""Stable hierarchical sort of modules grouped by shared path prefix."""

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Generic, Protocol, TypeVar, Union


class HasPath(Protocol):
    @property
    def path(self) -> tuple[int, ...]: ...


T = TypeVar("T", bound=HasPath)


@dataclass
class _Group(Generic[T]):
    entries: list[Union["_Group[T]", T]] = field(default_factory=list)
    groups: dict[int, "_Group[T]"] = field(default_factory=dict)

    def group(self, step: int) -> "_Group[T]":
        if step not in self.groups:
            self.groups[step] = _Group()
            self.entries.append(self.groups[step])
        return self.groups[step]

    def keys(self, key: Callable[[T], float]) -> list[float]:
        out: list[float] = []
        for entry in self.entries:
            if isinstance(entry, _Group):
                out.extend(entry.keys(key))
            else:
                out.append(key(entry))
        return out


def hierarchical_sort(
    items: Sequence[T],
    key: Callable[[T], float],
    *,
    aggregate: Callable[[list[float]], float] = sum,
) -> list[T]:
    """Sort ``items`` by ``key`` while keeping items with a common path prefix together.

    Items are arranged in a tree by their paths. Siblings in that tree are
    sorted ascending by key, where a group's key is ``aggregate`` of its
    members' keys. Ties keep the input order. The tree is flattened in
    pre-order.
    """
    root: _Group[T] = _Group()
    for item in items:
        group = root
        # The last step of a path identifies the item itself.
        for step in item.path[:-1]:
            group = group.group(step)
        group.entries.append(item)

    result: list[T] = []

    def flatten(group: _Group[T]) -> None:
        keyed = [
            (aggregate(entry.keys(key)) if isinstance(entry, _Group) else key(entry), entry)
            for entry in group.entries
        ]
        keyed.sort(key=lambda pair: pair[0])
        for _, entry in keyed:
            if isinstance(entry, _Group):
                flatten(entry)
            else:
                result.append(entry)

    flatten(root)
    return result
