"""Bounded priority queue keeping the best items seen."""

import heapq
import itertools
from collections.abc import Callable, Iterable
from typing import Generic, TypeVar

T = TypeVar("T")


class BoundedPriorityQueue(Generic[T]):
    """Keep at most ``capacity`` items with the highest ``key``.

    Items with equal keys are ranked in insertion order.
    """

    def __init__(self, capacity: int, key: Callable[[T], float], items: Iterable[T] = ()) -> None:
        self.capacity = capacity
        self._key = key
        self._counter = itertools.count()
        # Min-heap on (key, -sequence): the root is the item to evict next.
        self._heap: list[tuple[float, int, T]] = []
        for item in items:
            self.push(item)

    def __len__(self) -> int:
        return len(self._heap)

    def push(self, item: T) -> None:
        if self.capacity <= 0:
            return
        entry = (self._key(item), -next(self._counter), item)
        if len(self._heap) < self.capacity:
            heapq.heappush(self._heap, entry)
        elif entry[:2] > self._heap[0][:2]:
            heapq.heapreplace(self._heap, entry)

    def to_list(self) -> list[T]:
        """Items from best to worst."""
        return [item for *_, item in sorted(self._heap, key=lambda e: (e[0], e[1]), reverse=True)]
