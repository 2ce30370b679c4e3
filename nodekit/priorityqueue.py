"""A max-priority queue whose items know their heap position."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List


@dataclass(eq=False)
class Item:
    """A value with a priority; ``index`` is maintained by the queue."""

    value: Any = None
    priority: int = 0
    index: int = -1


class PriorityQueue:
    """Pops the item with the highest priority first."""

    def __init__(self) -> None:
        self._items: List[Item] = []

    def __len__(self) -> int:
        return len(self._items)

    def _less(self, i: int, j: int) -> bool:
        return self._items[i].priority > self._items[j].priority

    def _swap(self, i: int, j: int) -> None:
        items = self._items
        items[i], items[j] = items[j], items[i]
        items[i].index = i
        items[j].index = j

    def _up(self, j: int) -> None:
        while j > 0:
            parent = (j - 1) // 2
            if parent == j or not self._less(j, parent):
                break
            self._swap(parent, j)
            j = parent

    def _down(self, i0: int, n: int) -> bool:
        i = i0
        while True:
            left = 2 * i + 1
            if left >= n:
                break
            child = left
            right = left + 1
            if right < n and self._less(right, left):
                child = right
            if not self._less(child, i):
                break
            self._swap(i, child)
            i = child
        return i > i0

    def _check(self, item: Item) -> None:
        if not (0 <= item.index < len(self._items) and self._items[item.index] is item):
            raise ValueError("item is not in the queue")

    def push(self, item: Item) -> None:
        """Add ``item`` to the queue."""
        item.index = len(self._items)
        self._items.append(item)
        self._up(item.index)

    def pop(self) -> Item:
        """Remove and return the item with the highest priority."""
        if not self._items:
            raise IndexError("pop from an empty priority queue")
        last = len(self._items) - 1
        self._swap(0, last)
        self._down(0, last)
        item = self._items.pop()
        item.index = -1
        return item

    def update(self, item: Item, value: Any, priority: int) -> None:
        """Change the value and priority of a queued item."""
        self._check(item)
        item.value = value
        item.priority = priority
        if not self._down(item.index, len(self._items)):
            self._up(item.index)

    def remove(self, item: Item) -> None:
        """Remove a queued item."""
        self._check(item)
        i = item.index
        last = len(self._items) - 1
        if i != last:
            self._swap(i, last)
            if not self._down(i, last):
                self._up(i)
        removed = self._items.pop()
        removed.index = -1