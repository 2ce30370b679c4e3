"""A fixed-capacity circular queue with cursors for reading in place."""

from __future__ import annotations

import threading
from typing import Any, Iterator, List


class SQueue:
    """A bounded, thread-safe circular queue.

    One slot is kept free, so a queue built for ``max_elements`` holds at most
    that many elements.
    """

    def __init__(self, max_elements: int) -> None:
        if max_elements < 1:
            raise ValueError("max_elements must be positive")
        self._elements: List[Any] = [None] * (max_elements + 1)
        self._head = 0
        self._tail = 0
        self._lock = threading.RLock()

    def _len(self) -> int:
        if self._head <= self._tail:
            return self._tail - self._head
        return len(self._elements) - self._head + self._tail

    def __len__(self) -> int:
        with self._lock:
            return self._len()

    def push(self, elem: Any) -> bool:
        """Append ``elem``; return False if the queue is full."""
        with self._lock:
            next_pos = (self._tail + 1) % len(self._elements)
            if next_pos == self._head:
                return False
            self._tail = next_pos
            self._elements[self._tail] = elem
            return True

    def pop(self) -> Any:
        """Remove and return the element at the head."""
        with self._lock:
            if self._head == self._tail:
                raise IndexError("pop from an empty queue")
            self._head = (self._head + 1) % len(self._elements)
            return self._elements[self._head]

    def remove_element(self, count: int) -> int:
        """Drop up to ``count`` elements from the head; return how many went."""
        with self._lock:
            removed = min(count, self._len())
            self._head = (self._head + removed) % len(self._elements)
            return removed

    def is_empty(self) -> bool:
        with self._lock:
            return self._head == self._tail

    def is_full(self) -> bool:
        with self._lock:
            return (self._tail + 1) % len(self._elements) == self._head

    def get_cursor(self) -> "SCursor":
        """Return a cursor positioned before the first element."""
        with self._lock:
            return SCursor(self, self._head)

    def get_pos_cursor(self, pos: int) -> "SCursor":
        """Return a cursor at slot ``pos``, which must hold an element."""
        with self._lock:
            if not 0 <= pos < len(self._elements):
                raise ValueError(f"position {pos} out of range")
            if self._head == self._tail:
                raise ValueError("queue is empty")
            if self._head < self._tail:
                valid = self._head < pos <= self._tail
            else:
                valid = not (self._tail < pos <= self._head)
            if not valid:
                raise ValueError(f"position {pos} holds no element")
            return SCursor(self, pos)


class SCursor:
    """Reads elements after its position; iteration stops at the tail.

    Pops or removals from other threads may invalidate the cursor.
    """

    def __init__(self, queue: SQueue, pos: int) -> None:
        self._queue = queue
        self._pos = pos

    def first(self) -> None:
        """Move the cursor back to the head of the queue."""
        with self._queue._lock:
            self._pos = self._queue._head

    def __iter__(self) -> Iterator[Any]:
        return self

    def __next__(self) -> Any:
        queue = self._queue
        with queue._lock:
            if self._pos == queue._tail:
                raise StopIteration
            self._pos = (self._pos + 1) % len(queue._elements)
            return queue._elements[self._pos]