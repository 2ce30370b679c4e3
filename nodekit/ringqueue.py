"""Growable ring-buffer FIFO queues, plain and thread-safe."""

from __future__ import annotations

import threading
from typing import Any, Callable, Iterator, List

_MIN_QUEUE_LEN = 16  # must stay a power of two


class RingQueue:
    """A FIFO queue over a power-of-two ring buffer; not thread-safe."""

    def __init__(self) -> None:
        self._buf: List[Any] = [None] * _MIN_QUEUE_LEN
        self._head = 0
        self._tail = 0
        self._count = 0

    def __len__(self) -> int:
        return self._count

    def __iter__(self) -> Iterator[Any]:
        mask = len(self._buf) - 1
        return (self._buf[(self._head + offset) & mask] for offset in range(self._count))

    def _resize(self) -> None:
        # Fit exactly twice the current contents; may shrink the buffer.
        if self._tail > self._head:
            items = self._buf[self._head:self._tail]
        else:
            items = self._buf[self._head:] + self._buf[:self._tail]
        size = self._count << 1
        self._buf = items + [None] * (size - len(items))
        self._head = 0
        self._tail = self._count

    def add(self, elem: Any) -> None:
        """Append ``elem`` at the end of the queue."""
        if self._count == len(self._buf):
            self._resize()
        self._buf[self._tail] = elem
        self._tail = (self._tail + 1) & (len(self._buf) - 1)
        self._count += 1

    def peek(self) -> Any:
        """Return the element at the head without removing it."""
        if self._count <= 0:
            raise IndexError("peek from an empty queue")
        return self._buf[self._head]

    def get(self, index: int) -> Any:
        """Return the element at ``index``; negative indexes count from the end."""
        if index < 0:
            index += self._count
        if index < 0 or index >= self._count:
            raise IndexError("queue index out of range")
        return self._buf[(self._head + index) & (len(self._buf) - 1)]

    def pop(self) -> Any:
        """Remove and return the element at the head."""
        if self._count <= 0:
            raise IndexError("pop from an empty queue")
        ret = self._buf[self._head]
        self._buf[self._head] = None
        self._head = (self._head + 1) & (len(self._buf) - 1)
        self._count -= 1
        if len(self._buf) > _MIN_QUEUE_LEN and (self._count << 2) == len(self._buf):
            self._resize()
        return ret


class SyncQueue:
    """A RingQueue guarded by a lock."""

    def __init__(self) -> None:
        self._queue = RingQueue()
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._queue)

    def add(self, elem: Any) -> None:
        """Append ``elem`` at the end of the queue."""
        with self._lock:
            self._queue.add(elem)

    def peek(self) -> Any:
        """Return the element at the head without removing it."""
        with self._lock:
            return self._queue.peek()

    def get(self, index: int) -> Any:
        """Return the element at ``index``."""
        with self._lock:
            return self._queue.get(index)

    def pop(self) -> Any:
        """Remove and return the element at the head."""
        with self._lock:
            return self._queue.pop()

    def rlock_range(self, func: Callable[[Any], Any]) -> None:
        """Call ``func`` on every element in order while holding the lock."""
        with self._lock:
            for item in self._queue:
                func(item)