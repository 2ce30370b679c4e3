"""In-memory topic buffers: ordered sequence numbers and a bounded ring of recent data."""

from __future__ import annotations

import threading
import time
from bisect import bisect_left
from dataclasses import dataclass
from operator import attrgetter
from typing import Any, Callable, List, Optional, Tuple

_seq_of = attrgetter("seq")


@dataclass
class TopicData:
    """One published message: its sequence number, raw bytes and an extra slot."""

    seq: int = 0
    raw_data: Optional[bytes] = None
    extend_param: Any = None


class SeqGenerator:
    """Makes increasing sequence numbers: Unix seconds in the high 32 bits.

    The low 32 bits count messages within the second and start at 1, so a
    sequence number is never 0.
    """

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock
        self._last_sec: Optional[int] = None
        self._seq = 0
        self._lock = threading.Lock()

    def next_seq(self) -> int:
        """Return the next sequence number."""
        with self._lock:
            now_sec = int(self._clock())
            if now_sec != self._last_sec:
                self._seq = 0
                self._last_sec = now_sec
            self._seq += 1
            return (now_sec << 32) | self._seq


class MemoryQueue:
    """A bounded ring of TopicData ordered by ``seq``; the oldest is dropped when full."""

    def __init__(self, capacity: int) -> None:
        if capacity < 1:
            raise ValueError("capacity must be positive")
        # One slot stays free; head points just before the first element.
        self._slots: List[Optional[TopicData]] = [None] * (capacity + 1)
        self._head = 0
        self._tail = 0
        self._lock = threading.RLock()

    def __len__(self) -> int:
        with self._lock:
            if self._head <= self._tail:
                return self._tail - self._head
            return len(self._slots) - self._head + self._tail

    def push(self, topic_data: TopicData) -> bool:
        """Append ``topic_data`` at the tail, evicting the oldest entry if full."""
        with self._lock:
            size = len(self._slots)
            next_pos = (self._tail + 1) % size
            if next_pos == self._head:
                self._head = (self._head + 1) % size
            self._tail = next_pos
            self._slots[self._tail] = topic_data
            return True

    def _find(self, start_pos: int, start_index: int, limit: int) -> Tuple[List[TopicData], bool]:
        if self._head == self._tail:
            return [], True

        if start_pos <= self._tail:
            end_pos = self._tail + 1
        else:
            end_pos = len(self._slots)
        if start_pos >= end_pos:
            return [], False

        # The wanted data is older than anything held in memory.
        if self._slots[start_pos].seq > start_index:
            return [], False

        pos = bisect_left(self._slots, start_index, lo=start_pos, hi=end_pos, key=_seq_of)
        if pos >= end_pos:
            return [], False

        stop = min(pos + limit, end_pos)
        return list(self._slots[pos:stop]), True

    def find_data(self, start_index: int, limit: int) -> Tuple[List[TopicData], bool]:
        """Return up to ``limit`` entries with ``seq >= start_index``.

        The flag is True when memory answered the query. It is False when the
        queue is empty, the data has already been evicted, or nothing that
        recent is held, in which case the caller should look elsewhere.
        """
        with self._lock:
            if self._head == self._tail:
                return [], False
            if self._head < self._tail:
                return self._find(self._head + 1, start_index, limit)

            # Wrapped: search the part after head first, then the front.
            found, ok = self._find(self._head + 1, start_index, limit)
            if ok:
                return found, ok
            return self._find(0, start_index, limit)