"""Tracks when ranking keys were last refreshed and which have expired."""

from __future__ import annotations

import heapq
import itertools
import time
from typing import Dict, List, Optional

_REMOVED = object()


class ExpireHeap:
    """A min-heap of keys by refresh time; timestamps are in nanoseconds."""

    def __init__(self, expire_ns: int) -> None:
        self.expire_ns = int(expire_ns)
        self._heap: List[list] = []
        self._entries: Dict[int, list] = {}
        self._seq = itertools.count()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def _discard_removed(self) -> None:
        while self._heap and self._heap[0][2] is _REMOVED:
            heapq.heappop(self._heap)

    def pop_expire_key(self, now_ns: Optional[int] = None) -> Optional[int]:
        """Remove and return the oldest key if it has expired, else None."""
        if now_ns is None:
            now_ns = time.time_ns()
        self._discard_removed()
        if not self._heap:
            return None
        refresh, _, key = self._heap[0]
        if refresh + self.expire_ns > now_ns:
            return None
        heapq.heappop(self._heap)
        del self._entries[key]
        return key

    def push_or_refresh(self, key: int, refresh_timestamp: int) -> None:
        """Record ``key`` as refreshed at ``refresh_timestamp``."""
        old = self._entries.pop(key, None)
        if old is not None:
            old[2] = _REMOVED
        entry = [refresh_timestamp, next(self._seq), key]
        self._entries[key] = entry
        heapq.heappush(self._heap, entry)

    def remove(self, key: int) -> bool:
        """Stop tracking ``key``; return whether it was tracked."""
        old = self._entries.pop(key, None)
        if old is None:
            return False
        old[2] = _REMOVED
        return True