"""Thread-safe maps: a single locked dict and a hash-sharded variant."""

from __future__ import annotations

import itertools
import threading
from typing import Any, Callable, Dict, List

from nodekit.digest import hash_number

DEFAULT_SHARD_COUNT = 10


class LockedMap:
    """A dict guarded by one lock; missing keys read as None."""

    def __init__(self) -> None:
        self._data: Dict[Any, Any] = {}
        self._lock = threading.RLock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)

    def get(self, key: Any) -> Any:
        with self._lock:
            return self._data.get(key)

    def set(self, key: Any, value: Any) -> None:
        with self._lock:
            self._data[key] = value

    def test_and_set(self, key: Any, value: Any) -> Any:
        """Store ``value`` if ``key`` is absent and return None; else return the old value."""
        with self._lock:
            if key in self._data:
                return self._data[key]
            self._data[key] = value
            return None

    def delete(self, key: Any) -> None:
        with self._lock:
            self._data.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._data = {}

    def rlock_range(self, func: Callable[[Any, Any], Any]) -> None:
        """Call ``func(key, value)`` for every entry while holding the lock."""
        with self._lock:
            for key, value in self._data.items():
                func(key, value)

    def lock_range(self, func: Callable[[Any, Any], Any]) -> None:
        """Call ``func(key, value)`` for every entry while holding the lock."""
        with self._lock:
            for key, value in self._data.items():
                func(key, value)


class ShardedMap:
    """Spreads keys over several locked dicts by the CRC-32 of ``str(key)``."""

    def __init__(self, shard_count: int = DEFAULT_SHARD_COUNT) -> None:
        if shard_count <= 0:
            raise ValueError("shard_count must be positive")
        self._shards: List[Dict[Any, Any]] = [{} for _ in range(shard_count)]
        self._locks = [threading.RLock() for _ in range(shard_count)]
        self._range_counter = itertools.count(1)
        self._counter_lock = threading.Lock()

    def __len__(self) -> int:
        total = 0
        for lock, shard in zip(self._locks, self._shards):
            with lock:
                total += len(shard)
        return total

    def shard_index(self, key: Any) -> int:
        """Return the index of the shard that holds ``key``."""
        return hash_number(str(key)) % len(self._shards)

    def get(self, key: Any) -> Any:
        idx = self.shard_index(key)
        with self._locks[idx]:
            return self._shards[idx].get(key)

    def set(self, key: Any, value: Any) -> None:
        idx = self.shard_index(key)
        with self._locks[idx]:
            self._shards[idx][key] = value

    def delete(self, key: Any) -> None:
        idx = self.shard_index(key)
        with self._locks[idx]:
            self._shards[idx].pop(key, None)

    def clear(self) -> None:
        for idx, lock in enumerate(self._locks):
            with lock:
                self._shards[idx] = {}

    def rlock_range(self, func: Callable[[Any, Any], Any]) -> None:
        """Call ``func(key, value)`` for every entry, one shard locked at a time."""
        for lock, shard in zip(self._locks, self._shards):
            with lock:
                for key, value in shard.items():
                    func(key, value)

    def lock_range(self, func: Callable[[Any, Any], Any]) -> None:
        """Call ``func(key, value)`` for every entry, one shard locked at a time."""
        for idx, lock in enumerate(self._locks):
            with lock:
                for key, value in self._shards[idx].items():
                    func(key, value)

    def next_rlock_range(self, func: Callable[[Any, Any], Any]) -> None:
        """Visit the entries of the next shard in round-robin order."""
        with self._counter_lock:
            idx = next(self._range_counter) % len(self._shards)
        with self._locks[idx]:
            for key, value in self._shards[idx].items():
                func(key, value)

    def lock_get(self, key: Any, func: Callable[[Any], Any]) -> None:
        """Call ``func`` with the value of ``key`` (or None) under the shard lock."""
        idx = self.shard_index(key)
        with self._locks[idx]:
            func(self._shards[idx].get(key))

    def lock_set(self, key: Any, func: Callable[[Any], Any]) -> None:
        """Replace the value of ``key`` with ``func(old)`` unless it returns None."""
        idx = self.shard_index(key)
        with self._locks[idx]:
            shard = self._shards[idx]
            new_value = func(shard.get(key))
            if new_value is not None:
                shard[key] = new_value