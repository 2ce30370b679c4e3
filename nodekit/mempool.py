"""Object pools that keep a bounded cache of reusable objects."""

from __future__ import annotations

import threading
from collections import deque
from typing import Any, Callable, Deque, Generic, TypeVar


class Pool:
    """Hands out cached objects, creating new ones with ``factory`` when empty."""

    def __init__(self, capacity: int, factory: Callable[[], Any]) -> None:
        if capacity < 0:
            raise ValueError("capacity must be non-negative")
        self._capacity = capacity
        self._factory = factory
        self._cache: Deque[Any] = deque()
        self._lock = threading.Lock()

    def get(self) -> Any:
        with self._lock:
            if self._cache:
                return self._cache.popleft()
        return self._factory()

    def put(self, data: Any) -> None:
        """Return ``data`` to the cache; it is dropped if the cache is full."""
        with self._lock:
            if len(self._cache) < self._capacity:
                self._cache.append(data)


class PoolData:
    """Base for pooled objects; ``in_use`` is managed by PoolEx."""

    in_use: bool = False

    def reset(self) -> None:
        """Return the object to its freshly made state. Subclasses extend this."""
        self.in_use = False


T = TypeVar("T", bound=PoolData)


class PoolEx(Generic[T]):
    """A pool of PoolData objects that detects double use and double release."""

    def __init__(self, capacity: int, factory: Callable[[], T]) -> None:
        if capacity < 0:
            raise ValueError("capacity must be non-negative")
        self._capacity = capacity
        self._factory = factory
        self._cache: Deque[T] = deque()
        self._lock = threading.Lock()

    def get(self) -> T:
        with self._lock:
            data = self._cache.popleft() if self._cache else None
        if data is None:
            data = self._factory()
        if data.in_use:
            raise RuntimeError("Pool data is in use.")
        data.in_use = True
        return data

    def put(self, data: T) -> None:
        """Reset ``data`` and return it to the cache."""
        if not data.in_use:
            raise RuntimeError("Repeatedly freeing memory")
        data.in_use = False
        data.reset()
        data.in_use = False
        with self._lock:
            if len(self._cache) < self._capacity:
                self._cache.append(data)