"""Rank entries and the ordering used to keep them in a ranking."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional, Sequence, Tuple

_LEVELS = (8, 16, 32, 64)
_DEFAULT_LEVEL = 32


def transform_level(level: int) -> int:
    """Map a configured skip list level to one of 8, 16, 32 or 64 (default 32)."""
    return level if level in _LEVELS else _DEFAULT_LEVEL


def compare_is_equal(first: Sequence[int], second: Sequence[int]) -> bool:
    """Return whether two sort keys have the same length and values."""
    return len(first) == len(second) and all(a == b for a, b in zip(first, second))


def compare_more_than(first: Sequence[int], second: Sequence[int]) -> int:
    """Compare sort keys over their common prefix: 1, -1, or 0 if it is equal."""
    for a, b in zip(first, second):
        if a > b:
            return 1
        if a < b:
            return -1
    return 0


@dataclass
class RankEntry:
    """Data submitted to a ranking: a key, its sort values and a payload."""

    key: int
    sort_data: Sequence[int] = field(default_factory=tuple)
    data: Optional[bytes] = None


@dataclass(eq=False)
class RankData:
    """An entry held in a ranking, ordered ascending or descending."""

    key: int
    sort_data: Tuple[int, ...] = ()
    data: Optional[bytes] = None
    refresh_timestamp: int = 0
    is_dec: bool = False

    def __post_init__(self) -> None:
        self.sort_data = tuple(self.sort_data)

    @classmethod
    def from_entry(cls, entry: RankEntry, is_dec: bool, refresh_timestamp: int) -> "RankData":
        """Build a ranked copy of ``entry``."""
        return cls(entry.key, tuple(entry.sort_data), entry.data, refresh_timestamp, is_dec)

    def compare(self, other: Any) -> int:
        """Return 0 for the same key, otherwise -1 or 1 by rank order.

        Ties in sort data are broken by key: ascending rankings put the smaller
        key first, descending ones the larger.
        """
        if other.key == self.key:
            return 0
        if self.is_dec:
            flag = compare_more_than(other.sort_data, self.sort_data)
            if flag == 0:
                flag = -1 if self.key > other.key else 1
        else:
            flag = compare_more_than(self.sort_data, other.sort_data)
            if flag == 0:
                flag = 1 if self.key > other.key else -1
        return flag