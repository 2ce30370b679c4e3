"""Rankings kept in a skip list, with size limits, expiry and change hooks."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Dict, Iterable, List, Optional, Tuple

from nodekit.rankdata import (
    RankData,
    RankEntry,
    compare_is_equal,
    compare_more_than,
    transform_level,
)
from nodekit.rankexpire import ExpireHeap
from nodekit.skiplist import SkipIterator, SkipList

MAX_PICK_EXPIRE_NUM = 128


class RankChange(IntEnum):
    """What an update did to a ranking."""

    NONE = 0
    ADD = 1
    UPDATE = 2
    DELETE = 3


@dataclass
class RankPosData:
    """A ranked entry together with its 1-based rank."""

    key: int
    rank: int
    sort_data: Tuple[int, ...] = field(default_factory=tuple)
    data: Optional[bytes] = None


class RankModule:
    """Receives ranking events; the default keeps simple counts of them."""

    rank_skips: Optional[Dict[int, "RankSkip"]] = None
    started: bool = False
    entered: int = 0
    left: int = 0
    changed: int = 0

    def on_setup_rank(self, manual: bool, rank_skip: "RankSkip") -> None:
        """Remember a ranking that has been set up."""
        if self.rank_skips is None:
            self.rank_skips = {}
        self.rank_skips[rank_skip.rank_id] = rank_skip

    def on_start(self) -> None:
        """Mark the owning service as started."""
        self.started = True

    def on_enter_rank(self, rank_skip: "RankSkip", enter_data: RankData) -> None:
        """Count an entry entering the ranking."""
        self.entered += 1

    def on_leave_rank(self, rank_skip: "RankSkip", leave_data: RankData) -> None:
        """Count an entry leaving the ranking."""
        self.left += 1

    def on_change_rank_data(self, rank_skip: "RankSkip", change_data: RankData) -> None:
        """Count a change of an entry's data or position."""
        self.changed += 1

    def on_stop(self, rank_skips: Dict[int, "RankSkip"]) -> None:
        """Mark the owning service as stopped."""
        self.started = False


def _pos_data(rank_data: RankData, rank: int) -> RankPosData:
    return RankPosData(rank_data.key, rank, rank_data.sort_data, rank_data.data)


class RankSkip:
    """A single ranking, ascending or descending, optionally bounded and expiring."""

    def __init__(
        self,
        rank_id: int,
        rank_name: str,
        is_des: bool = False,
        level: int = 32,
        max_len: int = 0,
        expire_ms: int = 0,
        module: Optional[RankModule] = None,
    ) -> None:
        self.rank_id = rank_id
        self.rank_name = rank_name
        self.is_des = is_des
        self.max_len = max_len
        self.expire_ms = expire_ms
        self.rank_module = module if module is not None else RankModule()
        self._skip = SkipList(transform_level(level))
        self._data: Dict[int, RankData] = {}
        self._expire = ExpireHeap(expire_ms * 1_000_000)

    def __len__(self) -> int:
        return len(self._skip)

    def _pick_expire_key(self) -> None:
        if self.expire_ms == 0:
            return
        now = time.time_ns()
        for _ in range(MAX_PICK_EXPIRE_NUM):
            key = self._expire.pop_expire_key(now)
            if key is None:
                return
            self.delete_rank_data([key])

    def _insert(self, entry: RankEntry, refresh_timestamp: int) -> RankData:
        rank_data = RankData.from_entry(entry, self.is_des, refresh_timestamp)
        self._skip.insert(rank_data)
        self._data[rank_data.key] = rank_data
        self._expire.push_or_refresh(rank_data.key, refresh_timestamp)
        return rank_data

    def upset_rank(
        self,
        entry: RankEntry,
        refresh_timestamp: Optional[int] = None,
        from_load: bool = False,
    ) -> RankChange:
        """Insert or update ``entry``; hooks are skipped when ``from_load``."""
        if refresh_timestamp is None:
            refresh_timestamp = time.time_ns()

        node = self._data.get(entry.key)
        if node is not None:
            if compare_is_equal(node.sort_data, entry.sort_data):
                node.data = entry.data
                node.refresh_timestamp = refresh_timestamp
                if not from_load:
                    self.rank_module.on_change_rank_data(self, node)
                self._expire.push_or_refresh(entry.key, refresh_timestamp)
                return RankChange.UPDATE

            if entry.data is None:
                entry.data = node.data
            self._skip.delete(node)
            new_data = self._insert(entry, refresh_timestamp)
            if not from_load:
                self.rank_module.on_change_rank_data(self, new_data)
            return RankChange.UPDATE

        if self._check_insert_and_replace(entry):
            new_data = self._insert(entry, refresh_timestamp)
            if not from_load:
                self.rank_module.on_enter_rank(self, new_data)
            return RankChange.ADD

        return RankChange.NONE

    def upset_rank_list(self, entries: Iterable[RankEntry]) -> Tuple[int, int]:
        """Upsert every entry; return (added, modified) counts."""
        add_count = modify_count = 0
        for entry in entries:
            change = self.upset_rank(entry, time.time_ns(), False)
            if change == RankChange.ADD:
                add_count += 1
            elif change == RankChange.UPDATE:
                modify_count += 1
        self._pick_expire_key()
        return add_count, modify_count

    def delete_rank_data(self, keys: Iterable[int]) -> int:
        """Remove the given keys; return how many were present."""
        removed = 0
        for key in keys:
            rank_data = self._data.pop(key, None)
            if rank_data is None:
                continue
            removed += 1
            self._skip.delete(rank_data)
            self._expire.remove(key)
            self.rank_module.on_leave_rank(self, rank_data)
        return removed

    def get_rank_node_data(self, key: int) -> Tuple[Optional[RankData], int]:
        """Return the entry for ``key`` and its 1-based rank, or (None, 0)."""
        if key not in self._data:
            return None, 0
        self._pick_expire_key()
        node = self._data.get(key)
        if node is None:
            return None, 0
        _, index = self._skip.get_with_position(node)
        return node, index + 1

    def get_rank_node_data_by_rank(self, rank: int) -> Tuple[Optional[RankData], int]:
        """Return the entry at 1-based ``rank`` and the rank, or (None, 0)."""
        self._pick_expire_key()
        if rank < 1:
            return None, 0
        node = self._skip.by_position(rank - 1)
        if node is None:
            return None, 0
        return node, rank

    def _find_for_walk(self, key: int) -> Tuple[int, SkipIterator]:
        if len(self._skip) <= 0:
            raise KeyError(f"rank[{self.rank_id}] no data")
        node = self._data.get(key)
        if node is None:
            raise KeyError(f"rank[{self.rank_id}] no data")
        _, rank_pos = self._skip.get_with_position(node)
        return rank_pos, self._skip.iter(node)

    def get_rank_key_prev_to_limit(self, key: int, count: int) -> List[RankPosData]:
        """Return ``key`` and the entries ranked before it, at most ``count``."""
        rank_pos, it = self._find_for_walk(key)
        result: List[RankPosData] = []
        while it.prev() and len(result) < count:
            result.append(_pos_data(it.value(), rank_pos - len(result) + 1))
        return result

    def get_rank_key_next_to_limit(self, key: int, count: int) -> List[RankPosData]:
        """Return ``key`` and the entries ranked after it, at most ``count``."""
        rank_pos, it = self._find_for_walk(key)
        result: List[RankPosData] = []
        while it.next() and len(result) < count:
            result.append(_pos_data(it.value(), rank_pos + len(result) + 1))
        return result

    def get_rank_data_from_to_limit(self, start_pos: int, count: int) -> List[RankPosData]:
        """Return up to ``count`` entries from 0-based ``start_pos``.

        A start past the end is moved to the last entry.
        """
        total = len(self._skip)
        if total <= 0:
            return []
        self._pick_expire_key()
        if total < start_pos:
            start_pos = total - 1
        it = self._skip.iter_at_position(start_pos)
        result: List[RankPosData] = []
        while it.next() and len(result) < count:
            result.append(_pos_data(it.value(), len(result) + start_pos + 1))
        return result

    def _check_insert_and_replace(self, entry: RankEntry) -> bool:
        if self.max_len == 0:
            return True
        rank_len = len(self._skip)
        if self.max_len > rank_len:
            return True

        last: RankData = self._skip.by_position(rank_len - 1)
        flag = compare_more_than(entry.sort_data, last.sort_data)
        if (self.is_des and flag < 0) or (not self.is_des and flag > 0) or flag == 0:
            return False

        self._expire.remove(last.key)
        self.rank_module.on_leave_rank(self, last)
        self._skip.delete(last)
        self._data.pop(last.key, None)
        return True