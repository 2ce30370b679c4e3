"""An indexable skip list kept in sorted order.

Entries are ordered with their ``compare(other)`` method when they have one
(negative, zero or positive, like a three-way comparison); otherwise with the
ordinary ``<`` and ``>`` operators. Every link also records its width, so
entries can be reached by position in logarithmic time.
"""

from __future__ import annotations

import random
from typing import Any, Iterator, List, Optional, Tuple

_P = 0.5  # probability that a node on level i also appears on level i + 1

_generator = random.Random()


def _compare(a: Any, b: Any) -> int:
    compare = getattr(a, "compare", None)
    if compare is not None:
        return compare(b)
    return (a > b) - (a < b)


def _generate_level(max_level: int) -> int:
    level = 1
    while level < max_level - 1:
        if _generator.random() >= _P:
            return level
        level += 1
    return level


class _Node:
    __slots__ = ("forward", "widths", "pre_node", "entry")

    def __init__(self, entry: Any, levels: int) -> None:
        self.entry = entry
        self.forward: List[Optional[_Node]] = [None] * levels
        self.widths: List[int] = [0] * levels
        self.pre_node: Optional[_Node] = None


class SkipIterator:
    """Walks the list from a starting node in either direction.

    The first call to ``next`` or ``prev`` stays on the starting entry.
    """

    def __init__(self, node: Optional[_Node] = None, first: bool = False) -> None:
        self._node = node
        self._first = first

    def next(self) -> bool:
        """Move to the following entry; return whether there is one."""
        if self._first:
            self._first = False
            return self._node is not None
        if self._node is None:
            return False
        self._node = self._node.forward[0]
        return self._node is not None

    def prev(self) -> bool:
        """Move to the preceding entry; return whether there is one."""
        if self._first:
            self._first = False
            return self._node is not None
        if self._node is None:
            return False
        self._node = self._node.pre_node
        return self._node is not None and self._node.entry is not None

    def value(self) -> Any:
        """Return the entry at the current position, or None."""
        if self._node is None:
            return None
        return self._node.entry

    def exhaust(self) -> List[Any]:
        """Advance to the end and return every entry visited, in order."""
        return list(self)

    def __iter__(self) -> Iterator[Any]:
        while self.next():
            yield self.value()


class SkipList:
    """A sorted skip list that can also be addressed by position."""

    def __init__(self, max_level: int = 32) -> None:
        if not isinstance(max_level, int) or max_level < 2:
            raise ValueError("max_level must be an integer of at least 2")
        self._max_level = max_level
        self._level = 0
        self._head = _Node(None, max_level)
        self._num = 0
        self._cache: List[Optional[_Node]] = [None] * max_level
        self._pos_cache: List[int] = [0] * max_level

    def __len__(self) -> int:
        return self._num

    def __iter__(self) -> Iterator[Any]:
        node = self._head.forward[0]
        while node is not None:
            yield node.entry
            node = node.forward[0]

    # -- searching ---------------------------------------------------------

    def _search(self, item: Any, update: bool) -> Tuple[Optional[_Node], int]:
        pos = 0
        node = self._head
        for offset in range(self._level, -1, -1):
            while True:
                nxt = node.forward[offset]
                if nxt is None or _compare(nxt.entry, item) >= 0:
                    break
                pos += node.widths[offset]
                node = nxt
            if update:
                self._cache[offset] = node
                self._pos_cache[offset] = pos
        return node.forward[0], pos + 1

    def _search_by_position(self, position: int, update: bool) -> Tuple[Optional[_Node], int]:
        if self._num == 0:
            if update:
                for offset in range(self._level + 1):
                    self._cache[offset] = self._head
                    self._pos_cache[offset] = 0
            return None, 1
        if position > self._num:
            return None, 1

        pos = 0
        node = self._head
        for offset in range(self._level, -1, -1):
            while True:
                nxt = node.forward[offset]
                if nxt is None or pos + node.widths[offset] > position:
                    break
                pos += node.widths[offset]
                node = nxt
            if update:
                self._cache[offset] = node
                self._pos_cache[offset] = pos
        return node, pos + 1

    @staticmethod
    def _check_position(position: int) -> None:
        if position < 0:
            raise ValueError("position must be non-negative")

    def _reset_max_level(self) -> None:
        if self._level < 1:
            self._level = 1
            return
        while self._level > 1 and self._head.forward[self._level - 1] is None:
            self._level -= 1

    # -- queries -----------------------------------------------------------

    def get(self, *args: Any) -> List[Any]:
        """Return the stored entry equal to each argument, or None for misses."""
        result = []
        for item in args:
            node, _ = self._search(item, False)
            if node is not None and _compare(node.entry, item) == 0:
                result.append(node.entry)
            else:
                result.append(None)
        return result

    def get_with_position(self, item: Any) -> Tuple[Any, int]:
        """Return the first entry not less than ``item`` and its 0-based position.

        Returns ``(None, 0)`` when every entry is less than ``item``.
        """
        node, pos = self._search(item, False)
        if node is None:
            return None, 0
        return node.entry, pos - 1

    def by_position(self, position: int) -> Any:
        """Return the entry at 0-based ``position``, or None if out of range."""
        self._check_position(position)
        node, _ = self._search_by_position(position + 1, False)
        if node is None:
            return None
        return node.entry

    # -- mutation ----------------------------------------------------------

    def _insert_node(self, node: Optional[_Node], item: Any, pos: int, allow_duplicate: bool) -> Any:
        if not allow_duplicate and node is not None and _compare(node.entry, item) == 0:
            old = node.entry
            node.entry = item
            return old

        self._num += 1
        cache, pos_cache = self._cache, self._pos_cache
        node_level = _generate_level(self._max_level)
        if node_level > self._level:
            for i in range(self._level, node_level):
                cache[i] = self._head
                pos_cache[i] = 0
            self._level = node_level

        new_node = _Node(item, node_level)
        for i in range(node_level):
            prev = cache[i]
            if i == 0:
                new_node.pre_node = prev
                if prev.forward[0] is not None:
                    prev.forward[0].pre_node = new_node
            new_node.forward[i] = prev.forward[i]
            prev.forward[i] = new_node

            former = prev.widths[i]
            new_node.widths[i] = 0 if former == 0 else pos_cache[i] + former + 1 - pos
            prev.widths[i] = pos - pos_cache[i]

        for i in range(node_level, self._level):
            if cache[i].forward[i] is not None:
                cache[i].widths[i] += 1
        return None

    def insert(self, *args: Any) -> List[Any]:
        """Insert each argument in order; return the entries they overwrote."""
        overwritten = []
        for item in args:
            if item is None:
                raise ValueError("cannot insert None")
            node, pos = self._search(item, True)
            overwritten.append(self._insert_node(node, item, pos, False))
        return overwritten

    def insert_at_position(self, position: int, item: Any) -> None:
        """Insert ``item`` at 0-based ``position``, ignoring the sort order.

        A position past the end appends. No duplicate check is made.
        """
        self._check_position(position)
        if item is None:
            raise ValueError("cannot insert None")
        position = min(position, self._num)
        node, pos = self._search_by_position(position, True)
        self._insert_node(node, item, pos, True)

    def replace_at_position(self, position: int, item: Any) -> None:
        """Replace the entry at 0-based ``position``; no-op if it is out of range."""
        self._check_position(position)
        if item is None:
            raise ValueError("cannot insert None")
        node, _ = self._search_by_position(position + 1, False)
        if node is None:
            return
        node.entry = item

    def _delete(self, item: Any) -> Any:
        node, _ = self._search(item, True)
        if node is None or _compare(node.entry, item) != 0:
            return None

        self._num -= 1
        for i in range(self._level + 1):
            prev = self._cache[i]
            if prev.forward[i] is not node:
                if prev.forward[i] is not None:
                    prev.widths[i] -= 1
                continue
            if i == 0:
                if node.forward[0] is not None:
                    node.forward[0].pre_node = prev
                node.pre_node = None
            prev.widths[i] += node.widths[i] - 1
            prev.forward[i] = node.forward[i]

        while self._level > 1 and self._head.forward[self._level - 1] is None:
            self._head.widths[self._level] = 0
            self._level -= 1
        return node.entry

    def delete(self, *args: Any) -> List[Any]:
        """Remove each argument; return the removed entries, None for misses."""
        return [self._delete(item) for item in args]

    # -- iteration ---------------------------------------------------------

    def iter(self, item: Any) -> SkipIterator:
        """Return an iterator starting at the first entry not less than ``item``."""
        node, _ = self._search(item, False)
        if node is None:
            return SkipIterator()
        return SkipIterator(node, True)

    def iter_at_position(self, position: int) -> SkipIterator:
        """Return an iterator starting at 0-based ``position``."""
        self._check_position(position)
        node, _ = self._search_by_position(position + 1, False)
        if node is None or node.entry is None:
            return SkipIterator()
        return SkipIterator(node, True)

    def split_at(self, index: int) -> Tuple["SkipList", Optional["SkipList"]]:
        """Split after 0-based ``index``; this list keeps the left part.

        If ``index`` is the last position or beyond, the right part is None.
        """
        self._check_position(index)
        index += 1
        if index >= self._num:
            return self, None

        right = SkipList(self._max_level)
        right._level = self._level
        self._search_by_position(index, True)

        for i in range(self._level + 1):
            prev = self._cache[i]
            right._head.forward[i] = prev.forward[i]
            if prev.forward[i] is not None:
                right._head.widths[i] = prev.widths[i] - (index - self._pos_cache[i])
            prev.widths[i] = 0
            prev.forward[i] = None

        first = right._head.forward[0]
        if first is not None:
            first.pre_node = right._head

        right._num = self._num - index
        self._num -= right._num
        self._reset_max_level()
        right._reset_max_level()
        return self, right