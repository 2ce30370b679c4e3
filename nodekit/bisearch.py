"""Binary search over sorted sequences with nearest-neighbour fallback."""

from __future__ import annotations

from typing import Any, Callable, Optional, Sequence


def bi_search(
    elements: Sequence[Any],
    value: Any,
    match_up: int = 0,
    key: Optional[Callable[[Any], Any]] = None,
) -> int:
    """Return the index of ``value`` in the sorted ``elements``, or -1.

    ``match_up`` controls what happens when no equal element exists:

    * ``0`` - an exact match is required.
    * ``1`` - return the index of the nearest element greater than ``value``.
    * ``-1`` - return the index of the nearest element smaller than ``value``.

    ``key`` extracts the comparable value from an element.
    """

    def value_at(index: int) -> Any:
        element = elements[index]
        return element if key is None else key(element)

    low, high = 0, len(elements) - 1
    if high == -1:
        return -1

    mid = 0
    while low <= high:
        mid = low + ((high - low) >> 1)
        current = value_at(mid)
        if current > value:
            high = mid - 1
        elif current < value:
            low = mid + 1
        else:
            return mid

    current = value_at(mid)
    if match_up == 1:
        if current < value:
            return -1 if mid + 1 >= len(elements) else mid + 1
        return mid
    if match_up == -1:
        if current > value:
            return -1 if mid - 1 < 0 else mid - 1
        return mid
    return -1