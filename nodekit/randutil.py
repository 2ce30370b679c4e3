"""Random helpers: weighted choice and integer intervals."""

from __future__ import annotations

import bisect
import itertools
import random
from typing import List


def rand_group(*args: int) -> int:
    """Pick an index at random, weighted by the given non-negative weights.

    Returns 0 when every weight is zero.
    """
    if not args:
        raise ValueError("args not found")
    if any(w < 0 for w in args):
        raise ValueError("weights must be non-negative")
    cumulative = list(itertools.accumulate(args))
    total = cumulative[-1]
    if total == 0:
        return 0
    roll = random.randrange(total)
    return bisect.bisect_right(cumulative, roll)


def rand_interval(b1: int, b2: int) -> int:
    """Return a random integer between ``b1`` and ``b2`` inclusive."""
    if b1 == b2:
        return b1
    low, high = sorted((b1, b2))
    return random.randint(low, high)


def rand_interval_n(b1: int, b2: int, n: int) -> List[int]:
    """Return up to ``n`` distinct random integers between ``b1`` and ``b2``."""
    if n < 0:
        raise ValueError("n must be non-negative")
    if b1 == b2:
        return [b1]
    low, high = sorted((b1, b2))
    span = high - low + 1
    n = min(n, span)

    result: List[int] = []
    swapped: dict = {}
    for _ in range(n):
        v = random.randrange(span) + low
        result.append(swapped.get(v, v))
        last = span - 1 + low
        if v != last:
            swapped[v] = swapped.get(last, last)
        span -= 1
    return result