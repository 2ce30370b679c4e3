"""Cron expressions with optional seconds, and finding their next match.

Fields, in order (seconds may be left out):

==============  ==============  ==========================
Field           Allowed values  Allowed special characters
==============  ==============  ==========================
Seconds         0-59            ``* / , -``
Minutes         0-59            ``* / , -``
Hours           0-23            ``* / , -``
Day of month    1-31            ``* / , -``
Month           1-12            ``* / , -``
Day of week     0-6 (Sunday 0)  ``* / , -``
==============  ==============  ==========================
"""

from __future__ import annotations

import re
from datetime import datetime, timedelta
from typing import Optional

_INT_RE = re.compile(r"[+-]?[0-9]+")

_SECOND = timedelta(seconds=1)
_MINUTE = timedelta(minutes=1)
_HOUR = timedelta(hours=1)
_DAY = timedelta(days=1)

_ALL_DAYS_OF_MONTH = 0xFFFFFFFE
_ALL_DAYS_OF_WEEK = 0x7F


def _atoi(text: str) -> Optional[int]:
    if _INT_RE.fullmatch(text) is None:
        return None
    return int(text)


def parse_cron_field(field: str, min_value: int, max_value: int) -> int:
    """Parse one cron field into a bit mask of the values it allows.

    Each comma-separated part may be ``*``, ``n``, ``n-m``, ``*/k``, ``n/k``
    (meaning ``n-max/k``) or ``n-m/k``. Raises ValueError on bad input.
    """
    mask = 0
    for part in field.split(","):
        range_and_incr = part.split("/")
        if len(range_and_incr) > 2:
            raise ValueError(f"too many slashes: {part}")

        range_text = range_and_incr[0]
        start_and_end = range_text.split("-")
        if len(start_and_end) > 2:
            raise ValueError(f"too many hyphens: {range_text}")

        if start_and_end[0] == "*":
            if len(start_and_end) != 1:
                raise ValueError(f"invalid range: {range_text}")
            start, end = min_value, max_value
        else:
            start = _atoi(start_and_end[0])
            if start is None:
                raise ValueError(f"invalid range: {range_text}")
            if len(start_and_end) == 1:
                end = max_value if len(range_and_incr) == 2 else start
            else:
                end = _atoi(start_and_end[1])
                if end is None:
                    raise ValueError(f"invalid range: {range_text}")

        if start > end:
            raise ValueError(f"invalid range: {range_text}")
        if start < min_value or end > max_value:
            raise ValueError(f"out of range [{min_value}, {max_value}]: {range_text}")

        if len(range_and_incr) == 1:
            incr = 1
        else:
            incr = _atoi(range_and_incr[1])
            if incr is None or incr <= 0:
                raise ValueError(f"invalid increment: {range_and_incr[1]}")

        if incr == 1:
            mask |= ((1 << (end + 1)) - 1) & ~((1 << start) - 1)
        else:
            for value in range(start, end + 1, incr):
                mask |= 1 << value
    return mask


def _add_month(t: datetime) -> datetime:
    # Overflowing days roll into the following month, e.g. Jan 31 -> Mar 2/3.
    year = t.year + t.month // 12
    month = t.month % 12 + 1
    return t.replace(year=year, month=month, day=1) + timedelta(days=t.day - 1)


def _weekday(t: datetime) -> int:
    return t.isoweekday() % 7


class CronExpr:
    """A parsed cron expression of five or six fields."""

    def __init__(self, expr: str) -> None:
        fields = expr.split()
        if len(fields) not in (5, 6):
            raise ValueError(
                f"invalid expr {expr}: expected 5 or 6 fields, got {len(fields)}"
            )
        if len(fields) == 5:
            fields = ["0", *fields]
        try:
            self.seconds = parse_cron_field(fields[0], 0, 59)
            self.minutes = parse_cron_field(fields[1], 0, 59)
            self.hours = parse_cron_field(fields[2], 0, 23)
            self.days_of_month = parse_cron_field(fields[3], 1, 31)
            self.months = parse_cron_field(fields[4], 1, 12)
            self.days_of_week = parse_cron_field(fields[5], 0, 6)
        except ValueError as exc:
            raise ValueError(f"invalid expr {expr}: {exc}") from exc
        self.expr = expr

    def __repr__(self) -> str:
        return f"CronExpr({self.expr!r})"

    def _match_day(self, t: datetime) -> bool:
        weekday_ok = bool((1 << _weekday(t)) & self.days_of_week)
        if self.days_of_month == _ALL_DAYS_OF_MONTH:
            return weekday_ok
        day_ok = bool((1 << t.day) & self.days_of_month)
        if self.days_of_week == _ALL_DAYS_OF_WEEK:
            return day_ok
        return weekday_ok or day_ok

    def next(self, moment: datetime) -> Optional[datetime]:
        """Return the first matching second after ``moment``.

        Returns None if nothing matches before the end of the following year.
        """
        t = moment.replace(microsecond=0) + _SECOND
        year = t.year
        initialized = False

        while True:
            if t.year > year + 1:
                return None

            restart = False
            while not (1 << t.month) & self.months:
                if not initialized:
                    initialized = True
                    t = t.replace(day=1, hour=0, minute=0, second=0)
                t = _add_month(t)
                if t.month == 1:
                    restart = True
                    break
            if restart:
                continue

            while not self._match_day(t):
                if not initialized:
                    initialized = True
                    t = t.replace(hour=0, minute=0, second=0)
                t += _DAY
                if t.day == 1:
                    restart = True
                    break
            if restart:
                continue

            while not (1 << t.hour) & self.hours:
                if not initialized:
                    initialized = True
                    t = t.replace(minute=0, second=0)
                t += _HOUR
                if t.hour == 0:
                    restart = True
                    break
            if restart:
                continue

            while not (1 << t.minute) & self.minutes:
                if not initialized:
                    initialized = True
                    t = t.replace(second=0)
                t += _MINUTE
                if t.minute == 0:
                    restart = True
                    break
            if restart:
                continue

            while not (1 << t.second) & self.seconds:
                initialized = True
                t += _SECOND
                if t.second == 0:
                    restart = True
                    break
            if restart:
                continue

            return t