"""One-shot timers, tickers and cron timers driven by a shared heap.

A TimerHeap orders armed timers by fire time. When one is due, ``tick``
hands it to its dispatcher's channel; the consumer of that channel calls
``do`` on it, which runs the callback and re-arms tickers and crons.
"""

from __future__ import annotations

import heapq
import itertools
import logging
import queue
import threading
from datetime import datetime, timedelta
from typing import Any, Callable, List, Optional, Tuple, Union

from nodekit.cronexpr import CronExpr

logger = logging.getLogger(__name__)

Duration = Union[int, float, timedelta]
Callback = Callable[[int, Any], Any]
CloseCallback = Callable[["Timer"], Any]


def _to_delta(value: Duration) -> timedelta:
    if isinstance(value, timedelta):
        return value
    return timedelta(seconds=value)


class TimerHeap:
    """Keeps armed timers ordered by fire time and releases them when due."""

    def __init__(self, time_offset: Duration = 0) -> None:
        self._offset = _to_delta(time_offset)
        self._heap: List[Tuple[datetime, int, "Timer"]] = []
        self._seq = itertools.count()
        self._lock = threading.Lock()
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def __len__(self) -> int:
        with self._lock:
            return len(self._heap)

    def now(self) -> datetime:
        """Return the current time shifted by the configured offset."""
        return datetime.now() + self._offset

    def setup_timer(self, timer: "Timer") -> Optional["Timer"]:
        """Arm ``timer``; return None if it is already armed."""
        if timer.is_open:
            return None
        timer.is_open = True
        with self._lock:
            heapq.heappush(self._heap, (timer.fire_time, next(self._seq), timer))
        return timer

    def tick(self) -> bool:
        """Release the earliest timer if it is due; return whether one was."""
        now = self.now()
        with self._lock:
            if not self._heap or self._heap[0][0] > now:
                return False
            _, _, timer = heapq.heappop(self._heap)
        timer.is_open = False
        timer.append_channel()
        return True

    def _run(self, min_interval: float) -> None:
        while not self._stop.is_set():
            if not self.tick():
                self._stop.wait(min_interval)

    def start(self, min_interval: Duration) -> threading.Thread:
        """Start a daemon thread that ticks, sleeping ``min_interval`` when idle."""
        if self._thread is not None and self._thread.is_alive():
            raise RuntimeError("timer heap is already running")
        self._stop.clear()
        interval = _to_delta(min_interval).total_seconds()
        self._thread = threading.Thread(target=self._run, args=(interval,), daemon=True)
        self._thread.start()
        return self._thread

    def stop(self) -> None:
        """Stop the ticking thread started by ``start``."""
        self._stop.set()
        if self._thread is not None:
            self._thread.join()
            self._thread = None


class Timer:
    """A timer that fires once after its interval."""

    def __init__(
        self,
        timer_heap: TimerHeap,
        channel: "queue.Queue[Timer]",
        interval: Duration,
        cb: Optional[Callback] = None,
        cb_ex: Optional[Callable[[Any], Any]] = None,
        on_close: Optional[CloseCallback] = None,
        addition_data: Any = None,
    ) -> None:
        self.id = 0
        self.timer_heap = timer_heap
        self.channel = channel
        self.interval = _to_delta(interval)
        self.fire_time = timer_heap.now() + self.interval
        self.addition_data = addition_data
        self.is_open = False
        self._cb = cb
        self._cb_ex = cb_ex
        self._on_close = on_close
        self._cancelled = False

    def cancel(self) -> None:
        """Mark the timer cancelled; its callback will not run."""
        self._cancelled = True

    def is_active(self) -> bool:
        """Return whether the timer has not been cancelled."""
        return not self._cancelled

    def append_channel(self) -> None:
        """Hand the timer to its dispatcher's channel."""
        self.channel.put(self)

    def setup_timer(self, now: Optional[datetime] = None) -> None:
        """Re-arm the timer to fire one interval after ``now``."""
        if now is None:
            now = self.timer_heap.now()
        self.fire_time = now + self.interval
        if self.timer_heap.setup_timer(self) is None:
            raise RuntimeError("failed to install timer")

    def name(self) -> str:
        """Return the qualified name of the callback, or an empty string."""
        func = self._cb or self._cb_ex
        if func is None:
            return ""
        module = getattr(func, "__module__", None) or ""
        qualname = getattr(func, "__qualname__", None) or repr(func)
        return f"{module}.{qualname}" if module else qualname

    def _close(self) -> None:
        if self._on_close is not None:
            self._on_close(self)

    def _call(self) -> None:
        if self._cb is not None:
            self._cb(self.id, self.addition_data)
        elif self._cb_ex is not None:
            self._cb_ex(self)

    def _fire(self) -> None:
        if not self.is_active():
            self._close()
            return
        self._call()
        if not self.is_open:
            self._close()

    def do(self) -> None:
        """Run the callback; exceptions are logged, not raised."""
        try:
            self._fire()
        except Exception:
            logger.exception("timer %s failed", self.name())


class Ticker(Timer):
    """A timer that re-arms itself every interval until cancelled."""

    def _fire(self) -> None:
        if not self.is_active():
            self._close()
            return
        self._call()
        if self.is_active():
            self.fire_time = self.timer_heap.now() + self.interval
            self.timer_heap.setup_timer(self)
        else:
            self._close()

    def do(self) -> None:
        """Run the callback and re-arm unless cancelled."""
        super().do()


class Cron(Timer):
    """A timer that fires at the times a cron expression matches."""

    def __init__(
        self,
        timer_heap: TimerHeap,
        channel: "queue.Queue[Timer]",
        cron_expr: CronExpr,
        next_time: datetime,
        cb: Optional[Callback] = None,
        cb_ex: Optional[Callable[[Any], Any]] = None,
        on_close: Optional[CloseCallback] = None,
    ) -> None:
        now = timer_heap.now()
        super().__init__(timer_heap, channel, next_time - now, cb, cb_ex, on_close)
        self.cron_expr = cron_expr
        self.fire_time = next_time

    def _fire(self) -> None:
        if not self.is_active():
            self._close()
            return
        now = self.timer_heap.now()
        next_time = self.cron_expr.next(now)
        if next_time is None:
            if self._cb_ex is not None:
                self._cb_ex(self)
            return
        self._call()
        if self.is_active():
            self.interval = next_time - now
            self.fire_time = next_time
            self.timer_heap.setup_timer(self)
        else:
            self._close()

    def do(self) -> None:
        """Run the callback and re-arm for the next match unless cancelled."""
        super().do()


class Dispatcher:
    """Creates timers whose due events arrive on ``chan_timer``."""

    def __init__(self, capacity: int, timer_heap: TimerHeap) -> None:
        self.timer_heap = timer_heap
        self.chan_timer: "queue.Queue[Timer]" = queue.Queue(maxsize=capacity)

    def after_func(
        self,
        delay: Duration,
        cb: Optional[Callback] = None,
        cb_ex: Optional[Callable[[Timer], Any]] = None,
        on_close: Optional[CloseCallback] = None,
        on_add: Optional[Callable[[Timer], Any]] = None,
    ) -> Timer:
        """Arm a one-shot timer that fires after ``delay``."""
        timer = Timer(self.timer_heap, self.chan_timer, delay, cb, cb_ex, on_close)
        added = self.timer_heap.setup_timer(timer)
        if on_add is not None and added is not None:
            on_add(added)
        return timer

    def cron_func(
        self,
        cron_expr: CronExpr,
        cb: Optional[Callback] = None,
        cb_ex: Optional[Callable[[Cron], Any]] = None,
        on_close: Optional[CloseCallback] = None,
        on_add: Optional[Callable[[Timer], Any]] = None,
    ) -> Optional[Cron]:
        """Arm a cron timer; return None if the expression never matches."""
        next_time = cron_expr.next(self.timer_heap.now())
        if next_time is None:
            return None
        cron = Cron(self.timer_heap, self.chan_timer, cron_expr, next_time, cb, cb_ex, on_close)
        self.timer_heap.setup_timer(cron)
        if on_add is not None:
            on_add(cron)
        return cron

    def ticker_func(
        self,
        interval: Duration,
        cb: Optional[Callback] = None,
        cb_ex: Optional[Callable[[Ticker], Any]] = None,
        on_close: Optional[CloseCallback] = None,
        on_add: Optional[Callable[[Timer], Any]] = None,
    ) -> Ticker:
        """Arm a ticker that fires every ``interval``."""
        ticker = Ticker(self.timer_heap, self.chan_timer, interval, cb, cb_ex, on_close)
        self.timer_heap.setup_timer(ticker)
        if on_add is not None:
            on_add(ticker)
        return ticker