"""Run callables in background threads, restarting them after failures."""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable

logger = logging.getLogger(__name__)


def run_recovering(callback: Callable[..., Any], recover_num: int, *args: Any) -> None:
    """Call ``callback(*args)``, logging and retrying on exceptions.

    ``recover_num`` of -1 retries forever; a positive value allows that many
    runs in total; 0 runs the callback once.
    """
    if not callable(callback):
        raise TypeError("not a function")
    while True:
        try:
            callback(*args)
            return
        except Exception as exc:
            logger.error("Core information is %r", exc, exc_info=True)
            if recover_num > 0:
                recover_num -= 1
            if recover_num != -1 and recover_num <= 0:
                return


def _start(callback: Callable[..., Any], recover_num: int, args: tuple) -> threading.Thread:
    if not callable(callback):
        raise TypeError("not a function")
    thread = threading.Thread(
        target=run_recovering, args=(callback, recover_num, *args), daemon=True
    )
    thread.start()
    return thread


def go(callback: Callable[..., Any], *args: Any) -> threading.Thread:
    """Run ``callback`` once in a daemon thread, logging any exception."""
    return _start(callback, 0, args)


def go_recover(callback: Callable[..., Any], recover_num: int, *args: Any) -> threading.Thread:
    """Run ``callback`` in a daemon thread with restarts as in run_recovering."""
    return _start(callback, recover_num, args)