"""One-shot timers that call back on expiry unless stopped first."""

from __future__ import annotations

import enum
import errno
import logging
import threading
from typing import Any, Callable, Optional

log = logging.getLogger(__name__)

TimerCallback = Callable[[Any, int], None]


class TimerState(enum.IntEnum):
    """Life cycle of a timer."""

    READY = 100
    WAITING = 101
    DONE = 102
    ABORT = 103


class LocTimer:
    """Timer running on its own thread.

    After ``msec`` milliseconds ``callback(user_data, errno.ETIMEDOUT)`` is
    called, unless ``stop`` was called before.
    """

    def __init__(self, msec: int, callback: TimerCallback, user_data: Any = None) -> None:
        if callback is None or msec == 0:
            raise ValueError("timer needs a callback and a non-zero delay")
        if msec < 0:
            raise ValueError("timer delay must not be negative")
        self._msec = msec
        self._callback = callback
        self._user_data = user_data
        self._cond = threading.Condition(threading.Lock())
        self._state = TimerState.READY
        self._thread = threading.Thread(target=self._run, daemon=True)
        self._thread.start()
        log.debug("created timer thread %s", self._thread.name)

    def _run(self) -> None:
        log.debug("timer started, delay = %d", self._msec)
        outcome = "cancelled"
        with self._cond:
            if self._state == TimerState.READY:
                self._state = TimerState.WAITING
                aborted = self._cond.wait_for(
                    lambda: self._state == TimerState.ABORT, self._msec / 1000.0
                )
                outcome = "stopped" if aborted else "timed out"
                self._state = TimerState.DONE
        log.debug("timer %s", outcome)
        if outcome == "timed out":
            self._callback(self._user_data, errno.ETIMEDOUT)

    def stop(self) -> None:
        """Cancel the timer if it has not fired yet."""
        with self._cond:
            if self._state in (TimerState.READY, TimerState.WAITING):
                self._state = TimerState.ABORT
                self._cond.notify()

    def state(self) -> TimerState:
        """Return the current state of the timer."""
        with self._cond:
            return self._state

    def join(self, timeout: Optional[float] = None) -> bool:
        """Wait for the timer thread to finish; return True if it has."""
        self._thread.join(timeout)
        return not self._thread.is_alive()


def start_timer(msec: int, callback: TimerCallback, user_data: Any = None) -> LocTimer:
    """Start a timer and return it, so it can be stopped."""
    return LocTimer(msec, callback, user_data)