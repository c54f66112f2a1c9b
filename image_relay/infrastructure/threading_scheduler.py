"""
Threading Scheduler

Scheduler implementation backed by daemon threading.Timer instances.
"""

import logging
import threading
from typing import Callable, Set

from ..domain.artifacts.scheduling import ScheduledCall, Scheduler

logger = logging.getLogger(__name__)


class TimerCall(ScheduledCall):
    """ScheduledCall wrapping a threading.Timer."""

    def __init__(self, timer: threading.Timer, on_done: Callable[["TimerCall"], None]):
        self._timer = timer
        self._on_done = on_done
        self._cancelled = False

    def cancel(self) -> None:
        if not self._cancelled:
            self._cancelled = True
            self._timer.cancel()
        self._on_done(self)

    @property
    def cancelled(self) -> bool:
        return self._cancelled


class ThreadingScheduler(Scheduler):
    """
    Runs one-shot callbacks on daemon timer threads.

    Callback exceptions are logged; they never reach the timer thread's
    default excepthook.
    """

    def __init__(self):
        self._pending: Set[TimerCall] = set()
        self._lock = threading.Lock()

    def schedule(self, delay_seconds: float, callback: Callable[[], None]) -> ScheduledCall:
        call_holder = []

        def fire():
            call = call_holder[0]
            self._forget(call)
            try:
                callback()
            except Exception as e:
                logger.error(f"Scheduled callback failed: {e}", exc_info=True)

        timer = threading.Timer(delay_seconds, fire)
        timer.daemon = True
        call = TimerCall(timer, self._forget)
        call_holder.append(call)

        with self._lock:
            self._pending.add(call)
        timer.start()
        return call

    def pending_count(self) -> int:
        with self._lock:
            return len(self._pending)

    def shutdown(self) -> None:
        with self._lock:
            pending = list(self._pending)
            self._pending.clear()

        for call in pending:
            call.cancel()

        if pending:
            logger.info(f"Cancelled {len(pending)} pending timer(s)")

    def _forget(self, call: TimerCall) -> None:
        with self._lock:
            self._pending.discard(call)
