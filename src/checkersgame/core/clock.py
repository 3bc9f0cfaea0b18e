"""Schedulers — cancelable delayed callbacks on a millisecond clock.

ManualScheduler keeps virtual time and only runs callbacks when advanced,
which makes timer-driven games deterministic in tests and self-play.
ThreadingScheduler runs callbacks on daemon ``threading.Timer`` threads
against the monotonic wall clock.
"""

from __future__ import annotations

import heapq
import itertools
import threading
import time
from typing import Callable, Protocol


class TimerHandle(Protocol):
    @property
    def cancelled(self) -> bool: ...

    def cancel(self) -> None: ...


class Scheduler(Protocol):
    def now(self) -> float: ...

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> TimerHandle: ...


# ======================================================================
# ManualScheduler
# ======================================================================

class _ManualHandle:
    def __init__(self, due: float, callback: Callable[[], None]) -> None:
        self.due = due
        self.callback = callback
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True


class ManualScheduler:
    """Virtual-time scheduler. Nothing fires until ``advance()`` is called."""

    def __init__(self, start_ms: float = 0.0) -> None:
        self._now = float(start_ms)
        self._queue: list[tuple[float, int, _ManualHandle]] = []
        self._seq = itertools.count()

    def now(self) -> float:
        return self._now

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> _ManualHandle:
        handle = _ManualHandle(self._now + max(0.0, delay_ms), callback)
        heapq.heappush(self._queue, (handle.due, next(self._seq), handle))
        return handle

    @property
    def pending(self) -> int:
        """Number of live (not cancelled) callbacks still queued."""
        return sum(1 for _, _, h in self._queue if not h.cancelled)

    def advance(self, ms: float) -> None:
        """Move the clock forward *ms*, firing due callbacks in time order.

        Callbacks scheduled while advancing fire in the same call if they
        fall due before the target time.
        """
        target = self._now + ms
        while self._queue and self._queue[0][0] <= target:
            due, _, handle = heapq.heappop(self._queue)
            if handle.cancelled:
                continue
            self._now = due
            handle.callback()
        self._now = target


# ======================================================================
# ThreadingScheduler
# ======================================================================

class _ThreadHandle:
    def __init__(self, timer: threading.Timer) -> None:
        self._timer = timer
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True
        self._timer.cancel()


class ThreadingScheduler:
    """Wall-clock scheduler backed by daemon ``threading.Timer`` objects.

    Callbacks run on timer threads; the caller must serialize any shared
    state (GameController holds a lock around dispatch).
    """

    def now(self) -> float:
        return time.monotonic() * 1000.0

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> _ThreadHandle:
        holder: list[_ThreadHandle] = []

        def _run() -> None:
            if holder and not holder[0].cancelled:
                callback()

        timer = threading.Timer(max(0.0, delay_ms) / 1000.0, _run)
        timer.daemon = True
        handle = _ThreadHandle(timer)
        holder.append(handle)
        timer.start()
        return handle
