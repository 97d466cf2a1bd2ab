"""
Timer schedulers for the workspace event loop.

``AsyncioScheduler`` runs timers on the running asyncio loop (the server).
``ManualScheduler`` keeps a virtual clock that only moves when advanced, so
animations can be stepped deterministically.
"""

from __future__ import annotations

import asyncio
import heapq
from itertools import count
from typing import Callable, List, Optional, Tuple

from clprompt.application.ports import SchedulerPort, TimerHandle


class _ManualTimer(TimerHandle):
    def __init__(self, due: float, callback: Callable[[], None]) -> None:
        self.due = due
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler(SchedulerPort):
    """Virtual-clock scheduler: timers fire only inside ``advance``."""

    def __init__(self, start_ms: float = 0.0) -> None:
        self._now = start_ms
        self._queue: List[Tuple[float, int, _ManualTimer]] = []
        self._seq = count()

    def now(self) -> float:
        return self._now

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> TimerHandle:
        timer = _ManualTimer(self._now + max(delay_ms, 0), callback)
        heapq.heappush(self._queue, (timer.due, next(self._seq), timer))
        return timer

    @property
    def pending(self) -> int:
        return sum(1 for _, _, timer in self._queue if not timer.cancelled)

    def advance(self, ms: float) -> None:
        """Move the clock forward ``ms``, firing due timers in order."""
        deadline = self._now + ms
        while self._queue and self._queue[0][0] <= deadline:
            due, _, timer = heapq.heappop(self._queue)
            if timer.cancelled:
                continue
            self._now = due
            timer.callback()
        self._now = deadline

    def run_until_idle(self, limit_ms: float = 10 * 60 * 1000) -> float:
        """Fire timers until none remain; returns the elapsed virtual time."""
        start = self._now
        while self._queue:
            due, _, timer = heapq.heappop(self._queue)
            if timer.cancelled:
                continue
            if due - start > limit_ms:
                raise RuntimeError(f"Scheduler still busy after {limit_ms} ms")
            self._now = due
            timer.callback()
        return self._now - start


class _AsyncioTimer(TimerHandle):
    def __init__(self, handle: asyncio.TimerHandle) -> None:
        self._handle = handle

    def cancel(self) -> None:
        self._handle.cancel()


class AsyncioScheduler(SchedulerPort):
    """Timers on the asyncio event loop; callbacks run on the loop thread."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        self._loop = loop

    def _get_loop(self) -> asyncio.AbstractEventLoop:
        return self._loop or asyncio.get_running_loop()

    def now(self) -> float:
        return self._get_loop().time() * 1000

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> TimerHandle:
        return _AsyncioTimer(self._get_loop().call_later(max(delay_ms, 0) / 1000, callback))
