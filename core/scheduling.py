"""Recurring-callback schedulers used to drive the Pomodoro timer.

A scheduler only needs ``call_every(interval, callback)`` returning a
handle with an idempotent ``cancel()``. Everything runs on the caller's
thread or event loop; nothing here is thread-safe.
"""

from __future__ import annotations

import asyncio
import heapq
import itertools
from typing import Callable, Protocol


class Handle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    def call_every(self, interval: float, callback: Callable[[], None]) -> Handle: ...


class AsyncioScheduler:
    """Re-arms ``loop.call_later`` after each run of the callback."""

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def call_every(self, interval: float, callback: Callable[[], None]) -> _AsyncioHandle:
        return _AsyncioHandle(self.loop, interval, callback)


class _AsyncioHandle:
    def __init__(
        self,
        loop: asyncio.AbstractEventLoop,
        interval: float,
        callback: Callable[[], None],
    ) -> None:
        self._loop = loop
        self._interval = interval
        self._callback = callback
        self._cancelled = False
        self._timer = loop.call_later(interval, self._run)

    def _run(self) -> None:
        if self._cancelled:
            return
        # Re-arm first so the callback may cancel us.
        self._timer = self._loop.call_later(self._interval, self._run)
        self._callback()

    def cancel(self) -> None:
        self._cancelled = True
        self._timer.cancel()

    @property
    def cancelled(self) -> bool:
        return self._cancelled


class ManualScheduler:
    """Virtual-clock scheduler; time only moves when ``advance`` is called."""

    def __init__(self) -> None:
        self.now = 0.0
        self._queue: list[tuple[float, int, _ManualHandle]] = []
        self._seq = itertools.count()

    def call_every(self, interval: float, callback: Callable[[], None]) -> _ManualHandle:
        if interval <= 0:
            raise ValueError("interval must be positive")
        handle = _ManualHandle(self, interval, callback)
        self._push(handle)
        return handle

    def _push(self, handle: _ManualHandle) -> None:
        heapq.heappush(self._queue, (self.now + handle.interval, next(self._seq), handle))

    @property
    def pending(self) -> int:
        """Number of live (not cancelled) scheduled callbacks."""
        return sum(1 for _, _, h in self._queue if not h.cancelled)

    def advance(self, seconds: float) -> int:
        """Move the clock forward, firing every due callback. Returns fire count."""
        target = self.now + seconds
        fired = 0
        while self._queue and self._queue[0][0] <= target:
            due, _, handle = heapq.heappop(self._queue)
            if handle.cancelled:
                continue
            self.now = due
            self._push(handle)
            handle.callback()
            fired += 1
        self.now = target
        return fired


class _ManualHandle:
    def __init__(self, scheduler: ManualScheduler, interval: float, callback: Callable[[], None]) -> None:
        self.scheduler = scheduler
        self.interval = interval
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True
