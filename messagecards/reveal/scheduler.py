"""Cancellable timers for the reveal clock.

`AsyncioScheduler` runs on the event loop; `ManualScheduler` keeps a virtual
clock that only moves when `advance()` is called.
"""
from __future__ import annotations

import asyncio
import heapq
import itertools
from typing import Callable, List, Optional, Protocol, Tuple


class ScheduledTask(Protocol):
    def cancel(self) -> None: ...
    def cancelled(self) -> bool: ...


class Scheduler(Protocol):
    def now_ms(self) -> float: ...
    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> ScheduledTask: ...


class AsyncioScheduler:
    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        self._loop = loop

    def _get_loop(self) -> asyncio.AbstractEventLoop:
        return self._loop or asyncio.get_running_loop()

    def now_ms(self) -> float:
        return self._get_loop().time() * 1000.0

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> ScheduledTask:
        return self._get_loop().call_later(max(delay_ms, 0.0) / 1000.0, callback)


class ManualTask:
    def __init__(self, due_ms: float, callback: Callable[[], None]) -> None:
        self.due_ms = due_ms
        self._callback = callback
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    def cancelled(self) -> bool:
        return self._cancelled

    def _run(self) -> None:
        self._callback()


class ManualScheduler:
    def __init__(self, start_ms: float = 0.0) -> None:
        self._now = start_ms
        self._seq = itertools.count()
        self._queue: List[Tuple[float, int, ManualTask]] = []

    def now_ms(self) -> float:
        return self._now

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> ManualTask:
        task = ManualTask(self._now + max(delay_ms, 0.0), callback)
        heapq.heappush(self._queue, (task.due_ms, next(self._seq), task))
        return task

    def pending(self) -> int:
        return sum(1 for _, _, task in self._queue if not task.cancelled())

    def advance(self, ms: float) -> None:
        """Move the clock forward, firing due tasks in order."""
        target = self._now + ms
        while self._queue and self._queue[0][0] <= target:
            due, _, task = heapq.heappop(self._queue)
            self._now = due
            if not task.cancelled():
                task._run()
        self._now = target
