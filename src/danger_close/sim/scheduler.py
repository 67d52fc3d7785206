"""Timer abstraction used by the roll controller.

A scheduler hands out cancellable handles for one-shot (`call_later`) and
repeating (`call_every`) callbacks. Delays are in milliseconds.
"""

from __future__ import annotations

import asyncio
import heapq
import itertools
from dataclasses import dataclass, field
from typing import Callable, Protocol


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> TimerHandle: ...

    def call_every(self, interval_ms: int, callback: Callable[[], None]) -> TimerHandle: ...


@dataclass(eq=False)
class _ManualTimer:
    due_ms: int
    interval_ms: int | None
    callback: Callable[[], None]
    cancelled: bool = False

    def cancel(self) -> None:
        self.cancelled = True


@dataclass()
class ManualScheduler:
    """Virtual clock; callbacks fire only from `advance()`."""

    now_ms: int = 0
    _queue: list[tuple[int, int, _ManualTimer]] = field(default_factory=list)
    _counter: itertools.count = field(default_factory=itertools.count)

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> _ManualTimer:
        timer = _ManualTimer(due_ms=self.now_ms + max(0, delay_ms), interval_ms=None, callback=callback)
        self._push(timer)
        return timer

    def call_every(self, interval_ms: int, callback: Callable[[], None]) -> _ManualTimer:
        if interval_ms <= 0:
            raise ValueError("interval_ms must be positive")
        timer = _ManualTimer(due_ms=self.now_ms + interval_ms, interval_ms=interval_ms, callback=callback)
        self._push(timer)
        return timer

    def _push(self, timer: _ManualTimer) -> None:
        heapq.heappush(self._queue, (timer.due_ms, next(self._counter), timer))

    @property
    def pending(self) -> int:
        return sum(1 for _, _, timer in self._queue if not timer.cancelled)

    def advance(self, ms: int) -> None:
        target = self.now_ms + max(0, ms)
        while self._queue and self._queue[0][0] <= target:
            due, _, timer = heapq.heappop(self._queue)
            if timer.cancelled:
                continue
            self.now_ms = due
            if timer.interval_ms is not None:
                timer.due_ms = due + timer.interval_ms
                self._push(timer)
            timer.callback()
        self.now_ms = target


@dataclass(eq=False)
class _AsyncioRepeating:
    loop: asyncio.AbstractEventLoop
    interval_s: float
    callback: Callable[[], None]
    _handle: asyncio.TimerHandle | None = None
    _cancelled: bool = False

    def start(self) -> "_AsyncioRepeating":
        self._handle = self.loop.call_later(self.interval_s, self._fire)
        return self

    def _fire(self) -> None:
        if self._cancelled:
            return
        self._handle = self.loop.call_later(self.interval_s, self._fire)
        self.callback()

    def cancel(self) -> None:
        self._cancelled = True
        if self._handle is not None:
            self._handle.cancel()


class AsyncioScheduler:
    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        return self._loop or asyncio.get_running_loop()

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> asyncio.TimerHandle:
        return self.loop.call_later(max(0, delay_ms) / 1000.0, callback)

    def call_every(self, interval_ms: int, callback: Callable[[], None]) -> _AsyncioRepeating:
        if interval_ms <= 0:
            raise ValueError("interval_ms must be positive")
        return _AsyncioRepeating(self.loop, interval_ms / 1000.0, callback).start()
