"""
Cancellable delayed callbacks.

`ThreadingScheduler` runs callbacks on `threading.Timer` threads for live
sessions. `ManualScheduler` keeps a virtual clock that only moves when the
caller advances it, which makes timer-driven state deterministic in tests.
"""

from __future__ import annotations

import itertools
import threading
from dataclasses import dataclass, field
from typing import Callable, Protocol


class TimerHandle(Protocol):
    def cancel(self) -> None:
        ...


class Scheduler(Protocol):
    """Schedules a callback to run once after `delay` seconds."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        ...

    def cancel_all(self) -> None:
        ...


class ThreadingScheduler:
    def __init__(self):
        self._timers: set[threading.Timer] = set()
        self._lock = threading.Lock()

    def _forget(self, timer: threading.Timer) -> None:
        with self._lock:
            self._timers.discard(timer)

    def call_later(self, delay: float, callback: Callable[[], None]) -> "ThreadTimerHandle":
        timer: threading.Timer

        def _run() -> None:
            self._forget(timer)
            callback()

        timer = threading.Timer(delay, _run)
        timer.daemon = True
        with self._lock:
            self._timers.add(timer)
        timer.start()
        return ThreadTimerHandle(self, timer)

    def cancel_all(self) -> None:
        with self._lock:
            timers = list(self._timers)
            self._timers.clear()
        for timer in timers:
            timer.cancel()


@dataclass
class ThreadTimerHandle:
    scheduler: ThreadingScheduler
    timer: threading.Timer

    def cancel(self) -> None:
        self.timer.cancel()
        self.scheduler._forget(self.timer)


@dataclass(order=True)
class ManualTimer:
    due: float
    seq: int
    callback: Callable[[], None] = field(compare=False)
    cancelled: bool = field(default=False, compare=False)

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """Virtual-clock scheduler for tests and simulations."""

    def __init__(self, start: float = 0.0):
        self.now = start
        self._timers: list[ManualTimer] = []
        self._seq = itertools.count()

    def call_later(self, delay: float, callback: Callable[[], None]) -> ManualTimer:
        timer = ManualTimer(due=self.now + delay, seq=next(self._seq), callback=callback)
        self._timers = [t for t in self._timers if not t.cancelled]
        self._timers.append(timer)
        return timer

    @property
    def pending(self) -> list[ManualTimer]:
        return sorted(timer for timer in self._timers if not timer.cancelled)

    def advance(self, seconds: float) -> None:
        """Move the clock forward, firing due callbacks in order."""
        target = self.now + seconds
        while True:
            due = [timer for timer in self.pending if timer.due <= target]
            if not due:
                break
            timer = due[0]
            self._timers.remove(timer)
            self.now = timer.due
            timer.callback()
        self.now = target

    def cancel_all(self) -> None:
        for timer in self._timers:
            timer.cancel()
        self._timers.clear()
