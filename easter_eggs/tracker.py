"""
Easter egg state machine.

A `ClickCounter` recognises a rapid multi-click gesture:

    idle(0) -click-> counting(1) -click-> counting(2) -click-> triggered

Every click replaces the decay timer; if it expires before the third click
the counter falls back to idle. Triggering resets the count at once.

The `EasterEggTracker` reacts to a trigger by unlocking the egg the first
time (which also turns matrix mode on for a fixed period) and by toggling
matrix mode on every later trigger. Each trigger emits one notification.
"""

from __future__ import annotations

import dataclasses
import logging
import threading
from functools import partial
from typing import Callable, Iterable, Optional

from easter_eggs.models import (
    TRIPLE_CLICK_EGG_ID,
    TRIPLE_CLICK_LOGO_TRIGGER,
    EasterEgg,
    Notification,
    default_eggs,
)
from easter_eggs.timers import Scheduler, TimerHandle

logger = logging.getLogger(__name__)

REQUIRED_CLICKS = 3
CLICK_WINDOW_SECONDS = 0.5
MATRIX_MODE_SECONDS = 10.0
UNLOCK_TOAST_SECONDS = 5.0
TOGGLE_TOAST_SECONDS = 2.0


class ClickCounter:
    def __init__(
        self,
        scheduler: Scheduler,
        on_trigger: Callable[[], None],
        *,
        required_clicks: int = REQUIRED_CLICKS,
        window: float = CLICK_WINDOW_SECONDS,
    ):
        self.scheduler = scheduler
        self.on_trigger = on_trigger
        self.required_clicks = required_clicks
        self.window = window
        self.count = 0
        self._decay: Optional[TimerHandle] = None
        self._generation = 0
        self._lock = threading.Lock()

    @property
    def state(self) -> str:
        return "counting" if self.count else "idle"

    def click(self) -> bool:
        """Register one click. Returns True when it completes the gesture."""
        with self._lock:
            self._cancel_decay()
            self.count += 1
            triggered = self.count >= self.required_clicks
            if triggered:
                self.count = 0
            else:
                self._generation += 1
                self._decay = self.scheduler.call_later(
                    self.window, partial(self._decay_expired, self._generation)
                )
        if triggered:
            self.on_trigger()
        return triggered

    def reset(self) -> None:
        with self._lock:
            self._cancel_decay()
            self.count = 0

    def _cancel_decay(self) -> None:
        if self._decay is not None:
            self._decay.cancel()
            self._decay = None

    def _decay_expired(self, generation: int) -> None:
        with self._lock:
            # A timer thread may lose the race against a newer click.
            if generation != self._generation:
                return
            self._decay = None
            self.count = 0


class EasterEggTracker:
    def __init__(
        self,
        scheduler: Scheduler,
        notify: Optional[Callable[[Notification], None]] = None,
        eggs: Optional[Iterable[EasterEgg]] = None,
        *,
        click_window: float = CLICK_WINDOW_SECONDS,
        matrix_mode_duration: float = MATRIX_MODE_SECONDS,
    ):
        self.scheduler = scheduler
        self.notify = notify or (lambda notification: None)
        self.matrix_mode_duration = matrix_mode_duration
        self.matrix_mode = False
        self._lock = threading.Lock()

        self._eggs: dict[str, EasterEgg] = {}
        for egg in eggs if eggs is not None else default_eggs():
            if egg.id in self._eggs:
                raise ValueError(f"Duplicate easter egg id: {egg.id}")
            self._eggs[egg.id] = dataclasses.replace(egg)

        self._counters = {
            egg.trigger: ClickCounter(
                scheduler,
                partial(self.handle_triple_click, egg.id),
                window=click_window,
            )
            for egg in self._eggs.values()
        }

    @property
    def eggs(self) -> list[EasterEgg]:
        return [dataclasses.replace(egg) for egg in self._eggs.values()]

    def get(self, egg_id: str) -> Optional[EasterEgg]:
        egg = self._eggs.get(egg_id)
        return dataclasses.replace(egg) if egg else None

    def is_unlocked(self, egg_id: str) -> bool:
        egg = self._eggs.get(egg_id)
        return bool(egg and egg.unlocked)

    @property
    def unlocked_count(self) -> int:
        return sum(1 for egg in self._eggs.values() if egg.unlocked)

    @property
    def total_count(self) -> int:
        return len(self._eggs)

    def counter(self, trigger: str = TRIPLE_CLICK_LOGO_TRIGGER) -> Optional[ClickCounter]:
        return self._counters.get(trigger)

    def click(self, trigger: str = TRIPLE_CLICK_LOGO_TRIGGER) -> bool:
        """Feed one click on the element bound to `trigger`."""
        counter = self._counters.get(trigger)
        if counter is None:
            return False
        return counter.click()

    def handle_triple_click(
        self, egg_id: str = TRIPLE_CLICK_EGG_ID
    ) -> Optional[Notification]:
        with self._lock:
            egg = self._eggs.get(egg_id)
            if egg is None:
                return None
            if not egg.unlocked:
                egg.unlocked = True
                self.matrix_mode = True
                self.scheduler.call_later(
                    self.matrix_mode_duration, self._disable_matrix_mode
                )
                logger.info("Easter egg %s unlocked", egg.id)
                notification = Notification(
                    title="🎉 Easter egg unlocked!",
                    description=f"{egg.icon} {egg.name} - Matrix mode activated!",
                    duration=UNLOCK_TOAST_SECONDS,
                )
            else:
                was_on = self.matrix_mode
                self.matrix_mode = not was_on
                notification = Notification(
                    title="Matrix mode deactivated" if was_on else "Matrix mode activated",
                    description="Click the logo 3 times to toggle",
                    duration=TOGGLE_TOAST_SECONDS,
                )
        self.notify(notification)
        return notification

    def _disable_matrix_mode(self) -> None:
        with self._lock:
            self.matrix_mode = False

    def reset_counters(self) -> None:
        for counter in self._counters.values():
            counter.reset()
