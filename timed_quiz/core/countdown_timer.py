"""Cancellable countdown timer with periodic remaining-time notifications."""

from __future__ import annotations

import logging
from typing import Callable, Protocol

from timed_quiz.constants.quiz_constants import TIMER_TICK_DIVISOR

logger = logging.getLogger(__name__)


class ScheduledCall(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    """Time source and one-shot callback scheduling used by the timer."""

    def monotonic_ms(self) -> int: ...

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> ScheduledCall: ...


TickListener = Callable[[int], None]
ExpiryListener = Callable[[], None]


class CountdownTimer:
    """Counts down from an armed duration and reports progress to observers.

    Each ``arm`` starts a new cycle. Notifications are bound to the cycle that
    scheduled them, so anything still queued for an earlier cycle is dropped
    once the timer is re-armed or disarmed. A cycle ends either with exactly one
    expiry notification or with an explicit ``disarm``, never both.
    """

    def __init__(self, scheduler: Scheduler, tick_divisor: int = TIMER_TICK_DIVISOR) -> None:
        if tick_divisor <= 0:
            raise ValueError("Tick divisor must be a positive integer.")
        self._scheduler = scheduler
        self._tick_divisor = tick_divisor
        self._tick_listeners: list[TickListener] = []
        self._expiry_listeners: list[ExpiryListener] = []

        self._cycle: int = 0
        self._armed: bool = False
        self._interval_ms: int = 0
        self._deadline_ms: int = 0
        self._pending: ScheduledCall | None = None

    def add_tick_listener(self, listener: TickListener) -> None:
        self._tick_listeners.append(listener)

    def add_expiry_listener(self, listener: ExpiryListener) -> None:
        self._expiry_listeners.append(listener)

    @property
    def is_armed(self) -> bool:
        return self._armed

    @property
    def cycle(self) -> int:
        return self._cycle

    @property
    def interval_ms(self) -> int:
        return self._interval_ms

    def remaining_ms(self) -> int:
        """Return the time left in the current cycle, or 0 when not armed."""
        if not self._armed:
            return 0
        return max(0, self._deadline_ms - self._scheduler.monotonic_ms())

    def arm(self, duration_ms: int) -> None:
        """Start a new countdown, replacing any countdown already running."""
        if duration_ms <= 0:
            raise ValueError("Countdown duration must be a positive number of milliseconds.")
        self.disarm()

        self._cycle += 1
        self._armed = True
        self._interval_ms = max(1, duration_ms // self._tick_divisor)
        self._deadline_ms = self._scheduler.monotonic_ms() + duration_ms
        logger.debug(
            "Timer armed (cycle=%d, duration=%dms, interval=%dms)",
            self._cycle,
            duration_ms,
            self._interval_ms,
        )
        self._schedule_next(self._interval_ms)

    def disarm(self) -> None:
        """Cancel the running countdown. Does nothing when not armed."""
        if not self._armed:
            return
        self._armed = False
        self._cancel_pending()
        logger.debug("Timer disarmed (cycle=%d)", self._cycle)

    def _schedule_next(self, delay_ms: int) -> None:
        cycle = self._cycle
        self._pending = self._scheduler.call_later(delay_ms, lambda: self._tick(cycle))

    def _cancel_pending(self) -> None:
        pending, self._pending = self._pending, None
        if pending is not None:
            pending.cancel()

    def _tick(self, cycle: int) -> None:
        if not self._armed or cycle != self._cycle:
            return
        self._pending = None

        remaining = self._deadline_ms - self._scheduler.monotonic_ms()
        if remaining <= 0:
            self._armed = False
            logger.debug("Timer expired (cycle=%d)", cycle)
            for listener in list(self._expiry_listeners):
                listener()
            return

        for listener in list(self._tick_listeners):
            listener(remaining)
            if not self._armed or cycle != self._cycle:
                return
        self._schedule_next(min(self._interval_ms, remaining))
