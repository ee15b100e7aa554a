"""QTimer-backed scheduler for the countdown timer."""

from __future__ import annotations

import time
from typing import Callable

from PySide6.QtCore import QObject, Qt, QTimer


class _QtScheduledCall:
    """Single-shot QTimer that can be cancelled until it fires."""

    def __init__(self, timer: QTimer) -> None:
        self._timer = timer
        self._active = True
        timer.timeout.connect(self._finish)

    def _finish(self) -> None:
        self._active = False
        self._timer.deleteLater()

    def cancel(self) -> None:
        if not self._active:
            return
        self._active = False
        self._timer.stop()
        self._timer.deleteLater()


class QtScheduler:
    """Schedules callbacks on the Qt event loop of the calling thread."""

    def __init__(self, parent: QObject | None = None) -> None:
        self._parent = parent

    def monotonic_ms(self) -> int:
        return time.monotonic_ns() // 1_000_000

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> _QtScheduledCall:
        timer = QTimer(self._parent)
        timer.setSingleShot(True)
        timer.setTimerType(Qt.PreciseTimer)
        timer.timeout.connect(callback)
        scheduled = _QtScheduledCall(timer)
        timer.start(max(0, delay_ms))
        return scheduled
