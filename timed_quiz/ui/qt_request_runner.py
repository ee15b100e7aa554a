"""Runs transport calls on a worker thread and reports back on the GUI thread."""

from __future__ import annotations

import logging
from typing import Callable

from PySide6.QtCore import QObject, QRunnable, Qt, QThreadPool, Signal, Slot

from timed_quiz.core.errors import TransportError

logger = logging.getLogger(__name__)


class _RequestTask(QRunnable):
    def __init__(self, call: Callable[[], object], on_result, on_error, completed: Signal) -> None:
        super().__init__()
        self._call = call
        self._on_result = on_result
        self._on_error = on_error
        self._completed = completed

    def run(self) -> None:
        try:
            result = self._call()
        except TransportError as exc:
            self._completed.emit(self._on_error, exc)
            return
        except Exception as exc:
            logger.exception("Unexpected failure while contacting the quiz server")
            error = TransportError(f"Unexpected transport failure: {exc}")
            error.__cause__ = exc
            self._completed.emit(self._on_error, error)
            return
        self._completed.emit(self._on_result, result)


class QtRequestRunner(QObject):
    """Single-threaded request runner.

    Calls execute one at a time on a private thread pool. Their outcome is
    delivered through a queued signal, so callbacks always run on the thread
    that owns this object.
    """

    _completed = Signal(object, object)

    def __init__(self, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._pool = QThreadPool(self)
        self._pool.setMaxThreadCount(1)
        self._completed.connect(self._deliver, Qt.QueuedConnection)

    def submit(self, call, on_result, on_error) -> None:
        self._pool.start(_RequestTask(call, on_result, on_error, self._completed))

    def wait_for_done(self, timeout_ms: int = -1) -> bool:
        return self._pool.waitForDone(timeout_ms)

    @Slot(object, object)
    def _deliver(self, callback: Callable[[object], None], payload: object) -> None:
        callback(payload)
