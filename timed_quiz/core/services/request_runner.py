"""Execution strategies for transport calls issued by the session controller."""

from __future__ import annotations

from typing import Callable, Protocol, TypeVar

from timed_quiz.core.errors import TransportError

T = TypeVar("T")


class RequestRunner(Protocol):
    """Runs one transport call and reports its outcome through exactly one callback."""

    def submit(
        self,
        call: Callable[[], T],
        on_result: Callable[[T], None],
        on_error: Callable[[TransportError], None],
    ) -> None: ...


class InlineRequestRunner:
    """Runs the call immediately on the caller's thread."""

    def submit(
        self,
        call: Callable[[], T],
        on_result: Callable[[T], None],
        on_error: Callable[[TransportError], None],
    ) -> None:
        try:
            result = call()
        except TransportError as exc:
            on_error(exc)
            return
        on_result(result)
