"""Exception types raised by the quiz core."""

from __future__ import annotations


class QuizError(Exception):
    """Base class for all quiz session errors."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(QuizError):
    """Raised when user input is rejected locally; the user may correct it."""


class TransportError(QuizError):
    """Raised when the quiz server fails, rejects an answer, or cannot be reached."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code

    def __str__(self) -> str:
        if self.status_code is None:
            return self.message
        return f"{self.message} (status {self.status_code})"


class QuestionTimeoutError(QuizError):
    """Raised when a question's time limit runs out before an answer was submitted."""


class PersistenceError(QuizError):
    """Raised by key-value stores when reading or writing fails."""
