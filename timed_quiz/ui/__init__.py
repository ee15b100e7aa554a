"""Qt UI components for the quiz client."""

from .qt_request_runner import QtRequestRunner
from .qt_scheduler import QtScheduler
from .quiz_window import QuizWindow

__all__ = [
    "QuizWindow",
    "QtRequestRunner",
    "QtScheduler",
]
