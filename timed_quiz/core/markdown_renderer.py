"""Markdown rendering for question text received from the quiz server.

Question text comes from a remote server and ends up in a rich-text QLabel.
Raw HTML is escaped and image syntax is not rendered, so a question cannot
inject markup or make the label load remote resources.
"""

from __future__ import annotations

from markdown_it import MarkdownIt

from timed_quiz.constants.ui_constants import QUESTION_TEXT_MISSING
from timed_quiz.core.models import Question


class QuestionMarkdownRenderer:
    """Converts a question's markdown text into label-safe HTML."""

    def __init__(self) -> None:
        self._markdown = (
            MarkdownIt("commonmark", {"html": False})
            .enable("strikethrough")
            .disable("image")
        )

    def render_question(self, question: Question) -> str:
        text = question.text.strip()
        if not text:
            return f"<p><em>{QUESTION_TEXT_MISSING}</em></p>"
        return self._markdown.render(text)


renderer = QuestionMarkdownRenderer()
