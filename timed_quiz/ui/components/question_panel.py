"""Page presenting the live question, its inputs and the countdown."""

from __future__ import annotations

import math

from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QButtonGroup,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QProgressBar,
    QPushButton,
    QRadioButton,
    QVBoxLayout,
    QWidget,
)

from timed_quiz.constants.ui_constants import (
    ANSWER_PLACEHOLDER,
    QUESTION_FONT_SIZE,
    QUESTION_HEADING,
    SUBMIT_BUTTON,
    TIME_PROGRESS_RANGE,
    TIME_REMAINING_TEMPLATE,
)
from timed_quiz.core.markdown_renderer import renderer
from timed_quiz.core.models import Question, SessionSnapshot


class QuestionPanel(QWidget):
    """Renders a closed-choice or free-text question from session snapshots."""

    def __init__(self, on_submit: callable, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.on_submit = on_submit
        self._rendered_question: Question | None = None
        self._alternative_buttons: QButtonGroup | None = None
        self._answer_input: QLineEdit | None = None
        self._build_ui()

    def _build_ui(self) -> None:
        layout = QVBoxLayout()
        self.setLayout(layout)

        # Timer row
        timer_row = QHBoxLayout()
        self.time_limit_label = QLabel("", self)
        timer_row.addWidget(self.time_limit_label)

        self.time_limit_progress = QProgressBar(self)
        self.time_limit_progress.setRange(0, TIME_PROGRESS_RANGE)
        self.time_limit_progress.setTextVisible(False)
        timer_row.addWidget(self.time_limit_progress, stretch=1)
        layout.addLayout(timer_row)

        layout.addWidget(QLabel(f"<h3>{QUESTION_HEADING}</h3>", self))

        self.question_label = QLabel("", self)
        self.question_label.setTextFormat(Qt.RichText)
        self.question_label.setWordWrap(True)
        self.question_label.setStyleSheet(f"font-size: {QUESTION_FONT_SIZE}pt;")
        layout.addWidget(self.question_label)

        self.inputs_area = QVBoxLayout()
        layout.addLayout(self.inputs_area)

        self.submit_button = QPushButton(SUBMIT_BUTTON, self)
        self.submit_button.clicked.connect(self._handle_submit)
        layout.addWidget(self.submit_button)

        self.message_label = QLabel("", self)
        self.message_label.setStyleSheet("color: #dc2626;")
        layout.addWidget(self.message_label)
        layout.addStretch()

    def render(self, snapshot: SessionSnapshot) -> None:
        question = snapshot.question
        if question is not None and question is not self._rendered_question:
            self._show_question(question)
        self._update_time_limit_indicator(snapshot.remaining_ms, snapshot.time_limit_ms)
        self.message_label.setText(snapshot.message or "")

    def _show_question(self, question: Question) -> None:
        self._rendered_question = question
        self.question_label.setText(renderer.render_question(question))
        self._clear_inputs()

        if question.alternatives is not None:
            self._alternative_buttons = QButtonGroup(self)
            for key, text in question.alternatives.items():
                button = QRadioButton(text, self)
                button.setProperty("choice_key", key)
                self._alternative_buttons.addButton(button)
                self.inputs_area.addWidget(button)
        else:
            self._answer_input = QLineEdit(self)
            self._answer_input.setPlaceholderText(ANSWER_PLACEHOLDER)
            self._answer_input.returnPressed.connect(self._handle_submit)
            self.inputs_area.addWidget(self._answer_input)
            self._answer_input.setFocus()

    def _clear_inputs(self) -> None:
        while self.inputs_area.count():
            item = self.inputs_area.takeAt(0)
            widget = item.widget()
            if widget is not None:
                widget.deleteLater()
        if self._alternative_buttons is not None:
            self._alternative_buttons.deleteLater()
        self._alternative_buttons = None
        self._answer_input = None

    def _handle_submit(self) -> None:
        if self._alternative_buttons is not None:
            selected = self._alternative_buttons.checkedButton()
            answer = selected.property("choice_key") if selected is not None else ""
        elif self._answer_input is not None:
            answer = self._answer_input.text()
        else:
            return
        self.on_submit(answer)

    def _update_time_limit_indicator(self, remaining_ms: int | None, time_limit_ms: int | None) -> None:
        if remaining_ms is None or not time_limit_ms:
            self.time_limit_label.setText("")
            self.time_limit_progress.setValue(0)
            return
        fraction = max(0.0, min(1.0, remaining_ms / time_limit_ms))
        self.time_limit_progress.setValue(int(fraction * TIME_PROGRESS_RANGE))
        seconds_left = max(0, math.ceil(remaining_ms / 1000))
        self.time_limit_label.setText(TIME_REMAINING_TEMPLATE.format(seconds=seconds_left))
