"""Qt main window rendering session snapshots."""

from __future__ import annotations

from PySide6.QtCore import Qt
from PySide6.QtWidgets import QLabel, QMainWindow, QStackedWidget, QVBoxLayout, QWidget

from timed_quiz.constants.ui_constants import (
    LOADING_TEXT,
    SUBMITTING_TEXT,
    WINDOW_MIN_WIDTH,
    WINDOW_TITLE,
)
from timed_quiz.core.models import Phase, SessionSnapshot
from timed_quiz.core.session_controller import SessionController
from timed_quiz.ui.components.nickname_panel import NicknamePanel
from timed_quiz.ui.components.question_panel import QuestionPanel
from timed_quiz.ui.components.result_panel import ResultPanel


class QuizWindow(QMainWindow):
    """Shows the page matching the session phase and forwards user input.

    The window keeps no session data of its own; every change arrives as a
    snapshot from the controller.
    """

    def __init__(self, controller: SessionController) -> None:
        super().__init__()
        self.setWindowTitle(WINDOW_TITLE)
        self.setMinimumWidth(WINDOW_MIN_WIDTH)
        self.controller = controller
        self._shown_phase: Phase | None = None

        self._build_ui()
        controller.subscribe(self.render)
        self.render(controller.snapshot)

    def _build_ui(self) -> None:
        central_widget = QWidget(self)
        self.setCentralWidget(central_widget)
        root_layout = QVBoxLayout()
        central_widget.setLayout(root_layout)

        self.page_stack = QStackedWidget(self)

        self.nickname_panel = NicknamePanel(on_confirm=self.controller.nickname_confirmed, parent=self)
        self.loading_label = QLabel(LOADING_TEXT, self)
        self.loading_label.setAlignment(Qt.AlignCenter)
        self.question_panel = QuestionPanel(on_submit=self.controller.answer_submitted, parent=self)
        self.result_panel = ResultPanel(on_restart=self.controller.restart, parent=self)

        self.page_stack.addWidget(self.nickname_panel)
        self.page_stack.addWidget(self.loading_label)
        self.page_stack.addWidget(self.question_panel)
        self.page_stack.addWidget(self.result_panel)
        root_layout.addWidget(self.page_stack)

    def render(self, snapshot: SessionSnapshot) -> None:
        phase = snapshot.phase
        entering = phase != self._shown_phase
        self._shown_phase = phase

        if phase in (Phase.IDLE, Phase.AWAITING_NICKNAME):
            if entering:
                self.nickname_panel.reset_input()
            self.nickname_panel.render(snapshot)
            self.page_stack.setCurrentWidget(self.nickname_panel)
        elif phase in (Phase.LOADING, Phase.SUBMITTING):
            self.loading_label.setText(LOADING_TEXT if phase == Phase.LOADING else SUBMITTING_TEXT)
            self.page_stack.setCurrentWidget(self.loading_label)
        elif phase == Phase.PRESENTING:
            self.question_panel.render(snapshot)
            self.page_stack.setCurrentWidget(self.question_panel)
        elif phase.is_terminal:
            self.result_panel.render(snapshot)
            self.page_stack.setCurrentWidget(self.result_panel)
