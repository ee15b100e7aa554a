"""Start page where the player enters a nickname."""

from __future__ import annotations

from PySide6.QtCore import Qt
from PySide6.QtWidgets import QLabel, QLineEdit, QPushButton, QVBoxLayout, QWidget

from timed_quiz.constants.ui_constants import (
    NICKNAME_PLACEHOLDER,
    START_BUTTON,
    WELCOME_HEADING,
    WELCOME_PROMPT,
)
from timed_quiz.core.models import SessionSnapshot
from timed_quiz.ui.components.leaderboard_view import LeaderboardView


class NicknamePanel(QWidget):
    """Collects the nickname and shows the current leaderboard."""

    def __init__(self, on_confirm: callable, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.on_confirm = on_confirm
        self._build_ui()

    def _build_ui(self) -> None:
        layout = QVBoxLayout()
        self.setLayout(layout)

        heading = QLabel(f"<h2>{WELCOME_HEADING}</h2>", self)
        heading.setAlignment(Qt.AlignCenter)
        layout.addWidget(heading)
        layout.addWidget(QLabel(WELCOME_PROMPT, self))

        self.nickname_input = QLineEdit(self)
        self.nickname_input.setPlaceholderText(NICKNAME_PLACEHOLDER)
        self.nickname_input.returnPressed.connect(self._handle_confirm)
        layout.addWidget(self.nickname_input)

        self.start_button = QPushButton(START_BUTTON, self)
        self.start_button.clicked.connect(self._handle_confirm)
        layout.addWidget(self.start_button)

        self.message_label = QLabel("", self)
        self.message_label.setStyleSheet("color: #dc2626;")
        layout.addWidget(self.message_label)

        self.leaderboard_view = LeaderboardView(self)
        layout.addWidget(self.leaderboard_view, stretch=1)

    def _handle_confirm(self) -> None:
        self.on_confirm(self.nickname_input.text())

    def render(self, snapshot: SessionSnapshot) -> None:
        self.message_label.setText(snapshot.message or "")
        self.leaderboard_view.set_entries(snapshot.leaderboard)

    def reset_input(self) -> None:
        self.nickname_input.clear()
        self.nickname_input.setFocus()
