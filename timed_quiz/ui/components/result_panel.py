"""Terminal page shown after victory or game over."""

from __future__ import annotations

from PySide6.QtCore import Qt
from PySide6.QtWidgets import QLabel, QPushButton, QVBoxLayout, QWidget

from timed_quiz.constants.ui_constants import GAME_OVER_HEADING, RESTART_BUTTON, VICTORY_HEADING
from timed_quiz.core.models import Phase, SessionSnapshot
from timed_quiz.ui.components.leaderboard_view import LeaderboardView


class ResultPanel(QWidget):
    """Shows the outcome message, the leaderboard and a restart button."""

    def __init__(self, on_restart: callable, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.on_restart = on_restart
        self._build_ui()

    def _build_ui(self) -> None:
        layout = QVBoxLayout()
        self.setLayout(layout)

        self.heading_label = QLabel("", self)
        self.heading_label.setAlignment(Qt.AlignCenter)
        layout.addWidget(self.heading_label)

        self.message_label = QLabel("", self)
        self.message_label.setTextFormat(Qt.PlainText)
        self.message_label.setWordWrap(True)
        self.message_label.setAlignment(Qt.AlignCenter)
        layout.addWidget(self.message_label)

        self.leaderboard_view = LeaderboardView(self)
        layout.addWidget(self.leaderboard_view, stretch=1)

        self.restart_button = QPushButton(RESTART_BUTTON, self)
        self.restart_button.clicked.connect(lambda: self.on_restart())
        layout.addWidget(self.restart_button)

    def render(self, snapshot: SessionSnapshot) -> None:
        heading = VICTORY_HEADING if snapshot.phase == Phase.VICTORY else GAME_OVER_HEADING
        self.heading_label.setText(f"<h2>{heading}</h2>")
        self.message_label.setText(snapshot.message or "")
        self.leaderboard_view.set_entries(snapshot.leaderboard)
