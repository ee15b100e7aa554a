"""Widget listing the fastest finished sessions."""

from __future__ import annotations

from PySide6.QtWidgets import QGroupBox, QListWidget, QListWidgetItem, QVBoxLayout, QWidget

from timed_quiz.constants.ui_constants import LEADERBOARD_EMPTY, LEADERBOARD_HEADING
from timed_quiz.core.models import ScoreEntry


class LeaderboardView(QGroupBox):
    """Read-only list of leaderboard entries."""

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(LEADERBOARD_HEADING, parent)
        layout = QVBoxLayout()
        self.setLayout(layout)
        self.entry_list = QListWidget(self)
        self.entry_list.setAlternatingRowColors(True)
        layout.addWidget(self.entry_list)
        self._rendered: tuple[ScoreEntry, ...] | None = None

    def set_entries(self, entries: tuple[ScoreEntry, ...]) -> None:
        if entries == self._rendered:
            return
        self._rendered = entries
        self.entry_list.clear()
        if not entries:
            QListWidgetItem(LEADERBOARD_EMPTY, self.entry_list)
            return
        for position, entry in enumerate(entries, start=1):
            QListWidgetItem(
                f"{position}. {entry.nickname} - {entry.elapsed_ms / 1000:.2f}s",
                self.entry_list,
            )
