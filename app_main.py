"""Application entry point for the Timed Quiz client."""

from __future__ import annotations

import sys

from PySide6.QtWidgets import QApplication

from timed_quiz.config import AppSettings
from timed_quiz.constants.network_constants import SHUTDOWN_WAIT_MS
from timed_quiz.core.services.key_value_store import QSettingsKeyValueStore
from timed_quiz.core.services.leaderboard import LeaderboardStore
from timed_quiz.core.services.question_transport import HttpQuestionTransport
from timed_quiz.core.session_controller import SessionController
from timed_quiz.server.practice_server import start_practice_server
from timed_quiz.ui import QtRequestRunner, QtScheduler, QuizWindow
from timed_quiz.utils.logging_config import configure_logging


def main() -> None:
    """Read settings, optionally start the practice server, and launch the Qt UI."""
    settings = AppSettings.from_environment()
    logger = configure_logging(settings.log_level)
    logger.info("Starting Timed Quiz…")

    if settings.practice_server:
        start_practice_server(host=settings.host, port=settings.port)
    logger.info("First question will be fetched from %s", settings.start_url)

    app = QApplication(sys.argv)
    transport = HttpQuestionTransport()
    leaderboard = LeaderboardStore(QSettingsKeyValueStore(settings.settings_path))
    runner = QtRequestRunner()
    controller = SessionController(
        start_url=settings.start_url,
        transport=transport,
        leaderboard=leaderboard,
        scheduler=QtScheduler(),
        runner=runner,
        default_time_limit_ms=settings.time_limit_ms,
    )
    window = QuizWindow(controller)
    window.show()
    controller.start()

    exit_code = app.exec()
    if not runner.wait_for_done(SHUTDOWN_WAIT_MS):
        logger.warning("A quiz server request was still running at shutdown")
    transport.close()
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
