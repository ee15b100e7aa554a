"""Application settings read from environment variables."""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path
from typing import Mapping

from timed_quiz.constants.network_constants import (
    DEFAULT_HOST,
    DEFAULT_PORT,
    DEFAULT_START_URL,
    PRACTICE_START_PATH,
)
from timed_quiz.constants.quiz_constants import DEFAULT_TIME_LIMIT_MS

DEFAULT_SETTINGS_PATH = Path.home() / ".timed_quiz" / "leaderboard.ini"

_TRUE_VALUES = {"1", "true", "yes", "on"}


@dataclass(frozen=True, slots=True)
class AppSettings:
    start_url: str = DEFAULT_START_URL
    time_limit_ms: int = DEFAULT_TIME_LIMIT_MS
    practice_server: bool = False
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    log_level: str = "INFO"
    settings_path: Path = DEFAULT_SETTINGS_PATH

    @classmethod
    def from_environment(cls, environ: Mapping[str, str] | None = None) -> AppSettings:
        """Build settings from ``QUIZ_*`` variables, falling back to defaults.

        With ``QUIZ_PRACTICE_SERVER`` enabled and no explicit ``QUIZ_START_URL``,
        the session starts at the local practice server.
        """
        env = os.environ if environ is None else environ
        practice_server = env.get("QUIZ_PRACTICE_SERVER", "").strip().lower() in _TRUE_VALUES
        host = env.get("QUIZ_HOST") or DEFAULT_HOST
        port = _int_setting(env, "QUIZ_PORT", DEFAULT_PORT)

        start_url = env.get("QUIZ_START_URL")
        if not start_url:
            start_url = f"http://{host}:{port}{PRACTICE_START_PATH}" if practice_server else DEFAULT_START_URL

        time_limit_ms = _int_setting(env, "QUIZ_TIME_LIMIT_MS", DEFAULT_TIME_LIMIT_MS)
        if time_limit_ms <= 0:
            raise ValueError("QUIZ_TIME_LIMIT_MS must be a positive integer.")

        settings_path = env.get("QUIZ_SETTINGS_PATH")
        return cls(
            start_url=start_url,
            time_limit_ms=time_limit_ms,
            practice_server=practice_server,
            host=host,
            port=port,
            log_level=(env.get("QUIZ_LOG_LEVEL") or "INFO").upper(),
            settings_path=Path(settings_path) if settings_path else DEFAULT_SETTINGS_PATH,
        )


def _int_setting(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}.") from exc
