"""String key-value stores backing the leaderboard."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from PySide6.QtCore import QSettings

from timed_quiz.core.errors import PersistenceError


class KeyValueStore(Protocol):
    """Minimal persistence substrate: string values addressed by string keys."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...


class InMemoryKeyValueStore:
    """Process-local store, used headless and in tests."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._values: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        self._values[key] = value


class QSettingsKeyValueStore:
    """Store values in a QSettings ini file so they survive restarts."""

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._settings = QSettings(str(file_path), QSettings.IniFormat)

    def get(self, key: str) -> str | None:
        self._check_status("read")
        value = self._settings.value(key)
        if value is None:
            return None
        if not isinstance(value, str):
            raise PersistenceError(f"Stored value for '{key}' is not a string.")
        return value

    def set(self, key: str, value: str) -> None:
        self._settings.setValue(key, value)
        self._settings.sync()
        self._check_status("write")

    def _check_status(self, operation: str) -> None:
        status = self._settings.status()
        if status == QSettings.AccessError:
            raise PersistenceError(f"Unable to {operation} settings file {self._file_path}.")
        if status == QSettings.FormatError:
            raise PersistenceError(f"Settings file {self._file_path} is malformed.")
