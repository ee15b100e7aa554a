"""Service for keeping the persisted top-N leaderboard of fastest results."""

from __future__ import annotations

import json
import logging

from pydantic import BaseModel, FiniteFloat, TypeAdapter
from pydantic import ValidationError as SchemaValidationError

from timed_quiz.constants.quiz_constants import LEADERBOARD_CAPACITY, LEADERBOARD_STORAGE_KEY
from timed_quiz.core.errors import PersistenceError
from timed_quiz.core.models import ScoreEntry
from timed_quiz.core.services.key_value_store import KeyValueStore

logger = logging.getLogger(__name__)


class StoredScore(BaseModel):
    """On-disk representation of a leaderboard entry."""

    nickname: str
    time: FiniteFloat


_STORED_SCORES = TypeAdapter(list[StoredScore])


class LeaderboardStore:
    """Keeps the fastest results, ascending by elapsed time.

    Reading never fails: a missing, unreadable or malformed value is treated as
    an empty leaderboard. Writes are best effort.
    """

    def __init__(
        self,
        store: KeyValueStore,
        key: str = LEADERBOARD_STORAGE_KEY,
        capacity: int = LEADERBOARD_CAPACITY,
    ) -> None:
        if capacity <= 0:
            raise ValueError("Leaderboard capacity must be a positive integer.")
        self._store = store
        self._key = key
        self._capacity = capacity

    @property
    def capacity(self) -> int:
        return self._capacity

    def list(self) -> list[ScoreEntry]:
        """Return the current ranking without modifying it."""
        return self._load()[: self._capacity]

    def record(self, entry: ScoreEntry) -> list[ScoreEntry]:
        """Insert a result, keep the fastest entries, persist and return them."""
        entries = self._load()
        entries.append(entry)
        # sorted() is stable: equal times keep insertion order
        ranked = sorted(entries, key=lambda e: e.elapsed_ms)[: self._capacity]
        self._save(ranked)
        return ranked

    def _load(self) -> list[ScoreEntry]:
        try:
            raw = self._store.get(self._key)
        except PersistenceError as exc:
            logger.warning("Could not read leaderboard: %s", exc)
            return []
        if not raw:
            return []
        try:
            stored = _STORED_SCORES.validate_json(raw)
        except SchemaValidationError:
            logger.warning("Discarding malformed leaderboard data under '%s'", self._key)
            return []
        entries = [ScoreEntry(nickname=item.nickname, elapsed_ms=round(item.time)) for item in stored]
        return sorted(entries, key=lambda e: e.elapsed_ms)

    def _save(self, entries: list[ScoreEntry]) -> None:
        document = json.dumps([{"nickname": e.nickname, "time": e.elapsed_ms} for e in entries])
        try:
            self._store.set(self._key, document)
        except PersistenceError as exc:
            logger.warning("Could not save leaderboard: %s", exc)
