"""Domain models for the timed quiz session."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from types import MappingProxyType
from typing import Mapping


class Phase(Enum):
    """Discrete states of the session state machine."""

    IDLE = auto()
    AWAITING_NICKNAME = auto()
    LOADING = auto()
    PRESENTING = auto()
    SUBMITTING = auto()
    VICTORY = auto()
    GAME_OVER = auto()

    @property
    def is_terminal(self) -> bool:
        return self in (Phase.VICTORY, Phase.GAME_OVER)


class GameOverReason(Enum):
    """Cause of a session ending without victory."""

    NETWORK = auto()
    TIMEOUT = auto()
    REJECTED = auto()


@dataclass(frozen=True, slots=True)
class Question:
    """A question received from the quiz server.

    ``alternatives`` maps choice keys to display text in server order. When it
    is ``None`` the question expects a free-text answer.
    """

    text: str
    submit_url: str
    alternatives: Mapping[str, str] | None = None
    time_limit_ms: int | None = None
    question_id: int | None = None

    def __post_init__(self) -> None:
        if self.alternatives is not None and not isinstance(self.alternatives, MappingProxyType):
            object.__setattr__(self, "alternatives", MappingProxyType(dict(self.alternatives)))

    @property
    def is_closed_choice(self) -> bool:
        return self.alternatives is not None


@dataclass(frozen=True, slots=True)
class AnswerSubmission:
    """Answer payload posted to the question's submit URL."""

    answer: str

    def to_payload(self) -> dict[str, str]:
        return {"answer": self.answer}


@dataclass(frozen=True, slots=True)
class TransportResponse:
    """Server reply to a submitted answer. No ``next_url`` means the quiz is complete."""

    next_url: str | None = None
    message: str | None = None

    @property
    def is_final(self) -> bool:
        return not self.next_url


@dataclass(frozen=True, slots=True)
class ScoreEntry:
    """One leaderboard result."""

    nickname: str
    elapsed_ms: int


@dataclass(slots=True)
class SessionState:
    """Mutable bookkeeping owned by the session controller."""

    phase: Phase = Phase.IDLE
    nickname: str = ""
    total_elapsed_ms: int = 0
    question_started_at_ms: int | None = None


@dataclass(frozen=True, slots=True)
class SessionSnapshot:
    """Immutable view of the session handed to the presentation layer."""

    phase: Phase
    nickname: str = ""
    total_elapsed_ms: int = 0
    question: Question | None = None
    remaining_ms: int | None = None
    time_limit_ms: int | None = None
    message: str | None = None
    game_over_reason: GameOverReason | None = None
    leaderboard: tuple[ScoreEntry, ...] = field(default_factory=tuple)
