"""State machine driving a single-player timed quiz session."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
import logging
from typing import Callable

from timed_quiz.constants.quiz_constants import (
    ANSWER_REQUIRED_MESSAGE,
    DEFAULT_TIME_LIMIT_MS,
    NETWORK_ERROR_MESSAGE,
    NICKNAME_REQUIRED_MESSAGE,
    REJECTED_ANSWER_MESSAGE,
    TIMEOUT_MESSAGE,
    TIMER_TICK_DIVISOR,
    UNKNOWN_ALTERNATIVE_MESSAGE,
    VICTORY_MESSAGE_TEMPLATE,
)
from timed_quiz.core.countdown_timer import CountdownTimer, Scheduler
from timed_quiz.core.errors import QuestionTimeoutError, QuizError, TransportError, ValidationError
from timed_quiz.core.models import (
    AnswerSubmission,
    GameOverReason,
    Phase,
    Question,
    ScoreEntry,
    SessionSnapshot,
    SessionState,
    TransportResponse,
)
from timed_quiz.core.services.leaderboard import LeaderboardStore
from timed_quiz.core.services.question_transport import QuestionTransport
from timed_quiz.core.services.request_runner import InlineRequestRunner, RequestRunner

logger = logging.getLogger(__name__)

SnapshotListener = Callable[[SessionSnapshot], None]


# --- Events ---


@dataclass(frozen=True, slots=True)
class Started:
    pass


@dataclass(frozen=True, slots=True)
class NicknameConfirmed:
    nickname: str


@dataclass(frozen=True, slots=True)
class AnswerSubmitted:
    answer: str


@dataclass(frozen=True, slots=True)
class RestartRequested:
    pass


@dataclass(frozen=True, slots=True)
class QuestionLoaded:
    token: int
    question: Question


@dataclass(frozen=True, slots=True)
class AnswerAccepted:
    token: int
    response: TransportResponse


@dataclass(frozen=True, slots=True)
class RequestFailed:
    token: int
    error: TransportError


@dataclass(frozen=True, slots=True)
class TimerTicked:
    cycle: int
    remaining_ms: int


@dataclass(frozen=True, slots=True)
class TimerExpired:
    cycle: int


_TRANSPORT_EVENTS = (QuestionLoaded, AnswerAccepted, RequestFailed)
_TIMER_EVENTS = (TimerTicked, TimerExpired)

_EVENT_HANDLERS: dict[type, tuple[frozenset[Phase], Callable[..., None]]] = {}


def _handles(event_type: type, *phases: Phase):
    """Register a handler for ``event_type``, accepted only in ``phases``."""

    def register(func):
        _EVENT_HANDLERS[event_type] = (frozenset(phases), func)
        return func

    return register


class SessionController:
    """Sequences question fetch, timed answering, submission and the final outcome.

    All inputs (user actions, transport completions and timer notifications)
    go through ``_dispatch``, which applies them one at a time. An event is
    applied only when the current phase accepts it. Transport completions must
    also answer the most recent request and timer events must belong to the
    current countdown; anything else is stale and dropped.
    """

    def __init__(
        self,
        start_url: str,
        transport: QuestionTransport,
        leaderboard: LeaderboardStore,
        scheduler: Scheduler,
        runner: RequestRunner | None = None,
        default_time_limit_ms: int = DEFAULT_TIME_LIMIT_MS,
        tick_divisor: int = TIMER_TICK_DIVISOR,
    ) -> None:
        if default_time_limit_ms <= 0:
            raise ValueError("Time limit must be a positive number of milliseconds.")
        self._start_url = start_url
        self._transport = transport
        self._leaderboard = leaderboard
        self._scheduler = scheduler
        self._runner = runner if runner is not None else InlineRequestRunner()
        self._default_time_limit_ms = default_time_limit_ms

        self._timer = CountdownTimer(scheduler, tick_divisor)
        self._timer.add_tick_listener(self._on_timer_tick)
        self._timer.add_expiry_listener(self._on_timer_expired)

        self._state = SessionState()
        self._question: Question | None = None
        self._remaining_ms: int | None = None
        self._time_limit_ms: int | None = None
        self._message: str | None = None
        self._game_over_reason: GameOverReason | None = None
        self._last_error: QuizError | None = None
        self._leaderboard_entries: tuple[ScoreEntry, ...] = ()
        self._request_token: int = 0

        self._events: deque[object] = deque()
        self._dispatching: bool = False
        self._listeners: list[SnapshotListener] = []
        self._snapshot = self._build_snapshot()

    # --- Presentation surface ---

    def subscribe(self, listener: SnapshotListener) -> None:
        self._listeners.append(listener)

    @property
    def snapshot(self) -> SessionSnapshot:
        return self._snapshot

    @property
    def phase(self) -> Phase:
        return self._state.phase

    @property
    def total_elapsed_ms(self) -> int:
        return self._state.total_elapsed_ms

    @property
    def is_timer_armed(self) -> bool:
        return self._timer.is_armed

    @property
    def last_error(self) -> QuizError | None:
        return self._last_error

    def start(self) -> None:
        self._dispatch(Started())

    def nickname_confirmed(self, nickname: str) -> None:
        self._dispatch(NicknameConfirmed(nickname))

    def answer_submitted(self, answer: str) -> None:
        self._dispatch(AnswerSubmitted(answer))

    def restart(self) -> None:
        self._dispatch(RestartRequested())

    # --- Dispatch ---

    def _dispatch(self, event: object) -> None:
        self._events.append(event)
        if self._dispatching:
            return
        self._dispatching = True
        try:
            while self._events:
                self._apply(self._events.popleft())
        finally:
            self._dispatching = False
            self._events.clear()

    def _apply(self, event: object) -> None:
        phases, handler = _EVENT_HANDLERS[type(event)]
        if self._state.phase not in phases or self._is_stale(event):
            logger.debug("Ignoring %s in phase %s", type(event).__name__, self._state.phase.name)
            return
        handler(self, event)

    def _is_stale(self, event: object) -> bool:
        if isinstance(event, _TRANSPORT_EVENTS):
            return event.token != self._request_token
        if isinstance(event, _TIMER_EVENTS):
            return event.cycle != self._timer.cycle
        return False

    # --- Handlers ---

    @_handles(Started, Phase.IDLE)
    def _handle_started(self, event: Started) -> None:
        self._leaderboard_entries = tuple(self._leaderboard.list())
        self._enter(Phase.AWAITING_NICKNAME)

    @_handles(NicknameConfirmed, Phase.AWAITING_NICKNAME)
    def _handle_nickname(self, event: NicknameConfirmed) -> None:
        try:
            nickname = self._validate_nickname(event.nickname)
        except ValidationError as exc:
            self._message = exc.message
            self._publish()
            return

        self._state.nickname = nickname
        self._state.total_elapsed_ms = 0
        self._state.question_started_at_ms = None
        self._message = None
        self._enter(Phase.LOADING)
        self._request_question(self._start_url)

    @_handles(QuestionLoaded, Phase.LOADING)
    def _handle_question_loaded(self, event: QuestionLoaded) -> None:
        question = event.question
        time_limit = question.time_limit_ms or self._default_time_limit_ms
        self._question = question
        self._time_limit_ms = time_limit
        self._remaining_ms = time_limit
        self._message = None
        self._timer.arm(time_limit)
        self._state.question_started_at_ms = self._scheduler.monotonic_ms()
        self._enter(Phase.PRESENTING)

    @_handles(AnswerSubmitted, Phase.PRESENTING)
    def _handle_answer(self, event: AnswerSubmitted) -> None:
        try:
            answer = self._validate_answer(event.answer)
        except ValidationError as exc:
            self._message = exc.message
            self._publish()
            return

        submit_url = self._question.submit_url
        self._stop_question_clock()
        self._message = None
        self._enter(Phase.SUBMITTING)
        self._submit_answer(submit_url, AnswerSubmission(answer=answer))

    @_handles(TimerTicked, Phase.PRESENTING)
    def _handle_timer_tick(self, event: TimerTicked) -> None:
        self._remaining_ms = event.remaining_ms
        self._publish()

    @_handles(TimerExpired, Phase.PRESENTING)
    def _handle_timer_expired(self, event: TimerExpired) -> None:
        self._stop_question_clock()
        self._end_session(GameOverReason.TIMEOUT, QuestionTimeoutError(TIMEOUT_MESSAGE))

    @_handles(AnswerAccepted, Phase.SUBMITTING)
    def _handle_answer_accepted(self, event: AnswerAccepted) -> None:
        response = event.response
        if response.is_final:
            self._record_victory()
            return
        self._question = None
        self._enter(Phase.LOADING)
        self._request_question(response.next_url)

    @_handles(RequestFailed, Phase.LOADING, Phase.SUBMITTING)
    def _handle_request_failed(self, event: RequestFailed) -> None:
        if self._state.phase == Phase.LOADING:
            reason = GameOverReason.NETWORK
        else:
            reason = GameOverReason.REJECTED
        logger.warning("Transport failed during %s: %s", self._state.phase.name, event.error)
        self._end_session(reason, event.error)

    @_handles(RestartRequested, Phase.VICTORY, Phase.GAME_OVER)
    def _handle_restart(self, event: RestartRequested) -> None:
        self._timer.disarm()
        # Invalidate anything still in flight from the finished session.
        self._request_token += 1
        self._state = SessionState(phase=self._state.phase)
        self._clear_question()
        self._message = None
        self._game_over_reason = None
        self._last_error = None
        self._leaderboard_entries = tuple(self._leaderboard.list())
        self._enter(Phase.AWAITING_NICKNAME)

    # --- Helpers ---

    def _enter(self, phase: Phase) -> None:
        previous = self._state.phase
        self._state.phase = phase
        logger.info("Session %s -> %s", previous.name, phase.name)
        self._publish()

    def _request_question(self, url: str) -> None:
        self._request_token += 1
        token = self._request_token
        logger.info("Requesting question from %s", url)
        self._runner.submit(
            lambda: self._transport.fetch_question(url),
            lambda question: self._dispatch(QuestionLoaded(token, question)),
            lambda error: self._dispatch(RequestFailed(token, error)),
        )

    def _submit_answer(self, url: str, submission: AnswerSubmission) -> None:
        self._request_token += 1
        token = self._request_token
        logger.info("Submitting answer to %s", url)
        self._runner.submit(
            lambda: self._transport.submit_answer(url, submission),
            lambda response: self._dispatch(AnswerAccepted(token, response)),
            lambda error: self._dispatch(RequestFailed(token, error)),
        )

    def _stop_question_clock(self) -> None:
        self._timer.disarm()
        started = self._state.question_started_at_ms
        if started is not None:
            elapsed = self._scheduler.monotonic_ms() - started
            if self._time_limit_ms is not None:
                elapsed = min(elapsed, self._time_limit_ms)
            self._state.total_elapsed_ms += max(0, elapsed)
        self._state.question_started_at_ms = None
        self._remaining_ms = None

    def _clear_question(self) -> None:
        self._question = None
        self._remaining_ms = None
        self._time_limit_ms = None

    def _record_victory(self) -> None:
        entry = ScoreEntry(nickname=self._state.nickname, elapsed_ms=self._state.total_elapsed_ms)
        self._leaderboard_entries = tuple(self._leaderboard.record(entry))
        self._clear_question()
        self._message = VICTORY_MESSAGE_TEMPLATE.format(
            nickname=entry.nickname,
            seconds=entry.elapsed_ms / 1000,
        )
        logger.info("%s finished the quiz in %d ms", entry.nickname, entry.elapsed_ms)
        self._enter(Phase.VICTORY)

    def _end_session(self, reason: GameOverReason, error: QuizError) -> None:
        messages = {
            GameOverReason.NETWORK: NETWORK_ERROR_MESSAGE,
            GameOverReason.TIMEOUT: TIMEOUT_MESSAGE,
            GameOverReason.REJECTED: REJECTED_ANSWER_MESSAGE,
        }
        self._clear_question()
        self._game_over_reason = reason
        self._last_error = error
        self._message = messages[reason]
        self._leaderboard_entries = tuple(self._leaderboard.list())
        self._enter(Phase.GAME_OVER)

    @staticmethod
    def _validate_nickname(nickname: str) -> str:
        cleaned = nickname.strip()
        if not cleaned:
            raise ValidationError(NICKNAME_REQUIRED_MESSAGE)
        return cleaned

    def _validate_answer(self, answer: str) -> str:
        cleaned = answer.strip()
        if not cleaned:
            raise ValidationError(ANSWER_REQUIRED_MESSAGE)
        alternatives = self._question.alternatives if self._question else None
        if alternatives is not None and cleaned not in alternatives:
            raise ValidationError(UNKNOWN_ALTERNATIVE_MESSAGE)
        return cleaned

    def _publish(self) -> None:
        self._snapshot = self._build_snapshot()
        for listener in list(self._listeners):
            listener(self._snapshot)

    def _build_snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            phase=self._state.phase,
            nickname=self._state.nickname,
            total_elapsed_ms=self._state.total_elapsed_ms,
            question=self._question,
            remaining_ms=self._remaining_ms,
            time_limit_ms=self._time_limit_ms,
            message=self._message,
            game_over_reason=self._game_over_reason,
            leaderboard=self._leaderboard_entries,
        )

    # --- Timer callbacks ---

    def _on_timer_tick(self, remaining_ms: int) -> None:
        self._dispatch(TimerTicked(self._timer.cycle, remaining_ms))

    def _on_timer_expired(self) -> None:
        self._dispatch(TimerExpired(self._timer.cycle))
