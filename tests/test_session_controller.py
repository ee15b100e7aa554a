import pytest

from timed_quiz.constants.quiz_constants import (
    ANSWER_REQUIRED_MESSAGE,
    NETWORK_ERROR_MESSAGE,
    NICKNAME_REQUIRED_MESSAGE,
    REJECTED_ANSWER_MESSAGE,
    TIMEOUT_MESSAGE,
    UNKNOWN_ALTERNATIVE_MESSAGE,
)
from timed_quiz.core.errors import QuestionTimeoutError, TransportError
from timed_quiz.core.models import GameOverReason, Phase, Question, ScoreEntry, TransportResponse
from timed_quiz.core.services.leaderboard import LeaderboardStore

START_URL = "http://quiz.test/question/1"
U2 = "http://quiz.test/answer/1"


def choice_question(submit_url=U2, **kwargs):
    return Question(
        text="Pick one",
        submit_url=submit_url,
        alternatives={"a": "First", "b": "Second"},
        **kwargs,
    )


def text_question(submit_url, **kwargs):
    return Question(text="Type it", submit_url=submit_url, **kwargs)


def test_start_awaits_nickname_with_leaderboard(make_controller, leaderboard):
    leaderboard.record(ScoreEntry("Grace", 4000))

    controller = make_controller()

    assert controller.phase == Phase.AWAITING_NICKNAME
    assert controller.snapshot.leaderboard == (ScoreEntry("Grace", 4000),)


@pytest.mark.parametrize("nickname", ["Ada", "  Bob  ", "x"])
def test_valid_nickname_starts_loading(make_controller, deferred_runner, transport, nickname):
    controller = make_controller(runner=deferred_runner)

    controller.nickname_confirmed(nickname)

    assert controller.phase == Phase.LOADING
    assert controller.total_elapsed_ms == 0
    assert controller.snapshot.nickname == nickname.strip()
    assert len(deferred_runner.pending) == 1


@pytest.mark.parametrize("nickname", ["", "   ", "\t\n"])
def test_blank_nickname_is_rejected(make_controller, transport, nickname):
    controller = make_controller()

    controller.nickname_confirmed(nickname)

    assert controller.phase == Phase.AWAITING_NICKNAME
    assert controller.snapshot.message == NICKNAME_REQUIRED_MESSAGE
    assert transport.fetched == []


def test_ada_wins_and_is_recorded(make_controller, transport, scheduler, leaderboard):
    transport.questions[START_URL] = choice_question()
    transport.answers[U2] = TransportResponse()
    controller = make_controller()

    controller.nickname_confirmed("Ada")
    assert controller.phase == Phase.PRESENTING
    assert controller.snapshot.question.alternatives == {"a": "First", "b": "Second"}

    scheduler.advance(1_500)
    controller.answer_submitted("b")

    assert transport.submitted == [(U2, "b")]
    assert controller.phase == Phase.VICTORY
    assert controller.phase.is_terminal
    assert controller.total_elapsed_ms == 1_500
    assert leaderboard.list() == [ScoreEntry("Ada", controller.total_elapsed_ms)]
    assert controller.snapshot.leaderboard == (ScoreEntry("Ada", 1_500),)
    assert not controller.is_timer_armed


def test_timeout_ends_session(make_controller, transport, scheduler, leaderboard):
    transport.questions[START_URL] = choice_question()
    controller = make_controller()
    controller.nickname_confirmed("Ada")

    scheduler.advance(9_999)
    assert controller.phase == Phase.PRESENTING

    scheduler.advance(1)

    assert controller.phase == Phase.GAME_OVER
    assert controller.snapshot.game_over_reason == GameOverReason.TIMEOUT
    assert controller.snapshot.message == TIMEOUT_MESSAGE
    assert isinstance(controller.last_error, QuestionTimeoutError)
    assert controller.total_elapsed_ms == 10_000
    assert not controller.is_timer_armed
    assert leaderboard.list() == []


def test_answer_after_timeout_is_ignored(make_controller, transport, scheduler):
    transport.questions[START_URL] = choice_question()
    controller = make_controller()
    controller.nickname_confirmed("Ada")
    scheduler.advance(10_000)

    controller.answer_submitted("a")

    assert transport.submitted == []
    assert controller.phase == Phase.GAME_OVER


def test_first_question_failure_never_arms_timer(make_controller, transport, scheduler):
    transport.questions[START_URL] = TransportError("Server returned an error.", status_code=503)
    controller = make_controller()
    phases = []
    controller.subscribe(lambda snapshot: phases.append(snapshot.phase))

    controller.nickname_confirmed("Ada")

    assert phases == [Phase.LOADING, Phase.GAME_OVER]
    assert controller.snapshot.game_over_reason == GameOverReason.NETWORK
    assert controller.snapshot.message == NETWORK_ERROR_MESSAGE
    assert not controller.is_timer_armed
    assert scheduler.pending_count() == 0


def test_rejected_answer_ends_session(make_controller, transport):
    transport.questions[START_URL] = choice_question()
    transport.answers[U2] = TransportError("Server returned an error.", status_code=400)
    controller = make_controller()
    controller.nickname_confirmed("Ada")

    controller.answer_submitted("a")

    assert controller.phase == Phase.GAME_OVER
    assert controller.snapshot.game_over_reason == GameOverReason.REJECTED
    assert controller.snapshot.message == REJECTED_ANSWER_MESSAGE
    assert controller.last_error.status_code == 400


def test_multiple_questions_accumulate_elapsed_time(make_controller, transport, scheduler):
    q2_url = "http://quiz.test/question/2"
    transport.questions[START_URL] = text_question("http://quiz.test/answer/1")
    transport.questions[q2_url] = text_question("http://quiz.test/answer/2")
    transport.answers["http://quiz.test/answer/1"] = TransportResponse(next_url=q2_url)
    transport.answers["http://quiz.test/answer/2"] = TransportResponse(message="Done")
    controller = make_controller()
    controller.nickname_confirmed("Ada")

    scheduler.advance(2_000)
    controller.answer_submitted(" 42 ")
    assert controller.phase == Phase.PRESENTING
    assert controller.snapshot.remaining_ms == 10_000

    scheduler.advance(3_000)
    controller.answer_submitted("forty-two")

    assert transport.fetched == [START_URL, q2_url]
    assert transport.submitted == [
        ("http://quiz.test/answer/1", "42"),
        ("http://quiz.test/answer/2", "forty-two"),
    ]
    assert controller.phase == Phase.VICTORY
    assert controller.total_elapsed_ms == 5_000


def test_in_flight_time_is_not_counted(make_controller, transport, scheduler, deferred_runner):
    transport.questions[START_URL] = choice_question()
    transport.answers[U2] = TransportResponse()
    controller = make_controller(runner=deferred_runner)
    controller.nickname_confirmed("Ada")
    scheduler.advance(5_000)
    deferred_runner.pending[0].resolve()

    scheduler.advance(1_000)
    controller.answer_submitted("a")
    scheduler.advance(7_000)
    deferred_runner.pending[1].resolve()

    assert controller.phase == Phase.VICTORY
    assert controller.total_elapsed_ms == 1_000


def test_question_time_limit_overrides_default(make_controller, transport, scheduler):
    transport.questions[START_URL] = choice_question(time_limit_ms=3_000)
    controller = make_controller()
    controller.nickname_confirmed("Ada")
    assert controller.snapshot.time_limit_ms == 3_000

    scheduler.advance(3_000)

    assert controller.snapshot.game_over_reason == GameOverReason.TIMEOUT


def test_ticks_update_remaining_time(make_controller, transport, scheduler):
    transport.questions[START_URL] = choice_question()
    controller = make_controller()
    controller.nickname_confirmed("Ada")

    scheduler.advance(2_500)

    assert controller.snapshot.remaining_ms == 7_500


@pytest.mark.parametrize(
    "answer, message",
    [("", ANSWER_REQUIRED_MESSAGE), ("   ", ANSWER_REQUIRED_MESSAGE), ("c", UNKNOWN_ALTERNATIVE_MESSAGE)],
)
def test_invalid_answer_keeps_question_live(make_controller, transport, scheduler, answer, message):
    transport.questions[START_URL] = choice_question()
    controller = make_controller()
    controller.nickname_confirmed("Ada")

    controller.answer_submitted(answer)

    assert controller.phase == Phase.PRESENTING
    assert controller.snapshot.message == message
    assert controller.is_timer_armed
    assert transport.submitted == []


def test_timer_armed_only_while_presenting(make_controller, transport, scheduler):
    q2_url = "http://quiz.test/question/2"
    transport.questions[START_URL] = choice_question()
    transport.questions[q2_url] = text_question("http://quiz.test/answer/2")
    transport.answers[U2] = TransportResponse(next_url=q2_url)
    controller = make_controller()
    observed = []
    controller.subscribe(
        lambda snapshot: observed.append((snapshot.phase, controller.is_timer_armed))
    )

    controller.nickname_confirmed("Ada")
    scheduler.advance(500)
    controller.answer_submitted("a")
    scheduler.advance(10_000)

    assert observed
    assert all(armed == (phase == Phase.PRESENTING) for phase, armed in observed)
    assert observed[-1] == (Phase.GAME_OVER, False)


def test_stale_transport_completion_is_ignored(make_controller, transport, deferred_runner):
    transport.questions[START_URL] = choice_question()
    transport.answers[U2] = TransportResponse()
    controller = make_controller(runner=deferred_runner)
    controller.nickname_confirmed("Ada")
    first_fetch = deferred_runner.pending[0]
    first_fetch.resolve()
    controller.answer_submitted("b")
    assert controller.phase == Phase.SUBMITTING

    # A late failure for the earlier fetch must not end the submission.
    first_fetch.on_error(TransportError("late"))
    first_fetch.on_result(choice_question())
    assert controller.phase == Phase.SUBMITTING

    deferred_runner.pending[1].resolve()
    assert controller.phase == Phase.VICTORY


def test_restart_resets_session(make_controller, transport, scheduler, leaderboard):
    transport.questions[START_URL] = choice_question()
    transport.answers[U2] = TransportResponse()
    controller = make_controller()
    controller.nickname_confirmed("Ada")
    scheduler.advance(1_000)
    controller.answer_submitted("a")

    controller.restart()

    snapshot = controller.snapshot
    assert snapshot.phase == Phase.AWAITING_NICKNAME
    assert snapshot.nickname == ""
    assert snapshot.total_elapsed_ms == 0
    assert snapshot.question is None
    assert snapshot.message is None
    assert snapshot.game_over_reason is None
    assert snapshot.leaderboard == (ScoreEntry("Ada", 1_000),)

    controller.nickname_confirmed("Bob")
    scheduler.advance(400)
    controller.answer_submitted("b")
    assert [e.nickname for e in leaderboard.list()] == ["Bob", "Ada"]


def test_restart_only_from_terminal_phase(make_controller, transport):
    transport.questions[START_URL] = choice_question()
    controller = make_controller()
    controller.nickname_confirmed("Ada")

    controller.restart()

    assert controller.phase == Phase.PRESENTING
    assert controller.is_timer_armed


def test_victory_survives_storage_failure(make_controller, transport, broken_store):
    transport.questions[START_URL] = choice_question()
    transport.answers[U2] = TransportResponse()
    controller = make_controller(leaderboard=LeaderboardStore(broken_store))
    controller.nickname_confirmed("Ada")

    controller.answer_submitted("a")

    assert controller.phase == Phase.VICTORY
    assert "Ada" in controller.snapshot.message


def test_snapshots_are_published_to_subscribers(make_controller, transport):
    transport.questions[START_URL] = choice_question()
    controller = make_controller()
    received = []
    controller.subscribe(received.append)

    controller.nickname_confirmed("Ada")

    assert [s.phase for s in received] == [Phase.LOADING, Phase.PRESENTING]
    assert received[-1] is controller.snapshot


def test_start_survives_non_finite_stored_time(make_controller, store):
    store.set("quiz_high_scores", '[{"nickname": "Ada", "time": NaN}]')

    controller = make_controller()

    assert controller.phase == Phase.AWAITING_NICKNAME
    assert controller.snapshot.leaderboard == ()
