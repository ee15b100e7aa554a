import itertools

import pytest

from timed_quiz.core.errors import PersistenceError, TransportError
from timed_quiz.core.services.key_value_store import InMemoryKeyValueStore
from timed_quiz.core.services.leaderboard import LeaderboardStore
from timed_quiz.core.session_controller import SessionController

START_URL = "http://quiz.test/question/1"


class FakeCall:
    def __init__(self, due_ms, seq, callback):
        self.due_ms = due_ms
        self.seq = seq
        self.callback = callback
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


class FakeScheduler:
    """Virtual clock. Time only moves when a test calls ``advance``.

    With ``honour_cancel=False`` cancelled callbacks still run, which mimics a
    callback that was already dispatched when the cancel arrived.
    """

    def __init__(self, honour_cancel=True):
        self.now = 0
        self.honour_cancel = honour_cancel
        self._queue = []
        self._seq = itertools.count()

    def monotonic_ms(self):
        return self.now

    def call_later(self, delay_ms, callback):
        call = FakeCall(self.now + delay_ms, next(self._seq), callback)
        self._queue.append(call)
        return call

    def pending_count(self):
        return sum(1 for call in self._queue if not call.cancelled)

    def advance(self, ms):
        target = self.now + ms
        while True:
            due = [
                call for call in self._queue
                if call.due_ms <= target and (not call.cancelled or not self.honour_cancel)
            ]
            if not due:
                break
            call = min(due, key=lambda c: (c.due_ms, c.seq))
            self._queue.remove(call)
            self.now = call.due_ms
            call.callback()
        self.now = target


class ScriptedTransport:
    """Transport answering from dictionaries keyed by URL."""

    def __init__(self, questions=None, answers=None):
        self.questions = dict(questions or {})
        self.answers = dict(answers or {})
        self.fetched = []
        self.submitted = []

    def fetch_question(self, url):
        self.fetched.append(url)
        outcome = self.questions[url]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    def submit_answer(self, url, submission):
        self.submitted.append((url, submission.answer))
        outcome = self.answers[url]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


class PendingCall:
    def __init__(self, call, on_result, on_error):
        self.call = call
        self.on_result = on_result
        self.on_error = on_error

    def resolve(self):
        try:
            result = self.call()
        except TransportError as exc:
            self.on_error(exc)
            return
        self.on_result(result)


class DeferredRunner:
    """Holds transport calls until the test resolves them."""

    def __init__(self):
        self.pending = []

    def submit(self, call, on_result, on_error):
        self.pending.append(PendingCall(call, on_result, on_error))


class BrokenStore:
    def get(self, key):
        raise PersistenceError("disk unavailable")

    def set(self, key, value):
        raise PersistenceError("disk unavailable")


@pytest.fixture()
def scheduler():
    return FakeScheduler()


@pytest.fixture()
def late_scheduler():
    return FakeScheduler(honour_cancel=False)


@pytest.fixture()
def store():
    return InMemoryKeyValueStore()


@pytest.fixture()
def leaderboard(store):
    return LeaderboardStore(store)


@pytest.fixture()
def transport():
    return ScriptedTransport()


@pytest.fixture()
def make_controller(transport, leaderboard, scheduler):
    def factory(runner=None, **kwargs):
        controller = SessionController(
            start_url=START_URL,
            transport=kwargs.pop("transport", transport),
            leaderboard=kwargs.pop("leaderboard", leaderboard),
            scheduler=scheduler,
            runner=runner,
            **kwargs,
        )
        controller.start()
        return controller

    return factory


@pytest.fixture()
def broken_store():
    return BrokenStore()


@pytest.fixture()
def deferred_runner():
    return DeferredRunner()
