"""FastAPI practice server speaking the quiz server's question/answer protocol."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from threading import Thread
from typing import Any, Mapping

from fastapi import FastAPI, HTTPException, Request
from pydantic import BaseModel
import uvicorn

from timed_quiz.constants.about import APP_NAME, APP_VERSION
from timed_quiz.constants.network_constants import DEFAULT_HOST, DEFAULT_PORT

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class PracticeQuestion:
    """A question together with its accepted answer."""

    id: int
    text: str
    answer: str
    alternatives: Mapping[str, str] | None = None
    time_limit_seconds: int | None = None

    def accepts(self, answer: str) -> bool:
        candidate = answer.strip()
        if self.alternatives is not None:
            return candidate == self.answer
        return candidate.casefold() == self.answer.strip().casefold()


DEFAULT_PRACTICE_QUESTIONS: tuple[PracticeQuestion, ...] = (
    PracticeQuestion(id=1, text="What is 2 + 2?", answer="4"),
    PracticeQuestion(
        id=2,
        text="Which planet is known as the **Red Planet**?",
        answer="alt2",
        alternatives={"alt1": "Venus", "alt2": "Mars", "alt3": "Jupiter"},
    ),
    PracticeQuestion(id=3, text="What is the capital of Sweden?", answer="Stockholm", time_limit_seconds=15),
    PracticeQuestion(
        id=4,
        text="Which keyword starts a function definition in Python?",
        answer="alt1",
        alternatives={"alt1": "def", "alt2": "func", "alt3": "lambda", "alt4": "fn"},
    ),
)

WRONG_ANSWER_DETAIL = "Wrong answer! :("


class AnswerPayload(BaseModel):
    """Payload schema for submitted answers."""

    answer: str


def create_practice_app(questions: tuple[PracticeQuestion, ...] = DEFAULT_PRACTICE_QUESTIONS) -> FastAPI:
    """Create a FastAPI application serving ``questions`` in order."""
    if not questions:
        raise ValueError("Practice quiz must contain at least one question.")
    by_id = {question.id: question for question in questions}
    if len(by_id) != len(questions):
        raise ValueError("Practice question ids must be unique.")
    following = {
        current.id: nxt.id for current, nxt in zip(questions, questions[1:])
    }

    app = FastAPI(title=f"{APP_NAME} practice server", version=APP_VERSION)

    def lookup(question_id: int) -> PracticeQuestion:
        question = by_id.get(question_id)
        if question is None:
            raise HTTPException(status_code=404, detail=f"Question {question_id} not found")
        return question

    @app.get("/question/{question_id}")
    def get_question(question_id: int, request: Request) -> dict[str, Any]:
        question = lookup(question_id)
        document: dict[str, Any] = {
            "id": question.id,
            "question": question.text,
            "nextURL": str(request.url_for("submit_answer", question_id=question.id)),
        }
        if question.alternatives is not None:
            document["alternatives"] = dict(question.alternatives)
        if question.time_limit_seconds is not None:
            document["limit"] = question.time_limit_seconds
        return document

    @app.post("/answer/{question_id}")
    def submit_answer(question_id: int, payload: AnswerPayload, request: Request) -> dict[str, Any]:
        question = lookup(question_id)
        if not question.accepts(payload.answer):
            raise HTTPException(status_code=400, detail=WRONG_ANSWER_DETAIL)

        next_id = following.get(question.id)
        if next_id is None:
            return {"message": "Correct answer! You completed the quiz."}
        return {
            "nextURL": str(request.url_for("get_question", question_id=next_id)),
            "message": "Correct answer!",
        }

    return app


def start_practice_server(host: str = DEFAULT_HOST, port: int = DEFAULT_PORT) -> Thread:
    """Start the practice server in a background daemon thread."""
    app = create_practice_app()
    config = uvicorn.Config(app=app, host=host, port=port, log_level="info")
    server = uvicorn.Server(config)

    def run_server() -> None:
        server.run()

    thread = Thread(target=run_server, name="PracticeQuizServer", daemon=True)
    thread.start()
    logger.info("Practice quiz server listening on http://%s:%d", host, port)
    return thread
