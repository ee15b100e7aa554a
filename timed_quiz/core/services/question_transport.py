"""HTTP client for the quiz server's question/answer protocol."""

from __future__ import annotations

import logging
from typing import Protocol

import httpx
from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as SchemaValidationError

from timed_quiz.core.errors import TransportError
from timed_quiz.core.models import AnswerSubmission, Question, TransportResponse

logger = logging.getLogger(__name__)


class QuestionTransport(Protocol):
    """Remote question source. Every failure surfaces as ``TransportError``."""

    def fetch_question(self, url: str) -> Question: ...

    def submit_answer(self, url: str, submission: AnswerSubmission) -> TransportResponse: ...


class QuestionDocument(BaseModel):
    """Question as served by the quiz server."""

    model_config = ConfigDict(populate_by_name=True)

    id: int | None = None
    question: str
    alternatives: dict[str, str] | None = None
    next_url: str = Field(alias="nextURL")
    limit: int | None = Field(default=None, gt=0)


class AnswerResultDocument(BaseModel):
    """Reply to a submitted answer; ``nextURL`` is missing after the last question."""

    model_config = ConfigDict(populate_by_name=True)

    next_url: str | None = Field(default=None, alias="nextURL")
    message: str | None = None


class HttpQuestionTransport:
    """Blocking transport built on ``httpx.Client``.

    Relative ``nextURL`` values are resolved against the URL of the request
    that returned them.
    """

    def __init__(self, client: httpx.Client | None = None) -> None:
        # No request timeout: a hung server leaves the session waiting.
        self._client = client if client is not None else httpx.Client(timeout=None)

    def close(self) -> None:
        self._client.close()

    def fetch_question(self, url: str) -> Question:
        response = self._send("GET", url)
        try:
            document = QuestionDocument.model_validate_json(response.content)
        except SchemaValidationError as exc:
            raise TransportError(f"Malformed question document from {url}.") from exc

        return Question(
            text=document.question,
            submit_url=self._resolve(response, document.next_url),
            alternatives=document.alternatives or None,
            time_limit_ms=document.limit * 1000 if document.limit is not None else None,
            question_id=document.id,
        )

    def submit_answer(self, url: str, submission: AnswerSubmission) -> TransportResponse:
        response = self._send("POST", url, json=submission.to_payload())
        if not response.content.strip():
            return TransportResponse()
        try:
            document = AnswerResultDocument.model_validate_json(response.content)
        except SchemaValidationError as exc:
            raise TransportError(f"Malformed answer response from {url}.") from exc

        next_url = self._resolve(response, document.next_url) if document.next_url else None
        return TransportResponse(next_url=next_url, message=document.message)

    def _send(self, method: str, url: str, **kwargs: object) -> httpx.Response:
        try:
            response = self._client.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            logger.warning("%s %s failed: %s", method, url, exc)
            raise TransportError(f"Could not reach the quiz server at {url}.") from exc

        if not response.is_success:
            logger.warning("%s %s returned status %d", method, url, response.status_code)
            raise TransportError("Server returned an error.", status_code=response.status_code)
        return response

    @staticmethod
    def _resolve(response: httpx.Response, url: str) -> str:
        return str(response.request.url.join(url))
