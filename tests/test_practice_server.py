import pytest
from fastapi.testclient import TestClient

from timed_quiz.server.practice_server import (
    DEFAULT_PRACTICE_QUESTIONS,
    WRONG_ANSWER_DETAIL,
    PracticeQuestion,
    create_practice_app,
)


@pytest.fixture()
def client():
    return TestClient(create_practice_app())


def test_get_free_text_question(client):
    res = client.get("/question/1")
    assert res.status_code == 200
    document = res.json()
    assert document == {
        "id": 1,
        "question": "What is 2 + 2?",
        "nextURL": "http://testserver/answer/1",
    }


def test_get_question_with_alternatives_and_limit(client):
    document = client.get("/question/2").json()
    assert document["alternatives"] == {"alt1": "Venus", "alt2": "Mars", "alt3": "Jupiter"}
    assert "limit" not in document

    assert client.get("/question/3").json()["limit"] == 15


def test_correct_answer_links_next_question(client):
    res = client.post("/answer/1", json={"answer": " 4 "})
    assert res.status_code == 200
    assert res.json()["nextURL"] == "http://testserver/question/2"


def test_wrong_answer_is_rejected(client):
    res = client.post("/answer/2", json={"answer": "alt1"})
    assert res.status_code == 400
    assert res.json()["detail"] == WRONG_ANSWER_DETAIL


def test_last_answer_has_no_next_url(client):
    last = DEFAULT_PRACTICE_QUESTIONS[-1]
    res = client.post(f"/answer/{last.id}", json={"answer": last.answer})
    assert res.status_code == 200
    assert "nextURL" not in res.json()


def test_unknown_question_is_not_found(client):
    assert client.get("/question/99").status_code == 404
    assert client.post("/answer/99", json={"answer": "x"}).status_code == 404


def test_missing_answer_field_is_unprocessable(client):
    assert client.post("/answer/1", json={}).status_code == 422


def test_free_text_answers_ignore_case():
    question = PracticeQuestion(id=1, text="Capital?", answer="Stockholm")
    assert question.accepts("  stockholm ")
    assert not question.accepts("Oslo")


def test_rejects_empty_or_duplicate_question_sets():
    with pytest.raises(ValueError):
        create_practice_app(())
    duplicate = PracticeQuestion(id=1, text="Q", answer="a")
    with pytest.raises(ValueError):
        create_practice_app((duplicate, duplicate))
