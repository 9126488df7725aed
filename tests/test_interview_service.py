import json

import pytest
from sqlalchemy import text

from errors import GenerationFailure, NotFound, StaleSubmission
from models import Interview, InterviewAnswer, QuestionBank, User, db
from services import interview_service
from services.interview_service import get_interview, list_interviews, start_interview, submit_answer
from tests.fakes import FakeAIClient


def _user(email):
    user = User(email=email, password_hash="unused")
    db.session.add(user)
    db.session.commit()
    return user.id


def _ai_questions(n):
    return json.dumps([{"questionText": f"Question {i}?"} for i in range(n)])


@pytest.fixture
def owner(app):
    return _user("owner@example.com")


def _question_ids(owner_id, interview_id):
    return [q["id"] for q in get_interview(owner_id, interview_id)["questions"]]


def test_start_interview_persists_questions(app, owner):
    result = start_interview(FakeAIClient(_ai_questions(5)), owner, "technical", 5)
    assert result["totalQuestions"] == 5
    assert result["currentQuestion"] == 0
    assert result["firstQuestion"]["order"] == 0
    assert result["firstQuestion"]["questionText"] == "Question 0?"

    interview = db.session.get(Interview, result["interviewId"])
    assert interview.status == "active"
    assert interview.total_questions == 5
    assert [q.order for q in interview.questions] == [0, 1, 2, 3, 4]


def test_start_interview_uses_bank_when_ai_fails(app, owner):
    result = start_interview(FakeAIClient("oops"), owner, "coding", 3)
    assert result["totalQuestions"] == 3
    assert result["firstQuestion"]["category"] == "coding"


def test_start_interview_fails_without_any_questions(app, owner):
    QuestionBank.query.delete()
    db.session.commit()
    with pytest.raises(GenerationFailure):
        start_interview(None, owner, "general", 4)
    assert Interview.query.count() == 0


def test_progression_and_completion(app, owner):
    client = FakeAIClient(
        _ai_questions(3),
        '{"score": 7, "feedback": "Good"}',
        "not json at all",
        '{"score": 10, "feedback": "Excellent"}',
    )
    started = start_interview(client, owner, "general", 3)
    interview_id = started["interviewId"]
    ids = _question_ids(owner, interview_id)

    first = submit_answer(client, owner, interview_id, ids[0], "answer one")
    assert first["completed"] is False
    assert first["currentQuestion"] == 1
    assert first["totalQuestions"] == 3
    assert first["nextQuestion"]["id"] == ids[1]
    assert first["evaluation"]["score"] == 7

    second = submit_answer(client, owner, interview_id, ids[1], "answer two")
    assert second["currentQuestion"] == 2
    assert second["evaluation"]["score"] == 6

    final = submit_answer(client, owner, interview_id, ids[2], "answer three")
    assert final["completed"] is True
    assert final["finalScore"] == pytest.approx((7 + 6 + 10) / 3)

    interview = db.session.get(Interview, interview_id)
    assert interview.status == "completed"
    assert interview.current_question == interview.total_questions == 3
    assert interview.score == pytest.approx(sum(a.score for a in interview.answers) / 3)
    assert interview.completed_at is not None


def test_submit_to_other_users_interview_is_not_found(app, owner):
    started = start_interview(None, owner, "general", 3)
    intruder = _user("intruder@example.com")
    with pytest.raises(NotFound):
        submit_answer(None, intruder, started["interviewId"], started["firstQuestion"]["id"], "hi")
    with pytest.raises(NotFound):
        get_interview(intruder, started["interviewId"])


def test_submit_unknown_or_foreign_question_is_not_found(app, owner):
    first = start_interview(None, owner, "general", 3)
    second = start_interview(None, owner, "technical", 3)
    with pytest.raises(NotFound):
        submit_answer(None, owner, first["interviewId"], "missing", "hi")
    with pytest.raises(NotFound):
        submit_answer(None, owner, first["interviewId"], second["firstQuestion"]["id"], "hi")


def test_completed_interview_rejects_answers(app, owner):
    started = start_interview(None, owner, "general", 3)
    ids = _question_ids(owner, started["interviewId"])
    for question_id in ids:
        submit_answer(None, owner, started["interviewId"], question_id, "An answer of moderate length for testing.")
    with pytest.raises(NotFound):
        submit_answer(None, owner, started["interviewId"], ids[-1], "again")
    assert InterviewAnswer.query.count() == 3


def test_repeated_submission_is_stale(app, owner):
    started = start_interview(None, owner, "general", 3)
    question_id = started["firstQuestion"]["id"]
    submit_answer(None, owner, started["interviewId"], question_id, "first try")
    with pytest.raises(StaleSubmission):
        submit_answer(None, owner, started["interviewId"], question_id, "retry")
    assert InterviewAnswer.query.count() == 1
    assert db.session.get(Interview, started["interviewId"]).current_question == 1


def test_lost_compare_and_swap_discards_answer(app, owner, monkeypatch):
    started = start_interview(None, owner, "general", 3)
    interview_id = started["interviewId"]
    real_evaluate = interview_service.evaluate_answer

    def evaluate_while_another_request_advances(question, answer, **kwargs):
        db.session.execute(
            text("UPDATE interviews SET current_question = current_question + 1 WHERE id = :id"),
            {"id": interview_id},
        )
        return real_evaluate(question, answer, **kwargs)

    monkeypatch.setattr(interview_service, "evaluate_answer", evaluate_while_another_request_advances)
    with pytest.raises(StaleSubmission):
        submit_answer(None, owner, interview_id, started["firstQuestion"]["id"], "answer")

    assert InterviewAnswer.query.count() == 0
    assert db.session.get(Interview, interview_id).current_question == 0


def test_list_interviews_only_returns_own(app, owner):
    start_interview(None, owner, "general", 3)
    start_interview(None, owner, "coding", 4)
    other = _user("other@example.com")
    start_interview(None, other, "general", 3)

    rows = list_interviews(owner)
    assert len(rows) == 2
    assert {row["category"] for row in rows} == {"general", "coding"}
    assert all(row["completedQuestions"] == 0 for row in rows)
