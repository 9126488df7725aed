# Interview lifecycle: current_question advances once per accepted answer via compare-and-swap.
from datetime import datetime

from flask import current_app
from sqlalchemy import desc

from errors import GenerationFailure, NotFound, StaleSubmission
from models import (
    STATUS_ACTIVE,
    STATUS_COMPLETED,
    Interview,
    InterviewAnswer,
    InterviewQuestion,
    db,
)
from services.evaluation_service import MODE_AUTO, evaluate_answer
from services.question_service import generate_questions


def _load_owned_interview(owner_id: str, interview_id: str) -> Interview:
    # Absent and not-owned look the same to the caller.
    interview = Interview.query.filter_by(id=interview_id, owner_id=owner_id).first()
    if interview is None:
        raise NotFound("Interview not found")
    return interview


def start_interview(ai_client, owner_id: str, category: str, count: int):
    questions, source = generate_questions(ai_client, category, count)
    if not questions:
        raise GenerationFailure("No questions available for this interview")

    interview = Interview(
        owner_id=owner_id,
        type="text",
        category=category,
        status=STATUS_ACTIVE,
        current_question=0,
        total_questions=len(questions),
    )
    db.session.add(interview)
    db.session.flush()

    rows = [
        InterviewQuestion(
            interview_id=interview.id,
            question_text=item["questionText"],
            category=item["category"],
            order=item["order"],
        )
        for item in questions
    ]
    db.session.add_all(rows)
    db.session.commit()

    current_app.logger.info(
        "Interview %s started for user %s: category=%s questions=%d source=%s",
        interview.id,
        owner_id,
        category,
        len(rows),
        source,
    )
    return {
        "interviewId": interview.id,
        "firstQuestion": rows[0].to_dict(),
        "totalQuestions": len(rows),
        "currentQuestion": 0,
        "category": category,
    }


def _reject_stale(interview_id: str, reason: str):
    db.session.rollback()
    current_app.logger.warning("Stale submission rejected for interview %s: %s", interview_id, reason)
    raise StaleSubmission()


def submit_answer(ai_client, owner_id: str, interview_id: str, question_id: str, answer_text: str, mode: str = MODE_AUTO):
    interview = _load_owned_interview(owner_id, interview_id)
    if interview.status == STATUS_COMPLETED:
        raise NotFound("Interview not found")

    question = InterviewQuestion.query.filter_by(id=question_id, interview_id=interview.id).first()
    if question is None:
        raise NotFound("Question not found")

    current_index = interview.current_question
    total_questions = interview.total_questions
    if question.order != current_index:
        _reject_stale(interview.id, f"question order {question.order} != current {current_index}")

    evaluation = evaluate_answer(question.question_text, answer_text, ai_client=ai_client, mode=mode)

    db.session.add(
        InterviewAnswer(
            interview_id=interview.id,
            question_id=question.id,
            answer_text=answer_text,
            score=evaluation["score"],
            feedback=evaluation["feedback"],
        )
    )

    next_index = current_index + 1
    now = datetime.utcnow()
    completed = next_index >= total_questions
    values = {"current_question": next_index, "updated_at": now}
    final_score = None
    if completed:
        # Autoflush puts the new answer in this query.
        answers = InterviewAnswer.query.filter_by(interview_id=interview.id).all()
        final_score = sum(float(item.score or 0) for item in answers) / len(answers)
        values.update(status=STATUS_COMPLETED, score=final_score, completed_at=now)

    updated = Interview.query.filter_by(
        id=interview.id,
        status=STATUS_ACTIVE,
        current_question=current_index,
    ).update(values, synchronize_session=False)
    if updated != 1:
        _reject_stale(interview.id, "interview changed during submission")
    db.session.commit()

    if completed:
        current_app.logger.info("Interview %s completed with score %.2f", interview_id, final_score)
        return {"evaluation": evaluation, "completed": True, "finalScore": final_score}

    next_question = InterviewQuestion.query.filter_by(interview_id=interview_id, order=next_index).first()
    return {
        "evaluation": evaluation,
        "completed": False,
        "nextQuestion": next_question.to_dict() if next_question else None,
        "currentQuestion": next_index,
        "totalQuestions": total_questions,
    }


def list_interviews(owner_id: str):
    rows = (
        Interview.query.filter_by(owner_id=owner_id)
        .order_by(desc(Interview.created_at))
        .all()
    )
    return [row.to_dict() for row in rows]


def get_interview(owner_id: str, interview_id: str):
    interview = _load_owned_interview(owner_id, interview_id)
    return {
        "interview": interview.to_dict(),
        "questions": [item.to_dict() for item in interview.questions],
        "answers": [item.to_dict() for item in interview.answers],
    }
