from datetime import datetime
from uuid import uuid4

from flask_sqlalchemy import SQLAlchemy


db = SQLAlchemy()

STATUS_ACTIVE = "active"
STATUS_COMPLETED = "completed"


def _new_id() -> str:
    return uuid4().hex


def _iso(value):
    return value.isoformat() if value else None


class User(db.Model):
    __tablename__ = "users"

    id = db.Column(db.String(32), primary_key=True, default=_new_id)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    name = db.Column(db.String(150), nullable=True)
    password_hash = db.Column(db.String(512), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def to_dict(self):
        return {
            "id": self.id,
            "email": self.email,
            "name": self.name,
            "createdAt": _iso(self.created_at),
            "updatedAt": _iso(self.updated_at),
        }


class Interview(db.Model):
    __tablename__ = "interviews"

    id = db.Column(db.String(32), primary_key=True, default=_new_id)
    owner_id = db.Column(db.String(32), db.ForeignKey("users.id"), nullable=False, index=True)
    type = db.Column(db.String(20), nullable=False, default="text")
    category = db.Column(db.String(50), nullable=False)
    status = db.Column(db.String(20), nullable=False, default=STATUS_ACTIVE)
    current_question = db.Column(db.Integer, nullable=False, default=0)
    total_questions = db.Column(db.Integer, nullable=False)
    score = db.Column(db.Float, nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
    completed_at = db.Column(db.DateTime, nullable=True)

    questions = db.relationship(
        "InterviewQuestion",
        backref="interview",
        order_by="InterviewQuestion.order",
        cascade="all, delete-orphan",
        lazy=True,
    )
    answers = db.relationship(
        "InterviewAnswer",
        backref="interview",
        order_by="InterviewAnswer.created_at",
        cascade="all, delete-orphan",
        lazy=True,
    )

    def to_dict(self):
        return {
            "id": self.id,
            "type": self.type,
            "category": self.category,
            "status": self.status,
            "score": self.score,
            "createdAt": _iso(self.created_at),
            "completedAt": _iso(self.completed_at),
            "totalQuestions": self.total_questions,
            "completedQuestions": self.current_question,
        }


class InterviewQuestion(db.Model):
    __tablename__ = "interview_questions"
    __table_args__ = (db.UniqueConstraint("interview_id", "order", name="uq_interview_question_order"),)

    id = db.Column(db.String(32), primary_key=True, default=_new_id)
    interview_id = db.Column(db.String(32), db.ForeignKey("interviews.id"), nullable=False, index=True)
    question_text = db.Column(db.Text, nullable=False)
    category = db.Column(db.String(50), nullable=False)
    order = db.Column(db.Integer, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    def to_dict(self):
        return {
            "id": self.id,
            "interviewId": self.interview_id,
            "questionText": self.question_text,
            "category": self.category,
            "order": self.order,
        }


class InterviewAnswer(db.Model):
    __tablename__ = "interview_answers"

    id = db.Column(db.String(32), primary_key=True, default=_new_id)
    interview_id = db.Column(db.String(32), db.ForeignKey("interviews.id"), nullable=False, index=True)
    question_id = db.Column(db.String(32), db.ForeignKey("interview_questions.id"), nullable=False)
    answer_text = db.Column(db.Text, nullable=False)
    score = db.Column(db.Float, nullable=True)
    feedback = db.Column(db.Text, nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    def to_dict(self):
        return {
            "id": self.id,
            "interviewId": self.interview_id,
            "questionId": self.question_id,
            "answerText": self.answer_text,
            "score": self.score,
            "feedback": self.feedback,
            "createdAt": _iso(self.created_at),
        }


class QuestionBank(db.Model):
    __tablename__ = "question_bank"

    id = db.Column(db.Integer, primary_key=True)
    question = db.Column(db.Text, nullable=False)
    category = db.Column(db.String(50), nullable=True, index=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
