from flask import Blueprint, current_app, g, jsonify

from errors import ValidationFailure
from routes.helpers import json_body
from services.ai_client import get_ai_client
from services.auth_service import token_required
from services.interview_service import get_interview, list_interviews, start_interview, submit_answer
from services.question_service import normalize_category, normalize_count


interview_bp = Blueprint("interview", __name__, url_prefix="/api/interview")


@interview_bp.route("/start", methods=["POST"])
@token_required
def start():
    data = json_body()
    config = current_app.config
    category = normalize_category(data.get("category"))
    count = normalize_count(
        data.get("count"),
        default=config["DEFAULT_QUESTION_COUNT"],
        minimum=config["MIN_QUESTION_COUNT"],
        maximum=config["MAX_QUESTION_COUNT"],
    )
    result = start_interview(get_ai_client(), g.user_id, category, count)
    return jsonify(result)


@interview_bp.route("/answer", methods=["POST"])
@token_required
def answer():
    data = json_body()
    interview_id = str(data.get("interviewId") or "").strip()
    question_id = str(data.get("questionId") or "").strip()
    answer = data.get("answer")
    if not interview_id or not question_id or not answer:
        raise ValidationFailure("Interview ID, question ID, and answer are required")
    answer_text = str(answer)

    result = submit_answer(
        get_ai_client(),
        g.user_id,
        interview_id,
        question_id,
        answer_text,
        mode=current_app.config["EVALUATOR_MODE"],
    )
    return jsonify(result)


@interview_bp.route("/history", methods=["GET"])
@token_required
def history():
    return jsonify({"interviews": list_interviews(g.user_id)})


@interview_bp.route("/<string:interview_id>", methods=["GET"])
@token_required
def detail(interview_id: str):
    return jsonify(get_interview(g.user_id, interview_id))
