import re

from flask import current_app

from services.ai_client import AIClientError
from services.parsing import extract_json_object


MIN_SCORE = 0
MAX_SCORE = 10

DEFAULT_AI_SCORE = 6
DEFAULT_AI_FEEDBACK = "Thanks for your answer. Keep practicing to add more structure and specific detail."

UNPARSEABLE_SCORE = 6
CALL_FAILURE_SCORE = 5
DEGRADED_FEEDBACK = (
    "Automatic evaluation was degraded for this answer, so a default score was applied. "
    "Your interview can continue as normal."
)

MODE_AUTO = "auto"
MODE_AI = "ai"
MODE_HEURISTIC = "heuristic"

EXAMPLE_PATTERN = re.compile(r"example|instance|time when|situation|experience", re.IGNORECASE)
QUANTIFIABLE_PATTERN = re.compile(r"\d+%|\$\d+|increased|decreased|improved|reduced", re.IGNORECASE)

SYSTEM_PROMPT = "You are a strict but fair interview evaluator. Return only valid JSON. No commentary."


def _clamp(score) -> int:
    return max(MIN_SCORE, min(MAX_SCORE, int(score)))


def _to_score(value, default: int) -> int:
    # Convert model score safely to a clamped int.
    try:
        return _clamp(round(float(value)))
    except (TypeError, ValueError, OverflowError):
        return default


def _build_prompt(question: str, answer: str) -> str:
    return f"""
Evaluate this interview answer.

Question: {question}
Answer: {answer}

Score the answer from 0 to 10 for relevance, structure, specificity and impact.
Return STRICT JSON only, in this shape:
{{"score": 7, "feedback": "Two or three sentences of constructive feedback."}}
""".strip()


def evaluate_with_ai(ai_client, question: str, answer: str):
    """Score with the model. Never raises; failures produce a degraded result."""
    if ai_client is None:
        current_app.logger.warning("Evaluation degraded: no AI client configured.")
        return {"score": CALL_FAILURE_SCORE, "feedback": DEGRADED_FEEDBACK}

    try:
        text = ai_client.complete(_build_prompt(question, answer), system=SYSTEM_PROMPT, temperature=0.2)
    except AIClientError as exc:
        current_app.logger.warning("Evaluation degraded: AI call failed: %s", exc)
        return {"score": CALL_FAILURE_SCORE, "feedback": DEGRADED_FEEDBACK}

    parsed = extract_json_object(text)
    if not parsed:
        current_app.logger.warning("Evaluation degraded: response parse failed. Raw text: %s", (text or "")[:500])
        return {"score": UNPARSEABLE_SCORE, "feedback": DEGRADED_FEEDBACK}

    data = parsed.value
    feedback = data.get("feedback")
    if not isinstance(feedback, str) or not feedback.strip():
        feedback = DEFAULT_AI_FEEDBACK
    return {
        "score": _to_score(data.get("score"), DEFAULT_AI_SCORE),
        "feedback": feedback.strip(),
    }


def evaluate_heuristic(question: str, answer: str):
    """Deterministic length/example/metrics scoring."""
    text = (answer or "").strip()
    score = 5
    feedback = ["Thank you for your response."]

    if len(text) > 200:
        score += 2
        feedback.append("Good level of detail in your response.")
    elif len(text) < 50:
        score -= 2
        feedback.append("Your answer could benefit from more detail and specific examples.")

    if EXAMPLE_PATTERN.search(text):
        score += 2
        feedback.append("Great use of specific examples to illustrate your points.")
    else:
        feedback.append("Consider adding specific examples to strengthen your answer.")

    if QUANTIFIABLE_PATTERN.search(text):
        score += 1
        feedback.append("Excellent use of quantifiable results to demonstrate impact.")

    score = _clamp(score)

    if score >= 8:
        feedback.append("This is a strong response that demonstrates good self-awareness and communication skills.")
    elif score >= 6:
        feedback.append("This is a solid response with room for improvement in providing more specific details.")
    else:
        feedback.append("Consider expanding your answer with more specific examples and details about your experience.")

    return {"score": score, "feedback": " ".join(feedback)}


# MAIN EVALUATION FUNCTION
def evaluate_answer(question: str, answer: str, ai_client=None, mode: str = MODE_AUTO):
    if mode == MODE_HEURISTIC or (mode == MODE_AUTO and ai_client is None):
        return evaluate_heuristic(question, answer)
    return evaluate_with_ai(ai_client, question, answer)
