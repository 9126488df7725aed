from flask import current_app
from sqlalchemy import desc

from errors import GenerationFailure
from models import QuestionBank, db
from services.ai_client import AIClientError
from services.parsing import extract_json_array


DEFAULT_CATEGORY = "general"

# Prompt guidance per interview category.
CATEGORY_GUIDANCE = {
    "communication": (
        "Focus on behavioral and communication scenarios, STAR-style prompts, teamwork, "
        "conflict resolution, stakeholder communication."
    ),
    "technical": (
        "Focus on systems, web/backend fundamentals, databases, REST/GraphQL, OS/networking basics, "
        "CS concepts relevant to software engineering interviews."
    ),
    "coding": (
        "Focus on DSA coding interview style (arrays, strings, hash maps, two pointers, sliding window, "
        "trees, graphs, DP). Avoid language-specific boilerplate."
    ),
    "personality": (
        "Focus on personality, values, motivation, leadership, growth mindset, self-awareness, "
        "and culture fit."
    ),
    "general": (
        "Mix of common campus placement interview questions for engineering graduates: light technical "
        "fundamentals, communication, situational judgement, career intent."
    ),
}

SYSTEM_PROMPT = "You are an expert interviewer. Return only valid JSON. No commentary."

# Seed rows for the question bank.
DEFAULT_QUESTION_BANK = {
    "communication": [
        "Describe a time you had to explain a complex idea to a non-technical audience.",
        "Tell me about a disagreement with a teammate and how you resolved it.",
        "How do you keep stakeholders informed when a project is running late?",
        "Describe a situation where you had to give difficult feedback.",
    ],
    "technical": [
        "Explain the difference between a process and a thread.",
        "What happens when you type a URL into a browser and press enter?",
        "How would you design a REST API for a simple todo application?",
        "Explain database indexing and when an index can hurt performance.",
    ],
    "coding": [
        "How would you find the first non-repeating character in a string?",
        "Explain how you would detect a cycle in a linked list.",
        "Describe an approach to find the longest substring without repeating characters.",
        "How would you check whether a binary tree is height-balanced?",
    ],
    "personality": [
        "What motivates you to do your best work?",
        "Describe a failure and what you learned from it.",
        "How do you handle working under pressure?",
        "What kind of team culture helps you thrive?",
    ],
    "general": [
        "Tell me about yourself and your most relevant experience.",
        "Why are you interested in this role?",
        "Where do you see yourself in five years?",
        "What is one project you are proud of and why?",
    ],
}


def normalize_category(raw) -> str:
    category = str(raw or "").strip().lower()[:50]
    return category or DEFAULT_CATEGORY


def normalize_count(raw, default: int = 6, minimum: int = 3, maximum: int = 12) -> int:
    # Missing, non-numeric and zero counts fall back to the default.
    try:
        count = int(float(raw))
    except (TypeError, ValueError, OverflowError):
        count = 0
    if not count:
        count = default
    return min(max(count, minimum), maximum)


def _build_prompt(category: str, count: int) -> str:
    guidance = CATEGORY_GUIDANCE.get(category, CATEGORY_GUIDANCE[DEFAULT_CATEGORY])
    return f"""
Generate {count} concise interview questions tailored to this theme:

Theme: {category}
Guidance: {guidance}

Rules:
- Questions should be crisp, unambiguous, and interview-ready.
- Do NOT number questions in the text; we will assign indices.
- Return STRICT JSON array of objects with fields: "questionText".
- Example:
[
  {{"questionText":"Explain event loop in JavaScript with an example."}},
  {{"questionText":"Describe a time you resolved a team conflict."}}
]
""".strip()


def _normalize_questions(items, category: str, count: int):
    valid = []
    for item in items:
        text = item.get("questionText") if isinstance(item, dict) else None
        if isinstance(text, str) and text.strip():
            valid.append(text.strip())
    return [
        {"questionText": text, "category": category, "order": index}
        for index, text in enumerate(valid[:count])
    ]


def generate_questions_with_ai(ai_client, category: str, count: int):
    """Ask the model for ``count`` questions; raise GenerationFailure on any problem."""
    if ai_client is None:
        raise GenerationFailure("No AI client configured")

    try:
        text = ai_client.complete(_build_prompt(category, count), system=SYSTEM_PROMPT, temperature=0.5)
    except AIClientError as exc:
        raise GenerationFailure(f"AI call failed: {exc}") from exc

    parsed = extract_json_array(text)
    if not parsed:
        current_app.logger.warning("Question generation response parse failed. Raw text: %s", (text or "")[:500])
        raise GenerationFailure("AI response was not a JSON array")

    questions = _normalize_questions(parsed.value, category, count)
    if not questions:
        raise GenerationFailure("AI returned no questions")
    return questions


def fallback_from_question_bank(category: str, count: int):
    # Exact category first, then the whole pool.
    rows = (
        QuestionBank.query.filter_by(category=category)
        .order_by(desc(QuestionBank.created_at), desc(QuestionBank.id))
        .limit(count)
        .all()
    )
    if not rows:
        rows = (
            QuestionBank.query.order_by(desc(QuestionBank.created_at), desc(QuestionBank.id))
            .limit(count)
            .all()
        )
    return [
        {"questionText": row.question, "category": row.category or category, "order": index}
        for index, row in enumerate(rows)
    ]


def generate_questions(ai_client, category: str, count: int):
    """Return ``(questions, source)`` where source is ``"ai"`` or ``"bank"``."""
    try:
        return generate_questions_with_ai(ai_client, category, count), "ai"
    except GenerationFailure as exc:
        current_app.logger.warning("AI question generation failed, using question bank: %s", exc)
    return fallback_from_question_bank(category, count), "bank"


def seed_question_bank(force: bool = False) -> int:
    """Insert the built-in questions. Skips a non-empty bank unless ``force``."""
    if not force and db.session.query(QuestionBank.id).first() is not None:
        return 0
    added = 0
    for category, questions in DEFAULT_QUESTION_BANK.items():
        for question in questions:
            db.session.add(QuestionBank(question=question, category=category))
            added += 1
    db.session.commit()
    return added
