from flask import request


def json_body() -> dict:
    # Non-object JSON bodies are treated like a missing body.
    body = request.get_json(silent=True)
    return body if isinstance(body, dict) else {}
