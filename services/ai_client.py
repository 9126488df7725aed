from flask import current_app


class AIClientError(Exception):
    """Raised when the model call itself fails (network, timeout, quota)."""


def _extract_response_text(response) -> str:
    # Prefer direct text field if present.
    text = (getattr(response, "text", "") or "").strip()
    if text:
        return text
    # Fallback: join candidate parts.
    candidates = getattr(response, "candidates", None) or []
    parts = []
    for candidate in candidates:
        content = getattr(candidate, "content", None)
        candidate_parts = getattr(content, "parts", None) or []
        for part in candidate_parts:
            value = getattr(part, "text", "") or ""
            if value:
                parts.append(value.strip())
    return "\n".join(parts).strip()


class GeminiClient:
    """Submit a prompt to Gemini and return the response text."""

    def __init__(self, api_key: str, model: str, timeout_seconds: float = 8.0):
        # Lazy import so the app can run without the Gemini package.
        from google import genai
        from google.genai import types

        self.model = model
        self._client = genai.Client(
            api_key=api_key,
            http_options=types.HttpOptions(timeout=int(timeout_seconds * 1000)),
        )

    def complete(self, prompt: str, system: str | None = None, temperature: float = 0.5) -> str:
        config = {"temperature": temperature}
        if system:
            config["system_instruction"] = system
        try:
            response = self._client.models.generate_content(
                model=self.model,
                contents=prompt,
                config=config,
            )
        except Exception as exc:
            raise AIClientError(str(exc)) from exc
        return _extract_response_text(response)


def build_ai_client(config):
    api_key = (config.get("GEMINI_API_KEY") or "").strip()
    if not api_key:
        return None
    return GeminiClient(
        api_key=api_key,
        model=config.get("GEMINI_MODEL", "gemini-2.5-flash"),
        timeout_seconds=float(config.get("AI_TIMEOUT_SECONDS", 8)),
    )


def get_ai_client():
    return current_app.extensions.get("ai_client")
