# Scrape the first JSON block out of free-text model output.
import json
import re
from dataclasses import dataclass
from typing import Any


_ARRAY_RE = re.compile(r"\[[\s\S]*\]")
_OBJECT_RE = re.compile(r"\{[\s\S]*\}")


@dataclass(frozen=True)
class Parsed:
    value: Any


class _Unparseable:
    def __bool__(self):
        return False

    def __repr__(self):
        return "UNPARSEABLE"


UNPARSEABLE = _Unparseable()


def _extract(text: str, pattern, expected_type):
    if not text:
        return UNPARSEABLE
    match = pattern.search(text)
    if not match:
        return UNPARSEABLE
    try:
        value = json.loads(match.group(0))
    except (TypeError, ValueError):
        return UNPARSEABLE
    if not isinstance(value, expected_type):
        return UNPARSEABLE
    return Parsed(value)


def extract_json_array(text: str):
    return _extract(text, _ARRAY_RE, list)


def extract_json_object(text: str):
    return _extract(text, _OBJECT_RE, dict)
