"""
Helpers for turning free-text model replies into typed values.

Completion replies are untrusted: they may wrap JSON in prose or markdown,
emit numbers as strings, or leave fields out. The reply schemas in
``app.schemas.ai_reply`` build their validators from these helpers.
Everything here is pure and never raises on bad input.
"""

import json
import math
import re
from typing import Any, Optional

# Greedy: first "{" through the last "}" in the reply
_JSON_OBJECT_RE = re.compile(r"\{[\s\S]*\}")


def extract_first_json_object(text: Optional[str]) -> Optional[dict]:
    """Return the JSON object embedded in ``text``, or None if there is none."""
    if not text:
        return None
    match = _JSON_OBJECT_RE.search(text)
    if not match:
        return None
    try:
        parsed = json.loads(match.group(0))
    except (ValueError, RecursionError):
        return None
    return parsed if isinstance(parsed, dict) else None


def coerce_number(value: Any) -> float:
    """Read ``value`` as a finite number; anything unreadable becomes 0."""
    if isinstance(value, bool) or value is None:
        return 0.0
    if not isinstance(value, (int, float, str)):
        return 0.0
    try:
        number = float(value.strip() if isinstance(value, str) else value)
    except (ValueError, OverflowError):
        return 0.0
    if math.isnan(number) or math.isinf(number):
        return 0.0
    return number


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def clamp_int(value: Any, lower: int, upper: int) -> int:
    """``min(upper, max(lower, round(value)))`` with non-numbers read as 0."""
    return min(upper, max(lower, round_half_up(coerce_number(value))))


def clamp_float(value: Any, lower: float, upper: float) -> float:
    return min(upper, max(lower, coerce_number(value)))


def as_index(value: Any) -> Optional[int]:
    """Integer list index from a model field; None for floats with a fraction, strings, bools."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


def clean_str(value: Any, max_length: Optional[int] = None) -> Optional[str]:
    """Trimmed string or None. Non-strings other than numbers are dropped."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        value = str(value)
    if not isinstance(value, str):
        return None
    value = value.strip()
    if not value:
        return None
    if max_length is not None:
        value = value[:max_length]
    return value


def clean_str_list(value: Any, limit: Optional[int] = None) -> list[str]:
    """List of non-empty trimmed strings, truncated to ``limit``."""
    if not isinstance(value, list):
        return []
    items = [item for item in (clean_str(v) for v in value) if item]
    return items[:limit] if limit is not None else items
