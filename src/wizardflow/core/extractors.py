"""Extractors for loosely-shaped values collected by wizard steps.

Selection steps report values wrapped as ``{"selection": value, ...}``;
upload and text steps may report ``{"text": ...}`` or ``{"uri": ...}``.
Every extractor returns ``None`` when nothing usable is found and never
raises: a miss is a signal for the caller, not a fault.
"""

import math
from collections.abc import Mapping
from typing import Any

SELECTION_KEY = "selection"

# Keys checked, in order, when looking for the user's prompt.
PROMPT_KEYS = ("prompt", "motion_prompt", "text", "user_prompt")


def unwrap_selection(value: Any) -> Any:
    """Return the payload of a selection wrapper, or the value unchanged."""
    if isinstance(value, Mapping) and SELECTION_KEY in value:
        return value[SELECTION_KEY]
    return value


def is_number(value: Any) -> bool:
    """True for finite ints and floats; bools do not count."""
    if isinstance(value, bool) or not isinstance(value, int | float):
        return False
    return math.isfinite(value)


def extract_string(value: Any) -> str | None:
    """Extract a string from ``"text"``, ``{"text": ...}`` or ``{"uri": ...}``."""
    if isinstance(value, str):
        return value
    if isinstance(value, Mapping):
        for key in ("text", "uri"):
            candidate = value.get(key)
            if isinstance(candidate, str):
                return candidate
    return None


def extract_trimmed_string(value: Any) -> str | None:
    """Like ``extract_string`` but stripped, and ``None`` when empty."""
    text = extract_string(value)
    if text is None:
        return None
    text = text.strip()
    return text or None


def extract_number(value: Any) -> int | float | None:
    """Extract a number from ``5``, ``{"value": 5}`` or ``{"selection": 5}``."""
    if is_number(value):
        return value
    if isinstance(value, Mapping):
        for key in ("value", SELECTION_KEY):
            candidate = value.get(key)
            if is_number(candidate):
                return candidate
    return None


def extract_selection(value: Any) -> str | list[str] | None:
    """Extract a single selection id or a list of ids."""
    value = unwrap_selection(value)
    if isinstance(value, str):
        return value
    if isinstance(value, list | tuple) and all(isinstance(v, str) for v in value):
        return list(value)
    return None


def extract_prompt(data: Mapping[str, Any], fallback: str | None = None) -> str | None:
    """Find the user's prompt in collected data, checking ``PROMPT_KEYS`` in order."""
    for key in PROMPT_KEYS:
        if key in data:
            prompt = extract_trimmed_string(data[key])
            if prompt:
                return prompt
    if fallback is not None:
        return fallback.strip() or None
    return None
