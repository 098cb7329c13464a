"""JSON helpers for LLM replies."""

from __future__ import annotations

import json
import logging
import re
from typing import Any

logger = logging.getLogger(__name__)

_LEADING_FENCE = re.compile(r"^```[a-zA-Z]*\s*")
_TRAILING_FENCE = re.compile(r"\s*```$")


def strip_json_fence(text: str) -> str:
    """Remove a leading ```json (or bare ```) fence and a trailing ``` fence."""
    raw = (text or "").strip()
    raw = _LEADING_FENCE.sub("", raw, count=1)
    raw = _TRAILING_FENCE.sub("", raw, count=1)
    return raw.strip()


def extract_json_object(text: str | None) -> dict[str, Any] | None:
    """Parse the structured object out of a reply that may be wrapped in prose.

    Strips code fences, then parses the span between the first ``{`` and the
    last ``}``; when that fails the whole cleaned text is tried. Returns None
    when no JSON object can be recovered.
    """
    if not text or not isinstance(text, str):
        return None

    cleaned = strip_json_fence(text)
    first = cleaned.find("{")
    last = cleaned.rfind("}")
    candidates = []
    if first != -1 and last > first:
        candidates.append(cleaned[first : last + 1])
    candidates.append(cleaned)

    for candidate in candidates:
        try:
            parsed = json.loads(candidate)
        except json.JSONDecodeError as e:
            logger.debug("JSON parse failed (%s) on: %s", e, candidate[:200])
            continue
        if isinstance(parsed, dict):
            return parsed
    return None


def safe_json_loads(text: str, default: Any = None) -> Any:
    """Parse JSON (fences allowed), returning default on failure."""
    if not text:
        return default
    try:
        return json.loads(strip_json_fence(text))
    except (json.JSONDecodeError, TypeError):
        return default


__all__ = ["strip_json_fence", "extract_json_object", "safe_json_loads"]
