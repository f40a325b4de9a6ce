"""Locate the JSON payload inside free-form completion text.

Providers may wrap the object in markdown fences or surround it with prose,
so the payload is found by stripping the first fenced block (if any) and
then taking the span from the first ``{`` to the last ``}``.
"""

from __future__ import annotations

import json
import re
from typing import Any

_FENCE_RE = re.compile(r"```(?:json)?\s*([\s\S]*?)\s*```", re.IGNORECASE)


class JSONExtractionError(ValueError):
    """Raised when no JSON object can be recovered from the text."""


def strip_code_fences(text: str) -> str:
    match = _FENCE_RE.search(text)
    return match.group(1) if match else text


def extract_json_object(text: str) -> dict[str, Any]:
    """Return the outermost JSON object found in ``text``.

    Raises:
        JSONExtractionError: If there is no ``{...}`` span, it does not
            parse, or it parses to something other than an object.
    """
    cleaned = strip_code_fences(text.strip())
    start = cleaned.find("{")
    end = cleaned.rfind("}")
    if start == -1 or end < start:
        raise JSONExtractionError("No JSON object found in response")

    try:
        data = json.loads(cleaned[start : end + 1])
    except json.JSONDecodeError as exc:
        raise JSONExtractionError(f"Response is not valid JSON: {exc.msg}") from exc

    if not isinstance(data, dict):
        raise JSONExtractionError("Response JSON is not an object")
    return data
