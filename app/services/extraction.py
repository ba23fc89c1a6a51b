from __future__ import annotations

import json
from enum import Enum
from typing import Any

from app.schemas.analysis import AnalysisKind

REQUIRED_FIELDS: dict[AnalysisKind, str] = {
    "analyzer": "overallScore",
    "matcher": "matchPercentage",
}

_INVALID_FORMAT_MESSAGES: dict[AnalysisKind, str] = {
    "analyzer": "Invalid analysis format from AI",
    "matcher": "Invalid match format from AI",
}


class ExtractionErrorKind(str, Enum):
    NO_JSON_FOUND = "no_json_found"
    MALFORMED_JSON = "malformed_json"
    MISSING_REQUIRED_FIELD = "missing_required_field"
    UPSTREAM_REPORTED_ERROR = "upstream_reported_error"


class ExtractionError(ValueError):
    def __init__(self, kind: ExtractionErrorKind, message: str):
        super().__init__(message)
        self.kind = kind


def find_json_span(text: str) -> str | None:
    """Return the text between the first ``{`` and the last ``}``, inclusive.

    This is not brace-aware: prose containing stray braces, or a reply with
    more than one JSON object, yields a span that may not parse.
    """
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end == -1 or end < start:
        return None
    return text[start : end + 1]


def extract(raw_text: str, kind: AnalysisKind) -> dict[str, Any]:
    span = find_json_span(raw_text or "")
    if span is None:
        raise ExtractionError(ExtractionErrorKind.NO_JSON_FOUND, "No valid JSON found in AI response")

    try:
        payload = json.loads(span)
    except json.JSONDecodeError as exc:
        raise ExtractionError(
            ExtractionErrorKind.MALFORMED_JSON,
            f"Malformed JSON in AI response: {exc.msg}",
        ) from exc

    if not isinstance(payload, dict):
        raise ExtractionError(ExtractionErrorKind.MALFORMED_JSON, "AI response JSON is not an object")

    # A null or empty "error" is not a refusal.
    if payload.get("error"):
        raise ExtractionError(ExtractionErrorKind.UPSTREAM_REPORTED_ERROR, str(payload["error"]))

    if payload.get(REQUIRED_FIELDS[kind]) is None:
        raise ExtractionError(ExtractionErrorKind.MISSING_REQUIRED_FIELD, _INVALID_FORMAT_MESSAGES[kind])

    return payload
