from __future__ import annotations

import re
from typing import Mapping

DOCUMENT_TEXT = "DOCUMENT_TEXT"
RESUME_TEXT = "RESUME_TEXT"
JOB_DESCRIPTION = "JOB_DESCRIPTION"

ANALYZER_SYSTEM_PROMPT = (
    "You are an expert resume reviewer and ATS specialist. "
    "Always respond with valid JSON only, no additional text."
)
MATCHER_SYSTEM_PROMPT = (
    "You are an expert recruiter and ATS system analyzer. "
    "Always respond with valid JSON only, no additional text."
)


def marker(name: str) -> str:
    return "{{" + name + "}}"


def render(template: str, substitutions: Mapping[str, str]) -> str:
    """Replace every ``{{NAME}}`` marker of a known name with its value.

    Substitution is a single pass: inserted values are not scanned again, and
    markers without a matching key are left in place.
    """
    if not substitutions:
        return template
    # Longest names first so overlapping names cannot shadow each other.
    names = sorted(substitutions, key=len, reverse=True)
    pattern = re.compile("|".join(re.escape(marker(name)) for name in names))
    return pattern.sub(lambda m: substitutions[m.group(0)[2:-2]], template)


def build_analyzer_prompt(template: str, resume_text: str) -> tuple[str, str]:
    return ANALYZER_SYSTEM_PROMPT, render(template, {DOCUMENT_TEXT: resume_text})


def build_matcher_prompt(template: str, resume_text: str, job_description: str) -> tuple[str, str]:
    user = render(template, {RESUME_TEXT: resume_text, JOB_DESCRIPTION: job_description})
    return MATCHER_SYSTEM_PROMPT, user
