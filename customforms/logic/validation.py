"""Type-aware validation for filled-in custom form prompts.

Headings and text blocks are always valid. Each prompt is checked against
its required flag and then against the rule for its prompt type. Checks run
in merged form order and stop at the first failing prompt; callers only need
a pass/fail signal plus the first issue for highlighting.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, Optional
import logging
import re

from customforms.logic.answer_canonical import canonicalize_prompt_value
from customforms.models.elements import is_prompt
from customforms.models.prompt_type import PromptType

logger = logging.getLogger(__name__)

TEXT_RESPONSE_MAX_LENGTH = 10000

REQUIRED_MISSING = "required_missing"
TEXT_TOO_LONG = "text_too_long"
LIKERT_OUT_OF_RANGE = "likert_out_of_range"
BLANK_TEXT = "blank_text"
CHECKBOX_UNCHECKED = "checkbox_unchecked"

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


@dataclass(frozen=True)
class PromptIssue:
    order: Optional[int]
    prompt_type: str
    code: str
    message: str

    def as_dict(self) -> Dict[str, Any]:
        return {
            "order": self.order,
            "promptType": self.prompt_type,
            "code": self.code,
            "message": self.message,
        }


def is_empty_value(value: Any) -> bool:
    """Absent means None or the empty string; False and 0 are present."""
    return value is None or (isinstance(value, str) and value == "")


def parse_likert_value(value: Any) -> Optional[int]:
    """Parse the leading integer of ``value`` ("3.9" -> 3); None if there is none."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    match = _LEADING_INT.match(canonicalize_prompt_value(value))
    return int(match.group(1)) if match else None


def _check_text(prompt: Any, text: str, max_text_length: int) -> Optional[str]:
    if len(text) > max_text_length:
        return TEXT_TOO_LONG
    if not text.strip():
        return BLANK_TEXT
    return None


def _check_dropdown(prompt: Any, text: str, max_text_length: int) -> Optional[str]:
    if not text.strip():
        return BLANK_TEXT
    return None


def _check_likert(prompt: Any, text: str, max_text_length: int) -> Optional[str]:
    points = PromptType.LIKERT_POINTS[prompt.prompt_type]
    parsed = parse_likert_value(prompt.value)
    # No leading integer means there is no number to range-check
    if parsed is None:
        return None
    if parsed < 1 or parsed > points:
        return LIKERT_OUT_OF_RANGE
    return None


def _check_checkbox(prompt: Any, text: str, max_text_length: int) -> Optional[str]:
    # Optional checkboxes answered False are rejected too
    if prompt.value is not True:
        return CHECKBOX_UNCHECKED
    return None


TYPE_CHECKS: Dict[str, Callable[[Any, str, int], Optional[str]]] = {
    PromptType.LIKERT_3: _check_likert,
    PromptType.LIKERT_5: _check_likert,
    PromptType.LIKERT_7: _check_likert,
    PromptType.TEXT: _check_text,
    PromptType.DROPDOWN: _check_dropdown,
    PromptType.CHECKBOX: _check_checkbox,
}

_MESSAGES = {
    REQUIRED_MISSING: "a response is required",
    TEXT_TOO_LONG: "response exceeds the maximum text length",
    LIKERT_OUT_OF_RANGE: "response is outside the scale",
    BLANK_TEXT: "response must not be blank",
    CHECKBOX_UNCHECKED: "checkbox must be checked",
}


def _issue(prompt: Any, code: str) -> PromptIssue:
    return PromptIssue(
        order=getattr(prompt, "order", None),
        prompt_type=str(prompt.prompt_type),
        code=code,
        message=_MESSAGES[code],
    )


def validate_prompt_response(
    prompt: Any,
    max_text_length: int = TEXT_RESPONSE_MAX_LENGTH,
) -> Optional[PromptIssue]:
    """Return the issue with ``prompt``'s response, or None when it is valid."""
    if is_empty_value(prompt.value):
        if prompt.prompt_required is True:
            return _issue(prompt, REQUIRED_MISSING)
        return None
    check = TYPE_CHECKS.get(prompt.prompt_type)
    if check is None:
        raise ValueError(f"unknown prompt type: {prompt.prompt_type!r}")
    code = check(prompt, canonicalize_prompt_value(prompt.value), max_text_length)
    return _issue(prompt, code) if code else None


def find_first_invalid(
    elements: Iterable[Any],
    max_text_length: int = TEXT_RESPONSE_MAX_LENGTH,
) -> Optional[PromptIssue]:
    for element in elements:
        if not is_prompt(element):
            continue
        issue = validate_prompt_response(element, max_text_length)
        if issue is not None:
            logger.info(
                "form.validate.failed order=%s prompt_type=%s code=%s",
                issue.order,
                issue.prompt_type,
                issue.code,
            )
            return issue
    return None


def validate_prompt_responses(
    elements: Iterable[Any],
    max_text_length: int = TEXT_RESPONSE_MAX_LENGTH,
) -> bool:
    """Return True when every prompt in ``elements`` has an acceptable response."""
    return find_first_invalid(elements, max_text_length) is None


__all__ = [
    "TEXT_RESPONSE_MAX_LENGTH",
    "REQUIRED_MISSING",
    "TEXT_TOO_LONG",
    "LIKERT_OUT_OF_RANGE",
    "BLANK_TEXT",
    "CHECKBOX_UNCHECKED",
    "PromptIssue",
    "TYPE_CHECKS",
    "is_empty_value",
    "parse_likert_value",
    "validate_prompt_response",
    "find_first_invalid",
    "validate_prompt_responses",
]
