"""Centralised construction of problem+json payloads for form errors.

Route modules import these helpers instead of embedding status codes and
error code strings inline.
"""

from __future__ import annotations

from typing import Any, Dict, Optional
import logging


logger = logging.getLogger(__name__)


def _problem(title: str, status: int, detail: str, code: str, **extra: Any) -> Dict[str, object]:
    problem: Dict[str, object] = {
        "title": title,
        "status": status,
        "detail": detail,
        "code": code,
    }
    problem.update(extra)
    logger.info("error_handler.handle code=%s status=%s", code, status)
    return problem


def problem_form_not_found(form_id: str) -> Dict[str, object]:
    """Return a 404 problem for an unknown form id."""
    return _problem("Not Found", 404, f"form {form_id} not found", "FORM_NOT_FOUND")


def problem_element_not_found(kind: str, order: int) -> Dict[str, object]:
    """Return a 404 problem when no element of ``kind`` holds ``order``."""
    return _problem("Not Found", 404, f"no {kind} at order {order}", "FORM_ELEMENT_NOT_FOUND")


def problem_form_definition_invalid(code: str, detail: str) -> Dict[str, object]:
    """Return a 422 problem for a rejected form definition."""
    return _problem("Unprocessable Entity", 422, detail, code.upper())


def problem_form_structure_invalid(detail: str) -> Dict[str, object]:
    """Return a 422 problem when a form collection is not a list."""
    return _problem("Unprocessable Entity", 422, detail, "FORM_STRUCTURE_INVALID")


def problem_element_invalid(detail: str, errors: Optional[list] = None) -> Dict[str, object]:
    """Return a 422 problem for an element payload that cannot be added."""
    return _problem("Unprocessable Entity", 422, detail, "FORM_ELEMENT_INVALID", errors=errors or [])


def problem_responses_invalid(issue: Dict[str, Any]) -> Dict[str, object]:
    """Return a 422 problem describing the first invalid prompt response."""
    return _problem(
        "Unprocessable Entity",
        422,
        "one or more prompt responses are invalid",
        "FORM_RESPONSES_INVALID",
        issue=issue,
    )


__all__ = [
    "problem_form_not_found",
    "problem_element_not_found",
    "problem_form_definition_invalid",
    "problem_form_structure_invalid",
    "problem_element_invalid",
    "problem_responses_invalid",
]
