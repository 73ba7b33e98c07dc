"""Prompt response handling: in-place answer updates and extraction."""

from __future__ import annotations

from typing import Any, Iterable, List
import logging

from customforms.logic.answer_canonical import canonicalize_prompt_value
from customforms.logic.merge_view import sort_key
from customforms.models.elements import is_prompt
from customforms.models.form_response import FormResponse

logger = logging.getLogger(__name__)


def apply_prompt_response(elements: Iterable[Any], order: int, value: Any) -> bool:
    """Set the response of the prompt at ``order`` in place.

    Returns False when no prompt holds that order (headings and text blocks
    never take responses).
    """
    for element in elements:
        if is_prompt(element) and element.order == order:
            element.value = value
            return True
    logger.info("form.response.unmatched order=%s", order)
    return False


def extract_prompt_responses(elements: Iterable[Any]) -> List[FormResponse]:
    """Return one ``FormResponse`` per prompt, in the order given.

    No validation happens here; callers run the validator first. A prompt
    without a usable order is numbered by its merged-view position key.
    """
    return [
        FormResponse(prompt_num=sort_key(element), response_val=canonicalize_prompt_value(element.value))
        for element in elements
        if is_prompt(element)
    ]


__all__ = ["apply_prompt_response", "extract_prompt_responses"]
