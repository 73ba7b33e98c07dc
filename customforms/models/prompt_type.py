"""PromptType enumeration for answerable custom form prompts.

Provides a simple constants container instead of an Enum to keep imports
lightweight in architectural tests.
"""

from __future__ import annotations

from typing import Literal


class PromptType:
    LIKERT_3 = "3-likert"
    LIKERT_5 = "5-likert"
    LIKERT_7 = "7-likert"
    TEXT = "text"
    DROPDOWN = "dropdown"
    CHECKBOX = "checkbox"

    ALL = (LIKERT_3, LIKERT_5, LIKERT_7, TEXT, DROPDOWN, CHECKBOX)

    # Number of points on each Likert scale
    LIKERT_POINTS = {LIKERT_3: 3, LIKERT_5: 5, LIKERT_7: 7}


PromptTypeLiteral = Literal["3-likert", "5-likert", "7-likert", "text", "dropdown", "checkbox"]


def is_prompt_type(value: object) -> bool:
    return isinstance(value, str) and value in PromptType.ALL


__all__ = ["PromptType", "PromptTypeLiteral", "is_prompt_type"]
