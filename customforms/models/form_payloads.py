"""Pydantic models for Custom Forms request bodies.

Kept apart from route modules so payload structure is declared without
coupling it to the route implementation files.
"""

from __future__ import annotations

from typing import Any, List, Literal, Optional

from pydantic import Field

from customforms.models.elements import ElementKindLiteral, FormModel, PromptValue


class FormDefinitionPayload(FormModel):
    title: str
    # Collections stay untyped here; sanitize_form_definition filters them
    headings: Any = Field(default_factory=list)
    prompts: Any = Field(default_factory=list)
    text_blocks: Any = Field(default_factory=list)


class MoveElementPayload(FormModel):
    kind: ElementKindLiteral
    order: int = Field(ge=1)
    direction: Literal["up", "down"]


class PromptAnswer(FormModel):
    order: int = Field(ge=1)
    value: PromptValue = None


class SubmissionPayload(FormModel):
    responses: List[PromptAnswer] = Field(default_factory=list)
    respondent: Optional[str] = None


__all__ = [
    "FormDefinitionPayload",
    "MoveElementPayload",
    "PromptAnswer",
    "SubmissionPayload",
]
