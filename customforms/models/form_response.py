"""Pydantic model for extracted prompt responses."""

from __future__ import annotations

from customforms.models.elements import FormModel


class FormResponse(FormModel):
    prompt_num: int
    response_val: str


__all__ = ["FormResponse"]
