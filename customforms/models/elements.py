"""Pydantic models for custom form elements.

A custom form is made of three flat element kinds (headings, text blocks
and prompts) that share one global 1-based ``order``. Each model carries a
literal ``kind`` discriminant so consumers can branch on the object alone.
Wire names are camelCase (``promptText``, ``textBlocks``); Python attributes
are snake_case and both spellings are accepted on input.
"""

from __future__ import annotations

from typing import Annotated, Any, List, Literal, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from customforms.models.prompt_type import PromptType, PromptTypeLiteral


HEADING = "heading"
TEXT_BLOCK = "textBlock"
PROMPT = "prompt"

ELEMENT_KINDS = (HEADING, TEXT_BLOCK, PROMPT)

# Collection name (as used by the form-state accessor) for each element kind
COLLECTION_BY_KIND = {
    HEADING: "headings",
    PROMPT: "prompts",
    TEXT_BLOCK: "textBlocks",
}
KIND_BY_COLLECTION = {v: k for k, v in COLLECTION_BY_KIND.items()}
COLLECTION_NAMES = ("headings", "prompts", "textBlocks")

ElementKindLiteral = Literal["heading", "textBlock", "prompt"]
PromptValue = Union[bool, int, float, str, None]


class FormModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PromptOption(FormModel):
    value: str = Field(min_length=1)
    label: str = Field(min_length=1)


class OrderedElement(FormModel):
    order: Optional[int] = Field(default=None, ge=1)

    @field_validator("order", mode="before")
    @classmethod
    def unusable_order_is_unset(cls, v: Any) -> Any:
        """Read an order that is not a positive whole number as unset."""
        if isinstance(v, str) and v.strip().isdigit():
            v = int(v)
        elif isinstance(v, float) and v.is_integer():
            v = int(v)
        if isinstance(v, bool) or not isinstance(v, int) or v < 1:
            return None
        return v


class Heading(OrderedElement):
    kind: Literal["heading"] = HEADING
    text: str = ""


class TextBlock(OrderedElement):
    kind: Literal["textBlock"] = TEXT_BLOCK
    text: str = ""


class Prompt(OrderedElement):
    kind: Literal["prompt"] = PROMPT
    prompt_text: str
    prompt_type: PromptTypeLiteral
    prompt_required: bool = False
    prompt_options: Optional[List[PromptOption]] = None
    value: PromptValue = None

    @model_validator(mode="after")
    def dropdown_requires_options(self) -> "Prompt":
        if self.prompt_type == PromptType.DROPDOWN and not self.prompt_options:
            raise ValueError("dropdown prompts require at least one option")
        return self


FormElement = Annotated[Union[Heading, TextBlock, Prompt], Field(discriminator="kind")]

MODEL_BY_KIND = {HEADING: Heading, TEXT_BLOCK: TextBlock, PROMPT: Prompt}


class ElementRef(FormModel):
    """Minimal handle identifying an element by kind and global order."""

    kind: ElementKindLiteral
    order: int = Field(ge=1)


class FormDocument(FormModel):
    headings: List[Heading] = Field(default_factory=list)
    prompts: List[Prompt] = Field(default_factory=list)
    text_blocks: List[TextBlock] = Field(default_factory=list)

    def element_count(self) -> int:
        return len(self.headings) + len(self.prompts) + len(self.text_blocks)


def element_kind(obj: Any) -> Optional[str]:
    """Return the element kind for a model or raw mapping.

    An explicit ``kind`` wins; otherwise a mapping that carries both a prompt
    type and prompt text is a prompt. Headings and text blocks share a shape,
    so without a tag they cannot be told apart and ``None`` is returned.
    """
    if isinstance(obj, Mapping):
        kind = obj.get("kind")
        if kind in ELEMENT_KINDS:
            return kind
        has_type = "promptType" in obj or "prompt_type" in obj
        has_text = "promptText" in obj or "prompt_text" in obj
        return PROMPT if has_type and has_text else None
    kind = getattr(obj, "kind", None)
    if kind in ELEMENT_KINDS:
        return kind
    if hasattr(obj, "prompt_type") and hasattr(obj, "prompt_text"):
        return PROMPT
    return None


def is_prompt(obj: Any) -> bool:
    return element_kind(obj) == PROMPT


__all__ = [
    "HEADING",
    "TEXT_BLOCK",
    "PROMPT",
    "ELEMENT_KINDS",
    "COLLECTION_BY_KIND",
    "KIND_BY_COLLECTION",
    "COLLECTION_NAMES",
    "PromptOption",
    "Heading",
    "TextBlock",
    "Prompt",
    "PromptValue",
    "FormElement",
    "MODEL_BY_KIND",
    "ElementRef",
    "FormDocument",
    "element_kind",
    "is_prompt",
]
