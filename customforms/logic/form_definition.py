"""Sanitising of untrusted form definitions before they are stored.

Entries that are malformed are dropped rather than rejected, matching how
rubric and registration forms have always been saved. Only a dropdown
prompt left without usable options, or a bad title, fails the whole save.
The resulting document is renumbered so its orders are contiguous.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping
import logging

from customforms.logic.form_state import FormStructureError
from customforms.logic.order_sequences import renumber_contiguously
from customforms.models.elements import (
    HEADING,
    PROMPT,
    TEXT_BLOCK,
    FormDocument,
    Heading,
    Prompt,
    PromptOption,
    TextBlock,
    element_kind,
)
from customforms.models.prompt_type import PromptType, is_prompt_type

logger = logging.getLogger(__name__)

MAX_PROMPT_OPTIONS = 10
TITLE_MIN_LENGTH = 4
TITLE_MAX_LENGTH = 200


class FormDefinitionError(ValueError):
    def __init__(self, code: str, detail: str) -> None:
        super().__init__(detail)
        self.code = code
        self.detail = detail


def _is_order(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 1


def _non_blank(value: Any) -> bool:
    return isinstance(value, str) and value.strip() != ""


def _pick(entry: Mapping, camel: str, snake: str) -> Any:
    return entry.get(camel, entry.get(snake))


def _collection(payload: Mapping, name: str, alt: str | None = None) -> List[Any]:
    items = payload.get(name)
    if items is None and alt:
        items = payload.get(alt)
    if items is None:
        return []
    if not isinstance(items, list):
        raise FormStructureError(f"form collection '{name}' is not a list")
    return [item for item in items if isinstance(item, Mapping)]


def validate_form_title(title: Any) -> str:
    text = title.strip() if isinstance(title, str) else ""
    if not (TITLE_MIN_LENGTH <= len(text) <= TITLE_MAX_LENGTH):
        raise FormDefinitionError(
            "invalid_title",
            f"title must be {TITLE_MIN_LENGTH}-{TITLE_MAX_LENGTH} characters",
        )
    return text


def _sanitize_options(raw: Any, max_options: int) -> List[PromptOption]:
    options: List[PromptOption] = []
    seen: set[str] = set()
    if not isinstance(raw, list):
        return options
    for opt in raw:
        if len(options) >= max_options:
            break
        if not isinstance(opt, Mapping):
            continue
        value, label = opt.get("value"), opt.get("label")
        if _non_blank(value) and _non_blank(label) and value not in seen:
            seen.add(value)
            options.append(PromptOption(value=value, label=label))
    return options


def _sanitize_prompt(entry: Mapping, max_options: int) -> Prompt | None:
    prompt_type = _pick(entry, "promptType", "prompt_type")
    prompt_text = _pick(entry, "promptText", "prompt_text")
    order = entry.get("order")
    if not (is_prompt_type(prompt_type) and _non_blank(prompt_text) and _is_order(order)):
        return None
    required = _pick(entry, "promptRequired", "prompt_required")
    fields: Dict[str, Any] = {
        "order": order,
        "prompt_text": prompt_text.strip(),
        "prompt_type": prompt_type,
        "prompt_required": required is True or required == "true",
    }
    if prompt_type == PromptType.DROPDOWN:
        options = _sanitize_options(_pick(entry, "promptOptions", "prompt_options"), max_options)
        if not options:
            raise FormDefinitionError(
                "dropdown_options",
                f"dropdown prompt at order {order} has no valid options",
            )
        fields["prompt_options"] = options
    return Prompt(**fields)


def sanitize_element(entry: Mapping, max_prompt_options: int = MAX_PROMPT_OPTIONS) -> Any:
    """Sanitise a single element payload tagged with ``kind``.

    Unlike whole definitions, a malformed single element is rejected with
    ``invalid_element`` instead of being dropped. The order is left unset.
    """
    kind = element_kind(entry)
    element: Any = None
    if kind == PROMPT:
        element = _sanitize_prompt({**entry, "order": 1}, max_prompt_options)
    elif kind in (HEADING, TEXT_BLOCK) and _non_blank(entry.get("text")):
        model = Heading if kind == HEADING else TextBlock
        element = model(text=entry["text"].strip())
    if element is None:
        raise FormDefinitionError("invalid_element", "element payload is missing a kind, text or prompt type")
    return element.model_copy(update={"order": None})


def sanitize_form_definition(payload: Mapping, max_prompt_options: int = MAX_PROMPT_OPTIONS) -> FormDocument:
    """Build a clean, contiguously ordered ``FormDocument`` from ``payload``."""
    headings = [
        Heading(order=h["order"], text=h["text"].strip())
        for h in _collection(payload, "headings")
        if _non_blank(h.get("text")) and _is_order(h.get("order"))
    ]
    text_blocks = [
        TextBlock(order=t["order"], text=t["text"].strip())
        for t in _collection(payload, "textBlocks", "text_blocks")
        if _non_blank(t.get("text")) and _is_order(t.get("order"))
    ]
    prompts = []
    for entry in _collection(payload, "prompts"):
        prompt = _sanitize_prompt(entry, max_prompt_options)
        if prompt is not None:
            prompts.append(prompt)

    document = renumber_contiguously(
        FormDocument(headings=headings, prompts=prompts, text_blocks=text_blocks)
    )
    logger.info(
        "form.definition.sanitized headings=%s prompts=%s text_blocks=%s",
        len(document.headings),
        len(document.prompts),
        len(document.text_blocks),
    )
    return document


__all__ = [
    "MAX_PROMPT_OPTIONS",
    "FormDefinitionError",
    "validate_form_title",
    "sanitize_element",
    "sanitize_form_definition",
]
