"""Functional tests for sanitising incoming form definitions."""

from __future__ import annotations

import pytest

from customforms.logic.form_definition import (
    FormDefinitionError,
    sanitize_element,
    sanitize_form_definition,
    validate_form_title,
)
from customforms.logic.form_state import DocumentFormState, FormStructureError
from customforms.logic.order_sequences import is_contiguous
from customforms.models.elements import Heading, Prompt, TextBlock


def _options(*values: str) -> list[dict]:
    return [{"value": v, "label": v.upper()} for v in values]


def test_malformed_entries_are_dropped_and_orders_renumbered() -> None:
    payload = {
        "headings": [
            {"order": 10, "text": " Welcome "},
            {"order": 2, "text": "   "},
            {"order": 0, "text": "zero order"},
            "not-a-mapping",
        ],
        "prompts": [
            {"order": 3, "promptText": "Your name", "promptType": "text", "promptRequired": True},
            {"order": 4, "promptText": "Rate", "promptType": "10-likert"},
            {"order": True, "promptText": "Bool order", "promptType": "text"},
        ],
        "textBlocks": [{"order": 7, "text": "Read carefully"}],
    }

    document = sanitize_form_definition(payload)

    assert [h.text for h in document.headings] == ["Welcome"]
    assert [p.prompt_text for p in document.prompts] == ["Your name"]
    assert [t.text for t in document.text_blocks] == ["Read carefully"]
    assert document.prompts[0].order == 1
    assert document.text_blocks[0].order == 2
    assert document.headings[0].order == 3
    assert is_contiguous(DocumentFormState(document))


def test_snake_case_payload_keys_are_accepted() -> None:
    payload = {
        "prompts": [{"order": 1, "prompt_text": "Agree?", "prompt_type": "checkbox", "prompt_required": "true"}],
        "text_blocks": [{"order": 2, "text": "Thanks"}],
    }

    document = sanitize_form_definition(payload)

    assert document.prompts[0].prompt_required is True
    assert document.text_blocks[0].order == 2


def test_dropdown_options_are_filtered_deduplicated_and_capped() -> None:
    raw = _options("a", "b", "a") + [{"value": "", "label": "Empty"}, {"value": "c"}] + _options("d", "e")
    payload = {"prompts": [{"order": 1, "promptText": "Pick", "promptType": "dropdown", "promptOptions": raw}]}

    document = sanitize_form_definition(payload, max_prompt_options=3)

    options = document.prompts[0].prompt_options
    assert [(o.value, o.label) for o in options] == [("a", "A"), ("b", "B"), ("d", "D")]


def test_dropdown_without_usable_options_rejects_the_definition() -> None:
    payload = {
        "prompts": [
            {"order": 1, "promptText": "Pick", "promptType": "dropdown", "promptOptions": [{"value": " ", "label": "x"}]}
        ]
    }

    with pytest.raises(FormDefinitionError) as excinfo:
        sanitize_form_definition(payload)

    assert excinfo.value.code == "dropdown_options"


def test_collection_that_is_not_a_list_is_a_structure_error() -> None:
    with pytest.raises(FormStructureError):
        sanitize_form_definition({"headings": {"order": 1, "text": "H"}})


def test_missing_collections_yield_an_empty_document() -> None:
    document = sanitize_form_definition({})
    assert document.element_count() == 0


@pytest.mark.parametrize("title", ["abc", "", None, "x" * 201, "   ab   "])
def test_invalid_titles_are_rejected(title) -> None:
    with pytest.raises(FormDefinitionError) as excinfo:
        validate_form_title(title)
    assert excinfo.value.code == "invalid_title"


def test_title_is_trimmed() -> None:
    assert validate_form_title("  Course feedback  ") == "Course feedback"


def test_sanitize_element_builds_unordered_models() -> None:
    heading = sanitize_element({"kind": "heading", "text": " Part 2 ", "order": 4})
    block = sanitize_element({"kind": "textBlock", "text": "Notes"})
    prompt = sanitize_element({"promptText": "Why?", "promptType": "text"})

    assert isinstance(heading, Heading) and heading.text == "Part 2" and heading.order is None
    assert isinstance(block, TextBlock)
    assert isinstance(prompt, Prompt) and prompt.order is None


@pytest.mark.parametrize(
    "entry",
    [
        {"text": "no kind"},
        {"kind": "heading", "text": "  "},
        {"kind": "prompt", "promptText": "Q", "promptType": "slider"},
        {"kind": "section", "text": "unknown"},
    ],
)
def test_sanitize_element_rejects_malformed_entries(entry) -> None:
    with pytest.raises(FormDefinitionError) as excinfo:
        sanitize_element(entry)
    assert excinfo.value.code == "invalid_element"
