from __future__ import annotations

"""Functional test bootstrap for the Custom Forms service.

Points the app at a shared in-memory SQLite database before any imports of
``customforms.main`` so the engine singleton and the tables created by
``create_app`` are reused across tests.
"""

import os

import pytest

os.environ["TEST_DATABASE_URL"] = "sqlite+pysqlite:///:memory:"
os.environ["DATABASE_URL"] = os.environ["TEST_DATABASE_URL"]

from customforms.logic.events import get_buffered_events  # noqa: E402
from customforms.models.elements import (  # noqa: E402
    FormDocument,
    Heading,
    Prompt,
    PromptOption,
    TextBlock,
)


def make_prompt(order: int, prompt_type: str = "text", **fields) -> Prompt:
    fields.setdefault("prompt_text", f"Prompt {order}")
    if prompt_type == "dropdown":
        fields.setdefault("prompt_options", [PromptOption(value="a", label="Option A")])
    return Prompt(order=order, prompt_type=prompt_type, **fields)


def make_document(*layout: str) -> FormDocument:
    """Build a document from kinds listed in global order, e.g. ("heading", "prompt")."""
    doc = FormDocument()
    for order, kind in enumerate(layout, start=1):
        if kind == "heading":
            doc.headings.append(Heading(order=order, text=f"Heading {order}"))
        elif kind == "textBlock":
            doc.text_blocks.append(TextBlock(order=order, text=f"Text {order}"))
        else:
            doc.prompts.append(make_prompt(order))
    return doc


@pytest.fixture()
def client():
    from fastapi.testclient import TestClient
    from customforms.main import create_app

    return TestClient(create_app())


@pytest.fixture(autouse=True)
def clear_event_buffer():
    get_buffered_events(clear=True)
    yield
    get_buffered_events(clear=True)
