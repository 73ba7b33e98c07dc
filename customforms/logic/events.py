"""Domain event constants and publisher.

Defines event type constants and a simple publish() callable used by
the authoring and submission flows.
"""

from __future__ import annotations

from typing import Any, Dict, List
import logging

logger = logging.getLogger(__name__)

FORM_ELEMENT_ADDED = "form.element.added"
FORM_ELEMENT_MOVED = "form.element.moved"
FORM_ELEMENT_DELETED = "form.element.deleted"
FORM_SUBMISSION_SAVED = "form.submission.saved"

# In-memory buffer for domain events (test-only visibility)
EVENT_BUFFER: List[Dict[str, Any]] = []


def publish(event_type: str, payload: Dict[str, Any]) -> None:
    """Publish a domain event by logging it and buffering it in memory."""
    logger.info("event_publish type=%s payload=%s", event_type, payload)
    EVENT_BUFFER.append({"type": event_type, "payload": payload})


def get_buffered_events(clear: bool = True) -> List[Dict[str, Any]]:
    """Return buffered domain events; optionally clear the buffer."""
    events = list(EVENT_BUFFER)
    if clear:
        EVENT_BUFFER.clear()
    return events


__all__ = [
    "FORM_ELEMENT_ADDED",
    "FORM_ELEMENT_MOVED",
    "FORM_ELEMENT_DELETED",
    "FORM_SUBMISSION_SAVED",
    "EVENT_BUFFER",
    "publish",
    "get_buffered_events",
]
