"""Merged, order-sorted view over the three form collections.

The merged view is the single flat sequence consumed by renderers, the
response validator and the response extractor.
"""

from __future__ import annotations

from typing import Any, Callable, List, Optional
import logging

from customforms.logic.form_state import FormStateAccessor, read_collections
from customforms.models.elements import COLLECTION_NAMES, FormElement

logger = logging.getLogger(__name__)

ErrorSink = Callable[[Exception], None]


def log_error(err: Exception) -> None:
    """Default error sink: log at ERROR with the traceback attached."""
    logger.error("form.operation_failed error=%s", err, exc_info=err)


def sort_key(element: Any) -> int:
    """Return the sort position, treating a missing or non-numeric order as 1.

    The stored value is left untouched.
    """
    order = getattr(element, "order", None)
    if isinstance(order, bool) or not isinstance(order, int):
        return 1
    return order


def merge_collections(collections: dict) -> List[FormElement]:
    merged: List[FormElement] = []
    for name in COLLECTION_NAMES:
        merged.extend(collections[name])
    return sorted(merged, key=sort_key)


def parse_and_sort_elements(
    state: FormStateAccessor,
    on_error: Optional[ErrorSink] = None,
) -> List[FormElement]:
    """Return every element of the three collections sorted by ``order``.

    A collection that is not a list is reported to ``on_error`` and an empty
    list is returned. Ties on ``order`` only occur when the contiguity
    invariant is already broken upstream and are not resolved here.
    """
    sink = on_error or log_error
    try:
        return merge_collections(read_collections(state))
    except Exception as err:
        sink(err)
        return []


__all__ = ["ErrorSink", "log_error", "sort_key", "merge_collections", "parse_and_sort_elements"]
