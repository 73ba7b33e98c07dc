"""Global element ordering for custom forms.

Headings, prompts and text blocks live in three separate collections but
share one 1-based ``order`` space. Every operation here keeps the combined
orders a contiguous permutation of 1..N. Collections are re-read through the
form-state accessor at the start of each operation and fully validated before
anything is written back, so a failing operation never leaves a partial
update behind. All three collections are always written back together.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Literal, Optional
import logging

from customforms.logic.form_state import FormStateAccessor, coerce_element, read_collections
from customforms.logic.merge_view import ErrorSink, log_error, merge_collections
from customforms.models.elements import (
    COLLECTION_BY_KIND,
    COLLECTION_NAMES,
    FormDocument,
    element_kind,
)

logger = logging.getLogger(__name__)

Direction = Literal["up", "down"]
Hook = Callable[[], None]


def _order_of(element: Any) -> Any:
    if isinstance(element, dict):
        return element.get("order")
    return getattr(element, "order", None)


def _orders(collections: Dict[str, list]) -> List[Any]:
    return [item.order for name in COLLECTION_NAMES for item in collections[name]]


def _after(item: Any, target: int) -> bool:
    return isinstance(item.order, int) and item.order > target


def _with_order(item: Any, order: int) -> Any:
    return item.model_copy(update={"order": order})


def _next_order(collections: Dict[str, list]) -> int:
    return sum(len(collections[name]) for name in COLLECTION_NAMES) + 1


def _write_back(state: FormStateAccessor, collections: Dict[str, list]) -> None:
    for name in COLLECTION_NAMES:
        state.set(name, collections[name])


def _swap_orders(items: list, current: int, neighbour: int) -> list:
    swapped = []
    for item in items:
        if item.order == neighbour:
            swapped.append(_with_order(item, current))
        elif item.order == current:
            swapped.append(_with_order(item, neighbour))
        else:
            swapped.append(item)
    return swapped


def move_element(
    state: FormStateAccessor,
    element: Any,
    direction: Direction,
    *,
    on_error: Optional[ErrorSink] = None,
    on_finish: Optional[Hook] = None,
) -> bool:
    """Swap ``element`` with its neighbour one position up or down.

    The element is located by its ``order`` in whichever collection holds it;
    the neighbour may sit in the same or a different collection. Moving the
    first element up or the last element down is a no-op, as is moving an
    element that cannot be found. Returns True when orders were changed.
    """
    sink = on_error or log_error
    try:
        if direction not in ("up", "down"):
            raise ValueError(f"unknown move direction: {direction!r}")
        collections = read_collections(state)
        total = sum(len(collections[name]) for name in COLLECTION_NAMES)
        current = _order_of(element)

        if (current == 1 and direction == "up") or (current == total and direction == "down"):
            logger.info("form.move.noop_boundary order=%s direction=%s total=%s", current, direction, total)
            return False

        orders = _orders(collections)
        if current not in orders:
            logger.info("form.move.noop_not_found order=%s", current)
            return False
        neighbour = current - 1 if direction == "up" else current + 1
        if neighbour not in orders:
            logger.warning(
                "form.move.noop_missing_neighbour order=%s neighbour=%s orders=%s",
                current,
                neighbour,
                orders,
            )
            return False

        moved = {name: _swap_orders(collections[name], current, neighbour) for name in COLLECTION_NAMES}
        _write_back(state, moved)
        logger.info(
            "form.move order=%s direction=%s new_order=%s",
            current,
            direction,
            neighbour,
        )
        if on_finish:
            on_finish()
        return True
    except Exception as err:
        sink(err)
        return False


def delete_element(
    state: FormStateAccessor,
    element: Any,
    *,
    on_error: Optional[ErrorSink] = None,
    on_start: Optional[Hook] = None,
    on_finish: Optional[Hook] = None,
) -> bool:
    """Remove ``element`` from its owning collection and close the gap.

    The owning collection comes from the element's ``kind``. Every remaining
    element, in any collection, whose order is greater than the removed one
    moves down by exactly one. Returns True when an element was removed.
    """
    if element is None:
        return False
    sink = on_error or log_error
    started = False
    try:
        kind = element_kind(element)
        if kind is None:
            raise ValueError("element to delete carries no kind tag")
        collections = read_collections(state)
        if on_start:
            on_start()
            started = True

        name = COLLECTION_BY_KIND[kind]
        target = _order_of(element)
        index = next((i for i, item in enumerate(collections[name]) if item.order == target), None)
        if index is None:
            logger.info("form.delete.noop_not_found kind=%s order=%s", kind, target)
            return False

        before = _orders(collections)
        collections[name] = collections[name][:index] + collections[name][index + 1:]
        reindexed = {
            n: [_with_order(item, item.order - 1) if _after(item, target) else item for item in collections[n]]
            for n in COLLECTION_NAMES
        }
        _write_back(state, reindexed)
        logger.info(
            "form.delete kind=%s order=%s before=%s after=%s",
            kind,
            target,
            before,
            _orders(reindexed),
        )
        return True
    except Exception as err:
        sink(err)
        return False
    finally:
        if started and on_finish:
            on_finish()


def next_order(state: FormStateAccessor) -> int:
    """Return the order a newly appended element should take (N + 1)."""
    return _next_order(read_collections(state))


def add_element(
    state: FormStateAccessor,
    element: Any,
    *,
    on_error: Optional[ErrorSink] = None,
) -> Optional[Any]:
    """Append ``element`` at the end of the form and return the stored copy.

    Any order carried by ``element`` is replaced with N + 1. Returns None
    when the element could not be added (the error goes to ``on_error``).
    """
    sink = on_error or log_error
    try:
        kind = element_kind(element)
        if kind is None:
            raise ValueError("element to add carries no kind tag")
        collections = read_collections(state)
        name = COLLECTION_BY_KIND[kind]
        added = _with_order(coerce_element(name, element), _next_order(collections))
        collections[name] = collections[name] + [added]
        _write_back(state, collections)
        logger.info("form.add kind=%s order=%s", kind, added.order)
        return added
    except Exception as err:
        sink(err)
        return None


def is_contiguous(state: FormStateAccessor) -> bool:
    """Return True when all orders form exactly {1, ..., N}."""
    orders = _orders(read_collections(state))
    if any(not isinstance(order, int) for order in orders):
        return False
    return sorted(orders) == list(range(1, len(orders) + 1))


def renumber_contiguously(document: FormDocument) -> FormDocument:
    """Return a copy of ``document`` with orders reassigned to 1..N.

    Relative merged order is preserved; elements sharing an order keep
    heading, prompt, text block collection order.
    """
    collections = {
        "headings": list(document.headings),
        "prompts": list(document.prompts),
        "textBlocks": list(document.text_blocks),
    }
    renumbered: Dict[str, list] = {name: [] for name in COLLECTION_NAMES}
    for position, item in enumerate(merge_collections(collections), start=1):
        renumbered[COLLECTION_BY_KIND[item.kind]].append(_with_order(item, position))
    return FormDocument(
        headings=renumbered["headings"],
        prompts=renumbered["prompts"],
        text_blocks=renumbered["textBlocks"],
    )


__all__ = [
    "Direction",
    "move_element",
    "delete_element",
    "next_order",
    "add_element",
    "is_contiguous",
    "renumber_contiguously",
]
