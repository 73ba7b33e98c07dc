"""Form-state accessors for the three element collections.

The ordering engine never owns storage: it reads collections through
``get(name)`` and writes them back through ``set(name, items)`` where
``name`` is one of ``headings``, ``prompts`` or ``textBlocks``. Two adapters
are provided, one over a ``FormDocument`` model and one over a plain dict
such as a decoded JSON document.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, MutableMapping, Protocol

from pydantic import BaseModel

from customforms.models.elements import (
    COLLECTION_NAMES,
    KIND_BY_COLLECTION,
    MODEL_BY_KIND,
    FormDocument,
)


class FormStructureError(ValueError):
    """A form collection is missing or is not a list."""

    code = "form_structure_invalid"


class FormStateAccessor(Protocol):
    def get(self, name: str) -> Any: ...

    def set(self, name: str, items: List[Any]) -> None: ...


_DOCUMENT_ATTRS = {"headings": "headings", "prompts": "prompts", "textBlocks": "text_blocks"}


def _check_name(name: str) -> None:
    if name not in COLLECTION_NAMES:
        raise KeyError(f"unknown form collection: {name}")


class DocumentFormState:
    """Accessor over a ``FormDocument``; ``set`` replaces the collection."""

    def __init__(self, document: FormDocument) -> None:
        self.document = document

    def get(self, name: str) -> Any:
        _check_name(name)
        return getattr(self.document, _DOCUMENT_ATTRS[name])

    def set(self, name: str, items: List[Any]) -> None:
        _check_name(name)
        setattr(self.document, _DOCUMENT_ATTRS[name], list(items))


class MappingFormState:
    """Accessor over a plain mapping keyed by wire collection names.

    Written items are dumped back to camelCase dicts so the mapping stays
    JSON-serialisable.
    """

    def __init__(self, data: MutableMapping[str, Any]) -> None:
        self.data = data

    def get(self, name: str) -> Any:
        _check_name(name)
        return self.data.get(name)

    def set(self, name: str, items: List[Any]) -> None:
        _check_name(name)
        self.data[name] = [
            item.model_dump(by_alias=True, exclude_none=True) if isinstance(item, BaseModel) else item
            for item in items
        ]


def read_collections(state: FormStateAccessor) -> Dict[str, list]:
    """Read and coerce all three collections, or raise ``FormStructureError``.

    Runs before any mutation so a structural failure never leaves the caller
    with partially updated collections. Raw mapping items are validated into
    element models tagged with the kind of the collection they came from.
    """
    raw = {name: state.get(name) for name in COLLECTION_NAMES}
    for name, items in raw.items():
        if not isinstance(items, list):
            raise FormStructureError(f"form collection '{name}' is not a list")
    return {name: [coerce_element(name, item) for item in items] for name, items in raw.items()}


def coerce_element(name: str, item: Any) -> Any:
    """Validate ``item`` into the element model of collection ``name``."""
    kind = KIND_BY_COLLECTION[name]
    model = MODEL_BY_KIND[kind]
    if isinstance(item, model):
        return item
    if isinstance(item, BaseModel):
        item = item.model_dump(by_alias=True)
    if not isinstance(item, Mapping):
        raise FormStructureError(f"form collection '{name}' contains a non-object item")
    return model.model_validate({**item, "kind": kind})


__all__ = [
    "FormStructureError",
    "FormStateAccessor",
    "DocumentFormState",
    "MappingFormState",
    "read_collections",
    "coerce_element",
]
