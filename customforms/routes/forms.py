"""Custom form authoring and submission routes.

Authoring endpoints save definitions, append, move and delete elements;
submission endpoints validate filled-in responses and store the extracted
payload. Ordering, validation and extraction live in ``customforms.logic``;
handlers only load, delegate and persist.
"""

from __future__ import annotations

from typing import Any, Dict, List
import logging

from fastapi import APIRouter, Body, Request
from fastapi.responses import JSONResponse
from pydantic import TypeAdapter

from customforms.config import FormsConfig
from customforms.http.problem import problem_response
from customforms.logic import repository_forms as repo
from customforms.logic.events import (
    FORM_ELEMENT_ADDED,
    FORM_ELEMENT_DELETED,
    FORM_ELEMENT_MOVED,
    FORM_SUBMISSION_SAVED,
    publish,
)
from customforms.logic.form_definition import (
    FormDefinitionError,
    sanitize_element,
    sanitize_form_definition,
    validate_form_title,
)
from customforms.logic.form_state import DocumentFormState, FormStructureError
from customforms.logic.merge_view import parse_and_sort_elements
from customforms.logic.order_sequences import add_element, delete_element, move_element
from customforms.logic.problem_factory import (
    problem_element_invalid,
    problem_element_not_found,
    problem_form_definition_invalid,
    problem_form_not_found,
    problem_form_structure_invalid,
    problem_responses_invalid,
)
from customforms.logic.prompt_responses import apply_prompt_response, extract_prompt_responses
from customforms.logic.validation import find_first_invalid
from customforms.models.elements import (
    COLLECTION_BY_KIND,
    ELEMENT_KINDS,
    ElementRef,
    FormDocument,
    FormElement,
)
from customforms.models.form_payloads import (
    FormDefinitionPayload,
    MoveElementPayload,
    SubmissionPayload,
)

# The parent application mounts this router under '/api/v1'.
router = APIRouter(prefix="/forms")
logger = logging.getLogger(__name__)

_ELEMENT_LIST = TypeAdapter(List[FormElement])


def _forms_config(request: Request) -> FormsConfig:
    return request.app.state.config.forms


def _form_body(form_id: str, title: str, document: FormDocument) -> Dict[str, Any]:
    elements = parse_and_sort_elements(DocumentFormState(document))
    return {
        "form_id": form_id,
        "title": title,
        **document.model_dump(by_alias=True),
        "elements": _ELEMENT_LIST.dump_python(elements, by_alias=True, mode="json"),
    }


def _definition_problem(exc: Exception) -> JSONResponse:
    if isinstance(exc, FormDefinitionError):
        return problem_response(problem_form_definition_invalid(exc.code, exc.detail))
    return problem_response(problem_form_structure_invalid(str(exc)))


def _holds(document: FormDocument, kind: str, order: int) -> bool:
    items = DocumentFormState(document).get(COLLECTION_BY_KIND[kind])
    return any(item.order == order for item in items)


@router.post("")
def create_form(payload: FormDefinitionPayload, request: Request) -> JSONResponse:
    cfg = _forms_config(request)
    try:
        title = validate_form_title(payload.title)
        document = sanitize_form_definition(payload.model_dump(by_alias=True), cfg.max_prompt_options)
    except (FormDefinitionError, FormStructureError) as exc:
        return _definition_problem(exc)
    form_id = repo.create_form(title, document)
    logger.info("forms.create form_id=%s elements=%s", form_id, document.element_count())
    return JSONResponse(_form_body(form_id, title, document), status_code=201)


@router.get("/{form_id}")
def get_form(form_id: str) -> JSONResponse:
    record = repo.get_form(form_id)
    if record is None:
        return problem_response(problem_form_not_found(form_id))
    return JSONResponse(_form_body(record["form_id"], record["title"], record["document"]))


@router.put("/{form_id}")
def replace_form(form_id: str, payload: FormDefinitionPayload, request: Request) -> JSONResponse:
    cfg = _forms_config(request)
    if repo.get_form(form_id) is None:
        return problem_response(problem_form_not_found(form_id))
    try:
        title = validate_form_title(payload.title)
        document = sanitize_form_definition(payload.model_dump(by_alias=True), cfg.max_prompt_options)
    except (FormDefinitionError, FormStructureError) as exc:
        return _definition_problem(exc)
    repo.save_form(form_id, document, title=title)
    return JSONResponse(_form_body(form_id, title, document))


@router.post("/{form_id}/elements")
def append_element(form_id: str, request: Request, payload: Dict[str, Any] = Body(...)) -> JSONResponse:
    cfg = _forms_config(request)
    record = repo.get_form(form_id)
    if record is None:
        return problem_response(problem_form_not_found(form_id))
    try:
        element = sanitize_element(payload, cfg.max_prompt_options)
    except FormDefinitionError as exc:
        return problem_response(problem_element_invalid(exc.detail))

    errors: List[Exception] = []
    document: FormDocument = record["document"]
    added = add_element(DocumentFormState(document), element, on_error=errors.append)
    if added is None:
        return problem_response(problem_element_invalid(str(errors[0]) if errors else "element not added"))
    repo.save_form(form_id, document)
    publish(FORM_ELEMENT_ADDED, {"form_id": form_id, "kind": added.kind, "order": added.order})
    body = _form_body(form_id, record["title"], document)
    body["added"] = added.model_dump(by_alias=True)
    return JSONResponse(body, status_code=201)


@router.post("/{form_id}/elements/move")
def move_form_element(form_id: str, payload: MoveElementPayload) -> JSONResponse:
    record = repo.get_form(form_id)
    if record is None:
        return problem_response(problem_form_not_found(form_id))
    document: FormDocument = record["document"]
    if not _holds(document, payload.kind, payload.order):
        return problem_response(problem_element_not_found(payload.kind, payload.order))

    errors: List[Exception] = []
    ref = ElementRef(kind=payload.kind, order=payload.order)
    moved = move_element(DocumentFormState(document), ref, payload.direction, on_error=errors.append)
    if errors:
        return problem_response(problem_form_structure_invalid(str(errors[0])))
    if moved:
        repo.save_form(form_id, document)
        publish(
            FORM_ELEMENT_MOVED,
            {"form_id": form_id, "kind": payload.kind, "order": payload.order, "direction": payload.direction},
        )
    body = _form_body(form_id, record["title"], document)
    body["moved"] = moved
    return JSONResponse(body)


@router.delete("/{form_id}/elements/{kind}/{order}")
def delete_form_element(form_id: str, kind: str, order: int) -> JSONResponse:
    if kind not in ELEMENT_KINDS:
        return problem_response(problem_element_invalid(f"unknown element kind: {kind}"))
    record = repo.get_form(form_id)
    if record is None:
        return problem_response(problem_form_not_found(form_id))

    errors: List[Exception] = []
    document: FormDocument = record["document"]
    deleted = delete_element(
        DocumentFormState(document),
        {"kind": kind, "order": order},
        on_error=errors.append,
    )
    if errors:
        return problem_response(problem_form_structure_invalid(str(errors[0])))
    if not deleted:
        return problem_response(problem_element_not_found(kind, order))
    repo.save_form(form_id, document)
    publish(FORM_ELEMENT_DELETED, {"form_id": form_id, "kind": kind, "order": order})
    return JSONResponse(_form_body(form_id, record["title"], document))


@router.post("/{form_id}/submissions")
def submit_responses(form_id: str, payload: SubmissionPayload, request: Request) -> JSONResponse:
    cfg = _forms_config(request)
    record = repo.get_form(form_id)
    if record is None:
        return problem_response(problem_form_not_found(form_id))

    errors: List[Exception] = []
    elements = parse_and_sort_elements(DocumentFormState(record["document"]), on_error=errors.append)
    if errors:
        return problem_response(problem_form_structure_invalid(str(errors[0])))
    for answer in payload.responses:
        apply_prompt_response(elements, answer.order, answer.value)

    issue = find_first_invalid(elements, cfg.text_response_max_length)
    if issue is not None:
        return problem_response(problem_responses_invalid(issue.as_dict()))

    responses = extract_prompt_responses(elements)
    submission_id = repo.create_submission(form_id, responses, respondent=payload.respondent)
    publish(FORM_SUBMISSION_SAVED, {"form_id": form_id, "submission_id": submission_id, "count": len(responses)})
    return JSONResponse(
        {
            "submission_id": submission_id,
            "form_id": form_id,
            "formResponses": [r.model_dump(by_alias=True) for r in responses],
        },
        status_code=201,
    )


@router.get("/{form_id}/submissions")
def get_submissions(form_id: str) -> JSONResponse:
    if repo.get_form(form_id) is None:
        return problem_response(problem_form_not_found(form_id))
    return JSONResponse({"form_id": form_id, "submissions": repo.list_submissions(form_id)})


__all__ = ["router"]
