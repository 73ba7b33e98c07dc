"""Form definition and submission repository helpers.

Encapsulates DB reads/writes used by the form routes, keeping the HTTP
layer free of direct SQL. Documents and responses are stored as JSON text
in their camelCase wire shape.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
import json
import logging
import uuid

from sqlalchemy import text as sql_text

from customforms.db.base import get_engine
from customforms.models.elements import FormDocument
from customforms.models.form_response import FormResponse

logger = logging.getLogger(__name__)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _dump_document(document: FormDocument) -> str:
    return json.dumps(document.model_dump(by_alias=True), ensure_ascii=False)


def _load_json(raw: Any) -> Any:
    if isinstance(raw, (bytes, bytearray)):
        raw = raw.decode("utf-8")
    if isinstance(raw, str):
        return json.loads(raw)
    return raw


def create_form(title: str, document: FormDocument) -> str:
    """Insert a new form definition and return its generated ``form_id``."""
    form_id = str(uuid.uuid4())
    now = _now()
    eng = get_engine()
    try:
        with eng.begin() as conn:
            conn.execute(
                sql_text(
                    "INSERT INTO custom_form (form_id, title, document, created_at, updated_at) "
                    "VALUES (:fid, :title, :doc, :ts, :ts)"
                ),
                {"fid": form_id, "title": title, "doc": _dump_document(document), "ts": now},
            )
    except Exception:
        logger.error("create_form failed title=%s", title, exc_info=True)
        raise
    return form_id


def get_form(form_id: str) -> Optional[Dict[str, Any]]:
    """Return ``{form_id, title, document}`` or None when the form is unknown."""
    eng = get_engine()
    with eng.connect() as conn:
        row = conn.execute(
            sql_text("SELECT form_id, title, document FROM custom_form WHERE form_id = :fid"),
            {"fid": str(form_id)},
        ).fetchone()
    if row is None:
        return None
    return {
        "form_id": str(row[0]),
        "title": str(row[1]),
        "document": FormDocument.model_validate(_load_json(row[2]) or {}),
    }


def save_form(form_id: str, document: FormDocument, title: Optional[str] = None) -> bool:
    """Replace a stored document (and optionally its title); False if unknown."""
    eng = get_engine()
    params: Dict[str, Any] = {"fid": str(form_id), "doc": _dump_document(document), "ts": _now()}
    statement = "UPDATE custom_form SET document = :doc, updated_at = :ts"
    if title is not None:
        statement += ", title = :title"
        params["title"] = title
    try:
        with eng.begin() as conn:
            result = conn.execute(sql_text(statement + " WHERE form_id = :fid"), params)
    except Exception:
        logger.error("save_form failed form_id=%s", form_id, exc_info=True)
        raise
    return bool(result.rowcount)


def create_submission(form_id: str, responses: List[FormResponse], respondent: Optional[str] = None) -> str:
    """Store extracted responses for a form and return the ``submission_id``."""
    submission_id = str(uuid.uuid4())
    payload = json.dumps([r.model_dump(by_alias=True) for r in responses], ensure_ascii=False)
    eng = get_engine()
    try:
        with eng.begin() as conn:
            conn.execute(
                sql_text(
                    "INSERT INTO form_submission (submission_id, form_id, respondent, responses, created_at) "
                    "VALUES (:sid, :fid, :who, :resp, :ts)"
                ),
                {"sid": submission_id, "fid": str(form_id), "who": respondent, "resp": payload, "ts": _now()},
            )
    except Exception:
        logger.error("create_submission failed form_id=%s", form_id, exc_info=True)
        raise
    return submission_id


def list_submissions(form_id: str) -> List[Dict[str, Any]]:
    eng = get_engine()
    with eng.connect() as conn:
        rows = conn.execute(
            sql_text(
                "SELECT submission_id, respondent, responses FROM form_submission "
                "WHERE form_id = :fid ORDER BY created_at ASC, submission_id ASC"
            ),
            {"fid": str(form_id)},
        ).fetchall()
    return [
        {
            "submission_id": str(r[0]),
            "respondent": r[1],
            "formResponses": _load_json(r[2]) or [],
        }
        for r in rows
    ]


__all__ = [
    "create_form",
    "get_form",
    "save_form",
    "create_submission",
    "list_submissions",
]
