"""ORM models for stored form definitions and submissions."""

from __future__ import annotations

from sqlalchemy.orm import declarative_base
from sqlalchemy import Column, DateTime, ForeignKey, JSON, String


Base = declarative_base()


class CustomFormRecord(Base):  # type: ignore[valid-type]
    __tablename__ = "custom_form"

    form_id = Column(String, primary_key=True)
    title = Column(String, nullable=False)
    document = Column(JSON, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)


class FormSubmissionRecord(Base):  # type: ignore[valid-type]
    __tablename__ = "form_submission"

    submission_id = Column(String, primary_key=True)
    form_id = Column(String, ForeignKey("custom_form.form_id"), nullable=False, index=True)
    respondent = Column(String, nullable=True)
    responses = Column(JSON, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False)


__all__ = ["Base", "CustomFormRecord", "FormSubmissionRecord"]
