"""FastAPI application package init for the Custom Forms service.

This package exposes a small FastAPI application factory used to author and
fill in custom forms (registration forms, review rubrics). Business logic
lives in `customforms/logic/` and route handlers in `customforms/routes/`.
"""

from __future__ import annotations

from customforms.main import create_app

__all__ = ["create_app"]
