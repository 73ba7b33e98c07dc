"""APIRouter registration for the Custom Forms service."""

from __future__ import annotations

from fastapi import APIRouter

from customforms.routes.forms import router as forms_router

api_router = APIRouter()
api_router.include_router(forms_router, tags=["Forms"])

__all__ = ["api_router"]
