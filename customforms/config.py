"""Configuration utilities for the Custom Forms service.

This module loads application configuration with the following rules:
- Primary source: `customforms_config.json` at the project root.
- Overrides: environment variables, then optional text files under `config/`.
- Validation: Pydantic models enforce required fields and value constraints.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, ValidationError as PydanticValidationError, field_validator

from customforms.db.base import DEFAULT_DATABASE_URL
from customforms.logic.form_definition import MAX_PROMPT_OPTIONS
from customforms.logic.validation import TEXT_RESPONSE_MAX_LENGTH


CONFIG_DIR = Path("config")
ROOT_CONFIG = Path("customforms_config.json")
logger = logging.getLogger(__name__)


def _read_config_file(rel_path: str) -> Optional[str]:
    path = CONFIG_DIR / rel_path
    try:
        if path.exists():
            return path.read_text(encoding="utf-8").strip()
    except (OSError, UnicodeDecodeError) as e:
        # Recoverable: log and ignore unreadable override
        logger.warning("Failed to read override %s: %s", path, e)
        return None
    return None


def _env(key: str, default: Optional[str] = None) -> Optional[str]:
    return os.environ.get(key, default)


class DatabaseConfig(BaseModel):
    dsn: str

    @field_validator("dsn")
    @classmethod
    def dsn_must_be_non_empty(cls, v: str) -> str:
        if not isinstance(v, str) or not v.strip():
            raise ValueError("database.dsn must be a non-empty string")
        return v


class FormsConfig(BaseModel):
    text_response_max_length: int = Field(default=TEXT_RESPONSE_MAX_LENGTH, gt=0)
    max_prompt_options: int = Field(default=MAX_PROMPT_OPTIONS, gt=0)


class AppConfig(BaseModel):
    database: DatabaseConfig
    forms: FormsConfig


def _read_json_file(path: Path) -> dict:
    try:
        if path.exists():
            return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        logger.error("Failed to read JSON config %s: %s", path, e)
    return {}


def load_config() -> AppConfig:
    """Load configuration with validation.

    Precedence (highest first):
    1) Environment variables
    2) Text files in `config/` (optional)
    3) customforms_config.json at project root (primary base)
    4) Safe defaults for development
    """

    base = _read_json_file(ROOT_CONFIG)

    def _base(path: str, default: Optional[str] = None) -> Optional[str]:
        cur: object = base
        for key in path.split("."):
            if not isinstance(cur, dict) or key not in cur:
                return default
            cur = cur[key]
        return str(cur) if cur is not None else default

    dsn = (
        _env("TEST_DATABASE_URL")
        or _env("DATABASE_URL")
        or _read_config_file("database.url")
        or _base("database.dsn")
        or DEFAULT_DATABASE_URL
    )
    text_max = (
        _env("FORMS_TEXT_RESPONSE_MAX_LENGTH")
        or _read_config_file("forms.text_response_max_length")
        or _base("forms.text_response_max_length", str(TEXT_RESPONSE_MAX_LENGTH))
    )
    max_options = (
        _env("FORMS_MAX_PROMPT_OPTIONS")
        or _read_config_file("forms.max_prompt_options")
        or _base("forms.max_prompt_options", str(MAX_PROMPT_OPTIONS))
    )

    try:
        return AppConfig(
            database=DatabaseConfig(dsn=dsn),
            forms=FormsConfig(
                text_response_max_length=str(text_max).strip(),
                max_prompt_options=str(max_options).strip(),
            ),
        )
    except PydanticValidationError as e:
        logger.error("Invalid application configuration: %s", e)
        raise


__all__ = [
    "AppConfig",
    "DatabaseConfig",
    "FormsConfig",
    "load_config",
]
