"""SQLAlchemy engine and schema bootstrap.

The service targets PostgreSQL in production but supports SQLite for local
development and CI. Tables are declared in ``customforms.models.form_record``;
this module only manages the engine and table creation.
"""

from __future__ import annotations

import logging
import os

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool

logger = logging.getLogger(__name__)

DEFAULT_DATABASE_URL = "sqlite+pysqlite:///:memory:"


def _db_url() -> str:
    return (
        os.getenv("TEST_DATABASE_URL")
        or os.getenv("DATABASE_URL")
        or DEFAULT_DATABASE_URL
    )


# Module-level cached Engine so repositories share one engine
_ENGINE: Engine | None = None
_ENGINE_URL: str | None = None


def get_engine(url: str | None = None) -> Engine:
    """Return a singleton SQLAlchemy Engine.

    Without ``url`` the engine built last is reused, falling back to the
    environment. For SQLite in-memory URLs a StaticPool keeps a single
    connection alive across sessions and threads during tests.
    """
    global _ENGINE, _ENGINE_URL
    if url is None and _ENGINE is not None:
        return _ENGINE
    resolved_url = url or _db_url()

    if _ENGINE is None or _ENGINE_URL != resolved_url:
        kwargs: dict = {"future": True, "pool_pre_ping": True}
        if resolved_url.startswith("sqlite") and ":memory:" in resolved_url:
            kwargs.update({
                "poolclass": StaticPool,
                "connect_args": {"check_same_thread": False},
            })
        _ENGINE = create_engine(resolved_url, **kwargs)
        _ENGINE_URL = resolved_url

    return _ENGINE


def init_schema(engine: Engine | None = None) -> None:
    """Create the form tables when they do not exist yet."""
    from customforms.models.form_record import Base

    engine = engine or get_engine()
    try:
        Base.metadata.create_all(engine)
    except Exception:
        logger.error("Failed to create form tables", exc_info=True)
        raise

