from __future__ import annotations

import logging
from typing import Callable, Optional

from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from sqlalchemy import text as sql_text

from customforms.config import AppConfig, load_config
from customforms.db.base import get_engine, init_schema
from customforms.http.problem import (
    handle_http_exception,
    handle_request_validation_error,
    handle_unexpected_error,
)
from customforms.logging_setup import configure_logging
from customforms.routes import api_router

logger = logging.getLogger(__name__)


def _health_check() -> Callable[[], dict]:
    def check() -> dict:
        try:
            with get_engine().connect() as conn:
                conn.execute(sql_text("SELECT 1"))
            return {"status": "ok", "db": True}
        except Exception as e:
            logger.error("Health DB check failed", exc_info=True)
            return {"status": "degraded", "db": False, "reason": str(e)}

    return check


def create_app(config: Optional[AppConfig] = None) -> FastAPI:
    """Build the FastAPI application.

    Loads configuration, binds the shared engine to the configured DSN and
    creates the form tables before any request is served.
    """
    configure_logging()
    cfg = config or load_config()

    engine = get_engine(cfg.database.dsn)
    init_schema(engine)

    app = FastAPI(title="Custom Forms Service", version="1.0.0")
    app.state.config = cfg

    app.add_exception_handler(HTTPException, handle_http_exception)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)

    app.include_router(api_router, prefix="/api/v1")

    health_check = _health_check()

    @app.get("/health")
    def health():  # pragma: no cover - trivial
        return health_check()

    logger.info("app.created dsn_scheme=%s", cfg.database.dsn.split(":", 1)[0])
    return app


# Intentionally do not instantiate the app at import time to prevent side effects.
