from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from sqlalchemy import text as sql_text
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException

from app.config import load_config
from app.db.base import get_engine
from app.db.migrations_runner import apply_migrations
from app.http.problem import (
    handle_http_exception,
    handle_question_service_error,
    handle_request_validation_error,
    handle_unexpected_error,
)
from app.http.request_id import RequestIdMiddleware
from app.logging_setup import configure_logging
from app.logic.errors import QuestionServiceError
from app.routes import api_router

logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).resolve().parents[1]


def _migrations_dir(dialect: str, configured: str | None) -> Path:
    if configured:
        return Path(configured)
    name = "sqlite_migrations" if dialect == "sqlite" else "migrations"
    return PROJECT_ROOT / name


def _apply_startup_migrations() -> None:
    cfg = load_config()
    if not cfg.migrations.auto_apply:
        logger.info("startup.migrations skipped auto_apply=false")
        return
    engine = get_engine()
    applied = apply_migrations(engine, _migrations_dir(engine.dialect.name, cfg.migrations.directory))
    logger.info("startup.migrations applied=%s", applied)


def _health_check() -> Callable[[], dict]:
    def check() -> dict:
        try:
            with get_engine().connect() as conn:
                conn.execute(sql_text("SELECT 1"))
            return {"status": "ok", "db": True}
        except SQLAlchemyError as e:
            logger.error("Health DB check failed", exc_info=True)
            return {"status": "degraded", "db": False, "reason": e.__class__.__name__}

    return check


def create_app() -> FastAPI:
    # Configure global logging before app instantiation so all modules emit
    configure_logging()
    app = FastAPI(title="Survey Question Authoring API")

    app.add_exception_handler(QuestionServiceError, handle_question_service_error)
    app.add_exception_handler(HTTPException, handle_http_exception)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)
    app.add_middleware(RequestIdMiddleware)

    _apply_startup_migrations()

    app.include_router(api_router, prefix="/api/v1")

    health_check = _health_check()

    @app.get("/health")
    def health():  # pragma: no cover - trivial
        return health_check()

    return app


# Intentionally do not instantiate the app at import time to prevent side effects.
