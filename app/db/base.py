"""SQLAlchemy engine and transaction helpers.

The service targets PostgreSQL in production but supports SQLite for local
development and CI. No declarative models are defined here; this module only
manages the connection lifecycle. Repositories receive an open ``Connection``
so that a whole service operation runs inside one transaction.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.pool import StaticPool

from app.config import load_config

logger = logging.getLogger(__name__)


# Module-level cached Engine so repositories share one pool
_ENGINE: Engine | None = None
_ENGINE_URL: str | None = None


def _engine_kwargs(url: str, lock_timeout_seconds: float) -> dict:
    kwargs: dict = {"future": True, "pool_pre_ping": True}
    if url.startswith("sqlite"):
        # Pooled connections move between request threads
        connect_args: dict = {"timeout": lock_timeout_seconds, "check_same_thread": False}
        if ":memory:" in url:
            # Keep a single in-memory DB connection shared across the process
            kwargs["poolclass"] = StaticPool
        kwargs["connect_args"] = connect_args
    elif url.startswith("postgresql"):
        millis = int(lock_timeout_seconds * 1000)
        kwargs["connect_args"] = {"options": f"-c lock_timeout={millis}"}
    return kwargs


def get_engine(url: str | None = None) -> Engine:
    """Return a singleton SQLAlchemy Engine for the given URL.

    The URL defaults to the configured ``database.dsn``. A different URL
    replaces the cached engine (used by tests that point at a fresh file).
    """
    global _ENGINE, _ENGINE_URL
    cfg = load_config()
    resolved_url = url or cfg.database.dsn

    if _ENGINE is None or _ENGINE_URL != resolved_url:
        if _ENGINE is not None:
            _ENGINE.dispose()
        _ENGINE = create_engine(
            resolved_url, **_engine_kwargs(resolved_url, cfg.database.lock_timeout_seconds)
        )
        _ENGINE_URL = resolved_url
        logger.info("db.engine.created dialect=%s", _ENGINE.dialect.name)

    return _ENGINE


@contextmanager
def transaction(engine: Engine | None = None) -> Iterator[Connection]:
    """Yield a connection inside ``BEGIN``; commit on success, roll back on error."""
    eng = engine or get_engine()
    with eng.begin() as conn:
        yield conn


__all__ = ["get_engine", "transaction"]
