"""Database bootstrap utilities for the question authoring service.

Exposes engine construction, the transaction helper and the SQL migrations
runner that applies files from the local migrations directory. The DB layer
does not leak rows into route handlers; repositories return pydantic entities.
"""

from app.db.base import get_engine, transaction
from app.db.migrations_runner import apply_migrations

__all__ = [
    "get_engine",
    "transaction",
    "apply_migrations",
]
