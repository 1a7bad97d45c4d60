"""Survey data access helpers.

Surveys are created and run by other parts of the product; this module only
reads them and takes the per-survey write lock used by question mutations.
"""

from __future__ import annotations

from sqlalchemy import text as sql_text
from sqlalchemy.engine import Connection

from app.models.entities import Survey, survey_from_row

_SURVEY_COLUMNS = "id, uuid, owner_id, name, is_running"


def find_by_owner_and_uuid(conn: Connection, owner_id: int, survey_uuid: str) -> Survey | None:
    row = conn.execute(
        sql_text(f"SELECT {_SURVEY_COLUMNS} FROM survey WHERE owner_id = :owner AND uuid = :uuid"),
        {"owner": int(owner_id), "uuid": str(survey_uuid)},
    ).mappings().first()
    return survey_from_row(row) if row else None


def is_running(conn: Connection, survey_uuid: str) -> bool:
    """Return the running flag by uuid alone; unknown surveys are not running."""
    row = conn.execute(
        sql_text("SELECT is_running FROM survey WHERE uuid = :uuid"),
        {"uuid": str(survey_uuid)},
    ).first()
    return bool(row and row[0])


def lock_for_write(conn: Connection, survey_id: int) -> Survey | None:
    """Take the survey write lock and return the survey as seen under it.

    Bumping ``lock_version`` is the first write of the transaction: on
    PostgreSQL it holds the row lock until commit, on SQLite it holds the
    database write lock. Concurrent writers on the same survey queue here.
    """
    conn.execute(
        sql_text("UPDATE survey SET lock_version = lock_version + 1 WHERE id = :sid"),
        {"sid": int(survey_id)},
    )
    row = conn.execute(
        sql_text(f"SELECT {_SURVEY_COLUMNS} FROM survey WHERE id = :sid"),
        {"sid": int(survey_id)},
    ).mappings().first()
    return survey_from_row(row) if row else None


__all__ = ["find_by_owner_and_uuid", "is_running", "lock_for_write"]
