"""Question-related repository helpers for authoring.

Encapsulates the SQL used by the question service, keeping the HTTP layer
free of queries. Every helper runs on the caller's connection so a service
operation stays inside one transaction.
"""

from __future__ import annotations

from typing import List

from sqlalchemy import text as sql_text
from sqlalchemy.engine import Connection

from app.models.entities import Question, question_from_row


_QUESTION_COLUMNS = "id, uuid, survey_id, description, question_order"


def next_order(conn: Connection, survey_id: int) -> int:
    """Return MAX(question_order) + 1 for a survey (1 for an empty survey).

    Callers must hold the survey write lock, otherwise two writers can read
    the same maximum.
    """
    row = conn.execute(
        sql_text("SELECT COALESCE(MAX(question_order), 0) FROM question WHERE survey_id = :sid"),
        {"sid": int(survey_id)},
    ).first()
    base = int(row[0]) if row and row[0] is not None else 0
    return base + 1


def insert(conn: Connection, question: Question) -> Question:
    """Insert a question row and return it with its generated id."""
    row = conn.execute(
        sql_text(
            """
            INSERT INTO question (uuid, survey_id, description, question_order)
            VALUES (:uuid, :sid, :descr, :ord)
            RETURNING id
            """
        ),
        {
            "uuid": question.uuid,
            "sid": int(question.survey_id),
            "descr": question.description,
            "ord": int(question.order),
        },
    ).first()
    return question.model_copy(update={"id": int(row[0])})


def find_by_uuid_and_survey(conn: Connection, question_uuid: str, survey_id: int) -> Question | None:
    row = conn.execute(
        sql_text(f"SELECT {_QUESTION_COLUMNS} FROM question WHERE uuid = :uuid AND survey_id = :sid"),
        {"uuid": str(question_uuid), "sid": int(survey_id)},
    ).mappings().first()
    return question_from_row(row) if row else None


def delete_by_id(conn: Connection, question_id: int) -> int:
    """Delete a question row and return the number of rows removed.

    Options are removed first by the caller; SQLite does not enforce the
    ON DELETE CASCADE unless foreign keys are switched on per connection.
    """
    result = conn.execute(
        sql_text("DELETE FROM question WHERE id = :qid"),
        {"qid": int(question_id)},
    )
    return int(result.rowcount or 0)


def list_by_survey(
    conn: Connection,
    survey_id: int,
    paginated: bool = False,
    page: int = 1,
    per_page: int = 15,
) -> List[Question]:
    """Return a survey's questions ordered by position (tie-breaker: id).

    With ``paginated`` only the requested 1-based page is returned.
    """
    sql = f"SELECT {_QUESTION_COLUMNS} FROM question WHERE survey_id = :sid ORDER BY question_order ASC, id ASC"
    params: dict = {"sid": int(survey_id)}
    if paginated:
        sql += " LIMIT :limit OFFSET :offset"
        params["limit"] = int(per_page)
        params["offset"] = (max(int(page), 1) - 1) * int(per_page)
    rows = conn.execute(sql_text(sql), params).mappings().all()
    return [question_from_row(r) for r in rows]


def count_by_survey(conn: Connection, survey_id: int) -> int:
    row = conn.execute(
        sql_text("SELECT COUNT(*) FROM question WHERE survey_id = :sid"),
        {"sid": int(survey_id)},
    ).first()
    return int(row[0]) if row and row[0] is not None else 0


def update_order(conn: Connection, question_id: int, order_value: int, survey_id: int) -> int:
    """Set one question's position; ids outside ``survey_id`` are left alone."""
    result = conn.execute(
        sql_text("UPDATE question SET question_order = :ord WHERE id = :qid AND survey_id = :sid"),
        {"ord": int(order_value), "qid": int(question_id), "sid": int(survey_id)},
    )
    return int(result.rowcount or 0)


def park_orders(conn: Connection, survey_id: int) -> None:
    """Negate every position of a survey to free the unique (survey, order) space.

    Parked values are negative and pairwise distinct, so the rewrite that
    follows can assign positive positions in any sequence without collisions.
    """
    conn.execute(
        sql_text("UPDATE question SET question_order = -question_order WHERE survey_id = :sid AND question_order > 0"),
        {"sid": int(survey_id)},
    )


def update(conn: Connection, question: Question) -> None:
    """Persist the mutable fields of a question (its description)."""
    conn.execute(
        sql_text(
            "UPDATE question SET description = :descr, updated_at = CURRENT_TIMESTAMP WHERE id = :qid"
        ),
        {"descr": question.description, "qid": int(question.id or 0)},
    )


__all__ = [
    "next_order",
    "insert",
    "find_by_uuid_and_survey",
    "delete_by_id",
    "list_by_survey",
    "count_by_survey",
    "update_order",
    "park_orders",
    "update",
]
