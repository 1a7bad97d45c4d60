"""Question option data access helpers."""

from __future__ import annotations

from typing import Any, Iterable, List

from sqlalchemy import text as sql_text
from sqlalchemy.engine import Connection

from app.logic.question_validation import option_fields
from app.models.entities import QuestionOption, option_from_row


def delete_by_question(conn: Connection, question_id: int) -> int:
    result = conn.execute(
        sql_text("DELETE FROM question_option WHERE question_id = :qid"),
        {"qid": int(question_id)},
    )
    return int(result.rowcount or 0)


def replace_all(conn: Connection, question_id: int, options: Iterable[Any]) -> List[QuestionOption]:
    """Replace a question's option set with ``options`` (delete then insert).

    Returns the stored options in submission order.
    """
    delete_by_question(conn, question_id)
    stored: List[QuestionOption] = []
    for option in options:
        value, kind = option_fields(option)
        row = conn.execute(
            sql_text(
                """
                INSERT INTO question_option (question_id, value, option_type)
                VALUES (:qid, :value, :otype)
                RETURNING id
                """
            ),
            {"qid": int(question_id), "value": str(value), "otype": str(kind)},
        ).first()
        stored.append(QuestionOption(id=int(row[0]), question_id=int(question_id), value=str(value), type=str(kind)))
    return stored


def list_by_question(conn: Connection, question_id: int) -> List[QuestionOption]:
    rows = conn.execute(
        sql_text(
            "SELECT id, question_id, value, option_type FROM question_option WHERE question_id = :qid ORDER BY id ASC"
        ),
        {"qid": int(question_id)},
    ).mappings().all()
    return [option_from_row(r) for r in rows]


__all__ = ["delete_by_question", "replace_all", "list_by_question"]
