"""Question order rewriting helpers.

``reindex_questions`` is the single place where a survey's positions are
rewritten in bulk. It runs on the caller's connection, which must already
hold the survey write lock.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Sequence

from sqlalchemy.engine import Connection

from app.logic import repository_questions
from app.logic.errors import QuestionValidationError

logger = logging.getLogger(__name__)


def check_complete_order(ordered_ids: Sequence[int], current_ids: Sequence[int]) -> None:
    """Raise unless ``ordered_ids`` is a permutation of ``current_ids``."""
    errors: List[Dict[str, str]] = []
    known = set(current_ids)
    seen: set[int] = set()
    for idx, qid in enumerate(ordered_ids):
        if qid not in known:
            errors.append({"path": f"$.questions[{idx}].id", "code": "unknown_question"})
        elif qid in seen:
            errors.append({"path": f"$.questions[{idx}].id", "code": "duplicate"})
        seen.add(qid)
    if known - seen:
        errors.append({"path": "$.questions", "code": "incomplete"})
    if errors:
        raise QuestionValidationError(errors)


def reindex_questions(
    conn: Connection,
    survey_id: int,
    ordered_ids: Sequence[int],
    strict: bool = False,
) -> Dict[int, int]:
    """Give each id in ``ordered_ids`` the position ``index + 1``.

    Ids that do not belong to the survey are skipped. A repeated id ends up at
    its last position. Survey questions absent from ``ordered_ids`` keep their
    previous relative order and are placed after the highest assigned
    position. With ``strict`` the list must be exactly the survey's ids.

    Returns the final ``{question_id: order}`` mapping for the whole survey.
    """
    before = repository_questions.list_by_survey(conn, survey_id)
    before_ids = [int(q.id or 0) for q in before]
    if strict:
        check_complete_order(ordered_ids, before_ids)

    known = set(before_ids)
    # Two-phase write to avoid unique collisions on (survey_id, question_order)
    repository_questions.park_orders(conn, survey_id)

    final: Dict[int, int] = {}
    for position, qid in enumerate(ordered_ids, start=1):
        if int(qid) not in known:
            continue
        repository_questions.update_order(conn, int(qid), position, survey_id)
        final[int(qid)] = position

    next_position = max(final.values(), default=0) + 1
    for qid in before_ids:
        if qid in final:
            continue
        repository_questions.update_order(conn, qid, next_position, survey_id)
        final[qid] = next_position
        next_position += 1

    logger.info(
        "reindex_questions survey_id=%s before=%s submitted=%s after=%s",
        survey_id,
        before_ids,
        list(ordered_ids),
        sorted(final, key=final.__getitem__),
    )
    return final


__all__ = ["check_complete_order", "reindex_questions"]
