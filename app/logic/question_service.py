"""Question authoring service.

Orders the ownership check, the running-survey lock check and the store
mutations for every question operation. Each operation runs in one
transaction; mutations first take the survey write lock (see
``repository_surveys.lock_for_write``) so computing the next position and
inserting the row cannot interleave with another writer on the same survey.

Outcomes the caller must handle are raised as ``NotFound``, ``SurveyLocked``
or ``QuestionValidationError``. Database faults surface as ``StorageError``.
"""

from __future__ import annotations

import logging
import uuid
from contextlib import contextmanager
from typing import Any, Callable, Iterator, List, NamedTuple, Sequence

from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import SQLAlchemyError

from app.config import load_config
from app.db.base import get_engine, transaction
from app.logic import events, repository_options, repository_questions, repository_surveys
from app.logic.errors import NotFound, StorageError, SurveyLocked
from app.logic.order_sequences import reindex_questions
from app.logic.question_validation import validate_question
from app.models.entities import Question, QuestionOption, Survey

logger = logging.getLogger(__name__)


class QuestionEditContext(NamedTuple):
    survey: Survey
    question: Question
    options: List[QuestionOption]


class ReorderContext(NamedTuple):
    survey: Survey
    questions: List[Question]


class QuestionPage(NamedTuple):
    items: List[Question]
    page: int
    per_page: int
    total: int


class QuestionService:
    def __init__(
        self,
        engine: Engine | None = None,
        *,
        strict_reorder: bool | None = None,
        per_page: int | None = None,
        uuid_factory: Callable[[], str] | None = None,
    ) -> None:
        cfg = load_config()
        self.engine = engine or get_engine()
        self.strict_reorder = cfg.reorder.strict if strict_reorder is None else bool(strict_reorder)
        self.per_page = int(per_page or cfg.listing.per_page)
        self._new_uuid = uuid_factory or (lambda: str(uuid.uuid4()))

    @contextmanager
    def _transaction(self, operation: str) -> Iterator[Connection]:
        try:
            with transaction(self.engine) as conn:
                yield conn
        except SQLAlchemyError as exc:
            logger.error("question_service.%s storage failure", operation, exc_info=True)
            raise StorageError(f"{operation} failed: {exc.__class__.__name__}") from exc

    @staticmethod
    def _owned_survey(conn: Connection, survey_uuid: str, owner_id: int) -> Survey:
        survey = repository_surveys.find_by_owner_and_uuid(conn, owner_id, survey_uuid)
        if survey is None:
            raise NotFound("survey", survey_uuid)
        return survey

    @staticmethod
    def _lock_survey(
        conn: Connection,
        survey: Survey,
        locked_error: Callable[[str], SurveyLocked] = SurveyLocked,
    ) -> Survey:
        """Take the write lock and re-check the running flag under it."""
        locked = repository_surveys.lock_for_write(conn, survey.id)
        if locked is None:
            raise NotFound("survey", survey.uuid)
        if locked.is_running:
            raise locked_error(survey.uuid)
        return locked

    @staticmethod
    def _question(conn: Connection, survey: Survey, question_uuid: str) -> Question:
        question = repository_questions.find_by_uuid_and_survey(conn, question_uuid, survey.id)
        if question is None:
            raise NotFound("question", question_uuid)
        return question

    def validate(self, description: Any, options: Any) -> None:
        validate_question(description, options)

    def get_for_create(self, survey_uuid: str, owner_id: int) -> Survey:
        """Return the owned survey a new question would be added to."""
        with self._transaction("get_for_create") as conn:
            return self._owned_survey(conn, survey_uuid, owner_id)

    def create(self, survey_uuid: str, owner_id: int, description: str, options: Sequence[Any]) -> Question:
        return self.create_with_options(survey_uuid, owner_id, description, options).question

    def create_with_options(
        self,
        survey_uuid: str,
        owner_id: int,
        description: str,
        options: Sequence[Any],
    ) -> QuestionEditContext:
        """Append a question to the survey; return it with its stored options."""
        with self._transaction("create") as conn:
            survey = self._owned_survey(conn, survey_uuid, owner_id)
            if survey.is_running:
                raise SurveyLocked(survey_uuid)
            validate_question(description, options)
            survey = self._lock_survey(conn, survey)
            order_value = repository_questions.next_order(conn, survey.id)
            question = repository_questions.insert(
                conn,
                Question(uuid=self._new_uuid(), survey_id=survey.id, description=description, order=order_value),
            )
            stored = repository_options.replace_all(conn, int(question.id or 0), options)

        logger.info("question.create survey=%s question=%s order=%s", survey_uuid, question.uuid, question.order)
        events.publish(events.QUESTION_CREATED, {"survey_uuid": survey_uuid, "question_uuid": question.uuid, "order": question.order})
        return QuestionEditContext(survey, question, stored)

    def delete(self, survey_uuid: str, question_uuid: str, owner_id: int) -> None:
        with self._transaction("delete") as conn:
            if repository_surveys.is_running(conn, survey_uuid):
                raise SurveyLocked(survey_uuid)
            survey = self._owned_survey(conn, survey_uuid, owner_id)
            survey = self._lock_survey(conn, survey)
            question = self._question(conn, survey, question_uuid)
            repository_options.delete_by_question(conn, int(question.id or 0))
            repository_questions.delete_by_id(conn, int(question.id or 0))

        logger.info("question.delete survey=%s question=%s", survey_uuid, question_uuid)
        events.publish(events.QUESTION_DELETED, {"survey_uuid": survey_uuid, "question_uuid": question_uuid})

    def get_for_edit(self, survey_uuid: str, question_uuid: str, owner_id: int) -> QuestionEditContext:
        with self._transaction("get_for_edit") as conn:
            survey = self._owned_survey(conn, survey_uuid, owner_id)
            if survey.is_running:
                raise SurveyLocked.running(survey_uuid)
            question = self._question(conn, survey, question_uuid)
            options = repository_options.list_by_question(conn, int(question.id or 0))
        return QuestionEditContext(survey, question, options)

    def update(
        self,
        survey_uuid: str,
        question_uuid: str,
        owner_id: int,
        description: str,
        options: Sequence[Any],
    ) -> QuestionEditContext:
        """Replace a question's description and its whole option set."""
        with self._transaction("update") as conn:
            survey = self._owned_survey(conn, survey_uuid, owner_id)
            if survey.is_running:
                raise SurveyLocked(survey_uuid)
            question = self._question(conn, survey, question_uuid)
            validate_question(description, options)
            survey = self._lock_survey(conn, survey)
            question = question.model_copy(update={"description": description})
            repository_questions.update(conn, question)
            stored = repository_options.replace_all(conn, int(question.id or 0), options)

        logger.info("question.update survey=%s question=%s options=%s", survey_uuid, question_uuid, len(stored))
        events.publish(events.QUESTION_UPDATED, {"survey_uuid": survey_uuid, "question_uuid": question_uuid})
        return QuestionEditContext(survey, question, stored)

    def list_for_reorder(self, survey_uuid: str, owner_id: int) -> ReorderContext:
        with self._transaction("list_for_reorder") as conn:
            survey = self._owned_survey(conn, survey_uuid, owner_id)
            if survey.is_running:
                raise SurveyLocked.running(survey_uuid)
            questions = repository_questions.list_by_survey(conn, survey.id, paginated=False)
        return ReorderContext(survey, questions)

    def apply_order(self, survey_uuid: str, owner_id: int, ordered_ids: Sequence[int]) -> List[Question]:
        """Assign ``order = position + 1`` following ``ordered_ids``.

        Returns the survey's questions in their new order.
        """
        with self._transaction("apply_order") as conn:
            survey = self._owned_survey(conn, survey_uuid, owner_id)
            if survey.is_running:
                raise SurveyLocked.running(survey_uuid)
            survey = self._lock_survey(conn, survey, SurveyLocked.running)
            reindex_questions(conn, survey.id, [int(i) for i in ordered_ids], strict=self.strict_reorder)
            questions = repository_questions.list_by_survey(conn, survey.id, paginated=False)

        logger.info("question.reorder survey=%s count=%s strict=%s", survey_uuid, len(questions), self.strict_reorder)
        events.publish(events.QUESTIONS_REORDERED, {"survey_uuid": survey_uuid, "question_ids": [q.id for q in questions]})
        return questions

    def list_questions(self, survey_uuid: str, owner_id: int, page: int = 1) -> QuestionPage:
        """Return one page of the survey's questions; allowed while running."""
        page = max(int(page), 1)
        with self._transaction("list_questions") as conn:
            survey = self._owned_survey(conn, survey_uuid, owner_id)
            items = repository_questions.list_by_survey(
                conn, survey.id, paginated=True, page=page, per_page=self.per_page
            )
            total = repository_questions.count_by_survey(conn, survey.id)
        return QuestionPage(items, page, self.per_page, total)


__all__ = [
    "QuestionService",
    "QuestionEditContext",
    "ReorderContext",
    "QuestionPage",
]
