"""Centralised construction of problem+json payloads for service errors.

Route modules hand any ``QuestionServiceError`` to ``problem_for_error`` and
never embed status codes or error-code literals themselves.
"""

from __future__ import annotations

from typing import Dict
import logging

from app.logic.errors import (
    NotFound,
    QuestionServiceError,
    QuestionValidationError,
    StorageError,
    SurveyLocked,
)


logger = logging.getLogger(__name__)


def problem_not_found(exc: NotFound) -> Dict[str, object]:
    """Return a 404 problem; identical for missing and foreign resources."""
    return {
        "title": "Not Found",
        "status": 404,
        "detail": str(exc),
        "code": f"{exc.resource.upper()}_NOT_FOUND",
    }


def problem_survey_locked(exc: SurveyLocked) -> Dict[str, object]:
    return {
        "title": "Conflict",
        "status": 409,
        "detail": str(exc),
        "code": "SURVEY_LOCKED",
    }


def problem_question_invalid(exc: QuestionValidationError) -> Dict[str, object]:
    return {
        "title": "Unprocessable Entity",
        "status": 422,
        "detail": "invalid question payload",
        "code": "QUESTION_INVALID",
        "errors": list(exc.errors),
    }


def problem_storage_unavailable() -> Dict[str, object]:
    """Return a 503 problem; driver messages stay in the logs."""
    return {
        "title": "Service Unavailable",
        "status": 503,
        "detail": "storage unavailable, retry later",
        "code": "STORAGE_UNAVAILABLE",
    }


def problem_for_error(exc: QuestionServiceError) -> Dict[str, object]:
    if isinstance(exc, NotFound):
        problem = problem_not_found(exc)
    elif isinstance(exc, SurveyLocked):
        problem = problem_survey_locked(exc)
    elif isinstance(exc, QuestionValidationError):
        problem = problem_question_invalid(exc)
    elif isinstance(exc, StorageError):
        problem = problem_storage_unavailable()
    else:
        problem = {"title": "Internal Server Error", "status": 500, "code": "INTERNAL_ERROR"}
    logger.info("error_handler.handle code=%s status=%s", problem.get("code"), problem.get("status"))
    return problem


__all__ = [
    "problem_not_found",
    "problem_survey_locked",
    "problem_question_invalid",
    "problem_storage_unavailable",
    "problem_for_error",
]
