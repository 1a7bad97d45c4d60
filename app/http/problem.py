"""Problem+JSON utilities and global exception handlers.

Defines the RFC 7807 media type and the handler callables registered by
``create_app``. Service errors are translated through
``app.logic.problem_factory`` so status codes live in one place.
"""

from __future__ import annotations

import logging

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from app.logic.errors import QuestionServiceError
from app.logic.problem_factory import problem_for_error

PROBLEM_MEDIA_TYPE = "application/problem+json"

logger = logging.getLogger(__name__)


def problem_response(problem: dict) -> JSONResponse:
    return JSONResponse(problem, status_code=int(problem.get("status", 500)), media_type=PROBLEM_MEDIA_TYPE)


async def handle_question_service_error(request: Request, exc: QuestionServiceError) -> JSONResponse:  # noqa: D401
    return problem_response(problem_for_error(exc))


async def handle_http_exception(request: Request, exc: HTTPException) -> JSONResponse:  # noqa: D401
    status_code = int(exc.status_code or 500)
    if isinstance(exc.detail, dict):
        detail = dict(exc.detail)
    else:
        detail = {"title": "Error", "status": status_code, "detail": str(exc.detail or "")}
    headers = {str(k): str(v) for k, v in (exc.headers or {}).items()}
    return JSONResponse(detail, status_code=status_code, media_type=PROBLEM_MEDIA_TYPE, headers=headers or None)


async def handle_request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:  # noqa: D401
    errors = [
        {"path": "$." + ".".join(str(p) for p in err.get("loc", ())[1:]), "code": str(err.get("type", "invalid"))}
        for err in exc.errors()
    ]
    problem = {
        "title": "Invalid Request",
        "status": 422,
        "detail": "Request validation failed",
        "code": "REQUEST_INVALID",
        "errors": errors,
    }
    return problem_response(problem)


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:  # noqa: D401
    logger.error("unexpected_error path=%s", request.url.path, exc_info=exc)
    return problem_response({"title": "Internal Server Error", "status": 500})


__all__ = [
    "PROBLEM_MEDIA_TYPE",
    "problem_response",
    "handle_question_service_error",
    "handle_http_exception",
    "handle_request_validation_error",
    "handle_unexpected_error",
]
