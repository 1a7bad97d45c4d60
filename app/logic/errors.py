"""Error taxonomy for question authoring.

``NotFound``, ``SurveyLocked`` and ``QuestionValidationError`` are expected
outcomes handed back to the caller as data. ``StorageError`` wraps
persistence faults and is logged where it is raised.
"""

from __future__ import annotations

from typing import Dict, List


class QuestionServiceError(Exception):
    """Base class for every error raised by the question service."""


class NotFound(QuestionServiceError):
    """Survey or question is absent or not owned by the caller.

    Both cases raise the same error so callers cannot tell whether
    other users' surveys exist.
    """

    def __init__(self, resource: str, identifier: str) -> None:
        self.resource = resource
        self.identifier = identifier
        super().__init__(f'{resource.capitalize()} "{identifier}" not found.')


class SurveyLocked(QuestionServiceError):
    """Survey is running; its questions are read-only.

    Writes report that the survey cannot be updated. The edit and reorder
    screens use the shorter ``running`` wording.
    """

    def __init__(self, survey_uuid: str, message: str | None = None) -> None:
        self.survey_uuid = survey_uuid
        super().__init__(message or f'Survey "{survey_uuid}" cannot be updated because it is running.')

    @classmethod
    def running(cls, survey_uuid: str) -> "SurveyLocked":
        return cls(survey_uuid, f'Survey "{survey_uuid}" is running.')


class QuestionValidationError(QuestionServiceError, ValueError):
    """Payload content violates the question rules.

    ``errors`` lists every failing field as ``{"path": "$.field", "code": ...}``.
    """

    def __init__(self, errors: List[Dict[str, str]]) -> None:
        self.errors = list(errors)
        paths = ", ".join(sorted({e.get("path", "$") for e in self.errors}))
        super().__init__(f"invalid question payload: {paths}")


class StorageError(QuestionServiceError):
    pass


__all__ = [
    "QuestionServiceError",
    "NotFound",
    "SurveyLocked",
    "QuestionValidationError",
    "StorageError",
]
