"""Pydantic models for question authoring response bodies."""

from __future__ import annotations

from typing import List

from pydantic import BaseModel

from app.models.entities import Question, QuestionOption, Survey


class SurveyOut(BaseModel):
    uuid: str
    name: str
    is_running: bool

    @classmethod
    def from_entity(cls, survey: Survey) -> "SurveyOut":
        return cls(uuid=survey.uuid, name=survey.name, is_running=survey.is_running)


class OptionOut(BaseModel):
    id: int | None = None
    value: str
    type: str


class QuestionOut(BaseModel):
    id: int
    uuid: str
    description: str
    order: int

    @classmethod
    def from_entity(cls, question: Question) -> "QuestionOut":
        return cls(
            id=int(question.id or 0),
            uuid=question.uuid,
            description=question.description,
            order=question.order,
        )


class ValidationResult(BaseModel):
    valid: bool
    message: str


class CreateView(BaseModel):
    survey: SurveyOut


class QuestionSaved(BaseModel):
    message: str
    question: QuestionOut
    options: List[OptionOut]


class QuestionDeleted(BaseModel):
    message: str
    question_uuid: str


class QuestionEditView(BaseModel):
    survey: SurveyOut
    question: QuestionOut
    options: List[OptionOut]

    @classmethod
    def build(cls, survey: Survey, question: Question, options: list[QuestionOption]) -> "QuestionEditView":
        return cls(
            survey=SurveyOut.from_entity(survey),
            question=QuestionOut.from_entity(question),
            options=[OptionOut(**o.as_json()) for o in options],
        )


class ReorderView(BaseModel):
    survey: SurveyOut
    questions: List[QuestionOut]


class ReorderResult(BaseModel):
    message: str
    questions: List[QuestionOut]


class QuestionPage(BaseModel):
    items: List[QuestionOut]
    page: int
    per_page: int
    total: int


__all__ = [
    "SurveyOut",
    "OptionOut",
    "QuestionOut",
    "ValidationResult",
    "CreateView",
    "QuestionSaved",
    "QuestionDeleted",
    "QuestionEditView",
    "ReorderView",
    "ReorderResult",
    "QuestionPage",
]
