"""Pydantic models for question write payloads.

These declare the typed request shape accepted at the HTTP boundary. Shape
errors (wrong JSON types, missing keys) are rejected by FastAPI before the
service runs; content rules live in ``app.logic.question_validation``.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from app.models.option_type import OptionType


class OptionPayload(BaseModel):
    value: str
    # Omitted types are treated as plain choices
    type: str = OptionType.CHECK


class QuestionPayload(BaseModel):
    description: str
    options: list[OptionPayload] = Field(default_factory=list)


class ReorderItem(BaseModel):
    id: int


class ReorderPayload(BaseModel):
    questions: list[ReorderItem]

    def ordered_ids(self) -> list[int]:
        return [item.id for item in self.questions]


__all__ = ["OptionPayload", "QuestionPayload", "ReorderItem", "ReorderPayload"]
