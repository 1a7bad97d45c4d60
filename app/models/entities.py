"""Value-typed entities returned by the repositories.

Instances are frozen pydantic models: a service call never keeps a live
handle to a database row, it reads an entity, decides, and writes back
through an explicit repository call.
"""

from __future__ import annotations

from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict


class Survey(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    uuid: str
    owner_id: int
    name: str = ""
    is_running: bool = False


class Question(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int | None = None
    uuid: str
    survey_id: int
    description: str
    order: int


class QuestionOption(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int | None = None
    question_id: int | None = None
    value: str
    type: str

    def as_json(self) -> dict[str, Any]:
        """Return the client-facing projection used by the edit view."""
        return {"id": self.id, "value": self.value, "type": self.type}


def survey_from_row(row: Mapping[str, Any]) -> Survey:
    return Survey(
        id=int(row["id"]),
        uuid=str(row["uuid"]),
        owner_id=int(row["owner_id"]),
        name=str(row.get("name") or ""),
        is_running=bool(row["is_running"]),
    )


def question_from_row(row: Mapping[str, Any]) -> Question:
    return Question(
        id=int(row["id"]),
        uuid=str(row["uuid"]),
        survey_id=int(row["survey_id"]),
        description=str(row["description"]),
        order=int(row["question_order"]),
    )


def option_from_row(row: Mapping[str, Any]) -> QuestionOption:
    return QuestionOption(
        id=int(row["id"]),
        question_id=int(row["question_id"]),
        value=str(row["value"]),
        type=str(row["option_type"]),
    )


__all__ = [
    "Survey",
    "Question",
    "QuestionOption",
    "survey_from_row",
    "question_from_row",
    "option_from_row",
]
