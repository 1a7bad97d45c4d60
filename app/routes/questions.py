"""Question authoring endpoints.

Thin adapter over ``QuestionService``: parses typed payloads, resolves the
caller id and turns results into JSON bodies carrying a user-facing
``message``. Service errors propagate to the problem+json handlers registered
in ``app.main``.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from app.http.identity import current_user_id
from app.logic.question_service import QuestionService
from app.models.question_payload import QuestionPayload, ReorderPayload
from app.models.question_responses import (
    CreateView,
    OptionOut,
    QuestionDeleted,
    QuestionEditView,
    QuestionOut,
    QuestionPage,
    QuestionSaved,
    ReorderResult,
    ReorderView,
    SurveyOut,
    ValidationResult,
)

router = APIRouter()


def get_question_service() -> QuestionService:
    return QuestionService()


@router.post(
    "/questions/validate",
    summary="Validate a question payload without saving it",
    operation_id="validateQuestion",
    response_model=ValidationResult,
)
def validate_question(
    payload: QuestionPayload,
    service: QuestionService = Depends(get_question_service),
) -> ValidationResult:
    service.validate(payload.description, payload.options)
    return ValidationResult(valid=True, message="Question is valid.")


@router.get(
    "/surveys/{survey_uuid}/questions/new",
    summary="Survey context for the question creation form",
    operation_id="getQuestionCreateView",
    response_model=CreateView,
)
def get_create_view(
    survey_uuid: str,
    owner_id: int = Depends(current_user_id),
    service: QuestionService = Depends(get_question_service),
) -> CreateView:
    survey = service.get_for_create(survey_uuid, owner_id)
    return CreateView(survey=SurveyOut.from_entity(survey))


@router.get(
    "/surveys/{survey_uuid}/questions",
    summary="List a survey's questions, one page at a time",
    operation_id="listQuestions",
    response_model=QuestionPage,
)
def list_questions(
    survey_uuid: str,
    page: int = Query(default=1, ge=1),
    owner_id: int = Depends(current_user_id),
    service: QuestionService = Depends(get_question_service),
) -> QuestionPage:
    result = service.list_questions(survey_uuid, owner_id, page=page)
    return QuestionPage(
        items=[QuestionOut.from_entity(q) for q in result.items],
        page=result.page,
        per_page=result.per_page,
        total=result.total,
    )


@router.post(
    "/surveys/{survey_uuid}/questions",
    summary="Create a question at the end of the survey",
    operation_id="createQuestion",
    response_model=QuestionSaved,
    status_code=201,
)
def create_question(
    survey_uuid: str,
    payload: QuestionPayload,
    owner_id: int = Depends(current_user_id),
    service: QuestionService = Depends(get_question_service),
) -> QuestionSaved:
    context = service.create_with_options(survey_uuid, owner_id, payload.description, payload.options)
    return QuestionSaved(
        message=f"Question {context.question.uuid} successfully created!",
        question=QuestionOut.from_entity(context.question),
        options=[OptionOut(**o.as_json()) for o in context.options],
    )


@router.get(
    "/surveys/{survey_uuid}/questions/order",
    summary="Questions in their current order, for the reorder form",
    operation_id="getQuestionOrder",
    response_model=ReorderView,
)
def get_question_order(
    survey_uuid: str,
    owner_id: int = Depends(current_user_id),
    service: QuestionService = Depends(get_question_service),
) -> ReorderView:
    context = service.list_for_reorder(survey_uuid, owner_id)
    return ReorderView(
        survey=SurveyOut.from_entity(context.survey),
        questions=[QuestionOut.from_entity(q) for q in context.questions],
    )


@router.put(
    "/surveys/{survey_uuid}/questions/order",
    summary="Rewrite question positions from a submitted sequence",
    operation_id="applyQuestionOrder",
    response_model=ReorderResult,
)
def apply_question_order(
    survey_uuid: str,
    payload: ReorderPayload,
    owner_id: int = Depends(current_user_id),
    service: QuestionService = Depends(get_question_service),
) -> ReorderResult:
    questions = service.apply_order(survey_uuid, owner_id, payload.ordered_ids())
    return ReorderResult(
        message="Questions order updated!",
        questions=[QuestionOut.from_entity(q) for q in questions],
    )


@router.get(
    "/surveys/{survey_uuid}/questions/{question_uuid}/edit",
    summary="Question and its options for the edit form",
    operation_id="getQuestionEditView",
    response_model=QuestionEditView,
)
def get_edit_view(
    survey_uuid: str,
    question_uuid: str,
    owner_id: int = Depends(current_user_id),
    service: QuestionService = Depends(get_question_service),
) -> QuestionEditView:
    context = service.get_for_edit(survey_uuid, question_uuid, owner_id)
    return QuestionEditView.build(context.survey, context.question, context.options)


@router.put(
    "/surveys/{survey_uuid}/questions/{question_uuid}",
    summary="Replace a question's description and options",
    operation_id="updateQuestion",
    response_model=QuestionSaved,
)
def update_question(
    survey_uuid: str,
    question_uuid: str,
    payload: QuestionPayload,
    owner_id: int = Depends(current_user_id),
    service: QuestionService = Depends(get_question_service),
) -> QuestionSaved:
    context = service.update(survey_uuid, question_uuid, owner_id, payload.description, payload.options)
    return QuestionSaved(
        message=f"Question {context.question.uuid} successfully updated!",
        question=QuestionOut.from_entity(context.question),
        options=[OptionOut(**o.as_json()) for o in context.options],
    )


@router.delete(
    "/surveys/{survey_uuid}/questions/{question_uuid}",
    summary="Delete a question and its options",
    operation_id="deleteQuestion",
    response_model=QuestionDeleted,
)
def delete_question(
    survey_uuid: str,
    question_uuid: str,
    owner_id: int = Depends(current_user_id),
    service: QuestionService = Depends(get_question_service),
) -> QuestionDeleted:
    service.delete(survey_uuid, question_uuid, owner_id)
    return QuestionDeleted(message=f'Question "{question_uuid}" successfully removed!', question_uuid=question_uuid)


__all__ = ["router", "get_question_service"]
