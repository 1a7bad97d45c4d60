"""Functional tests for question payload validation.

Covers the description length bounds, option list shape, option value rules,
option type choices and the option-count rule (a lone option must be free
text). Pure function tests; no database access.
"""

from __future__ import annotations

import pytest

from app.logic.errors import QuestionValidationError
from app.logic.question_validation import validate_question
from app.models.question_payload import OptionPayload


def _codes(exc: QuestionValidationError) -> set[tuple[str, str]]:
    return {(e["path"], e["code"]) for e in exc.errors}


@pytest.mark.parametrize(
    "options",
    [
        [{"value": "Yes", "type": "check"}, {"value": "No", "type": "check"}],
        [{"value": "Red", "type": "check"}, {"value": "Other", "type": "free"}],
        [{"value": "Tell us more", "type": "free"}],
        [OptionPayload(value="A"), OptionPayload(value="B")],
    ],
)
def test_valid_questions_pass(options) -> None:
    """Two or more distinct options, or a single free option, are accepted."""
    # Act / Assert: no exception
    validate_question("How did we do?", options)


def test_single_check_option_is_rejected() -> None:
    """A lone multiple-choice option is not a question."""
    with pytest.raises(QuestionValidationError) as info:
        validate_question("How did we do?", [{"value": "Yes", "type": "check"}])
    assert ("$.options", "too_few_options") in _codes(info.value)


def test_missing_type_defaults_to_check() -> None:
    """Options without a type count as check options for the count rule."""
    with pytest.raises(QuestionValidationError) as info:
        validate_question("How did we do?", [{"value": "Only"}])
    assert _codes(info.value) == {("$.options", "too_few_options")}


@pytest.mark.parametrize(
    "description, code",
    [
        ("abc", "length_out_of_range"),
        ("x" * 1024, "length_out_of_range"),
        ("", "required"),
        ("    ", "required"),
        (None, "required"),
    ],
)
def test_description_bounds(description, code) -> None:
    """Description must be 4..1023 characters."""
    with pytest.raises(QuestionValidationError) as info:
        validate_question(description, [{"value": "Why?", "type": "free"}])
    assert ("$.description", code) in _codes(info.value)


def test_description_bounds_are_inclusive() -> None:
    validate_question("abcd", [{"value": "Why?", "type": "free"}])
    validate_question("x" * 1023, [{"value": "Why?", "type": "free"}])


@pytest.mark.parametrize("options, code", [([], "required"), ("Yes,No", "not_a_list"), (None, "not_a_list")])
def test_options_must_be_a_non_empty_list(options, code) -> None:
    with pytest.raises(QuestionValidationError) as info:
        validate_question("How did we do?", options)
    assert ("$.options", code) in _codes(info.value)


def test_duplicate_option_values_are_rejected() -> None:
    """Option values are pairwise distinct within a question."""
    options = [
        {"value": "Yes", "type": "check"},
        {"value": "No", "type": "check"},
        {"value": "Yes", "type": "check"},
    ]
    with pytest.raises(QuestionValidationError) as info:
        validate_question("How did we do?", options)
    assert _codes(info.value) == {("$.options[2].value", "duplicate")}


def test_option_value_length_and_type() -> None:
    """Empty or oversize values and unknown types are each reported."""
    options = [
        {"value": "", "type": "check"},
        {"value": "v" * 1024, "type": "check"},
        {"value": "Maybe", "type": "radio"},
    ]
    with pytest.raises(QuestionValidationError) as info:
        validate_question("How did we do?", options)
    codes = _codes(info.value)
    # Assert: every failing field is collected, not only the first
    assert ("$.options[0].value", "required") in codes
    assert ("$.options[1].value", "length_out_of_range") in codes
    assert ("$.options[2].type", "invalid_choice") in codes


def test_all_errors_reported_together() -> None:
    with pytest.raises(QuestionValidationError) as info:
        validate_question("abc", [{"value": "Yes", "type": "check"}])
    assert _codes(info.value) == {
        ("$.description", "length_out_of_range"),
        ("$.options", "too_few_options"),
    }
    assert isinstance(info.value, ValueError)
