"""Content validation for question payloads.

A question is either a multiple-choice set (two or more distinct options) or
a free-response prompt, in which case a single ``free`` option may stand
alone. Every failing field is collected before raising so the caller can show
all problems at once.
"""

from __future__ import annotations

from typing import Any, Dict, List, Tuple

from app.logic.errors import QuestionValidationError
from app.models.option_type import OptionType

DESCRIPTION_MIN = 4
DESCRIPTION_MAX = 1023
OPTION_VALUE_MIN = 1
OPTION_VALUE_MAX = 1023


def option_fields(option: Any) -> Tuple[Any, Any]:
    """Return ``(value, type)`` from an OptionPayload, entity or mapping."""
    if isinstance(option, dict):
        return option.get("value"), option.get("type", OptionType.CHECK)
    return getattr(option, "value", None), getattr(option, "type", OptionType.CHECK)


def _validate_description(description: Any) -> List[Dict[str, str]]:
    if not isinstance(description, str) or not description.strip():
        return [{"path": "$.description", "code": "required"}]
    if not DESCRIPTION_MIN <= len(description) <= DESCRIPTION_MAX:
        return [{"path": "$.description", "code": "length_out_of_range"}]
    return []


def _validate_options(options: Any) -> List[Dict[str, str]]:
    if not isinstance(options, (list, tuple)):
        return [{"path": "$.options", "code": "not_a_list"}]
    if not options:
        return [{"path": "$.options", "code": "required"}]

    errors: List[Dict[str, str]] = []
    seen: set[str] = set()
    types: List[Any] = []
    for idx, option in enumerate(options):
        value, kind = option_fields(option)
        types.append(kind)
        if not isinstance(value, str) or not value:
            errors.append({"path": f"$.options[{idx}].value", "code": "required"})
        elif not OPTION_VALUE_MIN <= len(value) <= OPTION_VALUE_MAX:
            errors.append({"path": f"$.options[{idx}].value", "code": "length_out_of_range"})
        elif value in seen:
            errors.append({"path": f"$.options[{idx}].value", "code": "duplicate"})
        else:
            seen.add(value)
        if kind not in OptionType.ALL:
            errors.append({"path": f"$.options[{idx}].type", "code": "invalid_choice"})

    # A lone option is only acceptable for free-text questions
    if len(options) < 2 and OptionType.FREE not in types:
        errors.append({"path": "$.options", "code": "too_few_options"})
    return errors


def validate_question(description: Any, options: Any) -> None:
    """Raise QuestionValidationError if the description or options are invalid."""
    errors = _validate_description(description) + _validate_options(options)
    if errors:
        raise QuestionValidationError(errors)


__all__ = [
    "DESCRIPTION_MIN",
    "DESCRIPTION_MAX",
    "OPTION_VALUE_MIN",
    "OPTION_VALUE_MAX",
    "option_fields",
    "validate_question",
]
