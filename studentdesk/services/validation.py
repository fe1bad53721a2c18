"""
Server-side rules for the three student fields.

The browser client runs the same checks before submitting, but only as a
convenience; every create and update is checked here again.
"""
import math
import re
from dataclasses import dataclass
from typing import Any, Optional

from studentdesk.core.exceptions import BadRequestException
from studentdesk.core.logging import logger
from studentdesk.schemas.student import StudentFields, StudentPayload

REQUIRED_FIELDS = ("name", "age", "course")
MISSING_FIELDS_MESSAGE = "All fields (name, age, course) are required"
NAME_EMPTY_MESSAGE = "Name cannot be empty"
AGE_INVALID_MESSAGE = "Age must be a valid number"
COURSE_EMPTY_MESSAGE = "Course cannot be empty"

# Whole string must be a number; a fractional part is dropped
_NUMERIC_AGE = re.compile(r"\s*([+-]?[0-9]{1,12})(?:\.[0-9]+)?\s*")

# Upper bound of a 32-bit INTEGER column
MAX_AGE = 2**31 - 1


@dataclass(frozen=True)
class ValidationResult:
    valid: bool
    message: Optional[str] = None


def has_required_fields(payload: StudentPayload) -> bool:
    """True when name, age and course were all sent and none is null."""
    return all(getattr(payload, field) is not None for field in REQUIRED_FIELDS)


def coerce_age(value: Any) -> Optional[int]:
    """
    Read an age the way a form submits it.

    Integers pass through, finite floats are truncated and strings must be
    entirely numeric apart from surrounding whitespace ("21", " 21.5 " -> 21,
    "21 years" -> None). Anything else, booleans included, gives None.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None
    if isinstance(value, str):
        match = _NUMERIC_AGE.fullmatch(value)
        return int(match.group(1)) if match else None
    return None


def _is_blank(value: Any) -> bool:
    return not isinstance(value, str) or not value.strip()


def validate_student(name: Any, age: Any, course: Any) -> ValidationResult:
    """Return the first failing rule, checked in the order name, age, course."""
    if _is_blank(name):
        return ValidationResult(False, NAME_EMPTY_MESSAGE)

    parsed_age = coerce_age(age)
    if parsed_age is None or not 1 <= parsed_age <= MAX_AGE:
        return ValidationResult(False, AGE_INVALID_MESSAGE)

    if _is_blank(course):
        return ValidationResult(False, COURSE_EMPTY_MESSAGE)

    return ValidationResult(True)


def clean_student(payload: StudentPayload) -> StudentFields:
    """
    Presence check, then validation, then normalisation.

    Raises:
        BadRequestException: with the missing-fields message or the first
            failing rule's message.
    """
    if not has_required_fields(payload):
        logger.warning(
            "Validation failed: missing fields",
            extra={"context": {field: getattr(payload, field) is not None for field in REQUIRED_FIELDS}},
        )
        raise BadRequestException(MISSING_FIELDS_MESSAGE)

    result = validate_student(payload.name, payload.age, payload.course)
    if not result.valid:
        logger.warning("Validation failed", extra={"context": {"reason": result.message}})
        raise BadRequestException(result.message)

    return StudentFields(
        name=payload.name.strip(),
        age=coerce_age(payload.age),
        course=payload.course.strip(),
    )
