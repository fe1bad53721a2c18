import pytest

from studentdesk.core.exceptions import BadRequestException
from studentdesk.schemas.student import StudentPayload
from studentdesk.services.validation import (
    MAX_AGE,
    clean_student,
    coerce_age,
    has_required_fields,
    validate_student,
)


# --- coerce_age ---

@pytest.mark.parametrize(
    "value, expected",
    [
        (21, 21),
        ("21", 21),
        (" 21 ", 21),
        ("21.5", 21),
        (" 21 years", None),
        ("21abc", None),
        ("\u00b2", None),
        ("1" * 5000, None),
        (21.9, 21),
        ("-4", -4),
        ("abc", None),
        ("", None),
        (True, None),
        (None, None),
        ([21], None),
        (float("nan"), None),
    ],
)
def test_coerce_age(value, expected):
    assert coerce_age(value) == expected


# --- validate_student ---

def test_valid_student():
    result = validate_student("Ann", 21, "Physics")
    assert result.valid
    assert result.message is None


@pytest.mark.parametrize("name", ["", "   ", 42])
def test_name_must_be_non_empty_text(name):
    result = validate_student(name, 21, "Physics")
    assert not result.valid
    assert result.message == "Name cannot be empty"


@pytest.mark.parametrize("age", [0, -1, "abc", "", None])
def test_age_must_be_a_positive_number(age):
    assert validate_student("Ann", age, "Physics").message == "Age must be a valid number"


def test_empty_course():
    assert validate_student("Ann", 21, " ").message == "Course cannot be empty"


def test_rules_are_checked_name_then_age_then_course():
    assert validate_student("", 0, "").message == "Name cannot be empty"
    assert validate_student("Ann", 0, "").message == "Age must be a valid number"
    assert validate_student("Ann", 1, "").message == "Course cannot be empty"


# --- presence + clean ---

def test_has_required_fields_treats_null_as_missing():
    assert has_required_fields(StudentPayload(name="Ann", age=21, course="Physics"))
    assert not has_required_fields(StudentPayload(name="Ann", age=None, course="Physics"))
    assert not has_required_fields(StudentPayload(name="Ann", course="Physics"))


def test_empty_string_counts_as_present():
    assert has_required_fields(StudentPayload(name="", age=21, course="Physics"))


def test_clean_student_trims_and_coerces():
    fields = clean_student(StudentPayload(name="  Ann ", age="22", course=" Physics "))
    assert fields.name == "Ann"
    assert fields.age == 22
    assert fields.course == "Physics"


def test_clean_student_reports_missing_before_invalid():
    with pytest.raises(BadRequestException) as exc_info:
        clean_student(StudentPayload(name="", age=0))
    assert exc_info.value.message == "All fields (name, age, course) are required"
    assert exc_info.value.status_code == 400


def test_clean_student_reports_first_failing_rule():
    with pytest.raises(BadRequestException) as exc_info:
        clean_student(StudentPayload(name="Ann", age="x", course=""))
    assert exc_info.value.message == "Age must be a valid number"


def test_age_above_integer_column_range_is_invalid():
    assert validate_student("Ann", MAX_AGE, "Physics").valid
    assert validate_student("Ann", MAX_AGE + 1, "Physics").message == "Age must be a valid number"
    assert validate_student("Ann", 10**20, "Physics").message == "Age must be a valid number"
    assert validate_student("Ann", 1e300, "Physics").message == "Age must be a valid number"
