import pytest

from errors import RecordValidationError
from schemas import StudentCreate
from validators import (
    CREDITS_NOT_INTEGER,
    CREDITS_OUT_OF_RANGE,
    INVALID_EMAIL,
    INVALID_GRADE,
    INVALID_MAJOR,
    INVALID_STATUS,
    MISSING_STUDENT_FIELDS,
    MISSING_SUBJECT_FIELDS,
    ensure_valid,
    validate_grade,
    validate_student,
    validate_subject,
)

STUDENT = {
    "student_id": "STU-2025-001",
    "first_name": "Grace",
    "last_name": "Hopper",
    "email": "grace@university.edu",
    "enrollment_date": "2025-02-01",
    "major": "Computer Science",
    "status": "active",
}


# ============= STUDENT RULES =============

def test_valid_student_passes():
    result = validate_student(STUDENT)
    assert result.ok
    assert result.reason is None


def test_student_model_candidate_passes():
    assert validate_student(StudentCreate(**STUDENT)).ok


def test_student_camel_case_candidate_passes():
    camel = {
        "studentId": "STU-2025-001",
        "firstName": "Grace",
        "lastName": "Hopper",
        "email": "grace@university.edu",
        "enrollmentDate": "2025-02-01",
        "major": "Biology",
    }
    assert validate_student(camel).ok


@pytest.mark.parametrize("field", ["student_id", "first_name", "last_name", "email", "major", "enrollment_date"])
def test_student_required_fields(field):
    assert validate_student({**STUDENT, field: "   "}).reason == MISSING_STUDENT_FIELDS


def test_student_phone_is_optional():
    assert validate_student({**STUDENT, "phone": ""}).ok


@pytest.mark.parametrize("email", ["grace", "grace@university", "grace hopper@university.edu", "@university.edu", "a@b@c.edu"])
def test_student_invalid_email(email):
    assert validate_student({**STUDENT, "email": email}).reason == INVALID_EMAIL


def test_student_unknown_major():
    assert validate_student({**STUDENT, "major": "Astrology"}).reason == INVALID_MAJOR


def test_student_unknown_status():
    assert validate_student({**STUDENT, "status": "expelled"}).reason == INVALID_STATUS


# ============= SUBJECT RULES =============

def test_valid_subject_passes():
    assert validate_subject({"code": "IT 101", "name": "Intro", "credits": 3}).ok


def test_subject_missing_fields():
    assert validate_subject({"code": "", "name": "Intro", "credits": 3}).reason == MISSING_SUBJECT_FIELDS
    assert validate_subject({"code": "IT 101", "name": " ", "credits": 3}).reason == MISSING_SUBJECT_FIELDS
    assert validate_subject({"code": "IT 101", "name": "Intro"}).reason == MISSING_SUBJECT_FIELDS


@pytest.mark.parametrize("credits", [1, 6, "4", 2.0])
def test_subject_credit_bounds_accepted(credits):
    assert validate_subject({"code": "IT 101", "name": "Intro", "credits": credits}).ok


@pytest.mark.parametrize("credits", [0, 7, -1, "12"])
def test_subject_credit_bounds_rejected(credits):
    assert validate_subject({"code": "IT 101", "name": "Intro", "credits": credits}).reason == CREDITS_OUT_OF_RANGE


@pytest.mark.parametrize("credits", [3.5, "three", True])
def test_subject_credits_must_be_integer(credits):
    assert validate_subject({"code": "IT 101", "name": "Intro", "credits": credits}).reason == CREDITS_NOT_INTEGER


# ============= GRADE RULES =============

@pytest.mark.parametrize("score", [0, 100, 92.5, "55", " 73.25 "])
def test_valid_grade_passes(score):
    assert validate_grade({"student_name": "John Doe", "subject_code": "IT 101", "score": score}).ok


@pytest.mark.parametrize("score", [-0.1, 100.5, "abc", "", None, float("nan"), float("inf"), "Infinity"])
def test_grade_invalid_score(score):
    assert validate_grade({"student_name": "John Doe", "subject_code": "IT 101", "score": score}).reason == INVALID_GRADE


def test_grade_requires_references():
    assert not validate_grade({"student_name": "", "subject_code": "IT 101", "score": 80}).ok
    assert not validate_grade({"student_name": "John Doe", "subject_code": None, "score": 80}).ok


# ============= ENSURE VALID =============

def test_ensure_valid_raises_with_reason():
    with pytest.raises(RecordValidationError) as excinfo:
        ensure_valid("subject", {"code": "IT 101", "name": "Intro", "credits": 8})
    assert excinfo.value.reason == CREDITS_OUT_OF_RANGE
    assert str(excinfo.value) == CREDITS_OUT_OF_RANGE


def test_validation_does_not_mutate_candidate():
    candidate = dict(STUDENT)
    validate_student(candidate)
    assert candidate == STUDENT
