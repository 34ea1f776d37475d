"""
Field rules for Student, Subject and Grade candidates.

Every check is a pure predicate over a candidate record (a mapping with
snake_case or camelCase keys, or a pydantic model). The first failing rule
decides the message; no per-field report is produced.
"""

import math
import re
from typing import Any, Callable, Dict, Mapping, NamedTuple, Optional, Union

from pydantic import BaseModel
from pydantic.alias_generators import to_camel

from errors import RecordValidationError
from schemas import MAJORS, StudentStatus

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

MISSING_STUDENT_FIELDS = "Please fill all required fields."
INVALID_EMAIL = "Please enter a valid email address."
INVALID_MAJOR = "Please select a valid major."
INVALID_STATUS = "Please select a valid status."
MISSING_SUBJECT_FIELDS = "Validation failed: Please ensure Subject Code, Name, and Credits are entered."
CREDITS_NOT_INTEGER = "Credits must be a whole number."
CREDITS_OUT_OF_RANGE = "Credits must be between 1 and 6."
INVALID_GRADE = "Validation failed: Please ensure Student, Subject, and a valid Score (0-100) are entered."

MIN_CREDITS, MAX_CREDITS = 1, 6
MIN_SCORE, MAX_SCORE = 0, 100

Candidate = Union[Mapping[str, Any], BaseModel]


class ValidationResult(NamedTuple):
    ok: bool
    reason: Optional[str] = None

    @classmethod
    def passed(cls) -> "ValidationResult":
        return cls(True, None)

    @classmethod
    def failed(cls, reason: str) -> "ValidationResult":
        return cls(False, reason)


def as_mapping(candidate: Candidate) -> Mapping[str, Any]:
    if isinstance(candidate, BaseModel):
        return candidate.model_dump()
    return candidate


def field_value(candidate: Mapping[str, Any], name: str) -> Any:
    """Look up ``name`` under its snake_case key, then its camelCase alias."""
    if name in candidate:
        return candidate[name]
    return candidate.get(to_camel(name))


def is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def parse_score(value: Any) -> Optional[float]:
    """Return the score as a finite float, or None when it does not parse."""
    if value is None or isinstance(value, bool):
        return None
    try:
        score = float(value.strip() if isinstance(value, str) else value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(score):
        return None
    return score


def parse_credits(value: Any) -> Optional[int]:
    """Return credits as an int when the value is integral, else None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str):
        text = value.strip()
        if text.lstrip("+-").isdigit():
            return int(text)
    return None


def validate_student(candidate: Candidate) -> ValidationResult:
    data = as_mapping(candidate)
    required = ("student_id", "first_name", "last_name", "email", "major", "enrollment_date")
    if any(is_blank(field_value(data, name)) for name in required):
        return ValidationResult.failed(MISSING_STUDENT_FIELDS)

    email = str(field_value(data, "email"))
    if not EMAIL_PATTERN.fullmatch(email):
        return ValidationResult.failed(INVALID_EMAIL)

    if str(field_value(data, "major")).strip() not in MAJORS:
        return ValidationResult.failed(INVALID_MAJOR)

    status = field_value(data, "status")
    if status is not None:
        try:
            StudentStatus(status)
        except ValueError:
            return ValidationResult.failed(INVALID_STATUS)

    return ValidationResult.passed()


def validate_subject(candidate: Candidate) -> ValidationResult:
    data = as_mapping(candidate)
    credits = field_value(data, "credits")
    if is_blank(field_value(data, "code")) or is_blank(field_value(data, "name")) or is_blank(credits):
        return ValidationResult.failed(MISSING_SUBJECT_FIELDS)

    value = parse_credits(credits)
    if value is None:
        return ValidationResult.failed(CREDITS_NOT_INTEGER)
    if not MIN_CREDITS <= value <= MAX_CREDITS:
        return ValidationResult.failed(CREDITS_OUT_OF_RANGE)

    return ValidationResult.passed()


def validate_grade(candidate: Candidate) -> ValidationResult:
    data = as_mapping(candidate)
    if is_blank(field_value(data, "student_name")) or is_blank(field_value(data, "subject_code")):
        return ValidationResult.failed(INVALID_GRADE)

    score = parse_score(field_value(data, "score"))
    if score is None or not MIN_SCORE <= score <= MAX_SCORE:
        return ValidationResult.failed(INVALID_GRADE)

    return ValidationResult.passed()


VALIDATORS: Dict[str, Callable[[Candidate], ValidationResult]] = {
    "student": validate_student,
    "subject": validate_subject,
    "grade": validate_grade,
}


def ensure_valid(kind: str, candidate: Candidate) -> None:
    """Raise RecordValidationError if ``candidate`` fails the rules for ``kind``."""
    result = VALIDATORS[kind](candidate)
    if not result.ok:
        raise RecordValidationError(result.reason)
