"""Free-text search with entity-specific fields and default ordering."""

from typing import Any, Callable, Iterable, List, Optional, Sequence, TypeVar

from schemas import Grade, Student, Subject

T = TypeVar("T")

STUDENT_SEARCH_FIELDS = ("student_id", "first_name", "last_name", "email", "major")
SUBJECT_SEARCH_FIELDS = ("code", "name")
GRADE_SEARCH_FIELDS = ("student_name", "subject_code")


def matches_term(record: Any, term: str, fields: Sequence[str]) -> bool:
    """Case-insensitive substring match of ``term`` against any of ``fields``."""
    needle = term.lower()
    return any(needle in str(getattr(record, name, "") or "").lower() for name in fields)


def filter_records(
    collection: Iterable[T],
    term: Optional[str],
    fields: Sequence[str],
    sort_key: Callable[[T], Any],
    descending: bool = False,
    predicate: Optional[Callable[[T], bool]] = None,
) -> List[T]:
    term = term or ""
    selected = [
        record for record in collection
        if matches_term(record, term, fields) and (predicate is None or predicate(record))
    ]
    return sorted(selected, key=sort_key, reverse=descending)


def filter_students(students: Iterable[Student], term: Optional[str] = "", status: Optional[str] = None) -> List[Student]:
    predicate = None
    if status and status != "all":
        predicate = lambda s: s.status == status  # noqa: E731
    return filter_records(
        students, term, STUDENT_SEARCH_FIELDS,
        sort_key=lambda s: s.student_id, predicate=predicate,
    )


def filter_subjects(subjects: Iterable[Subject], term: Optional[str] = "") -> List[Subject]:
    return filter_records(subjects, term, SUBJECT_SEARCH_FIELDS, sort_key=lambda s: s.code)


def filter_grades(grades: Iterable[Grade], term: Optional[str] = "") -> List[Grade]:
    return filter_records(grades, term, GRADE_SEARCH_FIELDS, sort_key=lambda g: g.score, descending=True)
