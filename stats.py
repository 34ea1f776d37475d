"""
Derived statistics over record collections.

Everything here is a pure function of the collection it is given; nothing is
cached, so results always reflect the current state of a repository.
"""

import math
from enum import Enum
from typing import Any, Dict, Iterable, Mapping, Optional, Sequence

from schemas import (
    AggregateStats,
    Grade,
    GradeSummary,
    OrphanedGrades,
    Student,
    StudentStatus,
    StudentSummary,
    Subject,
    SubjectSummary,
)

NOT_AVAILABLE = "N/A"

# (lower bound, letter), checked top-down
LETTER_GRADE_BOUNDS = (
    (93, "A"),
    (90, "A-"),
    (87, "B+"),
    (83, "B"),
    (80, "B-"),
    (77, "C+"),
    (73, "C"),
    (70, "C-"),
    (67, "D+"),
    (63, "D"),
    (60, "D-"),
)


def letter_grade(score: Optional[float]) -> str:
    if score is None or (isinstance(score, float) and math.isnan(score)):
        return NOT_AVAILABLE
    for bound, letter in LETTER_GRADE_BOUNDS:
        if score >= bound:
            return letter
    return "F"


def _value(record: Any, field: str) -> Any:
    if isinstance(record, Mapping):
        return record.get(field)
    return getattr(record, field, None)


def aggregate(collection: Iterable[Any], field: str) -> AggregateStats:
    """Count, mean, min and max of a numeric field; zeros when empty."""
    values = [
        v for v in (_value(r, field) for r in collection)
        if v is not None and not (isinstance(v, float) and math.isnan(v))
    ]
    if not values:
        return AggregateStats(count=0, mean=0, min=0, max=0)
    return AggregateStats(
        count=len(values),
        mean=sum(values) / len(values),
        min=min(values),
        max=max(values),
    )


def distribution(collection: Iterable[Any], field: str) -> Dict[Any, int]:
    """Tally of a categorical field in order of first occurrence."""
    tally: Dict[Any, int] = {}
    for record in collection:
        category = _value(record, field)
        if isinstance(category, Enum):
            category = category.value
        tally[category] = tally.get(category, 0) + 1
    return tally


def most_frequent(tally: Mapping[Any, int]) -> Any:
    """Category with the highest count; the earliest category wins a tie."""
    best, best_count = NOT_AVAILABLE, None
    for category, count in tally.items():
        if best_count is None or count > best_count:
            best, best_count = category, count
    return best


# --- page summaries ---

def student_summary(students: Sequence[Student]) -> StudentSummary:
    majors = distribution(students, "major")
    return StudentSummary(
        total_students=len(students),
        active_students=sum(1 for s in students if s.status == StudentStatus.ACTIVE),
        graduated_students=sum(1 for s in students if s.status == StudentStatus.GRADUATED),
        major_distribution=majors,
        most_popular_major=most_frequent(majors),
    )


def subject_summary(subjects: Sequence[Subject]) -> SubjectSummary:
    credits = aggregate(subjects, "credits")
    return SubjectSummary(
        total_subjects=credits.count,
        total_credits=sum(s.credits for s in subjects),
        average_credits=round(credits.mean, 1),
    )


def grade_summary(grades: Sequence[Grade], total: Optional[int] = None) -> GradeSummary:
    """Figures over the grades shown; ``total`` is the size of the unfiltered collection."""
    scores = aggregate(grades, "score")
    letters: Dict[str, int] = {}
    for grade in grades:
        letter = letter_grade(grade.score)
        letters[letter] = letters.get(letter, 0) + 1
    return GradeSummary(
        total_grades=len(grades) if total is None else total,
        shown=scores.count,
        average_score=round(scores.mean, 1),
        highest_score=scores.max,
        letter_distribution=letters,
    )


def orphaned_grades(grades: Iterable[Grade], students: Iterable[Student], subjects: Iterable[Subject]) -> OrphanedGrades:
    """Grades whose by-value student or subject reference no longer matches a record."""
    names = {s.full_name for s in students}
    codes = {s.code for s in subjects}
    grades = list(grades)
    return OrphanedGrades(
        missing_student=[g for g in grades if g.student_name not in names],
        missing_subject=[g for g in grades if g.subject_code not in codes],
    )
