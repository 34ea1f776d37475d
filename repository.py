"""
Entity repositories for students, subjects and grades.

A repository owns one in-memory collection, loaded from the store when it is
created. Every mutation validates its input, applies the change in memory and
then writes the whole collection back. The in-memory collection stays
authoritative for the session even if that write fails.
"""

import logging
import uuid
from typing import Any, Callable, Generic, List, Optional, Sequence, Type, TypeVar

from pydantic import ValidationError

from errors import DuplicateKeyError, RecordValidationError
from schemas import Grade, Student, Subject
from seed import DEFAULT_GRADES, DEFAULT_STUDENTS, DEFAULT_SUBJECTS
from store import CollectionStore
from validators import Candidate, as_mapping, ensure_valid, field_value

logger = logging.getLogger(__name__)

STUDENT_RECORDS = "studentRecords"
SUBJECT_RECORDS = "subjectRecords"
GRADE_RECORDS = "gradeRecords"

RecordT = TypeVar("RecordT", Student, Subject, Grade)


def generate_id() -> str:
    return str(uuid.uuid4())


class EntityRepository(Generic[RecordT]):
    def __init__(
        self,
        store: CollectionStore,
        key: str,
        kind: str,
        record_type: Type[RecordT],
        default: Sequence[RecordT] = (),
        business_key: Optional[str] = None,
        enforce_unique: bool = False,
        id_factory: Callable[[], str] = generate_id,
    ):
        self._store = store
        self.key = key
        self.kind = kind
        self.record_type = record_type
        self._default = list(default)
        self.business_key = business_key
        self.enforce_unique = enforce_unique
        self._id_factory = id_factory
        self._records: List[RecordT] = []
        self.reload()

    # === reads ===

    def list(self) -> List[RecordT]:
        """Current collection in insertion order."""
        return list(self._records)

    def get(self, record_id: str) -> Optional[RecordT]:
        return next((r for r in self._records if r.id == record_id), None)

    def __len__(self) -> int:
        return len(self._records)

    def reload(self) -> None:
        self._records = self._store.load(self.key, self._default, self.record_type)
        logger.info(f"Loaded {len(self._records)} {self.kind} records from '{self.key}'")

    # === mutations ===

    def add(self, draft: Candidate) -> RecordT:
        """
        Validate ``draft``, assign it a fresh id, append it and persist.

        Raises:
            RecordValidationError: if the draft fails its field rules.
            DuplicateKeyError: if unique business keys are enforced and taken.
        """
        ensure_valid(self.kind, draft)
        self._check_business_key(draft, exclude_id=None)

        record = self._build(draft, self._new_id())
        self._records.append(record)
        self._persist()
        logger.info(f"Created {self.kind} with ID: {record.id}")
        return record

    def update(self, record_id: str, full_record: Candidate) -> Optional[RecordT]:
        """
        Replace the record with ``record_id`` by ``full_record``.

        The replacement keeps ``record_id`` whatever id the payload carries.
        An unknown id is a silent no-op and returns None.
        """
        ensure_valid(self.kind, full_record)
        self._check_business_key(full_record, exclude_id=record_id)

        replacement = self._build(full_record, record_id)
        updated = None
        for index, existing in enumerate(self._records):
            if existing.id == record_id:
                self._records[index] = replacement
                updated = replacement
                break

        if updated is None:
            logger.warning(f"No {self.kind} with ID {record_id}; update ignored")
        else:
            logger.info(f"Updated {self.kind} with ID: {record_id}")
        self._persist()
        return updated

    def remove(self, record_id: str) -> bool:
        """Delete the record with ``record_id``; unknown ids are a no-op."""
        remaining = [r for r in self._records if r.id != record_id]
        removed = len(remaining) != len(self._records)
        self._records = remaining

        if removed:
            logger.info(f"Deleted {self.kind} with ID: {record_id}")
        else:
            logger.warning(f"No {self.kind} with ID {record_id}; delete ignored")
        self._persist()
        return removed

    # === helpers ===

    def _new_id(self) -> str:
        taken = {r.id for r in self._records}
        record_id = self._id_factory()
        while record_id in taken:
            record_id = self._id_factory()
        return record_id

    def _build(self, candidate: Candidate, record_id: str) -> RecordT:
        data: dict[str, Any] = {k: v for k, v in as_mapping(candidate).items() if k != "id"}
        data["id"] = record_id
        try:
            return self.record_type.model_validate(data)
        except ValidationError as e:
            error = e.errors()[0]
            location = ".".join(str(part) for part in error["loc"])
            raise RecordValidationError(f"Invalid value for {location}: {error['msg']}") from e

    def _check_business_key(self, candidate: Candidate, exclude_id: Optional[str]) -> None:
        if not (self.enforce_unique and self.business_key):
            return
        value = normalize_key(field_value(as_mapping(candidate), self.business_key))
        for existing in self._records:
            if existing.id == exclude_id:
                continue
            if normalize_key(getattr(existing, self.business_key)) == value:
                logger.warning(f"Duplicate {self.kind} {self.business_key}: {value}")
                raise DuplicateKeyError(f"A {self.kind} with this {self.business_key} already exists")

    def _persist(self) -> None:
        self._store.save(self.key, self._records)


def normalize_key(value: Any) -> str:
    return str(value).strip().casefold()


def student_repository(store: CollectionStore, enforce_unique: bool = False) -> EntityRepository[Student]:
    return EntityRepository(
        store, STUDENT_RECORDS, "student", Student, DEFAULT_STUDENTS,
        business_key="student_id", enforce_unique=enforce_unique,
    )


def subject_repository(store: CollectionStore, enforce_unique: bool = False) -> EntityRepository[Subject]:
    return EntityRepository(
        store, SUBJECT_RECORDS, "subject", Subject, DEFAULT_SUBJECTS,
        business_key="code", enforce_unique=enforce_unique,
    )


def grade_repository(store: CollectionStore) -> EntityRepository[Grade]:
    return EntityRepository(store, GRADE_RECORDS, "grade", Grade, DEFAULT_GRADES)


class AcademicRecords:
    """The three repositories that make up one record book"""

    def __init__(self, store: CollectionStore, enforce_unique_keys: bool = False):
        self.store = store
        self.students = student_repository(store, enforce_unique_keys)
        self.subjects = subject_repository(store, enforce_unique_keys)
        self.grades = grade_repository(store)
