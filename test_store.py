import json

from sqlmodel import Session

from models import StoreEntry
from schemas import Grade, Student, Subject
from seed import DEFAULT_STUDENTS, DEFAULT_SUBJECTS
from store import PersistentStore, serialize


def write_raw(engine, key, value):
    with Session(engine) as session:
        session.add(StoreEntry(key=key, value=value))
        session.commit()


def test_load_missing_key_returns_default(store):
    """Test a missing entry yields the default collection"""
    loaded = store.load("subjectRecords", DEFAULT_SUBJECTS, Subject)
    assert loaded == DEFAULT_SUBJECTS


def test_load_returns_copy_of_default(store):
    """Test mutating a loaded default does not leak into the default"""
    loaded = store.load("subjectRecords", DEFAULT_SUBJECTS, Subject)
    loaded.pop()
    loaded[0].name = "Changed"
    assert len(DEFAULT_SUBJECTS) == 5
    assert DEFAULT_SUBJECTS[0].name == "Intro to Programming"


def test_save_then_load(store):
    """Test a saved collection is read back as records"""
    subjects = [Subject(id="x1", code="PHYS 101", name="Physics I", credits=4)]
    store.save("subjectRecords", subjects)
    loaded = store.load("subjectRecords", DEFAULT_SUBJECTS, Subject)
    assert loaded == subjects


def test_save_uses_camel_case_layout(store):
    """Test the stored JSON uses the documented field names"""
    store.save("studentRecords", DEFAULT_STUDENTS[:1])
    stored = json.loads(store.read("studentRecords"))
    assert stored == [{
        "id": "stu1",
        "studentId": "STU-2024-001",
        "firstName": "John",
        "lastName": "Doe",
        "email": "john.doe@university.edu",
        "phone": "+1 (555) 123-4567",
        "enrollmentDate": "2024-09-01",
        "major": "Computer Science",
        "status": "active",
    }]


def test_load_corrupt_json_returns_default(engine, store):
    """Test unparsable content falls back to the default"""
    write_raw(engine, "gradeRecords", "{not json")
    assert store.load("gradeRecords", [], Grade) == []


def test_load_non_list_returns_default(engine, store):
    """Test a JSON object instead of an array falls back to the default"""
    write_raw(engine, "subjectRecords", json.dumps({"code": "IT 101"}))
    assert store.load("subjectRecords", DEFAULT_SUBJECTS, Subject) == DEFAULT_SUBJECTS


def test_load_invalid_records_returns_default(engine, store):
    """Test records of the wrong shape fall back to the default"""
    write_raw(engine, "studentRecords", json.dumps([{"id": "s1", "firstName": "Only"}]))
    assert store.load("studentRecords", DEFAULT_STUDENTS, Student) == DEFAULT_STUDENTS


def test_load_without_record_type_returns_raw_items(store):
    """Test loading without a record type returns plain JSON values"""
    store.save("misc", [{"a": 1}, {"b": 2}])
    assert store.load("misc", []) == [{"a": 1}, {"b": 2}]


def test_save_overwrites_whole_collection(store):
    """Test every save replaces the previous snapshot"""
    store.save("subjectRecords", DEFAULT_SUBJECTS)
    store.save("subjectRecords", DEFAULT_SUBJECTS[:2])
    assert len(json.loads(store.read("subjectRecords"))) == 2


def test_save_load_is_idempotent(store):
    """Test persisting a loaded collection twice leaves identical content"""
    store.save("subjectRecords", store.load("subjectRecords", DEFAULT_SUBJECTS, Subject))
    first = store.read("subjectRecords")
    store.save("subjectRecords", store.load("subjectRecords", DEFAULT_SUBJECTS, Subject))
    second = store.read("subjectRecords")
    assert first == second
    assert first == serialize(DEFAULT_SUBJECTS)


def test_save_failure_is_swallowed(broken_engine):
    """Test a storage write error is logged, not raised"""
    store = PersistentStore(broken_engine)
    store.save("subjectRecords", DEFAULT_SUBJECTS)


def test_load_failure_returns_default(broken_engine):
    """Test a storage read error yields the default"""
    store = PersistentStore(broken_engine)
    assert store.load("subjectRecords", DEFAULT_SUBJECTS, Subject) == DEFAULT_SUBJECTS


def test_unserializable_collection_is_not_written(store):
    """Test a serialization error is swallowed and leaves the old snapshot"""
    store.save("misc", [{"a": 1}])
    store.save("misc", [object()])
    assert json.loads(store.read("misc")) == [{"a": 1}]


def test_save_is_readable_back(store):
    """Test a saved collection is stored and timestamped"""
    store.save("subjectRecords", DEFAULT_SUBJECTS)
    assert store.read("subjectRecords") == serialize(DEFAULT_SUBJECTS)

    store.save("subjectRecords", DEFAULT_SUBJECTS[:1])
    assert store.read("subjectRecords") == serialize(DEFAULT_SUBJECTS[:1])


GRADE_ROW = {"id": "g1", "studentName": "John Doe", "subjectCode": "IT 101", "date": "2025-01-10"}


def test_load_out_of_range_score_returns_default(engine, store):
    """Test a stored score above 100 makes the collection corrupt"""
    write_raw(engine, "gradeRecords", json.dumps([{**GRADE_ROW, "score": 500}]))
    assert store.load("gradeRecords", [], Grade) == []


def test_load_nan_score_returns_default(engine, store):
    """Test a stored NaN score makes the collection corrupt"""
    write_raw(engine, "gradeRecords", '[{"id":"g1","studentName":"John Doe","subjectCode":"IT 101","date":"2025-01-10","score":NaN}]')
    assert store.load("gradeRecords", [], Grade) == []


def test_load_out_of_range_credits_returns_default(engine, store):
    """Test stored credits outside 1-6 make the collection corrupt"""
    write_raw(engine, "subjectRecords", json.dumps([{"id": "s1", "code": "X 1", "name": "X", "credits": 99}]))
    assert store.load("subjectRecords", DEFAULT_SUBJECTS, Subject) == DEFAULT_SUBJECTS
