from fastapi import FastAPI, HTTPException, Depends, Query, status, Request, Response
from fastapi.responses import JSONResponse
from typing import List, Optional
import logging
import sys

from analysis import GeminiClient, TextGenerator, analyze, performance_data
from config import get_settings
from database import create_db_and_tables, engine
from errors import DuplicateKeyError, RecordValidationError
from repository import AcademicRecords
from schemas import (
    Student, StudentCreate, StudentStatus, StudentSummary,
    Subject, SubjectCreate, SubjectSummary,
    Grade, GradeCreate, GradeResponse, GradeSummary,
    OrphanedGrades, AnalysisResponse,
)
from search import filter_grades, filter_students, filter_subjects
from stats import grade_summary, letter_grade, orphaned_grades, student_summary, subject_summary
from store import PersistentStore

settings = get_settings()

# Configure logging
handlers = [logging.StreamHandler(sys.stdout)]
if settings.log_file:
    handlers.append(logging.FileHandler(settings.log_file))
logging.basicConfig(
    level=settings.log_level,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=handlers
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Academic Records API",
    description="Manage students, subjects and grades, with derived statistics",
    version="1.0.0"
)


# Global exception handlers
@app.exception_handler(DuplicateKeyError)
async def duplicate_key_exception_handler(request: Request, exc: DuplicateKeyError):
    """Handle business key collisions"""
    logger.warning(f"Duplicate key rejected: {exc.reason}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": exc.reason}
    )


@app.exception_handler(RecordValidationError)
async def validation_exception_handler(request: Request, exc: RecordValidationError):
    """Handle records that fail their field rules"""
    logger.warning(f"Validation failed: {exc.reason}")
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": exc.reason}
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle all uncaught exceptions"""
    logger.error(f"Unexpected error: {str(exc)}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "An unexpected error occurred. Please contact support."}
    )


@app.on_event("startup")
def on_startup():
    """Create the store table and load the record book"""
    try:
        logger.info("Starting application...")
        create_db_and_tables()
        app.state.records = AcademicRecords(PersistentStore(engine), settings.enforce_unique_keys)
        logger.info("Record store ready")
    except Exception as e:
        logger.error(f"Failed to initialise the record store: {str(e)}", exc_info=True)
        raise


def get_records(request: Request) -> AcademicRecords:
    """Shared record book for the running application"""
    records = getattr(request.app.state, "records", None)
    if records is None:
        create_db_and_tables()
        records = AcademicRecords(PersistentStore(engine), settings.enforce_unique_keys)
        request.app.state.records = records
    return records


def get_analysis_client() -> TextGenerator:
    return GeminiClient(settings)


def no_content() -> Response:
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@app.get("/", tags=["Root"])
async def read_root():
    """Root endpoint"""
    logger.info("Root endpoint accessed")
    return {
        "message": "Welcome to the Academic Records API",
        "docs": "/docs",
        "redoc": "/redoc"
    }


# ============= STUDENT ENDPOINTS =============

@app.post("/students/", response_model=Student, status_code=status.HTTP_201_CREATED, tags=["Students"])
async def create_student(student: StudentCreate, records: AcademicRecords = Depends(get_records)):
    """Create a new student"""
    logger.info(f"Creating student {student.student_id}")
    return records.students.add(student)


@app.get("/students/", response_model=List[Student], tags=["Students"])
async def read_students(
    q: str = "",
    status_filter: Optional[str] = Query(None, alias="status"),
    records: AcademicRecords = Depends(get_records),
):
    """Search students, ordered by student ID"""
    logger.info(f"Fetching students with q={q!r}, status={status_filter}")
    if status_filter not in (None, "all") and status_filter not in {s.value for s in StudentStatus}:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unknown status filter: {status_filter}"
        )
    students = filter_students(records.students.list(), q, status_filter)
    logger.info(f"Retrieved {len(students)} students")
    return students


@app.get("/students/stats", response_model=StudentSummary, tags=["Students"])
async def read_student_stats(records: AcademicRecords = Depends(get_records)):
    """Totals and major distribution over all students"""
    return student_summary(records.students.list())


@app.get("/students/{student_id}", response_model=Student, tags=["Students"])
async def read_student(student_id: str, records: AcademicRecords = Depends(get_records)):
    """Get a specific student by ID"""
    student = records.students.get(student_id)
    if not student:
        logger.warning(f"Student not found with ID: {student_id}")
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Student not found"
        )
    return student


@app.put("/students/{student_id}", response_model=Student, tags=["Students"])
async def update_student(student_id: str, student: StudentCreate, records: AcademicRecords = Depends(get_records)):
    """Replace a student's record; unknown IDs are ignored"""
    updated = records.students.update(student_id, student)
    return updated if updated else no_content()


@app.delete("/students/{student_id}", status_code=status.HTTP_204_NO_CONTENT, tags=["Students"])
async def delete_student(student_id: str, records: AcademicRecords = Depends(get_records)):
    """Delete a student"""
    records.students.remove(student_id)
    return no_content()


# ============= SUBJECT ENDPOINTS =============

@app.post("/subjects/", response_model=Subject, status_code=status.HTTP_201_CREATED, tags=["Subjects"])
async def create_subject(subject: SubjectCreate, records: AcademicRecords = Depends(get_records)):
    """Create a new subject"""
    logger.info(f"Creating subject {subject.code}")
    return records.subjects.add(subject)


@app.get("/subjects/", response_model=List[Subject], tags=["Subjects"])
async def read_subjects(q: str = "", records: AcademicRecords = Depends(get_records)):
    """Search subjects, ordered by code"""
    subjects = filter_subjects(records.subjects.list(), q)
    logger.info(f"Retrieved {len(subjects)} subjects")
    return subjects


@app.get("/subjects/stats", response_model=SubjectSummary, tags=["Subjects"])
async def read_subject_stats(records: AcademicRecords = Depends(get_records)):
    """Subject count and credit totals"""
    return subject_summary(records.subjects.list())


@app.get("/subjects/{subject_id}", response_model=Subject, tags=["Subjects"])
async def read_subject(subject_id: str, records: AcademicRecords = Depends(get_records)):
    """Get a specific subject by ID"""
    subject = records.subjects.get(subject_id)
    if not subject:
        logger.warning(f"Subject not found with ID: {subject_id}")
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Subject not found"
        )
    return subject


@app.put("/subjects/{subject_id}", response_model=Subject, tags=["Subjects"])
async def update_subject(subject_id: str, subject: SubjectCreate, records: AcademicRecords = Depends(get_records)):
    """Replace a subject's record; unknown IDs are ignored"""
    updated = records.subjects.update(subject_id, subject)
    return updated if updated else no_content()


@app.delete("/subjects/{subject_id}", status_code=status.HTTP_204_NO_CONTENT, tags=["Subjects"])
async def delete_subject(subject_id: str, records: AcademicRecords = Depends(get_records)):
    """Delete a subject; grades recorded against its code are kept"""
    records.subjects.remove(subject_id)
    return no_content()


@app.get("/subjects/{subject_id}/analysis", response_model=AnalysisResponse, tags=["Subjects"])
def read_subject_analysis(
    subject_id: str,
    records: AcademicRecords = Depends(get_records),
    client: TextGenerator = Depends(get_analysis_client),
):
    """Natural-language performance summary for a subject"""
    subject = records.subjects.get(subject_id)
    if not subject:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Subject not found"
        )
    grades = [g for g in records.grades.list() if g.subject_code == subject.code]
    logger.info(f"Requesting analysis for {subject.code} over {len(grades)} grades")
    return AnalysisResponse(
        subject_id=subject.id,
        subject_code=subject.code,
        analysis=analyze(subject.id, performance_data(grades), client),
    )


# ============= GRADE ENDPOINTS =============

def with_letter(grade: Grade) -> GradeResponse:
    return GradeResponse(**grade.model_dump(), letter_grade=letter_grade(grade.score))


@app.post("/grades/", response_model=GradeResponse, status_code=status.HTTP_201_CREATED, tags=["Grades"])
async def create_grade(grade: GradeCreate, records: AcademicRecords = Depends(get_records)):
    """Record a new grade"""
    logger.info(f"Recording grade for {grade.student_name} in {grade.subject_code}")
    return with_letter(records.grades.add(grade))


@app.get("/grades/", response_model=List[GradeResponse], tags=["Grades"])
async def read_grades(q: str = "", records: AcademicRecords = Depends(get_records)):
    """Search grades, highest score first"""
    grades = filter_grades(records.grades.list(), q)
    logger.info(f"Retrieved {len(grades)} grades")
    return [with_letter(g) for g in grades]


@app.get("/grades/stats", response_model=GradeSummary, tags=["Grades"])
async def read_grade_stats(q: str = "", records: AcademicRecords = Depends(get_records)):
    """Average and highest score over the grades matching ``q``, plus the overall count"""
    grades = records.grades.list()
    return grade_summary(filter_grades(grades, q), total=len(grades))


@app.get("/grades/orphans", response_model=OrphanedGrades, tags=["Grades"])
async def read_orphaned_grades(records: AcademicRecords = Depends(get_records)):
    """Grades whose student name or subject code no longer matches a record"""
    return orphaned_grades(records.grades.list(), records.students.list(), records.subjects.list())


@app.get("/grades/{grade_id}", response_model=GradeResponse, tags=["Grades"])
async def read_grade(grade_id: str, records: AcademicRecords = Depends(get_records)):
    """Get a specific grade by ID"""
    grade = records.grades.get(grade_id)
    if not grade:
        logger.warning(f"Grade not found with ID: {grade_id}")
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Grade not found"
        )
    return with_letter(grade)


@app.put("/grades/{grade_id}", response_model=GradeResponse, tags=["Grades"])
async def update_grade(grade_id: str, grade: GradeCreate, records: AcademicRecords = Depends(get_records)):
    """Replace a grade record; unknown IDs are ignored"""
    updated = records.grades.update(grade_id, grade)
    return with_letter(updated) if updated else no_content()


@app.delete("/grades/{grade_id}", status_code=status.HTTP_204_NO_CONTENT, tags=["Grades"])
async def delete_grade(grade_id: str, records: AcademicRecords = Depends(get_records)):
    """Delete a grade record"""
    records.grades.remove(grade_id)
    return no_content()
