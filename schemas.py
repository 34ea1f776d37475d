from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel
from typing import Dict, List, Optional, Union
import datetime
from enum import Enum


MAJORS = (
    "Computer Science",
    "Electrical Engineering",
    "Mechanical Engineering",
    "Business Administration",
    "Psychology",
    "Biology",
)


class StudentStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    GRADUATED = "graduated"
    SUSPENDED = "suspended"


class RecordSchema(BaseModel):
    """Base schema: snake_case attributes, camelCase on the wire and on disk"""

    class Config:
        alias_generator = to_camel
        populate_by_name = True


# Student Schemas
class StudentBase(RecordSchema):
    """Base schema for student with common attributes"""
    student_id: str = Field(..., description="Business code, e.g. STU-2024-001")
    first_name: str = Field(..., description="Student's first name")
    last_name: str = Field(..., description="Student's last name")
    email: str = Field(..., description="Student's email address")
    phone: Optional[str] = Field("", description="Optional phone number")
    enrollment_date: datetime.date = Field(default_factory=datetime.date.today, description="Enrollment date")
    major: str = Field(..., description="One of the offered majors")
    status: StudentStatus = Field(StudentStatus.ACTIVE, description="Enrollment status")

    @field_validator("major")
    @classmethod
    def strip_major(cls, value: str) -> str:
        return value.strip()

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


class StudentCreate(StudentBase):
    """Schema for creating a new student"""
    pass


class Student(StudentBase):
    """Stored student record"""
    id: str


# Subject Schemas
class SubjectBase(RecordSchema):
    """Base schema for subject with common attributes"""
    code: str = Field(..., description="Subject code, e.g. IT 101")
    name: str = Field(..., description="Subject name")
    credits: int = Field(3, description="Number of credits (1-6)")


class SubjectCreate(SubjectBase):
    """Schema for creating a new subject"""
    pass


class Subject(SubjectBase):
    """Stored subject record"""
    id: str
    credits: int = Field(..., ge=1, le=6)


# Grade Schemas
class GradeBase(RecordSchema):
    """Base schema for grade with common attributes"""
    student_name: str = Field(..., description="Full name of the graded student")
    subject_code: str = Field(..., description="Code of the graded subject")
    score: Union[float, str] = Field(..., description="Score between 0 and 100")
    date: datetime.date = Field(default_factory=datetime.date.today, description="Date the grade was recorded")


class GradeCreate(GradeBase):
    """Schema for recording a new grade"""
    pass


class Grade(GradeBase):
    """Stored grade record"""
    id: str
    score: float = Field(..., ge=0, le=100, allow_inf_nan=False)


class GradeResponse(Grade):
    """Schema for grade response, with the derived letter grade"""
    letter_grade: str


# Statistics Schemas
class AggregateStats(BaseModel):
    count: int = 0
    mean: float = 0
    min: float = 0
    max: float = 0


class StudentSummary(RecordSchema):
    total_students: int
    active_students: int
    graduated_students: int
    major_distribution: Dict[str, int]
    most_popular_major: str


class SubjectSummary(RecordSchema):
    total_subjects: int
    total_credits: int
    average_credits: float


class GradeSummary(RecordSchema):
    total_grades: int
    shown: int
    average_score: float
    highest_score: float
    letter_distribution: Dict[str, int]


class OrphanedGrades(RecordSchema):
    missing_student: List[Grade]
    missing_subject: List[Grade]


class AnalysisResponse(RecordSchema):
    subject_id: str
    subject_code: str
    analysis: str
