"""
Pydantic schemas.

Two kinds live here:
- Read projections returned by the registration ledger's join queries.
  They are frozen snapshots of catalog data and are never written back.
- Request/response bodies for the REST routes.
"""

from datetime import date, datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.models.course import DEFAULT_INSTRUCTOR_DISPLAY
from app.models.registration import RegistrationStatus


# ── Read projections ─────────────────────────────────────────

class StudentSnapshot(BaseModel):
    """Display copy of a student's catalog fields."""
    model_config = ConfigDict(frozen=True, from_attributes=True)

    student_id: int
    first_name: str
    last_name: str
    email: str
    phone: Optional[str] = None
    date_of_birth: Optional[date] = None
    enrollment_date: Optional[datetime] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


class CourseSnapshot(BaseModel):
    """Display copy of a course's catalog fields."""
    model_config = ConfigDict(frozen=True, from_attributes=True)

    course_id: int
    course_code: str
    course_name: str
    description: Optional[str] = None
    credits: Optional[int] = None
    instructor: Optional[str] = None
    created_date: Optional[datetime] = None


class RegistrationView(BaseModel):
    """A registration row joined with snapshots of one or both sides."""
    model_config = ConfigDict(frozen=True, from_attributes=True)

    registration_id: int
    student_id: int
    course_id: int
    registration_date: datetime
    grade: Optional[str] = None
    status: RegistrationStatus
    student: Optional[StudentSnapshot] = None
    course: Optional[CourseSnapshot] = None


# ── Students ─────────────────────────────────────────────────

class StudentIn(BaseModel):
    first_name: str = Field(..., min_length=1, max_length=50)
    last_name: str = Field(..., min_length=1, max_length=50)
    email: str = Field(..., min_length=3, max_length=100)
    phone: Optional[str] = Field(None, max_length=20)
    date_of_birth: Optional[date] = None


class StudentOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    student_id: int
    first_name: str
    last_name: str
    full_name: str
    email: str
    phone: Optional[str] = None
    date_of_birth: Optional[date] = None
    enrollment_date: datetime


class StudentCourses(BaseModel):
    student: StudentOut
    active_registrations: int
    registrations: List[RegistrationView]


# ── Courses ──────────────────────────────────────────────────

class CourseIn(BaseModel):
    course_code: str = Field(..., min_length=1, max_length=20)
    course_name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None
    credits: int = Field(..., ge=0)
    instructor: Optional[str] = Field(None, max_length=100)


class CourseOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    course_id: int
    course_code: str
    course_name: str
    description: Optional[str] = None
    credits: int
    instructor: str = DEFAULT_INSTRUCTOR_DISPLAY
    created_date: datetime

    @classmethod
    def from_course(cls, course) -> "CourseOut":
        return cls(
            course_id=course.course_id,
            course_code=course.course_code,
            course_name=course.course_name,
            description=course.description,
            credits=course.credits,
            instructor=course.instructor_display,
            created_date=course.created_date,
        )


class CourseRoster(BaseModel):
    course: CourseOut
    active_enrollments: int
    registrations: List[RegistrationView]


# ── Registrations ────────────────────────────────────────────

class RegistrationIn(BaseModel):
    student_id: int
    course_id: int


class RegistrationOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    registration_id: int
    student_id: int
    course_id: int
    registration_date: datetime
    grade: Optional[str] = None
    status: RegistrationStatus


class GradeUpdate(BaseModel):
    grade: str = Field(..., min_length=1)

    @field_validator("grade")
    @classmethod
    def grade_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("grade must not be blank")
        return v


class StatusUpdate(BaseModel):
    status: RegistrationStatus


class CreatedResponse(BaseModel):
    id: int
    message: str
