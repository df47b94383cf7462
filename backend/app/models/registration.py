"""
Registration model - the student/course enrollment relationship.

The registrations table is a set keyed by (student_id, course_id): at most
one row may exist for a pair, whatever its status. Dropping a course
through the ledger deletes the row; setting the status to DROPPED keeps it.

Statuses:
- ACTIVE: initial state of every new registration
- DROPPED: conventionally terminal, not protected
- COMPLETED: conventionally terminal, not protected

No transition table is enforced. Any status may be assigned after any other.
"""

import enum
from datetime import datetime, timezone
from sqlalchemy import (
    Column, Integer, String, Text, DateTime, Enum, ForeignKey, Index, UniqueConstraint
)
from sqlalchemy.orm import relationship
from app.database import Base


class RegistrationStatus(str, enum.Enum):
    ACTIVE = "ACTIVE"
    DROPPED = "DROPPED"
    COMPLETED = "COMPLETED"


class Registration(Base):
    """SQLAlchemy model for the registrations table."""
    __tablename__ = "registrations"

    registration_id = Column(Integer, primary_key=True, autoincrement=True,
                             doc="Surrogate key assigned by the store")
    student_id = Column(Integer, ForeignKey("students.student_id"), nullable=False)
    course_id = Column(Integer, ForeignKey("courses.course_id"), nullable=False)
    registration_date = Column(DateTime, nullable=False,
                               default=lambda: datetime.now(timezone.utc),
                               doc="Set once at creation, never updated")
    grade = Column(Text, nullable=True,
                   doc="Free-form grade code, absent until assigned")
    status = Column(Enum(RegistrationStatus, name="registration_status",
                         native_enum=False, length=20),
                    nullable=False, default=RegistrationStatus.ACTIVE)

    # Navigation for read-side joins only; the ledger never writes through these
    student = relationship("Student", back_populates="registrations")
    course = relationship("Course", back_populates="registrations")

    __table_args__ = (
        UniqueConstraint("student_id", "course_id", name="uq_registrations_student_course"),
        Index("ix_registrations_course_id", "course_id"),
        Index("ix_registrations_status", "status"),
        Index("ix_registrations_registration_date", "registration_date"),
        {"sqlite_autoincrement": True},
    )

    def __repr__(self):
        return (f"<Registration(id={self.registration_id}, student={self.student_id}, "
                f"course={self.course_id}, status='{self.status.value if self.status else None}', "
                f"grade='{self.grade}')>")
