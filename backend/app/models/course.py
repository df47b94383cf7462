"""
Course model - represents a course offered by the institution.

Course codes are the logical uniqueness key. They are upper-cased by the
caller before storage and lookup; the table stores whatever it is given.
"""

from datetime import datetime, timezone
from sqlalchemy import Column, Integer, String, Text, DateTime, Index, CheckConstraint
from sqlalchemy.orm import relationship
from app.database import Base

DEFAULT_INSTRUCTOR_DISPLAY = "TBA"


class Course(Base):
    """SQLAlchemy model for the courses table."""
    __tablename__ = "courses"

    course_id = Column(Integer, primary_key=True, autoincrement=True,
                       doc="Surrogate key assigned by the store")
    course_code = Column(String(20), nullable=False,
                         doc="Logical uniqueness key, upper-cased by callers")
    course_name = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)
    credits = Column(Integer, nullable=False, default=0)
    instructor = Column(String(100), nullable=True)
    created_date = Column(DateTime, nullable=False,
                          default=lambda: datetime.now(timezone.utc),
                          doc="Set once at creation, never updated")

    registrations = relationship("Registration", back_populates="course",
                                 passive_deletes="all")

    __table_args__ = (
        CheckConstraint("credits >= 0", name="ck_courses_credits_non_negative"),
        Index("ix_courses_course_code", "course_code"),
        {"sqlite_autoincrement": True},
    )

    @property
    def instructor_display(self) -> str:
        """Instructor name, or TBA when none has been assigned."""
        return self.instructor or DEFAULT_INSTRUCTOR_DISPLAY

    def __repr__(self):
        return (f"<Course(id={self.course_id}, code='{self.course_code}', "
                f"name='{self.course_name}', credits={self.credits})>")
