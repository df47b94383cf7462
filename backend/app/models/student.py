"""
Student model - represents a student known to the registrar.

Students are identified by an integer surrogate key. Email is the logical
uniqueness key, but it is checked by callers (exists_by_email) rather than
enforced by the table.
"""

from datetime import datetime, timezone
from sqlalchemy import Column, Integer, String, Date, DateTime, Index
from sqlalchemy.orm import relationship
from app.database import Base


class Student(Base):
    """SQLAlchemy model for the students table."""
    __tablename__ = "students"

    student_id = Column(Integer, primary_key=True, autoincrement=True,
                        doc="Surrogate key assigned by the store")
    first_name = Column(String(50), nullable=False)
    last_name = Column(String(50), nullable=False)
    email = Column(String(100), nullable=False,
                   doc="Logical uniqueness key (checked by callers)")
    phone = Column(String(20), nullable=True)
    date_of_birth = Column(Date, nullable=True)
    enrollment_date = Column(DateTime, nullable=False,
                             default=lambda: datetime.now(timezone.utc),
                             doc="Set once at creation, never updated")

    registrations = relationship("Registration", back_populates="student",
                                 passive_deletes="all")

    __table_args__ = (
        Index("ix_students_email", "email"),
        Index("ix_students_name", "last_name", "first_name"),
        {"sqlite_autoincrement": True},
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def __repr__(self):
        return f"<Student(id={self.student_id}, name='{self.full_name}', email='{self.email}')>"
