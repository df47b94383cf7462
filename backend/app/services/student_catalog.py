"""
Student Catalog - CRUD and lookup operations for student records.

Every operation opens one scoped session on the injected Database. Storage
errors never escape: they are logged on the "students" channel and turned
into the operation's failure value (None, False, 0 or an empty list).

Email uniqueness is NOT enforced here. Callers are expected to call
exists_by_email() before create().
"""

from datetime import date
from typing import List, Optional
from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError

from app.database import Database
from app.models.student import Student
from app.logging_config import get_logger, log_with_context

# Channel logger for student catalog operations
logger = get_logger("students")


class StudentCatalog:
    """Data access for the students table."""

    def __init__(self, database: Database):
        self.database = database

    def create(self, first_name: str, last_name: str, email: str,
               phone: Optional[str] = None,
               date_of_birth: Optional[date] = None) -> Optional[int]:
        """
        Insert a new student.

        Returns:
            The assigned student_id, or None if the store rejected the write
        """
        with self.database.session() as db:
            try:
                student = Student(
                    first_name=first_name,
                    last_name=last_name,
                    email=email,
                    phone=phone,
                    date_of_birth=date_of_birth,
                )
                db.add(student)
                db.commit()
            except SQLAlchemyError as e:
                db.rollback()
                log_with_context(logger, "ERROR", "Failed to add student",
                                 context={"email": email},
                                 extra_data={"error": str(e)})
                return None

            log_with_context(logger, "INFO", "Added student: {}".format(student.full_name),
                             context={"student_id": student.student_id})
            return student.student_id

    def get_by_id(self, student_id: int) -> Optional[Student]:
        with self.database.session() as db:
            try:
                return db.query(Student).filter(Student.student_id == student_id).first()
            except SQLAlchemyError as e:
                log_with_context(logger, "ERROR", "Failed to get student by id",
                                 context={"student_id": student_id},
                                 extra_data={"error": str(e)})
                return None

    def get_by_email(self, email: str) -> Optional[Student]:
        with self.database.session() as db:
            try:
                return db.query(Student).filter(Student.email == email).first()
            except SQLAlchemyError as e:
                log_with_context(logger, "ERROR", "Failed to get student by email",
                                 context={"email": email},
                                 extra_data={"error": str(e)})
                return None

    def list_all(self) -> List[Student]:
        """All students ordered by last name, then first name."""
        with self.database.session() as db:
            try:
                return db.query(Student).order_by(
                    Student.last_name, Student.first_name, Student.student_id
                ).all()
            except SQLAlchemyError as e:
                log_with_context(logger, "ERROR", "Failed to list students",
                                 extra_data={"error": str(e)})
                return []

    def update(self, student_id: int, first_name: str, last_name: str, email: str,
               phone: Optional[str] = None,
               date_of_birth: Optional[date] = None) -> bool:
        """
        Replace every mutable field of a student.

        The id and enrollment_date are never touched. Returns False if no
        student has this id or the store rejected the write.
        """
        with self.database.session() as db:
            try:
                rows = db.query(Student).filter(Student.student_id == student_id).update(
                    {
                        Student.first_name: first_name,
                        Student.last_name: last_name,
                        Student.email: email,
                        Student.phone: phone,
                        Student.date_of_birth: date_of_birth,
                    },
                    synchronize_session=False,
                )
                db.commit()
            except SQLAlchemyError as e:
                db.rollback()
                log_with_context(logger, "ERROR", "Failed to update student",
                                 context={"student_id": student_id},
                                 extra_data={"error": str(e)})
                return False

            if rows:
                log_with_context(logger, "INFO", "Updated student",
                                 context={"student_id": student_id})
            return rows > 0

    def delete(self, student_id: int) -> bool:
        """
        Delete a student by id.

        Registrations are not cascaded: the store rejects deleting a student
        who still has registration rows, and this returns False.
        """
        with self.database.session() as db:
            try:
                rows = db.query(Student).filter(
                    Student.student_id == student_id
                ).delete(synchronize_session=False)
                db.commit()
            except SQLAlchemyError as e:
                db.rollback()
                log_with_context(logger, "ERROR", "Failed to delete student",
                                 context={"student_id": student_id},
                                 extra_data={"error": str(e)})
                return False

            if rows:
                log_with_context(logger, "INFO", "Deleted student",
                                 context={"student_id": student_id})
            return rows > 0

    def search_by_name(self, name: str) -> List[Student]:
        """Case-insensitive substring match on first OR last name."""
        pattern = "%{}%".format(name)
        with self.database.session() as db:
            try:
                return db.query(Student).filter(
                    or_(Student.first_name.ilike(pattern), Student.last_name.ilike(pattern))
                ).order_by(
                    Student.last_name, Student.first_name, Student.student_id
                ).all()
            except SQLAlchemyError as e:
                log_with_context(logger, "ERROR", "Failed to search students",
                                 extra_data={"name": name, "error": str(e)})
                return []

    def exists_by_email(self, email: str) -> bool:
        with self.database.session() as db:
            try:
                return db.query(Student.student_id).filter(Student.email == email).first() is not None
            except SQLAlchemyError as e:
                log_with_context(logger, "ERROR", "Failed to check student email",
                                 context={"email": email},
                                 extra_data={"error": str(e)})
                return False
