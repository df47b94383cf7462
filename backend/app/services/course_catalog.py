"""
Course Catalog - CRUD and lookup operations for course records.

Mirrors the student catalog: one scoped session per operation, storage
errors logged on the "courses" channel and returned as failure values.
Course codes are matched exactly; upper-casing them is the caller's job.
"""

from typing import List, Optional
from sqlalchemy.exc import SQLAlchemyError

from app.database import Database
from app.models.course import Course
from app.logging_config import get_logger, log_with_context

logger = get_logger("courses")


class CourseCatalog:
    """Data access for the courses table."""

    def __init__(self, database: Database):
        self.database = database

    def create(self, course_code: str, course_name: str, credits: int,
               description: Optional[str] = None,
               instructor: Optional[str] = None) -> Optional[int]:
        """Insert a new course and return its course_id, or None on failure."""
        with self.database.session() as db:
            try:
                course = Course(
                    course_code=course_code,
                    course_name=course_name,
                    description=description,
                    credits=credits,
                    instructor=instructor,
                )
                db.add(course)
                db.commit()
            except SQLAlchemyError as e:
                db.rollback()
                log_with_context(logger, "ERROR", "Failed to add course",
                                 context={"course_code": course_code},
                                 extra_data={"error": str(e)})
                return None

            log_with_context(logger, "INFO", "Added course: {}".format(course_code),
                             context={"course_id": course.course_id})
            return course.course_id

    def get_by_id(self, course_id: int) -> Optional[Course]:
        with self.database.session() as db:
            try:
                return db.query(Course).filter(Course.course_id == course_id).first()
            except SQLAlchemyError as e:
                log_with_context(logger, "ERROR", "Failed to get course by id",
                                 context={"course_id": course_id},
                                 extra_data={"error": str(e)})
                return None

    def get_by_code(self, course_code: str) -> Optional[Course]:
        with self.database.session() as db:
            try:
                return db.query(Course).filter(Course.course_code == course_code).first()
            except SQLAlchemyError as e:
                log_with_context(logger, "ERROR", "Failed to get course by code",
                                 context={"course_code": course_code},
                                 extra_data={"error": str(e)})
                return None

    def list_all(self) -> List[Course]:
        with self.database.session() as db:
            try:
                return db.query(Course).order_by(Course.course_code, Course.course_id).all()
            except SQLAlchemyError as e:
                log_with_context(logger, "ERROR", "Failed to list courses",
                                 extra_data={"error": str(e)})
                return []

    def update(self, course_id: int, course_code: str, course_name: str,
               description: Optional[str], credits: int,
               instructor: Optional[str]) -> bool:
        """Replace every mutable field of a course. created_date is kept."""
        with self.database.session() as db:
            try:
                rows = db.query(Course).filter(Course.course_id == course_id).update(
                    {
                        Course.course_code: course_code,
                        Course.course_name: course_name,
                        Course.description: description,
                        Course.credits: credits,
                        Course.instructor: instructor,
                    },
                    synchronize_session=False,
                )
                db.commit()
            except SQLAlchemyError as e:
                db.rollback()
                log_with_context(logger, "ERROR", "Failed to update course",
                                 context={"course_id": course_id},
                                 extra_data={"error": str(e)})
                return False

            if rows:
                log_with_context(logger, "INFO", "Updated course",
                                 context={"course_id": course_id})
            return rows > 0

    def delete(self, course_id: int) -> bool:
        """
        Delete a course by id.

        Not cascaded: a course that still has registration rows is rejected
        by the store's foreign key and this returns False.
        """
        with self.database.session() as db:
            try:
                rows = db.query(Course).filter(
                    Course.course_id == course_id
                ).delete(synchronize_session=False)
                db.commit()
            except SQLAlchemyError as e:
                db.rollback()
                log_with_context(logger, "ERROR", "Failed to delete course",
                                 context={"course_id": course_id},
                                 extra_data={"error": str(e)})
                return False

            if rows:
                log_with_context(logger, "INFO", "Deleted course",
                                 context={"course_id": course_id})
            return rows > 0

    def search_by_name(self, course_name: str) -> List[Course]:
        """Case-insensitive substring match on the course name."""
        with self.database.session() as db:
            try:
                return db.query(Course).filter(
                    Course.course_name.ilike("%{}%".format(course_name))
                ).order_by(Course.course_code, Course.course_id).all()
            except SQLAlchemyError as e:
                log_with_context(logger, "ERROR", "Failed to search courses",
                                 extra_data={"course_name": course_name, "error": str(e)})
                return []

    def list_by_instructor(self, instructor: str) -> List[Course]:
        """Courses whose instructor contains the given text, ignoring case."""
        with self.database.session() as db:
            try:
                return db.query(Course).filter(
                    Course.instructor.ilike("%{}%".format(instructor))
                ).order_by(Course.course_code, Course.course_id).all()
            except SQLAlchemyError as e:
                log_with_context(logger, "ERROR", "Failed to list courses by instructor",
                                 extra_data={"instructor": instructor, "error": str(e)})
                return []

    def exists_by_code(self, course_code: str) -> bool:
        with self.database.session() as db:
            try:
                return db.query(Course.course_id).filter(
                    Course.course_code == course_code
                ).first() is not None
            except SQLAlchemyError as e:
                log_with_context(logger, "ERROR", "Failed to check course code",
                                 context={"course_code": course_code},
                                 extra_data={"error": str(e)})
                return False
