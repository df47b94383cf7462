"""
Registration Ledger - the authoritative store of student/course enrollments.

Business rules:
1. At most one registration row per (student_id, course_id) pair. A row in
   any status, including DROPPED and COMPLETED, blocks a new registration.
2. New registrations start ACTIVE with no grade.
3. drop() hard-deletes the row. update_status(..., DROPPED) keeps it, so
   the pair still counts as registered. Both paths are deliberate.
4. Grades and statuses are written verbatim. There is no grade whitelist
   and no transition table; COMPLETED -> ACTIVE is allowed.
5. Enrollment and registration counts only include ACTIVE rows.

register() runs its existence check and insert in a single session and
transaction, and the table's unique constraint on the pair catches a
concurrent insert that slips between the two; that IntegrityError is
reported as "already registered".

Join queries return RegistrationView projections carrying snapshots of
catalog data. They are read-only copies and are never written back.
"""

from typing import List, Optional
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, contains_eager

from app.database import Database
from app.models.registration import Registration, RegistrationStatus
from app.models.student import Student
from app.schemas import CourseSnapshot, RegistrationView, StudentSnapshot
from app.logging_config import get_logger, log_with_context

logger = get_logger("registrations")


def _pair_filter(query, student_id: int, course_id: int):
    return query.filter(
        Registration.student_id == student_id,
        Registration.course_id == course_id,
    )


def _coerce_status(status, context: dict) -> Optional[RegistrationStatus]:
    try:
        return RegistrationStatus(status)
    except ValueError:
        log_with_context(logger, "WARNING", "Unknown registration status",
                         context=context, extra_data={"status": str(status)})
        return None


def _to_view(registration: Registration,
             student: Optional[StudentSnapshot] = None,
             course: Optional[CourseSnapshot] = None) -> RegistrationView:
    return RegistrationView(
        registration_id=registration.registration_id,
        student_id=registration.student_id,
        course_id=registration.course_id,
        registration_date=registration.registration_date,
        grade=registration.grade,
        status=registration.status,
        student=student,
        course=course,
    )


class RegistrationLedger:
    """Mediates every state change of a student/course relationship."""

    def __init__(self, database: Database):
        self.database = database

    # ── Writes ───────────────────────────────────────────────

    def register(self, student_id: int, course_id: int) -> Optional[int]:
        """
        Register a student for a course.

        Returns:
            The new registration_id, or None if the pair is already
            registered (in any status) or the store rejected the insert
        """
        context = {"student_id": student_id, "course_id": course_id}
        with self.database.session() as db:
            try:
                if self._exists(db, student_id, course_id):
                    log_with_context(logger, "WARNING",
                                     "Student is already registered for this course",
                                     context=context)
                    return None
                registration_id = self._insert(db, student_id, course_id,
                                               RegistrationStatus.ACTIVE, None)
            except IntegrityError as e:
                db.rollback()
                log_with_context(logger, "WARNING", "Registration rejected by store",
                                 context=context, extra_data={"error": str(e.orig)})
                return None
            except SQLAlchemyError as e:
                db.rollback()
                log_with_context(logger, "ERROR", "Failed to register student",
                                 context=context, extra_data={"error": str(e)})
                return None

        log_with_context(logger, "INFO", "Registered student for course",
                         context={**context, "registration_id": registration_id})
        return registration_id

    def add(self, student_id: int, course_id: int,
            status: RegistrationStatus = RegistrationStatus.ACTIVE,
            grade: Optional[str] = None) -> Optional[int]:
        """
        Insert a registration row as given, without the existence check.

        The unique constraint still rejects a second row for the pair.
        """
        context = {"student_id": student_id, "course_id": course_id}
        status = _coerce_status(status, context)
        if status is None:
            return None
        with self.database.session() as db:
            try:
                registration_id = self._insert(db, student_id, course_id, status, grade)
            except SQLAlchemyError as e:
                db.rollback()
                log_with_context(logger, "ERROR", "Failed to add registration",
                                 context=context, extra_data={"error": str(e)})
                return None

        log_with_context(logger, "INFO", "Added registration",
                         context={**context, "registration_id": registration_id},
                         extra_data={"status": status.value})
        return registration_id

    def update(self, registration_id: int, grade: Optional[str],
               status: RegistrationStatus) -> bool:
        """Replace grade and status of a registration identified by id."""
        status = _coerce_status(status, {"registration_id": registration_id})
        if status is None:
            return False
        with self.database.session() as db:
            try:
                rows = db.query(Registration).filter(
                    Registration.registration_id == registration_id
                ).update(
                    {Registration.grade: grade,
                     Registration.status: status},
                    synchronize_session=False,
                )
                db.commit()
            except SQLAlchemyError as e:
                db.rollback()
                log_with_context(logger, "ERROR", "Failed to update registration",
                                 context={"registration_id": registration_id},
                                 extra_data={"error": str(e)})
                return False
        return rows > 0

    def drop(self, student_id: int, course_id: int) -> bool:
        """Delete the registration row for the pair. False if none exists."""
        context = {"student_id": student_id, "course_id": course_id}
        with self.database.session() as db:
            try:
                rows = _pair_filter(db.query(Registration), student_id, course_id).delete(
                    synchronize_session=False
                )
                db.commit()
            except SQLAlchemyError as e:
                db.rollback()
                log_with_context(logger, "ERROR", "Failed to drop student from course",
                                 context=context, extra_data={"error": str(e)})
                return False

        if rows:
            log_with_context(logger, "INFO", "Dropped student from course", context=context)
        return rows > 0

    def update_grade(self, student_id: int, course_id: int, grade: str) -> bool:
        """Set the grade verbatim. Status is left as it is."""
        return self._update_pair(student_id, course_id, {Registration.grade: grade},
                                 "grade", grade)

    def update_status(self, student_id: int, course_id: int,
                      status: RegistrationStatus) -> bool:
        """Overwrite the status. Any status may follow any other."""
        status = _coerce_status(status, {"student_id": student_id, "course_id": course_id})
        if status is None:
            return False
        return self._update_pair(student_id, course_id, {Registration.status: status},
                                 "status", status.value)

    # ── Reads ────────────────────────────────────────────────

    def get_by_id(self, registration_id: int) -> Optional[Registration]:
        with self.database.session() as db:
            try:
                return db.query(Registration).filter(
                    Registration.registration_id == registration_id
                ).first()
            except SQLAlchemyError as e:
                log_with_context(logger, "ERROR", "Failed to get registration by id",
                                 context={"registration_id": registration_id},
                                 extra_data={"error": str(e)})
                return None

    def get(self, student_id: int, course_id: int) -> Optional[Registration]:
        """The registration row for a pair, if any."""
        with self.database.session() as db:
            try:
                return _pair_filter(db.query(Registration), student_id, course_id).first()
            except SQLAlchemyError as e:
                log_with_context(logger, "ERROR", "Failed to get registration",
                                 context={"student_id": student_id, "course_id": course_id},
                                 extra_data={"error": str(e)})
                return None

    def is_registered(self, student_id: int, course_id: int) -> bool:
        """True if a row exists for the pair, whatever its status."""
        with self.database.session() as db:
            try:
                return self._exists(db, student_id, course_id)
            except SQLAlchemyError as e:
                log_with_context(logger, "ERROR", "Failed to check registration",
                                 context={"student_id": student_id, "course_id": course_id},
                                 extra_data={"error": str(e)})
                return False

    def courses_for_student(self, student_id: int) -> List[RegistrationView]:
        """Every registration of a student with its course, newest first."""
        with self.database.session() as db:
            try:
                rows = db.query(Registration).join(Registration.course).options(
                    contains_eager(Registration.course)
                ).filter(
                    Registration.student_id == student_id
                ).order_by(
                    Registration.registration_date.desc(),
                    Registration.registration_id.desc(),
                ).all()
                return [
                    _to_view(r, course=CourseSnapshot.model_validate(r.course))
                    for r in rows
                ]
            except SQLAlchemyError as e:
                log_with_context(logger, "ERROR", "Failed to get courses for student",
                                 context={"student_id": student_id},
                                 extra_data={"error": str(e)})
                return []

    def students_for_course(self, course_id: int) -> List[RegistrationView]:
        """Every registration of a course with its student, by student name."""
        with self.database.session() as db:
            try:
                rows = db.query(Registration).join(Registration.student).options(
                    contains_eager(Registration.student)
                ).filter(
                    Registration.course_id == course_id
                ).order_by(
                    Student.last_name,
                    Student.first_name,
                    Registration.registration_id,
                ).all()
                return [
                    _to_view(r, student=StudentSnapshot.model_validate(r.student))
                    for r in rows
                ]
            except SQLAlchemyError as e:
                log_with_context(logger, "ERROR", "Failed to get students for course",
                                 context={"course_id": course_id},
                                 extra_data={"error": str(e)})
                return []

    def enrollment_count(self, course_id: int) -> int:
        """Number of ACTIVE registrations in a course."""
        return self._count_active(Registration.course_id == course_id,
                                  {"course_id": course_id})

    def registration_count(self, student_id: int) -> int:
        """Number of ACTIVE registrations held by a student."""
        return self._count_active(Registration.student_id == student_id,
                                  {"student_id": student_id})

    def all_registrations(self) -> List[RegistrationView]:
        """Every registration with names and codes of both sides, newest first."""
        with self.database.session() as db:
            try:
                rows = db.query(Registration).join(Registration.student).join(
                    Registration.course
                ).options(
                    contains_eager(Registration.student),
                    contains_eager(Registration.course),
                ).order_by(
                    Registration.registration_date.desc(),
                    Registration.registration_id.desc(),
                ).all()
                return [
                    _to_view(
                        r,
                        student=StudentSnapshot(
                            student_id=r.student.student_id,
                            first_name=r.student.first_name,
                            last_name=r.student.last_name,
                            email=r.student.email,
                        ),
                        course=CourseSnapshot(
                            course_id=r.course.course_id,
                            course_code=r.course.course_code,
                            course_name=r.course.course_name,
                        ),
                    )
                    for r in rows
                ]
            except SQLAlchemyError as e:
                log_with_context(logger, "ERROR", "Failed to list registrations",
                                 extra_data={"error": str(e)})
                return []

    # ── Helpers ──────────────────────────────────────────────

    @staticmethod
    def _exists(db: Session, student_id: int, course_id: int) -> bool:
        return _pair_filter(
            db.query(Registration.registration_id), student_id, course_id
        ).first() is not None

    @staticmethod
    def _insert(db: Session, student_id: int, course_id: int,
                status: RegistrationStatus, grade: Optional[str]) -> int:
        registration = Registration(
            student_id=student_id,
            course_id=course_id,
            status=status,
            grade=grade,
        )
        db.add(registration)
        db.commit()
        return registration.registration_id

    def _update_pair(self, student_id: int, course_id: int, values: dict,
                     field: str, new_value: str) -> bool:
        context = {"student_id": student_id, "course_id": course_id}
        with self.database.session() as db:
            try:
                rows = _pair_filter(db.query(Registration), student_id, course_id).update(
                    values, synchronize_session=False
                )
                db.commit()
            except SQLAlchemyError as e:
                db.rollback()
                log_with_context(logger, "ERROR", "Failed to update registration {}".format(field),
                                 context=context, extra_data={"error": str(e)})
                return False

        if rows:
            log_with_context(logger, "INFO", "Registration {} updated".format(field),
                             context=context, extra_data={field: new_value})
        return rows > 0

    def _count_active(self, criterion, context: dict) -> int:
        with self.database.session() as db:
            try:
                return db.query(func.count(Registration.registration_id)).filter(
                    criterion,
                    Registration.status == RegistrationStatus.ACTIVE,
                ).scalar() or 0
            except SQLAlchemyError as e:
                log_with_context(logger, "ERROR", "Failed to count active registrations",
                                 context=context, extra_data={"error": str(e)})
                return 0
