"""
Registration API routes - the registration ledger over HTTP.

Provides endpoints for:
- Registering a student for a course
- Listing registrations and viewing a single one
- Dropping a student from a course (deletes the registration)
- Updating grades and statuses
"""

import time
from typing import List
from fastapi import APIRouter, Depends, HTTPException

from app.dependencies import (
    get_course_catalog, get_registration_ledger, get_student_catalog
)
from app.schemas import (
    CreatedResponse, GradeUpdate, RegistrationIn, RegistrationOut,
    RegistrationView, StatusUpdate
)
from app.services.course_catalog import CourseCatalog
from app.services.registration_ledger import RegistrationLedger
from app.services.student_catalog import StudentCatalog
from app.logging_config import get_logger, log_with_context

router = APIRouter()
logger = get_logger("http")


def _require_registration(ledger: RegistrationLedger, student_id: int, course_id: int):
    registration = ledger.get(student_id, course_id)
    if not registration:
        raise HTTPException(status_code=404, detail="Student is not registered for this course")
    return registration


@router.post("/api/registrations", response_model=CreatedResponse, status_code=201)
def register_student(payload: RegistrationIn,
                     students: StudentCatalog = Depends(get_student_catalog),
                     courses: CourseCatalog = Depends(get_course_catalog),
                     ledger: RegistrationLedger = Depends(get_registration_ledger)):
    """
    Register a student for a course.

    Refused with 409 when a registration already exists for the pair, even
    one that is DROPPED or COMPLETED.
    """
    student = students.get_by_id(payload.student_id)
    if not student:
        raise HTTPException(status_code=404, detail="Student not found")

    course = courses.get_by_id(payload.course_id)
    if not course:
        raise HTTPException(status_code=404, detail="Course not found")

    registration_id = ledger.register(payload.student_id, payload.course_id)
    if registration_id is None:
        raise HTTPException(status_code=409, detail="Registration failed: student is already registered for this course")

    log_with_context(logger, "INFO",
        "Registered {} for {}".format(student.full_name, course.course_code),
        context={"registration_id": registration_id})
    return CreatedResponse(id=registration_id, message="Student registered successfully")


@router.get("/api/registrations", response_model=List[RegistrationView])
def list_registrations(ledger: RegistrationLedger = Depends(get_registration_ledger)):
    """Every registration, newest first."""
    start_time = time.time()
    registrations = ledger.all_registrations()

    duration_ms = (time.time() - start_time) * 1000
    log_with_context(logger, "INFO", "Listed {} registrations".format(len(registrations)),
        extra_data={"duration_ms": round(duration_ms, 2)})
    return registrations


@router.get("/api/registrations/{registration_id}", response_model=RegistrationOut)
def get_registration(registration_id: int,
                     ledger: RegistrationLedger = Depends(get_registration_ledger)):
    registration = ledger.get_by_id(registration_id)
    if not registration:
        raise HTTPException(status_code=404, detail="Registration not found")
    return RegistrationOut.model_validate(registration)


@router.get("/api/registrations/{student_id}/{course_id}", response_model=RegistrationOut)
def get_registration_for_pair(student_id: int, course_id: int,
                              ledger: RegistrationLedger = Depends(get_registration_ledger)):
    return RegistrationOut.model_validate(_require_registration(ledger, student_id, course_id))


@router.delete("/api/registrations/{student_id}/{course_id}")
def drop_student(student_id: int, course_id: int,
                 ledger: RegistrationLedger = Depends(get_registration_ledger)):
    """Drop a student from a course. The registration row is deleted."""
    if not ledger.drop(student_id, course_id):
        raise HTTPException(status_code=404, detail="Student is not registered for this course")
    return {"message": "Student dropped successfully",
            "student_id": student_id, "course_id": course_id}


@router.put("/api/registrations/{student_id}/{course_id}/grade", response_model=RegistrationOut)
def update_grade(student_id: int, course_id: int, payload: GradeUpdate,
                 ledger: RegistrationLedger = Depends(get_registration_ledger)):
    """Set the grade. Entered grades are trimmed and upper-cased."""
    _require_registration(ledger, student_id, course_id)

    if not ledger.update_grade(student_id, course_id, payload.grade.strip().upper()):
        raise HTTPException(status_code=500, detail="Grade update failed")

    return RegistrationOut.model_validate(_require_registration(ledger, student_id, course_id))


@router.put("/api/registrations/{student_id}/{course_id}/status", response_model=RegistrationOut)
def update_status(student_id: int, course_id: int, payload: StatusUpdate,
                  ledger: RegistrationLedger = Depends(get_registration_ledger)):
    """Set the status. Any status may be assigned from any other."""
    _require_registration(ledger, student_id, course_id)

    if not ledger.update_status(student_id, course_id, payload.status):
        raise HTTPException(status_code=500, detail="Status update failed")

    return RegistrationOut.model_validate(_require_registration(ledger, student_id, course_id))
