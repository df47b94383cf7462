"""
Student API routes - the student catalog over HTTP.

Provides endpoints for:
- Adding students (rejecting duplicate emails)
- Listing and searching students
- Viewing, updating and deleting a student
- Viewing the courses a student is registered for
"""

import time
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query

from app.dependencies import get_registration_ledger, get_student_catalog
from app.schemas import CreatedResponse, StudentCourses, StudentIn, StudentOut
from app.services.registration_ledger import RegistrationLedger
from app.services.student_catalog import StudentCatalog
from app.logging_config import get_logger, log_with_context

router = APIRouter()
logger = get_logger("http")


def _clean(payload: StudentIn) -> dict:
    """Trim text fields; blank optional fields become None."""
    return {
        "first_name": payload.first_name.strip(),
        "last_name": payload.last_name.strip(),
        "email": payload.email.strip(),
        "phone": (payload.phone or "").strip() or None,
        "date_of_birth": payload.date_of_birth,
    }


def _get_or_404(students: StudentCatalog, student_id: int):
    student = students.get_by_id(student_id)
    if not student:
        raise HTTPException(status_code=404, detail="Student not found")
    return student


@router.post("/api/students", response_model=CreatedResponse, status_code=201)
def add_student(payload: StudentIn, students: StudentCatalog = Depends(get_student_catalog)):
    """Add a student. Email addresses must not already be in use."""
    fields = _clean(payload)

    if students.exists_by_email(fields["email"]):
        raise HTTPException(status_code=409, detail="Student with this email already exists")

    student_id = students.create(**fields)
    if student_id is None:
        raise HTTPException(status_code=500, detail="Failed to add student")

    return CreatedResponse(id=student_id, message="Student added successfully")


@router.get("/api/students", response_model=List[StudentOut])
def list_students(
    search: Optional[str] = Query(None, description="Match against first or last name"),
    students: StudentCatalog = Depends(get_student_catalog)
):
    """List all students, or those whose name contains the search text."""
    start_time = time.time()

    if search and search.strip():
        results = students.search_by_name(search.strip())
    else:
        results = students.list_all()

    duration_ms = (time.time() - start_time) * 1000
    log_with_context(logger, "INFO", "Listed {} students".format(len(results)),
        extra_data={"search": search, "duration_ms": round(duration_ms, 2)})

    return [StudentOut.model_validate(s) for s in results]


@router.get("/api/students/by-email/{email}", response_model=StudentOut)
def get_student_by_email(email: str, students: StudentCatalog = Depends(get_student_catalog)):
    student = students.get_by_email(email.strip())
    if not student:
        raise HTTPException(status_code=404, detail="Student not found")
    return StudentOut.model_validate(student)


@router.get("/api/students/{student_id}", response_model=StudentOut)
def get_student(student_id: int, students: StudentCatalog = Depends(get_student_catalog)):
    return StudentOut.model_validate(_get_or_404(students, student_id))


@router.put("/api/students/{student_id}", response_model=StudentOut)
def update_student(student_id: int, payload: StudentIn,
                   students: StudentCatalog = Depends(get_student_catalog)):
    """Replace a student's details. The enrollment date is kept."""
    current = _get_or_404(students, student_id)
    fields = _clean(payload)

    if fields["email"] != current.email and students.exists_by_email(fields["email"]):
        raise HTTPException(status_code=409, detail="Student with this email already exists")

    if not students.update(student_id, **fields):
        raise HTTPException(status_code=500, detail="Failed to update student")

    return StudentOut.model_validate(_get_or_404(students, student_id))


@router.delete("/api/students/{student_id}")
def delete_student(student_id: int,
                   students: StudentCatalog = Depends(get_student_catalog),
                   ledger: RegistrationLedger = Depends(get_registration_ledger)):
    """Delete a student who holds no registrations."""
    student = _get_or_404(students, student_id)

    registrations = ledger.courses_for_student(student_id)
    if registrations:
        raise HTTPException(
            status_code=409,
            detail="Student has {} registration(s); drop them first".format(len(registrations))
        )

    if not students.delete(student_id):
        raise HTTPException(status_code=500, detail="Failed to delete student")

    log_with_context(logger, "INFO", "Student deleted: {}".format(student.full_name),
        context={"student_id": student_id})
    return {"message": "Student deleted successfully", "student_id": student_id}


@router.get("/api/students/{student_id}/courses", response_model=StudentCourses)
def get_courses_for_student(student_id: int,
                            students: StudentCatalog = Depends(get_student_catalog),
                            ledger: RegistrationLedger = Depends(get_registration_ledger)):
    """Every course the student is registered for, newest registration first."""
    student = _get_or_404(students, student_id)
    return StudentCourses(
        student=StudentOut.model_validate(student),
        active_registrations=ledger.registration_count(student_id),
        registrations=ledger.courses_for_student(student_id),
    )
