"""
Course API routes - the course catalog over HTTP.

Course codes are upper-cased here before they reach the catalog, both on
write and on lookup.
"""

from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query

from app.dependencies import get_course_catalog, get_registration_ledger
from app.schemas import CourseIn, CourseOut, CourseRoster, CreatedResponse
from app.services.course_catalog import CourseCatalog
from app.services.registration_ledger import RegistrationLedger
from app.logging_config import get_logger, log_with_context

router = APIRouter()
logger = get_logger("http")


def normalize_code(course_code: str) -> str:
    return course_code.strip().upper()


def _clean(payload: CourseIn) -> dict:
    return {
        "course_code": normalize_code(payload.course_code),
        "course_name": payload.course_name.strip(),
        "description": (payload.description or "").strip() or None,
        "credits": payload.credits,
        "instructor": (payload.instructor or "").strip() or None,
    }


def _get_or_404(courses: CourseCatalog, course_id: int):
    course = courses.get_by_id(course_id)
    if not course:
        raise HTTPException(status_code=404, detail="Course not found")
    return course


@router.post("/api/courses", response_model=CreatedResponse, status_code=201)
def add_course(payload: CourseIn, courses: CourseCatalog = Depends(get_course_catalog)):
    """Add a course. Course codes must be unique."""
    fields = _clean(payload)

    if courses.exists_by_code(fields["course_code"]):
        raise HTTPException(status_code=409, detail="Course with this code already exists")

    course_id = courses.create(**fields)
    if course_id is None:
        raise HTTPException(status_code=500, detail="Failed to add course")

    return CreatedResponse(id=course_id, message="Course added successfully")


@router.get("/api/courses", response_model=List[CourseOut])
def list_courses(
    search: Optional[str] = Query(None, description="Match against the course name"),
    instructor: Optional[str] = Query(None, description="Match against the instructor"),
    courses: CourseCatalog = Depends(get_course_catalog)
):
    """List courses ordered by code, optionally filtered by name or instructor."""
    if search and search.strip():
        results = courses.search_by_name(search.strip())
    elif instructor and instructor.strip():
        results = courses.list_by_instructor(instructor.strip())
    else:
        results = courses.list_all()
    return [CourseOut.from_course(c) for c in results]


@router.get("/api/courses/by-code/{course_code}", response_model=CourseOut)
def get_course_by_code(course_code: str, courses: CourseCatalog = Depends(get_course_catalog)):
    course = courses.get_by_code(normalize_code(course_code))
    if not course:
        raise HTTPException(status_code=404, detail="Course not found")
    return CourseOut.from_course(course)


@router.get("/api/courses/{course_id}", response_model=CourseOut)
def get_course(course_id: int, courses: CourseCatalog = Depends(get_course_catalog)):
    return CourseOut.from_course(_get_or_404(courses, course_id))


@router.put("/api/courses/{course_id}", response_model=CourseOut)
def update_course(course_id: int, payload: CourseIn,
                  courses: CourseCatalog = Depends(get_course_catalog)):
    current = _get_or_404(courses, course_id)
    fields = _clean(payload)

    if fields["course_code"] != current.course_code and courses.exists_by_code(fields["course_code"]):
        raise HTTPException(status_code=409, detail="Course with this code already exists")

    if not courses.update(course_id, **fields):
        raise HTTPException(status_code=500, detail="Failed to update course")

    return CourseOut.from_course(_get_or_404(courses, course_id))


@router.delete("/api/courses/{course_id}")
def delete_course(course_id: int,
                  courses: CourseCatalog = Depends(get_course_catalog),
                  ledger: RegistrationLedger = Depends(get_registration_ledger)):
    """
    Delete a course.

    Courses that still have registration rows are refused; the response
    reports how many of those were ACTIVE enrollments.
    """
    course = _get_or_404(courses, course_id)

    enrolled = ledger.enrollment_count(course_id)
    registrations = ledger.students_for_course(course_id)
    if registrations:
        raise HTTPException(
            status_code=409,
            detail="Course has {} registration(s), {} active; drop them first".format(
                len(registrations), enrolled)
        )

    if not courses.delete(course_id):
        raise HTTPException(status_code=500, detail="Failed to delete course")

    log_with_context(logger, "INFO", "Course deleted: {}".format(course.course_code),
        context={"course_id": course_id})
    return {"message": "Course deleted successfully", "course_id": course_id}


@router.get("/api/courses/{course_id}/students", response_model=CourseRoster)
def get_students_in_course(course_id: int,
                           courses: CourseCatalog = Depends(get_course_catalog),
                           ledger: RegistrationLedger = Depends(get_registration_ledger)):
    """Course roster ordered by student name, with the active enrollment count."""
    course = _get_or_404(courses, course_id)
    return CourseRoster(
        course=CourseOut.from_course(course),
        active_enrollments=ledger.enrollment_count(course_id),
        registrations=ledger.students_for_course(course_id),
    )
