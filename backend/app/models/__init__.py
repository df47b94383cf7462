from app.models.student import Student
from app.models.course import Course
from app.models.registration import Registration, RegistrationStatus

__all__ = ["Student", "Course", "Registration", "RegistrationStatus"]
