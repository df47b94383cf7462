"""
FastAPI dependencies that hand the routes their catalogs and ledger.

The Database lives on app.state.database; main.py puts it there and tests
replace it with an in-memory one.
"""

from fastapi import Depends, Request

from app.database import Database
from app.services.course_catalog import CourseCatalog
from app.services.registration_ledger import RegistrationLedger
from app.services.student_catalog import StudentCatalog


def get_database(request: Request) -> Database:
    return request.app.state.database


def get_student_catalog(database: Database = Depends(get_database)) -> StudentCatalog:
    return StudentCatalog(database)


def get_course_catalog(database: Database = Depends(get_database)) -> CourseCatalog:
    return CourseCatalog(database)


def get_registration_ledger(database: Database = Depends(get_database)) -> RegistrationLedger:
    return RegistrationLedger(database)
