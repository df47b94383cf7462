"""
Shared fixtures for the registration service test suite.

Every test gets its own in-memory SQLite database, so tests never see each
other's rows and never touch a file on disk.
"""

import os

# Must be set before app.database is imported anywhere
os.environ["DATABASE_URL"] = "sqlite://"

import pytest
from fastapi.testclient import TestClient

from app.database import Database
from app.services.course_catalog import CourseCatalog
from app.services.registration_ledger import RegistrationLedger
from app.services.student_catalog import StudentCatalog


@pytest.fixture
def database():
    db = Database("sqlite://")
    db.create_tables()
    yield db
    db.dispose()


@pytest.fixture
def broken_database():
    """A database whose tables were never created; every query fails."""
    db = Database("sqlite://")
    yield db
    db.dispose()


@pytest.fixture
def students(database):
    return StudentCatalog(database)


@pytest.fixture
def courses(database):
    return CourseCatalog(database)


@pytest.fixture
def ledger(database):
    return RegistrationLedger(database)


@pytest.fixture
def ada(students):
    return students.create("Ada", "Lovelace", "ada@x.edu")


@pytest.fixture
def cs101(courses):
    return courses.create("CS101", "Intro", 3)


@pytest.fixture
def client(database):
    from app.main import app

    original = app.state.database
    app.state.database = database
    with TestClient(app) as test_client:
        yield test_client
    app.state.database = original
