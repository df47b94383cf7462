"""Tests for the seed loader, driven against the app through TestClient."""

import json
import os

import pytest

from load_data import DEFAULT_DATA_FILE, load_sample_data


@pytest.fixture
def sample_data():
    with open(DEFAULT_DATA_FILE) as f:
        return json.load(f)


def test_sample_file_is_bundled():
    assert os.path.exists(DEFAULT_DATA_FILE)


def test_load_creates_everything(client, sample_data):
    summary = load_sample_data(client, sample_data)

    assert summary["students_created"] == 3
    assert summary["courses_created"] == 3
    assert summary["registered"] == 5
    assert summary["errors"] == []

    ada = client.get("/api/students/by-email/ada@x.edu").json()
    courses = client.get(f"/api/students/{ada['student_id']}/courses").json()
    by_code = {r["course"]["course_code"]: r for r in courses["registrations"]}
    assert by_code["CS101"]["grade"] == "A"
    assert by_code["CS101"]["status"] == "COMPLETED"
    assert by_code["CS201"]["status"] == "ACTIVE"
    assert courses["active_registrations"] == 1


def test_second_load_reuses_existing_records(client, sample_data):
    load_sample_data(client, sample_data)
    summary = load_sample_data(client, sample_data)

    assert summary["students_created"] == 0
    assert summary["students_existing"] == 3
    assert summary["courses_existing"] == 3
    assert summary["registered"] == 0
    assert summary["already_registered"] == 5
    assert len(client.get("/api/registrations").json()) == 5


def test_unknown_references_are_reported(client):
    summary = load_sample_data(client, {
        "students": [{"first_name": "Ada", "last_name": "Lovelace", "email": "ada@x.edu"}],
        "courses": [],
        "registrations": [{"email": "ada@x.edu", "course_code": "CS999"}],
    })
    assert summary["registered"] == 0
    assert len(summary["errors"]) == 1


def test_failed_status_update_is_reported_and_loading_continues(client):
    summary = load_sample_data(client, {
        "students": [
            {"first_name": "Ada", "last_name": "Lovelace", "email": "ada@x.edu"},
            {"first_name": "Alan", "last_name": "Turing", "email": "alan@x.edu"},
        ],
        "courses": [{"course_code": "CS101", "course_name": "Intro", "credits": 3}],
        "registrations": [
            {"email": "ada@x.edu", "course_code": "CS101", "status": "WAITLISTED"},
            {"email": "alan@x.edu", "course_code": "CS101", "grade": "B"},
        ],
    })
    assert summary["registered"] == 2
    assert summary["errors"] == ["ada@x.edu -> CS101: status HTTP 422"]
