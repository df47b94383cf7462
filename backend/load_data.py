"""
Data Loader Script - Seeds students, courses and registrations via the API.

Reads a JSON file shaped like sample_data.json:

    {
      "students": [{"first_name": ..., "last_name": ..., "email": ...}, ...],
      "courses": [{"course_code": ..., "course_name": ..., "credits": ...}, ...],
      "registrations": [{"email": ..., "course_code": ..., "grade": "A",
                         "status": "COMPLETED"}, ...]
    }

Registrations refer to students by email and courses by code; the loader
maps those to the ids the API assigns. Records that already exist are
reused, so running the script twice is harmless.

Usage:
    python load_data.py                                  # Uses default URL and file
    python load_data.py http://localhost:8000            # Custom API URL
    python load_data.py http://backend:8000 data.json    # Custom URL and file
"""

import json
import os
import sys

import httpx

DEFAULT_DATA_FILE = os.path.join(os.path.dirname(os.path.abspath(__file__)), "sample_data.json")


def _student_id(client: httpx.Client, student: dict, summary: dict) -> int:
    resp = client.post("/api/students", json=student)
    if resp.status_code == 201:
        summary["students_created"] += 1
        return resp.json()["id"]
    if resp.status_code == 409:
        summary["students_existing"] += 1
        existing = client.get(f"/api/students/by-email/{student['email']}")
        existing.raise_for_status()
        return existing.json()["student_id"]
    resp.raise_for_status()
    raise RuntimeError(f"Unexpected response {resp.status_code} adding student {student['email']}")


def _course_id(client: httpx.Client, course: dict, summary: dict) -> int:
    resp = client.post("/api/courses", json=course)
    if resp.status_code == 201:
        summary["courses_created"] += 1
        return resp.json()["id"]
    if resp.status_code == 409:
        summary["courses_existing"] += 1
        existing = client.get(f"/api/courses/by-code/{course['course_code']}")
        existing.raise_for_status()
        return existing.json()["course_id"]
    resp.raise_for_status()
    raise RuntimeError(f"Unexpected response {resp.status_code} adding course {course['course_code']}")


def load_sample_data(client: httpx.Client, data: dict) -> dict:
    """
    Push a seed document through the API.

    Args:
        client: httpx client whose base_url points at the service
        data: Parsed seed document

    Returns:
        Summary counts plus a list of per-registration errors
    """
    summary = {
        "students_created": 0,
        "students_existing": 0,
        "courses_created": 0,
        "courses_existing": 0,
        "registered": 0,
        "already_registered": 0,
        "errors": [],
    }

    student_ids = {}
    for student in data.get("students", []):
        student_ids[student["email"]] = _student_id(client, student, summary)

    course_ids = {}
    for course in data.get("courses", []):
        code = course["course_code"].strip().upper()
        course_ids[code] = _course_id(client, course, summary)

    for entry in data.get("registrations", []):
        student_id = student_ids.get(entry["email"])
        course_id = course_ids.get(entry["course_code"].strip().upper())
        if student_id is None or course_id is None:
            summary["errors"].append(
                f"{entry['email']} -> {entry['course_code']}: unknown student or course")
            continue

        resp = client.post("/api/registrations",
                           json={"student_id": student_id, "course_id": course_id})
        if resp.status_code == 409:
            summary["already_registered"] += 1
            continue
        if resp.status_code != 201:
            summary["errors"].append(
                f"{entry['email']} -> {entry['course_code']}: HTTP {resp.status_code}")
            continue
        summary["registered"] += 1

        for field in ("grade", "status"):
            if not entry.get(field):
                continue
            resp = client.put(f"/api/registrations/{student_id}/{course_id}/{field}",
                              json={field: entry[field]})
            if resp.status_code != 200:
                summary["errors"].append(
                    f"{entry['email']} -> {entry['course_code']}: {field} HTTP {resp.status_code}")

    return summary


def main():
    api_url = sys.argv[1] if len(sys.argv) > 1 else os.getenv("API_BASE_URL", "http://localhost:8000")
    data_file = sys.argv[2] if len(sys.argv) > 2 else DEFAULT_DATA_FILE

    if not os.path.exists(data_file):
        print(f"Error: Could not find {data_file}")
        sys.exit(1)

    print(f"Loading data from: {data_file}")
    with open(data_file, 'r') as f:
        data = json.load(f)

    print(f"Sending to: {api_url}")
    print()

    with httpx.Client(base_url=api_url, timeout=30.0) as client:
        summary = load_sample_data(client, data)

    print("=" * 60)
    print("LOAD SUMMARY")
    print("=" * 60)
    print(f"  Students created:    {summary['students_created']} ({summary['students_existing']} existing)")
    print(f"  Courses created:     {summary['courses_created']} ({summary['courses_existing']} existing)")
    print(f"  Registrations:       {summary['registered']} ({summary['already_registered']} already registered)")
    print(f"  Errors:              {len(summary['errors'])}")
    print("=" * 60)

    for error in summary["errors"]:
        print(f"  ❌ {error}")


if __name__ == "__main__":
    main()
