"""Tests for the course catalog."""

from app.services.course_catalog import CourseCatalog


def test_written_course_reads_back_field_for_field(courses):
    course_id = courses.create("CS201", "Data Structures", 4,
                               description="Trees and graphs", instructor="Dr. Liskov")

    course = courses.get_by_id(course_id)
    assert course.course_id == course_id
    assert course.course_code == "CS201"
    assert course.course_name == "Data Structures"
    assert course.description == "Trees and graphs"
    assert course.credits == 4
    assert course.instructor == "Dr. Liskov"
    assert course.created_date is not None


def test_instructor_display_defaults_to_tba(courses, cs101):
    course = courses.get_by_id(cs101)
    assert course.instructor is None
    assert course.instructor_display == "TBA"


def test_get_by_code_is_exact(courses, cs101):
    assert courses.get_by_code("CS101").course_id == cs101
    assert courses.get_by_code("cs101") is None


def test_exists_by_code(courses, cs101):
    assert courses.exists_by_code("CS101") is True
    assert courses.exists_by_code("CS999") is False


def test_lookups_return_none_when_absent(courses):
    assert courses.get_by_id(7) is None
    assert courses.get_by_code("NOPE") is None


def test_negative_credits_rejected_by_store(courses):
    assert courses.create("BAD1", "Bad", -1) is None


def test_list_all_orders_by_code(courses):
    courses.create("MATH150", "Discrete Math", 3)
    courses.create("CS201", "Data Structures", 4)
    courses.create("CS101", "Intro", 3)

    assert [c.course_code for c in courses.list_all()] == ["CS101", "CS201", "MATH150"]


def test_update_keeps_created_date(courses, cs101):
    before = courses.get_by_id(cs101)

    assert courses.update(cs101, "CS110", "Intro to CS", "Basics", 4, "Dr. Knuth") is True

    after = courses.get_by_id(cs101)
    assert after.course_code == "CS110"
    assert after.course_name == "Intro to CS"
    assert after.description == "Basics"
    assert after.credits == 4
    assert after.instructor == "Dr. Knuth"
    assert after.created_date == before.created_date


def test_update_unknown_course_fails(courses):
    assert courses.update(5, "X1", "X", None, 1, None) is False


def test_delete(courses, cs101):
    assert courses.delete(cs101) is True
    assert courses.get_by_id(cs101) is None
    assert courses.delete(cs101) is False


def test_deleted_course_id_is_not_reused(courses, cs101):
    courses.delete(cs101)
    assert courses.create("CS201", "Data Structures", 4) != cs101


def test_delete_rejected_while_registrations_exist(courses, ledger, ada, cs101):
    ledger.register(ada, cs101)
    assert courses.delete(cs101) is False


def test_search_by_name_ignores_case(courses):
    courses.create("CS101", "Intro to Programming", 3)
    courses.create("CS301", "Advanced Programming", 3)
    courses.create("MATH150", "Discrete Math", 3)

    assert [c.course_code for c in courses.search_by_name("programming")] == ["CS101", "CS301"]
    assert courses.search_by_name("chemistry") == []


def test_list_by_instructor_matches_substring(courses):
    courses.create("CS201", "Data Structures", 4, instructor="Dr. Barbara Liskov")
    courses.create("CS101", "Intro", 3, instructor="Dr. Donald Knuth")
    courses.create("CS301", "Algorithms", 3, instructor="Prof. Liskov")
    courses.create("MATH150", "Discrete Math", 3)

    assert [c.course_code for c in courses.list_by_instructor("liskov")] == ["CS201", "CS301"]


def test_storage_faults_become_failure_values(broken_database):
    catalog = CourseCatalog(broken_database)

    assert catalog.create("CS101", "Intro", 3) is None
    assert catalog.get_by_id(1) is None
    assert catalog.get_by_code("CS101") is None
    assert catalog.list_all() == []
    assert catalog.update(1, "CS101", "Intro", None, 3, None) is False
    assert catalog.delete(1) is False
    assert catalog.search_by_name("intro") == []
    assert catalog.list_by_instructor("knuth") == []
    assert catalog.exists_by_code("CS101") is False
