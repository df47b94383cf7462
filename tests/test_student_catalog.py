"""Tests for the student catalog."""

import logging
from datetime import date

from app.services.student_catalog import StudentCatalog


def test_create_returns_assigned_id(students):
    assert students.create("Ada", "Lovelace", "ada@x.edu") == 1
    assert students.create("Alan", "Turing", "alan@x.edu") == 2


def test_written_student_reads_back_field_for_field(students):
    student_id = students.create("Grace", "Hopper", "grace@x.edu",
                                 phone="555-0199", date_of_birth=date(1906, 12, 9))

    student = students.get_by_id(student_id)
    assert student.student_id == student_id
    assert student.first_name == "Grace"
    assert student.last_name == "Hopper"
    assert student.email == "grace@x.edu"
    assert student.phone == "555-0199"
    assert student.date_of_birth == date(1906, 12, 9)
    assert student.enrollment_date is not None
    assert student.full_name == "Grace Hopper"


def test_lookups_return_none_when_absent(students):
    assert students.get_by_id(42) is None
    assert students.get_by_email("nobody@x.edu") is None


def test_get_by_email(students, ada):
    assert students.get_by_email("ada@x.edu").student_id == ada


def test_exists_by_email(students, ada):
    assert students.exists_by_email("ada@x.edu") is True
    assert students.exists_by_email("other@x.edu") is False


def test_email_uniqueness_is_left_to_callers(students, ada):
    assert students.create("Ada", "Byron", "ada@x.edu") is not None


def test_list_all_orders_by_last_then_first_name(students):
    students.create("Zoe", "Adams", "zoe@x.edu")
    students.create("Alan", "Turing", "alan@x.edu")
    students.create("Abe", "Adams", "abe@x.edu")

    names = [(s.last_name, s.first_name) for s in students.list_all()]
    assert names == [("Adams", "Abe"), ("Adams", "Zoe"), ("Turing", "Alan")]


def test_update_replaces_mutable_fields_and_keeps_enrollment_date(students, ada):
    before = students.get_by_id(ada)

    assert students.update(ada, "Augusta", "King", "augusta@x.edu",
                           phone="555-1815", date_of_birth=date(1815, 12, 10)) is True

    after = students.get_by_id(ada)
    assert (after.first_name, after.last_name, after.email) == ("Augusta", "King", "augusta@x.edu")
    assert after.phone == "555-1815"
    assert after.date_of_birth == date(1815, 12, 10)
    assert after.enrollment_date == before.enrollment_date


def test_update_is_a_full_replace(students):
    student_id = students.create("Ada", "Lovelace", "ada@x.edu", phone="555-0100")
    students.update(student_id, "Ada", "Lovelace", "ada@x.edu")
    assert students.get_by_id(student_id).phone is None


def test_update_unknown_student_fails(students):
    assert students.update(99, "A", "B", "c@x.edu") is False


def test_delete(students, ada):
    assert students.delete(ada) is True
    assert students.get_by_id(ada) is None
    assert students.delete(ada) is False


def test_deleted_student_id_is_not_reused(students, ada):
    students.delete(ada)
    assert students.create("Alan", "Turing", "alan@x.edu") != ada


def test_delete_rejected_while_registrations_exist(students, ledger, ada, cs101):
    ledger.register(ada, cs101)
    assert students.delete(ada) is False
    assert students.get_by_id(ada) is not None


def test_search_by_name_matches_first_or_last_name_ignoring_case(students):
    students.create("Ada", "Lovelace", "ada@x.edu")
    students.create("Adam", "Smith", "adam@x.edu")
    students.create("Grace", "Hopper", "grace@x.edu")
    students.create("Bob", "Adair", "bob@x.edu")

    names = [s.full_name for s in students.search_by_name("AD")]
    assert names == ["Bob Adair", "Ada Lovelace", "Adam Smith"]


def test_search_by_name_without_match_is_empty(students, ada):
    assert students.search_by_name("zzz") == []


def test_storage_faults_become_failure_values(broken_database, caplog):
    catalog = StudentCatalog(broken_database)

    with caplog.at_level(logging.ERROR):
        assert catalog.create("Ada", "Lovelace", "ada@x.edu") is None
        assert catalog.get_by_id(1) is None
        assert catalog.get_by_email("ada@x.edu") is None
        assert catalog.list_all() == []
        assert catalog.update(1, "A", "B", "c@x.edu") is False
        assert catalog.delete(1) is False
        assert catalog.search_by_name("a") == []
        assert catalog.exists_by_email("ada@x.edu") is False

    errors = [r for r in caplog.records if r.levelno == logging.ERROR]
    assert len(errors) == 8
    assert all(r.channel == "students" for r in errors)
