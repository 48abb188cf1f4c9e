"""Tests for list filtering and sorting helpers."""

from datetime import date

from campus_portal.services.filtering import (
    filter_and_sort,
    filter_crt_sessions,
    filter_internships,
    filter_students,
    is_upcoming_session,
    matches_filters,
    sort_records,
    unique_values,
)
from campus_portal.services.seed import DEFAULT_CRT_SESSIONS, DEFAULT_INTERNSHIPS, DEFAULT_STUDENTS

TODAY = date(2023, 9, 17)


def ids(records):
    return [record["id"] for record in records]


class TestFilterStudents:
    def test_search_matches_name_register_number_and_email(self):
        assert ids(filter_students(DEFAULT_STUDENTS, search_term="priya")) == [2]
        assert ids(filter_students(DEFAULT_STUDENTS, search_term="svit2023004")) == [4]
        assert ids(filter_students(DEFAULT_STUDENTS, search_term="KARTHIK.RAJA@")) == [5]

    def test_branch_and_year(self):
        assert ids(filter_students(DEFAULT_STUDENTS, branch="Computer Science")) == [1, 4]
        assert ids(filter_students(DEFAULT_STUDENTS, year="4")) == [3, 5]

    def test_internship_states(self):
        assert ids(filter_students(DEFAULT_STUDENTS, internship="assigned")) == [1, 2, 3, 4]
        assert ids(filter_students(DEFAULT_STUDENTS, internship="unassigned")) == [5]
        assert ids(filter_students(DEFAULT_STUDENTS, internship="1")) == [1, 3]

    def test_no_filters_returns_copy_of_list(self):
        result = filter_students(DEFAULT_STUDENTS)
        assert result == DEFAULT_STUDENTS
        assert result is not DEFAULT_STUDENTS


class TestFilterInternships:
    def test_search_includes_skills(self):
        assert ids(filter_internships(DEFAULT_INTERNSHIPS, search_term="tensorflow")) == [2]
        assert ids(filter_internships(DEFAULT_INTERNSHIPS, search_term="javascript")) == [1, 3]

    def test_status_all_disables_filter(self):
        internships = DEFAULT_INTERNSHIPS + [{**DEFAULT_INTERNSHIPS[0], "id": 4, "status": "Completed"}]
        assert ids(filter_internships(internships, status="All")) == [1, 2, 3, 4]
        assert ids(filter_internships(internships, status="Completed")) == [4]


class TestFilterCRTSessions:
    def test_search(self):
        assert ids(filter_crt_sessions(DEFAULT_CRT_SESSIONS, search_term="seminar hall")) == [1, 3]
        assert ids(filter_crt_sessions(DEFAULT_CRT_SESSIONS, search_term="venkat")) == [2]

    def test_registered_requires_student(self):
        assert ids(filter_crt_sessions(DEFAULT_CRT_SESSIONS, kind="registered", student_id=3)) == [2, 3]
        assert ids(filter_crt_sessions(DEFAULT_CRT_SESSIONS, kind="registered")) == [1, 2, 3]

    def test_upcoming_and_past(self):
        assert ids(filter_crt_sessions(DEFAULT_CRT_SESSIONS, kind="upcoming", today=TODAY)) == [2, 3]
        assert ids(filter_crt_sessions(DEFAULT_CRT_SESSIONS, kind="past", today=TODAY)) == [1]

    def test_invalid_dates_are_neither_upcoming_nor_past(self):
        sessions = [{"id": 1, "date": "soon"}]
        assert filter_crt_sessions(sessions, kind="upcoming", today=TODAY) == []
        assert filter_crt_sessions(sessions, kind="past", today=TODAY) == []


def test_is_upcoming_session():
    assert is_upcoming_session("2023-09-17", TODAY)
    assert not is_upcoming_session("2023-09-16", TODAY)
    assert not is_upcoming_session("", TODAY)


class TestSortRecords:
    def test_strings_sort_case_insensitively(self):
        records = [{"id": 1, "name": "bob"}, {"id": 2, "name": "Alice"}, {"id": 3, "name": "carol"}]
        assert ids(sort_records(records, "name")) == [2, 1, 3]
        assert ids(sort_records(records, "name", "desc")) == [3, 1, 2]

    def test_date_fields_sort_chronologically(self):
        assert ids(sort_records(DEFAULT_INTERNSHIPS, "startDate")) == [2, 1, 3]
        assert ids(sort_records(DEFAULT_CRT_SESSIONS, "date", "desc")) == [3, 2, 1]

    def test_numbers(self):
        assert ids(sort_records(DEFAULT_INTERNSHIPS, "maxStudents")) == [3, 2, 1]

    def test_missing_values_sort_last(self):
        records = [{"id": 1}, {"id": 2, "year": 4}, {"id": 3, "year": 2}]
        assert ids(sort_records(records, "year")) == [3, 2, 1]

    def test_mixed_types_compare_as_text(self):
        records = [{"id": 1, "v": "b"}, {"id": 2, "v": 10}, {"id": 3, "v": "a"}]
        assert ids(sort_records(records, "v")) == [2, 3, 1]


def test_unique_values_keep_first_seen_order():
    assert unique_values(DEFAULT_STUDENTS, "branch") == [
        "Computer Science",
        "Information Technology",
        "Electronics",
        "Mechanical",
    ]


class TestGenericFilter:
    def test_matches_filters(self):
        student = DEFAULT_STUDENTS[0]
        assert matches_filters(student, {"name": "arun", "year": 3})
        assert not matches_filters(student, {"year": 4})
        assert matches_filters(student, {"branch": "", "phone": None})
        assert not matches_filters(student, {"progress": "x"})

    def test_list_membership(self):
        assert matches_filters(DEFAULT_CRT_SESSIONS[0], {"registeredStudents": 5})
        assert not matches_filters(DEFAULT_CRT_SESSIONS[0], {"registeredStudents": 4})

    def test_filter_and_sort(self):
        result = filter_and_sort(DEFAULT_STUDENTS, {"branch": "science"}, sort_by="name", sort_order="desc")
        assert ids(result) == [4, 1]
