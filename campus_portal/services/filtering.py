"""Filtering and sorting helpers for the portal's list screens."""

from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Optional, Union

Record = Dict[str, Any]


def _contains(value: Optional[str], term: str) -> bool:
    return bool(value) and term in value.lower()


def parse_date(value: Any) -> Optional[date]:
    """Parse an ISO date (or datetime) string, returning None when invalid."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value:
        return None
    try:
        return date.fromisoformat(value[:10])
    except ValueError:
        return None


def filter_students(
    students: Iterable[Record],
    search_term: Optional[str] = None,
    branch: Optional[str] = None,
    year: Optional[Union[int, str]] = None,
    internship: Optional[Union[int, str]] = None,
) -> List[Record]:
    """Filter students by search term, branch, year and internship state.

    ``internship`` accepts ``"assigned"``, ``"unassigned"`` or an internship id.
    """
    result = list(students)

    if search_term:
        term = search_term.lower()
        result = [
            student for student in result
            if _contains(student.get("name"), term)
            or _contains(student.get("registerNumber"), term)
            or _contains(student.get("email"), term)
        ]

    if branch:
        result = [student for student in result if student.get("branch") == branch]

    if year:
        year_value = int(year)
        result = [student for student in result if student.get("year") == year_value]

    if internship == "assigned":
        result = [student for student in result if student.get("internshipId") is not None]
    elif internship == "unassigned":
        result = [student for student in result if student.get("internshipId") is None]
    elif internship:
        internship_id = int(internship)
        result = [student for student in result if student.get("internshipId") == internship_id]

    return result


def filter_internships(
    internships: Iterable[Record],
    search_term: Optional[str] = None,
    status: Optional[str] = None,
) -> List[Record]:
    """Filter internships by search term and status (``"All"`` disables it)."""
    result = list(internships)

    if search_term:
        term = search_term.lower()
        result = [
            internship for internship in result
            if _contains(internship.get("title"), term)
            or _contains(internship.get("description"), term)
            or _contains(internship.get("guide"), term)
            or any(_contains(skill, term) for skill in internship.get("skills", []))
        ]

    if status and status != "All":
        result = [internship for internship in result if internship.get("status") == status]

    return result


def is_upcoming_session(session_date: Any, today: Optional[date] = None) -> bool:
    """Check whether a session falls today or later."""
    parsed = parse_date(session_date)
    if parsed is None:
        return False
    return parsed >= (today or date.today())


def is_past_session(session_date: Any, today: Optional[date] = None) -> bool:
    parsed = parse_date(session_date)
    if parsed is None:
        return False
    return parsed < (today or date.today())


def filter_crt_sessions(
    sessions: Iterable[Record],
    search_term: Optional[str] = None,
    kind: Optional[str] = None,
    student_id: Optional[int] = None,
    today: Optional[date] = None,
) -> List[Record]:
    """Filter CRT sessions by search term and kind.

    ``kind`` is ``"registered"`` (needs ``student_id``), ``"upcoming"`` or
    ``"past"``.
    """
    result = list(sessions)

    if search_term:
        term = search_term.lower()
        result = [
            session for session in result
            if _contains(session.get("title"), term)
            or _contains(session.get("description"), term)
            or _contains(session.get("speaker"), term)
            or _contains(session.get("venue"), term)
        ]

    if kind == "registered" and student_id:
        result = [
            session for session in result
            if student_id in session.get("registeredStudents", [])
        ]
    elif kind == "upcoming":
        result = [session for session in result if is_upcoming_session(session.get("date"), today)]
    elif kind == "past":
        result = [session for session in result if is_past_session(session.get("date"), today)]

    return result


def _is_date_field(field: str) -> bool:
    return "date" in field or "Date" in field


def _sort_key(value: Any, date_field: bool):
    # (missing, value) so records without the field sort last
    if value is None:
        return (1, 0)
    if date_field:
        parsed = parse_date(value)
        return (0, parsed.toordinal()) if parsed else (1, 0)
    if isinstance(value, str):
        return (0, value.casefold())
    if isinstance(value, (int, float)):
        return (0, value)
    return (0, str(value).casefold())


def sort_records(
    records: Iterable[Record],
    field: str = "id",
    order: str = "asc",
) -> List[Record]:
    """Sort records by one field; ``order`` is ``"asc"`` or ``"desc"``."""
    records = list(records)
    date_field = _is_date_field(field)
    present = [record.get(field) for record in records if record.get(field) is not None]
    # Mixed value types compare as text
    as_text = not date_field and len({isinstance(value, str) for value in present}) > 1

    def key(record: Record):
        value = record.get(field)
        if as_text and value is not None:
            value = str(value)
        return _sort_key(value, date_field)

    result = sorted(records, key=key)
    if order == "desc":
        result.reverse()
    return result


def unique_values(records: Iterable[Record], field: str) -> List[Any]:
    """Distinct values of a field in first-seen order."""
    seen = []
    for record in records:
        value = record.get(field)
        if value not in seen:
            seen.append(value)
    return seen


def matches_filters(record: Record, filters: Dict[str, Any]) -> bool:
    """Generic per-field match used by list screens without a dedicated filter.

    Strings match case-insensitive substrings, numbers and booleans match
    exactly, lists match on membership. Empty filter values are skipped.
    """
    for key, value in filters.items():
        if value is None or value == "":
            continue

        item = record.get(key)
        if isinstance(item, str) and isinstance(value, str):
            if value.lower() not in item.lower():
                return False
        elif isinstance(item, (bool, int, float)):
            if item != value:
                return False
        elif isinstance(item, list):
            if value not in item:
                return False
        elif isinstance(item, dict):
            return False
        elif item != value:
            return False
    return True


def filter_and_sort(
    records: Iterable[Record],
    filters: Optional[Dict[str, Any]] = None,
    sort_by: Optional[str] = "id",
    sort_order: str = "asc",
) -> List[Record]:
    result = list(records)
    if filters:
        result = [record for record in result if matches_filters(record, filters)]
    if sort_by:
        result = sort_records(result, sort_by, sort_order)
    return result
