"""Caller-side validation rules.

Each rule returns an error message or ``None``. The data store never applies
these rules itself; the API runs them before calling into the store.
"""

import re
from typing import Any, Callable, Dict, List, Optional, Tuple

from campus_portal.services.filtering import parse_date

Rule = Callable[[Any, Dict[str, Any]], Optional[str]]

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_RE = re.compile(r"^[6-9]\d{9}$")


def validate_required(value: Any, field_name: str = "This field") -> Optional[str]:
    if value is None or value == "" or value == [] or (isinstance(value, str) and not value.strip()):
        return f"{field_name} is required"
    return None


def validate_email(email: Optional[str]) -> Optional[str]:
    if not email:
        return validate_required(email, "Email")
    if not EMAIL_RE.match(email):
        return "Please enter a valid email address"
    return None


def validate_phone(phone: Optional[str]) -> Optional[str]:
    """Indian mobile number: 10 digits starting with 6-9."""
    if not phone:
        return validate_required(phone, "Phone number")
    if not PHONE_RE.match(re.sub(r"\D", "", phone)):
        return "Please enter a valid 10-digit phone number"
    return None


def validate_date(
    value: Any,
    min_date: Optional[Any] = None,
    max_date: Optional[Any] = None,
) -> Optional[str]:
    if not value:
        return validate_required(value, "Date")

    parsed = parse_date(value)
    if parsed is None:
        return "Please enter a valid date"

    lower = parse_date(min_date) if min_date else None
    if lower and parsed < lower:
        return f"Date cannot be before {lower.isoformat()}"

    upper = parse_date(max_date) if max_date else None
    if upper and parsed > upper:
        return f"Date cannot be after {upper.isoformat()}"

    return None


def validate_number(
    value: Any,
    min_value: Optional[float] = None,
    max_value: Optional[float] = None,
    integer: bool = False,
) -> Optional[str]:
    if value is None or value == "":
        return validate_required(value, "This field")

    try:
        number = float(value)
    except (TypeError, ValueError):
        return "Please enter a valid number"

    if integer and not number.is_integer():
        return "Please enter a whole number"
    if min_value is not None and number < min_value:
        return f"Value must be at least {min_value}"
    if max_value is not None and number > max_value:
        return f"Value must be at most {max_value}"
    return None


def validate_max_length(value: Optional[str], max_length: int = 100, field_name: str = "This field") -> Optional[str]:
    # Not required
    if not value:
        return None
    if len(value) > max_length:
        return f"{field_name} must be no more than {max_length} characters"
    return None


def validate_form(data: Dict[str, Any], rules: Dict[str, List[Rule]]) -> Tuple[bool, Dict[str, str]]:
    """Run rules per field, keeping the first error for each field."""
    errors: Dict[str, str] = {}
    for field_name, field_rules in rules.items():
        value = data.get(field_name)
        for rule in field_rules:
            error = rule(value, data)
            if error:
                errors[field_name] = error
                break
    return not errors, errors


# Rule sets used by the API before records reach the store

STUDENT_RULES: Dict[str, List[Rule]] = {
    "name": [lambda v, d: validate_required(v, "Name")],
    "registerNumber": [lambda v, d: validate_required(v, "Register number")],
    "branch": [lambda v, d: validate_required(v, "Branch")],
    "year": [lambda v, d: validate_number(v, min_value=1, max_value=5, integer=True)],
    "email": [lambda v, d: validate_email(v)],
    "phone": [lambda v, d: validate_phone(v)],
}

INTERNSHIP_RULES: Dict[str, List[Rule]] = {
    "title": [
        lambda v, d: validate_required(v, "Title"),
        lambda v, d: validate_max_length(v, 100, "Title"),
    ],
    "description": [lambda v, d: validate_required(v, "Description")],
    "duration": [lambda v, d: validate_required(v, "Duration")],
    "startDate": [lambda v, d: validate_date(v)],
    "endDate": [
        lambda v, d: validate_date(v),
        lambda v, d: (
            "End date cannot be before start date"
            if validate_date(v, min_date=d.get("startDate")) else None
        ),
    ],
    "maxStudents": [
        lambda v, d: validate_number(v, integer=True),
        lambda v, d: "Maximum students must be greater than 0" if float(v) <= 0 else None,
    ],
    "guide": [lambda v, d: validate_required(v, "Guide name")],
    "skills": [lambda v, d: "At least one skill is required" if not v else None],
}

CRT_SESSION_RULES: Dict[str, List[Rule]] = {
    "title": [lambda v, d: validate_required(v, "Title")],
    "description": [lambda v, d: validate_required(v, "Description")],
    "date": [lambda v, d: validate_date(v)],
    "time": [lambda v, d: validate_required(v, "Time")],
    "venue": [lambda v, d: validate_required(v, "Venue")],
    "speaker": [lambda v, d: validate_required(v, "Speaker")],
}

PROGRESS_RULES: Dict[str, List[Rule]] = {
    "date": [lambda v, d: validate_date(v)],
    "task": [lambda v, d: validate_required(v, "Task")],
}


def check_internship_capacity(store, internship_id: int) -> Optional[str]:
    """Pre-check before ``assign_student_to_internship``.

    Returns an error message when the internship is missing or already holds
    ``maxStudents`` students.
    """
    internship = store.get_internship(internship_id)
    if internship is None:
        return "Invalid internship selected"

    max_students = internship.get("maxStudents") or 0
    if store.internship_occupancy(internship_id) >= max_students:
        return f"This internship has reached its maximum capacity of {max_students} students"
    return None
