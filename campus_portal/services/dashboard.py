"""Dashboard summary for the portal home screen."""

import logging
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from campus_portal.core.security import User, UserRole
from campus_portal.services.data_store import DataStore, Record
from campus_portal.services.filtering import is_upcoming_session, parse_date, sort_records
from campus_portal.utils.formatting import (
    format_date,
    format_duration,
    format_relative_time,
    format_time_to_am_pm,
    get_status_badge_variant,
    truncate_text,
)

logger = logging.getLogger(__name__)

RECENT_LIMIT = 3
SUMMARY_LENGTH = 100


def _internship_card(internship: Record) -> Record:
    return {
        **internship,
        "statusVariant": get_status_badge_variant(internship.get("status")),
        "summary": truncate_text(internship.get("description"), SUMMARY_LENGTH),
        "displayDuration": format_duration(internship.get("duration")),
    }


def _session_card(session: Record) -> Record:
    return {
        **session,
        "displayDate": format_date(session.get("date")),
        "displayTime": format_time_to_am_pm(session.get("time") or ""),
    }


def _progress_item(entry: Record, now: datetime) -> Record:
    return {
        **entry,
        "statusVariant": get_status_badge_variant(entry.get("status")),
        "relativeDate": format_relative_time(entry.get("date"), now),
    }


def build_dashboard(store: DataStore, user: User, today: Optional[date] = None) -> Dict[str, Any]:
    """Collect role-specific statistics and short lists for the dashboard.

    List items carry display fields next to the stored ones: a badge
    variant for statuses, a truncated description, formatted dates and times,
    and a relative date for progress entries.
    """
    today = today or date.today()
    now = datetime.combine(today, datetime.min.time())
    students = store.students
    internships = store.internships
    sessions = store.crt_sessions

    upcoming = [session for session in sessions if is_upcoming_session(session.get("date"), today)]

    if user.role in (UserRole.ADMIN, UserRole.FACULTY):
        # Students still waiting for an internship
        pending_tasks = sum(1 for student in students if not student.get("internshipId"))
    elif user.role == UserRole.STUDENT and user.student_id:
        # Upcoming sessions the student has not registered for
        pending_tasks = sum(
            1 for session in upcoming
            if user.student_id not in session.get("registeredStudents", [])
        )
    else:
        pending_tasks = 0

    student_progress: List[Dict[str, Any]] = []
    if user.role == UserRole.STUDENT and user.student_id:
        student = store.get_student(user.student_id)
        if student:
            entries = sorted(
                student.get("progress", []),
                key=lambda entry: parse_date(entry.get("date")) or date.min,
                reverse=True,
            )
            student_progress = [_progress_item(entry, now) for entry in entries]

    summary = {
        "stats": {
            "activeInternships": sum(1 for i in internships if i.get("status") == "Active"),
            "totalStudents": len(students),
            "upcomingCRTSessions": len(upcoming),
            "pendingTasks": pending_tasks,
        },
        "recentInternships": [
            _internship_card(i) for i in sort_records(internships, "startDate", "desc")[:RECENT_LIMIT]
        ],
        "upcomingCRTSessions": [
            _session_card(s) for s in sort_records(upcoming, "date", "asc")[:RECENT_LIMIT]
        ],
        "studentProgress": student_progress,
    }
    logger.debug(f"Dashboard built for {user.username}: {summary['stats']}")
    return summary
