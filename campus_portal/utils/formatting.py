"""Formatting helpers for dates, phone numbers and statuses."""

import logging
import math
import re
from datetime import datetime
from typing import Optional

from campus_portal.services.filtering import parse_date

logger = logging.getLogger(__name__)


def format_date(value: Optional[str], fmt: str = "%d %b %Y") -> str:
    """Format an ISO date string, e.g. ``2023-09-01`` -> ``01 Sep 2023``."""
    parsed = parse_date(value)
    if parsed is None:
        logger.debug(f"Could not format date {value!r}")
        return value or ""
    return parsed.strftime(fmt)


def format_relative_time(value: str, now: Optional[datetime] = None) -> str:
    """Describe a past timestamp as 'Just now', 'Yesterday', 'N days ago'."""
    try:
        moment = datetime.fromisoformat(value)
    except (TypeError, ValueError):
        return value

    now = now or datetime.now(moment.tzinfo)
    seconds = int((now - moment).total_seconds())
    minutes = seconds // 60
    hours = minutes // 60
    days = hours // 24

    if days > 30:
        return format_date(value)
    if days > 1:
        return f"{days} days ago"
    if days == 1:
        return "Yesterday"
    if hours > 1:
        return f"{hours} hours ago"
    if minutes > 1:
        return f"{minutes} minutes ago"
    return "Just now"


def get_status_badge_variant(status: Optional[str]) -> str:
    """Map an internship or progress status to a badge colour name."""
    normalized = (status or "").lower()
    if normalized in ("active", "completed"):
        return "success"
    if normalized == "in progress":
        return "primary"
    if normalized == "upcoming":
        return "info"
    if normalized in ("delayed", "on hold"):
        return "warning"
    return "secondary"


def format_phone_number(phone: Optional[str]) -> str:
    if not phone:
        return ""
    digits = re.sub(r"\D", "", phone)
    if len(digits) == 10:
        return f"+91 {digits[:5]} {digits[5:]}"
    return phone


def truncate_text(text: Optional[str], max_length: int = 100) -> Optional[str]:
    if not text or len(text) <= max_length:
        return text
    return text[:max_length] + "..."


def format_file_size(size: int) -> str:
    if size == 0:
        return "0 Bytes"
    units = ["Bytes", "KB", "MB", "GB", "TB"]
    index = min(int(math.floor(math.log(size, 1024))), len(units) - 1)
    value = round(size / math.pow(1024, index), 2)
    return f"{value:g} {units[index]}"


def format_time_to_am_pm(value: str) -> str:
    """Convert ``14:30`` to ``2:30 PM``; 12-hour strings pass through."""
    lowered = value.lower()
    if "am" in lowered or "pm" in lowered:
        return value
    try:
        hours, minutes = (int(part) for part in value.split(":")[:2])
    except ValueError:
        return value
    period = "PM" if hours >= 12 else "AM"
    hour12 = hours % 12 or 12
    return f"{hour12}:{minutes:02d} {period}"


def format_duration(value: Optional[str]) -> str:
    """Render a day count as months/weeks/days; text durations pass through."""
    if not value:
        return ""
    if any(unit in value for unit in ("month", "week", "day")):
        return value

    match = re.match(r"^\s*(\d+)", value)
    if not match:
        return value
    days = int(match.group(1))
    if days and days % 30 == 0:
        months = days // 30
        return f"{months} {'month' if months == 1 else 'months'}"
    if days and days % 7 == 0:
        weeks = days // 7
        return f"{weeks} {'week' if weeks == 1 else 'weeks'}"
    return f"{days} {'day' if days == 1 else 'days'}"
