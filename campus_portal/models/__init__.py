"""Data models for the campus internship and CRT portal."""

from campus_portal.models.crt_session import CRTSession
from campus_portal.models.internship import Internship, InternshipStatus
from campus_portal.models.storage_entry import StorageEntry
from campus_portal.models.student import ProgressEntry, ProgressStatus, Student

__all__ = [
    "Student",
    "ProgressEntry",
    "ProgressStatus",
    "Internship",
    "InternshipStatus",
    "CRTSession",
    "StorageEntry",
]
