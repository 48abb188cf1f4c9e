"""Internship model."""

from enum import Enum
from typing import List

from pydantic import BaseModel, Field


class InternshipStatus(str, Enum):
    """Internship status enum."""

    ACTIVE = "Active"
    COMPLETED = "Completed"
    UPCOMING = "Upcoming"


class Internship(BaseModel):
    """Internship topic that students are assigned to."""

    id: int
    title: str
    description: str
    duration: str
    start_date: str = Field(alias="startDate")
    end_date: str = Field(alias="endDate")
    max_students: int = Field(alias="maxStudents")
    guide: str
    skills: List[str] = Field(default_factory=list)
    status: InternshipStatus = InternshipStatus.ACTIVE

    class Config:
        populate_by_name = True
