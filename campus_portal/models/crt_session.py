"""CRT session model."""

from typing import List

from pydantic import BaseModel, Field


class CRTSession(BaseModel):
    """Campus readiness training session."""

    id: int
    title: str
    description: str
    date: str
    time: str
    venue: str
    speaker: str
    eligibility: str
    registered_students: List[int] = Field(
        default_factory=list, alias="registeredStudents"
    )

    class Config:
        populate_by_name = True
