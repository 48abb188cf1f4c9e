"""Student model."""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class ProgressStatus(str, Enum):
    """Progress entry status enum."""

    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"
    ON_HOLD = "On Hold"
    DELAYED = "Delayed"


class ProgressEntry(BaseModel):
    """One dated task update on a student's internship work."""

    date: str
    task: str
    status: ProgressStatus
    remarks: str = ""


class Student(BaseModel):
    """Student record as persisted under the ``students`` key."""

    id: int
    name: str
    register_number: str = Field(alias="registerNumber")
    branch: str
    year: int
    email: str
    phone: str
    internship_id: Optional[int] = Field(default=None, alias="internshipId")
    progress: List[ProgressEntry] = Field(default_factory=list)

    class Config:
        populate_by_name = True
