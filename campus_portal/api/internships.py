"""Internships API endpoints."""

import logging
from typing import List, Optional

from fastapi import APIRouter, HTTPException, Query, status
from pydantic import BaseModel, Field

from campus_portal.api.dependencies import CurrentUser, StaffUser, Store
from campus_portal.models import Internship, InternshipStatus, Student
from campus_portal.services.filtering import filter_and_sort, filter_internships
from campus_portal.services.validation import (
    INTERNSHIP_RULES,
    check_internship_capacity,
    validate_form,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/internships", tags=["internships"])


class InternshipCreate(BaseModel):
    """Internship creation model (new internships always start Active)."""

    title: str
    description: str
    duration: str
    start_date: str = Field(alias="startDate")
    end_date: str = Field(alias="endDate")
    max_students: int = Field(alias="maxStudents")
    guide: str
    skills: List[str] = Field(default_factory=list)

    class Config:
        populate_by_name = True


class InternshipUpdate(BaseModel):
    """Internship update model."""

    title: Optional[str] = None
    description: Optional[str] = None
    duration: Optional[str] = None
    start_date: Optional[str] = Field(default=None, alias="startDate")
    end_date: Optional[str] = Field(default=None, alias="endDate")
    max_students: Optional[int] = Field(default=None, alias="maxStudents")
    guide: Optional[str] = None
    skills: Optional[List[str]] = None
    status: Optional[InternshipStatus] = None

    class Config:
        populate_by_name = True


class InternshipDetail(Internship):
    """Internship with its current occupancy."""

    assigned_count: int = Field(alias="assignedCount")
    is_full: bool = Field(alias="isFull")


def _validate(data: dict) -> None:
    is_valid, errors = validate_form(data, INTERNSHIP_RULES)
    if not is_valid:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=errors)


def _get_or_404(store, internship_id: int) -> dict:
    internship = store.get_internship(internship_id)
    if not internship:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Internship not found"
        )
    return internship


def _with_occupancy(store, internship: dict) -> dict:
    assigned = store.internship_occupancy(internship["id"])
    return {
        **internship,
        "assignedCount": assigned,
        "isFull": assigned >= (internship.get("maxStudents") or 0),
    }


@router.get("/", response_model=List[InternshipDetail])
async def get_internships(
    store: Store,
    user: CurrentUser,
    search: Optional[str] = None,
    status_filter: Optional[str] = Query(default=None, alias="status"),
    guide: Optional[str] = None,
    skill: Optional[str] = None,
    sort_by: str = "id",
    sort_order: str = Query(default="asc", pattern="^(asc|desc)$"),
) -> List[dict]:
    """Get all internships, filtered and sorted.

    ``guide`` matches part of the guide name; ``skill`` must be one of the
    listed skills exactly.
    """
    internships = filter_internships(store.internships, search_term=search, status=status_filter)
    internships = filter_and_sort(internships, {"guide": guide, "skills": skill}, sort_by, sort_order)
    return [_with_occupancy(store, i) for i in internships]


@router.get("/{internship_id}", response_model=InternshipDetail)
async def get_internship(internship_id: int, store: Store, user: CurrentUser) -> dict:
    """Get internship by ID."""
    return _with_occupancy(store, _get_or_404(store, internship_id))


@router.post("/", response_model=Internship, status_code=status.HTTP_201_CREATED)
async def create_internship(
    internship_data: InternshipCreate,
    store: Store,
    staff: StaffUser,
) -> dict:
    """Create new internship."""
    data = internship_data.model_dump(by_alias=True, mode="json")
    _validate(data)

    internship = store.add_internship(data)
    logger.info(f"Internship {internship['id']} '{internship['title']}' created by {staff.username}")
    return internship


@router.put("/{internship_id}", response_model=Internship)
async def update_internship(
    internship_id: int,
    internship_data: InternshipUpdate,
    store: Store,
    staff: StaffUser,
) -> dict:
    """Update internship; unset or null fields keep their current values."""
    existing = _get_or_404(store, internship_id)
    changes = internship_data.model_dump(by_alias=True, exclude_unset=True, exclude_none=True, mode="json")
    merged = {**existing, **changes}
    _validate(merged)

    store.update_internship(merged)
    logger.info(f"Internship {internship_id} updated by {staff.username}")
    return store.get_internship(internship_id)


@router.delete("/{internship_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_internship(internship_id: int, store: Store, staff: StaffUser) -> None:
    """Delete internship and unassign its students."""
    _get_or_404(store, internship_id)
    store.delete_internship(internship_id)
    logger.info(f"Internship {internship_id} deleted by {staff.username}")


@router.get("/{internship_id}/students", response_model=List[Student])
async def get_internship_students(internship_id: int, store: Store, user: CurrentUser) -> List[dict]:
    """Get students assigned to the internship."""
    _get_or_404(store, internship_id)
    return store.get_students_for_internship(internship_id)


@router.post("/{internship_id}/assign/{student_id}", response_model=Student)
async def assign_student(
    internship_id: int,
    student_id: int,
    store: Store,
    staff: StaffUser,
) -> dict:
    """Assign a student to the internship after checking capacity."""
    internship = _get_or_404(store, internship_id)
    student = store.get_student(student_id)
    if not student:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Student not found")

    if student.get("internshipId") == internship_id:
        return student

    error = check_internship_capacity(store, internship_id)
    if error:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=error)

    store.assign_student_to_internship(student_id, internship_id)
    logger.info(
        f"Student {student_id} assigned to internship {internship_id} "
        f"'{internship['title']}' by {staff.username}"
    )
    return store.get_student(student_id)


@router.delete("/{internship_id}/assign/{student_id}", response_model=Student)
async def unassign_student(
    internship_id: int,
    student_id: int,
    store: Store,
    staff: StaffUser,
) -> dict:
    """Remove a student from the internship."""
    _get_or_404(store, internship_id)
    student = store.get_student(student_id)
    if not student:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Student not found")
    if student.get("internshipId") != internship_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Student is not assigned to this internship"
        )

    store.assign_student_to_internship(student_id, None)
    logger.info(f"Student {student_id} unassigned from internship {internship_id} by {staff.username}")
    return store.get_student(student_id)
