"""Students API endpoints."""

import io
import logging
from datetime import date, datetime
from typing import Any, Dict, List, Optional

import pandas as pd
from fastapi import APIRouter, HTTPException, Query, status
from fastapi.responses import StreamingResponse
from pydantic import BaseModel, Field

from campus_portal.api.dependencies import CurrentUser, StaffUser, Store
from campus_portal.core.security import UserRole
from campus_portal.models import ProgressStatus, Student
from campus_portal.services.filtering import filter_students, sort_records, unique_values
from campus_portal.services.validation import (
    PROGRESS_RULES,
    STUDENT_RULES,
    check_internship_capacity,
    validate_form,
)
from campus_portal.utils.formatting import format_date, format_file_size, format_phone_number

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/students", tags=["students"])


class StudentCreate(BaseModel):
    """Student creation model."""

    name: str
    register_number: str = Field(alias="registerNumber")
    branch: str
    year: int
    email: str
    phone: str
    internship_id: Optional[int] = Field(default=None, alias="internshipId")

    class Config:
        populate_by_name = True


class StudentUpdate(BaseModel):
    """Student update model.

    Internship assignment and progress have their own endpoints.
    """

    name: Optional[str] = None
    register_number: Optional[str] = Field(default=None, alias="registerNumber")
    branch: Optional[str] = None
    year: Optional[int] = None
    email: Optional[str] = None
    phone: Optional[str] = None

    class Config:
        populate_by_name = True


class ProgressCreate(BaseModel):
    """Progress entry creation model."""

    date: Optional[str] = None
    task: str
    status: ProgressStatus = ProgressStatus.IN_PROGRESS
    remarks: str = ""


def _validate(data: dict, rules: dict) -> None:
    is_valid, errors = validate_form(data, rules)
    if not is_valid:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=errors)


def _get_or_404(store, student_id: int) -> dict:
    student = store.get_student(student_id)
    if not student:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Student not found"
        )
    return student


@router.get("/", response_model=List[Student])
async def get_students(
    store: Store,
    user: CurrentUser,
    search: Optional[str] = None,
    branch: Optional[str] = None,
    year: Optional[int] = None,
    internship: Optional[str] = Query(default=None, description="'assigned', 'unassigned' or an internship id"),
    sort_by: str = "id",
    sort_order: str = Query(default="asc", pattern="^(asc|desc)$"),
) -> List[dict]:
    """Get all students, filtered and sorted."""
    if internship not in (None, "", "assigned", "unassigned") and not internship.isdigit():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="internship must be 'assigned', 'unassigned' or an id"
        )
    students = filter_students(
        store.students,
        search_term=search,
        branch=branch,
        year=year,
        internship=internship,
    )
    return sort_records(students, sort_by, sort_order)


@router.get("/facets")
async def get_student_facets(store: Store, user: CurrentUser) -> Dict[str, List[Any]]:
    """Distinct branches and years for the list filters."""
    students = store.students
    return {
        "branches": [b for b in unique_values(students, "branch") if b],
        "years": sorted(y for y in unique_values(students, "year") if y is not None),
    }


@router.get("/export")
async def export_students_excel(store: Store, staff: StaffUser) -> StreamingResponse:
    """Export all students with internship and progress summary to Excel."""
    students = sort_records(store.students, "name")
    if not students:
        raise HTTPException(status_code=404, detail="No students found")

    titles = {internship["id"]: internship.get("title") for internship in store.internships}

    students_data = []
    for student in students:
        progress = student.get("progress", [])
        latest = progress[-1] if progress else None
        students_data.append({
            "Name": student.get("name"),
            "Register Number": student.get("registerNumber"),
            "Branch": student.get("branch"),
            "Year": student.get("year"),
            "Email": student.get("email") or "—",
            "Phone": format_phone_number(student.get("phone")) or "—",
            "Internship": titles.get(student.get("internshipId")) or "—",
            "Progress Entries": len(progress),
            "Latest Task": latest.get("task") if latest else "—",
            "Latest Status": latest.get("status") if latest else "—",
            "Last Update": format_date(latest.get("date")) if latest else "—",
        })

    df = pd.DataFrame(students_data)

    output = io.BytesIO()
    with pd.ExcelWriter(output, engine="openpyxl") as writer:
        df.to_excel(writer, sheet_name="Students", index=False)

        worksheet = writer.sheets["Students"]
        for column in worksheet.columns:
            max_length = max(len(str(cell.value)) for cell in column if cell.value is not None)
            worksheet.column_dimensions[column[0].column_letter].width = min(max_length + 2, 50)

        assigned = [s for s in students if s.get("internshipId") is not None]
        summary_df = pd.DataFrame({
            "Statistic": [
                "Total students",
                "Assigned to an internship",
                "Unassigned",
                "Students with progress updates",
            ],
            "Value": [
                len(students),
                len(assigned),
                len(students) - len(assigned),
                len([s for s in students if s.get("progress")]),
            ],
        })
        summary_df.to_excel(writer, sheet_name="Summary", index=False)

    output.seek(0)

    filename = f"students_export_{datetime.now().strftime('%Y-%m-%d')}.xlsx"
    size = format_file_size(len(output.getvalue()))
    logger.info(f"Exported {len(students)} students to {filename} ({size})")
    return StreamingResponse(
        output,
        media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        headers={"Content-Disposition": f"attachment; filename={filename}"}
    )


@router.get("/{student_id}", response_model=Student)
async def get_student(student_id: int, store: Store, user: CurrentUser) -> dict:
    """Get student by ID."""
    return _get_or_404(store, student_id)


@router.post("/", response_model=Student, status_code=status.HTTP_201_CREATED)
async def create_student(
    student_data: StudentCreate,
    store: Store,
    staff: StaffUser,
) -> dict:
    """Create new student."""
    data = student_data.model_dump(by_alias=True, mode="json")
    _validate(data, STUDENT_RULES)

    if data.get("internshipId") is not None:
        error = check_internship_capacity(store, data["internshipId"])
        if error:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=error)

    student = store.add_student(data)
    logger.info(f"Student {student['id']} '{student['name']}' created by {staff.username}")
    return student


@router.put("/{student_id}", response_model=Student)
async def update_student(
    student_id: int,
    student_data: StudentUpdate,
    store: Store,
    staff: StaffUser,
) -> dict:
    """Update student; unset or null fields keep their current values."""
    existing = _get_or_404(store, student_id)
    changes = student_data.model_dump(by_alias=True, exclude_unset=True, exclude_none=True, mode="json")
    merged = {**existing, **changes}
    _validate(merged, STUDENT_RULES)

    store.update_student(merged)
    logger.info(f"Student {student_id} updated by {staff.username}")
    return store.get_student(student_id)


@router.delete("/{student_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_student(student_id: int, store: Store, staff: StaffUser) -> None:
    """Delete student."""
    _get_or_404(store, student_id)
    store.delete_student(student_id)
    logger.info(f"Student {student_id} deleted by {staff.username}")


@router.post("/{student_id}/progress", response_model=Student, status_code=status.HTTP_201_CREATED)
async def add_student_progress(
    student_id: int,
    entry: ProgressCreate,
    store: Store,
    user: CurrentUser,
) -> dict:
    """Append a progress entry (staff, or the student on their own record)."""
    own_record = user.role == UserRole.STUDENT and user.student_id == student_id
    if not (user.is_staff or own_record):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not allowed to update this student's progress"
        )
    _get_or_404(store, student_id)

    data = entry.model_dump(mode="json")
    data["date"] = data.get("date") or date.today().isoformat()
    _validate(data, PROGRESS_RULES)

    store.add_student_progress(student_id, data)
    logger.info(f"Progress '{data['task']}' added to student {student_id} by {user.username}")
    return store.get_student(student_id)
