"""CRT sessions API endpoints."""

import logging
from typing import List, Optional

from fastapi import APIRouter, HTTPException, Query, status
from pydantic import BaseModel

from campus_portal.api.dependencies import CurrentUser, StaffUser, Store
from campus_portal.core.security import User, UserRole
from campus_portal.models import CRTSession, Student
from campus_portal.services.filtering import filter_and_sort, filter_crt_sessions, is_upcoming_session
from campus_portal.services.validation import CRT_SESSION_RULES, validate_form

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/crt-sessions", tags=["crt-sessions"])


class CRTSessionCreate(BaseModel):
    """CRT session creation model."""

    title: str
    description: str
    date: str
    time: str
    venue: str
    speaker: str
    eligibility: str = ""


class CRTSessionUpdate(BaseModel):
    """CRT session update model; registrations have their own endpoints."""

    title: Optional[str] = None
    description: Optional[str] = None
    date: Optional[str] = None
    time: Optional[str] = None
    venue: Optional[str] = None
    speaker: Optional[str] = None
    eligibility: Optional[str] = None


def _validate(data: dict) -> None:
    is_valid, errors = validate_form(data, CRT_SESSION_RULES)
    if not is_valid:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=errors)


def _get_or_404(store, session_id: int) -> dict:
    session = store.get_crt_session(session_id)
    if not session:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="CRT session not found"
        )
    return session


def _resolve_student(user: User, student_id: Optional[int]) -> int:
    """Students act on their own record; staff must name the student."""
    if user.role == UserRole.STUDENT:
        if not user.student_id:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="No student record is linked to this account"
            )
        if student_id is not None and student_id != user.student_id:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Students can only manage their own registration"
            )
        return user.student_id

    if student_id is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="student_id is required"
        )
    return student_id


@router.get("/", response_model=List[CRTSession])
async def get_crt_sessions(
    store: Store,
    user: CurrentUser,
    search: Optional[str] = None,
    kind: Optional[str] = Query(default=None, pattern="^(registered|upcoming|past)$"),
    student_id: Optional[int] = None,
    venue: Optional[str] = None,
    speaker: Optional[str] = None,
    sort_by: str = "date",
    sort_order: str = Query(default="asc", pattern="^(asc|desc)$"),
) -> List[dict]:
    """Get CRT sessions; ``kind=registered`` defaults to the caller's own student id."""
    if kind == "registered" and student_id is None:
        student_id = user.student_id
    sessions = filter_crt_sessions(
        store.crt_sessions,
        search_term=search,
        kind=kind,
        student_id=student_id,
    )
    return filter_and_sort(sessions, {"venue": venue, "speaker": speaker}, sort_by, sort_order)


@router.get("/{session_id}", response_model=CRTSession)
async def get_crt_session(session_id: int, store: Store, user: CurrentUser) -> dict:
    """Get CRT session by ID."""
    return _get_or_404(store, session_id)


@router.post("/", response_model=CRTSession, status_code=status.HTTP_201_CREATED)
async def create_crt_session(
    session_data: CRTSessionCreate,
    store: Store,
    staff: StaffUser,
) -> dict:
    """Create new CRT session."""
    data = session_data.model_dump()
    _validate(data)

    session = store.add_crt_session(data)
    logger.info(f"CRT session {session['id']} '{session['title']}' created by {staff.username}")
    return session


@router.put("/{session_id}", response_model=CRTSession)
async def update_crt_session(
    session_id: int,
    session_data: CRTSessionUpdate,
    store: Store,
    staff: StaffUser,
) -> dict:
    """Update CRT session; unset or null fields keep their current values."""
    existing = _get_or_404(store, session_id)
    merged = {**existing, **session_data.model_dump(exclude_unset=True, exclude_none=True)}
    _validate(merged)

    store.update_crt_session(merged)
    logger.info(f"CRT session {session_id} updated by {staff.username}")
    return store.get_crt_session(session_id)


@router.delete("/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_crt_session(session_id: int, store: Store, staff: StaffUser) -> None:
    """Delete CRT session."""
    _get_or_404(store, session_id)
    store.delete_crt_session(session_id)
    logger.info(f"CRT session {session_id} deleted by {staff.username}")


@router.get("/{session_id}/students", response_model=List[Student])
async def get_crt_session_students(session_id: int, store: Store, user: CurrentUser) -> List[dict]:
    """Get students registered for the session."""
    _get_or_404(store, session_id)
    return store.get_students_for_crt_session(session_id)


@router.post("/{session_id}/register", response_model=CRTSession)
async def register_for_crt_session(
    session_id: int,
    store: Store,
    user: CurrentUser,
    student_id: Optional[int] = None,
) -> dict:
    """Register a student; registering twice leaves one entry."""
    session = _get_or_404(store, session_id)
    target_id = _resolve_student(user, student_id)

    if user.role == UserRole.STUDENT and not is_upcoming_session(session.get("date")):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Registration is closed for past sessions"
        )
    if not store.get_student(target_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Student not found")

    store.register_student_for_crt_session(target_id, session_id)
    logger.info(f"Student {target_id} registered for CRT session {session_id} by {user.username}")
    return store.get_crt_session(session_id)


@router.delete("/{session_id}/register", response_model=CRTSession)
async def unregister_from_crt_session(
    session_id: int,
    store: Store,
    user: CurrentUser,
    student_id: Optional[int] = None,
) -> dict:
    """Remove a student's registration; absent registrations are left alone."""
    _get_or_404(store, session_id)
    target_id = _resolve_student(user, student_id)

    store.unregister_student_from_crt_session(target_id, session_id)
    logger.info(f"Student {target_id} unregistered from CRT session {session_id} by {user.username}")
    return store.get_crt_session(session_id)
