"""Dashboard API endpoint."""

from typing import Any, Dict

from fastapi import APIRouter

from campus_portal.api.dependencies import CurrentUser, Store
from campus_portal.services.dashboard import build_dashboard

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/")
async def get_dashboard(store: Store, user: CurrentUser) -> Dict[str, Any]:
    """Role-specific summary for the home screen."""
    return build_dashboard(store, user)
