"""Health check API endpoints."""

import logging

from fastapi import APIRouter
from pydantic import BaseModel

from campus_portal.api.dependencies import Store
from campus_portal.services.seed import COLLECTION_KEYS

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    message: str


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Health check endpoint."""
    return HealthResponse(status="ok", message="Campus portal API is running")


@router.get("/health/storage", response_model=HealthResponse)
async def health_check_storage(store: Store) -> HealthResponse:
    """Storage health check endpoint."""
    try:
        missing = [key for key in COLLECTION_KEYS if store.storage.get(key) is None]
        if missing:
            return HealthResponse(status="error", message=f"Missing collections: {', '.join(missing)}")
        return HealthResponse(status="ok", message="Storage is reachable")
    except Exception as e:
        logger.error(f"Storage health check failed: {e}")
        return HealthResponse(status="error", message=f"Storage check failed: {str(e)}")
