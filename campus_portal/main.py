"""Main FastAPI application."""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from campus_portal.api import auth, crt_sessions, dashboard, health, internships, students
from campus_portal.core.settings import settings
from campus_portal.core.storage import Storage, create_storage
from campus_portal.services.data_store import DataStore
from campus_portal.workers.storage_watcher import StorageWatcher

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def create_app(storage: Optional[Storage] = None) -> FastAPI:
    """Build the application; ``storage`` overrides the configured backend."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan manager."""
        logger.info("Starting campus portal application...")

        app.state.store = DataStore(storage or create_storage(settings))
        logger.info("Data store initialized")

        watcher = None
        if settings.watch_storage:
            watcher = StorageWatcher(app.state.store)
            watcher.start_in_thread()

        yield

        # Cleanup
        logger.info("Shutting down...")
        if watcher:
            watcher.stop()
        logger.info("Application stopped")

    app = FastAPI(
        title="Campus Internship & CRT Portal",
        description="Internship assignment, student progress and campus readiness training sessions",
        version="1.0.0",
        lifespan=lifespan,
    )

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Allow all origins for now
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    # Include API routers
    app.include_router(health.router)
    app.include_router(auth.router)
    app.include_router(students.router, prefix="/api")
    app.include_router(internships.router, prefix="/api")
    app.include_router(crt_sessions.router, prefix="/api")
    app.include_router(dashboard.router, prefix="/api")

    return app


app = create_app()


if __name__ == "__main__":
    import os

    import uvicorn

    port = int(os.getenv("PORT", 8000))
    uvicorn.run(
        "campus_portal.main:app",
        host="0.0.0.0",
        port=port,
        reload=settings.env == "dev",
        proxy_headers=True,
        forwarded_allow_ips="*",
    )
