"""Database configuration and session management."""

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker


class Base(DeclarativeBase):
    """Base class for all database models."""

    pass


def create_db_engine(database_url: str, echo: bool = False) -> Engine:
    """Create a synchronous engine for the key/value table."""
    connect_args = {}
    if database_url.startswith("sqlite"):
        # Store calls may arrive from FastAPI's threadpool
        connect_args["check_same_thread"] = False
    return create_engine(
        database_url,
        echo=echo,
        pool_pre_ping=True,
        connect_args=connect_args,
    )


def create_session_factory(engine: Engine) -> sessionmaker:
    """Create session factory bound to the engine."""
    return sessionmaker(engine, expire_on_commit=False)


def init_db(engine: Engine) -> None:
    """Initialize database tables."""
    # Register models on the metadata before create_all
    from campus_portal.models import storage_entry  # noqa: F401

    Base.metadata.create_all(engine)
