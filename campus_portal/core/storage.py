"""Key/value storage backends for persisted collections."""

import logging
from typing import Dict, Optional, Protocol

from sqlalchemy.engine import Engine

from campus_portal.core.database import create_db_engine, create_session_factory, init_db
from campus_portal.core.settings import Settings
from campus_portal.models.storage_entry import StorageEntry

logger = logging.getLogger(__name__)


class Storage(Protocol):
    """String-keyed, string-valued durable substrate."""

    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...


class MemoryStorage:
    """Dict-backed storage, lost when the process exits."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def __contains__(self, key: str) -> bool:
        return key in self._data


class SqlStorage:
    """Storage backed by the ``storage_entries`` table."""

    def __init__(self, engine: Engine):
        self.engine = engine
        self.session_factory = create_session_factory(engine)
        init_db(engine)

    def get(self, key: str) -> Optional[str]:
        with self.session_factory() as session:
            entry = session.get(StorageEntry, key)
            return entry.value if entry else None

    def set(self, key: str, value: str) -> None:
        with self.session_factory() as session:
            try:
                entry = session.get(StorageEntry, key)
                if entry:
                    entry.value = value
                else:
                    session.add(StorageEntry(key=key, value=value))
                session.commit()
            except Exception as e:
                session.rollback()
                logger.error(f"Error writing storage key '{key}': {e}")
                raise


def create_storage(settings: Settings) -> Storage:
    """Build the storage backend selected in settings."""
    backend = settings.storage_backend.lower()
    if backend == "memory" or settings.env == "test":
        logger.info(f"Using in-memory storage (env={settings.env})")
        return MemoryStorage()
    if backend == "sql":
        logger.info(f"Using SQL storage at {settings.database_url}")
        engine = create_db_engine(settings.database_url, echo=False)
        return SqlStorage(engine)
    raise ValueError(f"Unknown storage backend: {settings.storage_backend}")
