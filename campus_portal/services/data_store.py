"""Relational data store for students, internships and CRT sessions.

The store is the only code path that mutates the three collections. Every
mutation updates the in-memory list and then writes the whole collection to
the injected storage under its fixed key, inside one locked step.

The store trusts its callers: it performs no schema validation, no capacity
check on internship assignment and no existence check on referenced ids.
Operations on an unknown id are silent no-ops. Business rules belong to the
caller (see ``campus_portal.services.validation``).
"""

import copy
import json
import logging
import threading
from typing import Any, Callable, Dict, Iterable, List, Optional

from campus_portal.core.storage import Storage
from campus_portal.services.seed import (
    COLLECTION_KEYS,
    CRT_SESSIONS_KEY,
    INTERNSHIPS_KEY,
    STUDENTS_KEY,
    default_collections,
)

logger = logging.getLogger(__name__)

Record = Dict[str, Any]
Listener = Callable[[str, List[Record]], None]


def next_id(records: Iterable[Record]) -> int:
    """Return ``max(id) + 1`` or 1 for an empty collection."""
    ids = [record["id"] for record in records]
    return max(ids) + 1 if ids else 1


class DataStore:
    """In-memory collections synchronized to a key/value storage."""

    def __init__(
        self,
        storage: Storage,
        defaults: Optional[Dict[str, List[Record]]] = None,
    ):
        self.storage = storage
        self._defaults = default_collections() if defaults is None else defaults
        self._lock = threading.RLock()
        self._listeners: List[Listener] = []
        self._collections: Dict[str, List[Record]] = {}

        with self._lock:
            for key in COLLECTION_KEYS:
                self._collections[key] = self._load(key)

    # ------------------------------------------------------------------
    # Loading and persistence
    # ------------------------------------------------------------------

    def _default(self, key: str) -> List[Record]:
        return copy.deepcopy(self._defaults.get(key, []))

    @staticmethod
    def _parse(raw: str) -> List[Record]:
        data = json.loads(raw)
        if not isinstance(data, list) or not all(isinstance(item, dict) for item in data):
            raise ValueError("expected a JSON list of objects")
        for item in data:
            record_id = item.get("id")
            # bool is an int subclass but never a valid id
            if not isinstance(record_id, int) or isinstance(record_id, bool):
                raise ValueError(f"record without an integer id: {record_id!r}")
        return data

    def _load(self, key: str) -> List[Record]:
        raw = self.storage.get(key)
        if raw is None:
            logger.info(f"No stored '{key}' collection, seeding defaults")
            records = self._default(key)
        else:
            try:
                return self._parse(raw)
            except ValueError as e:
                logger.warning(f"Could not parse stored '{key}' collection, falling back to defaults: {e}")
                records = self._default(key)

        self._collections[key] = records
        self._persist(key)
        return records

    def _persist(self, key: str) -> None:
        self.storage.set(key, json.dumps(self._collections[key]))
        self._notify(key)

    def _notify(self, key: str) -> None:
        if not self._listeners:
            return
        snapshot = copy.deepcopy(self._collections[key])
        for listener in list(self._listeners):
            try:
                listener(key, snapshot)
            except Exception as e:
                logger.error(f"Store listener {listener!r} failed for '{key}': {e}")
                logger.exception(e)

    def subscribe(self, listener: Listener) -> None:
        """Call ``listener(key, collection)`` after every write or reload."""
        with self._lock:
            if listener not in self._listeners:
                self._listeners.append(listener)

    def unsubscribe(self, listener: Listener) -> None:
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)

    def reload(self, key: Optional[str] = None) -> List[str]:
        """Re-read collections changed outside this store.

        A missing value resets the collection to its default. An unparseable
        value is logged and the in-memory collection is kept. Returns the keys
        that were reloaded.
        """
        keys = [key] if key else list(COLLECTION_KEYS)
        reloaded = []
        with self._lock:
            for item_key in keys:
                if item_key not in COLLECTION_KEYS:
                    logger.warning(f"Ignoring reload of unknown key '{item_key}'")
                    continue
                raw = self.storage.get(item_key)
                if raw is None:
                    self._collections[item_key] = self._default(item_key)
                    self._persist(item_key)
                    reloaded.append(item_key)
                    continue
                try:
                    self._collections[item_key] = self._parse(raw)
                except ValueError as e:
                    logger.error(f"Error parsing external change for '{item_key}': {e}")
                    continue
                self._notify(item_key)
                reloaded.append(item_key)
        if reloaded:
            logger.info(f"Reloaded collections from storage: {', '.join(reloaded)}")
        return reloaded

    def reset_to_defaults(self) -> None:
        """Replace every collection with the default dataset and persist it."""
        with self._lock:
            for key in COLLECTION_KEYS:
                self._collections[key] = self._default(key)
                self._persist(key)
        logger.info("Store reset to default dataset")

    # ------------------------------------------------------------------
    # Shared helpers
    # ------------------------------------------------------------------

    def _find(self, key: str, record_id: Any) -> Optional[Record]:
        for record in self._collections[key]:
            if record.get("id") == record_id:
                return record
        return None

    def _add(self, key: str, data: Record, **overrides: Any) -> Record:
        with self._lock:
            records = self._collections[key]
            record = {**copy.deepcopy(data), "id": next_id(records), **overrides}
            records.append(record)
            self._persist(key)
            logger.info(f"Added {key} record {record['id']}")
            return copy.deepcopy(record)

    def _replace(self, key: str, record: Record) -> None:
        with self._lock:
            records = self._collections[key]
            for index, existing in enumerate(records):
                if existing.get("id") == record.get("id"):
                    records[index] = copy.deepcopy(record)
                    self._persist(key)
                    return

    def _delete(self, key: str, record_id: Any) -> bool:
        with self._lock:
            records = self._collections[key]
            remaining = [record for record in records if record.get("id") != record_id]
            if len(remaining) == len(records):
                return False
            self._collections[key] = remaining
            self._persist(key)
            logger.info(f"Deleted {key} record {record_id}")
            return True

    def _get(self, key: str, record_id: Any) -> Optional[Record]:
        with self._lock:
            record = self._find(key, record_id)
            return copy.deepcopy(record) if record is not None else None

    # ------------------------------------------------------------------
    # Read surface
    # ------------------------------------------------------------------

    @property
    def students(self) -> List[Record]:
        with self._lock:
            return copy.deepcopy(self._collections[STUDENTS_KEY])

    @property
    def internships(self) -> List[Record]:
        with self._lock:
            return copy.deepcopy(self._collections[INTERNSHIPS_KEY])

    @property
    def crt_sessions(self) -> List[Record]:
        with self._lock:
            return copy.deepcopy(self._collections[CRT_SESSIONS_KEY])

    def get_student(self, student_id: int) -> Optional[Record]:
        return self._get(STUDENTS_KEY, student_id)

    def get_internship(self, internship_id: int) -> Optional[Record]:
        return self._get(INTERNSHIPS_KEY, internship_id)

    def get_crt_session(self, session_id: int) -> Optional[Record]:
        return self._get(CRT_SESSIONS_KEY, session_id)

    # ------------------------------------------------------------------
    # Students
    # ------------------------------------------------------------------

    def add_student(self, data: Record) -> Record:
        return self._add(STUDENTS_KEY, data, progress=[])

    def update_student(self, record: Record) -> None:
        self._replace(STUDENTS_KEY, record)

    def delete_student(self, student_id: int) -> None:
        self._delete(STUDENTS_KEY, student_id)

    def add_student_progress(self, student_id: int, entry: Record) -> None:
        """Append a progress entry; earlier entries are never touched."""
        with self._lock:
            student = self._find(STUDENTS_KEY, student_id)
            if student is None:
                return
            student["progress"] = [*student.get("progress", []), copy.deepcopy(entry)]
            self._persist(STUDENTS_KEY)

    # ------------------------------------------------------------------
    # Internships
    # ------------------------------------------------------------------

    def add_internship(self, data: Record) -> Record:
        return self._add(INTERNSHIPS_KEY, data, status="Active")

    def update_internship(self, record: Record) -> None:
        self._replace(INTERNSHIPS_KEY, record)

    def delete_internship(self, internship_id: int) -> None:
        """Unassign every student on the internship, then remove it."""
        with self._lock:
            unassigned = 0
            for student in self._collections[STUDENTS_KEY]:
                if student.get("internshipId") == internship_id:
                    student["internshipId"] = None
                    unassigned += 1
            if unassigned:
                self._persist(STUDENTS_KEY)
                logger.info(f"Unassigned {unassigned} students from internship {internship_id}")
            self._delete(INTERNSHIPS_KEY, internship_id)

    def assign_student_to_internship(self, student_id: int, internship_id: Optional[int]) -> None:
        """Set the student's internship directly.

        No capacity or existence check is made; pass ``None`` to unassign.
        """
        with self._lock:
            student = self._find(STUDENTS_KEY, student_id)
            if student is None:
                return
            student["internshipId"] = internship_id
            self._persist(STUDENTS_KEY)

    def get_students_for_internship(self, internship_id: Optional[int]) -> List[Record]:
        with self._lock:
            return [
                copy.deepcopy(student)
                for student in self._collections[STUDENTS_KEY]
                if student.get("internshipId") == internship_id
            ]

    def internship_occupancy(self, internship_id: int) -> int:
        with self._lock:
            return sum(
                1
                for student in self._collections[STUDENTS_KEY]
                if student.get("internshipId") == internship_id
            )

    # ------------------------------------------------------------------
    # CRT sessions
    # ------------------------------------------------------------------

    def add_crt_session(self, data: Record) -> Record:
        return self._add(CRT_SESSIONS_KEY, data, registeredStudents=[])

    def update_crt_session(self, record: Record) -> None:
        self._replace(CRT_SESSIONS_KEY, record)

    def delete_crt_session(self, session_id: int) -> None:
        self._delete(CRT_SESSIONS_KEY, session_id)

    def register_student_for_crt_session(self, student_id: int, session_id: int) -> None:
        with self._lock:
            session = self._find(CRT_SESSIONS_KEY, session_id)
            if session is None:
                return
            registered = session.setdefault("registeredStudents", [])
            if student_id in registered:
                return
            registered.append(student_id)
            self._persist(CRT_SESSIONS_KEY)

    def unregister_student_from_crt_session(self, student_id: int, session_id: int) -> None:
        with self._lock:
            session = self._find(CRT_SESSIONS_KEY, session_id)
            if session is None or student_id not in session.get("registeredStudents", []):
                return
            session["registeredStudents"] = [
                registered_id
                for registered_id in session["registeredStudents"]
                if registered_id != student_id
            ]
            self._persist(CRT_SESSIONS_KEY)

    def get_students_for_crt_session(self, session_id: int) -> List[Record]:
        with self._lock:
            session = self._find(CRT_SESSIONS_KEY, session_id)
            if session is None:
                return []
            registered = set(session.get("registeredStudents", []))
            return [
                copy.deepcopy(student)
                for student in self._collections[STUDENTS_KEY]
                if student.get("id") in registered
            ]
