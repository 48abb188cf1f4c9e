"""Reset the configured storage to the demo dataset."""

import logging
import sys

sys.path.append(".")

from campus_portal.core.settings import settings
from campus_portal.core.storage import create_storage
from campus_portal.services.data_store import DataStore


def seed_data():
    """Seed storage with sample students, internships and CRT sessions."""
    store = DataStore(create_storage(settings))
    store.reset_to_defaults()

    print("✅ Sample data seeded successfully!")
    print("Created:")
    print(f"  - {len(store.students)} students")
    print(f"  - {len(store.internships)} internships")
    print(f"  - {len(store.crt_sessions)} CRT sessions")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    seed_data()
