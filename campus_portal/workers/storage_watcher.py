"""
Worker that picks up changes written to storage by other processes.
"""

import logging
import threading
import time
from typing import Dict, List, Optional

import schedule

from campus_portal.core.settings import settings
from campus_portal.core.storage import Storage, create_storage
from campus_portal.services.data_store import DataStore, Record
from campus_portal.services.seed import COLLECTION_KEYS

logger = logging.getLogger(__name__)


class StorageWatcher:
    """Polls storage and reloads collections changed outside the store."""

    def __init__(
        self,
        store: DataStore,
        storage: Optional[Storage] = None,
        interval: Optional[int] = None,
    ):
        self.store = store
        self.storage = storage or store.storage
        self.interval = interval or settings.watch_interval_seconds
        self.running = False
        self.scheduler = schedule.Scheduler()
        self._thread: Optional[threading.Thread] = None
        self._last_seen: Dict[str, Optional[str]] = {
            key: self.storage.get(key) for key in COLLECTION_KEYS
        }
        store.subscribe(self._remember)

    def _remember(self, key: str, collection: List[Record]) -> None:
        # Writes made through our own store are not external changes
        self._last_seen[key] = self.storage.get(key)

    def poll(self) -> List[str]:
        """Reload every collection whose stored text changed since last seen."""
        changed = []
        for key in COLLECTION_KEYS:
            raw = self.storage.get(key)
            if raw != self._last_seen.get(key):
                changed.append(key)
                self._last_seen[key] = raw

        reloaded = []
        for key in changed:
            logger.info(f"External change detected for '{key}'")
            reloaded.extend(self.store.reload(key))
        return reloaded

    def setup_scheduler(self):
        """Configure the polling job."""
        self.scheduler.every(self.interval).seconds.do(self.poll)
        logger.info(f"Storage watcher polling every {self.interval}s")

    def start(self):
        """Run the polling loop in the current thread."""
        logger.info("Starting Storage Watcher...")
        self.setup_scheduler()
        self.running = True
        self._run()

    def _run(self):
        while self.running:
            try:
                self.scheduler.run_pending()
                time.sleep(1)
            except KeyboardInterrupt:
                logger.info("Keyboard interrupt received")
                self.stop()
            except Exception as e:
                logger.error(f"Error in storage watcher loop: {e}")
                time.sleep(5)  # Wait before retrying

    def start_in_thread(self) -> threading.Thread:
        """Run the polling loop on a daemon thread."""
        logger.info("Starting Storage Watcher thread...")
        self.setup_scheduler()
        self.running = True
        self._thread = threading.Thread(target=self._run, name="storage-watcher", daemon=True)
        self._thread.start()
        return self._thread

    def stop(self, timeout: float = 5):
        """Stop the polling loop and wait for its thread to finish."""
        logger.info("Stopping Storage Watcher...")
        self.running = False
        self.scheduler.clear()
        if self._thread and self._thread is not threading.current_thread():
            self._thread.join(timeout)
            if self._thread.is_alive():
                logger.warning(f"Storage watcher thread still running after {timeout}s")
        self.store.unsubscribe(self._remember)
        logger.info("Storage Watcher stopped")


def log_collection_change(key: str, collection: List[Record]) -> None:
    logger.info(f"Collection '{key}' now holds {len(collection)} records")


def main():
    """Watch the configured storage and log every collection change."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    store = DataStore(create_storage(settings))
    store.subscribe(log_collection_change)
    watcher = StorageWatcher(store)

    try:
        watcher.start()
    except Exception as e:
        logger.error(f"Fatal error in storage watcher: {e}")
    finally:
        watcher.stop()


if __name__ == "__main__":
    main()
