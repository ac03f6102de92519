"""
saher.session
=============

:class:`StoreSession` is the single owner of a live store.  Front ends (the
HTTP API, the CLI) talk to it instead of to the store directly: every
mutation is serialised behind one lock and followed by an auto-save, and
persistence problems are reported through ``last_error`` instead of being
raised.
"""

from __future__ import annotations

import logging
import threading
from datetime import date, datetime
from typing import Any, Mapping, Optional, Tuple, Union

from .archive import ArchiveManager
from .errors import Result
from .models import Record
from .notifications import NotificationCenter, NotificationResult
from .persistence import AutoSaver, PersistenceGateway
from .store import Clock, RecordStore

logger = logging.getLogger(__name__)


class StoreSession:
    """
    Owned, single-writer handle around a :class:`RecordStore`.

    Example
    -------
    >>> from saher.models import SimpleRecord
    >>> session = StoreSession().open()
    >>> session.create("commercialLicense", SimpleRecord(name="Trade", expiry_date="2031-01-01")).changed
    True
    """

    def __init__(self, gateway: Optional[PersistenceGateway] = None, clock: Optional[Clock] = None) -> None:
        self.gateway = gateway or PersistenceGateway(clock=clock)
        self.clock = clock or self.gateway.clock
        self.store = RecordStore(clock=self.clock)
        self.archive = ArchiveManager(self.store)
        self.autosave = AutoSaver(self.gateway)
        self.notifications = NotificationCenter(self.gateway.storage)
        self._lock = threading.RLock()

    @property
    def last_error(self) -> Optional[str]:
        return self.gateway.last_error

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _after(self, result: Result) -> Result:
        if result.changed:
            self.autosave(self.store)
        return result

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def open(self) -> "StoreSession":
        """Load the saved snapshot (or the seed) and save it back once."""
        with self._lock:
            self.autosave(self.store)  # skipped: nothing loaded yet
            self.store.replace(self.gateway.load_or_seed())
            self.autosave(self.store)
        return self

    def save_now(self) -> bool:
        """Explicit save regardless of the auto-save latch."""
        with self._lock:
            return self.gateway.save(self.store)

    # ------------------------------------------------------------------
    # Live records
    # ------------------------------------------------------------------
    def create(self, category: Any, record: Record) -> Result:
        with self._lock:
            return self._after(self.store.create(category, record))

    def update(self, category: Any, record: Record) -> Result:
        with self._lock:
            return self._after(self.store.update(category, record))

    def save(self, category: Any, record: Record) -> Result:
        with self._lock:
            return self._after(self.store.save(category, record))

    # ------------------------------------------------------------------
    # Archive
    # ------------------------------------------------------------------
    def archive_record(self, category: Any, record_id: int) -> Result:
        with self._lock:
            return self._after(self.archive.archive(category, record_id))

    def restore(self, record_id: int) -> Result:
        with self._lock:
            return self._after(self.archive.restore(record_id))

    def purge(self, record_id: int) -> Result:
        with self._lock:
            return self._after(self.archive.purge(record_id))

    def edit_archived(self, record_id: int, changes: Mapping[str, Any]) -> Result:
        with self._lock:
            return self._after(self.archive.edit(record_id, changes))

    # ------------------------------------------------------------------
    # Backups
    # ------------------------------------------------------------------
    def export_backup(self, now: Optional[datetime] = None) -> Tuple[str, bytes]:
        with self._lock:
            return self.gateway.export_snapshot(self.store, now)

    def restore_backup(self, blob: Union[bytes, str, Mapping[str, Any]]) -> bool:
        """
        Replace the whole store with a backup and save it.

        Raises :class:`~saher.errors.SnapshotImportError` when the blob is
        rejected; the current store is untouched in that case.
        """
        with self._lock:
            imported = self.gateway.import_snapshot(blob)
            self.store.replace(imported)
            logger.info(f"Restored backup with {len(self.store)} live records")
            return self.gateway.save(self.store)

    # ------------------------------------------------------------------
    # Notifications
    # ------------------------------------------------------------------
    def check_notifications(self, today: Optional[date] = None) -> NotificationResult:
        with self._lock:
            today = today or self.store.today()
            return self.notifications.evaluate(self.store.live_records(), today)

    def dismiss_notifications(self) -> None:
        self.notifications.dismiss()
