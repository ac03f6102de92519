"""
saher.persistence
=================

Snapshot persistence for a :class:`~saher.store.RecordStore`.

The whole store is written as one JSON document under
``settings.storage_key`` in :class:`~saher.db.LocalStorage`.  Backups are
the same document plus ``backupDate``, handed to the caller as bytes.

Loading always re-derives every cached status from the stored dates, so a
snapshot saved weeks ago comes back classified against today.
"""

from __future__ import annotations

import json
import logging
from datetime import date, datetime
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple, Union

from sqlalchemy.exc import SQLAlchemyError

from .db import LocalStorage
from .errors import SnapshotImportError
from .models import ARCHIVE_KEY, ArchivedRecord, Category, record_from_dict
from .settings import Settings, settings as default_settings
from .store import Clock, RecordStore

logger = logging.getLogger(__name__)

# A backup must carry at least one of these as a list to be accepted.
IMPORT_KEYS: Tuple[str, ...] = ("commercialLicenses", "leaseContracts", "operationalLicenses", "procedures")


# ---------------------------------------------------------------------------
# Snapshot codec
# ---------------------------------------------------------------------------
def store_to_snapshot(store: RecordStore) -> Dict[str, Any]:
    """Plain-JSON view of every collection, keyed as in the snapshot file."""
    data: Dict[str, Any] = {}
    for category in Category:
        data[category.collection_key] = [rec.to_dict() for rec in store.records(category)]
    data[ARCHIVE_KEY] = [item.to_dict() for item in store.archived]
    return data


def _parse_items(key: str, items: Any, parse: Callable[[Any], Any], strict: bool) -> List[Any]:
    if not isinstance(items, list):
        if strict and items is not None:
            raise SnapshotImportError(f"{key} must be a list")
        return []
    parsed = []
    for position, raw in enumerate(items):
        try:
            parsed.append(parse(raw))
        except (TypeError, ValueError) as e:
            if strict:
                raise SnapshotImportError(f"{key}[{position}] is not a valid record: {e}") from e
            logger.warning(f"Skipping unreadable entry {key}[{position}]: {e}")
    return parsed


def store_from_snapshot(data: Mapping[str, Any], clock: Optional[Clock] = None,
                        strict: bool = False) -> RecordStore:
    """
    Build a hydrated store from snapshot JSON.

    Missing keys become empty collections.  With *strict* any malformed
    entry raises :class:`SnapshotImportError`; otherwise it is skipped.
    """
    collections = {
        category: _parse_items(
            category.collection_key,
            data.get(category.collection_key),
            lambda raw, c=category: record_from_dict(c, raw),
            strict,
        )
        for category in Category
    }
    archived = _parse_items(ARCHIVE_KEY, data.get(ARCHIVE_KEY), ArchivedRecord.from_dict, strict)
    return RecordStore(collections, archived, clock=clock).hydrate()


def backup_filename(prefix: str, day: date) -> str:
    return f"{prefix}_Backup_{day.isoformat()}.json"


# ---------------------------------------------------------------------------
# Gateway
# ---------------------------------------------------------------------------
class PersistenceGateway:
    """
    Load / save / export / import of the full store snapshot.

    ``save`` never raises: storage failures are logged, remembered in
    ``last_error`` and reported by returning False.  The in-memory store is
    left as it is.
    """

    def __init__(
        self,
        storage: Optional[LocalStorage] = None,
        config: Optional[Settings] = None,
        clock: Optional[Clock] = None,
        seed: Optional[Callable[[], Mapping[str, Any]]] = None,
    ) -> None:
        self.config = config or default_settings
        self.storage = storage or LocalStorage()
        self.clock = clock
        self._seed = seed
        self.last_error: Optional[str] = None

    # ------------------------------------------------------------------
    # Local snapshot
    # ------------------------------------------------------------------
    def load(self) -> Optional[RecordStore]:
        """Return the stored snapshot, hydrated, or None when there is none."""
        try:
            raw = self.storage.get(self.config.storage_key)
        except SQLAlchemyError as e:
            logger.error(f"Failed to read saved data: {e}")
            return None
        if raw is None:
            return None
        try:
            data = json.loads(raw)
        except ValueError as e:
            logger.error(f"Failed to parse saved data: {e}")
            return None
        if not isinstance(data, dict):
            logger.error("Saved data is not a JSON object; ignoring it")
            return None
        return store_from_snapshot(data, clock=self.clock)

    def load_or_seed(self) -> RecordStore:
        """:meth:`load`, falling back to the seed dataset."""
        store = self.load()
        if store is not None:
            return store
        logger.info("No saved data found; starting from the seed dataset")
        if self._seed is None:
            from .seed import seed_snapshot
            data = seed_snapshot()
        else:
            data = self._seed()
        return store_from_snapshot(data, clock=self.clock)

    def save(self, store: RecordStore) -> bool:
        """Write the whole snapshot in one operation."""
        try:
            payload = json.dumps(store_to_snapshot(store), ensure_ascii=False)
            self.storage.set(self.config.storage_key, payload)
        except (SQLAlchemyError, TypeError, ValueError) as e:
            self.last_error = str(e)
            logger.error(f"Auto-save failed: {e}")
            return False
        self.last_error = None
        return True

    # ------------------------------------------------------------------
    # Backups
    # ------------------------------------------------------------------
    def export_snapshot(self, store: RecordStore, now: Optional[datetime] = None) -> Tuple[str, bytes]:
        """Return ``(filename, json bytes)`` for a downloadable backup."""
        now = now or datetime.now()
        data = store_to_snapshot(store)
        data["backupDate"] = now.isoformat()
        blob = json.dumps(data, ensure_ascii=False, indent=2).encode("utf-8")
        return backup_filename(self.config.backup_prefix, now.date()), blob

    def import_snapshot(self, blob: Union[bytes, str, Mapping[str, Any]]) -> RecordStore:
        """
        Parse and validate a backup; raise :class:`SnapshotImportError` on rejection.

        A blob is accepted only when one of :data:`IMPORT_KEYS` holds a
        list; missing collections are read as empty.  Nothing is mutated
        here; the caller swaps the returned store in.
        """
        data = self._decode(blob)
        if not any(isinstance(data.get(key), list) for key in IMPORT_KEYS):
            raise SnapshotImportError("Invalid backup file format")
        return store_from_snapshot(data, clock=self.clock, strict=True)

    @staticmethod
    def _decode(blob: Union[bytes, str, Mapping[str, Any]]) -> Mapping[str, Any]:
        if isinstance(blob, Mapping):
            return blob
        try:
            if isinstance(blob, bytes):
                blob = blob.decode("utf-8")
            data = json.loads(blob)
        except (UnicodeDecodeError, ValueError, TypeError) as e:
            raise SnapshotImportError(f"Backup is not valid JSON: {e}") from e
        if not isinstance(data, dict):
            raise SnapshotImportError("Invalid backup file format")
        return data


class AutoSaver:
    """
    Save-after-mutation hook with a one-shot initial-mount latch.

    While armed, a store with every collection empty is not written (it
    would overwrite a snapshot that has not been loaded yet).  The first
    successful save disarms the latch for good.
    """

    def __init__(self, gateway: PersistenceGateway) -> None:
        self.gateway = gateway
        self.armed = True

    def __call__(self, store: RecordStore) -> Optional[bool]:
        """Return None when skipped, otherwise whether the save succeeded."""
        if self.armed and store.is_empty():
            logger.debug("Skipping initial save of an empty store")
            return None
        ok = self.gateway.save(store)
        if ok:
            self.armed = False
        return ok
