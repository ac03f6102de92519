"""
saher.archive
=============

Soft-delete lifecycle for live records.

A record is either *live* (in its category collection) or *archived* (in
``RecordStore.archived``).  Transitions:

- ``archive``  live → archived, newest first
- ``restore``  archived → live, same id, original payload
- ``purge``    archived → gone for good
- ``edit``     archived → archived, with the change merged into both the
  wrapper and the preserved original payload
"""

from __future__ import annotations

import copy
import logging
from datetime import datetime
from typing import Any, Callable, Mapping, Optional, Tuple

from .errors import InvalidRecordError, Result, UnknownCategoryError
from .models import ArchivedRecord, Category, WireRecord, record_from_dict
from .store import RecordStore

logger = logging.getLogger(__name__)


class ArchiveManager:
    """Moves records between the live collections and the archive of *store*."""

    def __init__(self, store: RecordStore, now: Optional[Callable[[], datetime]] = None) -> None:
        self.store = store
        self.now = now or datetime.now

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _find(self, record_id: int) -> Tuple[int, Optional[ArchivedRecord]]:
        for index, item in enumerate(self.store.archived):
            if item.id == record_id:
                return index, item
        return -1, None

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def get(self, record_id: int) -> Optional[ArchivedRecord]:
        return self._find(record_id)[1]

    def archive(self, category: Any, record_id: int, now: Optional[datetime] = None) -> Result:
        """Soft-delete a live record.  Unknown ids are a no-op."""
        parsed = Category.parse(category)
        if parsed is None:
            logger.warning(f"Ignoring archive for unknown category {category!r}")
            return Result.failed(UnknownCategoryError(category))
        record = self.store.remove(parsed, record_id)
        if record is None:
            return Result.noop()
        stamp = (now or self.now()).isoformat()
        item = ArchivedRecord.wrap(record, parsed, stamp)
        self.store.archived.insert(0, item)
        logger.info(f"Archived {parsed.value} #{record_id}")
        return Result.done(item)

    def restore(self, record_id: int) -> Result:
        """
        Put an archived record back into its live collection.

        When ``original_type`` is not a known category the entry is still
        removed from the archive and the record is not re-inserted anywhere;
        the returned result carries the error.
        """
        index, item = self._find(record_id)
        if item is None:
            return Result.noop()
        del self.store.archived[index]
        category = item.category
        if category is None:
            logger.warning(
                f"Archived record #{record_id} has unknown type {item.original_type!r}; "
                "it was dropped instead of restored"
            )
            return Result.failed(UnknownCategoryError(item.original_type), changed=True)
        original = item.original_data
        if not isinstance(original, WireRecord):
            original = record_from_dict(category, original)
        result = self.store.insert(category, copy.deepcopy(original))
        logger.info(f"Restored {category.value} #{record_id}")
        return result

    def purge(self, record_id: int) -> Result:
        """Permanently delete an archived record."""
        index, item = self._find(record_id)
        if item is None:
            return Result.noop()
        del self.store.archived[index]
        logger.info(f"Permanently deleted archived record #{record_id}")
        return Result.done(item)

    def edit(self, record_id: int, changes: Mapping[str, Any]) -> Result:
        """
        Merge *changes* (camelCase record fields) into an archived record.

        Both the wrapper's top-level fields and ``original_data`` receive the
        change, so a later restore brings it back.  ``id`` cannot be changed.
        Changes that do not fit the record type leave it untouched and
        return a failed result.
        """
        index, item = self._find(record_id)
        if item is None:
            return Result.noop()
        changes = {k: copy.deepcopy(v) for k, v in changes.items() if k != "id"}

        merged_original = {**item.original_dict(), **changes}
        category = item.category
        wrapper = {**item.to_dict(), **changes}
        try:
            original = record_from_dict(category, merged_original) if category else merged_original
            updated = ArchivedRecord.from_parts(wrapper, item.original_type, item.deletion_date, original)
        except (TypeError, ValueError) as e:
            logger.warning(f"Rejected edit of archived record #{record_id}: {e}")
            return Result.failed(InvalidRecordError(str(e)))
        self.store.archived[index] = updated
        return Result.done(updated)
