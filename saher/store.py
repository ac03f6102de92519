"""
saher.store
===========

In-memory record store: one list per :class:`~saher.models.Category` plus
the archive list.  This is the root aggregate that gets persisted as a
single snapshot.

Every write goes through :func:`refresh_status`, the one place that turns
expiry dates into cached statuses.  Unknown category tags never raise;
the operation returns a :class:`~saher.errors.Result` carrying an
:class:`~saher.errors.UnknownCategoryError` instead.
"""

from __future__ import annotations

import copy
import logging
import threading
import time
from datetime import date
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple

from .errors import Result, UnknownCategoryError
from .models import (
    ArchivedRecord,
    Category,
    DualTrackRecord,
    LifecycleStatus,
    Record,
    SimpleRecord,
)
from .status import classify, reconcile

logger = logging.getLogger(__name__)

Clock = Callable[[], date]


class IdSource:
    """
    Monotonic id generator shared by every category.

    Ids are millisecond timestamps, bumped past the last id handed out (or
    seen on load) so two calls never return the same value.
    """

    def __init__(self, last: int = 0) -> None:
        self._last = last
        self._lock = threading.Lock()

    def next(self) -> int:
        with self._lock:
            self._last = max(int(time.time() * 1000), self._last + 1)
            return self._last

    def observe(self, used: Optional[int]) -> None:
        """Make sure future ids stay above an id that already exists."""
        if used is None:
            return
        with self._lock:
            self._last = max(self._last, used)


# Process-wide source: ids never collide across stores or categories.
_ids = IdSource()


def next_id() -> int:
    return _ids.next()


def refresh_status(record: Record, today: Optional[date] = None) -> Record:
    """
    Recompute the cached status fields of *record* in place.

    Simple records get ``status`` from ``expiry_date``; lease contracts get
    one status per present track and their reconciliation.  Procedures are
    returned untouched.
    """
    if isinstance(record, DualTrackRecord):
        record.documented_status = (
            classify(record.documented_expiry_date, today) if record.documented_expiry_date else None
        )
        record.internal_status = (
            classify(record.internal_expiry_date, today) if record.internal_expiry_date else None
        )
        record.status = reconcile([record.documented_status, record.internal_status])
    elif isinstance(record, SimpleRecord):
        record.status = classify(record.expiry_date, today)
    return record


class RecordStore:
    """
    Category-scoped collections of live records plus the archive.

    Example
    -------
    >>> store = RecordStore()
    >>> res = store.create(Category.COMMERCIAL_LICENSE, SimpleRecord(name="Trade", expiry_date="2020-01-01"))
    >>> res.record.status
    <LifecycleStatus.EXPIRED: 'Expired'>
    """

    def __init__(
        self,
        collections: Optional[Dict[Category, List[Record]]] = None,
        archived: Optional[List[ArchivedRecord]] = None,
        clock: Optional[Clock] = None,
        ids: Optional[IdSource] = None,
    ) -> None:
        self._collections: Dict[Category, List[Record]] = {c: [] for c in Category}
        for category, items in (collections or {}).items():
            self._collections[category] = list(items)
        self.archived: List[ArchivedRecord] = list(archived or [])
        self.clock: Clock = clock or date.today
        self.ids = ids or _ids
        self._observe_ids()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _resolve(self, tag: Any) -> Tuple[Optional[Category], Optional[List[Record]]]:
        category = Category.parse(tag)
        if category is None:
            return None, None
        return category, self._collections[category]

    @staticmethod
    def _unknown(tag: Any, action: str) -> Result:
        logger.warning(f"Ignoring {action} for unknown category {tag!r}")
        return Result.failed(UnknownCategoryError(tag))

    def _observe_ids(self) -> None:
        for items in self._collections.values():
            for rec in items:
                self.ids.observe(rec.id)
        for item in self.archived:
            self.ids.observe(item.id)

    def today(self) -> date:
        return self.clock()

    # ------------------------------------------------------------------
    # Status chokepoint
    # ------------------------------------------------------------------
    def refresh_status(self, record: Record) -> Record:
        return refresh_status(record, self.today())

    def hydrate(self) -> "RecordStore":
        """Recompute every cached status in the live collections."""
        today = self.today()
        for category, items in self._collections.items():
            if category.has_status:
                for rec in items:
                    refresh_status(rec, today)
        self._observe_ids()
        return self

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def records(self, category: Any) -> List[Record]:
        """Copy of the live list for *category* (empty for unknown tags)."""
        _, items = self._resolve(category)
        return list(items) if items is not None else []

    def get(self, category: Any, record_id: int) -> Optional[Record]:
        _, items = self._resolve(category)
        for rec in items or []:
            if rec.id == record_id:
                return rec
        return None

    def live_items(self) -> Iterator[Tuple[Category, Record]]:
        """(category, record) for every live record that carries a status."""
        for category, items in self._collections.items():
            if category.has_status:
                for rec in items:
                    yield category, rec

    def live_records(self) -> List[Record]:
        return [rec for _, rec in self.live_items()]

    def find_by_status(self, status: LifecycleStatus) -> List[Record]:
        return [rec for rec in self.live_records() if rec.status == status]

    def is_empty(self) -> bool:
        return not self.archived and not any(self._collections.values())

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------
    def create(self, category: Any, record: Record) -> Result:
        """Add *record* under a freshly assigned id."""
        tag = category
        category, items = self._resolve(category)
        if items is None:
            return self._unknown(tag, "create")
        record = copy.deepcopy(record)
        record.id = self.ids.next()
        self.refresh_status(record)
        items.append(record)
        logger.debug(f"Created {category.value} #{record.id}")
        return Result.done(record)

    def update(self, category: Any, record: Record) -> Result:
        """Replace the record with the same id; missing ids are a no-op."""
        tag = category
        category, items = self._resolve(category)
        if items is None:
            return self._unknown(tag, "update")
        for index, existing in enumerate(items):
            if existing.id == record.id:
                record = copy.deepcopy(record)
                self.refresh_status(record)
                items[index] = record
                return Result.done(record)
        logger.debug(f"No {category.value} #{record.id} to update")
        return Result.noop()

    def save(self, category: Any, record: Record) -> Result:
        """Create when *record* has no id yet, otherwise update."""
        if record.id is None:
            return self.create(category, record)
        return self.update(category, record)

    def insert(self, category: Any, record: Record) -> Result:
        """Append *record* as-is (keeping its id); used when restoring from the archive."""
        tag = category
        _, items = self._resolve(category)
        if items is None:
            return self._unknown(tag, "insert")
        self.refresh_status(record)
        self.ids.observe(record.id)
        items.append(record)
        return Result.done(record)

    def remove(self, category: Any, record_id: int) -> Optional[Record]:
        """Detach and return the live record; the archive is the only caller."""
        _, items = self._resolve(category)
        for index, rec in enumerate(items or []):
            if rec.id == record_id:
                return items.pop(index)
        return None

    def replace(self, other: "RecordStore") -> None:
        """Swap in every collection of *other* at once."""
        self._collections = {c: list(other._collections[c]) for c in Category}
        self.archived = list(other.archived)
        self._observe_ids()

    # ------------------------------------------------------------------
    # Dunder helpers
    # ------------------------------------------------------------------
    def __iter__(self) -> Iterator[Record]:
        return iter(self.live_records())

    def __len__(self) -> int:
        return sum(len(items) for items in self._collections.values())
