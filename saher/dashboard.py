"""
saher.dashboard
===============

Read-side aggregation over a :class:`~saher.store.RecordStore`: status
counts per category and overall, compliance rate, total cost, a flattened
"all records" view, text search and calendar look-ups.  Nothing here
mutates the store.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Dict, Iterable, List, Optional, Union

from .models import (
    ArchivedRecord,
    Category,
    DualTrackRecord,
    LifecycleStatus,
    ProcedureRecord,
    Record,
    SimpleRecord,
)
from .status import parse_iso_date, reconcile, status_weight
from .store import RecordStore


@dataclass
class StatusCounts:
    total: int = 0
    active: int = 0
    soon: int = 0
    expired: int = 0

    def add(self, status: LifecycleStatus) -> None:
        self.total += 1
        if status is LifecycleStatus.ACTIVE:
            self.active += 1
        elif status is LifecycleStatus.SOON_TO_EXPIRE:
            self.soon += 1
        elif status is LifecycleStatus.EXPIRED:
            self.expired += 1

    def as_dict(self) -> Dict[str, int]:
        return {"total": self.total, "active": self.active, "soon": self.soon, "expired": self.expired}


@dataclass
class Overview:
    total_records: int
    compliance_rate: int
    counts: StatusCounts
    total_cost: Union[int, float]
    categories: Dict[Category, StatusCounts] = field(default_factory=dict)
    overall_status: LifecycleStatus = LifecycleStatus.ACTIVE

    def as_dict(self) -> Dict[str, object]:
        return {
            "totalRecords": self.total_records,
            "complianceRate": self.compliance_rate,
            "activeCount": self.counts.active,
            "soonCount": self.counts.soon,
            "expiredCount": self.counts.expired,
            "totalCost": self.total_cost,
            "overallStatus": self.overall_status.value,
            "categories": {c.value: s.as_dict() for c, s in self.categories.items()},
        }


@dataclass
class UnifiedRecord:
    """One row of the "all records" listing."""
    id: Optional[int]
    category: Category
    name: str
    number: str
    expiry_date: Optional[str]
    status: LifecycleStatus
    cost: Union[int, float]
    notes: Optional[str] = None

    def as_dict(self) -> Dict[str, object]:
        return {
            "id": self.id,
            "category": self.category.value,
            "name": self.name,
            "number": self.number,
            "expiryDate": self.expiry_date,
            "status": self.status.value,
            "cost": self.cost,
            "notes": self.notes,
        }


def record_cost(record: Record) -> Union[int, float]:
    if isinstance(record, DualTrackRecord):
        return record.total_cost
    if isinstance(record, SimpleRecord):
        return record.cost or 0
    return 0


def category_stats(records: Iterable[Record]) -> StatusCounts:
    counts = StatusCounts()
    for rec in records:
        counts.add(rec.status)
    return counts


def overview(store: RecordStore) -> Overview:
    """Dashboard figures for the whole store."""
    categories: Dict[Category, StatusCounts] = {}
    counts = StatusCounts()
    total_cost: Union[int, float] = 0
    for category in Category:
        if not category.has_status:
            continue
        records = store.records(category)
        categories[category] = category_stats(records)
        for rec in records:
            counts.add(rec.status)
            total_cost += record_cost(rec)

    procedures = len(store.records(Category.PROCEDURE))
    rate = round(counts.active / counts.total * 100) if counts.total else 0
    return Overview(
        total_records=counts.total + procedures,
        compliance_rate=rate,
        counts=counts,
        total_cost=total_cost,
        categories=categories,
        overall_status=reconcile(rec.status for rec in store.live_records()),
    )


def unified_records(store: RecordStore) -> List[UnifiedRecord]:
    """Every status-bearing live record flattened to one shape."""
    rows = []
    for category, rec in store.live_items():
        if isinstance(rec, DualTrackRecord):
            expiry = rec.documented_expiry_date or rec.internal_expiry_date
        else:
            expiry = rec.expiry_date
        rows.append(UnifiedRecord(rec.id, category, rec.name, rec.number, expiry or None,
                                  rec.status, record_cost(rec), rec.notes))
    return rows


def sort_records(rows: Iterable[UnifiedRecord]) -> List[UnifiedRecord]:
    """Most severe status first, then earliest expiry; undated rows last."""
    def key(row: UnifiedRecord):
        expiry = parse_iso_date(row.expiry_date)
        return (status_weight(row.status), expiry is None, expiry or date.max)
    return sorted(rows, key=key)


def due_on(store: RecordStore, day: date) -> List[UnifiedRecord]:
    """Calendar look-up: records whose first present date falls on *day*."""
    return [row for row in unified_records(store) if parse_iso_date(row.expiry_date) == day]


# ---------------------------------------------------------------------------
# Search
# ---------------------------------------------------------------------------
def _contains(query: str, *values: Optional[str]) -> bool:
    return any(query in (v or "").lower() for v in values)


def matches(item: Union[Record, ArchivedRecord], query: str) -> bool:
    """Case-insensitive substring match over the searchable fields."""
    query = query.lower()
    if isinstance(item, ProcedureRecord):
        return _contains(query, item.license_name, item.authority, item.contact_numbers, item.email,
                         item.website_name, item.website_url, item.username, item.notes)
    return _contains(query, item.name, item.number, item.notes)


def search(store: RecordStore, query: str) -> RecordStore:
    """A new store holding only the records matching *query*."""
    collections = {c: [r for r in store.records(c) if matches(r, query)] for c in Category}
    archived = [a for a in store.archived if matches(a, query)]
    return RecordStore(collections, archived, clock=store.clock)


def tab_counts(store: RecordStore) -> Dict[str, int]:
    """Record counts per view of the front end."""
    n = {c: len(store.records(c)) for c in Category}
    all_records = sum(v for c, v in n.items() if c.has_status)
    return {
        "dashboard": all_records + n[Category.PROCEDURE],
        "licenses": n[Category.COMMERCIAL_LICENSE] + n[Category.OPERATIONAL_LICENSE]
        + n[Category.CIVIL_DEFENSE_CERT],
        "contracts": n[Category.LEASE_CONTRACT],
        "supplierContracts": n[Category.GENERAL_CONTRACT],
        "other": n[Category.SPECIAL_AGENCY],
        "trademarks": n[Category.TRADEMARK_CERT],
        "otherTopics": n[Category.OTHER_TOPIC],
        "procedures": n[Category.PROCEDURE],
        "allRecords": all_records,
        "archive": len(store.archived),
    }
