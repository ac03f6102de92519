"""
tests/test_store.py
===================

Unit tests for saher.store.RecordStore
"""

from datetime import date

from saher.errors import UnknownCategoryError
from saher.models import Category, DualTrackRecord, LifecycleStatus, ProcedureRecord, SimpleRecord
from saher.store import IdSource, RecordStore, next_id, refresh_status

TODAY = date(2025, 6, 1)


def _store() -> RecordStore:
    return RecordStore(clock=lambda: TODAY)


def test_create_assigns_unique_ids_across_categories():
    store = _store()
    a = store.create(Category.COMMERCIAL_LICENSE, SimpleRecord(name="A")).record
    b = store.create(Category.OPERATIONAL_LICENSE, SimpleRecord(name="B")).record
    c = store.create("commercialLicense", SimpleRecord(name="C")).record
    assert len({a.id, b.id, c.id}) == 3
    assert a.id < b.id < c.id


def test_create_ignores_incoming_id_and_copies_payload():
    store = _store()
    payload = SimpleRecord(id=1, name="A")
    created = store.create(Category.OTHER_TOPIC, payload).record
    assert created.id != 1
    assert payload.id == 1


def test_ids_never_reused_after_delete():
    store = _store()
    first = store.create(Category.OTHER_TOPIC, SimpleRecord(name="A")).record
    store.remove(Category.OTHER_TOPIC, first.id)
    second = store.create(Category.OTHER_TOPIC, SimpleRecord(name="B")).record
    assert second.id > first.id


def test_id_source_stays_above_observed_ids():
    ids = IdSource()
    ids.observe(10 ** 15)
    assert ids.next() == 10 ** 15 + 1


def test_next_id_is_shared_with_stores():
    first = next_id()
    created = _store().create(Category.OTHER_TOPIC, SimpleRecord(name="A")).record
    assert first < created.id < next_id()


def test_loaded_ids_are_observed():
    store = RecordStore({Category.OTHER_TOPIC: [SimpleRecord(id=10 ** 15)]}, clock=lambda: TODAY)
    assert store.create(Category.OTHER_TOPIC, SimpleRecord()).record.id > 10 ** 15


def test_create_computes_status():
    store = _store()
    rec = store.create(Category.COMMERCIAL_LICENSE, SimpleRecord(name="Old", expiry_date="2020-01-01")).record
    assert rec.status is LifecycleStatus.EXPIRED


def test_update_recomputes_stale_status():
    store = _store()
    rec = store.create(Category.GENERAL_CONTRACT, SimpleRecord(name="S", expiry_date="2030-01-01")).record
    stale = SimpleRecord(id=rec.id, name="S", expiry_date="2025-07-01", status=LifecycleStatus.ACTIVE)
    result = store.update(Category.GENERAL_CONTRACT, stale)
    assert result.changed
    assert store.get(Category.GENERAL_CONTRACT, rec.id).status is LifecycleStatus.SOON_TO_EXPIRE


def test_update_unknown_id_is_noop():
    store = _store()
    result = store.update(Category.GENERAL_CONTRACT, SimpleRecord(id=42, name="ghost"))
    assert result.ok and not result.changed
    assert store.records(Category.GENERAL_CONTRACT) == []


def test_save_dispatches_on_id():
    store = _store()
    created = store.save(Category.SPECIAL_AGENCY, SimpleRecord(name="Agency")).record
    created.name = "Renamed"
    store.save(Category.SPECIAL_AGENCY, created)
    assert [r.name for r in store.records(Category.SPECIAL_AGENCY)] == ["Renamed"]


def test_unknown_category_returns_error_result():
    store = _store()
    result = store.save("spaceshipLicense", SimpleRecord(name="X"))
    assert not result.ok
    assert isinstance(result.error, UnknownCategoryError)
    assert len(store) == 0


def test_dual_track_status_reconciled():
    store = _store()
    rec = store.create(Category.LEASE_CONTRACT, DualTrackRecord(
        name="HQ", documented_expiry_date="2030-01-01", internal_expiry_date="2025-05-01",
    )).record
    assert rec.documented_status is LifecycleStatus.ACTIVE
    assert rec.internal_status is LifecycleStatus.EXPIRED
    assert rec.status is LifecycleStatus.EXPIRED


def test_dual_track_missing_track_has_no_sub_status():
    rec = refresh_status(DualTrackRecord(documented_expiry_date="2025-07-01", internal_expiry_date=""), TODAY)
    assert rec.internal_status is None
    assert rec.status is LifecycleStatus.SOON_TO_EXPIRE


def test_procedures_have_no_status_and_are_not_live_records():
    store = _store()
    store.create(Category.PROCEDURE, ProcedureRecord(license_name="Renewal"))
    store.create(Category.COMMERCIAL_LICENSE, SimpleRecord(name="A"))
    assert len(store) == 2
    assert [r.name for r in store.live_records()] == ["A"]


def test_hydrate_recomputes_stale_cached_status():
    stale = SimpleRecord(id=1, expiry_date="2020-01-01", status=LifecycleStatus.ACTIVE)
    store = RecordStore({Category.COMMERCIAL_LICENSE: [stale]}, clock=lambda: TODAY).hydrate()
    assert store.get(Category.COMMERCIAL_LICENSE, 1).status is LifecycleStatus.EXPIRED


def test_find_by_status_and_iteration():
    store = _store()
    store.create(Category.COMMERCIAL_LICENSE, SimpleRecord(name="old", expiry_date="2020-01-01"))
    store.create(Category.TRADEMARK_CERT, SimpleRecord(name="new", expiry_date="2030-01-01"))
    assert [r.name for r in store.find_by_status(LifecycleStatus.EXPIRED)] == ["old"]
    assert {r.name for r in store} == {"old", "new"}


def test_records_returns_copy():
    store = _store()
    store.create(Category.COMMERCIAL_LICENSE, SimpleRecord(name="A"))
    store.records(Category.COMMERCIAL_LICENSE).clear()
    assert len(store.records(Category.COMMERCIAL_LICENSE)) == 1
    assert store.records("bogus") == []
