"""
tests/test_session.py
=====================

StoreSession: open/seed, auto-save after mutations, backup restore.
"""

import json
from datetime import date

import pytest

from saher.errors import SnapshotImportError
from saher.models import Category, LifecycleStatus, SimpleRecord
from saher.persistence import PersistenceGateway
from saher.session import StoreSession

TODAY = date(2025, 6, 1)


@pytest.fixture
def session(gateway):
    return StoreSession(gateway=gateway).open()


def _saved(gateway):
    return json.loads(gateway.storage.get(gateway.config.storage_key))


def test_open_seeds_and_persists(session, gateway):
    assert len(session.store) == 21
    assert not session.autosave.armed
    assert len(_saved(gateway)["commercialLicenses"]) == 3


def test_open_prefers_saved_snapshot(storage):
    gateway = PersistenceGateway(storage=storage, clock=lambda: TODAY, seed=lambda: {})
    storage.set(gateway.config.storage_key, json.dumps(
        {"otherTopicsData": [{"id": 5, "name": "Permit", "number": "P", "expiryDate": "2025-07-01"}]}
    ))
    session = StoreSession(gateway=gateway).open()
    [rec] = session.store.records(Category.OTHER_TOPIC)
    assert rec.status is LifecycleStatus.SOON_TO_EXPIRE
    assert len(session.store) == 1


def test_open_with_empty_seed_does_not_write(storage):
    gateway = PersistenceGateway(storage=storage, clock=lambda: TODAY, seed=lambda: {})
    session = StoreSession(gateway=gateway).open()
    assert session.store.is_empty()
    assert session.autosave.armed
    assert storage.get(gateway.config.storage_key) is None


def test_create_is_saved(session, gateway):
    result = session.create(Category.TRADEMARK_CERT, SimpleRecord(name="Slogan", expiry_date="2029-01-01"))
    assert result.ok and result.changed
    names = [r["name"] for r in _saved(gateway)["trademarkCerts"]]
    assert "Slogan" in names


def test_archive_and_restore_are_saved(session, gateway):
    session.archive_record(Category.COMMERCIAL_LICENSE, 1)
    saved = _saved(gateway)
    assert [a["id"] for a in saved["archivedRecords"]] == [1]
    assert 1 not in [r["id"] for r in saved["commercialLicenses"]]

    session.restore(1)
    saved = _saved(gateway)
    assert saved["archivedRecords"] == []
    assert 1 in [r["id"] for r in saved["commercialLicenses"]]


def test_unknown_category_reports_error_without_saving(session, gateway, monkeypatch):
    calls = []
    monkeypatch.setattr(gateway, "save", lambda store: calls.append(store) or True)
    result = session.create("bogus", SimpleRecord(name="x"))
    assert not result.ok
    assert calls == []


def test_restore_backup_replaces_store(session):
    blob = json.dumps({"commercialLicenses": [{"id": 77, "name": "Only", "number": "N",
                                               "expiryDate": "2024-01-01"}]})
    assert session.restore_backup(blob)
    assert len(session.store) == 1
    assert session.store.get(Category.COMMERCIAL_LICENSE, 77).status is LifecycleStatus.EXPIRED


def test_rejected_backup_leaves_store_untouched(session, gateway):
    before = _saved(gateway)
    with pytest.raises(SnapshotImportError):
        session.restore_backup(b'{"unrelated": true}')
    assert len(session.store) == 21
    assert _saved(gateway) == before


def test_export_backup(session):
    filename, blob = session.export_backup()
    assert filename.startswith("SAHER_Backup_")
    assert len(json.loads(blob)["procedures"]) == 2


def test_check_notifications_uses_session_clock(session):
    result = session.check_notifications()
    assert [r.name for r in result.expiring] == ["Warehouse lease"]
    assert result.should_show
    session.dismiss_notifications()
    assert not session.check_notifications().should_show


def test_backup_with_only_archive_is_rejected(session):
    with pytest.raises(SnapshotImportError):
        session.restore_backup(b'{"archivedRecords": []}')
    assert len(session.store) == 21


def test_backup_needs_one_core_collection(session):
    blob = json.dumps({"procedures": [], "trademarkCerts": [{"id": 9, "name": "Mark", "expiryDate": "2030-01-01"}]})
    assert session.restore_backup(blob)
    assert [r.id for r in session.store.records(Category.TRADEMARK_CERT)] == [9]
    assert session.store.records(Category.COMMERCIAL_LICENSE) == []
