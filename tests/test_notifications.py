"""
tests/test_notifications.py
===========================

Unit tests for saher.notifications (scan + once-a-day banner rule).
"""

from datetime import date, timedelta

from saher.models import DualTrackRecord, LifecycleStatus, ProcedureRecord, SimpleRecord
from saher.notifications import NotificationCenter, scan
from saher.status import classify

TODAY = date(2025, 6, 1)


def _iso(days: int) -> str:
    return (TODAY + timedelta(days=days)).isoformat()


def _records():
    return [
        SimpleRecord(id=1, name="expired", expiry_date=_iso(-10)),
        SimpleRecord(id=2, name="soon", expiry_date=_iso(120)),
        SimpleRecord(id=3, name="later", expiry_date=_iso(121)),
        SimpleRecord(id=4, name="open-ended"),
        SimpleRecord(id=5, name="garbage", expiry_date="31/12/2025"),
        DualTrackRecord(id=6, name="lease", documented_expiry_date=_iso(400), internal_expiry_date=_iso(30)),
        DualTrackRecord(id=7, name="long lease", documented_expiry_date=_iso(400), internal_expiry_date=""),
        ProcedureRecord(id=8, license_name="procedure"),
    ]


def test_scan_selects_expiring_and_expired():
    names = [r.name for r in scan(_records(), TODAY)]
    assert names == ["expired", "soon", "lease"]


def test_scan_is_superset_of_expired():
    records = _records()
    expiring = scan(records, TODAY)
    for rec in records:
        if isinstance(rec, SimpleRecord) and classify(rec.expiry_date, TODAY) is LifecycleStatus.EXPIRED:
            assert rec in expiring


def test_scan_does_not_mutate_records():
    records = _records()
    before = [r.to_dict() for r in records]
    scan(records, TODAY)
    assert [r.to_dict() for r in records] == before


def test_banner_shown_once_per_day_unless_dismissed(storage):
    center = NotificationCenter(storage)
    first = center.evaluate(_records(), TODAY)
    assert first.should_show
    assert storage.get(center.key) == TODAY.isoformat()

    # same day, not dismissed: still shown
    assert center.evaluate(_records(), TODAY).should_show

    center.dismiss()
    assert not center.evaluate(_records(), TODAY).should_show

    # next day the banner comes back even though the session dismissed it
    assert center.evaluate(_records(), TODAY + timedelta(days=1)).should_show


def test_dismissal_is_session_scoped(storage):
    center = NotificationCenter(storage)
    center.evaluate(_records(), TODAY)
    center.dismiss()

    new_session = NotificationCenter(storage)
    assert new_session.evaluate(_records(), TODAY).should_show


def test_nothing_expiring_hides_banner_and_keeps_marker(storage):
    center = NotificationCenter(storage)
    result = center.evaluate([SimpleRecord(id=1, expiry_date=_iso(365))], TODAY)
    assert not result.should_show
    assert result.expiring == []
    assert center.last_checked() is None
