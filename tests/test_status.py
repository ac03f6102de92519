"""
tests/test_status.py
====================

Unit tests for saher.status.classify / reconcile.
"""

from datetime import date, timedelta

import pytest

from saher.models import LifecycleStatus
from saher.status import (
    EXPIRY_WINDOW_DAYS,
    classify,
    describe_remaining,
    parse_iso_date,
    reconcile,
    remaining_days,
    status_weight,
)

TODAY = date(2025, 6, 1)
ACTIVE, SOON, EXPIRED = LifecycleStatus.ACTIVE, LifecycleStatus.SOON_TO_EXPIRE, LifecycleStatus.EXPIRED


def _iso(days: int) -> str:
    return (TODAY + timedelta(days=days)).isoformat()


def test_yesterday_is_expired():
    assert classify("2025-05-31", TODAY) is EXPIRED


def test_today_is_soon_to_expire():
    assert classify("2025-06-01", TODAY) is SOON


def test_window_boundaries():
    """Day +120 is still inside the window, day +121 is not."""
    assert EXPIRY_WINDOW_DAYS == 120
    assert classify(_iso(120), TODAY) is SOON
    assert classify(_iso(121), TODAY) is ACTIVE


@pytest.mark.parametrize("value", [None, ""])
def test_missing_date_is_active(value):
    assert classify(value, TODAY) is ACTIVE


@pytest.mark.parametrize("value", ["garbage", "2025-06", "2025-06-01-02", "2025-13-01", "2025-02-30", "yyyy-mm-dd"])
def test_malformed_date_fails_open(value):
    assert classify(value, TODAY) is ACTIVE
    assert remaining_days(value, TODAY) is None


def test_classify_is_deterministic():
    results = {classify("2025-07-15", TODAY) for _ in range(5)}
    assert results == {SOON}


def test_default_today_uses_current_day():
    assert classify(date.today().isoformat()) is SOON
    assert classify((date.today() - timedelta(days=1)).isoformat()) is EXPIRED


def test_parse_iso_date_tolerates_unpadded_parts():
    assert parse_iso_date("2025-6-1") == date(2025, 6, 1)


def test_remaining_days_and_description():
    assert remaining_days(_iso(10), TODAY) == 10
    assert remaining_days(_iso(-3), TODAY) == -3
    assert describe_remaining(_iso(10), TODAY) == "10 days"
    assert describe_remaining(_iso(0), TODAY) == "expires today"
    assert describe_remaining(_iso(-3), TODAY) == "expired 3 days ago"
    assert describe_remaining(None, TODAY) == "-"


def test_reconcile_precedence():
    assert reconcile([ACTIVE, EXPIRED]) is EXPIRED
    assert reconcile([SOON, ACTIVE]) is SOON
    assert reconcile([SOON, EXPIRED, ACTIVE]) is EXPIRED


def test_reconcile_empty_and_absent():
    assert reconcile([]) is ACTIVE
    assert reconcile([None, None]) is ACTIVE
    assert reconcile([None, SOON]) is SOON


def test_reconcile_is_order_independent():
    statuses = [ACTIVE, SOON, EXPIRED]
    assert reconcile(statuses) is reconcile(list(reversed(statuses)))
    assert reconcile([reconcile([ACTIVE, SOON]), EXPIRED]) is reconcile([ACTIVE, reconcile([SOON, EXPIRED])])


def test_status_weight_orders_by_severity():
    assert status_weight(EXPIRED) < status_weight(SOON) < status_weight(ACTIVE) < status_weight(None)
