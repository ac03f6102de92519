"""
saher.status
============

Expiry classification and status reconciliation.

:func:`classify` maps an ISO date string to a :class:`LifecycleStatus`
relative to *today* (a calendar day, never an instant, so the result does
not depend on the time of day).  :func:`reconcile` folds several statuses
into the most severe one.

Both functions are total: bad input never raises.
"""

from __future__ import annotations

from datetime import date
from typing import Iterable, Optional

from .models import LifecycleStatus

# Records expiring within this many days (inclusive) are SOON_TO_EXPIRE.
EXPIRY_WINDOW_DAYS = 120

# Lower weight == more severe.  Used by reconcile() and by record listings.
_WEIGHTS = {
    LifecycleStatus.EXPIRED: 1,
    LifecycleStatus.SOON_TO_EXPIRE: 2,
    LifecycleStatus.ACTIVE: 3,
}
_UNKNOWN_WEIGHT = 4


def parse_iso_date(value: Optional[str]) -> Optional[date]:
    """
    Parse ``YYYY-MM-DD`` into a :class:`datetime.date`.

    Returns None for empty input, anything that is not exactly three
    dash-separated integers, or an impossible calendar day.
    """
    if not value or not isinstance(value, str):
        return None
    parts = value.strip().split("-")
    if len(parts) != 3:
        return None
    try:
        year, month, day = (int(p) for p in parts)
        return date(year, month, day)
    except ValueError:
        return None


def remaining_days(expiry_date: Optional[str], today: Optional[date] = None) -> Optional[int]:
    """Days from *today* until *expiry_date*; negative once expired, None if unknown."""
    expiry = parse_iso_date(expiry_date)
    if expiry is None:
        return None
    today = today or date.today()
    return (expiry - today).days


def classify(expiry_date: Optional[str], today: Optional[date] = None) -> LifecycleStatus:
    """
    Return the lifecycle status of a record expiring on *expiry_date*.

    Examples
    --------
    >>> classify("2025-05-31", today=date(2025, 6, 1))
    <LifecycleStatus.EXPIRED: 'Expired'>
    >>> classify("2025-09-29", today=date(2025, 6, 1))   # +120 days
    <LifecycleStatus.SOON_TO_EXPIRE: 'SoonToExpire'>
    >>> classify(None)
    <LifecycleStatus.ACTIVE: 'Active'>
    """
    days = remaining_days(expiry_date, today)
    if days is None:
        return LifecycleStatus.ACTIVE
    if days < 0:
        return LifecycleStatus.EXPIRED
    if days <= EXPIRY_WINDOW_DAYS:
        return LifecycleStatus.SOON_TO_EXPIRE
    return LifecycleStatus.ACTIVE


def is_expiring(expiry_date: Optional[str], today: Optional[date] = None) -> bool:
    """True when *expiry_date* is inside the warning window or already past."""
    days = remaining_days(expiry_date, today)
    return days is not None and days <= EXPIRY_WINDOW_DAYS


def status_weight(status: Optional[LifecycleStatus]) -> int:
    return _WEIGHTS.get(status, _UNKNOWN_WEIGHT)


def reconcile(statuses: Iterable[Optional[LifecycleStatus]]) -> LifecycleStatus:
    """
    Combine sub-statuses into one: EXPIRED > SOON_TO_EXPIRE > ACTIVE.

    None (or anything that is not a status) is ignored and an empty input
    is ACTIVE.
    """
    present = [s for s in statuses if s in _WEIGHTS]
    if not present:
        return LifecycleStatus.ACTIVE
    return min(present, key=status_weight)


def describe_remaining(expiry_date: Optional[str], today: Optional[date] = None) -> str:
    """Human readable remaining period, e.g. ``"12 days"``."""
    days = remaining_days(expiry_date, today)
    if days is None:
        return "-"
    if days < 0:
        return f"expired {abs(days)} days ago"
    if days == 0:
        return "expires today"
    return f"{days} days"
