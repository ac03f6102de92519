"""
saher.notifications
===================

Near-expiry alerts.

:func:`scan` is a pure read of the live records.  :class:`NotificationCenter`
adds the "once per calendar day unless dismissed" rule: the date of the
last check is persisted in local storage, the dismissal flag lives only as
long as the session object.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, List, Optional

from sqlalchemy.exc import SQLAlchemyError

from .db import LocalStorage
from .models import ArchivedRecord, ProcedureRecord, Record
from .settings import settings
from .status import is_expiring

logger = logging.getLogger(__name__)


def scan(records: Iterable[Record], today: Optional[date] = None) -> List[Record]:
    """
    Records with at least one present date inside the warning window.

    Already expired dates count too.  Procedures, archive wrappers and
    unparseable dates are ignored.
    """
    today = today or date.today()
    expiring = []
    for rec in records:
        if isinstance(rec, (ProcedureRecord, ArchivedRecord)):
            continue
        if any(is_expiring(d, today) for d in rec.dates()):
            expiring.append(rec)
    return expiring


@dataclass
class NotificationResult:
    expiring: List[Record] = field(default_factory=list)
    should_show: bool = False


class NotificationCenter:
    """Decides whether the expiry banner should be shown."""

    def __init__(self, storage: LocalStorage, key: Optional[str] = None) -> None:
        self.storage = storage
        self.key = key or settings.last_check_key
        self.dismissed = False

    def last_checked(self) -> Optional[str]:
        try:
            return self.storage.get(self.key)
        except SQLAlchemyError as e:
            logger.error(f"Could not read last notification check: {e}")
            return None

    def evaluate(self, records: Iterable[Record], today: Optional[date] = None) -> NotificationResult:
        today = today or date.today()
        expiring = scan(records, today)
        if not expiring:
            return NotificationResult([], False)

        today_str = today.isoformat()
        should_show = self.last_checked() != today_str or not self.dismissed
        try:
            self.storage.set(self.key, today_str)
        except SQLAlchemyError as e:
            logger.error(f"Could not persist notification check date: {e}")
        return NotificationResult(expiring, should_show)

    def dismiss(self) -> None:
        self.dismissed = True
