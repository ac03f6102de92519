"""
SAHER
=====

A small record keeper for licenses, contracts and administrative
procedures, built around one question: *what is about to expire?*

Import structure
----------------
`import saher` stays cheap: the database engine and the HTTP layer are
only touched when :pymod:`saher.db` / :pymod:`api` are imported.

Sub‑modules
~~~~~~~~~~~
- :pymod:`saher.models`         – record dataclasses, ``LifecycleStatus`` and ``Category`` enums
- :pymod:`saher.status`         – ``classify`` / ``reconcile`` (120-day expiry window)
- :pymod:`saher.store`          – ``RecordStore`` in‑memory collections
- :pymod:`saher.archive`        – ``ArchiveManager`` soft delete / restore
- :pymod:`saher.persistence`    – ``PersistenceGateway`` snapshot load / save / backup
- :pymod:`saher.notifications`  – near-expiry scan and banner rule
- :pymod:`saher.dashboard`      – counts, compliance rate, search
- :pymod:`saher.session`        – ``StoreSession`` owned store handle

Quick start
-----------
>>> from datetime import date
>>> from saher.models import Category, SimpleRecord
>>> from saher.store import RecordStore
>>> store = RecordStore(clock=lambda: date(2025, 6, 1))
>>> rec = store.create(Category.COMMERCIAL_LICENSE, SimpleRecord(name="Trade", expiry_date="2025-07-01")).record
>>> rec.status
<LifecycleStatus.SOON_TO_EXPIRE: 'SoonToExpire'>

"""

__all__ = [
    "models",
    "status",
    "store",
    "archive",
    "persistence",
    "notifications",
    "dashboard",
    "session",
]

__version__ = "0.1.0"
