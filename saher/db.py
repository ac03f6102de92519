"""
saher.db
========

SQLite persistence layer for SAHER.

The application keeps its state the way a browser app keeps it in local
storage: a handful of string values under fixed keys (the store snapshot,
the last notification check date).  This module exposes:

* ``engine`` – a global SQLModel engine pointing at *saher.db*
* ``SessionLocal`` – a session factory used via ``with SessionLocal() as s:``
* ``KeyValueRow`` – the single key/value table
* ``LocalStorage`` – get / set / remove on that table
* ``create_all()`` – helper to create tables at first run
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Column, Text
from sqlalchemy.engine import Engine
from sqlmodel import Field, Session, SQLModel, create_engine

from .settings import DB_ECHO, DB_URL


# ---------------------------------------------------------------------------
# Engine (SQLite file lives in project root unless SAHER_DB_FILE says otherwise)
# ---------------------------------------------------------------------------
engine = create_engine(DB_URL, echo=DB_ECHO)


# ---------------------------------------------------------------------------
# Session factory
# ---------------------------------------------------------------------------
def SessionLocal(bind: Optional[Engine] = None) -> Session:  # noqa: N802 (factory camel-case)
    """Return a new Session bound to *bind* or the global engine."""
    return Session(bind or engine)


# ---------------------------------------------------------------------------
# ORM model
# ---------------------------------------------------------------------------
class KeyValueRow(SQLModel, table=True):
    """One stored value; ``value`` holds serialised JSON or a plain string."""

    __tablename__ = "local_storage"

    key: str = Field(primary_key=True, index=True)
    value: str = Field(sa_column=Column(Text, nullable=False))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


# ---------------------------------------------------------------------------
# Convenience CRUD helpers
# ---------------------------------------------------------------------------
def get_value(s: Session, key: str) -> Optional[str]:
    """Return the value stored under *key* or *None* if missing."""
    row = s.get(KeyValueRow, key)
    return row.value if row else None


def put_value(s: Session, key: str, value: str) -> None:
    """Insert or overwrite *key* in one commit."""
    s.merge(KeyValueRow(key=key, value=value, updated_at=datetime.now(timezone.utc)))
    s.commit()


def delete_value(s: Session, key: str) -> None:
    row = s.get(KeyValueRow, key)
    if row is not None:
        s.delete(row)
        s.commit()


class LocalStorage:
    """
    Key/value facade over :class:`KeyValueRow`.

    Each call opens its own short session so a failed write never leaves a
    half-open transaction behind.  Errors from SQLAlchemy propagate; callers
    decide whether they are fatal.
    """

    def __init__(self, bind: Optional[Engine] = None) -> None:
        self.engine = bind or engine
        create_all(self.engine)

    def get(self, key: str) -> Optional[str]:
        with SessionLocal(self.engine) as s:
            return get_value(s, key)

    def set(self, key: str, value: str) -> None:
        with SessionLocal(self.engine) as s:
            put_value(s, key, value)

    def remove(self, key: str) -> None:
        with SessionLocal(self.engine) as s:
            delete_value(s, key)


# ---------------------------------------------------------------------------
# Utility: create tables
# ---------------------------------------------------------------------------
def create_all(bind: Optional[Engine] = None) -> None:
    """Create all tables for imported SQLModel subclasses, including KeyValueRow."""
    SQLModel.metadata.create_all(bind or engine)


# ---------------------------------------------------------------------------
# Lightweight CLI
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    """
    Quick bootstrap helper.

    Examples
    --------
    $ python -m saher.db --create        # first-time table creation
    $ python -m saher.db --clear KEY     # drop one stored value
    """
    import argparse
    import textwrap

    parser = argparse.ArgumentParser(
        prog="python -m saher.db",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description=textwrap.dedent(
            """\
            SAHER DB utilities
            ------------------
            --create   Create all SQLModel tables (safe if they already exist)
            --clear    Remove one key from local storage
            """
        ),
    )
    parser.add_argument("--create", action="store_true", help="create tables")
    parser.add_argument("--clear", metavar="KEY", help="remove a stored key")
    args = parser.parse_args()

    if args.create:
        create_all()
        print("✅ saher.db schema initialised")

    if args.clear:
        LocalStorage().remove(args.clear)
        print(f"✅ removed {args.clear}")
