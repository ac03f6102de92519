"""
tests/test_db.py
================

The key/value table behind LocalStorage.
"""

from datetime import datetime, timezone

from saher.db import KeyValueRow, SessionLocal, put_value


def test_set_then_get(storage):
    storage.set("k", '{"a": 1}')
    assert storage.get("k") == '{"a": 1}'


def test_set_overwrites_and_remove_deletes(storage):
    storage.set("k", "one")
    storage.set("k", "two")
    assert storage.get("k") == "two"
    storage.remove("k")
    assert storage.get("k") is None


def test_missing_key_is_none(storage):
    assert storage.get("nope") is None


def test_row_timestamp_is_timezone_aware():
    row = KeyValueRow(key="k", value="v")
    assert row.updated_at.tzinfo is not None


def test_put_value_stamps_update_time(engine, storage):
    before = datetime.now(timezone.utc).replace(tzinfo=None)
    with SessionLocal(engine) as s:
        put_value(s, "k", "v")
        row = s.get(KeyValueRow, "k")
        assert row.value == "v"
        assert row.updated_at.replace(tzinfo=None) >= before
