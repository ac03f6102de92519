"""
saher.errors
============

Exception types and the :class:`Result` value returned by store
operations that must never raise into an interactive caller.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


class SaherError(Exception):
    """Base class for every error raised or reported by the package."""


class UnknownCategoryError(SaherError):
    """A category tag that does not map to any record collection."""

    def __init__(self, tag: Any) -> None:
        super().__init__(f"unknown record category {tag!r}")
        self.tag = tag


class InvalidRecordError(SaherError, ValueError):
    """Record fields that cannot be turned into a record of their category."""


class SnapshotImportError(SaherError, ValueError):
    """A backup blob was rejected; the live store has not been touched."""


@dataclass
class Result:
    """
    Outcome of a store / archive operation.

    ``ok`` is False only when ``error`` is set.  ``changed`` tells the
    caller whether any collection was mutated (and therefore whether an
    auto-save is due).
    """
    ok: bool = True
    changed: bool = False
    record: Any = None
    error: Optional[SaherError] = None

    @classmethod
    def done(cls, record: Any = None) -> "Result":
        return cls(ok=True, changed=True, record=record)

    @classmethod
    def noop(cls) -> "Result":
        return cls(ok=True, changed=False)

    @classmethod
    def failed(cls, error: SaherError, changed: bool = False) -> "Result":
        return cls(ok=False, changed=changed, error=error)
