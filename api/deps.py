"""
api.deps
========

FastAPI dependency providers.

`get_session` returns the process-wide :class:`~saher.session.StoreSession`;
it is opened (snapshot loaded or seeded) on first use.  Tests swap it out
through ``app.dependency_overrides``.
"""

from functools import lru_cache

from fastapi import HTTPException

from saher.models import Category
from saher.session import StoreSession


@lru_cache
def get_session() -> StoreSession:
    """Singleton store session (persists across requests)."""
    return StoreSession().open()


def get_category(category: str) -> Category:
    """Path parameter → :class:`Category`, 404 for unknown tags."""
    parsed = Category.parse(category)
    if parsed is None:
        raise HTTPException(status_code=404, detail=f"Unknown category '{category}'")
    return parsed
