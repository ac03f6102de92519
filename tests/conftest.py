"""
Pytest configuration: make sure `import saher` works regardless of
where pytest is invoked, and give every test its own in-memory database.
"""

import sys
from datetime import date
from pathlib import Path

import pytest
from sqlalchemy.pool import StaticPool
from sqlmodel import create_engine

# /path/to/project/tests -> project root
PROJECT_ROOT = Path(__file__).resolve().parent.parent

if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from saher.db import LocalStorage  # noqa: E402
from saher.persistence import PersistenceGateway  # noqa: E402

TODAY = date(2025, 6, 1)


@pytest.fixture
def today():
    return TODAY


@pytest.fixture
def engine():
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    yield eng
    eng.dispose()


@pytest.fixture
def storage(engine):
    return LocalStorage(engine)


@pytest.fixture
def gateway(storage):
    return PersistenceGateway(storage=storage, clock=lambda: TODAY)
