"""
Centralized Test Configuration.
"""

import random

import pytest

from tracker.app.db.session import build_engine, build_session_factory, create_schema, drop_schema
from tracker.app.models.parcel_enums import ParcelStatus
from tracker.app.schemas.parcel import Parcel, utc_now_rfc3339
from tracker.app.services.parcel_store import ParcelStore

# Setup In-Memory Test Database
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
async def engine():
    """Fresh in-memory database with the parcels table for each test."""
    test_engine = build_engine(TEST_DATABASE_URL, echo=False)
    await create_schema(test_engine)

    yield test_engine

    await drop_schema(test_engine)
    await test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return build_session_factory(engine)


@pytest.fixture
def store(session_factory):
    return ParcelStore(session_factory)


@pytest.fixture
def make_parcel():
    """Build an unsaved parcel; keyword arguments override defaults."""
    def _make(**overrides):
        data = {
            "client": 1000,
            "status": ParcelStatus.REGISTERED,
            "address": "test",
            "created_at": utc_now_rfc3339(),
        }
        data.update(overrides)
        return Parcel(**data)
    return _make


@pytest.fixture
def random_client():
    return random.randint(1, 10_000_000)
