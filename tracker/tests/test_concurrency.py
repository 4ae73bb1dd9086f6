"""
Concurrency Tests.

Validates that one store serves overlapping operations, each in its own
session, against a file-backed database.
"""

import asyncio

import pytest

from tracker.app.db.session import build_engine, build_session_factory, create_schema
from tracker.app.models.parcel_enums import ParcelStatus
from tracker.app.services.parcel_store import ParcelStore


@pytest.fixture
async def shared_store(tmp_path):
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'concurrent.db'}", echo=False)
    await create_schema(engine)
    yield ParcelStore(build_session_factory(engine))
    await engine.dispose()


@pytest.mark.asyncio
async def test_concurrent_adds(shared_store, make_parcel, random_client):
    """Simultaneous adds all succeed with distinct numbers."""
    numbers = await asyncio.gather(
        *(shared_store.add(make_parcel(client=random_client)) for _ in range(5))
    )

    assert all(number > 0 for number in numbers)
    assert len(set(numbers)) == 5

    batch = await shared_store.get_by_client(random_client)
    assert sorted(p.number for p in batch) == sorted(numbers)


@pytest.mark.asyncio
async def test_concurrent_mixed_operations(shared_store, make_parcel):
    numbers = [await shared_store.add(make_parcel()) for _ in range(3)]

    results = await asyncio.gather(
        shared_store.set_status(numbers[0], ParcelStatus.SENT),
        shared_store.get(numbers[1]),
        shared_store.set_status(numbers[2], ParcelStatus.DELIVERED),
        shared_store.add(make_parcel()),
        shared_store.get(numbers[0]),
    )

    assert results[1].number == numbers[1]
    assert results[3] > 0
    assert (await shared_store.get(numbers[0])).status == ParcelStatus.SENT
    assert (await shared_store.get(numbers[2])).status == ParcelStatus.DELIVERED
