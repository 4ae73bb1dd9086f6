"""
Database seeding script for demo parcels.

Creates a few parcels for one client in the configured database.
Run this script after the database URL is configured.
"""

import asyncio
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from tracker.app.core.observability import configure_logging
from tracker.app.db.session import build_engine, build_session_factory, create_schema
from tracker.app.models.parcel_enums import ParcelStatus
from tracker.app.schemas.parcel import Parcel, utc_now_rfc3339
from tracker.app.services.parcel_store import ParcelStore

DEMO_CLIENT = 1000

DEMO_PARCELS = [
    ("12 Harbour Road, Portsmouth", ParcelStatus.REGISTERED),
    ("4 Mill Lane, Leeds", ParcelStatus.SENT),
    ("88 Station Street, York", ParcelStatus.DELIVERED),
]


async def seed_parcels(client: int = DEMO_CLIENT) -> list:
    """
    Seed demo parcels for ``client``.

    Creates one parcel per demo status. Skips seeding when the client
    already has parcels. Returns the numbers of the created parcels.
    """
    engine = build_engine()
    await create_schema(engine)

    created = []
    try:
        store = ParcelStore(build_session_factory(engine))
        print("🌱 Starting parcel seeding...")

        if await store.get_by_client(client):
            print(f"ℹ️  Client {client} already has parcels, skipping seeding")
            return created

        for address, status in DEMO_PARCELS:
            number = await store.add(
                Parcel(client=client, address=address, created_at=utc_now_rfc3339())
            )
            if status != ParcelStatus.REGISTERED:
                await store.set_status(number, status)
            created.append(number)
            print(f"✅ Created parcel {number} ({status.value}) for client {client}")
    finally:
        await engine.dispose()

    print(f"🎉 Seeded {len(created)} parcels")
    return created


if __name__ == "__main__":
    configure_logging()
    asyncio.run(seed_parcels())
