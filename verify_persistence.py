import asyncio
import sys
import tempfile
from pathlib import Path

from tracker.app.core.exceptions import ParcelNotFoundError
from tracker.app.db.session import build_engine, build_session_factory, create_schema
from tracker.app.models.parcel_enums import ParcelStatus
from tracker.app.schemas.parcel import Parcel, utc_now_rfc3339
from tracker.app.services.parcel_store import ParcelStore


async def open_store(url):
    engine = build_engine(url, echo=False)
    await create_schema(engine)
    return engine, ParcelStore(build_session_factory(engine))


async def run_verification(url):
    # 1. First connection: create and mutate
    print("\n--- [Step 1] Adding parcel (Initial) ---")
    engine, store = await open_store(url)
    try:
        parcel = Parcel(client=1000, address="test", created_at=utc_now_rfc3339())
        number = await store.add(parcel)
        print(f"✅ Parcel added with number {number}")

        await store.set_address(number, "new test address")
        await store.set_status(number, ParcelStatus.SENT)
        print("✅ Address and status updated")
    finally:
        await engine.dispose()

    # 2. Reopen and verify
    print("\n--- [Step 2] Reopening database (Verification) ---")
    engine, store = await open_store(url)
    try:
        stored = await store.get(number)
        expected = parcel.model_copy(update={
            "number": number,
            "address": "new test address",
            "status": ParcelStatus.SENT,
        })
        if stored != expected:
            print(f"❌ Stored parcel differs: {stored!r} != {expected!r}")
            return False
        print("✅ Parcel survived restart")

        batch = await store.get_by_client(1000)
        if number not in {p.number for p in batch}:
            print("❌ Parcel missing from client lookup")
            return False
        print(f"✅ Client lookup returned {len(batch)} parcel(s)")

        # 3. Cleanup
        print("\n--- [Step 3] Deleting parcel ---")
        await store.delete(number)
        try:
            await store.get(number)
            print("❌ Parcel still readable after delete")
            return False
        except ParcelNotFoundError:
            print("✅ Parcel deleted")
    finally:
        await engine.dispose()

    return True


if __name__ == "__main__":
    if len(sys.argv) > 1:
        db_url = sys.argv[1]
    else:
        db_url = f"sqlite+aiosqlite:///{Path(tempfile.mkdtemp()) / 'tracker.db'}"

    print(f"Verifying persistence against: {db_url}")
    ok = asyncio.run(run_verification(db_url))
    print("\n🎉 PERSISTENCE VERIFIED" if ok else "\n💥 PERSISTENCE CHECK FAILED")
    sys.exit(0 if ok else 1)
