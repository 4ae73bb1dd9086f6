"""
Parcel record store.

Single point of access to the ``parcels`` table. Each operation opens its own
session from the caller's session factory and is one unit of work: it commits
on success and rolls back on a storage failure. Operations may run
concurrently on one store. The engine behind the factory belongs to the
caller; the store never disposes it.
"""

from typing import Any, List, Mapping, Union

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import delete, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from tracker.app.core.exceptions import (
    InvalidStateError,
    ParcelNotFoundError,
    PersistenceError,
    ValidationError,
)
from tracker.app.core.observability import logger, track_operation
from tracker.app.models.parcel import ParcelRecord
from tracker.app.models.parcel_enums import ParcelStatus
from tracker.app.schemas.parcel import Parcel, validate_address


class ParcelStore:
    """CRUD and client lookup for parcel records."""

    def __init__(self, session_factory: async_sessionmaker):
        self.session_factory = session_factory

    async def add(self, parcel: Union[Parcel, Mapping[str, Any]]) -> int:
        """
        Insert a new parcel and return its assigned number.

        The incoming ``number`` is ignored and the status is always
        ``registered``.
        """
        parcel = self._coerce_parcel(parcel)

        async with track_operation("add", client=parcel.client) as log_data:
            async with self.session_factory() as db:
                record = ParcelRecord(
                    client=parcel.client,
                    status=ParcelStatus.REGISTERED,
                    address=parcel.address,
                    created_at=parcel.created_at,
                )
                try:
                    db.add(record)
                    await db.flush()
                    number = record.number
                    await db.commit()
                except SQLAlchemyError as exc:
                    await self._rollback(db)
                    raise PersistenceError("add parcel", str(exc)) from exc

            log_data["parcel_number"] = number
            return number

    async def get(self, number: int) -> Parcel:
        """Fetch a parcel by number, always reading from the database."""
        async with track_operation("get", parcel_number=number):
            async with self.session_factory() as db:
                try:
                    result = await db.execute(
                        select(ParcelRecord).where(ParcelRecord.number == number)
                    )
                    record = result.scalar_one_or_none()
                except SQLAlchemyError as exc:
                    await self._rollback(db)
                    raise PersistenceError("get parcel", str(exc)) from exc

                if record is None:
                    raise ParcelNotFoundError(number)

                return self._to_parcel(record)

    async def delete(self, number: int) -> None:
        """Remove a parcel. Deleting a missing number is a no-op."""
        async with track_operation("delete", parcel_number=number) as log_data:
            async with self.session_factory() as db:
                try:
                    result = await db.execute(
                        delete(ParcelRecord).where(ParcelRecord.number == number)
                    )
                    await db.commit()
                except SQLAlchemyError as exc:
                    await self._rollback(db)
                    raise PersistenceError("delete parcel", str(exc)) from exc

            log_data["rows"] = result.rowcount

    async def set_address(self, number: int, address: str) -> None:
        """
        Change the delivery address of a parcel.

        Only parcels still in ``registered`` status can be re-addressed;
        otherwise InvalidStateError is raised and nothing is written.
        """
        try:
            address = validate_address(address)
        except ValueError as exc:
            raise ValidationError(str(exc), details={"field": "address"}) from exc

        async with track_operation("set_address", parcel_number=number):
            async with self.session_factory() as db:
                try:
                    result = await db.execute(
                        update(ParcelRecord)
                        .where(
                            ParcelRecord.number == number,
                            ParcelRecord.status == ParcelStatus.REGISTERED,
                        )
                        .values(address=address)
                    )
                    await db.commit()

                    current_status = None
                    if result.rowcount == 0:
                        current_status = (await db.execute(
                            select(ParcelRecord.status).where(ParcelRecord.number == number)
                        )).scalar_one_or_none()
                except SQLAlchemyError as exc:
                    await self._rollback(db)
                    raise PersistenceError("set parcel address", str(exc)) from exc

            if result.rowcount == 0:
                if current_status is None:
                    raise ParcelNotFoundError(number)
                raise InvalidStateError(
                    f"Parcel {number} is '{current_status.value}'; "
                    f"address can only change while '{ParcelStatus.REGISTERED.value}'",
                    details={"id": number, "status": current_status.value},
                )

    async def set_status(self, number: int, status: Union[ParcelStatus, str]) -> None:
        """Overwrite the status of a parcel. Transition order is not checked."""
        try:
            status = ParcelStatus(status)
        except ValueError as exc:
            allowed = [s.value for s in ParcelStatus]
            raise ValidationError(
                f"Unknown parcel status {status!r}",
                details={"field": "status", "allowed": allowed},
            ) from exc

        async with track_operation("set_status", parcel_number=number, status=status.value):
            async with self.session_factory() as db:
                try:
                    result = await db.execute(
                        update(ParcelRecord)
                        .where(ParcelRecord.number == number)
                        .values(status=status)
                    )
                    await db.commit()
                except SQLAlchemyError as exc:
                    await self._rollback(db)
                    raise PersistenceError("set parcel status", str(exc)) from exc

            if result.rowcount == 0:
                raise ParcelNotFoundError(number)

    async def get_by_client(self, client: int) -> List[Parcel]:
        """All parcels of a client, ordered by number. Empty list if none."""
        async with track_operation("get_by_client", client=client) as log_data:
            async with self.session_factory() as db:
                try:
                    result = await db.execute(
                        select(ParcelRecord)
                        .where(ParcelRecord.client == client)
                        .order_by(ParcelRecord.number)
                    )
                    records = result.scalars().all()
                except SQLAlchemyError as exc:
                    await self._rollback(db)
                    raise PersistenceError("get parcels by client", str(exc)) from exc

                log_data["rows"] = len(records)
                return [self._to_parcel(record) for record in records]

    @staticmethod
    def _coerce_parcel(parcel: Union[Parcel, Mapping[str, Any]]) -> Parcel:
        # instances are revalidated too; model_construct skips validation
        if isinstance(parcel, Parcel):
            parcel = parcel.model_dump()
        try:
            return Parcel.model_validate(parcel)
        except PydanticValidationError as exc:
            raise ValidationError(
                "Invalid parcel",
                details={"errors": exc.errors(include_url=False)},
            ) from exc

    @staticmethod
    def _to_parcel(record: ParcelRecord) -> Parcel:
        try:
            return Parcel.model_validate(record)
        except PydanticValidationError as exc:
            raise PersistenceError(
                "read parcel",
                f"stored row {record.number} is malformed: {exc.error_count()} error(s)",
            ) from exc

    @staticmethod
    async def _rollback(db: AsyncSession) -> None:
        try:
            await db.rollback()
        except SQLAlchemyError:
            # keep the original failure as the one raised
            logger.warning("Rollback after failed parcel operation also failed", exc_info=True)
