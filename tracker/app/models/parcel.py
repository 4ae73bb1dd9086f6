"""
Parcel database model.

One row per tracked shipment in the ``parcels`` table.
"""

from sqlalchemy import Column, Integer, String, Text, Enum
from tracker.app.db.session import Base
from tracker.app.models.parcel_enums import ParcelStatus


class ParcelRecord(Base):
    """
    Parcel row.

    ``number`` is assigned by the database on insert. ``created_at`` holds the
    caller's RFC3339 text exactly as given.
    """
    __tablename__ = "parcels"
    # numbers of deleted rows are never handed out again
    __table_args__ = {"sqlite_autoincrement": True}

    number = Column(Integer, primary_key=True, index=True, autoincrement=True)

    # Owner - opaque client identifier, used only for filtering
    client = Column(Integer, nullable=False, index=True)

    # Lifecycle
    status = Column(
        Enum(
            ParcelStatus,
            native_enum=False,
            length=20,
            values_callable=lambda statuses: [s.value for s in statuses],
        ),
        default=ParcelStatus.REGISTERED,
        nullable=False,
    )

    # Delivery information
    address = Column(Text, nullable=False)

    # Timestamps
    created_at = Column(String(40), nullable=False)

    def __repr__(self):
        return f"<ParcelRecord(number={self.number}, client={self.client}, status='{self.status.value}')>"
