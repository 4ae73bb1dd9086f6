"""
Parcel Pydantic schemas.

Defines the parcel value passed into and returned from the store.
"""

import re
from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, field_validator
from tracker.app.models.parcel_enums import ParcelStatus

RFC3339_FORMAT = "%Y-%m-%dT%H:%M:%SZ"

RFC3339_PATTERN = re.compile(
    r"^([0-9]{4}-[0-9]{2}-[0-9]{2})[Tt]([0-9]{2}:[0-9]{2}:[0-9]{2})(\.[0-9]+)?"
    r"([Zz]|[+-]([0-9]{2}):([0-9]{2}))$"
)


def utc_now_rfc3339() -> str:
    """Current UTC time in the format parcels are stored with."""
    return datetime.now(timezone.utc).strftime(RFC3339_FORMAT)


def validate_address(value: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValueError("address must be a non-empty string")
    return value


class Parcel(BaseModel):
    """
    A tracked shipment.

    ``number`` stays 0 until the store assigns one. ``created_at`` must be an
    RFC3339 timestamp with an explicit offset and is kept as text.
    """
    model_config = ConfigDict(from_attributes=True, validate_assignment=True)

    number: int = Field(default=0, ge=0, description="Store-assigned identifier")
    client: int = Field(..., description="Opaque client identifier")
    status: ParcelStatus = Field(default=ParcelStatus.REGISTERED)
    address: str = Field(..., description="Delivery address")
    created_at: str = Field(default_factory=utc_now_rfc3339, description="UTC RFC3339 timestamp")

    @field_validator("address")
    @classmethod
    def address_not_blank(cls, value: str) -> str:
        return validate_address(value)

    @field_validator("created_at")
    @classmethod
    def created_at_is_rfc3339(cls, value: str) -> str:
        match = RFC3339_PATTERN.fullmatch(value)
        if match is None:
            raise ValueError("created_at must be an RFC3339 date-time with offset")

        date_part, time_part, _, _, offset_hours, offset_minutes = match.groups()
        try:
            datetime.strptime(f"{date_part} {time_part}", "%Y-%m-%d %H:%M:%S")
        except ValueError:
            raise ValueError("created_at is not a valid calendar date-time")
        if offset_hours is not None and (int(offset_hours) > 23 or int(offset_minutes) > 59):
            raise ValueError("created_at has an out-of-range UTC offset")
        return value
