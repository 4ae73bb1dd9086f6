"""
Parcel value validation tests.
"""

import pytest
from pydantic import ValidationError

from tracker.app.models.parcel_enums import ParcelStatus
from tracker.app.schemas.parcel import Parcel, utc_now_rfc3339


def test_defaults():
    parcel = Parcel(client=1, address="Main St 1")

    assert parcel.number == 0
    assert parcel.status == ParcelStatus.REGISTERED
    assert parcel.created_at.endswith("Z")


def test_utc_now_rfc3339_format():
    value = utc_now_rfc3339()

    assert len(value) == len("2024-01-01T00:00:00Z")
    assert value[10] == "T"
    assert value.endswith("Z")


@pytest.mark.parametrize("created_at", [
    "2024-01-01T00:00:00Z",
    "2024-01-01T00:00:00+00:00",
    "2024-01-01T03:00:00+03:00",
    "2024-01-01T00:00:00.123456Z",
    "2024-01-01T00:00:00.1Z",
    "2024-01-01t00:00:00z",
    "2024-01-01T00:00:00-05:30",
])
def test_created_at_kept_verbatim(created_at):
    parcel = Parcel(client=1, address="a", created_at=created_at)

    assert parcel.created_at == created_at


@pytest.mark.parametrize("created_at", [
    "yesterday",
    "2024-01-01",
    "2024-01-01T00:00:00",
    "",
    "20240101T000000Z",
    "2024-01-01T00:00Z",
    "2024-01-01T00Z",
    "2024-01-01 00:00:00Z",
    "2024-13-01T00:00:00Z",
    "2024-01-01T00:00:00+24:00",
    "2024-01-01T00:00:00Z\n",
])
def test_created_at_rejected(created_at):
    with pytest.raises(ValidationError):
        Parcel(client=1, address="a", created_at=created_at)


@pytest.mark.parametrize("address", ["", "   "])
def test_blank_address_rejected(address):
    with pytest.raises(ValidationError):
        Parcel(client=1, address=address)


def test_unknown_status_rejected():
    with pytest.raises(ValidationError):
        Parcel(client=1, address="a", status="lost")


def test_status_members():
    assert [s.value for s in ParcelStatus] == ["registered", "sent", "delivered"]
    assert ParcelStatus("sent") is ParcelStatus.SENT
