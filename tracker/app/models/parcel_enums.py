"""
Parcel Status Enumeration.
"""

import enum


class ParcelStatus(str, enum.Enum):
    """
    Parcel status enumeration.

    Status flow:
        REGISTERED → SENT → DELIVERED
    The store does not enforce this order; status updates overwrite.
    """
    REGISTERED = "registered"
    SENT = "sent"
    DELIVERED = "delivered"
