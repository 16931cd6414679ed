"""Pydantic models for data validation and serialization."""

from .user import (
    User,
    UserResponse,
    UserStatus,
    CarrierPermission,
    VendorEntry,
)
from .shipment import ShipmentRecord, ShipmentRow

__all__ = [
    "User",
    "UserResponse",
    "UserStatus",
    "CarrierPermission",
    "VendorEntry",
    "ShipmentRecord",
    "ShipmentRow",
]
