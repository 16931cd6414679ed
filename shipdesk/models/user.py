"""User account and carrier permission models."""

from enum import Enum
from typing import Any, List, Optional

from pydantic import Field, field_validator, model_validator

from shipdesk.models.base import CamelModel


class UserStatus(str, Enum):
    """Whether a user may use the platform."""

    ACTIVE = "active"
    BLOCKED = "blocked"


class VendorEntry(CamelModel):
    """A vendor allowed under a carrier.

    Older records stored vendors as bare names; those are read as
    ``{"name": <name>, "status": true}``.
    """

    name: str = Field(..., min_length=1, description="Vendor name")
    status: bool = Field(True, description="Whether the vendor is allowed")

    @model_validator(mode="before")
    @classmethod
    def migrate_bare_name(cls, value: Any) -> Any:
        if isinstance(value, str):
            return {"name": value}
        return value


class CarrierPermission(CamelModel):
    """A carrier a user may ship with, and the vendors allowed under it."""

    carrier: str = Field(..., min_length=1, description="Carrier name")
    status: bool = Field(False, description="Whether the carrier is allowed")
    allowed_vendors: List[VendorEntry] = Field(default_factory=list)

    def find_vendor(self, name: str) -> Optional[VendorEntry]:
        for vendor in self.allowed_vendors:
            if vendor.name == name:
                return vendor
        return None


class User(CamelModel):
    """User record as stored, including the password hash."""

    id: str
    email: str
    password_hash: str
    name: Optional[str] = None
    status: UserStatus = UserStatus.ACTIVE
    available_balance: float = 0.0
    is_dealer: bool = False
    allowed_carriers: List[CarrierPermission] = Field(default_factory=list)
    created_at: str
    updated_at: str

    def find_carrier(self, carrier: str) -> Optional[CarrierPermission]:
        for permission in self.allowed_carriers:
            if permission.carrier == carrier:
                return permission
        return None

    def to_public(self) -> "UserResponse":
        """Return the user without its password credential."""
        return UserResponse.model_validate(self.model_dump(exclude={"password_hash"}))


class UserResponse(CamelModel):
    """User as returned by the API."""

    id: str
    email: str
    name: Optional[str] = None
    status: UserStatus
    available_balance: float
    is_dealer: bool
    allowed_carriers: List[CarrierPermission]
    created_at: str
    updated_at: str


# =============================================================================
# REQUEST MODELS
# =============================================================================

class UpdateStatusRequest(CamelModel):
    status: UserStatus


class UpdateBalanceRequest(CamelModel):
    available_balance: float = Field(..., allow_inf_nan=False, description="New balance; negative values allowed")


class UpdateDealerRequest(CamelModel):
    is_dealer: bool

    @field_validator("is_dealer", mode="before")
    @classmethod
    def require_boolean(cls, value: Any) -> bool:
        """Reject "true", 1 and friends; only JSON booleans are accepted."""
        if not isinstance(value, bool):
            raise ValueError("isDealer must be a boolean value (true or false).")
        return value


class SetCarriersRequest(CamelModel):
    allowed_carriers: List[CarrierPermission]


class AddCarrierRequest(CamelModel):
    user_id: str = Field(..., min_length=1)
    carrier: str = Field(..., min_length=1)


class AddVendorRequest(CamelModel):
    user_id: str = Field(..., min_length=1)
    carrier: str = Field(..., min_length=1)
    vendor: str = Field(..., min_length=1)


class CarrierStatusRequest(CamelModel):
    user_id: str = Field(..., min_length=1)
    carrier: str = Field(..., min_length=1)
    status: bool


class VendorStatusRequest(CamelModel):
    user_id: str = Field(..., min_length=1)
    carrier: str = Field(..., min_length=1)
    vendor: str = Field(..., min_length=1)
    status: bool


# =============================================================================
# RESPONSE MODELS
# =============================================================================

class UpdatedUserResponse(CamelModel):
    """Response for status and balance updates."""

    msg: str
    updated_user: UserResponse


class UserActionResponse(CamelModel):
    """Response for dealer flag and permission updates."""

    msg: str
    user: UserResponse
