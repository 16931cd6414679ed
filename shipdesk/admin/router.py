"""Admin API router for ShipDesk.

Provides admin endpoints for:
- User management (list, block/unblock, balance, dealer flag)
- Carrier and vendor permissions per user
"""

import logging
from typing import List

from fastapi import APIRouter, Depends

from shipdesk.auth.dependencies import require_admin
from shipdesk.auth.models import Identity
from shipdesk.errors import NotFound
from shipdesk.models.user import (
    AddCarrierRequest,
    AddVendorRequest,
    CarrierStatusRequest,
    SetCarriersRequest,
    UpdateBalanceRequest,
    UpdateDealerRequest,
    UpdatedUserResponse,
    UpdateStatusRequest,
    UserActionResponse,
    UserResponse,
    VendorStatusRequest,
)
from shipdesk.services.permissions import PermissionService, get_permission_service
from shipdesk.storage.user_store import UserStore, get_user_store

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Admin"])


# =============================================================================
# USER MANAGEMENT ENDPOINTS
# =============================================================================

@router.get(
    "/users",
    response_model=List[UserResponse],
    summary="List users",
    description="Get every user without password credentials (admin only).",
)
async def list_users(
    identity: Identity = Depends(require_admin),
    store: UserStore = Depends(get_user_store),
) -> List[UserResponse]:
    """List all users."""
    users = await store.list_users()
    return [user.to_public() for user in users]


@router.put(
    "/users/{user_id}/status",
    response_model=UpdatedUserResponse,
    summary="Block or unblock a user",
)
async def update_user_status(
    user_id: str,
    body: UpdateStatusRequest,
    identity: Identity = Depends(require_admin),
    store: UserStore = Depends(get_user_store),
) -> UpdatedUserResponse:
    """Set a user's status to active or blocked."""
    user = await store.update_status(user_id, body.status)
    if user is None:
        raise NotFound("User not found")

    logger.info(f"Admin {identity.subject_id} set status={body.status.value} for user {user_id}")
    return UpdatedUserResponse(msg="User status updated successfully", updated_user=user.to_public())


@router.put(
    "/users/{user_id}/balance",
    response_model=UpdatedUserResponse,
    summary="Set a user's balance",
)
async def update_user_balance(
    user_id: str,
    body: UpdateBalanceRequest,
    identity: Identity = Depends(require_admin),
    store: UserStore = Depends(get_user_store),
) -> UpdatedUserResponse:
    """Set a user's available balance (may be negative)."""
    user = await store.update_balance(user_id, body.available_balance)
    if user is None:
        raise NotFound("User not found")

    logger.info(f"Admin {identity.subject_id} set balance={body.available_balance} for user {user_id}")
    return UpdatedUserResponse(msg="User balance updated successfully", updated_user=user.to_public())


# =============================================================================
# CARRIER / VENDOR PERMISSION ENDPOINTS
# =============================================================================

@router.post(
    "/add-carrier",
    response_model=UserActionResponse,
    summary="Add a carrier to a user",
    description="Append a carrier (blocked, no vendors) to the user's list (admin only).",
)
async def add_carrier(
    body: AddCarrierRequest,
    identity: Identity = Depends(require_admin),
    service: PermissionService = Depends(get_permission_service),
) -> UserActionResponse:
    user = await service.add_carrier(identity, body.user_id, body.carrier)
    return UserActionResponse(msg="Carrier added successfully", user=user.to_public())


@router.post(
    "/add-vendor",
    response_model=UserActionResponse,
    summary="Add a vendor under a carrier",
)
async def add_vendor(
    body: AddVendorRequest,
    identity: Identity = Depends(require_admin),
    service: PermissionService = Depends(get_permission_service),
) -> UserActionResponse:
    user = await service.add_vendor(identity, body.user_id, body.carrier, body.vendor)
    return UserActionResponse(msg="Vendor added successfully", user=user.to_public())


@router.put(
    "/update-carrier-status",
    response_model=UserActionResponse,
    summary="Allow or block a carrier",
)
async def update_carrier_status(
    body: CarrierStatusRequest,
    identity: Identity = Depends(require_admin),
    service: PermissionService = Depends(get_permission_service),
) -> UserActionResponse:
    user = await service.set_carrier_status(identity, body.user_id, body.carrier, body.status)
    return UserActionResponse(msg="Carrier status updated", user=user.to_public())


@router.put(
    "/update-vendor-status",
    response_model=UserActionResponse,
    summary="Allow or block a vendor",
)
async def update_vendor_status(
    body: VendorStatusRequest,
    identity: Identity = Depends(require_admin),
    service: PermissionService = Depends(get_permission_service),
) -> UserActionResponse:
    user = await service.set_vendor_status(identity, body.user_id, body.carrier, body.vendor, body.status)
    return UserActionResponse(msg="Vendor status updated", user=user.to_public())


# Path-parameter routes last so the fixed paths above always win

@router.put(
    "/{user_id}/is-dealer",
    response_model=UserActionResponse,
    summary="Set the dealer flag",
)
async def update_dealer_flag(
    user_id: str,
    body: UpdateDealerRequest,
    store: UserStore = Depends(get_user_store),
) -> UserActionResponse:
    """Mark or unmark a user as a dealer."""
    user = await store.update_dealer(user_id, body.is_dealer)
    if user is None:
        raise NotFound("User not found")

    logger.info(f"Set is_dealer={body.is_dealer} for user {user_id}")
    return UserActionResponse(msg="User updated successfully", user=user.to_public())


@router.put(
    "/{user_id}/carriers",
    response_model=UserActionResponse,
    summary="Replace a user's carriers",
    description="Overwrite the user's carrier list wholesale (admin only).",
)
async def set_user_carriers(
    user_id: str,
    body: SetCarriersRequest,
    identity: Identity = Depends(require_admin),
    service: PermissionService = Depends(get_permission_service),
) -> UserActionResponse:
    user = await service.set_allowed_carriers(identity, user_id, body.allowed_carriers)
    return UserActionResponse(msg="Carriers updated successfully!", user=user.to_public())
