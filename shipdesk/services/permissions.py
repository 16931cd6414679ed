"""Carrier and vendor permissions per user.

Each user carries an ordered list of carriers; each carrier has an
allowed/blocked flag and an ordered list of vendors with their own flag.
Every operation here checks the caller's admin role itself and persists
the whole user record in a single write.

Edits are read-modify-write without a version check, so two concurrent
edits to the same user can overwrite each other (last write wins).
"""

import logging
from typing import List

from fastapi import Depends

from shipdesk.auth.dependencies import ensure_admin
from shipdesk.auth.models import Identity
from shipdesk.errors import Conflict, NotFound, ValidationError
from shipdesk.models.user import CarrierPermission, User, VendorEntry
from shipdesk.storage.user_store import UserStore, get_user_store

logger = logging.getLogger(__name__)


class PermissionService:
    """Admin operations on a user's allowed carriers and vendors."""

    def __init__(self, store: UserStore):
        self.store = store

    async def set_allowed_carriers(
        self,
        actor: Identity,
        user_id: str,
        carriers: List[CarrierPermission],
    ) -> User:
        """Replace a user's carrier list wholesale.

        Raises:
            ValidationError: If a carrier name appears twice
            NotFound: If the user does not exist
        """
        ensure_admin(actor)

        seen = set()
        for permission in carriers:
            if permission.carrier in seen:
                raise ValidationError(f"Duplicate carrier: {permission.carrier}")
            seen.add(permission.carrier)

        user = await self._load_user(user_id)
        user.allowed_carriers = list(carriers)
        updated = await self._save(user)
        logger.info(f"Admin {actor.subject_id} replaced carriers for user {user_id} ({len(carriers)} carriers)")
        return updated

    async def add_carrier(self, actor: Identity, user_id: str, carrier: str) -> User:
        """Append a blocked carrier with no vendors.

        Raises:
            NotFound: If the user does not exist
            Conflict: If the user already has that carrier
        """
        ensure_admin(actor)
        user = await self._load_user(user_id)

        if user.find_carrier(carrier) is not None:
            logger.warning(f"Carrier {carrier} already present for user {user_id}")
            raise Conflict("Carrier already exists")

        user.allowed_carriers.append(CarrierPermission(carrier=carrier, status=False, allowed_vendors=[]))
        updated = await self._save(user)
        logger.info(f"Admin {actor.subject_id} added carrier {carrier} for user {user_id}")
        return updated

    async def add_vendor(self, actor: Identity, user_id: str, carrier: str, vendor: str) -> User:
        """Append an allowed vendor under one of the user's carriers.

        Raises:
            NotFound: If the user or carrier does not exist
            Conflict: If the vendor is already listed under that carrier
        """
        ensure_admin(actor)
        user = await self._load_user(user_id)
        permission = self._find_carrier(user, carrier)

        if permission.find_vendor(vendor) is not None:
            logger.warning(f"Vendor {vendor} already present under {carrier} for user {user_id}")
            raise Conflict("Vendor already exists")

        permission.allowed_vendors.append(VendorEntry(name=vendor))
        updated = await self._save(user)
        logger.info(f"Admin {actor.subject_id} added vendor {vendor} under {carrier} for user {user_id}")
        return updated

    async def set_carrier_status(self, actor: Identity, user_id: str, carrier: str, status: bool) -> User:
        """Allow or block a carrier.

        Raises:
            NotFound: If the user or carrier does not exist
        """
        ensure_admin(actor)
        user = await self._load_user(user_id)
        permission = self._find_carrier(user, carrier)

        permission.status = status
        updated = await self._save(user)
        logger.info(f"Admin {actor.subject_id} set carrier {carrier} status={status} for user {user_id}")
        return updated

    async def set_vendor_status(
        self,
        actor: Identity,
        user_id: str,
        carrier: str,
        vendor: str,
        status: bool,
    ) -> User:
        """Allow or block a vendor under a carrier.

        Writing the user back also stores any legacy bare-name vendors of
        that user in structured form.

        Raises:
            NotFound: If the user, carrier or vendor does not exist
        """
        ensure_admin(actor)
        user = await self._load_user(user_id)
        permission = self._find_carrier(user, carrier)

        entry = permission.find_vendor(vendor)
        if entry is None:
            raise NotFound("Vendor not found")

        entry.status = status
        updated = await self._save(user)
        logger.info(
            f"Admin {actor.subject_id} set vendor {vendor} under {carrier} status={status} for user {user_id}"
        )
        return updated

    async def _load_user(self, user_id: str) -> User:
        user = await self.store.get_user(user_id)
        if user is None:
            raise NotFound("User not found")
        return user

    @staticmethod
    def _find_carrier(user: User, carrier: str) -> CarrierPermission:
        permission = user.find_carrier(carrier)
        if permission is None:
            raise NotFound("Carrier not found")
        return permission

    async def _save(self, user: User) -> User:
        updated = await self.store.save_user(user)
        if updated is None:
            # Deleted between read and write
            raise NotFound("User not found")
        return updated


def get_permission_service(store: UserStore = Depends(get_user_store)) -> PermissionService:
    return PermissionService(store)
