"""Services composing the stores into admin operations."""

from shipdesk.services.permissions import PermissionService, get_permission_service
from shipdesk.services.shipment_pool import ShipmentPool, get_shipment_pool

__all__ = [
    "PermissionService",
    "get_permission_service",
    "ShipmentPool",
    "get_shipment_pool",
]
