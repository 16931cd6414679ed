"""Admin module for ShipDesk.

Provides admin endpoints for user management, carrier permissions and the
shipment tracking-number pool.
"""

from shipdesk.admin.router import router as admin_router
from shipdesk.admin.shipments import router as shipments_router

__all__ = ["admin_router", "shipments_router"]
