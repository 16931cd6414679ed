"""Storage module for data persistence."""

from shipdesk.storage.database import Database, get_database, init_database
from shipdesk.storage.user_store import UserStore, get_user_store
from shipdesk.storage.admin_store import AdminStore, get_admin_store
from shipdesk.storage.shipment_store import ShipmentStore, get_shipment_store

__all__ = [
    "Database",
    "get_database",
    "init_database",
    "UserStore",
    "get_user_store",
    "AdminStore",
    "get_admin_store",
    "ShipmentStore",
    "get_shipment_store",
]
