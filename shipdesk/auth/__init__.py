"""Authentication module for ShipDesk.

Provides bcrypt password hashing and JWT bearer-token validation.
The /register and /login routes live in shipdesk.auth.router.
"""

from shipdesk.auth.dependencies import get_current_identity, ensure_admin, require_admin
from shipdesk.auth.models import Admin, Identity, TokenPayload, ADMIN_ROLE

__all__ = [
    "get_current_identity",
    "ensure_admin",
    "require_admin",
    "Admin",
    "Identity",
    "TokenPayload",
    "ADMIN_ROLE",
]
