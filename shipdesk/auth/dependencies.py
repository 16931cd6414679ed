"""Authentication dependencies for FastAPI.

Provides dependency injection for route protection:
- get_current_identity: Requires a valid bearer JWT, returns the Identity
- require_admin: get_current_identity plus the admin role check

Services also call ensure_admin() on the identity they receive and answer
403 when the role claim is not "admin".
"""

import logging
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from shipdesk.auth.models import Identity
from shipdesk.auth.security import decode_access_token
from shipdesk.config import Settings, get_settings
from shipdesk.errors import Forbidden, Unauthorized

logger = logging.getLogger(__name__)

# HTTP Bearer token scheme for Swagger UI
security = HTTPBearer(auto_error=False)


def ensure_admin(identity: Optional[Identity]) -> Identity:
    """Raise Forbidden unless the identity carries the admin role."""
    if identity is None or not identity.is_admin:
        subject = identity.subject_id if identity else "anonymous"
        logger.warning(f"Admin access denied for {subject}")
        raise Forbidden("Access denied")
    return identity


async def get_current_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    settings: Settings = Depends(get_settings),
) -> Identity:
    """Get the caller identity from the bearer token.

    Raises:
        Unauthorized: If no token is provided or the token is invalid
    """
    if not credentials:
        raise Unauthorized("Not authenticated")

    payload = decode_access_token(credentials.credentials, settings)
    return Identity(subject_id=payload.sub, role=payload.role)


async def require_admin(identity: Identity = Depends(get_current_identity)) -> Identity:
    """Require an admin caller before the request body is looked at.

    Raises:
        Unauthorized: If the token is missing or invalid
        Forbidden: If the role claim is not "admin"
    """
    return ensure_admin(identity)

