"""Authentication router for ShipDesk.

Provides endpoints for admin authentication:
- POST /register - Register a new admin
- POST /login - Exchange email and password for a one-hour bearer token
"""

import logging

from fastapi import APIRouter, Depends, Request, status

from shipdesk.auth.models import (
    ADMIN_ROLE,
    LoginRequest,
    MessageResponse,
    RegisterRequest,
    TokenResponse,
)
from shipdesk.auth.security import create_access_token, hash_password, verify_password
from shipdesk.config import Settings, get_settings
from shipdesk.errors import ValidationError
from shipdesk.middleware.rate_limit import limiter, login_rate_limit
from shipdesk.storage.admin_store import AdminStore, get_admin_store

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Authentication"])

INVALID_CREDENTIALS = "Invalid email or password"


@router.post(
    "/register",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new admin",
    description="Create an admin account with name, email and password (min 8 characters).",
)
async def register(
    body: RegisterRequest,
    store: AdminStore = Depends(get_admin_store),
    settings: Settings = Depends(get_settings),
) -> MessageResponse:
    """Register a new admin."""
    password_hash = hash_password(body.password, rounds=settings.bcrypt_rounds)
    await store.create_admin(name=body.name, email=body.email, password_hash=password_hash)
    return MessageResponse(msg="Admin registered successfully")


@router.post(
    "/login",
    response_model=TokenResponse,
    summary="Admin login",
    description="Exchange admin credentials for a bearer token. Limited to 5 attempts per 15 minutes.",
)
@limiter.limit(login_rate_limit)
async def login(
    request: Request,
    body: LoginRequest,
    store: AdminStore = Depends(get_admin_store),
    settings: Settings = Depends(get_settings),
) -> TokenResponse:
    """Login and get a signed token.

    Unknown email and wrong password produce the same answer.
    """
    admin = await store.get_by_email(body.email)
    if admin is None or not verify_password(body.password, admin.password_hash):
        logger.warning("Rejected admin login")
        raise ValidationError(INVALID_CREDENTIALS)

    token = create_access_token(admin.id, ADMIN_ROLE, settings)
    logger.info(f"Admin {admin.id} logged in")
    return TokenResponse(token=token)
