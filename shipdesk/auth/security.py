"""Password hashing and access token helpers."""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
from jose import jwt, JWTError, ExpiredSignatureError

from shipdesk.auth.models import TokenPayload
from shipdesk.config import Settings, get_settings
from shipdesk.errors import Unauthorized

logger = logging.getLogger(__name__)


def hash_password(password: str, rounds: Optional[int] = None) -> str:
    """Generate a bcrypt password hash."""
    if rounds is None:
        rounds = get_settings().bcrypt_rounds
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash.

    Malformed hashes and over-long passwords count as a mismatch.
    """
    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError:
        return False


def create_access_token(
    subject_id: str,
    role: str,
    settings: Optional[Settings] = None,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """Create a signed JWT carrying the subject id and role.

    Args:
        subject_id: Admin id placed in the ``sub`` claim
        role: Role claim checked by admin routes
        settings: Settings holding the signing key. Defaults to get_settings().
        expires_delta: Token lifetime. Defaults to ACCESS_TOKEN_EXPIRE_MINUTES.

    Returns:
        Encoded JWT string
    """
    settings = settings or get_settings()
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(minutes=settings.access_token_expire_minutes))
    claims = {
        "sub": str(subject_id),
        "role": role,
        "iat": now,
        "exp": expire,
    }
    return jwt.encode(claims, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str, settings: Optional[Settings] = None) -> TokenPayload:
    """Decode and validate an access token.

    Raises:
        Unauthorized: If the token is expired, tampered with or malformed
    """
    settings = settings or get_settings()
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
        return TokenPayload(**payload)
    except ExpiredSignatureError:
        logger.debug("JWT token expired")
        raise Unauthorized("Token has expired")
    except (JWTError, ValueError) as e:
        logger.debug(f"JWT validation failed: {e}")
        raise Unauthorized("Invalid authentication token")
