"""Rate limiting for ShipDesk.

Uses slowapi to throttle login attempts per client address.
"""

import logging
from slowapi import Limiter
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded

from shipdesk.config import get_settings

logger = logging.getLogger(__name__)


# No default limits: only routes decorated below are throttled
limiter = Limiter(key_func=get_remote_address)


def login_rate_limit() -> str:
    """Rate limit string for /login, e.g. "5/15minutes"."""
    return get_settings().login_rate_limit


# Export RateLimitExceeded for error handling
__all__ = ["limiter", "RateLimitExceeded", "login_rate_limit"]
