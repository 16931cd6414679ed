"""Middleware module for ShipDesk."""

from shipdesk.middleware.rate_limit import limiter, login_rate_limit, RateLimitExceeded

__all__ = ["limiter", "login_rate_limit", "RateLimitExceeded"]
