"""
Career Clarified - Centralized rate limiting configuration.

All rate limit decorators should import `limiter` from this module.
The limiter keys on client IP address and sits in front of the per-user
daily AI quota enforced in services/quota.py.
"""
from slowapi import Limiter
from slowapi.util import get_remote_address

from .config import settings

limiter = Limiter(key_func=get_remote_address, enabled=settings.rate_limit_enabled)

# --- Rate limit constants ---

# AI-powered endpoints (cost money per completion call)
RATE_LIMIT_AI = "10/minute"

# Auth proxy endpoints (login, signup, password reset); strict to prevent brute force
RATE_LIMIT_AUTH = "5/minute"

# General API write operations (create, update, delete)
RATE_LIMIT_GENERAL = "30/minute"

# Read-heavy endpoints (blog listing, analytics, usage)
RATE_LIMIT_READ = "60/minute"

# Admin endpoints
RATE_LIMIT_ADMIN = "30/minute"
