"""
Career Clarified - Authentication helpers

Identity checks for user-scoped endpoints. Login and sign-up themselves are
proxied to the hosted auth provider (see routers/auth_proxy.py).

Configuration (environment variables):
    CLARIFIED_ENFORCE_JWT=false          - Require bearer tokens matching userId
    CLARIFIED_SUPABASE_JWT_SECRET=<key>  - Secret used to verify access tokens
"""
from .tokens import verify_access_token
from .dependencies import (
    ensure_user_matches, get_bearer_token, get_client_ip, check_user_id, get_query_user_id,
)

__all__ = [
    "verify_access_token",
    "ensure_user_matches",
    "get_bearer_token",
    "get_client_ip",
    "check_user_id",
    "get_query_user_id",
]
