"""
Career Clarified - Access token verification.

Supabase issues HS256 JWTs signed with the project's JWT secret. The
subject (`sub`) is the auth user id, which is also the profile id.
"""
from typing import Optional
import logging

from jose import JWTError, jwt

from ..config import settings

logger = logging.getLogger("clarified.auth")


def verify_access_token(token: str, secret: Optional[str] = None) -> Optional[str]:
    """
    Verify a Supabase access token.

    Returns the user id (`sub`) or None if the token is invalid/expired.
    """
    secret = secret or settings.supabase.supabase_jwt_secret
    if not secret:
        logger.error("JWT secret not configured - cannot verify token")
        return None

    try:
        payload = jwt.decode(
            token,
            secret,
            algorithms=[settings.supabase.jwt_algorithm],
            audience=settings.supabase.jwt_audience,
        )
    except JWTError as e:
        logger.debug(f"Token rejected: {e}")
        return None

    return payload.get("sub") or None
