"""
Career Clarified - Request identity checks.

Most endpoints identify the caller by the `userId` in the request body, as
the dashboard sends it. With CLARIFIED_ENFORCE_JWT=true the caller must
also present `Authorization: Bearer <access token>` whose subject is that
same user.

Usage in routers (after body validation, before any external call):
    ensure_user_matches(request, body.user_id)
"""
from typing import Optional
from fastapi import HTTPException, Query, status, Request
import logging

from ..config import settings
from ..schemas import validate_user_id
from .tokens import verify_access_token

logger = logging.getLogger("clarified.auth")


def get_bearer_token(request: Request) -> Optional[str]:
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token:
        return None
    return token.strip()


def ensure_user_matches(request: Request, user_id: str) -> None:
    """
    Check the bearer token belongs to `user_id` when enforcement is on.

    Raises:
        HTTPException: 401 if the token is missing or invalid,
                       403 if it belongs to another user
    """
    if not settings.supabase.enforce_jwt:
        return

    token = get_bearer_token(request)
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    subject = verify_access_token(token)
    if not subject:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if subject != user_id:
        logger.warning(f"Token subject {subject} does not match userId {user_id}")
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Unauthorized")


def get_client_ip(request: Request) -> str:
    """
    Get the client's IP address from the request.

    Handles X-Forwarded-For header for requests behind a proxy.
    """
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    if request.client:
        return request.client.host
    return "unknown"


def check_user_id(request: Request, user_id: str) -> str:
    """
    Validate a user id taken from the path or query string.

    Returns the canonical UUID string.

    Raises:
        HTTPException: 400 if it is not a UUID, plus ensure_user_matches errors
    """
    try:
        user_id = validate_user_id(user_id)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    ensure_user_matches(request, user_id)
    return user_id


async def get_query_user_id(request: Request, user_id: str = Query(..., alias="userId")) -> str:
    """FastAPI dependency for endpoints scoped by a `?userId=` parameter."""
    return check_user_id(request, user_id)
