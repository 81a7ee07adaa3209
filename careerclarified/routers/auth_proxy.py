"""
Career Clarified - Hosted auth proxy endpoints.

POST /api/auth-proxy      - password login -> {session, user}
POST /api/signup-proxy    - sign-up -> {user, session, needsEmailConfirmation}
POST /api/password-reset  - send a password reset email

Errors carry a `code`: CONFIG_MISSING, VALIDATION_ERROR, the provider's
HTTP status, AUTH_ERROR / SIGNUP_ERROR / RESET_ERROR, NO_SESSION, NO_DATA,
SERVER_ERROR.
"""
from typing import Any, Dict, Optional
import logging

from fastapi import APIRouter, Body, Depends, HTTPException, Request
from pydantic import BaseModel, ValidationError

from ..rate_limit import limiter, RATE_LIMIT_AUTH
from ..schemas import LoginRequest, SignupRequest, PasswordResetRequest
from ..services.auth_client import AuthClient, SupabaseAuthError, get_auth_client

router = APIRouter()
logger = logging.getLogger("clarified.auth")

INVALID_CREDENTIALS = "Invalid login credentials"


def _error(status_code: int, message: str, code: str) -> HTTPException:
    return HTTPException(status_code=status_code, detail={"error": message, "code": code})


def _require_configured(auth: AuthClient) -> None:
    if not auth.is_configured():
        raise _error(500, "Server auth not configured", "CONFIG_MISSING")


def _parse(model: type, payload: Optional[Dict[str, Any]], message: str) -> BaseModel:
    try:
        return model.model_validate(payload or {})
    except ValidationError:
        raise _error(400, message, "VALIDATION_ERROR")


def _provider_error(e: SupabaseAuthError, fallback_code: str) -> HTTPException:
    if e.status is None:
        return _error(500, e.message, "SERVER_ERROR")
    status_code = 401 if INVALID_CREDENTIALS in e.message else 400
    return _error(status_code, e.message, str(e.status) if e.status else fallback_code)


@router.post("/auth-proxy")
@limiter.limit(RATE_LIMIT_AUTH)
async def auth_proxy(
    request: Request,
    payload: Optional[Dict[str, Any]] = Body(None),
    auth: AuthClient = Depends(get_auth_client),
):
    """Log in with email and password through the hosted auth provider."""
    _require_configured(auth)
    data = _parse(LoginRequest, payload, "email and password are required")

    try:
        session = await auth.sign_in_with_password(data.email.strip(), data.password)
    except SupabaseAuthError as e:
        logger.info(f"Login rejected by provider ({e.status}): {e.message}")
        raise _provider_error(e, "AUTH_ERROR")

    if not session or not session.get("access_token"):
        raise _error(500, "No session returned", "NO_SESSION")

    return {"session": session, "user": session.get("user")}


@router.post("/signup-proxy")
@limiter.limit(RATE_LIMIT_AUTH)
async def signup_proxy(
    request: Request,
    payload: Optional[Dict[str, Any]] = Body(None),
    auth: AuthClient = Depends(get_auth_client),
):
    """Register a user; the session is null when email confirmation is pending."""
    _require_configured(auth)
    data = _parse(SignupRequest, payload, "name, email and password are required")

    try:
        user, session = await auth.sign_up(data.email.strip(), data.password, full_name=data.name)
    except SupabaseAuthError as e:
        logger.info(f"Sign-up rejected by provider ({e.status}): {e.message}")
        raise _provider_error(e, "SIGNUP_ERROR")

    if user is None and session is None:
        raise _error(500, "No data returned from sign up", "NO_DATA")

    return {
        "user": user,
        "session": session,
        "needsEmailConfirmation": user is not None and session is None,
    }


@router.post("/password-reset")
@limiter.limit(RATE_LIMIT_AUTH)
async def password_reset(
    request: Request,
    payload: Optional[Dict[str, Any]] = Body(None),
    auth: AuthClient = Depends(get_auth_client),
):
    _require_configured(auth)
    data = _parse(PasswordResetRequest, payload, "email is required")

    try:
        await auth.send_password_reset(data.email.strip(), redirect_to=data.redirect_to)
    except SupabaseAuthError as e:
        logger.info(f"Password reset rejected by provider ({e.status}): {e.message}")
        raise _provider_error(e, "RESET_ERROR")

    return {"success": True, "message": "If that email is registered, a reset link has been sent."}
