"""
Career Clarified - Hosted Auth Client (Supabase GoTrue REST)

Server-side proxy calls for password login, sign-up and password-reset
emails. Uses the project's anon key, exactly as a browser client would.
"""
from typing import Optional, Tuple, Dict, Any
import logging

import httpx

from ..config import settings

logger = logging.getLogger("clarified.auth")


class SupabaseAuthError(Exception):
    """
    Error reported by the auth provider.

    `status` is the provider's HTTP status (None for transport failures).
    """

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status = status


class AuthClient:
    def __init__(
        self,
        url: Optional[str] = None,
        anon_key: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.url = (url if url is not None else settings.supabase.supabase_url or "").rstrip("/")
        self.anon_key = anon_key if anon_key is not None else settings.supabase.supabase_anon_key
        self._transport = transport

    def is_configured(self) -> bool:
        return bool(self.url and self.anon_key)

    async def _post(self, path: str, payload: Dict[str, Any], params: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
        try:
            async with httpx.AsyncClient(
                base_url=f"{self.url}/auth/v1",
                headers={"apikey": self.anon_key or "", "Authorization": f"Bearer {self.anon_key}"},
                transport=self._transport,
                timeout=15.0,
            ) as client:
                response = await client.post(path, json=payload, params=params)
        except httpx.HTTPError as e:
            logger.error(f"Auth provider unreachable: {e}")
            raise SupabaseAuthError(f"Auth provider unreachable: {e}")

        try:
            body = response.json() if response.content else {}
        except ValueError:
            body = {}

        if response.status_code >= 400:
            raise SupabaseAuthError(_auth_error_message(body, response), response.status_code)
        return body

    async def sign_in_with_password(self, email: str, password: str) -> Dict[str, Any]:
        """Password grant. Returns the session (access_token, refresh_token, user, ...)."""
        return await self._post(
            "/token",
            {"email": email, "password": password},
            params={"grant_type": "password"},
        )

    async def sign_up(
        self, email: str, password: str, full_name: Optional[str] = None
    ) -> Tuple[Optional[Dict[str, Any]], Optional[Dict[str, Any]]]:
        """
        Register a user.

        Returns (user, session). session is None when the project requires
        email confirmation before the first login.
        """
        payload: Dict[str, Any] = {"email": email, "password": password}
        if full_name:
            payload["data"] = {"full_name": full_name}

        body = await self._post("/signup", payload)
        if body.get("access_token"):
            return body.get("user"), body
        return (body or None), None

    async def send_password_reset(self, email: str, redirect_to: Optional[str] = None) -> None:
        params = {"redirect_to": redirect_to} if redirect_to else None
        await self._post("/recover", {"email": email}, params=params)


def _auth_error_message(body: Dict[str, Any], response: httpx.Response) -> str:
    for key in ("msg", "error_description", "message", "error"):
        value = body.get(key) if isinstance(body, dict) else None
        if value:
            return str(value)
    return response.text or f"Auth provider returned status {response.status_code}"


auth_client = AuthClient()


def get_auth_client() -> AuthClient:
    """FastAPI dependency returning the shared auth client."""
    return auth_client
