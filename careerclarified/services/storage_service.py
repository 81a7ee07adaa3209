"""
Career Clarified - Storage Service (Supabase Storage REST)

Uploads resume files into a storage bucket using the service-role key.
Objects are stored under a per-user folder so bucket policies can scope
access by user id.
"""
from typing import Optional
import logging

import httpx

from ..config import settings

logger = logging.getLogger("clarified.storage")


class StorageServiceError(Exception):
    """Raised when the storage API rejects a request or is unreachable."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


def describe_storage_error(error: Exception) -> str:
    """
    Best-effort human message for a storage failure.

    The upstream message is returned whenever there is one; the canned
    hints only fill in for empty messages.
    """
    raw = str(error)
    lower = raw.lower()
    if "bucket" in lower and ("not found" in lower or "does not exist" in lower):
        return raw or 'Bucket not found. Ensure a Supabase Storage bucket named "resumes" exists.'
    if any(word in lower for word in ("unauthorized", "permission", "policy", "row level")):
        return raw or "Unauthorized: Storage RLS or permissions may be blocking upload."
    if "jwt" in lower or "invalid api key" in lower or "service role" in lower:
        return raw or "Supabase service role key invalid or missing."
    return raw or "Storage upload failed."


class StorageService:
    """Minimal Supabase Storage client: bucket lookup and object upload."""

    def __init__(
        self,
        url: Optional[str] = None,
        service_key: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.url = (url if url is not None else settings.supabase.supabase_url or "").rstrip("/")
        self.service_key = service_key if service_key is not None else settings.supabase.supabase_service_role_key
        self._transport = transport

    def is_configured(self) -> bool:
        return bool(self.url and self.service_key)

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=f"{self.url}/storage/v1",
            headers={
                "apikey": self.service_key or "",
                "Authorization": f"Bearer {self.service_key}",
            },
            transport=self._transport,
            timeout=30.0,
        )

    async def get_bucket(self, name: str) -> dict:
        """Fetch bucket metadata. Raises StorageServiceError if it does not exist."""
        try:
            async with self._client() as client:
                response = await client.get(f"/bucket/{name}")
        except httpx.HTTPError as e:
            raise StorageServiceError(f"Storage request failed: {e}")

        if response.status_code != 200:
            raise StorageServiceError(_storage_error_message(response), response.status_code)
        return _json_object(response)

    async def upload(
        self,
        bucket: str,
        path: str,
        data: bytes,
        content_type: str = "application/pdf",
        upsert: bool = False,
    ) -> str:
        """
        Upload bytes to `bucket/path`.

        Returns the object key reported by the API.
        """
        headers = {
            "Content-Type": content_type,
            "x-upsert": "true" if upsert else "false",
        }
        try:
            async with self._client() as client:
                response = await client.post(f"/object/{bucket}/{path}", content=data, headers=headers)
        except httpx.HTTPError as e:
            raise StorageServiceError(f"Storage request failed: {e}")

        if response.status_code not in (200, 201):
            raise StorageServiceError(_storage_error_message(response), response.status_code)

        key = _json_object(response).get("Key") or f"{bucket}/{path}"
        logger.info(f"Uploaded {len(data)} bytes to {key}")
        return key


def _json_object(response: httpx.Response) -> dict:
    try:
        body = response.json()
    except ValueError:
        body = None
    if not isinstance(body, dict):
        raise StorageServiceError("Storage API returned an invalid response", response.status_code)
    return body


def _storage_error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text
    if isinstance(body, dict):
        return str(body.get("message") or body.get("error") or "")
    return ""


storage_service = StorageService()


def get_storage_service() -> StorageService:
    """FastAPI dependency returning the shared storage client."""
    return storage_service
