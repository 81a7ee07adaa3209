"""
Career Clarified - AI Service (chat completions)

Thin client for an OpenAI-compatible `/chat/completions` endpoint.

Setup:
1. Create an API key with the provider
2. Set CLARIFIED_OPENAI_API_KEY (and CLARIFIED_OPENAI_BASE_URL for non-OpenAI hosts)

This service provides:
- Configuration and availability checks
- Model listing
- A single `chat()` call used by every AI endpoint
- Human-readable mapping of upstream errors

Calls are never retried; failures surface as AIServiceError.
"""
from typing import List, Dict, Optional, Any
import logging

import httpx

from ..config import settings

logger = logging.getLogger("clarified.ai")


class AIServiceError(Exception):
    """Raised when the completions provider cannot produce a response."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


def describe_ai_error(error: Exception) -> str:
    """Map an upstream error to a message a user can act on."""
    msg = str(error)
    lower = msg.lower()
    if "api key" in lower or "invalid_api_key" in lower or "incorrect_api_key" in lower:
        return "API Key missing or invalid. Set the OpenAI API key on the server."
    if "rate limit" in lower or "429" in lower:
        return "OpenAI rate limit exceeded. Try again in a moment."
    return msg or "AI parsing failed."


class AIService:
    """
    Chat completions client.

    One instance per process; handlers receive it through the
    `get_ai_service` dependency so tests can substitute a fake.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        model: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key if api_key is not None else settings.ai.openai_api_key
        self.base_url = (base_url or settings.ai.openai_base_url).rstrip("/")
        self.model = model or settings.ai.default_model
        self.temperature = settings.ai.ai_temperature
        self.timeout = timeout or settings.ai.ai_timeout
        self._transport = transport

    def is_configured(self) -> bool:
        return bool(self.api_key)

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            headers={"Authorization": f"Bearer {self.api_key}"},
            transport=self._transport,
        )

    async def is_available(self) -> bool:
        """
        Check the provider answers with the configured key.

        Returns False rather than raising; used by the status endpoint only.
        """
        if not self.is_configured():
            logger.debug("AI API key not configured")
            return False

        try:
            async with self._client() as client:
                response = await client.get("/models", timeout=5.0)
                if response.status_code != 200:
                    logger.warning(f"AI provider returned status {response.status_code}")
                return response.status_code == 200
        except httpx.HTTPError as e:
            logger.warning(f"AI availability check failed: {e}")
            return False

    async def list_models(self) -> List[str]:
        """List model ids offered by the provider. Empty list if unavailable."""
        if not await self.is_available():
            return []

        try:
            async with self._client() as client:
                response = await client.get("/models", timeout=10.0)
                if response.status_code != 200:
                    return []
                data = response.json()
                return [m["id"] for m in data.get("data", []) if "id" in m]
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Failed to list models: {e}")
            return []

    async def chat(
        self,
        messages: List[Dict[str, str]],
        model: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
    ) -> str:
        """
        Run one chat completion and return the first choice's content.

        Args:
            messages: [{"role": "system"|"user", "content": "..."}]
            model: Override the default model
            temperature: Sampling temperature; omitted from the request when None
            max_tokens: Completion token cap; omitted when None

        Returns:
            The message content, or "" when the provider returned none.

        Raises:
            AIServiceError: missing key, transport failure or non-200 status
        """
        if not self.is_configured():
            raise AIServiceError("OpenAI API key not configured")

        request_body: Dict[str, Any] = {
            "model": model or self.model,
            "messages": messages,
        }
        if temperature is not None:
            request_body["temperature"] = temperature
        if max_tokens is not None:
            request_body["max_tokens"] = max_tokens

        try:
            async with self._client() as client:
                logger.debug(f"Requesting completion from {request_body['model']}")
                response = await client.post(
                    "/chat/completions",
                    json=request_body,
                    timeout=self.timeout,
                )
        except httpx.TimeoutException:
            logger.error("AI completion timed out")
            raise AIServiceError("AI request timed out")
        except httpx.HTTPError as e:
            logger.error(f"AI request failed: {e}")
            raise AIServiceError(f"AI request failed: {e}")

        if response.status_code != 200:
            message = _upstream_error_message(response)
            logger.error(f"AI provider error ({response.status_code}): {message}")
            raise AIServiceError(message, status_code=response.status_code)

        try:
            data = response.json()
        except ValueError:
            data = None
        if not isinstance(data, dict):
            raise AIServiceError("AI provider returned invalid JSON")

        choices = data.get("choices") or []
        if not choices:
            return ""
        first = choices[0] if isinstance(choices, list) and isinstance(choices[0], dict) else {}
        message = first.get("message")
        content = message.get("content") if isinstance(message, dict) else None
        if not isinstance(content, str):
            content = ""
        logger.debug(f"Received {len(content)} characters")
        return content


def _upstream_error_message(response: httpx.Response) -> str:
    """Pull `error.message` out of an OpenAI-style error body."""
    try:
        body = response.json()
    except ValueError:
        return response.text or f"AI provider returned status {response.status_code}"
    error = body.get("error") if isinstance(body, dict) else None
    if isinstance(error, dict) and error.get("message"):
        return str(error["message"])
    if isinstance(error, str):
        return error
    return f"AI provider returned status {response.status_code}"


# Global service instance
ai_service = AIService()


def get_ai_service() -> AIService:
    """FastAPI dependency returning the shared completions client."""
    return ai_service
