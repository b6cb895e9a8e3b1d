"""Gemini generateContent client.

Wraps the REST endpoint directly so that HTTP status codes can be mapped to
user-facing errors:

- 429 -> ServerRateLimitError
- 401/403 -> CredentialError
- 400 -> BadRequestError
- other non-2xx -> UpstreamError (status and raw body)
- 2xx without candidates -> EmptyGenerationError
- network failures -> TransportError
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from promptstitch.llm.client import (
    DEFAULT_MAX_OUTPUT_TOKENS,
    DEFAULT_TEMPERATURE,
    LLMClient,
)
from promptstitch.llm.errors import (
    BadRequestError,
    CredentialError,
    EmptyGenerationError,
    ServerRateLimitError,
    TransportError,
    UpstreamError,
)
from promptstitch.llm.rate_limiter import RateLimiter

logger = logging.getLogger(__name__)

GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
GEMINI_MODEL = "gemini-2.5-flash"


def build_payload(prompt: str, temperature: float, max_output_tokens: int) -> dict[str, Any]:
    """Build the generateContent request body."""
    return {
        "contents": [
            {
                "parts": [{"text": prompt}],
            },
        ],
        "generationConfig": {
            "temperature": temperature,
            "maxOutputTokens": max_output_tokens,
        },
    }


def extract_text(data: dict[str, Any]) -> str:
    """Extract the first candidate's text from a response body.

    Raises:
        EmptyGenerationError: If the body holds no usable candidate.
    """
    candidates = data.get("candidates") if isinstance(data, dict) else None
    if not candidates:
        raise EmptyGenerationError()

    try:
        return candidates[0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError):
        raise EmptyGenerationError()


def raise_for_status(status_code: int, body: str) -> None:
    """Map a non-success status code to an LLM error."""
    if 200 <= status_code < 300:
        return
    if status_code == 429:
        raise ServerRateLimitError()
    if status_code in (401, 403):
        raise CredentialError()
    if status_code == 400:
        raise BadRequestError()
    raise UpstreamError(status_code, body)


class GeminiClient(LLMClient):
    """Gemini API client implementation."""

    def __init__(
        self,
        api_key: str,
        model: str = GEMINI_MODEL,
        base_url: str = GEMINI_BASE_URL,
        rate_limiter: RateLimiter | None = None,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = 60.0,
    ):
        """Initialize Gemini client.

        Args:
            api_key: Gemini API key, sent as the ``key`` query parameter.
            model: Model ID to use.
            base_url: API base URL.
            rate_limiter: Optional shared rate limiter.
            http_client: Optional preconfigured httpx client. The client is
                only closed by ``aclose`` when it was created here.
            timeout: Request timeout in seconds for the internal client.
        """
        if not api_key or not api_key.strip():
            raise CredentialError("No Gemini API key configured.")

        super().__init__(rate_limiter=rate_limiter)
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self._owns_http_client = http_client is None
        self._http_client = http_client or httpx.AsyncClient(timeout=timeout)

    @property
    def endpoint(self) -> str:
        """URL of the generateContent method for the configured model."""
        return f"{self.base_url}/models/{self.model}:generateContent"

    async def generate(
        self,
        prompt: str,
        temperature: float = DEFAULT_TEMPERATURE,
        max_output_tokens: int = DEFAULT_MAX_OUTPUT_TOKENS,
    ) -> str:
        """Generate a response using Gemini."""
        payload = build_payload(prompt, temperature, max_output_tokens)

        try:
            response = await self._http_client.post(
                self.endpoint,
                params={"key": self.api_key},
                json=payload,
                headers={"Content-Type": "application/json"},
            )
        except httpx.HTTPError as e:
            logger.error("Gemini request failed: %s", e)
            raise TransportError() from e

        if not response.is_success:
            logger.error("Gemini API error %d: %s", response.status_code, response.text)
            raise_for_status(response.status_code, response.text)

        try:
            data = response.json()
        except ValueError as e:
            logger.error("Gemini returned a non-JSON body: %s", response.text[:300])
            raise UpstreamError(response.status_code, response.text) from e

        return extract_text(data)

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._owns_http_client:
            await self._http_client.aclose()

    async def __aenter__(self) -> "GeminiClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()
