"""Tests for the Gemini client."""

from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from promptstitch.llm.errors import (
    BadRequestError,
    ClientRateLimitError,
    CredentialError,
    EmptyGenerationError,
    ServerRateLimitError,
    TransportError,
    UpstreamError,
)
from promptstitch.llm.gemini_client import GeminiClient, build_payload, extract_text
from promptstitch.llm.rate_limiter import RateLimiter


def _success_body(text: str) -> dict:
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


def _client(handler, **kwargs) -> GeminiClient:
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return GeminiClient(api_key="test-key", http_client=http_client, **kwargs)


def _generate(client: GeminiClient, prompt: str = "Hello") -> str:
    async def run() -> str:
        try:
            return await client.make_request(prompt)
        finally:
            await client._http_client.aclose()

    return asyncio.run(run())


class TestPayload:
    """Tests for request and response helpers."""

    def test_build_payload(self) -> None:
        """Test the generateContent body shape."""
        payload = build_payload("Hi", 0.7, 800)

        assert payload["contents"][0]["parts"][0]["text"] == "Hi"
        assert payload["generationConfig"] == {"temperature": 0.7, "maxOutputTokens": 800}

    def test_extract_text(self) -> None:
        """Test the first candidate's text is returned."""
        assert extract_text(_success_body("Answer")) == "Answer"

    def test_extract_text_without_candidates(self) -> None:
        """Test missing or malformed candidates raise EmptyGenerationError."""
        with pytest.raises(EmptyGenerationError):
            extract_text({"candidates": []})
        with pytest.raises(EmptyGenerationError):
            extract_text({"candidates": [{"content": {}}]})


class TestGeminiClient:
    """Tests for GeminiClient HTTP handling."""

    def test_requires_api_key(self) -> None:
        """Test a blank key is rejected at construction."""
        with pytest.raises(CredentialError):
            GeminiClient(api_key="  ")

    def test_successful_request(self) -> None:
        """Test the request carries key, model path and payload."""
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = request.url
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json=_success_body("Generated text"))

        client = _client(handler, model="test-model")

        assert _generate(client, "Write a haiku") == "Generated text"
        assert seen["url"].params["key"] == "test-key"
        assert seen["url"].path.endswith("/models/test-model:generateContent")
        assert seen["body"]["contents"][0]["parts"][0]["text"] == "Write a haiku"

    @pytest.mark.parametrize(
        "status,error_type,message",
        [
            (429, ServerRateLimitError, "Too many requests. Please wait a moment and try again."),
            (401, CredentialError, "Invalid API key. Please check your settings."),
            (403, CredentialError, "Invalid API key. Please check your settings."),
            (400, BadRequestError, "Invalid request. Please try a different prompt."),
        ],
    )
    def test_status_mapping(self, status, error_type, message) -> None:
        """Test known statuses map to user-facing errors."""
        client = _client(lambda request: httpx.Response(status, text="nope"))

        with pytest.raises(error_type) as exc_info:
            _generate(client)

        assert exc_info.value.message == message

    def test_other_status_includes_body(self) -> None:
        """Test unknown statuses carry the status and raw body."""
        client = _client(lambda request: httpx.Response(500, text="backend exploded"))

        with pytest.raises(UpstreamError) as exc_info:
            _generate(client)

        assert exc_info.value.status_code == 500
        assert exc_info.value.message == "API Error (500): backend exploded"

    def test_no_candidates(self) -> None:
        """Test a success without candidates raises EmptyGenerationError."""
        client = _client(lambda request: httpx.Response(200, json={"candidates": []}))

        with pytest.raises(EmptyGenerationError) as exc_info:
            _generate(client)

        assert exc_info.value.message == "No content generated. Please try again."

    def test_transport_error(self) -> None:
        """Test network failures become TransportError."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client = _client(handler)

        with pytest.raises(TransportError):
            _generate(client)

    def test_rate_limit_checked_before_request(self) -> None:
        """Test the local cap stops the call before any HTTP traffic."""
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(200, json=_success_body("ok"))

        client = _client(handler, rate_limiter=RateLimiter(max_requests=0))

        with pytest.raises(ClientRateLimitError):
            _generate(client)

        assert calls == []

    def test_shared_rate_limiter(self) -> None:
        """Test two clients can count against one limiter."""
        limiter = RateLimiter(max_requests=1)
        handler = lambda request: httpx.Response(200, json=_success_body("ok"))
        first = _client(handler, rate_limiter=limiter)
        second = _client(handler, rate_limiter=limiter)

        _generate(first)

        with pytest.raises(ClientRateLimitError):
            _generate(second)

    def test_aclose_keeps_injected_client(self) -> None:
        """Test aclose does not close an http client it was given."""
        http_client = httpx.AsyncClient(
            transport=httpx.MockTransport(lambda r: httpx.Response(200))
        )
        client = GeminiClient(api_key="k", http_client=http_client)

        asyncio.run(client.aclose())

        assert not http_client.is_closed
        asyncio.run(http_client.aclose())
