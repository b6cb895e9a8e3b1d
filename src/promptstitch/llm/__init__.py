"""LLM client interfaces and implementations."""

from promptstitch.llm.client import LLMClient, block_content_prompt
from promptstitch.llm.errors import (
    LLMError,
    ClientRateLimitError,
    ServerRateLimitError,
    CredentialError,
    BadRequestError,
    UpstreamError,
    EmptyGenerationError,
    TransportError,
)
from promptstitch.llm.gemini_client import GeminiClient
from promptstitch.llm.mock_client import MockLLMClient
from promptstitch.llm.rate_limiter import RateLimiter

__all__ = [
    "LLMClient",
    "block_content_prompt",
    "GeminiClient",
    "MockLLMClient",
    "RateLimiter",
    # Errors
    "LLMError",
    "ClientRateLimitError",
    "ServerRateLimitError",
    "CredentialError",
    "BadRequestError",
    "UpstreamError",
    "EmptyGenerationError",
    "TransportError",
]
