"""Errors raised by LLM clients.

Each error carries a message that can be shown to the user as-is.
"""

from __future__ import annotations

from promptstitch.errors import PromptStitchError


class LLMError(PromptStitchError):
    """Base class for LLM failures."""

    default_message = "Something went wrong. Please try again."

    def __init__(self, message: str | None = None):
        super().__init__(message or self.default_message)


class ClientRateLimitError(LLMError):
    """Local request cap exceeded."""

    default_message = "Please wait a moment before making another request."


class ServerRateLimitError(LLMError):
    """Endpoint answered 429."""

    default_message = "Too many requests. Please wait a moment and try again."


class CredentialError(LLMError):
    """API key missing or rejected (401/403)."""

    default_message = "Invalid API key. Please check your settings."


class BadRequestError(LLMError):
    """Endpoint answered 400."""

    default_message = "Invalid request. Please try a different prompt."


class UpstreamError(LLMError):
    """Any other non-success status."""

    def __init__(self, status_code: int, body: str = ""):
        self.status_code = status_code
        self.body = body
        detail = body or "Something went wrong. Please try again."
        super().__init__(f"API Error ({status_code}): {detail}")


class EmptyGenerationError(LLMError):
    """Successful response without any candidate."""

    default_message = "No content generated. Please try again."


class TransportError(LLMError):
    """Network-level failure before a response was received."""

    default_message = "Network error. Please check your connection and try again."
