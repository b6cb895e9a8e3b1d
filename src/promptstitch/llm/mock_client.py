"""Mock LLM client for testing and offline use."""

from __future__ import annotations

from typing import Callable

from promptstitch.llm.client import (
    DEFAULT_MAX_OUTPUT_TOKENS,
    DEFAULT_TEMPERATURE,
    LLMClient,
)
from promptstitch.llm.rate_limiter import RateLimiter

ScriptedResponse = str | Exception


class MockLLMClient(LLMClient):
    """Mock LLM client for testing without API calls."""

    def __init__(
        self,
        responses: list[ScriptedResponse] | dict[str, ScriptedResponse] | None = None,
        default_response: str = "NO_CLARIFICATION_NEEDED",
        response_fn: Callable[[str], ScriptedResponse] | None = None,
        rate_limiter: RateLimiter | None = None,
    ):
        """Initialize mock client.

        Args:
            responses: Either a list consumed one entry per call, or a dict
                mapping prompt substrings to responses. Exception entries
                are raised instead of returned.
            default_response: Response when nothing else matches.
            response_fn: Function computing the response from the prompt.
            rate_limiter: Optional rate limiter; a generous one by default.
        """
        super().__init__(rate_limiter=rate_limiter or RateLimiter(max_requests=1000))
        self.responses = responses if responses is not None else []
        self.default_response = default_response
        self.response_fn = response_fn
        self.call_history: list[dict] = []
        self.suggestion_delay = 0.0

    async def generate(
        self,
        prompt: str,
        temperature: float = DEFAULT_TEMPERATURE,
        max_output_tokens: int = DEFAULT_MAX_OUTPUT_TOKENS,
    ) -> str:
        """Generate a mock response."""
        self.call_history.append({
            "prompt": prompt,
            "temperature": temperature,
            "max_output_tokens": max_output_tokens,
        })

        response = self._pick_response(prompt)
        if isinstance(response, Exception):
            raise response
        return response

    def _pick_response(self, prompt: str) -> ScriptedResponse:
        if self.response_fn:
            return self.response_fn(prompt)

        if isinstance(self.responses, dict):
            for key, response in self.responses.items():
                if key in prompt:
                    return response
            return self.default_response

        if self.responses:
            return self.responses.pop(0)
        return self.default_response

    def add_response(self, response: ScriptedResponse) -> None:
        """Queue a response for a later call."""
        if isinstance(self.responses, dict):
            raise TypeError("add_response requires list-based responses")
        self.responses.append(response)

    def clear_history(self) -> None:
        """Clear call history."""
        self.call_history = []

    @property
    def last_call(self) -> dict | None:
        """Get the last call made."""
        return self.call_history[-1] if self.call_history else None

    @property
    def call_count(self) -> int:
        """Get number of calls made."""
        return len(self.call_history)
