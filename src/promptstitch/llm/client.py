"""LLM client interface for prompt generation."""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod

from promptstitch.blocks.types import BlockType
from promptstitch.llm.rate_limiter import RateLimiter

logger = logging.getLogger(__name__)

DEFAULT_TEMPERATURE = 0.7
DEFAULT_MAX_OUTPUT_TOKENS = 256

# Canned instructions for single-block generation
BLOCK_CONTENT_PROMPTS: dict[str, str] = {
    BlockType.TASK.value: (
        "Write a clear, specific task for an AI prompt. Make it actionable "
        "and focused. Just the task, no extra text."
    ),
    BlockType.TONE.value: (
        "Suggest an appropriate tone for an AI prompt. Choose from: "
        "professional, casual, friendly, authoritative, creative. Just the tone word."
    ),
    BlockType.FORMAT.value: (
        "Suggest a good output format for an AI response. Options: paragraph, "
        "list, steps, table, bullet points. Just the format word."
    ),
    BlockType.PERSONA.value: (
        "Describe a helpful persona/role for an AI assistant. Keep it brief "
        'and specific. Start with "You are a..."'
    ),
    BlockType.CONSTRAINT.value: (
        "Suggest a useful constraint or guideline for an AI response. Be "
        'specific and practical. Start with "Please..."'
    ),
}


def block_content_prompt(block_type: str) -> str:
    """Get the instruction used to generate content for a block type."""
    if isinstance(block_type, BlockType):
        block_type = block_type.value
    return BLOCK_CONTENT_PROMPTS.get(
        block_type, f"Generate helpful content for a {block_type} block."
    )


class LLMClient(ABC):
    """Abstract base class for LLM clients.

    Subclasses implement ``generate``; callers use ``make_request``, which
    applies the client-side rate limit first.
    """

    # Pause between suggestion requests, in seconds
    suggestion_delay: float = 0.5

    def __init__(self, rate_limiter: RateLimiter | None = None):
        """Initialize the client.

        Args:
            rate_limiter: Limiter to use. Pass a shared instance to make
                several clients share one request allowance.
        """
        self.rate_limiter = rate_limiter or RateLimiter()

    @abstractmethod
    async def generate(
        self,
        prompt: str,
        temperature: float = DEFAULT_TEMPERATURE,
        max_output_tokens: int = DEFAULT_MAX_OUTPUT_TOKENS,
    ) -> str:
        """Generate text for a prompt.

        Args:
            prompt: Full prompt text.
            temperature: Sampling temperature.
            max_output_tokens: Maximum tokens in the response.

        Returns:
            The generated text.
        """
        pass

    async def make_request(
        self,
        prompt: str,
        temperature: float = DEFAULT_TEMPERATURE,
        max_output_tokens: int = DEFAULT_MAX_OUTPUT_TOKENS,
    ) -> str:
        """Rate-limit, then generate.

        Raises:
            ClientRateLimitError: If the local cap is reached.
            LLMError: For any generation failure.
        """
        self.rate_limiter.check()
        return await self.generate(
            prompt, temperature=temperature, max_output_tokens=max_output_tokens
        )

    async def generate_block_content(self, block_type: str) -> str:
        """Generate content for a single block of the given type."""
        return await self.make_request(
            block_content_prompt(block_type),
            temperature=0.8,
            max_output_tokens=100,
        )

    async def generate_suggestions(self, block_type: str, count: int = 3) -> list[str]:
        """Generate several content suggestions for a block type.

        Requests run one after another. The first failure ends the batch and
        whatever was collected so far is returned.
        """
        suggestions: list[str] = []

        for i in range(count):
            try:
                content = await self.generate_block_content(block_type)
            except Exception as e:
                logger.warning("Failed to generate suggestion %d: %s", i + 1, e)
                break

            suggestions.append(content)
            await asyncio.sleep(self.suggestion_delay)

        return suggestions

    async def aclose(self) -> None:
        """Release any resources held by the client."""
        return None
