"""Prompt builder: session state and the AI Fill flow.

Two pieces:
1. PromptStore - the blocks being edited plus the saved prompts cache
2. AIFillOrchestrator - turns a free-text request into blocks via an LLM
"""

from promptstitch.builder.optimistic import OptimisticUpdate
from promptstitch.builder.store import PromptStore, order_for_display
from promptstitch.builder.ai_fill import (
    AIFillOrchestrator,
    AIFillResult,
    AIFillStage,
    build_combined_input,
    extract_clarification_questions,
    parse_generated_blocks,
)

__all__ = [
    # Store
    "OptimisticUpdate",
    "PromptStore",
    "order_for_display",
    # AI Fill
    "AIFillOrchestrator",
    "AIFillResult",
    "AIFillStage",
    "build_combined_input",
    "extract_clarification_questions",
    "parse_generated_blocks",
]
