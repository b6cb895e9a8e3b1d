"""PromptStitch - build LLM prompts from typed blocks."""

__version__ = "0.1.0"
