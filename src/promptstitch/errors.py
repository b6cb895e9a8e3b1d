"""Base exceptions for promptstitch."""

from __future__ import annotations


class PromptStitchError(Exception):
    """Base class for all promptstitch errors.

    The message is always safe to show to the user.
    """

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message