"""Persistence error taxonomy, user-facing messages and retry policy."""

from __future__ import annotations

import asyncio
import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, TypeVar

from promptstitch.errors import PromptStitchError

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_ERROR_MESSAGE = "An unexpected error occurred. Please try again."

# Store error codes mapped to user-friendly messages
ERROR_MESSAGES: dict[str, str] = {
    # Authentication
    "auth/user-not-found": "No account found with this email address.",
    "auth/wrong-password": "Incorrect password. Please try again.",
    "auth/invalid-email": "Invalid email address format.",
    "auth/user-disabled": "This account has been disabled.",
    "auth/requires-recent-login": "Please sign in again to complete this action.",
    "auth/too-many-requests": "Too many unsuccessful login attempts. Please try again later.",
    # Document store
    "permission-denied": "You don't have permission to perform this action.",
    "not-found": "The requested document was not found.",
    "already-exists": "The document already exists.",
    "unavailable": "The service is currently unavailable. Please try again later.",
    "resource-exhausted": "Quota exceeded. Please try again later.",
    "failed-precondition": (
        "Operation was rejected because the system is not in a state "
        "required for the operation."
    ),
    "aborted": "The operation was aborted.",
    "internal": "Internal error. Please try again later.",
    "data-loss": "Unrecoverable data loss or corruption.",
    "unauthenticated": "User is not authenticated. Please sign in and try again.",
    # Network
    "network-request-failed": "Network connection error. Please check your internet connection.",
}

# Codes that will not succeed on retry
NON_RETRYABLE_CODES = frozenset({
    "permission-denied",
    "unauthenticated",
    "auth/user-not-found",
    "auth/wrong-password",
})


class PersistenceError(PromptStitchError):
    """Error reported by a persistence backend."""

    def __init__(self, code: str, message: str | None = None):
        self.code = code
        super().__init__(message or ERROR_MESSAGES.get(code, DEFAULT_ERROR_MESSAGE))


class ErrorCategory(Enum):
    """Broad category of a persistence failure."""

    AUTH = "auth"
    NETWORK = "network"
    PERMISSION = "permission"
    DATA = "data"
    UNKNOWN = "unknown"


@dataclass
class RecoveryAction:
    """Suggested next step for the user."""

    title: str
    action: str
    description: str

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "title": self.title,
            "action": self.action,
            "description": self.description,
        }


RECOVERY_ACTIONS: dict[ErrorCategory, RecoveryAction] = {
    ErrorCategory.AUTH: RecoveryAction(
        "Authentication Issue",
        "Sign in again",
        "Try signing out and signing back in to refresh your session.",
    ),
    ErrorCategory.NETWORK: RecoveryAction(
        "Network Issue",
        "Retry",
        "Check your internet connection and try again.",
    ),
    ErrorCategory.PERMISSION: RecoveryAction(
        "Permission Issue",
        "Sign in",
        "You may need to sign in again or request access.",
    ),
    ErrorCategory.DATA: RecoveryAction(
        "Data Issue",
        "Refresh",
        "The data may have been modified or deleted. Try refreshing.",
    ),
    ErrorCategory.UNKNOWN: RecoveryAction(
        "Unexpected Error",
        "Try again",
        "Something went wrong. Please try again or contact support.",
    ),
}


def _code_of(error: BaseException | str | None) -> str:
    if isinstance(error, str):
        return error
    code = getattr(error, "code", None)
    return code if isinstance(code, str) else ""


def get_error_message(error: BaseException | None) -> str:
    """Get a user-friendly message for an error."""
    if error is None:
        return DEFAULT_ERROR_MESSAGE

    code = _code_of(error)
    if code and code in ERROR_MESSAGES:
        return ERROR_MESSAGES[code]

    message = getattr(error, "message", None) or str(error)
    return message or DEFAULT_ERROR_MESSAGE


def categorize_error(error: BaseException | str | None) -> ErrorCategory:
    """Categorize an error, or a bare error code, for recovery handling."""
    code = _code_of(error)

    if code.startswith("auth/"):
        return ErrorCategory.AUTH
    if code in ("permission-denied", "unauthenticated"):
        return ErrorCategory.PERMISSION
    if code in ("network-request-failed", "unavailable"):
        return ErrorCategory.NETWORK
    if code in ("not-found", "already-exists", "data-loss"):
        return ErrorCategory.DATA
    return ErrorCategory.UNKNOWN


def get_recovery_action(category: ErrorCategory) -> RecoveryAction:
    """Get the suggested recovery action for a category."""
    return RECOVERY_ACTIONS.get(category, RECOVERY_ACTIONS[ErrorCategory.UNKNOWN])


def is_retryable(error: BaseException) -> bool:
    """Check if an error is worth retrying."""
    return _code_of(error) not in NON_RETRYABLE_CODES


async def retry_with_backoff(
    fn: Callable[[], Awaitable[T]],
    max_retries: int = 3,
    base_delay: float = 1.0,
    max_delay: float = 10.0,
    sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
) -> T:
    """Run an async callable with exponential backoff and jitter.

    Permission and credential errors are re-raised immediately. Any other
    error is retried until ``max_retries`` attempts have been made.

    Args:
        fn: Zero-argument coroutine function to call.
        max_retries: Total number of attempts.
        base_delay: Delay before the second attempt, in seconds.
        max_delay: Upper bound for any single delay.
        sleep: Awaitable sleep, injectable for tests.

    Returns:
        The callable's result.
    """
    for attempt in range(max_retries):
        try:
            return await fn()
        except Exception as e:
            if not is_retryable(e) or attempt == max_retries - 1:
                raise

            delay = min(max_delay, base_delay * (2 ** attempt) * random.uniform(0.8, 1.2))
            logger.info(
                "Attempt %d/%d failed (%s), retrying in %.2fs",
                attempt + 1,
                max_retries,
                e,
                delay,
            )
            await sleep(delay)

    raise ValueError("max_retries must be at least 1")
