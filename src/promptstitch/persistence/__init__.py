"""Saved-prompt persistence: contract, backends and error handling."""

from promptstitch.persistence.models import (
    DEFAULT_PROMPT_COLOR,
    GatewayResult,
    PromptSnapshot,
    UserIdentity,
)
from promptstitch.persistence.errors import (
    ErrorCategory,
    PersistenceError,
    RecoveryAction,
    categorize_error,
    get_error_message,
    get_recovery_action,
    retry_with_backoff,
)
from promptstitch.persistence.gateway import PersistenceGateway
from promptstitch.persistence.memory import InMemoryGateway
from promptstitch.persistence.json_gateway import JsonFileGateway

__all__ = [
    # Models
    "DEFAULT_PROMPT_COLOR",
    "GatewayResult",
    "PromptSnapshot",
    "UserIdentity",
    # Errors
    "ErrorCategory",
    "PersistenceError",
    "RecoveryAction",
    "categorize_error",
    "get_error_message",
    "get_recovery_action",
    "retry_with_backoff",
    # Gateways
    "PersistenceGateway",
    "InMemoryGateway",
    "JsonFileGateway",
]
