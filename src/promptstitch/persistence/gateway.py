"""Persistence gateway contract for saved prompts.

A gateway stores prompt snapshots per user. Public methods never raise for
expected failures; they return a GatewayResult with a user-facing error.
Backends implement the four storage primitives and raise PersistenceError.
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable

from promptstitch.blocks.models import Block
from promptstitch.persistence.errors import (
    PersistenceError,
    get_error_message,
    retry_with_backoff,
)
from promptstitch.persistence.models import (
    DEFAULT_PROMPT_COLOR,
    GatewayResult,
    PromptSnapshot,
    UserIdentity,
    utc_now_iso,
)

logger = logging.getLogger(__name__)

NOT_AUTHENTICATED = "User not authenticated"

# Delete failures get more specific wording than the generic table
DELETE_ERROR_MESSAGES: dict[str, str] = {
    "permission-denied": "Permission denied. You can only delete your own prompts.",
    "not-found": "Prompt not found. It may have already been deleted.",
    "unavailable": "Service temporarily unavailable. Please try again.",
}


def _error_code(error: BaseException) -> str | None:
    code = getattr(error, "code", None)
    return code if isinstance(code, str) else None


def _coerce_block(block: Any) -> Block:
    if isinstance(block, Block):
        return Block(id=block.id, type=block.type, content=block.content)
    if isinstance(block, dict):
        return Block.from_dict(block)
    raise PersistenceError("invalid-argument", "Invalid blocks")


class PersistenceGateway(ABC):
    """Abstract store of saved prompts keyed by user."""

    def __init__(
        self,
        max_retries: int = 3,
        base_delay: float = 1.0,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        """Initialize the gateway.

        Args:
            max_retries: Attempts for load and pin updates.
            base_delay: First backoff delay in seconds.
            sleep: Awaitable sleep used between retries.
        """
        self.max_retries = max_retries
        self.base_delay = base_delay
        self._sleep = sleep

    # Storage primitives

    @abstractmethod
    async def _list_documents(self, uid: str) -> list[dict[str, Any]]:
        """Return all prompt documents for a user."""
        pass

    @abstractmethod
    async def _get_document(self, uid: str, prompt_id: str) -> dict[str, Any] | None:
        """Return one prompt document or None."""
        pass

    @abstractmethod
    async def _put_document(self, uid: str, prompt_id: str, document: dict[str, Any]) -> None:
        """Create or replace a prompt document."""
        pass

    @abstractmethod
    async def _delete_document(self, uid: str, prompt_id: str) -> None:
        """Delete a prompt document.

        Raises:
            PersistenceError: With code ``not-found`` if it does not exist.
        """
        pass

    # Public contract

    async def _with_retry(self, fn: Callable[[], Awaitable[Any]]) -> Any:
        return await retry_with_backoff(
            fn,
            max_retries=self.max_retries,
            base_delay=self.base_delay,
            sleep=self._sleep,
        )

    async def load(self, user: UserIdentity | None) -> GatewayResult:
        """Load all saved prompts for a user, newest first."""
        if user is None:
            return GatewayResult.fail(NOT_AUTHENTICATED)

        try:
            documents = await self._with_retry(lambda: self._list_documents(user.uid))
        except Exception as e:
            logger.error("Error loading prompts for %s: %s", user.uid, e)
            return GatewayResult.fail(
                get_error_message(e) or "Failed to load prompts", code=_error_code(e)
            )

        prompts = [PromptSnapshot.from_dict(doc) for doc in documents]
        prompts.sort(key=lambda p: p.created_at, reverse=True)
        return GatewayResult.ok(data=prompts)

    async def save(
        self,
        user: UserIdentity | None,
        blocks: Any,
        custom_name: str | None = None,
        custom_color: str | None = None,
    ) -> GatewayResult:
        """Save a new prompt snapshot.

        Returns:
            Result carrying the new prompt id on success.
        """
        if user is None:
            return GatewayResult.fail(NOT_AUTHENTICATED)
        if not isinstance(blocks, (list, tuple)):
            return GatewayResult.fail("Invalid blocks")

        try:
            stored_blocks = [_coerce_block(b) for b in blocks]
        except PersistenceError as e:
            return GatewayResult.fail(e.message)

        if all(b.is_empty for b in stored_blocks):
            return GatewayResult.fail("Cannot save an empty prompt")

        now = utc_now_iso()
        snapshot = PromptSnapshot(
            id=uuid.uuid4().hex,
            blocks=stored_blocks,
            created_at=now,
            updated_at=now,
            custom_name=(custom_name or "").strip() or None,
            custom_color=custom_color or DEFAULT_PROMPT_COLOR,
        )

        try:
            await self._put_document(user.uid, snapshot.id, snapshot.to_dict())
        except Exception as e:
            logger.error("Error saving prompt for %s: %s", user.uid, e)
            return GatewayResult.fail(
                get_error_message(e) or "Failed to save prompt", code=_error_code(e)
            )

        logger.info("Saved prompt %s for %s", snapshot.id, user.uid)
        return GatewayResult.ok(prompt_id=snapshot.id)

    async def delete(self, user: UserIdentity | None, prompt_id: Any) -> GatewayResult:
        """Delete a saved prompt."""
        if user is None:
            return GatewayResult.fail(NOT_AUTHENTICATED)
        if not prompt_id or not isinstance(prompt_id, str):
            return GatewayResult.fail("Invalid prompt ID")

        try:
            await self._delete_document(user.uid, prompt_id)
        except Exception as e:
            logger.error("Error deleting prompt %s: %s", prompt_id, e)
            code = _error_code(e)
            return GatewayResult.fail(
                DELETE_ERROR_MESSAGES.get(code or "")
                or get_error_message(e)
                or "Failed to delete prompt",
                code=code,
            )

        return GatewayResult.ok(prompt_id=prompt_id)

    async def update_pin_state(
        self, user: UserIdentity | None, prompt_id: str | None, is_pinned: bool
    ) -> GatewayResult:
        """Pin or unpin a saved prompt."""
        if user is None:
            return GatewayResult.fail(NOT_AUTHENTICATED)
        if not prompt_id:
            return GatewayResult.fail("Prompt ID is required")

        async def _update() -> None:
            document = await self._get_document(user.uid, prompt_id)
            if document is None:
                raise PersistenceError("not-found")
            now = utc_now_iso()
            document.update({
                "isPinned": bool(is_pinned),
                "pinnedAt": now if is_pinned else None,
                "updatedAt": now,
            })
            await self._put_document(user.uid, prompt_id, document)

        try:
            await self._with_retry(_update)
        except Exception as e:
            logger.error("Error updating pin state of %s: %s", prompt_id, e)
            return GatewayResult.fail(
                get_error_message(e) or "Failed to update prompt pin state",
                code=_error_code(e),
            )

        return GatewayResult.ok(prompt_id=prompt_id)
