"""Prompt builder session state.

The PromptStore holds the ordered block list being edited, the signed-in
user, and a cache of that user's saved prompts. Block mutators are plain
synchronous methods; saved-prompt operations are async and go through a
PersistenceGateway.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Iterable

from promptstitch.blocks.models import Block, compose_prompt
from promptstitch.blocks.types import BlockType
from promptstitch.builder.optimistic import OptimisticUpdate
from promptstitch.persistence.gateway import NOT_AUTHENTICATED, PersistenceGateway
from promptstitch.persistence.memory import InMemoryGateway
from promptstitch.persistence.models import (
    GatewayResult,
    PromptSnapshot,
    UserIdentity,
    utc_now_iso,
)

logger = logging.getLogger(__name__)


def order_for_display(prompts: Iterable[PromptSnapshot]) -> list[PromptSnapshot]:
    """Pinned prompts first (most recently pinned on top), others unchanged."""
    prompts = list(prompts)
    pinned = sorted(
        (p for p in prompts if p.is_pinned),
        key=lambda p: p.pinned_at or "",
        reverse=True,
    )
    return pinned + [p for p in prompts if not p.is_pinned]


@dataclass
class PromptStore:
    """Mutable state of one prompt-building session."""

    gateway: PersistenceGateway = field(default_factory=InMemoryGateway)
    blocks: list[Block] = field(default_factory=list)
    user: UserIdentity | None = None
    auth_checked: bool = False

    # Saved prompts cache
    saved_prompts: list[PromptSnapshot] = field(default_factory=list)
    saved_prompts_loading: bool = False
    saved_prompts_error: str | None = None

    # Block operations

    def add_block(self, block_type: str | BlockType | None, content: str = "") -> Block:
        """Append a new block and return it.

        Any type value is accepted. Passing ``content`` creates the block
        already filled in.
        """
        block = Block(type=block_type, content=content)
        self.blocks = [*self.blocks, block]
        return block

    def update_block(self, block_id: str, content: str) -> None:
        """Replace the content of a block. Unknown ids are ignored."""
        self.blocks = [
            replace(b, content=content) if b.id == block_id else b
            for b in self.blocks
        ]

    def remove_block(self, block_id: str) -> None:
        """Remove a block by id."""
        self.blocks = [b for b in self.blocks if b.id != block_id]

    def reorder_blocks(self, new_order: list[Block]) -> None:
        """Replace the block list with a manually reordered one."""
        self.blocks = list(new_order)

    def clear_builder(self) -> None:
        """Remove all blocks."""
        self.blocks = []

    def get_block(self, block_id: str) -> Block | None:
        """Get a block by id."""
        for block in self.blocks:
            if block.id == block_id:
                return block
        return None

    def load_prompt_into_builder(self, prompt: PromptSnapshot) -> None:
        """Copy a saved prompt's blocks into the builder with fresh ids."""
        self.blocks = [Block(type=b.type, content=b.content) for b in prompt.blocks]

    @property
    def composed_prompt(self) -> str:
        """The prompt text in canonical block order."""
        return compose_prompt(self.blocks)

    # User

    def set_user(self, user: UserIdentity | None) -> None:
        """Set the signed-in user. Signing out drops the saved prompt cache."""
        self.user = user
        self.auth_checked = True
        if user is None:
            self.saved_prompts = []
            self.saved_prompts_error = None
            self.saved_prompts_loading = False

    # Saved prompts

    async def load_saved_prompts(self) -> GatewayResult:
        """Reload the saved prompt cache from the gateway."""
        if self.user is None:
            self.saved_prompts_error = NOT_AUTHENTICATED
            return GatewayResult.fail(NOT_AUTHENTICATED)

        self.saved_prompts_loading = True
        self.saved_prompts_error = None
        try:
            result = await self.gateway.load(self.user)
        finally:
            self.saved_prompts_loading = False

        if result.success:
            self.saved_prompts = list(result.data or [])
        else:
            logger.error("Error loading saved prompts: %s", result.error)
            self.saved_prompts_error = result.error or "Failed to load saved prompts"
        return result

    async def save_current_prompt(
        self,
        custom_name: str | None = None,
        custom_color: str | None = None,
    ) -> GatewayResult:
        """Save the current blocks and refresh the cache."""
        if self.user is None:
            return GatewayResult.fail(NOT_AUTHENTICATED)
        if not self.blocks:
            return GatewayResult.fail("No blocks to save")

        result = await self.gateway.save(
            self.user, self.blocks, custom_name=custom_name, custom_color=custom_color
        )
        if not result.success:
            logger.error("Error saving prompt: %s", result.error)
            return result

        await self.load_saved_prompts()
        return result

    async def delete_saved_prompt(self, prompt_id: str) -> GatewayResult:
        """Delete a saved prompt and drop it from the cache."""
        if self.user is None:
            return GatewayResult.fail(NOT_AUTHENTICATED)
        if not prompt_id:
            return GatewayResult.fail("Prompt ID is required")

        result = await self.gateway.delete(self.user, prompt_id)
        if result.success:
            self.saved_prompts = [p for p in self.saved_prompts if p.id != prompt_id]
        else:
            logger.error("Error deleting prompt %s: %s", prompt_id, result.error)
        return result

    async def toggle_pin(self, prompt_id: str) -> GatewayResult:
        """Flip the pin state of a saved prompt.

        The cache is updated before the gateway call and restored if the
        call fails.
        """
        if self.user is None:
            return GatewayResult.fail(NOT_AUTHENTICATED)

        target = next((p for p in self.saved_prompts if p.id == prompt_id), None)
        if target is None:
            return GatewayResult.fail("Prompt not found")

        is_pinned = not target.is_pinned
        now = utc_now_iso()

        def apply(prompts: list[PromptSnapshot]) -> list[PromptSnapshot]:
            return [
                replace(
                    p,
                    is_pinned=is_pinned,
                    pinned_at=now if is_pinned else None,
                    updated_at=now,
                )
                if p.id == prompt_id
                else p
                for p in prompts
            ]

        def write(prompts: list[PromptSnapshot]) -> None:
            self.saved_prompts = prompts

        update = OptimisticUpdate(lambda: self.saved_prompts, write)
        user = self.user
        return await update.run(
            apply,
            lambda: self.gateway.update_pin_state(user, prompt_id, is_pinned),
            description=f"pin toggle of {prompt_id}",
        )

    def clear_error(self) -> None:
        """Clear the saved prompts error."""
        self.saved_prompts_error = None
