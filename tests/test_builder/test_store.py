"""Tests for the prompt store."""

from __future__ import annotations

import asyncio

from promptstitch.blocks.models import Block
from promptstitch.builder.store import PromptStore, order_for_display
from promptstitch.persistence.memory import InMemoryGateway
from promptstitch.persistence.models import GatewayResult, PromptSnapshot


class RejectingPinGateway(InMemoryGateway):
    """Gateway whose pin updates always fail."""

    async def update_pin_state(self, user, prompt_id, is_pinned):
        return GatewayResult.fail("Pin rejected", code="permission-denied")


class ExplodingPinGateway(InMemoryGateway):
    """Gateway whose pin updates raise."""

    async def update_pin_state(self, user, prompt_id, is_pinned):
        raise RuntimeError("connection dropped")


def _seed(store: PromptStore, *contents: str) -> list[str]:
    ids = []
    for content in contents:
        store.clear_builder()
        store.add_block("Task", content)
        ids.append(asyncio.run(store.save_current_prompt()).prompt_id)
    return ids


class TestBlockOperations:
    """Tests for the synchronous block mutators."""

    def test_add_block(self, store) -> None:
        """Test blocks are appended with a fresh id."""
        first = store.add_block("Task")
        second = store.add_block("Tone", "Friendly")

        assert store.blocks == [first, second]
        assert first.content == ""
        assert second.content == "Friendly"
        assert first.id != second.id

    def test_add_block_accepts_any_type(self, store) -> None:
        """Test unknown types are stored unchanged."""
        block = store.add_block("Mystery")

        assert block.type == "Mystery"

    def test_update_block(self, store) -> None:
        """Test content is replaced and unknown ids are ignored."""
        block = store.add_block("Task", "old")

        store.update_block(block.id, "new")
        store.update_block("missing", "ignored")

        assert store.get_block(block.id).content == "new"
        assert len(store.blocks) == 1

    def test_remove_block(self, store) -> None:
        """Test removing by id."""
        keep = store.add_block("Task")
        drop = store.add_block("Tone")

        store.remove_block(drop.id)

        assert store.blocks == [keep]
        assert store.get_block(drop.id) is None

    def test_reorder_blocks(self, store) -> None:
        """Test a manual order replaces the list."""
        first = store.add_block("Task")
        second = store.add_block("Tone")

        store.reorder_blocks([second, first])

        assert store.blocks == [second, first]

    def test_clear_builder(self, store) -> None:
        """Test all blocks are removed."""
        store.add_block("Task")

        store.clear_builder()

        assert store.blocks == []

    def test_composed_prompt(self, store) -> None:
        """Test the composed prompt follows the canonical order."""
        store.add_block("Tone", "Warm")
        store.add_block("Task", "Greet the user")

        assert store.composed_prompt == "Task: Greet the user\n\nTone: Warm"

    def test_load_prompt_into_builder(self, store) -> None:
        """Test loading copies blocks with fresh ids."""
        original = Block(type="Task", content="Reuse me")
        prompt = PromptSnapshot(id="p1", blocks=[original])

        store.load_prompt_into_builder(prompt)

        assert len(store.blocks) == 1
        assert store.blocks[0].content == "Reuse me"
        assert store.blocks[0].id != original.id


class TestUser:
    """Tests for user handling."""

    def test_sign_out_clears_cache(self, store) -> None:
        """Test signing out drops saved prompts."""
        _seed(store, "one")
        assert store.saved_prompts

        store.set_user(None)

        assert store.user is None
        assert store.auth_checked
        assert store.saved_prompts == []

    def test_operations_need_a_user(self, gateway) -> None:
        """Test saved-prompt operations fail when signed out."""
        store = PromptStore(gateway=gateway)
        store.add_block("Task", "x")

        assert asyncio.run(store.save_current_prompt()).error == "User not authenticated"
        assert asyncio.run(store.load_saved_prompts()).error == "User not authenticated"
        assert store.saved_prompts_error == "User not authenticated"
        assert asyncio.run(store.toggle_pin("p")).error == "User not authenticated"


class TestSavedPrompts:
    """Tests for the saved prompts cache."""

    def test_save_reloads_cache(self, store) -> None:
        """Test saving refreshes the saved prompts list."""
        store.add_block("Task", "Summarize the report")

        result = asyncio.run(store.save_current_prompt(custom_name="Summary", custom_color="#ff0000"))

        assert result.success
        assert len(store.saved_prompts) == 1
        saved = store.saved_prompts[0]
        assert saved.id == result.prompt_id
        assert saved.custom_name == "Summary"
        assert saved.custom_color == "#ff0000"
        assert not store.saved_prompts_loading

    def test_save_without_blocks(self, store) -> None:
        """Test saving an empty builder is rejected."""
        result = asyncio.run(store.save_current_prompt())

        assert not result.success
        assert result.error == "No blocks to save"

    def test_save_whitespace_only(self, store) -> None:
        """Test blocks without content are rejected by the gateway."""
        store.add_block("Task", "   ")

        result = asyncio.run(store.save_current_prompt())

        assert result.error == "Cannot save an empty prompt"

    def test_delete_saved_prompt(self, store) -> None:
        """Test deletion drops the prompt from the cache."""
        first, second = _seed(store, "one", "two")

        result = asyncio.run(store.delete_saved_prompt(first))

        assert result.success
        assert [p.id for p in store.saved_prompts] == [second]

    def test_delete_missing_prompt(self, store) -> None:
        """Test a failed delete leaves the cache untouched."""
        _seed(store, "one")
        before = list(store.saved_prompts)

        result = asyncio.run(store.delete_saved_prompt("ghost"))

        assert not result.success
        assert store.saved_prompts == before

    def test_clear_error(self, store) -> None:
        """Test the error can be dismissed."""
        store.saved_prompts_error = "Something failed"

        store.clear_error()

        assert store.saved_prompts_error is None


class TestTogglePin:
    """Tests for optimistic pin toggling."""

    def test_pin_and_unpin(self, store) -> None:
        """Test toggling updates cache and gateway."""
        (prompt_id,) = _seed(store, "one")

        assert asyncio.run(store.toggle_pin(prompt_id)).success
        pinned = store.saved_prompts[0]
        assert pinned.is_pinned
        assert pinned.pinned_at is not None

        asyncio.run(store.load_saved_prompts())
        assert store.saved_prompts[0].is_pinned

        assert asyncio.run(store.toggle_pin(prompt_id)).success
        assert not store.saved_prompts[0].is_pinned
        assert store.saved_prompts[0].pinned_at is None

    def test_unknown_prompt(self, store) -> None:
        """Test toggling a prompt that is not cached."""
        result = asyncio.run(store.toggle_pin("ghost"))

        assert result.error == "Prompt not found"

    def test_rollback_on_failed_result(self, user, sample_blocks) -> None:
        """Test the cache is restored when the gateway reports failure."""
        store = PromptStore(gateway=RejectingPinGateway())
        store.set_user(user)
        store.blocks = list(sample_blocks)
        asyncio.run(store.save_current_prompt())
        before = [PromptSnapshot.from_dict(p.to_dict()) for p in store.saved_prompts]

        result = asyncio.run(store.toggle_pin(store.saved_prompts[0].id))

        assert not result.success
        assert result.error == "Pin rejected"
        assert store.saved_prompts == before

    def test_rollback_on_exception(self, user, sample_blocks) -> None:
        """Test the cache is restored when the gateway raises."""
        store = PromptStore(gateway=ExplodingPinGateway())
        store.set_user(user)
        store.blocks = list(sample_blocks)
        asyncio.run(store.save_current_prompt())
        before = [PromptSnapshot.from_dict(p.to_dict()) for p in store.saved_prompts]

        result = asyncio.run(store.toggle_pin(store.saved_prompts[0].id))

        assert not result.success
        assert result.error == "connection dropped"
        assert store.saved_prompts == before


class TestOrderForDisplay:
    """Tests for order_for_display."""

    def test_pinned_first(self) -> None:
        """Test pinned prompts come first, most recently pinned on top."""
        a = PromptSnapshot(id="a", created_at="3")
        b = PromptSnapshot(id="b", created_at="2", is_pinned=True, pinned_at="2024-01-01")
        c = PromptSnapshot(id="c", created_at="1", is_pinned=True, pinned_at="2024-05-01")
        d = PromptSnapshot(id="d", created_at="0")

        ordered = order_for_display([a, b, c, d])

        assert [p.id for p in ordered] == ["c", "b", "a", "d"]
