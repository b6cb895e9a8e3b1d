"""Pytest fixtures for promptstitch tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from promptstitch.blocks.models import Block
from promptstitch.builder.store import PromptStore
from promptstitch.llm.mock_client import MockLLMClient
from promptstitch.persistence.memory import InMemoryGateway
from promptstitch.persistence.models import UserIdentity


async def no_sleep(delay: float) -> None:
    """Stand-in for asyncio.sleep that returns immediately."""
    return None


@pytest.fixture
def temp_dir(tmp_path: Path) -> Path:
    """Create a temporary directory for tests."""
    return tmp_path


@pytest.fixture
def user() -> UserIdentity:
    """Create a signed-in user."""
    return UserIdentity(uid="user-123", display_name="Test User", email="test@example.com")


@pytest.fixture
def gateway() -> InMemoryGateway:
    """Create an in-memory gateway that does not wait between retries."""
    return InMemoryGateway(sleep=no_sleep)


@pytest.fixture
def store(gateway: InMemoryGateway, user: UserIdentity) -> PromptStore:
    """Create a store with a signed-in user."""
    store = PromptStore(gateway=gateway)
    store.set_user(user)
    return store


@pytest.fixture
def mock_llm() -> MockLLMClient:
    """Create a mock LLM client."""
    return MockLLMClient()


@pytest.fixture
def sample_blocks() -> list[Block]:
    """Create blocks in non-canonical order."""
    return [
        Block(type="Persona", content="You are a travel writer"),
        Block(type="Task", content="Describe a weekend in Lisbon"),
        Block(type="Tone", content="Warm and vivid"),
    ]
