"""Objects shared by CLI commands."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from promptstitch.builder.store import PromptStore
from promptstitch.config import Settings, load_settings
from promptstitch.llm.client import LLMClient
from promptstitch.llm.gemini_client import GeminiClient
from promptstitch.persistence.json_gateway import JsonFileGateway
from promptstitch.persistence.models import UserIdentity


def create_llm_client(settings: Settings) -> LLMClient | None:
    """Create the LLM client for the configured provider.

    Returns:
        A GeminiClient, or None if no API key is configured.
    """
    if not settings.has_api_key:
        return None
    return GeminiClient(
        api_key=settings.api_key,
        model=settings.model,
        base_url=settings.base_url,
        rate_limiter=settings.make_rate_limiter(),
    )


@dataclass
class CLIContext:
    """Settings and factories resolved once per invocation."""

    project_dir: Path
    settings: Settings

    @classmethod
    def load(cls, project_dir: Path | str) -> "CLIContext":
        project_path = Path(project_dir)
        return cls(project_dir=project_path, settings=load_settings(project_path))

    @property
    def user(self) -> UserIdentity:
        return UserIdentity(uid=self.settings.user_id)

    def create_store(self) -> PromptStore:
        """Create a store backed by the project's prompt directory."""
        gateway = JsonFileGateway(self.settings.storage_path(self.project_dir))
        store = PromptStore(gateway=gateway)
        store.set_user(self.user)
        return store

    def create_llm_client(self) -> LLMClient | None:
        return create_llm_client(self.settings)
