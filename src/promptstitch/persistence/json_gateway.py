"""JSON file persistence for saved prompts.

Prompts are stored one document per file in
``<root>/users/{uid}/prompts/{prompt_id}.json``.
"""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Any

from promptstitch.persistence.errors import PersistenceError
from promptstitch.persistence.gateway import PersistenceGateway

logger = logging.getLogger(__name__)

_SAFE_SEGMENT = re.compile(r"^[A-Za-z0-9_\-.@]+$")


class JsonFileGateway(PersistenceGateway):
    """Manages saved prompts as JSON files on disk."""

    def __init__(self, root_dir: Path | str, **kwargs: Any):
        """Initialize the gateway.

        Args:
            root_dir: Directory holding the ``users`` tree.
        """
        super().__init__(**kwargs)
        self.root_dir = Path(root_dir)

    def _prompts_dir(self, uid: str) -> Path:
        """Get the prompts directory for a user."""
        if not _SAFE_SEGMENT.match(uid) or uid in (".", ".."):
            raise PersistenceError("permission-denied")
        return self.root_dir / "users" / uid / "prompts"

    def _prompt_path(self, uid: str, prompt_id: str) -> Path:
        """Get the file path for a prompt."""
        if not _SAFE_SEGMENT.match(prompt_id) or prompt_id in (".", ".."):
            raise PersistenceError("not-found")
        return self._prompts_dir(uid) / f"{prompt_id}.json"

    async def _list_documents(self, uid: str) -> list[dict[str, Any]]:
        prompts_dir = self._prompts_dir(uid)
        if not prompts_dir.exists():
            return []

        documents = []
        for prompt_file in prompts_dir.glob("*.json"):
            try:
                with open(prompt_file) as f:
                    data = json.load(f)
            except json.JSONDecodeError as e:
                # Skip corrupt prompt files
                logger.warning("Skipping unreadable prompt file %s: %s", prompt_file, e)
                continue
            except OSError as e:
                raise PersistenceError("unavailable") from e

            if not isinstance(data, dict):
                logger.warning("Skipping prompt file %s: not a JSON object", prompt_file)
                continue

            data["id"] = prompt_file.stem
            documents.append(data)
        return documents

    async def _get_document(self, uid: str, prompt_id: str) -> dict[str, Any] | None:
        prompt_file = self._prompt_path(uid, prompt_id)
        if not prompt_file.exists():
            return None

        try:
            with open(prompt_file) as f:
                return json.load(f)
        except json.JSONDecodeError as e:
            raise PersistenceError("data-loss") from e
        except OSError as e:
            raise PersistenceError("unavailable") from e

    async def _put_document(self, uid: str, prompt_id: str, document: dict[str, Any]) -> None:
        prompt_file = self._prompt_path(uid, prompt_id)
        try:
            prompt_file.parent.mkdir(parents=True, exist_ok=True)
            with open(prompt_file, "w") as f:
                json.dump(document, f, indent=2)
        except OSError as e:
            raise PersistenceError("unavailable") from e

    async def _delete_document(self, uid: str, prompt_id: str) -> None:
        prompt_file = self._prompt_path(uid, prompt_id)
        if not prompt_file.exists():
            raise PersistenceError("not-found")
        try:
            prompt_file.unlink()
        except OSError as e:
            raise PersistenceError("unavailable") from e
