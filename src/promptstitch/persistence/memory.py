"""In-memory persistence gateway."""

from __future__ import annotations

import copy
from typing import Any

from promptstitch.persistence.errors import PersistenceError
from promptstitch.persistence.gateway import PersistenceGateway


class InMemoryGateway(PersistenceGateway):
    """Gateway holding documents in a dict. Nothing survives the process."""

    def __init__(self, **kwargs: Any):
        super().__init__(**kwargs)
        self._documents: dict[str, dict[str, dict[str, Any]]] = {}

    async def _list_documents(self, uid: str) -> list[dict[str, Any]]:
        return [copy.deepcopy(doc) for doc in self._documents.get(uid, {}).values()]

    async def _get_document(self, uid: str, prompt_id: str) -> dict[str, Any] | None:
        document = self._documents.get(uid, {}).get(prompt_id)
        return copy.deepcopy(document) if document is not None else None

    async def _put_document(self, uid: str, prompt_id: str, document: dict[str, Any]) -> None:
        self._documents.setdefault(uid, {})[prompt_id] = copy.deepcopy(document)

    async def _delete_document(self, uid: str, prompt_id: str) -> None:
        if prompt_id not in self._documents.get(uid, {}):
            raise PersistenceError("not-found")
        del self._documents[uid][prompt_id]
