"""Prompt block data model and the text derived from a list of blocks."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import Any, Iterable

from promptstitch.blocks.types import BlockType, sort_blocks_by_order

UNTITLED_PROMPT = "Untitled Prompt"
EMPTY_PROMPT = "Empty prompt"
ELLIPSIS = "..."


def new_block_id() -> str:
    """Generate a unique block id."""
    return uuid.uuid4().hex


@dataclass
class Block:
    """A single prompt block.

    The type is normally one of the BLOCK_ORDER strings but any value is
    accepted and preserved, including None.
    """

    type: str | None
    content: str = ""
    id: str = field(default_factory=new_block_id)

    def __post_init__(self) -> None:
        """Normalize enum types and missing content."""
        if isinstance(self.type, BlockType):
            self.type = self.type.value
        if self.content is None:
            self.content = ""

    @property
    def is_empty(self) -> bool:
        """Check if the block has no meaningful content."""
        return not self.content or not self.content.strip()

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "type": self.type,
            "content": self.content,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Block":
        """Create from dictionary."""
        content = data.get("content")
        return cls(
            id=data.get("id") or new_block_id(),
            type=data.get("type"),
            content=content if isinstance(content, str) else "",
        )


def _content_of(block: Any) -> str:
    if block is None:
        return ""
    if isinstance(block, dict):
        content = block.get("content")
    else:
        content = getattr(block, "content", None)
    return content if isinstance(content, str) else ""


def _type_of(block: Any) -> Any:
    if isinstance(block, dict):
        return block.get("type")
    return getattr(block, "type", None)


def truncate_text(text: str, limit: int, cut: int, min_space: int) -> str:
    """Truncate text at a word boundary.

    Text up to ``limit`` characters is returned unchanged. Longer text is cut
    to ``cut`` characters, then back to the last space if that space sits
    after index ``min_space``, and an ellipsis is appended.
    """
    if len(text) <= limit:
        return text

    truncated = text[:cut]
    last_space = truncated.rfind(" ")
    if last_space > min_space:
        return truncated[:last_space] + ELLIPSIS
    return truncated + ELLIPSIS


def generate_title(blocks: Iterable[Any] | None) -> str:
    """Generate a title from the first block with content."""
    for block in blocks or []:
        content = _content_of(block).strip()
        if content:
            return truncate_text(content, 50, 47, 20)
    return UNTITLED_PROMPT


def generate_preview(blocks: Iterable[Any] | None) -> str:
    """Generate preview text from all non-empty blocks in list order."""
    parts = [
        _content_of(block).strip()
        for block in blocks or []
        if _content_of(block).strip()
    ]
    combined = " ".join(parts)
    if not combined:
        return EMPTY_PROMPT
    return truncate_text(combined, 100, 97, 50)


def compose_prompt(blocks: Iterable[Any] | None) -> str:
    """Compose the final prompt text in canonical block order.

    Each non-empty block renders as ``"<Type>: <content>"``; blocks are
    separated by a blank line.
    """
    lines = []
    for block in sort_blocks_by_order(blocks):
        content = _content_of(block).strip()
        if not content:
            continue
        lines.append(f"{_type_of(block)}: {content}")
    return "\n\n".join(lines)
