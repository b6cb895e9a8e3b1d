"""Persisted prompt snapshots and gateway result types."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from promptstitch.blocks.models import Block, generate_preview, generate_title

DEFAULT_PROMPT_COLOR = "#6366f1"


def utc_now_iso() -> str:
    """Current UTC time as an ISO 8601 string."""
    return datetime.now(timezone.utc).isoformat()


def _text(value: Any) -> str:
    return value if isinstance(value, str) else ""


@dataclass
class UserIdentity:
    """Authenticated user owning saved prompts."""

    uid: str
    display_name: str = ""
    email: str = ""


@dataclass
class PromptSnapshot:
    """A saved prompt document.

    ``title`` and ``preview`` are derived from the blocks when the prompt is
    saved and stored with it.
    """

    id: str
    blocks: list[Block] = field(default_factory=list)
    created_at: str = field(default_factory=utc_now_iso)
    updated_at: str = ""
    title: str = ""
    preview: str = ""
    custom_name: str | None = None
    custom_color: str = DEFAULT_PROMPT_COLOR
    is_pinned: bool = False
    pinned_at: str | None = None

    def __post_init__(self) -> None:
        """Fill derived fields."""
        if not self.updated_at:
            self.updated_at = self.created_at
        if not self.title:
            self.title = generate_title(self.blocks)
        if not self.preview:
            self.preview = generate_preview(self.blocks)

    @property
    def display_name(self) -> str:
        """Name shown in listings: the custom name if set, else the title."""
        return self.custom_name or self.title

    def to_dict(self) -> dict[str, Any]:
        """Convert to the stored document shape."""
        return {
            "id": self.id,
            "blocks": [b.to_dict() for b in self.blocks],
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
            "title": self.title,
            "preview": self.preview,
            "customName": self.custom_name,
            "customColor": self.custom_color,
            "isPinned": self.is_pinned,
            "pinnedAt": self.pinned_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any], prompt_id: str | None = None) -> "PromptSnapshot":
        """Create from a stored document, tolerating missing fields."""
        raw_blocks = data.get("blocks")
        if not isinstance(raw_blocks, list):
            raw_blocks = []
        blocks = [Block.from_dict(b) for b in raw_blocks if isinstance(b, dict)]
        # Wrong-typed fields fall back to their defaults
        created_at = _text(data.get("createdAt"))
        return cls(
            id=prompt_id or _text(data.get("id")),
            blocks=blocks,
            created_at=created_at,
            updated_at=_text(data.get("updatedAt")) or created_at,
            title=_text(data.get("title")),
            preview=_text(data.get("preview")),
            custom_name=_text(data.get("customName")) or None,
            custom_color=_text(data.get("customColor")) or DEFAULT_PROMPT_COLOR,
            is_pinned=bool(data.get("isPinned", False)),
            pinned_at=_text(data.get("pinnedAt")) or None,
        )


@dataclass
class GatewayResult:
    """Outcome of a persistence call."""

    success: bool
    data: list[PromptSnapshot] | None = None
    prompt_id: str | None = None
    error: str | None = None
    error_code: str | None = None

    @classmethod
    def ok(cls, **kwargs: Any) -> "GatewayResult":
        """Create a successful result."""
        return cls(success=True, **kwargs)

    @classmethod
    def fail(cls, error: str, code: str | None = None) -> "GatewayResult":
        """Create a failed result."""
        return cls(success=False, error=error, error_code=code)
