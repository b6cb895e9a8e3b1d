"""Prompt blocks: the type registry and the block model."""

from promptstitch.blocks.types import (
    BlockType,
    EXISTING_BLOCK_TYPES,
    NEW_BLOCK_TYPES,
    ALL_BLOCK_TYPES,
    BLOCK_ORDER,
    is_valid_block_type,
    get_block_order_index,
    sort_blocks_by_order,
    is_existing_block_type,
    is_new_block_type,
)
from promptstitch.blocks.models import (
    Block,
    compose_prompt,
    generate_preview,
    generate_title,
    truncate_text,
)

__all__ = [
    # Types
    "BlockType",
    "EXISTING_BLOCK_TYPES",
    "NEW_BLOCK_TYPES",
    "ALL_BLOCK_TYPES",
    "BLOCK_ORDER",
    "is_valid_block_type",
    "get_block_order_index",
    "sort_blocks_by_order",
    "is_existing_block_type",
    "is_new_block_type",
    # Models
    "Block",
    "compose_prompt",
    "generate_preview",
    "generate_title",
    "truncate_text",
]
