"""Block type registry: canonical block types, their fixed order and helpers.

Every helper here degrades gracefully on bad input (unknown strings, None,
non-string values) instead of raising, so saved prompts written by older or
newer versions keep loading.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Iterable


class BlockType(str, Enum):
    """Type of a prompt block."""

    TASK = "Task"
    TONE = "Tone"
    FORMAT = "Format"
    PERSONA = "Persona"
    CONSTRAINT = "Constraint"
    AUDIENCE = "Audience"
    STYLE = "Style"
    EXAMPLES = "Examples"
    CREATIVITY_LEVEL = "Creativity Level"


# Original block types
EXISTING_BLOCK_TYPES: list[str] = [
    BlockType.TASK.value,
    BlockType.TONE.value,
    BlockType.FORMAT.value,
    BlockType.PERSONA.value,
    BlockType.CONSTRAINT.value,
]

# Block types added later
NEW_BLOCK_TYPES: list[str] = [
    BlockType.AUDIENCE.value,
    BlockType.STYLE.value,
    BlockType.EXAMPLES.value,
    BlockType.CREATIVITY_LEVEL.value,
]

ALL_BLOCK_TYPES: list[str] = EXISTING_BLOCK_TYPES + NEW_BLOCK_TYPES

# Fixed order used for layout and for the composed prompt text
BLOCK_ORDER: list[str] = [
    "Task",
    "Tone",
    "Format",
    "Persona",
    "Constraint",
    "Audience",
    "Style",
    "Examples",
    "Creativity Level",
]


def _as_type_string(value: Any) -> str | None:
    """Return the plain string form of a block type, or None."""
    if isinstance(value, BlockType):
        return value.value
    if isinstance(value, str):
        return value
    return None


def is_valid_block_type(block_type: Any) -> bool:
    """Check if a block type is one of the supported types.

    Matching is exact and case-sensitive.
    """
    value = _as_type_string(block_type)
    return value is not None and value in ALL_BLOCK_TYPES


def get_block_order_index(block_type: Any) -> int:
    """Get the position of a block type in BLOCK_ORDER, or -1 if unknown."""
    value = _as_type_string(block_type)
    if value is None:
        return -1
    try:
        return BLOCK_ORDER.index(value)
    except ValueError:
        return -1


def is_existing_block_type(block_type: Any) -> bool:
    """Check if a block type belongs to the original set."""
    value = _as_type_string(block_type)
    return value is not None and value in EXISTING_BLOCK_TYPES


def is_new_block_type(block_type: Any) -> bool:
    """Check if a block type belongs to the later-added set."""
    value = _as_type_string(block_type)
    return value is not None and value in NEW_BLOCK_TYPES


def _type_of(block: Any) -> Any:
    if block is None:
        return None
    if isinstance(block, dict):
        return block.get("type")
    return getattr(block, "type", None)


def sort_blocks_by_order(blocks: Iterable[Any] | None) -> list[Any]:
    """Sort blocks according to BLOCK_ORDER.

    Known-typed blocks are placed in canonical order. Blocks with an unknown
    or missing type keep their original positions, so their relative order
    is always preserved. Accepts Block objects, mappings with a "type" key
    and None entries. The input is not mutated.

    Args:
        blocks: Blocks to sort.

    Returns:
        New list with the same elements.
    """
    if not blocks:
        return []

    items = list(blocks)
    known_slots: list[int] = []
    known_blocks: list[tuple[int, int, Any]] = []

    for position, block in enumerate(items):
        index = get_block_order_index(_type_of(block))
        if index == -1:
            continue
        known_slots.append(position)
        known_blocks.append((index, position, block))

    # Position breaks ties so equal types keep their relative order
    known_blocks.sort(key=lambda entry: (entry[0], entry[1]))

    result = list(items)
    for slot, (_, _, block) in zip(known_slots, known_blocks):
        result[slot] = block
    return result
