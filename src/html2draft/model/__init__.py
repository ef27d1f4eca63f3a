#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/html2draft/model/__init__.py
"""Document model: content blocks, character metadata and entities."""

from html2draft.model.nodes import (
    EMPTY_METADATA,
    CharacterMetadata,
    ContentBlock,
    ConversionResult,
    Entity,
    EntityMap,
)
from html2draft.model.serialization import block_to_raw, entity_map_to_raw, to_json, to_raw

__all__ = [
    "EMPTY_METADATA",
    "CharacterMetadata",
    "ContentBlock",
    "ConversionResult",
    "Entity",
    "EntityMap",
    "block_to_raw",
    "entity_map_to_raw",
    "to_json",
    "to_raw",
]
