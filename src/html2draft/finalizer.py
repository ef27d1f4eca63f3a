#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/html2draft/finalizer.py
"""Turn a descriptor forest into finalized content blocks.

Two output shapes are supported:

- **hierarchical**: every descriptor becomes a block, in depth-first order,
  with ``parent``, ``children``, ``prev_sibling`` and ``next_sibling`` keys
  describing the tree.
- **flat**: untyped container descriptors without text of their own are
  hoisted (replaced by their children), nested text is folded into the
  surviving descriptors, and embedded objects at the very start or end of
  the document get an empty paragraph next to them so the caret can be
  placed around them.

The forest is read, never mutated; every output record is frozen.
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable, Optional, Sequence

from html2draft.constants import (
    ATOMIC_BLOCK_TYPE,
    DEFAULT_BLOCK_TYPE,
    ENTITY_LINK,
    ENTITY_PLACEHOLDER,
)
from html2draft.model.nodes import CharacterMetadata, ContentBlock, EntityMap
from html2draft.state import BlockDescriptor

logger = logging.getLogger(__name__)


def finalize_hierarchical(forest: Sequence[BlockDescriptor]) -> list[ContentBlock]:
    """Emit every descriptor as a block, keeping the tree links.

    Parameters
    ----------
    forest : sequence of BlockDescriptor
        Top-level descriptors in document order

    Returns
    -------
    list of ContentBlock
        Blocks in depth-first pre-order

    """
    blocks: list[ContentBlock] = []

    def emit(siblings: Sequence[BlockDescriptor], parent: Optional[str]) -> None:
        for index, descriptor in enumerate(siblings):
            blocks.append(
                ContentBlock(
                    key=descriptor.key,
                    type=descriptor.type,
                    text=descriptor.text,
                    characters=tuple(descriptor.characters),
                    depth=descriptor.depth,
                    parent=parent,
                    children=tuple(child.key for child in descriptor.children),
                    prev_sibling=siblings[index - 1].key if index > 0 else None,
                    next_sibling=siblings[index + 1].key if index + 1 < len(siblings) else None,
                )
            )
            emit(descriptor.children, descriptor.key)

    emit(forest, None)
    return blocks


def _is_container(descriptor: BlockDescriptor) -> bool:
    return descriptor.type == DEFAULT_BLOCK_TYPE and not descriptor.text


def hoist(descriptors: Iterable[BlockDescriptor]) -> list[BlockDescriptor]:
    """Replace untyped, textless descriptors by their (hoisted) children."""
    survivors: list[BlockDescriptor] = []
    for descriptor in descriptors:
        if _is_container(descriptor):
            survivors.extend(hoist(descriptor.children))
        else:
            survivors.append(descriptor)
    return survivors


def is_embedded_object(descriptor: BlockDescriptor, entity_map: EntityMap) -> bool:
    """Return True for an atomic block or a block made only of non-link entity placeholders.

    Consecutive embedded objects collect into one block whose text is a run
    of placeholders; such a block counts as embedded as well.
    """
    if descriptor.type == ATOMIC_BLOCK_TYPE:
        return True
    if not descriptor.text or descriptor.text.strip(ENTITY_PLACEHOLDER):
        return False
    for meta in descriptor.characters:
        entity = entity_map.get(meta.entity) if meta.entity is not None else None
        if entity is None or entity.kind == ENTITY_LINK:
            return False
    return True


def fold(descriptors: Sequence[BlockDescriptor]) -> tuple[str, list[CharacterMetadata]]:
    """Concatenate the text of ``descriptors`` and all their descendants.

    After the text of a typed descriptor, once the fold is non-empty, a
    ``"\\n"`` is inserted carrying a copy of the last character's metadata.
    """
    text = ""
    characters: list[CharacterMetadata] = []
    for descriptor in descriptors:
        text += descriptor.text
        characters.extend(descriptor.characters)
        if text and descriptor.type != DEFAULT_BLOCK_TYPE:
            text += "\n"
            characters.append(characters[-1])
        child_text, child_characters = fold(descriptor.children)
        text += child_text
        characters.extend(child_characters)
    return text, characters


def _padding(key_factory: Callable[[], str]) -> ContentBlock:
    return ContentBlock(key=key_factory(), type=DEFAULT_BLOCK_TYPE)


def finalize_flat(
    forest: Sequence[BlockDescriptor],
    entity_map: EntityMap,
    key_factory: Callable[[], str],
) -> list[ContentBlock]:
    """Hoist containers, pad embedded objects and fold nested text.

    Parameters
    ----------
    forest : sequence of BlockDescriptor
        Top-level descriptors in document order
    entity_map : EntityMap
        Entities referenced from the descriptors
    key_factory : callable
        Source of keys for padding blocks

    Returns
    -------
    list of ContentBlock
        Flat blocks without tree links

    """
    survivors = hoist(forest)
    blocks: list[ContentBlock] = []

    if survivors and is_embedded_object(survivors[0], entity_map):
        blocks.append(_padding(key_factory))

    for descriptor in survivors:
        child_text, child_characters = fold(descriptor.children)
        text = descriptor.text + child_text
        characters = [*descriptor.characters, *child_characters]
        blocks.append(
            ContentBlock(
                key=descriptor.key,
                type=descriptor.type,
                text=text,
                characters=tuple(characters),
                depth=descriptor.depth,
            )
        )

    if survivors and is_embedded_object(survivors[-1], entity_map):
        blocks.append(_padding(key_factory))

    logger.debug("Hoisted %d top-level descriptors into %d flat blocks", len(forest), len(blocks))
    return blocks
