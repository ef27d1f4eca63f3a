#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/html2draft/model/nodes.py
"""Document model produced by a conversion.

A converted document is an ordered sequence of :class:`ContentBlock`
records plus an :class:`EntityMap`. Every block carries its plain text and
a parallel tuple of :class:`CharacterMetadata`, one per character, holding
the inline style names and the optional entity key of that character.

All records here are immutable except :class:`EntityMap`, which only ever
grows while a conversion runs.

"""

from __future__ import annotations

import itertools
from dataclasses import dataclass, field
from typing import Any, Iterator, Mapping, Optional

from html2draft.constants import DEFAULT_BLOCK_TYPE, MUTABLE

EntityKind = str
Mutability = str


@dataclass(frozen=True)
class CharacterMetadata:
    """Annotation of exactly one character.

    Parameters
    ----------
    style : frozenset of str, default = empty
        Inline style names (``BOLD``, ``ITALIC``, ``color-red``, ...)
    entity : str or None, default = None
        Key of the entity this character is anchored to

    """

    style: frozenset[str] = frozenset()
    entity: Optional[str] = None

    def has_style(self, name: str) -> bool:
        """Return True if ``name`` is one of this character's styles."""
        return name in self.style


EMPTY_METADATA = CharacterMetadata()


@dataclass(frozen=True)
class Entity:
    """A rich inline object referenced from character positions.

    Parameters
    ----------
    kind : str
        One of ``LINK``, ``IMAGE``, ``FILE``, ``TABLE``
    mutability : str
        ``MUTABLE`` or ``IMMUTABLE``
    data : dict
        Attribute map of the entity

    """

    kind: EntityKind
    mutability: Mutability = MUTABLE
    data: Mapping[str, Any] = field(default_factory=dict)


class EntityMap:
    """Append-only mapping of entity keys to entities.

    Keys are assigned monotonically as decimal strings starting at ``"1"``.

    Examples
    --------
    >>> entities = EntityMap()
    >>> key = entities.create("LINK", "MUTABLE", {"url": "https://example.com"})
    >>> key, entities[key].kind
    ('1', 'LINK')

    """

    def __init__(self) -> None:
        """Initialize an empty entity map."""
        self._entities: dict[str, Entity] = {}
        self._counter = itertools.count(1)
        self._last_key: str | None = None

    def create(self, kind: EntityKind, mutability: Mutability, data: Mapping[str, Any] | None = None) -> str:
        """Create an entity and return its freshly assigned key."""
        key = str(next(self._counter))
        self._entities[key] = Entity(kind=kind, mutability=mutability, data=dict(data or {}))
        self._last_key = key
        return key

    @property
    def last_key(self) -> str | None:
        """Key of the most recently created entity."""
        return self._last_key

    def get(self, key: str) -> Entity | None:
        """Return the entity stored under ``key`` or None."""
        return self._entities.get(key)

    def __getitem__(self, key: str) -> Entity:
        return self._entities[key]

    def __contains__(self, key: object) -> bool:
        return key in self._entities

    def __len__(self) -> int:
        return len(self._entities)

    def __iter__(self) -> Iterator[str]:
        return iter(self._entities)

    def items(self) -> Iterator[tuple[str, Entity]]:
        """Iterate over ``(key, entity)`` pairs in creation order."""
        return iter(self._entities.items())

    def __repr__(self) -> str:
        return f"EntityMap({self._entities!r})"


@dataclass(frozen=True)
class ContentBlock:
    """One finalized block of the converted document.

    Parameters
    ----------
    key : str
        Unique block key
    type : str
        Block type (``unstyled``, ``header-one``, ``code-block``, ...)
    text : str
        Plain text of the block
    characters : tuple of CharacterMetadata
        One entry per character of ``text``
    depth : int, default = 0
        List nesting depth
    parent : str or None, default = None
        Key of the parent block (hierarchical output only)
    children : tuple of str, default = ()
        Keys of child blocks (hierarchical output only)
    prev_sibling : str or None, default = None
        Key of the previous sibling (hierarchical output only)
    next_sibling : str or None, default = None
        Key of the next sibling (hierarchical output only)

    """

    key: str
    type: str = DEFAULT_BLOCK_TYPE
    text: str = ""
    characters: tuple[CharacterMetadata, ...] = ()
    depth: int = 0
    parent: Optional[str] = None
    children: tuple[str, ...] = ()
    prev_sibling: Optional[str] = None
    next_sibling: Optional[str] = None

    def __post_init__(self) -> None:
        if len(self.characters) != len(self.text):
            raise ValueError(
                f"Block {self.key!r} has {len(self.text)} characters of text "
                f"but {len(self.characters)} character metadata entries"
            )
        if self.depth < 0:
            raise ValueError(f"Block {self.key!r} has negative depth {self.depth}")

    def entity_at(self, offset: int) -> str | None:
        """Return the entity key anchored at ``offset``."""
        return self.characters[offset].entity

    def style_at(self, offset: int) -> frozenset[str]:
        """Return the inline styles at ``offset``."""
        return self.characters[offset].style

    def entity_keys(self) -> list[str]:
        """Return the distinct entity keys referenced by this block, in order."""
        seen: dict[str, None] = {}
        for meta in self.characters:
            if meta.entity is not None:
                seen.setdefault(meta.entity, None)
        return list(seen)


@dataclass(frozen=True)
class ConversionResult:
    """Blocks and entities produced by one conversion."""

    blocks: tuple[ContentBlock, ...]
    entity_map: EntityMap

    @classmethod
    def empty(cls) -> "ConversionResult":
        """Return the empty document."""
        return cls(blocks=(), entity_map=EntityMap())

    def block_for_key(self, key: str) -> ContentBlock | None:
        """Return the block with ``key``, or None."""
        for block in self.blocks:
            if block.key == key:
                return block
        return None

    @property
    def plain_text(self) -> str:
        """Text of every block joined by newlines."""
        return "\n".join(block.text for block in self.blocks)
