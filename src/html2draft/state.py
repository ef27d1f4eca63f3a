#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/html2draft/state.py
"""Traversal state and intermediate block descriptors.

The block tree builder accumulates inline text into a :class:`BuilderState`
and drains it into :class:`BlockDescriptor` records at every block
boundary. Depth and wrapper mode travel separately in immutable
:class:`WalkContext` values, so leaving a nested list or preformatted
region can never leak its depth or mode into the following siblings.

"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Iterator, Optional, Sequence

from html2draft.constants import DEFAULT_BLOCK_TYPE, PRE_WRAPPER
from html2draft.model.nodes import CharacterMetadata


@dataclass(frozen=True)
class WalkContext:
    """Ambient context inherited by the children of a node.

    Parameters
    ----------
    depth : int, default = 0
        List nesting depth
    wrapper : str or None, default = None
        ``ul``/``ol`` inside a list container, ``pre`` inside a
        preformatted region, None otherwise

    """

    depth: int = 0
    wrapper: Optional[str] = None

    @property
    def preformatted(self) -> bool:
        return self.wrapper == PRE_WRAPPER


@dataclass(eq=False)
class BlockDescriptor:
    """Mutable block record produced while walking the tree.

    ``text`` and ``characters`` always have the same length.
    """

    key: str
    type: str = DEFAULT_BLOCK_TYPE
    text: str = ""
    characters: list[CharacterMetadata] = field(default_factory=list)
    depth: int = 0
    children: list["BlockDescriptor"] = field(default_factory=list)
    preformatted: bool = False

    def __post_init__(self) -> None:
        if len(self.text) != len(self.characters):
            raise ValueError(
                f"Descriptor {self.key!r}: text length {len(self.text)} != metadata length {len(self.characters)}"
            )

    def walk(self) -> Iterator["BlockDescriptor"]:
        """Yield this descriptor and all descendants, depth first."""
        yield self
        for child in self.children:
            yield from child.walk()


@dataclass
class BuilderState:
    """Pending inline content of the block being assembled.

    Attributes
    ----------
    text : str
        Text appended since the last block boundary
    characters : list of CharacterMetadata
        One entry per character of ``text``
    block_type : str or None
        Type of the innermost open block, None once a flush consumed it
    entity : str or None
        Entity key attached to every appended character

    """

    text: str = ""
    characters: list[CharacterMetadata] = field(default_factory=list)
    block_type: Optional[str] = None
    entity: Optional[str] = None

    def append(self, text: str, style: frozenset[str]) -> None:
        """Append ``text`` under ``style`` and the current entity."""
        if not text:
            return
        meta = CharacterMetadata(style=style, entity=self.entity)
        self.text += text
        self.characters.extend([meta] * len(text))

    def take(self) -> tuple[str, list[CharacterMetadata]]:
        """Return the pending text and metadata, clearing both."""
        text, characters = self.text, self.characters
        self.text = ""
        self.characters = []
        return text, characters

    def reset(self) -> None:
        """Drop everything, including the pending type and current entity."""
        self.text = ""
        self.characters = []
        self.block_type = None
        self.entity = None


@contextmanager
def current_entity(state: BuilderState, key: str) -> Iterator[str]:
    """Hold ``key`` as the current entity for the duration of the block.

    The previously current entity is restored on exit, including when the
    body raises.
    """
    previous = state.entity
    state.entity = key
    try:
        yield key
    finally:
        state.entity = previous


def _entity_bounds(characters: Sequence[CharacterMetadata]) -> tuple[int, int] | None:
    first = next((i for i, meta in enumerate(characters) if meta.entity is not None), None)
    if first is None:
        return None
    last = next(i for i in range(len(characters) - 1, -1, -1) if characters[i].entity is not None)
    return first, last


def trim_text(
    text: str,
    characters: Sequence[CharacterMetadata],
    *,
    leading: bool = True,
    trailing: bool = True,
) -> tuple[str, list[CharacterMetadata]]:
    """Strip whitespace from ``text`` without removing entity-anchored characters.

    Examples
    --------
    >>> meta = [CharacterMetadata()] * 9
    >>> trim_text("  hello  ", meta)[0]
    'hello'

    """
    begin = len(text) - len(text.lstrip()) if leading else 0
    end = len(text.rstrip()) if trailing else len(text)

    bounds = _entity_bounds(characters)
    if bounds is not None:
        begin = min(begin, bounds[0])
        end = max(end, bounds[1] + 1)

    if begin >= end:
        return "", []
    return text[begin:end], list(characters[begin:end])


def split_lines(text: str, characters: Sequence[CharacterMetadata]) -> list[tuple[str, list[CharacterMetadata]]]:
    """Split ``text`` on newlines, keeping metadata aligned and dropping the breaks."""
    lines: list[tuple[str, list[CharacterMetadata]]] = []
    start = 0
    for line in text.split("\n"):
        end = start + len(line)
        lines.append((line, list(characters[start:end])))
        start = end + 1
    return lines


def trim_descriptors(descriptors: Sequence[BlockDescriptor]) -> None:
    """Trim whitespace on every descriptor of a forest, in place.

    Preformatted descriptors only lose trailing whitespace.
    """
    for root in descriptors:
        for descriptor in root.walk():
            descriptor.text, descriptor.characters = trim_text(
                descriptor.text, descriptor.characters, leading=not descriptor.preformatted
            )
