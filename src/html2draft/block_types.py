#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/html2draft/block_types.py
"""Tag to block-type resolution.

The render configuration maps each block type to the element that renders
it plus optional alias elements. Import needs the inverse: given a tag,
which block type does it start? A tag shared by several block types (``li``
for ordered and unordered list items) maps to an ordered candidate tuple
that is narrowed down from the traversal context.

"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional, Union

from html2draft.constants import (
    ATOMIC_BLOCK_TYPE,
    CODE_BLOCK_TYPE,
    DEFAULT_BLOCK_TYPE,
    LIST_CONTAINER_TAGS,
    ORDERED_LIST_ITEM,
    UNORDERED_LIST_ITEM,
)
from html2draft.dom import DomNode
from html2draft.exceptions import BlockTypeConfigError


@dataclass(frozen=True)
class BlockTypeSpec:
    """Render configuration of a single block type.

    Parameters
    ----------
    element : str
        Primary tag rendering the block type
    aliases : tuple of str, default = ()
        Other tags that import as this block type

    """

    element: str
    aliases: tuple[str, ...] = ()

    @property
    def tags(self) -> tuple[str, ...]:
        """Primary tag followed by the aliases."""
        return (self.element, *self.aliases)


BlockTypeConfig = Mapping[str, Union[BlockTypeSpec, Mapping[str, Any]]]
BlockTypeMap = Mapping[str, Union[str, tuple[str, ...]]]

DEFAULT_BLOCK_RENDER_MAP: dict[str, BlockTypeSpec] = {
    "header-one": BlockTypeSpec("h1"),
    "header-two": BlockTypeSpec("h2"),
    "header-three": BlockTypeSpec("h3"),
    "header-four": BlockTypeSpec("h4"),
    "header-five": BlockTypeSpec("h5"),
    "header-six": BlockTypeSpec("h6"),
    "section": BlockTypeSpec("section"),
    "article": BlockTypeSpec("article"),
    UNORDERED_LIST_ITEM: BlockTypeSpec("li"),
    ORDERED_LIST_ITEM: BlockTypeSpec("li"),
    "blockquote": BlockTypeSpec("blockquote"),
    ATOMIC_BLOCK_TYPE: BlockTypeSpec("figure"),
    CODE_BLOCK_TYPE: BlockTypeSpec("pre"),
    DEFAULT_BLOCK_TYPE: BlockTypeSpec("div", ("p",)),
}


def _coerce_spec(block_type: str, spec: BlockTypeSpec | Mapping[str, Any]) -> BlockTypeSpec:
    if isinstance(spec, BlockTypeSpec):
        return spec
    if not isinstance(spec, Mapping):
        message = f"Block type '{block_type}' must map to a spec, got {type(spec).__name__}"
        raise BlockTypeConfigError(block_type, message)

    element = spec.get("element")
    if not isinstance(element, str) or not element:
        raise BlockTypeConfigError(block_type)
    aliases = spec.get("aliased_elements", spec.get("aliasedElements", ())) or ()
    return BlockTypeSpec(element=element, aliases=tuple(aliases))


def build_block_type_map(config: BlockTypeConfig) -> dict[str, Union[str, tuple[str, ...]]]:
    """Invert a block render configuration into a tag lookup table.

    Parameters
    ----------
    config : mapping
        Block type -> :class:`BlockTypeSpec` or ``{"element": ..., "aliased_elements": [...]}``

    Returns
    -------
    dict
        Tag -> block type, or tag -> tuple of candidate block types (in
        configuration order) when several block types share the tag

    Raises
    ------
    BlockTypeConfigError
        If an entry has no primary element

    Examples
    --------
    >>> table = build_block_type_map(DEFAULT_BLOCK_RENDER_MAP)
    >>> table["p"], table["li"]
    ('unstyled', ('unordered-list-item', 'ordered-list-item'))

    """
    table: dict[str, Union[str, tuple[str, ...]]] = {}
    for block_type, raw_spec in config.items():
        spec = _coerce_spec(block_type, raw_spec)
        for tag in spec.tags:
            tag = tag.lower()
            existing = table.get(tag)
            if existing is None:
                table[tag] = block_type
            elif isinstance(existing, str):
                if existing != block_type:
                    table[tag] = (existing, block_type)
            elif block_type not in existing:
                table[tag] = (*existing, block_type)
    return table


def disambiguate(
    tag: str, wrapper: Optional[str], node: DomNode | None, candidates: tuple[str, ...] = ()
) -> str | None:
    """Pick one block type for a tag shared by several block types.

    Parameters
    ----------
    tag : str
        The shared tag
    wrapper : str or None
        Current wrapper mode (``ul``, ``ol``, ``pre`` or None)
    node : DomNode or None
        The node being resolved
    candidates : tuple of str, default = ()
        Block types sharing the tag

    Returns
    -------
    str or None
        The chosen block type, or None when the context does not decide

    """
    if node is not None and candidates:
        explicit = node.get("data-block-type")
        if explicit in candidates:
            return explicit

    if tag == "li":
        list_tag = wrapper
        if list_tag not in LIST_CONTAINER_TAGS and node is not None and node.parent is not None:
            list_tag = node.parent.tag
        return ORDERED_LIST_ITEM if list_tag == "ol" else UNORDERED_LIST_ITEM

    return None


class BlockTypeResolver:
    """Resolve tags to block types using a render configuration.

    Parameters
    ----------
    config : mapping or None, default = None
        Block render configuration; :data:`DEFAULT_BLOCK_RENDER_MAP` when None

    """

    def __init__(self, config: BlockTypeConfig | None = None):
        """Build the tag lookup table."""
        self._table = build_block_type_map(DEFAULT_BLOCK_RENDER_MAP if config is None else config)

    @property
    def table(self) -> BlockTypeMap:
        """The tag -> block type(s) lookup table."""
        return self._table

    def is_block_tag(self, tag: str) -> bool:
        """Return True if ``tag`` starts a block."""
        return tag in self._table

    def resolve(self, tag: str, wrapper: Optional[str] = None, node: DomNode | None = None) -> str:
        """Return the block type started by ``tag``.

        Falls back to the first candidate when disambiguation does not decide
        (or picks a type the tag cannot start), and to ``unstyled`` for
        unknown tags.

        """
        entry = self._table.get(tag)
        if entry is None:
            return DEFAULT_BLOCK_TYPE
        if isinstance(entry, str):
            return entry

        chosen = disambiguate(tag, wrapper, node, entry)
        if chosen in entry:
            return chosen
        return entry[0] if entry else DEFAULT_BLOCK_TYPE


def element_for(block_type: str, config: BlockTypeConfig | None = None) -> str:
    """Return the primary tag rendering ``block_type``.

    Unknown block types render with the ``unstyled`` element (``div`` by
    default).
    """
    config = DEFAULT_BLOCK_RENDER_MAP if config is None else config
    raw_spec = config.get(block_type)
    if raw_spec is None:
        raw_spec = config.get(DEFAULT_BLOCK_TYPE, DEFAULT_BLOCK_RENDER_MAP[DEFAULT_BLOCK_TYPE])
        block_type = DEFAULT_BLOCK_TYPE
    return _coerce_spec(block_type, raw_spec).element
