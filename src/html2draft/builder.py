#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/html2draft/builder.py
"""Recursive conversion of a node tree into block descriptors.

:class:`BlockTreeBuilder` walks a :class:`~html2draft.dom.DomNode` tree
once. Inline content (text, line breaks, entity placeholders) accumulates
in the pending :class:`~html2draft.state.BuilderState`; block-level tags
and list containers drain it into :class:`~html2draft.state.BlockDescriptor`
records. The resulting forest is handed to :mod:`html2draft.finalizer`
when :meth:`BlockTreeBuilder.build` is called.

Dispatch order per node:

1. Containers (document root, ``body``, ``ul``/``ol``)
2. Ignored tags and decorative classes
3. Block-level tags from the block-type configuration
4. Text nodes
5. ``br``
6. Files, tables, images and anchors
7. Any other inline element

"""

from __future__ import annotations

import logging
import re
from dataclasses import replace
from typing import Callable, Optional, Sequence

from html2draft.block_types import BlockTypeConfig, BlockTypeResolver
from html2draft.constants import (
    CODE_BLOCK_TYPE,
    DEFAULT_BLOCK_TYPE,
    ENTITY_PLACEHOLDER,
    LIST_CONTAINER_TAGS,
    PRE_WRAPPER,
    PREFORMATTED_INLINE_TAGS,
    PREFORMATTED_TAG,
)
from html2draft.dom import (
    DomNode,
    is_anchor,
    is_file,
    is_image,
    is_line_break,
    is_list_container,
    is_root,
    is_table,
    is_text,
)
from html2draft.entities import FragmentConverter, TableExtractor, create_link, extract_file, extract_image
from html2draft.finalizer import finalize_flat, finalize_hierarchical
from html2draft.model.nodes import CharacterMetadata, ConversionResult, EntityMap
from html2draft.options import ConversionOptions
from html2draft.state import (
    BlockDescriptor,
    BuilderState,
    WalkContext,
    current_entity,
    split_lines,
    trim_descriptors,
    trim_text,
)
from html2draft.styles import inline_style_for, is_monospace, preserves_whitespace
from html2draft.utils.keys import KeyGenerator

logger = logging.getLogger(__name__)

_LINE_BREAKS = re.compile(r"[ \t]*\n\s*")


class BlockTreeBuilder:
    """Accumulate block descriptors from one or more node trees.

    Parameters
    ----------
    block_type_config : mapping or None, default = None
        Block render configuration; the default render map when None
    options : ConversionOptions or None, default = None
        Conversion options
    fragment_converter : callable or None, default = None
        Markup -> ConversionResult used for table cells. When None, cells
        are converted with :func:`html2draft.api.convert` using the same
        configuration.

    Examples
    --------
    >>> from html2draft.dom import build_dom_tree
    >>> result = BlockTreeBuilder().add_node(build_dom_tree("<p>Hello</p>")).build()
    >>> [block.text for block in result.blocks]
    ['Hello']

    """

    def __init__(
        self,
        block_type_config: BlockTypeConfig | None = None,
        options: ConversionOptions | None = None,
        fragment_converter: FragmentConverter | None = None,
    ):
        """Initialize the builder with an empty forest."""
        self.options = options or ConversionOptions()
        self.block_type_config = block_type_config
        self.resolver = BlockTypeResolver(block_type_config)
        self._key_factory: Callable[[], str] = self.options.key_generator or KeyGenerator()
        self._fragment_converter = fragment_converter
        self._tables = TableExtractor(self._key_factory, self._convert_fragment)
        self.reset()

    def reset(self) -> None:
        """Forget every descriptor, entity and pending character."""
        self.entity_map = EntityMap()
        self._forest: list[BlockDescriptor] = []
        self._state = BuilderState()
        self._result: ConversionResult | None = None

    @property
    def forest(self) -> Sequence[BlockDescriptor]:
        """Descriptors accumulated so far."""
        return tuple(self._forest)

    def add_node(self, node: DomNode, options: ConversionOptions | None = None) -> "BlockTreeBuilder":
        """Walk ``node`` and append the produced descriptors to the forest.

        Parameters
        ----------
        node : DomNode
            Root of the subtree to convert
        options : ConversionOptions or None, default = None
            Options for this subtree; the builder's options when None

        Returns
        -------
        BlockTreeBuilder
            ``self``, for chaining

        """
        options = options or self.options
        context = WalkContext(depth=0, wrapper=PRE_WRAPPER if options.is_code_block else None)

        descriptors = self._walk([node], frozenset(), context, options)
        descriptors.extend(self._flush(context))
        trim_descriptors(descriptors)

        self._forest.extend(descriptors)
        self._result = None
        logger.debug("Added <%s>: %d top-level descriptors", node.tag, len(descriptors))
        return self

    def build(self) -> ConversionResult:
        """Finalize the forest into content blocks.

        Repeated calls return the same result until :meth:`add_node` is
        called again.
        """
        if self._result is None:
            if self.options.hierarchical:
                blocks = finalize_hierarchical(self._forest)
            else:
                blocks = finalize_flat(self._forest, self.entity_map, self._key_factory)
            self._result = ConversionResult(blocks=tuple(blocks), entity_map=self.entity_map)
            logger.debug(
                "Finalized %d blocks and %d entities (%s)",
                len(blocks),
                len(self.entity_map),
                "hierarchical" if self.options.hierarchical else "flat",
            )
        return self._result

    # Traversal

    def _walk(
        self,
        nodes: Sequence[DomNode],
        style: frozenset[str],
        context: WalkContext,
        options: ConversionOptions,
    ) -> list[BlockDescriptor]:
        descriptors: list[BlockDescriptor] = []

        for node in nodes:
            if is_root(node) or is_list_container(node):
                descriptors.extend(self._walk_container(node, style, context, options))
            elif self._is_ignored(node, options):
                continue
            elif self.resolver.is_block_tag(node.tag):
                descriptors.extend(self._walk_block(node, style, context, options))
            elif is_text(node):
                self._add_text(node.text, style, context)
            elif is_line_break(node):
                self._state.append("\n", style)
            elif is_file(node):
                extract_file(node, self._state, self.entity_map, style)
            elif is_table(node):
                self._tables.extract(node, self._state, self.entity_map, style)
            elif is_image(node):
                extract_image(node, self._state, self.entity_map, style)
            elif is_anchor(node):
                descriptors.extend(self._walk_anchor(node, style, context, options))
            else:
                child_style = inline_style_for(node, style, options.custom_style_map)
                descriptors.extend(self._walk(node.children, child_style, context, options))
                if node.tag in PREFORMATTED_INLINE_TAGS and is_monospace(node):
                    context = replace(context, wrapper=PRE_WRAPPER)

        return descriptors

    def _walk_container(
        self,
        node: DomNode,
        style: frozenset[str],
        context: WalkContext,
        options: ConversionOptions,
    ) -> list[BlockDescriptor]:
        descriptors = self._flush(context)

        child_context = context
        if is_list_container(node):
            depth = context.depth + 1 if context.wrapper in LIST_CONTAINER_TAGS else context.depth
            child_context = WalkContext(depth=depth, wrapper=node.tag)

        descriptors.extend(self._walk(node.children, style, child_context, options))
        if is_root(node):
            descriptors.extend(self._flush(child_context))
        return descriptors

    def _walk_block(
        self,
        node: DomNode,
        style: frozenset[str],
        context: WalkContext,
        options: ConversionOptions,
    ) -> list[BlockDescriptor]:
        state = self._state
        descriptors = self._flush(context)

        child_context = context
        if node.tag == PREFORMATTED_TAG or preserves_whitespace(node):
            child_context = replace(context, wrapper=PRE_WRAPPER)

        block_type = self.resolver.resolve(node.tag, context.wrapper, node)
        if options.is_code_block and block_type == DEFAULT_BLOCK_TYPE:
            block_type = CODE_BLOCK_TYPE

        outer_type = state.block_type
        state.block_type = block_type
        children = self._walk(node.children, style, child_context, options)

        # A nested flush that took this block's pending text also took its type
        own_type = state.block_type or DEFAULT_BLOCK_TYPE
        if children and state.text:
            children.extend(self._flush(child_context))

        text, characters = state.take()
        if child_context.preformatted:
            lines = split_lines(*trim_text(text, characters, leading=False))
            for line, line_characters in lines[:-1]:
                descriptors.append(self._descriptor(own_type, line, line_characters, context.depth, preformatted=True))
            text, characters = lines[-1]
        else:
            text, characters = trim_text(text, characters, leading=False)

        descriptors.append(
            self._descriptor(
                own_type,
                text,
                characters,
                context.depth,
                children=children,
                preformatted=child_context.preformatted,
            )
        )
        state.block_type = outer_type
        return descriptors

    def _walk_anchor(
        self,
        node: DomNode,
        style: frozenset[str],
        context: WalkContext,
        options: ConversionOptions,
    ) -> list[BlockDescriptor]:
        child_style = inline_style_for(node, style, options.custom_style_map)
        key = create_link(self.entity_map, node)
        with current_entity(self._state, key):
            descriptors = self._walk(node.children, child_style, context, options)
            if not self._is_anchored(key, descriptors):
                # Nothing inside the link kept an anchored character
                self._state.append(ENTITY_PLACEHOLDER, child_style)
        return descriptors

    def _is_anchored(self, key: str, descriptors: Sequence[BlockDescriptor]) -> bool:
        """Return True when a character that survives line splitting carries ``key``."""
        state = self._state
        if any(meta.entity == key and ch != "\n" for ch, meta in zip(state.text, state.characters)):
            return True
        return any(
            meta.entity == key for root in descriptors for descriptor in root.walk() for meta in descriptor.characters
        )

    def _add_text(self, text: str, style: frozenset[str], context: WalkContext) -> None:
        if context.preformatted:
            if not self._state.text and text.startswith("\n"):
                text = text[1:]
        elif not text.strip():
            text = " "
        else:
            if text.startswith("\n"):
                text = text[1:]
            text = _LINE_BREAKS.sub(" ", text)
        self._state.append(text, style)

    def _flush(self, context: WalkContext) -> list[BlockDescriptor]:
        """Drain pending text into one descriptor per line.

        Only trailing whitespace is trimmed here; leading whitespace may sit
        before an entity anchor and is handled by the final trim pass.
        """
        state = self._state
        text, characters = trim_text(*state.take(), leading=False)
        if not text:
            return []

        block_type = state.block_type
        if block_type is None:
            block_type = CODE_BLOCK_TYPE if context.preformatted else DEFAULT_BLOCK_TYPE
        state.block_type = None

        return [
            self._descriptor(block_type, line, line_characters, context.depth, preformatted=context.preformatted)
            for line, line_characters in split_lines(text, characters)
        ]

    def _descriptor(
        self,
        block_type: str,
        text: str,
        characters: list[CharacterMetadata],
        depth: int,
        children: Optional[list[BlockDescriptor]] = None,
        preformatted: bool = False,
    ) -> BlockDescriptor:
        return BlockDescriptor(
            key=self._key_factory(),
            type=block_type,
            text=text,
            characters=characters,
            depth=depth,
            children=children or [],
            preformatted=preformatted,
        )

    def _is_ignored(self, node: DomNode, options: ConversionOptions) -> bool:
        if node.tag in options.ignored_tags:
            return True
        return bool(options.ignored_classes) and any(cls in options.ignored_classes for cls in node.classes)

    def _convert_fragment(self, markup: str) -> ConversionResult | None:
        if self._fragment_converter is not None:
            return self._fragment_converter(markup)

        from html2draft.api import convert

        return convert(markup, block_type_config=self.block_type_config, options=self.options)
