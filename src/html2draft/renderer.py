#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/html2draft/renderer.py
"""HTML rendering of converted documents.

:class:`HtmlRenderer` writes a :class:`~html2draft.model.nodes.ConversionResult`
back out as an HTML fragment that converts to an equivalent block sequence
(types, text, styles and entity attachments; keys are regenerated).

Blocks render with the primary element of their block type, list items are
regrouped into ``ul``/``ol`` containers nested by depth, and entities render
as the markup the extractors recognize: LINK as ``a``, IMAGE as ``img``,
FILE as a ``span`` carrying the stored-object attributes and TABLE as a
``table`` whose cells hold their own rendered documents.

"""

from __future__ import annotations

import logging
from html import escape
from itertools import groupby
from typing import Any, Iterable, Mapping, Sequence

from html2draft.block_types import BlockTypeConfig, element_for
from html2draft.constants import (
    ANCHOR_ATTRIBUTES,
    BACKGROUND_STYLE_PREFIX,
    CODE_BLOCK_TYPE,
    COLOR_STYLE_PREFIX,
    ENTITY_FILE,
    ENTITY_IMAGE,
    ENTITY_LINK,
    ENTITY_PLACEHOLDER,
    ENTITY_TABLE,
    FILE_ATTRIBUTES,
    FILE_BUCKET_ATTRIBUTE,
    FILE_OBJECT_KEY_ATTRIBUTE,
    IMAGE_ATTRIBUTES,
    ORDERED_LIST_ITEM,
    STYLE_RENDER_TAGS,
    UNORDERED_LIST_ITEM,
)
from html2draft.model.nodes import CharacterMetadata, ContentBlock, ConversionResult, Entity

logger = logging.getLogger(__name__)

_LIST_TAGS = {UNORDERED_LIST_ITEM: "ul", ORDERED_LIST_ITEM: "ol"}


def _attributes(pairs: Iterable[tuple[str, Any]]) -> str:
    return "".join(f' {name}="{escape(str(value))}"' for name, value in pairs if value not in (None, ""))


class HtmlRenderer:
    """Render conversion results as HTML fragments.

    Parameters
    ----------
    block_type_config : mapping or None, default = None
        Block render configuration choosing the element of each block type;
        the default render map when None

    Examples
    --------
    >>> from html2draft import convert
    >>> HtmlRenderer().render_to_string(convert("<h1>Hi <b>there</b></h1>"))
    '<h1>Hi <strong>there</strong></h1>'

    """

    def __init__(self, block_type_config: BlockTypeConfig | None = None):
        """Initialize the renderer."""
        self.block_type_config = block_type_config

    def render_to_string(self, result: ConversionResult) -> str:
        """Render ``result`` as an HTML fragment.

        Parameters
        ----------
        result : ConversionResult
            Flat or hierarchical conversion output

        Returns
        -------
        str
            HTML markup

        """
        by_key = {block.key: block for block in result.blocks}
        roots = [block for block in result.blocks if block.parent is None or block.parent not in by_key]
        html = self._render_sequence(roots, result, by_key)
        logger.debug("Rendered %d blocks to %d characters of HTML", len(result.blocks), len(html))
        return html

    # Blocks

    def _render_sequence(
        self,
        blocks: Sequence[ContentBlock],
        result: ConversionResult,
        by_key: Mapping[str, ContentBlock],
    ) -> str:
        parts: list[str] = []
        open_lists: list[tuple[str, int]] = []

        def close_list() -> None:
            list_tag, _ = open_lists.pop()
            parts.append(f"</li></{list_tag}>")

        for block in blocks:
            list_tag = _LIST_TAGS.get(block.type)
            if list_tag is None:
                while open_lists:
                    close_list()
                parts.append(self._render_block(block, result, by_key))
                continue

            while open_lists and (
                open_lists[-1][1] > block.depth or (open_lists[-1][1] == block.depth and open_lists[-1][0] != list_tag)
            ):
                close_list()
            if open_lists and open_lists[-1][1] == block.depth:
                parts.append("</li>")
            else:
                parts.append(f"<{list_tag}>")
                open_lists.append((list_tag, block.depth))
            parts.append(f"<li>{self._render_contents(block, result, by_key)}")

        while open_lists:
            close_list()
        return "".join(parts)

    def _render_block(self, block: ContentBlock, result: ConversionResult, by_key: Mapping[str, ContentBlock]) -> str:
        element = element_for(block.type, self.block_type_config)
        return f"<{element}>{self._render_contents(block, result, by_key)}</{element}>"

    def _render_contents(
        self,
        block: ContentBlock,
        result: ConversionResult,
        by_key: Mapping[str, ContentBlock],
    ) -> str:
        inline = self._render_inline(block, result, preformatted=block.type == CODE_BLOCK_TYPE)
        children = [by_key[key] for key in block.children if key in by_key]
        return inline + self._render_sequence(children, result, by_key)

    # Inline content

    def _render_inline(self, block: ContentBlock, result: ConversionResult, preformatted: bool) -> str:
        parts: list[str] = []
        pairs = list(zip(block.text, block.characters))

        for entity_key, group in groupby(pairs, key=lambda pair: pair[1].entity):
            run = list(group)
            entity = result.entity_map.get(entity_key) if entity_key is not None else None
            if entity is None:
                parts.append(self._render_styled(run, preformatted))
            elif entity.kind == ENTITY_LINK:
                text = "".join(ch for ch, _ in run)
                content = "" if text == ENTITY_PLACEHOLDER else self._render_styled(run, preformatted)
                parts.append(f"<a{self._link_attributes(entity)}>{content}</a>")
            else:
                # One embedded object per anchored character
                parts.extend(self._render_embedded(entity) for _ in run)
        return "".join(parts)

    def _render_styled(self, run: Sequence[tuple[str, CharacterMetadata]], preformatted: bool) -> str:
        parts: list[str] = []
        for style, group in groupby(run, key=lambda pair: pair[1].style):
            chunk = escape("".join(ch for ch, _ in group).replace(ENTITY_PLACEHOLDER, ""), quote=False)
            if not preformatted:
                chunk = chunk.replace("\n", "<br>")
            for name in sorted(style, reverse=True):
                chunk = self._wrap_style(name, chunk)
            parts.append(chunk)
        return "".join(parts)

    @staticmethod
    def _wrap_style(name: str, chunk: str) -> str:
        tag = STYLE_RENDER_TAGS.get(name)
        if tag is not None:
            return f"<{tag}>{chunk}</{tag}>"
        if name.startswith(COLOR_STYLE_PREFIX):
            value = name[len(COLOR_STYLE_PREFIX):]
            return f'<span style="color: {escape(value)}">{chunk}</span>'
        if name.startswith(BACKGROUND_STYLE_PREFIX):
            value = name[len(BACKGROUND_STYLE_PREFIX):]
            return f'<span style="background-color: {escape(value)}">{chunk}</span>'
        return chunk

    # Entities

    @staticmethod
    def _link_attributes(entity: Entity) -> str:
        data = entity.data
        pairs = [("href", data.get("href") or data.get("url"))]
        pairs.extend((name, data.get(name)) for name in ANCHOR_ATTRIBUTES if name != "href")
        return _attributes(pairs)

    def _render_embedded(self, entity: Entity) -> str:
        data = entity.data
        if entity.kind == ENTITY_IMAGE:
            pairs = [("src", data.get("url"))]
            pairs.extend((name, data.get(name)) for name in IMAGE_ATTRIBUTES)
            return f"<img{_attributes(pairs)}>"
        if entity.kind == ENTITY_FILE:
            pairs = [
                (FILE_BUCKET_ATTRIBUTE, data.get("bucketName")),
                (FILE_OBJECT_KEY_ATTRIBUTE, data.get("objectKey")),
            ]
            pairs.extend((attribute, data.get(name)) for attribute, name in FILE_ATTRIBUTES.items())
            return f"<span{_attributes(pairs)}></span>"
        if entity.kind == ENTITY_TABLE:
            return self._render_table(data)
        logger.debug("No HTML form for %s entities, dropping", entity.kind)
        return ""

    def _render_table(self, data: Mapping[str, Any]) -> str:
        column_ids: list[str] = list(data.get("columnIds", ()))
        widths: Mapping[str, str] = data.get("columnWidths", {})
        counts = _attributes([("data-row-count", data.get("rowCount")), ("data-column-count", data.get("columnCount"))])
        parts = [f"<table{counts}>"]

        if column_ids:
            parts.append("<colgroup>")
            parts.extend(
                f"<col{_attributes([('data-column-id', column_id), ('width', widths.get(column_id))])}>"
                for column_id in column_ids
            )
            parts.append("</colgroup>")

        cells: Mapping[str, Mapping[str, Mapping[str, Any]]] = data.get("cells", {})
        for row_id in data.get("rowIds", ()):
            parts.append(f"<tr{_attributes([('data-row-id', row_id)])}>")
            row = cells.get(row_id, {})
            for column_id in column_ids:
                cell = row.get(column_id)
                if cell is not None:
                    parts.append(self._render_cell(cell))
            parts.append("</tr>")

        parts.append("</table>")
        return "".join(parts)

    def _render_cell(self, cell: Mapping[str, Any]) -> str:
        rowspan = cell.get("rowspan", 1)
        colspan = cell.get("colspan", 1)
        attributes = _attributes(
            [
                ("data-cell-id", cell.get("id")),
                ("rowspan", rowspan if rowspan and rowspan > 1 else None),
                ("colspan", colspan if colspan and colspan > 1 else None),
            ]
        )
        document = cell.get("document")
        content = self.render_to_string(document) if document is not None else ""
        return f"<td{attributes}>{content}</td>"


def to_html(result: ConversionResult, block_type_config: BlockTypeConfig | None = None) -> str:
    """Render ``result`` as an HTML fragment with :class:`HtmlRenderer`."""
    return HtmlRenderer(block_type_config).render_to_string(result)
