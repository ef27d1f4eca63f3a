#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/html2draft/entities.py
"""Entity extractors for links, images, files and tables.

Every extractor follows the same protocol: build an attribute map from a
fixed allow-list, create the entity, hold it current while characters are
anchored to it, and release it again. Images, files and tables anchor a
single placeholder character; links wrap the text of their children.

Tables additionally carry a grid description and, per cell, a nested
document produced by running the cell's inner markup through the whole
conversion again.

"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from html2draft.constants import (
    ANCHOR_ATTRIBUTES,
    ENTITY_FILE,
    ENTITY_IMAGE,
    ENTITY_LINK,
    ENTITY_PLACEHOLDER,
    ENTITY_TABLE,
    FILE_ATTRIBUTES,
    FILE_BUCKET_ATTRIBUTE,
    FILE_OBJECT_KEY_ATTRIBUTE,
    IMAGE_ATTRIBUTES,
    IMMUTABLE,
    MUTABLE,
)
from html2draft.dom import DomNode, table_rows
from html2draft.model.nodes import ConversionResult, EntityMap
from html2draft.state import BuilderState, current_entity

logger = logging.getLogger(__name__)

FragmentConverter = Callable[[str], Optional[ConversionResult]]

CELL_TAGS = ("td", "th")


def _copy_attributes(node: DomNode, names: tuple[str, ...]) -> dict[str, str]:
    return {name: value for name in names if (value := node.get(name))}


def anchor_placeholder(
    state: BuilderState, entity_map: EntityMap, kind: str, data: dict[str, Any], style: frozenset[str]
) -> str:
    """Create an immutable entity and anchor one placeholder character to it.

    Returns
    -------
    str
        The new entity key

    """
    key = entity_map.create(kind, IMMUTABLE, data)
    with current_entity(state, key):
        state.append(ENTITY_PLACEHOLDER, style)
    return key


def link_data(node: DomNode) -> dict[str, Any]:
    """Attribute map of a LINK entity."""
    data: dict[str, Any] = {"url": node.get("href", "").strip()}
    data.update(_copy_attributes(node, ANCHOR_ATTRIBUTES))
    return data


def image_data(node: DomNode) -> dict[str, Any]:
    """Attribute map of an IMAGE entity."""
    data: dict[str, Any] = {"url": node.get("src", "").strip()}
    data.update(_copy_attributes(node, IMAGE_ATTRIBUTES))
    return data


def file_data(node: DomNode) -> dict[str, Any]:
    """Attribute map of a FILE entity."""
    data: dict[str, Any] = {
        "bucketName": node.get(FILE_BUCKET_ATTRIBUTE, "").strip(),
        "objectKey": node.get(FILE_OBJECT_KEY_ATTRIBUTE, "").strip(),
    }
    for attribute, name in FILE_ATTRIBUTES.items():
        value = node.get(attribute)
        if not value:
            continue
        if name == "size" and value.strip().isdigit():
            data[name] = int(value)
        else:
            data[name] = value
    return data


def create_link(entity_map: EntityMap, node: DomNode) -> str:
    """Create the LINK entity for an anchor; the caller anchors its children."""
    return entity_map.create(ENTITY_LINK, MUTABLE, link_data(node))


def extract_image(node: DomNode, state: BuilderState, entity_map: EntityMap, style: frozenset[str]) -> str:
    """Create an IMAGE entity and anchor it at the current position."""
    return anchor_placeholder(state, entity_map, ENTITY_IMAGE, image_data(node), style)


def extract_file(node: DomNode, state: BuilderState, entity_map: EntityMap, style: frozenset[str]) -> str:
    """Create a FILE entity and anchor it at the current position."""
    return anchor_placeholder(state, entity_map, ENTITY_FILE, file_data(node), style)


# Tables


def _positive_int(value: str | None, default: int = 1) -> int:
    if value is None:
        return default
    try:
        number = int(str(value).strip())
    except ValueError:
        return default
    return number if number > 0 else default


def _width_of(node: DomNode) -> str | None:
    return node.get("width") or node.style.get("width")


@dataclass
class CellPlacement:
    """A table cell placed on the span-aware grid."""

    node: DomNode
    row: int
    column: int
    rowspan: int = 1
    colspan: int = 1

    @property
    def merged(self) -> bool:
        return self.rowspan > 1 or self.colspan > 1


@dataclass
class TableGrid:
    """Cell placements of a table plus its counted dimensions."""

    rows: list[DomNode]
    placements: list[CellPlacement] = field(default_factory=list)
    row_count: int = 0
    column_count: int = 0


def layout_table(node: DomNode) -> TableGrid:
    """Place every cell of ``node`` on a grid, honouring row and column spans.

    Row spans are clipped to the rows that exist; the column count is the
    widest occupied row.

    """
    rows = table_rows(node)
    grid = TableGrid(rows=rows, row_count=len(rows))
    occupied: set[tuple[int, int]] = set()

    for row_index, row in enumerate(rows):
        column = 0
        for cell in row.iter_elements():
            if cell.tag not in CELL_TAGS:
                continue
            while (row_index, column) in occupied:
                column += 1
            rowspan = min(_positive_int(cell.get("rowspan")), len(rows) - row_index)
            colspan = _positive_int(cell.get("colspan"))
            for r in range(row_index, row_index + rowspan):
                for c in range(column, column + colspan):
                    occupied.add((r, c))
            grid.placements.append(CellPlacement(cell, row_index, column, rowspan, colspan))
            column += colspan

    grid.column_count = max((c + 1 for _, c in occupied), default=0)
    return grid


def _column_nodes(node: DomNode) -> list[DomNode]:
    columns: list[DomNode] = []
    for child in node.iter_elements():
        if child.tag == "col":
            columns.extend([child] * _positive_int(child.get("span")))
        elif child.tag == "colgroup":
            for col in child.iter_elements("col"):
                columns.extend([col] * _positive_int(col.get("span")))
    return columns


def _unique_ids(explicit: list[str | None], count: int, key_factory: Callable[[], str]) -> list[str]:
    ids: list[str] = []
    seen: set[str] = set()
    for index in range(count):
        candidate = explicit[index] if index < len(explicit) else None
        if not candidate or candidate in seen:
            candidate = key_factory()
            while candidate in seen:
                candidate = key_factory()
        seen.add(candidate)
        ids.append(candidate)
    return ids


class TableExtractor:
    """Build TABLE entities, converting every cell through ``convert_fragment``.

    Parameters
    ----------
    key_factory : callable
        Zero-argument key generator for row, column and cell ids
    convert_fragment : callable
        Markup -> ConversionResult or None, the whole conversion pipeline

    """

    def __init__(self, key_factory: Callable[[], str], convert_fragment: FragmentConverter):
        """Store the collaborators."""
        self.key_factory = key_factory
        self.convert_fragment = convert_fragment

    def convert_cell(self, cell: DomNode) -> ConversionResult:
        """Convert one cell's inner markup; failures yield the empty document."""
        markup = cell.inner_html()
        if not markup.strip():
            return ConversionResult.empty()
        try:
            result = self.convert_fragment(markup)
        except Exception as exc:
            logger.warning("Table cell conversion failed, using an empty document: %s", exc)
            return ConversionResult.empty()
        if result is None:
            logger.debug("Table cell produced no tree, using an empty document")
            return ConversionResult.empty()
        return result

    def table_data(self, node: DomNode) -> dict[str, Any]:
        """Describe the table grid and convert its cells."""
        grid = layout_table(node)

        row_count = max(_positive_int(node.get("data-row-count"), 0), grid.row_count)
        column_count = max(_positive_int(node.get("data-column-count"), 0), grid.column_count)

        column_nodes = _column_nodes(node)
        row_ids = _unique_ids([row.get("data-row-id") for row in grid.rows], row_count, self.key_factory)
        column_ids = _unique_ids([col.get("data-column-id") for col in column_nodes], column_count, self.key_factory)

        column_widths: dict[str, str] = {}
        for index, col in enumerate(column_nodes[:column_count]):
            width = _width_of(col)
            if width:
                column_widths[column_ids[index]] = width

        cells: dict[str, dict[str, dict[str, Any]]] = {row_id: {} for row_id in row_ids}
        merged_cells: list[dict[str, int]] = []
        for placement in grid.placements:
            row_id = row_ids[placement.row]
            column_id = column_ids[placement.column]
            cells[row_id][column_id] = {
                "id": placement.node.get("data-cell-id") or self.key_factory(),
                "rowspan": placement.rowspan,
                "colspan": placement.colspan,
                "document": self.convert_cell(placement.node),
            }
            if placement.merged:
                merged_cells.append(
                    {
                        "minRow": placement.row,
                        "maxRow": placement.row + placement.rowspan - 1,
                        "minColumn": placement.column,
                        "maxColumn": placement.column + placement.colspan - 1,
                    }
                )
            elif column_id not in column_widths:
                width = _width_of(placement.node)
                if width:
                    column_widths[column_id] = width

        return {
            "rowCount": row_count,
            "columnCount": column_count,
            "rowIds": row_ids,
            "columnIds": column_ids,
            "cells": cells,
            "mergedCells": merged_cells,
            "columnWidths": column_widths,
        }

    def extract(self, node: DomNode, state: BuilderState, entity_map: EntityMap, style: frozenset[str]) -> str:
        """Create a TABLE entity and anchor it at the current position."""
        data = self.table_data(node)
        logger.debug("Extracted %dx%d table", data["rowCount"], data["columnCount"])
        return anchor_placeholder(state, entity_map, ENTITY_TABLE, data, style)
