#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/html2draft/model/serialization.py
"""Raw (JSON-ready) export of converted documents.

The raw form encodes each block's per-character metadata as ranges:

.. code-block:: json

    {
      "blocks": [
        {
          "key": "a1b2c",
          "type": "unstyled",
          "text": "Hello world",
          "depth": 0,
          "inlineStyleRanges": [{"offset": 0, "length": 5, "style": "BOLD"}],
          "entityRanges": [{"offset": 6, "length": 5, "key": "1"}],
          "data": {}
        }
      ],
      "entityMap": {"1": {"type": "LINK", "mutability": "MUTABLE", "data": {"url": "..."}}}
    }

Nested documents held by TABLE entities are exported recursively.

"""

from __future__ import annotations

import json
from typing import Any, Callable, Sequence

from html2draft.model.nodes import CharacterMetadata, ContentBlock, ConversionResult, EntityMap


def _ranges(
    characters: Sequence[CharacterMetadata],
    values: Callable[[CharacterMetadata], Sequence[str]],
    value_key: str,
) -> list[dict[str, Any]]:
    ranges: list[dict[str, Any]] = []
    open_ranges: dict[str, int] = {}

    def close(value: str, end: int) -> None:
        start = open_ranges.pop(value)
        ranges.append({"offset": start, "length": end - start, value_key: value})

    for offset, meta in enumerate(characters):
        current = set(values(meta))
        for value in [v for v in open_ranges if v not in current]:
            close(value, offset)
        for value in sorted(current):
            open_ranges.setdefault(value, offset)
    for value in list(open_ranges):
        close(value, len(characters))

    ranges.sort(key=lambda r: (r["offset"], str(r[value_key])))
    return ranges


def block_to_raw(block: ContentBlock) -> dict[str, Any]:
    """Export one block to its raw dictionary form."""
    raw: dict[str, Any] = {
        "key": block.key,
        "type": block.type,
        "text": block.text,
        "depth": block.depth,
        "inlineStyleRanges": _ranges(block.characters, lambda m: sorted(m.style), "style"),
        "entityRanges": _ranges(block.characters, lambda m: [m.entity] if m.entity is not None else [], "key"),
        "data": {},
    }
    if block.parent is not None or block.children or block.prev_sibling is not None or block.next_sibling is not None:
        raw["parent"] = block.parent
        raw["children"] = list(block.children)
        raw["prevSibling"] = block.prev_sibling
        raw["nextSibling"] = block.next_sibling
    return raw


def _data_to_raw(value: Any) -> Any:
    if isinstance(value, ConversionResult):
        return to_raw(value)
    if isinstance(value, dict):
        return {k: _data_to_raw(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_data_to_raw(v) for v in value]
    return value


def entity_map_to_raw(entity_map: EntityMap) -> dict[str, Any]:
    """Export an entity map, recursing into nested documents."""
    return {
        key: {"type": entity.kind, "mutability": entity.mutability, "data": _data_to_raw(dict(entity.data))}
        for key, entity in entity_map.items()
    }


def to_raw(result: ConversionResult) -> dict[str, Any]:
    """Export a conversion result to a JSON-ready dictionary.

    Parameters
    ----------
    result : ConversionResult
        The converted document

    Returns
    -------
    dict
        ``{"blocks": [...], "entityMap": {...}}``

    """
    return {
        "blocks": [block_to_raw(block) for block in result.blocks],
        "entityMap": entity_map_to_raw(result.entity_map),
    }


def to_json(result: ConversionResult, indent: int | None = 2) -> str:
    """Export a conversion result as a JSON string."""
    return json.dumps(to_raw(result), indent=indent, ensure_ascii=False)
