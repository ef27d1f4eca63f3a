#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/html2draft/styles.py
"""Inline style derivation from tags and CSS properties."""

from __future__ import annotations

from typing import AbstractSet

from html2draft.constants import (
    BACKGROUND_STYLE_PREFIX,
    BOLD_FONT_WEIGHTS,
    COLOR_STYLE_PREFIX,
    MONOSPACE_FONT_FAMILIES,
    NOT_BOLD_FONT_WEIGHTS,
    PRESERVE_WHITESPACE_VALUES,
    STYLE_BOLD,
    STYLE_CODE,
    STYLE_ITALIC,
    STYLE_STRIKETHROUGH,
    STYLE_UNDERLINE,
    TAG_STYLE_MAP,
)
from html2draft.dom import DomNode


def normalize_css_value(value: str) -> str:
    """Lower-case a CSS value and drop whitespace and ``!important``.

    >>> normalize_css_value("RGB(255, 0, 0) !important")
    'rgb(255,0,0)'

    """
    value = value.replace("!important", "")
    return "".join(value.lower().split())


def color_style_name(value: str) -> str:
    """Return the style name for a text color value."""
    return COLOR_STYLE_PREFIX + normalize_css_value(value)


def background_style_name(value: str) -> str:
    """Return the style name for a background color value."""
    return BACKGROUND_STYLE_PREFIX + normalize_css_value(value)


def tag_style(tag: str) -> str | None:
    """Return the style implied by an inline tag, if any."""
    return TAG_STYLE_MAP.get(tag)


def style_from_node(
    node: DomNode,
    style: frozenset[str],
    custom_style_map: AbstractSet[str] = frozenset(),
) -> frozenset[str]:
    """Apply a node's inline CSS to an inherited style set.

    Parameters
    ----------
    node : DomNode
        Element whose ``style`` properties are inspected
    style : frozenset of str
        Styles inherited from ancestors
    custom_style_map : set of str, default = empty
        Allow-list of ``color-*`` / ``bgcolor-*`` style names

    Returns
    -------
    frozenset of str
        The updated style set

    Examples
    --------
    >>> from html2draft.dom import element
    >>> sorted(style_from_node(element("span", {"style": "font-weight: 700"}), frozenset()))
    ['BOLD']

    """
    properties = node.style
    if not properties:
        return style

    result = set(style)

    font_weight = normalize_css_value(properties.get("font-weight", ""))
    if font_weight in BOLD_FONT_WEIGHTS:
        result.add(STYLE_BOLD)
    elif font_weight in NOT_BOLD_FONT_WEIGHTS:
        result.discard(STYLE_BOLD)

    font_style = normalize_css_value(properties.get("font-style", ""))
    if font_style in ("italic", "oblique"):
        result.add(STYLE_ITALIC)
    elif font_style == "normal":
        result.discard(STYLE_ITALIC)

    decoration = properties.get("text-decoration", properties.get("text-decoration-line", "")).lower().split()
    if "underline" in decoration:
        result.add(STYLE_UNDERLINE)
    if "line-through" in decoration:
        result.add(STYLE_STRIKETHROUGH)
    if "none" in decoration:
        result.discard(STYLE_UNDERLINE)
        result.discard(STYLE_STRIKETHROUGH)

    if custom_style_map:
        color = properties.get("color")
        if color and color_style_name(color) in custom_style_map:
            result.add(color_style_name(color))

        background = properties.get("background-color", properties.get("background"))
        if background and background_style_name(background) in custom_style_map:
            result.add(background_style_name(background))

    return frozenset(result)


def is_monospace(node: DomNode) -> bool:
    """Return True if the node declares a monospace font family.

    >>> from html2draft.dom import element
    >>> is_monospace(element("span", {"style": "font-family: 'Courier New', serif"}))
    True

    """
    family = node.style.get("font-family")
    if not family:
        return False
    for name in family.split(","):
        if name.strip().strip("'\"").lower() in MONOSPACE_FONT_FAMILIES:
            return True
    return False


def preserves_whitespace(node: DomNode) -> bool:
    """Return True if the node's ``white-space`` property keeps line breaks."""
    return normalize_css_value(node.style.get("white-space", "")) in PRESERVE_WHITESPACE_VALUES


def inline_style_for(
    node: DomNode,
    style: frozenset[str],
    custom_style_map: AbstractSet[str] = frozenset(),
) -> frozenset[str]:
    """Combine tag-implied, CSS-derived and monospace styles for ``node``."""
    implied = tag_style(node.tag)
    if implied is not None:
        style = style | {implied}
    style = style_from_node(node, style, custom_style_map)
    if is_monospace(node):
        style = style | {STYLE_CODE}
    return style
