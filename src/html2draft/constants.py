#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/html2draft/constants.py
"""Constants and default values used across html2draft.

Centralizes the tag tables, style names, attribute allow-lists and option
defaults so the builder, extractors and options layer share one source.

"""

from __future__ import annotations

from typing import Literal

# Dependency specs: (install_name, import_name, version_spec)
DEPS_HTML = [("beautifulsoup4", "bs4", ">=4.13.0")]

HtmlParser = Literal["html.parser", "html5lib", "lxml"]
DEFAULT_HTML_PARSER: HtmlParser = "html.parser"

# Block types
DEFAULT_BLOCK_TYPE = "unstyled"
CODE_BLOCK_TYPE = "code-block"
ATOMIC_BLOCK_TYPE = "atomic"
UNORDERED_LIST_ITEM = "unordered-list-item"
ORDERED_LIST_ITEM = "ordered-list-item"

# Tag names with structural meaning in the traversal
ROOT_TAGS = frozenset({"#document", "body"})
LIST_CONTAINER_TAGS = frozenset({"ul", "ol"})
PREFORMATTED_TAG = "pre"
LINE_BREAK_TAG = "br"
TEXT_NODE_TAG = "#text"

# Wrapper modes
PRE_WRAPPER = "pre"

# Reserved character every non-text entity is anchored to
ENTITY_PLACEHOLDER = "\u200b"

# Entity kinds and mutability
ENTITY_LINK = "LINK"
ENTITY_IMAGE = "IMAGE"
ENTITY_FILE = "FILE"
ENTITY_TABLE = "TABLE"
MUTABLE = "MUTABLE"
IMMUTABLE = "IMMUTABLE"

# Attribute allow-lists copied onto entity data when present
ANCHOR_ATTRIBUTES = ("class", "href", "rel", "target", "title")
IMAGE_ATTRIBUTES = ("alt", "class", "height", "width")
FILE_ATTRIBUTES = {"data-type": "type", "data-name": "name", "data-size": "size"}
FILE_BUCKET_ATTRIBUTE = "data-bucket-name"
FILE_OBJECT_KEY_ATTRIBUTE = "data-object-key"

# URL schemes
SAFE_LINK_SCHEMES = frozenset({"http", "https", "mailto", "tel"})
SAFE_IMAGE_SCHEMES = frozenset({"http", "https"})
SAFE_IMAGE_DATA_PREFIX = "data:image/"

# Inline style names
STYLE_BOLD = "BOLD"
STYLE_ITALIC = "ITALIC"
STYLE_UNDERLINE = "UNDERLINE"
STYLE_STRIKETHROUGH = "STRIKETHROUGH"
STYLE_CODE = "CODE"
STYLE_HIGHLIGHT = "HIGHLIGHT"
STYLE_SUBSCRIPT = "SUBSCRIPT"
STYLE_SUPERSCRIPT = "SUPERSCRIPT"

COLOR_STYLE_PREFIX = "color-"
BACKGROUND_STYLE_PREFIX = "bgcolor-"

TAG_STYLE_MAP: dict[str, str] = {
    "b": STYLE_BOLD,
    "strong": STYLE_BOLD,
    "i": STYLE_ITALIC,
    "em": STYLE_ITALIC,
    "u": STYLE_UNDERLINE,
    "ins": STYLE_UNDERLINE,
    "s": STYLE_STRIKETHROUGH,
    "strike": STYLE_STRIKETHROUGH,
    "del": STYLE_STRIKETHROUGH,
    "code": STYLE_CODE,
    "kbd": STYLE_CODE,
    "samp": STYLE_CODE,
    "tt": STYLE_CODE,
    "mark": STYLE_HIGHLIGHT,
    "sub": STYLE_SUBSCRIPT,
    "sup": STYLE_SUPERSCRIPT,
}

# Tag written for each style when rendering back to HTML
STYLE_RENDER_TAGS: dict[str, str] = {
    STYLE_BOLD: "strong",
    STYLE_ITALIC: "em",
    STYLE_UNDERLINE: "u",
    STYLE_STRIKETHROUGH: "s",
    STYLE_CODE: "code",
    STYLE_HIGHLIGHT: "mark",
    STYLE_SUBSCRIPT: "sub",
    STYLE_SUPERSCRIPT: "sup",
}

# Inline tags that switch the enclosing wrapper to preformatted when they
# are also rendered in a monospace font
PREFORMATTED_INLINE_TAGS = frozenset({"code", "tt", "samp"})

BOLD_FONT_WEIGHTS = frozenset({"bold", "bolder", "500", "600", "700", "800", "900"})
NOT_BOLD_FONT_WEIGHTS = frozenset({"light", "lighter", "normal", "100", "200", "300", "400"})

MONOSPACE_FONT_FAMILIES = frozenset(
    {
        "monospace",
        "courier",
        "courier new",
        "consolas",
        "menlo",
        "monaco",
        "lucida console",
        "source code pro",
        "fira code",
        "dejavu sans mono",
    }
)

# white-space values that preserve line breaks
PRESERVE_WHITESPACE_VALUES = frozenset({"pre", "pre-wrap", "pre-line", "break-spaces"})

# Defaults for ConversionOptions
DEFAULT_HIERARCHICAL = False
DEFAULT_IS_CODE_BLOCK = False
DEFAULT_IGNORED_TAGS = ("script", "style", "head", "title", "meta", "link", "template", "noscript")
DEFAULT_IGNORED_CLASSES: tuple[str, ...] = ()

# Generated keys
DEFAULT_KEY_LENGTH = 5
KEY_ALPHABET = "0123456789abcdefghijklmnopqrstuv"

# Markup preprocessing
NBSP_MARKERS = ("&nbsp;", "&#160;", "&#xa0;", "\xa0")
STRIPPED_ESCAPES = ("&#13;", "&#x0d;", "&#x0D;", "&#8203;", "&#x200b;", "&#x200B;", "\u200b")
