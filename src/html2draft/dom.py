#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/html2draft/dom.py
"""Generic node tree consumed by the block tree builder.

The builder never touches BeautifulSoup objects directly. Markup is turned
into a light :class:`DomNode` tree first (``#document`` root, elements and
``#text`` nodes), so any tree builder returning that shape can be plugged
into :func:`html2draft.api.convert`.

This module also holds the node classification predicates the builder
dispatches on, and the serializer used to hand a table cell's inner
fragment back to the conversion pipeline.

"""

from __future__ import annotations

import html
import logging
from dataclasses import dataclass, field
from typing import Any, Iterator, Mapping, Optional

from html2draft.constants import (
    DEPS_HTML,
    DEFAULT_HTML_PARSER,
    FILE_BUCKET_ATTRIBUTE,
    FILE_OBJECT_KEY_ATTRIBUTE,
    LINE_BREAK_TAG,
    LIST_CONTAINER_TAGS,
    ROOT_TAGS,
    SAFE_IMAGE_DATA_PREFIX,
    SAFE_IMAGE_SCHEMES,
    SAFE_LINK_SCHEMES,
    TEXT_NODE_TAG,
)
from html2draft.exceptions import DependencyError, ParsingError
from html2draft.utils.decorators import requires_dependencies
from html2draft.utils.security import is_url_scheme_allowed

logger = logging.getLogger(__name__)

DOCUMENT_TAG = "#document"

VOID_ELEMENTS = frozenset(
    {"area", "base", "br", "col", "embed", "hr", "img", "input", "link", "meta", "source", "track", "wbr"}
)

TABLE_SECTION_TAGS = frozenset({"thead", "tbody", "tfoot"})


def parse_style_attribute(style: str | None) -> dict[str, str]:
    """Parse an inline ``style`` attribute into a property map.

    Property names are lower-cased; values are stripped but otherwise kept.

    Examples
    --------
    >>> parse_style_attribute("font-weight: bold; COLOR: Red")
    {'font-weight': 'bold', 'color': 'Red'}

    """
    properties: dict[str, str] = {}
    if not style:
        return properties
    for declaration in style.split(";"):
        name, sep, value = declaration.partition(":")
        if not sep:
            continue
        name = name.strip().lower()
        value = value.strip()
        if name and value:
            properties[name] = value
    return properties


@dataclass(eq=False)
class DomNode:
    """One node of the generic markup tree.

    Parameters
    ----------
    tag : str
        Lower-case tag name, ``#text`` for text nodes, ``#document`` for the root
    attrs : dict
        Attribute map (multi-valued attributes joined with spaces)
    style : dict
        Inline style properties parsed from the ``style`` attribute
    children : list of DomNode
        Ordered child nodes
    text : str
        Text content of a ``#text`` node, empty for elements
    parent : DomNode or None
        Parent node, set when the node is attached

    """

    tag: str
    attrs: dict[str, str] = field(default_factory=dict)
    style: dict[str, str] = field(default_factory=dict)
    children: list["DomNode"] = field(default_factory=list)
    text: str = ""
    parent: Optional["DomNode"] = field(default=None, repr=False)

    def append(self, child: "DomNode") -> "DomNode":
        """Attach ``child`` as the last child and return it."""
        child.parent = self
        self.children.append(child)
        return child

    def get(self, name: str, default: str | None = None) -> str | None:
        """Return attribute ``name`` or ``default``."""
        return self.attrs.get(name, default)

    @property
    def classes(self) -> tuple[str, ...]:
        """CSS classes of the node."""
        return tuple(self.attrs.get("class", "").split())

    @property
    def text_content(self) -> str:
        """Concatenated text of this node and its descendants."""
        if self.tag == TEXT_NODE_TAG:
            return self.text
        return "".join(child.text_content for child in self.children)

    def iter_elements(self, tag: str | None = None) -> Iterator["DomNode"]:
        """Yield direct element children, optionally filtered by tag."""
        for child in self.children:
            if is_element(child) and (tag is None or child.tag == tag):
                yield child

    def inner_html(self) -> str:
        """Serialize the children of this node back to markup."""
        return "".join(serialize_node(child) for child in self.children)


def element(tag: str, attrs: Mapping[str, str] | None = None, *children: DomNode) -> DomNode:
    """Create an element node, parsing its ``style`` attribute.

    Examples
    --------
    >>> p = element("p", None, text_node("hello"))
    >>> p.text_content
    'hello'

    """
    attr_map = dict(attrs or {})
    node = DomNode(tag=tag.lower(), attrs=attr_map, style=parse_style_attribute(attr_map.get("style")))
    for child in children:
        node.append(child)
    return node


def text_node(text: str) -> DomNode:
    """Create a ``#text`` node."""
    return DomNode(tag=TEXT_NODE_TAG, text=text)


def document(*children: DomNode) -> DomNode:
    """Create a ``#document`` root holding ``children``."""
    return element(DOCUMENT_TAG, None, *children)


def serialize_node(node: DomNode) -> str:
    """Serialize ``node`` and its subtree to markup."""
    if node.tag == TEXT_NODE_TAG:
        return html.escape(node.text, quote=False)
    if node.tag == DOCUMENT_TAG:
        return node.inner_html()

    attrs = "".join(f' {name}="{html.escape(value, quote=True)}"' for name, value in node.attrs.items())
    if node.tag in VOID_ELEMENTS:
        return f"<{node.tag}{attrs}>"
    return f"<{node.tag}{attrs}>{node.inner_html()}</{node.tag}>"


# Node classification predicates


def is_text(node: DomNode) -> bool:
    """Return True for ``#text`` nodes."""
    return node.tag == TEXT_NODE_TAG


def is_element(node: DomNode) -> bool:
    """Return True for element nodes (including the document root)."""
    return not node.tag.startswith("#") or node.tag == DOCUMENT_TAG


def is_root(node: DomNode) -> bool:
    """Return True for the document root or ``body``."""
    return node.tag in ROOT_TAGS


def is_list_container(node: DomNode) -> bool:
    """Return True for ``ul`` and ``ol`` elements."""
    return node.tag in LIST_CONTAINER_TAGS


def is_line_break(node: DomNode) -> bool:
    """Return True for ``br`` elements."""
    return node.tag == LINE_BREAK_TAG


def is_anchor(node: DomNode) -> bool:
    """Return True for an ``a`` element with an allowed ``href``."""
    if node.tag != "a":
        return False
    href = node.get("href")
    return bool(href) and is_url_scheme_allowed(href, SAFE_LINK_SCHEMES)


def is_image(node: DomNode) -> bool:
    """Return True for an ``img`` element with an allowed ``src``."""
    if node.tag != "img":
        return False
    src = node.get("src")
    return bool(src) and is_url_scheme_allowed(src, SAFE_IMAGE_SCHEMES, (SAFE_IMAGE_DATA_PREFIX,))


def is_file(node: DomNode) -> bool:
    """Return True for an element carrying a stored-object reference."""
    if not is_element(node) or node.tag == DOCUMENT_TAG:
        return False
    return bool(node.get(FILE_BUCKET_ATTRIBUTE, "").strip() and node.get(FILE_OBJECT_KEY_ATTRIBUTE, "").strip())


def table_rows(node: DomNode) -> list[DomNode]:
    """Return the ``tr`` rows of a table, looking through row groups."""
    rows: list[DomNode] = []
    for child in node.iter_elements():
        if child.tag == "tr":
            rows.append(child)
        elif child.tag in TABLE_SECTION_TAGS:
            rows.extend(child.iter_elements("tr"))
    return rows


def is_table(node: DomNode) -> bool:
    """Return True for a ``table`` element with at least one row of cells."""
    if node.tag != "table":
        return False
    return any(cell.tag in ("td", "th") for row in table_rows(node) for cell in row.iter_elements())


# BeautifulSoup tree builder


def _attrs_from_soup(attrs: Mapping[str, Any]) -> dict[str, str]:
    converted: dict[str, str] = {}
    for name, value in attrs.items():
        if isinstance(value, (list, tuple)):
            value = " ".join(value)
        converted[name.lower()] = "" if value is None else str(value)
    return converted


def from_soup(soup_node: Any) -> DomNode:
    """Convert a BeautifulSoup tree into a :class:`DomNode` tree.

    Comments, doctypes, processing instructions and CDATA sections are
    dropped. When the soup holds a ``body`` element, its children become the
    children of the ``#document`` root.

    """
    from bs4 import BeautifulSoup
    from bs4.element import NavigableString, PreformattedString, Tag

    if isinstance(soup_node, BeautifulSoup):
        body = soup_node.find("body")
        source = body if isinstance(body, Tag) else soup_node
        root = DomNode(tag=DOCUMENT_TAG)
        for child in source.children:
            converted = _convert_soup_child(child, NavigableString, PreformattedString, Tag)
            if converted is not None:
                root.append(converted)
        return root

    converted = _convert_soup_child(soup_node, NavigableString, PreformattedString, Tag)
    if converted is None:
        return DomNode(tag=DOCUMENT_TAG)
    return converted


def _convert_soup_child(child: Any, navigable: type, preformatted: type, tag_type: type) -> DomNode | None:
    if isinstance(child, preformatted):
        return None
    if isinstance(child, navigable):
        return text_node(str(child))
    if not isinstance(child, tag_type):
        return None

    node = element(child.name, _attrs_from_soup(child.attrs))
    for grandchild in child.children:
        converted = _convert_soup_child(grandchild, navigable, preformatted, tag_type)
        if converted is not None:
            node.append(converted)
    return node


@requires_dependencies("html", DEPS_HTML)
def build_dom_tree(markup: str, html_parser: str = DEFAULT_HTML_PARSER) -> DomNode | None:
    """Parse markup into a :class:`DomNode` tree.

    Parameters
    ----------
    markup : str
        HTML fragment or document
    html_parser : str, default "html.parser"
        BeautifulSoup parser name

    Returns
    -------
    DomNode or None
        The ``#document`` root, or None when the markup is empty

    Raises
    ------
    DependencyError
        If the selected parser is not installed
    ParsingError
        If the parser rejects the markup

    """
    from bs4 import BeautifulSoup
    from bs4.exceptions import FeatureNotFound, ParserRejectedMarkup

    if not isinstance(markup, str) or not markup.strip():
        logger.debug("No markup to parse")
        return None

    try:
        soup = BeautifulSoup(markup, html_parser)
    except FeatureNotFound as e:
        raise DependencyError(
            converter_name="html",
            missing_packages=[(html_parser, "")],
            message=f"Selected HTML parser not found: {e}",
        ) from e
    except ParserRejectedMarkup as e:
        raise ParsingError(f"Markup rejected by {html_parser}: {e}", parsing_stage="tree", original_error=e) from e

    return from_soup(soup)
