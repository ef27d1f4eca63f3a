#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/unit/test_dom.py
"""Unit tests for the generic node tree and its BeautifulSoup builder.

Tests cover:
- Inline style attribute parsing
- Node factories and serialization
- Classification predicates (anchors, images, files, tables)
- Building trees from markup

"""

import pytest

from html2draft.dom import (
    DOCUMENT_TAG,
    build_dom_tree,
    document,
    element,
    is_anchor,
    is_file,
    is_image,
    is_line_break,
    is_list_container,
    is_root,
    is_table,
    is_text,
    parse_style_attribute,
    serialize_node,
    table_rows,
    text_node,
)
from html2draft.exceptions import DependencyError, ParsingError


@pytest.mark.unit
class TestParseStyleAttribute:
    """Tests for parse_style_attribute."""

    def test_basic_declarations(self) -> None:
        """Test parsing several declarations."""
        assert parse_style_attribute("font-weight: bold; COLOR: Red") == {"font-weight": "bold", "color": "Red"}

    def test_malformed_declarations_skipped(self) -> None:
        """Test that declarations without a colon or value are dropped."""
        assert parse_style_attribute("bogus; color:; width: 10px;") == {"width": "10px"}

    def test_empty(self) -> None:
        """Test empty and missing attributes."""
        assert parse_style_attribute("") == {}
        assert parse_style_attribute(None) == {}


@pytest.mark.unit
class TestNodes:
    """Tests for node factories and helpers."""

    def test_element_sets_parent_and_style(self) -> None:
        """Test that children get their parent and style is parsed."""
        child = text_node("hi")
        node = element("P", {"style": "color: red"}, child)

        assert node.tag == "p"
        assert node.style == {"color": "red"}
        assert child.parent is node
        assert node.text_content == "hi"

    def test_classes(self) -> None:
        """Test splitting the class attribute."""
        assert element("span", {"class": "a  b"}).classes == ("a", "b")
        assert element("span").classes == ()

    def test_iter_elements_skips_text(self) -> None:
        """Test iterating element children with an optional tag filter."""
        node = element("tr", None, element("td"), text_node(" "), element("th"))

        assert [child.tag for child in node.iter_elements()] == ["td", "th"]
        assert [child.tag for child in node.iter_elements("th")] == ["th"]

    def test_serialize_escapes(self) -> None:
        """Test that text and attribute values are escaped."""
        node = element("a", {"href": 'x"y'}, text_node("a<b"))

        assert serialize_node(node) == '<a href="x&quot;y">a&lt;b</a>'

    def test_serialize_void_and_document(self) -> None:
        """Test void elements and the document root."""
        root = document(element("p", None, text_node("x"), element("br")))

        assert serialize_node(root) == "<p>x<br></p>"
        assert root.inner_html() == "<p>x<br></p>"


@pytest.mark.unit
class TestPredicates:
    """Tests for node classification predicates."""

    def test_structural_predicates(self) -> None:
        """Test root, list container, text and line break checks."""
        assert is_root(document())
        assert is_root(element("body"))
        assert is_list_container(element("ol"))
        assert not is_list_container(element("li"))
        assert is_text(text_node("x"))
        assert is_line_break(element("br"))

    @pytest.mark.parametrize(
        "href,expected",
        [
            ("https://example.com", True),
            ("mailto:someone@example.com", True),
            ("tel:+123", True),
            ("/relative/path", True),
            ("#anchor", True),
            ("javascript:alert(1)", False),
            ("data:text/html,hi", False),
            ("", False),
        ],
    )
    def test_is_anchor(self, href: str, expected: bool) -> None:
        """Test anchor detection against allowed link schemes."""
        assert is_anchor(element("a", {"href": href})) is expected

    def test_anchor_without_href(self) -> None:
        """Test that an anchor without href is not a link."""
        assert not is_anchor(element("a", {"name": "top"}))

    @pytest.mark.parametrize(
        "src,expected",
        [
            ("https://example.com/a.png", True),
            ("data:image/png;base64,AAAA", True),
            ("images/a.png", True),
            ("data:text/html,x", False),
            ("javascript:alert(1)", False),
        ],
    )
    def test_is_image(self, src: str, expected: bool) -> None:
        """Test image detection against allowed image schemes."""
        assert is_image(element("img", {"src": src})) is expected

    def test_is_file(self) -> None:
        """Test stored-object references need both bucket and key."""
        assert is_file(element("span", {"data-bucket-name": "b", "data-object-key": "k"}))
        assert not is_file(element("span", {"data-bucket-name": "b"}))
        assert not is_file(element("span", {"data-bucket-name": "b", "data-object-key": "  "}))
        assert not is_file(text_node("x"))

    def test_table_rows_through_sections(self) -> None:
        """Test that rows inside thead/tbody are found."""
        table = element(
            "table",
            None,
            element("thead", None, element("tr", None, element("th"))),
            element("tbody", None, element("tr", None, element("td")), element("tr", None, element("td"))),
        )

        assert len(table_rows(table)) == 3
        assert is_table(table)

    def test_table_without_cells(self) -> None:
        """Test that a table without cells is not a table entity candidate."""
        assert not is_table(element("table", None, element("tr")))
        assert not is_table(element("table"))


@pytest.mark.unit
class TestBuildDomTree:
    """Tests for the BeautifulSoup tree builder."""

    def test_fragment(self) -> None:
        """Test building a tree from a fragment."""
        root = build_dom_tree('<p style="color: red">Hi <b>there</b></p>')

        assert root is not None
        assert root.tag == DOCUMENT_TAG
        paragraph = root.children[0]
        assert paragraph.tag == "p"
        assert paragraph.style == {"color": "red"}
        assert paragraph.text_content == "Hi there"
        assert paragraph.parent is root

    def test_comments_dropped(self) -> None:
        """Test that comments never reach the node tree."""
        root = build_dom_tree("<p>a<!-- hidden -->b</p>")

        assert root.children[0].text_content == "ab"

    def test_body_children_become_root_children(self) -> None:
        """Test that a full document is unwrapped to its body."""
        root = build_dom_tree("<html><head><title>T</title></head><body><p>x</p></body></html>")

        assert [child.tag for child in root.children] == ["p"]

    def test_multi_valued_attributes_joined(self) -> None:
        """Test that class lists are joined back into one string."""
        root = build_dom_tree('<span class="a b">x</span>')

        assert root.children[0].get("class") == "a b"

    @pytest.mark.parametrize("markup", ["", "   ", None])
    def test_empty_markup_returns_none(self, markup) -> None:
        """Test that there is no tree for empty input."""
        assert build_dom_tree(markup) is None

    def test_unknown_parser_raises_dependency_error(self) -> None:
        """Test that a missing parser surfaces as DependencyError."""
        with pytest.raises(DependencyError):
            build_dom_tree("<p>x</p>", html_parser="no-such-parser")

    def test_rejected_markup_raises_parsing_error(self, monkeypatch) -> None:
        """Test that markup the parser rejects surfaces as ParsingError."""
        from bs4.exceptions import ParserRejectedMarkup

        def rejecting_soup(markup, features):
            raise ParserRejectedMarkup("bad markup")

        monkeypatch.setattr("bs4.BeautifulSoup", rejecting_soup)

        with pytest.raises(ParsingError) as exc_info:
            build_dom_tree("<p>x</p>")

        assert exc_info.value.parsing_stage == "tree"
        assert isinstance(exc_info.value.original_error, ParserRejectedMarkup)
