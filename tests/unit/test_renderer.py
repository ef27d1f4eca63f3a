#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/unit/test_renderer.py
"""Unit tests for rendering conversion results back to HTML."""

import pytest

from html2draft import convert, to_html
from html2draft.constants import ENTITY_PLACEHOLDER
from html2draft.model.nodes import CharacterMetadata, ContentBlock, ConversionResult, EntityMap
from html2draft.renderer import HtmlRenderer


def plain_block(key, block_type, text, depth=0, entity=None, style=frozenset()):
    characters = tuple(CharacterMetadata(style=style, entity=entity) for _ in text)
    return ContentBlock(key=key, type=block_type, text=text, characters=characters, depth=depth)


@pytest.mark.unit
class TestBlocks:
    """Tests for block-level rendering."""

    def test_heading_with_bold(self) -> None:
        """Test a heading with a bold run."""
        assert to_html(convert("<h1>Hi <b>there</b></h1>")) == "<h1>Hi <strong>there</strong></h1>"

    def test_nested_list(self) -> None:
        """Test that list depth turns into nested list containers."""
        result = convert("<ul><li>a<ul><li>b</li></ul></li></ul>")

        assert to_html(result) == "<ul><li>a<ul><li>b</li></ul></li></ul>"

    def test_list_kind_change_closes_list(self) -> None:
        """Test that switching between ordered and unordered items starts a new list."""
        result = ConversionResult(
            blocks=(plain_block("a", "ordered-list-item", "x"), plain_block("b", "unordered-list-item", "y")),
            entity_map=EntityMap(),
        )

        assert to_html(result) == "<ol><li>x</li></ol><ul><li>y</li></ul>"

    def test_escaping_and_soft_breaks(self) -> None:
        """Test that text is escaped and soft newlines become br tags."""
        result = ConversionResult(blocks=(plain_block("a", "unstyled", "a<b &\nc"),), entity_map=EntityMap())

        assert to_html(result) == "<div>a&lt;b &amp;<br>c</div>"

    def test_code_block_keeps_newlines(self) -> None:
        """Test that code blocks keep raw newlines."""
        result = ConversionResult(blocks=(plain_block("a", "code-block", "x\ny"),), entity_map=EntityMap())

        assert to_html(result) == "<pre>x\ny</pre>"

    def test_custom_render_map(self) -> None:
        """Test choosing elements from a custom block render configuration."""
        result = ConversionResult(blocks=(plain_block("a", "unstyled", "x"),), entity_map=EntityMap())
        config = {"unstyled": {"element": "p"}}

        assert HtmlRenderer(config).render_to_string(result) == "<p>x</p>"

    def test_hierarchical_children_nested(self, tree_options) -> None:
        """Test that hierarchical children render inside their parent element."""
        result = convert("<blockquote>intro<p>inner</p></blockquote>", options=tree_options)

        assert to_html(result) == "<div><blockquote>intro</blockquote><div>inner</div></div>"


@pytest.mark.unit
class TestInline:
    """Tests for styles and entities."""

    def test_color_style(self) -> None:
        """Test that color styles render as inline CSS."""
        result = ConversionResult(
            blocks=(plain_block("a", "unstyled", "r", style=frozenset({"color-red"})),), entity_map=EntityMap()
        )

        assert to_html(result) == '<div><span style="color: red">r</span></div>'

    def test_link_and_image(self) -> None:
        """Test LINK and IMAGE entities."""
        entity_map = EntityMap()
        link = entity_map.create("LINK", "MUTABLE", {"url": "https://x.org", "href": "https://x.org", "title": "T"})
        image = entity_map.create("IMAGE", "IMMUTABLE", {"url": "https://x.org/i.png", "alt": "pic"})
        characters = (CharacterMetadata(entity=link),) * 2 + (CharacterMetadata(entity=image),)
        block = ContentBlock(key="a", text="go" + ENTITY_PLACEHOLDER, characters=characters)

        html = to_html(ConversionResult(blocks=(block,), entity_map=entity_map))

        assert html == '<div><a href="https://x.org" title="T">go</a><img src="https://x.org/i.png" alt="pic"></div>'

    def test_empty_link(self) -> None:
        """Test that a link anchored only on the placeholder renders empty."""
        entity_map = EntityMap()
        link = entity_map.create("LINK", "MUTABLE", {"url": "/x"})
        block = plain_block("a", "unstyled", ENTITY_PLACEHOLDER, entity=link)

        assert to_html(ConversionResult(blocks=(block,), entity_map=entity_map)) == '<div><a href="/x"></a></div>'

    def test_file(self) -> None:
        """Test that FILE entities render with their stored-object attributes."""
        entity_map = EntityMap()
        key = entity_map.create("FILE", "IMMUTABLE", {"bucketName": "b", "objectKey": "o/1", "size": 12})
        block = plain_block("a", "atomic", ENTITY_PLACEHOLDER, entity=key)

        html = to_html(ConversionResult(blocks=(block,), entity_map=entity_map))

        assert html == '<figure><span data-bucket-name="b" data-object-key="o/1" data-size="12"></span></figure>'

    def test_table_ids_survive_reconversion(self, flat_options) -> None:
        """Test that table ids are written as data attributes and read back."""
        result = convert('<table><tr><td>A</td><td colspan="2">B</td></tr></table>', options=flat_options)
        original = result.entity_map[result.blocks[1].entity_at(0)].data

        reconverted = convert(to_html(result))
        (table,) = [entity for _, entity in reconverted.entity_map.items() if entity.kind == "TABLE"]

        assert table.data["rowIds"] == original["rowIds"]
        assert table.data["columnIds"] == original["columnIds"]
        assert table.data["mergedCells"] == original["mergedCells"]
        row = table.data["cells"][original["rowIds"][0]]
        first = row[original["columnIds"][0]]
        assert first["id"] == original["cells"][original["rowIds"][0]][original["columnIds"][0]]["id"]
        assert first["document"].blocks[0].text == "A"
