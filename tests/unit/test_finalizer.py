#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/unit/test_finalizer.py
"""Unit tests for hierarchical and flat finalization."""

import pytest

from html2draft.constants import ENTITY_PLACEHOLDER
from html2draft.finalizer import finalize_flat, finalize_hierarchical, fold, hoist, is_embedded_object
from html2draft.model.nodes import CharacterMetadata, EntityMap
from html2draft.state import BlockDescriptor
from html2draft.utils.keys import SequentialKeyGenerator

PLAIN = CharacterMetadata()
BOLD = CharacterMetadata(style=frozenset({"BOLD"}))


def desc(key, text="", block_type="unstyled", children=None, depth=0, meta=PLAIN):
    return BlockDescriptor(
        key=key, type=block_type, text=text, characters=[meta] * len(text), depth=depth, children=children or []
    )


def placeholder(key, entity_key):
    return BlockDescriptor(key=key, text=ENTITY_PLACEHOLDER, characters=[CharacterMetadata(entity=entity_key)])


@pytest.mark.unit
class TestHierarchical:
    """Tests for finalize_hierarchical."""

    def test_tree_links(self) -> None:
        """Test parent, children and sibling keys in depth-first order."""
        forest = [
            desc("q", block_type="blockquote", children=[desc("a", "a"), desc("b", "b")]),
            desc("p", "after"),
        ]

        blocks = finalize_hierarchical(forest)

        assert [block.key for block in blocks] == ["q", "a", "b", "p"]
        quote, first, second, after = blocks
        assert quote.children == ("a", "b")
        assert quote.next_sibling == "p"
        assert first.parent == "q"
        assert first.prev_sibling is None
        assert first.next_sibling == "b"
        assert second.prev_sibling == "a"
        assert after.prev_sibling == "q"
        assert after.parent is None

    def test_forest_not_mutated(self) -> None:
        """Test that finalizing leaves descriptors untouched."""
        child = desc("c", "x")
        root = desc("r", children=[child])

        finalize_hierarchical([root])
        finalize_flat([root], EntityMap(), SequentialKeyGenerator())

        assert root.children == [child]
        assert child.text == "x"


@pytest.mark.unit
class TestHoistAndFold:
    """Tests for hoisting containers and folding nested text."""

    def test_hoist_untyped_empty_containers(self) -> None:
        """Test that untyped, textless descriptors are replaced by their children."""
        forest = [desc("outer", children=[desc("inner", children=[desc("leaf", "x")])]), desc("empty")]

        assert [d.key for d in hoist(forest)] == ["leaf"]

    def test_typed_and_texted_descriptors_survive(self) -> None:
        """Test that typed containers and descriptors with text are kept."""
        forest = [desc("q", block_type="blockquote", children=[desc("a", "a")]), desc("p", "p")]

        assert [d.key for d in hoist(forest)] == ["q", "p"]

    def test_fold_inserts_gap_after_typed_text(self) -> None:
        """Test the newline gap after typed descriptors with a copy of the last metadata."""
        text, characters = fold([desc("h", "t", "header-two", meta=BOLD), desc("p", "x")])

        assert text == "t\nx"
        assert characters == [BOLD, BOLD, PLAIN]

    def test_fold_no_gap_for_unstyled(self) -> None:
        """Test that unstyled descriptors are concatenated directly."""
        text, _ = fold([desc("a", "a"), desc("b", "b", children=[desc("c", "c")])])

        assert text == "abc"

    def test_fold_no_gap_while_empty(self) -> None:
        """Test that a typed descriptor adds no gap while nothing was folded yet."""
        text, characters = fold([desc("h", "", "header-one"), desc("p", "x")])

        assert text == "x"
        assert len(characters) == 1

    def test_flat_folds_children_into_survivor(self) -> None:
        """Test that a typed container absorbs its children's text."""
        forest = [desc("q", block_type="blockquote", children=[desc("a", "a"), desc("b", "b")])]

        blocks = finalize_flat(forest, EntityMap(), SequentialKeyGenerator())

        assert [(b.key, b.type, b.text) for b in blocks] == [("q", "blockquote", "ab")]
        assert blocks[0].parent is None
        assert blocks[0].children == ()


@pytest.mark.unit
class TestEmbeddedObjectPadding:
    """Tests for padding around embedded objects."""

    def test_is_embedded_object(self) -> None:
        """Test atomic blocks and lone non-link placeholders."""
        entities = EntityMap()
        image = entities.create("IMAGE", "IMMUTABLE", {})
        link = entities.create("LINK", "MUTABLE", {})

        assert is_embedded_object(desc("a", block_type="atomic"), entities)
        assert is_embedded_object(placeholder("i", image), entities)
        assert not is_embedded_object(placeholder("l", link), entities)
        assert not is_embedded_object(desc("t", "text"), entities)

    def test_placeholder_run_is_embedded(self) -> None:
        """Test that a run of non-link placeholders counts as one embedded object."""
        entities = EntityMap()
        first = entities.create("IMAGE", "IMMUTABLE", {})
        second = entities.create("FILE", "IMMUTABLE", {})
        link = entities.create("LINK", "MUTABLE", {})

        def run(*keys):
            return BlockDescriptor(
                key="r", text=ENTITY_PLACEHOLDER * len(keys), characters=[CharacterMetadata(entity=k) for k in keys]
            )

        assert is_embedded_object(run(first, second), entities)
        assert not is_embedded_object(run(first, link), entities)
        assert not is_embedded_object(run(first, None), entities)

    def test_padding_before_and_after(self) -> None:
        """Test empty paragraphs around a document that is a single image."""
        entities = EntityMap()
        image = entities.create("IMAGE", "IMMUTABLE", {})

        blocks = finalize_flat([placeholder("img", image)], entities, SequentialKeyGenerator("pad"))

        assert [(b.key, b.type, b.text) for b in blocks] == [
            ("pad0", "unstyled", ""),
            ("img", "unstyled", ENTITY_PLACEHOLDER),
            ("pad1", "unstyled", ""),
        ]

    def test_padding_only_at_edges(self) -> None:
        """Test that an object in the middle of the document is not padded."""
        entities = EntityMap()
        image = entities.create("IMAGE", "IMMUTABLE", {})
        forest = [desc("a", "a"), placeholder("img", image), desc("b", "b")]

        blocks = finalize_flat(forest, entities, SequentialKeyGenerator())

        assert [b.key for b in blocks] == ["a", "img", "b"]

    def test_padding_after_trailing_object(self) -> None:
        """Test padding only after a trailing embedded object."""
        entities = EntityMap()
        table = entities.create("TABLE", "IMMUTABLE", {})
        forest = [desc("a", "a"), placeholder("tbl", table)]

        blocks = finalize_flat(forest, entities, SequentialKeyGenerator("pad"))

        assert [b.key for b in blocks] == ["a", "tbl", "pad0"]

    @pytest.mark.parametrize("leading", [True, False])
    def test_padding_around_consecutive_images(self, convert_html, leading: bool) -> None:
        """Test that two images at the start or end of a document are padded."""
        images = '<img src="https://a/x.png"><img src="https://a/y.png">'
        markup = images + "<p>t</p>" if leading else "<p>t</p>" + images

        result = convert_html(markup)

        expected = ["", ENTITY_PLACEHOLDER * 2, "t"] if leading else ["t", ENTITY_PLACEHOLDER * 2, ""]
        assert [b.text for b in result.blocks] == expected

    def test_empty_forest(self) -> None:
        """Test that nothing is padded when nothing survives."""
        assert finalize_flat([desc("empty")], EntityMap(), SequentialKeyGenerator()) == []
