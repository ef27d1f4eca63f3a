"""The major exported API functions for HTML to block conversion."""

#  Copyright (c) 2025 Tom Villani, Ph.D.
# src/html2draft/api.py
import logging
from functools import partial
from typing import Any, Callable, Mapping, Optional, Union

from html2draft.block_types import BlockTypeConfig
from html2draft.builder import BlockTreeBuilder
from html2draft.constants import NBSP_MARKERS, STRIPPED_ESCAPES
from html2draft.dom import DomNode, build_dom_tree
from html2draft.exceptions import InvalidOptionsError, ParsingError
from html2draft.model.nodes import ConversionResult
from html2draft.options import ConversionOptions
from html2draft.utils.decorators import debug_timer

logger = logging.getLogger(__name__)

TreeBuilder = Callable[[str], Optional[DomNode]]


def preprocess_markup(markup: str) -> str:
    """Normalize raw markup before it is parsed.

    Carriage returns are dropped, non-breaking spaces become plain spaces
    and zero-width spaces (literal or escaped) are removed, since the
    latter would collide with entity placeholders.

    Parameters
    ----------
    markup : str
        Raw HTML

    Returns
    -------
    str
        The normalized markup

    Examples
    --------
    >>> preprocess_markup("a&nbsp;b\\r\\n")
    'a b\\n'

    """
    if not markup:
        return ""
    markup = markup.replace("\r", "")
    for marker in NBSP_MARKERS:
        markup = markup.replace(marker, " ")
    for escape in STRIPPED_ESCAPES:
        markup = markup.replace(escape, "")
    return markup


def _resolve_options(options: Union[ConversionOptions, Mapping[str, Any], None]) -> ConversionOptions:
    if options is None:
        return ConversionOptions()
    if isinstance(options, ConversionOptions):
        return options
    if isinstance(options, Mapping):
        return ConversionOptions.from_mapping(options)
    raise InvalidOptionsError(expected_type=ConversionOptions, received_type=type(options))


def convert(
    markup: str,
    tree_builder: TreeBuilder | None = None,
    block_type_config: BlockTypeConfig | None = None,
    options: Union[ConversionOptions, Mapping[str, Any], None] = None,
) -> ConversionResult | None:
    """Convert an HTML fragment into content blocks and an entity map.

    Parameters
    ----------
    markup : str
        HTML fragment to convert
    tree_builder : callable or None, default = None
        Markup -> :class:`~html2draft.dom.DomNode` or None. Defaults to the
        BeautifulSoup-based :func:`~html2draft.dom.build_dom_tree` using
        ``options.html_parser``.
    block_type_config : mapping or None, default = None
        Block render configuration; the default render map when None
    options : ConversionOptions, mapping or None, default = None
        Conversion options. Plain mappings may use the camel-case option
        names (``customStyleMap``, ``isCodeBlock``, ...).

    Returns
    -------
    ConversionResult or None
        The converted document, or None when no node tree could be built
        (including when the tree builder raises :class:`ParsingError`)

    Raises
    ------
    InvalidOptionsError
        If ``options`` is neither ConversionOptions, a mapping nor None
    ValidationError
        If an option value or the block configuration is invalid

    Examples
    --------
    >>> result = convert("<h1>Title</h1><p>Some <b>bold</b> text</p>")
    >>> [(block.type, block.text) for block in result.blocks]
    [('header-one', 'Title'), ('unstyled', 'Some bold text')]

    """
    options = _resolve_options(options)
    if tree_builder is None:
        tree_builder = partial(build_dom_tree, html_parser=options.html_parser)

    with debug_timer(logger, "HTML to block conversion"):
        try:
            tree = tree_builder(preprocess_markup(markup))
        except ParsingError as e:
            logger.warning("Tree builder failed: %s", e)
            return None
        if tree is None:
            logger.debug("Tree builder returned no tree; nothing to convert")
            return None

        builder = BlockTreeBuilder(
            block_type_config=block_type_config,
            options=options,
            fragment_converter=partial(
                convert, tree_builder=tree_builder, block_type_config=block_type_config, options=options
            ),
        )
        return builder.add_node(tree).build()
