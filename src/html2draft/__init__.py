"""html2draft - convert sanitized HTML into rich-text content blocks.

html2draft is the import/paste stage of a block-based rich-text editor. It
walks an HTML node tree and produces an ordered list of typed content
blocks, each holding plain text plus one style/entity annotation per
character, and an entity map of the rich inline objects (links, images,
stored files and tables) those characters are anchored to.

Output comes in two shapes: a flat list of blocks (containers hoisted,
nested text folded) or a hierarchical tree with parent, children and
sibling links.

Requirements
------------
- Python 3.10+
- beautifulsoup4 for the default HTML tree builder

Examples
--------
Basic conversion:

    >>> from html2draft import convert
    >>> result = convert('<p>Read <a href="https://example.com">this</a></p>')
    >>> result.blocks[0].text
    'Read this'
    >>> result.entity_map["1"].kind
    'LINK'

Hierarchical output and the raw JSON form:

    >>> from html2draft import ConversionOptions, to_raw
    >>> result = convert("<ul><li>one</li></ul>", options=ConversionOptions(hierarchical=True))
    >>> raw = to_raw(result)

"""

#  Copyright (c) 2025 Tom Villani, Ph.D.

# Check Python version before any imports
import sys

if sys.version_info < (3, 10):
    raise ImportError(
        "html2draft requires Python 3.10 or later. "
        f"You are using Python {sys.version_info.major}.{sys.version_info.minor}."
    )

__version__ = "1.0.0"

from html2draft.api import convert, preprocess_markup  # noqa: E402
from html2draft.block_types import (  # noqa: E402
    DEFAULT_BLOCK_RENDER_MAP,
    BlockTypeResolver,
    BlockTypeSpec,
    build_block_type_map,
)
from html2draft.builder import BlockTreeBuilder  # noqa: E402
from html2draft.dom import DomNode, build_dom_tree  # noqa: E402
from html2draft.exceptions import (  # noqa: E402
    BlockTypeConfigError,
    DependencyError,
    Html2DraftError,
    InvalidOptionsError,
    ParsingError,
    ValidationError,
)
from html2draft.model import (  # noqa: E402
    CharacterMetadata,
    ContentBlock,
    ConversionResult,
    Entity,
    EntityMap,
    to_json,
    to_raw,
)
from html2draft.options import ConversionOptions  # noqa: E402
from html2draft.renderer import HtmlRenderer, to_html  # noqa: E402

__all__ = [
    "__version__",
    # Conversion
    "convert",
    "preprocess_markup",
    "BlockTreeBuilder",
    "build_dom_tree",
    "DomNode",
    # Block types
    "DEFAULT_BLOCK_RENDER_MAP",
    "BlockTypeResolver",
    "BlockTypeSpec",
    "build_block_type_map",
    # Model
    "CharacterMetadata",
    "ContentBlock",
    "ConversionResult",
    "Entity",
    "EntityMap",
    "to_json",
    "to_raw",
    # Rendering
    "HtmlRenderer",
    "to_html",
    # Options
    "ConversionOptions",
    # Exceptions
    "Html2DraftError",
    "ValidationError",
    "InvalidOptionsError",
    "BlockTypeConfigError",
    "ParsingError",
    "DependencyError",
]
