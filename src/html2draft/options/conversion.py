#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Configuration options for HTML to block conversion.

This module defines the options recognized by the conversion entry point
and the block tree builder.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, Callable, Mapping, Optional

from html2draft.constants import (
    DEFAULT_HIERARCHICAL,
    DEFAULT_HTML_PARSER,
    DEFAULT_IGNORED_CLASSES,
    DEFAULT_IGNORED_TAGS,
    DEFAULT_IS_CODE_BLOCK,
    HtmlParser,
)
from html2draft.exceptions import ValidationError
from html2draft.options.base import CloneFrozenMixin

_VALID_PARSERS = ("html.parser", "html5lib", "lxml")

# Option names as they appear in editor configuration payloads
_MAPPING_ALIASES = {
    "customStyleMap": "custom_style_map",
    "isCodeBlock": "is_code_block",
    "experimentalTreeDataSupport": "hierarchical",
    "ignoredTags": "ignored_tags",
    "ignoredClasses": "ignored_classes",
    "htmlParser": "html_parser",
}


# src/html2draft/options/conversion.py
@dataclass(frozen=True)
class ConversionOptions(CloneFrozenMixin):
    """Configuration options for converting HTML into content blocks.

    Parameters
    ----------
    hierarchical : bool, default False
        Keep the block hierarchy (parent/children/sibling links). When False,
        container blocks are hoisted and nested text is folded into flat blocks.
    custom_style_map : frozenset of str, default empty
        Allow-list of color and background style names (``color-<value>``,
        ``bgcolor-<value>``) that may be derived from inline CSS.
    is_code_block : bool, default False
        Treat the whole fragment as preformatted code.
    ignored_tags : tuple of str
        Tags skipped entirely, including their subtree.
    ignored_classes : tuple of str, default ()
        CSS classes marking decorative nodes that are skipped with their subtree.
    html_parser : {"html.parser", "html5lib", "lxml"}, default "html.parser"
        BeautifulSoup parser used by the default tree builder.
    key_generator : callable or None, default None
        Zero-argument factory for block, row, column and cell keys. A fresh
        random generator is used per conversion when None.

    """

    hierarchical: bool = field(
        default=DEFAULT_HIERARCHICAL,
        metadata={"help": "Keep the block hierarchy instead of flattening it", "importance": "core"},
    )
    custom_style_map: frozenset[str] = field(
        default_factory=frozenset,
        metadata={"help": "Color/background style names allowed from inline CSS", "importance": "core"},
    )
    is_code_block: bool = field(
        default=DEFAULT_IS_CODE_BLOCK,
        metadata={"help": "Treat the whole fragment as preformatted code", "importance": "core"},
    )
    ignored_tags: tuple[str, ...] = field(
        default=DEFAULT_IGNORED_TAGS,
        metadata={"help": "Tags skipped together with their subtree", "importance": "advanced"},
    )
    ignored_classes: tuple[str, ...] = field(
        default=DEFAULT_IGNORED_CLASSES,
        metadata={"help": "CSS classes marking decorative nodes to skip", "importance": "advanced"},
    )
    html_parser: HtmlParser = field(
        default=DEFAULT_HTML_PARSER,
        metadata={
            "help": "BeautifulSoup parser used by the default tree builder",
            "choices": list(_VALID_PARSERS),
            "importance": "advanced",
        },
    )
    key_generator: Optional[Callable[[], str]] = field(
        default=None,
        compare=False,
        metadata={"help": "Zero-argument key factory", "exclude_from_cli": True},
    )

    def __post_init__(self) -> None:
        """Normalize collection fields and validate values.

        Raises
        ------
        ValidationError
            If a field value is outside its valid range.

        """
        object.__setattr__(self, "custom_style_map", frozenset(self.custom_style_map))
        object.__setattr__(self, "ignored_tags", tuple(tag.lower() for tag in self.ignored_tags))
        object.__setattr__(self, "ignored_classes", tuple(self.ignored_classes))

        if self.html_parser not in _VALID_PARSERS:
            raise ValidationError(
                f"html_parser must be one of {_VALID_PARSERS}, got {self.html_parser!r}",
                parameter_name="html_parser",
                parameter_value=self.html_parser,
            )
        if self.key_generator is not None and not callable(self.key_generator):
            raise ValidationError(
                "key_generator must be a zero-argument callable",
                parameter_name="key_generator",
                parameter_value=self.key_generator,
            )

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any] | None) -> "ConversionOptions":
        """Build options from a plain mapping, accepting camel-case names.

        Parameters
        ----------
        values : mapping or None
            Option values keyed by field name or editor-style alias
            (``customStyleMap``, ``isCodeBlock``, ...)

        Returns
        -------
        ConversionOptions
            The resulting options

        Raises
        ------
        ValidationError
            If an unknown option name is supplied

        """
        if not values:
            return cls()

        known = {f.name for f in fields(cls)}
        kwargs: dict[str, Any] = {}
        for name, value in values.items():
            field_name = _MAPPING_ALIASES.get(name, name)
            if field_name not in known:
                raise ValidationError(
                    f"Unknown conversion option: {name!r}", parameter_name=name, parameter_value=value
                )
            if field_name == "custom_style_map" and isinstance(value, Mapping):
                value = frozenset(value)
            kwargs[field_name] = value
        return cls(**kwargs)
