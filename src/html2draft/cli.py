#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/html2draft/cli.py
"""Command-line interface for html2draft.

Reads an HTML fragment from a file (or stdin), converts it and prints the
raw JSON form of the result.

Examples
--------
    $ html2draft page.html --hierarchical --indent 0
    $ echo '<p>Hello <b>world</b></p>' | html2draft
    $ html2draft page.html --html --rich
"""

from __future__ import annotations

import argparse
import importlib.util
import logging
import sys
from dataclasses import fields
from pathlib import Path
from typing import Any, TextIO

from html2draft.exceptions import DependencyError, Html2DraftError, ValidationError
from html2draft.logging_utils import configure_logging
from html2draft.options import ConversionOptions

logger = logging.getLogger(__name__)

EXIT_SUCCESS = 0
EXIT_ERROR = 1
EXIT_DEPENDENCY_ERROR = 2
EXIT_VALIDATION_ERROR = 3
EXIT_FILE_ERROR = 4


def _field_help(name: str) -> str:
    """Return the help text declared in the options dataclass metadata."""
    for f in fields(ConversionOptions):
        if f.name == name:
            return f.metadata.get("help", "")
    return ""


def create_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="html2draft",
        description="Convert an HTML fragment into content blocks and an entity map (raw JSON).",
    )
    parser.add_argument("input", nargs="?", default="-", help="HTML file to convert ('-' or omitted reads stdin)")
    parser.add_argument("--hierarchical", action="store_true", help=_field_help("hierarchical"))
    parser.add_argument("--code-block", dest="is_code_block", action="store_true", help=_field_help("is_code_block"))
    parser.add_argument(
        "--allow-style",
        dest="custom_style_map",
        action="append",
        default=[],
        metavar="NAME",
        help=_field_help("custom_style_map") + " (repeatable, e.g. color-red)",
    )
    parser.add_argument(
        "--ignore-tag", dest="ignored_tags", action="append", metavar="TAG", help=_field_help("ignored_tags")
    )
    parser.add_argument(
        "--ignore-class", dest="ignored_classes", action="append", metavar="CLASS", help=_field_help("ignored_classes")
    )
    parser.add_argument(
        "--parser",
        dest="html_parser",
        default="html.parser",
        choices=["html.parser", "html5lib", "lxml"],
        help=_field_help("html_parser"),
    )
    parser.add_argument(
        "--html", action="store_true", help="Print the result rendered back to HTML instead of raw JSON"
    )
    parser.add_argument(
        "--rich",
        action="store_true",
        help="Syntax-highlight the output with Rich (automatically disabled when output is piped)",
    )
    parser.add_argument("--force-rich", action="store_true", help="Use Rich output even when stdout is not a TTY")
    parser.add_argument("--indent", type=int, default=2, help="JSON indentation (0 for compact output)")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level (default: WARNING)",
    )
    parser.add_argument("--log-file", help="Also write log messages to this file")
    parser.add_argument("--trace", action="store_true", help="Enable trace mode (DEBUG with timestamps)")
    return parser


def _setup_logging_level(parsed_args: argparse.Namespace) -> None:
    """Set up logging level based on command-line arguments."""
    # --trace takes precedence over --log-level
    log_level = logging.DEBUG if parsed_args.trace else parsed_args.log_level

    configure_logging(log_level, log_file=parsed_args.log_file, trace_mode=parsed_args.trace)


def options_from_args(parsed_args: argparse.Namespace) -> ConversionOptions:
    """Build conversion options from parsed arguments."""
    kwargs: dict[str, Any] = {
        "hierarchical": parsed_args.hierarchical,
        "is_code_block": parsed_args.is_code_block,
        "custom_style_map": frozenset(parsed_args.custom_style_map),
        "html_parser": parsed_args.html_parser,
    }
    if parsed_args.ignored_tags:
        kwargs["ignored_tags"] = tuple(parsed_args.ignored_tags)
    if parsed_args.ignored_classes:
        kwargs["ignored_classes"] = tuple(parsed_args.ignored_classes)
    return ConversionOptions(**kwargs)


def should_use_rich_output(parsed_args: argparse.Namespace, stream: TextIO | None = None) -> bool:
    """Determine if Rich output should be used based on TTY and args.

    Parameters
    ----------
    parsed_args : argparse.Namespace
        Parsed command line arguments
    stream : optional, default None
        Uses sys.stdout unless otherwise specified.

    Returns
    -------
    bool
        True when ``--rich`` is set and either ``--force-rich`` is set or
        the stream is a TTY

    Raises
    ------
    DependencyError
        If ``--rich`` is set but Rich is not installed

    """
    if not parsed_args.rich:
        return False

    if importlib.util.find_spec("rich") is None:
        raise DependencyError(
            converter_name="rich-output",
            missing_packages=[("rich", "")],
            message="Rich output requires the optional 'rich' dependency. Install with: pip install html2draft[rich]",
        )

    if parsed_args.force_rich:
        return True

    target = stream or sys.stdout
    isatty = getattr(target, "isatty", None)
    return bool(callable(isatty) and isatty())


def _print_rich(text: str, language: str) -> None:
    from rich.console import Console
    from rich.syntax import Syntax

    Console().print(Syntax(text, language, word_wrap=True))


def _read_input(source: str) -> str:
    if source == "-":
        return sys.stdin.read()
    return Path(source).read_text(encoding="utf-8")


def main(args: list[str] | None = None) -> int:
    """Execute the CLI and return the process exit code."""
    parser = create_parser()
    parsed_args = parser.parse_args(args)
    _setup_logging_level(parsed_args)

    # Lazy import keeps --help free of the parser stack
    from html2draft.api import convert
    from html2draft.model.serialization import to_json

    try:
        options = options_from_args(parsed_args)
    except ValidationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_VALIDATION_ERROR

    try:
        use_rich = should_use_rich_output(parsed_args)
    except DependencyError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_DEPENDENCY_ERROR

    try:
        markup = _read_input(parsed_args.input)
    except OSError as e:
        print(f"Error: cannot read {parsed_args.input}: {e}", file=sys.stderr)
        return EXIT_FILE_ERROR

    try:
        result = convert(markup, options=options)
    except DependencyError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_DEPENDENCY_ERROR
    except Html2DraftError as e:
        logger.debug("Conversion failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ERROR

    if result is None:
        print("Error: no content could be parsed from the input", file=sys.stderr)
        return EXIT_ERROR

    if parsed_args.html:
        from html2draft.renderer import to_html

        output, language = to_html(result), "html"
    else:
        output, language = to_json(result, indent=parsed_args.indent or None), "json"

    if use_rich:
        _print_rich(output, language)
    else:
        print(output)
    return EXIT_SUCCESS


if __name__ == "__main__":
    sys.exit(main())
