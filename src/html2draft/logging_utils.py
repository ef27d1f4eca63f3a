"""Logging setup for the html2draft command line.

Library modules only create module-level loggers under the ``html2draft``
namespace and never install handlers. What they emit:

- ``DEBUG``: traversal milestones (descriptors added per subtree, blocks
  finalized, tables extracted, HTML rendered) and ``debug_timer`` timings
- ``WARNING``: table cells whose conversion failed and was replaced by an
  empty document, and tree builders that raised ``ParsingError``

:func:`configure_logging` is called once by :func:`html2draft.cli.main`
to route those records to stderr and, optionally, a log file.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

PLAIN_FORMAT = "%(levelname)s: %(message)s"
TRACE_FORMAT = "[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s"
TRACE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def resolve_log_level(log_level: int | str) -> int:
    """Turn a level name such as ``"debug"`` into its numeric value.

    Unknown names resolve to ``logging.WARNING``, the CLI default.
    """
    if isinstance(log_level, int):
        return log_level
    level = logging.getLevelName(str(log_level).upper())
    return level if isinstance(level, int) else logging.WARNING


def configure_logging(
    log_level: int | str,
    log_file: Optional[str] = None,
    trace_mode: bool = False,
) -> logging.Logger:
    """Install the CLI handlers on the root logger.

    Parameters
    ----------
    log_level : int | str
        Numeric logging level or level name
    log_file : str, optional
        Also append records to this file
    trace_mode : bool, default False
        Prefix records with a timestamp and the emitting logger's name, so
        builder, finalizer and table records can be told apart

    Returns
    -------
    logging.Logger
        The configured root logger

    """
    level = resolve_log_level(log_level)
    formatter = logging.Formatter(
        TRACE_FORMAT if trace_mode else PLAIN_FORMAT,
        datefmt=TRACE_DATE_FORMAT if trace_mode else None,
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    log_file_error: OSError | None = None
    if log_file:
        try:
            handlers.append(logging.FileHandler(log_file, mode="a", encoding="utf-8"))
        except OSError as exc:
            log_file_error = exc

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)

    # Reported only once the stderr handler is installed
    if log_file_error is not None:
        root_logger.warning("Could not create log file %s: %s", log_file, log_file_error)
    elif log_file:
        root_logger.info("Logging to file: %s", log_file)

    return root_logger
