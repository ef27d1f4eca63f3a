#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/html2draft/utils/security.py
"""URL scheme checks used before a link or image entity is created."""

from __future__ import annotations

from typing import AbstractSet
from urllib.parse import urlparse


def is_relative_url(url: str) -> bool:
    """Check if a URL is a relative URL.

    Relative URLs do not have a scheme and typically start with #, /, ./, ../, or ?.

    Parameters
    ----------
    url : str
        URL to check

    Returns
    -------
    bool
        True if URL is relative, False otherwise

    Examples
    --------
    >>> is_relative_url("#section")
    True
    >>> is_relative_url("../parent/file.html")
    True
    >>> is_relative_url("https://example.com")
    False
    >>> is_relative_url("javascript:alert(1)")
    False

    """
    url_stripped = url.strip()
    if url_stripped.startswith(("#", "/", "./", "../", "?")):
        return True
    # Bare paths such as "page.html" carry no scheme either
    return ":" not in url_stripped.split("/", 1)[0]


def is_url_scheme_allowed(url: str, allowed_schemes: AbstractSet[str], allowed_prefixes: tuple[str, ...] = ()) -> bool:
    """Check whether ``url`` is relative or uses one of ``allowed_schemes``.

    Parameters
    ----------
    url : str
        URL to check
    allowed_schemes : set of str
        Lower-case scheme names without the colon (e.g. ``{"http", "https"}``)
    allowed_prefixes : tuple of str, default = ()
        Additional lower-case prefixes accepted verbatim (e.g. ``"data:image/"``)

    Returns
    -------
    bool
        False for empty URLs, unparseable URLs and disallowed schemes

    Examples
    --------
    >>> is_url_scheme_allowed("https://example.com", {"http", "https"})
    True
    >>> is_url_scheme_allowed("javascript:alert(1)", {"http", "https"})
    False
    >>> is_url_scheme_allowed("/relative/path", {"http"})
    True

    """
    if not url or not url.strip():
        return False

    url_lower = url.strip().lower()
    if allowed_prefixes and url_lower.startswith(allowed_prefixes):
        return True
    if is_relative_url(url_lower):
        return True

    try:
        scheme = urlparse(url_lower).scheme
    except ValueError:
        return False

    return scheme in allowed_schemes
