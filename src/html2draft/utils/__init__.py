#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/html2draft/utils/__init__.py
"""Utility modules for html2draft package.

This package contains key generation, URL safety checks, dependency
management and other helpers shared by the builder and extractors.
"""

from html2draft.utils.keys import KeyGenerator, generate_random_key
from html2draft.utils.security import is_relative_url, is_url_scheme_allowed

__all__ = [
    "KeyGenerator",
    "generate_random_key",
    "is_relative_url",
    "is_url_scheme_allowed",
]
