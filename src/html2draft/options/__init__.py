#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/html2draft/options/__init__.py
"""Configuration options for html2draft conversions."""

from html2draft.options.base import CloneFrozenMixin
from html2draft.options.conversion import ConversionOptions

__all__ = ["CloneFrozenMixin", "ConversionOptions"]
