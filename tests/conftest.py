"""Pytest configuration and shared fixtures for html2draft test suite.

This module provides shared fixtures, test configuration, and utilities
that are used across the entire test suite.
"""

import os
from typing import Callable

import pytest
from hypothesis import Phase, Verbosity, settings

from html2draft import ConversionOptions, ConversionResult, convert
from html2draft.utils.keys import SequentialKeyGenerator

# Register custom Hypothesis profiles
settings.register_profile("ci", max_examples=100, verbosity=Verbosity.verbose)
settings.register_profile("dev", max_examples=30)
settings.register_profile(
    "debug", max_examples=10, verbosity=Verbosity.verbose, phases=[Phase.explicit, Phase.reuse, Phase.generate]
)
settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "dev"))


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests - fast, isolated component tests")
    config.addinivalue_line("markers", "integration: Integration tests - component interaction tests")
    config.addinivalue_line("markers", "cli: Tests related to command-line interface")


@pytest.fixture
def key_factory() -> SequentialKeyGenerator:
    """Provide a deterministic key generator (``k0``, ``k1``, ...)."""
    return SequentialKeyGenerator()


@pytest.fixture
def flat_options(key_factory) -> ConversionOptions:
    """Provide flat-output options with deterministic keys."""
    return ConversionOptions(key_generator=key_factory)


@pytest.fixture
def tree_options(key_factory) -> ConversionOptions:
    """Provide hierarchical-output options with deterministic keys."""
    return ConversionOptions(hierarchical=True, key_generator=key_factory)


@pytest.fixture
def convert_html(flat_options) -> Callable[..., ConversionResult]:
    """Provide a converter that fails loudly when no tree is produced.

    Keyword arguments override fields of the flat options fixture.
    """

    def _convert(markup: str, **overrides) -> ConversionResult:
        options = flat_options.create_updated(**overrides) if overrides else flat_options
        result = convert(markup, options=options)
        assert result is not None, f"No tree built for {markup!r}"
        return result

    return _convert
