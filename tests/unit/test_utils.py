#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/unit/test_utils.py
"""Unit tests for key generation, URL checks, dependency helpers and logging."""

import logging

import pytest

from html2draft.exceptions import DependencyError
from html2draft.logging_utils import configure_logging, resolve_log_level
from html2draft.utils.decorators import debug_timer, requires_dependencies
from html2draft.utils.keys import KeyGenerator, SequentialKeyGenerator, generate_random_key
from html2draft.utils.packages import check_version_requirement, get_package_version
from html2draft.utils.security import is_relative_url, is_url_scheme_allowed


@pytest.mark.unit
class TestKeys:
    """Tests for key generators."""

    def test_random_keys_unique(self) -> None:
        """Test that a generator never repeats a key."""
        generator = KeyGenerator(length=2, seed=1)
        keys = [generator() for _ in range(300)]

        assert len(set(keys)) == 300
        assert all(len(key) == 2 for key in keys)

    def test_seeded_generators_repeat(self) -> None:
        """Test that equal seeds give equal sequences."""
        first, second = KeyGenerator(seed=3), KeyGenerator(seed=3)

        assert [first() for _ in range(5)] == [second() for _ in range(5)]

    def test_invalid_length(self) -> None:
        """Test that a non-positive length is rejected."""
        with pytest.raises(ValueError):
            KeyGenerator(length=0)

    def test_sequential(self) -> None:
        """Test deterministic keys."""
        generator = SequentialKeyGenerator("row")

        assert [generator(), generator()] == ["row0", "row1"]

    def test_generate_random_key(self) -> None:
        """Test the process-wide generator."""
        assert generate_random_key() != generate_random_key()


@pytest.mark.unit
class TestSecurity:
    """Tests for URL checks."""

    @pytest.mark.parametrize("url", ["#top", "/a", "./a", "../a", "?q=1", "page.html"])
    def test_relative(self, url: str) -> None:
        """Test relative URL detection."""
        assert is_relative_url(url)

    def test_not_relative(self) -> None:
        """Test absolute URLs."""
        assert not is_relative_url("https://example.com")
        assert not is_relative_url("javascript:alert(1)")

    def test_scheme_case_insensitive(self) -> None:
        """Test that scheme checks ignore case and surrounding whitespace."""
        assert is_url_scheme_allowed("  HTTPS://example.com ", {"https"})
        assert not is_url_scheme_allowed("JavaScript:alert(1)", {"https"})

    def test_allowed_prefix(self) -> None:
        """Test accepting a verbatim prefix."""
        assert is_url_scheme_allowed("DATA:image/png;base64,AA", {"https"}, ("data:image/",))
        assert not is_url_scheme_allowed("data:image/png;base64,AA", {"https"})

    def test_empty(self) -> None:
        """Test that empty URLs are never allowed."""
        assert not is_url_scheme_allowed("  ", {"https"})


@pytest.mark.unit
class TestDependencies:
    """Tests for dependency checking helpers."""

    def test_installed_package(self) -> None:
        """Test version lookups for an installed distribution."""
        assert get_package_version("beautifulsoup4") is not None
        assert check_version_requirement("beautifulsoup4", ">=4.0")[0]

    def test_missing_package(self) -> None:
        """Test version lookups for a missing distribution."""
        assert get_package_version("surely-not-installed-pkg") is None

    def test_requires_dependencies_missing(self) -> None:
        """Test that a missing import raises DependencyError before the call."""
        calls = []

        @requires_dependencies("widget", [("surely-not-installed-pkg", "surely_not_installed_pkg", "")])
        def guarded():
            calls.append(True)

        with pytest.raises(DependencyError) as exc_info:
            guarded()

        assert calls == []
        assert exc_info.value.missing_packages == [("surely-not-installed-pkg", "")]
        assert "pip install" in str(exc_info.value)

    def test_requires_dependencies_version_mismatch(self) -> None:
        """Test that an unsatisfiable version requirement is reported."""

        @requires_dependencies("html", [("beautifulsoup4", "bs4", ">=999")])
        def guarded():
            return "ran"

        with pytest.raises(DependencyError) as exc_info:
            guarded()

        assert exc_info.value.version_mismatches[0][0] == "beautifulsoup4"

    def test_requires_dependencies_satisfied(self) -> None:
        """Test that satisfied requirements let the call through."""

        @requires_dependencies("html", [("beautifulsoup4", "bs4", "")])
        def guarded():
            return "ran"

        assert guarded() == "ran"


@pytest.mark.unit
class TestLogging:
    """Tests for logging helpers."""

    def test_configure_logging(self, tmp_path) -> None:
        """Test root handler configuration with a log file."""
        root = logging.getLogger()
        saved_handlers, saved_level = root.handlers[:], root.level
        log_file = tmp_path / "run.log"
        try:
            configured = configure_logging("DEBUG", log_file=str(log_file), trace_mode=True)
            logging.getLogger("html2draft.test").debug("hello from test")
            for handler in configured.handlers:
                handler.flush()

            assert configured.level == logging.DEBUG
            assert len(configured.handlers) == 2
            assert "hello from test" in log_file.read_text(encoding="utf-8")
        finally:
            for handler in root.handlers:
                if handler not in saved_handlers:
                    handler.close()
            root.handlers[:] = saved_handlers
            root.setLevel(saved_level)

    @pytest.mark.parametrize(
        "value, expected",
        [("debug", logging.DEBUG), ("ERROR", logging.ERROR), (logging.INFO, logging.INFO), ("chatty", logging.WARNING)],
    )
    def test_resolve_log_level(self, value, expected) -> None:
        """Test level names, numeric levels and the fallback for unknown names."""
        assert resolve_log_level(value) == expected

    def test_debug_timer(self, caplog) -> None:
        """Test that the timer logs only at DEBUG level."""
        logger = logging.getLogger("html2draft.timer")

        with caplog.at_level(logging.DEBUG, logger="html2draft.timer"):
            with debug_timer(logger, "Step"):
                pass

        assert "Step completed in" in caplog.text
