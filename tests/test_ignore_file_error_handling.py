"""
Unit tests for ignore file error handling scenarios.

Tests graceful handling of:
- Invalid UTF-8 encoding
- Malformed patterns
- Permission errors
- Empty files
"""

import logging
import os
import sys
import tempfile
from pathlib import Path
from unittest.mock import patch

import pytest

from dirscout.core.ignore_filter import IgnoreFilter, read_ignore_file


class TestInvalidUTF8Handling:
    """Test handling of invalid UTF-8 encoding in ignore files."""

    def test_invalid_utf8_returns_zero_patterns(self):
        """read_ignore_file should return no patterns when file has invalid UTF-8."""
        with tempfile.TemporaryDirectory() as tmpdir:
            ignore_path = Path(tmpdir) / ".gitignore"
            ignore_path.write_bytes(b"valid_pattern\n\xff\xfe invalid bytes\n")

            assert read_ignore_file(ignore_path) == []

    def test_invalid_utf8_logs_warning(self, caplog):
        """read_ignore_file should log a warning for invalid UTF-8 files."""
        with tempfile.TemporaryDirectory() as tmpdir:
            ignore_path = Path(tmpdir) / ".gitignore"
            ignore_path.write_bytes(b"\xff\xfe\x00\x01")

            with caplog.at_level(logging.WARNING):
                read_ignore_file(ignore_path)

            assert any(
                "Invalid UTF-8 encoding" in record.message for record in caplog.records
            ), "Should log warning about invalid UTF-8"

    def test_invalid_utf8_keeps_default_rules(self):
        """A broken ignore file must not drop the default directory rules."""
        with tempfile.TemporaryDirectory() as tmpdir:
            ignore_path = Path(tmpdir) / ".gitignore"
            ignore_path.write_bytes(b"\xff\xfe invalid")

            ignore_filter = IgnoreFilter.from_defaults(["node_modules"], ignore_path)

            assert ignore_filter.pattern_count == 1
            assert ignore_filter.ignores("node_modules", is_dir=True)


class TestMalformedPatternHandling:
    """Test handling of malformed patterns."""

    def test_malformed_patterns_dont_crash(self):
        """Various malformed patterns should not crash the filter."""
        malformed_patterns = [
            "!/",
            "!",
            "/",
            "[",
            "]",
            "[[",
            "pattern\\",
        ]

        ignore_filter = IgnoreFilter(malformed_patterns + ["valid_pattern"])

        assert "valid_pattern" in ignore_filter.patterns
        assert ignore_filter.ignores("valid_pattern")
        assert not ignore_filter.ignores("other")

    def test_malformed_pattern_logs_warning(self, caplog):
        with caplog.at_level(logging.WARNING):
            ignore_filter = IgnoreFilter(["pattern\\", "ok"])

        if "pattern\\" not in ignore_filter.patterns:
            assert any("Malformed ignore pattern" in r.message for r in caplog.records)
        assert "ok" in ignore_filter.patterns


class TestPermissionErrorHandling:
    """Test handling of permission errors when reading ignore files."""

    @pytest.mark.skipif(
        sys.platform == "win32",
        reason="Permission tests behave differently on Windows",
    )
    def test_permission_denied_returns_zero_patterns(self):
        """read_ignore_file should return no patterns when the file is unreadable."""
        if hasattr(os, "geteuid") and os.geteuid() == 0:
            pytest.skip("root can read files regardless of mode")

        with tempfile.TemporaryDirectory() as tmpdir:
            ignore_path = Path(tmpdir) / ".gitignore"
            ignore_path.write_text("pattern\n", encoding="utf-8")
            os.chmod(ignore_path, 0o000)

            try:
                assert read_ignore_file(ignore_path) == []
            finally:
                os.chmod(ignore_path, 0o644)

    def test_permission_error_logs_warning(self, caplog):
        """Permission errors should be logged as warnings."""
        with tempfile.TemporaryDirectory() as tmpdir:
            ignore_path = Path(tmpdir) / ".gitignore"
            ignore_path.write_text("pattern\n", encoding="utf-8")

            with patch.object(Path, "read_text", side_effect=PermissionError("denied")):
                with caplog.at_level(logging.WARNING):
                    patterns = read_ignore_file(ignore_path)

            assert patterns == []
            assert any("Permission denied" in r.message for r in caplog.records)

    def test_os_error_logs_warning(self, caplog):
        with tempfile.TemporaryDirectory() as tmpdir:
            ignore_path = Path(tmpdir) / ".gitignore"
            ignore_path.write_text("pattern\n", encoding="utf-8")

            with patch.object(Path, "read_text", side_effect=OSError("disk gone")):
                with caplog.at_level(logging.WARNING):
                    patterns = read_ignore_file(ignore_path)

            assert patterns == []
            assert any("Error reading" in r.message for r in caplog.records)


class TestEmptyFileHandling:
    """Test handling of empty ignore files."""

    def test_empty_file_returns_zero_patterns(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            ignore_path = Path(tmpdir) / ".gitignore"
            ignore_path.write_text("", encoding="utf-8")

            assert read_ignore_file(ignore_path) == []

    def test_whitespace_and_comments_only(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            ignore_path = Path(tmpdir) / ".gitignore"
            ignore_path.write_text("\n   \n# comment\n\t\n", encoding="utf-8")

            assert read_ignore_file(ignore_path) == []
