"""Tests for size and duration parsing."""

from __future__ import annotations

import pytest

from dpa_operator.utils.units import parse_duration, parse_file_size


class TestParseFileSize:
    """Test cases for parse_file_size."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("2048", 2048),
            ("10B", 10),
            ("1KB", 1024),
            ("1KiB", 1024),
            ("5MB", 5 * 1024 * 1024),
            ("1.5GB", int(1.5 * 1024**3)),
            ("1 tb", 1024**4),
        ],
    )
    def test_valid_sizes(self, value, expected):
        """Test parsing valid sizes with binary units."""
        assert parse_file_size(value) == expected

    @pytest.mark.parametrize("value", ["", "MB", "10XB", "-1MB", "ten"])
    def test_invalid_sizes(self, value):
        """Test malformed sizes raise ValueError."""
        with pytest.raises(ValueError):
            parse_file_size(value)


class TestParseDuration:
    """Test cases for parse_duration."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("30s", 30.0),
            ("1m30s", 90.0),
            ("500ms", 0.5),
            ("1h", 3600.0),
            (45, 45.0),
            (2.5, 2.5),
        ],
    )
    def test_valid_durations(self, value, expected):
        """Test parsing valid durations."""
        assert parse_duration(value) == pytest.approx(expected)

    def test_empty_is_none(self):
        """Test that unset durations return None."""
        assert parse_duration(None) is None
        assert parse_duration("") is None

    @pytest.mark.parametrize("value", ["30", "abc", "1m30", "s30"])
    def test_invalid_durations(self, value):
        """Test malformed durations raise ValueError."""
        with pytest.raises(ValueError):
            parse_duration(value)
