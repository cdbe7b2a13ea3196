#!/usr/bin/env python3
"""Tests for configuration validators."""

import pytest

from jdd.core.constants import ErrorCode
from jdd.core.validators import (
    ValidationError,
    parse_bool,
    parse_duration,
    split_patterns,
    validate_config,
    validate_log_level,
)


class TestParseDuration:
    """Tests for parse_duration."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            (None, 0.0),
            (0, 0.0),
            (2, 2.0),
            (0.25, 0.25),
            ("0", 0.0),
            ("", 0.0),
            ("1.5", 1.5),
            ("500ms", 0.5),
            ("2s", 2.0),
            ("1m30s", 90.0),
            ("1h", 3600.0),
            ("250us", 0.00025),
            ("1.5s", 1.5),
        ],
    )
    def test_valid(self, value, expected):
        assert parse_duration(value) == pytest.approx(expected)

    @pytest.mark.parametrize("value", ["-1s", -1, "-0.5", "fast", "10x", "s", True, [1]])
    def test_invalid(self, value):
        with pytest.raises(ValidationError) as exc_info:
            parse_duration(value)

        assert exc_info.value.error_code == ErrorCode.INVALID_INPUT


class TestParseBool:
    """Tests for parse_bool."""

    @pytest.mark.parametrize("value", [True, 1, "true", "YES", "on", " 1 "])
    def test_true(self, value):
        assert parse_bool(value) is True

    @pytest.mark.parametrize("value", [False, 0, "false", "No", "off", "0", ""])
    def test_false(self, value):
        assert parse_bool(value) is False

    @pytest.mark.parametrize("value", ["maybe", None, 1.5])
    def test_invalid(self, value):
        with pytest.raises(ValidationError):
            parse_bool(value)


class TestSplitPatterns:
    """Tests for split_patterns."""

    def test_none(self):
        assert split_patterns(None) == []

    def test_comma_separated_string(self):
        """Environment-style values are split on commas."""
        assert split_patterns("*.tmp, **/.git/**") == ["*.tmp", "**/.git/**"]

    def test_list_entries_are_split_and_stripped(self):
        assert split_patterns(["*.tmp", " a , b ", ""]) == ["*.tmp", "a", "b"]

    def test_non_string_entry(self):
        with pytest.raises(ValidationError):
            split_patterns(["*.tmp", 3])


class TestValidateLogLevel:
    """Tests for validate_log_level."""

    @pytest.mark.parametrize("level", ["debug", "INFO", "warn", "Warning", "error"])
    def test_valid(self, level):
        assert validate_log_level(level) == level.lower()

    @pytest.mark.parametrize("level", ["verbose", "", None, 10])
    def test_invalid(self, level):
        with pytest.raises(ValidationError):
            validate_log_level(level)


class TestValidateConfig:
    """Tests for validate_config."""

    def test_minimal(self):
        assert validate_config({"root": "/tmp/docs"}) is True

    def test_full(self, sample_config):
        assert validate_config(sample_config) is True

    def test_not_a_dict(self):
        with pytest.raises(ValidationError, match="dictionary"):
            validate_config(["root"])

    @pytest.mark.parametrize("root", [None, "", "  ", 5])
    def test_bad_root(self, root):
        with pytest.raises(ValidationError, match="Root"):
            validate_config({"root": root})

    def test_bad_exclude(self):
        with pytest.raises(ValidationError, match="Exclude"):
            validate_config({"root": "/r", "exclude": {"a": 1}})

    def test_bad_bool_names_key(self):
        with pytest.raises(ValidationError, match="dry_run"):
            validate_config({"root": "/r", "dry_run": "sometimes"})

    def test_bad_delay_names_key(self):
        with pytest.raises(ValidationError, match="delay"):
            validate_config({"root": "/r", "delay": "soon"})

    def test_bad_log_level(self):
        with pytest.raises(ValidationError, match="log level"):
            validate_config({"root": "/r", "log_level": "loud"})
