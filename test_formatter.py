"""Tests for the JSON formatter helpers."""

import pytest
from jsonkit import (
    ComparisonSettings,
    InvalidJsonError,
    check_json_syntax,
    format_json_error,
    minify_json,
    prettify_json,
)


class TestPrettifyAndMinify:
    """Test re-serialization."""

    def test_prettify_default_indentation(self):
        """Test two-space indentation by default."""
        assert prettify_json('{"a":1}') == '{\n  "a": 1\n}'

    def test_prettify_sorts_keys_recursively(self):
        """Test sort_keys at every nesting level."""
        settings = ComparisonSettings(indentation=4, sort_keys=True)
        text = prettify_json('{"b": {"d": 1, "c": 2}, "a": 0}', settings)

        assert text.index('"a"') < text.index('"b"')
        assert text.index('"c"') < text.index('"d"')
        assert '\n    "a": 0' in text

    def test_prettify_zero_indentation_is_compact(self):
        """Test that indentation 0 yields compact output."""
        settings = ComparisonSettings(indentation=0)
        assert prettify_json('{ "a" : [1, 2] }', settings) == '{"a":[1,2]}'

    def test_non_ascii_preserved(self):
        """Test that unicode is written as-is."""
        assert minify_json('{"name": "Zoë"}') == '{"name":"Zoë"}'

    def test_minify(self):
        """Test whitespace removal."""
        assert minify_json('{\n  "a": [1, 2],\n  "b": null\n}') == '{"a":[1,2],"b":null}'

    def test_invalid_input_raises(self):
        """Test that invalid JSON raises InvalidJsonError."""
        with pytest.raises(InvalidJsonError) as exc_info:
            prettify_json("{bad")
        assert exc_info.value.message == "Invalid JSON format"

        with pytest.raises(InvalidJsonError):
            minify_json("")


class TestSyntaxCheck:
    """Test syntax checking and error formatting."""

    def test_empty_input_is_valid(self):
        """Test that blank input is considered valid."""
        assert check_json_syntax("   \n").is_valid is True

    def test_valid_input(self):
        """Test a valid document."""
        result = check_json_syntax('{"a": 1}')
        assert result.is_valid is True
        assert result.to_dict() == {"isValid": True}

    def test_error_position(self):
        """Test that the error carries line and column."""
        result = check_json_syntax('{\n  "a": 1,\n  "b": }')

        assert result.is_valid is False
        assert result.line_number == 3
        assert result.column_number == 8
        assert result.error

    def test_format_json_error(self):
        """Test position suffixes."""
        assert format_json_error("Oops", 3, 8) == "Oops (Line 3, Column 8)"
        assert format_json_error("Oops", 3) == "Oops (Line 3)"
        assert format_json_error("Oops") == "Oops"
