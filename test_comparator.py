"""Tests for the jsonkit structural comparator."""

import json

import pytest
from jsonkit import (
    compare_jsons,
    JsonComparator,
    ComparisonSettings,
    CompareError,
    InputParseError,
    DiffType,
)
from jsonkit.comparators import fuzzy_match, levenshtein_distance, values_equal
from jsonkit.utils import count_properties


class TestBasicComparison:
    """Test basic comparison functionality."""

    def setup_method(self):
        self.comparator = JsonComparator()

    def test_identical_documents(self):
        """Test that identical documents have no differences."""
        text = '{"name": "x", "tags": ["a", "b"], "nested": {"k": 1}}'

        result = self.comparator.compare(text, text)
        assert result.differences == []
        assert result.summary.unchanged == count_properties(json.loads(text))
        assert result.summary.unchanged == 8

    def test_modified_value(self):
        """Test that a changed value is a modification with both line numbers."""
        left = '{\n  "name": "alice",\n  "age": 30\n}'
        right = '{\n  "name": "alice",\n  "age": 31\n}'

        result = self.comparator.compare(left, right)
        assert len(result.differences) == 1
        diff = result.differences[0]
        assert diff.type == DiffType.MODIFICATION
        assert diff.path == "age"
        assert diff.old_value == 30
        assert diff.new_value == 31
        assert diff.left_line == 3
        assert diff.right_line == 3

    def test_added_field(self):
        """Test detection of a key present only on the right."""
        result = compare_jsons('{"a": 1}', '{"a": 1, "b": 2}')

        assert len(result.differences) == 1
        diff = result.differences[0]
        assert diff.type == DiffType.ADDITION
        assert diff.path == "b"
        assert diff.new_value == 2
        assert diff.left_line is None
        assert result.summary.additions == 1

    def test_removed_field(self):
        """Test detection of a key present only on the left."""
        result = compare_jsons('{"a": 1, "b": 2}', '{"a": 1}')

        assert len(result.differences) == 1
        diff = result.differences[0]
        assert diff.type == DiffType.DELETION
        assert diff.path == "b"
        assert diff.old_value == 2
        assert result.summary.deletions == 1

    def test_swapping_sides_swaps_types(self):
        """Test that reversing the inputs turns additions into deletions."""
        left = '{"a": 1, "b": {"c": true}, "d": "x"}'
        right = '{"a": 2, "e": [1]}'

        forward = compare_jsons(left, right)
        backward = compare_jsons(right, left)

        assert forward.summary.additions == backward.summary.deletions
        assert forward.summary.deletions == backward.summary.additions
        assert forward.summary.modifications == backward.summary.modifications

        modified = [d for d in backward.differences if d.type == DiffType.MODIFICATION]
        assert modified[0].old_value == 2
        assert modified[0].new_value == 1

    def test_null_counts_as_missing(self):
        """Test that null against a value is an addition or deletion."""
        added = compare_jsons('{"a": null}', '{"a": 1}')
        assert added.differences[0].type == DiffType.ADDITION
        assert added.differences[0].path == "a"

        removed = compare_jsons('{"a": 1}', '{"a": null}')
        assert removed.differences[0].type == DiffType.DELETION

        assert compare_jsons('{"a": null}', '{"a": null}').differences == []

    def test_root_scalar_path(self):
        """Test that a difference at the document root is reported as 'root'."""
        result = compare_jsons("1", "2")

        assert len(result.differences) == 1
        assert result.differences[0].path == "root"

    def test_array_against_object(self):
        """Test that an array replaced by an object is one modification."""
        result = compare_jsons('{"a": [1]}', '{"a": {"x": 1}}')

        assert len(result.differences) == 1
        assert result.differences[0].type == DiffType.MODIFICATION
        assert result.differences[0].path == "a"

    def test_nested_paths(self):
        """Test dotted and indexed paths for nested changes."""
        settings = ComparisonSettings(ignore_order=False)
        result = compare_jsons(
            '{"user": {"roles": [{"id": 1}, {"id": 2}]}}',
            '{"user": {"roles": [{"id": 1}, {"id": 3}]}}',
            settings,
        )

        assert [d.path for d in result.differences] == ["user.roles[1].id"]


class TestArrayOrdering:
    """Test ignore_order handling of arrays."""

    def test_reordered_array_ignored(self):
        """Test that reordering is not a difference when ignore_order is on."""
        settings = ComparisonSettings(ignore_order=True)
        result = compare_jsons('{"a": [1, 2, 3]}', '{"a": [3, 2, 1]}', settings)

        assert result.differences == []

    def test_reordered_array_strict(self):
        """Test index-by-index comparison when ignore_order is off."""
        settings = ComparisonSettings(ignore_order=False)
        result = compare_jsons('{"a": [1, 2, 3]}', '{"a": [3, 2, 1]}', settings)

        assert len(result.differences) == 2
        assert all(d.type == DiffType.MODIFICATION for d in result.differences)
        assert [d.path for d in result.differences] == ["a[0]", "a[2]"]

    def test_greedy_matching(self):
        """Test that unmatched elements become deletions then additions."""
        settings = ComparisonSettings(ignore_order=True)
        result = compare_jsons('{"a": [1, 2, 2]}', '{"a": [2, 1, 3]}', settings)

        assert len(result.differences) == 2
        deletion, addition = result.differences
        assert deletion.type == DiffType.DELETION
        assert deletion.path == "a[2]"
        assert deletion.old_value == 2
        assert addition.type == DiffType.ADDITION
        assert addition.path == "a[2]"
        assert addition.new_value == 3

    def test_strict_array_length_change(self):
        """Test additions for trailing elements in strict mode."""
        settings = ComparisonSettings(ignore_order=False)
        result = compare_jsons("[1]", "[1, 2]", settings)

        assert len(result.differences) == 1
        assert result.differences[0].type == DiffType.ADDITION
        assert result.differences[0].path == "[1]"

    def test_array_element_line(self):
        """Test that array element differences point at the element's line."""
        settings = ComparisonSettings(ignore_order=False)
        left = '{\n  "a": [\n    1,\n    2\n  ]\n}'
        right = '{\n  "a": [\n    1,\n    3\n  ]\n}'

        result = compare_jsons(left, right, settings)
        assert result.differences[0].path == "a[1]"
        assert result.differences[0].left_line == 4
        assert result.differences[0].right_line == 4


class TestStringMatching:
    """Test fuzzy and case-insensitive string comparison."""

    def test_fuzzy_match_equal_after_normalization(self):
        """Test that whitespace and punctuation are ignored with fuzzy matching."""
        left = '{"s": "hello world"}'
        right = '{"s": "hello  world!"}'

        assert compare_jsons(left, right, ComparisonSettings(fuzzy_match=True)).differences == []

        strict = compare_jsons(left, right, ComparisonSettings(fuzzy_match=False))
        assert len(strict.differences) == 1
        assert strict.differences[0].type == DiffType.MODIFICATION

    def test_fuzzy_similarity_threshold(self):
        """Test the 0.80 similarity boundary."""
        assert fuzzy_match("color", "colour") is True
        assert fuzzy_match("abc", "xyz") is False

    def test_ignore_case(self):
        """Test case-insensitive comparison without fuzzy matching."""
        settings = ComparisonSettings(fuzzy_match=False, ignore_case=True)
        assert compare_jsons('{"s": "Hello"}', '{"s": "hello"}', settings).differences == []

        settings = ComparisonSettings(fuzzy_match=False, ignore_case=False)
        assert len(compare_jsons('{"s": "Hello"}', '{"s": "hello"}', settings).differences) == 1

    def test_levenshtein_distance(self):
        """Test classic edit distance."""
        assert levenshtein_distance("kitten", "sitting") == 3
        assert levenshtein_distance("", "abc") == 3
        assert levenshtein_distance("same", "same") == 0

    def test_booleans_are_not_numbers(self):
        """Test that true and 1 are different values."""
        settings = ComparisonSettings()
        assert values_equal(True, 1, settings) is False
        assert values_equal(1, 1.0, settings) is True


class TestIgnorePaths:
    """Test JSONPath-based masking before comparison."""

    def test_ignore_top_level_field(self):
        """Test that an ignored subtree never produces differences."""
        settings = ComparisonSettings(ignore_paths=["$.meta"])
        result = compare_jsons(
            '{"id": 1, "meta": {"t": 1}}',
            '{"id": 1, "meta": {"t": 2}}',
            settings,
        )

        assert result.differences == []

    def test_ignore_field_in_every_item(self):
        """Test wildcard paths over array items."""
        settings = ComparisonSettings(ignore_paths=["$.items[*].ts"], ignore_order=False)
        result = compare_jsons(
            '{"items": [{"id": 1, "ts": "a"}, {"id": 2, "ts": "b"}]}',
            '{"items": [{"id": 1, "ts": "c"}, {"id": 3, "ts": "d"}]}',
            settings,
        )

        assert [d.path for d in result.differences] == ["items[1].id"]

    def test_invalid_jsonpath(self):
        """Test that a malformed expression is rejected."""
        settings = ComparisonSettings(ignore_paths=["$.[[["])
        with pytest.raises(ValueError):
            compare_jsons('{"a": 1}', '{"a": 2}', settings)


class TestErrorsAndSerialization:
    """Test failure handling and wire shapes."""

    def test_invalid_json_raises(self):
        """Test that unparsable input raises CompareError wrapping the parse error."""
        with pytest.raises(CompareError) as exc_info:
            compare_jsons('{"a": 1', '{"a": 1}')

        assert exc_info.value.message.startswith("Failed to compare JSONs:")
        assert isinstance(exc_info.value.cause, InputParseError)

    def test_nan_is_rejected(self):
        """Test that non-standard JSON constants are not accepted."""
        with pytest.raises(CompareError):
            compare_jsons('{"a": NaN}', '{"a": 1}')

    def test_to_dict_shapes(self):
        """Test camelCase output and per-type fields."""
        result = compare_jsons('{"a": 1, "b": 2}', '{"a": 3, "c": 4}')
        data = result.to_dict()

        by_type = {d["type"]: d for d in data["differences"]}
        assert set(by_type) == {"addition", "deletion", "modification"}
        assert "oldValue" not in by_type["addition"]
        assert "newValue" not in by_type["deletion"]
        assert by_type["modification"]["leftLine"] == 1
        assert data["summary"] == {
            "additions": 1,
            "deletions": 1,
            "modifications": 1,
            "unchanged": 1,
        }

    def test_settings_from_dict(self):
        """Test that settings accept camelCase keys and skip unknown ones."""
        settings = ComparisonSettings.from_dict({"ignoreOrder": False, "sortKeys": True, "theme": "dark"})

        assert settings.ignore_order is False
        assert settings.sort_keys is True
        assert settings.to_dict()["ignoreOrder"] is False


class TestDeepNesting:
    """Test documents nested hundreds of levels deep."""

    def setup_method(self):
        self.depth = 600

    def nested(self, leaf):
        return "[" * self.depth + leaf + "]" * self.depth

    def test_identical_deep_documents(self):
        """Test that deeply nested equal documents compare without error."""
        text = self.nested("")

        result = compare_jsons(text, text)
        assert result.differences == []

    def test_change_at_the_bottom(self):
        """Test that a leaf change far down is found with its path and line."""
        result = compare_jsons(self.nested("1"), self.nested("2"))

        assert len(result.differences) == 1
        diff = result.differences[0]
        assert diff.type == DiffType.MODIFICATION
        assert diff.path == "[0]" * self.depth
        assert diff.left_line == 1
        assert diff.right_line == 1

    def test_pre_order_reporting(self):
        """Test that nested changes are reported before later sibling keys."""
        left = '{"a": {"x": 1, "y": [1, 2]}, "b": 1}'
        right = '{"a": {"x": 2, "y": [1]}, "c": 3}'

        result = compare_jsons(left, right)
        assert [(d.type, d.path) for d in result.differences] == [
            (DiffType.MODIFICATION, "a.x"),
            (DiffType.DELETION, "a.y[1]"),
            (DiffType.DELETION, "b"),
            (DiffType.ADDITION, "c"),
        ]

    def test_count_properties_deep(self):
        """Test node counting on a deep chain of objects."""
        value = 0
        for _ in range(self.depth):
            value = {"k": value}

        assert count_properties(value) == self.depth + 1
