"""Tests for source location mapping and input parsing."""

import pytest
from jsonkit import InputParseError, parse_input
from jsonkit.source_map import Location, SourceLocator, build_location_map, scan_json_locations
from jsonkit.utils import format_location, parent_path


class TestJsonLocations:
    """Test the tokenizing JSON scanner."""

    def test_member_keys_and_elements(self):
        """Test that members are located at their key and elements at their start."""
        text = '{\n  "a": {\n    "b": [10,\n      {"c": true}]\n  }\n}'
        locations = scan_json_locations(text)

        assert locations[""] == Location(1, 1)
        assert locations["a"] == Location(2, 3)
        assert locations["a.b"] == Location(3, 5)
        assert locations["a.b[0]"] == Location(3, 11)
        assert locations["a.b[1]"] == Location(4, 7)
        assert locations["a.b[1].c"] == Location(4, 8)

    def test_repeated_key_names(self):
        """Test that the same key at different depths keeps separate lines."""
        text = '{\n  "id": 1,\n  "child": {\n    "id": 2\n  }\n}'
        locations = scan_json_locations(text)

        assert locations["id"].line == 2
        assert locations["child.id"].line == 4

    def test_strings_with_structure_characters(self):
        """Test that braces and escaped quotes inside strings are not tokens."""
        text = '{"a": "{[\\"x\\"]}", "b": 1}'
        locations = scan_json_locations(text)

        assert set(locations) == {"", "a", "b"}
        assert locations["b"] == Location(1, 20)

    def test_invalid_json(self):
        """Test that malformed text raises with a position."""
        with pytest.raises(InputParseError) as exc_info:
            scan_json_locations('{"a": }')
        assert exc_info.value.line == 1

    def test_yaml_locations(self):
        """Test locations for YAML input."""
        locations = build_location_map("name: x\nitems:\n  - 1\n  - 2\n")

        assert locations["name"] == Location(1, 1)
        assert locations["items[1]"] == Location(4, 5)

    def test_unparsable_text_has_no_locations(self):
        """Test that garbage yields an empty map."""
        assert build_location_map("{bad: [") == {}


class TestSourceLocator:
    """Test exact and nearest-ancestor lookups."""

    def setup_method(self):
        self.locator = SourceLocator('{\n  "user": {\n    "name": "x"\n  }\n}')

    def test_exact_lookup(self):
        """Test line_for with known and unknown paths."""
        assert self.locator.line_for("user.name") == 3
        assert self.locator.line_for("user.email") == 1
        assert self.locator.line_for("user.email", default=0) == 0

    def test_nearest_ancestor(self):
        """Test that missing paths resolve to their enclosing node."""
        assert self.locator.locate("user.email") == Location(2, 3)
        assert self.locator.locate("nothing.here") == Location(1, 1)

    def test_empty_text(self):
        """Test that empty text locates everything at 1:1."""
        assert SourceLocator("").locate("a") == Location(1, 1)


class TestParsingAndPaths:
    """Test input parsing and path helpers."""

    def test_parse_input_detects_format(self):
        """Test JSON and YAML auto-detection."""
        assert parse_input('{"a": 1}') == {"a": 1}
        assert parse_input("a: 1\nb: [x, y]") == {"a": 1, "b": ["x", "y"]}

    def test_yaml_dates_stay_strings(self):
        """Test that YAML timestamps are not converted to dates."""
        assert parse_input("when: 2024-01-15") == {"when": "2024-01-15"}

    def test_parse_input_failure(self):
        """Test that text neither format accepts raises."""
        with pytest.raises(InputParseError) as exc_info:
            parse_input("{bad: [")
        assert exc_info.value.message.startswith("Failed to parse as both YAML and JSON")

    def test_parent_path(self):
        """Test dropping the last path segment."""
        assert parent_path("a.b[2]") == "a.b"
        assert parent_path("a.b") == "a"
        assert parent_path("a") == ""
        assert parent_path("[0]") == ""

    def test_format_location(self):
        """Test human readable locations."""
        assert format_location("") == "root"
        assert format_location("#") == "root"
        assert format_location("a.b[2]") == "a → b → 2"
        assert format_location("#/properties/a") == "properties → a"


class TestDeepNesting:
    """Test location maps of deeply nested text."""

    def setup_method(self):
        self.depth = 600

    def test_deep_json_arrays(self):
        """Test that every level of a deep array chain is located."""
        text = "[" * self.depth + "]" * self.depth
        locations = build_location_map(text)

        assert locations[""] == Location(1, 1)
        assert locations["[0]" * (self.depth - 1)] == Location(1, self.depth)
        assert len(locations) == self.depth

    def test_deep_json_objects(self):
        """Test keys of deep object chains across lines."""
        text = '{"k":\n' * self.depth + "0" + "}" * self.depth
        locations = scan_json_locations(text)

        assert locations["k"] == Location(1, 2)
        assert locations[".".join(["k"] * self.depth)] == Location(self.depth, 2)

    def test_deep_text_that_is_neither_json_nor_yaml(self):
        """Test that deep broken input yields an empty map rather than an error."""
        text = "[" * self.depth + "]" * (self.depth + 1)
        assert build_location_map(text) == {}
