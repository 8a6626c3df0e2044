"""Source locations for structural paths.

A single tokenizing pass over the JSON text records where every node
starts, keyed by the same dot/bracket paths the engines emit. Object members
are located at their key, array elements at the first character of the
element. YAML documents are located through PyYAML's composed node marks.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from json.decoder import scanstring
from typing import Optional

import yaml

from .exceptions import InputParseError
from .parsing import JsonCompatibleLoader
from .utils import build_path, parent_path

logger = logging.getLogger(__name__)

_SCALAR = re.compile(r"-?(?:0|[1-9]\d*)(?:\.\d+)?(?:[eE][+-]?\d+)?|true|false|null")
_WHITESPACE = " \t\r\n"


@dataclass(frozen=True)
class Location:
    line: int
    column: int


@dataclass
class _Container:
    path: str
    closer: str
    count: int = 0


class _Scanner:
    """Tokenizes JSON with an explicit container stack (no recursion)."""

    def __init__(self, text: str):
        self.text = text
        self.pos = 0
        self.line = 1
        self.column = 1
        self.locations: dict[str, Location] = {}

    def scan(self) -> dict[str, Location]:
        self._skip_whitespace()
        self.locations[""] = self._here()
        stack: list[_Container] = []
        self._open_value("", stack)

        while stack:
            container = stack[-1]
            self._skip_whitespace()
            if container.count:
                if self._peek() == ",":
                    self._advance()
                    self._skip_whitespace()
                else:
                    self._expect(container.closer)
                    stack.pop()
                    continue
            elif self._peek() == container.closer:
                self._advance()
                stack.pop()
                continue

            if container.closer == "}":
                if self._peek() != '"':
                    self._fail("Expected property name")
                location = self._here()
                child_path = build_path(container.path, self._string())
                self.locations[child_path] = location
                self._skip_whitespace()
                self._expect(":")
                self._skip_whitespace()
            else:
                child_path = build_path(container.path, container.count)
                self.locations[child_path] = self._here()

            container.count += 1
            self._open_value(child_path, stack)

        self._skip_whitespace()
        if self.pos != len(self.text):
            self._fail("Unexpected trailing content")
        return self.locations

    def _here(self) -> Location:
        return Location(self.line, self.column)

    def _fail(self, message: str):
        raise InputParseError(message, self.line, self.column)

    def _advance(self, count: int = 1):
        chunk = self.text[self.pos:self.pos + count]
        newlines = chunk.count("\n")
        if newlines:
            self.line += newlines
            self.column = len(chunk) - chunk.rindex("\n")
        else:
            self.column += len(chunk)
        self.pos += len(chunk)

    def _skip_whitespace(self):
        start = self.pos
        end = start
        while end < len(self.text) and self.text[end] in _WHITESPACE:
            end += 1
        if end > start:
            self._advance(end - start)

    def _peek(self) -> str:
        return self.text[self.pos] if self.pos < len(self.text) else ""

    def _expect(self, char: str):
        if self._peek() != char:
            self._fail(f"Expected '{char}'")
        self._advance()

    def _open_value(self, path: str, stack: list[_Container]):
        """Consume a scalar, or an opening bracket whose contents scan() walks next."""
        char = self._peek()
        if char == "{":
            self._advance()
            stack.append(_Container(path, "}"))
        elif char == "[":
            self._advance()
            stack.append(_Container(path, "]"))
        elif char == '"':
            self._string()
        else:
            match = _SCALAR.match(self.text, self.pos)
            if not match:
                self._fail("Unexpected token")
            self._advance(match.end() - self.pos)

    def _string(self) -> str:
        try:
            value, end = scanstring(self.text, self.pos + 1)
        except ValueError as e:
            raise InputParseError(str(e), self.line, self.column) from e
        self._advance(end - self.pos)
        return value


def scan_json_locations(text: str) -> dict[str, Location]:
    """Locate every node of a JSON text. Raises InputParseError on bad input."""
    return _Scanner(text).scan()


def _walk_yaml(root, locations: dict[str, Location]):
    pending = [(root, "")]
    while pending:
        node, path = pending.pop()
        if isinstance(node, yaml.MappingNode):
            children = [(build_path(path, str(key.value)), key, value) for key, value in node.value]
        elif isinstance(node, yaml.SequenceNode):
            children = [(build_path(path, index), item, item) for index, item in enumerate(node.value)]
        else:
            continue
        for child_path, marked, value in children:
            mark = marked.start_mark
            locations[child_path] = Location(mark.line + 1, mark.column + 1)
        pending.extend((value, child_path) for child_path, _, value in reversed(children))


def scan_yaml_locations(text: str) -> dict[str, Location]:
    root = yaml.compose(text, Loader=JsonCompatibleLoader)
    if root is None:
        return {}
    locations = {"": Location(root.start_mark.line + 1, root.start_mark.column + 1)}
    _walk_yaml(root, locations)
    return locations


def build_location_map(text: str) -> dict[str, Location]:
    """
    Build a path -> Location map for a JSON or YAML text.

    Returns an empty map when the text is neither; lookups then fall back
    to line 1.
    """
    try:
        return scan_json_locations(text)
    except InputParseError:
        pass
    try:
        return scan_yaml_locations(text)
    except (yaml.YAMLError, RecursionError) as e:
        # PyYAML's composer recurses per nesting level
        logger.debug("No source locations available: %s", e)
        return {}


class SourceLocator:
    """Answers 'where in the source text is this path?'."""

    def __init__(self, text: Optional[str]):
        self.locations = build_location_map(text) if text else {}

    def line_for(self, path: str, default: int = 1) -> int:
        """Exact lookup of a path's line number."""
        location = self.locations.get(path)
        return location.line if location else default

    def locate(self, path: str) -> Location:
        """
        Locate a path, falling back to its nearest existing ancestor.

        Paths that are absent from the document (a missing required
        property, say) resolve to the enclosing node; unknown roots
        resolve to line 1, column 1.
        """
        current = path or ""
        while True:
            location = self.locations.get(current)
            if location is not None:
                return location
            if not current:
                return Location(1, 1)
            current = parent_path(current)
