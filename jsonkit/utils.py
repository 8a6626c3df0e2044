"""Utility functions for jsonkit."""

from __future__ import annotations

import json
import re
from typing import Any


_PATH_SEGMENT = re.compile(r"([^.\[\]]+)|\[(\d+)\]")


def is_numeric(value: Any) -> bool:
    """Check if a value is numeric (int or float, but not bool)."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_object(value: Any) -> bool:
    """True for JSON containers (objects and arrays)."""
    return isinstance(value, (dict, list))


def is_integral(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, float) and value.is_integer()


def get_json_type(value: Any) -> str:
    """
    Get the JSON Schema type name of a runtime value.

    Numbers without a fractional part report as "integer".
    """
    if value is None:
        return "null"
    elif isinstance(value, bool):
        return "boolean"
    elif is_numeric(value):
        return "integer" if is_integral(value) else "number"
    elif isinstance(value, str):
        return "string"
    elif isinstance(value, list):
        return "array"
    elif isinstance(value, dict):
        return "object"
    else:
        return type(value).__name__


def build_path(parent_path: str, key: str | int) -> str:
    """Build a dot/bracket structural path from parent path and key."""
    if isinstance(key, int):
        return f"{parent_path}[{key}]"
    return f"{parent_path}.{key}" if parent_path else str(key)


def parse_path_segments(path: str) -> list:
    """Split a structural path like 'a.b[2].c' into ['a', 'b', 2, 'c']."""
    segments = []
    for match in _PATH_SEGMENT.finditer(path or ""):
        if match.group(2) is not None:
            segments.append(int(match.group(2)))
        else:
            segments.append(match.group(1))
    return segments


def parent_path(path: str) -> str:
    """Drop the last segment of a structural path ('' for top-level paths)."""
    if not path:
        return ""
    if path.endswith("]"):
        return path[:path.rindex("[")]
    cut = path.rfind(".")
    return path[:cut] if cut >= 0 else ""


def json_equal(a: Any, b: Any) -> bool:
    """
    Structural JSON equality.

    Arrays compare in order, objects by key set and values. Booleans never
    equal numbers, while 1 and 1.0 are equal.
    """
    if isinstance(a, bool) or isinstance(b, bool):
        return isinstance(a, bool) and isinstance(b, bool) and a == b
    if is_numeric(a) and is_numeric(b):
        return a == b
    if isinstance(a, list) and isinstance(b, list):
        return len(a) == len(b) and all(json_equal(x, y) for x, y in zip(a, b))
    if isinstance(a, dict) and isinstance(b, dict):
        if a.keys() != b.keys():
            return False
        return all(json_equal(a[key], b[key]) for key in a)
    if type(a) != type(b):
        return False
    return a == b


def count_properties(value: Any) -> int:
    """
    Count addressable nodes of a JSON document.

    Scalars count 1, arrays the sum of their items, objects 1 per key plus
    the count of that key's value.
    """
    total = 0
    pending = [value]
    while pending:
        node = pending.pop()
        if isinstance(node, list):
            pending.extend(node)
        elif isinstance(node, dict):
            total += len(node)
            pending.extend(node.values())
        else:
            total += 1
    return total


def _js_number(value: Any) -> Any:
    # JSON.stringify prints integral doubles below 1e21 without a fraction
    if isinstance(value, float) and value.is_integer() and abs(value) < 1e21:
        return int(value)
    return value


def _js_numbers(value: Any) -> Any:
    """Copy of value with every number in JSON.stringify's form."""
    if not isinstance(value, (list, dict)):
        return _js_number(value)
    root = [] if isinstance(value, list) else {}
    pending = [(value, root)]
    while pending:
        source, target = pending.pop()
        items = enumerate(source) if isinstance(source, list) else source.items()
        for key, item in items:
            if isinstance(item, (list, dict)):
                child = [] if isinstance(item, list) else {}
                pending.append((item, child))
            else:
                child = _js_number(item)
            if isinstance(target, list):
                target.append(child)
            else:
                target[key] = child
    return root


def to_compact_json(value: Any) -> str:
    """Serialize the way a browser's JSON.stringify would, without spaces."""
    return json.dumps(_js_numbers(value), separators=(",", ":"), ensure_ascii=False, default=str)


def format_location(path: str, separator: str = " → ") -> str:
    """Render a structural or schema path as human-readable segments."""
    if not path or path == "#":
        return "root"
    if path.startswith("#/"):
        parts = path[2:].split("/")
    else:
        parts = [str(p) for p in parse_path_segments(path)]
    return separator.join(parts) or "root"


def escape_pointer_token(token: str | int) -> str:
    return str(token).replace("~", "~0").replace("/", "~1")


def unescape_pointer_token(token: str) -> str:
    return token.replace("~1", "/").replace("~0", "~")
