"""Input parsing with JSON/YAML format auto-detection."""

from __future__ import annotations

import json
from typing import Any

import yaml

from .exceptions import InputParseError


class JsonCompatibleLoader(yaml.SafeLoader):
    """SafeLoader that leaves timestamps as strings so results stay JSON values."""


JsonCompatibleLoader.yaml_implicit_resolvers = {
    first: [
        (tag, regexp) for tag, regexp in resolvers
        if tag != "tag:yaml.org,2002:timestamp"
    ]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


def _reject_constant(name: str):
    raise ValueError(f"Invalid JSON constant: {name}")


def parse_json(text: str) -> Any:
    """Parse strict JSON (NaN and Infinity are rejected)."""
    try:
        return json.loads(text, parse_constant=_reject_constant)
    except json.JSONDecodeError as e:
        raise InputParseError(e.msg, e.lineno, e.colno) from e
    except ValueError as e:
        raise InputParseError(str(e)) from e


def parse_yaml(text: str) -> Any:
    try:
        return yaml.load(text, Loader=JsonCompatibleLoader)
    except yaml.YAMLError as e:
        mark = getattr(e, "problem_mark", None)
        if mark is not None:
            raise InputParseError(str(e), mark.line + 1, mark.column + 1) from e
        raise InputParseError(str(e)) from e


def detect_format(text: str) -> str:
    """Text starting with '{' or '[' is JSON, anything else is YAML."""
    trimmed = text.strip()
    return "json" if trimmed.startswith(("{", "[")) else "yaml"


def parse_input(text: str, fmt: str = "auto") -> Any:
    """
    Parse JSON or YAML text.

    Args:
        text: The raw input
        fmt: "json", "yaml" or "auto" (detect from the first character)

    Returns:
        The parsed value

    Raises:
        InputParseError: if neither the chosen format nor the alternate parses
    """
    trimmed = text.strip()
    if fmt == "auto":
        fmt = detect_format(trimmed)

    primary, alternate = (parse_json, parse_yaml) if fmt == "json" else (parse_yaml, parse_json)

    try:
        return primary(trimmed)
    except InputParseError as first_error:
        try:
            return alternate(trimmed)
        except InputParseError:
            raise InputParseError(
                f"Failed to parse as both YAML and JSON: {first_error.message}",
                first_error.line,
                first_error.column,
            ) from first_error
