"""JSONPath utilities for jsonkit."""

from __future__ import annotations

from typing import Any

from jsonpath_ng import parse as jsonpath_parse
from jsonpath_ng.exceptions import JsonPathParserError
from jsonpath_ng.lexer import JsonPathLexerError
from jsonpath_ng.jsonpath import Fields, Index


class JSONPathMatcher:
    """Compiles, caches and applies JSONPath expressions."""

    # Cache for compiled JSONPath expressions
    _cache: dict = {}

    @classmethod
    def compile(cls, path: str):
        """Compile and cache a JSONPath expression."""
        if path not in cls._cache:
            try:
                cls._cache[path] = jsonpath_parse(path)
            except (JsonPathParserError, JsonPathLexerError) as e:
                raise ValueError(f"Invalid JSONPath expression '{path}': {e}") from e
        return cls._cache[path]

    @classmethod
    def delete_paths(cls, data: Any, paths: list[str]) -> Any:
        """
        Delete every node matched by the given expressions.

        Args:
            data: The data to modify (modified in place)
            paths: List of JSONPath expressions

        Returns:
            The modified data
        """
        for path in paths:
            cls._delete_path(data, path)
        return data

    @classmethod
    def _delete_path(cls, data: Any, path: str):
        matches = cls.compile(path).find(data)

        # Reverse order keeps earlier list indices valid while popping
        for match in reversed(matches):
            if match.context is None:
                continue
            parent = match.context.value
            step = match.path
            if isinstance(step, Index) and isinstance(parent, list):
                if 0 <= step.index < len(parent):
                    del parent[step.index]
            elif isinstance(step, Fields) and isinstance(parent, dict):
                for name in step.fields:
                    parent.pop(name, None)
